"""
LockIn Scheduling Assistant - A conversational calendar scheduling service

This package provides a chat-driven scheduling assistant that:
- Keeps conversation context bounded with recency retention and summaries
- Lets a language model read and create events through tool calls
- Rejects events that overlap existing ones
- Exposes chat and event endpoints over HTTP
"""

__version__ = "1.0.0"
__author__ = "LockIn Team"
