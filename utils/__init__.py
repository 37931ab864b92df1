"""
Utility modules for the LockIn Scheduling Assistant
"""

from .logger import SmartCalendarLogger
from .validators import RequestValidator, DataSanitizer

__all__ = ['SmartCalendarLogger', 'RequestValidator', 'DataSanitizer']
