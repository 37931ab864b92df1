"""
Context Window Builder - bounds the conversation history sent to the model
"""
import logging
from typing import List, Sequence

from config.settings import Config
from src.calendar.models import ConversationTurn, Role

logger = logging.getLogger(__name__)


class ContextWindowBuilder:
    """
    Keeps the most recent turns verbatim and replaces older ones with a
    single system turn holding a model-written summary.
    """

    def __init__(self, llm_client, recent_turn_limit: int = None):
        self.llm_client = llm_client
        if recent_turn_limit is None:
            recent_turn_limit = Config.RECENT_TURN_LIMIT
        if recent_turn_limit < 0:
            raise ValueError(f"recent_turn_limit must be >= 0, got {recent_turn_limit}")
        self.recent_turn_limit = recent_turn_limit

    def build(self, history: Sequence[ConversationTurn], new_message: str) -> List[ConversationTurn]:
        new_turn = ConversationTurn(role=Role.USER.value, content=new_message)

        if len(history) <= self.recent_turn_limit:
            return [*history, new_turn]

        split_at = len(history) - self.recent_turn_limit
        older, recent = history[:split_at], history[split_at:]
        summary = self._summarize(older)
        logger.info(f"🗜️  Summarised {len(older)} older turn(s), keeping {len(recent)} recent")

        summary_turn = ConversationTurn(
            role=Role.SYSTEM.value,
            content=f"Previous conversation summary: {summary}",
        )
        return [summary_turn, *recent, new_turn]

    def _summarize(self, turns: Sequence[ConversationTurn]) -> str:
        try:
            summary = self.llm_client.summarize(turns)
        except Exception as e:
            logger.warning(f"Summary failed, using fallback: {e}")
            return Config.FALLBACK_SUMMARY
        return summary or Config.FALLBACK_SUMMARY
