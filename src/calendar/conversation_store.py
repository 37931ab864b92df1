"""
SQLite-backed conversation log
"""
import logging
import uuid
from typing import List, Optional, Sequence, Tuple

from config.settings import Config
from src.calendar import database
from src.calendar.models import ConversationTurn

logger = logging.getLogger(__name__)


class ConversationStore:
    """Append-only ordered log of turns per conversation"""

    def __init__(self, db_path: str = None):
        self.db_path = db_path or Config.get_database_path()
        database.initialize(self.db_path)

    def get_owner(self, conversation_id: str) -> Optional[str]:
        with database.connect(self.db_path) as conn:
            row = conn.execute(
                "SELECT owner FROM conversations WHERE id = ?", (conversation_id,)
            ).fetchone()
        return row["owner"] if row else None

    def resolve(self, conversation_id: Optional[str], owner: str) -> Tuple[str, List[ConversationTurn]]:
        """
        Return the conversation id to use for a request and its history.

        A missing id, an unknown id or an id owned by someone else yields a
        fresh id with empty history; the conversation row itself is written
        with the first turns.
        """
        if conversation_id and self.get_owner(conversation_id) == owner:
            return conversation_id, self.get_turns(conversation_id)
        if conversation_id:
            logger.info(f"Unknown conversation {conversation_id} for {owner}, starting a new one")
        new_id = str(uuid.uuid4())
        logger.info(f"💬 New conversation {new_id} for {owner}")
        return new_id, []

    def get_turns(self, conversation_id: str) -> List[ConversationTurn]:
        """Get all turns of a conversation in commit order"""
        with database.connect(self.db_path) as conn:
            rows = conn.execute(
                "SELECT role, content FROM messages WHERE conversation_id = ? ORDER BY seq ASC",
                (conversation_id,),
            ).fetchall()
        return [ConversationTurn(role=row["role"], content=row["content"]) for row in rows]

    def append_turns(self, conversation_id: str, owner: str, turns: Sequence[ConversationTurn]) -> None:
        """Append turns in a single transaction, creating the conversation on first write"""
        now = database.utc_now()
        with database.connect(self.db_path) as conn:
            conn.execute(
                "INSERT OR IGNORE INTO conversations (id, owner, created_at) VALUES (?, ?, ?)",
                (conversation_id, owner, now),
            )
            conn.executemany(
                "INSERT INTO messages (conversation_id, role, content, created_at) VALUES (?, ?, ?, ?)",
                [(conversation_id, turn.role, turn.content, now) for turn in turns],
            )
        logger.debug(f"Appended {len(turns)} turn(s) to {conversation_id}")
