"""Port definitions for reading and storing conversation sessions from any source."""

from datetime import datetime
from typing import Protocol, Sequence

from .models import ConversationSession


class ConversationRepository(Protocol):
    """Repository interface that adapters can implement for any backend."""

    def fetch_sessions(
        self,
        bot_id: str,
        start_date: datetime,
        end_date: datetime,
    ) -> Sequence[ConversationSession]:
        """Return a bot's sessions created in a period, oldest first."""

    def save_session(self, session: ConversationSession) -> None:
        """Insert or replace a session's counters, usage and sentiment."""
