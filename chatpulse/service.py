"""Application service orchestrating repositories and pure analytics."""

from datetime import datetime, timedelta, timezone
from typing import Dict, Optional, Sequence

from . import config
from .analytics import TimezoneLike, compute_bot_analytics
from .conversations import record_exchange
from .exceptions import InvalidPeriodError
from .logging import get_logger
from .models import AnalyticsSnapshot, ChatMessage, ConversationSession, TokenUsage
from .ports import ConversationRepository

logger = get_logger("service")


class AnalyticsService:
    """Facade service that exposes bot analytics independent of web frameworks."""

    def __init__(self, repo: ConversationRepository, tz: TimezoneLike = None):
        self.repo = repo
        self.tz = tz

    def get_snapshot(
        self,
        bot_id: str,
        start_date: Optional[datetime] = None,
        end_date: Optional[datetime] = None,
    ) -> AnalyticsSnapshot:
        start, end = _normalize_period(start_date, end_date)
        sessions = self.repo.fetch_sessions(bot_id, start, end)
        logger.debug("Rolling up %d sessions for bot %s (%s - %s)", len(sessions), bot_id, start, end)
        return compute_bot_analytics(sessions, tz=self.tz, start_date=start, end_date=end)

    def get_bot_analytics(
        self,
        bot_id: str,
        start_date: Optional[datetime] = None,
        end_date: Optional[datetime] = None,
        precision: Optional[int] = None,
    ) -> Dict:
        return self.get_snapshot(bot_id, start_date, end_date).to_dict(precision=precision)

    def record_exchange(
        self,
        session: ConversationSession,
        messages: Sequence[ChatMessage],
        usage: Optional[TokenUsage] = None,
        now: Optional[datetime] = None,
    ) -> ConversationSession:
        updated = record_exchange(session, messages, usage=usage, now=now)
        self.repo.save_session(updated)
        logger.debug(
            "Recorded exchange for session %s: %d messages, %s",
            updated.id,
            updated.message_count,
            updated.token_usage,
        )
        return updated


def _normalize_period(
    start_date: Optional[datetime],
    end_date: Optional[datetime],
) -> tuple[datetime, datetime]:
    if end_date is None:
        end_date = datetime.now(timezone.utc)
    end_date = _as_utc(end_date)
    if start_date is None:
        start_date = end_date - timedelta(days=config.DEFAULT_LOOKBACK_DAYS)
    start_date = _as_utc(start_date)
    if start_date > end_date:
        raise InvalidPeriodError(
            f"start_date {start_date.isoformat()} is after end_date {end_date.isoformat()}"
        )
    return start_date, end_date


def _as_utc(value: datetime) -> datetime:
    """Naive bounds are read as UTC, like naive session timestamps."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value
