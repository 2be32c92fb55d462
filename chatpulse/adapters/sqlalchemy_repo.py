"""SQLAlchemy repository adapter for chatpulse."""

from datetime import datetime, timezone
from typing import Optional, Sequence

from sqlalchemy import DateTime, bindparam, text
from sqlalchemy.orm import Session

from ..logging import get_logger
from ..models import ConversationSession, SentimentScore, TokenUsage

logger = get_logger("adapters.sqlalchemy")

_SESSION_COLUMNS = """
    id, bot_id, session_id, created_at, updated_at, message_count,
    prompt_tokens, completion_tokens, total_tokens,
    sentiment_positive, sentiment_negative, sentiment_neutral, sentiment_compound
"""


class SQLAlchemyConversationRepository:
    """Reads and stores conversation sessions in a relational ``conversations`` table.

    The adapter never commits; the caller owns the transaction.
    """

    def __init__(self, db: Session):
        self.db = db

    def fetch_sessions(
        self,
        bot_id: str,
        start_date: datetime,
        end_date: datetime,
    ) -> Sequence[ConversationSession]:
        statement = (
            text(
                f"""
                SELECT {_SESSION_COLUMNS}
                FROM conversations
                WHERE bot_id = :bot_id
                  AND created_at >= :start_date
                  AND created_at <= :end_date
                ORDER BY created_at, id
                """
            )
            .bindparams(
                bindparam("start_date", type_=DateTime(timezone=True)),
                bindparam("end_date", type_=DateTime(timezone=True)),
            )
            .columns(created_at=DateTime(timezone=True), updated_at=DateTime(timezone=True))
        )
        rows = self.db.execute(
            statement,
            {"bot_id": bot_id, "start_date": _to_utc(start_date), "end_date": _to_utc(end_date)},
        ).fetchall()

        return [
            ConversationSession(
                id=str(row.id),
                bot_id=str(row.bot_id),
                session_id=row.session_id,
                created_at=_to_utc(row.created_at),
                updated_at=_to_utc(row.updated_at or row.created_at),
                message_count=int(row.message_count or 0),
                token_usage=_parse_token_usage(row),
                sentiment=_parse_sentiment(row),
            )
            for row in rows
        ]

    def save_session(self, session: ConversationSession) -> None:
        statement = text(
            """
            INSERT INTO conversations (
                id, bot_id, session_id, created_at, updated_at, message_count,
                prompt_tokens, completion_tokens, total_tokens,
                sentiment_positive, sentiment_negative, sentiment_neutral, sentiment_compound
            ) VALUES (
                :id, :bot_id, :session_id, :created_at, :updated_at, :message_count,
                :prompt_tokens, :completion_tokens, :total_tokens,
                :sentiment_positive, :sentiment_negative, :sentiment_neutral, :sentiment_compound
            )
            ON CONFLICT (id) DO UPDATE SET
                bot_id = excluded.bot_id,
                session_id = excluded.session_id,
                updated_at = excluded.updated_at,
                message_count = excluded.message_count,
                prompt_tokens = excluded.prompt_tokens,
                completion_tokens = excluded.completion_tokens,
                total_tokens = excluded.total_tokens,
                sentiment_positive = excluded.sentiment_positive,
                sentiment_negative = excluded.sentiment_negative,
                sentiment_neutral = excluded.sentiment_neutral,
                sentiment_compound = excluded.sentiment_compound
            """
        ).bindparams(
            bindparam("created_at", type_=DateTime(timezone=True)),
            bindparam("updated_at", type_=DateTime(timezone=True)),
        )

        usage = session.token_usage
        sentiment = session.sentiment
        self.db.execute(
            statement,
            {
                "id": session.id,
                "bot_id": session.bot_id,
                "session_id": session.session_id,
                "created_at": _to_utc(session.created_at),
                "updated_at": _to_utc(session.updated_at),
                "message_count": session.message_count,
                "prompt_tokens": usage.prompt_tokens if usage else None,
                "completion_tokens": usage.completion_tokens if usage else None,
                "total_tokens": usage.total_tokens if usage else None,
                "sentiment_positive": sentiment.positive if sentiment else None,
                "sentiment_negative": sentiment.negative if sentiment else None,
                "sentiment_neutral": sentiment.neutral if sentiment else None,
                "sentiment_compound": sentiment.compound if sentiment else None,
            },
        )


def _parse_token_usage(row) -> Optional[TokenUsage]:
    if row.prompt_tokens is None and row.completion_tokens is None and row.total_tokens is None:
        return None
    prompt = int(row.prompt_tokens or 0)
    completion = int(row.completion_tokens or 0)
    if row.total_tokens is None:
        return TokenUsage.of(prompt, completion)
    return TokenUsage(prompt, completion, int(row.total_tokens))


def _parse_sentiment(row) -> Optional[SentimentScore]:
    parts = (row.sentiment_positive, row.sentiment_negative, row.sentiment_neutral)
    if all(value is None for value in parts):
        return None
    if any(value is None for value in parts):
        logger.debug("Conversation %s has a partial sentiment record; treating it as absent", row.id)
        return None
    return SentimentScore(
        positive=float(row.sentiment_positive),
        negative=float(row.sentiment_negative),
        neutral=float(row.sentiment_neutral),
        compound=float(row.sentiment_compound or 0.0),
    )


def _to_utc(value: datetime) -> datetime:
    """Timestamps are stored as UTC; backends without offsets hand them back naive."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)
