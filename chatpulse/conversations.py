"""Bookkeeping that keeps a session's usage and sentiment in step with its messages."""

from dataclasses import replace
from datetime import datetime, timezone
from typing import Iterable, List, Optional, Sequence

from .models import ChatMessage, ConversationSession, SentimentScore, TokenUsage
from .sentiment import SentimentIntensityAnalyzer, aggregate_sentiment

SCORED_ROLES = ("user", "assistant")


def start_session(
    conversation_id: str,
    bot_id: str,
    now: Optional[datetime] = None,
    session_id: Optional[str] = None,
) -> ConversationSession:
    """Create an empty session for a new conversation."""
    now = now or datetime.now(timezone.utc)
    return ConversationSession(
        id=conversation_id,
        bot_id=bot_id,
        created_at=now,
        updated_at=now,
        session_id=session_id,
    )


def sentiment_texts(messages: Iterable[ChatMessage]) -> List[str]:
    """Contents of the user and assistant messages; system prompts are not scored."""
    return [message.content for message in messages if message.role in SCORED_ROLES]


def score_conversation(
    messages: Iterable[ChatMessage],
    analyzer: Optional[SentimentIntensityAnalyzer] = None,
) -> SentimentScore:
    return aggregate_sentiment(sentiment_texts(messages), analyzer=analyzer)


def record_exchange(
    session: ConversationSession,
    messages: Sequence[ChatMessage],
    usage: Optional[TokenUsage] = None,
    now: Optional[datetime] = None,
    analyzer: Optional[SentimentIntensityAnalyzer] = None,
) -> ConversationSession:
    """Return ``session`` updated after a new exchange.

    ``messages`` is the full conversation including the new exchange. Token
    usage of the exchange is added to the running total and the sentiment is
    recomputed over all messages, replacing the previous score.
    """
    token_usage = session.token_usage
    if usage is not None:
        token_usage = (token_usage or TokenUsage.zero()) + usage

    return replace(
        session,
        message_count=len(messages),
        token_usage=token_usage,
        sentiment=score_conversation(messages, analyzer=analyzer),
        updated_at=now or datetime.now(timezone.utc),
    )
