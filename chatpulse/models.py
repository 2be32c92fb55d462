"""Core domain models used by the analytics engine."""

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Dict, Optional, Sequence

from .exceptions import InvalidRecordError


@dataclass(frozen=True)
class TokenUsage:
    """Prompt/completion token counts of one or more message exchanges."""

    prompt_tokens: int = 0
    completion_tokens: int = 0
    total_tokens: int = 0

    @classmethod
    def of(cls, prompt_tokens: int, completion_tokens: int) -> "TokenUsage":
        return cls(prompt_tokens, completion_tokens, prompt_tokens + completion_tokens)

    @classmethod
    def zero(cls) -> "TokenUsage":
        return cls(0, 0, 0)

    def __add__(self, other: "TokenUsage") -> "TokenUsage":
        if not isinstance(other, TokenUsage):
            return NotImplemented
        return TokenUsage(
            prompt_tokens=self.prompt_tokens + other.prompt_tokens,
            completion_tokens=self.completion_tokens + other.completion_tokens,
            total_tokens=self.total_tokens + other.total_tokens,
        )

    def to_dict(self) -> Dict:
        return {
            "promptTokens": self.prompt_tokens,
            "completionTokens": self.completion_tokens,
            "totalTokens": self.total_tokens,
        }

    @classmethod
    def from_dict(cls, data: Dict) -> "TokenUsage":
        """Build usage from a camelCase record; missing counts are zero."""
        prompt = _as_count(data.get("promptTokens"), "promptTokens")
        completion = _as_count(data.get("completionTokens"), "completionTokens")
        total = data.get("totalTokens")
        if total is None:
            return cls.of(prompt, completion)
        return cls(prompt, completion, _as_count(total, "totalTokens"))


@dataclass(frozen=True)
class SentimentScore:
    """Polarity scores of a text or conversation.

    ``positive``, ``negative`` and ``neutral`` are proportions summing to ~1;
    ``compound`` is the normalized overall polarity in [-1, 1].
    """

    positive: float
    negative: float
    neutral: float
    compound: float = 0.0

    @classmethod
    def neutral_default(cls) -> "SentimentScore":
        return cls(positive=0.0, negative=0.0, neutral=1.0, compound=0.0)

    @property
    def dominant(self) -> str:
        if self.positive >= self.negative and self.positive >= self.neutral:
            return "positive"
        if self.negative >= self.positive and self.negative >= self.neutral:
            return "negative"
        return "neutral"

    def to_dict(self, precision: Optional[int] = None) -> Dict:
        return {
            "positive": _round(self.positive, precision),
            "negative": _round(self.negative, precision),
            "neutral": _round(self.neutral, precision),
            "compound": _round(self.compound, precision),
        }

    @classmethod
    def from_dict(cls, data: Dict) -> "SentimentScore":
        try:
            return cls(
                positive=float(data["positive"]),
                negative=float(data["negative"]),
                neutral=float(data["neutral"]),
                compound=float(data.get("compound") or 0.0),
            )
        except (KeyError, TypeError, ValueError) as exc:
            raise InvalidRecordError(f"invalid sentiment record: {data!r}") from exc


@dataclass(frozen=True)
class ChatMessage:
    """A single message of a conversation."""

    role: str  # user, assistant, system
    content: str
    timestamp: Optional[datetime] = None


@dataclass(frozen=True)
class ConversationSession:
    """A conversation with a bot and the metrics computed for it."""

    id: str
    bot_id: str
    created_at: datetime
    updated_at: datetime
    message_count: int = 0
    token_usage: Optional[TokenUsage] = None
    sentiment: Optional[SentimentScore] = None
    session_id: Optional[str] = None  # client-provided visitor id

    def to_dict(self, precision: Optional[int] = None) -> Dict:
        return {
            "id": self.id,
            "botId": self.bot_id,
            "sessionId": self.session_id,
            "createdAt": self.created_at.isoformat(),
            "updatedAt": self.updated_at.isoformat(),
            "messageCount": self.message_count,
            "tokenUsage": self.token_usage.to_dict() if self.token_usage else None,
            "sentiment": self.sentiment.to_dict(precision) if self.sentiment else None,
        }

    @classmethod
    def from_dict(cls, data: Dict) -> "ConversationSession":
        usage = data.get("tokenUsage")
        sentiment = data.get("sentiment")
        return cls(
            id=str(data["id"]),
            bot_id=str(data.get("botId", "")),
            created_at=_as_datetime(data["createdAt"]),
            updated_at=_as_datetime(data.get("updatedAt") or data["createdAt"]),
            message_count=_as_count(data.get("messageCount"), "messageCount"),
            token_usage=TokenUsage.from_dict(usage) if usage else None,
            sentiment=SentimentScore.from_dict(sentiment) if sentiment else None,
            session_id=data.get("sessionId"),
        )


@dataclass(frozen=True)
class DailyBucket:
    """Conversations and token usage of one calendar day."""

    date: date
    conversation_count: int
    token_usage: TokenUsage

    def to_dict(self) -> Dict:
        return {
            "date": self.date.isoformat(),
            "conversations": self.conversation_count,
            "tokenUsage": self.token_usage.to_dict(),
        }


@dataclass(frozen=True)
class TokenBucket:
    """Token consumption of one calendar day."""

    date: date
    total_tokens: int
    prompt_tokens: int
    completion_tokens: int

    def to_dict(self) -> Dict:
        return {
            "date": self.date.isoformat(),
            "totalTokens": self.total_tokens,
            "promptTokens": self.prompt_tokens,
            "completionTokens": self.completion_tokens,
        }


@dataclass(frozen=True)
class AnalyticsSnapshot:
    """Dashboard payload derived from a bot's conversation sessions."""

    total_conversations: int
    total_messages: int
    total_token_usage: TokenUsage
    daily_usage: Sequence[DailyBucket]
    daily_token_usage: Sequence[TokenBucket]
    sentiment_distribution: SentimentScore
    sessions: Sequence[ConversationSession]
    sentiment_counts: Dict[str, int] = field(
        default_factory=lambda: {"positive": 0, "negative": 0, "neutral": 0}
    )
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None

    def to_dict(self, precision: Optional[int] = None) -> Dict:
        """Render as a JSON-ready dict; floats are rounded only when ``precision`` is given."""
        return {
            "period": {
                "start": self.start_date.isoformat() if self.start_date else None,
                "end": self.end_date.isoformat() if self.end_date else None,
            },
            "totalConversations": self.total_conversations,
            "totalMessages": self.total_messages,
            "totalTokenUsage": self.total_token_usage.to_dict(),
            "dailyUsage": [bucket.to_dict() for bucket in self.daily_usage],
            "dailyTokenUsage": [bucket.to_dict() for bucket in self.daily_token_usage],
            "sentimentDistribution": self.sentiment_distribution.to_dict(precision),
            "sentimentCounts": dict(self.sentiment_counts),
            "sessions": [session.to_dict(precision) for session in self.sessions],
        }


def _round(value: float, precision: Optional[int]) -> float:
    return round(value, precision) if precision is not None else value


def _as_count(value, name: str) -> int:
    if value is None:
        return 0
    try:
        count = int(value)
    except (TypeError, ValueError) as exc:
        raise InvalidRecordError(f"{name} must be an integer, got {value!r}") from exc
    if count < 0:
        raise InvalidRecordError(f"{name} must not be negative, got {count}")
    return count


def _as_datetime(value) -> datetime:
    if isinstance(value, datetime):
        return value
    try:
        return datetime.fromisoformat(str(value).replace("Z", "+00:00"))
    except ValueError as exc:
        raise InvalidRecordError(f"invalid timestamp: {value!r}") from exc
