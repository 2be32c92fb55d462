"""Pure analytics functions that work on conversation sessions."""

from datetime import date, datetime, timezone, tzinfo
from typing import Dict, Iterable, Optional, Union
from zoneinfo import ZoneInfo

from . import config
from .models import (
    AnalyticsSnapshot,
    ConversationSession,
    DailyBucket,
    SentimentScore,
    TokenBucket,
    TokenUsage,
)
from .sentiment import mean_sentiment

TimezoneLike = Union[str, tzinfo, None]


def compute_bot_analytics(
    sessions: Iterable[ConversationSession],
    tz: TimezoneLike = None,
    start_date: Optional[datetime] = None,
    end_date: Optional[datetime] = None,
) -> AnalyticsSnapshot:
    """Roll a bot's sessions up into totals, daily series and sentiment.

    Sessions are bucketed by the calendar day of ``created_at`` in ``tz``
    (``CHATPULSE_TIMEZONE`` by default); days without sessions are left out.
    ``start_date``/``end_date`` only label the snapshot period.
    """
    sessions_list = list(sessions)
    if not sessions_list:
        return empty_bot_analytics(start_date=start_date, end_date=end_date)

    zone = resolve_timezone(tz)

    by_day: Dict[date, Dict] = {}
    for session in sessions_list:
        day = bucket_date(session.created_at, zone)
        if day not in by_day:
            by_day[day] = {"conversations": 0, "token_usage": TokenUsage.zero()}
        by_day[day]["conversations"] += 1
        if session.token_usage:
            by_day[day]["token_usage"] = by_day[day]["token_usage"] + session.token_usage

    daily_usage = [
        DailyBucket(
            date=day,
            conversation_count=by_day[day]["conversations"],
            token_usage=by_day[day]["token_usage"],
        )
        for day in sorted(by_day)
    ]
    daily_token_usage = [
        TokenBucket(
            date=bucket.date,
            total_tokens=bucket.token_usage.total_tokens,
            prompt_tokens=bucket.token_usage.prompt_tokens,
            completion_tokens=bucket.token_usage.completion_tokens,
        )
        for bucket in daily_usage
    ]

    return AnalyticsSnapshot(
        total_conversations=len(sessions_list),
        total_messages=sum(session.message_count for session in sessions_list),
        total_token_usage=sum_token_usage(session.token_usage for session in sessions_list),
        daily_usage=daily_usage,
        daily_token_usage=daily_token_usage,
        sentiment_distribution=mean_sentiment(session.sentiment for session in sessions_list),
        sessions=sessions_list,
        sentiment_counts=count_dominant_sentiments(session.sentiment for session in sessions_list),
        start_date=start_date,
        end_date=end_date,
    )


def empty_bot_analytics(
    start_date: Optional[datetime] = None,
    end_date: Optional[datetime] = None,
) -> AnalyticsSnapshot:
    """Return the snapshot of a bot without conversations."""
    return AnalyticsSnapshot(
        total_conversations=0,
        total_messages=0,
        total_token_usage=TokenUsage.zero(),
        daily_usage=[],
        daily_token_usage=[],
        sentiment_distribution=SentimentScore.neutral_default(),
        sessions=[],
        sentiment_counts={"positive": 0, "negative": 0, "neutral": 0},
        start_date=start_date,
        end_date=end_date,
    )


def sum_token_usage(usages: Iterable[Optional[TokenUsage]]) -> TokenUsage:
    """Field-wise sum of token usage records; absent records count as zero."""
    total = TokenUsage.zero()
    for usage in usages:
        if usage is not None:
            total = total + usage
    return total


def count_dominant_sentiments(scores: Iterable[Optional[SentimentScore]]) -> Dict[str, int]:
    """Histogram of dominant labels; a missing score counts as neutral."""
    counts = {"positive": 0, "negative": 0, "neutral": 0}
    for score in scores:
        counts[score.dominant if score is not None else "neutral"] += 1
    return counts


def bucket_date(timestamp: datetime, zone: tzinfo) -> date:
    """Calendar day of ``timestamp`` in ``zone``; naive timestamps are UTC."""
    if timestamp.tzinfo is None:
        timestamp = timestamp.replace(tzinfo=timezone.utc)
    return timestamp.astimezone(zone).date()


def resolve_timezone(tz: TimezoneLike = None) -> tzinfo:
    if tz is None:
        tz = config.ANALYTICS_TIMEZONE
    if isinstance(tz, tzinfo):
        return tz
    if tz.upper() in ("UTC", "Z"):
        return timezone.utc
    return ZoneInfo(tz)
