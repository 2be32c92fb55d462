from datetime import datetime, timedelta, timezone

import pytest

from chatpulse import config
from chatpulse.exceptions import InvalidPeriodError
from chatpulse.models import ChatMessage, ConversationSession, SentimentScore, TokenUsage
from chatpulse.service import AnalyticsService


class FakeRepo:
    def __init__(self):
        self.last_range = None
        self.saved = []

    def fetch_sessions(self, bot_id, start_date, end_date):
        self.last_range = (bot_id, start_date, end_date)
        return [
            ConversationSession(
                id="c1",
                bot_id=bot_id,
                created_at=end_date,
                updated_at=end_date,
                message_count=3,
                token_usage=TokenUsage(10, 10, 20),
                sentiment=SentimentScore(0.5, 0.0, 0.5, 0.4),
            )
        ]

    def save_session(self, session):
        self.saved.append(session)


def test_service_uses_explicit_period():
    repo = FakeRepo()
    service = AnalyticsService(repo)
    start = datetime(2026, 1, 1, tzinfo=timezone.utc)
    end = datetime(2026, 1, 2, tzinfo=timezone.utc)

    result = service.get_bot_analytics("bot-1", start, end)

    assert repo.last_range == ("bot-1", start, end)
    assert result["totalConversations"] == 1
    assert result["totalTokenUsage"]["totalTokens"] == 20
    assert result["period"] == {"start": start.isoformat(), "end": end.isoformat()}


def test_service_defaults_to_lookback_window():
    repo = FakeRepo()
    end = datetime(2026, 3, 1, tzinfo=timezone.utc)

    snapshot = AnalyticsService(repo).get_snapshot("bot-1", end_date=end)

    _, start, used_end = repo.last_range
    assert used_end == end
    assert end - start == timedelta(days=config.DEFAULT_LOOKBACK_DAYS)
    assert snapshot.start_date == start


def test_service_rejects_inverted_period():
    service = AnalyticsService(FakeRepo())

    with pytest.raises(InvalidPeriodError):
        service.get_snapshot(
            "bot-1",
            start_date=datetime(2026, 2, 1, tzinfo=timezone.utc),
            end_date=datetime(2026, 1, 1, tzinfo=timezone.utc),
        )


def test_service_rounds_only_when_asked():
    service = AnalyticsService(FakeRepo())
    end = datetime(2026, 1, 2, tzinfo=timezone.utc)

    result = service.get_bot_analytics("bot-1", end_date=end, precision=1)

    assert result["sentimentDistribution"] == {"positive": 0.5, "negative": 0.0, "neutral": 0.5, "compound": 0.4}


def test_service_record_exchange_persists_updated_session():
    repo = FakeRepo()
    service = AnalyticsService(repo)
    now = datetime(2026, 1, 2, tzinfo=timezone.utc)
    session = ConversationSession(id="c9", bot_id="bot-1", created_at=now, updated_at=now)

    updated = service.record_exchange(
        session,
        [ChatMessage("user", "thanks, that was helpful"), ChatMessage("assistant", "Happy to help!")],
        usage=TokenUsage.of(30, 12),
        now=now,
    )

    assert repo.saved == [updated]
    assert updated.token_usage == TokenUsage(30, 12, 42)
    assert updated.sentiment.positive > 0


def test_service_reads_naive_bounds_as_utc():
    repo = FakeRepo()

    snapshot = AnalyticsService(repo).get_snapshot("bot-1", start_date=datetime(2026, 1, 1))

    _, start, end = repo.last_range
    assert start == datetime(2026, 1, 1, tzinfo=timezone.utc)
    assert end.tzinfo is not None
    assert snapshot.start_date == start


def test_service_rejects_inverted_naive_period():
    service = AnalyticsService(FakeRepo())

    with pytest.raises(InvalidPeriodError):
        service.get_snapshot(
            "bot-1",
            start_date=datetime(2026, 2, 1),
            end_date=datetime(2026, 1, 1, tzinfo=timezone.utc),
        )
