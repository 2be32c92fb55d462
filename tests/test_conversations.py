from datetime import datetime, timedelta, timezone

from chatpulse.conversations import record_exchange, score_conversation, sentiment_texts, start_session
from chatpulse.models import ChatMessage, SentimentScore, TokenUsage
from chatpulse.sentiment import aggregate_sentiment


def test_start_session_has_no_metrics_yet():
    now = datetime(2026, 1, 8, 12, 0, tzinfo=timezone.utc)

    session = start_session("c1", "bot-1", now=now, session_id="visitor-7")

    assert session.created_at == now
    assert session.updated_at == now
    assert session.message_count == 0
    assert session.token_usage is None
    assert session.sentiment is None
    assert session.session_id == "visitor-7"


def test_system_messages_are_not_scored():
    messages = [
        ChatMessage("system", "You are a terrible, awful assistant."),
        ChatMessage("user", "I love this!"),
        ChatMessage("assistant", "Glad to help."),
    ]

    assert sentiment_texts(messages) == ["I love this!", "Glad to help."]
    assert score_conversation(messages) == aggregate_sentiment(["I love this!", "Glad to help."])


def test_record_exchange_accumulates_usage_and_replaces_sentiment():
    created = datetime(2026, 1, 8, 12, 0, tzinfo=timezone.utc)
    session = start_session("c1", "bot-1", now=created)
    first = [ChatMessage("user", "This is terrible."), ChatMessage("assistant", "Sorry about that.")]

    after_first = record_exchange(session, first, usage=TokenUsage(100, 50, 150), now=created)
    second = first + [ChatMessage("user", "Great, it works now!"), ChatMessage("assistant", "Wonderful!")]
    after_second = record_exchange(
        after_first,
        second,
        usage=TokenUsage(200, 20, 220),
        now=created + timedelta(minutes=5),
    )

    assert after_first.token_usage == TokenUsage(100, 50, 150)
    assert after_second.token_usage == TokenUsage(300, 70, 370)
    assert after_second.message_count == 4
    assert after_second.updated_at == created + timedelta(minutes=5)
    assert after_second.created_at == created
    assert after_second.sentiment == aggregate_sentiment([m.content for m in second])
    assert after_second.sentiment.compound > after_first.sentiment.compound
    # Inputs are never mutated
    assert session.token_usage is None
    assert after_first.message_count == 2


def test_record_exchange_without_usage_keeps_previous_usage():
    created = datetime(2026, 1, 8, 12, 0, tzinfo=timezone.utc)
    session = record_exchange(
        start_session("c1", "bot-1", now=created),
        [ChatMessage("user", "hello")],
        usage=TokenUsage(5, 5, 10),
        now=created,
    )

    updated = record_exchange(session, [ChatMessage("user", "hello"), ChatMessage("user", "")], now=created)

    assert updated.token_usage == TokenUsage(5, 5, 10)
    assert updated.message_count == 2


def test_record_exchange_of_empty_conversation_is_neutral():
    created = datetime(2026, 1, 8, 12, 0, tzinfo=timezone.utc)

    updated = record_exchange(start_session("c1", "bot-1", now=created), [], now=created)

    assert updated.sentiment == SentimentScore.neutral_default()
    assert updated.token_usage is None
