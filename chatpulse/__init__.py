"""chatpulse - sentiment and usage analytics for chatbot conversations."""

from .analytics import compute_bot_analytics, empty_bot_analytics, sum_token_usage
from .conversations import record_exchange, score_conversation, start_session
from .lexicon import Lexicon, default_lexicon, load_lexicon
from .models import (
    AnalyticsSnapshot,
    ChatMessage,
    ConversationSession,
    DailyBucket,
    SentimentScore,
    TokenBucket,
    TokenUsage,
)
from .sentiment import (
    ScoringConstants,
    SentimentIntensityAnalyzer,
    aggregate_sentiment,
    mean_sentiment,
    polarity_scores,
)
from .service import AnalyticsService

__all__ = [
    "AnalyticsService",
    "AnalyticsSnapshot",
    "ChatMessage",
    "ConversationSession",
    "DailyBucket",
    "Lexicon",
    "ScoringConstants",
    "SentimentIntensityAnalyzer",
    "SentimentScore",
    "TokenBucket",
    "TokenUsage",
    "aggregate_sentiment",
    "compute_bot_analytics",
    "default_lexicon",
    "empty_bot_analytics",
    "load_lexicon",
    "mean_sentiment",
    "polarity_scores",
    "record_exchange",
    "score_conversation",
    "start_session",
    "sum_token_usage",
]

__version__ = "0.1.0"
