"""Two-minute chatpulse demo: FastAPI backend serving a bot analytics snapshot."""

from datetime import datetime, timedelta, timezone
from random import Random

from fastapi import FastAPI

from chatpulse import config
from chatpulse.analytics import compute_bot_analytics
from chatpulse.conversations import record_exchange, start_session
from chatpulse.logging import setup_logging
from chatpulse.models import ChatMessage, TokenUsage
from chatpulse.sentiment import polarity_scores

RNG = Random(42)
logger = setup_logging("demo")

app = FastAPI(title="chatpulse Two-Minute Demo", version="0.1.0")

USER_LINES = [
    "Hi, can you help me reset my password?",
    "This is terrible, the app crashed again!",
    "Thanks, that was really helpful :)",
    "I'm not happy with the delay.",
    "Great, it works now!!",
    "Why is my invoice wrong??",
]
ASSISTANT_LINES = [
    "Sure, I can help with that.",
    "Sorry about the trouble. Let's fix it together.",
    "You're welcome, glad it worked.",
    "I understand the frustration, but the fix is on its way.",
]


def _build_demo_sessions() -> list:
    now = datetime.now(timezone.utc)

    sessions = []
    for idx in range(60):
        created_at = now - timedelta(hours=idx * 7)
        session = start_session(f"conv-{idx}", bot_id="demo-bot", now=created_at)
        messages = []
        for turn in range(RNG.randint(1, 4)):
            messages.append(ChatMessage("user", RNG.choice(USER_LINES), created_at))
            messages.append(ChatMessage("assistant", RNG.choice(ASSISTANT_LINES), created_at))
            prompt_tokens = max(20, int(RNG.gauss(400, 90)))
            completion_tokens = max(10, int(RNG.gauss(150, 40)))
            session = record_exchange(
                session,
                messages,
                usage=TokenUsage.of(prompt_tokens, completion_tokens),
                now=created_at + timedelta(minutes=turn),
            )
        sessions.append(session)

    sessions.sort(key=lambda session: session.created_at)
    logger.info("Built %d demo sessions", len(sessions))
    return sessions


DEMO_SESSIONS = _build_demo_sessions()


@app.get("/health")
def health() -> dict:
    return {"status": "ok", "demo": "chatpulse-two-minute"}


@app.get("/api/analytics")
def analytics() -> dict:
    snapshot = compute_bot_analytics(DEMO_SESSIONS)
    return {"data": snapshot.to_dict(precision=config.DISPLAY_PRECISION), "message": "OK"}


@app.get("/api/sentiment")
def sentiment(text: str = "") -> dict:
    return {"data": polarity_scores(text).to_dict(precision=config.DISPLAY_PRECISION), "message": "OK"}
