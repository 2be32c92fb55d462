"""Adapters for integrating chatpulse with storage and frameworks."""

from .sqlalchemy_repo import SQLAlchemyConversationRepository

__all__ = ["SQLAlchemyConversationRepository"]
