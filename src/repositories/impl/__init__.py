"""Repositories implementation package."""

from .recall_repository import RecallRepository, recall_store_scope

__all__ = ["RecallRepository", "recall_store_scope"]
