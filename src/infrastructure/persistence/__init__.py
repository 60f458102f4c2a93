"""Persistence adapters for listening history."""

from .history import InMemoryHistoryStore

__all__ = ["InMemoryHistoryStore"]
