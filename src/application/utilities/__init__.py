"""Application utilities - shared helpers for application services."""

from .cancellation import CancellationToken

__all__ = ["CancellationToken"]
