"""Domain interfaces for the engine's external collaborators."""

from .interfaces import (
    CatalogServiceProtocol,
    CrossPlatformResolverProtocol,
    ForeignMetadataProtocol,
    HistoryStoreProtocol,
    PlayerProtocol,
    PlayRecorderProtocol,
    TranslationServiceProtocol,
)

__all__ = [
    "CatalogServiceProtocol",
    "CrossPlatformResolverProtocol",
    "ForeignMetadataProtocol",
    "HistoryStoreProtocol",
    "PlayerProtocol",
    "PlayRecorderProtocol",
    "TranslationServiceProtocol",
]
