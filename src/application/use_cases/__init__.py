"""Application use cases - orchestrate link resolution and playlist conversion."""

from .convert_playlist import ConvertPlaylistUseCase, ProgressCallback
from .resolve_link import ResolveLinkUseCase

__all__ = [
    "ConvertPlaylistUseCase",
    "ProgressCallback",
    "ResolveLinkUseCase",
]
