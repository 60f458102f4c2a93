"""Playlist conversion entities.

A ``SourceTrack`` describes a track from an external playlist; a
``ConversionResult`` pairs it with the catalog track it resolved to, or with
the reason it could not be resolved.
"""

from typing import Self

import attrs
from attrs import define, field, validators

from src.domain.entities.catalog import Track
from src.domain.search.keywords import (
    clean_title,
    is_cover,
    is_remix,
    primary_artist,
)

NOT_FOUND = "Not found"


def parse_duration(value: str | int | None) -> int | None:
    """Parse ``m:ss``/``h:mm:ss`` strings or plain seconds into seconds."""
    if value is None:
        return None
    if isinstance(value, int):
        return value
    parts = value.strip().split(":")
    try:
        numbers = [int(part) for part in parts]
    except ValueError:
        return None
    match numbers:
        case [seconds]:
            return seconds
        case [minutes, seconds]:
            return minutes * 60 + seconds
        case [hours, minutes, seconds]:
            return hours * 3600 + minutes * 60 + seconds
        case _:
            return None


@define(frozen=True, slots=True)
class SourceTrack:
    """A track listed in a playlist from another platform."""

    title: str = field(validator=validators.instance_of(str))
    artist: str | None = None
    album: str | None = None
    duration: int | None = None  # seconds
    isrc: str | None = None
    is_remix: bool = False
    is_cover: bool = False
    source_id: str | None = None

    @classmethod
    def detect(
        cls,
        title: str,
        artist: str | None = None,
        album: str | None = None,
        duration: str | int | None = None,
        isrc: str | None = None,
        source_id: str | None = None,
    ) -> Self:
        """Build a source track, flagging remixes and covers from the title."""
        return cls(
            title=title,
            artist=artist or None,
            album=album or None,
            duration=parse_duration(duration),
            isrc=isrc or None,
            is_remix=is_remix(title),
            is_cover=is_cover(title),
            source_id=source_id,
        )

    @property
    def search_queries(self) -> list[str]:
        """Ordered, de-duplicated free-text queries for this track.

        Cleaned title with the primary artist comes first since it is the
        most likely to hit; title-only and title-with-album variants follow.
        """
        cleaned = clean_title(self.title)
        artist = primary_artist(self.artist)

        candidates = []
        if artist:
            candidates.append(f"{cleaned} {artist}")
            candidates.append(f"{self.title} {artist}")
        candidates.append(cleaned)
        candidates.append(self.title)
        if self.album:
            candidates.append(f"{cleaned} {self.album}")

        return list(dict.fromkeys(q.strip() for q in candidates if q.strip()))

    @property
    def label(self) -> str:
        return f"{self.artist} - {self.title}" if self.artist else self.title


def _check_outcome(instance: "ConversionResult", _attribute, value) -> None:
    if value is not None and instance.resolved_track is not None:
        raise ValueError("A conversion result cannot carry both a track and an error")


@define(frozen=True, slots=True)
class ConversionResult:
    """Outcome of converting one source track.

    ``resolved_track`` and ``error`` are both ``None`` while the entry is
    pending; once processed exactly one of them is set.
    """

    source_track: SourceTrack
    resolved_track: Track | None = None
    error: str | None = field(default=None, validator=_check_outcome)

    @property
    def is_pending(self) -> bool:
        return self.resolved_track is None and self.error is None

    @property
    def is_resolved(self) -> bool:
        return self.resolved_track is not None

    def resolved(self, track: Track) -> "ConversionResult":
        return attrs.evolve(self, resolved_track=track, error=None)

    def failed(self, error: str) -> "ConversionResult":
        return attrs.evolve(self, resolved_track=None, error=error)


@define(frozen=True, slots=True)
class ConversionSummary:
    """Counts over a batch of conversion results."""

    total: int
    found: int
    failed: int
    pending: int

    @classmethod
    def from_results(cls, results: list[ConversionResult]) -> Self:
        found = sum(1 for r in results if r.is_resolved)
        pending = sum(1 for r in results if r.is_pending)
        return cls(
            total=len(results),
            found=found,
            failed=len(results) - found - pending,
            pending=pending,
        )
