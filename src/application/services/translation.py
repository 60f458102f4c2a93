"""Artist-name translation for romanized queries.

A user may type a Latin-script spelling of an artist whose canonical name is
written in another script. Looking the name up in MusicBrainz recovers the
canonical spelling, which the aggregator then searches for as well.
"""

import asyncio

from attrs import define, field

from src.config import get_logger, settings
from src.domain.repositories.interfaces import TranslationServiceProtocol

logger = get_logger(__name__)


@define(slots=True)
class TranslationLookup:
    """Advisory name translation; never raises.

    Attributes:
        service: Artist search backend; None disables translation
        threshold: Minimum match score (exclusive) for the top hit
        timeout: Seconds to wait for the service before giving up
    """

    service: TranslationServiceProtocol | None = None
    threshold: int = field(factory=lambda: settings.translation.confidence_threshold)
    enabled: bool = field(factory=lambda: settings.translation.enabled)
    timeout: float = field(factory=lambda: settings.translation.timeout)

    async def translate(self, name: str) -> str | None:
        """Canonical name of the best artist match, or None."""
        if not self.enabled or self.service is None or not name.strip():
            return None

        try:
            candidates = await asyncio.wait_for(
                self.service.search_artists(name), timeout=self.timeout
            )
        except TimeoutError:
            logger.warning(
                f"Artist name lookup timed out after {self.timeout}s", query=name
            )
            return None
        except Exception as e:
            logger.warning(f"Artist name lookup failed: {e}", query=name)
            return None

        if not candidates:
            return None

        best = candidates[0]
        score = best.get("score") or 0
        if score <= self.threshold:
            logger.debug(f"Top artist match below threshold ({score})", query=name)
            return None

        translated = best.get("name")
        if translated:
            logger.info(f"Translated '{name}' to '{translated}'")
        return translated or None
