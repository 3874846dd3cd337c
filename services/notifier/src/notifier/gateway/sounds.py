"""
Gateway sound catalog.

Maps the sound identifiers the gateway recognises to display names.
Ships with the gateway's stock list; a refresh replaces the whole
mapping in one step.
"""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from types import MappingProxyType

import structlog

from pn_common.models.gateway import SoundMap

logger = structlog.get_logger()

# Refresh cadence when automatic updates are enabled.
REFRESH_INTERVAL_S = 24 * 60 * 60

DEFAULT_SOUNDS: Mapping[str, str] = MappingProxyType(
    {
        "pushover": "Pushover (default)",
        "bike": "Bike",
        "bugle": "Bugle",
        "cashregister": "Cash Register",
        "classical": "Classical",
        "cosmic": "Cosmic",
        "falling": "Falling",
        "gamelan": "Gamelan",
        "incoming": "Incoming",
        "intermission": "Intermission",
        "magic": "Magic",
        "mechanical": "Mechanical",
        "pianobar": "Piano Bar",
        "siren": "Siren",
        "spacealarm": "Space Alarm",
        "tugboat": "Tug Boat",
        "alien": "Alien Alarm (long)",
        "climb": "Climb (long)",
        "persistent": "Persistent (long)",
        "echo": "Pushover Echo (long)",
        "updown": "Up Down (long)",
        "none": "None (silent)",
    }
)


class SoundCatalog(Mapping[str, str]):
    """Read-mostly mapping of gateway sound ids to display names.

    Args:
        sounds: Initial mapping; defaults to :data:`DEFAULT_SOUNDS`.
    """

    def __init__(self, sounds: Mapping[str, str] | None = None) -> None:
        self._sounds: Mapping[str, str] = MappingProxyType(
            dict(DEFAULT_SOUNDS if sounds is None else sounds)
        )

    def __getitem__(self, key: str) -> str:
        return self._sounds[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._sounds)

    def __len__(self) -> int:
        return len(self._sounds)

    def snapshot(self) -> SoundMap:
        """Return a mutable copy of the current mapping."""
        return dict(self._sounds)

    def display_name(self, sound: str) -> str:
        """Return the display name for *sound*, or *sound* itself if unknown."""
        return self._sounds.get(sound, sound)

    def is_known(self, sound: str) -> bool:
        """Whether *sound* is recognised; the empty string means "gateway default"."""
        return sound == "" or sound in self._sounds

    def replace(self, sounds: object) -> bool:
        """Swap in a new mapping fetched from the gateway.

        The new mapping is validated before the swap; an invalid or empty
        one leaves the catalog untouched.

        Returns:
            ``True`` if the catalog was replaced.
        """
        if not isinstance(sounds, Mapping) or not sounds:
            logger.warning("sound_catalog_rejected", reason="not a non-empty mapping")
            return False
        fresh = {str(key): str(value) for key, value in sounds.items()}
        self._sounds = MappingProxyType(fresh)
        logger.info("sound_catalog_replaced", count=len(fresh))
        return True
