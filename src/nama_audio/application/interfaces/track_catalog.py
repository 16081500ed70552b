"""Port interface for listing chant recordings."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from ...domain.chanting.entities import Track


class TrackCatalog(ABC):
    """Interface for the catalog that enumerates playable tracks."""

    @abstractmethod
    async def list_tracks(self) -> list["Track"]:
        """List all tracks in catalog order."""
        ...

    async def find(self, key: str) -> "Track | None":
        """Find a track by id, falling back to a case-insensitive title match."""
        tracks = await self.list_tracks()
        for track in tracks:
            if track.id == key:
                return track
        lowered = key.strip().lower()
        for track in tracks:
            if track.title.lower() == lowered:
                return track
        return None
