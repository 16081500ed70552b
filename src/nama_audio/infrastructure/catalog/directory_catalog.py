"""Track catalog backed by a directory of audio files.

Files whose names start with the repeating prefix (``NamaJapa_`` by default)
are Nama Japa recordings that loop; every other file plays once.
"""

from __future__ import annotations

import asyncio
import hashlib
import logging
from pathlib import Path

from nama_audio.application.interfaces.track_catalog import TrackCatalog
from nama_audio.config.settings import CatalogSettings
from nama_audio.domain.chanting.entities import Track
from nama_audio.domain.shared.messages import LogTemplates

logger = logging.getLogger(__name__)


class DirectoryTrackCatalog(TrackCatalog):
    def __init__(self, settings: CatalogSettings | None = None) -> None:
        self._settings = settings or CatalogSettings()
        self._root = Path(self._settings.media_dir)

    @property
    def root(self) -> Path:
        return self._root

    async def list_tracks(self) -> list[Track]:
        return await asyncio.to_thread(self._scan)

    def _scan(self) -> list[Track]:
        if not self._root.is_dir():
            logger.warning(LogTemplates.CATALOG_DIR_MISSING, self._root)
            return []

        tracks = [
            self.track_from_path(path)
            for path in sorted(self._root.iterdir(), key=lambda p: p.name.lower())
            if path.is_file() and path.suffix.lower() in self._settings.audio_extensions
        ]
        logger.debug(LogTemplates.CATALOG_SCANNED, len(tracks), self._root)
        return tracks

    def track_from_path(self, path: Path) -> Track:
        """Build catalog metadata for one audio file."""
        prefix = self._settings.repeating_prefix
        is_repeating = path.name.startswith(prefix)
        max_loops = (
            self._settings.repeating_max_loops if is_repeating else self._settings.single_max_loops
        )
        return Track(
            id=self.track_id_for(path),
            title=self.title_for(path.stem, prefix),
            source_locator=str(path.resolve()),
            is_repeating=is_repeating,
            max_loops=max_loops,
        )

    @staticmethod
    def title_for(stem: str, prefix: str) -> str:
        """``NamaJapa_Hare_Rama`` -> ``Hare Rama``."""
        title = stem.replace(prefix, "", 1).replace("_", " ").strip()
        return title or stem

    def track_id_for(self, path: Path) -> str:
        """Stable id derived from the file name relative to the media directory."""
        try:
            relative = path.resolve().relative_to(self._root.resolve())
        except ValueError:
            relative = path
        return hashlib.md5(relative.as_posix().encode()).hexdigest()[:16]
