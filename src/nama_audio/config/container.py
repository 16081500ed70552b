"""Dependency Injection Container

Manages the application's dependency graph, providing lazy initialization
and lifecycle management for the ledger, catalog and playback services.
Components are created on-demand and cached for reuse throughout the application.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

logger = logging.getLogger(__name__)

if TYPE_CHECKING:
    from ..application.interfaces.playback_engine import PlaybackEngine
    from ..application.interfaces.track_catalog import TrackCatalog
    from ..application.services.playback_service import PlaybackApplicationService
    from ..domain.ledger.repository import NamaLedger
    from ..domain.shared.events import EventBus
    from ..infrastructure.persistence.database import Database
    from .settings import Settings


@dataclass
class Container:
    """Dependency injection container.

    Holds one playback service (and therefore one session and one engine)
    per user id.
    """

    settings: Settings

    _database: Database | None = None
    _ledger: NamaLedger | None = None
    _catalog: TrackCatalog | None = None
    _event_bus: EventBus | None = None
    _playback_services: dict[str, PlaybackApplicationService] = field(default_factory=dict)

    # === Persistence ===

    @property
    def database(self) -> Database:
        """Get the ledger database connection manager."""
        if self._database is None:
            from ..infrastructure.persistence.database import Database

            self._database = Database(self.settings.ledger.url, settings=self.settings.ledger)
        return self._database

    @property
    def ledger(self) -> NamaLedger:
        if self._ledger is None:
            from ..infrastructure.persistence.repositories.ledger_repository import (
                SQLiteNamaLedger,
            )

            self._ledger = SQLiteNamaLedger(self.database)
        return self._ledger

    # === Infrastructure Adapters ===

    @property
    def catalog(self) -> TrackCatalog:
        if self._catalog is None:
            from ..infrastructure.catalog.directory_catalog import DirectoryTrackCatalog

            self._catalog = DirectoryTrackCatalog(self.settings.catalog)
        return self._catalog

    def create_playback_engine(self) -> PlaybackEngine:
        """Create a fresh engine; engines are never shared between sessions."""
        from ..infrastructure.audio.ffplay_engine import FFplayEngine

        return FFplayEngine(self.settings.playback)

    @property
    def event_bus(self) -> EventBus:
        if self._event_bus is None:
            from ..domain.shared.events import get_event_bus

            self._event_bus = get_event_bus()
        return self._event_bus

    # === Application Services ===

    def playback_service(self, user_id: str) -> PlaybackApplicationService:
        """Get the playback service for a user, creating it on first use."""
        service = self._playback_services.get(user_id)
        if service is None:
            from ..application.services.playback_service import PlaybackApplicationService

            service = PlaybackApplicationService(
                user_id=user_id,
                playback_engine=self.create_playback_engine(),
                ledger=self.ledger,
                event_bus=self.event_bus,
            )
            self._playback_services[user_id] = service
        return service

    # === Lifecycle ===

    async def initialize(self) -> None:
        await self.database.initialize()

    async def shutdown(self) -> None:
        for user_id, service in list(self._playback_services.items()):
            try:
                await service.close()
            except Exception:
                logger.exception("Error closing playback service for user %s", user_id)
        self._playback_services.clear()

        if self._database is not None:
            await self._database.close()


def create_container(settings: Settings | None = None) -> Container:
    """Create a container, loading settings from the environment if not given."""
    if settings is None:
        from .settings import get_settings

        settings = get_settings()
    return Container(settings=settings)
