"""Routes engine completion notifications to the session they belong to."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from ...domain.shared.messages import ErrorMessages, LogTemplates

if TYPE_CHECKING:
    from ...domain.chanting.value_objects import SessionInstanceId
    from .playback_service import PlaybackApplicationService

logger = logging.getLogger(__name__)


class CompletionRouter:
    """Forwards engine notifications only for the live play-through.

    The token comparison happens under the session lock, so a track switch
    that is already queued ahead of the notification wins and the late
    notification is discarded.
    """

    def __init__(self, service: PlaybackApplicationService) -> None:
        self._service = service
        self._discarded = 0

    @property
    def discarded_count(self) -> int:
        """Number of stale notifications (completions or failures) dropped so far."""
        return self._discarded

    async def dispatch(self, instance_id: SessionInstanceId) -> bool:
        """Handle one completion; returns True if it was credited to the session."""
        async with self._service.serialized() as session:
            if not session.is_current(instance_id):
                self._discarded += 1
                logger.debug(LogTemplates.STALE_COMPLETION, instance_id, session.instance_id)
                return False

            events = await self._service.credit_loop(session)

        await self._service.publish(events)
        return bool(events)

    async def dispatch_failure(self, instance_id: SessionInstanceId) -> bool:
        """Handle a player that died mid-loop; returns True if the session halted."""
        async with self._service.serialized() as session:
            if not session.is_current(instance_id):
                self._discarded += 1
                logger.debug(LogTemplates.STALE_FAILURE, instance_id, session.instance_id)
                return False

            events = self._service.halt(session, ErrorMessages.PLAYER_FAILED)

        await self._service.publish(events)
        return bool(events)
