"""Port interface for the external audio playback engine."""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Awaitable, Callable
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from ...domain.chanting.value_objects import SessionInstanceId

CompletionCallback = Callable[["SessionInstanceId"], Awaitable[None]]


class PlaybackEngine(ABC):
    """Interface for loading and transporting audio.

    Every command is tagged with the session instance token it was issued
    under. The engine reports each natural end of audio through the
    completion callback, passing back the token the audio was started with.
    Commands raise ``PlaybackEngineError`` when the engine rejects them.
    """

    @abstractmethod
    async def load(self, source_locator: str, instance_id: SessionInstanceId) -> None:
        """Load a source, returning once the engine reports it ready to play."""
        ...

    @abstractmethod
    async def play(self, instance_id: SessionInstanceId) -> None:
        """Play the loaded source from the start."""
        ...

    @abstractmethod
    async def pause(self, instance_id: SessionInstanceId) -> None:
        ...

    @abstractmethod
    async def resume(self, instance_id: SessionInstanceId) -> None:
        """Continue playback from the paused position."""
        ...

    @abstractmethod
    async def stop(self, instance_id: SessionInstanceId) -> None:
        """Stop and rewind. No completion is reported for stopped audio."""
        ...

    @abstractmethod
    def set_on_completed_callback(self, callback: CompletionCallback) -> None:
        """Set callback for when a loaded source plays to its natural end."""
        ...

    def set_on_failed_callback(self, callback: CompletionCallback) -> None:
        """Set callback for when started audio dies without reaching its end.

        Engines whose playback cannot fail on its own may ignore it.
        """
        return None

    async def close(self) -> None:
        """Release engine resources."""
        return None
