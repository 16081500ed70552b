"""
FFplay Playback Engine

Infrastructure component that plays chant recordings through an ``ffplay``
subprocess and reports each natural end of audio.
"""

from __future__ import annotations

import asyncio
import logging
import signal
from contextlib import suppress
from enum import Enum
from typing import TYPE_CHECKING

from nama_audio.application.interfaces.playback_engine import CompletionCallback, PlaybackEngine
from nama_audio.config.settings import PlaybackSettings
from nama_audio.domain.shared.exceptions import PlaybackEngineError
from nama_audio.domain.shared.messages import ErrorMessages, LogTemplates

if TYPE_CHECKING:
    from asyncio.subprocess import Process

    from ...domain.chanting.value_objects import SessionInstanceId

logger = logging.getLogger(__name__)


class PlayerState(Enum):
    """States for the ffplay process."""

    IDLE = "idle"
    LOADED = "loaded"
    PLAYING = "playing"
    PAUSED = "paused"
    STOPPED = "stopped"


class FFplayEngine(PlaybackEngine):
    """Playback engine driving one ``ffplay -nodisp -autoexit`` process at a time.

    ``play`` spawns the player and returns only after ffplay has printed the
    opened input stream, which is the engine's readiness signal. Pause and
    resume use SIGSTOP/SIGCONT, so this engine needs a POSIX host. A process
    that exits on its own reports completion (code 0) or failure (any other
    code) with the token it was started under; processes terminated by
    ``stop``/``load`` report neither. A failed start unloads the source.
    """

    READY_MARKER = "Input #"
    TERMINATE_GRACE_SECONDS = 2.0

    def __init__(self, settings: PlaybackSettings | None = None) -> None:
        self._settings = settings or PlaybackSettings()

        self._source: str | None = None
        self._process: Process | None = None
        self._process_instance: SessionInstanceId | None = None
        self._state = PlayerState.IDLE

        # Processes we ended on purpose; their exit is not a completion.
        self._suppressed: set[Process] = set()
        self._watchers: set[asyncio.Task[None]] = set()

        self._on_completed: CompletionCallback | None = None
        self._on_failed: CompletionCallback | None = None

    @property
    def state(self) -> PlayerState:
        return self._state

    @property
    def source(self) -> str | None:
        return self._source

    def set_on_completed_callback(self, callback: CompletionCallback) -> None:
        self._on_completed = callback

    def set_on_failed_callback(self, callback: CompletionCallback) -> None:
        self._on_failed = callback

    def build_command(self, source: str) -> list[str]:
        return [
            self._settings.ffplay_path,
            "-nodisp",
            "-autoexit",
            "-hide_banner",
            "-nostats",
            "-loglevel",
            "info",
            "-volume",
            str(self._settings.volume),
            source,
        ]

    async def load(self, source_locator: str, instance_id: SessionInstanceId) -> None:
        await self._terminate_current()
        self._source = source_locator
        self._state = PlayerState.LOADED

    async def play(self, instance_id: SessionInstanceId) -> None:
        if self._source is None:
            raise PlaybackEngineError("play", ErrorMessages.NOTHING_LOADED)

        await self._terminate_current()
        try:
            process = await self._spawn(self._source)
            await self._wait_until_ready(process)
        except PlaybackEngineError:
            # Whatever played before is gone; nothing may resume from here.
            self._source = None
            self._state = PlayerState.IDLE
            raise

        self._process = process
        self._process_instance = instance_id
        self._state = PlayerState.PLAYING
        logger.debug(LogTemplates.ENGINE_SPAWNED, process.pid, instance_id)

        watcher = asyncio.create_task(self._watch(process, instance_id))
        self._watchers.add(watcher)
        watcher.add_done_callback(self._watchers.discard)

    async def pause(self, instance_id: SessionInstanceId) -> None:
        if self._signal(signal.SIGSTOP, "pause"):
            self._state = PlayerState.PAUSED

    async def resume(self, instance_id: SessionInstanceId) -> None:
        if self._process is None and self._source is not None:
            # The paused loop already ran out; carry on with the next one.
            await self.play(instance_id)
            return
        if self._signal(signal.SIGCONT, "resume"):
            self._state = PlayerState.PLAYING

    async def stop(self, instance_id: SessionInstanceId) -> None:
        await self._terminate_current()
        self._state = PlayerState.STOPPED

    async def close(self) -> None:
        await self._terminate_current()
        for watcher in list(self._watchers):
            watcher.cancel()
        self._state = PlayerState.IDLE

    async def _spawn(self, source: str) -> Process:
        try:
            return await asyncio.create_subprocess_exec(
                *self.build_command(source),
                stdin=asyncio.subprocess.DEVNULL,
                stdout=asyncio.subprocess.DEVNULL,
                stderr=asyncio.subprocess.PIPE,
            )
        except FileNotFoundError as e:
            raise PlaybackEngineError(
                "play", ErrorMessages.PLAYER_NOT_FOUND.format(path=self._settings.ffplay_path)
            ) from e

    async def _wait_until_ready(self, process: Process) -> None:
        """Block until ffplay reports the opened input, or fail."""

        async def read_until_ready() -> bool:
            assert process.stderr is not None
            while True:
                line = await process.stderr.readline()
                if not line:
                    return False
                text = line.decode(errors="replace").strip()
                logger.debug(LogTemplates.ENGINE_STDERR, text)
                if text.startswith(self.READY_MARKER):
                    return True

        try:
            ready = await asyncio.wait_for(read_until_ready(), self._settings.ready_timeout_s)
        except TimeoutError:
            ready = False

        if not ready:
            await self._end_process(process)
            raise PlaybackEngineError(
                "play", ErrorMessages.SOURCE_NOT_READY.format(source=self._source)
            )

    async def _watch(self, process: Process, instance_id: SessionInstanceId) -> None:
        if process.stderr is not None:
            while line := await process.stderr.readline():
                logger.debug(LogTemplates.ENGINE_STDERR, line.decode(errors="replace").strip())

        returncode = await process.wait()
        logger.debug(LogTemplates.ENGINE_PROCESS_EXITED, instance_id, returncode)

        if process in self._suppressed:
            self._suppressed.discard(process)
            return

        if process is self._process:
            self._process = None
            self._process_instance = None
            self._state = PlayerState.STOPPED

        callback = self._on_completed if returncode == 0 else self._on_failed
        if callback is None:
            return

        try:
            await callback(instance_id)
        except Exception:
            logger.exception(LogTemplates.ENGINE_CALLBACK_ERROR)

    def _signal(self, signum: int, command: str) -> bool:
        process = self._process
        if process is None:
            if self._source is None:
                raise PlaybackEngineError(command, ErrorMessages.NOTHING_LOADED)
            return False
        try:
            process.send_signal(signum)
        except ProcessLookupError as e:
            # Audio already ended; its completion is on the way.
            logger.debug(LogTemplates.ENGINE_SIGNAL_FAILED, e)
            return False
        return True

    async def _terminate_current(self) -> None:
        process = self._process
        self._process = None
        self._process_instance = None
        if process is None or process.returncode is not None:
            return

        self._suppressed.add(process)
        await self._end_process(process)

    async def _end_process(self, process: Process) -> None:
        try:
            process.terminate()
            # A SIGSTOPped process only acts on SIGTERM once continued.
            process.send_signal(signal.SIGCONT)
        except ProcessLookupError:
            return

        try:
            await asyncio.wait_for(process.wait(), self.TERMINATE_GRACE_SECONDS)
        except TimeoutError:
            with suppress(ProcessLookupError):
                process.kill()
            await process.wait()
