import asyncio
import signal
from unittest.mock import AsyncMock

import pytest
import pytest_asyncio

from nama_audio.application.interfaces.playback_engine import PlaybackEngine

# ============================================================================
# Fakes
# ============================================================================


class RecordingEngine(PlaybackEngine):
    """In-memory engine that records every command and lets tests end audio."""

    def __init__(self) -> None:
        self.commands: list[tuple[str, object]] = []
        self.fail_on: set[str] = set()
        self._callback = None
        self._failed_callback = None

    def set_on_completed_callback(self, callback) -> None:
        self._callback = callback

    def set_on_failed_callback(self, callback) -> None:
        self._failed_callback = callback

    def _record(self, command: str, instance_id) -> None:
        if command in self.fail_on:
            from nama_audio.domain.shared.exceptions import PlaybackEngineError

            raise PlaybackEngineError(command, f"{command} failed")
        self.commands.append((command, instance_id))

    async def load(self, source_locator, instance_id) -> None:
        self._record("load", instance_id)

    async def play(self, instance_id) -> None:
        self._record("play", instance_id)

    async def pause(self, instance_id) -> None:
        self._record("pause", instance_id)

    async def resume(self, instance_id) -> None:
        self._record("resume", instance_id)

    async def stop(self, instance_id) -> None:
        self._record("stop", instance_id)

    async def complete(self, instance_id) -> None:
        """Simulate the audio started under *instance_id* reaching its end."""
        assert self._callback is not None
        await self._callback(instance_id)

    async def fail(self, instance_id) -> None:
        """Simulate the player for *instance_id* dying mid-loop."""
        assert self._failed_callback is not None
        await self._failed_callback(instance_id)

    @property
    def command_names(self) -> list[str]:
        return [name for name, _ in self.commands]


READY_LINE = b"Input #0, mp3, from '/media/chant.mp3':\n"


class FakeProcess:
    """Stand-in for an ffplay asyncio subprocess."""

    _next_pid = 1000

    def __init__(self, *, ready: bool = True) -> None:
        FakeProcess._next_pid += 1
        self.pid = FakeProcess._next_pid
        self.stderr = asyncio.StreamReader()
        self.returncode = None
        self.signals: list[int] = []
        self.terminated = False
        self._exited = asyncio.Event()
        if ready:
            self.stderr.feed_data(b"ffplay version 6.0\n")
            self.stderr.feed_data(READY_LINE)
        else:
            self.stderr.feed_data(b"/media/chant.mp3: No such file or directory\n")
            self.finish(1)

    def finish(self, returncode: int) -> None:
        if self.returncode is not None:
            return
        self.returncode = returncode
        self.stderr.feed_eof()
        self._exited.set()

    async def wait(self) -> int:
        await self._exited.wait()
        return self.returncode

    def send_signal(self, signum: int) -> None:
        if self.returncode is not None:
            raise ProcessLookupError
        self.signals.append(signum)

    def terminate(self) -> None:
        if self.returncode is not None:
            raise ProcessLookupError
        self.terminated = True
        self.signals.append(signal.SIGTERM)
        # Let the SIGCONT that follows a terminate still be recorded.
        asyncio.get_running_loop().call_soon(self.finish, -signal.SIGTERM)

    def kill(self) -> None:
        self.finish(-signal.SIGKILL)


class SpawnLog(list):
    """(argv, process) pairs for every player started."""

    ready = True


@pytest.fixture
def spawned(monkeypatch):
    """Patch subprocess creation to hand out fake processes."""
    log = SpawnLog()

    async def fake_exec(*argv, **kwargs):
        process = FakeProcess(ready=log.ready)
        log.append((argv, process))
        return process

    monkeypatch.setattr(asyncio, "create_subprocess_exec", fake_exec)
    return log


async def settle(rounds: int = 5) -> None:
    """Let watcher tasks observe process exits."""
    for _ in range(rounds):
        await asyncio.sleep(0)


# ============================================================================
# Shared State
# ============================================================================


@pytest.fixture(autouse=True)
def fresh_event_bus():
    """Give every test its own global event bus."""
    from nama_audio.domain.shared.events import reset_event_bus

    reset_event_bus()
    yield
    reset_event_bus()


# ============================================================================
# Database Fixtures
# ============================================================================


@pytest_asyncio.fixture
async def in_memory_database():
    """Create an in-memory SQLite database for testing."""
    from nama_audio.infrastructure.persistence.database import Database

    db = Database(":memory:")
    await db.initialize()
    yield db
    await db.close()


@pytest_asyncio.fixture
async def ledger_repository(in_memory_database):
    """Create a ledger repository with in-memory database."""
    from nama_audio.infrastructure.persistence.repositories.ledger_repository import (
        SQLiteNamaLedger,
    )

    return SQLiteNamaLedger(in_memory_database)


# ============================================================================
# Domain Entity Fixtures
# ============================================================================


@pytest.fixture
def repeating_track():
    """A Nama Japa recording allowed four loops."""
    from nama_audio.domain.chanting.entities import Track

    return Track(
        id="japa-hare-rama",
        title="Hare Rama",
        source_locator="/media/NamaJapa_Hare_Rama.mp3",
        is_repeating=True,
        max_loops=4,
    )


@pytest.fixture
def single_track():
    """A recording that plays once."""
    from nama_audio.domain.chanting.entities import Track

    return Track(
        id="bhajan-govinda",
        title="Govinda Bhajan",
        source_locator="/media/Govinda_Bhajan.mp3",
    )


# ============================================================================
# Application Fixtures
# ============================================================================


@pytest.fixture
def engine():
    return RecordingEngine()


@pytest.fixture
def mock_ledger():
    """Ledger that acknowledges every submission."""
    from nama_audio.domain.ledger.entities import LedgerEntry
    from nama_audio.domain.shared.datetime_utils import utcnow

    async def submit(request):
        now = utcnow()
        return LedgerEntry(
            entry_id="1",
            user_id=request.user_id,
            account_id=request.account_id,
            count=request.count,
            source_tag=request.source_tag,
            entry_date=now.date(),
            created_at=now,
        )

    mock = AsyncMock()
    mock.submit = AsyncMock(side_effect=submit)
    return mock


@pytest.fixture
def service(engine, mock_ledger):
    """Playback service wired to the recording engine and mock ledger."""
    from nama_audio.application.services.playback_service import PlaybackApplicationService

    return PlaybackApplicationService(
        user_id="user-1",
        playback_engine=engine,
        ledger=mock_ledger,
    )
