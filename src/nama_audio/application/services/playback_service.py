"""Playback Application Service - owns one user's chant session and its engine."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import AsyncIterator, Iterable
from contextlib import asynccontextmanager
from typing import TYPE_CHECKING

from ...domain.chanting.entities import PlaybackSession, SessionSnapshot, Track
from ...domain.chanting.value_objects import CompletionOutcome, PlaybackState, SessionInstanceId
from ...domain.ledger.entities import SubmissionRequest
from ...domain.shared.events import (
    DomainEvent,
    EventBus,
    LoopCompleted,
    LoopLimitReached,
    NamasSubmitted,
    PlaybackHalted,
    TrackSelected,
    get_event_bus,
)
from ...domain.shared.exceptions import (
    BusinessRuleViolationError,
    DomainError,
    InvalidOperationError,
)
from ...domain.shared.messages import ErrorMessages, LogTemplates, UserMessages
from .completion_router import CompletionRouter
from .results import PlaybackResult, PlaybackStatus, SubmitResult

if TYPE_CHECKING:
    from ...domain.ledger.repository import NamaLedger
    from ..interfaces.playback_engine import PlaybackEngine

logger = logging.getLogger(__name__)


class PlaybackApplicationService:
    """Serializes every operation on a single PlaybackSession.

    Commands from the caller and completion notifications from the engine
    share one lock, so engine commands go out in invocation order and each
    transition reads the live session state.
    """

    def __init__(
        self,
        *,
        user_id: str,
        playback_engine: PlaybackEngine,
        ledger: NamaLedger,
        session: PlaybackSession | None = None,
        event_bus: EventBus | None = None,
    ) -> None:
        self._user_id = user_id
        self._engine = playback_engine
        self._ledger = ledger
        self._session = session if session is not None else PlaybackSession()
        self._event_bus = event_bus or get_event_bus()

        self._lock = asyncio.Lock()
        self._submitting = False

        self._router = CompletionRouter(self)
        self._engine.set_on_completed_callback(self._router.dispatch)
        self._engine.set_on_failed_callback(self._router.dispatch_failure)

    @property
    def user_id(self) -> str:
        return self._user_id

    @property
    def completion_router(self) -> CompletionRouter:
        return self._router

    def snapshot(self) -> SessionSnapshot:
        return self._session.snapshot(submitting=self._submitting)

    @asynccontextmanager
    async def serialized(self) -> AsyncIterator[PlaybackSession]:
        """Hold the session lock and yield the live session."""
        async with self._lock:
            yield self._session

    async def publish(self, events: Iterable[DomainEvent]) -> None:
        for event in events:
            await self._event_bus.publish(event)

    # === Transport commands ===

    async def select_and_play(self, track: Track | None) -> PlaybackResult:
        """Make *track* the active play-through and start it from the beginning."""
        if track is None:
            return PlaybackResult.error(
                PlaybackStatus.VALIDATION_ERROR, ErrorMessages.NO_TRACK_SELECTED, self.snapshot()
            )

        async with self._lock:
            session = self._session
            try:
                session.ensure_can_begin(track)
            except BusinessRuleViolationError as e:
                logger.info(LogTemplates.OPERATION_REJECTED, "select_and_play", e.message)
                return PlaybackResult.error(
                    PlaybackStatus.LOOP_LIMIT_REACHED, e.message, self.snapshot()
                )

            # The token is only committed once the engine accepted the source.
            instance_id = SessionInstanceId.mint()
            try:
                await self._engine.load(track.source_locator, instance_id)
                await self._engine.play(instance_id)
            except Exception as e:
                logger.exception(LogTemplates.ENGINE_COMMAND_FAILED, "select_and_play")
                if session.state.is_active:
                    # load released the previous player.
                    logger.warning(
                        LogTemplates.SWITCH_FAILED_PLAYER_GONE,
                        track.title,
                        session.active_track.title,
                    )
                    await self._stop_engine_quietly(session)
                return PlaybackResult.error(
                    PlaybackStatus.ENGINE_ERROR, _message_of(e), self.snapshot()
                )

            previous = session.active_track
            discarded = session.begin(track, instance_id)
            if previous is not None and previous.id != track.id:
                logger.info(LogTemplates.TRACK_SWITCHED, previous.title, track.title, discarded)
            logger.info(LogTemplates.TRACK_SELECTED, track.title, instance_id, track.max_loops)

            event = TrackSelected(
                user_id=self._user_id,
                track_id=track.id,
                track_title=track.title,
                instance_id=str(instance_id),
                max_loops=track.max_loops,
            )
            snapshot = self.snapshot()

        await self.publish([event])
        return PlaybackResult.success(UserMessages.NOW_PLAYING.format(title=track.title), snapshot)

    async def pause(self) -> PlaybackResult:
        async with self._lock:
            session = self._session
            try:
                session.ensure_playing()
            except InvalidOperationError as e:
                return self._rejected("pause", e)

            try:
                await self._engine.pause(session.instance_id)
            except Exception as e:
                logger.exception(LogTemplates.ENGINE_COMMAND_FAILED, "pause")
                return PlaybackResult.error(
                    PlaybackStatus.ENGINE_ERROR, _message_of(e), self.snapshot()
                )

            session.pause()
            logger.info(LogTemplates.PLAYBACK_PAUSED, session.active_track.title)
            return PlaybackResult.success(UserMessages.PAUSED, self.snapshot())

    async def resume(self) -> PlaybackResult:
        async with self._lock:
            session = self._session
            try:
                session.ensure_paused()
            except InvalidOperationError as e:
                return self._rejected("resume", e)

            try:
                await self._engine.resume(session.instance_id)
            except Exception as e:
                logger.exception(LogTemplates.ENGINE_COMMAND_FAILED, "resume")
                return PlaybackResult.error(
                    PlaybackStatus.ENGINE_ERROR, _message_of(e), self.snapshot()
                )

            session.resume()
            logger.info(LogTemplates.PLAYBACK_RESUMED, session.active_track.title)
            return PlaybackResult.success(UserMessages.RESUMED, self.snapshot())

    async def stop(self) -> PlaybackResult:
        """Stop and rewind; the count accrued so far is kept."""
        async with self._lock:
            session = self._session
            try:
                session.ensure_active()
            except InvalidOperationError as e:
                return self._rejected("stop", e)

            try:
                await self._engine.stop(session.instance_id)
            except Exception as e:
                logger.exception(LogTemplates.ENGINE_COMMAND_FAILED, "stop")
                return PlaybackResult.error(
                    PlaybackStatus.ENGINE_ERROR, _message_of(e), self.snapshot()
                )

            session.stop()
            logger.info(LogTemplates.PLAYBACK_STOPPED, session.active_track.title)
            return PlaybackResult.success(UserMessages.STOPPED, self.snapshot())

    async def reset(self) -> PlaybackResult:
        """Stop playback and discard all unsubmitted progress."""
        async with self._lock:
            session = self._session
            await self._stop_engine_quietly(session)
            session.clear()
            return PlaybackResult.success(UserMessages.STOPPED, self.snapshot())

    # === Completion handling ===

    async def credit_loop(self, session: PlaybackSession) -> list[DomainEvent]:
        """Apply one natural end of audio to *session*.

        Must be called while holding the session lock, with a session whose
        token already matched the notification.
        """
        track = session.active_track
        outcome = session.record_completion()
        if outcome is CompletionOutcome.IGNORED or track is None:
            return []

        logger.info(
            LogTemplates.LOOP_COMPLETED,
            session.loops_completed,
            session.max_loops,
            track.title,
            session.accumulated_count,
        )

        replayed = False
        halted: list[DomainEvent] = []
        if outcome is CompletionOutcome.REPLAY:
            try:
                await self._engine.play(session.instance_id)
                replayed = True
                logger.debug(LogTemplates.LOOP_REPLAYING, track.title)
            except Exception:
                logger.exception(LogTemplates.ENGINE_COMMAND_FAILED, "replay")
                halted = self.halt(session, ErrorMessages.REPLAY_FAILED)
        elif outcome is CompletionOutcome.HELD:
            logger.info(LogTemplates.LOOP_NOT_REPLAYED, track.title, session.state.value)

        events: list[DomainEvent] = [
            LoopCompleted(
                user_id=self._user_id,
                track_id=track.id,
                track_title=track.title,
                loops_completed=session.loops_completed,
                max_loops=session.max_loops,
                accumulated_count=session.accumulated_count,
                replayed=replayed,
            )
        ]
        if outcome is CompletionOutcome.LIMIT_REACHED:
            logger.info(LogTemplates.LOOP_LIMIT_REACHED, track.title, session.accumulated_count)
            events.append(
                LoopLimitReached(
                    user_id=self._user_id,
                    track_id=track.id,
                    track_title=track.title,
                    accumulated_count=session.accumulated_count,
                )
            )
        events.extend(halted)
        return events

    def halt(self, session: PlaybackSession, reason: str) -> list[DomainEvent]:
        """Stop *session* because its audio can no longer play.

        Must be called while holding the session lock. Counters are kept.
        """
        track = session.active_track
        if track is None or not session.state.is_active:
            return []

        session.transition_to(PlaybackState.STOPPED)
        logger.warning(LogTemplates.PLAYBACK_HALTED, track.title, reason)
        return [
            PlaybackHalted(
                user_id=self._user_id,
                track_id=track.id,
                track_title=track.title,
                reason=reason,
            )
        ]

    # === Submission ===

    async def submit(self, account_id: str | None) -> SubmitResult:
        """Send the accumulated count to the ledger and reset the session on success."""
        if self._submitting:
            logger.warning(LogTemplates.SUBMISSION_REJECTED_IN_FLIGHT, self._user_id)
            return SubmitResult.error(
                PlaybackStatus.IN_FLIGHT, ErrorMessages.SUBMISSION_IN_FLIGHT, self.snapshot()
            )

        async with self._lock:
            session = self._session
            if not account_id or not account_id.strip():
                return SubmitResult.error(
                    PlaybackStatus.VALIDATION_ERROR, ErrorMessages.ACCOUNT_REQUIRED, self.snapshot()
                )
            if session.accumulated_count <= 0:
                return SubmitResult.error(
                    PlaybackStatus.VALIDATION_ERROR,
                    ErrorMessages.NOTHING_TO_SUBMIT,
                    self.snapshot(),
                )

            self._submitting = True
            entry = None
            try:
                await self._stop_engine_quietly(session)
                request = SubmissionRequest(
                    user_id=self._user_id,
                    account_id=account_id,
                    count=session.accumulated_count,
                )
                logger.info(
                    LogTemplates.SUBMISSION_STARTED, request.count, self._user_id, account_id
                )
                try:
                    entry = await self._ledger.submit(request)
                except Exception:
                    logger.exception(LogTemplates.SUBMISSION_FAILED, request.count)
                else:
                    logger.info(LogTemplates.SUBMISSION_SUCCEEDED, entry.entry_id, entry.count)
                    session.clear()
            finally:
                self._submitting = False

            snapshot = self.snapshot()

        if entry is None:
            return SubmitResult.error(
                PlaybackStatus.SUBMISSION_FAILED, ErrorMessages.SUBMISSION_FAILED, snapshot
            )

        await self.publish(
            [
                NamasSubmitted(
                    user_id=entry.user_id,
                    account_id=entry.account_id,
                    count=entry.count,
                    entry_id=entry.entry_id,
                )
            ]
        )
        return SubmitResult.success(
            UserMessages.SUBMITTED.format(count=entry.count), entry, snapshot
        )

    async def close(self) -> None:
        """Stop any playback and release the engine."""
        async with self._lock:
            await self._stop_engine_quietly(self._session)
        await self._engine.close()

    # === Helpers ===

    async def _stop_engine_quietly(self, session: PlaybackSession) -> None:
        """Idempotent stop used by submit and reset."""
        if not session.state.is_active:
            return
        try:
            await self._engine.stop(session.instance_id)
        except Exception:
            logger.exception(LogTemplates.ENGINE_COMMAND_FAILED, "stop")
        session.stop()

    def _rejected(self, operation: str, error: InvalidOperationError) -> PlaybackResult:
        logger.info(LogTemplates.OPERATION_REJECTED, operation, error.message)
        return PlaybackResult.error(PlaybackStatus.INVALID_STATE, error.message, self.snapshot())


def _message_of(error: Exception) -> str:
    if isinstance(error, DomainError):
        return error.message
    return str(error) or error.__class__.__name__
