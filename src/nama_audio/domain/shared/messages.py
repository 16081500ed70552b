"""Centralized message constants for error messages, validation, and user feedback."""

from __future__ import annotations


class ErrorMessages:
    """Error messages for exceptions and validation failures."""

    # Token Validation Errors
    EMPTY_INSTANCE_ID = "Session instance ID cannot be empty"

    # Session Errors
    NO_TRACK_SELECTED = "No track is selected"
    LOOP_LIMIT_REACHED = (
        '"{title}" already completed all {max_loops} loops. Submit your Namas or choose another track.'
    )
    CANNOT_PAUSE = "Playback can only be paused while playing"
    CANNOT_RESUME = "Playback can only be resumed while paused"
    CANNOT_STOP = "Nothing is playing or paused"

    # Submission Errors
    ACCOUNT_REQUIRED = "Please select a Namavruksha Sankalpa."
    NOTHING_TO_SUBMIT = "Please listen to at least one full loop before submitting."
    SUBMISSION_IN_FLIGHT = "A submission is already in progress"
    SUBMISSION_FAILED = "Failed to submit. Please try again."

    # Time/Date Validation Errors
    TIMEZONE_REQUIRED_UTC_DATETIME = "UtcDateTime requires a timezone-aware datetime"

    # Settings Validation Errors
    INVALID_LEDGER_URL = "Ledger URL must start with sqlite://"
    INVALID_LOG_LEVEL = "Invalid log level: {level}. Must be one of {valid_levels}"

    # Engine Errors
    PLAYER_NOT_FOUND = "Player executable '{path}' was not found"
    SOURCE_NOT_READY = "Source '{source}' did not become ready"
    NOTHING_LOADED = "No source is loaded"
    PLAYER_FAILED = "The player stopped unexpectedly"
    REPLAY_FAILED = "Could not restart the track for the next loop"


class UserMessages:
    """User-facing confirmations."""

    NOW_PLAYING = 'Now playing "{title}"'
    PAUSED = "Paused"
    RESUMED = "Resumed"
    STOPPED = "Stopped"
    SUBMITTED = "{count} Namas submitted! Hari Om 🙏"


class LogTemplates:
    """Log message templates for structured logging.

    Use these with logger.info(), logger.error(), etc. and pass values as parameters
    for proper log formatting and structured logging support.
    """

    # Database Lifecycle
    DATABASE_INITIALIZED = "Database initialized at %s"
    DATABASE_CLOSED = "Database manager closed"

    # Catalog
    CATALOG_DIR_MISSING = "Media directory %s does not exist"
    CATALOG_SCANNED = "Found %d audio tracks in %s"

    # Session Transitions
    TRACK_SELECTED = "Selected '%s' (instance %s, max loops %d)"
    TRACK_SWITCHED = "Switched from '%s' to '%s'; discarded %d unsubmitted Namas"
    PLAYBACK_PAUSED = "Paused playback of '%s'"
    PLAYBACK_RESUMED = "Resumed playback of '%s'"
    PLAYBACK_STOPPED = "Stopped playback of '%s'"
    OPERATION_REJECTED = "Rejected %s: %s"

    # Completion Handling
    LOOP_COMPLETED = "Loop %d/%d of '%s' completed (count=%d)"
    LOOP_REPLAYING = "Replaying '%s' from start"
    LOOP_NOT_REPLAYED = "Not replaying '%s': session is %s"
    LOOP_LIMIT_REACHED = "Loop limit reached for '%s' (count=%d)"
    STALE_COMPLETION = "Discarded stale completion for instance %s (current %s)"
    STALE_FAILURE = "Discarded stale failure report for instance %s (current %s)"
    PLAYBACK_HALTED = "Playback of '%s' halted: %s"
    SWITCH_FAILED_PLAYER_GONE = "Switch to '%s' failed; stopping '%s', whose player was released"

    # Engine
    ENGINE_COMMAND_FAILED = "Playback engine failed on %s"
    ENGINE_SPAWNED = "Started player pid %s for instance %s"
    ENGINE_PROCESS_EXITED = "Player for instance %s exited with code %s"
    ENGINE_SIGNAL_FAILED = "Could not signal player process: %r"
    ENGINE_STDERR = "ffplay: %s"
    ENGINE_CALLBACK_ERROR = "Error in completion callback"

    # Submission
    SUBMISSION_STARTED = "Submitting %d Namas for user %s to account %s"
    SUBMISSION_SUCCEEDED = "Recorded ledger entry %s (%d Namas)"
    SUBMISSION_FAILED = "Ledger submission failed; keeping %d Namas for retry"
    SUBMISSION_REJECTED_IN_FLIGHT = "Rejected re-entrant submission for user %s"
    LEDGER_ENTRY_RECORDED = "Inserted nama entry %s for account %s"

    # Application Lifecycle
    APP_STARTING = "Starting nama-audio (%s)"
    APP_INTERRUPTED = "Interrupted; stopping playback"
    LOGGING_CONFIG_FALLBACK = "Could not load %s, falling back to basic config"
