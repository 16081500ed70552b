"""Application services for chant playback and submission."""

from nama_audio.application.services.completion_router import CompletionRouter
from nama_audio.application.services.playback_service import PlaybackApplicationService
from nama_audio.application.services.results import PlaybackResult, PlaybackStatus, SubmitResult

__all__ = [
    "PlaybackApplicationService",
    "CompletionRouter",
    "PlaybackResult",
    "SubmitResult",
    "PlaybackStatus",
]
