# ruff: noqa: N999
"""
Domain Layer

Contains pure business logic organized by bounded contexts:
- shared/: Cross-cutting types, events and exceptions
- chanting/: Track, playback session and counting rules
- ledger/: Submission requests and the ledger contract
"""

from nama_audio.domain.shared.exceptions import DomainError

__all__ = [
    "DomainError",
]
