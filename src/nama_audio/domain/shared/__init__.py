"""
Shared Domain Kernel

Contains types, events and exceptions shared across all bounded contexts.
"""

from nama_audio.domain.shared.exceptions import (
    BusinessRuleViolationError,
    DomainError,
    InvalidOperationError,
    LedgerError,
    PlaybackEngineError,
)

__all__ = [
    "DomainError",
    "BusinessRuleViolationError",
    "InvalidOperationError",
    "PlaybackEngineError",
    "LedgerError",
]
