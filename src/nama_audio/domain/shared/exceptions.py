"""Base exception classes for domain-level errors."""

from __future__ import annotations


class DomainError(Exception):
    """Base exception for all domain-level errors."""

    def __init__(self, message: str, code: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.code = code or self.__class__.__name__


class BusinessRuleViolationError(DomainError):
    """Raised when a business rule is violated."""

    def __init__(self, rule: str, message: str | None = None) -> None:
        msg = message or f"Business rule violated: {rule}"
        super().__init__(msg, code="BUSINESS_RULE_VIOLATION")
        self.rule = rule


class InvalidOperationError(DomainError):
    """Raised when an operation is invalid in the current state."""

    def __init__(self, operation: str, current_state: str, message: str | None = None) -> None:
        msg = message or f"Cannot perform '{operation}' in state '{current_state}'"
        super().__init__(msg, code="INVALID_OPERATION")
        self.operation = operation
        self.current_state = current_state


class PlaybackEngineError(DomainError):
    """Raised when the playback engine rejects a command (e.g. source unavailable)."""

    def __init__(self, command: str, message: str | None = None) -> None:
        msg = message or f"Playback engine rejected '{command}'"
        super().__init__(msg, code="ENGINE_ERROR")
        self.command = command


class LedgerError(DomainError):
    """Raised when the ledger fails to record a submission."""

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message or "Ledger submission failed", code="LEDGER_ERROR")
