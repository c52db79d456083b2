"""Domain-specific exceptions for ledger services."""

from apps.ledger.snapshot import InvalidAppDataError


class LedgerServiceError(Exception):
    """Base exception for ledger services."""
    pass


class WeekendNotFoundError(LedgerServiceError):
    """Raised when a weekend doesn't exist in the organiser's ledger."""
    pass


class MatchNotFoundError(LedgerServiceError):
    """Raised when a match doesn't exist in the organiser's ledger."""
    pass


class PaymentNotFoundError(LedgerServiceError):
    """Raised when a payment doesn't exist in the current weekend."""
    pass


class PlayerNotInLedgerError(LedgerServiceError):
    """Raised when a player isn't on the organiser's roster."""
    pass


class UnknownParticipantError(LedgerServiceError):
    """Raised when a match lists players from outside the roster."""
    pass


class InvalidMatchError(LedgerServiceError):
    """Raised when match data is inconsistent (e.g. type changed on edit)."""
    pass


__all__ = [
    'LedgerServiceError',
    'WeekendNotFoundError',
    'MatchNotFoundError',
    'PaymentNotFoundError',
    'PlayerNotInLedgerError',
    'UnknownParticipantError',
    'InvalidMatchError',
    'InvalidAppDataError',
]
