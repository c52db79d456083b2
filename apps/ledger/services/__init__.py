"""
Ledger app services layer.

Each service loads the organiser's snapshot, applies a pure calculation
and saves the result back in one transaction.
"""

from .exceptions import (
    LedgerServiceError,
    WeekendNotFoundError,
    MatchNotFoundError,
    PaymentNotFoundError,
    PlayerNotInLedgerError,
    UnknownParticipantError,
    InvalidMatchError,
    InvalidAppDataError,
)

from .weekend_management import (
    get_current_weekend,
    get_weekend,
    list_weekends,
    advance_weekend,
)

from .match_management import (
    save_match,
    update_match,
    delete_match,
)

from .payment_management import (
    record_payment,
    toggle_payment,
    settle_player,
    set_outstanding,
)

from .ledger_queries import (
    LedgerSummary,
    get_ledger_summary,
    get_player_row,
)

from .data_management import (
    export_filename,
    export_ledger,
    import_ledger,
    reset_ledger,
)


__all__ = [
    # Exceptions
    'LedgerServiceError',
    'WeekendNotFoundError',
    'MatchNotFoundError',
    'PaymentNotFoundError',
    'PlayerNotInLedgerError',
    'UnknownParticipantError',
    'InvalidMatchError',
    'InvalidAppDataError',

    # Weekends
    'get_current_weekend',
    'get_weekend',
    'list_weekends',
    'advance_weekend',

    # Matches
    'save_match',
    'update_match',
    'delete_match',

    # Payments
    'record_payment',
    'toggle_payment',
    'settle_player',
    'set_outstanding',

    # Queries
    'LedgerSummary',
    'get_ledger_summary',
    'get_player_row',

    # Data
    'export_filename',
    'export_ledger',
    'import_ledger',
    'reset_ledger',
]
