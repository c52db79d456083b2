"""Read-only ledger views: per-player rows and period totals."""

from dataclasses import dataclass
from typing import Dict, List, Optional

from apps.accounts.models import User
from apps.ledger import calculations
from apps.ledger.calculations import LedgerRow
from apps.ledger.snapshot import WeekendRecord
from apps.ledger.storage import load_app_data

from .weekend_management import require_weekend


@dataclass(frozen=True)
class LedgerSummary:
    weekend: WeekendRecord
    is_current: bool
    rows: List[LedgerRow]
    counts: Dict[str, int]
    total_due: float
    total_paid: float
    total_outstanding: float


def _matches_search(row: LedgerRow, search: str) -> bool:
    player = row.player
    haystack = (
        f"{player.first_name} {player.last_name}",
        player.nickname,
        player.mobile,
    )
    return any(search in value.lower() for value in haystack)


def get_ledger_summary(
    *,
    owner: User,
    weekend_id=None,
    search: str = ''
) -> LedgerSummary:
    """
    Ledger rows for a weekend (the current one by default).

    ``search`` filters rows by name, nickname or mobile; counts and totals
    cover the filtered rows.

    Raises:
        WeekendNotFoundError: If ``weekend_id`` isn't in the organiser's ledger
    """
    data = load_app_data(owner)
    if weekend_id is None:
        weekend = data.current_weekend
    else:
        weekend = require_weekend(data, weekend_id)

    rows = calculations.ledger_rows(data, weekend.id)

    search = (search or '').strip().lower()
    if search:
        rows = [row for row in rows if _matches_search(row, search)]

    return LedgerSummary(
        weekend=weekend,
        is_current=weekend.id == data.current_weekend_id,
        rows=rows,
        counts=calculations.status_counts(rows),
        total_due=sum(row.total_due for row in rows),
        total_paid=sum(row.amount_paid for row in rows),
        total_outstanding=sum(row.current_balance for row in rows),
    )


def get_player_row(*, owner: User, player_id, weekend_id=None) -> Optional[LedgerRow]:
    """
    One player's row, or None if the player isn't on the roster.

    Raises:
        WeekendNotFoundError: If ``weekend_id`` isn't in the organiser's ledger
    """
    data = load_app_data(owner)
    player = data.get_player(str(player_id))
    if player is None:
        return None

    weekend = data.current_weekend
    if weekend_id is not None:
        weekend = require_weekend(data, weekend_id)
    return calculations.ledger_row(data, player, weekend.id)
