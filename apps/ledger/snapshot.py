"""
Immutable ledger snapshot.

An ``AppData`` is everything one organiser's ledger holds: the roster,
every weekend (past and current) with its matches and payments, and a
pointer to the current weekend. Ledger calculations take a snapshot and
return a new one; the storage module turns snapshots into rows and back.

``app_data_to_dict`` writes the camelCase export format
(``cricket-cost-splitter-YYYY-MM-DD.json``). Imports are decoded by
``serializers.LedgerImportSerializer``.
"""

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional, Tuple
import uuid


# Payment status
PAID = 'paid'
PENDING = 'pending'
PARTIAL = 'partial'
PAYMENT_STATUSES = (PAID, PENDING, PARTIAL)

# Match type
SATURDAY = 'Saturday'
SUNDAY = 'Sunday'
WEEKDAY = 'Weekday'
MATCH_TYPES = (SATURDAY, SUNDAY, WEEKDAY)

# Club
MICC = 'MICC'
SADHOOZ = 'Sadhooz'
CLUBS = (MICC, SADHOOZ)


class InvalidAppDataError(ValueError):
    """Raised when a ledger snapshot is inconsistent or can't be stored."""
    pass


@dataclass(frozen=True)
class PlayerRecord:
    id: str
    first_name: str
    last_name: str = ''
    nickname: str = ''
    mobile: str = ''
    balance: float = 0.0
    arrears: Optional[float] = None
    advance_payment: Optional[float] = None
    regular: bool = False

    @property
    def display_name(self) -> str:
        if self.nickname.strip():
            return self.nickname.strip()
        return f"{self.first_name} {self.last_name}".strip()


@dataclass(frozen=True)
class PaymentRecord:
    id: str
    player_id: str
    match_id: str
    amount_due: float
    amount_paid: float = 0.0
    status: str = PENDING
    date: Optional[datetime] = None


@dataclass(frozen=True)
class MatchRecord:
    id: str
    date: date
    club: str
    type: str
    ground_cost: float = 0.0
    cafeteria_cost: float = 0.0
    player_ids: Tuple[str, ...] = ()
    payments: Tuple[PaymentRecord, ...] = ()


@dataclass(frozen=True)
class WeekendRecord:
    id: str
    start_date: date
    saturday_match: Optional[MatchRecord] = None
    sunday_match: Optional[MatchRecord] = None
    weekday_matches: Tuple[MatchRecord, ...] = ()

    @property
    def matches(self) -> Tuple[MatchRecord, ...]:
        """Saturday, Sunday, then weekday matches; absent slots skipped."""
        slots = (self.saturday_match, self.sunday_match)
        return tuple(m for m in slots if m is not None) + self.weekday_matches

    def get_match(self, match_id: str) -> Optional[MatchRecord]:
        for match in self.matches:
            if match.id == match_id:
                return match
        return None


@dataclass(frozen=True)
class AppData:
    players: Tuple[PlayerRecord, ...]
    weekends: Tuple[WeekendRecord, ...]
    current_weekend_id: str

    def get_player(self, player_id: str) -> Optional[PlayerRecord]:
        for player in self.players:
            if player.id == player_id:
                return player
        return None

    def get_weekend(self, weekend_id: str) -> Optional[WeekendRecord]:
        for weekend in self.weekends:
            if weekend.id == weekend_id:
                return weekend
        return None

    @property
    def current_weekend(self) -> Optional[WeekendRecord]:
        return self.get_weekend(self.current_weekend_id)


def new_id() -> str:
    return str(uuid.uuid4())


# =============================================================================
# Consistency
# =============================================================================

def check_references(data: AppData) -> None:
    """Identifiers are unique and every player reference resolves."""
    player_ids = [p.id for p in data.players]
    if len(set(player_ids)) != len(player_ids):
        raise InvalidAppDataError("Duplicate player id")

    weekend_ids = [w.id for w in data.weekends]
    if len(set(weekend_ids)) != len(weekend_ids):
        raise InvalidAppDataError("Duplicate weekend id")

    if data.current_weekend is None:
        raise InvalidAppDataError("currentWeekendId does not match any weekend")

    known_players = set(player_ids)
    match_ids = set()
    payment_ids = set()
    for weekend in data.weekends:
        for match in weekend.matches:
            if match.id in match_ids:
                raise InvalidAppDataError(f"Duplicate match id {match.id}")
            match_ids.add(match.id)

            unknown = set(match.player_ids) - known_players
            if unknown:
                raise InvalidAppDataError(
                    f"Match {match.id} references unknown player(s): {sorted(unknown)}"
                )

            payers = set()
            for payment in match.payments:
                if payment.id in payment_ids:
                    raise InvalidAppDataError(f"Duplicate payment id {payment.id}")
                payment_ids.add(payment.id)
                if payment.player_id not in known_players:
                    raise InvalidAppDataError(
                        f"Payment {payment.id} references unknown player {payment.player_id}"
                    )
                if payment.player_id in payers:
                    raise InvalidAppDataError(
                        f"Match {match.id} has two payments for player {payment.player_id}"
                    )
                payers.add(payment.player_id)


# =============================================================================
# JSON export
# =============================================================================

def _payment_to_dict(payment: PaymentRecord) -> dict:
    return {
        'id': payment.id,
        'playerId': payment.player_id,
        'matchId': payment.match_id,
        'amountDue': payment.amount_due,
        'amountPaid': payment.amount_paid,
        'status': payment.status,
        'date': payment.date.isoformat() if payment.date else None,
    }


def _match_to_dict(match: Optional[MatchRecord]) -> Optional[dict]:
    if match is None:
        return None
    return {
        'id': match.id,
        'date': match.date.isoformat(),
        'club': match.club,
        'type': match.type,
        'groundCost': match.ground_cost,
        'cafeteriaCost': match.cafeteria_cost,
        'playerIds': list(match.player_ids),
        'payments': [_payment_to_dict(p) for p in match.payments],
    }


def app_data_to_dict(data: AppData) -> dict:
    """Encode a snapshot in the camelCase export format."""
    return {
        'players': [
            {
                'id': p.id,
                'firstName': p.first_name,
                'lastName': p.last_name,
                'nickname': p.nickname,
                'mobile': p.mobile,
                'balance': p.balance,
                'arrears': p.arrears,
                'advancePayment': p.advance_payment,
                'regular': p.regular,
            }
            for p in data.players
        ],
        'weekends': [
            {
                'id': w.id,
                'startDate': w.start_date.isoformat(),
                'saturdayMatch': _match_to_dict(w.saturday_match),
                'sundayMatch': _match_to_dict(w.sunday_match),
                'weekdayMatches': [_match_to_dict(m) for m in w.weekday_matches],
            }
            for w in data.weekends
        ],
        'currentWeekendId': data.current_weekend_id,
    }
