"""
Ledger arithmetic over immutable snapshots.

Every function here is pure: it takes records from ``snapshot`` and
returns new records. Nothing touches the database, and nothing raises on
ordinary input (zero participants, zero totals and missing payments all
have a defined result).

Balances are positive when the player owes money. Amounts are floats and
are never rounded.
"""

from dataclasses import dataclass, replace
from datetime import date, datetime, timedelta
from typing import Callable, Dict, Iterable, List, Optional, Tuple

from .snapshot import (
    PAID,
    PENDING,
    PARTIAL,
    SATURDAY,
    SUNDAY,
    AppData,
    MatchRecord,
    PaymentRecord,
    PlayerRecord,
    WeekendRecord,
    new_id,
)

PERIOD_LENGTH = timedelta(days=7)


# =============================================================================
# Cost splitting
# =============================================================================

def per_head_cost(match: MatchRecord) -> float:
    """Ground plus cafeteria cost split evenly; 0 when nobody played."""
    if not match.player_ids:
        return 0.0
    return (match.ground_cost + match.cafeteria_cost) / len(match.player_ids)


def player_due(match: MatchRecord, player_id: str) -> float:
    if player_id not in match.player_ids:
        return 0.0
    return per_head_cost(match)


def find_payment(match: Optional[MatchRecord], player_id: str) -> Optional[PaymentRecord]:
    if match is None:
        return None
    for payment in match.payments:
        if payment.player_id == player_id:
            return payment
    return None


# =============================================================================
# Payment status
# =============================================================================

def derive_status(amount_paid: float, amount_due: float) -> str:
    if amount_paid == 0:
        return PENDING
    if amount_paid >= amount_due:
        return PAID
    return PARTIAL


def set_amount_paid(payment: PaymentRecord, amount_paid: float) -> PaymentRecord:
    return replace(
        payment,
        amount_paid=amount_paid,
        status=derive_status(amount_paid, payment.amount_due),
    )


def mark_paid(payment: PaymentRecord) -> PaymentRecord:
    return replace(payment, amount_paid=payment.amount_due, status=PAID)


def mark_unpaid(payment: PaymentRecord) -> PaymentRecord:
    return replace(payment, amount_paid=0.0, status=PENDING)


def toggle_payment(payment: PaymentRecord) -> PaymentRecord:
    """Fully paid becomes unpaid; anything else becomes fully paid."""
    if payment.status == PAID:
        return mark_unpaid(payment)
    return mark_paid(payment)


# =============================================================================
# Matches
# =============================================================================

def rebuild_payments(match: MatchRecord, *, now: datetime) -> MatchRecord:
    """
    Recreate a match's payments after its costs or participants changed.

    Existing payments keep their id, amount paid and timestamp but get the
    new amount due and a re-derived status. New participants get a pending
    payment stamped ``now``; payments of removed participants are dropped.
    """
    amount_due = per_head_cost(match)
    payments = []
    for player_id in match.player_ids:
        existing = find_payment(match, player_id)
        if existing is not None:
            payments.append(replace(
                existing,
                match_id=match.id,
                amount_due=amount_due,
                status=derive_status(existing.amount_paid, amount_due),
            ))
        else:
            payments.append(PaymentRecord(
                id=new_id(),
                player_id=player_id,
                match_id=match.id,
                amount_due=amount_due,
                amount_paid=0.0,
                status=PENDING,
                date=now,
            ))
    return replace(match, payments=tuple(payments))


def place_match(weekend: WeekendRecord, match: MatchRecord) -> WeekendRecord:
    """Put ``match`` in its slot, replacing a match with the same id or slot."""
    if match.type == SATURDAY:
        return replace(weekend, saturday_match=match)
    if match.type == SUNDAY:
        return replace(weekend, sunday_match=match)

    weekday = list(weekend.weekday_matches)
    for index, existing in enumerate(weekday):
        if existing.id == match.id:
            weekday[index] = match
            break
    else:
        weekday.append(match)
    return replace(weekend, weekday_matches=tuple(weekday))


def remove_match(weekend: WeekendRecord, match_id: str) -> WeekendRecord:
    saturday = weekend.saturday_match
    sunday = weekend.sunday_match
    return replace(
        weekend,
        saturday_match=None if saturday and saturday.id == match_id else saturday,
        sunday_match=None if sunday and sunday.id == match_id else sunday,
        weekday_matches=tuple(m for m in weekend.weekday_matches if m.id != match_id),
    )


def map_payments(
    weekend: WeekendRecord,
    fn: Callable[[PaymentRecord], PaymentRecord],
    *,
    player_id: Optional[str] = None,
    payment_id: Optional[str] = None
) -> WeekendRecord:
    """Apply ``fn`` to the weekend's payments matching the given filters."""

    def apply(match: Optional[MatchRecord]) -> Optional[MatchRecord]:
        if match is None:
            return None
        payments = tuple(
            fn(p)
            if (player_id is None or p.player_id == player_id)
            and (payment_id is None or p.id == payment_id)
            else p
            for p in match.payments
        )
        return replace(match, payments=payments)

    return replace(
        weekend,
        saturday_match=apply(weekend.saturday_match),
        sunday_match=apply(weekend.sunday_match),
        weekday_matches=tuple(apply(m) for m in weekend.weekday_matches),
    )


def find_weekend_payment(weekend: WeekendRecord, payment_id: str) -> Optional[PaymentRecord]:
    for match in weekend.matches:
        for payment in match.payments:
            if payment.id == payment_id:
                return payment
    return None


# =============================================================================
# Balances
# =============================================================================

def match_balance(match: MatchRecord, player_id: str) -> float:
    """What one match adds to a player's balance."""
    payment = find_payment(match, player_id)
    if payment is not None:
        return payment.amount_due - payment.amount_paid
    return player_due(match, player_id)


def previous_balance(data: AppData, player: PlayerRecord, weekend_id: str) -> float:
    """
    Base balance plus the outstanding amount of every match outside
    ``weekend_id``.

    A payment record contributes ``amount_due - amount_paid``; a match the
    player took part in without a payment record contributes its per-head
    cost. The whole history is replayed on every call.
    """
    balance = player.balance
    for weekend in data.weekends:
        if weekend.id == weekend_id:
            continue
        for match in weekend.matches:
            balance += match_balance(match, player.id)
    return balance


def current_payments(weekend: WeekendRecord, player_id: str) -> List[PaymentRecord]:
    payments = []
    for match in weekend.matches:
        payment = find_payment(match, player_id)
        if payment is not None:
            payments.append(payment)
    return payments


def aggregate_status(payments: Iterable[PaymentRecord]) -> str:
    """
    One status for a player's payments in a period.

    No payments is pending, all paid is paid, any money received is
    partial, otherwise pending.
    """
    statuses = [p.status for p in payments]
    if not statuses:
        return PENDING
    if all(s == PAID for s in statuses):
        return PAID
    if any(s in (PAID, PARTIAL) for s in statuses):
        return PARTIAL
    return PENDING


@dataclass(frozen=True)
class LedgerRow:
    """One player's position in a period."""

    player: PlayerRecord
    previous_balance: float
    saturday_payment: Optional[PaymentRecord]
    sunday_payment: Optional[PaymentRecord]
    weekday_payments: Tuple[PaymentRecord, ...]
    total_due: float
    amount_paid: float
    current_balance: float
    status: str


def ledger_row(
    data: AppData,
    player: PlayerRecord,
    weekend_id: Optional[str] = None
) -> LedgerRow:
    weekend_id = weekend_id or data.current_weekend_id
    weekend = data.get_weekend(weekend_id)

    payments = current_payments(weekend, player.id) if weekend else []
    weekday_payments = tuple(
        p for p in (
            find_payment(m, player.id) for m in (weekend.weekday_matches if weekend else ())
        )
        if p is not None
    )

    previous = previous_balance(data, player, weekend_id)
    total_due = sum(p.amount_due for p in payments)
    amount_paid = sum(p.amount_paid for p in payments)

    return LedgerRow(
        player=player,
        previous_balance=previous,
        saturday_payment=find_payment(weekend.saturday_match, player.id) if weekend else None,
        sunday_payment=find_payment(weekend.sunday_match, player.id) if weekend else None,
        weekday_payments=weekday_payments,
        total_due=total_due,
        amount_paid=amount_paid,
        current_balance=previous + (total_due - amount_paid),
        status=aggregate_status(payments),
    )


def ledger_rows(data: AppData, weekend_id: Optional[str] = None) -> List[LedgerRow]:
    return [ledger_row(data, player, weekend_id) for player in data.players]


def status_counts(rows: Iterable[LedgerRow]) -> Dict[str, int]:
    counts = {PAID: 0, PARTIAL: 0, PENDING: 0}
    for row in rows:
        counts[row.status] += 1
    return counts


# =============================================================================
# Snapshot edits
# =============================================================================

def replace_player(data: AppData, player: PlayerRecord) -> AppData:
    return replace(data, players=tuple(
        player if p.id == player.id else p for p in data.players
    ))


def replace_weekend(data: AppData, weekend: WeekendRecord) -> AppData:
    return replace(data, weekends=tuple(
        weekend if w.id == weekend.id else w for w in data.weekends
    ))


def settle_player(data: AppData, player_id: str, *, paid: bool) -> AppData:
    """
    Bulk "mark fully paid/unpaid" for one player in the current period.

    Paid: every current payment is marked paid and the base balance is
    reset to 0. Unpaid: every current payment is zeroed and the base
    balance becomes the player's current balance as it stood before the
    change. Per-match history is not preserved by either path.

    Unknown players and a missing current weekend leave ``data`` unchanged.
    """
    player = data.get_player(player_id)
    weekend = data.current_weekend
    if player is None or weekend is None:
        return data

    if paid:
        new_balance = 0.0
        weekend = map_payments(weekend, mark_paid, player_id=player_id)
    else:
        new_balance = ledger_row(data, player).current_balance
        weekend = map_payments(weekend, mark_unpaid, player_id=player_id)

    data = replace_weekend(data, weekend)
    return replace_player(data, replace(player, balance=new_balance))


def toggle_settlement(data: AppData, player_id: str) -> AppData:
    """Unpaid path when the player's current status is paid, otherwise paid."""
    player = data.get_player(player_id)
    if player is None:
        return data
    status = ledger_row(data, player).status
    return settle_player(data, player_id, paid=status != PAID)


def distribute_outstanding(data: AppData, player_id: str, outstanding: float) -> AppData:
    """
    Set a player's current-period outstanding amount.

    The implied paid amount (total due minus ``outstanding``) is spread over
    the current payments in proportion to their amounts due, each clamped
    to ``[0, amount_due]``. Nothing changes when the total due is 0.
    """
    weekend = data.current_weekend
    if weekend is None or data.get_player(player_id) is None:
        return data

    total_due = sum(p.amount_due for p in current_payments(weekend, player_id))
    if total_due <= 0:
        return data

    target_paid = total_due - outstanding

    def share(payment: PaymentRecord) -> PaymentRecord:
        amount = target_paid * (payment.amount_due / total_due)
        amount = max(0.0, min(amount, payment.amount_due))
        return set_amount_paid(payment, amount)

    return replace_weekend(data, map_payments(weekend, share, player_id=player_id))


def remove_player(data: AppData, player_id: str) -> AppData:
    """Drop a player from the roster, every match and every payment list."""

    def strip(match: Optional[MatchRecord]) -> Optional[MatchRecord]:
        if match is None:
            return None
        return replace(
            match,
            player_ids=tuple(pid for pid in match.player_ids if pid != player_id),
            payments=tuple(p for p in match.payments if p.player_id != player_id),
        )

    weekends = tuple(
        replace(
            w,
            saturday_match=strip(w.saturday_match),
            sunday_match=strip(w.sunday_match),
            weekday_matches=tuple(strip(m) for m in w.weekday_matches),
        )
        for w in data.weekends
    )
    return replace(
        data,
        players=tuple(p for p in data.players if p.id != player_id),
        weekends=weekends,
    )


# =============================================================================
# Periods
# =============================================================================

def weekend_anchor(day: date) -> date:
    """The Saturday on or before ``day``."""
    # Monday is 0, Saturday is 5
    return day - timedelta(days=(day.weekday() - 5) % 7)


def initial_app_data(today: date) -> AppData:
    """Empty roster and one weekend anchored on the latest Saturday."""
    weekend = WeekendRecord(id=new_id(), start_date=weekend_anchor(today))
    return AppData(players=(), weekends=(weekend,), current_weekend_id=weekend.id)


def next_weekend(weekend: WeekendRecord) -> WeekendRecord:
    return WeekendRecord(id=new_id(), start_date=weekend.start_date + PERIOD_LENGTH)


def advance_period(data: AppData) -> AppData:
    """
    Append the weekend seven days after the current one and make it current.

    Always allowed; the current weekend does not need to be settled first.
    """
    current = data.current_weekend
    if current is None:
        current = max(data.weekends, key=lambda w: w.start_date)
    upcoming = next_weekend(current)
    return replace(
        data,
        weekends=data.weekends + (upcoming,),
        current_weekend_id=upcoming.id,
    )
