"""
Payment management service.

Single-payment edits (record an amount, toggle paid/unpaid) work on any
weekend. The per-player shortcuts (settle, outstanding override) act on the
current weekend only.
"""

import logging

from django.db import transaction

from apps.accounts.models import User
from apps.ledger import calculations
from apps.ledger.calculations import LedgerRow
from apps.ledger.snapshot import AppData, PaymentRecord
from apps.ledger.storage import load_app_data, save_app_data

from .exceptions import PaymentNotFoundError, PlayerNotInLedgerError

logger = logging.getLogger(__name__)


def _edit_payment(owner: User, payment_id, fn) -> PaymentRecord:
    data = load_app_data(owner)
    payment_id = str(payment_id)

    for weekend in data.weekends:
        if calculations.find_weekend_payment(weekend, payment_id) is None:
            continue
        weekend = calculations.map_payments(weekend, fn, payment_id=payment_id)
        save_app_data(owner, calculations.replace_weekend(data, weekend))
        return calculations.find_weekend_payment(weekend, payment_id)

    raise PaymentNotFoundError(f"Payment with ID {payment_id} not found")


def _require_player(data: AppData, player_id):
    player = data.get_player(str(player_id))
    if player is None:
        raise PlayerNotInLedgerError(f"Player with ID {player_id} not found")
    return player


@transaction.atomic
def record_payment(*, owner: User, payment_id, amount_paid: float) -> PaymentRecord:
    """
    Set the amount paid against one payment and re-derive its status.

    Raises:
        PaymentNotFoundError: If the payment isn't in the organiser's ledger
    """
    return _edit_payment(
        owner,
        payment_id,
        lambda p: calculations.set_amount_paid(p, amount_paid),
    )


@transaction.atomic
def toggle_payment(*, owner: User, payment_id) -> PaymentRecord:
    """Mark one payment fully paid, or back to unpaid if it already is."""
    return _edit_payment(owner, payment_id, calculations.toggle_payment)


@transaction.atomic
def settle_player(*, owner: User, player_id, paid=None) -> LedgerRow:
    """
    Mark a player fully paid or unpaid for the current weekend.

    ``paid=None`` toggles based on the player's current status. Overwrites
    the player's base balance (see ``calculations.settle_player``).

    Raises:
        PlayerNotInLedgerError: If the player isn't on the roster
    """
    data = load_app_data(owner)
    player = _require_player(data, player_id)

    if paid is None:
        data = calculations.toggle_settlement(data, player.id)
    else:
        data = calculations.settle_player(data, player.id, paid=paid)
    save_app_data(owner, data)

    row = calculations.ledger_row(data, data.get_player(player.id))
    logger.info(
        "Settled %s as %s (base balance now %.2f)",
        player.id, row.status, row.player.balance,
    )
    return row


@transaction.atomic
def set_outstanding(*, owner: User, player_id, outstanding: float) -> LedgerRow:
    """
    Override a player's outstanding amount for the current weekend.

    Raises:
        PlayerNotInLedgerError: If the player isn't on the roster
    """
    data = load_app_data(owner)
    player = _require_player(data, player_id)

    data = calculations.distribute_outstanding(data, player.id, outstanding)
    save_app_data(owner, data)
    return calculations.ledger_row(data, data.get_player(player.id))
