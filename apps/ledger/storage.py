"""
Relational storage for ledger snapshots.

``load_app_data`` reads one organiser's whole ledger into an ``AppData``;
``save_app_data`` writes a snapshot back as a whole-state replacement:
rows missing from the snapshot are deleted, the rest are upserted by id.
Both are scoped to the owning user.
"""

import logging
from datetime import date
from typing import Optional

from django.db import IntegrityError, transaction
from django.db.models import Prefetch
from django.utils import timezone

from apps.accounts.models import User
from apps.players.models import Player

from .calculations import weekend_anchor
from .models import Match, Payment, Weekend
from .snapshot import (
    SATURDAY,
    SUNDAY,
    WEEKDAY,
    AppData,
    InvalidAppDataError,
    MatchRecord,
    PaymentRecord,
    PlayerRecord,
    WeekendRecord,
    check_references,
)

logger = logging.getLogger(__name__)


# =============================================================================
# Rows -> records
# =============================================================================

def _player_record(player: Player) -> PlayerRecord:
    return PlayerRecord(
        id=str(player.id),
        first_name=player.first_name,
        last_name=player.last_name,
        nickname=player.nickname,
        mobile=player.mobile,
        balance=player.balance,
        arrears=player.arrears,
        advance_payment=player.advance_payment,
        regular=player.regular,
    )


def _payment_record(payment: Payment) -> PaymentRecord:
    return PaymentRecord(
        id=str(payment.id),
        player_id=str(payment.player_id),
        match_id=str(payment.match_id),
        amount_due=payment.amount_due,
        amount_paid=payment.amount_paid,
        status=payment.status,
        date=payment.date,
    )


def _match_record(match: Match) -> MatchRecord:
    return MatchRecord(
        id=str(match.id),
        date=match.date,
        club=match.club,
        type=match.type,
        ground_cost=match.ground_cost,
        cafeteria_cost=match.cafeteria_cost,
        player_ids=tuple(str(p.id) for p in match.players.all()),
        payments=tuple(_payment_record(p) for p in match.payments.all()),
    )


def _weekend_record(weekend: Weekend) -> WeekendRecord:
    matches = [_match_record(m) for m in weekend.matches.all()]
    return WeekendRecord(
        id=str(weekend.id),
        start_date=weekend.start_date,
        saturday_match=next((m for m in matches if m.type == SATURDAY), None),
        sunday_match=next((m for m in matches if m.type == SUNDAY), None),
        weekday_matches=tuple(m for m in matches if m.type == WEEKDAY),
    )


# =============================================================================
# Loading
# =============================================================================

@transaction.atomic
def ensure_current_weekend(owner: User, *, today: Optional[date] = None) -> Weekend:
    """
    Return the organiser's current weekend, creating the ledger if needed.

    A new ledger starts with one weekend anchored on the Saturday on or
    before ``today``.
    """
    # Serialise ledger writes per organiser
    User.objects.select_for_update().get(pk=owner.pk)

    weekend = Weekend.objects.filter(owner=owner, is_current=True).first()
    if weekend is not None:
        return weekend

    latest = Weekend.objects.filter(owner=owner).order_by('-start_date', '-created_at').first()
    if latest is not None:
        latest.is_current = True
        latest.save(update_fields=['is_current'])
        return latest

    today = today or timezone.localdate()
    weekend = Weekend.objects.create(
        owner=owner,
        start_date=weekend_anchor(today),
        is_current=True,
    )
    logger.info("Started ledger for %s at weekend %s", owner.email, weekend.start_date)
    return weekend


def load_app_data(owner: User) -> AppData:
    """Read the organiser's whole ledger as a snapshot."""
    current = ensure_current_weekend(owner)

    players = Player.objects.filter(owner=owner)
    weekends = Weekend.objects.filter(owner=owner).prefetch_related(
        Prefetch(
            'matches',
            queryset=Match.objects.prefetch_related('players', 'payments'),
        )
    )

    return AppData(
        players=tuple(_player_record(p) for p in players),
        weekends=tuple(_weekend_record(w) for w in weekends),
        current_weekend_id=str(current.id),
    )


# =============================================================================
# Saving
# =============================================================================

def _aware(value):
    if value is None:
        return timezone.now()
    if timezone.is_naive(value):
        return timezone.make_aware(value)
    return value


def _check_ownership(owner: User, player_ids, weekend_ids, match_ids, payment_ids) -> None:
    """Ids in the snapshot must not belong to another organiser's rows."""
    foreign = (
        Player.objects.filter(id__in=player_ids).exclude(owner=owner).exists()
        or Weekend.objects.filter(id__in=weekend_ids).exclude(owner=owner).exists()
        or Match.objects.filter(id__in=match_ids).exclude(weekend__owner=owner).exists()
        or Payment.objects.filter(id__in=payment_ids).exclude(
            match__weekend__owner=owner
        ).exists()
    )
    if foreign:
        raise InvalidAppDataError(
            "Ledger data reuses identifiers that belong to another organiser"
        )


def _write(owner: User, data: AppData) -> None:
    User.objects.select_for_update().get(pk=owner.pk)

    matches = [(w, m) for w in data.weekends for m in w.matches]
    player_ids = [p.id for p in data.players]
    weekend_ids = [w.id for w in data.weekends]
    match_ids = [m.id for _, m in matches]
    payment_ids = [p.id for _, m in matches for p in m.payments]

    _check_ownership(owner, player_ids, weekend_ids, match_ids, payment_ids)

    # Stale rows go first so upserts can't collide with unique constraints
    Weekend.objects.filter(owner=owner).exclude(id__in=weekend_ids).delete()
    Match.objects.filter(weekend__owner=owner).exclude(id__in=match_ids).delete()
    Payment.objects.filter(match__weekend__owner=owner).exclude(id__in=payment_ids).delete()
    Player.objects.filter(owner=owner).exclude(id__in=player_ids).delete()
    Weekend.objects.filter(owner=owner, is_current=True).update(is_current=False)

    # A payment id now paired with another match or player is recreated
    pairings = {p.id: (m.id, p.player_id) for _, m in matches for p in m.payments}
    moved = [
        payment_id
        for payment_id, match_id, player_id in Payment.objects.filter(
            match__weekend__owner=owner
        ).values_list('id', 'match_id', 'player_id')
        if pairings.get(str(payment_id)) != (str(match_id), str(player_id))
    ]
    Payment.objects.filter(id__in=moved).delete()

    for player in data.players:
        Player.objects.update_or_create(
            id=player.id,
            defaults={
                'owner': owner,
                'first_name': player.first_name,
                'last_name': player.last_name,
                'nickname': player.nickname,
                'mobile': player.mobile,
                'balance': player.balance,
                'arrears': player.arrears,
                'advance_payment': player.advance_payment,
                'regular': player.regular,
            },
        )

    for weekend in data.weekends:
        Weekend.objects.update_or_create(
            id=weekend.id,
            defaults={
                'owner': owner,
                'start_date': weekend.start_date,
                'is_current': weekend.id == data.current_weekend_id,
            },
        )

    for weekend, match in matches:
        row, _ = Match.objects.update_or_create(
            id=match.id,
            defaults={
                'weekend_id': weekend.id,
                'type': match.type,
                'club': match.club,
                'date': match.date,
                'ground_cost': match.ground_cost,
                'cafeteria_cost': match.cafeteria_cost,
            },
        )
        row.players.set(match.player_ids)

        for payment in match.payments:
            Payment.objects.update_or_create(
                id=payment.id,
                defaults={
                    'match_id': match.id,
                    'player_id': payment.player_id,
                    'amount_due': payment.amount_due,
                    'amount_paid': payment.amount_paid,
                    'status': payment.status,
                    'date': _aware(payment.date),
                },
            )


def save_app_data(owner: User, data: AppData) -> None:
    """
    Replace the organiser's ledger with ``data`` in one transaction.

    Raises:
        InvalidAppDataError: If the snapshot is inconsistent or clashes
            with another organiser's rows
    """
    check_references(data)
    try:
        with transaction.atomic():
            _write(owner, data)
    except IntegrityError as e:
        logger.warning("Rejected ledger snapshot for %s: %s", owner.email, e)
        raise InvalidAppDataError(f"Ledger data violates a storage constraint: {e}")
