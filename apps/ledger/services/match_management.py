"""
Match management service.

Saturday and Sunday are single slots per weekend: saving a Saturday match
for a weekend that already has one edits it. Weekday matches are appended.
Every save rebuilds the match's payments from its participants and costs.
"""

import logging
from dataclasses import replace
from datetime import date, timedelta
from typing import Iterable, Optional

from django.conf import settings
from django.db import transaction
from django.utils import timezone

from apps.accounts.models import User
from apps.ledger import calculations
from apps.ledger.snapshot import (
    SATURDAY,
    SUNDAY,
    AppData,
    MatchRecord,
    WeekendRecord,
    new_id,
)
from apps.ledger.storage import load_app_data, save_app_data

from .exceptions import (
    InvalidMatchError,
    MatchNotFoundError,
    UnknownParticipantError,
)
from .weekend_management import require_weekend

logger = logging.getLogger(__name__)


def default_date(weekend: WeekendRecord, match_type: str, today: date) -> date:
    if match_type == SATURDAY:
        return weekend.start_date
    if match_type == SUNDAY:
        return weekend.start_date + timedelta(days=1)
    return today


def default_club(match_type: str) -> str:
    if match_type == SUNDAY:
        return settings.LEDGER_SUNDAY_CLUB
    return settings.LEDGER_SATURDAY_CLUB


def find_match(data: AppData, match_id):
    """
    Locate a match anywhere in the ledger.

    Returns:
        (weekend, match) tuple

    Raises:
        MatchNotFoundError: If no weekend holds the match
    """
    for weekend in data.weekends:
        match = weekend.get_match(str(match_id))
        if match is not None:
            return weekend, match
    raise MatchNotFoundError(f"Match with ID {match_id} not found")


def _participants(data: AppData, player_ids: Iterable) -> tuple:
    ids = tuple(dict.fromkeys(str(pid) for pid in player_ids))
    roster = {p.id for p in data.players}
    unknown = [pid for pid in ids if pid not in roster]
    if unknown:
        raise UnknownParticipantError(
            f"Players not on the roster: {', '.join(unknown)}"
        )
    return ids


def _store(owner: User, data: AppData, weekend: WeekendRecord, match: MatchRecord) -> MatchRecord:
    match = calculations.rebuild_payments(match, now=timezone.now())
    weekend = calculations.place_match(weekend, match)
    save_app_data(owner, calculations.replace_weekend(data, weekend))
    return match


@transaction.atomic
def save_match(
    *,
    owner: User,
    weekend_id,
    match_type: str,
    ground_cost: float,
    cafeteria_cost: float,
    player_ids: Iterable,
    club: Optional[str] = None,
    match_date: Optional[date] = None
) -> MatchRecord:
    """
    Create or edit a weekend's match.

    A Saturday or Sunday match replaces the settings of the weekend's
    existing match of that type, keeping its payments' amounts paid.
    Date and club default to the slot's usual values.

    Raises:
        WeekendNotFoundError: If the weekend isn't in the organiser's ledger
        UnknownParticipantError: If a participant isn't on the roster
    """
    data = load_app_data(owner)
    weekend = require_weekend(data, weekend_id)
    participants = _participants(data, player_ids)

    existing = None
    if match_type == SATURDAY:
        existing = weekend.saturday_match
    elif match_type == SUNDAY:
        existing = weekend.sunday_match

    if existing is None:
        existing = MatchRecord(
            id=new_id(),
            date=default_date(weekend, match_type, timezone.localdate()),
            club=default_club(match_type),
            type=match_type,
        )

    match = replace(
        existing,
        club=club or existing.club,
        date=match_date or existing.date,
        ground_cost=ground_cost,
        cafeteria_cost=cafeteria_cost,
        player_ids=participants,
    )
    match = _store(owner, data, weekend, match)

    logger.info(
        "Saved %s match %s (%d player(s), %.2f per head)",
        match.type, match.id, len(match.player_ids), calculations.per_head_cost(match),
    )
    return match


@transaction.atomic
def update_match(
    *,
    owner: User,
    match_id,
    ground_cost: float,
    cafeteria_cost: float,
    player_ids: Iterable,
    club: Optional[str] = None,
    match_date: Optional[date] = None,
    match_type: Optional[str] = None
) -> MatchRecord:
    """
    Edit an existing match by id.

    Raises:
        MatchNotFoundError: If the match isn't in the organiser's ledger
        InvalidMatchError: If ``match_type`` differs from the match's type
        UnknownParticipantError: If a participant isn't on the roster
    """
    data = load_app_data(owner)
    weekend, existing = find_match(data, match_id)

    if match_type is not None and match_type != existing.type:
        raise InvalidMatchError("A match's type cannot be changed")

    match = replace(
        existing,
        club=club or existing.club,
        date=match_date or existing.date,
        ground_cost=ground_cost,
        cafeteria_cost=cafeteria_cost,
        player_ids=_participants(data, player_ids),
    )
    return _store(owner, data, weekend, match)


@transaction.atomic
def delete_match(*, owner: User, match_id) -> None:
    """
    Delete a match and its payments.

    Raises:
        MatchNotFoundError: If the match isn't in the organiser's ledger
    """
    data = load_app_data(owner)
    weekend, match = find_match(data, match_id)
    weekend = calculations.remove_match(weekend, match.id)
    save_app_data(owner, calculations.replace_weekend(data, weekend))
    logger.info("Deleted %s match %s", match.type, match.id)
