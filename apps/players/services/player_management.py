"""
Player management service.

Handles roster CRUD. Deleting a player also removes them from every
match they played and deletes their payment records.
"""

import logging
from typing import Optional
from uuid import UUID

from django.db import transaction
from django.db.models import Q, QuerySet, Value
from django.db.models.functions import Concat

from apps.accounts.models import User
from apps.ledger.calculations import remove_player
from apps.ledger.storage import load_app_data, save_app_data
from apps.players.models import Player

from .exceptions import PlayerNotFoundError

logger = logging.getLogger(__name__)

EDITABLE_FIELDS = (
    'first_name',
    'last_name',
    'nickname',
    'mobile',
    'balance',
    'arrears',
    'advance_payment',
    'regular',
)


def create_player(
    *,
    owner: User,
    first_name: str,
    last_name: str = '',
    nickname: str = '',
    mobile: str = '',
    balance: float = 0.0,
    arrears: Optional[float] = None,
    advance_payment: Optional[float] = None,
    regular: bool = False
) -> Player:
    """Add a player to the organiser's roster."""
    return Player.objects.create(
        owner=owner,
        first_name=first_name.strip(),
        last_name=last_name.strip(),
        nickname=nickname.strip(),
        mobile=mobile.strip(),
        balance=balance,
        arrears=arrears,
        advance_payment=advance_payment,
        regular=regular,
    )


def get_player_by_id(*, owner: User, player_id: UUID) -> Player:
    """
    Get one of the organiser's players.

    Raises:
        PlayerNotFoundError: If the player doesn't exist or isn't owned by ``owner``
    """
    try:
        return Player.objects.get(id=player_id, owner=owner)
    except Player.DoesNotExist:
        raise PlayerNotFoundError(f"Player with ID {player_id} not found")


@transaction.atomic
def update_player(*, owner: User, player_id: UUID, **changes) -> Player:
    """
    Update roster fields of a player.

    Only fields in ``EDITABLE_FIELDS`` are applied; text fields are stripped.
    Editing ``balance`` overwrites the base balance directly.
    """
    try:
        player = Player.objects.select_for_update().get(id=player_id, owner=owner)
    except Player.DoesNotExist:
        raise PlayerNotFoundError(f"Player with ID {player_id} not found")

    update_fields = []
    for field, value in changes.items():
        if field not in EDITABLE_FIELDS:
            continue
        if isinstance(value, str):
            value = value.strip()
        setattr(player, field, value)
        update_fields.append(field)

    if update_fields:
        player.save(update_fields=update_fields + ['updated_at'])

    return player


@transaction.atomic
def delete_player(*, owner: User, player_id: UUID) -> None:
    """
    Delete a player everywhere.

    The player is dropped from the roster, from every match they played
    and from every payment list; the remaining participants' amounts due
    are left untouched.
    """
    player = get_player_by_id(owner=owner, player_id=player_id)
    match_count = player.matches.count()

    data = load_app_data(owner)
    save_app_data(owner, remove_player(data, str(player.id)))

    logger.info(
        "Deleted player %s (removed from %d match(es))", player_id, match_count
    )


def search_players(
    *,
    owner: User,
    search: str = '',
    regular: Optional[bool] = None
) -> QuerySet:
    """
    List the organiser's players, optionally filtered.

    ``search`` matches first/last name, nickname or mobile (case-insensitive).
    """
    queryset = Player.objects.filter(owner=owner)

    search = (search or '').strip()
    if search:
        queryset = queryset.annotate(
            full_name=Concat('first_name', Value(' '), 'last_name')
        ).filter(
            Q(full_name__icontains=search) |
            Q(nickname__icontains=search) |
            Q(mobile__icontains=search)
        )

    if regular is not None:
        queryset = queryset.filter(regular=regular)

    return queryset
