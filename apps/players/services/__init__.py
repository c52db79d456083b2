"""
Players app services layer.

Roster CRUD for one organiser. All lookups are scoped to the owner.
"""

from .exceptions import (
    PlayersServiceError,
    PlayerNotFoundError,
)

from .player_management import (
    create_player,
    update_player,
    delete_player,
    get_player_by_id,
    search_players,
)


__all__ = [
    # Exceptions
    'PlayersServiceError',
    'PlayerNotFoundError',

    # Player Management
    'create_player',
    'update_player',
    'delete_player',
    'get_player_by_id',
    'search_players',
]
