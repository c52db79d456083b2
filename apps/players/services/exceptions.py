"""
Domain-specific exceptions for players app.

These exceptions represent business rule violations and should be
caught in views and converted to appropriate HTTP responses.
"""


class PlayersServiceError(Exception):
    """Base exception for all players service errors."""
    pass


class PlayerNotFoundError(PlayersServiceError):
    """Raised when a player does not exist or belongs to another organiser."""
    pass
