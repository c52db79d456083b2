"""
API exceptions for players app.

Service-layer errors are translated into these in the views.
"""
from rest_framework.exceptions import APIException


class PlayerNotFoundAPIError(APIException):
    """Player not found."""
    status_code = 404
    default_detail = 'Player not found.'
    default_code = 'player_not_found'
