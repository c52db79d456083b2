"""
API exceptions for ledger app.

Service-layer errors are translated into these in the views.
"""
from rest_framework.exceptions import APIException


class WeekendNotFoundAPIError(APIException):
    """Weekend not found."""
    status_code = 404
    default_detail = 'Weekend not found.'
    default_code = 'weekend_not_found'


class MatchNotFoundAPIError(APIException):
    """Match not found."""
    status_code = 404
    default_detail = 'Match not found.'
    default_code = 'match_not_found'


class PaymentNotFoundAPIError(APIException):
    """Payment not found."""
    status_code = 404
    default_detail = 'Payment not found.'
    default_code = 'payment_not_found'


class PlayerNotInLedgerAPIError(APIException):
    """Player not on the roster."""
    status_code = 404
    default_detail = 'Player not found.'
    default_code = 'player_not_found'


class InvalidMatchAPIError(APIException):
    """Match data rejected."""
    status_code = 400
    default_detail = 'Invalid match data.'
    default_code = 'invalid_match'


class InvalidLedgerDataAPIError(APIException):
    """Imported ledger data rejected."""
    status_code = 400
    default_detail = 'Invalid ledger data.'
    default_code = 'invalid_ledger_data'
