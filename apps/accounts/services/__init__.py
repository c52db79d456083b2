"""Organiser sign-up and sign-in."""

from .exceptions import (
    AccountsServiceError,
    OrganiserRegistrationError,
    InvalidCredentialsError,
    InactiveOrganiserError,
)
from .user_registration import register_user
from .user_authentication import authenticate_user

__all__ = [
    'AccountsServiceError',
    'OrganiserRegistrationError',
    'InvalidCredentialsError',
    'InactiveOrganiserError',
    'register_user',
    'authenticate_user',
]
