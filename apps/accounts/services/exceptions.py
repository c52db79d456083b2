"""Errors raised while signing organisers up and in."""


class AccountsServiceError(Exception):
    """Base exception for organiser account services."""
    pass


class OrganiserRegistrationError(AccountsServiceError):
    """Raised when an organiser can't be registered (e.g. email taken)."""
    pass


class InvalidCredentialsError(AccountsServiceError):
    pass


class InactiveOrganiserError(AccountsServiceError):
    """Raised when a deactivated organiser tries to sign in."""
    pass
