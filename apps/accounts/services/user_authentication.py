"""Organiser sign-in."""

import logging

from django.db import transaction
from django.contrib.auth import get_user_model
from django.utils import timezone

from .exceptions import InvalidCredentialsError, InactiveOrganiserError

User = get_user_model()
logger = logging.getLogger(__name__)


@transaction.atomic
def authenticate_user(*, email: str, password: str) -> User:
    """
    Sign an organiser in and stamp ``last_login``.

    The email match is case-insensitive. The organiser row is locked while
    ``last_login`` is written.

    Raises:
        InvalidCredentialsError: If no organiser has this email or the
            password is wrong
        InactiveOrganiserError: If the organiser has been deactivated
    """
    try:
        user = (
            User.objects
            .select_for_update()
            .get(email__iexact=email)
        )
    except User.DoesNotExist:
        raise InvalidCredentialsError("Invalid email or password")

    if not user.check_password(password):
        raise InvalidCredentialsError("Invalid email or password")

    if not user.is_active:
        logger.info("Refused sign-in for deactivated organiser %s", user.id)
        raise InactiveOrganiserError("This organiser account is deactivated")

    user.last_login = timezone.now()
    user.save(update_fields=['last_login'])

    return user
