"""Organiser sign-up."""

import logging

from django.db import transaction, IntegrityError
from django.contrib.auth import get_user_model

from .exceptions import OrganiserRegistrationError

User = get_user_model()
logger = logging.getLogger(__name__)


@transaction.atomic
def register_user(
    *,
    email: str,
    password: str,
    display_name: str = ""
) -> User:
    """
    Register a new ledger organiser.

    The organiser's ledger (first weekend) is created lazily on first access.

    Args:
        email: Organiser email, used to sign in
        password: Plain password (hashed before storing)
        display_name: Optional name shown in the admin

    Returns:
        The new organiser

    Raises:
        OrganiserRegistrationError: If the email is already registered
    """
    try:
        user = User.objects.create_user(
            email=email,
            password=password,
            display_name=display_name
        )
    except IntegrityError as e:
        raise OrganiserRegistrationError(f"Registration failed: {e}")

    logger.info("Registered organiser %s", user.id)
    return user
