"""
Weekend (period) management service.

Weekends are only ever appended: advancing creates the weekend seven days
after the current one and moves the current pointer to it.
"""

import logging
from typing import List

from django.db import transaction

from apps.accounts.models import User
from apps.ledger import calculations
from apps.ledger.snapshot import AppData, WeekendRecord
from apps.ledger.storage import load_app_data, save_app_data

from .exceptions import WeekendNotFoundError

logger = logging.getLogger(__name__)


def require_weekend(data: AppData, weekend_id) -> WeekendRecord:
    weekend = data.get_weekend(str(weekend_id))
    if weekend is None:
        raise WeekendNotFoundError(f"Weekend with ID {weekend_id} not found")
    return weekend


def get_current_weekend(*, owner: User) -> WeekendRecord:
    """The organiser's current weekend (created on first use)."""
    return load_app_data(owner).current_weekend


def get_weekend(*, owner: User, weekend_id) -> WeekendRecord:
    """
    Get one of the organiser's weekends.

    Raises:
        WeekendNotFoundError: If the weekend isn't in the organiser's ledger
    """
    return require_weekend(load_app_data(owner), weekend_id)


def list_weekends(*, owner: User) -> List[WeekendRecord]:
    """All weekends, most recent first."""
    data = load_app_data(owner)
    return sorted(data.weekends, key=lambda w: w.start_date, reverse=True)


@transaction.atomic
def advance_weekend(*, owner: User) -> WeekendRecord:
    """Start the next weekend and make it current."""
    data = calculations.advance_period(load_app_data(owner))
    save_app_data(owner, data)

    weekend = data.current_weekend
    logger.info("Advanced ledger of %s to weekend %s", owner.email, weekend.start_date)
    return weekend
