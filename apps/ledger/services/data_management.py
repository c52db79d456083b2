"""
Export, import and reset of a whole ledger.

Exports use the camelCase JSON layout of ``snapshot.app_data_to_dict``;
imports are decoded by ``LedgerImportSerializer``.
Import replaces everything the organiser has; there is no merge.
"""

import logging
from datetime import date
from typing import Optional

from django.conf import settings
from django.db import transaction
from django.utils import timezone
from rest_framework.exceptions import ValidationError

from apps.accounts.models import User
from apps.ledger import calculations
from apps.ledger.serializers import LedgerImportSerializer
from apps.ledger.snapshot import AppData, InvalidAppDataError, app_data_to_dict
from apps.ledger.storage import load_app_data, save_app_data

logger = logging.getLogger(__name__)


def export_filename(today: Optional[date] = None) -> str:
    today = today or timezone.localdate()
    return f"{settings.LEDGER_EXPORT_PREFIX}-{today.isoformat()}.json"


def export_ledger(*, owner: User) -> dict:
    """The organiser's whole ledger as a JSON-ready dict."""
    return app_data_to_dict(load_app_data(owner))


@transaction.atomic
def import_ledger(*, owner: User, payload) -> AppData:
    """
    Replace the organiser's ledger with an exported blob.

    Raises:
        ValidationError: If the blob doesn't have the export layout
        InvalidAppDataError: If its references are inconsistent or it
            clashes with another organiser's data
    """
    serializer = LedgerImportSerializer(data=payload)
    try:
        serializer.is_valid(raise_exception=True)
        data = serializer.save()
        save_app_data(owner, data)
    except (ValidationError, InvalidAppDataError) as e:
        logger.warning("Rejected ledger import for %s: %s", owner.email, e)
        raise

    logger.info(
        "Imported ledger for %s (%d player(s), %d weekend(s))",
        owner.email, len(data.players), len(data.weekends),
    )
    return data


@transaction.atomic
def reset_ledger(*, owner: User, today: Optional[date] = None) -> AppData:
    """Wipe the roster and history, leaving one fresh weekend."""
    data = calculations.initial_app_data(today or timezone.localdate())
    save_app_data(owner, data)
    logger.info("Reset ledger for %s", owner.email)
    return data
