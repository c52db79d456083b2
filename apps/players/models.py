from django.conf import settings
from django.db import models
import uuid


class Player(models.Model):
    """
    A cricketer on an organiser's roster.

    ``balance`` is the base balance carried from before any recorded match
    (positive = owes money, negative = overpaid). It is edited by hand and
    overwritten by the bulk settle shortcut.
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    owner = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name='players'
    )

    # Identity
    first_name = models.CharField(max_length=100)
    last_name = models.CharField(max_length=100, blank=True)
    nickname = models.CharField(max_length=100, blank=True)
    mobile = models.CharField(max_length=20, blank=True)

    # Ledger
    balance = models.FloatField(default=0.0)
    arrears = models.FloatField(null=True, blank=True)
    advance_payment = models.FloatField(null=True, blank=True)

    # Regular players are offered first when picking a match squad
    regular = models.BooleanField(default=False)

    # Timestamps
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'players'
        indexes = [
            models.Index(fields=['owner', 'created_at'], name='players_owner_created_idx'),
        ]
        ordering = ['created_at']

    def __str__(self):
        return self.get_display_name()

    def get_full_name(self):
        return f"{self.first_name} {self.last_name}".strip()

    def get_display_name(self):
        """Nickname if set, otherwise the full name."""
        if self.nickname and self.nickname.strip():
            return self.nickname.strip()
        return self.get_full_name()
