from datetime import timedelta
from django.conf import settings
from django.core.validators import MinValueValidator
from django.db import models
from django.utils import timezone
import uuid

from . import snapshot


class PaymentStatus(models.TextChoices):
    PAID = snapshot.PAID, 'Paid'
    PARTIAL = snapshot.PARTIAL, 'Partial'
    PENDING = snapshot.PENDING, 'Pending'


class MatchType(models.TextChoices):
    SATURDAY = snapshot.SATURDAY, 'Saturday'
    SUNDAY = snapshot.SUNDAY, 'Sunday'
    WEEKDAY = snapshot.WEEKDAY, 'Weekday'


class Club(models.TextChoices):
    MICC = snapshot.MICC, 'MICC'
    SADHOOZ = snapshot.SADHOOZ, 'Sadhooz'


class Weekend(models.Model):
    """
    One ledger period, anchored on its Saturday.

    Each organiser has exactly one current weekend. Past weekends are kept
    forever and feed every player's previous balance.
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    owner = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name='weekends'
    )

    start_date = models.DateField()
    is_current = models.BooleanField(default=False)

    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'weekends'
        ordering = ['start_date', 'created_at']
        indexes = [
            models.Index(fields=['owner', 'start_date'], name='weekends_owner_start_idx'),
        ]
        constraints = [
            models.UniqueConstraint(
                fields=['owner'],
                condition=models.Q(is_current=True),
                name='one_current_weekend_per_owner',
            ),
        ]

    def __str__(self):
        return f"Weekend of {self.start_date}"

    @property
    def end_date(self):
        return self.start_date + timedelta(days=1)


class Match(models.Model):
    """
    A fixture with its costs and participants.

    Payments are rebuilt whenever the match is saved through the ledger
    services; costs are split evenly across participants.
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    weekend = models.ForeignKey(
        Weekend,
        on_delete=models.CASCADE,
        related_name='matches'
    )

    type = models.CharField(max_length=10, choices=MatchType.choices)
    club = models.CharField(max_length=10, choices=Club.choices)
    date = models.DateField()

    ground_cost = models.FloatField(default=0.0, validators=[MinValueValidator(0)])
    cafeteria_cost = models.FloatField(default=0.0, validators=[MinValueValidator(0)])

    players = models.ManyToManyField(
        'players.Player',
        related_name='matches',
        blank=True
    )

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'matches'
        ordering = ['date', 'created_at']
        constraints = [
            models.UniqueConstraint(
                fields=['weekend', 'type'],
                condition=models.Q(type__in=[snapshot.SATURDAY, snapshot.SUNDAY]),
                name='one_weekend_match_per_day',
            ),
        ]
        verbose_name_plural = 'matches'

    def __str__(self):
        return f"{self.type} at {self.club} on {self.date}"

    @property
    def total_cost(self):
        return self.ground_cost + self.cafeteria_cost


class Payment(models.Model):
    """One player's share of one match."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    match = models.ForeignKey(
        Match,
        on_delete=models.CASCADE,
        related_name='payments'
    )

    player = models.ForeignKey(
        'players.Player',
        on_delete=models.CASCADE,
        related_name='payments'
    )

    # Fixed when the match is saved; only a match edit changes it
    amount_due = models.FloatField(default=0.0)
    amount_paid = models.FloatField(default=0.0)

    status = models.CharField(
        max_length=10,
        choices=PaymentStatus.choices,
        default=PaymentStatus.PENDING
    )

    date = models.DateTimeField(default=timezone.now)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'payments'
        ordering = ['date']
        unique_together = [['match', 'player']]
        indexes = [
            models.Index(fields=['player', 'status'], name='payments_player_status_idx'),
        ]

    def __str__(self):
        return f"{self.player} - {self.amount_paid}/{self.amount_due} ({self.status})"

    @property
    def outstanding(self):
        return self.amount_due - self.amount_paid
