import math
from datetime import timedelta
from rest_framework import serializers
from . import calculations
from .models import Club, MatchType, PaymentStatus
from .snapshot import (
    MICC,
    PENDING,
    SATURDAY,
    SUNDAY,
    WEEKDAY,
    AppData,
    MatchRecord,
    PaymentRecord,
    PlayerRecord,
    WeekendRecord,
)


# =============================================================================
# Input Serializers
# =============================================================================

class MatchInputSerializer(serializers.Serializer):
    """
    Validate input for creating or editing a weekend's match.

    Fields:
        match_type (str): Saturday, Sunday or Weekday
        club (str): Optional; defaults by match type
        date (date): Optional; defaults by match type
        ground_cost (float): Ground fee, non-negative
        cafeteria_cost (float): Cafeteria bill, non-negative
        player_ids (list[UUID]): Participants from the roster
    """

    match_type = serializers.ChoiceField(choices=MatchType.choices)
    club = serializers.ChoiceField(choices=Club.choices, required=False)
    date = serializers.DateField(required=False)
    ground_cost = serializers.FloatField(min_value=0)
    cafeteria_cost = serializers.FloatField(min_value=0, default=0.0)
    player_ids = serializers.ListField(
        child=serializers.UUIDField(),
        allow_empty=True,
    )


class MatchUpdateSerializer(serializers.Serializer):
    """Validate input for editing a match by id; its type is fixed."""

    match_type = serializers.ChoiceField(choices=MatchType.choices, required=False)
    club = serializers.ChoiceField(choices=Club.choices, required=False)
    date = serializers.DateField(required=False)
    ground_cost = serializers.FloatField(min_value=0)
    cafeteria_cost = serializers.FloatField(min_value=0, default=0.0)
    player_ids = serializers.ListField(
        child=serializers.UUIDField(),
        allow_empty=True,
    )


class RecordPaymentInputSerializer(serializers.Serializer):
    amount_paid = serializers.FloatField(min_value=0)


class SettleInputSerializer(serializers.Serializer):
    """
    Validate input for the bulk settle shortcut.

    Fields:
        paid (bool): True marks fully paid, False unpaid; omit to toggle
    """

    paid = serializers.BooleanField(required=False, allow_null=True, default=None)


class OutstandingInputSerializer(serializers.Serializer):
    outstanding = serializers.FloatField(min_value=0)


class LedgerFilterSerializer(serializers.Serializer):
    """
    Validate query parameters for ledger summaries.

    Query Parameters:
        search (str): Matches full name, nickname or mobile
        weekend (UUID): Weekend to compute the row for (player rows only)
    """

    search = serializers.CharField(required=False, allow_blank=True, max_length=100)
    weekend = serializers.UUIDField(required=False)


# =============================================================================
# Output Serializers
# =============================================================================

class PlayerRecordSerializer(serializers.Serializer):
    id = serializers.CharField()
    display_name = serializers.CharField()
    first_name = serializers.CharField()
    last_name = serializers.CharField()
    nickname = serializers.CharField()
    mobile = serializers.CharField()
    balance = serializers.FloatField()
    regular = serializers.BooleanField()


class PaymentRecordSerializer(serializers.Serializer):
    id = serializers.CharField()
    player_id = serializers.CharField()
    match_id = serializers.CharField()
    amount_due = serializers.FloatField()
    amount_paid = serializers.FloatField()
    status = serializers.CharField()
    date = serializers.DateTimeField(allow_null=True)


class MatchRecordSerializer(serializers.Serializer):
    """A match with its costs, participants and payments."""

    id = serializers.CharField()
    type = serializers.CharField()
    club = serializers.CharField()
    date = serializers.DateField()
    ground_cost = serializers.FloatField()
    cafeteria_cost = serializers.FloatField()
    per_head_cost = serializers.SerializerMethodField()
    player_ids = serializers.ListField(child=serializers.CharField())
    payments = PaymentRecordSerializer(many=True)

    def get_per_head_cost(self, obj) -> float:
        return calculations.per_head_cost(obj)


class WeekendRecordSerializer(serializers.Serializer):
    """
    A weekend and its matches.

    ``is_current`` needs ``current_weekend_id`` in the serializer context.
    """

    id = serializers.CharField()
    start_date = serializers.DateField()
    end_date = serializers.SerializerMethodField()
    is_current = serializers.SerializerMethodField()
    saturday_match = MatchRecordSerializer(allow_null=True)
    sunday_match = MatchRecordSerializer(allow_null=True)
    weekday_matches = MatchRecordSerializer(many=True)

    def get_end_date(self, obj) -> str:
        return (obj.start_date + timedelta(days=1)).isoformat()

    def get_is_current(self, obj) -> bool:
        return obj.id == self.context.get('current_weekend_id')


class WeekendListSerializer(serializers.Serializer):
    """Weekend header for list views."""

    id = serializers.CharField()
    start_date = serializers.DateField()
    is_current = serializers.SerializerMethodField()
    match_count = serializers.SerializerMethodField()

    def get_is_current(self, obj) -> bool:
        return obj.id == self.context.get('current_weekend_id')

    def get_match_count(self, obj) -> int:
        return len(obj.matches)


class LedgerRowSerializer(serializers.Serializer):
    """One player's previous balance, current payments and totals."""

    player = PlayerRecordSerializer()
    previous_balance = serializers.FloatField()
    saturday_payment = PaymentRecordSerializer(allow_null=True)
    sunday_payment = PaymentRecordSerializer(allow_null=True)
    weekday_payments = PaymentRecordSerializer(many=True)
    total_due = serializers.FloatField()
    amount_paid = serializers.FloatField()
    current_balance = serializers.FloatField()
    status = serializers.CharField()


class StatusCountsSerializer(serializers.Serializer):
    paid = serializers.IntegerField()
    partial = serializers.IntegerField()
    pending = serializers.IntegerField()


class LedgerSummarySerializer(serializers.Serializer):
    weekend = WeekendRecordSerializer()
    is_current = serializers.BooleanField()
    rows = LedgerRowSerializer(many=True)
    counts = StatusCountsSerializer()
    total_due = serializers.FloatField()
    total_paid = serializers.FloatField()
    total_outstanding = serializers.FloatField()


# =============================================================================
# Import Serializers
# =============================================================================
# Field names follow the camelCase export layout; ``source`` maps them onto
# the snapshot record attributes.

class FiniteFloatField(serializers.FloatField):
    """FloatField that rejects inf and nan, which can't be exported as JSON."""

    default_error_messages = {
        'not_finite': 'A finite number is required.',
    }

    def to_internal_value(self, data):
        value = super().to_internal_value(data)
        if not math.isfinite(value):
            self.fail('not_finite')
        return value


class PlayerImportSerializer(serializers.Serializer):
    id = serializers.UUIDField()
    firstName = serializers.CharField(source='first_name', max_length=100)
    lastName = serializers.CharField(source='last_name', max_length=100, allow_blank=True, default='')
    nickname = serializers.CharField(max_length=100, allow_blank=True, default='')
    mobile = serializers.CharField(max_length=20, allow_blank=True, default='')
    balance = FiniteFloatField(default=0.0)
    arrears = FiniteFloatField(allow_null=True, default=None)
    advancePayment = FiniteFloatField(source='advance_payment', allow_null=True, default=None)
    regular = serializers.BooleanField(default=False)


class PaymentImportSerializer(serializers.Serializer):
    id = serializers.UUIDField()
    playerId = serializers.UUIDField(source='player_id')
    amountDue = FiniteFloatField(source='amount_due', min_value=0, default=0.0)
    amountPaid = FiniteFloatField(source='amount_paid', min_value=0, default=0.0)
    status = serializers.ChoiceField(choices=PaymentStatus.choices, default=PENDING)
    date = serializers.DateTimeField(allow_null=True, default=None)


class MatchImportSerializer(serializers.Serializer):
    """
    A match in any slot.

    ``type`` is checked but not kept: the slot the match sits in decides it.
    """

    id = serializers.UUIDField()
    date = serializers.DateField()
    club = serializers.ChoiceField(choices=Club.choices, default=MICC)
    type = serializers.ChoiceField(choices=MatchType.choices, required=False)
    groundCost = FiniteFloatField(source='ground_cost', min_value=0, default=0.0)
    cafeteriaCost = FiniteFloatField(source='cafeteria_cost', min_value=0, default=0.0)
    playerIds = serializers.ListField(
        source='player_ids',
        child=serializers.UUIDField(),
        default=list,
    )
    payments = PaymentImportSerializer(many=True, required=False)


class WeekendImportSerializer(serializers.Serializer):
    id = serializers.UUIDField()
    startDate = serializers.DateField(source='start_date')
    saturdayMatch = MatchImportSerializer(source='saturday_match', required=False, allow_null=True)
    sundayMatch = MatchImportSerializer(source='sunday_match', required=False, allow_null=True)
    weekdayMatches = MatchImportSerializer(source='weekday_matches', many=True, required=False)


def _match_record(values, match_type: str) -> MatchRecord:
    match_id = str(values['id'])
    return MatchRecord(
        id=match_id,
        date=values['date'],
        club=values['club'],
        type=match_type,
        ground_cost=values['ground_cost'],
        cafeteria_cost=values['cafeteria_cost'],
        player_ids=tuple(dict.fromkeys(str(pid) for pid in values['player_ids'])),
        payments=tuple(
            PaymentRecord(
                id=str(p['id']),
                player_id=str(p['player_id']),
                match_id=match_id,
                amount_due=p['amount_due'],
                amount_paid=p['amount_paid'],
                status=p['status'],
                date=p['date'],
            )
            for p in values.get('payments', [])
        ),
    )


class LedgerImportSerializer(serializers.Serializer):
    """
    Decode an exported ledger blob.

    ``save()`` returns an ``AppData``; reference checks (unknown players,
    duplicate ids, the current weekend pointer) happen when it is stored.
    """

    players = PlayerImportSerializer(many=True)
    weekends = WeekendImportSerializer(many=True, allow_empty=False)
    currentWeekendId = serializers.UUIDField(source='current_weekend_id')

    def create(self, validated_data) -> AppData:
        players = tuple(
            PlayerRecord(**{**p, 'id': str(p['id'])})
            for p in validated_data['players']
        )

        weekends = []
        for w in validated_data['weekends']:
            saturday = w.get('saturday_match')
            sunday = w.get('sunday_match')
            weekends.append(WeekendRecord(
                id=str(w['id']),
                start_date=w['start_date'],
                saturday_match=_match_record(saturday, SATURDAY) if saturday else None,
                sunday_match=_match_record(sunday, SUNDAY) if sunday else None,
                weekday_matches=tuple(
                    _match_record(m, WEEKDAY) for m in w.get('weekday_matches', [])
                ),
            ))

        return AppData(
            players=players,
            weekends=tuple(weekends),
            current_weekend_id=str(validated_data['current_weekend_id']),
        )
