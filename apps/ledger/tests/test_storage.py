"""
Tests for snapshot storage and the export/import/reset services.
"""

import copy
import uuid
import pytest
from datetime import date
from rest_framework.exceptions import ValidationError

from apps.ledger.models import Match, Payment, Weekend
from apps.ledger.services import (
    advance_weekend,
    export_filename,
    export_ledger,
    import_ledger,
    record_payment,
    reset_ledger,
    save_match,
)
from apps.ledger.serializers import LedgerImportSerializer
from apps.ledger.snapshot import InvalidAppDataError
from apps.ledger.storage import load_app_data
from apps.players.models import Player


SAI = '11111111-1111-4111-8111-111111111111'
RAHUL = '22222222-2222-4222-8222-222222222222'
WEEKEND_1 = '33333333-3333-4333-8333-333333333333'
WEEKEND_2 = '44444444-4444-4444-8444-444444444444'
MATCH = '55555555-5555-4555-8555-555555555555'
PAYMENT_SAI = '66666666-6666-4666-8666-666666666666'
PAYMENT_RAHUL = '77777777-7777-4777-8777-777777777777'


@pytest.fixture
def exported_blob():
    """A ledger in the camelCase export layout, two weekends deep."""
    return {
        'players': [
            {'id': SAI, 'firstName': 'Sai', 'lastName': 'Ragha', 'mobile': '9999999999',
             'balance': 0},
            {'id': RAHUL, 'firstName': 'Rahul', 'nickname': 'Rocky', 'mobile': '',
             'balance': 25.5, 'regular': True},
        ],
        'weekends': [
            {
                'id': WEEKEND_1,
                'startDate': '2025-08-30',
                'saturdayMatch': {
                    'id': MATCH,
                    'date': '2025-08-30',
                    'club': 'MICC',
                    'type': 'Saturday',
                    'groundCost': 300,
                    'cafeteriaCost': 100,
                    'playerIds': [SAI, RAHUL],
                    'payments': [
                        {'id': PAYMENT_SAI, 'playerId': SAI, 'matchId': MATCH,
                         'amountDue': 200, 'amountPaid': 200, 'status': 'paid',
                         'date': '2025-08-30T06:15:00.000Z'},
                        {'id': PAYMENT_RAHUL, 'playerId': RAHUL, 'matchId': MATCH,
                         'amountDue': 200, 'amountPaid': 50, 'status': 'partial',
                         'date': '2025-08-30T06:15:00.000Z'},
                    ],
                },
                'weekdayMatches': [],
            },
            {'id': WEEKEND_2, 'startDate': '2025-09-06', 'weekdayMatches': []},
        ],
        'currentWeekendId': WEEKEND_2,
    }


def _normalised(blob):
    """Export dict with list order removed from the comparison."""
    blob = copy.deepcopy(blob)
    blob['players'].sort(key=lambda p: p['id'])
    blob['weekends'].sort(key=lambda w: w['id'])
    for weekend in blob['weekends']:
        for match in [weekend['saturdayMatch'], weekend['sundayMatch'], *weekend['weekdayMatches']]:
            if match:
                match['playerIds'].sort()
                match['payments'].sort(key=lambda p: p['id'])
    return blob


@pytest.mark.django_db
class TestLoadAndSave:

    def test_empty_ledger_snapshot(self, organiser):
        data = load_app_data(organiser)

        assert data.players == ()
        assert len(data.weekends) == 1
        assert data.current_weekend.start_date.weekday() == 5

    def test_snapshot_reflects_rows(self, organiser, saturday_match, players):
        data = load_app_data(organiser)

        assert {p.id for p in data.players} == {str(p.id) for p in players}
        match = data.current_weekend.saturday_match
        assert match.id == saturday_match.id
        assert set(match.player_ids) == {str(p.id) for p in players}
        assert len(match.payments) == 3


@pytest.mark.django_db
class TestImportExport:

    def test_import_replaces_everything(self, organiser, saturday_match, players, exported_blob):
        data = import_ledger(owner=organiser, payload=exported_blob)

        assert data.current_weekend_id == WEEKEND_2
        assert set(Player.objects.filter(owner=organiser).values_list('first_name', flat=True)) == {'Sai', 'Rahul'}
        assert not Match.objects.filter(id=saturday_match.id).exists()
        assert Weekend.objects.get(owner=organiser, is_current=True).start_date == date(2025, 9, 6)
        assert Payment.objects.get(id=PAYMENT_RAHUL).amount_paid == 50.0

    def test_imported_history_feeds_previous_balance(self, organiser, organiser_client, exported_blob):
        import_ledger(owner=organiser, payload=exported_blob)

        response = organiser_client.get(f'/api/ledger/players/{RAHUL}/')

        # Base 25.5 plus 150 still owed for the imported Saturday
        assert response.data['previous_balance'] == 175.5
        assert response.data['status'] == 'pending'

    def test_export_then_import_round_trip(self, organiser, weekend, saturday_match, players):
        record_payment(
            owner=organiser,
            payment_id=saturday_match.payments[0].id,
            amount_paid=60.0,
        )
        advance_weekend(owner=organiser)
        before = export_ledger(owner=organiser)

        reset_ledger(owner=organiser)
        import_ledger(owner=organiser, payload=before)

        assert _normalised(export_ledger(owner=organiser)) == _normalised(before)

    def test_export_decodes_cleanly(self, organiser, saturday_match):
        serializer = LedgerImportSerializer(data=export_ledger(owner=organiser))

        assert serializer.is_valid(), serializer.errors
        data = serializer.save()
        assert data.current_weekend.saturday_match.id == saturday_match.id

    @pytest.mark.parametrize('mutate', [
        lambda b: b.pop('currentWeekendId'),
        lambda b: b['players'][0].update(balance='lots'),
        lambda b: b['players'][0].update(balance=float('inf')),
        lambda b: b['players'][0].pop('id'),
        lambda b: b['players'][0].update(firstName='S' * 101),
        lambda b: b['players'][1].update(mobile='9' * 21),
        lambda b: b['weekends'][0].update(startDate='2025-08-30 not a date'),
        lambda b: b['weekends'][0]['saturdayMatch'].update(date='2025-08-30T06:15:00Z'),
        lambda b: b['weekends'][0]['saturdayMatch'].update(groundCost=-300),
        lambda b: b['weekends'][0]['saturdayMatch']['payments'][0].update(status='settled'),
        lambda b: b['weekends'][0]['saturdayMatch']['payments'][0].update(amountPaid=float('nan')),
        lambda b: b.update(weekends=[]),
    ])
    def test_malformed_import_is_rejected(self, organiser, players, exported_blob, mutate):
        mutate(exported_blob)

        with pytest.raises(ValidationError):
            import_ledger(owner=organiser, payload=exported_blob)

        # Nothing was replaced
        assert Player.objects.filter(owner=organiser).count() == 3

    @pytest.mark.parametrize('mutate', [
        lambda b: b.update(currentWeekendId='99999999-9999-4999-8999-999999999999'),
        lambda b: b['weekends'][0]['saturdayMatch'].update(playerIds=['88888888-8888-4888-8888-888888888888']),
        lambda b: b['weekends'][1].update(id=WEEKEND_1),
    ])
    def test_inconsistent_import_is_rejected(self, organiser, players, exported_blob, mutate):
        mutate(exported_blob)

        with pytest.raises(InvalidAppDataError):
            import_ledger(owner=organiser, payload=exported_blob)

        assert Player.objects.filter(owner=organiser).count() == 3

    def test_import_not_an_object(self, organiser):
        with pytest.raises(ValidationError):
            import_ledger(owner=organiser, payload=['not', 'a', 'ledger'])

    @pytest.mark.parametrize('raw, expected', [
        ('false', False),
        ('true', True),
        (False, False),
    ])
    def test_import_regular_flag(self, organiser, exported_blob, raw, expected):
        exported_blob['players'][1]['regular'] = raw

        import_ledger(owner=organiser, payload=exported_blob)

        assert Player.objects.get(id=RAHUL).regular is expected

    def test_import_fills_optional_fields(self, organiser, exported_blob):
        del exported_blob['players'][0]['balance']
        exported_blob['weekends'][0]['saturdayMatch'].pop('club')

        data = import_ledger(owner=organiser, payload=exported_blob)

        sai = data.get_player(SAI)
        assert sai.balance == 0.0
        assert sai.arrears is None
        assert data.get_weekend(WEEKEND_1).saturday_match.club == 'MICC'

    def test_slot_decides_match_type(self, organiser, exported_blob):
        exported_blob['weekends'][0]['saturdayMatch']['type'] = 'Weekday'

        import_ledger(owner=organiser, payload=exported_blob)

        assert Match.objects.get(id=MATCH).type == 'Saturday'

    def test_reimport_with_swapped_payment_ids(self, organiser, exported_blob):
        import_ledger(owner=organiser, payload=exported_blob)
        payments = exported_blob['weekends'][0]['saturdayMatch']['payments']
        payments[0]['id'], payments[1]['id'] = PAYMENT_RAHUL, PAYMENT_SAI

        import_ledger(owner=organiser, payload=exported_blob)

        assert Payment.objects.get(id=PAYMENT_RAHUL).player_id == uuid.UUID(SAI)
        assert Payment.objects.get(id=PAYMENT_SAI).amount_paid == 50.0
        assert Payment.objects.filter(match_id=MATCH).count() == 2

    def test_import_ids_of_another_organiser(self, organiser, other_organiser, exported_blob):
        import_ledger(owner=organiser, payload=exported_blob)

        with pytest.raises(InvalidAppDataError):
            import_ledger(owner=other_organiser, payload=exported_blob)

        assert Player.objects.get(id=SAI).owner == organiser

    def test_export_filename(self):
        assert export_filename(date(2025, 9, 6)) == 'cricket-cost-splitter-2025-09-06.json'


@pytest.mark.django_db
class TestReset:

    def test_reset_wipes_ledger(self, organiser, weekend, saturday_match, other_player):
        advance_weekend(owner=organiser)

        data = reset_ledger(owner=organiser, today=date(2025, 9, 3))

        assert data.players == ()
        assert not Player.objects.filter(owner=organiser).exists()
        assert not Match.objects.filter(weekend__owner=organiser).exists()
        weekends = Weekend.objects.filter(owner=organiser)
        assert weekends.count() == 1
        assert weekends.get().start_date == date(2025, 8, 30)
        # Other organisers are unaffected
        assert Player.objects.filter(id=other_player.id).exists()
