"""
Unit tests for the pure ledger calculations.

No database: every test builds snapshot records by hand.
"""

import random
from dataclasses import replace
from datetime import date, datetime, timezone

import pytest

from apps.ledger import calculations
from apps.ledger.snapshot import (
    PAID,
    PARTIAL,
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

NOW = datetime(2025, 8, 30, 9, 0, tzinfo=timezone.utc)

A, B, C = (
    '00000000-0000-4000-8000-00000000000a',
    '00000000-0000-4000-8000-00000000000b',
    '00000000-0000-4000-8000-00000000000c',
)


def make_match(match_type=SATURDAY, ground=300.0, cafeteria=150.0, players=(A, B, C),
               match_id='m-sat', day=date(2025, 8, 30)):
    match = MatchRecord(
        id=match_id,
        date=day,
        club='MICC',
        type=match_type,
        ground_cost=ground,
        cafeteria_cost=cafeteria,
        player_ids=tuple(players),
    )
    return calculations.rebuild_payments(match, now=NOW)


def pay(match, player_id, amount):
    payments = tuple(
        calculations.set_amount_paid(p, amount) if p.player_id == player_id else p
        for p in match.payments
    )
    return replace(match, payments=payments)


def make_data(current, history=(), players=(A, B, C), balances=None):
    balances = balances or {}
    return AppData(
        players=tuple(
            PlayerRecord(id=pid, first_name=pid[-1].upper(), balance=balances.get(pid, 0.0))
            for pid in players
        ),
        weekends=tuple(history) + (current,),
        current_weekend_id=current.id,
    )


# =============================================================================
# Cost Splitting
# =============================================================================

class TestPerHeadCost:

    def test_even_split(self):
        assert calculations.per_head_cost(make_match()) == 150.0

    def test_no_players_is_zero(self):
        assert calculations.per_head_cost(make_match(players=())) == 0.0

    def test_fractional_amounts_are_kept(self):
        match = make_match(ground=100.0, cafeteria=0.0)
        assert calculations.per_head_cost(match) == pytest.approx(100.0 / 3)

    @pytest.mark.parametrize('ground,cafeteria,count', [
        (100.0, 0.0, 3),
        (1234.5, 99.9, 7),
        (0.0, 0.0, 4),
        (1000.0, 333.0, 11),
    ])
    def test_shares_sum_to_total(self, ground, cafeteria, count):
        players = [f'00000000-0000-4000-8000-{i:012d}' for i in range(count)]
        match = make_match(ground=ground, cafeteria=cafeteria, players=players)

        total = sum(calculations.player_due(match, pid) for pid in players)

        assert total == pytest.approx(ground + cafeteria)

    def test_non_participant_owes_nothing(self):
        match = make_match(players=(A, B))
        assert calculations.player_due(match, C) == 0.0


# =============================================================================
# Payment Status
# =============================================================================

class TestPaymentStatus:

    @pytest.mark.parametrize('paid,due,expected', [
        (0.0, 150.0, PENDING),
        (150.0, 150.0, PAID),
        (200.0, 150.0, PAID),
        (75.0, 150.0, PARTIAL),
        (0.0, 0.0, PENDING),
    ])
    def test_derive_status(self, paid, due, expected):
        assert calculations.derive_status(paid, due) == expected

    def test_set_amount_paid_is_idempotent(self):
        payment = make_match().payments[0]
        once = calculations.set_amount_paid(payment, 40.0)
        twice = calculations.set_amount_paid(once, 40.0)

        assert once == twice
        assert twice.status == PARTIAL

    def test_mark_paid_and_unpaid(self):
        payment = make_match().payments[0]

        paid = calculations.mark_paid(payment)
        assert (paid.amount_paid, paid.status) == (150.0, PAID)

        unpaid = calculations.mark_unpaid(paid)
        assert (unpaid.amount_paid, unpaid.status) == (0.0, PENDING)

    def test_toggle_payment(self):
        payment = calculations.set_amount_paid(make_match().payments[0], 10.0)

        assert calculations.toggle_payment(payment).status == PAID
        assert calculations.toggle_payment(calculations.mark_paid(payment)).status == PENDING


# =============================================================================
# Match Saving
# =============================================================================

class TestRebuildPayments:

    def test_one_pending_payment_per_participant(self):
        match = make_match()

        assert [p.player_id for p in match.payments] == [A, B, C]
        assert all(p.amount_due == 150.0 for p in match.payments)
        assert all(p.status == PENDING for p in match.payments)
        assert all(p.match_id == match.id for p in match.payments)
        assert all(p.date == NOW for p in match.payments)

    def test_existing_payments_keep_amount_paid(self):
        match = pay(make_match(), A, 150.0)
        original = calculations.find_payment(match, A)

        edited = calculations.rebuild_payments(
            replace(match, player_ids=(A, B), ground_cost=400.0, cafeteria_cost=0.0),
            now=NOW,
        )
        rebuilt = calculations.find_payment(edited, A)

        assert rebuilt.id == original.id
        assert rebuilt.amount_paid == 150.0
        assert rebuilt.amount_due == 200.0
        assert rebuilt.status == PARTIAL
        assert calculations.find_payment(edited, C) is None

    def test_new_participant_gets_fresh_payment(self):
        match = make_match(players=(A,))
        edited = calculations.rebuild_payments(replace(match, player_ids=(A, B)), now=NOW)

        new = calculations.find_payment(edited, B)
        assert new.amount_paid == 0.0
        assert new.status == PENDING

    def test_place_and_remove_weekday_match(self):
        weekend = WeekendRecord(id='w1', start_date=date(2025, 8, 30))
        weekday = make_match(WEEKDAY, match_id='m-wd')

        weekend = calculations.place_match(weekend, weekday)
        weekend = calculations.place_match(weekend, replace(weekday, ground_cost=1.0))

        assert len(weekend.weekday_matches) == 1
        assert weekend.weekday_matches[0].ground_cost == 1.0

        weekend = calculations.remove_match(weekend, 'm-wd')
        assert weekend.matches == ()


# =============================================================================
# Balances
# =============================================================================

class TestLedgerRow:

    def test_worked_example(self):
        """A pays 150, B 75, C 0 against 150 each."""
        match = make_match()
        match = pay(pay(match, A, 150.0), B, 75.0)
        weekend = WeekendRecord(id='w1', start_date=date(2025, 8, 30), saturday_match=match)
        data = make_data(weekend)

        rows = {r.player.id: r for r in calculations.ledger_rows(data)}

        assert [rows[p].status for p in (A, B, C)] == [PAID, PARTIAL, PENDING]
        assert sum(r.total_due for r in rows.values()) == 450.0
        assert sum(r.amount_paid for r in rows.values()) == 225.0
        assert rows[B].current_balance == 75.0

    def test_previous_balance_replays_history(self):
        old_sat = pay(make_match(match_id='old-sat'), A, 100.0)
        # A played without a payment record: per-head cost counts instead
        old_sun = MatchRecord(
            id='old-sun', date=date(2025, 8, 24), club='Sadhooz', type=SUNDAY,
            ground_cost=200.0, player_ids=(A, B),
        )
        history = WeekendRecord(
            id='w0', start_date=date(2025, 8, 23),
            saturday_match=old_sat, sunday_match=old_sun,
        )
        current = WeekendRecord(id='w1', start_date=date(2025, 8, 30))
        data = make_data(current, [history], balances={A: 20.0})

        player = data.get_player(A)
        assert calculations.previous_balance(data, player, 'w1') == 20.0 + 50.0 + 100.0

    def test_previous_balance_ignores_target_weekend(self):
        current = WeekendRecord(id='w1', start_date=date(2025, 8, 30), saturday_match=make_match())
        data = make_data(current, balances={A: -30.0})

        assert calculations.previous_balance(data, data.get_player(A), 'w1') == -30.0

    def test_previous_balance_is_order_independent(self):
        weekends = [
            WeekendRecord(
                id=f'w{i}', start_date=date(2025, 6, 7 + i * 7) if i < 4 else date(2025, 7, 5),
                saturday_match=pay(
                    make_match(ground=100.0 * (i + 1), match_id=f'm{i}'), A, 10.0 * i
                ),
            )
            for i in range(5)
        ]
        current = WeekendRecord(id='now', start_date=date(2025, 8, 30))
        data = make_data(current, weekends)
        shuffled = list(weekends)
        random.Random(7).shuffle(shuffled)
        data_shuffled = replace(data, weekends=tuple(shuffled) + (current,))

        player = data.get_player(A)
        assert calculations.previous_balance(data, player, 'now') == pytest.approx(
            calculations.previous_balance(data_shuffled, player, 'now')
        )

    def test_weekday_payments_count_toward_totals(self):
        weekday = make_match(WEEKDAY, ground=60.0, cafeteria=0.0, players=(A, B), match_id='wd')
        weekend = WeekendRecord(
            id='w1', start_date=date(2025, 8, 30),
            saturday_match=make_match(), weekday_matches=(weekday,),
        )
        row = calculations.ledger_row(make_data(weekend), make_data(weekend).get_player(A))

        assert row.total_due == 180.0
        assert len(row.weekday_payments) == 1
        assert row.saturday_payment is not None
        assert row.sunday_payment is None


class TestAggregateStatus:

    def test_no_payments_is_pending(self):
        assert calculations.aggregate_status([]) == PENDING

    def test_all_paid(self):
        payments = [calculations.mark_paid(p) for p in make_match().payments]
        assert calculations.aggregate_status(payments) == PAID

    def test_any_money_is_partial(self):
        payments = list(make_match().payments)
        payments[0] = calculations.mark_paid(payments[0])
        assert calculations.aggregate_status(payments) == PARTIAL

    def test_nothing_paid_is_pending(self):
        assert calculations.aggregate_status(make_match().payments) == PENDING

    def test_status_counts(self):
        match = pay(pay(make_match(), A, 150.0), B, 75.0)
        weekend = WeekendRecord(id='w1', start_date=date(2025, 8, 30), saturday_match=match)

        counts = calculations.status_counts(calculations.ledger_rows(make_data(weekend)))

        assert counts == {PAID: 1, PARTIAL: 1, PENDING: 1}


# =============================================================================
# Bulk Settle and Outstanding Override
# =============================================================================

class TestSettlePlayer:

    def _data(self):
        weekend = WeekendRecord(
            id='w1', start_date=date(2025, 8, 30),
            saturday_match=pay(make_match(), A, 50.0),
            sunday_match=make_match(SUNDAY, ground=90.0, cafeteria=0.0, match_id='m-sun'),
        )
        return make_data(weekend, balances={A: 40.0})

    def test_mark_paid_resets_base_balance(self):
        data = calculations.settle_player(self._data(), A, paid=True)
        row = calculations.ledger_row(data, data.get_player(A))

        assert row.status == PAID
        assert row.player.balance == 0.0
        assert row.amount_paid == row.total_due == 180.0

    def test_mark_unpaid_folds_balance_into_base(self):
        data = self._data()
        before = calculations.ledger_row(data, data.get_player(A))

        data = calculations.settle_player(data, A, paid=False)
        row = calculations.ledger_row(data, data.get_player(A))

        assert row.player.balance == before.current_balance
        assert row.amount_paid == 0.0
        assert row.status == PENDING

    def test_paid_then_unpaid_restores_total_due(self):
        data = self._data()
        total_due = calculations.ledger_row(data, data.get_player(A)).total_due

        data = calculations.settle_player(data, A, paid=True)
        data = calculations.settle_player(data, A, paid=False)

        assert calculations.ledger_row(data, data.get_player(A)).total_due == total_due

    def test_other_players_untouched(self):
        data = self._data()
        settled = calculations.settle_player(data, A, paid=True)

        assert calculations.ledger_row(settled, settled.get_player(B)) == \
            calculations.ledger_row(data, data.get_player(B))

    def test_toggle_picks_path_from_status(self):
        data = calculations.toggle_settlement(self._data(), A)
        assert calculations.ledger_row(data, data.get_player(A)).status == PAID

        data = calculations.toggle_settlement(data, A)
        assert calculations.ledger_row(data, data.get_player(A)).status == PENDING

    def test_unknown_player_is_noop(self):
        data = self._data()
        assert calculations.settle_player(data, 'nobody', paid=True) is data


class TestDistributeOutstanding:

    def _data(self):
        weekend = WeekendRecord(
            id='w1', start_date=date(2025, 8, 30),
            saturday_match=make_match(ground=300.0, cafeteria=0.0, players=(A, B, C)),
            sunday_match=make_match(SUNDAY, ground=100.0, cafeteria=0.0, players=(A, B),
                                    match_id='m-sun'),
        )
        return make_data(weekend)

    def test_proportional_split(self):
        # A owes 100 + 50; leaving 30 outstanding means 120 paid, split 80/40
        data = calculations.distribute_outstanding(self._data(), A, 30.0)
        weekend = data.current_weekend

        sat = calculations.find_payment(weekend.saturday_match, A)
        sun = calculations.find_payment(weekend.sunday_match, A)
        assert sat.amount_paid == pytest.approx(80.0)
        assert sun.amount_paid == pytest.approx(40.0)
        assert sat.status == sun.status == PARTIAL

    def test_zero_outstanding_pays_everything(self):
        data = calculations.distribute_outstanding(self._data(), A, 0.0)
        row = calculations.ledger_row(data, data.get_player(A))

        assert row.status == PAID
        assert row.current_balance == pytest.approx(0.0)

    def test_amounts_are_clamped(self):
        data = calculations.distribute_outstanding(self._data(), A, 1000.0)
        row = calculations.ledger_row(data, data.get_player(A))

        assert row.amount_paid == 0.0
        assert row.status == PENDING

    def test_no_current_payments_is_noop(self):
        weekend = WeekendRecord(id='w1', start_date=date(2025, 8, 30))
        data = make_data(weekend)

        assert calculations.distribute_outstanding(data, A, 10.0) is data


class TestRemovePlayer:

    def test_removes_everywhere(self):
        history = WeekendRecord(id='w0', start_date=date(2025, 8, 23),
                                saturday_match=make_match(match_id='old'))
        current = WeekendRecord(
            id='w1', start_date=date(2025, 8, 30),
            weekday_matches=(make_match(WEEKDAY, match_id='wd'),),
        )
        data = calculations.remove_player(make_data(current, [history]), A)

        assert data.get_player(A) is None
        for weekend in data.weekends:
            for match in weekend.matches:
                assert A not in match.player_ids
                assert calculations.find_payment(match, A) is None


# =============================================================================
# Periods
# =============================================================================

class TestPeriods:

    @pytest.mark.parametrize('today,anchor', [
        (date(2025, 8, 30), date(2025, 8, 30)),  # Saturday
        (date(2025, 8, 31), date(2025, 8, 30)),  # Sunday
        (date(2025, 9, 5), date(2025, 8, 30)),   # Friday
        (date(2025, 9, 1), date(2025, 8, 30)),   # Monday
    ])
    def test_weekend_anchor(self, today, anchor):
        assert calculations.weekend_anchor(today) == anchor

    def test_advance_adds_seven_days(self):
        current = WeekendRecord(id='w1', start_date=date(2025, 8, 30))
        data = calculations.advance_period(make_data(current))

        assert data.current_weekend.start_date == date(2025, 9, 6)
        assert len(data.weekends) == 2
        assert data.weekends[0] == current

    def test_advance_moves_matches_into_history(self):
        current = WeekendRecord(id='w1', start_date=date(2025, 8, 30),
                                saturday_match=make_match())
        data = calculations.advance_period(make_data(current))

        row = calculations.ledger_row(data, data.get_player(A))
        assert row.previous_balance == 150.0
        assert row.total_due == 0.0
        assert row.status == PENDING

    def test_initial_app_data(self):
        data = calculations.initial_app_data(date(2025, 9, 3))

        assert data.players == ()
        assert data.current_weekend.start_date == date(2025, 8, 30)
