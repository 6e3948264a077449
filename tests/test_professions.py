"""
Tests for profession cards and starting-profile assignment.
"""

import random

import pytest

from cashflow.game.professions import (
    PROFESSION_CARDS,
    Profession,
    ProfessionAssets,
    apply_profession,
    assign_professions,
    boost_passive_income,
    custom_mode_profession,
)
from cashflow.game.state import new_player


def test_custom_mode_profession():
    base = Profession(1, "Doctor", "Medical Doctor", 12000, 12000, 4200, 7800, ProfessionAssets(cash=1000))

    custom = custom_mode_profession(base)

    assert custom.assets.cash == 1500
    assert custom.expenses == 3360
    assert custom.cash_flow == 8640
    assert custom.paycheck == 12000


def test_custom_mode_rounds_half_up():
    base = Profession(9, "Test", "Test", 1000, 1000, 1005, 0, ProfessionAssets(cash=333))

    custom = custom_mode_profession(base)

    assert custom.expenses == 804
    assert custom.assets.cash == 500  # 499.5 rounds up


@pytest.mark.parametrize("income,expected", [(500, 600), (300, 360), (0, 0), (5, 6)])
def test_boost_passive_income(income, expected):
    assert boost_passive_income(income) == expected


def test_apply_profession_seeds_finances():
    doctor = PROFESSION_CARDS[0]
    player = apply_profession(new_player("Alice", "#ef4444", "p1"), doctor, auditor_id="p2")

    assert player.profession == "Doctor"
    assert player.cash == doctor.assets.cash
    assert player.rat_race.monthly_income == doctor.paycheck
    assert player.rat_race.monthly_expenses == doctor.expenses
    assert player.rat_race.total_expenses == doctor.expenses
    assert player.rat_race.monthly_payday == doctor.cash_flow
    assert player.rat_race.liabilities.home_loan == doctor.liabilities.home_mortgage
    assert player.rat_race.credit_limit == doctor.credit_limit
    assert player.rat_race.auditor_id == "p2"


class TestAssignProfessions:
    def test_every_player_gets_a_distinct_profession(self, four_players):
        assigned = assign_professions(four_players, PROFESSION_CARDS, random.Random(42))

        professions = [p.profession for p in assigned]
        assert all(professions)
        assert len(set(professions)) == 4

    def test_auditor_is_next_player(self, four_players):
        assigned = assign_professions(four_players, PROFESSION_CARDS, random.Random(42))

        for i, player in enumerate(assigned):
            assert player.rat_race.auditor_id == assigned[(i + 1) % len(assigned)].player_id

    def test_wraps_when_more_players_than_professions(self):
        players = [new_player(f"P{i}", f"#00000{i}", f"p{i}") for i in range(len(PROFESSION_CARDS) + 1)]

        assigned = assign_professions(players, PROFESSION_CARDS, random.Random(1))

        assert assigned[-1].profession == assigned[0].profession

    def test_keeps_existing_professions(self, two_players):
        first = assign_professions(two_players, PROFESSION_CARDS, random.Random(1))

        again = assign_professions(first, PROFESSION_CARDS, random.Random(99))

        assert again == first

    def test_seeded_assignment_is_reproducible(self, four_players):
        a = assign_professions(four_players, PROFESSION_CARDS, random.Random(5))
        b = assign_professions(four_players, PROFESSION_CARDS, random.Random(5))
        assert a == b

    def test_custom_mode_scales_starting_cash(self, two_players):
        normal = assign_professions(two_players, PROFESSION_CARDS, random.Random(5))
        custom = assign_professions(two_players, PROFESSION_CARDS, random.Random(5), custom_mode=True)

        for n, c in zip(normal, custom):
            assert c.profession == n.profession
            assert c.cash > n.cash
            assert c.rat_race.monthly_expenses < n.rat_race.monthly_expenses
