"""
Financial calculations for a single player.

Each function is pure: it returns the computed figure together with a copy
of the player carrying the derived field, and never touches the input.
"""

from dataclasses import replace
from typing import Tuple

from cashflow.game.player import Player

CHILD_EXPENSE = 40
MAX_CHILDREN = 3


def cash_flow(player: Player) -> Tuple[int, Player]:
    """
    Calculate monthly cash flow (income minus all expenses).

    Total expenses are base expenses, a fixed surcharge per child and every
    bank-loan payment. The player's ``monthly_payday`` is floored at zero;
    the returned cash flow is not, so callers can detect a negative flow.

    Returns:
        (signed cash flow, player with total_expenses and monthly_payday set)
    """
    rr = player.rat_race
    loan_payments = sum(loan.monthly_payment for loan in rr.liabilities.bank_loans)
    total_expenses = rr.monthly_expenses + rr.children * CHILD_EXPENSE + loan_payments
    flow = rr.monthly_income - total_expenses

    return flow, player.with_rat_race(total_expenses=total_expenses, monthly_payday=max(0, flow))


def passive_income(player: Player) -> Tuple[int, Player]:
    """
    Sum monthly income across every real-estate, stock and business holding.

    Custom mode boosts are applied when an asset is bought, so no scaling
    happens here.
    """
    holdings = player.rat_race.assets
    total = (
        sum(a.monthly_income for a in holdings.real_estate)
        + sum(a.monthly_income for a in holdings.stocks)
        + sum(a.monthly_income for a in holdings.businesses)
    )
    return total, player.with_rat_race(passive_income=total)


def net_worth(player: Player) -> Tuple[int, Player]:
    """Assets (cash, real estate, stocks) minus liabilities (loans and debt)."""
    holdings = player.rat_race.assets
    debts = player.rat_race.liabilities

    assets = (
        player.cash
        + sum(a.current_value for a in holdings.real_estate)
        + sum(a.current_value for a in holdings.stocks)
    )
    liabilities = (
        debts.home_loan
        + debts.car_loan
        + debts.credit_card_debt
        + sum(loan.amount for loan in debts.bank_loans)
    )
    worth = assets - liabilities
    return worth, replace(player, net_worth=worth)


def recalculate(player: Player) -> Player:
    """Recompute every derived financial field."""
    _, player = cash_flow(player)
    _, player = passive_income(player)
    _, player = net_worth(player)
    return player


def can_exit_rat_race(player: Player) -> bool:
    """Passive income must strictly exceed total expenses."""
    passive, _ = passive_income(player)
    return passive > player.rat_race.total_expenses


def fast_track_buyout(player: Player) -> int:
    """Buyout figure carried onto the Fast Track: 100 months of surplus income."""
    return 100 * (player.rat_race.passive_income - player.rat_race.total_expenses)
