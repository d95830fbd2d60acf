"""Valuation metrics over a monthly cash-flow series.

Pure functions. No I/O. Rates in and out are annual percentages.
"""

import logging
from decimal import Decimal

from recalc.config import settings
from recalc.engine.numeric import ZERO, ONE, TWELVE, HUNDRED, finite, finite_result, safe_div

logger = logging.getLogger(__name__)

NO_PAYBACK = Decimal("-1")
IRR_INITIAL_GUESS = Decimal("0.1")  # 10 %/yr
IRR_FLOOR = Decimal("0.01")


@finite_result
def net_present_value(
    initial_investment: Decimal,
    monthly_cash_flows: list[Decimal],
    annual_discount_rate: Decimal,
) -> Decimal:
    """NPV = -initial + sum(CF_i / (1 + r/12)^i), i starting at 1."""
    monthly_rate = Decimal(annual_discount_rate) / HUNDRED / TWELVE
    growth = ONE + monthly_rate

    npv = -Decimal(initial_investment)
    discount = ONE
    for cash_flow in monthly_cash_flows:
        discount *= growth
        npv += cash_flow / discount
    return npv


def _npv_derivative(monthly_cash_flows: list[Decimal], rate: Decimal) -> Decimal:
    """d(NPV)/d(annual rate) at ``rate`` (a fraction, not a percentage)."""
    monthly_rate = rate / TWELVE
    growth = ONE + monthly_rate

    derivative = ZERO
    factor = ONE
    for period, cash_flow in enumerate(monthly_cash_flows, start=1):
        factor *= growth
        derivative -= cash_flow * period / (TWELVE * factor * growth)
    return derivative


@finite_result
def internal_rate_of_return(
    initial_investment: Decimal,
    monthly_cash_flows: list[Decimal],
    max_iterations: int | None = None,
    tolerance: Decimal | None = None,
) -> Decimal:
    """Annual IRR (%) via Newton-Raphson from a 10 % guess.

    The rate is floored at 1 % whenever an iteration goes negative. Pathological
    series may not converge; the estimate at the iteration cap is returned.
    """
    max_iterations = max_iterations or settings.irr_max_iterations
    tolerance = tolerance if tolerance is not None else settings.irr_tolerance

    rate = IRR_INITIAL_GUESS
    for _ in range(max_iterations):
        npv = net_present_value(initial_investment, monthly_cash_flows, rate * HUNDRED)
        if abs(npv) < tolerance:
            return rate * HUNDRED

        derivative = _npv_derivative(monthly_cash_flows, rate)
        if abs(derivative) < tolerance:
            break

        rate = rate - npv / derivative
        if rate < 0:
            rate = IRR_FLOOR

    logger.debug("IRR did not converge, best estimate %s", rate)
    return rate * HUNDRED


@finite_result
def payback_period_years(
    initial_investment: Decimal, monthly_cash_flows: list[Decimal]
) -> Decimal:
    """Years until cumulative cash flow turns non-negative, interpolated within
    the crossing month. Returns -1 when the series never pays back.
    """
    cumulative = -Decimal(initial_investment)

    for i, cash_flow in enumerate(monthly_cash_flows):
        previous = cumulative
        cumulative += cash_flow
        if cumulative >= 0:
            fraction = safe_div(-previous, cash_flow)
            return (i + fraction) / TWELVE

    return NO_PAYBACK


@finite_result
def rental_yield(
    property_value: Decimal, monthly_rent: Decimal, occupancy_rate: Decimal = HUNDRED
) -> Decimal:
    """Gross annual rental income after vacancy as % of property value."""
    annual_rent = Decimal(monthly_rent) * 12 * Decimal(occupancy_rate) / HUNDRED
    return safe_div(annual_rent, property_value) * HUNDRED


@finite_result
def cash_on_cash_return(initial_cash_investment: Decimal, annual_cash_flow: Decimal) -> Decimal:
    """Annual cash flow as % of cash invested."""
    return safe_div(annual_cash_flow, initial_cash_investment) * HUNDRED


def flat_series(monthly_cash_flow: Decimal, months: int) -> list[Decimal]:
    """A level monthly cash-flow series."""
    return [finite(monthly_cash_flow)] * max(months, 0)
