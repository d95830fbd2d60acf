"""Property value projection under compound annual appreciation."""

from decimal import Decimal

from recalc.engine.numeric import ZERO, ONE, TWELVE, HUNDRED, WHOLE, finite, finite_result


@finite_result
def project_property_value(
    current_value: Decimal, annual_appreciation_rate: Decimal, holding_months: int
) -> Decimal:
    """current_value * (1 + rate/100) ** (months/12), rounded to whole currency units.

    A rate at or below -100 % has no real projection and reports 0.
    """
    years = Decimal(holding_months) / TWELVE
    growth = ONE + Decimal(annual_appreciation_rate) / HUNDRED
    if growth <= 0:
        return ZERO
    return finite(Decimal(current_value) * growth ** years, WHOLE)
