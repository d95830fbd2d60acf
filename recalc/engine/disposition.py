"""Property disposition (sale) analysis over a holding period.

Sale proceeds, accumulated rental cash flow, sell-now ROI per year and
holding-period comparison.

Pure functions. No I/O.
"""

import logging
from collections.abc import Mapping
from dataclasses import replace
from datetime import datetime, timezone
from decimal import Decimal

from recalc.engine.appreciation import project_property_value
from recalc.engine.debt import remaining_balance_at
from recalc.engine.inputs import normalize_inputs
from recalc.engine.investment import calculate_investment
from recalc.engine.numeric import (
    ZERO,
    ONE,
    TWELVE,
    HUNDRED,
    WHOLE,
    TWO_PLACES,
    FOUR_PLACES,
    finite,
    finite_result,
    safe_div,
)
from recalc.engine.validation import validate_sale_config
from recalc.models.inputs import InvestmentInputs
from recalc.models.results import CalculationResult
from recalc.models.sale import (
    SALE_ANALYSIS_DEFAULTS,
    HoldingPeriodConfig,
    OptimalSaleTiming,
    SaleAnalysisResult,
    SaleRecommendations,
    SaleScenario,
    SaleScenarioComparison,
    YearlyBreakdown,
)

logger = logging.getLogger(__name__)

BALANCED_ROI_WEIGHT = Decimal("0.7")
BALANCED_ANNUALIZED_WEIGHT = Decimal("0.3")
EARLY_SALE_YEARS = 3


def effective_sale_cost_rate(inputs: InvestmentInputs, config: HoldingPeriodConfig) -> Decimal:
    """The holding config's sale cost rate when set, else the input's own."""
    if config.sale_cost_rate is not None:
        return config.sale_cost_rate
    return inputs.sale_cost_rate


def _roi(total_return: Decimal, initial_capital: Decimal) -> Decimal:
    return safe_div(total_return - initial_capital, initial_capital) * HUNDRED


def accumulated_cash_flows(
    inputs: InvestmentInputs,
    holding_months: int,
    appreciation_rate: Decimal,
    base_result: CalculationResult | None = None,
) -> tuple[Decimal, list[YearlyBreakdown]]:
    """Steady net property cash flow accumulated year by year.

    The final year is partial when ``holding_months`` is not a multiple of 12.
    Each year records the projected value, loan balance, equity and the ROI
    of selling at that year's end.

    Returns (total cash flow rounded to whole units, yearly breakdown).
    """
    base = base_result or calculate_investment(inputs)
    monthly_cash_flow = base.steps.net_property_cash_flow
    initial_capital = base.steps.total_initial_capital
    cost_rate = inputs.sale_cost_rate

    total = ZERO
    breakdown: list[YearlyBreakdown] = []
    years = -(-holding_months // 12) if holding_months > 0 else 0

    for year in range(1, years + 1):
        months_in_year = min(12, holding_months - (year - 1) * 12)
        annual_cash_flow = monthly_cash_flow * months_in_year
        total += annual_cash_flow

        elapsed = min(year * 12, holding_months)
        value = project_property_value(inputs.price, appreciation_rate, elapsed)
        balance = remaining_balance_at(inputs, elapsed)

        net_proceeds = value - value * cost_rate / HUNDRED - balance

        breakdown.append(YearlyBreakdown(
            year=year,
            property_value=value,
            remaining_loan_balance=balance,
            annual_cash_flow=finite(annual_cash_flow, TWO_PLACES),
            cumulative_cash_flow=finite(total, TWO_PLACES),
            accumulated_equity=finite(value - balance, TWO_PLACES),
            roi_if_sold_now=finite(_roi(net_proceeds + total, initial_capital), FOUR_PLACES),
        ))

    return finite(total, WHOLE), breakdown


@finite_result
def _annualized_roi(total_return: Decimal, initial_capital: Decimal, holding_months: int) -> Decimal:
    """Compound annual growth of the capital multiple, in %."""
    years = Decimal(holding_months) / TWELVE
    multiple = safe_div(total_return, initial_capital)
    if years <= 0 or multiple <= 0:
        return ZERO
    return (multiple ** (ONE / years) - ONE) * HUNDRED


def optimal_sale_timing(breakdown: list[YearlyBreakdown]) -> OptimalSaleTiming:
    """Year with the highest sell-now ROI; the earliest year wins ties."""
    if not breakdown:
        return OptimalSaleTiming(best_year=1, best_roi=ZERO, reasoning="No data available")

    best = breakdown[0]
    for entry in breakdown[1:]:
        if entry.roi_if_sold_now > best.roi_if_sold_now:
            best = entry

    reasoning = f"Year {best.year} offers the best ROI of {best.roi_if_sold_now:.1f}%."
    if best.year == len(breakdown):
        reasoning += " Consider holding longer if market conditions remain favorable."
    elif best.year <= EARLY_SALE_YEARS:
        reasoning += " Early sale may be optimal due to front-loaded returns."
    else:
        reasoning += " Mid-term sale balances capital appreciation with cash flow benefits."

    return OptimalSaleTiming(best_year=best.year, best_roi=best.roi_if_sold_now, reasoning=reasoning)


def calculate_sale_analysis(
    raw: Mapping | InvestmentInputs, config: HoldingPeriodConfig
) -> SaleAnalysisResult:
    """Project a sale at the end of ``config.holding_months``.

    total return = net sale proceeds + accumulated cash flow
    total ROI    = (total return - initial capital) / initial capital

    A sale cost override on the config applies to the final sale only; the
    yearly sell-now ROI uses the input's own rate.
    """
    inputs = normalize_inputs(raw)
    base = calculate_investment(inputs)
    months = config.holding_months
    cost_rate = effective_sale_cost_rate(inputs, config)

    projected_value = project_property_value(inputs.price, config.appreciation_rate, months)
    loan_balance = remaining_balance_at(inputs, months)

    selling_costs = finite(projected_value * cost_rate / HUNDRED, TWO_PLACES)
    net_proceeds = projected_value - selling_costs - loan_balance

    total_cash_flow, breakdown = accumulated_cash_flows(
        inputs, months, config.appreciation_rate, base_result=base
    )

    initial_capital = base.steps.total_initial_capital
    total_return = net_proceeds + total_cash_flow

    calculated_at = datetime.now(timezone.utc)
    logger.debug(
        "Sale analysis: %d months at %s%% appreciation, total return %s",
        months, config.appreciation_rate, total_return,
    )

    return SaleAnalysisResult(
        holding_config=config,
        base_result=base,
        projected_property_value=projected_value,
        remaining_loan_balance=loan_balance,
        gross_sale_proceeds=projected_value,
        total_selling_costs=selling_costs,
        net_sale_proceeds=finite(net_proceeds, TWO_PLACES),
        total_cash_flow=total_cash_flow,
        total_return=finite(total_return, TWO_PLACES),
        total_roi=finite(_roi(total_return, initial_capital), FOUR_PLACES),
        annualized_roi=finite(_annualized_roi(total_return, initial_capital, months), FOUR_PLACES),
        yearly_breakdown=tuple(breakdown),
        optimal_sale=optimal_sale_timing(breakdown),
        calculated_at=calculated_at,
        scenario_id=f"sale_{int(calculated_at.timestamp() * 1000)}",
        notes=f"Analysis for {months} months holding period",
    )


def _balanced_score(result: SaleAnalysisResult) -> Decimal:
    return result.total_roi * BALANCED_ROI_WEIGHT + result.annualized_roi * BALANCED_ANNUALIZED_WEIGHT


def compare_sale_scenarios(
    raw: Mapping | InvestmentInputs,
    holding_periods: list[int],
    base_config: HoldingPeriodConfig | None = None,
) -> SaleScenarioComparison:
    """Run one sale analysis per holding period and pick the winners.

    Winners are by total return, by total ROI and by the balanced score
    0.7 * total ROI + 0.3 * annualized ROI. Earlier periods win ties.

    Raises ValueError when the list is empty or any period fails
    holding-period validation.
    """
    if not holding_periods:
        raise ValueError("at least one holding period is required")

    inputs = normalize_inputs(raw)
    config = base_config or SALE_ANALYSIS_DEFAULTS
    configs = [replace(config, holding_months=months, enabled=True) for months in holding_periods]

    errors = [
        f"{c.holding_months} months: {error}"
        for c in configs
        for error in validate_sale_config(c).errors
    ]
    if errors:
        raise ValueError("invalid holding periods: " + "; ".join(errors))

    scenarios = [
        SaleScenario(holding_months=c.holding_months, result=calculate_sale_analysis(inputs, c))
        for c in configs
    ]

    max_return = max(scenarios, key=lambda s: s.result.total_return)
    max_roi = max(scenarios, key=lambda s: s.result.total_roi)
    balanced = max(scenarios, key=lambda s: _balanced_score(s.result))

    return SaleScenarioComparison(
        scenarios=scenarios,
        recommendations=SaleRecommendations(
            max_return_months=max_return.holding_months,
            max_return=max_return.result.total_return,
            max_roi_months=max_roi.holding_months,
            max_roi=max_roi.result.total_roi,
            balanced_months=balanced.holding_months,
            balanced_score=finite(_balanced_score(balanced.result), FOUR_PLACES),
        ),
    )
