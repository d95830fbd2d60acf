"""Investment calculation with an optional sale, and holding-period planning.

A failing or invalid sale configuration never blocks the base calculation:
the base result comes back with an explanatory warning instead.
"""

import logging
from collections.abc import Mapping
from dataclasses import replace
from decimal import Decimal

from recalc.engine.advisor import sale_suggestions
from recalc.engine.disposition import (
    accumulated_cash_flows,
    calculate_sale_analysis,
    optimal_sale_timing,
)
from recalc.engine.inputs import normalize_inputs
from recalc.engine.investment import calculate_investment
from recalc.engine.numeric import TWO_PLACES, finite
from recalc.engine.validation import validate_sale_config
from recalc.models.inputs import InvestmentInputs
from recalc.models.results import CalculationResult
from recalc.models.sale import (
    HoldingPeriodAnalysis,
    HoldingPeriodConfig,
    HoldStrategy,
    QuickSaleComparison,
)

logger = logging.getLogger(__name__)

SALE_FAILED_WARNING = "Sale analysis could not be computed; check the holding-period settings"

# (years, months) for the quick comparison
QUICK_STRATEGIES = ((3, 36), (7, 84), (15, 180))


def calculate_investment_with_sale(
    raw: Mapping | InvestmentInputs,
    holding_config: HoldingPeriodConfig | None = None,
    strict: bool = False,
) -> CalculationResult:
    """Base calculation plus a sale analysis when ``holding_config`` is enabled."""
    base = calculate_investment(raw, strict=strict)

    if holding_config is None or not holding_config.enabled:
        return base

    validation = validate_sale_config(holding_config)
    if not validation.is_valid:
        logger.warning("Sale analysis validation failed: %s", "; ".join(validation.errors))
        skipped = tuple(f"Sale analysis skipped: {e}" for e in validation.errors)
        return replace(base, warnings=base.warnings + skipped)

    warnings = base.warnings + tuple(validation.warnings)

    try:
        sale = calculate_sale_analysis(base.inputs, holding_config)
    except (ArithmeticError, ValueError) as e:
        logger.warning("Sale analysis failed: %s", e)
        return replace(base, warnings=warnings + (SALE_FAILED_WARNING,))

    return replace(
        base,
        warnings=warnings,
        suggestions=tuple(sale_suggestions(base, sale, holding_config)),
        sale_analysis=sale,
    )


def holding_period_analysis(
    raw: Mapping | InvestmentInputs,
    max_years: int = 20,
    appreciation_rate: Decimal = Decimal("5"),
) -> HoldingPeriodAnalysis:
    """Year-by-year sell-now ROI over ``max_years`` with a simple risk grade.

    Break-even is the first year with positive cumulative cash flow, else
    ``max_years``. Risk is low when that comes within 5 years with positive
    total cash flow, high after 10 years or with negative total cash flow.
    """
    if max_years <= 0:
        raise ValueError(f"max_years must be positive, got {max_years}")

    inputs = normalize_inputs(raw)
    _, breakdown = accumulated_cash_flows(inputs, max_years * 12, appreciation_rate)

    best_year = optimal_sale_timing(breakdown).best_year

    break_even_year = next(
        (entry.year for entry in breakdown if entry.cumulative_cash_flow > 0), max_years
    )
    total_cash_flow = breakdown[-1].cumulative_cash_flow

    if break_even_year <= 5 and total_cash_flow > 0:
        risk = "low"
    elif break_even_year > 10 or total_cash_flow < 0:
        risk = "high"
    else:
        risk = "medium"

    return HoldingPeriodAnalysis(
        yearly_breakdown=breakdown,
        optimal_sale_year=best_year,
        max_roi_year=best_year,
        break_even_year=break_even_year,
        total_cash_flow=total_cash_flow,
        average_annual_return=finite(total_cash_flow / max_years, TWO_PLACES),
        risk_assessment=risk,
    )


def quick_sale_comparison(
    raw: Mapping | InvestmentInputs, appreciation_rate: Decimal = Decimal("5")
) -> QuickSaleComparison:
    """Compare selling after 3, 7 and 15 years."""
    inputs = normalize_inputs(raw)

    strategies = []
    for years, months in QUICK_STRATEGIES:
        sale = calculate_sale_analysis(
            inputs,
            HoldingPeriodConfig(
                holding_months=months, appreciation_rate=appreciation_rate, enabled=True
            ),
        )
        strategies.append(HoldStrategy(years=years, roi=sale.total_roi, total_return=sale.total_return))

    best = max(strategies, key=lambda s: s.roi)

    recommendation = f"The {best.years}-year strategy has the highest ROI ({best.roi:.1f}%). "
    if best.years == 3:
        recommendation += "The market may be in a fast-growth phase that suits a short hold."
    elif best.years == 15:
        recommendation += "Steady cash flow and appreciation favor a long hold."
    else:
        recommendation += "A good balance between risk and return."

    short_term, medium_term, long_term = strategies
    return QuickSaleComparison(
        short_term=short_term,
        medium_term=medium_term,
        long_term=long_term,
        recommendation=recommendation,
    )
