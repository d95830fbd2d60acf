"""Investment calculator: composes normalization, the cash-flow steps,
valuation metrics and advice into a CalculationResult.

Pure computation. No I/O.
"""

import logging
from collections.abc import Mapping

from recalc.engine.advisor import generate_suggestions, generate_warnings
from recalc.engine.cashflow import advanced_metrics, compute_steps
from recalc.engine.inputs import normalize_inputs
from recalc.engine.validation import InvalidInputError, validate_inputs
from recalc.models.inputs import InvestmentInputs
from recalc.models.results import CalculationResult, InvestmentComparison

logger = logging.getLogger(__name__)


def calculate_investment(
    raw: Mapping | InvestmentInputs, strict: bool = False
) -> CalculationResult:
    """Run the full calculation for one input record.

    Validation errors are logged and returned on the result; with
    ``strict=True`` they raise InvalidInputError instead.
    """
    inputs = normalize_inputs(raw)

    errors = validate_inputs(inputs)
    if errors:
        if strict:
            raise InvalidInputError(errors)
        logger.warning("Input validation found %d problem(s): %s", len(errors), "; ".join(errors))

    steps = compute_steps(inputs)
    metrics = advanced_metrics(inputs, steps)

    return CalculationResult(
        inputs=inputs,
        steps=steps,
        warnings=tuple(generate_warnings(inputs, steps, metrics["rental_yield"])),
        suggestions=tuple(generate_suggestions(inputs, steps)),
        errors=tuple(errors),
        **metrics,
    )


def compare_investments(results: list[CalculationResult]) -> InvestmentComparison:
    """Pick the best result by ROI, by cash flow and by payback period.

    Results without payback rank last on payback.
    """
    if not results:
        raise ValueError("at least one result is required for comparison")

    return InvestmentComparison(
        results=list(results),
        best_by_roi=max(results, key=lambda r: r.annual_roi),
        best_by_cash_flow=max(results, key=lambda r: r.steps.net_property_cash_flow),
        best_by_payback=min(
            results, key=lambda r: (not r.has_payback, r.payback_period_years)
        ),
    )
