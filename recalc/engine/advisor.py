"""Risk warnings and improvement suggestions derived from a calculation.

All messages are plain strings; amounts are whole currency units.
"""

from decimal import Decimal, ROUND_HALF_UP

from recalc.config import settings
from recalc.engine.numeric import HUNDRED, WHOLE, safe_div
from recalc.models.inputs import InvestmentInputs
from recalc.models.results import CalculationResult, CalculationSteps
from recalc.models.sale import HoldingPeriodConfig, SaleAnalysisResult


def _amount(value: Decimal) -> str:
    return f"{abs(value):,.0f}"


def _pct(value: Decimal, places: int = 1) -> str:
    return f"{value:.{places}f}%"


def generate_warnings(
    inputs: InvestmentInputs, steps: CalculationSteps, rental_yield: Decimal
) -> list[str]:
    warnings: list[str] = []

    if inputs.ltv > settings.high_ltv_threshold:
        warnings.append(f"High loan-to-value of {_pct(inputs.ltv)} carries significant financial risk")

    if steps.net_property_cash_flow < 0:
        warnings.append(
            f"Negative net property cash flow of -{_amount(steps.net_property_cash_flow)} per month"
        )
    if steps.personal_cash_flow < 0:
        warnings.append(
            f"Negative personal cash flow of -{_amount(steps.personal_cash_flow)} per month"
        )

    if inputs.occupancy_rate < settings.low_occupancy_threshold:
        warnings.append(f"Low occupancy of {_pct(inputs.occupancy_rate)} may hurt cash flow")

    if inputs.other_income > 0:
        disposable = (inputs.other_income - inputs.living_expenses) / inputs.other_income
        if disposable < settings.min_disposable_income_ratio:
            warnings.append(
                f"Disposable income is only {_pct(disposable * HUNDRED)} of other income"
            )

    if rental_yield < settings.low_rental_yield_threshold:
        warnings.append(f"Low rental yield of {_pct(rental_yield, 2)} per year")

    if inputs.float_rate < inputs.promo_rate:
        warnings.append("Floating rate is usually higher than the promotional rate")

    return warnings


def generate_suggestions(inputs: InvestmentInputs, steps: CalculationSteps) -> list[str]:
    suggestions: list[str] = []

    if inputs.ltv > settings.target_ltv:
        target_loan = inputs.price * settings.target_ltv / HUNDRED
        additional_equity = steps.loan_amount - target_loan
        suggestions.append(
            f"Reduce loan-to-value to {_pct(settings.target_ltv, 0)} "
            f"(about {_amount(additional_equity)} more equity) to lower risk"
        )

    if steps.net_property_cash_flow < 0:
        suggestions.append(
            f"Raise rent by about {_amount(steps.net_property_cash_flow)} per month "
            "or cut operating costs to break even"
        )

    if inputs.occupancy_rate < settings.target_occupancy:
        suggestions.append(
            f"Improve occupancy toward {_pct(settings.target_occupancy, 0)} "
            "through better marketing and service"
        )

    if inputs.management_fee > inputs.monthly_rent * settings.management_fee_share_threshold:
        share = safe_div(inputs.management_fee, inputs.monthly_rent) * HUNDRED
        suggestions.append(
            f"Management fee takes {_pct(share)} of rent; renegotiate it or self-manage"
        )

    if inputs.capex_rate < settings.min_capex_reserve_rate:
        suggestions.append(
            f"Reserve at least {_pct(settings.min_capex_reserve_rate, 0)} of the property value "
            "per year for capital expenditures"
        )

    return suggestions


def sale_suggestions(
    base: CalculationResult, sale: SaleAnalysisResult, config: HoldingPeriodConfig
) -> list[str]:
    """Base suggestions plus sale-timing and return-mix advice."""
    suggestions = list(base.suggestions)

    best = sale.optimal_sale
    planned_years = int((Decimal(config.holding_months) / 12).quantize(WHOLE, ROUND_HALF_UP))
    if best.best_year < planned_years:
        suggestions.append(
            f"Selling earlier, in year {best.best_year}, could reach a higher ROI "
            f"({_pct(best.best_roi)})"
        )
    elif best.best_year > planned_years:
        suggestions.append(
            f"Holding until year {best.best_year} maximizes ROI ({_pct(best.best_roi)})"
        )

    annual_roi = base.annual_roi
    if sale.total_roi > annual_roi * Decimal("1.5"):
        suggestions.append(
            f"A sale strategy could lift ROI from {_pct(annual_roi)} to {_pct(sale.total_roi)}"
        )
    elif sale.total_roi < annual_roi * Decimal("0.8"):
        suggestions.append(
            f"Long-term renting may beat selling (current annual ROI {_pct(annual_roi)})"
        )

    cash_flow = sale.total_cash_flow
    appreciation_gain = sale.net_sale_proceeds - base.steps.total_initial_capital
    if appreciation_gain > cash_flow * 2:
        share = safe_div(appreciation_gain, sale.total_return) * HUNDRED
        suggestions.append(
            f"Returns come mostly from appreciation ({share:.0f}%); "
            "watch the market to time the sale"
        )
    elif cash_flow > appreciation_gain * 2:
        share = safe_div(cash_flow, sale.total_return) * HUNDRED
        suggestions.append(
            f"Returns come mostly from cash flow ({share:.0f}%); a long hold suits this property"
        )

    if config.appreciation_rate > 10:
        suggestions.append(
            f"High appreciation ({_pct(config.appreciation_rate)} per year); "
            "consider holding longer if the market sustains it"
        )
    elif config.appreciation_rate < 3:
        suggestions.append(
            f"Slow appreciation ({_pct(config.appreciation_rate)} per year); "
            "focus on optimizing rental cash flow"
        )

    holding_years = Decimal(config.holding_months) / 12
    if holding_years > 10:
        suggestions.append(
            f"Long hold ({holding_years:.1f} years): plan for market shifts and keep exit options open"
        )

    cost_share = safe_div(sale.total_selling_costs, sale.projected_property_value) * HUNDRED
    if cost_share > 5:
        suggestions.append(
            f"High selling costs ({_pct(cost_share)}); hold longer to spread them "
            "or negotiate lower brokerage fees"
        )

    return suggestions
