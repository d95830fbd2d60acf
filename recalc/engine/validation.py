"""Input and holding-period validation.

Validation reports problems as strings; it never blocks a calculation on its
own. Callers that want hard failures use ``strict=True`` on the pipeline entry
point, which raises InvalidInputError.
"""

from decimal import Decimal

from recalc.config import settings
from recalc.models.inputs import InvestmentInputs
from recalc.models.sale import HoldingPeriodConfig, SaleConfigValidation

MAX_RATE = Decimal("50")
MAX_LOAN_TERM_YEARS = 30


class InvalidInputError(ValueError):
    def __init__(self, errors: list[str]):
        self.errors = list(errors)
        super().__init__("Invalid investment inputs: " + "; ".join(self.errors))


def validate_inputs(inputs: InvestmentInputs) -> list[str]:
    """Structural problems with an input record. Empty list means valid."""
    errors: list[str] = []

    if inputs.price <= 0:
        errors.append("Property price must be greater than 0")
    if inputs.other_income < 0:
        errors.append("Other income must not be negative")
    if inputs.living_expenses < 0:
        errors.append("Living expenses must not be negative")

    if inputs.loan_term_years <= 0:
        errors.append("Loan term must be greater than 0")
    elif inputs.loan_term_years > MAX_LOAN_TERM_YEARS:
        errors.append(f"Loan term must be between 1 and {MAX_LOAN_TERM_YEARS} years")

    if not 0 <= inputs.promo_rate <= MAX_RATE:
        errors.append(f"Promotional rate must be between 0% and {MAX_RATE}%")
    if not 0 <= inputs.float_rate <= MAX_RATE:
        errors.append(f"Floating rate must be between 0% and {MAX_RATE}%")
    if not 0 <= inputs.ltv <= 100:
        errors.append("Loan-to-value must be between 0% and 100%")
    if not 0 <= inputs.occupancy_rate <= 100:
        errors.append("Occupancy rate must be between 0% and 100%")

    if inputs.promo_months < 0:
        errors.append("Promotional period must not be negative")
    elif inputs.promo_months > inputs.loan_term_months:
        errors.append("Promotional period must not exceed the loan term")

    return errors


def validate_sale_config(config: HoldingPeriodConfig) -> SaleConfigValidation:
    errors: list[str] = []
    warnings: list[str] = []

    if config.holding_months < settings.min_holding_months:
        errors.append(f"Holding period must be at least {settings.min_holding_months} months")
    if config.holding_months > settings.max_holding_months:
        errors.append(f"Holding period must be at most {settings.max_holding_months} months")

    if config.appreciation_rate < settings.min_appreciation_rate:
        errors.append(
            f"Appreciation rate cannot be below {settings.min_appreciation_rate}% per year"
        )
    if config.appreciation_rate > settings.high_appreciation_rate:
        warnings.append(
            f"Appreciation above {settings.high_appreciation_rate}% per year may be unrealistic"
        )

    if config.sale_cost_rate is not None:
        if config.sale_cost_rate < settings.min_sale_cost_rate:
            warnings.append(f"Sale costs below {settings.min_sale_cost_rate}% may be unrealistic")
        if config.sale_cost_rate > settings.max_sale_cost_rate:
            warnings.append(f"Sale costs above {settings.max_sale_cost_rate}% may be too high")

    if config.holding_months < settings.short_holding_months:
        warnings.append(
            "Holding for less than 2 years may be inefficient for taxes and transaction costs"
        )

    return SaleConfigValidation(is_valid=not errors, errors=errors, warnings=warnings)
