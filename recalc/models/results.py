from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from decimal import Decimal
from typing import TYPE_CHECKING

from recalc.models.inputs import InvestmentInputs

if TYPE_CHECKING:
    from recalc.models.sale import SaleAnalysisResult


def _now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class CalculationSteps:
    # Step 1: initial capital
    loan_amount: Decimal = Decimal("0")
    equity_used: Decimal = Decimal("0")
    purchase_cost: Decimal = Decimal("0")
    loan_insurance_cost: Decimal = Decimal("0")
    total_initial_capital: Decimal = Decimal("0")

    # Step 2: monthly operating cost
    monthly_bank_payment: Decimal = Decimal("0")  # Promo-period payment
    monthly_maintenance: Decimal = Decimal("0")
    monthly_capex_reserve: Decimal = Decimal("0")
    monthly_property_insurance: Decimal = Decimal("0")
    total_operating_cost: Decimal = Decimal("0")

    # Step 3: property net cash flow
    effective_rental_income: Decimal = Decimal("0")
    monthly_rental_tax: Decimal = Decimal("0")
    net_property_cash_flow: Decimal = Decimal("0")

    # Step 4: personal cash flow
    personal_cash_flow: Decimal = Decimal("0")


@dataclass(frozen=True)
class CalculationResult:
    inputs: InvestmentInputs
    steps: CalculationSteps

    # Derived metrics
    annual_roi: Decimal = Decimal("0")  # %
    payback_period_years: Decimal = Decimal("-1")  # -1 = no payback within loan term
    net_present_value: Decimal = Decimal("0")
    rental_yield: Decimal = Decimal("0")  # %
    irr: Decimal = Decimal("0")  # Annual %

    warnings: tuple[str, ...] = ()
    suggestions: tuple[str, ...] = ()
    errors: tuple[str, ...] = ()  # Validation errors (non-blocking)

    sale_analysis: SaleAnalysisResult | None = None
    calculated_at: datetime = field(default_factory=_now, compare=False)

    @property
    def has_payback(self) -> bool:
        return self.payback_period_years >= 0


@dataclass(frozen=True)
class MonthlyBreakdownRow:
    month: int
    payment: Decimal
    principal: Decimal
    interest: Decimal
    balance: Decimal
    net_cash_flow: Decimal


@dataclass(frozen=True)
class InvestmentComparison:
    """Best of several independently computed results, by criterion."""
    results: list[CalculationResult]
    best_by_roi: CalculationResult
    best_by_cash_flow: CalculationResult
    best_by_payback: CalculationResult
