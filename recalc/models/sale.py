from dataclasses import dataclass, field
from datetime import date, datetime, timezone
from decimal import Decimal

from recalc.models.results import CalculationResult


@dataclass(frozen=True)
class HoldingPeriodConfig:
    holding_months: int = 60
    appreciation_rate: Decimal = Decimal("5")  # Annual %
    sale_cost_rate: Decimal | None = None  # Overrides the input's sale cost rate
    sale_date: date | None = None  # Informational only; the projection ignores it
    enabled: bool = False


SALE_ANALYSIS_DEFAULTS = HoldingPeriodConfig(
    holding_months=60,
    appreciation_rate=Decimal("5"),
    sale_cost_rate=Decimal("3"),
    enabled=False,
)


@dataclass(frozen=True)
class SaleConfigValidation:
    is_valid: bool
    errors: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)


@dataclass(frozen=True)
class YearlyBreakdown:
    year: int  # 1-based
    property_value: Decimal
    remaining_loan_balance: Decimal
    annual_cash_flow: Decimal
    cumulative_cash_flow: Decimal
    accumulated_equity: Decimal  # Value - loan balance
    roi_if_sold_now: Decimal  # %


@dataclass(frozen=True)
class OptimalSaleTiming:
    best_year: int
    best_roi: Decimal
    reasoning: str


@dataclass(frozen=True)
class SaleAnalysisResult:
    holding_config: HoldingPeriodConfig
    base_result: CalculationResult

    projected_property_value: Decimal
    remaining_loan_balance: Decimal
    gross_sale_proceeds: Decimal
    total_selling_costs: Decimal
    net_sale_proceeds: Decimal

    total_cash_flow: Decimal
    total_return: Decimal
    total_roi: Decimal  # %
    annualized_roi: Decimal  # %

    yearly_breakdown: tuple[YearlyBreakdown, ...]
    optimal_sale: OptimalSaleTiming

    # Metadata
    calculated_at: datetime = field(
        default_factory=lambda: datetime.now(timezone.utc), compare=False
    )
    scenario_id: str = field(default="", compare=False)
    notes: str = ""


@dataclass(frozen=True)
class SaleScenario:
    holding_months: int
    result: SaleAnalysisResult


@dataclass(frozen=True)
class SaleRecommendations:
    max_return_months: int
    max_return: Decimal
    max_roi_months: int
    max_roi: Decimal
    balanced_months: int
    balanced_score: Decimal  # 0.7 * total ROI + 0.3 * annualized ROI


@dataclass(frozen=True)
class SaleScenarioComparison:
    scenarios: list[SaleScenario]
    recommendations: SaleRecommendations


@dataclass(frozen=True)
class HoldingPeriodAnalysis:
    yearly_breakdown: list[YearlyBreakdown]
    optimal_sale_year: int
    max_roi_year: int
    break_even_year: int
    total_cash_flow: Decimal
    average_annual_return: Decimal
    risk_assessment: str  # "low" | "medium" | "high"


@dataclass(frozen=True)
class HoldStrategy:
    years: int
    roi: Decimal
    total_return: Decimal


@dataclass(frozen=True)
class QuickSaleComparison:
    short_term: HoldStrategy
    medium_term: HoldStrategy
    long_term: HoldStrategy
    recommendation: str
