"""Economic scenario records.

A scenario is a base factor record plus an optional sale-specific sub-record,
composed rather than inherited.
"""

from dataclasses import dataclass, field
from decimal import Decimal
from enum import Enum

from recalc.models.inputs import InvestmentInputs
from recalc.models.results import CalculationResult
from recalc.models.sale import SaleAnalysisResult


class MarketType(Enum):
    PRIMARY = "primary"  # Bought from the developer
    SECONDARY = "secondary"  # Resale market


class InvestorType(Enum):
    NEW = "new_investor"
    EXISTING = "existing_investor"


class Outlook(Enum):
    POSITIVE = "positive"
    NEGATIVE = "negative"
    NEUTRAL = "neutral"


class RiskLevel(Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


@dataclass(frozen=True)
class MarketContext:
    market_type: MarketType = MarketType.SECONDARY
    investor_type: InvestorType = InvestorType.NEW


@dataclass(frozen=True)
class EconomicFactors:
    """Percentage deltas (sentiment fields are an index from -100 to +100)."""

    # Macro
    inflation_rate: Decimal = Decimal("0")
    gdp_growth_rate: Decimal = Decimal("0")
    unemployment_rate: Decimal = Decimal("0")

    # Property market
    primary_price_change: Decimal = Decimal("0")
    secondary_price_change: Decimal = Decimal("0")
    new_supply_change: Decimal = Decimal("0")

    # Rental market
    rental_demand_change: Decimal = Decimal("0")
    rental_supply_change: Decimal = Decimal("0")
    rental_price_change: Decimal = Decimal("0")

    # Financing (rate changes in percentage points)
    base_rate_change: Decimal = Decimal("0")
    lending_rate_change: Decimal = Decimal("0")
    credit_availability_change: Decimal = Decimal("0")

    # Sentiment
    buyer_sentiment: Decimal = Decimal("0")
    investor_confidence: Decimal = Decimal("0")

    def price_change(self, market_type: MarketType) -> Decimal:
        if market_type is MarketType.PRIMARY:
            return self.primary_price_change
        return self.secondary_price_change

    @property
    def average_price_change(self) -> Decimal:
        return (self.primary_price_change + self.secondary_price_change) / 2

    @property
    def average_sentiment(self) -> Decimal:
        return (self.buyer_sentiment + self.investor_confidence) / 2

    @property
    def rental_tightness(self) -> Decimal:
        return self.rental_demand_change - self.rental_supply_change


@dataclass(frozen=True)
class SaleFactors:
    appreciation_rate_change: Decimal = Decimal("0")  # Annual % points
    market_liquidity: Decimal = Decimal("0")  # -100 to +100
    transaction_cost_multiplier: Decimal = Decimal("1")
    average_months_to_sale: int = 3


@dataclass(frozen=True)
class MarketImpacts:
    new_investors: Outlook = Outlook.NEUTRAL
    existing_investors: Outlook = Outlook.NEUTRAL
    rental_market: Outlook = Outlook.NEUTRAL


@dataclass(frozen=True)
class SaleImpacts:
    appreciation: str  # accelerated | normal | decelerated | negative
    liquidity: str  # high | normal | low | illiquid
    transaction_costs: str  # low | normal | high


@dataclass(frozen=True)
class EconomicScenario:
    id: str
    name: str
    description: str
    probability: int  # %
    timeframe: str
    factors: EconomicFactors
    market_impacts: MarketImpacts = field(default_factory=MarketImpacts)
    sale_factors: SaleFactors | None = None


@dataclass(frozen=True)
class ImpactAnalysis:
    roi_change: Decimal
    cash_flow_change: Decimal
    payback_change: Decimal
    risk_level: RiskLevel
    key_impacts: list[str]
    investor_advice: list[str]
    market_context: MarketContext

    # Populated only when a sale analysis ran for the scenario
    sale_roi_change: Decimal | None = None
    optimal_sale_year: int | None = None
    sale_recommendation: str | None = None


@dataclass(frozen=True)
class SaleComparisonSummary:
    holding_periods: list[int]
    optimal_months: int
    scenarios: list[tuple[int, Decimal, Decimal]]  # (months, total ROI, total return)


@dataclass(frozen=True)
class GeneratedScenario:
    scenario: EconomicScenario
    market_context: MarketContext
    original_inputs: InvestmentInputs
    adjusted_inputs: InvestmentInputs
    result: CalculationResult
    impact: ImpactAnalysis
    sale_analysis: SaleAnalysisResult | None = None
    sale_comparison: SaleComparisonSummary | None = None
