"""Pydantic schemas for API request/response models."""

from datetime import date, datetime
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field

from recalc.config import settings
from recalc.models.sale import HoldingPeriodConfig
from recalc.models.scenarios import (
    InvestorType,
    MarketContext,
    MarketType,
    Outlook,
    RiskLevel,
)


# ---- Request schemas ----

class InvestmentInputsRequest(BaseModel):
    """Partial input record. Omitted fields take their documented defaults."""
    price: Decimal = Field(..., description="Property price")
    cash_equity: Decimal | None = None
    setup_cost: Decimal | None = None
    ltv: Decimal | None = Field(None, description="Loan-to-value %, derived from cash_equity if omitted")
    purchase_cost_rate: Decimal | None = None
    loan_insurance_rate: Decimal | None = None

    promo_rate: Decimal | None = None
    promo_months: int | None = None
    float_rate: Decimal | None = None
    loan_term_years: int | None = None

    monthly_rent: Decimal | None = None
    management_fee: Decimal | None = None
    property_insurance_rate: Decimal | None = None
    occupancy_rate: Decimal | None = None
    maintenance_rate: Decimal | None = None
    capex_rate: Decimal | None = None

    rental_tax_rate: Decimal | None = None
    sale_cost_rate: Decimal | None = None

    other_income: Decimal | None = None
    living_expenses: Decimal | None = None

    def to_raw(self) -> dict:
        return self.model_dump(exclude_none=True)


class HoldingPeriodRequest(BaseModel):
    holding_months: int = 60
    appreciation_rate: Decimal = Decimal("5")
    sale_cost_rate: Decimal | None = None
    sale_date: date | None = None
    enabled: bool = True

    def to_config(self) -> HoldingPeriodConfig:
        return HoldingPeriodConfig(**self.model_dump())


class CalculateRequest(BaseModel):
    inputs: InvestmentInputsRequest
    strict: bool = False


class SaleAnalysisRequest(BaseModel):
    inputs: InvestmentInputsRequest
    holding_period: HoldingPeriodRequest = Field(default_factory=HoldingPeriodRequest)
    strict: bool = False


class SaleComparisonRequest(BaseModel):
    inputs: InvestmentInputsRequest
    holding_periods: list[int] = Field(
        default_factory=lambda: list(settings.comparison_holding_periods)
    )
    base_config: HoldingPeriodRequest | None = None


class ScenariosRequest(BaseModel):
    inputs: InvestmentInputsRequest
    market_type: MarketType = MarketType.SECONDARY
    investor_type: InvestorType = InvestorType.NEW
    holding_period: HoldingPeriodRequest | None = None
    scenario_ids: list[str] | None = None

    def to_context(self) -> MarketContext:
        return MarketContext(market_type=self.market_type, investor_type=self.investor_type)


class AmortizationRequest(BaseModel):
    inputs: InvestmentInputsRequest


# ---- Response schemas ----
# Built straight from engine dataclasses via model_validate(obj).

class EngineModel(BaseModel):
    model_config = ConfigDict(from_attributes=True)


class InvestmentInputsResponse(EngineModel):
    price: Decimal
    cash_equity: Decimal
    setup_cost: Decimal
    ltv: Decimal
    purchase_cost_rate: Decimal
    loan_insurance_rate: Decimal
    promo_rate: Decimal
    promo_months: int
    float_rate: Decimal
    loan_term_years: int
    monthly_rent: Decimal
    management_fee: Decimal
    property_insurance_rate: Decimal
    occupancy_rate: Decimal
    maintenance_rate: Decimal
    capex_rate: Decimal
    rental_tax_rate: Decimal
    sale_cost_rate: Decimal
    other_income: Decimal
    living_expenses: Decimal


class CalculationStepsResponse(EngineModel):
    loan_amount: Decimal
    equity_used: Decimal
    purchase_cost: Decimal
    loan_insurance_cost: Decimal
    total_initial_capital: Decimal
    monthly_bank_payment: Decimal
    monthly_maintenance: Decimal
    monthly_capex_reserve: Decimal
    monthly_property_insurance: Decimal
    total_operating_cost: Decimal
    effective_rental_income: Decimal
    monthly_rental_tax: Decimal
    net_property_cash_flow: Decimal
    personal_cash_flow: Decimal


class HoldingPeriodConfigResponse(EngineModel):
    holding_months: int
    appreciation_rate: Decimal
    sale_cost_rate: Decimal | None = None
    sale_date: date | None = None
    enabled: bool


class YearlyBreakdownResponse(EngineModel):
    year: int
    property_value: Decimal
    remaining_loan_balance: Decimal
    annual_cash_flow: Decimal
    cumulative_cash_flow: Decimal
    accumulated_equity: Decimal
    roi_if_sold_now: Decimal


class OptimalSaleResponse(EngineModel):
    best_year: int
    best_roi: Decimal
    reasoning: str


class SaleAnalysisResponse(EngineModel):
    holding_config: HoldingPeriodConfigResponse
    projected_property_value: Decimal
    remaining_loan_balance: Decimal
    gross_sale_proceeds: Decimal
    total_selling_costs: Decimal
    net_sale_proceeds: Decimal
    total_cash_flow: Decimal
    total_return: Decimal
    total_roi: Decimal
    annualized_roi: Decimal
    yearly_breakdown: list[YearlyBreakdownResponse]
    optimal_sale: OptimalSaleResponse
    calculated_at: datetime
    scenario_id: str
    notes: str


class CalculationResponse(EngineModel):
    inputs: InvestmentInputsResponse
    steps: CalculationStepsResponse
    annual_roi: Decimal
    payback_period_years: Decimal
    net_present_value: Decimal
    rental_yield: Decimal
    irr: Decimal
    warnings: list[str]
    suggestions: list[str]
    errors: list[str]
    sale_analysis: SaleAnalysisResponse | None = None
    calculated_at: datetime


class SaleScenarioResponse(EngineModel):
    holding_months: int
    result: SaleAnalysisResponse


class SaleRecommendationsResponse(EngineModel):
    max_return_months: int
    max_return: Decimal
    max_roi_months: int
    max_roi: Decimal
    balanced_months: int
    balanced_score: Decimal


class SaleComparisonResponse(EngineModel):
    scenarios: list[SaleScenarioResponse]
    recommendations: SaleRecommendationsResponse


class EconomicFactorsResponse(EngineModel):
    inflation_rate: Decimal
    gdp_growth_rate: Decimal
    unemployment_rate: Decimal
    primary_price_change: Decimal
    secondary_price_change: Decimal
    new_supply_change: Decimal
    rental_demand_change: Decimal
    rental_supply_change: Decimal
    rental_price_change: Decimal
    base_rate_change: Decimal
    lending_rate_change: Decimal
    credit_availability_change: Decimal
    buyer_sentiment: Decimal
    investor_confidence: Decimal


class SaleFactorsResponse(EngineModel):
    appreciation_rate_change: Decimal
    market_liquidity: Decimal
    transaction_cost_multiplier: Decimal
    average_months_to_sale: int


class MarketImpactsResponse(EngineModel):
    new_investors: Outlook
    existing_investors: Outlook
    rental_market: Outlook


class EconomicScenarioResponse(EngineModel):
    id: str
    name: str
    description: str
    probability: int
    timeframe: str
    factors: EconomicFactorsResponse
    market_impacts: MarketImpactsResponse
    sale_factors: SaleFactorsResponse | None = None


class MarketContextResponse(EngineModel):
    market_type: MarketType
    investor_type: InvestorType


class ImpactAnalysisResponse(EngineModel):
    roi_change: Decimal
    cash_flow_change: Decimal
    payback_change: Decimal
    risk_level: RiskLevel
    key_impacts: list[str]
    investor_advice: list[str]
    market_context: MarketContextResponse
    sale_roi_change: Decimal | None = None
    optimal_sale_year: int | None = None
    sale_recommendation: str | None = None


class SaleComparisonSummaryResponse(EngineModel):
    holding_periods: list[int]
    optimal_months: int
    scenarios: list[tuple[int, Decimal, Decimal]]


class GeneratedScenarioResponse(EngineModel):
    scenario: EconomicScenarioResponse
    market_context: MarketContextResponse
    adjusted_inputs: InvestmentInputsResponse
    result: CalculationResponse
    impact: ImpactAnalysisResponse
    sale_analysis: SaleAnalysisResponse | None = None
    sale_comparison: SaleComparisonSummaryResponse | None = None


class AmortizationPaymentResponse(EngineModel):
    period: int
    payment: Decimal
    principal: Decimal
    interest: Decimal
    balance: Decimal
    promo: bool


class YearlyDebtResponse(EngineModel):
    year: int
    principal: Decimal
    interest: Decimal
    debt_service: Decimal
    ending_balance: Decimal


class AmortizationResponse(BaseModel):
    promo_payment: Decimal
    float_payment: Decimal
    total_interest: Decimal
    total_principal: Decimal
    payments: list[AmortizationPaymentResponse]
    yearly_summary: list[YearlyDebtResponse]
