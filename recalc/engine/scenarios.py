"""Economic scenario adjustment.

A scenario is a bundle of market deltas. Applying one produces a new,
adjusted InvestmentInputs (the original is never touched), which is then run
through the investment pipeline and, optionally, the sale analysis.
"""

import logging
from collections.abc import Mapping
from dataclasses import replace
from decimal import Decimal

from recalc.config import settings
from recalc.engine.disposition import calculate_sale_analysis, compare_sale_scenarios
from recalc.engine.inputs import normalize_inputs
from recalc.engine.investment import calculate_investment
from recalc.engine.numeric import ZERO, ONE, HUNDRED, FOUR_PLACES, TWO_PLACES, finite
from recalc.models.inputs import InvestmentInputs
from recalc.models.results import CalculationResult
from recalc.models.sale import SALE_ANALYSIS_DEFAULTS, HoldingPeriodConfig, SaleAnalysisResult
from recalc.models.scenarios import (
    EconomicFactors,
    EconomicScenario,
    GeneratedScenario,
    ImpactAnalysis,
    InvestorType,
    MarketContext,
    MarketImpacts,
    MarketType,
    Outlook,
    RiskLevel,
    SaleComparisonSummary,
    SaleFactors,
    SaleImpacts,
)

logger = logging.getLogger(__name__)

MIN_PRICE = Decimal("1000000")
MIN_RATE = Decimal("0.1")
MIN_VACANCY = Decimal("2")
MAX_VACANCY = Decimal("20")
RENTAL_TIGHTNESS_WEIGHT = Decimal("0.5")  # Rent % per point of demand-supply gap
VACANCY_TIGHTNESS_WEIGHT = Decimal("0.2")
CREDIT_RATE_WEIGHT = Decimal("0.1")  # Rate points per point of credit availability

APPRECIATION_PRICE_WEIGHT = Decimal("0.6")
LIQUIDITY_SENTIMENT_WEIGHT = Decimal("0.8")

MIN_SALE_COST_RATE = Decimal("0.5")
MAX_SALE_COST_RATE = Decimal("15")
MIN_APPRECIATION_RATE = Decimal("-10")
MAX_APPRECIATION_RATE = Decimal("30")

CRITICAL_CASH_FLOW = Decimal("-2000000")
MEDIUM_CASH_FLOW_DROP = Decimal("-1000000")
NOTABLE_CASH_FLOW_CHANGE = Decimal("500000")
HIGH_RISK_ROI = Decimal("5")


def _clamp(value: Decimal, low: Decimal, high: Decimal) -> Decimal:
    return max(low, min(high, value))


def _pct_factor(change: Decimal) -> Decimal:
    return ONE + change / HUNDRED


def apply_economic_factors(
    inputs: InvestmentInputs,
    factors: EconomicFactors,
    context: MarketContext | None = None,
) -> InvestmentInputs:
    """Adjusted copy of ``inputs`` under ``factors``.

    New investors buy at the moved market price; existing investors already
    own the property and keep their purchase price. Rent follows the rental
    price change plus half the demand-supply gap, both loan rates follow the
    lending rate moves, vacancy shrinks as the rental market tightens, and
    running costs scale with inflation.
    """
    context = context or MarketContext()

    price = inputs.price
    if context.investor_type is InvestorType.NEW:
        price = max(MIN_PRICE, inputs.price * _pct_factor(factors.price_change(context.market_type)))

    tightness = factors.rental_tightness
    rent_change = factors.rental_price_change + tightness * RENTAL_TIGHTNESS_WEIGHT
    rent = max(ZERO, inputs.monthly_rent * _pct_factor(rent_change))

    rate_change = (
        factors.base_rate_change
        + factors.lending_rate_change
        - factors.credit_availability_change * CREDIT_RATE_WEIGHT
    )

    vacancy = HUNDRED - inputs.occupancy_rate
    vacancy = _clamp(vacancy - tightness * VACANCY_TIGHTNESS_WEIGHT, MIN_VACANCY, MAX_VACANCY)

    inflation = _pct_factor(factors.inflation_rate)

    return replace(
        inputs,
        price=finite(price, TWO_PLACES),
        monthly_rent=finite(rent, TWO_PLACES),
        promo_rate=finite(max(MIN_RATE, inputs.promo_rate + rate_change), FOUR_PLACES),
        float_rate=finite(max(MIN_RATE, inputs.float_rate + rate_change), FOUR_PLACES),
        occupancy_rate=finite(HUNDRED - vacancy, FOUR_PLACES),
        management_fee=finite(inputs.management_fee * inflation, TWO_PLACES),
        maintenance_rate=finite(inputs.maintenance_rate * inflation, FOUR_PLACES),
        property_insurance_rate=finite(inputs.property_insurance_rate * inflation, FOUR_PLACES),
    )


def derive_sale_factors(factors: EconomicFactors) -> SaleFactors:
    """Map market factors onto appreciation, liquidity and transaction costs.

    Hard times (inflation above 5 % or unemployment above 8 %) raise
    transaction costs by 20 % and slow sales; booms (growth above 5 % with
    sentiment above 30) cut them by 20 %.
    """
    sentiment = factors.average_sentiment

    if factors.inflation_rate > 5 or factors.unemployment_rate > 8:
        multiplier, months_to_sale = Decimal("1.2"), 6
    elif factors.gdp_growth_rate > 5 and sentiment > 30:
        multiplier, months_to_sale = Decimal("0.8"), 2
    else:
        multiplier, months_to_sale = ONE, 3

    return SaleFactors(
        appreciation_rate_change=factors.average_price_change * APPRECIATION_PRICE_WEIGHT,
        market_liquidity=sentiment * LIQUIDITY_SENTIMENT_WEIGHT,
        transaction_cost_multiplier=multiplier,
        average_months_to_sale=months_to_sale,
    )


def classify_sale_impacts(factors: EconomicFactors) -> SaleImpacts:
    price_change = factors.average_price_change
    sentiment = factors.average_sentiment

    if price_change > 10:
        appreciation = "accelerated"
    elif price_change > 0:
        appreciation = "normal"
    elif price_change > -5:
        appreciation = "decelerated"
    else:
        appreciation = "negative"

    if sentiment > 40:
        liquidity = "high"
    elif sentiment > 0:
        liquidity = "normal"
    elif sentiment > -40:
        liquidity = "low"
    else:
        liquidity = "illiquid"

    if factors.inflation_rate > 6 or factors.unemployment_rate > 10:
        transaction_costs = "high"
    elif factors.gdp_growth_rate > 6 and sentiment > 50:
        transaction_costs = "low"
    else:
        transaction_costs = "normal"

    return SaleImpacts(
        appreciation=appreciation, liquidity=liquidity, transaction_costs=transaction_costs
    )


def apply_sale_factors(inputs: InvestmentInputs, sale_factors: SaleFactors) -> InvestmentInputs:
    """Scale the input's sale cost rate by the transaction cost multiplier."""
    rate = inputs.sale_cost_rate * sale_factors.transaction_cost_multiplier
    return replace(
        inputs,
        sale_cost_rate=_clamp(rate, MIN_SALE_COST_RATE, MAX_SALE_COST_RATE),
    )


def adjust_holding_config(
    config: HoldingPeriodConfig, sale_factors: SaleFactors
) -> HoldingPeriodConfig:
    base_cost = config.sale_cost_rate
    if base_cost is None:
        base_cost = SALE_ANALYSIS_DEFAULTS.sale_cost_rate

    return replace(
        config,
        appreciation_rate=_clamp(
            config.appreciation_rate + sale_factors.appreciation_rate_change,
            MIN_APPRECIATION_RATE,
            MAX_APPRECIATION_RATE,
        ),
        sale_cost_rate=_clamp(
            base_cost * sale_factors.transaction_cost_multiplier,
            MIN_SALE_COST_RATE,
            MAX_SALE_COST_RATE,
        ),
    )


def _risk_level(result: CalculationResult, roi_change: Decimal, cash_flow_change: Decimal) -> RiskLevel:
    cash_flow = result.steps.net_property_cash_flow
    if cash_flow < CRITICAL_CASH_FLOW or result.annual_roi < 0:
        return RiskLevel.CRITICAL
    if cash_flow < 0 or result.annual_roi < HIGH_RISK_ROI:
        return RiskLevel.HIGH
    if roi_change < -3 or cash_flow_change < MEDIUM_CASH_FLOW_DROP:
        return RiskLevel.MEDIUM
    return RiskLevel.LOW


def _key_impacts(
    factors: EconomicFactors,
    context: MarketContext,
    roi_change: Decimal,
    cash_flow_change: Decimal,
) -> list[str]:
    impacts: list[str] = []
    price_change = factors.price_change(context.market_type)
    price_rising = factors.primary_price_change > 0 or factors.secondary_price_change > 0

    if context.investor_type is InvestorType.EXISTING:
        if price_rising:
            impacts.append(f"Property value up {price_change:.1f}%")
        if factors.rental_price_change > 0:
            impacts.append(f"Rental income up {factors.rental_price_change:.1f}%")
    elif price_rising:
        impacts.append(f"Purchase cost up {price_change:.1f}%")

    if abs(roi_change) > 1:
        direction = "up" if roi_change > 0 else "down"
        impacts.append(f"ROI {direction} {abs(roi_change):.1f}%")

    if abs(cash_flow_change) > NOTABLE_CASH_FLOW_CHANGE:
        direction = "up" if cash_flow_change > 0 else "down"
        millions = abs(cash_flow_change) / Decimal("1000000")
        impacts.append(f"Cash flow {direction} {millions:.1f}M per month")

    if factors.lending_rate_change != 0:
        direction = "up" if factors.lending_rate_change > 0 else "down"
        impacts.append(f"Lending rate {direction} {abs(factors.lending_rate_change):.1f}%")

    if factors.buyer_sentiment < -30:
        impacts.append("Negative buyer sentiment")
    elif factors.buyer_sentiment > 30:
        impacts.append("Positive buyer sentiment")

    return impacts


def investor_advice(
    factors: EconomicFactors, context: MarketContext, risk_level: RiskLevel
) -> list[str]:
    advice: list[str] = []

    if context.investor_type is InvestorType.EXISTING:
        if factors.primary_price_change > 5 or factors.secondary_price_change > 5:
            advice.append("Consider refinancing to unlock the gain in property value")
        if factors.rental_price_change > 3:
            advice.append("A good time to raise rents")
        if risk_level is RiskLevel.LOW and factors.investor_confidence > 20:
            advice.append("Conditions allow expanding the portfolio")
    else:
        if factors.primary_price_change > 10:
            advice.append("Consider waiting for the market to cool")
        if factors.credit_availability_change < -20:
            advice.append("Credit is tight; prepare a larger equity share")
        if context.market_type is MarketType.SECONDARY and factors.buyer_sentiment < -20:
            advice.append("Weak buyer sentiment gives room to negotiate with sellers")

    if risk_level in (RiskLevel.HIGH, RiskLevel.CRITICAL):
        advice.append("High risk: evaluate the deal carefully before committing")

    return advice


def sale_recommendation(sale_factors: SaleFactors, sale: SaleAnalysisResult | None) -> str:
    if sale is None:
        return "Enable sale analysis for detailed recommendations."

    if sale_factors.appreciation_rate_change > 5:
        parts = ["Strong appreciation expected. Consider holding longer for maximum gains."]
    elif sale_factors.appreciation_rate_change < -3:
        parts = ["Property depreciation risk. Consider selling sooner."]
    else:
        parts = [f"Optimal sale timing is year {sale.optimal_sale.best_year}."]

    if sale_factors.market_liquidity < -30:
        parts.append("Market liquidity concerns; allow extra time for the sale.")
    elif sale_factors.market_liquidity > 30:
        parts.append("High market liquidity; a quick sale is possible.")

    if sale_factors.transaction_cost_multiplier > Decimal("1.2"):
        parts.append("High transaction costs; make sure the holding period justifies them.")

    return " ".join(parts)


def analyze_impact(
    original: CalculationResult,
    adjusted: CalculationResult,
    factors: EconomicFactors,
    context: MarketContext | None = None,
    sale: SaleAnalysisResult | None = None,
    sale_factors: SaleFactors | None = None,
) -> ImpactAnalysis:
    """Deltas between the original and scenario-adjusted results, graded for risk.

    The payback delta is 0 unless both results pay back within the loan term.
    """
    context = context or MarketContext()

    roi_change = adjusted.annual_roi - original.annual_roi
    cash_flow_change = adjusted.steps.net_property_cash_flow - original.steps.net_property_cash_flow
    if original.has_payback and adjusted.has_payback:
        payback_change = adjusted.payback_period_years - original.payback_period_years
    else:
        payback_change = ZERO

    risk_level = _risk_level(adjusted, roi_change, cash_flow_change)

    sale_fields = {}
    if sale is not None:
        sale_fields = {
            "sale_roi_change": finite(sale.total_roi - original.annual_roi, FOUR_PLACES),
            "optimal_sale_year": sale.optimal_sale.best_year,
            "sale_recommendation": sale_recommendation(
                sale_factors or derive_sale_factors(factors), sale
            ),
        }

    return ImpactAnalysis(
        roi_change=finite(roi_change, FOUR_PLACES),
        cash_flow_change=finite(cash_flow_change, TWO_PLACES),
        payback_change=finite(payback_change, FOUR_PLACES),
        risk_level=risk_level,
        key_impacts=_key_impacts(factors, context, roi_change, cash_flow_change),
        investor_advice=investor_advice(factors, context, risk_level),
        market_context=context,
        **sale_fields,
    )


def _sale_comparison(
    inputs: InvestmentInputs, config: HoldingPeriodConfig
) -> SaleComparisonSummary:
    periods = list(settings.comparison_holding_periods)
    comparison = compare_sale_scenarios(inputs, periods, config)
    return SaleComparisonSummary(
        holding_periods=periods,
        optimal_months=comparison.recommendations.balanced_months,
        scenarios=[
            (s.holding_months, s.result.total_roi, s.result.total_return)
            for s in comparison.scenarios
        ],
    )


def generate_scenarios(
    raw: Mapping | InvestmentInputs,
    context: MarketContext | None = None,
    holding_config: HoldingPeriodConfig | None = None,
    scenario_ids: list[str] | None = None,
) -> list[GeneratedScenario]:
    """Run every selected built-in scenario against ``raw``.

    With an enabled ``holding_config`` each scenario also gets a sale
    analysis under scenario-adjusted appreciation and sale costs, plus a
    comparison across the configured holding periods. Unknown scenario ids
    are ignored.
    """
    context = context or MarketContext()
    inputs = normalize_inputs(raw)
    original = calculate_investment(inputs)
    with_sale = holding_config is not None and holding_config.enabled

    selected = [
        s for s in ECONOMIC_SCENARIOS if scenario_ids is None or s.id in scenario_ids
    ]
    logger.debug("Generating %d economic scenarios (sale analysis: %s)", len(selected), with_sale)

    generated: list[GeneratedScenario] = []
    for scenario in selected:
        sale_factors = scenario.sale_factors or derive_sale_factors(scenario.factors)
        adjusted_inputs = apply_economic_factors(inputs, scenario.factors, context)

        sale = None
        comparison = None
        if with_sale:
            adjusted_inputs = apply_sale_factors(adjusted_inputs, sale_factors)
            config = adjust_holding_config(holding_config, sale_factors)
            sale = calculate_sale_analysis(adjusted_inputs, config)
            comparison = _sale_comparison(adjusted_inputs, config)

        result = calculate_investment(adjusted_inputs)
        generated.append(GeneratedScenario(
            scenario=scenario,
            market_context=context,
            original_inputs=inputs,
            adjusted_inputs=adjusted_inputs,
            result=result,
            impact=analyze_impact(original, result, scenario.factors, context, sale, sale_factors),
            sale_analysis=sale,
            sale_comparison=comparison,
        ))

    return generated


def _scenario(
    id: str,
    name: str,
    description: str,
    probability: int,
    timeframe: str,
    factors: EconomicFactors,
    impacts: MarketImpacts,
) -> EconomicScenario:
    return EconomicScenario(
        id=id,
        name=name,
        description=description,
        probability=probability,
        timeframe=timeframe,
        factors=factors,
        market_impacts=impacts,
        sale_factors=derive_sale_factors(factors),
    )


ECONOMIC_SCENARIOS: tuple[EconomicScenario, ...] = (
    _scenario(
        "property_boom",
        "Property boom",
        "Prices rise sharply on strong demand and scarce supply",
        20,
        "1-2 years",
        EconomicFactors(
            inflation_rate=Decimal("5"),
            gdp_growth_rate=Decimal("7"),
            unemployment_rate=Decimal("4"),
            primary_price_change=Decimal("8"),
            secondary_price_change=Decimal("15"),
            new_supply_change=Decimal("-20"),
            rental_demand_change=Decimal("10"),
            rental_supply_change=Decimal("-5"),
            rental_price_change=Decimal("12"),
            base_rate_change=Decimal("0.5"),
            lending_rate_change=Decimal("0.3"),
            credit_availability_change=Decimal("-10"),
            buyer_sentiment=Decimal("60"),
            investor_confidence=Decimal("70"),
        ),
        MarketImpacts(
            new_investors=Outlook.NEGATIVE,
            existing_investors=Outlook.POSITIVE,
            rental_market=Outlook.POSITIVE,
        ),
    ),
    _scenario(
        "market_correction",
        "Market correction",
        "Prices fall and liquidity dries up, opening opportunities for buyers",
        25,
        "6-18 months",
        EconomicFactors(
            inflation_rate=Decimal("3"),
            gdp_growth_rate=Decimal("3"),
            unemployment_rate=Decimal("7"),
            primary_price_change=Decimal("-2"),
            secondary_price_change=Decimal("-8"),
            new_supply_change=Decimal("15"),
            rental_demand_change=Decimal("-5"),
            rental_supply_change=Decimal("10"),
            rental_price_change=Decimal("-3"),
            base_rate_change=Decimal("-0.5"),
            lending_rate_change=Decimal("-0.2"),
            credit_availability_change=Decimal("15"),
            buyer_sentiment=Decimal("-40"),
            investor_confidence=Decimal("-30"),
        ),
        MarketImpacts(
            new_investors=Outlook.POSITIVE,
            existing_investors=Outlook.NEGATIVE,
            rental_market=Outlook.NEGATIVE,
        ),
    ),
    _scenario(
        "rental_boom",
        "Rental boom",
        "Rental demand surges, rents climb and vacancy falls",
        30,
        "1-3 years",
        EconomicFactors(
            inflation_rate=Decimal("4"),
            gdp_growth_rate=Decimal("6"),
            unemployment_rate=Decimal("5"),
            primary_price_change=Decimal("3"),
            secondary_price_change=Decimal("5"),
            new_supply_change=Decimal("-10"),
            rental_demand_change=Decimal("20"),
            rental_supply_change=Decimal("-8"),
            rental_price_change=Decimal("15"),
            base_rate_change=Decimal("0"),
            lending_rate_change=Decimal("0.2"),
            credit_availability_change=Decimal("0"),
            buyer_sentiment=Decimal("20"),
            investor_confidence=Decimal("50"),
        ),
        MarketImpacts(
            new_investors=Outlook.POSITIVE,
            existing_investors=Outlook.POSITIVE,
            rental_market=Outlook.POSITIVE,
        ),
    ),
    _scenario(
        "interest_spike",
        "Interest rate spike",
        "The central bank raises rates sharply to contain inflation",
        15,
        "6-12 months",
        EconomicFactors(
            inflation_rate=Decimal("8"),
            gdp_growth_rate=Decimal("4"),
            unemployment_rate=Decimal("6"),
            primary_price_change=Decimal("-1"),
            secondary_price_change=Decimal("-5"),
            new_supply_change=Decimal("5"),
            rental_demand_change=Decimal("5"),
            rental_supply_change=Decimal("-2"),
            rental_price_change=Decimal("3"),
            base_rate_change=Decimal("2"),
            lending_rate_change=Decimal("3"),
            credit_availability_change=Decimal("-30"),
            buyer_sentiment=Decimal("-50"),
            investor_confidence=Decimal("-40"),
        ),
        MarketImpacts(
            new_investors=Outlook.NEGATIVE,
            existing_investors=Outlook.NEGATIVE,
            rental_market=Outlook.POSITIVE,
        ),
    ),
)

SCENARIO_IDS = tuple(s.id for s in ECONOMIC_SCENARIOS)
