"""Tests for economic scenario adjustment and impact analysis."""

from dataclasses import replace
from decimal import Decimal

import pytest

from recalc.engine.inputs import normalize_inputs
from recalc.engine.investment import calculate_investment
from recalc.engine.scenarios import (
    ECONOMIC_SCENARIOS,
    SCENARIO_IDS,
    adjust_holding_config,
    analyze_impact,
    apply_economic_factors,
    apply_sale_factors,
    classify_sale_impacts,
    derive_sale_factors,
    generate_scenarios,
    investor_advice,
    sale_recommendation,
)
from recalc.models.sale import HoldingPeriodConfig
from recalc.models.scenarios import (
    EconomicFactors,
    InvestorType,
    MarketContext,
    MarketType,
    RiskLevel,
    SaleFactors,
)

SCENARIOS = {s.id: s for s in ECONOMIC_SCENARIOS}
BOOM = SCENARIOS["property_boom"]
CORRECTION = SCENARIOS["market_correction"]
SPIKE = SCENARIOS["interest_spike"]

NEW_SECONDARY = MarketContext(MarketType.SECONDARY, InvestorType.NEW)
EXISTING = MarketContext(MarketType.SECONDARY, InvestorType.EXISTING)


@pytest.fixture
def rented_inputs():
    return normalize_inputs({
        "price": 2_000_000_000,
        "monthly_rent": 10_000_000,
        "management_fee": 1_000_000,
    })


class TestBuiltInScenarios:
    def test_catalog(self):
        assert SCENARIO_IDS == ("property_boom", "market_correction", "rental_boom", "interest_spike")
        assert all(s.sale_factors is not None for s in ECONOMIC_SCENARIOS)


class TestApplyEconomicFactors:
    def test_property_boom_for_new_investor(self, rented_inputs):
        adjusted = apply_economic_factors(rented_inputs, BOOM.factors, NEW_SECONDARY)

        assert adjusted.price == Decimal("2300000000.00")
        # 12 % rent growth plus half of the 15-point demand-supply gap
        assert adjusted.monthly_rent == Decimal("11950000.00")
        # +0.5 base, +0.3 lending, +1.0 from tighter credit
        assert adjusted.promo_rate == Decimal("9.8")
        assert adjusted.float_rate == Decimal("13.8")
        assert adjusted.occupancy_rate == Decimal("98")
        assert adjusted.maintenance_rate == Decimal("1.05")
        assert adjusted.property_insurance_rate == Decimal("0.1575")
        assert adjusted.management_fee == Decimal("1050000.00")

    def test_primary_market_uses_primary_price_change(self, rented_inputs):
        context = MarketContext(MarketType.PRIMARY, InvestorType.NEW)
        adjusted = apply_economic_factors(rented_inputs, BOOM.factors, context)
        assert adjusted.price == Decimal("2160000000.00")

    def test_existing_investor_keeps_purchase_price(self, rented_inputs):
        adjusted = apply_economic_factors(rented_inputs, BOOM.factors, EXISTING)
        assert adjusted.price == rented_inputs.price
        assert adjusted.monthly_rent == Decimal("11950000.00")

    def test_price_floor(self):
        inputs = normalize_inputs({"price": 500_000})
        adjusted = apply_economic_factors(inputs, CORRECTION.factors, NEW_SECONDARY)
        assert adjusted.price == Decimal("1000000.00")

    def test_rates_floor(self, rented_inputs):
        factors = EconomicFactors(base_rate_change=Decimal("-20"))
        adjusted = apply_economic_factors(rented_inputs, factors)
        assert adjusted.promo_rate == Decimal("0.1")
        assert adjusted.float_rate == Decimal("0.1")

    def test_vacancy_bounds(self, rented_inputs):
        slack = EconomicFactors(rental_supply_change=Decimal("200"))
        assert apply_economic_factors(rented_inputs, slack).occupancy_rate == Decimal("80")

    def test_original_untouched(self, rented_inputs):
        before = replace(rented_inputs)
        apply_economic_factors(rented_inputs, BOOM.factors)
        assert rented_inputs == before


class TestSaleFactors:
    def test_boom(self):
        factors = derive_sale_factors(BOOM.factors)
        assert factors.appreciation_rate_change == Decimal("6.9")
        assert factors.market_liquidity == Decimal("52")
        assert factors.transaction_cost_multiplier == Decimal("0.8")
        assert factors.average_months_to_sale == 2

    def test_interest_spike(self):
        factors = derive_sale_factors(SPIKE.factors)
        assert factors.transaction_cost_multiplier == Decimal("1.2")
        assert factors.average_months_to_sale == 6

    def test_correction(self):
        factors = derive_sale_factors(CORRECTION.factors)
        assert factors.appreciation_rate_change == Decimal("-3")
        assert factors.market_liquidity == Decimal("-28")
        assert factors.transaction_cost_multiplier == Decimal("1")
        assert factors.average_months_to_sale == 3

    def test_classification(self):
        boom = classify_sale_impacts(BOOM.factors)
        assert (boom.appreciation, boom.liquidity, boom.transaction_costs) == ("accelerated", "high", "low")
        correction = classify_sale_impacts(CORRECTION.factors)
        assert (correction.appreciation, correction.liquidity, correction.transaction_costs) == (
            "negative", "low", "normal",
        )
        spike = classify_sale_impacts(SPIKE.factors)
        assert spike.transaction_costs == "high"


class TestApplySaleFactors:
    def test_scales_sale_cost(self, rented_inputs):
        adjusted = apply_sale_factors(rented_inputs, derive_sale_factors(BOOM.factors))
        assert adjusted.sale_cost_rate == Decimal("2.4")

    def test_clamped(self, rented_inputs):
        inputs = replace(rented_inputs, sale_cost_rate=Decimal("20"))
        adjusted = apply_sale_factors(inputs, SaleFactors(transaction_cost_multiplier=Decimal("1.2")))
        assert adjusted.sale_cost_rate == Decimal("15")


class TestAdjustHoldingConfig:
    def test_appreciation_clamped(self):
        config = HoldingPeriodConfig(appreciation_rate=Decimal("28"), enabled=True)
        adjusted = adjust_holding_config(config, derive_sale_factors(BOOM.factors))
        assert adjusted.appreciation_rate == Decimal("30")
        # Unset sale cost starts from the 3 % default
        assert adjusted.sale_cost_rate == Decimal("2.4")
        assert adjusted.enabled

    def test_appreciation_floor(self):
        config = HoldingPeriodConfig(appreciation_rate=Decimal("-9"))
        adjusted = adjust_holding_config(config, derive_sale_factors(CORRECTION.factors))
        assert adjusted.appreciation_rate == Decimal("-10")


class TestAnalyzeImpact:
    def test_boom_for_existing_investor(self, rented_inputs):
        original = calculate_investment(rented_inputs)
        adjusted = calculate_investment(apply_economic_factors(rented_inputs, BOOM.factors, EXISTING))

        impact = analyze_impact(original, adjusted, BOOM.factors, EXISTING)
        assert impact.cash_flow_change == (
            adjusted.steps.net_property_cash_flow - original.steps.net_property_cash_flow
        )
        assert "Property value up 15.0%" in impact.key_impacts
        assert "Rental income up 12.0%" in impact.key_impacts
        assert "Positive buyer sentiment" in impact.key_impacts
        assert impact.market_context == EXISTING
        assert impact.sale_roi_change is None

    def test_negative_roi_is_critical(self, high_ltv_no_rent_raw):
        result = calculate_investment(high_ltv_no_rent_raw)
        impact = analyze_impact(result, result, EconomicFactors())
        assert impact.risk_level is RiskLevel.CRITICAL
        assert any("High risk" in a for a in impact.investor_advice)

    def test_healthy_property_is_low_risk(self, cash_flowing_raw):
        result = calculate_investment(cash_flowing_raw)
        impact = analyze_impact(result, result, EconomicFactors())
        assert impact.risk_level is RiskLevel.LOW
        assert impact.roi_change == Decimal("0")
        assert impact.key_impacts == []

    def test_payback_change_needs_both_paybacks(self, cash_flowing_raw, high_ltv_no_rent_raw):
        paying = calculate_investment(cash_flowing_raw)
        never = calculate_investment(high_ltv_no_rent_raw)
        assert analyze_impact(paying, never, EconomicFactors()).payback_change == Decimal("0")


class TestInvestorAdvice:
    def test_existing_investor_in_boom(self):
        advice = investor_advice(BOOM.factors, EXISTING, RiskLevel.LOW)
        assert any("refinancing" in a for a in advice)
        assert any("raise rents" in a for a in advice)
        assert any("expanding the portfolio" in a for a in advice)

    def test_new_investor_in_spike(self):
        advice = investor_advice(SPIKE.factors, NEW_SECONDARY, RiskLevel.MEDIUM)
        assert any("Credit is tight" in a for a in advice)
        assert any("negotiate" in a for a in advice)


class TestSaleRecommendation:
    def test_without_sale(self):
        text = sale_recommendation(derive_sale_factors(BOOM.factors), None)
        assert text == "Enable sale analysis for detailed recommendations."


class TestGenerateScenarios:
    def test_all_scenarios(self, rented_inputs):
        generated = generate_scenarios(rented_inputs)
        assert [g.scenario.id for g in generated] == list(SCENARIO_IDS)
        for g in generated:
            assert g.original_inputs == rented_inputs
            assert g.sale_analysis is None
            assert g.sale_comparison is None
            assert g.impact.sale_recommendation is None

    def test_unknown_ids_ignored(self, rented_inputs):
        generated = generate_scenarios(rented_inputs, scenario_ids=["rental_boom", "alien_invasion"])
        assert [g.scenario.id for g in generated] == ["rental_boom"]

    def test_sale_factors_only_with_enabled_holding(self, rented_inputs):
        disabled = generate_scenarios(
            rented_inputs,
            holding_config=HoldingPeriodConfig(enabled=False),
            scenario_ids=["property_boom"],
        )[0]
        assert disabled.adjusted_inputs.sale_cost_rate == rented_inputs.sale_cost_rate

    def test_with_sale_analysis(self, rented_inputs):
        config = HoldingPeriodConfig(holding_months=60, appreciation_rate=Decimal("5"), enabled=True)
        generated = generate_scenarios(
            rented_inputs, context=EXISTING, holding_config=config, scenario_ids=["property_boom"]
        )[0]

        assert generated.adjusted_inputs.sale_cost_rate == Decimal("2.4")
        sale = generated.sale_analysis
        assert sale is not None
        assert sale.holding_config.appreciation_rate == Decimal("11.9")
        assert generated.impact.optimal_sale_year == sale.optimal_sale.best_year
        assert generated.impact.sale_recommendation.startswith("Strong appreciation expected.")
        assert generated.sale_comparison.holding_periods == [24, 36, 48, 60, 84, 120]
        assert len(generated.sale_comparison.scenarios) == 6
