"""End-to-end tests for calculate_investment, including the finite-output fuzz."""

import random
from dataclasses import fields
from decimal import Decimal

import pytest

from recalc.engine.investment import calculate_investment, compare_investments
from recalc.engine.validation import InvalidInputError

FUZZ_VALUES = [None, 0, -1, 0.5, 5, 100, 1e6, float("nan"), float("inf"), float("-inf"), "", "abc"]
FUZZ_INTEGER_VALUES = [None, 0, -3, 1, 12, 20, 31, float("nan"), "x"]
FUZZ_FIELDS = [
    "setup_cost", "ltv", "purchase_cost_rate", "loan_insurance_rate", "promo_rate",
    "float_rate", "monthly_rent", "management_fee", "property_insurance_rate",
    "occupancy_rate", "maintenance_rate", "capex_rate", "rental_tax_rate",
    "sale_cost_rate", "other_income", "living_expenses",
]
FUZZ_INTEGER_FIELDS = ["promo_months", "loan_term_years"]


def _decimal_fields(obj) -> dict[str, Decimal]:
    return {
        f.name: getattr(obj, f.name)
        for f in fields(obj)
        if isinstance(getattr(obj, f.name), Decimal)
    }


def _assert_all_finite(result):
    for name, value in {**_decimal_fields(result), **_decimal_fields(result.steps)}.items():
        assert value.is_finite(), f"{name} is {value}"


class TestLeveragedApartment:
    def test_no_high_ltv_warning(self, leveraged_apartment_raw):
        result = calculate_investment(leveraged_apartment_raw)
        assert not any("loan-to-value" in w for w in result.warnings)

    def test_plausible_figures(self, leveraged_apartment_raw):
        result = calculate_investment(leveraged_apartment_raw)
        steps = result.steps
        # 1.8B over 25 years at 7.5 %: about 13.3M per month
        assert Decimal("13000000") < steps.monthly_bank_payment < Decimal("13600000")
        assert steps.effective_rental_income == Decimal("17100000.00")
        assert steps.monthly_rental_tax == Decimal("1710000.00")
        assert steps.net_property_cash_flow == (
            steps.effective_rental_income - steps.total_operating_cost - steps.monthly_rental_tax
        )
        # Default 1 % maintenance and 1 % CapEx on the price outweigh the rent margin
        assert Decimal("-4000000") < steps.net_property_cash_flow < Decimal("0")
        assert result.errors == ()
        _assert_all_finite(result)


class TestHighLtvNoRent:
    def test_warnings(self, high_ltv_no_rent_raw):
        result = calculate_investment(high_ltv_no_rent_raw)
        assert any("High loan-to-value" in w for w in result.warnings)
        assert any("Negative net property cash flow" in w for w in result.warnings)
        assert result.steps.net_property_cash_flow < 0

    def test_suggestions(self, high_ltv_no_rent_raw):
        result = calculate_investment(high_ltv_no_rent_raw)
        assert any("Reduce loan-to-value to 70%" in s for s in result.suggestions)
        assert any("Raise rent" in s for s in result.suggestions)

    def test_metrics_without_inflow(self, high_ltv_no_rent_raw):
        result = calculate_investment(high_ltv_no_rent_raw)
        assert result.payback_period_years == Decimal("-1")
        assert not result.has_payback
        assert result.irr == Decimal("0")
        assert result.annual_roi < 0


class TestWarningsAndSuggestions:
    def test_low_occupancy(self):
        result = calculate_investment({"price": 1_000_000_000, "occupancy_rate": 80})
        assert any("Low occupancy" in w for w in result.warnings)
        assert any("Improve occupancy" in s for s in result.suggestions)

    def test_low_yield(self):
        result = calculate_investment({"price": 1_000_000_000, "monthly_rent": 1_000_000})
        assert any("Low rental yield" in w for w in result.warnings)

    def test_float_below_promo(self):
        result = calculate_investment({"price": 1_000_000_000, "promo_rate": 9, "float_rate": 7})
        assert any("Floating rate" in w for w in result.warnings)

    def test_tight_disposable_income(self):
        result = calculate_investment(
            {"price": 1_000_000_000, "other_income": 50_000_000, "living_expenses": 45_000_000}
        )
        assert any("Disposable income" in w for w in result.warnings)

    def test_management_fee_and_capex(self):
        result = calculate_investment({
            "price": 1_000_000_000,
            "monthly_rent": 10_000_000,
            "management_fee": 2_000_000,
            "capex_rate": 0.5,
        })
        assert any("Management fee takes 20.0%" in s for s in result.suggestions)
        assert any("capital expenditures" in s for s in result.suggestions)


class TestValidationModes:
    def test_errors_reported_not_raised(self):
        result = calculate_investment({"price": 0})
        assert "Property price must be greater than 0" in result.errors
        _assert_all_finite(result)

    def test_strict_raises(self):
        with pytest.raises(InvalidInputError) as exc:
            calculate_investment({"price": 0}, strict=True)
        assert "Property price must be greater than 0" in exc.value.errors

    def test_strict_passes_valid_inputs(self, leveraged_apartment_raw):
        assert calculate_investment(leveraged_apartment_raw, strict=True).errors == ()


class TestPurity:
    def test_repeatable(self, leveraged_apartment_raw):
        assert calculate_investment(leveraged_apartment_raw) == calculate_investment(
            leveraged_apartment_raw
        )

    def test_raw_record_untouched(self, leveraged_apartment_raw):
        before = dict(leveraged_apartment_raw)
        calculate_investment(leveraged_apartment_raw)
        assert leveraged_apartment_raw == before


class TestFiniteOutputs:
    def test_mandatory_fields_only(self):
        _assert_all_finite(calculate_investment({"price": 1_000_000_000, "cash_equity": 300_000_000}))

    def test_zero_everything(self):
        raw = {name: 0 for name in FUZZ_FIELDS + FUZZ_INTEGER_FIELDS}
        raw.update(price=0, cash_equity=0)
        _assert_all_finite(calculate_investment(raw))

    @pytest.mark.parametrize("seed", range(60))
    def test_randomized_partial_inputs(self, seed):
        rng = random.Random(seed)
        raw = {
            "price": rng.choice([0, 1, 1_000_000, 2_800_000_000, float("nan"), None]),
            "cash_equity": rng.choice([0, 500_000, 1_000_000_000, -1, float("nan"), None]),
        }
        for name in rng.sample(FUZZ_FIELDS, rng.randint(0, len(FUZZ_FIELDS))):
            raw[name] = rng.choice(FUZZ_VALUES)
        for name in FUZZ_INTEGER_FIELDS:
            if rng.random() < 0.5:
                raw[name] = rng.choice(FUZZ_INTEGER_VALUES)

        _assert_all_finite(calculate_investment(raw))


class TestCompareInvestments:
    def test_best_by_criterion(self, leveraged_apartment_raw, high_ltv_no_rent_raw, cash_flowing_raw):
        leveraged = calculate_investment(leveraged_apartment_raw)
        no_rent = calculate_investment(high_ltv_no_rent_raw)
        cash = calculate_investment(cash_flowing_raw)

        comparison = compare_investments([leveraged, no_rent, cash])
        assert comparison.best_by_roi is cash
        assert comparison.best_by_cash_flow is cash
        assert comparison.best_by_payback is cash

    def test_no_payback_ranks_last(self, high_ltv_no_rent_raw, cash_flowing_raw):
        no_rent = calculate_investment(high_ltv_no_rent_raw)
        cash = calculate_investment(cash_flowing_raw)
        assert compare_investments([no_rent, cash]).best_by_payback is cash

    def test_requires_results(self):
        with pytest.raises(ValueError):
            compare_investments([])
