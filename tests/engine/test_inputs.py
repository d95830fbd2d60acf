"""Tests for the input normalizer."""

from decimal import Decimal

import pytest

from recalc.engine.inputs import build_inputs, normalize_inputs
from recalc.models.inputs import INPUT_DEFAULTS, InputSource, InvestmentInputs


class TestDefaults:
    def test_price_only(self):
        inputs, manifest = build_inputs({"price": 1_000_000})
        assert inputs.price == Decimal("1000000")
        assert inputs.ltv == Decimal("70")
        assert inputs.promo_months == 12
        assert inputs.loan_term_years == 20
        assert inputs.occupancy_rate == Decimal("95")
        assert inputs.sale_cost_rate == Decimal("3")
        assert manifest.get("price") == InputSource.USER
        assert manifest.get("ltv") == InputSource.DEFAULT

    def test_every_default_documented(self):
        inputs = normalize_inputs({"price": 1})
        for field, default in INPUT_DEFAULTS.items():
            assert getattr(inputs, field) == default

    def test_missing_price(self):
        inputs, manifest = build_inputs({})
        assert inputs.price == Decimal("0")
        assert manifest.get("price") == InputSource.DEFAULT

    @pytest.mark.parametrize("bad", [None, float("nan"), float("inf"), "", "abc", True, [1]])
    def test_unusable_values_fall_back(self, bad):
        inputs, manifest = build_inputs({"price": 1_000_000, "float_rate": bad})
        assert inputs.float_rate == Decimal("12")
        assert manifest.get("float_rate") == InputSource.DEFAULT

    def test_numeric_strings_accepted(self):
        inputs = normalize_inputs({"price": "2500000000", "promo_rate": "7.25"})
        assert inputs.price == Decimal("2500000000")
        assert inputs.promo_rate == Decimal("7.25")

    def test_user_zero_is_kept(self):
        inputs, manifest = build_inputs({"price": 1_000_000, "occupancy_rate": 0})
        assert inputs.occupancy_rate == Decimal("0")
        assert manifest.get("occupancy_rate") == InputSource.USER

    def test_integer_fields_truncated(self):
        inputs = normalize_inputs({"price": 1_000_000, "promo_months": 12.9, "loan_term_years": "25"})
        assert inputs.promo_months == 12
        assert inputs.loan_term_years == 25

    def test_unknown_keys_ignored(self):
        inputs = normalize_inputs({"price": 1_000_000, "colour": "blue"})
        assert inputs == InvestmentInputs(price=Decimal("1000000"))

    def test_defaulted_listing(self):
        _, manifest = build_inputs({"price": 1_000_000, "monthly_rent": 5_000})
        assert "monthly_rent" not in manifest.defaulted
        assert "capex_rate" in manifest.defaulted


class TestLtvResolution:
    def test_derived_from_equity(self):
        inputs, manifest = build_inputs({"price": 1_000, "cash_equity": 400})
        assert inputs.ltv == Decimal("60")
        assert manifest.get("ltv") == InputSource.DERIVED

    def test_explicit_ltv_wins(self):
        inputs, manifest = build_inputs({"price": 1_000, "cash_equity": 400, "ltv": 50})
        assert inputs.ltv == Decimal("50")
        assert manifest.get("ltv") == InputSource.USER

    def test_equity_above_price_clamps_to_zero(self):
        assert normalize_inputs({"price": 1_000, "cash_equity": 1_500}).ltv == Decimal("0")

    def test_negative_equity_clamps_to_hundred(self):
        assert normalize_inputs({"price": 1_000, "cash_equity": -500}).ltv == Decimal("100")

    def test_no_price_uses_default(self):
        assert normalize_inputs({"cash_equity": 400}).ltv == Decimal("70")

    def test_scenario_ltv(self, leveraged_apartment_raw):
        ltv = normalize_inputs(leveraged_apartment_raw).ltv
        assert Decimal("64.28") < ltv < Decimal("64.29")


class TestPassthrough:
    def test_instance_returned_unchanged(self, zero_rate_inputs):
        assert normalize_inputs(zero_rate_inputs) is zero_rate_inputs

    def test_raw_record_not_mutated(self, leveraged_apartment_raw):
        before = dict(leveraged_apartment_raw)
        normalize_inputs(leveraged_apartment_raw)
        assert leveraged_apartment_raw == before
