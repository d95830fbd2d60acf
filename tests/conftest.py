"""Canonical test fixtures used across engine and API tests.

Amounts are in whole currency units (VND-scale prices); rates in percent.
"""

import pytest
from decimal import Decimal

from recalc.models.inputs import InvestmentInputs


@pytest.fixture
def leveraged_apartment_raw() -> dict:
    """2.8B property, 1.0B equity (LTV ~64.3%), 18M/month rent, 7.5% promo for 12 months."""
    return {
        "price": 2_800_000_000,
        "cash_equity": 1_000_000_000,
        "monthly_rent": 18_000_000,
        "occupancy_rate": 95,
        "promo_rate": 7.5,
        "promo_months": 12,
        "float_rate": 9.5,
        "loan_term_years": 25,
    }


@pytest.fixture
def high_ltv_no_rent_raw() -> dict:
    """85% LTV with no rental income."""
    return {
        "price": 2_000_000_000,
        "ltv": 85,
        "monthly_rent": 0,
    }


@pytest.fixture
def debt_free_break_even_raw() -> dict:
    """3.0B cash purchase whose rent exactly covers the maintenance cost."""
    return {
        "price": 3_000_000_000,
        "cash_equity": 3_000_000_000,
        "monthly_rent": 2_500_000,
        "occupancy_rate": 100,
        "rental_tax_rate": 0,
        "maintenance_rate": 1,
        "capex_rate": 0,
        "property_insurance_rate": 0,
        "management_fee": 0,
    }


@pytest.fixture
def cash_flowing_raw() -> dict:
    """Cash purchase with a healthy positive monthly cash flow."""
    return {
        "price": 1_000_000_000,
        "cash_equity": 1_000_000_000,
        "monthly_rent": 12_000_000,
        "occupancy_rate": 100,
        "rental_tax_rate": 0,
        "maintenance_rate": 1,
        "capex_rate": 0,
        "property_insurance_rate": 0,
    }


@pytest.fixture
def zero_rate_inputs() -> InvestmentInputs:
    """1.2M property, 50% LTV, interest-free 10-year loan: every figure is exact.

    loan 600,000 -> payment 5,000/month; maintenance and capex 1,000 each,
    insurance 150, management 500 -> operating cost 7,650;
    rent 10,000 at 95% occupancy, 10% tax -> net 900/month.
    """
    return InvestmentInputs(
        price=Decimal("1200000"),
        ltv=Decimal("50"),
        promo_rate=Decimal("0"),
        promo_months=12,
        float_rate=Decimal("0"),
        loan_term_years=10,
        monthly_rent=Decimal("10000"),
        management_fee=Decimal("500"),
    )
