import math
import random
from decimal import Decimal

import pytest

from recalc.engine.debt import monthly_payment
from recalc.engine.valuation import (
    NO_PAYBACK,
    cash_on_cash_return,
    flat_series,
    internal_rate_of_return,
    net_present_value,
    payback_period_years,
    rental_yield,
)


class TestNetPresentValue:
    def test_zero_discount_is_plain_sum(self):
        npv = net_present_value(Decimal("1000"), [Decimal("500")] * 3, Decimal("0"))
        assert npv == Decimal("500")

    def test_single_period_discount(self):
        # 101 received in one month at 12%/yr (1%/month) is worth exactly 100 today
        npv = net_present_value(Decimal("100"), [Decimal("101")], Decimal("12"))
        assert npv == Decimal("0")

    def test_higher_rate_lowers_npv(self):
        flows = flat_series(Decimal("1000"), 120)
        low = net_present_value(Decimal("50000"), flows, Decimal("5"))
        high = net_present_value(Decimal("50000"), flows, Decimal("15"))
        assert high < low

    def test_no_flows(self):
        assert net_present_value(Decimal("1000"), [], Decimal("10")) == Decimal("-1000")


class TestInternalRateOfReturn:
    def test_recovers_known_rate(self):
        """Payments of a 12%/yr annuity discount back to the principal at 12%."""
        flows = [monthly_payment(Decimal("12"), 12, Decimal("1000"))] * 12
        irr = internal_rate_of_return(Decimal("1000"), flows)
        assert abs(irr - Decimal("12")) < Decimal("0.01")

    def test_long_series(self):
        flows = [monthly_payment(Decimal("9"), 240, Decimal("500000"))] * 240
        irr = internal_rate_of_return(Decimal("500000"), flows)
        assert abs(irr - Decimal("9")) < Decimal("0.01")

    def test_always_finite(self):
        irr = internal_rate_of_return(Decimal("1000"), [Decimal("0")] * 12)
        assert irr.is_finite()


class TestPaybackPeriod:
    def test_interpolates_crossing_month(self):
        # -1000 +300/month: -700, -400, -100, +200 -> crosses 1/3 into month 4
        years = payback_period_years(Decimal("1000"), [Decimal("300")] * 12)
        assert abs(years - Decimal("10") / Decimal("36")) < Decimal("0.000001")

    def test_never_pays_back(self):
        assert payback_period_years(Decimal("1000"), [Decimal("10")] * 12) == NO_PAYBACK

    def test_negative_flows(self):
        assert payback_period_years(Decimal("1000"), [Decimal("-50")] * 24) == NO_PAYBACK

    @pytest.mark.parametrize("seed", range(20))
    def test_crossing_is_located(self, seed):
        rng = random.Random(seed)
        # Half-unit offset keeps the running total off exactly zero
        initial = Decimal(rng.randint(1_000, 100_000)) + Decimal("0.5")
        flows = [Decimal(rng.randint(-200, 2_000)) for _ in range(240)]

        years = payback_period_years(initial, flows)
        if years == NO_PAYBACK:
            return

        month = math.ceil(years * 12)
        cumulative = [-initial]
        for cash_flow in flows:
            cumulative.append(cumulative[-1] + cash_flow)

        assert cumulative[month] >= 0
        assert cumulative[month - 1] < 0


class TestRentalYield:
    def test_full_occupancy(self):
        assert rental_yield(Decimal("1200000"), Decimal("10000")) == Decimal("10")

    def test_vacancy_reduces_yield(self):
        assert rental_yield(Decimal("1200000"), Decimal("10000"), Decimal("50")) == Decimal("5")

    def test_zero_value(self):
        assert rental_yield(Decimal("0"), Decimal("10000")) == Decimal("0")


class TestCashOnCashReturn:
    def test_basic(self):
        assert cash_on_cash_return(Decimal("200000"), Decimal("20000")) == Decimal("10")

    def test_no_investment(self):
        assert cash_on_cash_return(Decimal("0"), Decimal("20000")) == Decimal("0")


class TestFlatSeries:
    def test_length_and_value(self):
        series = flat_series(Decimal("900"), 120)
        assert len(series) == 120
        assert set(series) == {Decimal("900")}

    def test_negative_length(self):
        assert flat_series(Decimal("900"), -12) == []
