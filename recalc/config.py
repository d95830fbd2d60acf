from decimal import Decimal

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    model_config = {"env_file": ".env", "env_file_encoding": "utf-8"}

    # App
    debug: bool = False
    log_level: str = "INFO"

    # Valuation
    npv_discount_rate: Decimal = Decimal("10")  # Annual %, used for the headline NPV
    irr_max_iterations: int = 100
    irr_tolerance: Decimal = Decimal("0.0001")

    # Advisory thresholds (percent units unless noted)
    high_ltv_threshold: Decimal = Decimal("80")
    target_ltv: Decimal = Decimal("70")
    low_rental_yield_threshold: Decimal = Decimal("4")
    low_occupancy_threshold: Decimal = Decimal("90")
    target_occupancy: Decimal = Decimal("95")
    management_fee_share_threshold: Decimal = Decimal("0.10")  # Fraction of rent
    min_capex_reserve_rate: Decimal = Decimal("1")
    min_disposable_income_ratio: Decimal = Decimal("0.2")  # Fraction of other income

    # Sale analysis validation
    min_holding_months: int = 12
    max_holding_months: int = 360
    short_holding_months: int = 24
    min_appreciation_rate: Decimal = Decimal("-10")
    high_appreciation_rate: Decimal = Decimal("30")
    min_sale_cost_rate: Decimal = Decimal("0.5")
    max_sale_cost_rate: Decimal = Decimal("15")

    # Holding periods (months) swept when comparing scenarios
    comparison_holding_periods: list[int] = [24, 36, 48, 60, 84, 120]


settings = Settings()
