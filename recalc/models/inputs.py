from dataclasses import dataclass, field
from decimal import Decimal
from enum import Enum


@dataclass(frozen=True)
class InvestmentInputs:
    """Fully-populated investment input record. Percent fields are in percent units."""

    # Purchase
    price: Decimal
    cash_equity: Decimal = Decimal("0")
    setup_cost: Decimal = Decimal("0")  # One-time furnishing/renovation
    ltv: Decimal = Decimal("70")
    purchase_cost_rate: Decimal = Decimal("2")  # % of price
    loan_insurance_rate: Decimal = Decimal("1.5")  # % of loan amount

    # Financing
    promo_rate: Decimal = Decimal("8")  # Annual %
    promo_months: int = 12
    float_rate: Decimal = Decimal("12")  # Annual %
    loan_term_years: int = 20

    # Operations
    monthly_rent: Decimal = Decimal("0")
    management_fee: Decimal = Decimal("0")  # Monthly amount
    property_insurance_rate: Decimal = Decimal("0.15")  # Annual % of price
    occupancy_rate: Decimal = Decimal("95")
    maintenance_rate: Decimal = Decimal("1")  # Annual % of price
    capex_rate: Decimal = Decimal("1")  # Annual % of price

    # Tax & exit
    rental_tax_rate: Decimal = Decimal("10")  # % of effective rental income
    sale_cost_rate: Decimal = Decimal("3")  # % of gross sale price

    # Personal finances (monthly)
    other_income: Decimal = Decimal("0")
    living_expenses: Decimal = Decimal("0")

    @property
    def loan_amount(self) -> Decimal:
        return self.price * self.ltv / 100

    @property
    def loan_term_months(self) -> int:
        return self.loan_term_years * 12


INTEGER_FIELDS = frozenset({"promo_months", "loan_term_years"})

# Documented defaults for every optional field, applied field-by-field.
INPUT_DEFAULTS: dict[str, Decimal | int] = {
    "cash_equity": Decimal("0"),
    "setup_cost": Decimal("0"),
    "ltv": Decimal("70"),
    "purchase_cost_rate": Decimal("2"),
    "loan_insurance_rate": Decimal("1.5"),
    "promo_rate": Decimal("8"),
    "promo_months": 12,
    "float_rate": Decimal("12"),
    "loan_term_years": 20,
    "monthly_rent": Decimal("0"),
    "management_fee": Decimal("0"),
    "property_insurance_rate": Decimal("0.15"),
    "occupancy_rate": Decimal("95"),
    "maintenance_rate": Decimal("1"),
    "capex_rate": Decimal("1"),
    "rental_tax_rate": Decimal("10"),
    "sale_cost_rate": Decimal("3"),
    "other_income": Decimal("0"),
    "living_expenses": Decimal("0"),
}


class InputSource(Enum):
    USER = "user"
    DEFAULT = "default"
    DERIVED = "derived"


@dataclass(frozen=True)
class InputManifest:
    """Where each normalized field came from."""
    sources: dict[str, InputSource] = field(default_factory=dict)

    def get(self, field_name: str) -> InputSource | None:
        return self.sources.get(field_name)

    @property
    def defaulted(self) -> list[str]:
        return [k for k, v in self.sources.items() if v is InputSource.DEFAULT]
