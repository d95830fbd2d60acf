"""Four-step monthly cash-flow derivation.

Step 1: initial capital -> Step 2: monthly operating cost ->
Step 3: net property cash flow -> Step 4: personal cash flow.

Pure functions: InvestmentInputs in, Decimal dicts / CalculationSteps out. No I/O.
Each step's outputs pass through ``finite`` so no field is ever non-finite.
"""

from decimal import Decimal

from recalc.config import settings
from recalc.engine.debt import amortization_schedule, loan_payments
from recalc.engine.numeric import ZERO, HUNDRED, TWELVE, TWO_PLACES, FOUR_PLACES, finite
from recalc.engine.valuation import (
    NO_PAYBACK,
    cash_on_cash_return,
    flat_series,
    internal_rate_of_return,
    net_present_value,
    payback_period_years,
    rental_yield,
)
from recalc.models.inputs import InvestmentInputs
from recalc.models.results import CalculationSteps, MonthlyBreakdownRow


def _finish(step: dict[str, Decimal]) -> dict[str, Decimal]:
    return {name: finite(value, TWO_PLACES) for name, value in step.items()}


def initial_capital(inputs: InvestmentInputs) -> dict[str, Decimal]:
    """Equity + setup + purchase costs + loan insurance."""
    loan_amount = inputs.price * inputs.ltv / HUNDRED
    equity_used = max(ZERO, inputs.price - loan_amount)
    purchase_cost = inputs.price * inputs.purchase_cost_rate / HUNDRED
    loan_insurance_cost = loan_amount * inputs.loan_insurance_rate / HUNDRED

    return _finish({
        "loan_amount": loan_amount,
        "equity_used": equity_used,
        "purchase_cost": purchase_cost,
        "loan_insurance_cost": loan_insurance_cost,
        "total_initial_capital": equity_used + inputs.setup_cost + purchase_cost + loan_insurance_cost,
    })


def monthly_operating_cost(inputs: InvestmentInputs) -> dict[str, Decimal]:
    """Bank payment + management + maintenance + CapEx reserve + insurance.

    The promo-period payment is reported as the monthly bank payment whichever
    period is active; without a promo period it is the floating payment.
    """
    payments = loan_payments(inputs)
    if inputs.promo_months > 0:
        bank_payment = abs(payments.promo_payment)
    else:
        bank_payment = abs(payments.float_payment)

    maintenance = inputs.price * inputs.maintenance_rate / HUNDRED / TWELVE
    capex = inputs.price * inputs.capex_rate / HUNDRED / TWELVE
    insurance = inputs.price * inputs.property_insurance_rate / HUNDRED / TWELVE

    return _finish({
        "monthly_bank_payment": bank_payment,
        "monthly_maintenance": maintenance,
        "monthly_capex_reserve": capex,
        "monthly_property_insurance": insurance,
        "total_operating_cost": bank_payment + inputs.management_fee + maintenance + capex + insurance,
    })


def property_net_cash_flow(inputs: InvestmentInputs, total_operating_cost: Decimal) -> dict[str, Decimal]:
    """Effective rent (after vacancy) - operating cost - rental tax."""
    effective_income = inputs.monthly_rent * inputs.occupancy_rate / HUNDRED
    rental_tax = effective_income * inputs.rental_tax_rate / HUNDRED

    return _finish({
        "effective_rental_income": effective_income,
        "monthly_rental_tax": rental_tax,
        "net_property_cash_flow": effective_income - total_operating_cost - rental_tax,
    })


def personal_cash_flow(inputs: InvestmentInputs, net_property_cash_flow: Decimal) -> dict[str, Decimal]:
    return _finish({
        "personal_cash_flow": inputs.other_income - inputs.living_expenses + net_property_cash_flow,
    })


def compute_steps(inputs: InvestmentInputs) -> CalculationSteps:
    step1 = initial_capital(inputs)
    step2 = monthly_operating_cost(inputs)
    step3 = property_net_cash_flow(inputs, step2["total_operating_cost"])
    step4 = personal_cash_flow(inputs, step3["net_property_cash_flow"])
    return CalculationSteps(**step1, **step2, **step3, **step4)


def advanced_metrics(inputs: InvestmentInputs, steps: CalculationSteps) -> dict[str, Decimal]:
    """Annual ROI, NPV, payback, rental yield and IRR.

    The projected series repeats the current net property cash flow for every
    month of the loan term; the later move to the floating payment is not
    modelled.
    """
    initial = steps.total_initial_capital
    monthly = steps.net_property_cash_flow
    series = flat_series(monthly, inputs.loan_term_months)

    payback = payback_period_years(initial, series)
    if payback <= 0:
        payback = NO_PAYBACK

    # A series with no inflow has no IRR
    irr = internal_rate_of_return(initial, series) if monthly > 0 else ZERO

    return {
        "annual_roi": finite(cash_on_cash_return(initial, monthly * 12), FOUR_PLACES),
        "net_present_value": finite(
            net_present_value(initial, series, settings.npv_discount_rate), TWO_PLACES
        ),
        "payback_period_years": finite(payback, FOUR_PLACES),
        "rental_yield": finite(
            rental_yield(inputs.price, inputs.monthly_rent, inputs.occupancy_rate), FOUR_PLACES
        ),
        "irr": finite(irr, FOUR_PLACES),
    }


def monthly_breakdown(inputs: InvestmentInputs) -> list[MonthlyBreakdownRow]:
    """Per-month loan servicing alongside the steady net property cash flow."""
    net_cash_flow = compute_steps(inputs).net_property_cash_flow
    schedule = amortization_schedule(inputs)
    return [
        MonthlyBreakdownRow(
            month=p.period,
            payment=p.payment,
            principal=p.principal,
            interest=p.interest,
            balance=p.balance,
            net_cash_flow=net_cash_flow,
        )
        for p in schedule.payments
    ]
