"""Two-stage (promo + floating rate) loan math.

Pure functions: Decimal in, Decimal or dataclass out. No I/O.
Rates are annual percentages (8 means 8 %/yr).
"""

import logging
from dataclasses import dataclass
from decimal import Decimal

from recalc.engine.numeric import ZERO, TWELVE, HUNDRED, WHOLE, TWO_PLACES, finite, finite_result
from recalc.models.inputs import InvestmentInputs

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TwoStagePayment:
    promo_payment: Decimal
    float_payment: Decimal
    balance_at_promo_end: Decimal
    total_interest: Decimal


@dataclass(frozen=True)
class AmortizationPayment:
    period: int
    payment: Decimal
    principal: Decimal
    interest: Decimal
    balance: Decimal
    promo: bool = False


@dataclass(frozen=True)
class AmortizationSchedule:
    payments: list[AmortizationPayment]
    promo_payment: Decimal
    float_payment: Decimal
    total_interest: Decimal
    total_principal: Decimal


def _monthly_rate(annual_rate: Decimal) -> Decimal:
    return Decimal(annual_rate) / HUNDRED / TWELVE


@finite_result
def monthly_payment(annual_rate: Decimal, total_months: int, principal: Decimal) -> Decimal:
    """Fixed annuity payment (positive) amortizing ``principal`` over ``total_months``."""
    if total_months <= 0:
        return ZERO
    principal = Decimal(principal)
    if annual_rate == 0:
        return principal / total_months

    r = _monthly_rate(annual_rate)
    # M = P * r(1+r)^n / [(1+r)^n - 1]
    factor = (1 + r) ** total_months
    return principal * r * factor / (factor - 1)


@finite_result
def remaining_balance(
    principal: Decimal, annual_rate: Decimal, total_months: int, months_elapsed: int
) -> Decimal:
    """Balance left after ``months_elapsed`` level payments. Never negative."""
    if total_months <= 0 or months_elapsed >= total_months:
        return ZERO
    principal = Decimal(principal)
    if annual_rate == 0:
        return max(ZERO, principal * (1 - Decimal(months_elapsed) / total_months))

    r = _monthly_rate(annual_rate)
    factor = (1 + r) ** total_months
    paid_factor = (1 + r) ** months_elapsed
    return max(ZERO, principal * (factor - paid_factor) / (factor - 1))


def two_stage_payment(
    principal: Decimal,
    promo_rate: Decimal,
    promo_months: int,
    float_rate: Decimal,
    total_months: int,
) -> TwoStagePayment:
    """Payments for a loan with a promo-rate window followed by a floating rate.

    The promo payment amortizes the whole principal over the full term at the
    promo rate; the floating payment then amortizes whatever is left at the end
    of the promo window over the remaining months.

    Raises ValueError when the term cannot be split.
    """
    if total_months <= 0:
        raise ValueError(f"loan term must be positive, got {total_months} months")
    if promo_months < 0 or promo_months > total_months:
        raise ValueError(
            f"promo period of {promo_months} months does not fit a {total_months}-month loan"
        )
    principal = Decimal(principal)

    if promo_months == 0:
        float_payment = monthly_payment(float_rate, total_months, principal)
        return TwoStagePayment(
            promo_payment=ZERO,
            float_payment=float_payment,
            balance_at_promo_end=principal,
            total_interest=finite(float_payment * total_months - principal),
        )

    promo_payment = monthly_payment(promo_rate, total_months, principal)
    balance = remaining_balance(principal, promo_rate, total_months, promo_months)

    remaining_months = total_months - promo_months
    float_payment = monthly_payment(float_rate, remaining_months, balance)

    promo_interest = promo_payment * promo_months - (principal - balance)
    float_interest = float_payment * remaining_months - balance

    return TwoStagePayment(
        promo_payment=promo_payment,
        float_payment=float_payment,
        balance_at_promo_end=balance,
        total_interest=finite(promo_interest + float_interest),
    )


def loan_payments(inputs: InvestmentInputs) -> TwoStagePayment:
    """Two-stage payments for an input record, falling back to a single rate.

    If the two-stage split fails, the promo rate is applied over the full term.
    """
    loan = inputs.loan_amount
    try:
        return two_stage_payment(
            loan,
            inputs.promo_rate,
            inputs.promo_months,
            inputs.float_rate,
            inputs.loan_term_months,
        )
    except (ValueError, ArithmeticError) as e:
        logger.warning("Two-stage payment failed, using single-rate payment: %s", e)

    payment = monthly_payment(inputs.promo_rate, inputs.loan_term_months, loan)
    return TwoStagePayment(
        promo_payment=payment,
        float_payment=payment,
        balance_at_promo_end=loan,
        total_interest=finite(payment * max(inputs.loan_term_months, 0) - loan),
    )


def remaining_balance_at(inputs: InvestmentInputs, elapsed_months: int) -> Decimal:
    """Loan balance after ``elapsed_months``, honoring the promo/floating split.

    Rounded to whole currency units.
    """
    loan = inputs.loan_amount
    total_months = inputs.loan_term_months
    promo_months = inputs.promo_months

    if loan <= 0 or elapsed_months >= total_months:
        return ZERO

    if elapsed_months <= promo_months:
        balance = remaining_balance(loan, inputs.promo_rate, total_months, elapsed_months)
    else:
        after_promo = remaining_balance(loan, inputs.promo_rate, total_months, promo_months)
        balance = remaining_balance(
            after_promo,
            inputs.float_rate,
            total_months - promo_months,
            elapsed_months - promo_months,
        )

    return max(ZERO, finite(balance, WHOLE))


def amortization_schedule(inputs: InvestmentInputs) -> AmortizationSchedule:
    """Month-by-month schedule: promo payment on the promo rate, then the floating one."""
    payments_due = loan_payments(inputs)
    promo_r = _monthly_rate(inputs.promo_rate)
    float_r = _monthly_rate(inputs.float_rate)

    payments: list[AmortizationPayment] = []
    balance = inputs.loan_amount
    total_interest = ZERO
    total_principal = ZERO

    for period in range(1, inputs.loan_term_months + 1):
        in_promo = period <= inputs.promo_months
        r = promo_r if in_promo else float_r
        pmt = payments_due.promo_payment if in_promo else payments_due.float_payment

        interest = finite(balance * r, TWO_PLACES)
        principal_paid = pmt - interest

        # Final payment adjustment
        if principal_paid > balance:
            principal_paid = balance
            actual_payment = interest + principal_paid
        else:
            actual_payment = pmt

        balance = max(ZERO, balance - principal_paid)
        total_interest += interest
        total_principal += principal_paid

        payments.append(AmortizationPayment(
            period=period,
            payment=finite(actual_payment, TWO_PLACES),
            principal=finite(principal_paid, TWO_PLACES),
            interest=interest,
            balance=finite(balance, TWO_PLACES),
            promo=in_promo,
        ))

    return AmortizationSchedule(
        payments=payments,
        promo_payment=finite(payments_due.promo_payment, TWO_PLACES),
        float_payment=finite(payments_due.float_payment, TWO_PLACES),
        total_interest=finite(total_interest, TWO_PLACES),
        total_principal=finite(total_principal, TWO_PLACES),
    )


def yearly_debt_summary(schedule: AmortizationSchedule) -> list[dict[str, Decimal | int]]:
    """Aggregate amortization schedule by year.

    Returns list of dicts with keys: year, principal, interest, debt_service, ending_balance
    """
    yearly: list[dict[str, Decimal | int]] = []
    year_principal = ZERO
    year_interest = ZERO
    year_debt_service = ZERO

    for p in schedule.payments:
        year_principal += p.principal
        year_interest += p.interest
        year_debt_service += p.payment

        if p.period % 12 == 0 or p.period == len(schedule.payments):
            yearly.append({
                "year": (p.period - 1) // 12 + 1,
                "principal": year_principal,
                "interest": year_interest,
                "debt_service": year_debt_service,
                "ending_balance": p.balance,
            })
            year_principal = ZERO
            year_interest = ZERO
            year_debt_service = ZERO

    return yearly
