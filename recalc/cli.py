"""CLI client for the RE Calculator API: posts an input record and prints a terminal report.

Usage:
    recalc-report --price 2800000000 --equity 1000000000 --rent 18000000 --promo-rate 7.5
    recalc-report --price 3000000000 --equity 3000000000 --rent 2500000 --hold-months 60 --appreciation 5
"""

import argparse
import asyncio
import sys
from decimal import Decimal

import httpx


# ── Helpers ──────────────────────────────────────────────────────────────────

def _pct(v) -> str:
    """Values arrive in percent units already."""
    return f"{float(v):.2f}%"


def _amount(v) -> str:
    return f"{float(v):,.0f}"


def _header(title: str) -> None:
    print(f"\n{'=' * 64}")
    print(f"  {title}")
    print(f"{'=' * 64}")


# ── Report sections ──────────────────────────────────────────────────────────

def print_inputs_summary(data: dict) -> None:
    inputs = data["inputs"]
    _header("Inputs")
    print(f"  Price:            {_amount(inputs['price'])}")
    print(f"  Loan-to-Value:    {_pct(inputs['ltv'])}")
    print(f"  Promo Rate:       {_pct(inputs['promo_rate'])} for {inputs['promo_months']} months")
    print(f"  Floating Rate:    {_pct(inputs['float_rate'])}")
    print(f"  Loan Term:        {inputs['loan_term_years']} years")
    print(f"  Monthly Rent:     {_amount(inputs['monthly_rent'])}")
    print(f"  Occupancy:        {_pct(inputs['occupancy_rate'])}")


def print_steps(data: dict) -> None:
    steps = data["steps"]
    _header("Cash Flow Steps")
    print(f"  Initial Capital:      {_amount(steps['total_initial_capital'])}")
    print(f"    Loan Amount:        {_amount(steps['loan_amount'])}")
    print(f"    Purchase Costs:     {_amount(steps['purchase_cost'])}")
    print(f"  Bank Payment:         {_amount(steps['monthly_bank_payment'])}/mo")
    print(f"  Operating Cost:       {_amount(steps['total_operating_cost'])}/mo")
    print(f"  Effective Rent:       {_amount(steps['effective_rental_income'])}/mo")
    print(f"  Net Property CF:      {_amount(steps['net_property_cash_flow'])}/mo")
    print(f"  Personal CF:          {_amount(steps['personal_cash_flow'])}/mo")


def print_metrics(data: dict) -> None:
    _header("Metrics")
    print(f"  Annual ROI:           {_pct(data['annual_roi'])}")
    print(f"  Rental Yield:         {_pct(data['rental_yield'])}")
    print(f"  IRR:                  {_pct(data['irr'])}")
    print(f"  NPV:                  {_amount(data['net_present_value'])}")
    payback = Decimal(data["payback_period_years"])
    if payback < 0:
        print("  Payback:              not within the loan term")
    else:
        print(f"  Payback:              {float(payback):.1f} years")


def print_sale(data: dict) -> None:
    sale = data.get("sale_analysis")
    if not sale:
        return
    _header("Sale")
    print(f"  Projected Value:      {_amount(sale['projected_property_value'])}")
    print(f"  Loan Payoff:          {_amount(sale['remaining_loan_balance'])}")
    print(f"  Selling Costs:        {_amount(sale['total_selling_costs'])}")
    print(f"  Net Sale Proceeds:    {_amount(sale['net_sale_proceeds'])}")
    print(f"  Total Return:         {_amount(sale['total_return'])}")
    print(f"  Total ROI:            {_pct(sale['total_roi'])}")
    print(f"  Annualized ROI:       {_pct(sale['annualized_roi'])}")
    print()
    print(f"  {'Yr':>3}  {'Value':>15}  {'Balance':>15}  {'Cum. CF':>15}  {'ROI':>8}")
    print(f"  {'---':>3}  {'-' * 15}  {'-' * 15}  {'-' * 15}  {'-' * 8}")
    for yr in sale["yearly_breakdown"]:
        print(
            f"  {yr['year']:>3}  {_amount(yr['property_value']):>15}  "
            f"{_amount(yr['remaining_loan_balance']):>15}  "
            f"{_amount(yr['cumulative_cash_flow']):>15}  {_pct(yr['roi_if_sold_now']):>8}"
        )
    print()
    print(f"  {sale['optimal_sale']['reasoning']}")


def print_advice(data: dict) -> None:
    sections = (("Errors", "errors"), ("Warnings", "warnings"), ("Suggestions", "suggestions"))
    for title, key in sections:
        messages = data.get(key) or []
        if not messages:
            continue
        _header(title)
        for message in messages:
            print(f"  - {message}")


def print_report(data: dict) -> None:
    print_inputs_summary(data)
    print_steps(data)
    print_metrics(data)
    print_sale(data)
    print_advice(data)
    print()


# ── Request ──────────────────────────────────────────────────────────────────

FIELD_MAP = {
    "price": "price",
    "equity": "cash_equity",
    "ltv": "ltv",
    "promo_rate": "promo_rate",
    "promo_months": "promo_months",
    "float_rate": "float_rate",
    "term_years": "loan_term_years",
    "rent": "monthly_rent",
    "occupancy": "occupancy_rate",
    "management_fee": "management_fee",
    "other_income": "other_income",
    "living_expenses": "living_expenses",
}


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Calculate a real estate investment via the RE Calculator API"
    )
    parser.add_argument("--price", type=Decimal, required=True, help="Property price")
    parser.add_argument("--equity", type=Decimal, help="Cash equity (derives LTV)")
    parser.add_argument("--ltv", type=Decimal, help="Loan-to-value %%")
    parser.add_argument("--promo-rate", type=Decimal, help="Promotional annual rate %%")
    parser.add_argument("--promo-months", type=int, help="Promotional period in months")
    parser.add_argument("--float-rate", type=Decimal, help="Floating annual rate %%")
    parser.add_argument("--term-years", type=int, help="Loan term in years")
    parser.add_argument("--rent", type=Decimal, help="Monthly rent")
    parser.add_argument("--occupancy", type=Decimal, help="Occupancy %%")
    parser.add_argument("--management-fee", type=Decimal, help="Monthly management fee")
    parser.add_argument("--other-income", type=Decimal, help="Other monthly income")
    parser.add_argument("--living-expenses", type=Decimal, help="Monthly living expenses")
    parser.add_argument("--hold-months", type=int, help="Run a sale analysis for this holding period")
    parser.add_argument(
        "--appreciation", type=Decimal, default=Decimal("5"), help="Annual appreciation %% for the sale"
    )
    parser.add_argument("--strict", action="store_true", help="Reject invalid inputs")
    parser.add_argument(
        "--api-url",
        default="http://localhost:8000",
        help="API base URL (default: http://localhost:8000)",
    )
    return parser


def build_request(args: argparse.Namespace) -> tuple[str, dict]:
    """(endpoint path, JSON body) for the parsed arguments."""
    # Only include non-None overrides
    inputs: dict = {}
    for cli_name, api_name in FIELD_MAP.items():
        val = getattr(args, cli_name)
        if val is not None:
            inputs[api_name] = val if not isinstance(val, Decimal) else str(val)

    if args.hold_months is None:
        return "/api/v1/calculate", {"inputs": inputs, "strict": args.strict}

    return "/api/v1/sale-analysis", {
        "inputs": inputs,
        "holding_period": {
            "holding_months": args.hold_months,
            "appreciation_rate": str(args.appreciation),
        },
        "strict": args.strict,
    }


async def fetch_report(
    api_url: str, path: str, payload: dict, transport: httpx.AsyncBaseTransport | None = None
) -> httpx.Response:
    async with httpx.AsyncClient(base_url=api_url, timeout=60, transport=transport) as client:
        return await client.post(path, json=payload)


async def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    path, payload = build_request(args)

    try:
        resp = await fetch_report(args.api_url, path, payload)
    except httpx.ConnectError:
        print(f"Error: Could not connect to API at {args.api_url}", file=sys.stderr)
        print("Is the server running? Start it with: uvicorn recalc.api.app:app", file=sys.stderr)
        return 1
    except httpx.TimeoutException:
        print("Error: Request timed out", file=sys.stderr)
        return 1

    if resp.status_code != 200:
        print(f"Error: API returned {resp.status_code}", file=sys.stderr)
        try:
            detail = resp.json().get("detail", resp.text)
        except ValueError:
            detail = resp.text
        print(f"  {detail}", file=sys.stderr)
        return 1

    print_report(resp.json())
    return 0


def run() -> None:
    sys.exit(asyncio.run(main()))


if __name__ == "__main__":
    run()
