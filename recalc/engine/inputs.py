"""Input normalizer: partial raw record -> fully-populated InvestmentInputs.

Every field is: user value (if present and finite) -> documented default.
LTV is the exception: explicit value -> derived from cash equity -> default.
"""

from collections.abc import Mapping
from decimal import Decimal

from recalc.engine.numeric import ZERO, HUNDRED, to_decimal, safe_div
from recalc.models.inputs import (
    INPUT_DEFAULTS,
    INTEGER_FIELDS,
    InputManifest,
    InputSource,
    InvestmentInputs,
)


def _value_or_default(field: str, raw_value, default):
    """Return (value, source) for a single field."""
    value = to_decimal(raw_value, default=None)
    if value is None:
        return default, InputSource.DEFAULT
    if field in INTEGER_FIELDS:
        return int(value), InputSource.USER
    return value, InputSource.USER


def _resolve_ltv(raw: Mapping, price: Decimal) -> tuple[Decimal, InputSource]:
    explicit = to_decimal(raw.get("ltv"), default=None)
    if explicit is not None:
        return explicit, InputSource.USER

    equity = to_decimal(raw.get("cash_equity"), default=None)
    if equity is not None and price > 0:
        derived = safe_div(price - equity, price) * HUNDRED
        return min(HUNDRED, max(ZERO, derived)), InputSource.DERIVED

    return INPUT_DEFAULTS["ltv"], InputSource.DEFAULT


def build_inputs(raw: Mapping | InvestmentInputs) -> tuple[InvestmentInputs, InputManifest]:
    """Build InvestmentInputs from a partial mapping, with a source manifest.

    Missing, None, NaN and non-numeric values fall back to defaults; unknown
    keys are ignored. An InvestmentInputs instance passes through unchanged.
    """
    if isinstance(raw, InvestmentInputs):
        sources = {name: InputSource.USER for name in INPUT_DEFAULTS}
        sources["price"] = InputSource.USER
        return raw, InputManifest(sources=sources)

    values: dict[str, Decimal | int] = {}
    sources: dict[str, InputSource] = {}

    values["price"], sources["price"] = _value_or_default("price", raw.get("price"), ZERO)
    values["ltv"], sources["ltv"] = _resolve_ltv(raw, values["price"])

    for field, default in INPUT_DEFAULTS.items():
        if field == "ltv":
            continue
        values[field], sources[field] = _value_or_default(field, raw.get(field), default)

    return InvestmentInputs(**values), InputManifest(sources=sources)


def normalize_inputs(raw: Mapping | InvestmentInputs) -> InvestmentInputs:
    inputs, _ = build_inputs(raw)
    return inputs
