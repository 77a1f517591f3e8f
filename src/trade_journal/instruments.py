"""Instrument classification and pip conventions."""

from __future__ import annotations

import re
from typing import Mapping

from trade_journal.types import InstrumentSpec

DEFAULT_PIP_VALUE = 10.0

# USD value of one pip on one standard lot. Pairs quoted in USD are exact;
# the rest are approximations at typical rates.
PIP_VALUES: dict[str, float] = {
    "EURUSD": 10.0,
    "GBPUSD": 10.0,
    "AUDUSD": 10.0,
    "NZDUSD": 10.0,
    "USDJPY": 6.7,
    "EURJPY": 6.7,
    "GBPJPY": 6.7,
    "AUDJPY": 6.7,
    "CADJPY": 6.7,
    "CHFJPY": 6.7,
    "USDCHF": 11.2,
    "EURCHF": 11.2,
    "USDCAD": 7.3,
    "EURCAD": 7.3,
    "GBPCAD": 7.3,
    "EURGBP": 12.7,
    "EURAUD": 6.5,
    "GBPAUD": 6.5,
}

_GOLD_PIP_VALUE = 1.0
_SILVER_PIP_VALUE = 50.0
_METAL_SCALE = 100
_JPY_SCALE = 100
_FOREX_SCALE = 10_000

_SEPARATORS = re.compile(r"[\s/_\-]")


def normalize_symbol(symbol: str | None) -> str:
    """Uppercase a symbol and strip separators (``eur/usd`` -> ``EURUSD``)."""
    if not symbol:
        return ""
    return _SEPARATORS.sub("", symbol).upper()


def classify(
    symbol: str | None,
    pip_values: Mapping[str, float] | None = None,
    default_pip_value: float = DEFAULT_PIP_VALUE,
) -> InstrumentSpec:
    """Classify a symbol and resolve its pip scale and pip value.

    Gold and silver use fixed pip values; JPY crosses and every other symbol
    look the pair up in ``pip_values`` (the built-in table when omitted) and
    fall back to ``default_pip_value``. Unknown or empty symbols are treated
    as standard forex.
    """
    key = normalize_symbol(symbol)
    table = PIP_VALUES if pip_values is None else pip_values

    if "XAU" in key:
        return InstrumentSpec(key, "metal", _METAL_SCALE, _GOLD_PIP_VALUE)
    if "XAG" in key:
        return InstrumentSpec(key, "metal", _METAL_SCALE, _SILVER_PIP_VALUE)

    pip_value = float(table.get(key, table.get(symbol or "", default_pip_value)))
    if "JPY" in key:
        return InstrumentSpec(key, "jpy_cross", _JPY_SCALE, pip_value)
    return InstrumentSpec(key, "standard_forex", _FOREX_SCALE, pip_value)
