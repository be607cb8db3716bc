"""American/decimal odds conversion."""

from __future__ import annotations

import math
import re

from pickledger.errors import OddsParseError

_NON_ODDS_CHARS = re.compile(r"[^\d+-]")
_LEADING_INT = re.compile(r"^[+-]?\d+")
# Products of leg decimals drift in the last bits; 1.2 * (1 + 100/150) is 1.9999999999999998.
DECIMAL_PRECISION = 9


def round_half_up(value: float) -> int:
    """Round .5 toward positive infinity, the way sportsbook displays do."""

    return math.floor(value + 0.5)


def parse_american_odds(odds: str | int) -> int:
    """Read a signed American-odds integer out of free text such as ``"ML -227"``."""

    if isinstance(odds, int) and not isinstance(odds, bool):
        value = odds
    else:
        cleaned = _NON_ODDS_CHARS.sub("", str(odds or ""))
        match = _LEADING_INT.match(cleaned)
        if not match:
            raise OddsParseError(odds)
        value = int(match.group())
    if value == 0:
        raise OddsParseError(odds)
    return value


def american_to_decimal(odds: str | int) -> float:
    value = parse_american_odds(odds)
    if value > 0:
        return 1 + value / 100
    return 1 + 100 / abs(value)


def decimal_to_american(decimal: float) -> str:
    """Render decimal odds as an American string; 2.0 maps to ``"+100"``."""

    decimal = round(decimal, DECIMAL_PRECISION)
    if decimal <= 1.0:
        raise ValueError(f"Decimal odds must be greater than 1.0, got {decimal}")
    if decimal >= 2.0:
        return f"+{round_half_up((decimal - 1) * 100)}"
    return str(round_half_up(-100 / (decimal - 1)))


def format_decimal(decimal: float) -> str:
    return f"{decimal:.3f}"
