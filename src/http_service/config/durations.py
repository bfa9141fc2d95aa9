"""
Compact duration strings such as "5s", "250ms" or "1h30m".

The grammar is an optional sign followed by one or more `<number><unit>`
components. Numbers may carry a fraction ("1.5s"). A bare "0" is accepted.
"""

from __future__ import annotations

import re
from datetime import timedelta
from decimal import Decimal, InvalidOperation

# Microseconds per unit. Totals round to the nearest microsecond, except that a
# nonzero total below 1us becomes 1us so its sign survives.
_UNITS = {
    "ns": Decimal("0.001"),
    "us": Decimal(1),
    "µs": Decimal(1),
    "μs": Decimal(1),
    "ms": Decimal(1_000),
    "s": Decimal(1_000_000),
    "m": Decimal(60_000_000),
    "h": Decimal(3_600_000_000),
}

_COMPONENT = re.compile(r"([0-9]+\.?[0-9]*|\.[0-9]+)(ns|us|µs|μs|ms|s|m|h)")
_FORMAT_UNITS = (("h", 3_600_000_000), ("m", 60_000_000), ("s", 1_000_000))


def parse_duration(text: str) -> timedelta:
    """Parse a duration string. Raises ValueError when it does not match the grammar."""
    s = text
    sign = 1
    if s[:1] in ("+", "-"):
        if s[0] == "-":
            sign = -1
        s = s[1:]

    if s == "0":
        return timedelta(0)
    if not s:
        raise ValueError(f"invalid duration {text!r}")

    total = Decimal(0)
    pos = 0
    while pos < len(s):
        match = _COMPONENT.match(s, pos)
        if match is None:
            if s[pos] in "0123456789.":
                raise ValueError(f"missing or unknown unit in duration {text!r}")
            raise ValueError(f"invalid duration {text!r}")
        number, unit = match.groups()
        try:
            total += Decimal(number) * _UNITS[unit]
        except InvalidOperation as exc:
            raise ValueError(f"invalid duration {text!r}") from exc
        pos = match.end()

    micros = int(total.to_integral_value())
    if total and not micros:
        micros = 1
    try:
        return timedelta(microseconds=sign * micros)
    except OverflowError as exc:
        raise ValueError(f"duration out of range {text!r}") from exc


def format_duration(value: timedelta) -> str:
    """Render a timedelta in the compact form accepted by parse_duration."""
    micros = (value.days * 86_400 + value.seconds) * 1_000_000 + value.microseconds
    if micros == 0:
        return "0s"

    sign = "-" if micros < 0 else ""
    micros = abs(micros)
    if micros < 1_000_000:
        if micros % 1_000 == 0:
            return f"{sign}{micros // 1_000}ms"
        return f"{sign}{micros}us"

    parts = []
    for unit, size in _FORMAT_UNITS:
        count, micros = divmod(micros, size)
        if unit == "s" and micros:
            frac = f"{micros:06d}".rstrip("0")
            parts.append(f"{count}.{frac}s")
            micros = 0
        elif count:
            parts.append(f"{count}{unit}")
    return sign + "".join(parts)
