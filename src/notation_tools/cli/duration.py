"""
Duration values for CLI flags.

Accepts the usual duration grammar: an optional sign followed by one or more
decimal numbers, each with a unit suffix, such as "300ms", "1.5h", "3h20m".
Valid units are "ns", "us" (or "µs"), "ms", "s", "m", "h". Durations longer
than about 2562047h (the signed 64-bit nanosecond range) are rejected.
"""

from __future__ import annotations

import argparse
import re
from datetime import timedelta
from decimal import Decimal

# Unit suffix -> microseconds
_UNITS: dict[str, Decimal] = {
    "ns": Decimal("0.001"),
    "us": Decimal(1),
    "µs": Decimal(1),  # U+00B5 micro sign
    "μs": Decimal(1),  # U+03BC greek mu
    "ms": Decimal(1_000),
    "s": Decimal(1_000_000),
    "m": Decimal(60_000_000),
    "h": Decimal(3_600_000_000),
}

_TERM_RE = re.compile(r"(\d+\.?\d*|\.\d+)(ns|us|µs|μs|ms|s|m|h)")

# Largest magnitude representable as signed 64-bit nanoseconds, in microseconds
_MAX_MICROS = Decimal(2**63 - 1) / 1000


def parse_duration(text: str) -> timedelta:
    """
    Parse a duration string into a timedelta.

    Args:
        text: Duration such as "12h", "30m" or "3h20m"

    Returns:
        The parsed duration (sub-microsecond parts are truncated)

    Raises:
        ValueError: If text is not a valid duration
    """
    s = text
    negative = False
    if s[:1] in ("-", "+"):
        negative = s[0] == "-"
        s = s[1:]

    if s == "0":
        return timedelta(0)
    if not s:
        raise ValueError(f"invalid duration {text!r}")

    total = Decimal(0)
    pos = 0
    while pos < len(s):
        match = _TERM_RE.match(s, pos)
        if match is None:
            if s[pos].isdigit() or s[pos] == ".":
                raise ValueError(f"missing unit in duration {text!r}")
            raise ValueError(f"invalid duration {text!r}")
        number, unit = match.groups()
        total += Decimal(number) * _UNITS[unit]
        pos = match.end()

    if total > _MAX_MICROS:
        raise ValueError(f"invalid duration {text!r}")

    micros = int(total)
    return timedelta(microseconds=-micros if negative else micros)


def duration_type(text: str) -> timedelta:
    """argparse ``type=`` adapter for parse_duration."""
    try:
        return parse_duration(text)
    except ValueError as e:
        raise argparse.ArgumentTypeError(str(e)) from e
