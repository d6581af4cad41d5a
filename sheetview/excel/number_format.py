from __future__ import annotations

import math
import numbers
import re
from decimal import ROUND_HALF_UP, Decimal

"""Rendering of numeric cells the way a spreadsheet displays them.

Covers the formats that appear in everyday sheets:
- ``General``: integers as-is, other numbers cut to 11 characters
  (``1/3`` -> ``0.333333333``, ``123456789012`` -> ``1.23457E+11``)
- fixed decimals and thousands separators (``0.00``, ``#,##0``, ``#,##0.00``)
- percent (``0%``, ``0.00%``)
- scientific (``0.00E+00``)
- literal prefixes/suffixes such as ``"$"#,##0.00`` or ``0.0 "kg"``

Anything else (fractions, conditional sections) falls back to ``General``.
Only the first section of a ``pos;neg;zero`` format is used.
"""

__all__ = [
    "GENERAL_WIDTH",
    "format_general",
    "format_number",
]

GENERAL_WIDTH = 11

_BRACKET_RE = re.compile(r"\[[^\]]*\]")
_CORE_RE = re.compile(r"[#0?][#0?,]*(?:\.[#0?]*)?")
_SCI_RE = re.compile(r"([#0?.]+)E[+-]0+", re.IGNORECASE)
_PAD_RE = re.compile(r"_.|\*.")


def format_general(value: float | int) -> str:
    """Excel ``General``: shortest form that fits in GENERAL_WIDTH characters."""
    if not math.isfinite(value):
        return str(value)
    if value == int(value) and abs(value) < 10 ** GENERAL_WIDTH:
        return str(int(value))
    sign = "-" if value < 0 else ""
    magnitude = abs(float(value))
    text = ""
    for precision in range(GENERAL_WIDTH, 0, -1):
        text = f"{magnitude:.{precision}g}".upper()
        if len(text) <= GENERAL_WIDTH:
            break
    return sign + text


def _literal(text: str) -> str:
    text = _PAD_RE.sub("", text)
    return text.replace('"', "").replace("\\", "")


def _round(value: float | int, decimals: int) -> Decimal:
    quantum = Decimal(1).scaleb(-decimals)
    exact = Decimal(int(value)) if isinstance(value, numbers.Integral) else Decimal(str(float(value)))
    return exact.quantize(quantum, rounding=ROUND_HALF_UP)


def format_number(value: float | int, number_format: str | None) -> str:
    """Render ``value`` with an Excel number format code."""
    if not number_format or number_format.strip().lower() in {"general", "@"}:
        return format_general(value)

    section = _BRACKET_RE.sub("", number_format.split(";")[0])
    if "/" in section:
        # fractions
        return format_general(value)

    sci = _SCI_RE.search(section)
    if sci:
        mantissa = sci.group(1)
        decimals = len(mantissa.split(".")[1]) if "." in mantissa else 0
        return f"{value:.{decimals}E}"

    core = _CORE_RE.search(section)
    if core is None:
        return format_general(value)
    prefix = _literal(section[:core.start()])
    suffix = _literal(section[core.end():])
    pattern = core.group(0)
    whole, _, frac = pattern.partition(".")
    decimals = len(frac)
    thousands = "," in whole.rstrip(",")

    scaled = value * 100 if "%" in suffix else value
    rounded = _round(scaled, decimals)
    negative = rounded < 0
    body = f"{abs(rounded):{',' if thousands else ''}.{decimals}f}"
    return f"{'-' if negative else ''}{prefix}{body}{suffix}"
