from __future__ import annotations

import math
from collections.abc import Mapping
from typing import Any

"""Column value extraction from semi-structured spreadsheet rows.

Spreadsheet headers are typed by people, so a label may come back with stray
whitespace or a different case. resolve() tries, in order:

1. exact key
2. trimmed label
3. lower-cased label
4. upper-cased label
5. any key whose trimmed, lower-cased form equals the trimmed, lower-cased label

A cell that is blank after trimming counts as absent and the search goes on.
"""

__all__ = [
    "resolve",
    "parse_number",
    "as_quantity",
    "format_number",
]


def _cell_text(value: Any) -> str | None:
    if value is None:
        return None
    if isinstance(value, float) and math.isnan(value):
        return None
    text = str(value).strip()
    return text or None


def resolve(row: Mapping[str, Any], label: str) -> str | None:
    """Return the trimmed text of ``label`` in ``row``, or None when absent/blank."""
    for candidate in (label, label.strip(), label.lower(), label.upper()):
        if candidate in row:
            text = _cell_text(row[candidate])
            if text is not None:
                return text

    wanted = label.strip().lower()
    for key, value in row.items():
        if str(key).strip().lower() == wanted:
            text = _cell_text(value)
            if text is not None:
                return text
    return None


def parse_number(value: Any) -> float | None:
    """Parse a decimal accepting ``,`` or ``.`` as separator.

    Returns None for blanks and for anything that is not a finite number.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        number = float(value)
    else:
        text = str(value).strip().replace(",", ".")
        if not text:
            return None
        try:
            number = float(text)
        except ValueError:
            return None
    if not math.isfinite(number):
        return None
    return number


def as_quantity(number: float | None) -> int | float | None:
    """Integral floats become ints (stock counts read as text come back as 5.0)."""
    if number is None:
        return None
    return int(number) if number.is_integer() else number


def format_number(number: float | None) -> str:
    """Render without a trailing ``.0``; None renders as ``0``."""
    if number is None:
        return "0"
    return str(int(number)) if number.is_integer() else str(number)
