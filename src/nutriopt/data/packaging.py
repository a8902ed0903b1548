"""Package size parsing.

Prices and nutrient values are stored per 100g (or 100ml). A package size
string such as ``"500g"`` or ``"1.5L"`` converts one package into that basis.
"""

from __future__ import annotations

import re
from typing import Optional

# Multiplier per unit of quantity, relative to the 100g/100ml reference
UNIT_FACTORS: dict[str, float] = {
    "g": 0.01,
    "ml": 0.01,
    "kg": 10.0,
    "l": 10.0,
}

_SIZE_PATTERN = re.compile(r"^\s*(\d+(?:\.\d*)?|\.\d+)\s*(.*)$")


def normalize_unit(unit: str) -> str:
    """Map a unit spelling onto g, ml, kg or l by its prefix.

    ``kg...`` is kilograms, ``l...`` (but not ``lb``) is litres, ``ml...`` is
    millilitres, and anything else counts as grams.

    Examples:
        >>> normalize_unit("Litres")
        'l'
        >>> normalize_unit("grams")
        'g'
        >>> normalize_unit("lbs")
        'g'
    """
    unit = unit.strip().lower()
    if unit.startswith("kg"):
        return "kg"
    if unit.startswith("l") and not unit.startswith("lb"):
        return "l"
    if unit.startswith("ml"):
        return "ml"
    return "g"


def parse_packaging(packaging: Optional[str]) -> Optional[tuple[float, str]]:
    """Split a package size string into quantity and normalized unit.

    A bare number is read as grams.

    Args:
        packaging: Size string (e.g., '500g', '1 kg', '1.5 Litres')

    Returns:
        (quantity, unit) tuple, or None if no leading quantity was found
    """
    if not packaging:
        return None

    match = _SIZE_PATTERN.match(packaging)
    if match is None:
        return None

    quantity = float(match.group(1))
    return quantity, normalize_unit(match.group(2))


def packaging_multiplier(packaging: Optional[str]) -> float:
    """Number of 100g/100ml reference units in one package.

    ``g``/``ml`` divide the quantity by 100, ``kg``/``l`` multiply it by 10.
    A string without a leading quantity counts as 1.0.

    Examples:
        >>> packaging_multiplier("500g")
        5.0
        >>> packaging_multiplier("1.5 Litres")
        15.0
        >>> packaging_multiplier("one bag")
        1.0
    """
    parsed = parse_packaging(packaging)
    if parsed is None:
        return 1.0

    quantity, unit = parsed
    return quantity * UNIT_FACTORS[unit]
