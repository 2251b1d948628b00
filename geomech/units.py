"""
Unit Normalization
Detects the unit spelled in a header label and returns the multiplier that
converts the column's raw values to SI (m, kg/m^3, m/s).
"""

import re
from enum import Enum
from typing import Any, Optional, Union

from geomech.header_mapping import normalize_label


class FieldKind(str, Enum):
    """Physical kind of a canonical field."""
    DEPTH = 'depth'
    DENSITY = 'density'
    VELOCITY = 'velocity'


# canonical field -> unit kind
FIELD_KINDS = {
    'depth': FieldKind.DEPTH,
    'density': FieldKind.DENSITY,
    'vp': FieldKind.VELOCITY,
    'vs': FieldKind.VELOCITY,
}

# Patterns run on normalize_label() output, so "km/s" arrives as "km s"
# and "g/cc" as "g cc".
KM_PATTERN = re.compile(r'\bkm\b')
GRAMS_PER_CC_PATTERN = re.compile(r'\b(g cc|gcc|g cm3|gcm3)\b')

KM_TO_M = 1000.0
G_CC_TO_KG_M3 = 1000.0


def unit_multiplier(label: Optional[Any], kind: Union[FieldKind, str]) -> float:
    """
    Multiplier converting a column's raw values to SI.

    Args:
        label: Header label of the column (None or empty means no unit info)
        kind: FieldKind or its string value ('depth', 'density', 'velocity')

    Returns:
        1000.0 for km or km/s (depth/velocity) and g/cc (density), else 1.0
    """
    if label is None:
        return 1.0
    cleaned = normalize_label(label)
    if not cleaned:
        return 1.0

    try:
        kind = FieldKind(kind)
    except ValueError:
        # Unknown kinds carry no convertible unit
        return 1.0

    if kind in (FieldKind.VELOCITY, FieldKind.DEPTH):
        return KM_TO_M if KM_PATTERN.search(cleaned) else 1.0

    # Density: kg/m^3 assumed unless grams per cubic centimetre is spelled out
    return G_CC_TO_KG_M3 if GRAMS_PER_CC_PATTERN.search(cleaned) else 1.0
