"""
Row Validation
Coerces raw decoded rows into depth-sorted SI samples.
"""

import logging
import math
from typing import Any, Iterable, List, Mapping, Optional

import numpy as np

from geomech.errors import MissingColumnsError, NoValidRowsError
from geomech.models import CANONICAL_FIELDS, PreparedSample
from geomech.units import FIELD_KINDS, unit_multiplier

logger = logging.getLogger(__name__)


def find_missing_columns(mapping: Optional[Mapping[str, Any]]) -> List[str]:
    """Canonical fields with no (or an empty) mapped header, in canonical order."""
    mapping = mapping or {}
    missing = []
    for field_name in CANONICAL_FIELDS:
        header = mapping.get(field_name)
        if header is None or str(header) == '':
            missing.append(field_name)
    return missing


def coerce_number(value: Any) -> float:
    """
    Convert a raw cell value to float.

    Args:
        value: Number, numeric string, or anything else

    Returns:
        The float value, or NaN when the value is missing or not numeric
    """
    if value is None or isinstance(value, (bool, np.bool_)):
        return math.nan
    if isinstance(value, (str, bytes)):
        value = value.decode('utf-8', errors='ignore') if isinstance(value, bytes) else value
        value = value.strip()
        if not value:
            return math.nan
    try:
        return float(value)
    except (TypeError, ValueError, OverflowError):
        # Non-numeric objects and ints beyond float range
        return math.nan


def validate_and_prepare(rows: Iterable[Mapping[str, Any]], mapping: Mapping[str, str]) -> List[PreparedSample]:
    """
    Validate raw rows and convert them to SI samples sorted by depth.

    Rows where any of depth, density, vp or vs is missing or non-numeric are
    dropped without error.

    Args:
        rows: Decoded rows (header label -> raw value)
        mapping: Canonical field -> header label, all four fields required

    Returns:
        List of PreparedSample in ascending depth order (stable for ties)

    Raises:
        MissingColumnsError: a canonical field has no mapped header
        NoValidRowsError: no row survived coercion
    """
    missing = find_missing_columns(mapping)
    if missing:
        raise MissingColumnsError(missing)

    headers = {f: mapping[f] for f in CANONICAL_FIELDS}
    multipliers = {f: unit_multiplier(headers[f], FIELD_KINDS[f]) for f in CANONICAL_FIELDS}
    logger.debug("Unit multipliers: %s", multipliers)

    samples = []
    total = 0
    for row in rows:
        total += 1
        values = {}
        for field_name in CANONICAL_FIELDS:
            values[field_name] = coerce_number(row.get(headers[field_name])) * multipliers[field_name]
        if not all(math.isfinite(v) for v in values.values()):
            continue
        samples.append(PreparedSample(**values))

    if not samples:
        raise NoValidRowsError()

    if len(samples) < total:
        logger.info("Kept %d of %d rows (%d discarded)", len(samples), total, total - len(samples))

    # sorted() is stable: equal depths keep their input order
    return sorted(samples, key=lambda s: s.depth)
