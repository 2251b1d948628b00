"""
Header Mapping Module
Automatically maps file header labels to the canonical input fields
(depth, density, vp, vs).

Matching runs on a normalized label (trimmed, lowercased, every run of
non-alphanumeric characters collapsed to one space), so "Vp_Km/s",
"VP (km/s)" and "vp km s" are all read as the tokens ``vp km s``.
"""

import logging
import re
from enum import Enum
from typing import Any, Iterable, Mapping, NamedTuple, Optional, Pattern

from geomech.models import CANONICAL_FIELDS, ColumnMapping

logger = logging.getLogger(__name__)

_NON_ALNUM = re.compile(r'[^a-z0-9]+')


class MatchPriority(Enum):
    """How a matching rule treats an existing assignment."""
    PRIMARY = 0    # assign, overwriting any earlier header
    FALLBACK = 1   # assign only while the field is still unassigned


class HeaderRule(NamedTuple):
    field: str
    pattern: Pattern
    priority: MatchPriority


# Ordered rule table. Each header is tested against every rule; the
# mapping keeps the last header a PRIMARY rule matched.
HEADER_RULES = (
    HeaderRule('depth', re.compile(r'\b(depth|depthm|depth m)\b'), MatchPriority.PRIMARY),
    HeaderRule('density', re.compile(r'\b(dens|density|rho|kg m)\b'), MatchPriority.PRIMARY),
    HeaderRule('vp', re.compile(r'\b(vp|p vel|p velocity|pwave|p wave)\b'), MatchPriority.PRIMARY),
    HeaderRule('vp', re.compile(r'^vp'), MatchPriority.FALLBACK),
    HeaderRule('vs', re.compile(r'\b(vs|s vel|s velocity|shear)\b'), MatchPriority.PRIMARY),
    HeaderRule('vs', re.compile(r'^vs'), MatchPriority.FALLBACK),
)


def normalize_label(label: Any) -> str:
    """
    Normalize a header label for token matching.

    Args:
        label: Raw header label (any type; None is treated as empty)

    Returns:
        Lowercase string with non-alphanumeric runs collapsed to single spaces
    """
    text = '' if label is None else str(label)
    return _NON_ALNUM.sub(' ', text.strip().lower()).strip()


def detect_columns(headers: Iterable[Any], rules=HEADER_RULES) -> ColumnMapping:
    """
    Propose a header for each canonical field.

    Headers are scanned in order. A PRIMARY match overwrites any earlier
    assignment, so the result reflects the last matching header per field.
    A FALLBACK match only fills a field that is still unassigned.

    Args:
        headers: Header labels in file order
        rules: Rule table (defaults to HEADER_RULES)

    Returns:
        Dictionary of canonical field -> header label; undetected fields are absent
    """
    mapping = {}
    for header in headers:
        raw = '' if header is None else str(header)
        cleaned = normalize_label(raw)

        primary_hits = set()
        for rule in rules:
            if rule.priority is MatchPriority.PRIMARY and rule.pattern.search(cleaned):
                mapping[rule.field] = raw
                primary_hits.add(rule.field)

        for rule in rules:
            if rule.priority is not MatchPriority.FALLBACK or rule.field in primary_hits:
                continue
            if rule.field not in mapping and rule.pattern.search(cleaned):
                mapping[rule.field] = raw

    logger.debug("Detected column mapping: %s", mapping)
    return mapping


def apply_overrides(mapping: Mapping[str, str],
                    overrides: Optional[Mapping[str, Optional[str]]]) -> ColumnMapping:
    """
    Merge caller-selected headers over a detected mapping.

    Args:
        mapping: Detected mapping from detect_columns()
        overrides: Field -> header; None or empty values keep the detected header

    Returns:
        New mapping dictionary (inputs are not modified)
    """
    merged = dict(mapping)
    for field_name, header in (overrides or {}).items():
        if field_name not in CANONICAL_FIELDS:
            continue
        if header is None or str(header).strip() == '':
            continue
        merged[field_name] = header
    return merged


def describe_mapping(mapping: Mapping[str, str]) -> str:
    """One-line summary such as 'depth=Depth_m, density=RHO, vp=?, vs=?'."""
    return ', '.join(f"{f}={mapping.get(f) or '?'}" for f in CANONICAL_FIELDS)
