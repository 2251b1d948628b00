"""
Data Model
Immutable sample types passed between pipeline stages.
"""

import math
from collections import OrderedDict
from dataclasses import dataclass, field, fields
from typing import Any, Dict, List, Mapping, Optional

# Canonical input fields, in the order they are validated and reported
CANONICAL_FIELDS = ('depth', 'density', 'vp', 'vs')

# Field order for every serialized output (table, CSV, XLSX, JSON)
OUTPUT_FIELDS = (
    'depth',
    'density',
    'vp',
    'vs',
    'vertical_stress',
    'shear_modulus',
    'bulk_modulus',
    'lame_lambda',
    'youngs_modulus',
    'poisson_ratio',
    'acoustic_impedance',
    'shear_impedance',
    'p_modulus',
    'vp_vs_ratio',
    'impedance_gradient',
    'delta_impedance_prev',
    'lambda_over_mu',
    'poisson_from_moduli',
    'brittleness_e',
)

# SI units for display and LAS export
FIELD_UNITS = {
    'depth': 'm',
    'density': 'kg/m3',
    'vp': 'm/s',
    'vs': 'm/s',
    'vertical_stress': 'Pa',
    'shear_modulus': 'Pa',
    'bulk_modulus': 'Pa',
    'lame_lambda': 'Pa',
    'youngs_modulus': 'Pa',
    'poisson_ratio': '',
    'acoustic_impedance': 'kg/m2s',
    'shear_impedance': 'kg/m2s',
    'p_modulus': 'Pa',
    'vp_vs_ratio': '',
    'impedance_gradient': 'kg/m3s',
    'delta_impedance_prev': 'kg/m2s',
    'lambda_over_mu': '',
    'poisson_from_moduli': '',
    'brittleness_e': '',
}

# Marker for a derived value whose formula is degenerate for that sample
SENTINEL = float('nan')

# header label -> raw scalar, as produced by a decoder
RawRow = Mapping[str, Any]

# canonical field -> source header label
ColumnMapping = Dict[str, str]


def is_sentinel(value: Any) -> bool:
    """Return True if value is the not-a-number sentinel (or missing)."""
    if value is None:
        return True
    try:
        return math.isnan(value)
    except TypeError:
        return False


@dataclass(frozen=True)
class PreparedSample:
    """One validated depth sample in SI units."""
    depth: float     # m
    density: float   # kg/m^3
    vp: float        # m/s
    vs: float        # m/s


@dataclass(frozen=True)
class DerivedSample:
    """A prepared sample plus its derived elastic and geomechanical parameters."""
    depth: float
    density: float
    vp: float
    vs: float
    vertical_stress: float
    shear_modulus: float
    bulk_modulus: float
    lame_lambda: float
    youngs_modulus: float
    poisson_ratio: float
    acoustic_impedance: float
    shear_impedance: float
    p_modulus: float
    vp_vs_ratio: float
    impedance_gradient: float
    delta_impedance_prev: float
    lambda_over_mu: float
    poisson_from_moduli: float
    brittleness_e: float

    def as_dict(self) -> 'OrderedDict[str, float]':
        """Field values in canonical output order."""
        return OrderedDict((f.name, getattr(self, f.name)) for f in fields(self))


@dataclass
class RawTable:
    """Decoded file contents handed to the pipeline."""
    headers: List[str]
    rows: List[Dict[str, Any]]
    source_format: str
    notes: List[str] = field(default_factory=list)
    filename: Optional[str] = None

    @property
    def num_rows(self) -> int:
        return len(self.rows)
