"""
Geomechanics Log Calculator
Derives elastic and geomechanical parameters from depth, density, Vp and Vs logs.
"""

from geomech.errors import (
    GeomechError,
    PipelineError,
    MissingColumnsError,
    NoValidRowsError,
    FileLoadError,
)
from geomech.models import (
    CANONICAL_FIELDS,
    OUTPUT_FIELDS,
    SENTINEL,
    PreparedSample,
    DerivedSample,
    RawTable,
    is_sentinel,
)
from geomech.header_mapping import detect_columns, apply_overrides
from geomech.units import unit_multiplier
from geomech.validation import validate_and_prepare
from geomech.derivation import compute_parameters
from geomech.pipeline import PipelineRequest, PipelineResult, run_pipeline, compute_from_file

__version__ = '1.0.0'
