"""
Pipeline
Runs header detection, validation and derivation for one input table.

Each invocation takes an immutable PipelineRequest and returns a
PipelineResult; nothing is cached between calls.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple

from geomech.derivation import compute_parameters
from geomech.file_loader import load_table
from geomech.header_mapping import apply_overrides, describe_mapping, detect_columns
from geomech.models import DerivedSample, PreparedSample, RawTable
from geomech.validation import validate_and_prepare

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PipelineRequest:
    """Inputs for one pipeline run."""
    headers: Tuple[str, ...]
    rows: Tuple[Mapping[str, Any], ...]
    overrides: Mapping[str, Optional[str]] = field(default_factory=dict)

    @classmethod
    def from_table(cls, table: RawTable, overrides: Optional[Mapping[str, Optional[str]]] = None) -> 'PipelineRequest':
        return cls(
            headers=tuple(table.headers),
            rows=tuple(table.rows),
            overrides=dict(overrides or {}),
        )


@dataclass(frozen=True)
class PipelineResult:
    """Outputs of one pipeline run."""
    mapping: Dict[str, str]
    detected_mapping: Dict[str, str]
    prepared: List[PreparedSample]
    results: List[DerivedSample]
    rows_read: int

    @property
    def rows_used(self) -> int:
        return len(self.prepared)

    @property
    def rows_discarded(self) -> int:
        return self.rows_read - self.rows_used


def run_pipeline(request: PipelineRequest) -> PipelineResult:
    """
    Detect columns, apply caller overrides, validate and derive.

    Args:
        request: PipelineRequest with headers, rows and optional overrides

    Returns:
        PipelineResult

    Raises:
        MissingColumnsError, NoValidRowsError: see geomech.validation
    """
    detected = detect_columns(request.headers)
    mapping = apply_overrides(detected, request.overrides)
    logger.info("Column mapping: %s", describe_mapping(mapping))

    prepared = validate_and_prepare(request.rows, mapping)
    results = compute_parameters(prepared)
    logger.info("Derived parameters for %d samples (%d rows read)", len(results), len(request.rows))

    return PipelineResult(
        mapping=mapping,
        detected_mapping=detected,
        prepared=prepared,
        results=results,
        rows_read=len(request.rows),
    )


def compute_from_rows(rows: Sequence[Mapping[str, Any]],
                      headers: Optional[Sequence[str]] = None,
                      overrides: Optional[Mapping[str, Optional[str]]] = None) -> PipelineResult:
    """
    Convenience wrapper for in-memory rows.

    Args:
        rows: Row dictionaries
        headers: Header labels (defaults to the first row's keys)
        overrides: Optional field -> header overrides
    """
    if headers is None:
        headers = list(rows[0].keys()) if rows else []
    request = PipelineRequest(headers=tuple(headers), rows=tuple(rows), overrides=dict(overrides or {}))
    return run_pipeline(request)


def compute_from_file(file_obj, filename: str,
                      overrides: Optional[Mapping[str, Optional[str]]] = None) -> PipelineResult:
    """
    Decode a CSV/XLSX/LAS file and run the pipeline on it.

    Args:
        file_obj: File path, bytes, or file-like object
        filename: Original file name (its extension selects the decoder)
        overrides: Optional field -> header overrides

    Returns:
        PipelineResult

    Raises:
        FileLoadError: the file could not be decoded
        MissingColumnsError, NoValidRowsError: see geomech.validation
    """
    table = load_table(file_obj, filename)
    return run_pipeline(PipelineRequest.from_table(table, overrides))
