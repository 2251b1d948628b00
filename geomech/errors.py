"""
Error Types
Fatal conditions raised by the pipeline and the file loaders.

Numeric degeneracy inside the derivation engine is never an error; it
resolves to the not-a-number sentinel for the affected field.
"""

from typing import Iterable


class GeomechError(Exception):
    """Base class for all errors raised by this package."""


class PipelineError(GeomechError, ValueError):
    """A fatal condition that aborts the validation pipeline."""


class MissingColumnsError(PipelineError):
    """One or more canonical fields have no mapped header."""

    def __init__(self, missing: Iterable[str]):
        self.missing = list(missing)
        super().__init__('Missing columns: ' + ', '.join(self.missing))


class NoValidRowsError(PipelineError):
    """Every row was discarded during numeric coercion."""

    def __init__(self, message: str = 'No valid numeric rows found.'):
        super().__init__(message)


class FileLoadError(GeomechError, ValueError):
    """An input file could not be decoded into rows."""
