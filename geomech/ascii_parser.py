"""
ASCII Table Parser
Reads CSV, TXT and other delimited well log tables into header/row form with
delimiter, comment and header-row detection.
"""

import io
import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Tuple, Union

import numpy as np
import pandas as pd

from geomech.config import NULL_VALUES
from geomech.errors import FileLoadError
from geomech.models import RawTable

logger = logging.getLogger(__name__)


class DelimiterType(Enum):
    """Supported delimiter types for ASCII files"""
    COMMA = ','
    TAB = '\t'
    SEMICOLON = ';'
    PIPE = '|'
    WHITESPACE = 'whitespace'  # One or more spaces/tabs
    UNKNOWN = 'unknown'


@dataclass
class AsciiFormat:
    """Detection results for one ASCII file"""
    delimiter: str
    delimiter_type: DelimiterType
    header_row_index: int
    skip_rows: int
    encoding: str
    comment_char: Optional[str]
    notes: List[str] = field(default_factory=list)


class AsciiFormatDetector:
    """
    Detects file format characteristics for ASCII log tables.

    Handles:
    - Encoding detection (UTF-8, Latin-1, CP1252)
    - Comment line detection (# or other prefixes)
    - Delimiter detection (comma, tab, semicolon, pipe, whitespace)
    - Header row detection
    """

    COMMON_DELIMITERS = [',', '\t', ';', '|']
    COMMON_COMMENT_CHARS = ['#', '%', '!', '//']
    COMMON_ENCODINGS = ['utf-8', 'latin-1', 'cp1252']

    def __init__(self):
        self.notes = []

    def detect_encoding(self, raw_bytes: bytes) -> str:
        """Detect file encoding by testing different encodings."""
        for encoding in self.COMMON_ENCODINGS:
            try:
                raw_bytes.decode(encoding)
                return encoding
            except (UnicodeDecodeError, LookupError):
                continue
        return 'utf-8'

    def detect_comment_char(self, lines: List[str]) -> Optional[str]:
        """Detect the comment character used in the file."""
        for char in self.COMMON_COMMENT_CHARS:
            comment_lines = sum(1 for line in lines[:20] if line.strip().startswith(char))
            if comment_lines >= 1:
                self.notes.append(f"Detected comment character: '{char}'")
                return char
        return None

    def _is_comment(self, stripped: str) -> bool:
        return any(stripped.startswith(c) for c in self.COMMON_COMMENT_CHARS)

    def detect_delimiter(self, lines: List[str]) -> Tuple[str, DelimiterType]:
        """
        Detect the delimiter used in the file.

        Returns:
            Tuple of (delimiter_string, DelimiterType)
        """
        data_lines = []
        for line in lines:
            stripped = line.strip()
            if not stripped or self._is_comment(stripped):
                continue
            data_lines.append(stripped)
            if len(data_lines) >= 10:
                break

        if not data_lines:
            return ',', DelimiterType.COMMA

        # delimiter -> (field separators per line, consistency)
        delimiter_counts = {}
        for delim in self.COMMON_DELIMITERS:
            counts = [line.count(delim) for line in data_lines]
            if len(set(counts)) == 1 and counts[0] > 0:
                delimiter_counts[delim] = (counts[0], 1.0)
            elif counts[0] > 0:
                variance = np.var(counts) if len(counts) > 1 else 0
                consistency = 1.0 / (1.0 + variance) if variance > 0 else 0.5
                delimiter_counts[delim] = (max(counts), consistency)

        # Whitespace only competes when no explicit delimiter was found
        if not delimiter_counts:
            whitespace_counts = [len(line.split()) - 1 for line in data_lines if len(line.split()) > 1]
            if whitespace_counts:
                self.notes.append("Detected whitespace-delimited format")
                return 'whitespace', DelimiterType.WHITESPACE
            return ',', DelimiterType.COMMA

        best_delim = max(delimiter_counts.items(), key=lambda x: x[1][0] * x[1][1])[0]
        delim_type = {
            ',': DelimiterType.COMMA,
            '\t': DelimiterType.TAB,
            ';': DelimiterType.SEMICOLON,
            '|': DelimiterType.PIPE,
        }.get(best_delim, DelimiterType.UNKNOWN)

        self.notes.append(f"Detected delimiter: {best_delim!r} ({delim_type.name})")
        return best_delim, delim_type

    def detect_header_row(self, lines: List[str], delimiter: str) -> Tuple[int, int]:
        """
        Detect which row contains column headers.

        Returns:
            Tuple of (header_row_index, skip_rows)
            header_row_index: -1 if no header found (use generated column names)
        """
        skip_count = 0

        for i, line in enumerate(lines[:30]):
            stripped = line.strip()

            if not stripped or self._is_comment(stripped):
                skip_count = i + 1
                continue

            if delimiter == 'whitespace':
                parts = stripped.split()
            else:
                parts = stripped.split(delimiter)

            numeric_count = 0
            for part in parts:
                try:
                    float(part.strip())
                    numeric_count += 1
                except ValueError:
                    pass

            if numeric_count / max(len(parts), 1) < 0.5:
                self.notes.append(f"Header detected at row {i}")
                return i, i + 1

            self.notes.append(f"No header row detected, data starts at row {i}")
            return -1, i

        return -1, skip_count

    def detect(self, raw_bytes: bytes, encoding: Optional[str] = None) -> Tuple[AsciiFormat, str]:
        """
        Run every detection step.

        Returns:
            Tuple of (AsciiFormat, decoded text)
        """
        if encoding is None:
            encoding = self.detect_encoding(raw_bytes)
        text = raw_bytes.decode(encoding, errors='ignore')
        lines = text.splitlines()

        comment_char = self.detect_comment_char(lines)
        delimiter, delimiter_type = self.detect_delimiter(lines)
        header_idx, skip_rows = self.detect_header_row(lines, delimiter)

        fmt = AsciiFormat(
            delimiter=delimiter,
            delimiter_type=delimiter_type,
            header_row_index=header_idx,
            skip_rows=skip_rows,
            encoding=encoding,
            comment_char=comment_char,
            notes=list(self.notes),
        )
        return fmt, text


def read_raw_bytes(file_obj: Union[str, bytes, io.IOBase]) -> bytes:
    """Read a path, bytes or file-like object (e.g. from upload) into bytes."""
    if isinstance(file_obj, str):
        with open(file_obj, 'rb') as f:
            return f.read()
    if isinstance(file_obj, bytes):
        return file_obj
    raw = file_obj.read()
    if isinstance(raw, str):
        raw = raw.encode('utf-8')
    return raw


def dataframe_to_table(df: pd.DataFrame, source_format: str, notes=None, filename=None) -> RawTable:
    """
    Convert a decoded DataFrame to a RawTable.

    Args:
        df: DataFrame whose columns are the file's header labels
        source_format: Format tag ('csv', 'xlsx', 'las')
        notes: Detection notes
        filename: Original file name

    Returns:
        RawTable with stringified, stripped header labels
    """
    headers = []
    for i, col in enumerate(df.columns):
        if isinstance(col, (int, np.integer)):
            headers.append(f'COL_{i}')
        else:
            headers.append(str(col).strip())
    df = df.copy()
    df.columns = headers
    df = df.dropna(how='all')

    return RawTable(
        headers=headers,
        rows=df.to_dict('records'),
        source_format=source_format,
        notes=list(notes or []),
        filename=filename,
    )


def load_ascii_table(
    file_obj: Union[str, bytes, io.IOBase],
    delimiter: Optional[str] = None,
    encoding: Optional[str] = None,
    null_values: Optional[List[float]] = None,
    filename: Optional[str] = None,
) -> RawTable:
    """
    Load a delimited ASCII log table.

    Args:
        file_obj: File path, bytes, or file-like object
        delimiter: Override auto-detected delimiter ('whitespace' for runs of spaces)
        encoding: Override auto-detected encoding
        null_values: Null markers to read as missing (defaults to NULL_VALUES)
        filename: Original file name, kept on the table

    Returns:
        RawTable

    Raises:
        FileLoadError: the content could not be parsed
    """
    if null_values is None:
        null_values = NULL_VALUES

    raw_bytes = read_raw_bytes(file_obj)
    if not raw_bytes.strip():
        raise FileLoadError("File is empty")

    detector = AsciiFormatDetector()
    fmt, text = detector.detect(raw_bytes, encoding=encoding)
    if encoding is None and fmt.encoding != 'utf-8':
        logger.warning("%s is not valid UTF-8, decoded as %s", filename or 'Input', fmt.encoding)
    if delimiter is not None:
        fmt.delimiter = delimiter

    sep = r'\s+' if fmt.delimiter == 'whitespace' else fmt.delimiter
    try:
        df = pd.read_csv(
            io.StringIO(text),
            sep=sep,
            header=0 if fmt.header_row_index >= 0 else None,
            skiprows=fmt.header_row_index if fmt.header_row_index >= 0 else fmt.skip_rows,
            na_values=null_values,
            comment=fmt.comment_char if fmt.comment_char and len(fmt.comment_char) == 1 else None,
            skip_blank_lines=True,
            engine='python',
        )
    except (pd.errors.ParserError, pd.errors.EmptyDataError, ValueError) as e:
        raise FileLoadError(f"Error parsing delimited file: {e}") from e

    if len(df.columns) == 0:
        raise FileLoadError("No columns found in file")

    logger.debug("ASCII format: %s", fmt.notes)
    return dataframe_to_table(df, 'csv', notes=fmt.notes, filename=filename)
