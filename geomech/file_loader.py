"""
File Loader
Dispatches uploaded files to the CSV, spreadsheet or LAS decoder.
"""

import io
import logging
import os
from typing import Optional, Union

import pandas as pd

from geomech.ascii_parser import read_raw_bytes, dataframe_to_table, load_ascii_table
from geomech.config import NULL_VALUES, SUPPORTED_EXTENSIONS
from geomech.errors import FileLoadError
from geomech.las_parser import load_las_table
from geomech.models import RawTable

logger = logging.getLogger(__name__)


def load_excel_table(file_obj: Union[str, bytes, io.IOBase], filename: Optional[str] = None) -> RawTable:
    """
    Read the first sheet of a spreadsheet.

    Args:
        file_obj: File path, bytes, or file-like object
        filename: Original file name, kept on the table

    Returns:
        RawTable
    """
    raw_bytes = read_raw_bytes(file_obj)
    try:
        df = pd.read_excel(io.BytesIO(raw_bytes), sheet_name=0, engine='openpyxl', na_values=NULL_VALUES)
    except Exception as e:
        raise FileLoadError(f"Error reading spreadsheet: {e}") from e

    if len(df.columns) == 0:
        raise FileLoadError("No columns found in spreadsheet")
    return dataframe_to_table(df, 'xlsx', notes=[f"Sheet 0 ({len(df)} rows)"], filename=filename)


def load_table(file_obj: Union[str, bytes, io.IOBase], filename: Optional[str] = None) -> RawTable:
    """
    Decode a CSV, TXT, XLSX or LAS file into a RawTable.

    Args:
        file_obj: File path, bytes, or file-like object
        filename: Name used to pick the decoder (defaults to file_obj when it is a path)

    Returns:
        RawTable

    Raises:
        FileLoadError: unsupported extension or undecodable content
    """
    if filename is None and isinstance(file_obj, str):
        filename = file_obj
    ext = os.path.splitext((filename or '').lower())[1]

    if ext not in SUPPORTED_EXTENSIONS:
        raise FileLoadError(
            f"Unsupported file type '{ext or filename}'. "
            f"Expected one of: {', '.join(SUPPORTED_EXTENSIONS)}"
        )

    if ext == '.xlsx':
        table = load_excel_table(file_obj, filename=filename)
    elif ext == '.las':
        table = load_las_table(file_obj, filename=filename)
    else:
        table = load_ascii_table(file_obj, filename=filename)

    logger.info("Loaded %s: %d rows, headers %s", filename, table.num_rows, table.headers)
    return table
