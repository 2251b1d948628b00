"""
LAS File Parser
Handles loading LAS (Log ASCII Standard) files into header/row form.
"""

import io
import logging

import lasio

from geomech.ascii_parser import dataframe_to_table
from geomech.errors import FileLoadError
from geomech.models import RawTable

logger = logging.getLogger(__name__)


def load_las(file_obj):
    """
    Loads a LAS file from a file-like object, bytes or file path.

    Args:
        file_obj: File-like object, bytes, or file path string

    Returns:
        lasio.LASFile object
    """
    try:
        if isinstance(file_obj, str):
            return lasio.read(file_obj)
        if isinstance(file_obj, bytes):
            str_data = file_obj.decode("utf-8", errors="ignore")
        else:
            data = file_obj.read()
            str_data = data.decode("utf-8", errors="ignore") if isinstance(data, bytes) else data
        return lasio.read(io.StringIO(str_data))
    except Exception as e:
        raise FileLoadError(f"Error loading LAS file: {e}") from e


def curve_label(curve):
    """
    Header label for a LAS curve, carrying its unit when one is declared.

    Args:
        curve: lasio CurveItem

    Returns:
        'MNEMONIC (UNIT)' or 'MNEMONIC'
    """
    unit = (curve.unit or '').strip()
    return f"{curve.mnemonic} ({unit})" if unit else curve.mnemonic


def load_las_table(file_obj, filename=None) -> RawTable:
    """
    Load a LAS file as a RawTable.

    Null values declared in the well section are already NaN in lasio's
    curve data.

    Args:
        file_obj: File-like object, bytes, or file path string
        filename: Original file name, kept on the table

    Returns:
        RawTable with one column per curve
    """
    las = load_las(file_obj)
    if len(las.curves) == 0:
        raise FileLoadError("LAS file has no curves")

    df = las.df().reset_index()
    labels = {curve.mnemonic: curve_label(curve) for curve in las.curves}
    df = df.rename(columns=labels)

    well_name = ''
    try:
        well_name = las.well.WELL.value
    except (AttributeError, KeyError):
        pass

    notes = [f"LAS version {las.version.VERS.value}" if 'VERS' in las.version else "LAS file"]
    if well_name:
        notes.append(f"Well: {well_name}")
    logger.debug("Loaded LAS with curves %s", list(labels.values()))
    return dataframe_to_table(df, 'las', notes=notes, filename=filename)
