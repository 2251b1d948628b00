"""
Data Processing Module
Handles DataFrame conversion, smoothing, normalization and export of derived results.
"""

import io
import math
from typing import Dict, List, Optional, Sequence

import lasio
import numpy as np
import pandas as pd

from geomech.config import NULL_VALUES
from geomech.models import CANONICAL_FIELDS, FIELD_UNITS, OUTPUT_FIELDS, DerivedSample, PreparedSample

LAS_NULL = NULL_VALUES[0]


def results_to_dataframe(results: Sequence[DerivedSample]) -> pd.DataFrame:
    """
    Convert derived samples to a DataFrame in canonical column order.

    Args:
        results: DerivedSample sequence

    Returns:
        DataFrame with one column per OUTPUT_FIELDS entry (sentinels as NaN)
    """
    return pd.DataFrame(
        [[getattr(r, name) for name in OUTPUT_FIELDS] for r in results],
        columns=list(OUTPUT_FIELDS),
        dtype=float,
    )


def samples_to_dataframe(samples: Sequence[PreparedSample]) -> pd.DataFrame:
    """Convert prepared samples to a DataFrame with depth, density, vp, vs columns."""
    return pd.DataFrame(
        [[getattr(s, name) for name in CANONICAL_FIELDS] for s in samples],
        columns=list(CANONICAL_FIELDS),
        dtype=float,
    )


def results_to_records(results: Sequence[DerivedSample]) -> List[Dict[str, Optional[float]]]:
    """
    Convert derived samples to JSON-ready records.

    Key order follows OUTPUT_FIELDS; NaN sentinels become None.

    Args:
        results: DerivedSample sequence

    Returns:
        List of dictionaries
    """
    records = []
    for r in results:
        record = {}
        for name, value in r.as_dict().items():
            record[name] = None if (value is None or math.isnan(value)) else value
        records.append(record)
    return records


def smooth_series(values, window: int) -> np.ndarray:
    """
    Centered moving average that skips NaN values.

    The window spans window // 2 samples on each side; a window of 1 or
    less returns the values unchanged.

    Args:
        values: 1-D sequence
        window: Smoothing window size

    Returns:
        numpy array of smoothed values (NaN where the window has no finite values)
    """
    arr = np.asarray(values, dtype=float)
    if not window or window <= 1:
        return arr.copy()

    half = int(window) // 2
    series = pd.Series(arr).replace([np.inf, -np.inf], np.nan)
    return series.rolling(window=2 * half + 1, center=True, min_periods=1).mean().to_numpy()


def normalize_series(values) -> np.ndarray:
    """
    Min-max normalize the finite values of a series to [0, 1].

    Args:
        values: 1-D sequence

    Returns:
        numpy array; all NaN if there are no finite values or max equals min
    """
    arr = np.asarray(values, dtype=float)
    finite = arr[np.isfinite(arr)]
    if finite.size == 0 or finite.max() == finite.min():
        return np.full(arr.shape, np.nan)

    v_min, v_max = finite.min(), finite.max()
    return np.where(np.isfinite(arr), (arr - v_min) / (v_max - v_min), np.nan)


def get_depth_range(df, depth_col='depth'):
    """
    Get the depth range of the data.

    Args:
        df: pandas DataFrame
        depth_col: Depth column name

    Returns:
        Tuple (min_depth, max_depth)
    """
    if depth_col not in df.columns or df.empty:
        return 0, 0

    return float(df[depth_col].min()), float(df[depth_col].max())


def filter_by_depth(df, start_depth, end_depth, depth_col='depth'):
    """
    Filter DataFrame to a depth range.

    Args:
        df: pandas DataFrame
        start_depth: Start depth
        end_depth: End depth
        depth_col: Depth column name

    Returns:
        Filtered DataFrame
    """
    if depth_col not in df.columns:
        return df

    return df[(df[depth_col] >= start_depth) & (df[depth_col] <= end_depth)]


def summarize_results(df: pd.DataFrame) -> pd.DataFrame:
    """
    Per-field statistics over finite values.

    Args:
        df: DataFrame from results_to_dataframe()

    Returns:
        DataFrame indexed by field with count, undefined, min, max, mean columns
    """
    rows = []
    for col in df.columns:
        data = df[col].replace([np.inf, -np.inf], np.nan)
        valid = data.dropna()
        rows.append({
            'field': col,
            'count': int(valid.size),
            'undefined': int(data.size - valid.size),
            'min': float(valid.min()) if valid.size else np.nan,
            'max': float(valid.max()) if valid.size else np.nan,
            'mean': float(valid.mean()) if valid.size else np.nan,
        })
    return pd.DataFrame(rows).set_index('field')


def export_to_csv(results: Sequence[DerivedSample]) -> str:
    """
    Export derived samples as CSV text.

    Undefined values are written as empty cells.

    Args:
        results: DerivedSample sequence

    Returns:
        CSV content as string
    """
    df = results_to_dataframe(results)
    return df.to_csv(index=False, na_rep='')


def export_to_xlsx(results: Sequence[DerivedSample], sheet_name='Results') -> bytes:
    """
    Export derived samples as an XLSX workbook.

    Args:
        results: DerivedSample sequence
        sheet_name: Worksheet name

    Returns:
        Workbook content as bytes
    """
    df = results_to_dataframe(results)
    buffer = io.BytesIO()
    with pd.ExcelWriter(buffer, engine='openpyxl') as writer:
        df.to_excel(writer, index=False, sheet_name=sheet_name)
    return buffer.getvalue()


def export_to_las(results: Sequence[DerivedSample], well_name='UNKNOWN') -> str:
    """
    Export derived samples to LAS file format.

    Args:
        results: DerivedSample sequence
        well_name: Value for the WELL header item

    Returns:
        LAS file content as string
    """
    df = results_to_dataframe(results)
    las_out = lasio.LASFile()

    las_out.well.WELL = well_name
    las_out.well.STRT = float(df['depth'].min()) if len(df) else 0
    las_out.well.STOP = float(df['depth'].max()) if len(df) else 0
    las_out.well.STEP = float(df['depth'].diff().median()) if len(df) > 1 else 0
    las_out.well.NULL = LAS_NULL

    for col in OUTPUT_FIELDS:
        if col == 'depth':
            las_out.append_curve('DEPT', df[col].values, unit=FIELD_UNITS[col], descr='Depth')
        else:
            # Undefined values are written as the null value
            values = df[col].fillna(LAS_NULL).values
            las_out.append_curve(col.upper(), values, unit=FIELD_UNITS[col], descr=col.replace('_', ' '))

    output = io.StringIO()
    las_out.write(output)
    return output.getvalue()
