import io

import matplotlib.pyplot as plt
import numpy as np
from matplotlib.ticker import AutoMinorLocator

from geomech.config import DEFAULT_PROFILE_FIELDS
from geomech.data_processing import normalize_series, smooth_series
from geomech.models import FIELD_UNITS

# Track colors cycle through this palette
COLORS = {
    'TRACKS': ['#0066CC', '#CC0000', '#00AA00', '#FF8C00', '#7B3FA0', '#008B8B', '#8B4513'],
    'SCATTER': '#1F77B4',
    'GRID': '#CCCCCC',
}


def _axis_label(field):
    unit = FIELD_UNITS.get(field, '')
    return f"{field} ({unit})" if unit else field


def _finite(values):
    arr = np.asarray(values, dtype=float)
    return arr[np.isfinite(arr)]


def create_well_log_tracks(df, fields, scale='linear', grid=False, smooth=0,
                           normalize=False, width_fraction=None):
    """
    Creates a multi-track well log display with a shared, downward depth axis.

    Args:
        df: DataFrame from results_to_dataframe() (must include 'depth')
        fields: Columns to draw, one track each
        scale: 'linear' or 'log' for the value axes
        grid: Draw grid lines
        smooth: Centered moving-average window (0 or 1 = off)
        normalize: Min-max normalize each track to [0, 1]
        width_fraction: Fraction of figure width per track (0-1); default splits evenly

    Returns:
        Matplotlib figure
    """
    if not fields:
        raise ValueError('Select at least one field for well-log tracks')

    n = len(fields)
    depth = df['depth'].to_numpy(dtype=float)
    gap = 0.02
    default_width = (1 - gap * (n - 1)) / n
    if width_fraction and 0 < width_fraction < 1:
        track_width = width_fraction
    else:
        track_width = default_width

    fig = plt.figure(figsize=(max(6, 2.6 * n), 10), facecolor='white')
    ax_first = None

    for i, field in enumerate(fields):
        values = df[field].to_numpy(dtype=float)
        if smooth and smooth > 1:
            values = smooth_series(values, smooth)
        if normalize:
            values = normalize_series(values)

        left = 0.08 + i * (track_width + gap) * 0.9
        ax = fig.add_axes([left, 0.06, track_width * 0.9, 0.86], sharey=ax_first)
        if ax_first is None:
            ax_first = ax
            ax.set_ylabel('Depth (m)', fontsize=9)
        else:
            ax.tick_params(labelleft=False)

        color = COLORS['TRACKS'][i % len(COLORS['TRACKS'])]
        ax.plot(values, depth, color=color, linewidth=0.9)

        # Log axes cannot show non-positive values
        if scale == 'log' and (_finite(values) > 0).any():
            ax.set_xscale('log')

        ax.xaxis.set_label_position('top')
        ax.xaxis.tick_top()
        ax.set_xlabel(field if normalize else _axis_label(field), fontsize=8, fontweight='bold')
        ax.tick_params(axis='x', labelsize=7)
        if grid:
            ax.grid(True, color=COLORS['GRID'], linewidth=0.5)
            ax.xaxis.set_minor_locator(AutoMinorLocator())

    if len(depth):
        ax_first.set_ylim(np.nanmax(depth), np.nanmin(depth))
    fig.suptitle('Well logs', fontsize=11, fontweight='bold', y=0.995)
    return fig


def create_profile_plot(df, fields=None, scale='linear', depth_on_y=True, mode='lines+markers'):
    """
    Plots several parameters against depth on one set of axes.

    Args:
        df: DataFrame from results_to_dataframe()
        fields: Columns to plot (default DEFAULT_PROFILE_FIELDS)
        scale: 'linear' or 'log' for the parameter axis
        depth_on_y: Depth on the (reversed) y axis; otherwise on x
        mode: 'lines', 'markers' or 'lines+markers'

    Returns:
        Matplotlib figure
    """
    fields = [f for f in (fields or DEFAULT_PROFILE_FIELDS) if f in df.columns]
    depth = df['depth'].to_numpy(dtype=float)

    linestyle = '-' if 'lines' in mode else 'none'
    marker = 'o' if 'markers' in mode else None

    fig, ax = plt.subplots(figsize=(10, 7))
    for i, field in enumerate(fields):
        values = df[field].to_numpy(dtype=float)
        color = COLORS['TRACKS'][i % len(COLORS['TRACKS'])]
        x, y = (values, depth) if depth_on_y else (depth, values)
        ax.plot(x, y, linestyle=linestyle, marker=marker, markersize=3,
                color=color, label=field)

    any_positive = any((_finite(df[f]) > 0).any() for f in fields)
    if depth_on_y:
        ax.invert_yaxis()
        ax.set_ylabel('Depth (m)')
        ax.set_xlabel('Value')
        if scale == 'log' and any_positive:
            ax.set_xscale('log')
    else:
        ax.set_xlabel('Depth (m)')
        ax.set_ylabel('Value')
        if scale == 'log' and any_positive:
            ax.set_yscale('log')

    ax.set_title('Profiles')
    if fields:
        ax.legend(loc='upper center', bbox_to_anchor=(0.5, -0.08), ncol=min(4, len(fields)), fontsize=8)
    fig.tight_layout()
    return fig


def create_crossplot(df, x_field, y_field):
    """
    Scatter plot of one parameter against another.

    Args:
        df: DataFrame from results_to_dataframe()
        x_field: Column for the x axis
        y_field: Column for the y axis

    Returns:
        Matplotlib figure
    """
    fig, ax = plt.subplots(figsize=(7, 6))
    ax.scatter(df[x_field], df[y_field], s=18, color=COLORS['SCATTER'], alpha=0.8,
               edgecolors='none')
    ax.set_xlabel(_axis_label(x_field))
    ax.set_ylabel(_axis_label(y_field))
    ax.set_title(f"{y_field} vs {x_field}")
    ax.grid(True, color=COLORS['GRID'], linewidth=0.5)
    fig.tight_layout()
    return fig


def create_scatter_matrix(df, fields):
    """
    Pairwise scatter matrix with histograms on the diagonal.

    Args:
        df: DataFrame from results_to_dataframe()
        fields: Columns to include

    Returns:
        Matplotlib figure
    """
    n = len(fields)
    if n == 0:
        raise ValueError('Select at least one field for the scatter matrix')

    size = max(6, 1.6 * n)
    fig, axes = plt.subplots(n, n, figsize=(size, size), squeeze=False)

    for row, y_field in enumerate(fields):
        for col, x_field in enumerate(fields):
            ax = axes[row][col]
            if row == col:
                data = _finite(df[x_field])
                if data.size:
                    ax.hist(data, bins=20, color=COLORS['SCATTER'], alpha=0.7)
            else:
                ax.scatter(df[x_field], df[y_field], s=4, color=COLORS['SCATTER'], alpha=0.8)

            ax.tick_params(labelsize=5)
            if row == n - 1:
                ax.set_xlabel(x_field, fontsize=6)
            else:
                ax.set_xticklabels([])
            if col == 0:
                ax.set_ylabel(y_field, fontsize=6)
            else:
                ax.set_yticklabels([])

    fig.suptitle('Scatter matrix', fontsize=11, fontweight='bold')
    fig.subplots_adjust(wspace=0.05, hspace=0.05)
    return fig


def export_plot_to_bytes(fig, format='png', dpi=150):
    """
    Export matplotlib figure to bytes.

    Args:
        fig: Matplotlib figure
        format: 'png', 'pdf' or 'svg'
        dpi: Resolution

    Returns:
        Bytes of image data
    """
    buf = io.BytesIO()
    fig.savefig(buf, format=format, dpi=dpi, bbox_inches='tight', facecolor='white')
    buf.seek(0)
    return buf.getvalue()
