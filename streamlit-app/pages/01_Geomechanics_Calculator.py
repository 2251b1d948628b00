"""
Geomechanics Log Calculator - Calculator Page
Upload a log table, confirm the column mapping, derive parameters, plot and export.
"""

import logging
import os
import sys

import matplotlib.pyplot as plt
import streamlit as st

# Add repository root to path for geomech package access
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', '..'))

from geomech.config import (
    DEFAULT_PROFILE_FIELDS,
    DEFAULT_WELLLOG_FIELDS,
    EXPORT_BASENAME,
    load_settings,
)
from geomech.data_processing import (
    export_to_csv,
    export_to_las,
    export_to_xlsx,
    filter_by_depth,
    get_depth_range,
    results_to_dataframe,
    summarize_results,
)
from geomech.errors import GeomechError
from geomech.file_loader import load_table
from geomech.header_mapping import detect_columns
from geomech.logging_config import setup_logging
from geomech.models import CANONICAL_FIELDS, OUTPUT_FIELDS
from geomech.pipeline import PipelineRequest, run_pipeline
from geomech.validation import find_missing_columns

# Import plotting from parent directory
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))
from plotting import (
    create_crossplot,
    create_profile_plot,
    create_scatter_matrix,
    create_well_log_tracks,
    export_plot_to_bytes,
)

SAMPLE_FILE = os.path.join(os.path.dirname(__file__), '..', '..', 'sample_data.csv')
NOT_SET = '(not set)'

st.set_page_config(
    page_title="Calculator | Geomechanics Log Calculator",
    page_icon="🧮",
    layout="wide",
    initial_sidebar_state="expanded"
)

settings = load_settings()
setup_logging(settings.log_level, settings.log_file)
logger = logging.getLogger('geomech.streamlit')

st.markdown("""
<style>
    .main-header {
        background: linear-gradient(135deg, #1a1d24 0%, #2d3748 100%);
        padding: 1.5rem 2rem;
        border-radius: 10px;
        margin-bottom: 1.5rem;
        border: 1px solid #3d4852;
    }
    .main-title {
        font-size: 2rem;
        font-weight: 700;
        color: #00D4AA;
        margin: 0;
    }
    .main-subtitle {
        font-size: 0.9rem;
        color: #8892a0;
        margin-top: 0.3rem;
    }
</style>
""", unsafe_allow_html=True)

st.markdown("""
<div class="main-header">
    <div class="main-title">🧮 Geomechanics Calculator</div>
    <div class="main-subtitle">Depth • Density • Vp • Vs → moduli, stress, impedance and brittleness</div>
</div>
""", unsafe_allow_html=True)


def _reset_results():
    for key in ('pipeline_result', 'results_df'):
        st.session_state.pop(key, None)


def _download_figure(fig, name, key):
    st.download_button(
        label="📷 Download PNG",
        data=export_plot_to_bytes(fig, format='png', dpi=150),
        file_name=f"{name}.png",
        mime="image/png",
        key=key,
    )
    plt.close(fig)


# Sidebar: file input
with st.sidebar:
    st.markdown("### 📁 Input File")
    uploaded_file = st.file_uploader("Choose a CSV, XLSX or LAS file", type=['csv', 'txt', 'xlsx', 'las'])
    load_sample = st.button("Load sample data", use_container_width=True)

if uploaded_file is not None:
    file_key = (uploaded_file.name, uploaded_file.size)
    if st.session_state.get('file_key') != file_key:
        try:
            st.session_state['raw_table'] = load_table(uploaded_file.getvalue(), uploaded_file.name)
            st.session_state['file_key'] = file_key
            _reset_results()
        except GeomechError as e:
            st.error(f"❌ Error reading file: {e}")
            st.session_state.pop('raw_table', None)
elif load_sample:
    try:
        st.session_state['raw_table'] = load_table(SAMPLE_FILE)
        st.session_state['file_key'] = ('sample', 0)
        _reset_results()
    except (OSError, GeomechError) as e:
        st.error(f"❌ Could not load sample: {e}")

table = st.session_state.get('raw_table')

if table is None:
    st.info("Upload a file or load the sample data to begin.")
    st.stop()

st.success(f"File loaded: {table.filename or 'sample'} ({table.num_rows} rows, {len(table.headers)} columns)")

# Column mapping
st.markdown("### 🗂️ Column Mapping")
detected = detect_columns(table.headers)
options = [NOT_SET] + list(table.headers)
overrides = {}
cols = st.columns(len(CANONICAL_FIELDS))
for col, field in zip(cols, CANONICAL_FIELDS):
    with col:
        default = detected.get(field)
        index = options.index(default) if default in options else 0
        choice = st.selectbox(field, options, index=index, key=f"col_{field}")
        overrides[field] = None if choice == NOT_SET else choice

undetected = [f for f in find_missing_columns(detected) if not overrides.get(f)]
if undetected:
    # LAS mnemonics such as DEPT and RHOB are not in the header rules
    st.warning(f"⚠️ No header detected for: {', '.join(undetected)}. Select these columns above.")

with st.expander("Detection notes", expanded=False):
    for note in table.notes:
        st.markdown(f"- {note}")

if st.button("✅ Validate & Compute", type="primary"):
    try:
        request = PipelineRequest.from_table(table, overrides)
        result = run_pipeline(request)
        st.session_state['pipeline_result'] = result
        st.session_state['results_df'] = results_to_dataframe(result.results)
    except GeomechError as e:
        _reset_results()
        st.error(f"❌ Validation/compute error: {e}")
    except Exception as e:
        _reset_results()
        logger.exception("Unexpected compute failure")
        st.error(f"❌ Unexpected error: {e}")
        st.exception(e)

result = st.session_state.get('pipeline_result')
df = st.session_state.get('results_df')
if result is None or df is None:
    st.stop()

c1, c2, c3 = st.columns(3)
c1.metric("Rows read", result.rows_read)
c2.metric("Rows used", result.rows_used)
c3.metric("Rows discarded", result.rows_discarded)

# Data table
show_data = st.toggle("Show data", value=True)
if show_data:
    st.dataframe(df, use_container_width=True, height=320)
    with st.expander("Summary statistics", expanded=False):
        st.dataframe(summarize_results(df), use_container_width=True)

fields = list(OUTPUT_FIELDS)
min_depth, max_depth = get_depth_range(df)

tab_logs, tab_profiles, tab_scatter, tab_export = st.tabs(
    ["📈 Well Logs", "📉 Profiles", "🔵 Cross-plots", "💾 Export"]
)

with tab_logs:
    log_fields = st.multiselect("Tracks", fields, default=DEFAULT_WELLLOG_FIELDS, key="welllog_fields")
    c1, c2, c3, c4, c5 = st.columns(5)
    log_scale = c1.selectbox("Scale", ['linear', 'log'], key="welllog_scale")
    log_grid = c2.checkbox("Grid", value=False, key="welllog_grid")
    log_smooth = c3.number_input("Smoothing window", min_value=0, max_value=51, value=0, key="welllog_smooth")
    log_normalize = c4.checkbox("Normalize", value=False, key="welllog_normalize")
    log_width = c5.number_input("Track width (0 = auto)", min_value=0.0, max_value=0.99, value=0.0,
                                step=0.05, key="welllog_width")

    if max_depth > min_depth:
        depth_range = st.slider("Depth range (m)", min_value=min_depth, max_value=max_depth,
                                value=(min_depth, max_depth))
        view_df = filter_by_depth(df, *depth_range)
    else:
        view_df = df

    if log_fields:
        fig = create_well_log_tracks(view_df, log_fields, scale=log_scale, grid=log_grid,
                                     smooth=log_smooth, normalize=log_normalize,
                                     width_fraction=log_width or None)
        st.pyplot(fig)
        _download_figure(fig, 'welllogs', 'dl_welllogs')
    else:
        st.warning("⚠️ Select at least one field for well-log tracks.")

with tab_profiles:
    profile_fields = st.multiselect("Parameters", fields, default=DEFAULT_PROFILE_FIELDS, key="profile_fields")
    c1, c2, c3 = st.columns(3)
    profile_scale = c1.selectbox("Scale", ['linear', 'log'], key="profile_scale")
    depth_on_y = c2.checkbox("Depth on Y", value=True, key="depth_on_y")
    profile_mode = c3.selectbox("Mode", ['lines+markers', 'lines', 'markers'], key="profile_mode")

    fig = create_profile_plot(df, profile_fields or None, scale=profile_scale,
                              depth_on_y=depth_on_y, mode=profile_mode)
    st.pyplot(fig)
    _download_figure(fig, 'profiles_plot', 'dl_profiles')

with tab_scatter:
    full_matrix = st.checkbox("Full scatter matrix", value=False, key="scatter_full")
    if full_matrix:
        matrix_fields = st.multiselect("Fields", fields, default=['density', 'vp', 'vs', 'youngs_modulus'],
                                       key="matrix_fields")
        if matrix_fields:
            fig = create_scatter_matrix(df, matrix_fields)
            st.pyplot(fig)
            _download_figure(fig, 'scatter_matrix', 'dl_matrix')
    else:
        c1, c2 = st.columns(2)
        x_field = c1.selectbox("X", fields, index=fields.index('vp'), key="scatter_x")
        y_field = c2.selectbox("Y", fields, index=fields.index('vs'), key="scatter_y")
        fig = create_crossplot(df, x_field, y_field)
        st.pyplot(fig)
        _download_figure(fig, f"{y_field}_vs_{x_field}", 'dl_pair')

with tab_export:
    c1, c2, c3 = st.columns(3)
    with c1:
        st.download_button(
            label="📄 Download CSV",
            data=export_to_csv(result.results),
            file_name=f"{EXPORT_BASENAME}.csv",
            mime="text/csv",
            use_container_width=True,
        )
    with c2:
        st.download_button(
            label="📊 Download XLSX",
            data=export_to_xlsx(result.results),
            file_name=f"{EXPORT_BASENAME}.xlsx",
            mime="application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
            use_container_width=True,
        )
    with c3:
        well_name = os.path.splitext(table.filename or 'sample')[0]
        st.download_button(
            label="📋 Download LAS",
            data=export_to_las(result.results, well_name=os.path.basename(well_name)),
            file_name=f"{EXPORT_BASENAME}.las",
            mime="text/plain",
            use_container_width=True,
        )
