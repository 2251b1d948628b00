"""
Geomechanics Log Calculator - Main Entry Point
Derives elastic and geomechanical parameters from density and velocity logs.
"""

import os
import sys

import streamlit as st

# Add repository root to path for geomech package access
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

from geomech import __version__
from geomech.config import load_settings
from geomech.logging_config import setup_logging

# Page configuration - must be first Streamlit command
st.set_page_config(
    page_title="Geomechanics Log Calculator",
    page_icon="🪨",
    layout="wide",
    initial_sidebar_state="expanded"
)

settings = load_settings()
setup_logging(settings.log_level, settings.log_file)

st.markdown("""
<style>
    .main-header {
        background: linear-gradient(135deg, #1a1d24 0%, #2d3748 100%);
        padding: 2rem 2.5rem;
        border-radius: 12px;
        margin-bottom: 2rem;
        border: 1px solid #3d4852;
    }

    .main-title {
        font-size: 2.5rem;
        font-weight: 700;
        color: #00D4AA;
        margin: 0;
    }

    .main-subtitle {
        font-size: 1rem;
        color: #8892a0;
        margin-top: 0.5rem;
    }

    #MainMenu {visibility: hidden;}
    footer {visibility: hidden;}
</style>
""", unsafe_allow_html=True)

st.markdown("""
<div class="main-header">
    <div class="main-title">🪨 Geomechanics Log Calculator</div>
    <div class="main-subtitle">Elastic moduli • Overburden stress • Impedance • Brittleness</div>
</div>
""", unsafe_allow_html=True)

st.markdown("""
### Welcome

Open **Geomechanics Calculator** in the sidebar to upload a log table and compute
derived parameters. All calculations assume an isotropic, linear-elastic medium
in SI units.

### 🚀 Quick Start

1. **Upload** a CSV, XLSX or LAS file with depth, density, Vp and Vs columns
   (or load the bundled sample)
2. **Check the column mapping**; headers are detected automatically and can be overridden
3. **Validate & Compute** to derive the parameters
4. **Plot and export** the results as CSV, XLSX or LAS

### 📚 Units

- Depth in m (headers containing `km` are converted)
- Density in kg/m³ (headers containing `g/cc` or `g/cm3` are converted)
- Velocities in m/s (headers containing `km/s` are converted)

### 🧮 Derived Parameters

| Parameter | Formula |
|---|---|
| Vertical stress | g · ∫ρ dz (trapezoidal, zero at the shallowest sample) |
| Shear modulus G | ρ·Vs² |
| Bulk modulus K | ρ·(Vp² − 4/3·Vs²) |
| Lamé λ | ρ·(Vp² − 2·Vs²) |
| Poisson's ratio | (Vp² − 2Vs²) / (2(Vp² − Vs²)) |
| Young's modulus | 2G(1 + ν) |
| Acoustic / shear impedance | ρ·Vp, ρ·Vs |
| P-wave modulus | ρ·Vp² |
| Brittleness | min-max normalized Young's modulus |
""")

with st.sidebar:
    st.markdown("### 🪨 Geomechanics Log Calculator")
    st.markdown("---")
    st.markdown(f"""
    **Navigation**

    Use the pages above to access the calculator.

    ---

    Version: {__version__}
    """)
