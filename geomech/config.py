"""
Configuration
Physical constants, well-log conventions and runtime settings.

Runtime settings are read from environment variables so the backend and the
Streamlit front end can be tuned without code changes:

    GEOMECH_LOG_LEVEL       logging level name (default INFO)
    GEOMECH_LOG_FILE        optional log file path
    GEOMECH_MAX_UPLOAD_MB   upload size limit for the backend (default 20)
    GEOMECH_BACKEND_HOST    backend bind host (default 127.0.0.1)
    GEOMECH_BACKEND_PORT    backend port (default 5000)
    GEOMECH_DEBUG           enable Flask debug mode (default false)
"""

import os
from dataclasses import dataclass
from typing import Mapping, Optional

# Gravitational acceleration (m/s^2) used for overburden integration
GRAVITY = 9.81

# Denominators smaller than this resolve to the not-a-number sentinel
DENOMINATOR_EPSILON = 1e-12

# Standard null values in well log files
NULL_VALUES = [-999.25, -999, -9999, -9999.25, -999.2500, -999.00]

SUPPORTED_EXTENSIONS = ['.csv', '.txt', '.xlsx', '.las']

# Default plot selections
DEFAULT_PROFILE_FIELDS = [
    'vp', 'vs', 'density', 'vertical_stress',
    'youngs_modulus', 'shear_modulus', 'bulk_modulus',
]
DEFAULT_WELLLOG_FIELDS = [
    'density', 'vp', 'vs', 'acoustic_impedance',
    'shear_modulus', 'youngs_modulus',
]

# Export file names
EXPORT_BASENAME = 'geomech_results'


@dataclass(frozen=True)
class Settings:
    """Runtime settings for the service and the front end."""
    log_level: str = 'INFO'
    log_file: Optional[str] = None
    max_upload_mb: int = 20
    backend_host: str = '127.0.0.1'
    backend_port: int = 5000
    debug: bool = False

    @property
    def max_content_length(self) -> int:
        return self.max_upload_mb * 1024 * 1024


def _get_int(env: Mapping[str, str], key: str, default: int) -> int:
    try:
        return int(env[key])
    except (KeyError, ValueError):
        return default


def _get_bool(env: Mapping[str, str], key: str, default: bool) -> bool:
    value = env.get(key)
    if value is None:
        return default
    return value.strip().lower() in ('1', 'true', 'yes', 'on')


def load_settings(env: Optional[Mapping[str, str]] = None) -> Settings:
    """
    Build Settings from environment variables.
    
    Args:
        env: Mapping to read from (defaults to os.environ)
        
    Returns:
        Settings instance; invalid numeric values fall back to defaults
    """
    if env is None:
        env = os.environ
    
    return Settings(
        log_level=env.get('GEOMECH_LOG_LEVEL', 'INFO').upper(),
        log_file=env.get('GEOMECH_LOG_FILE') or None,
        max_upload_mb=_get_int(env, 'GEOMECH_MAX_UPLOAD_MB', 20),
        backend_host=env.get('GEOMECH_BACKEND_HOST', '127.0.0.1'),
        backend_port=_get_int(env, 'GEOMECH_BACKEND_PORT', 5000),
        debug=_get_bool(env, 'GEOMECH_DEBUG', False),
    )
