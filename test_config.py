"""Tests for runtime settings and logging setup."""
import logging

from geomech.config import Settings, load_settings
from geomech.logging_config import setup_logging


def test_defaults():
    settings = load_settings({})
    assert settings == Settings()
    assert settings.max_content_length == 20 * 1024 * 1024


def test_environment_overrides():
    settings = load_settings({
        'GEOMECH_LOG_LEVEL': 'debug',
        'GEOMECH_LOG_FILE': '/tmp/geomech.log',
        'GEOMECH_MAX_UPLOAD_MB': '5',
        'GEOMECH_BACKEND_HOST': '0.0.0.0',
        'GEOMECH_BACKEND_PORT': '8080',
        'GEOMECH_DEBUG': 'yes',
    })
    assert settings.log_level == 'DEBUG'
    assert settings.log_file == '/tmp/geomech.log'
    assert settings.max_upload_mb == 5
    assert settings.backend_host == '0.0.0.0'
    assert settings.backend_port == 8080
    assert settings.debug is True


def test_invalid_numbers_fall_back():
    settings = load_settings({'GEOMECH_BACKEND_PORT': 'http', 'GEOMECH_MAX_UPLOAD_MB': ''})
    assert settings.backend_port == 5000
    assert settings.max_upload_mb == 20


def test_setup_logging_replaces_handlers(tmp_path):
    logger = setup_logging('DEBUG')
    assert logger.name == 'geomech'
    assert logger.level == logging.DEBUG
    assert len(logger.handlers) == 1

    log_file = tmp_path / 'geomech.log'
    logger = setup_logging(logging.INFO, str(log_file))
    assert len(logger.handlers) == 2

    logging.getLogger('geomech.pipeline').info('hello')
    for handler in logger.handlers:
        handler.flush()
    assert 'geomech.pipeline - INFO - hello' in log_file.read_text()

    logger = setup_logging('not-a-level')
    assert logger.level == logging.INFO
    assert len(logger.handlers) == 1
