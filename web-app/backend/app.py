"""
Flask Backend Application
REST API that runs the geomechanics pipeline server-side.

The service is stateless: every request carries its own file and nothing is
stored between requests.
"""

from flask import Flask, jsonify, request, send_file
from flask_cors import CORS
import io
import logging
import os
import sys

# Add repository root to path for running from a checkout
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '../..'))

from geomech import __version__
from geomech.config import EXPORT_BASENAME, load_settings
from geomech.data_processing import export_to_csv, export_to_las, export_to_xlsx, results_to_records
from geomech.errors import GeomechError
from geomech.file_loader import load_table
from geomech.header_mapping import detect_columns
from geomech.logging_config import setup_logging
from geomech.pipeline import PipelineRequest, run_pipeline
from geomech.validation import find_missing_columns

logger = logging.getLogger('geomech.backend')

# form field -> canonical field
OVERRIDE_FIELDS = {
    'col_depth': 'depth',
    'col_density': 'density',
    'col_vp': 'vp',
    'col_vs': 'vs',
}

EXPORT_FORMATS = {
    'csv': ('text/csv', '.csv'),
    'xlsx': ('application/vnd.openxmlformats-officedocument.spreadsheetml.sheet', '.xlsx'),
    'las': ('text/plain', '.las'),
}


def _get_upload():
    """Return (filename, bytes) of the uploaded file or raise ValueError."""
    if 'file' not in request.files:
        raise ValueError('No file provided')

    file = request.files['file']
    if file.filename == '':
        raise ValueError('No file selected')

    return file.filename, file.read()


def _get_overrides():
    return {field: request.form.get(key) for key, field in OVERRIDE_FIELDS.items()}


def _run_uploaded():
    filename, content = _get_upload()
    table = load_table(content, filename)
    return filename, run_pipeline(PipelineRequest.from_table(table, _get_overrides()))


def create_app(settings=None):
    """
    Build the Flask application.

    Args:
        settings: geomech.config.Settings (defaults to load_settings())

    Returns:
        Flask app
    """
    if settings is None:
        settings = load_settings()

    app = Flask(__name__)
    app.config['MAX_CONTENT_LENGTH'] = settings.max_content_length
    # Keep results in canonical field order
    app.json.sort_keys = False
    CORS(app)

    @app.route('/api/health', methods=['GET'])
    def health_check():
        """Health check endpoint."""
        return jsonify({'status': 'healthy', 'version': __version__})

    @app.route('/api/detect-columns', methods=['POST'])
    def detect():
        """
        Decode an uploaded file and propose a column mapping.

        Returns:
            JSON with headers, mapping, missing (undetected fields) and row_count
        """
        try:
            filename, content = _get_upload()
            table = load_table(content, filename)
        except (ValueError, GeomechError) as e:
            return jsonify({'error': str(e)}), 400

        mapping = detect_columns(table.headers)
        return jsonify({
            'headers': table.headers,
            'mapping': mapping,
            'missing': find_missing_columns(mapping),
            'row_count': table.num_rows,
        })

    @app.route('/api/compute', methods=['POST'])
    def compute():
        """
        Run the full pipeline on an uploaded file.

        Form fields col_depth, col_density, col_vp and col_vs override the
        detected headers.

        Returns:
            JSON {results: [...]} on success, {error: message} otherwise
        """
        try:
            filename, result = _run_uploaded()
        except (ValueError, GeomechError) as e:
            logger.info("Compute rejected: %s", e)
            return jsonify({'error': str(e)}), 400
        except Exception as e:
            logger.exception("Compute failed")
            return jsonify({'error': str(e)}), 500

        return jsonify({
            'results': results_to_records(result.results),
            'mapping': result.mapping,
            'rows_read': result.rows_read,
            'rows_used': result.rows_used,
        })

    @app.route('/api/export/<fmt>', methods=['POST'])
    def export(fmt):
        """Run the pipeline and return the results as a CSV, XLSX or LAS download."""
        fmt = fmt.lower()
        if fmt not in EXPORT_FORMATS:
            return jsonify({'error': f"Unsupported export format '{fmt}'"}), 400

        try:
            filename, result = _run_uploaded()
        except (ValueError, GeomechError) as e:
            return jsonify({'error': str(e)}), 400
        except Exception as e:
            logger.exception("Export failed")
            return jsonify({'error': str(e)}), 500

        if fmt == 'csv':
            content = export_to_csv(result.results).encode('utf-8')
        elif fmt == 'xlsx':
            content = export_to_xlsx(result.results)
        else:
            well_name = os.path.splitext(os.path.basename(filename))[0] or 'UNKNOWN'
            content = export_to_las(result.results, well_name=well_name).encode('utf-8')

        mimetype, ext = EXPORT_FORMATS[fmt]
        buffer = io.BytesIO(content)
        buffer.seek(0)
        return send_file(
            buffer,
            mimetype=mimetype,
            as_attachment=True,
            download_name=EXPORT_BASENAME + ext
        )

    return app


app = create_app()


if __name__ == '__main__':
    settings = load_settings()
    setup_logging(settings.log_level, settings.log_file)
    app.run(debug=settings.debug, host=settings.backend_host, port=settings.backend_port)
