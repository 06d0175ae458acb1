"""
Web Interface for Unused Class Analysis
"""

import json
import logging
import os
import shutil
import sys
import tempfile
import zipfile
from pathlib import Path

# Add project root to Python path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from flask import Flask, jsonify, render_template, request, send_file
from core.unused_analyzer import analyze_directory
from core.usage_scanner import InvalidSearchWordError, find_word_in_directory
from utils.config import ConfigError
from utils.file_utils import ensure_directory, unzip_to_tempdir

logger = logging.getLogger(__name__)

app = Flask(__name__)

# Use system temp directory instead of local uploads
TEMP_DIR = Path(tempfile.gettempdir()) / 'tag_finder'
ensure_directory(TEMP_DIR)
REPORT_PATH = TEMP_DIR / 'report.json'


def run_analysis(directory):
    report = analyze_directory(directory)
    data = report.to_dict()
    with open(REPORT_PATH, 'w', encoding='utf-8') as f:
        json.dump(data, f, indent=2)
    data['report_url'] = '/download/report'
    return data


@app.route('/')
def index():
    """Render the main page."""
    return render_template('index.html')


@app.route('/analyze', methods=['POST'])
def analyze():
    """Analyze a project directory on the server for unused classes."""
    try:
        payload = request.get_json(silent=True) or {}
        directory = payload.get('directory')
        if not directory:
            return jsonify({'error': 'A directory is required'}), 400
        if not os.path.isdir(directory):
            return jsonify({'error': f'Directory not found: {directory}'}), 404
        return jsonify(run_analysis(directory))
    except ConfigError as e:
        return jsonify({'error': str(e)}), 400
    except Exception as e:
        logger.error(f"Analysis failed: {e}", exc_info=True)
        return jsonify({'error': str(e)}), 500


@app.route('/find-word', methods=['POST'])
def find_word():
    """Report whether a word occurs only in stylesheet files."""
    try:
        payload = request.get_json(silent=True) or {}
        directory = payload.get('directory')
        if not directory:
            return jsonify({'error': 'A directory is required'}), 400
        if not os.path.isdir(directory):
            return jsonify({'error': f'Directory not found: {directory}'}), 404
        result, warnings = find_word_in_directory(payload.get('word') or '', directory)
        data = result.to_dict()
        data['warnings'] = [w.to_dict() for w in warnings]
        return jsonify(data)
    except (InvalidSearchWordError, ConfigError) as e:
        return jsonify({'error': str(e)}), 400
    except Exception as e:
        logger.error(f"Word search failed: {e}", exc_info=True)
        return jsonify({'error': str(e)}), 500


@app.route('/analyze_zip', methods=['POST'])
def analyze_zip():
    """Handle a zipped project upload and analyze it for unused classes."""
    project_dir = None
    try:
        if 'project_zip' not in request.files:
            return jsonify({'error': 'A project zip file is required.'}), 400
        project_zip = request.files['project_zip']
        if not project_zip.filename.endswith('.zip'):
            return jsonify({'error': 'Only .zip files are accepted.'}), 400
        with tempfile.NamedTemporaryFile(suffix='.zip', delete=False, dir=TEMP_DIR) as zip_temp:
            project_zip.save(zip_temp)
            zip_path = zip_temp.name
        try:
            project_dir = unzip_to_tempdir(zip_path)
        finally:
            os.remove(zip_path)
        return jsonify(run_analysis(project_dir))
    except zipfile.BadZipFile:
        return jsonify({'error': 'Uploaded file is not a valid zip archive.'}), 400
    except Exception as e:
        logger.error(f"Zip analysis failed: {e}", exc_info=True)
        return jsonify({'error': str(e)}), 500
    finally:
        if project_dir:
            shutil.rmtree(project_dir, ignore_errors=True)


@app.route('/download/report')
def download_report():
    """Download the last analysis report."""
    if REPORT_PATH.exists():
        return send_file(
            REPORT_PATH,
            mimetype='application/json',
            as_attachment=True,
            download_name='unused_classes_report.json'
        )
    return jsonify({'error': 'No report available'}), 404


if __name__ == '__main__':
    logging.basicConfig(level=logging.INFO)
    port = int(os.environ.get("PORT", 5000))
    app.run(host='0.0.0.0', port=port)
