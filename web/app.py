"""
Web Interface for the Unused CSS Module Class Detector
"""

import logging
import os
import sys
from pathlib import Path

# Add project root to Python path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from flask import Flask, Response, jsonify, request

from comparator.report_builder import ReportBuilder
from core.config import DEFAULT_CONFIG, config_from_dict
from core.errors import ConfigError
from core.unused_class_finder import analyze_workspace

logger = logging.getLogger(__name__)

app = Flask(__name__)


def _run(root: str, overrides=None) -> ReportBuilder:
    logger.info(f"Analyzing {root}")
    config = config_from_dict(overrides, DEFAULT_CONFIG) if overrides else DEFAULT_CONFIG
    report = analyze_workspace(root, config=config)
    builder = ReportBuilder()
    builder.collect_metrics(report)
    return builder


@app.route('/health')
def health():
    return jsonify({'status': 'ok'})


@app.route('/api/unused-classes', methods=['POST'])
def unused_classes():
    """Analyze a directory on the server and return the JSON report."""
    payload = request.get_json(silent=True) or {}
    root = payload.get('root')
    if not root or not os.path.isdir(root):
        return jsonify({'error': 'A valid "root" directory is required'}), 400
    try:
        builder = _run(root, payload.get('config'))
    except ConfigError as e:
        return jsonify({'error': str(e)}), 400
    return Response(builder.generate_json_report(), mimetype='application/json')


@app.route('/report')
def html_report():
    """Render the HTML report for ``?root=<dir>``."""
    root = request.args.get('root')
    if not root or not os.path.isdir(root):
        return jsonify({'error': 'A valid "root" directory is required'}), 400
    return _run(root).generate_html_report()


if __name__ == '__main__':
    logging.basicConfig(level=logging.INFO)
    port = int(os.environ.get("PORT", 5000))
    app.run(host='0.0.0.0', port=port)
