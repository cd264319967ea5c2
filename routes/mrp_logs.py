# routes/mrp_logs.py
"""
MRP Log Analyzer routes.
JSON endpoints to parse a run log, compare two runs, and export the
comparison as a Markdown report or an XLSX workbook.
"""

from flask import Blueprint, request, jsonify, send_file, current_app
from io import BytesIO
from datetime import datetime

from config import Config
from mrp_analysis import mrp_log_parser, mrp_run_differ, explanation_engine
from utils.helpers import decode_log_bytes, get_client_info, safe_int
from utils.validators import validate_log_upload
from utils.report_generator import ReportOptions, generate_markdown_report
from utils.xlsx_export import build_comparison_workbook

mrp_logs_bp = Blueprint('mrp_logs', __name__, url_prefix='/mrp-logs')


class UploadError(ValueError):
    """An upload failed validation; the message is safe to show the user."""


def _read_upload(field, label):
    """Validate and parse one uploaded log field into an MrpLogDocument."""
    is_valid, error, data = validate_log_upload(
        request.files.get(field),
        Config.max_upload_bytes(),
        Config.MRP_LOG_ALLOWED_EXTENSIONS,
        label=label,
    )
    if not is_valid:
        raise UploadError(error)
    text = decode_log_bytes(data, Config.MRP_LOG_ENCODING)
    return mrp_log_parser.parse_document(text, source_file=request.files[field].filename)


def _compare_uploads():
    run_a = _read_upload('run_a', 'Run A log')
    run_b = _read_upload('run_b', 'Run B log')
    comparison = mrp_run_differ.compare(run_a, run_b)
    explanations = explanation_engine.generate_explanations(comparison)
    ip, _ = get_client_info()
    current_app.logger.info(
        f"MRP logs compared for {ip}: '{run_a.source_file}' vs '{run_b.source_file}', "
        f"{len(comparison.differences)} differences"
    )
    return comparison, explanations


def _report_options():
    """Report options from the form; limits must be whole numbers of at least 1."""
    form = request.form
    defaults = ReportOptions()
    max_evidence_lines = safe_int(form.get('max_evidence_lines', defaults.max_evidence_lines))
    max_differences = safe_int(form.get('max_differences', defaults.max_differences_to_show))
    if max_evidence_lines < 1 or max_differences < 1:
        raise ValueError("Report limits must be whole numbers of at least 1.")
    return ReportOptions(
        include_evidence=form.get('include_evidence', 'true').lower() != 'false',
        include_inferences=form.get('include_inferences', 'true').lower() != 'false',
        max_evidence_lines=max_evidence_lines,
        max_differences_to_show=max_differences,
    )


@mrp_logs_bp.route('/api/parse', methods=['POST'])
def parse_log():
    """API endpoint to parse one uploaded MRP log."""
    try:
        document = _read_upload('log_file', 'Log file')
        include_entries = request.args.get('entries', 'false').lower() == 'true'
        return jsonify({'success': True, 'document': document.to_dict(include_entries=include_entries)})

    except UploadError as e:
        return jsonify({'success': False, 'message': str(e)}), 400
    except Exception as e:
        current_app.logger.error(f"Error parsing MRP log: {e}")
        return jsonify({'success': False, 'message': 'An error occurred while parsing the log.'}), 500


@mrp_logs_bp.route('/api/compare', methods=['POST'])
def compare_logs():
    """API endpoint to compare two uploaded MRP logs and explain the differences."""
    try:
        comparison, explanations = _compare_uploads()
        return jsonify({
            'success': True,
            'run_a': comparison.run_a.to_dict(),
            'run_b': comparison.run_b.to_dict(),
            'summary': comparison.summary,
            'differences': [d.to_dict() for d in comparison.differences],
            'explanations': [e.to_dict() for e in explanations],
        })

    except UploadError as e:
        return jsonify({'success': False, 'message': str(e)}), 400
    except Exception as e:
        current_app.logger.error(f"Error comparing MRP logs: {e}")
        return jsonify({'success': False, 'message': 'An error occurred while comparing the logs.'}), 500


@mrp_logs_bp.route('/api/export-report', methods=['POST'])
def export_report():
    """API endpoint to export the comparison as a Markdown report."""
    try:
        options = _report_options()
    except ValueError as e:
        return jsonify({'success': False, 'message': str(e)}), 400

    try:
        comparison, explanations = _compare_uploads()
        report = generate_markdown_report(comparison, explanations, options)

        output = BytesIO(report.encode('utf-8'))
        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        filename = f"mrp_comparison_report_{timestamp}.md"

        return send_file(
            output,
            as_attachment=True,
            download_name=filename,
            mimetype='text/markdown'
        )

    except UploadError as e:
        return jsonify({'success': False, 'message': str(e)}), 400
    except Exception as e:
        current_app.logger.error(f"Error exporting MRP comparison report: {e}")
        return jsonify({'success': False, 'message': 'An error occurred during export.'}), 500


@mrp_logs_bp.route('/api/export-xlsx', methods=['POST'])
def export_xlsx():
    """API endpoint to export the comparison to an XLSX file."""
    try:
        comparison, explanations = _compare_uploads()
        output = build_comparison_workbook(comparison, explanations)

        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        filename = f"mrp_comparison_{timestamp}.xlsx"

        return send_file(
            output,
            as_attachment=True,
            download_name=filename,
            mimetype='application/vnd.openxmlformats-officedocument.spreadsheetml.sheet'
        )

    except UploadError as e:
        return jsonify({'success': False, 'message': str(e)}), 400
    except Exception as e:
        current_app.logger.error(f"Error exporting MRP comparison: {e}")
        return jsonify({'success': False, 'message': 'An error occurred during export.'}), 500
