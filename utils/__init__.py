"""
Utility functions package
Common helpers, validators, report and workbook builders
"""

from .helpers import (
    get_client_info,
    format_datetime,
    calculate_duration,
    format_duration,
    decode_log_bytes,
    safe_str,
    safe_int
)

from .validators import (
    validate_log_filename,
    validate_log_upload
)

from .report_generator import ReportOptions, generate_markdown_report
from .xlsx_export import build_comparison_workbook

__all__ = [
    'get_client_info',
    'format_datetime',
    'calculate_duration',
    'format_duration',
    'decode_log_bytes',
    'safe_str',
    'safe_int',
    'validate_log_filename',
    'validate_log_upload',
    'ReportOptions',
    'generate_markdown_report',
    'build_comparison_workbook'
]
