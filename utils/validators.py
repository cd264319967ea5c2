# utils/validators.py
"""
Input validation functions
Validate uploaded MRP log files before parsing
"""

import os
import re

def validate_log_filename(filename, allowed_extensions=('txt', 'log')):
    """
    Validate an uploaded log's file name

    Args:
        filename: name supplied by the browser
        allowed_extensions: extensions accepted, without the dot

    Returns:
        tuple: (is_valid, error_message)
    """
    if not filename or not filename.strip():
        return False, "A log file name is required"

    filename = filename.strip()

    if len(filename) > 255:
        return False, "Log file name must be less than 255 characters"

    # No path separators or control characters
    if re.search(r'[\\/\x00-\x1f]', filename):
        return False, "Log file name contains invalid characters"

    extension = os.path.splitext(filename)[1].lower().lstrip('.')
    allowed = [e.lower().lstrip('.') for e in allowed_extensions]
    if extension not in allowed:
        return False, f"Log file must be one of: {', '.join('.' + e for e in allowed)}"

    return True, None

def validate_log_upload(file_storage, max_bytes, allowed_extensions=('txt', 'log'), label='Log file'):
    """
    Validate an uploaded log file and read its content

    Args:
        file_storage: werkzeug FileStorage or None
        max_bytes: size limit in bytes
        allowed_extensions: extensions accepted, without the dot
        label: field name used in error messages

    Returns:
        tuple: (is_valid, error_message, data)
    """
    if file_storage is None or not file_storage.filename:
        return False, f"{label} is required", None

    is_valid, error = validate_log_filename(file_storage.filename, allowed_extensions)
    if not is_valid:
        return False, f"{label}: {error}", None

    data = file_storage.read(max_bytes + 1)
    if len(data) > max_bytes:
        return False, f"{label} exceeds the upload limit of {max_bytes:,} bytes", None

    return True, None, data
