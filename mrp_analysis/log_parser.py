# mrp_analysis/log_parser.py
"""
MRP Log Parser
Turns the free-text output of an Epicor MRP run into run metadata and a
list of line entries. A single pass over the lines carries one "current
date" forward so bare HH:MM:SS tokens can be placed on a calendar.
"""

import asyncio
import logging
import os
import re
from datetime import date, datetime, time
from decimal import Decimal, InvalidOperation

from .models import (
    EntryType, FAILING_HEALTH_FLAGS, HEALTH_FLAG_KEYWORDS, MrpLogDocument,
    MrpLogEntry, MrpRunMetadata, RunStatus, RunType,
)

logger = logging.getLogger(__name__)

# --- Patterns ---
SITE_RE = re.compile(r'(?:Site List\s*->\s*|Site:\s*)([A-Za-z0-9_.\-]+)', re.IGNORECASE)
HEADER_RE = re.compile(
    r'^\s*[A-Za-z]+,\s+([A-Za-z]+)\.?\s+(\d{1,2}),\s+(\d{4})\s+(\d{2}):(\d{2}):(\d{2})'
)
DATE_LINE_RE = re.compile(r'^\s*Date:\s*(\d{1,2})/(\d{1,2})/(\d{4})', re.IGNORECASE)
TIME_TOKEN_RE = re.compile(r'^\s*(\d{2}):(\d{2}):(\d{2})\b')
START_UTC_RE = re.compile(r'Start Time:\s*(\d{4})-(\d{2})-(\d{2})\s+(\d{2}):(\d{2})\s*UTC', re.IGNORECASE)
END_UTC_RE = re.compile(r'End Time:\s*(\d{4})-(\d{2})-(\d{2})\s+(\d{2}):(\d{2})\s*UTC', re.IGNORECASE)
COMPLETION_RE = re.compile(r'process\s+complete|completed\s+successfully', re.IGNORECASE)

JOB_RE = re.compile(r'\b(?:Job\s*:?|J:)\s*([A-Za-z]?\d+)', re.IGNORECASE)
# Part numbers: any token after 'Part:'; a bare 'Part <token>' only when the token has a digit
PART_RE = re.compile(
    r'\b(?:(?:Processing |For )?Part:\s*([A-Za-z0-9\[\]\-_.]+)'
    r'|Part\s+([A-Za-z0-9\[\]\-_.]*\d[A-Za-z0-9\[\]\-_.]*))',
    re.IGNORECASE
)
ENTRY_DATE_RE = re.compile(r'Date:\s*(\d{1,2})/(\d{1,2})/(\d{4})', re.IGNORECASE)
ISO_DATE_RE = re.compile(r'\b(\d{4})-(\d{2})-(\d{2})\b')
QUANTITY_RE = re.compile(r'\b(?:Quantity|Qty)\s*:?\s*(\d+(?:\.\d+)?)', re.IGNORECASE)

ERROR_KEYWORDS = ('error', 'timeout', 'abandoned', 'defunct', 'failed', 'cannot', 'exception')

MONTHS = {
    name: number
    for number, full in enumerate(
        ('january', 'february', 'march', 'april', 'may', 'june', 'july',
         'august', 'september', 'october', 'november', 'december'),
        start=1,
    )
    for name in (full, full[:3])
}
MONTHS['sept'] = 9


# --- Small extraction helpers ---

def _valid_time(hour, minute, second):
    """Build a time from HH/MM/SS strings, or None when out of range."""
    h, m, s = int(hour), int(minute), int(second)
    if 0 <= h <= 23 and 0 <= m <= 59 and 0 <= s <= 59:
        return time(h, m, s)
    return None


def _safe_date(year, month, day):
    try:
        return date(int(year), int(month), int(day))
    except ValueError:
        return None


def _parse_header(line):
    """Return (date, datetime) for a header like 'Thursday, February 5, 2026 01:00:00'."""
    match = HEADER_RE.match(line)
    if not match:
        return None, None
    month_name, day, year, hh, mm, ss = match.groups()
    month = MONTHS.get(month_name.lower())
    header_date = _safe_date(year, month, day) if month else None
    if header_date is None:
        return None, None
    clock = _valid_time(hh, mm, ss)
    if clock is None:
        return header_date, None
    return header_date, datetime.combine(header_date, clock)


def _parse_utc(regex, line):
    match = regex.search(line)
    if not match:
        return None
    year, month, day, hh, mm = match.groups()
    day_value = _safe_date(year, month, day)
    clock = _valid_time(hh, mm, '00')
    if day_value is None or clock is None:
        return None
    return datetime.combine(day_value, clock)


def _strip_time_token(line):
    return TIME_TOKEN_RE.sub('', line, count=1).strip()


def _entry_date(line):
    match = ENTRY_DATE_RE.search(line)
    if match:
        month, day, year = match.groups()
        found = _safe_date(year, month, day)
        if found:
            return found
    match = ISO_DATE_RE.search(line)
    if match:
        return _safe_date(*match.groups())
    return None


def _entry_quantity(line):
    match = QUANTITY_RE.search(line)
    if not match:
        return None
    try:
        return Decimal(match.group(1))
    except InvalidOperation:
        return None


def _classify(lowered):
    if any(k in lowered for k in ERROR_KEYWORDS):
        return EntryType.WARNING if 'warning' in lowered else EntryType.ERROR
    if 'warning' in lowered:
        return EntryType.WARNING
    if 'supply:' in lowered:
        return EntryType.SUPPLY
    if 'demand:' in lowered:
        return EntryType.DEMAND
    if 'processing part' in lowered:
        return EntryType.PROCESSING_PART
    return None


# --- Classification of the run as a whole ---

def detect_run_type(lowered_lines):
    """Ordered keyword predicates; explicit keywords beat the Processing Part heuristic."""
    if any('net change' in l for l in lowered_lines):
        return RunType.NET_CHANGE
    if any('regen' in l or 'building pegging' in l for l in lowered_lines):
        return RunType.REGEN
    if any('processing part' in l for l in lowered_lines):
        return RunType.NET_CHANGE
    return RunType.UNKNOWN


def detect_health_flags(lowered_lines):
    return frozenset(
        flag for flag in HEALTH_FLAG_KEYWORDS
        if any(flag in l for l in lowered_lines)
    )


def determine_status(health_flags, start_time, end_time):
    if health_flags & FAILING_HEALTH_FLAGS:
        return RunStatus.FAILED
    if start_time and not end_time:
        return RunStatus.INCOMPLETE
    if start_time and end_time:
        return RunStatus.SUCCESS
    return RunStatus.UNCERTAIN


class MrpLogParser:
    """Parses MRP run logs. Holds no state between calls."""

    def __init__(self, encoding='utf-8'):
        self.encoding = encoding

    def parse_log_content(self, lines):
        """
        Extract run metadata from log lines.

        Args:
            lines: sequence of lines, or a whole log as one string

        Returns:
            MrpRunMetadata
        """
        return self.parse_document(lines).metadata

    def parse_document(self, lines, source_file=''):
        """Extract run metadata plus one entry per meaningful line."""
        lines = self._normalize_lines(lines)

        site = None
        start_time = None
        end_time = None
        current_date = None
        lowered_lines = []
        entries = []

        for line_number, raw in enumerate(lines, start=1):
            line = raw.rstrip('\r\n')
            stripped = line.strip()
            if not stripped:
                continue
            lowered = stripped.lower()
            lowered_lines.append(lowered)

            if site is None:
                site_match = SITE_RE.search(stripped)
                if site_match:
                    site = site_match.group(1).strip()

            # Timestamp for this line, if any
            stamp = None
            header_date, header_stamp = _parse_header(stripped)
            if header_date:
                current_date = header_date
                stamp = header_stamp
            else:
                date_match = DATE_LINE_RE.match(stripped)
                if date_match:
                    month, day, year = date_match.groups()
                    current_date = _safe_date(year, month, day) or current_date
                time_match = TIME_TOKEN_RE.match(stripped)
                if time_match and current_date:
                    clock = _valid_time(*time_match.groups())
                    if clock:
                        stamp = datetime.combine(current_date, clock)

            explicit_start = _parse_utc(START_UTC_RE, stripped)
            explicit_end = _parse_utc(END_UTC_RE, stripped)

            if start_time is None:
                start_time = explicit_start or stamp
            if end_time is None:
                if explicit_end:
                    end_time = explicit_end
                elif stamp and COMPLETION_RE.search(stripped):
                    end_time = stamp

            if stripped.startswith('#'):
                continue
            entries.append(self._build_entry(line_number, line, stripped, lowered, stamp or explicit_start or explicit_end))

        health_flags = detect_health_flags(lowered_lines)
        metadata = MrpRunMetadata(
            site=site,
            start_time=start_time,
            end_time=end_time,
            run_type=detect_run_type(lowered_lines),
            status=determine_status(health_flags, start_time, end_time),
            health_flags=health_flags,
        )
        logger.debug(
            f"Parsed {len(lines)} lines from '{source_file or '<memory>'}': "
            f"{len(entries)} entries, run type {metadata.run_type.value}, status {metadata.status.value}"
        )
        return MrpLogDocument(metadata=metadata, entries=tuple(entries), source_file=source_file)

    def parse_log_file(self, path):
        return self.parse_document_file(path).metadata

    def parse_document_file(self, path):
        lines = self._read_lines(path)
        return self.parse_document(lines, source_file=os.path.basename(str(path)))

    async def parse_log_file_async(self, path):
        """Read the file off the event loop, then parse it."""
        lines = await asyncio.to_thread(self._read_lines, path)
        return self.parse_log_content(lines)

    async def parse_document_file_async(self, path):
        lines = await asyncio.to_thread(self._read_lines, path)
        return self.parse_document(lines, source_file=os.path.basename(str(path)))

    # --- Internals ---

    @staticmethod
    def _normalize_lines(lines):
        if lines is None:
            raise ValueError("Log lines cannot be None")
        if isinstance(lines, str):
            return lines.splitlines()
        return [str(l) if l is not None else '' for l in lines]

    def _read_lines(self, path):
        if path is None or not os.path.isfile(path):
            raise FileNotFoundError(f"MRP log file not found: {path}")
        logger.info(f"Reading MRP log file {path}")
        with open(path, 'r', encoding=self.encoding, errors='replace') as handle:
            return handle.read().splitlines()

    @staticmethod
    def _build_entry(line_number, line, stripped, lowered, stamp):
        job_match = JOB_RE.search(stripped)
        part_match = PART_RE.search(stripped)
        job_number = job_match.group(1) if job_match else None
        part_number = (part_match.group(1) or part_match.group(2)).rstrip('.') if part_match else None

        entry_type = _classify(lowered)
        if entry_type is None:
            entry_type = EntryType.JOB if job_number else EntryType.INFO

        error_message = None
        if entry_type in (EntryType.ERROR, EntryType.WARNING):
            error_message = _strip_time_token(stripped)
            if error_message.upper().startswith('ERROR:'):
                error_message = error_message[len('ERROR:'):].strip()

        return MrpLogEntry(
            line_number=line_number,
            raw_line=line,
            entry_type=entry_type,
            job_number=job_number,
            part_number=part_number or None,
            error_message=error_message,
            timestamp=stamp,
            date=_entry_date(stripped),
            quantity=_entry_quantity(stripped),
        )


mrp_log_parser = MrpLogParser()
