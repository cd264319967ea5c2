# utils/xlsx_export.py
"""
XLSX export of an MRP log comparison
One sheet per view: run summary, differences, explanations.
"""

from io import BytesIO

import openpyxl

from .helpers import format_datetime, safe_str


def _summary_rows(comparison):
    rows = []
    for label, document in (('Run A', comparison.run_a), ('Run B', comparison.run_b)):
        meta = document.metadata.to_dict()
        rows.append([
            label,
            document.source_file,
            safe_str(meta['site']),
            meta['run_type'],
            meta['status'],
            format_datetime(document.metadata.start_time),
            format_datetime(document.metadata.end_time),
            ', '.join(meta['health_flags']),
            len(document.entries),
        ])
    return rows


def build_comparison_workbook(comparison, explanations):
    """
    Build the comparison workbook in memory

    Args:
        comparison: MrpLogComparison
        explanations: list of Explanation for the same comparison

    Returns:
        BytesIO: saved workbook, positioned at the start
    """
    wb = openpyxl.Workbook()

    ws = wb.active
    ws.title = "Run Summary"
    ws.append(['Run', 'Source File', 'Site', 'Run Type', 'Status', 'Start', 'End', 'Health Flags', 'Entries'])
    for row_data in _summary_rows(comparison):
        ws.append(row_data)

    ws = wb.create_sheet("Differences")
    ws.append(['#', 'Type', 'Severity', 'Job', 'Part', 'Run A Line', 'Run B Line', 'Details'])
    for index, diff in enumerate(comparison.differences, start=1):
        data = diff.to_dict()
        ws.append([
            index,
            data['type'],
            data['severity'],
            safe_str(data['job_number']),
            safe_str(data['part_number']),
            data['run_a_line'],
            data['run_b_line'],
            '; '.join(f"{k}={v}" for k, v in data['details'].items()),
        ])

    ws = wb.create_sheet("Explanations")
    ws.append(['#', 'Type', 'Summary', 'Facts', 'Top Inference', 'Confidence', 'Next Steps in Epicor'])
    for index, explanation in enumerate(explanations or [], start=1):
        top = max(explanation.inferences, key=lambda i: i.confidence_level)
        ws.append([
            index,
            explanation.related_difference.type.value,
            explanation.summary,
            '\n'.join(f.statement for f in explanation.facts),
            top.statement,
            top.confidence_level,
            '\n'.join(explanation.next_steps_in_epicor),
        ])

    output = BytesIO()
    wb.save(output)
    output.seek(0)
    return output
