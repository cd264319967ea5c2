# mrp_analysis/explanation_engine.py
"""
Explanation Engine
Turns each run difference into something a planner can act on:
facts straight from the log, likely causes with a confidence level,
and the Epicor screens to check next.

Each difference type has its own handler; handlers are plain functions
and share nothing.
"""

import logging
from decimal import Decimal, InvalidOperation

from .models import (
    DifferenceType, EntryType, Explanation, ExplanationFact, ExplanationInference, RunType,
)

logger = logging.getLogger(__name__)

ABSENCE_IN_LOG = '(absence in log)'
NO_ERROR_IN_RUN_A = '(no error in Run A)'
NO_ERROR_IN_RUN_B = '(no error in Run B)'
ENTRY_NOT_AVAILABLE = '(entry not available)'

# --- Next steps per difference type ---
NEXT_STEPS = {
    DifferenceType.JOB_REMOVED: (
        "Check Job Tracker for deletion history",
        "Review Job Entry screen for manual changes",
        "Check MRP processing logs for cleanup actions",
    ),
    DifferenceType.JOB_ADDED: (
        "Check Time Phase Inquiry for new demand sources",
        "Review Sales Order Entry for recent orders",
        "Check Forecast Entry for demand changes",
        "Verify part is active in Part Master",
    ),
    DifferenceType.DATE_SHIFTED: (
        "Check Resource Scheduling for capacity conflicts",
        "Review Load Leveling settings",
        "Check job routing for operation duration changes",
    ),
    DifferenceType.QUANTITY_CHANGED: (
        "Check Time Phase Inquiry for demand source changes",
        "Review Sales Order Entry for order modifications",
        "Check Forecast Entry for forecast adjustments",
        "Verify inventory levels and on-hand quantities",
    ),
    DifferenceType.ERROR_APPEARED: (
        "Check System Monitor for performance issues",
        "Review Part Master for recent changes",
        "Check database logs for errors at same timestamp",
        "Verify BOM and routing data integrity",
    ),
    DifferenceType.ERROR_RESOLVED: (
        "Verify fix is permanent by monitoring future runs",
        "Document what was changed to resolve the error",
        "Check if similar errors exist for other parts",
    ),
    DifferenceType.OTHER: (
        "Review the log entries for this difference",
        "Compare MRP settings between runs",
    ),
}


def _evidence(entry):
    """(raw line, line number) for an entry, or the not-available sentinel."""
    if entry is None or not (entry.raw_line or '').strip():
        return ENTRY_NOT_AVAILABLE, 0
    return entry.raw_line, entry.line_number


def _fact_from(statement, entry):
    evidence, line_number = _evidence(entry)
    return ExplanationFact(statement=statement, log_evidence=evidence, line_number=line_number)


def _line_text(entry):
    return f" at line {entry.line_number}" if entry is not None else ''


def _label(diff):
    return diff.job_number or diff.part_number or 'unknown'


def _to_decimal(value):
    try:
        number = Decimal(str(value))
    except (InvalidOperation, TypeError, ValueError):
        return None
    return number if number.is_finite() else None


def _explanation(diff, summary, facts, inferences):
    return Explanation(
        related_difference=diff,
        summary=summary,
        facts=tuple(facts),
        inferences=tuple(inferences),
        next_steps_in_epicor=NEXT_STEPS[diff.type],
    )


# --- Handlers ---

def explain_job_removed(diff, comparison):
    job = _label(diff)
    entry = diff.run_a_entry
    error_entry = entry if entry is not None and entry.error_message else None
    if error_entry is None:
        for candidate in comparison.run_a.entries_for_job(diff.job_number):
            if candidate.entry_type == EntryType.ERROR and candidate.error_message:
                error_entry = candidate
                break
    error_message = error_entry.error_message if error_entry else None

    facts = [
        _fact_from(f"Job {job} present in Run A{_line_text(entry)}", entry),
        ExplanationFact(f"Job {job} not found in Run B", ABSENCE_IN_LOG, 0),
    ]
    if error_message:
        facts.append(_fact_from(f"Run A logged error: {error_message}", error_entry))

    lowered = (error_message or '').lower()
    if 'timeout' in lowered:
        inference = ExplanationInference(
            "Job may have been automatically removed due to timeout", 0.85,
            ("Timeout errors often trigger automatic cleanup", "Common in Net Change runs"),
        )
    elif 'abandoned' in lowered:
        inference = ExplanationInference(
            "Job may have been manually deleted after abandonment", 0.75,
            ("Abandoned jobs typically require manual intervention",),
        )
    else:
        inference = ExplanationInference(
            "Job may have been manually deleted between runs", 0.60,
            ("No timeout or abandonment logged in Run A", "Clean deletion suggests manual action"),
        )
    return _explanation(diff, f"Job {job} disappeared between runs", facts, [inference])


def explain_job_added(diff, comparison):
    job = _label(diff)
    entry = diff.run_b_entry
    facts = [
        ExplanationFact(f"Job {job} not present in Run A", ABSENCE_IN_LOG, 0),
        _fact_from(f"Job {job} found in Run B{_line_text(entry)}", entry),
    ]

    run_type = comparison.run_b.metadata.run_type
    if run_type == RunType.REGEN:
        inference = ExplanationInference(
            "Job likely created by regeneration process recalculating all requirements", 0.80,
            ("Regen runs recalculate all demands from scratch", "New demand source may have been added"),
        )
    elif run_type == RunType.NET_CHANGE:
        inference = ExplanationInference(
            "Job created due to new demand added since last run", 0.85,
            ("Net Change processes only changed demands", "New sales order or forecast entry likely"),
        )
    else:
        inference = ExplanationInference(
            "Job may have been created due to new or reactivated demand", 0.70,
            ("Job appeared in second run", "Suggests demand change or part reactivation"),
        )
    return _explanation(diff, f"Job {job} appeared in Run B", facts, [inference])


def explain_date_shifted(diff, comparison):
    job = _label(diff)
    original = diff.details.get('OriginalDate', 'unknown')
    new = diff.details.get('NewDate', 'unknown')
    days = diff.details.get('DaysDifference', '?')
    facts = [
        _fact_from(f"Job {job} due date was {original} in Run A", diff.run_a_entry),
        _fact_from(f"Job {job} due date is {new} in Run B ({days} days difference)", diff.run_b_entry),
    ]

    if diff.job_number and comparison.differences_of(DifferenceType.QUANTITY_CHANGED, diff.job_number):
        inference = ExplanationInference(
            "Date shift likely caused by quantity increase and capacity constraints", 0.80,
            ("Quantity change detected for same job", "Additional capacity needed to meet higher demand"),
        )
    else:
        inference = ExplanationInference(
            "Date shift may be due to resource availability or scheduling changes", 0.65,
            ("No quantity change detected", "Suggests resource or calendar constraint"),
        )
    summary = f"Job {job} due date moved from {original} to {new}"
    return _explanation(diff, summary, facts, [inference])


def explain_quantity_changed(diff, comparison):
    job = _label(diff)
    original = diff.details.get('OriginalQuantity', '')
    new = diff.details.get('NewQuantity', '')
    facts = [
        _fact_from(f"Job {job} quantity was {original or 'unknown'} in Run A", diff.run_a_entry),
        _fact_from(f"Job {job} quantity is {new or 'unknown'} in Run B", diff.run_b_entry),
    ]

    old_value, new_value = _to_decimal(original), _to_decimal(new)
    if old_value is not None and new_value is not None and new_value > old_value:
        inference = ExplanationInference(
            "Quantity increase likely due to additional demand from sales orders or forecast", 0.80,
            ("Quantity increased between runs", "Suggests new or increased customer demand"),
        )
    else:
        inference = ExplanationInference(
            "Quantity decrease may be due to demand reduction or order cancellation", 0.75,
            ("Quantity decreased between runs", "Suggests reduced forecast or cancelled orders"),
        )
    summary = f"Job {job} quantity changed from {original or 'unknown'} to {new or 'unknown'}"
    return _explanation(diff, summary, facts, [inference])


def explain_error_appeared(diff, comparison):
    part = diff.part_number or _label(diff)
    entry_a, entry_b = diff.run_a_entry, diff.run_b_entry
    error_message = entry_b.error_message if entry_b else None

    if entry_a is not None:
        first = _fact_from(f"Part {part} processed successfully in Run A{_line_text(entry_a)}", entry_a)
    else:
        first = ExplanationFact(f"Part {part} processed successfully in Run A", NO_ERROR_IN_RUN_A, 0)
    facts = [first, _fact_from(f"Run B logged error: {error_message or 'unknown error'}", entry_b)]

    if 'timeout' in (error_message or '').lower():
        inference = ExplanationInference(
            "Timeout likely caused by network latency or database performance", 0.75,
            ("Timeout errors are often infrastructure-related", "Part processed successfully in previous run"),
        )
    else:
        inference = ExplanationInference(
            "Data or configuration change may have caused the error", 0.70,
            ("Part processed without error in Run A", "New errors usually follow a data or setup change"),
        )
    return _explanation(diff, f"New error appeared in Run B for Part {part}", facts, [inference])


def explain_error_resolved(diff, comparison):
    part = diff.part_number or _label(diff)
    entry_a, entry_b = diff.run_a_entry, diff.run_b_entry
    error_message = entry_a.error_message if entry_a else None

    if entry_b is not None:
        second = _fact_from(f"Part {part} processed successfully in Run B{_line_text(entry_b)}", entry_b)
    else:
        second = ExplanationFact(f"Part {part} processed successfully in Run B", NO_ERROR_IN_RUN_B, 0)
    facts = [_fact_from(f"Run A logged error: {error_message or 'unknown error'}", entry_a), second]

    if 'timeout' in (error_message or '').lower():
        inference = ExplanationInference(
            "Timeout resolved, likely due to improved system performance or reduced load", 0.70,
            ("Timeout errors often resolve with system improvements", "May be transient infrastructure issue"),
        )
    else:
        inference = ExplanationInference(
            "Error fixed by data correction or configuration change", 0.80,
            ("Data validation errors typically require manual fixes", "Resolution suggests deliberate correction"),
        )
    return _explanation(diff, f"Error resolved in Run B for Part {part}", facts, [inference])


def explain_other(diff, comparison):
    facts = []
    if diff.run_a_entry is not None:
        facts.append(_fact_from(f"Entry found in Run A at line {diff.run_a_entry.line_number}", diff.run_a_entry))
    if diff.run_b_entry is not None:
        facts.append(_fact_from(f"Entry found in Run B at line {diff.run_b_entry.line_number}", diff.run_b_entry))
    reason = diff.details.get('Reason')
    if reason:
        facts.append(ExplanationFact(reason, ABSENCE_IN_LOG, 0))

    inference = ExplanationInference(
        "Change detected between runs - manual review recommended", 0.50,
        ("Difference type requires additional context for detailed explanation",),
    )
    return _explanation(diff, f"Difference detected: {diff.type.value}", facts, [inference])


HANDLERS = {
    DifferenceType.JOB_REMOVED: explain_job_removed,
    DifferenceType.JOB_ADDED: explain_job_added,
    DifferenceType.DATE_SHIFTED: explain_date_shifted,
    DifferenceType.QUANTITY_CHANGED: explain_quantity_changed,
    DifferenceType.ERROR_APPEARED: explain_error_appeared,
    DifferenceType.ERROR_RESOLVED: explain_error_resolved,
    DifferenceType.OTHER: explain_other,
}


class ExplanationEngine:
    """Builds one Explanation per difference in a comparison."""

    def generate_explanations(self, comparison):
        if comparison is None:
            raise ValueError("Comparison cannot be None")
        explanations = [
            HANDLERS.get(diff.type, explain_other)(diff, comparison)
            for diff in comparison.differences
        ]
        logger.debug(f"Generated {len(explanations)} explanations")
        return explanations


explanation_engine = ExplanationEngine()
