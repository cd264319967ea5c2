# mrp_analysis/run_differ.py
"""
MRP Run Differ
Compares two parsed MRP runs and lists what changed between them:
jobs that came and went, jobs whose due date or quantity moved, and
part-level errors that appeared or cleared.
"""

import logging

from .models import DifferenceType, EntryType, MrpDifference, MrpLogComparison, MrpLogDocument

logger = logging.getLogger(__name__)


def format_quantity(value):
    """Render a Decimal without trailing zeros ('4.00000000' -> '4')."""
    if value is None:
        return ''
    return f"{value.normalize():f}"


def _key(value):
    return value.strip().upper() if value else None


def _group_first(entries, attr, predicate=None):
    """Map the upper-cased attribute value to the entries carrying it, first-seen order."""
    grouped = {}
    for entry in entries:
        key = _key(getattr(entry, attr))
        if key is None or (predicate and not predicate(entry)):
            continue
        grouped.setdefault(key, []).append(entry)
    return grouped


def _first_with(entries, attr):
    for entry in entries:
        if getattr(entry, attr) is not None:
            return entry
    return None


def _is_error(entry):
    return entry.entry_type == EntryType.ERROR


class MrpRunDiffer:
    """Stateless comparison of two MrpLogDocuments."""

    def compare(self, run_a, run_b):
        """
        Compare Run A (the earlier run) to Run B.

        Args:
            run_a: MrpLogDocument, or None for an empty run
            run_b: MrpLogDocument, or None for an empty run

        Returns:
            MrpLogComparison with differences in a fixed order
        """
        run_a = run_a or MrpLogDocument()
        run_b = run_b or MrpLogDocument()

        jobs_a = _group_first(run_a.entries, 'job_number')
        jobs_b = _group_first(run_b.entries, 'job_number')

        differences = []
        differences.extend(self._removed_jobs(jobs_a, jobs_b))
        differences.extend(self._added_jobs(jobs_a, jobs_b))
        differences.extend(self._changed_jobs(jobs_a, jobs_b))
        differences.extend(self._error_changes(run_a, run_b))
        differences.extend(self._unmatched_errors(run_a, run_b, jobs_a.keys() & jobs_b.keys()))

        logger.debug(
            f"Compared '{run_a.source_file or 'Run A'}' to '{run_b.source_file or 'Run B'}': "
            f"{len(differences)} differences"
        )
        return MrpLogComparison(run_a=run_a, run_b=run_b, differences=tuple(differences))

    # --- Job level ---

    @staticmethod
    def _removed_jobs(jobs_a, jobs_b):
        for key, entries in jobs_a.items():
            if key not in jobs_b:
                yield MrpDifference(
                    type=DifferenceType.JOB_REMOVED,
                    job_number=entries[0].job_number,
                    part_number=entries[0].part_number,
                    run_a_entry=entries[0],
                )

    @staticmethod
    def _added_jobs(jobs_a, jobs_b):
        for key, entries in jobs_b.items():
            if key not in jobs_a:
                yield MrpDifference(
                    type=DifferenceType.JOB_ADDED,
                    job_number=entries[0].job_number,
                    part_number=entries[0].part_number,
                    run_b_entry=entries[0],
                )

    @staticmethod
    def _changed_jobs(jobs_a, jobs_b):
        for key, entries_a in jobs_a.items():
            entries_b = jobs_b.get(key)
            if not entries_b:
                continue

            dated_a = _first_with(entries_a, 'date')
            dated_b = _first_with(entries_b, 'date')
            if dated_a and dated_b and dated_a.date != dated_b.date:
                delta = (dated_b.date - dated_a.date).days
                yield MrpDifference(
                    type=DifferenceType.DATE_SHIFTED,
                    job_number=dated_a.job_number,
                    part_number=dated_a.part_number or dated_b.part_number,
                    run_a_entry=dated_a,
                    run_b_entry=dated_b,
                    details={
                        'OriginalDate': dated_a.date.isoformat(),
                        'NewDate': dated_b.date.isoformat(),
                        'DaysDifference': str(abs(delta)),
                        'Direction': 'later' if delta > 0 else 'earlier',
                    },
                )

            qty_a = _first_with(entries_a, 'quantity')
            qty_b = _first_with(entries_b, 'quantity')
            if qty_a and qty_b and qty_a.quantity != qty_b.quantity:
                yield MrpDifference(
                    type=DifferenceType.QUANTITY_CHANGED,
                    job_number=qty_a.job_number,
                    part_number=qty_a.part_number or qty_b.part_number,
                    run_a_entry=qty_a,
                    run_b_entry=qty_b,
                    details={
                        'OriginalQuantity': format_quantity(qty_a.quantity),
                        'NewQuantity': format_quantity(qty_b.quantity),
                    },
                )

    # --- Part level errors ---

    @staticmethod
    def _error_changes(run_a, run_b):
        errors_a = _group_first(run_a.entries, 'part_number', _is_error)
        errors_b = _group_first(run_b.entries, 'part_number', _is_error)
        parts_a = _group_first(run_a.entries, 'part_number')
        parts_b = _group_first(run_b.entries, 'part_number')

        for key, entries in errors_b.items():
            if key not in errors_a:
                seen_in_a = parts_a.get(key)
                yield MrpDifference(
                    type=DifferenceType.ERROR_APPEARED,
                    job_number=entries[0].job_number,
                    part_number=entries[0].part_number,
                    run_a_entry=seen_in_a[0] if seen_in_a else None,
                    run_b_entry=entries[0],
                )

        for key, entries in errors_a.items():
            if key not in errors_b:
                seen_in_b = parts_b.get(key)
                yield MrpDifference(
                    type=DifferenceType.ERROR_RESOLVED,
                    job_number=entries[0].job_number,
                    part_number=entries[0].part_number,
                    run_a_entry=entries[0],
                    run_b_entry=seen_in_b[0] if seen_in_b else None,
                )

    @staticmethod
    def _unmatched_errors(run_a, run_b, shared_jobs):
        """
        Errors without a part number, matched on job and message text.
        Errors of a job found in only one run are left to JobRemoved/JobAdded.
        """
        def loose_errors(doc):
            found = {}
            for entry in doc.entries:
                if not _is_error(entry) or entry.part_number:
                    continue
                job = _key(entry.job_number)
                if job is not None and job not in shared_jobs:
                    continue
                found.setdefault((job, (entry.error_message or '').strip().lower()), entry)
            return found

        loose_a = loose_errors(run_a)
        loose_b = loose_errors(run_b)

        for key, entry in loose_a.items():
            if key not in loose_b:
                yield MrpDifference(
                    type=DifferenceType.OTHER,
                    job_number=entry.job_number,
                    run_a_entry=entry,
                    details={'Reason': 'Error logged only in Run A'},
                )
        for key, entry in loose_b.items():
            if key not in loose_a:
                yield MrpDifference(
                    type=DifferenceType.OTHER,
                    job_number=entry.job_number,
                    run_b_entry=entry,
                    details={'Reason': 'Error logged only in Run B'},
                )


mrp_run_differ = MrpRunDiffer()
