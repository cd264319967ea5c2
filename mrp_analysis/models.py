# mrp_analysis/models.py
"""
Value objects for MRP log analysis.
Parsed run metadata, log entries, run differences and the explanations
built from them. Everything here is frozen once created.
"""

from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import Optional


class RunType(str, Enum):
    REGEN = 'regen'
    NET_CHANGE = 'net change'
    UNKNOWN = 'unknown'


class RunStatus(str, Enum):
    SUCCESS = 'success'
    FAILED = 'failed'
    INCOMPLETE = 'incomplete'
    UNCERTAIN = 'uncertain'


# Order matters: flags are reported in this order
HEALTH_FLAG_KEYWORDS = ('error', 'timeout', 'abandoned', 'defunct', 'failed')

# Any of these flags marks the whole run as failed
FAILING_HEALTH_FLAGS = frozenset({'error', 'failed', 'abandoned'})


class EntryType(str, Enum):
    INFO = 'Info'
    ERROR = 'Error'
    WARNING = 'Warning'
    PROCESSING_PART = 'ProcessingPart'
    DEMAND = 'Demand'
    SUPPLY = 'Supply'
    JOB = 'Job'


class DifferenceType(str, Enum):
    JOB_REMOVED = 'JobRemoved'
    JOB_ADDED = 'JobAdded'
    DATE_SHIFTED = 'DateShifted'
    QUANTITY_CHANGED = 'QuantityChanged'
    ERROR_APPEARED = 'ErrorAppeared'
    ERROR_RESOLVED = 'ErrorResolved'
    OTHER = 'Other'


class Severity(str, Enum):
    INFO = 'Info'
    WARNING = 'Warning'
    CRITICAL = 'Critical'


DIFFERENCE_SEVERITY = {
    DifferenceType.JOB_REMOVED: Severity.WARNING,
    DifferenceType.JOB_ADDED: Severity.INFO,
    DifferenceType.DATE_SHIFTED: Severity.WARNING,
    DifferenceType.QUANTITY_CHANGED: Severity.WARNING,
    DifferenceType.ERROR_APPEARED: Severity.CRITICAL,
    DifferenceType.ERROR_RESOLVED: Severity.INFO,
    DifferenceType.OTHER: Severity.INFO,
}


def _iso(value):
    return value.isoformat() if value is not None else None


@dataclass(frozen=True)
class MrpRunMetadata:
    """Top-level facts about a single MRP run."""
    site: Optional[str] = None
    start_time: Optional[datetime] = None
    end_time: Optional[datetime] = None
    run_type: RunType = RunType.UNKNOWN
    status: RunStatus = RunStatus.UNCERTAIN
    health_flags: frozenset = frozenset()

    @property
    def duration(self):
        """Elapsed run time, or None when either end is missing."""
        if self.start_time and self.end_time:
            return self.end_time - self.start_time
        return None

    def to_dict(self):
        return {
            'site': self.site,
            'start_time': _iso(self.start_time),
            'end_time': _iso(self.end_time),
            'run_type': self.run_type.value,
            'status': self.status.value,
            # Fixed vocabulary order keeps output stable
            'health_flags': [f for f in HEALTH_FLAG_KEYWORDS if f in self.health_flags],
        }


@dataclass(frozen=True)
class MrpLogEntry:
    """One meaningful line of an MRP log."""
    line_number: int
    raw_line: str
    entry_type: EntryType = EntryType.INFO
    job_number: Optional[str] = None
    part_number: Optional[str] = None
    error_message: Optional[str] = None
    timestamp: Optional[datetime] = None
    date: Optional[date] = None
    quantity: Optional[Decimal] = None

    @property
    def is_error(self):
        return self.entry_type in (EntryType.ERROR, EntryType.WARNING)

    def to_dict(self):
        return {
            'line_number': self.line_number,
            'raw_line': self.raw_line,
            'entry_type': self.entry_type.value,
            'job_number': self.job_number,
            'part_number': self.part_number,
            'error_message': self.error_message,
            'timestamp': _iso(self.timestamp),
            'date': _iso(self.date),
            'quantity': str(self.quantity) if self.quantity is not None else None,
        }


@dataclass(frozen=True)
class MrpLogDocument:
    """Parsed log: run metadata plus entries in source line order."""
    metadata: MrpRunMetadata = field(default_factory=MrpRunMetadata)
    entries: tuple = ()
    source_file: str = ''

    def entries_for_job(self, job_number):
        key = (job_number or '').upper()
        return [e for e in self.entries if e.job_number and e.job_number.upper() == key]

    def error_entries(self):
        return [e for e in self.entries if e.is_error]

    def to_dict(self, include_entries=False):
        data = {
            'source_file': self.source_file,
            'metadata': self.metadata.to_dict(),
            'entry_count': len(self.entries),
            'job_count': len({e.job_number.upper() for e in self.entries if e.job_number}),
            'part_count': len({e.part_number.upper() for e in self.entries if e.part_number}),
            'error_count': len(self.error_entries()),
        }
        if include_entries:
            data['entries'] = [e.to_dict() for e in self.entries]
        return data


@dataclass(frozen=True)
class MrpDifference:
    """A typed discrepancy between Run A and Run B."""
    type: DifferenceType
    job_number: Optional[str] = None
    part_number: Optional[str] = None
    run_a_entry: Optional[MrpLogEntry] = None
    run_b_entry: Optional[MrpLogEntry] = None
    details: dict = field(default_factory=dict)

    def __post_init__(self):
        if self.run_a_entry is None and self.run_b_entry is None:
            raise ValueError(f"{self.type.value} difference needs at least one source entry")

    @property
    def severity(self):
        return DIFFERENCE_SEVERITY[self.type]

    def to_dict(self):
        return {
            'type': self.type.value,
            'severity': self.severity.value,
            'job_number': self.job_number,
            'part_number': self.part_number,
            'run_a_line': self.run_a_entry.line_number if self.run_a_entry else None,
            'run_b_line': self.run_b_entry.line_number if self.run_b_entry else None,
            'details': dict(self.details),
        }


@dataclass(frozen=True)
class MrpLogComparison:
    """Two runs and the differences found between them."""
    run_a: MrpLogDocument = field(default_factory=MrpLogDocument)
    run_b: MrpLogDocument = field(default_factory=MrpLogDocument)
    differences: tuple = ()

    def differences_of(self, difference_type, job_number=None):
        found = [d for d in self.differences if d.type == difference_type]
        if job_number is not None:
            key = job_number.upper()
            found = [d for d in found if d.job_number and d.job_number.upper() == key]
        return found

    @property
    def summary(self):
        """Counts per difference type and per severity."""
        by_type = {t.value: 0 for t in DifferenceType}
        by_severity = {s.value: 0 for s in Severity}
        for diff in self.differences:
            by_type[diff.type.value] += 1
            by_severity[diff.severity.value] += 1
        return {
            'total_differences': len(self.differences),
            'by_type': by_type,
            'by_severity': by_severity,
        }


@dataclass(frozen=True)
class ExplanationFact:
    """Something the log itself shows."""
    statement: str
    log_evidence: str
    line_number: int = 0

    def to_dict(self):
        return {
            'statement': self.statement,
            'log_evidence': self.log_evidence,
            'line_number': self.line_number,
        }


@dataclass(frozen=True)
class ExplanationInference:
    """A likely cause, with how sure we are and why."""
    statement: str
    confidence_level: float
    supporting_reasons: tuple = ()

    def __post_init__(self):
        if not 0.0 <= self.confidence_level <= 1.0:
            raise ValueError(f"Confidence level must be within [0.0, 1.0], got {self.confidence_level}")
        if not self.supporting_reasons or not all(r and r.strip() for r in self.supporting_reasons):
            raise ValueError("An inference needs at least one non-empty supporting reason")

    def to_dict(self):
        return {
            'statement': self.statement,
            'confidence_level': self.confidence_level,
            'supporting_reasons': list(self.supporting_reasons),
        }


@dataclass(frozen=True)
class Explanation:
    """Planner-facing explanation of one difference."""
    related_difference: MrpDifference
    summary: str
    facts: tuple
    inferences: tuple
    next_steps_in_epicor: tuple

    def __post_init__(self):
        if not self.facts:
            raise ValueError("An explanation needs at least one fact")
        if not self.inferences:
            raise ValueError("An explanation needs at least one inference")
        if not self.next_steps_in_epicor:
            raise ValueError("An explanation needs at least one next step")

    def to_dict(self):
        return {
            'difference': self.related_difference.to_dict(),
            'summary': self.summary,
            'facts': [f.to_dict() for f in self.facts],
            'inferences': [i.to_dict() for i in self.inferences],
            'next_steps_in_epicor': list(self.next_steps_in_epicor),
        }
