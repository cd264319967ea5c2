"""Sample MRP logs and small builders shared by the tests."""

from __future__ import annotations

from datetime import date, datetime, time

from mrp_analysis import explanation_engine, mrp_log_parser, mrp_run_differ
from mrp_analysis.models import EntryType, MrpLogDocument, MrpLogEntry, MrpRunMetadata, RunType

SIMPLE_REGEN_LOG = """Thursday, February 5, 2026 11:59:02
23:59:02 MRP Regeneration process begin
Site List -> MfgSys
Date: 2/5/2026
01:00:46 Building Pegging Demand Master...
01:05:07 Processing Part:ABC123, Attribute Set:''
02:30:15 MRP process complete"""

SIMPLE_NET_CHANGE_LOG = """Thursday, February 5, 2026 14:00:00
14:00:00 MRP Net Change process begin
Site List -> MfgSys
Date: 2/5/2026
14:01:00 Start Processing Part:XYZ789, Attribute Set:''
14:05:00 MRP process complete"""

LOG_WITH_ERRORS = """Thursday, February 5, 2026 01:00:00
01:00:00 MRP Regeneration process begin
Site List -> PLANT01
01:00:46 Building Pegging Demand Master...
01:05:07 Processing Part:ABC123, Attribute Set:''
01:10:23 ERROR: Job 14567 abandoned due to timeout
01:15:00 Processing continues"""

LOG_WITH_MULTIPLE_HEALTH_FLAGS = """Thursday, February 5, 2026 01:00:00
01:00:00 MRP Regeneration process begin
Site List -> PLANT01
01:00:46 Building Pegging Demand Master...
01:05:07 ERROR: Database connection failed
01:10:23 Job 14567 abandoned due to timeout
01:15:00 Part ABC123 is defunct
01:20:00 Process failed"""

INCOMPLETE_LOG = """Thursday, February 5, 2026 01:00:00
01:00:00 MRP Regeneration process begin
Site List -> PLANT01
01:00:46 Building Pegging Demand Master...
01:05:07 Processing Part:ABC123, Attribute Set:''"""

LOG_WITH_CONTEXTUAL_DATE = """System.Collections.Hashtable
==== Normal Planning Entries ====
Date: 6/15/2026
01:00:46 Building Pegging Demand Master...
01:05:07 Demand: S: 100516/1/1 Date: 6/15/2026 Quantity: 4.00000000
01:05:08 Supply: J: U0000000000273/0/0 Date: 6/15/2026 Quantity: 4.00000000"""

LOG_WITH_MULTIPLE_PARTS = """Thursday, February 5, 2026 01:00:00
01:00:00 MRP Regeneration process begin
Site List -> MfgSys
Date: 2/5/2026
01:00:46 Building Pegging Demand Master...
01:01:00 Processing Part:ABC123, Attribute Set:''
01:02:00 Processing Part:XYZ789, Attribute Set:''
01:03:00 Processing Part:DEF456, Attribute Set:''
01:30:00 MRP process complete"""


class SampleLogBuilder:
    """Fluent builder for MRP log text."""

    def __init__(self) -> None:
        self._lines: list[str] = []

    def with_header(self, when: datetime) -> "SampleLogBuilder":
        self._lines.append(f"{when:%A}, {when:%B} {when.day}, {when.year} {when:%H:%M:%S}")
        return self

    def with_line(self, line: str) -> "SampleLogBuilder":
        self._lines.append(line)
        return self

    def with_timestamped_line(self, at: time, content: str) -> "SampleLogBuilder":
        self._lines.append(f"{at:%H:%M:%S} {content}")
        return self

    def with_regen_start(self, at: time) -> "SampleLogBuilder":
        return self.with_timestamped_line(at, "MRP Regeneration process begin")

    def with_net_change_start(self, at: time) -> "SampleLogBuilder":
        return self.with_timestamped_line(at, "MRP Net Change process begin")

    def with_site(self, site: str) -> "SampleLogBuilder":
        self._lines.append(f"Site List -> {site}")
        return self

    def with_error(self, at: time, message: str) -> "SampleLogBuilder":
        return self.with_timestamped_line(at, f"ERROR: {message}")

    def with_pegging(self, at: time) -> "SampleLogBuilder":
        return self.with_timestamped_line(at, "Building Pegging Demand Master...")

    def with_processing_part(self, at: time, part: str) -> "SampleLogBuilder":
        return self.with_timestamped_line(at, f"Processing Part:{part}, Attribute Set:''")

    def with_date(self, day: date) -> "SampleLogBuilder":
        self._lines.append(f"Date: {day.month}/{day.day}/{day.year}")
        return self

    def with_supply(self, at: time, job: str, due: date, quantity: str) -> "SampleLogBuilder":
        return self.with_timestamped_line(
            at, f"Supply: Job {job} Date: {due.month}/{due.day}/{due.year} Quantity: {quantity}"
        )

    def with_completion(self, at: time) -> "SampleLogBuilder":
        return self.with_timestamped_line(at, "MRP process complete")

    def build(self) -> str:
        return "\n".join(self._lines)

    def build_lines(self) -> list[str]:
        return list(self._lines)


def make_entry(
    line_number: int = 1,
    raw_line: str = "",
    *,
    entry_type: EntryType = EntryType.INFO,
    job_number: str | None = None,
    part_number: str | None = None,
    error_message: str | None = None,
    due: date | None = None,
    quantity=None,
) -> MrpLogEntry:
    return MrpLogEntry(
        line_number=line_number,
        raw_line=raw_line or f"line {line_number}",
        entry_type=entry_type,
        job_number=job_number,
        part_number=part_number,
        error_message=error_message,
        date=due,
        quantity=quantity,
    )


def make_document(*entries: MrpLogEntry, run_type: RunType = RunType.UNKNOWN, source_file: str = "") -> MrpLogDocument:
    return MrpLogDocument(
        metadata=MrpRunMetadata(run_type=run_type),
        entries=tuple(entries),
        source_file=source_file,
    )


RUN_A_LOG = """Thursday, February 5, 2026 01:00:00
01:00:00 MRP Regeneration process begin
Site List -> PLANT01
Date: 2/5/2026
01:01:00 Supply: Job 14567 Date: 2/10/2026 Quantity: 100.00000000
01:02:00 Supply: Job 14568 Date: 2/11/2026 Quantity: 20.00000000
01:05:07 Processing Part:ABC123, Attribute Set:''
01:10:23 ERROR: Job 14568 abandoned due to timeout
01:30:00 MRP process complete"""

RUN_B_LOG = """Friday, February 6, 2026 01:00:00
01:00:00 MRP Net Change process begin
Site List -> PLANT01
Date: 2/6/2026
01:01:00 Supply: Job 14567 Date: 2/12/2026 Quantity: 150.00000000
01:03:00 Supply: Job 14570 Date: 2/14/2026 Quantity: 5.00000000
01:05:07 ERROR: Part ABC123 timeout during processing
01:20:00 MRP process complete"""


def build_sample_comparison():
    """Parse, compare and explain RUN_A_LOG against RUN_B_LOG."""
    run_a = mrp_log_parser.parse_document(RUN_A_LOG, source_file="a.txt")
    run_b = mrp_log_parser.parse_document(RUN_B_LOG, source_file="b.txt")
    comparison = mrp_run_differ.compare(run_a, run_b)
    return comparison, explanation_engine.generate_explanations(comparison)
