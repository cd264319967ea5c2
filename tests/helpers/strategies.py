from __future__ import annotations

from datetime import date
from decimal import Decimal

from hypothesis import strategies as st

from mrp_analysis.models import EntryType, MrpLogDocument, MrpLogEntry, MrpRunMetadata, RunType

LOG_FRAGMENTS = (
    "Thursday, February 5, 2026 01:00:00",
    "Friday, February 6, 2026 23:59:59",
    "Date: 2/5/2026",
    "Date: 13/45/2026",
    "Site List -> MfgSys",
    "Site: PLANT01",
    "01:00:00 MRP Regeneration process begin",
    "01:00:00 MRP Net Change process begin",
    "01:00:46 Building Pegging Demand Master...",
    "01:05:07 Processing Part:ABC123, Attribute Set:''",
    "01:05:08 Supply: J: U0000000000273/0/0 Date: 6/15/2026 Quantity: 4.00000000",
    "01:05:09 Demand: S: 100516/1/1 Date: 6/15/2026 Quantity: 4.00000000",
    "01:10:23 ERROR: Job 14567 abandoned due to timeout",
    "01:15:00 Part ABC123 is defunct",
    "01:20:00 Process failed",
    "25:61:61 Broken clock",
    "Start Time: 2024-02-01 02:00 UTC",
    "End Time: 2024-02-01 03:10 UTC",
    "02:30:15 MRP process complete",
    "# comment",
    "",
)


def log_lines_strategy(max_size: int = 30) -> st.SearchStrategy[list[str]]:
    return st.lists(
        st.one_of(st.sampled_from(LOG_FRAGMENTS), st.text(max_size=60)),
        max_size=max_size,
    )


def _entry_strategy(line_number: int) -> st.SearchStrategy[MrpLogEntry]:
    return st.builds(
        MrpLogEntry,
        line_number=st.just(line_number),
        raw_line=st.just(f"raw line {line_number}"),
        entry_type=st.sampled_from(list(EntryType)),
        job_number=st.one_of(st.none(), st.sampled_from(["1001", "1002", "u1003", "U1003"])),
        part_number=st.one_of(st.none(), st.sampled_from(["ABC123", "XYZ789"])),
        error_message=st.one_of(
            st.none(), st.sampled_from(["timeout", "Job abandoned", "bad BOM", "Scheduler exception"])
        ),
        date=st.one_of(st.none(), st.dates(min_value=date(2026, 1, 1), max_value=date(2026, 12, 31))),
        quantity=st.one_of(st.none(), st.integers(min_value=0, max_value=500).map(Decimal)),
    )


@st.composite
def document_strategy(draw, max_entries: int = 8) -> MrpLogDocument:
    count = draw(st.integers(min_value=0, max_value=max_entries))
    entries = tuple(draw(_entry_strategy(n)) for n in range(1, count + 1))
    run_type = draw(st.sampled_from(list(RunType)))
    return MrpLogDocument(metadata=MrpRunMetadata(run_type=run_type), entries=entries)
