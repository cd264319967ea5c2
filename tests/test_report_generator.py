"""Tests for the Markdown comparison report."""

from datetime import datetime

import pytest

from mrp_analysis.models import MrpLogComparison
from utils.report_generator import ReportOptions, generate_markdown_report
from tests.helpers.sample_logs import build_sample_comparison


@pytest.fixture
def sample():
    return build_sample_comparison()


def test_sample_comparison_shape(sample) -> None:
    comparison, explanations = sample
    assert [d.type.value for d in comparison.differences] == [
        "JobRemoved", "JobAdded", "DateShifted", "QuantityChanged", "ErrorAppeared",
    ]
    assert len(explanations) == 5


def test_report_has_every_section(sample) -> None:
    report = generate_markdown_report(*sample, generated_at=datetime(2026, 2, 6, 8, 0, 0))
    assert report.startswith("# MRP Log Comparison Report")
    assert "**Generated:** 2026-02-06 08:00:00" in report
    for heading in (
        "## A) RUN SUMMARY",
        "## B) WHAT CHANGED",
        "## C) MOST LIKELY WHY",
        "## D) LOG EVIDENCE",
        "## E) NEXT CHECKS IN EPICOR",
    ):
        assert heading in report


def test_run_summary_details(sample) -> None:
    report = generate_markdown_report(*sample)
    assert "- **Source:** a.txt" in report
    assert "- **Site:** PLANT01" in report
    assert "- **Run Type:** regen" in report
    assert "- **Run Type:** net change" in report
    assert "- **Duration:** 30m" in report
    assert "- **Duration:** 20m" in report


def test_what_changed_counts(sample) -> None:
    report = generate_markdown_report(*sample)
    assert "**Total Differences:** 5" in report
    assert "Critical: 1" in report
    assert "Warning: 3" in report
    assert "- **DaysDifference:** 2" in report


def test_facts_inferences_and_next_steps(sample) -> None:
    report = generate_markdown_report(*sample)
    assert "**FACTS** (log-supported evidence):" in report
    assert "**INFERENCES** (plausible explanations):" in report
    assert "✅" in report
    assert "🔍" in report
    assert "(confidence 85%)" in report
    assert "1. Check Job Tracker for deletion history" in report
    assert report.count("Check Forecast Entry for demand changes") == 1


def test_log_evidence_cites_lines(sample) -> None:
    report = generate_markdown_report(*sample)
    assert "Line 6: 01:02:00 Supply: Job 14568 Date: 2/11/2026 Quantity: 20.00000000" in report


def test_options_hide_sections(sample) -> None:
    report = generate_markdown_report(*sample, ReportOptions(include_evidence=False, include_inferences=False))
    assert "## D) LOG EVIDENCE" not in report
    assert "**INFERENCES**" not in report
    assert "## E) NEXT CHECKS IN EPICOR" in report


def test_limits_are_applied(sample) -> None:
    report = generate_markdown_report(*sample, ReportOptions(max_evidence_lines=1, max_differences_to_show=2))
    assert "*...and 3 more differences*" in report
    assert "more lines*" in report


def test_empty_comparison() -> None:
    report = generate_markdown_report(MrpLogComparison(), [])
    assert "No significant differences found" in report
    assert "- **Site:** Unknown" in report
    assert "No follow-up checks needed." in report
