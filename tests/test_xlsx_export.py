"""Tests for the comparison workbook export."""

import openpyxl

from mrp_analysis.models import MrpLogComparison
from utils.xlsx_export import build_comparison_workbook
from tests.helpers.sample_logs import build_sample_comparison


def test_workbook_sheets_and_rows() -> None:
    comparison, explanations = build_sample_comparison()
    wb = openpyxl.load_workbook(build_comparison_workbook(comparison, explanations))

    assert wb.sheetnames == ["Run Summary", "Differences", "Explanations"]

    summary = wb["Run Summary"]
    assert summary.max_row == 3
    assert [c.value for c in summary[2]] == [
        "Run A", "a.txt", "PLANT01", "regen", "failed",
        "2026-02-05 01:00:00", "2026-02-05 01:30:00", "error, timeout, abandoned", 9,
    ]

    differences = wb["Differences"]
    assert differences.max_row == 6
    assert differences["B2"].value == "JobRemoved"
    assert differences["F2"].value == 6
    assert differences["H4"].value.startswith("OriginalDate=2026-02-10")

    explained = wb["Explanations"]
    assert explained.max_row == 6
    assert explained["C2"].value == "Job 14568 disappeared between runs"
    assert explained["F2"].value == 0.85


def test_empty_comparison_has_only_headers() -> None:
    wb = openpyxl.load_workbook(build_comparison_workbook(MrpLogComparison(), []))
    assert wb["Differences"].max_row == 1
    assert wb["Explanations"].max_row == 1
    assert wb["Run Summary"]["A3"].value == "Run B"
