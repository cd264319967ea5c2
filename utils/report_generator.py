# utils/report_generator.py
"""
MRP comparison report generator
Builds a Markdown report a planner can read or attach to a ticket:
run summary, what changed, most likely why, log evidence and next checks.
"""

from dataclasses import dataclass
from datetime import datetime

from mrp_analysis.models import Severity
from .helpers import calculate_duration, format_datetime, format_duration

SEVERITY_ICONS = {
    Severity.CRITICAL: '🔴',
    Severity.WARNING: '⚠️',
    Severity.INFO: 'ℹ️',
}


@dataclass(frozen=True)
class ReportOptions:
    include_evidence: bool = True
    include_inferences: bool = True
    max_evidence_lines: int = 10
    max_differences_to_show: int = 10


def _run_summary(title, document):
    meta = document.metadata
    minutes = calculate_duration(meta.start_time, meta.end_time)
    lines = [
        f"### {title}",
        f"- **Source:** {document.source_file or 'n/a'}",
        f"- **Run Type:** {meta.run_type.value}",
        f"- **Status:** {meta.status.value}",
        f"- **Site:** {meta.site or 'Unknown'}",
        f"- **Start:** {format_datetime(meta.start_time, default='n/a')}",
        f"- **End:** {format_datetime(meta.end_time, default='n/a')}",
        f"- **Duration:** {format_duration(minutes) if minutes else 'n/a'}",
        f"- **Health Flags:** {', '.join(meta.to_dict()['health_flags']) or 'none'}",
        f"- **Entries:** {len(document.entries):,}",
        "",
    ]
    return lines


def _what_changed(comparison, options):
    summary = comparison.summary
    by_severity = summary['by_severity']
    lines = [
        f"**Total Differences:** {summary['total_differences']}",
        f"- {SEVERITY_ICONS[Severity.CRITICAL]} Critical: {by_severity[Severity.CRITICAL.value]}",
        f"- {SEVERITY_ICONS[Severity.WARNING]} Warning: {by_severity[Severity.WARNING.value]}",
        f"- {SEVERITY_ICONS[Severity.INFO]} Info: {by_severity[Severity.INFO.value]}",
        "",
    ]
    if not comparison.differences:
        lines.extend(["No significant differences found between the two runs.", ""])
        return lines

    shown = comparison.differences[:options.max_differences_to_show]
    for diff in shown:
        lines.append(f"### {SEVERITY_ICONS[diff.severity]} {diff.type.value}")
        if diff.job_number:
            lines.append(f"- **Job:** {diff.job_number}")
        if diff.part_number:
            lines.append(f"- **Part:** {diff.part_number}")
        for key, value in diff.details.items():
            lines.append(f"- **{key}:** {value}")
        lines.append("")

    hidden = len(comparison.differences) - len(shown)
    if hidden > 0:
        lines.extend([f"*...and {hidden} more differences*", ""])
    return lines


def _most_likely_why(explanations, options):
    if not explanations:
        return ["Nothing to explain.", ""]
    lines = []
    for explanation in explanations[:options.max_differences_to_show]:
        lines.extend([f"### {explanation.summary}", "", "**FACTS** (log-supported evidence):"])
        for fact in explanation.facts:
            lines.append(f"- ✅ {fact.statement}")
        lines.append("")
        if options.include_inferences:
            lines.append("**INFERENCES** (plausible explanations):")
            for inference in explanation.inferences:
                lines.append(f"- 🔍 {inference.statement} (confidence {inference.confidence_level:.0%})")
                for reason in inference.supporting_reasons:
                    lines.append(f"  - {reason}")
            lines.append("")
    return lines


def _log_evidence(explanations, options):
    evidence = []
    seen = set()
    for explanation in explanations:
        for fact in explanation.facts:
            if fact.line_number <= 0 or (fact.line_number, fact.log_evidence) in seen:
                continue
            seen.add((fact.line_number, fact.log_evidence))
            evidence.append(f"Line {fact.line_number}: {fact.log_evidence.strip()}")

    if not evidence:
        return ["No log lines cited.", ""]
    lines = ["```"]
    lines.extend(evidence[:options.max_evidence_lines])
    lines.append("```")
    if len(evidence) > options.max_evidence_lines:
        lines.append(f"*...and {len(evidence) - options.max_evidence_lines} more lines*")
    lines.append("")
    return lines


def _next_checks(explanations):
    steps = []
    for explanation in explanations:
        for step in explanation.next_steps_in_epicor:
            if step not in steps:
                steps.append(step)
    if not steps:
        return ["No follow-up checks needed.", ""]
    return [f"{number}. {step}" for number, step in enumerate(steps, start=1)] + [""]


def generate_markdown_report(comparison, explanations, options=None, generated_at=None):
    """
    Render a comparison and its explanations as Markdown

    Args:
        comparison: MrpLogComparison
        explanations: list of Explanation, usually from the explanation engine
        options: ReportOptions, defaults apply when None
        generated_at: datetime stamped on the report, now when None

    Returns:
        str: the Markdown document
    """
    options = options or ReportOptions()
    generated_at = generated_at or datetime.now()
    explanations = list(explanations or [])

    lines = [
        "# MRP Log Comparison Report",
        "",
        f"**Generated:** {format_datetime(generated_at)}",
        "",
        "## A) RUN SUMMARY",
        "",
    ]
    lines.extend(_run_summary("Run A", comparison.run_a))
    lines.extend(_run_summary("Run B", comparison.run_b))

    lines.extend(["## B) WHAT CHANGED", ""])
    lines.extend(_what_changed(comparison, options))

    lines.extend(["## C) MOST LIKELY WHY", ""])
    lines.extend(_most_likely_why(explanations, options))

    if options.include_evidence:
        lines.extend(["## D) LOG EVIDENCE", ""])
        lines.extend(_log_evidence(explanations, options))

    lines.extend(["## E) NEXT CHECKS IN EPICOR", ""])
    lines.extend(_next_checks(explanations))

    return "\n".join(lines)
