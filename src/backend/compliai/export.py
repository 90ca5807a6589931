from datetime import date, datetime
from typing import Sequence

from .models import SEVERITY_ORDER, ComplianceReport, Issue
from .prompts import regulation_list
from .regulations import RegulationId

REPORT_TITLE = "CompliAI Compliance Report"
PASSING_SCORE = 70


def score_band(score: int) -> str:
    if score >= 90:
        return "good"
    if score >= PASSING_SCORE:
        return "fair"
    return "poor"


def is_passing(score: int) -> bool:
    return score >= PASSING_SCORE


def issues_by_severity(report: ComplianceReport) -> dict[str, list[Issue]]:
    """Group issues high -> medium -> low, keeping backend order inside each group."""
    groups: dict[str, list[Issue]] = {s: [] for s in SEVERITY_ORDER}
    for issue in report.issues:
        groups[issue.severity].append(issue)
    return groups


def _format_timestamp(ts: str) -> str:
    try:
        return datetime.fromisoformat(ts).strftime("%Y-%m-%d %H:%M:%S %Z").strip()
    except ValueError:
        return ts


def render_report_text(report: ComplianceReport, regulations: Sequence[RegulationId]) -> str:
    issues = "\n".join(
        f"Severity: {i.severity.upper()}\n"
        f"Description: {i.description}\n"
        f"Recommendation: {i.recommendation}\n"
        for i in report.issues
    ) or "No issues found.\n"

    return (
        f"{REPORT_TITLE}\n"
        f"Generated: {_format_timestamp(report.timestamp)}\n"
        f"Compliance Score: {report.score}%\n"
        f"\n"
        f"Summary:\n"
        f"{report.summary}\n"
        f"\n"
        f"Issues Found ({len(report.issues)}):\n"
        f"\n"
        f"{issues}"
        f"\n"
        f"Regulations Checked:\n"
        f"{regulation_list(regulations)}\n"
    )


def report_filename(day: date | None = None) -> str:
    day = day or date.today()
    return f"compliance-report-{day.isoformat()}.txt"
