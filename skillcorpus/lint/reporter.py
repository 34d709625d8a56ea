"""Human-readable and JSON renderings of lint reports."""

from __future__ import annotations

import json

from skillcorpus.skills.models import LintIssue, LintReport

_GROUPS = (
    ("errors", "Errors"),
    ("warnings", "Warnings"),
    ("infos", "Info"),
)


def _format_issue(issue: LintIssue) -> list[str]:
    where = f"line {issue.line}: " if issue.line else ""
    lines = [f"   - [{issue.category}] {where}{issue.message}"]
    if issue.suggestion:
        lines.append(f"     hint: {issue.suggestion}")
    return lines


def format_report(report: LintReport) -> str:
    """Render *report* as grouped text, errors first."""
    header = report.path or "<stdin>"
    if not report.issues:
        return f"{header}: no linting issues found"

    out = [f"{header}:"]
    for attr, title in _GROUPS:
        group: list[LintIssue] = getattr(report, attr)
        if not group:
            continue
        out.append(f"  {title} ({len(group)}):")
        for issue in group:
            out.extend(_format_issue(issue))
    out.append(f"  Summary: {report.summary()}")
    return "\n".join(out)


def format_reports_json(reports: list[LintReport]) -> str:
    payload = [
        {
            "path": r.path,
            "passed": r.passed,
            "issues": [i.model_dump(mode="json") for i in r.issues],
        }
        for r in reports
    ]
    return json.dumps(payload, indent=2, ensure_ascii=False)


def format_totals(reports: list[LintReport]) -> str:
    errors = sum(len(r.errors) for r in reports)
    warnings = sum(len(r.warnings) for r in reports)
    infos = sum(len(r.infos) for r in reports)
    failed = sum(1 for r in reports if not r.passed)
    return (
        f"{len(reports)} file(s) checked, {failed} failed: "
        f"{errors} errors, {warnings} warnings, {infos} info"
    )
