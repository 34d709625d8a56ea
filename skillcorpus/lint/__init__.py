"""Structural linting for skill files.

Public API::

    from skillcorpus.lint import SkillLinter, format_report
"""

from skillcorpus.lint.linter import (
    REQUIRED_SECTIONS,
    SECTION_ORDER,
    SkillLinter,
    canonical_section,
    check_python_syntax,
)
from skillcorpus.lint.reporter import format_report, format_reports_json, format_totals

__all__ = [
    "REQUIRED_SECTIONS",
    "SECTION_ORDER",
    "SkillLinter",
    "canonical_section",
    "check_python_syntax",
    "format_report",
    "format_reports_json",
    "format_totals",
]
