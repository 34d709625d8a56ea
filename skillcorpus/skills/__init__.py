"""Skill documents -- data models shared by the parser, linter and registry.

The corpus registry lives in :mod:`skillcorpus.skills.registry`.
"""

from skillcorpus.skills.models import (
    CodeBlock,
    LintIssue,
    LintReport,
    Section,
    Severity,
    SkillDocument,
    SkillMetadata,
    ValidationResult,
    ValidationStatus,
)

__all__ = [
    "CodeBlock",
    "LintIssue",
    "LintReport",
    "Section",
    "Severity",
    "SkillDocument",
    "SkillMetadata",
    "ValidationResult",
    "ValidationStatus",
]
