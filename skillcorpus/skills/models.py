"""Data models for skill documents and their lint/validation results."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel


class Severity(str, Enum):
    ERROR = "error"  # must fix
    WARNING = "warning"  # should fix
    INFO = "info"  # nice to have


class CodeBlock(BaseModel):
    """A fenced code block found in a skill document."""

    language: str = ""
    content: str = ""
    line: int = 0  # 1-based line of the opening fence
    closed: bool = True

    @property
    def is_python(self) -> bool:
        return self.language.lower() in ("python", "py", "python3")


class Section(BaseModel):
    """A level-2 section (``## Title``) and everything up to the next one."""

    title: str
    line: int = 0
    body: str = ""
    subsections: list[str] = []
    code_blocks: list[CodeBlock] = []


class SkillMetadata(BaseModel):
    """Front-matter of a skill file plus a few derived facts."""

    name: str
    description: str = ""
    version: str = ""
    ecosystem: str = ""
    license: str = ""
    generated_with: str = ""
    path: str = ""
    sections: list[str] = []


class SkillDocument(BaseModel):
    """A parsed skill file."""

    path: str = ""
    file_name_skill: str = ""  # library name derived from ``<name>-SKILL.md``
    raw: str = ""
    frontmatter: dict[str, str] = {}
    has_frontmatter: bool = False
    body: str = ""
    body_offset: int = 0  # number of lines consumed by the front-matter block
    sections: list[Section] = []
    code_blocks: list[CodeBlock] = []
    fence_count: int = 0

    @property
    def name(self) -> str:
        return self.frontmatter.get("name") or self.file_name_skill

    @property
    def section_titles(self) -> list[str]:
        return [s.title for s in self.sections]

    def section(self, title: str) -> Section | None:
        for s in self.sections:
            if s.title == title:
                return s
        return None

    def metadata(self) -> SkillMetadata:
        fm = self.frontmatter
        return SkillMetadata(
            name=self.name,
            description=fm.get("description", ""),
            version=fm.get("version", ""),
            ecosystem=fm.get("ecosystem", ""),
            license=fm.get("license", ""),
            generated_with=fm.get("generated_with", ""),
            path=self.path,
            sections=self.section_titles,
        )


class LintIssue(BaseModel):
    """A single finding reported by the linter."""

    severity: Severity
    category: str
    message: str
    suggestion: str = ""
    line: int | None = None


class LintReport(BaseModel):
    """All findings for one skill document."""

    path: str = ""
    issues: list[LintIssue] = []

    @property
    def errors(self) -> list[LintIssue]:
        return [i for i in self.issues if i.severity == Severity.ERROR]

    @property
    def warnings(self) -> list[LintIssue]:
        return [i for i in self.issues if i.severity == Severity.WARNING]

    @property
    def infos(self) -> list[LintIssue]:
        return [i for i in self.issues if i.severity == Severity.INFO]

    @property
    def passed(self) -> bool:
        return not self.errors

    def by_category(self, category: str) -> list[LintIssue]:
        return [i for i in self.issues if i.category == category]

    def summary(self) -> str:
        return (
            f"{len(self.errors)} errors, {len(self.warnings)} warnings, "
            f"{len(self.infos)} info"
        )


class ValidationStatus(str, Enum):
    PASS = "pass"
    FAIL = "fail"
    SKIPPED = "skipped"


class ValidationResult(BaseModel):
    """Outcome of running a skill's example code."""

    status: ValidationStatus
    output: str = ""
    runtime: str = ""
