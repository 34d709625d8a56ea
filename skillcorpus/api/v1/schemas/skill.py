"""Request/response schemas for the skill corpus endpoints."""

from pydantic import BaseModel

from skillcorpus.skills.models import LintIssue, SkillMetadata


class SkillsListResponse(BaseModel):
    """Response listing every skill in the corpus."""

    skills: list[SkillMetadata]
    total: int


class SkillDetailResponse(BaseModel):
    """A single skill: its metadata, front-matter and raw Markdown."""

    metadata: SkillMetadata
    frontmatter: dict[str, str]
    markdown: str


class LintRequest(BaseModel):
    """Skill-file content submitted for linting."""

    content: str
    filename: str = ""


class LintResponse(BaseModel):
    path: str = ""
    passed: bool
    errors: int
    warnings: int
    infos: int
    issues: list[LintIssue]
