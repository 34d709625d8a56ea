"""Skill corpus endpoints -- list, fetch and lint skill files."""

from __future__ import annotations

from fastapi import APIRouter, Depends

from skillcorpus.api.v1.schemas.common import ErrorResponse
from skillcorpus.api.v1.schemas.skill import (
    LintRequest,
    LintResponse,
    SkillDetailResponse,
    SkillsListResponse,
)
from skillcorpus.dependencies import get_corpus, get_linter
from skillcorpus.lint.linter import SkillLinter
from skillcorpus.skills.models import LintReport
from skillcorpus.skills.registry import SkillCorpus

router = APIRouter()


def _to_response(report: LintReport) -> LintResponse:
    return LintResponse(
        path=report.path,
        passed=report.passed,
        errors=len(report.errors),
        warnings=len(report.warnings),
        infos=len(report.infos),
        issues=report.issues,
    )


@router.get(
    "/skills",
    response_model=SkillsListResponse,
    summary="List available skills",
    description="Return metadata for every skill file in the corpus.",
)
async def list_skills(
    corpus: SkillCorpus = Depends(get_corpus),
) -> SkillsListResponse:
    skills = corpus.list_all()
    return SkillsListResponse(skills=skills, total=len(skills))


@router.get(
    "/skills/{name}",
    response_model=SkillDetailResponse,
    summary="Fetch one skill file",
    responses={
        404: {"model": ErrorResponse, "description": "Skill not found"},
    },
)
async def get_skill(
    name: str,
    corpus: SkillCorpus = Depends(get_corpus),
) -> SkillDetailResponse:
    doc = corpus.get(name)
    return SkillDetailResponse(
        metadata=doc.metadata(),
        frontmatter=doc.frontmatter,
        markdown=doc.raw,
    )


@router.get(
    "/skills/{name}/lint",
    response_model=LintResponse,
    summary="Lint one skill file from the corpus",
    responses={
        404: {"model": ErrorResponse, "description": "Skill not found"},
    },
)
async def lint_skill(
    name: str,
    corpus: SkillCorpus = Depends(get_corpus),
) -> LintResponse:
    return _to_response(corpus.lint(name))


@router.post(
    "/lint",
    response_model=LintResponse,
    summary="Lint submitted skill-file content",
)
async def lint_content(
    body: LintRequest,
    linter: SkillLinter = Depends(get_linter),
) -> LintResponse:
    return _to_response(linter.lint(body.content, path=body.filename))
