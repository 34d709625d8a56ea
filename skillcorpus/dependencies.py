"""FastAPI dependency functions for injection into endpoint handlers.

The corpus registry is loaded once during the app lifespan and stored on
``app.state``; the linter is stateless and shared the same way.
"""

from __future__ import annotations

from fastapi import Request

from skillcorpus.lint.linter import SkillLinter
from skillcorpus.skills.registry import SkillCorpus


def get_corpus(request: Request) -> SkillCorpus:
    """Return the corpus registry stored on ``app.state``."""
    return request.app.state.corpus


def get_linter(request: Request) -> SkillLinter:
    """Return the linter of the corpus registry."""
    return request.app.state.corpus.linter
