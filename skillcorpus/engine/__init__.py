"""Processing engine -- normalization and functional validation of skill files.

Public API::

    from skillcorpus.engine import (
        FunctionalValidator,
        extract_runnable_snippet,
        normalize_skill_md,
    )
"""

from skillcorpus.engine.normalizer import (
    ensure_frontmatter,
    ensure_references,
    normalize_skill_md,
)
from skillcorpus.engine.validator import FunctionalValidator, extract_runnable_snippet

__all__ = [
    "FunctionalValidator",
    "ensure_frontmatter",
    "ensure_references",
    "extract_runnable_snippet",
    "normalize_skill_md",
]
