"""Parsers that turn skill files into :class:`SkillDocument` objects.

- ``frontmatter``: the leading YAML block
- ``markdown_parser``: sections and fenced code blocks
"""

from skillcorpus.parsers.frontmatter import (
    REQUIRED_FIELDS,
    parse_frontmatter,
    split_frontmatter,
)
from skillcorpus.parsers.markdown_parser import SkillMarkdownParser

__all__ = [
    "REQUIRED_FIELDS",
    "SkillMarkdownParser",
    "parse_frontmatter",
    "split_frontmatter",
]
