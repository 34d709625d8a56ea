"""Lightweight post-processing that guarantees the critical parts of a skill file.

Only what is consistently missing gets fixed: the front-matter block and the
References section.  Everything else is left untouched.
"""

from __future__ import annotations

from typing import Optional, Sequence

from skillcorpus.parsers.frontmatter import (
    DELIMITER,
    load_frontmatter,
    normalize_newlines,
    split_frontmatter,
)
from skillcorpus.utils.exceptions import FrontmatterError
from skillcorpus.utils.logging import get_logger

logger = get_logger("engine.normalizer")

# Keys without which an existing block is thrown away and rebuilt.
_REBUILD_KEYS = ("name", "description", "version", "ecosystem")
_SKILL_HEADER = "# SKILL.md"


def create_frontmatter(
    name: str,
    version: str,
    ecosystem: str = "python",
    license: Optional[str] = None,
    generated_with: Optional[str] = None,
) -> str:
    license_field = f"license: {license}" if license else "# license: Unknown"
    lines = [
        DELIMITER,
        f"name: {name}",
        f"description: {ecosystem} library",
        f"version: {version}",
        f"ecosystem: {ecosystem}",
        license_field,
    ]
    if generated_with:
        lines.append(f"generated_with: {generated_with}")
    lines.append(DELIMITER)
    return "\n".join(lines) + "\n\n"


def ensure_frontmatter(
    content: str,
    name: str,
    version: str,
    ecosystem: str = "python",
    license: Optional[str] = None,
    generated_with: Optional[str] = None,
) -> str:
    """Return *content* with a usable front-matter block.

    - no block: a ``# SKILL.md`` title is dropped and a new block prepended;
    - a block missing one of name/description/version/ecosystem (or one
      that does not parse): it is replaced;
    - a complete block: ``generated_with`` is added when given and absent,
      otherwise the content is returned unchanged.
    """
    text = normalize_newlines(content)
    stripped = text.lstrip()

    try:
        block, body = split_frontmatter(stripped)
    except FrontmatterError:
        block, body = None, stripped

    if block is not None:
        try:
            fields = load_frontmatter(block)
        except FrontmatterError:
            fields = {}

        if all(fields.get(key) for key in _REBUILD_KEYS):
            if generated_with and "generated_with" not in fields:
                logger.info("frontmatter_generated_with_added", name=name)
                inner = block.text.rstrip()
                return (
                    f"{DELIMITER}\n{inner}\ngenerated_with: {generated_with}\n"
                    f"{DELIMITER}\n{body}"
                )
            return content

        logger.warning(
            "frontmatter_replaced",
            name=name,
            missing=[k for k in _REBUILD_KEYS if not fields.get(k)],
        )
        return (
            create_frontmatter(name, version, ecosystem, license, generated_with)
            + body.lstrip()
        )

    logger.warning("frontmatter_added", name=name)
    if stripped.startswith(_SKILL_HEADER):
        stripped = stripped[len(_SKILL_HEADER):].lstrip()
    return create_frontmatter(name, version, ecosystem, license, generated_with) + stripped


def ensure_references(content: str, urls: Sequence[tuple[str, str]]) -> str:
    """Append a ``## References`` section built from *urls* if none exists."""
    if not urls:
        return content
    if "## References" in content:
        return content

    logger.warning("references_added", count=len(urls))
    refs = ["", "## References", ""]
    refs.extend(f"- [{label}]({url})" for label, url in urls)
    return content.rstrip("\n") + "\n" + "\n".join(refs) + "\n"


def normalize_skill_md(
    content: str,
    name: str,
    version: str,
    ecosystem: str = "python",
    license: Optional[str] = None,
    urls: Sequence[tuple[str, str]] = (),
    generated_with: Optional[str] = None,
) -> str:
    """Apply every normalization step to *content*."""
    normalized = ensure_frontmatter(
        content, name, version, ecosystem, license, generated_with
    )
    return ensure_references(normalized, urls)
