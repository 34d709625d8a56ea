"""YAML front-matter handling for skill files.

A skill file opens with a block delimited by ``---`` lines::

    ---
    name: aiohttp
    description: async HTTP client/server framework
    version: 3.13.3
    ecosystem: python
    license: MIT
    ---

Only the first block is consumed.  Scalars are kept as the literal text that
was written, so ``version: 3.10`` stays ``"3.10"`` instead of becoming a float.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any, Optional

import yaml

from skillcorpus.utils.exceptions import FrontmatterError

DELIMITER = "---"

REQUIRED_FIELDS: tuple[str, ...] = (
    "name",
    "description",
    "version",
    "ecosystem",
    "license",
)

_RE_KEY_LINE = re.compile(r"^[A-Za-z_][\w-]*\s*:")


class _LiteralLoader(yaml.SafeLoader):
    """SafeLoader that resolves every plain scalar to ``str``."""


_LiteralLoader.yaml_implicit_resolvers = {}


@dataclass
class FrontMatterBlock:
    text: str
    start_line: int  # line of the opening delimiter (1-based)
    end_line: int  # line of the closing delimiter (1-based)


def normalize_newlines(text: str) -> str:
    text = text.lstrip("\ufeff")
    return text.replace("\r\n", "\n").replace("\r", "\n")


def split_frontmatter(text: str) -> tuple[Optional[FrontMatterBlock], str]:
    """Split *text* into its front-matter block and the remaining body.

    Returns ``(None, text)`` when the document does not open with ``---``.
    Raises :class:`FrontmatterError` when the opening delimiter is never
    closed.
    """
    text = normalize_newlines(text)
    lines = text.split("\n")
    if not lines or lines[0].strip() != DELIMITER:
        return None, text

    for idx in range(1, len(lines)):
        if lines[idx].strip() == DELIMITER:
            block = FrontMatterBlock(
                text="\n".join(lines[1:idx]),
                start_line=1,
                end_line=idx + 1,
            )
            return block, "\n".join(lines[idx + 1:])

    raise FrontmatterError("missing closing '---' delimiter", line=1)


def load_frontmatter(block: FrontMatterBlock) -> dict[str, str]:
    """Parse the YAML inside *block* into a flat ``{key: str}`` mapping."""
    try:
        data: Any = yaml.load(block.text, Loader=_LiteralLoader)
    except yaml.YAMLError as exc:
        line = None
        mark = getattr(exc, "problem_mark", None)
        if mark is not None:
            line = block.start_line + mark.line + 1
        raise FrontmatterError(f"YAML does not parse: {exc}", line=line) from exc

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise FrontmatterError(
            f"expected a mapping, got {type(data).__name__}",
            line=block.start_line,
        )

    result: dict[str, str] = {}
    for key, value in data.items():
        if value is None:
            value = ""
        elif isinstance(value, list):
            value = ", ".join(str(v) for v in value)
        elif not isinstance(value, str):
            value = str(value)
        result[str(key)] = value.strip()
    return result


def parse_frontmatter(text: str) -> dict[str, str]:
    """Return the front-matter of *text*, or an empty dict when it has none."""
    block, _ = split_frontmatter(text)
    if block is None:
        return {}
    return load_frontmatter(block)


def find_embedded_frontmatter(body: str, line_offset: int = 0) -> list[int]:
    """Line numbers of ``---`` lines in *body* that open another
    front-matter block (a document pasted in twice).

    Horizontal rules are told apart by requiring a ``name:`` key on the
    following line.
    """
    lines = body.split("\n")
    hits: list[int] = []
    in_code = False
    for idx, line in enumerate(lines):
        stripped = line.strip()
        if stripped.startswith("```"):
            in_code = not in_code
            continue
        if in_code or stripped != DELIMITER:
            continue
        nxt = lines[idx + 1].strip() if idx + 1 < len(lines) else ""
        if nxt.startswith("name:") and _RE_KEY_LINE.match(nxt):
            hits.append(line_offset + idx + 1)
    return hits
