"""Markdown parser: converts a skill file into a :class:`SkillDocument`.

Uses regex-based parsing (no external markdown library) to handle:
- YAML front-matter (delegated to :mod:`skillcorpus.parsers.frontmatter`)
- Level-2 headings, which open a new section
- Level-3 headings, recorded as subsections of the current section
- Fenced code blocks (```), including unterminated ones at end of file

Headings inside code fences are treated as code, not structure.
"""

from __future__ import annotations

import re
from pathlib import Path
from typing import Optional

from skillcorpus.parsers.frontmatter import (
    load_frontmatter,
    normalize_newlines,
    split_frontmatter,
)
from skillcorpus.skills.models import CodeBlock, Section, SkillDocument
from skillcorpus.utils.exceptions import FrontmatterError, SkillParseError
from skillcorpus.utils.file_utils import read_text, skill_name_from_path


# ---------------------------------------------------------------------------
# Regex patterns
# ---------------------------------------------------------------------------

_RE_HEADING = re.compile(r"^(#{1,6})\s+(.+?)(?:\s+#*)?\s*$")
_RE_CODE_FENCE = re.compile(r"^\s*```+\s*([^\s`]*)")


def is_fence(line: str) -> bool:
    return line.lstrip().startswith("```")


def fence_language(line: str) -> str:
    match = _RE_CODE_FENCE.match(line)
    return match.group(1) if match else ""


def code_line_mask(lines: list[str]) -> list[bool]:
    """Mark which lines sit inside a fenced code block (fence lines included)."""
    mask: list[bool] = []
    in_code = False
    for line in lines:
        if is_fence(line):
            mask.append(True)
            in_code = not in_code
            continue
        mask.append(in_code)
    return mask


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


class SkillMarkdownParser:
    """Parse skill-file Markdown into a :class:`SkillDocument`.

    Front-matter problems do not abort parsing: the document is returned with
    ``has_frontmatter`` set accordingly and the linter reports the details.
    """

    def parse(self, text: str, path: str = "") -> SkillDocument:
        """Parse *text* (a skill file's contents) and return a SkillDocument."""
        doc = SkillDocument(
            path=path,
            file_name_skill=skill_name_from_path(path) if path else "",
            raw=text,
        )

        try:
            block, body = split_frontmatter(text)
        except FrontmatterError:
            block, body = None, normalize_newlines(text)

        if block is not None:
            doc.has_frontmatter = True
            doc.body_offset = block.end_line
            try:
                doc.frontmatter = load_frontmatter(block)
            except FrontmatterError:
                doc.frontmatter = {}

        doc.body = body
        self._parse_body(doc, body.split("\n"))
        return doc

    def parse_file(self, path: str | Path) -> SkillDocument:
        """Read a skill file from *path* and parse it."""
        try:
            text = read_text(path)
        except OSError as exc:
            raise SkillParseError(str(path), str(exc)) from exc
        return self.parse(text, path=str(path))

    # ------------------------------------------------------------------
    # Private implementation
    # ------------------------------------------------------------------

    def _parse_body(self, doc: SkillDocument, lines: list[str]) -> None:
        """Walk body lines and fill sections and code blocks on *doc*."""
        offset = doc.body_offset

        current: Optional[Section] = None
        section_lines: list[str] = []
        in_code_block = False
        code_lang = ""
        code_start = 0
        code_lines: list[str] = []

        def _commit_section() -> None:
            nonlocal current, section_lines
            if current is not None:
                current.body = "\n".join(section_lines).strip("\n")
                doc.sections.append(current)
            current = None
            section_lines = []

        for idx, line in enumerate(lines):
            lineno = offset + idx + 1

            # ---- Code fence handling ----
            if is_fence(line):
                doc.fence_count += 1
                if in_code_block:
                    block = CodeBlock(
                        language=code_lang,
                        content="\n".join(code_lines),
                        line=code_start,
                        closed=True,
                    )
                    doc.code_blocks.append(block)
                    if current is not None:
                        current.code_blocks.append(block)
                    in_code_block = False
                    code_lines = []
                    code_lang = ""
                else:
                    in_code_block = True
                    code_lang = fence_language(line)
                    code_start = lineno
                section_lines.append(line)
                continue

            if in_code_block:
                code_lines.append(line)
                section_lines.append(line)
                continue

            # ---- Heading ----
            heading_match = _RE_HEADING.match(line)
            if heading_match:
                level = len(heading_match.group(1))
                text = heading_match.group(2).strip()
                if level == 2:
                    _commit_section()
                    current = Section(title=text, line=lineno)
                    continue
                if level == 3 and current is not None:
                    current.subsections.append(text)

            section_lines.append(line)

        # ---- End of file: keep an unterminated code block ----
        if in_code_block:
            block = CodeBlock(
                language=code_lang,
                content="\n".join(code_lines),
                line=code_start,
                closed=False,
            )
            doc.code_blocks.append(block)
            if current is not None:
                current.code_blocks.append(block)

        _commit_section()
