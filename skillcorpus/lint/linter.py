"""Structural linter for skill files.

Runs a battery of checks against a skill document and produces a
:class:`LintReport`.
"""

from __future__ import annotations

import ast
import re
import textwrap
from pathlib import Path
from typing import Callable, Optional

from skillcorpus.parsers.frontmatter import (
    REQUIRED_FIELDS,
    find_embedded_frontmatter,
    load_frontmatter,
    split_frontmatter,
)
from skillcorpus.parsers.markdown_parser import SkillMarkdownParser, code_line_mask
from skillcorpus.skills.models import (
    CodeBlock,
    LintIssue,
    LintReport,
    Severity,
    SkillDocument,
)
from skillcorpus.utils.exceptions import FrontmatterError
from skillcorpus.utils.file_utils import SKILL_FILE_SUFFIX, skill_filename
from skillcorpus.utils.logging import get_logger

logger = get_logger("lint.linter")

# ---------------------------------------------------------------------------
# Section conventions
# ---------------------------------------------------------------------------
SECTION_ORDER: tuple[str, ...] = (
    "Imports",
    "Core Patterns",
    "Configuration",
    "Pitfalls",
    "References",
    "Migration from v",
    "API Reference",
    "Current Library State",
)
REQUIRED_SECTIONS: tuple[str, ...] = ("Imports", "Core Patterns", "Pitfalls")

WRONG_MARKERS = ("Wrong", "❌")
RIGHT_MARKERS = ("Right", "✅")

# ---------------------------------------------------------------------------
# Thresholds
# ---------------------------------------------------------------------------
MIN_CONTENT_CHARS = 1000
REPEAT_PREFIX_CHARS = 20
REPEAT_MIN_RUN = 10
MAX_TOKEN_CHARS = 80
MAX_DOTTED_SEGMENT_CHARS = 40
MAX_LINE_CHARS = 1000

# Phrases from generation prompts that must never reach a published file.
PROMPT_LEAKS: tuple[str, ...] = (
    "CRITICAL: Include ALL",
    "CRITICAL: Prioritize PUBLIC APIs",
    "CRITICAL: Mark deprecation status",
    "CRITICAL: This section is MANDATORY",
    "do NOT skip this section",
    "REQUIRED sections:",
    "Focus on the 10-15",
    "Output as JSON",
    "Your job is to",
    "Show the standard import patterns",
    "Add 2 more pitfalls if found",
    "minimum 3, maximum 5 total",
)

_RE_DOTTED = re.compile(r"^\w+(?:\.\w+)+$")
_RE_DOCTEST = re.compile(r"^\s*(>>>|\.\.\.)( |$)")


def canonical_section(title: str) -> Optional[str]:
    """Map a heading title onto its conventional section name.

    ``"Core Patterns"`` and ``"Core Patterns (async)"`` both map to
    ``"Core Patterns"``; ``"Migration from v2.x"`` maps to
    ``"Migration from v"``.  Matching is case sensitive.
    """
    for name in SECTION_ORDER:
        if name.endswith(" v"):
            if title.startswith(name):
                return name
            continue
        if title == name:
            return name
        if title.startswith(name) and not title[len(name)].isalnum():
            return name
    return None


def check_python_syntax(source: str) -> Optional[SyntaxError]:
    """Return the ``SyntaxError`` raised by parsing *source*, or ``None``.

    Top-level ``await`` is accepted and doctest prompts are stripped, since
    both are common in illustrative snippets.  The error's ``lineno`` always
    refers to a line of *source*.
    """
    lines = source.split("\n")
    kept: Optional[list[int]] = None  # source index of each compiled line
    if any(line.lstrip().startswith(">>>") for line in lines):
        kept = [i for i, line in enumerate(lines) if _RE_DOCTEST.match(line)]
        lines = [_RE_DOCTEST.sub("", lines[i], count=1) for i in kept]
    code = textwrap.dedent("\n".join(lines))
    try:
        compile(
            code,
            "<skill>",
            "exec",
            flags=ast.PyCF_ONLY_AST | ast.PyCF_ALLOW_TOP_LEVEL_AWAIT,
            dont_inherit=True,
        )
    except SyntaxError as exc:
        if kept and exc.lineno:
            exc.lineno = kept[min(exc.lineno, len(kept)) - 1] + 1
        return exc
    except ValueError as exc:
        # source contains null bytes
        return SyntaxError(str(exc))
    return None


def _is_dotted_identifier(token: str) -> bool:
    if not _RE_DOTTED.match(token):
        return False
    return all(len(part) <= MAX_DOTTED_SEGMENT_CHARS for part in token.split("."))


class SkillLinter:
    """Stateless linter that inspects the text of a skill file.

    Checks performed:

    1. **frontmatter** -- the YAML block exists, parses and has every
       required key.
    2. **structure** -- required sections exist and known sections follow the
       conventional order.
    3. **content** -- there is code, enough text, and Pitfalls shows
       distinct Wrong/Right examples.
    4. **code** -- fences are balanced and python blocks parse.
    5. **degeneration** -- no repeated lines, gibberish tokens, leaked prompt
       text or runaway lines outside code.
    """

    def __init__(self, min_content_chars: int = MIN_CONTENT_CHARS) -> None:
        self.min_content_chars = min_content_chars
        self._parser = SkillMarkdownParser()

    def _get_checkers(self) -> list[Callable[[SkillDocument], list[LintIssue]]]:
        return [
            self.check_frontmatter,
            self.check_structure,
            self.check_content,
            self.check_code,
            self.check_degeneration,
        ]

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def lint(self, content: str, path: str = "") -> LintReport:
        """Lint the text of a skill file."""
        return self.lint_document(self._parser.parse(content, path=path))

    def lint_file(self, path: str | Path) -> LintReport:
        """Read and lint a skill file on disk."""
        return self.lint_document(self._parser.parse_file(path))

    def lint_document(self, doc: SkillDocument) -> LintReport:
        """Run every check against an already parsed document."""
        issues: list[LintIssue] = []
        for checker in self._get_checkers():
            issues.extend(checker(doc))

        report = LintReport(path=doc.path, issues=issues)
        logger.debug(
            "lint_complete",
            path=doc.path,
            errors=len(report.errors),
            warnings=len(report.warnings),
            infos=len(report.infos),
        )
        return report

    # ------------------------------------------------------------------
    # Front-matter
    # ------------------------------------------------------------------

    def check_frontmatter(self, doc: SkillDocument) -> list[LintIssue]:
        issues: list[LintIssue] = []

        try:
            block, _ = split_frontmatter(doc.raw)
        except FrontmatterError as exc:
            return [
                LintIssue(
                    severity=Severity.ERROR,
                    category="frontmatter",
                    message="Unterminated front-matter: " + exc.detail,
                    suggestion="Close the front-matter block with a '---' line",
                    line=exc.line,
                )
            ]

        if block is None:
            return [
                LintIssue(
                    severity=Severity.ERROR,
                    category="frontmatter",
                    message="Missing frontmatter (---...---)",
                    suggestion=(
                        "Add frontmatter with " + ", ".join(REQUIRED_FIELDS)
                    ),
                    line=1,
                )
            ]

        try:
            fields = load_frontmatter(block)
        except FrontmatterError as exc:
            return [
                LintIssue(
                    severity=Severity.ERROR,
                    category="frontmatter",
                    message=str(exc),
                    suggestion="Front-matter must be a YAML mapping of 'key: value' lines",
                    line=exc.line,
                )
            ]

        for field in REQUIRED_FIELDS:
            if not fields.get(field):
                issues.append(
                    LintIssue(
                        severity=Severity.ERROR,
                        category="frontmatter",
                        message=f"Missing required field: {field}",
                        suggestion=f"Add '{field}: <value>' to frontmatter",
                    )
                )

        version = fields.get("version", "")
        if version.lower() == "unknown":
            issues.append(
                LintIssue(
                    severity=Severity.WARNING,
                    category="frontmatter",
                    message="Version is 'unknown' (version extraction failed)",
                    suggestion="Set the released version of the library explicitly",
                )
            )

        ecosystem = fields.get("ecosystem", "")
        if ecosystem and ecosystem != "python":
            issues.append(
                LintIssue(
                    severity=Severity.WARNING,
                    category="frontmatter",
                    message=f"Unexpected ecosystem '{ecosystem}'",
                    suggestion="This corpus documents Python libraries: use 'ecosystem: python'",
                )
            )

        name = fields.get("name", "")
        if (
            name
            and doc.path.endswith(SKILL_FILE_SUFFIX)
            and doc.file_name_skill.lower() != name.lower()
        ):
            issues.append(
                LintIssue(
                    severity=Severity.WARNING,
                    category="frontmatter",
                    message=(
                        f"File name '{doc.file_name_skill}{SKILL_FILE_SUFFIX}' "
                        f"does not match name '{name}'"
                    ),
                    suggestion=f"Rename the file to '{skill_filename(name)}'",
                )
            )

        embedded = find_embedded_frontmatter(doc.body, line_offset=doc.body_offset)
        if embedded:
            issues.append(
                LintIssue(
                    severity=Severity.WARNING,
                    category="frontmatter",
                    message=(
                        f"Additional front-matter block found ({len(embedded)} extra); "
                        "only the first one is used"
                    ),
                    suggestion="The document was probably pasted twice; remove the duplicate",
                    line=embedded[0],
                )
            )

        return issues

    # ------------------------------------------------------------------
    # Structure
    # ------------------------------------------------------------------

    def check_structure(self, doc: SkillDocument) -> list[LintIssue]:
        issues: list[LintIssue] = []

        found: dict[str, int] = {}
        highest = -1
        highest_name = ""
        for section in doc.sections:
            name = canonical_section(section.title)
            if name is None:
                issues.append(
                    LintIssue(
                        severity=Severity.INFO,
                        category="structure",
                        message=f"Non-standard section: ## {section.title}",
                        line=section.line,
                    )
                )
                continue

            if name in found:
                issues.append(
                    LintIssue(
                        severity=Severity.WARNING,
                        category="structure",
                        message=f"Duplicate section: ## {section.title}",
                        suggestion="Merge the duplicated sections",
                        line=section.line,
                    )
                )
                continue
            found[name] = section.line

            rank = SECTION_ORDER.index(name)
            if rank < highest:
                issues.append(
                    LintIssue(
                        severity=Severity.WARNING,
                        category="structure",
                        message=(
                            f"Section '## {section.title}' should come before "
                            f"'## {highest_name}'"
                        ),
                        suggestion="Order sections as: " + ", ".join(SECTION_ORDER),
                        line=section.line,
                    )
                )
            else:
                highest = rank
                highest_name = section.title

        for required in REQUIRED_SECTIONS:
            if required not in found:
                issues.append(
                    LintIssue(
                        severity=Severity.ERROR,
                        category="structure",
                        message=f"Missing required section: ## {required}",
                        suggestion=f"Add a '## {required}' section",
                    )
                )

        return issues

    # ------------------------------------------------------------------
    # Content
    # ------------------------------------------------------------------

    def check_content(self, doc: SkillDocument) -> list[LintIssue]:
        issues: list[LintIssue] = []

        if doc.fence_count == 0:
            issues.append(
                LintIssue(
                    severity=Severity.ERROR,
                    category="content",
                    message="No code examples found",
                    suggestion="Add code examples in ```python blocks",
                )
            )

        length = len(doc.raw)
        if length < self.min_content_chars:
            issues.append(
                LintIssue(
                    severity=Severity.WARNING,
                    category="content",
                    message=f"Content is very short ({length} chars)",
                    suggestion="Consider adding more examples and explanations",
                )
            )

        pitfalls = [
            s for s in doc.sections if canonical_section(s.title) == "Pitfalls"
        ]
        if pitfalls:
            subsections = [t for s in pitfalls for t in s.subsections]
            has_wrong = any(t.startswith(WRONG_MARKERS) for t in subsections)
            has_right = any(t.startswith(RIGHT_MARKERS) for t in subsections)
            if not has_wrong or not has_right:
                issues.append(
                    LintIssue(
                        severity=Severity.INFO,
                        category="content",
                        message="Pitfalls section should include 'Wrong' and 'Right' examples",
                        suggestion="Use ### Wrong: and ### Right: subsections in Pitfalls",
                        line=pitfalls[0].line,
                    )
                )

            blocks = [b for s in pitfalls for b in s.code_blocks]
            duplicate = self._first_duplicate(blocks)
            if duplicate is not None:
                issues.append(
                    LintIssue(
                        severity=Severity.ERROR,
                        category="content",
                        message="Found identical 'Wrong' and 'Right' examples in Pitfalls section",
                        suggestion=(
                            "Wrong and Right examples must show different code: "
                            "what NOT to do versus what TO do"
                        ),
                        line=duplicate.line,
                    )
                )

        return issues

    @staticmethod
    def _first_duplicate(blocks: list[CodeBlock]) -> Optional[CodeBlock]:
        """Second block of the first consecutive pair with identical code."""
        for prev, nxt in zip(blocks, blocks[1:]):
            code = prev.content.strip()
            if code and code == nxt.content.strip():
                return nxt
        return None

    # ------------------------------------------------------------------
    # Code
    # ------------------------------------------------------------------

    def check_code(self, doc: SkillDocument) -> list[LintIssue]:
        issues: list[LintIssue] = []

        if doc.fence_count % 2 != 0:
            unclosed = next((b for b in doc.code_blocks if not b.closed), None)
            issues.append(
                LintIssue(
                    severity=Severity.ERROR,
                    category="code",
                    message=(
                        f"Unclosed code block ({doc.fence_count} fences, "
                        "expected even number)"
                    ),
                    suggestion="Output was likely truncated; close the block or regenerate it",
                    line=unclosed.line if unclosed else None,
                )
            )

        for block in doc.code_blocks:
            if not block.is_python or not block.closed:
                continue
            error = check_python_syntax(block.content)
            if error is None:
                continue
            line = block.line
            if error.lineno:
                line = block.line + error.lineno
            issues.append(
                LintIssue(
                    severity=Severity.ERROR,
                    category="code",
                    message=f"Python block does not parse: {error.msg}",
                    suggestion="Fix the snippet so that it is valid Python syntax",
                    line=line,
                )
            )

        return issues

    # ------------------------------------------------------------------
    # Degeneration
    # ------------------------------------------------------------------

    def check_degeneration(self, doc: SkillDocument) -> list[LintIssue]:
        lines = doc.raw.replace("\r\n", "\n").split("\n")
        in_code = code_line_mask(lines)

        issues: list[LintIssue] = []
        issues.extend(self._check_repeated_prefix(lines, in_code))
        issues.extend(self._check_gibberish(lines, in_code))
        issues.extend(self._check_prompt_leaks(lines, in_code))
        issues.extend(self._check_long_lines(lines, in_code))
        return issues

    @staticmethod
    def _check_repeated_prefix(lines: list[str], in_code: list[bool]) -> list[LintIssue]:
        i = 0
        while i < len(lines):
            if in_code[i] or len(lines[i]) < REPEAT_PREFIX_CHARS:
                i += 1
                continue
            prefix = lines[i][:REPEAT_PREFIX_CHARS]
            run = 1
            while (
                i + run < len(lines)
                and not in_code[i + run]
                and lines[i + run].startswith(prefix)
            ):
                run += 1
            if run >= REPEAT_MIN_RUN:
                return [
                    LintIssue(
                        severity=Severity.ERROR,
                        category="degeneration",
                        message=(
                            f"Repetitive content: {run} consecutive lines share "
                            f"prefix '{prefix}'"
                        ),
                        suggestion="Output degenerated into a repeating pattern. Regenerate this section.",
                        line=i + 1,
                    )
                ]
            i += run
        return []

    @staticmethod
    def _check_gibberish(lines: list[str], in_code: list[bool]) -> list[LintIssue]:
        for idx, line in enumerate(lines):
            if in_code[idx]:
                continue
            for word in line.split():
                token = word.strip("*`_,-")
                if len(token) <= MAX_TOKEN_CHARS:
                    continue
                if "://" in token or _is_dotted_identifier(token):
                    continue
                return [
                    LintIssue(
                        severity=Severity.ERROR,
                        category="degeneration",
                        message=(
                            f"Nonsense token detected ({len(token)} chars): "
                            f"'{token[:40]}...'"
                        ),
                        suggestion="Text contains gibberish. Regenerate this section.",
                        line=idx + 1,
                    )
                ]
        return []

    @staticmethod
    def _check_prompt_leaks(lines: list[str], in_code: list[bool]) -> list[LintIssue]:
        issues: list[LintIssue] = []
        for idx, line in enumerate(lines):
            if in_code[idx]:
                continue
            for phrase in PROMPT_LEAKS:
                if phrase in line:
                    issues.append(
                        LintIssue(
                            severity=Severity.WARNING,
                            category="degeneration",
                            message=f"Prompt instruction leak: '{phrase}'",
                            suggestion="Generation instructions leaked into the text. Remove them.",
                            line=idx + 1,
                        )
                    )
                    break
        return issues

    @staticmethod
    def _check_long_lines(lines: list[str], in_code: list[bool]) -> list[LintIssue]:
        for idx, line in enumerate(lines):
            if not in_code[idx] and len(line) > MAX_LINE_CHARS:
                return [
                    LintIssue(
                        severity=Severity.ERROR,
                        category="degeneration",
                        message=f"Excessively long line detected ({len(line)} chars)",
                        suggestion="Lines over 1000 chars outside code blocks suggest degeneration. Regenerate this section.",
                        line=idx + 1,
                    )
                ]
        return []
