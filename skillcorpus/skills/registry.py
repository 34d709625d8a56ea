"""Central registry that discovers, stores, and looks up skill files."""

from __future__ import annotations

from pathlib import Path

from skillcorpus.lint.linter import SkillLinter
from skillcorpus.parsers.markdown_parser import SkillMarkdownParser
from skillcorpus.skills.models import LintReport, SkillDocument, SkillMetadata
from skillcorpus.utils.exceptions import SkillNotFoundError, SkillParseError
from skillcorpus.utils.file_utils import SKILL_FILE_SUFFIX
from skillcorpus.utils.logging import get_logger

logger = get_logger(__name__)


def load_skills_from_directory(
    directory: str | Path,
    parser: SkillMarkdownParser | None = None,
) -> list[SkillDocument]:
    """Parse every ``*-SKILL.md`` file in *directory*.

    Non-existent directories yield an empty list; files that cannot be read
    are logged and skipped.
    """
    directory = Path(directory)
    parser = parser or SkillMarkdownParser()

    if not directory.exists():
        logger.warning("corpus_directory_missing", path=str(directory))
        return []

    if not directory.is_dir():
        logger.warning("corpus_path_not_directory", path=str(directory))
        return []

    documents: list[SkillDocument] = []
    for filepath in sorted(directory.glob(f"*{SKILL_FILE_SUFFIX}")):
        try:
            documents.append(parser.parse_file(filepath))
        except SkillParseError:
            logger.exception("skill_file_load_error", path=str(filepath))
    return documents


class SkillCorpus:
    """Registry of the skill files making up the corpus.

    Typical lifecycle::

        corpus = SkillCorpus()
        corpus.discover("./skills")
        doc = corpus.get("aiohttp")
        reports = corpus.lint_all()
    """

    def __init__(self, linter: SkillLinter | None = None) -> None:
        self._skills: dict[str, SkillDocument] = {}
        self.linter = linter or SkillLinter()

    # ------------------------------------------------------------------
    # Discovery
    # ------------------------------------------------------------------

    def discover(self, *directories: str | Path) -> int:
        """Load skill files from each directory and register them.

        Returns the number of newly registered documents.
        """
        count = 0
        for directory in directories:
            for doc in load_skills_from_directory(directory):
                self.register(doc)
                count += 1

        logger.info("skills_discovered", count=count)
        return count

    # ------------------------------------------------------------------
    # Registration & lookup
    # ------------------------------------------------------------------

    def register(self, doc: SkillDocument) -> None:
        """Add *doc* keyed by its name.

        A document with the same name replaces the earlier one, so later
        directories override earlier ones.
        """
        name = doc.name
        if name in self._skills:
            logger.warning(
                "skill_overwritten",
                skill_name=name,
                old_path=self._skills[name].path,
                new_path=doc.path,
            )
        self._skills[name] = doc
        logger.debug("skill_registered", skill_name=name)

    def get(self, name: str) -> SkillDocument:
        """Return the document registered under *name*.

        Raises :class:`SkillNotFoundError` if no such skill exists.
        """
        doc = self._skills.get(name)
        if doc is None:
            raise SkillNotFoundError(name)
        return doc

    # ------------------------------------------------------------------
    # Introspection
    # ------------------------------------------------------------------

    def list_all(self) -> list[SkillMetadata]:
        """Return metadata for every registered skill, sorted by name."""
        return [self._skills[n].metadata() for n in sorted(self._skills)]

    def lint(self, name: str) -> LintReport:
        return self.linter.lint_document(self.get(name))

    def lint_all(self) -> list[LintReport]:
        return [self.linter.lint_document(self._skills[n]) for n in sorted(self._skills)]

    def __len__(self) -> int:
        return len(self._skills)

    def __contains__(self, name: str) -> bool:
        return name in self._skills
