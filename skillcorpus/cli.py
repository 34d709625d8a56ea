"""Command line interface for the skill corpus."""

import asyncio
import json
from pathlib import Path
from typing import List, Optional

import typer

from skillcorpus.config import get_settings
from skillcorpus.engine.normalizer import normalize_skill_md
from skillcorpus.engine.validator import FunctionalValidator
from skillcorpus.lint.linter import SkillLinter
from skillcorpus.lint.reporter import format_report, format_reports_json, format_totals
from skillcorpus.parsers.markdown_parser import SkillMarkdownParser
from skillcorpus.skills.models import LintReport, ValidationStatus
from skillcorpus.skills.registry import SkillCorpus
from skillcorpus.utils.exceptions import SkillCorpusError
from skillcorpus.utils.file_utils import SKILL_FILE_SUFFIX, read_text, skill_name_from_path
from skillcorpus.utils.logging import get_logger, setup_logging

app = typer.Typer(
    name="skillcorpus",
    help="Lint, normalize and serve library skill files",
    no_args_is_help=True,
)

logger = get_logger(__name__)


@app.callback()
def main(
    debug: bool = typer.Option(False, "--debug", help="Verbose console logging"),
):
    settings = get_settings()
    setup_logging(debug=debug or settings.debug, level=settings.cli_log_level)


def _collect_files(paths: List[Path]) -> List[Path]:
    files: List[Path] = []
    for path in paths:
        if path.is_dir():
            files.extend(sorted(path.glob(f"*{SKILL_FILE_SUFFIX}")))
        elif path.exists():
            files.append(path)
        else:
            typer.echo(f"File not found: {path}", err=True)
            raise typer.Exit(2)
    return files


# =============================================================================
# Lint
# =============================================================================


@app.command("lint")
def lint(
    paths: List[Path] = typer.Argument(..., help="Skill files or directories of skill files"),
    as_json: bool = typer.Option(False, "--json", help="Print reports as JSON"),
    strict: bool = typer.Option(False, "--strict", help="Fail on warnings too"),
):
    """Lint skill files; exit 1 when any error is found."""
    settings = get_settings()
    linter = SkillLinter(min_content_chars=settings.min_content_chars)

    files = _collect_files(paths)
    if not files:
        typer.echo("No skill files found")
        raise typer.Exit(1)

    reports: List[LintReport] = []
    for path in files:
        try:
            reports.append(linter.lint_file(path))
        except SkillCorpusError as exc:
            typer.echo(str(exc), err=True)
            raise typer.Exit(2)

    if as_json:
        typer.echo(format_reports_json(reports))
    else:
        for report in reports:
            typer.echo(format_report(report))
        if len(reports) > 1:
            typer.echo(format_totals(reports))

    failed = any(not r.passed for r in reports)
    if strict:
        failed = failed or any(r.warnings for r in reports)
    logger.info("lint_finished", files=len(reports), failed=failed)
    if failed:
        raise typer.Exit(1)


# =============================================================================
# Normalize
# =============================================================================


def _parse_urls(values: List[str]) -> List[tuple]:
    urls = []
    for value in values:
        label, sep, url = value.partition("=")
        if not sep or not label or not url:
            raise typer.BadParameter(f"expected label=url, got '{value}'", param_hint="--url")
        urls.append((label, url))
    return urls


@app.command("normalize")
def normalize(
    path: Path = typer.Argument(..., exists=True, dir_okay=False, help="Skill file"),
    version: str = typer.Option(..., "--version", help="Library version"),
    name: Optional[str] = typer.Option(None, "--name", help="Library name (default: from file name)"),
    ecosystem: str = typer.Option("python", "--ecosystem"),
    license: Optional[str] = typer.Option(None, "--license"),
    url: List[str] = typer.Option([], "--url", help="Reference link as label=url (repeatable)"),
    generated_with: Optional[str] = typer.Option(None, "--generated-with"),
    write: bool = typer.Option(False, "--write", help="Rewrite the file in place"),
):
    """Add missing front-matter and References to a skill file."""
    content = read_text(path)
    result = normalize_skill_md(
        content,
        name=name or skill_name_from_path(path),
        version=version,
        ecosystem=ecosystem,
        license=license,
        urls=_parse_urls(url),
        generated_with=generated_with,
    )

    if not write:
        typer.echo(result, nl=False)
        return

    if result == content:
        typer.echo(f"{path}: unchanged")
        return
    path.write_text(result, encoding="utf-8")
    typer.echo(f"{path}: normalized")


# =============================================================================
# Validate
# =============================================================================


@app.command("validate")
def validate(
    path: Path = typer.Argument(..., exists=True, dir_okay=False, help="Skill file"),
    ecosystem: Optional[str] = typer.Option(None, "--ecosystem", help="Override the front-matter ecosystem"),
):
    """Run the first usable example of a skill file."""
    settings = get_settings()

    async def _run():
        doc = SkillMarkdownParser().parse_file(path)
        eco = ecosystem or doc.frontmatter.get("ecosystem") or "python"
        validator = await FunctionalValidator.from_settings(settings)
        return await validator.validate(doc.raw, eco)

    try:
        result = asyncio.run(_run())
    except SkillCorpusError as exc:
        typer.echo(str(exc), err=True)
        raise typer.Exit(2)

    typer.echo(f"{result.status.value}: {path}")
    if result.output:
        typer.echo(result.output.rstrip())
    if result.status == ValidationStatus.FAIL:
        raise typer.Exit(1)


# =============================================================================
# Corpus
# =============================================================================


@app.command("list")
def list_skills(
    directory: Optional[Path] = typer.Argument(None, help="Corpus directory (default: settings)"),
    as_json: bool = typer.Option(False, "--json", help="Print as JSON"),
):
    """List the skill files in the corpus."""
    corpus = SkillCorpus()
    corpus.discover(directory or get_settings().corpus_dir)
    skills = corpus.list_all()

    if as_json:
        typer.echo(json.dumps([s.model_dump() for s in skills], indent=2))
        return

    if not skills:
        typer.echo("No skill files found")
        return
    for s in skills:
        typer.echo(f"{s.name:<20} {s.version:<12} {s.license:<12} {s.description}")


@app.command("serve")
def serve(
    host: Optional[str] = typer.Option(None, help="Bind address"),
    port: Optional[int] = typer.Option(None, help="Port"),
):
    """Serve the corpus over HTTP."""
    import uvicorn

    settings = get_settings()
    uvicorn.run(
        "skillcorpus.main:app",
        host=host or settings.host,
        port=port or settings.port,
        log_level="debug" if settings.debug else "info",
    )


if __name__ == "__main__":
    app()
