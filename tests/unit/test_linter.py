"""Tests for the skill-file linter."""
import pytest

from skillcorpus.lint.linter import SkillLinter, canonical_section, check_python_syntax
from skillcorpus.skills.models import Severity


def _messages(report, category=None):
    return [
        i.message for i in report.issues if category is None or i.category == category
    ]


@pytest.fixture
def linter():
    return SkillLinter()


class TestFrontmatterChecks:
    def test_valid_skill_has_no_errors(self, linter, valid_skill):
        report = linter.lint(valid_skill)
        assert report.errors == []
        assert report.passed

    def test_missing_frontmatter(self, linter):
        report = linter.lint("# Some content\nNo frontmatter here")
        issue = next(i for i in report.issues if "Missing frontmatter" in i.message)
        assert issue.severity == Severity.ERROR
        assert issue.category == "frontmatter"

    def test_empty_content(self, linter):
        report = linter.lint("")
        assert any("Missing frontmatter" in m for m in _messages(report))

    def test_unterminated_frontmatter(self, linter):
        report = linter.lint("---\nname: x\ndescription: y\n\n## Imports\n")
        issues = report.by_category("frontmatter")
        assert len(issues) == 1
        assert issues[0].severity == Severity.ERROR
        assert "Unterminated" in issues[0].message

    def test_invalid_yaml(self, linter):
        report = linter.lint("---\nname: [oops\n---\n")
        assert any("YAML" in m for m in _messages(report, "frontmatter"))

    @pytest.mark.parametrize(
        "field", ["name", "description", "version", "ecosystem", "license"]
    )
    def test_missing_required_field(self, linter, valid_skill, field):
        text = "\n".join(
            line for line in valid_skill.split("\n") if not line.startswith(f"{field}:")
        )
        report = linter.lint(text)
        issue = next(
            i for i in report.issues if i.message == f"Missing required field: {field}"
        )
        assert issue.severity == Severity.ERROR
        assert issue.suggestion

    def test_all_fields_missing(self, linter):
        report = linter.lint("---\nfoo: bar\n---\n")
        missing = [m for m in _messages(report, "frontmatter") if "Missing required field" in m]
        assert len(missing) == 5

    def test_extra_fields_allowed(self, linter, valid_skill):
        text = valid_skill.replace("license: MIT\n", "license: MIT\ngenerated_with: gpt\nauthor: me\n")
        assert linter.lint(text).by_category("frontmatter") == []

    def test_unknown_version_warns(self, linter, valid_skill):
        report = linter.lint(valid_skill.replace("version: 1.2.0", "version: unknown"))
        issue = next(i for i in report.by_category("frontmatter") if "unknown" in i.message)
        assert issue.severity == Severity.WARNING

    def test_foreign_ecosystem_warns(self, linter, valid_skill):
        report = linter.lint(valid_skill.replace("ecosystem: python", "ecosystem: rust"))
        assert [i.severity for i in report.by_category("frontmatter")] == [Severity.WARNING]

    def test_filename_mismatch_warns(self, linter, valid_skill):
        report = linter.lint(valid_skill, path="skills/other-SKILL.md")
        assert any("does not match name 'demo'" in m for m in _messages(report))

    def test_filename_match(self, linter, valid_skill):
        report = linter.lint(valid_skill, path="skills/demo-SKILL.md")
        assert report.by_category("frontmatter") == []

    def test_duplicated_document_warns(self, linter, valid_skill):
        report = linter.lint(valid_skill + "\n" + valid_skill)
        issue = next(i for i in report.issues if "Additional front-matter" in i.message)
        assert issue.severity == Severity.WARNING
        assert issue.line is not None


class TestStructureChecks:
    def test_required_sections_missing(self, linter):
        report = linter.lint("---\nname: x\n---\n\n## Configuration\n")
        missing = [i for i in report.by_category("structure") if i.severity == Severity.ERROR]
        assert len(missing) == 3

    def test_case_sensitive(self, linter):
        report = linter.lint("## imports\n## core patterns\n## pitfalls\n")
        errors = [i for i in report.by_category("structure") if i.severity == Severity.ERROR]
        assert len(errors) == 3

    def test_heading_with_suffix_matches(self, linter):
        report = linter.lint("## Imports (sync)\n## Core Patterns: basics\n## Pitfalls\n")
        errors = [i for i in report.by_category("structure") if i.severity == Severity.ERROR]
        assert errors == []

    def test_out_of_order_warns(self, linter):
        report = linter.lint("## Imports\n## Pitfalls\n## Core Patterns\n")
        issue = next(i for i in report.by_category("structure") if "should come before" in i.message)
        assert issue.severity == Severity.WARNING
        assert "Core Patterns" in issue.message

    def test_duplicate_section_warns(self, linter):
        report = linter.lint("## Imports\n## Core Patterns\n## Core Patterns\n## Pitfalls\n")
        assert any("Duplicate section" in m for m in _messages(report, "structure"))

    def test_unknown_section_is_info(self, linter):
        report = linter.lint("## Imports\n## Core Patterns\n## Pitfalls\n## Trivia\n")
        issue = next(i for i in report.by_category("structure") if "Trivia" in i.message)
        assert issue.severity == Severity.INFO

    def test_migration_section_recognised(self, linter):
        report = linter.lint(
            "## Imports\n## Core Patterns\n## Pitfalls\n## Migration from v1.x\n## API Reference\n"
        )
        assert report.by_category("structure") == []


class TestContentChecks:
    def test_no_code_blocks(self, linter):
        report = linter.lint("## Imports\nimport x\n")
        issue = next(i for i in report.issues if i.message == "No code examples found")
        assert issue.severity == Severity.ERROR
        assert issue.category == "content"

    def test_short_content_reports_length(self, linter):
        text = "## Imports\n```python\nimport x\n```\n"
        report = linter.lint(text)
        issue = next(i for i in report.issues if "very short" in i.message)
        assert issue.severity == Severity.WARNING
        assert f"({len(text)} chars)" in issue.message

    def test_long_content_no_warning(self, linter, valid_skill):
        assert not any("very short" in m for m in _messages(linter.lint(valid_skill)))

    def test_min_content_configurable(self, valid_skill):
        report = SkillLinter(min_content_chars=5000).lint(valid_skill)
        assert any("very short" in m for m in _messages(report))

    def test_pitfalls_without_markers_is_info(self, linter):
        report = linter.lint("## Pitfalls\n\n### Something\n\ntext\n")
        issue = next(i for i in report.issues if "'Wrong' and 'Right'" in i.message)
        assert issue.severity == Severity.INFO

    def test_emoji_markers_accepted(self, linter):
        report = linter.lint("## Pitfalls\n\n### ❌ bad\n\n### ✅ good\n")
        assert not any("'Wrong' and 'Right'" in m for m in _messages(report))

    def test_no_pitfalls_section_no_marker_info(self, linter):
        report = linter.lint("## Imports\n")
        assert not any("'Wrong' and 'Right'" in m for m in _messages(report))

    def test_identical_wrong_right_examples(self, linter):
        text = (
            "## Pitfalls\n\n### Wrong: x\n\n```python\nfoo()\n```\n\n"
            "### Right: x\n\n```python\nfoo()\n```\n"
        )
        report = linter.lint(text)
        dupes = [i for i in report.issues if "identical" in i.message]
        assert len(dupes) == 1
        assert dupes[0].severity == Severity.ERROR

    def test_duplicate_outside_pitfalls_ignored(self, linter):
        text = "## Core Patterns\n```python\nfoo()\n```\n```python\nfoo()\n```\n## Pitfalls\n"
        assert not any("identical" in m for m in _messages(linter.lint(text)))


class TestCodeChecks:
    def test_unclosed_fence(self, linter):
        report = linter.lint("## Imports\n```python\nimport x\n```\n\n```python\nbroken(\n")
        issue = next(i for i in report.by_category("code") if "Unclosed" in i.message)
        assert issue.severity == Severity.ERROR
        assert "3 fences" in issue.message
        assert issue.line == 6

    def test_python_syntax_error(self, linter):
        report = linter.lint("## Imports\n\n```python\nimport x\ndef f(:\n    pass\n```\n")
        issue = next(i for i in report.by_category("code") if "does not parse" in i.message)
        assert issue.severity == Severity.ERROR
        assert issue.line == 5

    def test_doctest_error_line(self, linter):
        text = (
            "## Imports\n\n```python\n"
            ">>> import os\n>>> x = 1\n1\n>>> y = (\n"
            "```\n"
        )
        report = linter.lint(text)
        issue = next(i for i in report.by_category("code") if "does not parse" in i.message)
        assert issue.line == 7

    def test_non_python_blocks_not_parsed(self, linter):
        report = linter.lint("## Imports\n```bash\npip install x[extra] && $(oops\n```\n")
        assert report.by_category("code") == []

    def test_py_label_parsed(self, linter):
        report = linter.lint("```py\nif True\n```\n")
        assert any("does not parse" in m for m in _messages(report, "code"))


class TestPythonSyntax:
    def test_valid(self):
        assert check_python_syntax("import os\nprint(os.getcwd())") is None

    def test_top_level_await(self):
        assert check_python_syntax("resp = await client.get(url)") is None

    def test_top_level_async_with(self):
        assert check_python_syntax("async with session.get(url) as r:\n    pass") is None

    def test_doctest_prompts(self):
        source = ">>> x = [1, 2]\n>>> for i in x:\n...     print(i)\n1\n2"
        assert check_python_syntax(source) is None

    def test_indented_snippet(self):
        assert check_python_syntax("    x = 1\n    y = 2") is None

    def test_doctest_lineno_refers_to_source(self):
        error = check_python_syntax(">>> a = 1\n1\n>>> b = 2\n2\n>>> c = = 3")
        assert error is not None
        assert error.lineno == 5

    def test_invalid(self):
        error = check_python_syntax("x = = 1")
        assert isinstance(error, SyntaxError)


class TestDegenerationChecks:
    def test_repeated_prefix(self, linter):
        text = "\n".join(f"The same repeated line prefix number {n}" for n in range(12))
        report = linter.lint(text)
        issue = next(i for i in report.by_category("degeneration") if "Repetitive" in i.message)
        assert issue.severity == Severity.ERROR
        assert "12 consecutive lines" in issue.message

    def test_repeated_lines_in_code_ignored(self, linter):
        body = "\n".join("print('the same statement again')" for _ in range(12))
        report = linter.lint(f"```python\n{body}\n```\n")
        assert report.by_category("degeneration") == []

    def test_gibberish_token(self, linter):
        report = linter.lint("word " + "x" * 90)
        issue = next(i for i in report.by_category("degeneration") if "Nonsense" in i.message)
        assert "(90 chars)" in issue.message

    def test_dotted_identifier_allowed(self, linter):
        token = "cryptography.hazmat.primitives.twofactor.hotp.HOTP.generate.verification.module.extra"
        assert len(token) > 80
        report = linter.lint(f"Use {token} here")
        assert report.by_category("degeneration") == []

    def test_url_allowed(self, linter):
        url = "https://example.org/" + "a" * 90
        assert linter.lint(f"- [link]({url})").by_category("degeneration") == []

    def test_prompt_leak(self, linter):
        report = linter.lint("Your job is to write docs\n")
        issue = next(i for i in report.by_category("degeneration") if "leak" in i.message)
        assert issue.severity == Severity.WARNING

    def test_prompt_leak_inside_code_ignored(self, linter):
        report = linter.lint("```\nYour job is to write docs\n```\n")
        assert report.by_category("degeneration") == []

    def test_long_line(self, linter):
        report = linter.lint(" ".join(["word"] * 300))
        assert any("Excessively long line" in m for m in _messages(report, "degeneration"))


class TestCanonicalSection:
    @pytest.mark.parametrize(
        "title, expected",
        [
            ("Imports", "Imports"),
            ("Core Patterns (async)", "Core Patterns"),
            ("Migration from v2.x", "Migration from v"),
            ("API Reference", "API Reference"),
            ("Importsx", None),
            ("Examples", None),
        ],
    )
    def test_mapping(self, title, expected):
        assert canonical_section(title) == expected


def test_lint_file_records_path(skill_dir):
    report = SkillLinter().lint_file(skill_dir / "demo-SKILL.md")
    assert report.path.endswith("demo-SKILL.md")
    assert report.passed
