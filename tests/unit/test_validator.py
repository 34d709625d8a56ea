"""Tests for the functional validator."""
import sys

import pytest

from skillcorpus.config import Settings
from skillcorpus.engine.validator import (
    SUCCESS_MARKER,
    FunctionalValidator,
    extract_runnable_snippet,
)
from skillcorpus.skills.models import ValidationStatus
from skillcorpus.utils.exceptions import ValidationRunError


class TestExtractRunnableSnippet:
    def test_block_with_import(self):
        code = extract_runnable_snippet("```python\nimport os\n```\n")
        assert code == f"import os\n{SUCCESS_MARKER}"

    def test_py_fence_variant(self):
        assert extract_runnable_snippet("```py\nx = 1\ny = 2\n```\n").startswith("x = 1\ny = 2")

    def test_no_code_blocks(self):
        assert extract_runnable_snippet("# Title\n\ntext only") == ""

    def test_comments_and_blank_lines_stripped(self):
        code = extract_runnable_snippet("```python\n# comment\n\nimport os\n\nprint(os.sep)\n```\n")
        assert code == "import os\nprint(os.sep)"

    def test_single_line_without_import_skipped(self):
        text = "```python\nx = 1\n```\n\n```python\nimport json\nprint(json.dumps(1))\n```\n"
        assert extract_runnable_snippet(text) == "import json\nprint(json.dumps(1))"

    def test_comment_only_block_skipped(self):
        text = "```python\n# nothing\n```\n```python\nimport os\n```\n"
        assert extract_runnable_snippet(text).startswith("import os")

    def test_non_python_fences_ignored(self):
        text = "```bash\nimport x\nls\n```\n"
        assert extract_runnable_snippet(text) == ""

    def test_assert_keeps_code_as_is(self):
        code = extract_runnable_snippet("```python\nimport os\nassert os.sep\n```\n")
        assert SUCCESS_MARKER not in code

    def test_unclosed_block_considered(self):
        assert extract_runnable_snippet("```python\nimport os\nx = 1\n").startswith("import os")


class TestFunctionalValidator:
    @pytest.mark.asyncio
    async def test_non_python_ecosystem_skipped(self):
        result = await FunctionalValidator().validate("```js\nx\n```", "javascript")
        assert result.status == ValidationStatus.SKIPPED
        assert "javascript" in result.output

    @pytest.mark.asyncio
    async def test_no_code_skipped(self):
        result = await FunctionalValidator().validate("just text")
        assert result.status == ValidationStatus.SKIPPED

    @pytest.mark.asyncio
    async def test_local_pass(self):
        validator = FunctionalValidator(python_executable=sys.executable, timeout_s=30)
        result = await validator.validate("```python\nimport os\nx = os.sep\n```\n")
        assert result.status == ValidationStatus.PASS
        assert "Code executed successfully" in result.output
        assert result.runtime == "local"

    @pytest.mark.asyncio
    async def test_local_fail(self):
        validator = FunctionalValidator(python_executable=sys.executable, timeout_s=30)
        result = await validator.validate("```python\nimport os\nraise SystemExit('boom')\n```\n")
        assert result.status == ValidationStatus.FAIL
        assert "boom" in result.output

    @pytest.mark.asyncio
    async def test_local_missing_module_fails(self):
        validator = FunctionalValidator(python_executable=sys.executable, timeout_s=30)
        result = await validator.validate("```python\nimport no_such_module_xyz\n```\n")
        assert result.status == ValidationStatus.FAIL
        assert "ModuleNotFoundError" in result.output

    @pytest.mark.asyncio
    async def test_timeout_is_failure(self):
        validator = FunctionalValidator(python_executable=sys.executable, timeout_s=0.5)
        result = await validator.validate("```python\nimport time\ntime.sleep(10)\n```\n")
        assert result.status == ValidationStatus.FAIL
        assert "Timed out" in result.output

    @pytest.mark.asyncio
    async def test_missing_interpreter_skipped(self):
        validator = FunctionalValidator(python_executable="no-such-python-xyz")
        result = await validator.validate("```python\nimport os\n```\n")
        assert result.status == ValidationStatus.SKIPPED

    @pytest.mark.asyncio
    async def test_missing_container_runtime_raises(self):
        validator = FunctionalValidator(container_runtime="no-such-runtime-xyz")
        with pytest.raises(ValidationRunError):
            await validator.validate("```python\nimport os\n```\n")

    @pytest.mark.asyncio
    async def test_from_settings_drops_unresponsive_runtime(self):
        settings = Settings(container_runtime="no-such-runtime-xyz", python_executable=sys.executable)
        validator = await FunctionalValidator.from_settings(settings)
        assert validator.container_runtime is None
        assert validator.python_executable == sys.executable


def _fake_runtime(tmp_path, run_body):
    """A stand-in for docker/podman that records its arguments."""
    script = tmp_path / "fake-runtime"
    script.write_text(
        "#!/bin/sh\n"
        f'echo "$@" >> "{tmp_path}/calls.log"\n'
        'if [ "$1" = "kill" ]; then exit 0; fi\n'
        f"{run_body}\n",
        encoding="utf-8",
    )
    script.chmod(0o755)
    return script


def _calls(tmp_path):
    return (tmp_path / "calls.log").read_text(encoding="utf-8").splitlines()


class TestContainerRuns:
    @pytest.mark.asyncio
    async def test_container_is_named(self, tmp_path):
        runtime = _fake_runtime(tmp_path, "echo ok")
        validator = FunctionalValidator(container_runtime=str(runtime), timeout_s=10)
        result = await validator.validate("```python\nimport os\n```\n")
        assert result.status == ValidationStatus.PASS
        assert result.runtime == str(runtime)
        (run_call,) = _calls(tmp_path)
        assert run_call.startswith("run --rm --name skillcorpus-validate-")

    @pytest.mark.asyncio
    async def test_timeout_kills_container(self, tmp_path):
        runtime = _fake_runtime(tmp_path, "exec sleep 10")
        validator = FunctionalValidator(container_runtime=str(runtime), timeout_s=0.5)
        result = await validator.validate("```python\nimport os\n```\n")
        assert result.status == ValidationStatus.FAIL
        assert "Timed out" in result.output

        run_call, kill_call = _calls(tmp_path)
        name = run_call.split()[3]
        assert kill_call == f"kill {name}"
