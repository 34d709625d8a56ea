"""Functional validator -- runs the first usable example from a skill file.

The snippet is executed in a throwaway container when a container runtime is
available, otherwise with a local Python interpreter.  A run that exits
non-zero or exceeds the timeout is a failure; documents without runnable code
(or for other ecosystems) are skipped.
"""

from __future__ import annotations

import asyncio
import shutil
import tempfile
import uuid
from pathlib import Path
from typing import Optional

from skillcorpus.config import Settings
from skillcorpus.parsers.markdown_parser import SkillMarkdownParser
from skillcorpus.skills.models import ValidationResult, ValidationStatus
from skillcorpus.utils.exceptions import ValidationRunError
from skillcorpus.utils.logging import get_logger

logger = get_logger("engine.validator")

DEFAULT_TIMEOUT_S = 60.0
DEFAULT_IMAGE = "python:3.11-alpine"
SUCCESS_MARKER = "print('✓ Code executed successfully')"
CONTAINER_RUNTIMES = ("podman", "docker")


def extract_runnable_snippet(text: str) -> str:
    """Pick the first python block worth running and return its code.

    A block qualifies when it imports something or has at least two code
    lines; comments and blank lines are dropped.  A print marker is appended
    when the code neither asserts nor prints.  Returns ``""`` when nothing
    qualifies.
    """
    doc = SkillMarkdownParser().parse(text)
    for block in doc.code_blocks:
        if not block.is_python:
            continue
        code_lines: list[str] = []
        found_import = False
        for line in block.content.split("\n"):
            stripped = line.strip()
            if not stripped or stripped.startswith("#"):
                continue
            if stripped.startswith(("import ", "from ")):
                found_import = True
            code_lines.append(line)
        if code_lines and (found_import or len(code_lines) >= 2):
            code = "\n".join(code_lines)
            if "assert" not in code and "print" not in code:
                code = f"{code}\n{SUCCESS_MARKER}"
            return code
    return ""


def detect_container_runtime() -> str:
    """First container runtime found on ``PATH``, or ``""``."""
    for name in CONTAINER_RUNTIMES:
        if shutil.which(name):
            return name
    return ""


class FunctionalValidator:
    """Run skill-file examples and report whether they execute.

    Parameters
    ----------
    container_runtime:
        ``"docker"``/``"podman"`` to run inside a container, or ``None`` to
        use the local interpreter.
    python_executable:
        Interpreter used when no container runtime is set.
    """

    def __init__(
        self,
        container_runtime: Optional[str] = None,
        python_executable: str = "python3",
        image: str = DEFAULT_IMAGE,
        timeout_s: float = DEFAULT_TIMEOUT_S,
    ) -> None:
        self.container_runtime = container_runtime
        self.python_executable = python_executable
        self.image = image
        self.timeout_s = timeout_s

    @classmethod
    async def from_settings(cls, settings: Settings) -> "FunctionalValidator":
        """Build a validator, keeping the container runtime only if it responds."""
        runtime = settings.container_runtime or detect_container_runtime()
        if runtime and not await cls._runtime_responds(runtime):
            logger.warning("container_runtime_unavailable", runtime=runtime)
            runtime = ""
        if runtime:
            logger.info("container_validation_enabled", runtime=runtime)
        else:
            logger.warning("local_python_validation", python=settings.python_executable)
        return cls(
            container_runtime=runtime or None,
            python_executable=settings.python_executable,
            image=settings.container_image,
            timeout_s=settings.validation_timeout_s,
        )

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    async def validate(self, text: str, ecosystem: str = "python") -> ValidationResult:
        """Validate a skill file's text by running its first usable example."""
        if ecosystem.lower() != "python":
            return ValidationResult(
                status=ValidationStatus.SKIPPED,
                output=f"Validation not supported for {ecosystem}",
            )

        code = extract_runnable_snippet(text)
        if not code:
            return ValidationResult(
                status=ValidationStatus.SKIPPED,
                output="No runnable code found in skill file",
            )

        logger.debug("snippet_extracted", lines=code.count("\n") + 1)
        if self.container_runtime:
            return await self.run_in_container(code)
        return await self.run_local(code)

    async def run_in_container(self, code: str) -> ValidationResult:
        runtime = self.container_runtime or ""
        with tempfile.TemporaryDirectory() as tmp:
            Path(tmp, "snippet.py").write_text(code, encoding="utf-8")
            name = f"skillcorpus-validate-{uuid.uuid4().hex[:12]}"
            cmd = [
                runtime, "run", "--rm",
                "--name", name,
                "-v", f"{tmp}:/workspace",
                self.image,
                "python", "/workspace/snippet.py",
            ]
            try:
                return await self._run(cmd, runtime, container_name=name)
            except FileNotFoundError as exc:
                raise ValidationRunError(runtime, f"runtime not found: {exc}") from exc

    async def run_local(self, code: str) -> ValidationResult:
        if shutil.which(self.python_executable) is None:
            return ValidationResult(
                status=ValidationStatus.SKIPPED,
                output=f"{self.python_executable} not available on system",
            )
        with tempfile.TemporaryDirectory() as tmp:
            script = Path(tmp, "snippet.py")
            script.write_text(code, encoding="utf-8")
            return await self._run([self.python_executable, str(script)], "local")

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    async def _run(
        self,
        cmd: list[str],
        runtime: str,
        container_name: Optional[str] = None,
    ) -> ValidationResult:
        proc = await asyncio.create_subprocess_exec(
            *cmd,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
        )
        try:
            stdout, stderr = await asyncio.wait_for(
                proc.communicate(), timeout=self.timeout_s
            )
        except asyncio.TimeoutError:
            proc.kill()
            await proc.wait()
            if container_name:
                # killing the client leaves the container itself running
                await self._kill_container(runtime, container_name)
            logger.warning("validation_timeout", runtime=runtime, timeout_s=self.timeout_s)
            return ValidationResult(
                status=ValidationStatus.FAIL,
                output=f"Timed out after {self.timeout_s:g}s",
                runtime=runtime,
            )

        if proc.returncode == 0:
            logger.info("validation_passed", runtime=runtime)
            return ValidationResult(
                status=ValidationStatus.PASS,
                output=stdout.decode("utf-8", errors="replace"),
                runtime=runtime,
            )

        error = stderr.decode("utf-8", errors="replace")
        logger.warning("validation_failed", runtime=runtime, returncode=proc.returncode)
        return ValidationResult(
            status=ValidationStatus.FAIL,
            output=error,
            runtime=runtime,
        )

    @staticmethod
    async def _kill_container(runtime: str, name: str) -> None:
        try:
            proc = await asyncio.create_subprocess_exec(
                runtime, "kill", name,
                stdout=asyncio.subprocess.DEVNULL,
                stderr=asyncio.subprocess.DEVNULL,
            )
        except OSError:
            logger.warning("container_kill_failed", runtime=runtime, container=name)
            return
        try:
            await asyncio.wait_for(proc.wait(), timeout=10)
        except asyncio.TimeoutError:
            proc.kill()
            await proc.wait()
            logger.warning("container_kill_failed", runtime=runtime, container=name)

    @staticmethod
    async def _runtime_responds(runtime: str) -> bool:
        try:
            proc = await asyncio.create_subprocess_exec(
                runtime, "ps",
                stdout=asyncio.subprocess.DEVNULL,
                stderr=asyncio.subprocess.DEVNULL,
            )
        except OSError:
            return False
        try:
            return await asyncio.wait_for(proc.wait(), timeout=10) == 0
        except asyncio.TimeoutError:
            proc.kill()
            await proc.wait()
            return False
