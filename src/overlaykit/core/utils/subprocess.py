from __future__ import annotations

"""Subprocess helpers for running external build tools.

This module provides safe subprocess execution with:
- Config-driven timeout management (``timeouts.tool_seconds``)
- No shell=True (arguments are passed as an argv list)
- Process-group termination when a tool exceeds its timeout
- A small ``ToolInvoker`` seam so pipeline stages can be driven by fakes
"""

import logging
import os
import signal
import subprocess
from dataclasses import dataclass, field
from pathlib import Path
from time import perf_counter
from typing import Any, List, Optional, Protocol, Sequence, Tuple

from overlaykit.core.exceptions import ToolExecutionError, ToolNotFoundError, ToolTimeoutError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ToolResult:
    """Outcome of one external tool run."""

    exit_code: int
    stderr_lines: Tuple[str, ...] = field(default_factory=tuple)
    stdout: str = ""

    @property
    def ok(self) -> bool:
        return self.exit_code == 0


class ToolInvoker(Protocol):
    """Runs an executable with arguments and reports exit status + stderr lines."""

    def run(self, executable: str, args: Sequence[str]) -> ToolResult:
        ...


def _popen_process_group_kwargs() -> dict[str, Any]:
    if os.name == "posix":
        return {"start_new_session": True}
    if os.name == "nt":
        creationflags = getattr(subprocess, "CREATE_NEW_PROCESS_GROUP", None)
        if isinstance(creationflags, int):
            return {"creationflags": creationflags}
    return {}


def _terminate_process_group(proc: subprocess.Popen[Any]) -> None:
    if proc.poll() is not None:
        return
    if os.name == "posix":
        try:
            os.killpg(proc.pid, signal.SIGKILL)
        except OSError:
            proc.kill()
    else:
        proc.kill()
    try:
        proc.wait(timeout=1.0)
    except subprocess.TimeoutExpired:
        logger.warning("Process %s did not exit after kill", proc.pid)


def configured_timeout(cwd: Path | str | None = None) -> Optional[float]:
    """Return the configured tool timeout in seconds (None when disabled)."""
    from overlaykit.core.config.domains import TimeoutsConfig

    repo_root = Path(cwd).resolve() if cwd is not None else None
    return TimeoutsConfig(repo_root=repo_root).tool_seconds


def run_with_timeout(
    argv: Sequence[str],
    *,
    timeout: Optional[float] = None,
    cwd: Path | str | None = None,
    env: Optional[dict[str, str]] = None,
) -> subprocess.CompletedProcess:
    """Run ``argv`` capturing text stdout/stderr, killing it after ``timeout``.

    Raises:
        subprocess.TimeoutExpired: When the command exceeds ``timeout``.
        FileNotFoundError: When the executable does not exist.
        OSError: When the executable cannot be started.
    """
    argv = [str(a) for a in argv]
    start = perf_counter()
    proc = subprocess.Popen(
        argv,
        cwd=str(cwd) if cwd is not None else None,
        env=env,
        stdout=subprocess.PIPE,
        stderr=subprocess.PIPE,
        text=True,
        **_popen_process_group_kwargs(),
    )
    try:
        stdout, stderr = proc.communicate(timeout=timeout)
    except subprocess.TimeoutExpired:
        _terminate_process_group(proc)
        stdout, stderr = proc.communicate()
        raise subprocess.TimeoutExpired(argv, timeout or 0, output=stdout, stderr=stderr) from None

    logger.debug(
        "%s exited with %s in %.1f ms",
        argv[0],
        proc.returncode,
        (perf_counter() - start) * 1000.0,
    )
    return subprocess.CompletedProcess(argv, proc.returncode, stdout=stdout, stderr=stderr)


class SubprocessToolInvoker:
    """``ToolInvoker`` backed by real subprocesses.

    ``timeout`` overrides the configured ``timeouts.tool_seconds``; pass
    ``use_config_timeout=False`` to run without any timeout.
    """

    def __init__(
        self,
        timeout: Optional[float] = None,
        *,
        use_config_timeout: bool = True,
        cwd: Path | str | None = None,
    ) -> None:
        if timeout is None and use_config_timeout:
            timeout = configured_timeout(cwd)
        self.timeout = timeout
        self.cwd = cwd

    def run(self, executable: str, args: Sequence[str]) -> ToolResult:
        argv: List[str] = [str(executable), *[str(a) for a in args]]
        logger.debug("Running %s", " ".join(argv))
        try:
            completed = run_with_timeout(argv, timeout=self.timeout, cwd=self.cwd)
        except FileNotFoundError as exc:
            raise ToolNotFoundError(f"Tool not found: {executable}", argv=argv) from exc
        except subprocess.TimeoutExpired as exc:
            raise ToolTimeoutError(
                f"Tool timed out after {self.timeout}s: {executable}",
                argv=argv,
                context={"timeout": self.timeout},
            ) from exc
        except OSError as exc:
            raise ToolExecutionError(f"Tool cannot be executed: {executable}: {exc}", argv=argv) from exc

        return ToolResult(
            exit_code=completed.returncode,
            stderr_lines=tuple((completed.stderr or "").splitlines()),
            stdout=completed.stdout or "",
        )


__all__ = [
    "ToolResult",
    "ToolInvoker",
    "SubprocessToolInvoker",
    "configured_timeout",
    "run_with_timeout",
]
