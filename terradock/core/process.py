"""
Subprocess execution with real-time output streaming.

Runs a command with shell=False, streams stdout line by line to a
progress callback, redacts secret values, and enforces an optional
timeout.
"""

import logging
import os
import shlex
import string
import subprocess
import threading
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Callable, List, Mapping, Optional, Sequence

from ..security.secure_memory import OutputRedactor
from ..utils import subprocess_creation_flags

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[str], None]

# Seconds between SIGTERM and SIGKILL when a command times out
KILL_GRACE_PERIOD = 10.0


@dataclass(frozen=True)
class ProcessOptions:
    """
    Launch configuration for one subprocess.

    `env` is layered over the parent environment for the child only;
    the parent's os.environ is never modified.
    """
    env: Mapping[str, str] = field(default_factory=dict)
    timeout: Optional[float] = None

    def __post_init__(self):
        object.__setattr__(self, "env", MappingProxyType(dict(self.env)))


@dataclass
class ProcessResult:
    """Result of a subprocess execution."""
    stdout: str
    stderr: str
    error: Optional[str]
    exit_code: int

    @property
    def success(self) -> bool:
        return self.error is None


def resolve_placeholders(command: Sequence[str], env: Mapping[str, str]) -> List[str]:
    """
    Substitute $NAME / ${NAME} references in each argument from `env`.

    Unknown references are left as they are. Substituted values are not
    scanned again.
    """
    return [string.Template(arg).safe_substitute(env) for arg in command]


class ProcessExecutor:
    """Executes commands and streams their output."""

    def __init__(self, redactor: Optional[OutputRedactor] = None):
        self._redactor = redactor or OutputRedactor()

    def run(
        self,
        command: Sequence[str],
        on_progress: Optional[ProgressCallback] = None,
        options: Optional[ProcessOptions] = None,
    ) -> ProcessResult:
        """
        Run a command to completion.

        Args:
            command: Argument list; placeholders are resolved from options.env
            on_progress: Called with each stdout line as it arrives
            options: Child environment and timeout

        Returns:
            ProcessResult; `error` is set on launch failure, timeout or
            non-zero exit
        """
        options = options or ProcessOptions()
        argv = resolve_placeholders(command, options.env)
        child_env = {**os.environ, **options.env}

        logger.debug(f"Executing: {self._redactor.redact(shlex.join(argv))}")

        stdout_lines: List[str] = []
        stderr_lines: List[str] = []

        try:
            process = subprocess.Popen(
                argv,
                stdout=subprocess.PIPE,
                stderr=subprocess.PIPE,
                text=True,
                encoding="utf-8",
                errors="replace",
                shell=False,
                env=child_env,
                creationflags=subprocess_creation_flags(),
            )
        except OSError as e:
            logger.error(f"Failed to start {argv[0]}: {e}")
            return ProcessResult(stdout="", stderr="", error=str(e), exit_code=-1)

        def _read_stderr():
            assert process.stderr is not None
            for line in process.stderr:
                stderr_lines.append(self._redactor.redact(line.rstrip("\n")))

        stderr_thread = threading.Thread(target=_read_stderr, daemon=True)
        stderr_thread.start()

        timer: Optional[threading.Timer] = None
        timed_out = threading.Event()
        if options.timeout:
            def _stop():
                timed_out.set()
                # docker run relays SIGTERM to the container; SIGKILL only stops the client
                process.terminate()
                try:
                    process.wait(timeout=KILL_GRACE_PERIOD)
                except subprocess.TimeoutExpired:
                    logger.warning(
                        f"Process did not exit {KILL_GRACE_PERIOD}s after SIGTERM, killing it"
                    )
                    process.kill()

            timer = threading.Timer(options.timeout, _stop)
            timer.daemon = True
            timer.start()

        try:
            assert process.stdout is not None
            for line in process.stdout:
                redacted = self._redactor.redact(line.rstrip("\n"))
                stdout_lines.append(redacted)
                if on_progress:
                    on_progress(redacted)

            stderr_thread.join()
            exit_code = process.wait()
        finally:
            if timer is not None:
                timer.cancel()

        stdout = "\n".join(stdout_lines)
        stderr = "\n".join(stderr_lines)

        if timed_out.is_set():
            error = f"Command timed out after {options.timeout}s"
        elif exit_code != 0:
            error = f"Command failed with exit code {exit_code}"
            if stderr:
                error = f"{error}: {stderr}"
        else:
            error = None

        return ProcessResult(stdout=stdout, stderr=stderr, error=error, exit_code=exit_code)
