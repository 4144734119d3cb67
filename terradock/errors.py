"""
Error kinds raised while running Terraform in a container.

Every failure that terminates an invocation derives from TerradockError
so callers (and the CLI) can catch a single type.
"""

from typing import Optional


class TerradockError(Exception):
    """Base class for all terradock failures."""
    pass


class ConfigurationError(TerradockError):
    """Raised when inputs are invalid before anything is launched."""
    pass


class VarFileWriteError(TerradockError):
    """Raised when the temporary variable file cannot be written."""
    pass


class ExecutionError(TerradockError):
    """Raised when the containerized command fails."""

    def __init__(self, message: str, stdout: str = "", stderr: str = "",
                 exit_code: Optional[int] = None):
        super().__init__(message)
        self.stdout = stdout
        self.stderr = stderr
        self.exit_code = exit_code


class CommandStderrError(ExecutionError):
    """Raised when the command wrote only to stderr and produced no result."""
    pass


class OutputParseError(TerradockError):
    """Raised when JSON output from Terraform cannot be decoded."""

    def __init__(self, message: str, output: str = ""):
        super().__init__(message)
        self.output = output
