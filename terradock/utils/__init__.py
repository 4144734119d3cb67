"""
Utility functions for terradock.
"""

import subprocess
import sys

from .logger import setup_logging
from .validators import validate_directory_path, validate_docker_installed


def subprocess_creation_flags() -> int:
    """Return creationflags to hide console windows on Windows, 0 elsewhere."""
    if sys.platform == "win32":
        return subprocess.CREATE_NO_WINDOW
    return 0


__all__ = [
    "setup_logging",
    "validate_directory_path",
    "validate_docker_installed",
    "subprocess_creation_flags",
]
