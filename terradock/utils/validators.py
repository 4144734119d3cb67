"""
Validation utilities for terradock.
"""

import os
import shutil
import subprocess
from typing import Tuple, Optional

from ..errors import ConfigurationError


def validate_directory_path(path: str) -> None:
    """
    Check that a path exists and is a directory.

    Args:
        path: Path to check

    Raises:
        ConfigurationError: If the path is missing or not a directory
    """
    if not os.path.exists(path):
        raise ConfigurationError(f"Path does not exist: {path}")

    if not os.path.isdir(path):
        raise ConfigurationError(f"Path is not a directory: {path}")


def validate_docker_installed(docker_binary: str = "docker") -> Tuple[bool, Optional[str]]:
    """
    Check if the Docker CLI is installed and accessible.

    Args:
        docker_binary: Path or name of docker binary

    Returns:
        Tuple of (is_installed, version_string)
        If not installed, version_string is None
    """
    if not shutil.which(docker_binary):
        return False, None

    try:
        from . import subprocess_creation_flags
        result = subprocess.run(
            [docker_binary, "--version"],
            capture_output=True,
            text=True,
            timeout=5,
            creationflags=subprocess_creation_flags(),
        )

        if result.returncode == 0:
            version_line = result.stdout.split('\n')[0]
            return True, version_line
        else:
            return False, None

    except (subprocess.TimeoutExpired, FileNotFoundError, OSError):
        return False, None
