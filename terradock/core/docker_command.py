"""
Construction of the `docker run` command line.
"""

import os
from typing import Iterable, List, Mapping, Optional, Sequence

from ..security.sanitizer import InputSanitizer, SecurityError


def get_current_user_id() -> Optional[str]:
    """Return "uid:gid" of the current process, or None where unsupported."""
    if not hasattr(os, "getuid"):
        return None
    return f"{os.getuid()}:{os.getgid()}"


def build_docker_command(
    image: str,
    command: Sequence[str],
    user: Optional[str] = None,
    additional_arguments: Iterable[str] = (),
    environment_variables: Optional[Mapping[str, str]] = None,
    docker_binary: str = "docker",
) -> List[str]:
    """
    Build the argv for running a command in a throwaway container.

    Environment variables are passed by name only (`-e NAME`), so docker
    reads their values from its own environment and secrets never appear
    on the command line.

    Args:
        image: Docker image reference
        command: Arguments passed to the image entrypoint
        user: Optional "uid:gid" to run as
        additional_arguments: Extra `docker run` options, e.g. mounts
        environment_variables: Variables to forward into the container
        docker_binary: Docker CLI to invoke

    Returns:
        Argument list ready for subprocess
    """
    InputSanitizer.sanitize_image_name(image)

    cmd = [docker_binary, "run", "--rm"]

    for name in (environment_variables or {}):
        cmd.extend(["-e", name])

    cmd.extend(arg for arg in additional_arguments if arg)

    if user:
        cmd.extend(["--user", user])

    cmd.append(image)
    cmd.extend(command)

    for arg in cmd:
        if not InputSanitizer.is_safe_command_arg(arg):
            raise SecurityError(f"Unsafe command argument: {arg[:80]}")

    return cmd
