"""
Environment mapping describing host-to-container path bindings.
"""

from typing import Dict, List, Mapping, Optional

from .temp_files import generate_random_temporary_path

TERRAFORM_DIR = "TERRAFORM_DIR"
TERRAFORM_DIR_MOUNT_POINT = "TERRAFORM_DIR_MOUNT_POINT"
TERRAFORM_VAR_FILE = "TERRAFORM_VAR_FILE"
TERRAFORM_VAR_FILE_MOUNT_POINT = "TERRAFORM_VAR_FILE_MOUNT_POINT"


def build_environment(
    working_directory: str,
    var_file: Optional[str] = None,
    prefix: Optional[str] = None,
) -> Dict[str, str]:
    """
    Build the path bindings for one invocation.

    Mount points are freshly generated paths. The variable file pair is
    only present when a variable file was written.

    Args:
        working_directory: Absolute host path of the Terraform project
        var_file: Host path of the variable file, if any
        prefix: Optional name prefix for generated mount points

    Returns:
        Ordered mapping of environment variable name to value
    """
    environment = {
        TERRAFORM_DIR: working_directory,
        TERRAFORM_DIR_MOUNT_POINT: generate_random_temporary_path(prefix),
    }
    if var_file:
        environment[TERRAFORM_VAR_FILE] = var_file
        environment[TERRAFORM_VAR_FILE_MOUNT_POINT] = generate_random_temporary_path(prefix)
    return environment


def mount_arguments(environment: Mapping[str, str]) -> List[str]:
    """Derive docker -w/-v arguments from the path bindings, as placeholders."""
    args = [
        "-w", f"${TERRAFORM_DIR_MOUNT_POINT}",
        "-v", f"${TERRAFORM_DIR}:${TERRAFORM_DIR_MOUNT_POINT}",
    ]
    if TERRAFORM_VAR_FILE in environment:
        args.extend(["-v", f"${TERRAFORM_VAR_FILE}:${TERRAFORM_VAR_FILE_MOUNT_POINT}:ro"])
    return args


def merge_environment(
    environment: Mapping[str, str],
    secrets: Mapping[str, str],
) -> Dict[str, str]:
    """Return a new mapping with the bindings followed by the secrets."""
    merged = dict(environment)
    merged.update(secrets)
    return merged
