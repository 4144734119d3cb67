"""
Construction of the Terraform command line run inside the container.

Commands are built as token lists. Placeholders such as
$TERRAFORM_VAR_FILE_MOUNT_POINT are left unresolved; the process
executor substitutes them when the container is launched.
"""

import logging
import shlex
from typing import List, Sequence

from ..errors import ConfigurationError

logger = logging.getLogger(__name__)

TERRAFORM_PREFIX = "terraform "

VAR_FILE_ARG = "-var-file=$TERRAFORM_VAR_FILE_MOUNT_POINT"
JSON_ARG = "-json"

# Subcommands that accept -json
JSON_ALLOWED_COMMANDS = frozenset({
    "apply",
    "destroy",
    "output",
    "plan",
    "providers schema",
    "refresh",
    "show",
    "test",
    "validate",
    "version",
})


def strip_terraform_prefix(command: str) -> str:
    """Remove a leading 'terraform ' from a command, if present."""
    if command.startswith(TERRAFORM_PREFIX):
        return command[len(TERRAFORM_PREFIX):]
    return command


def is_json_allowed(command: str) -> bool:
    """
    Check whether a Terraform subcommand supports -json.

    Both one-word ("plan") and two-word ("providers schema") subcommands
    are recognized; anything after them is ignored.
    """
    words = [w for w in strip_terraform_prefix(command.strip()).split() if not w.startswith("-")]
    if not words:
        return False
    if words[0] in JSON_ALLOWED_COMMANDS:
        return True
    return len(words) > 1 and f"{words[0]} {words[1]}" in JSON_ALLOWED_COMMANDS


def build_terraform_command(
    base_command: str,
    variable_file: bool = False,
    json: bool = False,
    additional_args: Sequence[str] = (),
) -> List[str]:
    """
    Build the argument list for a Terraform command.

    Args:
        base_command: Command such as "plan" or "terraform apply -auto-approve"
        variable_file: Append -var-file pointing at the mounted variable file
        json: Request -json output when the subcommand supports it
        additional_args: Extra arguments, appended in order

    Returns:
        Command tokens, without the terraform binary itself

    Raises:
        ConfigurationError: If the command has unbalanced quotes
    """
    command = strip_terraform_prefix(base_command)
    try:
        tokens = shlex.split(command)
    except ValueError as e:
        raise ConfigurationError(f"Cannot parse command {command!r}: {e}") from e

    post_args = list(additional_args)
    if variable_file:
        post_args.append(VAR_FILE_ARG)

    if json:
        if is_json_allowed(command):
            post_args.append(JSON_ARG)
        else:
            logger.warning(
                f"JSON output is not supported for 'terraform {command.strip()}', "
                "continuing without -json"
            )

    return tokens + post_args


def render_command(tokens: Sequence[str]) -> str:
    """Join command tokens into a single display string."""
    return " ".join(tokens)
