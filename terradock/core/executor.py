"""
Terraform execution inside a Docker container.

Ties together the variable file lifecycle, command construction and the
process executor, and turns the process result into either a parsed
value or an exception.
"""

import logging
import os
import sys
from dataclasses import dataclass
from typing import Any, Mapping, Optional, Sequence, Union

from ..config import Settings
from ..errors import CommandStderrError, ExecutionError
from ..security.secure_memory import OutputRedactor
from ..utils.validators import validate_directory_path
from .command_builder import build_terraform_command, is_json_allowed, render_command
from .docker_command import build_docker_command, get_current_user_id
from .environment import (
    TERRAFORM_VAR_FILE,
    build_environment,
    merge_environment,
    mount_arguments,
)
from .key_value import parse_key_value_pairs
from .output_parser import parse_terraform_json_output, try_parse_terraform_json_output
from .process import ProcessExecutor, ProcessOptions, ProgressCallback
from .temp_files import DEFAULT_TEMP_PREFIX, save_to_random_temporary_file, shred_terraform_var_file

logger = logging.getLogger(__name__)

RAW_OUTPUT_HINT = (
    "RECOMMENDATION: Try enabling raw output for a more meaningful error message."
)


@dataclass(frozen=True)
class ExecutionParameters:
    """
    Inputs for one Terraform invocation.

    Attributes:
        command: Terraform subcommand, optionally prefixed with "terraform "
        working_directory: Project directory on the host (default: cwd)
        variables: Variable values, as a mapping or raw .tfvars text
        secret_env_variables: "KEY=value" lines forwarded into the container
        raw_output: Stream native output instead of parsing JSON
        additional_args: Extra Terraform arguments
        custom_docker_image: Image to run Terraform from
    """
    command: str
    working_directory: Optional[str] = None
    variables: Optional[Union[Mapping[str, Any], str]] = None
    secret_env_variables: Optional[str] = None
    raw_output: bool = False
    additional_args: Sequence[str] = ()
    custom_docker_image: str = "hashicorp/terraform:latest"


def print_progress(line: str) -> None:
    """Default progress sink: echo each line to stdout."""
    sys.stdout.write(line + "\n")
    sys.stdout.flush()


class TerraformExecutor:
    """
    Runs Terraform commands in a throwaway container.

    Each call to execute() is independent; executors hold no per-call
    state and may be shared between threads.
    """

    def __init__(
        self,
        docker_binary: str = "docker",
        temp_prefix: str = DEFAULT_TEMP_PREFIX,
        shred_passes: int = 1,
        process_timeout: Optional[float] = None,
    ):
        self.docker_binary = docker_binary
        self.temp_prefix = temp_prefix
        self.shred_passes = shred_passes
        self.process_timeout = process_timeout

    @classmethod
    def from_settings(cls, settings: Settings) -> "TerraformExecutor":
        return cls(
            docker_binary=settings.get("docker_binary", "docker"),
            temp_prefix=settings.get("temp_prefix", DEFAULT_TEMP_PREFIX),
            shred_passes=settings.get("shred_passes", 1),
            process_timeout=settings.get("process_timeout"),
        )

    def execute(
        self,
        params: ExecutionParameters,
        progress_callback: Optional[ProgressCallback] = print_progress,
    ) -> Any:
        """
        Run a Terraform command and normalize its output.

        Args:
            params: Invocation inputs
            progress_callback: Receives each stdout line as it arrives

        Returns:
            "" in raw output mode, otherwise the decoded JSON output (or
            the plain output for subcommands without JSON support)

        Raises:
            ConfigurationError: Bad working directory, command, variable name or
                secret list
            VarFileWriteError: Variable file could not be written
            ExecutionError: The container command failed
            CommandStderrError: Only stderr was produced
            OutputParseError: JSON output could not be decoded
        """
        working_directory = (
            os.path.abspath(params.working_directory)
            if params.working_directory
            else os.getcwd()
        )
        validate_directory_path(working_directory)

        var_file = None
        if params.variables is not None:
            var_file = save_to_random_temporary_file(params.variables, prefix=self.temp_prefix)

        try:
            result, json_requested = self._run(params, working_directory, var_file, progress_callback)
        finally:
            if var_file is not None:
                shred_terraform_var_file(var_file, passes=self.shred_passes)

        if result.error:
            if not params.raw_output:
                logger.warning(RAW_OUTPUT_HINT)
            raise ExecutionError(
                result.error,
                stdout=result.stdout,
                stderr=result.stderr,
                exit_code=result.exit_code,
            )

        if result.stderr and not result.stdout:
            raise CommandStderrError(
                result.stderr,
                stdout=result.stdout,
                stderr=result.stderr,
                exit_code=result.exit_code,
            )
        elif result.stderr:
            logger.warning(result.stderr)

        if params.raw_output:
            return ""
        if json_requested:
            return parse_terraform_json_output(result.stdout)
        return try_parse_terraform_json_output(result.stdout)

    def _run(self, params, working_directory, var_file, progress_callback):
        """Build and run the docker command. Returns (ProcessResult, json_requested)."""
        environment = build_environment(working_directory, var_file, prefix=self.temp_prefix)

        terraform_command = build_terraform_command(
            params.command,
            variable_file=TERRAFORM_VAR_FILE in environment,
            json=not params.raw_output,
            additional_args=params.additional_args,
        )
        json_requested = not params.raw_output and is_json_allowed(params.command)

        secrets = parse_key_value_pairs(params.secret_env_variables)

        docker_command = build_docker_command(
            image=params.custom_docker_image,
            command=terraform_command,
            user=get_current_user_id(),
            additional_arguments=mount_arguments(environment),
            environment_variables=secrets,
            docker_binary=self.docker_binary,
        )

        logger.info(f"Running terraform {render_command(terraform_command)}")

        redactor = OutputRedactor.from_plain_values(secrets)
        try:
            result = ProcessExecutor(redactor).run(
                docker_command,
                on_progress=progress_callback,
                options=ProcessOptions(
                    env=merge_environment(environment, secrets),
                    timeout=self.process_timeout,
                ),
            )
        finally:
            redactor.clear()
        return result, json_requested


def execute(
    params: ExecutionParameters,
    progress_callback: Optional[ProgressCallback] = print_progress,
    settings: Optional[Settings] = None,
) -> Any:
    """Run a Terraform command with an executor configured from settings."""
    executor = TerraformExecutor.from_settings(settings or Settings())
    return executor.execute(params, progress_callback)
