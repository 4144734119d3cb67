"""
Core functionality for terradock.

This module provides the pieces that run Terraform in a container:
- Building the Terraform and docker command lines
- Managing the temporary variable file
- Executing the command and decoding its output
"""

from .command_builder import build_terraform_command, is_json_allowed, render_command
from .environment import build_environment, merge_environment, mount_arguments
from .executor import ExecutionParameters, TerraformExecutor, execute
from .output_parser import parse_terraform_json_output, try_parse_terraform_json_output
from .process import ProcessExecutor, ProcessOptions, ProcessResult
from .temp_files import (
    generate_random_temporary_path,
    save_to_random_temporary_file,
    shred_terraform_var_file,
)
from .tfvars_handler import TfvarsHandler

__all__ = [
    "build_terraform_command",
    "is_json_allowed",
    "render_command",
    "build_environment",
    "merge_environment",
    "mount_arguments",
    "ExecutionParameters",
    "TerraformExecutor",
    "execute",
    "parse_terraform_json_output",
    "try_parse_terraform_json_output",
    "ProcessExecutor",
    "ProcessOptions",
    "ProcessResult",
    "generate_random_temporary_path",
    "save_to_random_temporary_file",
    "shred_terraform_var_file",
    "TfvarsHandler",
]
