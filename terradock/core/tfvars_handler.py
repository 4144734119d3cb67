"""
Handler for Terraform variable definition files.

Renders variable mappings to .tfvars (HCL) text and reads them back.
"""

import json
import logging
from typing import Any, Mapping

from ..errors import ConfigurationError
from ..security.sanitizer import InputSanitizer, SecurityError

logger = logging.getLogger(__name__)


class TfvarsHandler:
    """Parse and render Terraform .tfvars content."""

    @staticmethod
    def parse_tfvars(file_path: str) -> dict[str, Any]:
        """
        Parse a .tfvars file and return variable name-value pairs.

        Uses hcl2 for parsing. Single-element lists are unwrapped
        (hcl2 wraps scalar values in lists).

        Args:
            file_path: Path to the .tfvars file.

        Returns:
            Dict of variable name to value.

        Raises:
            FileNotFoundError: If file does not exist.
            ValueError: If file cannot be parsed.
        """
        import hcl2

        try:
            with open(file_path, "r") as f:
                parsed = hcl2.load(f)
        except FileNotFoundError:
            raise
        except Exception as e:
            raise ValueError(f"Failed to parse tfvars file: {e}")

        return {key: TfvarsHandler._unwrap(value) for key, value in parsed.items()}

    @staticmethod
    def render_tfvars(values: Mapping[str, Any]) -> str:
        """
        Render variable values as .tfvars text in HCL format.

        Variables keep their insertion order. Every name is validated so
        that a key cannot inject extra HCL into the file.

        Args:
            values: Mapping of variable name to value.

        Returns:
            The file content, newline terminated unless empty.

        Raises:
            ConfigurationError: If a variable name is not a valid identifier.
        """
        lines = []
        for name, value in values.items():
            try:
                InputSanitizer.sanitize_variable_name(name)
            except SecurityError as e:
                raise ConfigurationError(str(e)) from e
            lines.append(f"{name} = {TfvarsHandler._format_value(value)}")
        if not lines:
            return ""
        return "\n".join(lines) + "\n"

    @staticmethod
    def _unwrap(value: Any) -> Any:
        """Unwrap a value that may be wrapped in a single-element list by hcl2."""
        if isinstance(value, list) and len(value) == 1:
            return value[0]
        return value

    @staticmethod
    def _format_value(value: Any) -> str:
        """Format a Python value as an HCL literal, recursing into lists and maps."""
        if isinstance(value, bool):
            return "true" if value else "false"
        elif isinstance(value, (int, float)):
            return str(value)
        elif isinstance(value, str):
            return TfvarsHandler._format_string(value)
        elif isinstance(value, (list, tuple)):
            items = ", ".join(TfvarsHandler._format_value(item) for item in value)
            return f"[{items}]"
        elif isinstance(value, Mapping):
            entries = ", ".join(
                f"{TfvarsHandler._format_string(str(key))} = {TfvarsHandler._format_value(item)}"
                for key, item in value.items()
            )
            return f"{{{entries}}}"
        else:
            # null and anything else JSON can express
            return json.dumps(value)

    @staticmethod
    def _format_string(value: str) -> str:
        # Escape backslashes, quotes and template sequences
        escaped = (
            value.replace("\\", "\\\\")
            .replace('"', '\\"')
            .replace("\n", "\\n")
            .replace("${", "$${")
            .replace("%{", "%%{")
        )
        return f'"{escaped}"'
