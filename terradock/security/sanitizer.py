"""
Input sanitization and validation for terradock.

This module validates values that end up on the docker command line
or in the child process environment:
- Terraform variable names written to the variable file
- Environment variable names for secrets
- Docker image references
- Raw command arguments
"""

import re

from ..errors import TerradockError


class SecurityError(TerradockError):
    """Raised when a security validation fails."""
    pass


class InputSanitizer:
    """
    Provides input validation methods.

    All sanitize_* methods raise SecurityError if validation fails.
    """

    # Terraform identifiers: letters, digits, underscores, hyphens
    VARIABLE_NAME_PATTERN = re.compile(r'^[a-zA-Z_][a-zA-Z0-9_-]*$')

    # POSIX-style environment variable names
    ENV_VAR_NAME_PATTERN = re.compile(r'^[A-Za-z_][A-Za-z0-9_]*$')

    # registry/name:tag@digest, no whitespace or shell metacharacters
    IMAGE_PATTERN = re.compile(r'^[A-Za-z0-9][A-Za-z0-9._/:@+-]*$')

    MAX_VARIABLE_NAME_LENGTH = 255
    MAX_ENV_VAR_NAME_LENGTH = 255
    MAX_IMAGE_LENGTH = 512
    MAX_ARG_LENGTH = 10000

    # Names owned by the path bindings; secrets may not shadow them
    RESERVED_ENV_VAR_NAMES = frozenset({
        "TERRAFORM_DIR",
        "TERRAFORM_DIR_MOUNT_POINT",
        "TERRAFORM_VAR_FILE",
        "TERRAFORM_VAR_FILE_MOUNT_POINT",
    })

    @staticmethod
    def sanitize_variable_name(name: str) -> str:
        """
        Validate a Terraform variable name.

        Rules:
        - Must start with letter or underscore
        - Can contain letters, digits, underscores, hyphens
        - Max length: 255 characters

        Raises:
            SecurityError: If name is invalid
        """
        if not isinstance(name, str) or not name:
            raise SecurityError("Variable name cannot be empty")

        if len(name) > InputSanitizer.MAX_VARIABLE_NAME_LENGTH:
            raise SecurityError(
                f"Variable name too long (max {InputSanitizer.MAX_VARIABLE_NAME_LENGTH})"
            )

        if not InputSanitizer.VARIABLE_NAME_PATTERN.fullmatch(name):
            raise SecurityError(
                f"Invalid variable name {name!r}: must start with letter/underscore, "
                "contain only letters, digits, underscores, hyphens"
            )

        return name

    @staticmethod
    def sanitize_env_var_name(name: str) -> str:
        """
        Validate an environment variable name.

        Rules:
        - Must start with letter or underscore
        - Can contain letters, digits, underscores
        - Must not be one of the path binding names

        Args:
            name: Variable name to validate

        Returns:
            Validated name (unchanged if valid)

        Raises:
            SecurityError: If name is invalid
        """
        if not name:
            raise SecurityError("Environment variable name cannot be empty")

        if len(name) > InputSanitizer.MAX_ENV_VAR_NAME_LENGTH:
            raise SecurityError(
                f"Environment variable name too long (max {InputSanitizer.MAX_ENV_VAR_NAME_LENGTH})"
            )

        if not InputSanitizer.ENV_VAR_NAME_PATTERN.fullmatch(name):
            raise SecurityError(
                f"Invalid environment variable name '{name}': must start with "
                "letter/underscore, contain only letters, digits, underscores"
            )

        if name in InputSanitizer.RESERVED_ENV_VAR_NAMES:
            raise SecurityError(f"Environment variable name '{name}' is reserved")

        return name

    @staticmethod
    def sanitize_image_name(image: str) -> str:
        """
        Validate a docker image reference.

        Raises:
            SecurityError: If the reference is empty or malformed
        """
        if not image:
            raise SecurityError("Docker image cannot be empty")

        if len(image) > InputSanitizer.MAX_IMAGE_LENGTH:
            raise SecurityError(
                f"Docker image reference too long (max {InputSanitizer.MAX_IMAGE_LENGTH})"
            )

        if not InputSanitizer.IMAGE_PATTERN.fullmatch(image):
            raise SecurityError(f"Invalid docker image reference: {image}")

        return image

    @staticmethod
    def is_safe_command_arg(arg: str) -> bool:
        """
        Check if a command argument is safe to pass to subprocess.

        Commands always run with shell=False; this rejects the arguments
        that are still a problem without a shell.

        Args:
            arg: Command argument to check

        Returns:
            True if safe, False otherwise
        """
        if '\x00' in arg:
            return False

        if len(arg) > InputSanitizer.MAX_ARG_LENGTH:
            return False

        return True
