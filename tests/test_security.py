"""
Tests for security module - InputSanitizer, SecureString, OutputRedactor.
"""

import pytest

from terradock.errors import TerradockError
from terradock.security import InputSanitizer, OutputRedactor, SecureString, SecurityError


def test_sanitize_env_var_name_valid():
    """Test valid environment variable names are accepted."""
    valid_names = [
        "AWS_ACCESS_KEY_ID",
        "TF_TOKEN_app_terraform_io",
        "_PRIVATE",
        "lower_case",
        "X1",
    ]

    for name in valid_names:
        assert InputSanitizer.sanitize_env_var_name(name) == name


def test_sanitize_env_var_name_invalid():
    """Test invalid names raise SecurityError."""
    invalid_names = [
        "",  # Empty
        "1STARTS_WITH_DIGIT",
        "HAS SPACE",
        "HAS-HYPHEN",
        "HAS$DOLLAR",
        "HAS.DOT",
    ]

    for name in invalid_names:
        with pytest.raises(SecurityError):
            InputSanitizer.sanitize_env_var_name(name)


def test_sanitize_env_var_name_too_long():
    with pytest.raises(SecurityError):
        InputSanitizer.sanitize_env_var_name("A" * 500)


def test_sanitize_env_var_name_reserved():
    """Secrets may not shadow the path bindings."""
    for name in InputSanitizer.RESERVED_ENV_VAR_NAMES:
        with pytest.raises(SecurityError):
            InputSanitizer.sanitize_env_var_name(name)


def test_sanitize_image_name():
    for image in ["hashicorp/terraform", "hashicorp/terraform:1.6.0",
                  "registry.example.com:5000/tf/terraform:latest",
                  "terraform@sha256:abc123"]:
        assert InputSanitizer.sanitize_image_name(image) == image

    for image in ["", "-rm", "img;ls", "img name", "img\n"]:
        with pytest.raises(SecurityError):
            InputSanitizer.sanitize_image_name(image)


def test_is_safe_command_arg():
    """Test command argument safety check."""
    assert InputSanitizer.is_safe_command_arg("normal_value") is True
    assert InputSanitizer.is_safe_command_arg("-var-file=$TERRAFORM_VAR_FILE_MOUNT_POINT") is True
    assert InputSanitizer.is_safe_command_arg("value\x00with_null") is False
    assert InputSanitizer.is_safe_command_arg("a" * 20000) is False


def test_security_error_is_terradock_error():
    assert issubclass(SecurityError, TerradockError)


class TestSecureString:
    def test_value_hidden_from_repr(self):
        secret = SecureString("hunter2")
        assert "hunter2" not in str(secret)
        assert "hunter2" not in repr(secret)
        assert secret.get_value() == "hunter2"

    def test_clear(self):
        secret = SecureString("hunter2")
        secret.clear()
        secret.clear()
        with pytest.raises(ValueError):
            secret.get_value()


class TestOutputRedactor:
    def test_redacts_all_occurrences(self):
        redactor = OutputRedactor({"K": SecureString("abc")})
        assert redactor.redact("abc and abc") == "[REDACTED] and [REDACTED]"

    def test_from_plain_values(self):
        redactor = OutputRedactor.from_plain_values({"A": "one", "B": ""})
        assert redactor.redact("one two") == "[REDACTED] two"

    def test_longer_secret_masked_first(self):
        redactor = OutputRedactor.from_plain_values({"A": "pass", "B": "password123"})
        assert redactor.redact("password123") == "[REDACTED]"

    def test_skips_cleared_values(self):
        secret = SecureString("gone")
        secret.clear()
        assert OutputRedactor({"A": secret}).redact("gone") == "gone"

    def test_empty_text(self):
        assert OutputRedactor.from_plain_values({"A": "x"}).redact("") == ""

    def test_clear(self):
        redactor = OutputRedactor.from_plain_values({"A": "x"})
        redactor.clear()
        assert redactor.redact("x") == "x"
