"""Tests for environment assembly, key=value parsing and docker command construction."""

from unittest.mock import patch

import pytest

from terradock.core.docker_command import build_docker_command, get_current_user_id
from terradock.core.environment import (
    TERRAFORM_DIR,
    TERRAFORM_DIR_MOUNT_POINT,
    TERRAFORM_VAR_FILE,
    TERRAFORM_VAR_FILE_MOUNT_POINT,
    build_environment,
    merge_environment,
    mount_arguments,
)
from terradock.core.key_value import parse_key_value_pairs
from terradock.errors import ConfigurationError
from terradock.security.sanitizer import SecurityError


# ---------------------------------------------------------------------------
# Environment mapping
# ---------------------------------------------------------------------------

class TestBuildEnvironment:
    def test_directory_bindings_only(self):
        env = build_environment("/work/project")
        assert list(env) == [TERRAFORM_DIR, TERRAFORM_DIR_MOUNT_POINT]
        assert env[TERRAFORM_DIR] == "/work/project"

    def test_var_file_pair_set_together(self):
        env = build_environment("/work/project", var_file="/tmp/vars")
        assert env[TERRAFORM_VAR_FILE] == "/tmp/vars"
        assert TERRAFORM_VAR_FILE_MOUNT_POINT in env

    def test_var_file_pair_absent_together(self):
        env = build_environment("/work/project", var_file=None)
        assert TERRAFORM_VAR_FILE not in env
        assert TERRAFORM_VAR_FILE_MOUNT_POINT not in env

    def test_mount_points_are_distinct(self):
        env = build_environment("/work/project", var_file="/tmp/vars")
        assert env[TERRAFORM_DIR_MOUNT_POINT] != env[TERRAFORM_VAR_FILE_MOUNT_POINT]
        assert env[TERRAFORM_DIR_MOUNT_POINT] != build_environment("/work/project")[TERRAFORM_DIR_MOUNT_POINT]


class TestMountArguments:
    def test_directory_mount(self):
        args = mount_arguments(build_environment("/work"))
        assert args == [
            "-w", "$TERRAFORM_DIR_MOUNT_POINT",
            "-v", "$TERRAFORM_DIR:$TERRAFORM_DIR_MOUNT_POINT",
        ]

    def test_var_file_mount_is_read_only(self):
        args = mount_arguments(build_environment("/work", var_file="/tmp/vars"))
        assert args[-2:] == ["-v", "$TERRAFORM_VAR_FILE:$TERRAFORM_VAR_FILE_MOUNT_POINT:ro"]


class TestMergeEnvironment:
    def test_secrets_follow_bindings(self):
        env = {"TERRAFORM_DIR": "/work"}
        merged = merge_environment(env, {"TF_TOKEN": "abc"})
        assert list(merged) == ["TERRAFORM_DIR", "TF_TOKEN"]
        assert env == {"TERRAFORM_DIR": "/work"}


# ---------------------------------------------------------------------------
# key=value parsing
# ---------------------------------------------------------------------------

class TestParseKeyValuePairs:
    def test_empty(self):
        assert parse_key_value_pairs(None) == {}
        assert parse_key_value_pairs("") == {}

    def test_pairs(self):
        text = "AWS_ACCESS_KEY_ID=AKIA123\nAWS_SECRET_ACCESS_KEY = s3cr3t \n"
        assert parse_key_value_pairs(text) == {
            "AWS_ACCESS_KEY_ID": "AKIA123",
            "AWS_SECRET_ACCESS_KEY": "s3cr3t",
        }

    def test_value_may_contain_equals(self):
        assert parse_key_value_pairs("TOKEN=a=b==") == {"TOKEN": "a=b=="}

    def test_skips_blank_and_comment_lines(self):
        assert parse_key_value_pairs("\n# comment\nA=1\n\n") == {"A": "1"}

    def test_empty_value_allowed(self):
        assert parse_key_value_pairs("A=") == {"A": ""}

    def test_missing_equals(self):
        with pytest.raises(ConfigurationError, match="line 2"):
            parse_key_value_pairs("A=1\nBROKEN")

    def test_invalid_name(self):
        with pytest.raises(ConfigurationError):
            parse_key_value_pairs("1BAD=x")

    def test_reserved_name(self):
        with pytest.raises(ConfigurationError, match="reserved"):
            parse_key_value_pairs("TERRAFORM_DIR=/etc")


# ---------------------------------------------------------------------------
# docker run command
# ---------------------------------------------------------------------------

class TestBuildDockerCommand:
    def test_structure(self):
        cmd = build_docker_command(
            image="hashicorp/terraform:1.6",
            command=["plan", "-json"],
            user="1000:1000",
            additional_arguments=["-w", "/mnt", "-v", "/a:/mnt"],
            environment_variables={"TF_TOKEN": "secret"},
        )
        assert cmd == [
            "docker", "run", "--rm",
            "-e", "TF_TOKEN",
            "-w", "/mnt", "-v", "/a:/mnt",
            "--user", "1000:1000",
            "hashicorp/terraform:1.6",
            "plan", "-json",
        ]

    def test_secret_values_not_on_command_line(self):
        cmd = build_docker_command("img", ["plan"], environment_variables={"K": "topsecret"})
        assert "topsecret" not in " ".join(cmd)

    def test_without_user_or_env(self):
        cmd = build_docker_command("img", ["init"])
        assert cmd == ["docker", "run", "--rm", "img", "init"]

    def test_empty_additional_arguments_dropped(self):
        cmd = build_docker_command("img", ["init"], additional_arguments=["", "-w", "/x"])
        assert cmd == ["docker", "run", "--rm", "-w", "/x", "img", "init"]

    def test_custom_binary(self):
        assert build_docker_command("img", [], docker_binary="podman")[0] == "podman"

    @pytest.mark.parametrize("image", ["", "img; rm -rf /", "img name"])
    def test_rejects_bad_image(self, image):
        with pytest.raises(SecurityError):
            build_docker_command(image, ["plan"])

    def test_rejects_null_byte(self):
        with pytest.raises(SecurityError):
            build_docker_command("img", ["plan", "bad\x00arg"])


class TestGetCurrentUserId:
    def test_posix(self):
        with patch("terradock.core.docker_command.os.getuid", return_value=501, create=True), \
                patch("terradock.core.docker_command.os.getgid", return_value=20, create=True):
            assert get_current_user_id() == "501:20"
