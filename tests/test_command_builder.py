"""Tests for Terraform command construction."""

import logging

import pytest

from terradock.core.command_builder import (
    JSON_ALLOWED_COMMANDS,
    VAR_FILE_ARG,
    build_terraform_command,
    is_json_allowed,
    render_command,
    strip_terraform_prefix,
)
from terradock.errors import ConfigurationError


class TestStripPrefix:
    def test_strips_terraform_prefix(self):
        assert strip_terraform_prefix("terraform plan") == "plan"

    def test_strips_exactly_one_prefix(self):
        assert strip_terraform_prefix("terraform terraform plan") == "terraform plan"

    def test_leaves_bare_command(self):
        assert strip_terraform_prefix("plan") == "plan"

    def test_requires_separator(self):
        assert strip_terraform_prefix("terraformplan") == "terraformplan"


class TestBuildTerraformCommand:
    def test_prefixed_command(self):
        assert build_terraform_command("terraform plan") == ["plan"]
        assert render_command(build_terraform_command("terraform plan")) == "plan"

    def test_bare_command_has_no_trailing_space(self):
        assert render_command(build_terraform_command("init")) == "init"

    def test_command_with_arguments_is_tokenized(self):
        tokens = build_terraform_command("apply -auto-approve")
        assert tokens == ["apply", "-auto-approve"]

    def test_additional_args_keep_order(self):
        tokens = build_terraform_command("plan", additional_args=["-target=a", "-lock=false"])
        assert tokens == ["plan", "-target=a", "-lock=false"]

    def test_additional_args_not_mutated(self):
        extra = ["-refresh=false"]
        build_terraform_command("plan", variable_file=True, json=True, additional_args=extra)
        assert extra == ["-refresh=false"]

    def test_variable_file_placeholder(self):
        tokens = build_terraform_command("plan", variable_file=True)
        assert "-var-file=$TERRAFORM_VAR_FILE_MOUNT_POINT" in render_command(tokens)
        assert tokens[-1] == VAR_FILE_ARG

    def test_variable_file_after_additional_args(self):
        tokens = build_terraform_command("plan", variable_file=True, additional_args=["-x"])
        assert tokens == ["plan", "-x", VAR_FILE_ARG]

    def test_json_and_var_file_order(self):
        tokens = build_terraform_command("apply", variable_file=True, json=True)
        assert tokens == ["apply", VAR_FILE_ARG, "-json"]

    @pytest.mark.parametrize("command", ["plan", "apply", "show", "output", "validate", "providers schema"])
    def test_json_appended_for_supported_commands(self, command):
        tokens = build_terraform_command(command, json=True)
        assert tokens[-1] == "-json"

    @pytest.mark.parametrize("command", ["init", "fmt", "workspace list", "import", "taint"])
    def test_json_omitted_with_warning_for_unsupported_commands(self, command, caplog):
        with caplog.at_level(logging.WARNING, logger="terradock.core.command_builder"):
            tokens = build_terraform_command(command, json=True)
        assert "-json" not in tokens
        assert "not supported" in caplog.text

    def test_json_false_never_appends(self):
        assert "-json" not in build_terraform_command("plan", json=False)

    def test_quoted_arguments_stay_together(self):
        tokens = build_terraform_command('state show "module.a.aws_instance.web[0]"')
        assert tokens == ["state", "show", "module.a.aws_instance.web[0]"]

    @pytest.mark.parametrize("command", ["apply -var 'x=it", 'plan -var "a=b'])
    def test_unbalanced_quotes_raise_configuration_error(self, command):
        with pytest.raises(ConfigurationError, match="Cannot parse command"):
            build_terraform_command(command)


class TestIsJsonAllowed:
    def test_every_listed_command_is_allowed(self):
        for command in JSON_ALLOWED_COMMANDS:
            assert is_json_allowed(command)

    def test_ignores_flags_and_prefix(self):
        assert is_json_allowed("terraform plan -out=tfplan")
        assert is_json_allowed("show tfplan")

    def test_state_pull_has_no_json_flag(self):
        assert not is_json_allowed("state pull")
        assert build_terraform_command("state pull", json=True) == ["state", "pull"]

    def test_two_word_command(self):
        assert is_json_allowed("providers schema")
        assert not is_json_allowed("providers lock")

    def test_empty_command(self):
        assert not is_json_allowed("")
