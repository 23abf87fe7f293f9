"""Tests for the token CLI commands."""

import pytest
from click.testing import CliRunner

from usagewatch.cli import cli
from usagewatch.commands.token_cmd import _mask
from usagewatch.config import load_config


@pytest.fixture(autouse=True)
def no_discovery(monkeypatch):
    """Keep the real editor state database out of these tests."""
    monkeypatch.setattr("usagewatch.infra.credentials.state_db_path", lambda: None)


class TestTokenCommands:
    def test_set_argument(self):
        result = CliRunner().invoke(cli, ["token", "set", "abc123"])
        assert result.exit_code == 0
        assert load_config().auth.session_token == "SESSION=abc123"

    def test_set_prompts(self):
        result = CliRunner().invoke(cli, ["token", "set"], input="typed-token\n")
        assert result.exit_code == 0
        assert load_config().auth.session_token == "SESSION=typed-token"

    def test_set_empty_prompt_saves_nothing(self, isolated_config):
        result = CliRunner().invoke(cli, ["token", "set"], input="\n")
        assert result.exit_code == 0
        assert not isolated_config.exists()

    def test_clear(self):
        CliRunner().invoke(cli, ["token", "set", "abc123"])
        result = CliRunner().invoke(cli, ["token", "clear", "--yes"])
        assert result.exit_code == 0
        assert load_config().auth.session_token == ""

    def test_clear_declined(self):
        CliRunner().invoke(cli, ["token", "set", "abc123"])
        CliRunner().invoke(cli, ["token", "clear"], input="n\n")
        assert load_config().auth.session_token == "SESSION=abc123"

    def test_show_stored(self):
        CliRunner().invoke(cli, ["token", "set", "user_1::averylongtokenvalue"])
        result = CliRunner().invoke(cli, ["token", "show"])
        assert "Source: stored" in result.output
        assert "SESSION=user_1...alue" in result.output
        assert "averylongtoken" not in result.output

    def test_show_none(self):
        result = CliRunner().invoke(cli, ["token", "show"])
        assert "No session token found" in result.output


def test_mask_short_value():
    assert _mask("SESSION=abc") == "SESSION=****"
