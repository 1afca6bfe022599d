"""Tests for the CLI module."""

import re
from collections.abc import Callable
from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest
from click.testing import CliRunner, Result

from autotagger import __version__
from autotagger.cli import main
from autotagger.github import GitHubError
from autotagger.tagger import ReleaseResult

# Variables that must not leak in from the machine running the tests
CLEAN_ENV: dict[str, str | None] = {
    "GITHUB_TOKEN": None,
    "GITHUB_EVENT_NAME": None,
    "GITHUB_EVENT_PATH": None,
    "GITHUB_WORKSPACE": None,
    "GITHUB_API_URL": None,
    "NO_EX_CONFIG": None,
    "NEVER_FAIL": None,
    "FILE_REGEXP": None,
    "TAG_PREFIX": None,
    "BUILD_METADATA": None,
}


def invoke(args: list[str], **env: str) -> Result:
    runner = CliRunner()
    with runner.isolated_filesystem():
        return runner.invoke(main, args, env={**CLEAN_ENV, **env})


def test_main_help() -> None:
    """Test that --help works."""
    runner = CliRunner()
    result = runner.invoke(main, ["--help"])
    assert result.exit_code == 0
    assert "autotagger" in result.output


def test_version() -> None:
    """Test that --version works."""
    runner = CliRunner()
    result = runner.invoke(main, ["--version"])
    assert result.exit_code == 0
    assert re.search(r"\d+\.\d+\.\d+", result.output)
    assert __version__ in result.output


def test_run_help_lists_variables() -> None:
    """Test the run command documents its environment variables."""
    runner = CliRunner()
    result = runner.invoke(main, ["run", "--help"])
    assert result.exit_code == 0
    for var in ("NO_EX_CONFIG", "NEVER_FAIL", "FILE_REGEXP", "TAG_PREFIX"):
        assert var in result.output


class TestNextCommand:
    """Tests for the next command."""

    @pytest.mark.parametrize(
        ("previous", "want"),
        [("v0.0.0", "v0.0.1"), ("v1.2.3", "v1.2.4"), ("v1.2.3+2019-10-08.deadbeef", "v1.2.4")],
    )
    def test_next(self, previous: str, want: str) -> None:
        """Test printing the next version."""
        runner = CliRunner()
        result = runner.invoke(main, ["next", previous])
        assert result.exit_code == 0
        assert result.output.strip() == want

    def test_next_with_prefix(self) -> None:
        """Test the prefix option."""
        runner = CliRunner()
        result = runner.invoke(main, ["next", "1.4", "--prefix", "tools/"])
        assert result.exit_code == 0
        assert result.output.strip() == "tools/v1.4.1"

    def test_next_with_ref(self) -> None:
        """Test the build metadata shape."""
        runner = CliRunner()
        result = runner.invoke(main, ["next", "v1.2.3", "--ref", "0123456789abcdef"])
        assert result.exit_code == 0
        assert re.fullmatch(r"v1\.2\.4\+\d{4}-\d{2}-\d{2}\.0123456789ab", result.output.strip())

    def test_next_invalid(self) -> None:
        """Test an invalid version fails."""
        runner = CliRunner()
        result = runner.invoke(main, ["next", "not-a-version"])
        assert result.exit_code == 1
        assert "not a valid semantic version" in result.output


class TestRunCommand:
    """Tests for exit codes of the run command."""

    def test_wrong_trigger_is_no_op(self) -> None:
        """Test a non pull_request trigger exits with EX_CONFIG."""
        result = invoke(["run"], GITHUB_EVENT_NAME="push")
        assert result.exit_code == 78
        assert "Ignoring trigger push" in result.output

    def test_wrong_trigger_no_ex_config(self) -> None:
        """Test NO_EX_CONFIG turns skips into success."""
        result = invoke(["run"], GITHUB_EVENT_NAME="push", NO_EX_CONFIG="true")
        assert result.exit_code == 0

    def test_missing_token_fails(self) -> None:
        """Test a missing token is a hard failure by default."""
        result = invoke(["run"], GITHUB_EVENT_NAME="pull_request")
        assert result.exit_code == 1
        assert "GITHUB_TOKEN" in result.output

    def test_missing_token_never_fail(self) -> None:
        """Test NEVER_FAIL exits with the no-op code instead of failing."""
        result = invoke(["run"], GITHUB_EVENT_NAME="pull_request", NEVER_FAIL="true")
        assert result.exit_code == 78

    def test_missing_token_never_fail_no_ex_config(self) -> None:
        """Test NEVER_FAIL follows the NO_EX_CONFIG no-op code."""
        result = invoke(
            ["run"], GITHUB_EVENT_NAME="pull_request", NEVER_FAIL="true", NO_EX_CONFIG="true"
        )
        assert result.exit_code == 0

    def test_invalid_regexp_never_fail(self) -> None:
        """Test configuration errors still honour NEVER_FAIL."""
        result = invoke(
            ["run"], GITHUB_EVENT_NAME="pull_request", FILE_REGEXP="([", NEVER_FAIL="1"
        )
        assert result.exit_code == 78
        assert "Configuration error" in result.output

    def test_never_fail_from_yaml_file(self) -> None:
        """Test an integer flag in .autotagger.yml still remaps failures."""
        runner = CliRunner()
        with runner.isolated_filesystem():
            Path(".autotagger.yml").write_text("never_fail: 1\n", encoding="utf-8")
            result = runner.invoke(
                main, ["run"], env={**CLEAN_ENV, "GITHUB_EVENT_NAME": "pull_request"}
            )
        assert result.exit_code == 78
        assert "GITHUB_TOKEN" in result.output

    def test_never_fail_yaml_and_env_on_skip(self) -> None:
        """Test a skipped run with flags from both the file and the environment."""
        runner = CliRunner()
        with runner.isolated_filesystem():
            Path(".autotagger.yml").write_text("never_fail: 1\n", encoding="utf-8")
            result = runner.invoke(
                main,
                ["run"],
                env={**CLEAN_ENV, "GITHUB_EVENT_NAME": "push", "NEVER_FAIL": "true"},
            )
        assert result.exit_code == 78
        assert "Ignoring trigger push" in result.output

    def test_not_merged_is_no_op(self, write_event: Callable[..., Path]) -> None:
        """Test an unmerged PR exits with the no-op code."""
        result = invoke(
            ["run"],
            GITHUB_EVENT_NAME="pull_request",
            GITHUB_TOKEN="t0ken",
            GITHUB_EVENT_PATH=str(write_event(merged=False)),
        )
        assert result.exit_code == 78
        assert "PR not ready to tag" in result.output

    @patch("autotagger.tagger.ReleaseTagger.run")
    def test_success(self, mock_run: MagicMock, write_event: Callable[..., Path]) -> None:
        """Test a successful run exits 0."""
        mock_run.return_value = ReleaseResult(
            version="v1.0.1",
            previous_version="1.0.0",
            sha="a" * 40,
            pull_request=42,
            comment="tagged",
        )
        result = invoke(
            ["-q", "run"],
            GITHUB_EVENT_NAME="pull_request",
            GITHUB_TOKEN="t0ken",
            GITHUB_EVENT_PATH=str(write_event()),
        )
        assert result.exit_code == 0
        assert result.output.strip() == "v1.0.1"

    @patch("autotagger.tagger.ReleaseTagger.run")
    def test_api_failure(self, mock_run: MagicMock, write_event: Callable[..., Path]) -> None:
        """Test an API failure exits with the failure code."""
        mock_run.side_effect = GitHubError("GitHub API error (500): boom")
        result = invoke(
            ["run"],
            GITHUB_EVENT_NAME="pull_request",
            GITHUB_TOKEN="t0ken",
            GITHUB_EVENT_PATH=str(write_event()),
        )
        assert result.exit_code == 1
        assert "boom" in result.output


def test_latest_requires_owner_and_name() -> None:
    """Test the latest command validates its argument."""
    result = invoke(["latest", "just-a-name"])
    assert result.exit_code == 1
    assert "owner/name" in result.output


def test_latest_without_token() -> None:
    """Test the latest command needs a token."""
    result = invoke(["latest", "octo/repo"])
    assert result.exit_code == 1
    assert "GITHUB_TOKEN" in result.output


def test_config_path() -> None:
    """Test the config path command."""
    result = invoke(["config", "path"])
    assert result.exit_code == 0
    assert "autotagger.ini" in result.output


def test_config_show() -> None:
    """Test the config show command reports exit codes."""
    result = invoke(["config", "show"], NEVER_FAIL="true")
    assert result.exit_code == 0
    assert "Failure: 78" in result.output


def test_config_init() -> None:
    """Test creating a config file, then refusing to overwrite it."""
    runner = CliRunner()
    with runner.isolated_filesystem():
        result = runner.invoke(main, ["config", "init", "--prefix", "tools/"], env=CLEAN_ENV)
        assert result.exit_code == 0
        assert "tag_prefix = tools/" in Path("autotagger.ini").read_text(encoding="utf-8")

        result = runner.invoke(main, ["config", "init"], env=CLEAN_ENV)
        assert result.exit_code == 1
        assert "already exists" in result.output
