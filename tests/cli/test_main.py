"""
Test main CLI functionality
"""

from click.testing import CliRunner

from solr_post import __version__
from solr_post.cli.main import cli


def test_cli_help():
    """Test main CLI help display"""
    runner = CliRunner()
    result = runner.invoke(cli, ["--help"])

    assert result.exit_code == 0
    assert "Bulk Solr Indexer" in result.output


def test_cli_version():
    """Test CLI version display"""
    runner = CliRunner()
    result = runner.invoke(cli, ["--version"])

    assert result.exit_code == 0
    assert __version__ in result.output


def test_cli_verbose_flag():
    """Test verbose flag parsing"""
    runner = CliRunner()
    result = runner.invoke(cli, ["--verbose", "--help"])

    assert result.exit_code == 0


def test_cli_no_color_flag():
    """Test no-color flag parsing"""
    runner = CliRunner()
    result = runner.invoke(cli, ["--no-color", "--help"])

    assert result.exit_code == 0


def test_cli_subcommands_available():
    """Test that all expected subcommands are available"""
    runner = CliRunner()
    result = runner.invoke(cli, ["--help"])

    assert result.exit_code == 0
    assert "post" in result.output
    assert "config" in result.output


def test_post_command_help():
    """Test post command help"""
    runner = CliRunner()
    result = runner.invoke(cli, ["post", "--help"])

    assert result.exit_code == 0
    assert "Post files in a directory tree" in result.output
    assert "--directory" in result.output
    assert "--exclude-regex" in result.output
    assert "--dry-run" in result.output
