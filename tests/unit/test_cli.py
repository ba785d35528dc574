"""
Unit Tests for the CLI.

Commands that need no database or running server, driven through click's
CliRunner against the bundled vehicle table and the real YAML config.
"""

import pytest
import structlog
from click.testing import CliRunner

from cli import main


@pytest.fixture
def runner():
    yield CliRunner()
    structlog.contextvars.clear_contextvars()


class TestLookup:

    def test_make_and_model(self, runner):
        result = runner.invoke(main, ["--service", "lookup", "--year", "2017", "--make", "ford", "--model", "F150"])

        assert result.exit_code == 0, result.output
        assert "Ford F-150 (2015-2020) [exact]" in result.output
        assert "sides:        210.0" in result.output

    def test_free_text_query(self, runner):
        result = runner.invoke(main, ["--service", "lookup", "--query", "2012 Ford F-150"])

        assert result.exit_code == 0, result.output
        assert "make=ford" in result.output
        assert "(2009-2014) [exact]" in result.output

    def test_year_far_outside_any_range_still_matches_model(self, runner):
        result = runner.invoke(main, ["--service", "lookup", "--year", "1960", "--make", "Ford", "--model", "F-150"])

        assert result.exit_code == 0, result.output
        assert "[any_year]" in result.output

    def test_unknown_vehicle_exits_nonzero(self, runner):
        result = runner.invoke(main, ["--service", "lookup", "--make", "Ford", "--model", "Model T Speedster"])

        assert result.exit_code == 1
        assert "No vehicle dimensions found." in result.output

    def test_requires_query_or_make_and_model(self, runner):
        result = runner.invoke(main, ["--service", "lookup", "--make", "Ford"])

        assert result.exit_code == 1
        assert "Provide --query, or --make and --model." in result.output


class TestInformational:

    def test_config_prints_every_section(self, runner):
        result = runner.invoke(main, ["--service", "config"])

        assert result.exit_code == 0, result.output
        for section in ("Application:", "Pricing:", "Integrations:", "Logging:"):
            assert section in result.output

    def test_info_lists_services(self, runner):
        result = runner.invoke(main, ["--service", "info"])

        assert result.exit_code == 0, result.output
        assert "create-org" in result.output
        assert "lookup" in result.output

    def test_create_org_requires_name_and_slug(self, runner):
        result = runner.invoke(main, ["--service", "create-org", "--name", "Wrap Shop Co"])

        assert result.exit_code == 1
        assert "--name and --slug are required" in result.output
