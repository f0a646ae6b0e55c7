# SPDX-License-Identifier: MIT
"""Tests for the command line interface."""

import pytest
from click.testing import CliRunner

from radar import main as cli_module
from radar.errors import GenerationError


@pytest.fixture
def runner() -> CliRunner:
    return CliRunner()


@pytest.fixture
def cli_store(mocker, memory_store):
    """Point every CLI command at the in-memory store."""
    mocker.patch.object(cli_module, "_store", return_value=memory_store)
    return memory_store


@pytest.fixture
def seeded(cli_store, make_session, sample_records):
    cli_store.save([make_session(2, sample_records), make_session(1, sample_records[:1])])
    return cli_store


class TestScanCommand:
    """Test `radar scan`."""

    def test_scan(self, runner, cli_store, fake_generator, mocker):
        mocker.patch.object(cli_module, "AnthropicGenerator", return_value=fake_generator)
        result = runner.invoke(cli_module.cli, ["scan"])
        assert result.exit_code == 0, result.output
        assert len(cli_store.load()) == 1

    def test_scan_failure(self, runner, cli_store, make_generator, mocker):
        failing = make_generator(error=GenerationError("boom"))
        mocker.patch.object(cli_module, "AnthropicGenerator", return_value=failing)
        result = runner.invoke(cli_module.cli, ["scan"])
        assert result.exit_code == 1
        assert "boom" in result.output
        assert cli_store.load() == []


class TestBrowseCommands:
    """Test read-only commands."""

    def test_sessions(self, runner, seeded):
        result = runner.invoke(cli_module.cli, ["sessions"])
        assert result.exit_code == 0
        assert "Archives" in result.output

    def test_sessions_empty(self, runner, cli_store):
        result = runner.invoke(cli_module.cli, ["sessions"])
        assert "No sessions" in result.output

    def test_show(self, runner, seeded):
        result = runner.invoke(cli_module.cli, ["show", "1"])
        assert result.exit_code == 0
        assert "Session 1 - dimanche 18 octobre 2026" in result.output

    def test_show_unknown(self, runner, seeded):
        assert runner.invoke(cli_module.cli, ["show", "99"]).exit_code == 1

    def test_master(self, runner, seeded):
        result = runner.invoke(cli_module.cli, ["master", "--high-only"])
        assert result.exit_code == 0
        assert "Intelligence Base (1 items)" in result.output


class TestMutatingCommands:
    """Test commands that change the history."""

    def test_mark(self, runner, seeded):
        result = runner.invoke(cli_module.cli, ["mark", "2", "1", "--flag", "added"])
        assert result.exit_code == 0
        assert seeded.load()[0].items[1].added is True

    def test_mark_global(self, runner, seeded):
        result = runner.invoke(cli_module.cli, ["mark-global", "0", "--high-only"])
        assert result.exit_code == 0
        history = seeded.load()
        assert history[0].items[0].read is True
        assert history[1].items[0].read is True

    def test_mark_global_out_of_range(self, runner, seeded):
        assert runner.invoke(cli_module.cli, ["mark-global", "10"]).exit_code == 1

    def test_delete(self, runner, seeded):
        runner.invoke(cli_module.cli, ["delete", "1"])
        assert [s.id for s in seeded.load()] == [2]

    def test_clear_needs_confirmation(self, runner, seeded):
        runner.invoke(cli_module.cli, ["clear"], input="n\n")
        assert len(seeded.load()) == 2

        result = runner.invoke(cli_module.cli, ["clear", "--yes"])
        assert result.exit_code == 0
        assert seeded.load() == []

    def test_link_mark_added(self, runner, seeded):
        result = runner.invoke(cli_module.cli, ["link", "1", "0", "--mark-added"])
        assert result.exit_code == 0
        assert "calendar.google.com" in result.output
        assert all(s.items[0].added for s in seeded.load())


class TestExportCommand:
    """Test `radar export`."""

    def test_export_master(self, runner, seeded, tmp_path):
        result = runner.invoke(cli_module.cli, ["export", "--out", str(tmp_path)])
        assert result.exit_code == 0
        [path] = list(tmp_path.iterdir())
        assert path.name.startswith("MASTER_RADAR_")

    def test_export_session(self, runner, seeded, tmp_path):
        runner.invoke(cli_module.cli, ["export", "--session", "1", "--out", str(tmp_path)])
        [path] = list(tmp_path.iterdir())
        assert path.name.startswith("radar_export_")

    def test_export_nothing(self, runner, cli_store, tmp_path):
        result = runner.invoke(cli_module.cli, ["export", "--out", str(tmp_path)])
        assert "Nothing to export" in result.output
        assert list(tmp_path.iterdir()) == []
