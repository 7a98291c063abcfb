"""Integration tests for robotctl CLI."""

import json

import pytest
from click.testing import CliRunner

from robotctl.cli import main


@pytest.fixture
def runner():
    """Create a CLI test runner."""
    return CliRunner()


@pytest.fixture(autouse=True)
def isolated_env(monkeypatch, tmp_path):
    """Keep user and system config files out of the tests."""
    monkeypatch.setattr("robotctl.core.config.DEFAULT_CONFIG_FILE", tmp_path / "none.yaml")
    monkeypatch.setattr("robotctl.core.config.SYSTEM_CONFIG_FILE", tmp_path / "none.yaml")
    for var in ("ROBOTCTL_CONFIG", "ROBOTCTL_MODE", "ROBOTCTL_WORK_MODE", "ROBOTCTL_LOG_LEVEL"):
        monkeypatch.delenv(var, raising=False)


@pytest.fixture
def robot_file(tmp_path):
    """Write a definition file with two robots."""
    path = tmp_path / "robots.yaml"
    path.write_text(
        """
robots:
  - name: blinky
    connections:
      arduino:
        adaptor: loopback
        devices:
          led:
            driver: loopback
            pin: 13
  - name: blinky
"""
    )
    return path


class TestMainCommand:
    """Tests for the main robotctl command."""

    def test_version(self, runner):
        """Test --version flag."""
        result = runner.invoke(main, ["--version"])
        assert result.exit_code == 0
        assert "robotctl" in result.output
        assert "0.1.0" in result.output

    def test_help(self, runner):
        """Test --help flag."""
        result = runner.invoke(main, ["--help"])
        assert result.exit_code == 0
        assert "Robot Controller" in result.output
        assert "check" in result.output
        assert "run" in result.output

    def test_invalid_config(self, runner, tmp_path):
        """Test a config file with an unknown mode is rejected."""
        config_file = tmp_path / "config.yaml"
        config_file.write_text("mode: sometimes\n")

        result = runner.invoke(main, ["-c", str(config_file), "kinds"])

        assert result.exit_code == 1
        assert "Invalid mode" in result.output


class TestKindsCommand:
    """Tests for the kinds command."""

    def test_kinds(self, runner):
        """Test adaptor and driver kinds are listed."""
        result = runner.invoke(main, ["kinds"])

        assert result.exit_code == 0
        assert "TYPE" in result.output
        for kind in ("loopback", "tcp", "http", "power"):
            assert kind in result.output


class TestCheckCommand:
    """Tests for the check command."""

    def test_valid(self, runner, robot_file):
        """Test valid definitions pass."""
        result = runner.invoke(main, ["check", str(robot_file)])

        assert result.exit_code == 0
        assert "2 robot(s) valid" in result.output

    def test_verbose(self, runner, robot_file):
        """Test verbose check reports each robot."""
        result = runner.invoke(main, ["-v", "check", str(robot_file)])

        assert result.exit_code == 0
        assert "blinky: ok" in result.output

    def test_invalid(self, runner, tmp_path):
        """Test invalid definitions are reported."""
        path = tmp_path / "bad.yaml"
        path.write_text("name: broken\nconnections:\n  arduino:\n    host: x\n")

        result = runner.invoke(main, ["check", str(path)])

        assert result.exit_code == 1
        assert "broken:" in result.output
        assert "no adaptor" in result.output

    def test_unknown_connection(self, runner, tmp_path):
        """Test a device naming a missing connection fails the check."""
        path = tmp_path / "bad.yaml"
        path.write_text(
            "name: r\ndevices:\n  led:\n    driver: loopback\n    connection: ghost\n"
        )

        result = runner.invoke(main, ["check", str(path)])

        assert result.exit_code == 1
        assert "r: No connection found with the name ghost" in result.output

    def test_unknown_kind(self, runner, tmp_path):
        """Test an unknown adaptor kind fails the check."""
        path = tmp_path / "bad.yaml"
        path.write_text("name: r\nconnections:\n  a:\n    adaptor: zigbee\n")

        result = runner.invoke(main, ["check", str(path)])

        assert result.exit_code == 1
        assert "Unsupported adaptor kind: zigbee" in result.output

    def test_empty_file(self, runner, tmp_path):
        """Test a file without robots is reported."""
        path = tmp_path / "empty.yaml"
        path.write_text("")

        result = runner.invoke(main, ["check", str(path)])

        assert result.exit_code == 1
        assert "No robots defined" in result.output

    def test_missing_file(self, runner):
        """Test a missing file is rejected by click."""
        result = runner.invoke(main, ["check", "/nonexistent/robots.yaml"])
        assert result.exit_code != 0


class TestShowCommand:
    """Tests for the show command."""

    def test_show(self, runner, robot_file):
        """Test robots are printed as JSON with unique names."""
        result = runner.invoke(main, ["show", str(robot_file)])

        assert result.exit_code == 0
        data = json.loads(result.output)
        assert [r["name"] for r in data["robots"]] == ["blinky", "blinky-1"]
        device = data["robots"][0]["devices"][0]
        assert device["name"] == "led"
        assert device["connection"] == "arduino"
        assert device["pin"] == 13
        assert data["commands"] == ["create_robot", "remove_robot"]

    def test_unknown_connection(self, runner, tmp_path):
        """Test a device naming a missing connection is reported."""
        path = tmp_path / "bad.yaml"
        path.write_text(
            "name: r\ndevices:\n  led:\n    driver: loopback\n    connection: ghost\n"
        )

        result = runner.invoke(main, ["show", str(path)])

        assert result.exit_code == 1
        assert "No connection found with the name ghost" in result.output


class TestRunCommand:
    """Tests for the run command."""

    def test_run_all_fail(self, runner, tmp_path):
        """Test run exits when no robot could start."""
        path = tmp_path / "robot.yaml"
        path.write_text("name: lamp\nconnections:\n  plug:\n    adaptor: http\n")

        result = runner.invoke(main, ["run", str(path)])

        assert result.exit_code == 1
        assert "Error: lamp:" in result.output
        assert "needs a host" in result.output

    def test_run_help(self, runner):
        """Test run command help."""
        result = runner.invoke(main, ["run", "--help"])
        assert result.exit_code == 0
        assert "--auto" in result.output
