"""Tests for the CLI."""

from unittest.mock import patch

from typer.testing import CliRunner

from docker_exporter.cli import app
from docker_exporter.core.exceptions import GatewayUnavailableError
from docker_exporter.exporter import DockerExporter
from tests.fakes import WEB_ID

runner = CliRunner()


class TestCli:
    """Tests for CLI commands."""

    def test_init_config_round_trips(self, tmp_path):
        output = tmp_path / "exporter.yaml"
        result = runner.invoke(app, ["init-config", "--output", str(output)])
        assert result.exit_code == 0

        result = runner.invoke(app, ["show-config", "--config", str(output)])
        assert result.exit_code == 0
        assert "9333" in result.stdout

    def test_show_config_bad_file(self, tmp_path):
        result = runner.invoke(app, ["show-config", "--config", str(tmp_path / "nope.yaml")])
        assert result.exit_code == 1

    def test_scrape(self, gateway):
        with patch(
            "docker_exporter.cli.DockerExporter.from_settings",
            side_effect=lambda settings: DockerExporter(gateway, settings),
        ):
            result = runner.invoke(app, ["scrape"])

        assert result.exit_code == 0
        assert f'containerId="{WEB_ID}"' in result.stdout
        assert gateway.closed

    def test_scrape_daemon_unreachable(self):
        with patch(
            "docker_exporter.cli.DockerExporter.from_settings",
            side_effect=GatewayUnavailableError("Docker daemon is not reachable"),
        ):
            result = runner.invoke(app, ["scrape"])

        assert result.exit_code == 1
