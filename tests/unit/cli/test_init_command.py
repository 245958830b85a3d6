"""Unit tests for binship init."""

from __future__ import annotations

from pathlib import Path

from click.testing import CliRunner
import yaml

from binship.cli.commands.init import init, render_config
from binship.config import DeployConfig, RemoteConfig


class TestRenderConfig:
    """Tests for the binship.yaml template."""

    def test_round_trips_through_loader(self, tmp_path: Path) -> None:
        config = DeployConfig(remote=RemoteConfig(host="staging", elevate="", backup=True))
        path = tmp_path / "binship.yaml"
        path.write_text(render_config(config))

        assert DeployConfig.from_yaml(path) == config

    def test_comments_show_commands(self) -> None:
        rendered = render_config(DeployConfig())

        assert "# binship deploy runs" in rendered
        assert "scp target/x86_64-unknown-linux-musl/release/hellquotes-bot titanic:~" in rendered
        assert "ssh -t titanic 'sudo mv ~/hellquotes-bot /srv/quotesbot/'" in rendered


class TestInitCommand:
    """Tests for the init command."""

    def test_creates_config(self, isolated_runner: CliRunner) -> None:
        result = isolated_runner.invoke(init)

        assert result.exit_code == 0
        assert "Created binship.yaml" in result.output
        data = yaml.safe_load(Path("binship.yaml").read_text())
        assert data["remote"]["host"] == "titanic"
        assert data["build"]["target"] == "x86_64-unknown-linux-musl"

    def test_applies_options(self, isolated_runner: CliRunner) -> None:
        result = isolated_runner.invoke(
            init, ["--host", "staging", "--binary", "my-service", "--service-dir", "/srv/svc/"]
        )

        assert result.exit_code == 0
        config = DeployConfig.from_yaml("binship.yaml")
        assert config.remote.host == "staging"
        assert config.build.binary == "my-service"
        assert config.remote.service_dir == "/srv/svc/"

    def test_refuses_to_overwrite(self, isolated_runner: CliRunner) -> None:
        Path("binship.yaml").write_text("# mine\n")

        result = isolated_runner.invoke(init)

        assert result.exit_code == 1
        assert "already exists" in result.output
        assert Path("binship.yaml").read_text() == "# mine\n"

    def test_force_overwrites(self, isolated_runner: CliRunner) -> None:
        Path("binship.yaml").write_text("# mine\n")

        result = isolated_runner.invoke(init, ["--force"])

        assert result.exit_code == 0
        assert "Overwrote existing binship.yaml" in result.output
        assert "hellquotes-bot" in Path("binship.yaml").read_text()

    def test_invalid_binary_rejected(self, isolated_runner: CliRunner) -> None:
        result = isolated_runner.invoke(init, ["--binary", "bin/bot"])

        assert result.exit_code == 1
        assert not Path("binship.yaml").exists()
