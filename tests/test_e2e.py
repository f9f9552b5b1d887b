"""End-to-end integration tests for confined-claude.

These tests drive the CLI through the full launch workflow with the Docker
calls mocked out. Everything on the host side (directories, credential copy,
.gitignore) runs for real inside a throwaway home directory.
"""

from __future__ import annotations

from collections.abc import Iterator
from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest
from click.testing import CliRunner

from confined_claude.cli import cli
from confined_claude.paths import get_shared_layout


@pytest.fixture
def mock_docker() -> Iterator[MagicMock]:
    """Mock every Docker touchpoint of the launch workflow.

    Yields the execute_container mock; its first positional argument is the
    full `docker run` command line.
    """
    with (
        patch("confined_claude.cli.run.check_docker"),
        patch("confined_claude.cli.run.ensure_image", return_value=False),
        patch("confined_claude.cli.run.docker.get_container_label", return_value=None),
        patch("confined_claude.cli.run.docker.remove_container", return_value=False),
        patch("confined_claude.gitignore.is_git_work_tree", return_value=False),
        patch("confined_claude.cli.run.execute_container", return_value=0) as mock_run,
    ):
        yield mock_run


def _launch(project_dir: Path, monkeypatch: pytest.MonkeyPatch, *args: str):
    monkeypatch.chdir(project_dir)
    return CliRunner().invoke(cli, list(args))


class TestFirstLaunch:
    """Launch without any host Claude configuration."""

    def test_no_host_config(
        self,
        project_dir: Path,
        fake_home: Path,
        mock_docker: MagicMock,
        monkeypatch: pytest.MonkeyPatch,
    ) -> None:
        """Test launch without a host config notes it and starts anyway."""
        result = _launch(project_dir, monkeypatch)

        assert result.exit_code == 0
        assert "No host Claude config found" in result.output
        assert "authenticate inside the container" in result.output
        shared = get_shared_layout()
        assert shared.claude_config.is_dir()
        assert list(shared.claude_config.iterdir()) == []
        assert not (fake_home / ".claude").exists()
        mock_docker.assert_called_once()

    def test_creates_directories(
        self,
        project_dir: Path,
        mock_docker: MagicMock,
        monkeypatch: pytest.MonkeyPatch,
    ) -> None:
        """Test launch creates per-project and shared directories."""
        result = _launch(project_dir, monkeypatch)

        assert result.exit_code == 0
        assert (project_dir / ".confined-claude" / "venvs").is_dir()
        assert (project_dir / ".confined-claude" / "local-bin").is_dir()
        assert all(path.is_dir() for path in get_shared_layout().skeleton)


class TestCredentialSync:
    """Credential and settings copy on launch."""

    def test_credentials_copied(
        self,
        project_dir: Path,
        fake_home: Path,
        mock_docker: MagicMock,
        monkeypatch: pytest.MonkeyPatch,
    ) -> None:
        """Test host credentials are copied and other files are not."""
        host = fake_home / ".claude"
        host.mkdir()
        (host / "credentials.json").write_text("A")
        (host / "history.jsonl").write_text("private")

        result = _launch(project_dir, monkeypatch)

        assert result.exit_code == 0
        assert "Synced credentials" in result.output
        config_dir = get_shared_layout().claude_config
        assert (config_dir / "credentials.json").read_text() == "A"
        assert not (config_dir / "history.jsonl").exists()

    def test_settings_not_overwritten(
        self,
        project_dir: Path,
        fake_home: Path,
        mock_docker: MagicMock,
        monkeypatch: pytest.MonkeyPatch,
    ) -> None:
        """Test container settings survive while credentials refresh."""
        config_dir = get_shared_layout().claude_config
        config_dir.mkdir(parents=True)
        (config_dir / "settings.json").write_text("B")
        (config_dir / "credentials.json").write_text("old")
        host = fake_home / ".claude"
        host.mkdir()
        (host / "settings.json").write_text("C")
        (host / "credentials.json").write_text("new")

        result = _launch(project_dir, monkeypatch)

        assert result.exit_code == 0
        assert (config_dir / "settings.json").read_text() == "B"
        assert (config_dir / "credentials.json").read_text() == "new"
        assert (host / "settings.json").read_text() == "C"

    def test_config_dir_override(
        self,
        project_dir: Path,
        tmp_path: Path,
        mock_docker: MagicMock,
        monkeypatch: pytest.MonkeyPatch,
    ) -> None:
        """Test CLAUDE_CONFIG_DIR selects the host config."""
        host = tmp_path / "alt-claude"
        host.mkdir()
        (host / ".credentials.json").write_text("alt")
        monkeypatch.setenv("CLAUDE_CONFIG_DIR", str(host))

        result = _launch(project_dir, monkeypatch)

        assert result.exit_code == 0
        config_dir = get_shared_layout().claude_config
        assert (config_dir / ".credentials.json").read_text() == "alt"


class TestContainerCommand:
    """The `docker run` command line the launcher hands to Docker."""

    def test_container_name_from_slug(
        self,
        project_dir: Path,
        mock_docker: MagicMock,
        monkeypatch: pytest.MonkeyPatch,
    ) -> None:
        """Test the instance name comes from the project slug."""
        result = _launch(project_dir, monkeypatch)

        assert result.exit_code == 0
        cmd = mock_docker.call_args[0][0]
        assert cmd[cmd.index("--name") + 1] == "confined-claude-myapp-2.0"
        assert f"{project_dir}:/home/claude/workspace" in cmd
        assert "confined-claude-myapp-2.0" in result.output

    def test_host_claude_dir_never_mounted(
        self,
        project_dir: Path,
        fake_home: Path,
        mock_docker: MagicMock,
        monkeypatch: pytest.MonkeyPatch,
    ) -> None:
        """Test the host ~/.claude is never mounted."""
        (fake_home / ".claude").mkdir()

        _launch(project_dir, monkeypatch)

        cmd = mock_docker.call_args[0][0]
        volumes = [cmd[i + 1] for i, arg in enumerate(cmd) if arg == "-v"]
        assert not any(v.startswith(f"{fake_home / '.claude'}:") for v in volumes)

    @pytest.mark.parametrize(
        ("flag", "tail", "banner"),
        [
            ("--yolo", ["claude", "--dangerously-skip-permissions"], "YOLO"),
            ("--shell", ["bash"], "Mode: shell"),
        ],
    )
    def test_launch_modes(
        self,
        project_dir: Path,
        mock_docker: MagicMock,
        monkeypatch: pytest.MonkeyPatch,
        flag: str,
        tail: list[str],
        banner: str,
    ) -> None:
        """Test --yolo and --shell entry commands and banners."""
        result = _launch(project_dir, monkeypatch, flag)

        assert result.exit_code == 0
        cmd = mock_docker.call_args[0][0]
        assert cmd[-len(tail) :] == tail
        assert banner in result.output

    def test_exit_status_propagated(
        self,
        project_dir: Path,
        mock_docker: MagicMock,
        monkeypatch: pytest.MonkeyPatch,
    ) -> None:
        """Test the container's exit status becomes the launcher's."""
        mock_docker.return_value = 137

        result = _launch(project_dir, monkeypatch)

        assert result.exit_code == 137
        assert "killed" in result.output

    def test_interrupt_exit_quiet(
        self,
        project_dir: Path,
        mock_docker: MagicMock,
        monkeypatch: pytest.MonkeyPatch,
    ) -> None:
        """Test exit 130 is not diagnosed."""
        mock_docker.return_value = 130

        result = _launch(project_dir, monkeypatch)

        assert result.exit_code == 130
        assert "exited with code" not in result.output


class TestCleanNothing:
    """--clean in a directory that was never launched."""

    def test_clean_without_data(
        self,
        project_dir: Path,
        monkeypatch: pytest.MonkeyPatch,
    ) -> None:
        """Test --clean with no data exits 0 without prompting."""
        monkeypatch.chdir(project_dir)
        result = CliRunner().invoke(cli, ["--clean"])

        assert result.exit_code == 0
        assert "nothing to clean" in result.output
        assert "Continue?" not in result.output
        assert list(project_dir.iterdir()) == []
