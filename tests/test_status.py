"""
Tests for the wg-show command line.
"""

import subprocess

import pytest
from click.testing import CliRunner

from wg_show import __version__
from wg_show import status
from wg_show.status import main


class FakeWg:
    """Stands in for subprocess.run and records the command line."""

    def __init__(self, output, returncode=0):
        self.output = output
        self.returncode = returncode
        self.calls = []

    def __call__(self, cmd, **kwargs):
        self.calls.append((cmd, kwargs))
        return subprocess.CompletedProcess(cmd, self.returncode, stdout=self.output)


@pytest.fixture
def fake_wg(monkeypatch, status_output):
    fake = FakeWg(status_output)
    monkeypatch.setattr(status.subprocess, "run", fake)
    return fake


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture
def settings_file(tmp_path):
    """Empty settings file so the user's own settings are never read."""
    path = tmp_path / "settings.toml"
    path.write_text("", encoding="utf-8")
    return str(path)


def invoke(runner, settings_file, config_dir, *args):
    return runner.invoke(
        main,
        ["--settings", settings_file, "--config-dir", str(config_dir), *args],
    )


class TestCommand:
    """Tests for running wg show."""

    def test_forwards_arguments(self, runner, fake_wg, settings_file, config_dir):
        """Test unknown arguments go to wg show."""
        result = invoke(runner, settings_file, config_dir, "wg0", "--show-table")
        assert result.exit_code == 0
        cmd, kwargs = fake_wg.calls[0]
        assert cmd == ["wg", "show", "wg0"]
        assert kwargs["stderr"] == subprocess.STDOUT

    def test_command_failure(self, runner, monkeypatch, settings_file, config_dir):
        """Test wg errors and exit codes are passed through."""
        monkeypatch.setattr(
            status.subprocess, "run",
            FakeWg("Unable to access interface: No such device\n", returncode=1),
        )
        result = invoke(runner, settings_file, config_dir, "wg7")
        assert result.exit_code == 1
        assert "No such device" in result.output

    def test_wg_missing(self, runner, monkeypatch, settings_file, config_dir):
        """Test a missing wg binary is reported."""
        def not_found(cmd, **kwargs):
            raise FileNotFoundError(cmd[0])
        monkeypatch.setattr(status.subprocess, "run", not_found)
        result = invoke(runner, settings_file, config_dir)
        assert result.exit_code == 1
        assert "wg not found" in result.output

    def test_version(self, runner):
        """Test -v prints the version."""
        result = runner.invoke(main, ["-v"])
        assert result.exit_code == 0
        assert result.output == f"wg-show version {__version__}\n"


class TestOutput:
    """Tests for the rendered output."""

    def test_annotated(self, runner, fake_wg, settings_file, config_dir):
        """Test annotated output is the default."""
        result = invoke(runner, settings_file, config_dir)
        assert result.exit_code == 0
        assert "peer: AAAA\n  nickname: Alice laptop\n" in result.output
        assert "\x1b[" not in result.output

    def test_table(self, runner, fake_wg, settings_file, config_dir):
        """Test table output."""
        result = invoke(runner, settings_file, config_dir, "--show-table")
        assert result.exit_code == 0
        assert result.output.startswith("Interface: wg0\n")
        assert "Nickname" in result.output

    def test_filter_and_sort(self, runner, fake_wg, settings_file, config_dir):
        """Test filters and sorting reach the output."""
        result = invoke(
            runner, settings_file, config_dir,
            "--filter-group", "Office", "--sort-handshake", "desc",
        )
        assert result.exit_code == 0
        assert result.output.index("peer: CCCC") < result.output.index("peer: AAAA")
        assert "peer: DDDD" not in result.output

    def test_filter_no_match(self, runner, fake_wg, settings_file, config_dir):
        """Test an empty selection in table mode."""
        result = invoke(
            runner, settings_file, config_dir,
            "--show-table", "--filter-maintainer", "Bobby",
        )
        assert result.exit_code == 0
        assert "No peers found." in result.output

    def test_bad_sort(self, runner, fake_wg, settings_file, config_dir):
        """Test the sort order is validated."""
        result = invoke(runner, settings_file, config_dir, "--sort-handshake", "up")
        assert result.exit_code == 2
        assert fake_wg.calls == []

    def test_missing_config(self, runner, fake_wg, status_output, settings_file, tmp_path):
        """Test an unreadable config falls back to the raw output."""
        result = invoke(runner, settings_file, tmp_path / "nowhere", "--show-table")
        assert result.exit_code == 0
        assert result.output == status_output

    def test_config_without_annotations(self, runner, fake_wg, status_output, settings_file, tmp_path):
        """Test a config without annotations falls back to the raw output."""
        (tmp_path / "wg0.conf").write_text("[Interface]\n[Peer]\nPublicKey = AAAA\n")
        result = invoke(runner, settings_file, tmp_path)
        assert result.exit_code == 0
        assert result.output == status_output

    def test_column_settings(self, runner, fake_wg, tmp_path, config_dir):
        """Test column widths come from the settings file."""
        path = tmp_path / "custom.toml"
        path.write_text("[columns]\nnickname = 8\nrule = 10\n", encoding="utf-8")
        result = invoke(runner, str(path), config_dir, "--show-table")
        assert result.exit_code == 0
        assert "─" * 10 + "\n" in result.output
        assert "Alice... bob" in result.output


TWO_INTERFACES = """\
interface: wg0
  public key: S0
  listening port: 51820

peer: AAAA
  allowed ips: 10.0.0.2/32

interface: wg1
  public key: S1
  listening port: 51821

peer: ZZZZ
  endpoint: 192.0.2.1:51821
  allowed ips: 10.1.0.2/32
"""


class TestSeveralInterfaces:
    """Tests for wg show listing more than one interface."""

    def test_other_interfaces_kept(self, runner, monkeypatch, settings_file, config_dir):
        """Test interfaces after the annotated one are written unchanged."""
        monkeypatch.setattr(status.subprocess, "run", FakeWg(TWO_INTERFACES))
        result = invoke(runner, settings_file, config_dir)
        assert result.exit_code == 0
        assert result.output.startswith("interface: wg0\n")
        assert "peer: AAAA\n  nickname: Alice laptop\n" in result.output
        assert result.output.endswith(TWO_INTERFACES[TWO_INTERFACES.index("interface: wg1"):])
        assert result.output.count("interface: wg1") == 1
