"""Tests for the grub-mate command line (no root, no grub-mkconfig)."""

from unittest.mock import patch

import pytest
import yaml

from grub_mate import main as cli
from grub_mate.BackupMgr import BackupMgr


@pytest.fixture
def run(tmp_path, grub_files, monkeypatch):
    """Runs main() against the temp files with backups kept in tmp_path."""
    grub_cfg, etc_grub = grub_files
    real_init = BackupMgr.__init__

    def init(self, target_path=etc_grub, backup_dir=tmp_path / "backups"):
        real_init(self, target_path=target_path, backup_dir=tmp_path / "backups")

    monkeypatch.setattr(BackupMgr, "__init__", init)

    def _run(*args):
        return cli.main(["--grub-cfg", str(grub_cfg), "--etc-grub", str(etc_grub), *args])
    return _run


def test_show_is_the_default_action(run, capsys):
    assert run() == 0
    out = capsys.readouterr().out
    assert "DefaultEntry: 'Ubuntu'" in out
    assert "Timeout:      5" in out
    assert "Gfxmode:      auto" in out


def test_list(run, capsys):
    assert run("--list") == 0
    out = capsys.readouterr().out
    assert "- [0] Ubuntu *" in out
    assert "+ [0] Advanced options for Ubuntu" in out
    assert "  - [1] Ubuntu, with Linux 6.8.0-45-generic (recovery mode)" in out


def test_dump(run, capsys):
    assert run("--dump") == 0
    data = yaml.safe_load(capsys.readouterr().out)
    assert data["default_entry"] == "Ubuntu"
    assert data["timeout"] == 5
    assert data["entries"][2]["parent"] == 1
    assert data["full_titles"][1] == "Advanced options for Ubuntu>Ubuntu, with Linux 6.8.0-45-generic"


def test_set_and_write(run, grub_files, capsys):
    _, etc_grub = grub_files
    assert run("--set-timeout", "-1", "--set-default", "1", "--set-gfxmode", "1024x768", "--write") == 0
    text = etc_grub.read_text()
    assert 'GRUB_TIMEOUT="-1"\n' in text
    assert 'GRUB_DEFAULT="1"\n' in text
    assert 'GRUB_GFXMODE="1024x768"\n' in text
    assert "resolves to 'Memory test (memtest86+x64.efi)'" in capsys.readouterr().out


def test_disable_timeout(run, grub_files):
    _, etc_grub = grub_files
    assert run("--set-timeout", "-2", "--write") == 0
    assert "GRUB_TIMEOUT" not in etc_grub.read_text()


def test_invalid_values(run, grub_files):
    _, etc_grub = grub_files
    before = etc_grub.read_text()
    assert run("--set-timeout", "soon", "--write") == 2
    assert run("--set-gfxmode", "huge", "--write") == 2
    assert etc_grub.read_text() == before


def test_timeout_too_large(run, grub_files, capsys):
    _, etc_grub = grub_files
    before = etc_grub.read_text()
    assert run("--set-timeout", "99999999999", "--write") == 2
    assert "ERR: invalid timeout" in capsys.readouterr().err
    assert etc_grub.read_text() == before


def test_broken_menu(run, grub_files, capsys):
    grub_cfg, _ = grub_files
    grub_cfg.write_text("menuentry 'broken {\n}\n")
    assert run() == 1
    assert "ERR: cannot load" in capsys.readouterr().err


def test_update(run, capsys):
    with patch("grub_mate.GrubWriter.GrubWriter.run_grub_update", return_value=(True, "")):
        assert run("--update") == 0
    assert "OK: grub.cfg regeneration [id=1]" in capsys.readouterr().out


def test_update_failure(run):
    with patch("grub_mate.GrubWriter.GrubWriter.run_grub_update", return_value=(False, "nope")):
        assert run("--update") == 1
