"""
Tests for BackupMgr.
"""

import pytest

from grub_mate.BackupMgr import BackupMgr


@pytest.fixture
def mgr(tmp_path):
    target = tmp_path / "grub"
    target.write_text("GRUB_TIMEOUT=5\nGRUB_DEFAULT=0\n")
    return BackupMgr(target_path=target, backup_dir=tmp_path / "backups")


def test_checksum_of_string_and_file(mgr):
    text = mgr.target_path.read_text()
    assert mgr.calc_checksum(text) == mgr.calc_checksum(mgr.target_path)
    assert len(mgr.calc_checksum(text)) == 8


def test_checksum_of_missing_file(mgr, tmp_path):
    assert mgr.calc_checksum(tmp_path / "nope") == ""


def test_create_backup(mgr):
    backup = mgr.create_backup("orig")
    assert backup.name.endswith(".orig.bak")
    assert backup.read_text() == mgr.target_path.read_text()
    assert list(mgr.get_backups().values()) == [backup]


def test_identical_content_is_not_backed_up_twice(mgr):
    first = mgr.create_backup("orig")
    assert mgr.create_backup("again") == first
    assert len(mgr.get_backups()) == 1


def test_changed_content_gets_new_backup(mgr):
    mgr.create_backup("orig")
    mgr.target_path.write_text("GRUB_TIMEOUT=2\n")
    mgr.create_backup("custom")
    assert len(mgr.get_backups()) == 2


def test_bad_tag(mgr):
    with pytest.raises(ValueError):
        mgr.create_backup("no spaces")


def test_missing_target(tmp_path):
    mgr = BackupMgr(target_path=tmp_path / "missing", backup_dir=tmp_path / "b")
    assert mgr.create_backup("orig") is None
    assert mgr.get_backups() == {}


def test_restore_and_delete(mgr):
    original = mgr.target_path.read_text()
    backup = mgr.create_backup("orig")
    mgr.target_path.write_text("GRUB_TIMEOUT=1\n")

    mgr.restore_backup(backup)
    assert mgr.target_path.read_text() == original

    assert mgr.delete_backup(backup) is True
    assert mgr.get_backups() == {}
    assert mgr.delete_backup(backup) is False


def test_delete_refuses_foreign_files(mgr):
    assert mgr.delete_backup(mgr.target_path) is False
    assert mgr.target_path.exists()
