#!/usr/bin/env python3
"""
BackupMgr: keeps copies of /etc/default/grub before it is rewritten.

Backup names are YYYYMMDD-HHMMSS-{CHECKSUM}.{TAG}.bak; the checksum is
what makes a second backup of identical content a no-op.
"""
import re
import shutil
import hashlib
import logging
from datetime import datetime
from pathlib import Path
from typing import Dict, Optional, Union

logger = logging.getLogger(__name__)

GRUB_DEFAULT_PATH = Path("/etc/default/grub")

GRUB_BACKUP_DIR = Path.home() / ".config" / "grub-mate" # The backup folder

BACKUP_FILENAME_PATTERN = re.compile(
    r"(\d{8}-\d{6})-([0-9a-fA-F]{8})\.([a-zA-Z0-9_-]+)\.bak$"
)
TAG_PATTERN = re.compile(r"^[a-zA-Z0-9_-]+$")


class BackupMgr:
    """
    Manages backups of the /etc/default/grub configuration file.
    """

    def __init__(self, target_path: Path = GRUB_DEFAULT_PATH, backup_dir: Path = GRUB_BACKUP_DIR):
        self.target_path = Path(target_path)
        self.backup_dir = Path(backup_dir)

    def _ensure_backup_dir(self):
        """ Creates the backup directory on first use. Raises OSError. """
        self.backup_dir.mkdir(parents=True, exist_ok=True)

    @staticmethod
    def calc_checksum(source: Union[Path, str]) -> str:
        """
        First 8 hex chars (uppercase) of the SHA256 of a file's contents
        or of a string. Returns '' for a missing file.
        """
        if isinstance(source, Path):
            if not source.exists():
                return ""
            content = source.read_bytes()
        elif isinstance(source, str):
            content = source.encode('utf-8')
        else:
            raise TypeError("Source must be a Path or a string.")
        return hashlib.sha256(content).hexdigest()[:8].upper()

    def get_backups(self) -> Dict[str, Path]:
        """ {checksum: path} of every well-named backup file """
        backups: Dict[str, Path] = {}
        if not self.backup_dir.is_dir():
            return backups
        for file_path in sorted(self.backup_dir.iterdir()):
            match = BACKUP_FILENAME_PATTERN.search(file_path.name)
            if match:
                backups[match.group(2).upper()] = file_path
        return backups

    def create_backup(self, tag: str, file_to_backup: Optional[Path] = None) -> Optional[Path]:
        """
        Copies the target (or file_to_backup) into the backup directory.

        Returns the new backup, the existing backup with the same content,
        or None if there is nothing to back up.
        """
        if not TAG_PATTERN.match(tag):
            raise ValueError(f"invalid backup tag: {tag!r}")
        target = Path(file_to_backup) if file_to_backup is not None else self.target_path
        if not target.exists():
            logger.warning('%s does not exist; skipping backup', target)
            return None

        checksum = self.calc_checksum(target)
        existing = self.get_backups()
        if checksum in existing:
            logger.info('%s is identical to backup %s; skipping', target, existing[checksum].name)
            return existing[checksum]

        self._ensure_backup_dir()
        timestamp = datetime.now().strftime("%Y%m%d-%H%M%S")
        backup_path = self.backup_dir / f"{timestamp}-{checksum}.{tag}.bak"
        shutil.copy2(target, backup_path)
        logger.info('created backup %s', backup_path.name)
        return backup_path

    def delete_backup(self, backup_file: Path) -> bool:
        """ Deletes one backup; only files inside the backup directory qualify """
        backup_file = Path(backup_file)
        if backup_file.parent.resolve() != self.backup_dir.resolve() \
                or not BACKUP_FILENAME_PATTERN.search(backup_file.name):
            logger.error('not a backup file: %s', backup_file)
            return False
        try:
            backup_file.unlink()
        except FileNotFoundError:
            return False
        logger.info('deleted backup %s', backup_file.name)
        return True

    def restore_backup(self, backup_file: Path, dest_path: Optional[Path] = None) -> Path:
        """
        Copies a backup over the target (or dest_path).
        Raises OSError on failure; writing /etc/default/grub requires root.
        """
        destination = Path(dest_path) if dest_path is not None else self.target_path
        shutil.copy2(backup_file, destination)
        logger.info('restored %s to %s', Path(backup_file).name, destination)
        return destination
