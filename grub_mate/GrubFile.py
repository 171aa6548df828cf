#!/usr/bin/env python3
"""
GrubFile:
  On READING:
    - parses /etc/default/grub (or substitute) into {GRUB_PARAM: value}
    - only lines starting with 'GRUB_' count; comments, blank lines and
      other shell variables are ignored
    - one layer of surrounding quotes is removed from each value
    - if a param appears more than once, the last line wins
  On WRITING:
    - one line per param with a non-empty value, as PARAM="value"
    - params with an empty value are dropped (that is how a param is unset)
    - the file being replaced is backed up first (see BackupMgr)
"""
# pylint: disable=line-too-long
import re
import logging
from pathlib import Path
from typing import Dict, Optional, Union
from .BackupMgr import BackupMgr

logger = logging.getLogger(__name__)

ESCAPED_RE = re.compile(r'\\([\\"$`])') # what a shell honors after '\' in "..."
NEEDS_ESCAPE_RE = re.compile(r'([\\"$`])')


def unquote_value(value: str) -> str:
    """
    Strips one layer of matching quotes.

    Example: '"quiet splash"' -> 'quiet splash'
    Example: "'Ubuntu'" -> 'Ubuntu'
    Example: '"say \\"hi\\""' -> 'say "hi"'
    Example: '5' -> '5'
    """
    if len(value) >= 2 and value[0] == value[-1] and value[0] in ('"', "'"):
        inner = value[1:-1]
        if value[0] == '"':
            inner = ESCAPED_RE.sub(r'\1', inner)
        return inner
    return value


def quote_value(value: str) -> str:
    """ Inverse of unquote_value() for double quotes """
    return '"' + NEEDS_ESCAPE_RE.sub(r'\\\1', value) + '"'


def parse_settings(text: str) -> Dict[str, str]:
    """ Parses /etc/default/grub text into {GRUB_PARAM: unquoted value} """
    settings: Dict[str, str] = {}
    for line in text.splitlines():
        line = line.strip()
        if not line.startswith('GRUB_'):
            continue
        key, sep, value = line.partition('=')
        if not sep:
            logger.warning('ignoring setting line without "=": %r', line)
            continue
        key = key.strip()
        settings[key] = unquote_value(value.strip())
        logger.debug('found setting: %s=%s', key, value)
    return settings


def serialize_settings(settings: Dict[str, str]) -> str:
    """ Renders settings in /etc/default/grub format; empty values are left out """
    lines = []
    for key, value in settings.items():
        if value:
            lines.append(f'{key}={quote_value(value)}\n')
    return ''.join(lines)


class GrubFile:
    """
    Reads and writes the /etc/default/grub file itself.
    Parsing is left to parse_settings() so callers can keep their
    previous settings when a read fails.
    """
    std_location = '/etc/default/grub'

    def __init__(self, file_path: Optional[Union[str, Path]] = None,
                 backup_mgr: Optional[BackupMgr] = None):
        self.file_path = Path(file_path if file_path else GrubFile.std_location)
        self.backup_mgr = backup_mgr

    def read_text(self) -> str:
        """ Raises OSError if the file cannot be read """
        try:
            return self.file_path.read_text(encoding='utf-8')
        except OSError as whynot:
            logger.error('cannot read %s [%s]', self.file_path, whynot)
            raise

    def read_file(self) -> Dict[str, str]:
        """ Reads and parses the file """
        return parse_settings(self.read_text())

    def write_text(self, content: str, tag: str = 'pre-write') -> Path:
        """
        Replaces the file with content, backing up the old one first
        (when a BackupMgr was given and the file exists).
        Raises OSError on failure.
        """
        if self.backup_mgr is not None and self.file_path.exists():
            self.backup_mgr.create_backup(tag, file_to_backup=self.file_path)
        try:
            self.file_path.write_text(content, encoding='utf-8')
        except OSError as whynot:
            logger.error('cannot write %s [%s]', self.file_path, whynot)
            raise
        logger.info('wrote %s', self.file_path)
        return self.file_path

    def write_file(self, settings: Dict[str, str], tag: str = 'pre-write') -> Path:
        """ Serializes and writes settings """
        return self.write_text(serialize_settings(settings), tag=tag)
