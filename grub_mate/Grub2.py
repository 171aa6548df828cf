#!/usr/bin/env python3
"""
Grub2: the in-memory model of a GRUB2 setup.

  - entries: the menu tree parsed from grub.cfg (read-only)
  - settings: the {GRUB_PARAM: value} store parsed from /etc/default/grub
  - default_entry / timeout: what GRUB will actually use, recomputed
    and written back into settings whenever settings change

Both structures are replaced wholesale on reload, under one lock, so a
reader never sees entries from one load paired with settings from another.
Nothing is written to disk until write_settings() is called.
"""
# pylint: disable=too-many-instance-attributes
import logging
import threading
from typing import Dict, List, Optional, Tuple
from .MenuEntry import Entry
from .GrubCfgParser import parse_entries
from .GrubFile import GrubFile, parse_settings, serialize_settings
from .GrubWriter import GrubWriter, GenerateCallback
from .CannedConfig import CannedConfig
from .DistroVars import DistroVars
from .BackupMgr import BackupMgr
from . import Resolver
from .Resolver import TIMEOUT_DISABLED

logger = logging.getLogger(__name__)


class Grub2:
    """ Entries + settings of one GRUB2 installation, and the way to regenerate grub.cfg """
    def __init__(self, grub_cfg: Optional[str] = None, etc_grub: Optional[str] = None,
                 update_grub: Optional[str] = None, canned: Optional[CannedConfig] = None,
                 backup_mgr: Optional[BackupMgr] = None):
        self.canned = canned if canned else CannedConfig()
        self.distro = DistroVars(self.canned.distro_vars, grub_cfg=grub_cfg,
                                 etc_grub=etc_grub, update_grub=update_grub)
        self.grub_file = GrubFile(self.distro.etc_grub)
        if backup_mgr is None:
            backup_mgr = BackupMgr(target_path=self.grub_file.file_path)
        self.grub_file.backup_mgr = backup_mgr
        self.grub_writer = GrubWriter(update_grub=self.distro.update_grub,
                                      grub_cfg=self.distro.grub_cfg,
                                      timeout=self.distro.update_timeout)
        self._lock = threading.RLock()
        self._entries: Tuple[Entry, ...] = ()
        self._settings: Dict[str, str] = {}
        self.default_entry = ''
        self.timeout = TIMEOUT_DISABLED

    # --- Loading ---
    def load(self):
        """
        Reads and parses grub.cfg and /etc/default/grub, then swaps both in
        under one lock. Raises OSError or GrubParseError on the first failure,
        leaving the previous entries and settings untouched.
        """
        entries = tuple(parse_entries(self._read_grub_cfg()))
        settings = parse_settings(self.grub_file.read_text())
        with self._lock:
            self._entries = entries
            self._settings = settings
            self._check_entries()
            self._sync_settings()

    def _read_grub_cfg(self) -> str:
        if not self.distro.grub_cfg:
            raise FileNotFoundError('no grub.cfg location known')
        try:
            with open(self.distro.grub_cfg, 'r', encoding='utf-8') as f:
                return f.read()
        except OSError as whynot:
            logger.error('cannot read %s [%s]', self.distro.grub_cfg, whynot)
            raise

    def _check_entries(self):
        if not any(e.is_menuentry() for e in self._entries):
            logger.warning('there is no menu entry in %s', self.distro.grub_cfg)

    def read_entries(self):
        """ Raises OSError or GrubParseError; the old entries are kept then """
        self.parse_entries(self._read_grub_cfg())

    def parse_entries(self, text: str):
        """ Replaces the entries only if text parses cleanly """
        entries = tuple(parse_entries(text))
        with self._lock:
            self._entries = entries
            self._check_entries()
            if self._settings:
                self._sync_settings()

    def read_settings(self):
        """ Raises OSError; the old settings are kept then """
        self.parse_settings(self.grub_file.read_text())

    def parse_settings(self, text: str):
        """ Replaces the settings, then brings GRUB_DEFAULT/GRUB_TIMEOUT in line """
        settings = parse_settings(text)
        with self._lock:
            self._settings = settings
            self._sync_settings()

    def _sync_settings(self):
        self.default_entry = Resolver.resolve_default_entry(self._entries, self._settings)
        self.timeout = Resolver.resolve_timeout(self._settings)
        self.set_default_entry(self.default_entry)
        self.set_timeout(self.timeout)

    # --- Getters ---
    @property
    def entries(self) -> Tuple[Entry, ...]:
        """ The parsed menu tree (flat; see Entry.parent) """
        with self._lock:
            return self._entries

    @property
    def settings(self) -> Dict[str, str]:
        """ A copy of the settings store """
        with self._lock:
            return dict(self._settings)

    def get_simple_entry_titles(self) -> List[str]:
        """ Bootable top-level titles """
        with self._lock:
            return Resolver.simple_titles(self._entries)

    def get_entry_titles(self) -> List[str]:
        """ Bootable titles qualified by their submenu path """
        with self._lock:
            return Resolver.full_titles(self._entries)

    @property
    def gfxmode(self) -> str:
        """ GRUB_GFXMODE, or its documented default ('auto') when unset """
        with self._lock:
            return self._settings.get('GRUB_GFXMODE') or self.canned.default_of('GRUB_GFXMODE')

    @property
    def theme(self) -> str:
        """ GRUB_THEME, or '' when unset """
        with self._lock:
            return self._settings.get('GRUB_THEME', '')

    # --- Mutators (in memory only) ---
    def set_default_entry(self, title: str):
        """ Stores title as GRUB_DEFAULT (unresolvable titles fall back to the first entry) """
        with self._lock:
            self._settings['GRUB_DEFAULT'] = title
            self.default_entry = Resolver.resolve_default_entry(self._entries, self._settings)

    def set_timeout(self, timeout: int):
        """
        TIMEOUT_DISABLED clears GRUB_TIMEOUT; raises ValueError (store
        unchanged) if timeout does not fit in 32 bits
        """
        value = '' if timeout == TIMEOUT_DISABLED else str(Resolver.parse_int32(str(int(timeout))))
        with self._lock:
            self._settings['GRUB_TIMEOUT'] = value
            self.timeout = Resolver.resolve_timeout(self._settings)

    def set_gfxmode(self, gfxmode: str):
        with self._lock:
            self._settings['GRUB_GFXMODE'] = gfxmode

    def set_theme(self, theme_file: str):
        """ An empty path unsets GRUB_THEME on the next write """
        with self._lock:
            self._settings['GRUB_THEME'] = theme_file

    # --- Persistence ---
    def get_setting_content_to_save(self) -> str:
        """ The settings in /etc/default/grub format """
        with self._lock:
            return serialize_settings(self._settings)

    def write_settings(self):
        """ Writes the settings to /etc/default/grub; raises OSError """
        if not self.distro.etc_grub:
            raise FileNotFoundError('no /etc/default/grub location known')
        self.grub_file.write_text(self.get_setting_content_to_save())

    def generate_grub_config(self, callback: Optional[GenerateCallback] = None) -> int:
        """ Regenerates grub.cfg in the background; see GrubWriter.generate() """
        return self.grub_writer.generate(callback)
