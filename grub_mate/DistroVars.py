#!/usr/bin/env python3
"""
DistroVars: finds where this distro keeps GRUB's files and tools
(e.g., /boot/grub vs /boot/grub2, grub-mkconfig vs grub2-mkconfig).
"""
import os
import shutil
import logging
from typing import List, Optional

logger = logging.getLogger(__name__)


class DistroVars:
    """
    Resolves grub_cfg, etc_grub and update_grub from the candidate lists
    under '_distro_vars_'; explicit overrides are taken as given.
    """
    def __init__(self, vars_cfg: dict, grub_cfg: Optional[str] = None,
                 etc_grub: Optional[str] = None, update_grub: Optional[str] = None):
        def candidates(key):
            return list(vars_cfg.get(key, []) or [])

        self.grub_cfg = grub_cfg or self._find_first_path(candidates('grub_cfg'))
        self.etc_grub = etc_grub or self._find_first_path(candidates('etc_grub'))
        self.update_grub = update_grub or self._find_binary(candidates('update_grub'))
        self.update_timeout = int(vars_cfg.get('update_timeout', 30))

        self.missing = self._check()

    @staticmethod
    def _find_first_path(paths: List[str]) -> Optional[str]:
        for path in paths:
            if os.path.exists(path):
                return path
        return None

    @staticmethod
    def _find_binary(commands: List[str]) -> Optional[str]:
        for cmd in commands:
            resolved = shutil.which(cmd)
            if resolved:
                return resolved
        return None

    def _check(self) -> List[str]:
        """ Logs what could not be found; returns the names of the missing pieces """
        missing = []
        if not self.etc_grub:
            missing.append('etc_grub')
            logger.warning('/etc/default/grub not found (settings cannot be loaded)')
        if not self.grub_cfg:
            missing.append('grub_cfg')
            logger.warning('grub.cfg not found (menu entries cannot be loaded)')
        if not self.update_grub:
            missing.append('update_grub')
            logger.warning('grub-mkconfig not found (grub.cfg cannot be regenerated)')
        return missing

    @property
    def is_crippled(self) -> bool:
        """ True if something needed for a full load/write/update cycle is missing """
        return bool(self.missing)
