#!/usr/bin/env python3
"""
CannedConfig: the out-of-box configuration shipped as canned_config.yaml
  - '_distro_vars_': candidate locations of grub.cfg, /etc/default/grub
    and the grub-mkconfig command
  - 'params': default value and validation regex per GRUB parameter
"""
import re
from io import StringIO
from importlib.resources import files
from typing import Any, Dict, Optional
from ruamel.yaml import YAML

yaml = YAML()
yaml.preserve_quotes = True
yaml.default_flow_style = False


class CannedConfig:
    """ Loads canned_config.yaml from the grub_mate package """
    def __init__(self, yaml_string: Optional[str] = None):
        if yaml_string is None:
            resource_path = files('grub_mate') / 'canned_config.yaml'
            yaml_string = resource_path.read_text(encoding='utf-8')
        self.data = yaml.load(yaml_string) or {}
        self.params: Dict[str, Any] = self.data.get('params', {}) or {}
        self.distro_vars: Dict[str, Any] = self.data.get('_distro_vars_', {}) or {}

    def default_of(self, param: str) -> str:
        """ The documented default of param, or '' if unknown """
        cfg = self.params.get(param, {})
        return str(cfg.get('default', ''))

    def is_valid(self, param: str, value: str) -> bool:
        """ True if value matches the param's regex (unknown params always match) """
        cfg = self.params.get(param)
        if not cfg or not cfg.get('regex'):
            return True
        return bool(re.match(str(cfg['regex']), value))

    def dump(self) -> str:
        """ The configuration as YAML text """
        out = StringIO()
        yaml.dump(self.data, out)
        return out.getvalue()
