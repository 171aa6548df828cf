#!/usr/bin/env python3
"""
Resolver: works out what GRUB will actually do with the stored settings.

  - the effective default entry (a top-level title) from GRUB_DEFAULT
  - the effective timeout from GRUB_TIMEOUT

Nothing here raises for bad values; they fall back to the first entry
or to TIMEOUT_DISABLED and get logged.
"""
import re
import logging
from typing import Dict, List, Sequence
from .MenuEntry import Entry, full_title

logger = logging.getLogger(__name__)

TIMEOUT_DISABLED = -2 # no GRUB_TIMEOUT at all
INT32_MIN, INT32_MAX = -2**31, 2**31 - 1
INT_RE = re.compile(r"[+-]?\d+")


def parse_int32(value: str) -> int:
    """ Strict base-10 parse within int32 range; raises ValueError otherwise """
    if not INT_RE.fullmatch(value):
        raise ValueError(f"not a base-10 integer: {value!r}")
    number = int(value, 10)
    if not INT32_MIN <= number <= INT32_MAX:
        raise ValueError(f"out of range: {value!r}")
    return number


def simple_titles(entries: Sequence[Entry]) -> List[str]:
    """ Titles of the bootable top-level entries, in menu order """
    return [e.title for e in entries if e.is_menuentry() and e.is_top_level()]


def full_titles(entries: Sequence[Entry]) -> List[str]:
    """ Every bootable entry, qualified by its submenu path """
    return [full_title(entries, idx) for idx, entry in enumerate(entries)
            if entry.is_menuentry()]


def resolve_default_entry(entries: Sequence[Entry], settings: Dict[str, str]) -> str:
    """
    Maps GRUB_DEFAULT onto a top-level entry title.

      - empty                   -> first entry
      - a top-level title       -> itself
      - a title in a submenu    -> first entry (nested defaults are not kept)
      - an index within range   -> the title at that index
      - anything else           -> first entry
    Returns '' if there are no top-level entries.
    """
    simple = simple_titles(entries)
    first = simple[0] if simple else ''
    value = settings.get('GRUB_DEFAULT', '')

    if not value:
        return first
    if value in simple:
        return value
    if value in full_titles(entries):
        return first

    try:
        index = parse_int32(value)
    except ValueError:
        logger.warning('invalid number, GRUB_DEFAULT=%r', value)
        return first
    if 0 <= index < len(simple):
        return simple[index]
    return first


def resolve_timeout(settings: Dict[str, str]) -> int:
    """
    GRUB_TIMEOUT as an int; TIMEOUT_DISABLED if empty or not a number.
    Negative values (-1 = wait forever) are passed through.
    """
    value = settings.get('GRUB_TIMEOUT', '')
    if not value:
        return TIMEOUT_DISABLED
    try:
        return parse_int32(value)
    except ValueError:
        logger.warning('invalid value, GRUB_TIMEOUT=%r', value)
        return TIMEOUT_DISABLED
