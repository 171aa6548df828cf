#!/usr/bin/env python3
"""
MenuEntry: one node of the grub.cfg menu tree.

Entries live in a flat list owned by whoever parsed them; the tree is
recovered through `parent`, which is an index into that same list
(None for top-level entries).
"""
import enum
from dataclasses import dataclass
from typing import List, Optional, Sequence

FULL_TITLE_SEP = '>' # same separator GRUB_DEFAULT uses for nested entries


class EntryKind(enum.Enum):
    """ The two directives that open a menu scope """
    MENUENTRY = 'menuentry'
    SUBMENU = 'submenu'


@dataclass(frozen=True)
class Entry:
    """
    A 'menuentry' or 'submenu' found in grub.cfg.

    sibling_index counts entries of the same kind within the same
    submenu (or at top level), starting at 0.
    """
    kind: EntryKind
    title: str
    sibling_index: int
    level: int = 0
    parent: Optional[int] = None

    def is_menuentry(self) -> bool:
        """ True for bootable entries """
        return self.kind is EntryKind.MENUENTRY

    def is_top_level(self) -> bool:
        """ True if not nested in any submenu """
        return self.parent is None


def ancestry(entries: Sequence[Entry], idx: int) -> List[Entry]:
    """
    Returns the chain from the outermost submenu down to entries[idx].
    Parents always precede their children in the list, so the walk
    strictly decreases the index and terminates.
    """
    chain = []
    pos: Optional[int] = idx
    while pos is not None:
        entry = entries[pos]
        chain.insert(0, entry)
        if entry.parent is not None and entry.parent >= pos:
            raise ValueError(f'entry {pos} has a non-preceding parent {entry.parent}')
        pos = entry.parent
    return chain


def full_title(entries: Sequence[Entry], idx: int) -> str:
    """ e.g., 'Advanced options for Ubuntu>Ubuntu, with Linux 6.8.0' """
    return FULL_TITLE_SEP.join(e.title for e in ancestry(entries, idx))
