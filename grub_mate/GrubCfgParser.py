#!/usr/bin/env python3
"""
GrubCfgParser:
  - scans a generated grub.cfg (the output of grub-mkconfig)
  - rebuilds the menu tree from 'menuentry' / 'submenu' lines and the
    bare '}' lines that close them
  - everything else (scripting, 'if' blocks, linux/initrd lines) is ignored

grub-mkconfig always puts a closing brace on a line of its own, which is
the only reason counting '}' lines is enough here.
"""
# pylint: disable=line-too-long
import re
import logging
from typing import Dict, List, Optional, Tuple
from .MenuEntry import Entry, EntryKind

logger = logging.getLogger(__name__)

ENTRY_RE_SINGLE = re.compile(r"^\s*(menuentry|submenu)\s+'(.*?)'.*$")
ENTRY_RE_DOUBLE = re.compile(r'^\s*(menuentry|submenu)\s+"(.*?)".*$')


class GrubParseError(ValueError):
    """ A menu directive that cannot be understood; the whole parse is void """


def parse_title(line: str) -> Optional[str]:
    """
    Extracts the quoted title of a menuentry/submenu line.

    Example: "menuentry 'Ubuntu' --class ubuntu $menuentry_id_option 'gnulinux-simple-x'" -> 'Ubuntu'
    Returns None when neither quote style matches.
    """
    for regex in (ENTRY_RE_SINGLE, ENTRY_RE_DOUBLE):
        mat = regex.match(line)
        if mat:
            return mat.group(2)
    return None


def parse_entries(text: str) -> List[Entry]:
    """
    Parses grub.cfg text into a flat, ordered list of Entry values.

    Raises GrubParseError on the first malformed or misplaced directive;
    nothing parsed before the error is returned. A file that ends with
    open scopes (truncated) is accepted as is.
    """
    entries: List[Entry] = []
    in_menuentry = False
    level = 0
    counts: Dict[Tuple[int, EntryKind], int] = {}
    parents: List[Optional[int]] = [None] # top of stack is the open submenu

    def add_entry(kind: EntryKind, line: str) -> Entry:
        if in_menuentry:
            msg = f"a '{kind.value}' directive was detected inside the scope of a menuentry: {line!r}"
            logger.error(msg)
            raise GrubParseError(msg)
        title = parse_title(line)
        if title is None:
            msg = f"parse entry title failed from: {line!r}"
            logger.error(msg)
            raise GrubParseError(msg)
        key = (level, kind)
        entry = Entry(kind=kind, title=title, sibling_index=counts.get(key, 0),
                      level=level, parent=parents[-1])
        counts[key] = entry.sibling_index + 1
        entries.append(entry)
        logger.debug('found entry: [%d] %s%s', level, '  ' * level, title)
        return entry

    for raw_line in text.splitlines():
        line = raw_line.strip()
        if line.startswith('menuentry '):
            add_entry(EntryKind.MENUENTRY, line)
            in_menuentry = True
        elif line.startswith('submenu '):
            add_entry(EntryKind.SUBMENU, line)
            parents.append(len(entries) - 1)
            level += 1
            for kind in EntryKind:
                counts[(level, kind)] = 0
        elif line == '}':
            if in_menuentry:
                in_menuentry = False
            elif level > 0:
                parents.pop()
                level -= 1
            # a stray '}' at top level is tolerated

    return entries


def get_top_level_grub_entries(grub_cfg: str = '/boot/grub/grub.cfg') -> List[str]:
    """
    Returns the titles of the bootable top-level entries of grub_cfg,
    or an empty list if the file cannot be read or parsed.
    """
    try:
        with open(grub_cfg, 'r', encoding='utf-8') as f:
            entries = parse_entries(f.read())
    except (OSError, GrubParseError) as whynot:
        logger.warning('cannot get menu entries from %s [%s]', grub_cfg, whynot)
        return []
    return [e.title for e in entries if e.is_menuentry() and e.is_top_level()]


def main():
    """ Print the menu tree of a grub.cfg """
    import sys
    path = sys.argv[1] if len(sys.argv) > 1 else '/boot/grub/grub.cfg'
    with open(path, 'r', encoding='utf-8') as f:
        entries = parse_entries(f.read())
    for entry in entries:
        mark = '+' if entry.kind is EntryKind.SUBMENU else '-'
        print(f"{'  ' * entry.level}{mark} [{entry.sibling_index}] {entry.title}")

if __name__ == '__main__':
    main()
