#!/usr/bin/env python3
"""
grub-mate: show and adjust the default boot entry, timeout, theme and
graphics mode of a GRUB2 installation.

Changes are made in memory and only reach /etc/default/grub with
--write; --update then regenerates grub.cfg with grub-mkconfig.
"""
# pylint: disable=broad-exception-caught
import os
import sys
import queue
from argparse import ArgumentParser
import yaml
from .AppLog import setup_logging
from .Grub2 import Grub2
from .GrubCfgParser import GrubParseError
from .MenuEntry import EntryKind
from .Resolver import TIMEOUT_DISABLED


def rerun_module_as_root(module_name):
    """ rerun using the module name """
    if os.geteuid() != 0: # Re-run the script with sudo
        vp = ['sudo', sys.executable, '-m', module_name] + sys.argv[1:]
        os.execvp('sudo', vp)


def build_parser() -> ArgumentParser:
    """ The command line of grub-mate """
    parser = ArgumentParser(description='grub-mate: GRUB2 default entry and timeout helper')
    parser.add_argument('--grub-cfg', default=None,
                        help='generated menu file (default: found per distro)')
    parser.add_argument('--etc-grub', default=None,
                        help='settings file (default: /etc/default/grub)')
    parser.add_argument('--list', action='store_true',
                        help='show the menu tree')
    parser.add_argument('--show', action='store_true',
                        help='show effective default entry, timeout, gfxmode and theme')
    parser.add_argument('--dump', action='store_true',
                        help='dump entries and settings as YAML')
    parser.add_argument('--set-default', metavar='TITLE', default=None,
                        help='default entry (title or top-level index)')
    parser.add_argument('--set-timeout', metavar='SECONDS', default=None,
                        help=f'menu timeout; {TIMEOUT_DISABLED} removes GRUB_TIMEOUT')
    parser.add_argument('--set-gfxmode', metavar='MODE', default=None,
                        help='menu resolution, e.g. 1024x768 or auto')
    parser.add_argument('--set-theme', metavar='PATH', default=None,
                        help="theme.txt path ('' to unset)")
    parser.add_argument('--write', action='store_true',
                        help='write the settings to /etc/default/grub (needs root)')
    parser.add_argument('--update', action='store_true',
                        help='regenerate grub.cfg with grub-mkconfig (needs root)')
    parser.add_argument('-v', '--verbose', action='count', default=0,
                        help='more logging (-vv for debug)')
    return parser


def apply_changes(grub: Grub2, opts) -> bool:
    """ Applies the --set-* options; returns False on an invalid value """
    canned = grub.canned
    if opts.set_timeout is not None:
        if not canned.is_valid('GRUB_TIMEOUT', opts.set_timeout):
            print(f'ERR: invalid timeout {opts.set_timeout!r}', file=sys.stderr)
            return False
        try:
            grub.set_timeout(int(opts.set_timeout))
        except ValueError as whynot:
            print(f'ERR: invalid timeout {opts.set_timeout!r} [{whynot}]', file=sys.stderr)
            return False
    if opts.set_gfxmode is not None:
        if not canned.is_valid('GRUB_GFXMODE', opts.set_gfxmode):
            print(f'ERR: invalid gfxmode {opts.set_gfxmode!r}', file=sys.stderr)
            return False
        grub.set_gfxmode(opts.set_gfxmode)
    if opts.set_theme is not None:
        grub.set_theme(opts.set_theme)
    if opts.set_default is not None:
        grub.set_default_entry(opts.set_default)
        if grub.default_entry != opts.set_default:
            print(f'Note: {opts.set_default!r} resolves to {grub.default_entry!r}')
    return True


def show_tree(grub: Grub2):
    """ Prints the menu entries, indented per submenu """
    for entry in grub.entries:
        mark = '+' if entry.kind is EntryKind.SUBMENU else '-'
        star = ' *' if entry.is_top_level() and entry.title == grub.default_entry else ''
        print(f"{'  ' * entry.level}{mark} [{entry.sibling_index}] {entry.title}{star}")


def show_summary(grub: Grub2):
    """ Prints the effective values """
    timeout = 'disabled' if grub.timeout == TIMEOUT_DISABLED else grub.timeout
    print(f'DefaultEntry: {grub.default_entry!r}')
    print(f'Timeout:      {timeout}')
    print(f'Gfxmode:      {grub.gfxmode}')
    print(f'Theme:        {grub.theme!r}')


def dump_model(grub: Grub2) -> str:
    """ Entries, titles and settings as a YAML document """
    data = {
        'entries': [{'kind': e.kind.value, 'title': e.title, 'index': e.sibling_index,
                     'level': e.level, 'parent': e.parent} for e in grub.entries],
        'simple_titles': grub.get_simple_entry_titles(),
        'full_titles': grub.get_entry_titles(),
        'default_entry': grub.default_entry,
        'timeout': grub.timeout,
        'settings': grub.settings,
    }
    return yaml.safe_dump(data, default_flow_style=False, sort_keys=False)


def run_update(grub: Grub2) -> bool:
    """ Regenerates grub.cfg and waits for the outcome """
    results = queue.Queue()
    gen_id = grub.generate_grub_config(lambda *pair: results.put(pair))
    print(f'Regenerating {grub.distro.grub_cfg} [id={gen_id}] ...')
    done_id, ok = results.get()
    grub.grub_writer.shutdown()
    print(f"{'OK' if ok else 'ERR'}: grub.cfg regeneration [id={done_id}]")
    return ok


def main(argv=None) -> int:
    """ grub-mate entry point """
    opts = build_parser().parse_args(argv)
    setup_logging(('WARNING', 'INFO', 'DEBUG')[min(opts.verbose, 2)])
    if (opts.write or opts.update) and argv is None:
        rerun_module_as_root('grub_mate.main')

    grub = Grub2(grub_cfg=opts.grub_cfg, etc_grub=opts.etc_grub)
    try:
        grub.load()
    except (OSError, GrubParseError) as whynot:
        print(f'ERR: cannot load GRUB configuration [{whynot}]', file=sys.stderr)
        return 1

    if not apply_changes(grub, opts):
        return 2

    if opts.list:
        show_tree(grub)
    if opts.show or not (opts.list or opts.dump or opts.write or opts.update):
        show_summary(grub)
    if opts.dump:
        print(dump_model(grub), end='')

    if opts.write:
        try:
            grub.write_settings()
        except OSError as whynot:
            print(f'ERR: cannot write settings [{whynot}]', file=sys.stderr)
            return 1
        print(f'OK: wrote {grub.grub_file.file_path}')

    if opts.update and not run_update(grub):
        return 1
    return 0

if __name__ == '__main__':
    sys.exit(main())
