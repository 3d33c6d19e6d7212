"""Top-level modal CLI wiring, argv normalization, and logging setup."""

from __future__ import annotations

import os
import sys

import scriptconfig as scfg
from loguru import logger

from ..errors import KVMTuneError
from ._common import _load_cfg, log
from .config import ConfigModalCLI
from .disk import DiskCLI, DisksCLI
from .host import DoctorCLI
from .resources import CPUCLI, MemoryCLI


class KVMTuneModalCLI(scfg.ModalCLI):
    """Change vCPU, memory and disk size of libvirt/KVM virtual machines."""

    cpu = CPUCLI
    memory = MemoryCLI
    disk = DiskCLI
    disks = DisksCLI
    doctor = DoctorCLI
    config = ConfigModalCLI


# Positional arguments accepted after each command, in order.
_POSITIONALS = {
    'cpu': ('--count', '--vm'),
    'memory': ('--size', '--vm'),
    'disk': ('--vm',),
    'disks': ('--vm',),
}


def main(argv: list[str] | None = None) -> None:
    verbosity = 1
    if argv is None:
        argv = sys.argv[1:]
    argv = _normalize_argv(argv)
    config_value = None
    if '--config' in argv:
        try:
            config_value = argv[argv.index('--config') + 1]
        except IndexError:
            pass
    try:
        verbosity = _load_cfg(config_value).verbosity
    except Exception:
        verbosity = 1

    _setup_logging(_count_verbose(argv), verbosity)

    try:
        rc = KVMTuneModalCLI.main(argv=argv, _noexit=True)
    except KVMTuneError as ex:
        print(f'ERROR: {ex}', file=sys.stderr)
        log.debug('kvmtune error ({}): {}', type(ex).__name__, ex)
        sys.exit(1)
    except Exception as ex:
        print(f'ERROR: {ex}', file=sys.stderr)
        log.error('Unhandled kvmtune error: {}', ex)
        sys.exit(2)

    if any(flag in argv for flag in ('-h', '--help')):
        sys.exit(0)
    if isinstance(rc, int):
        sys.exit(rc)
    sys.exit(0)


def _setup_logging(args_verbose: int, cfg_verbosity: int) -> None:
    logger.remove()
    effective_verbosity = args_verbose if args_verbose > 0 else cfg_verbosity
    level = 'WARNING'
    if effective_verbosity == 1:
        level = 'INFO'
    elif effective_verbosity >= 2:
        level = 'DEBUG'
    colorize = sys.stderr.isatty() and os.getenv('NO_COLOR') is None
    logger.add(
        sys.stderr,
        level=level,
        colorize=colorize,
        format='<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green> | <level>{level: <8}</level> | <cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - <level>{message}</level>',
    )
    log.debug(
        'Logging configured at {} (effective_verbosity={}, colorize={})',
        level,
        effective_verbosity,
        colorize,
    )


def _normalize_option(item: str) -> str:
    """Accept ``--dry-run`` style spellings for ``--dry_run`` options."""
    if not item.startswith('--') or item == '--':
        return item
    name, sep, value = item[2:].partition('=')
    return '--' + name.replace('-', '_') + sep + value


# Options whose next token is their value; every other option is a flag.
_VALUE_OPTIONS = {
    '--config',
    '--count',
    '--device',
    '--image',
    '--partition',
    '--size',
    '--vm',
}


def _normalize_argv(argv: list[str]) -> list[str]:
    """Map positional command arguments onto scriptconfig options.

    Bare tokens are positional wherever they appear, except when they are
    the value of a value-taking option. Mapped positionals are moved right
    after the command so a flag such as ``--dry_run`` never consumes them.
    """
    if not argv:
        return []
    command = argv[0]
    names = list(_POSITIONALS.get(command, ()))
    mapped: list[str] = []
    others: list[str] = []
    rest = iter(argv[1:])
    for item in rest:
        if item.startswith('-') and item != '-':
            item = _normalize_option(item)
            others.append(item)
            if item in _VALUE_OPTIONS:
                value = next(rest, None)
                if value is not None:
                    others.append(value)
        elif names:
            mapped += [names.pop(0), item]
        else:
            others.append(item)
    return [command, *mapped, *others]


def _count_verbose(argv: list[str]) -> int:
    count = 0
    for item in argv:
        if item == '--verbose':
            count += 1
        elif item.startswith('-') and not item.startswith('--'):
            short = item[1:]
            if short and set(short) <= {'v'}:
                count += len(short)
    return count
