from __future__ import annotations

from pathlib import Path
from typing import Sequence

import scriptconfig as scfg
from loguru import logger

from ..config import KVMTuneConfig, resolve
from ..errors import ConfigurationError
from ..preview import render_preview
from ..util import needs_sudo

log = logger


class _BaseCommand(scfg.DataConfig):
    """Base options shared by all commands."""

    config = scfg.Value(
        None, help='Path to config TOML (default: per-user config dir).'
    )
    verbose = scfg.Value(
        0,
        short_alias=['v'],
        isflag='counter',
        help='Increase verbosity (-v, -vv).',
    )
    yes = scfg.Value(
        False,
        isflag=True,
        help='Answer yes to the confirmation prompt before modifying disks.',
    )


def _load_cfg_with_path(config_path: str | None) -> tuple[KVMTuneConfig, Path]:
    cfg, path = resolve(config_path)
    log.debug('Using config {} (exists={})', path, path.exists())
    return cfg, path


def _load_cfg(config_path: str | None) -> KVMTuneConfig:
    cfg, _ = _load_cfg_with_path(config_path)
    return cfg


def _require_vm(vm: str | None) -> str:
    name = str(vm or '').strip()
    if not name:
        raise ConfigurationError('A VM name is required.')
    return name


def _parse_positive_int(raw, *, label: str) -> int:
    try:
        value = int(str(raw).strip())
    except (TypeError, ValueError):
        raise ConfigurationError(f'Invalid {label}: {raw!r}') from None
    if value < 1:
        raise ConfigurationError(f'Invalid {label}: {raw!r} (must be >= 1)')
    return value


def _confirm_disk_mutation(*, yes: bool, image_path: str) -> bool:
    """Ask before modifying a disk image; anything but y/yes declines."""
    if yes:
        return True
    print('WARNING: This operation will modify the disk image.')
    print(f'  {image_path}')
    try:
        ans = input('Do you want to continue? (y/N): ')
    except (EOFError, KeyboardInterrupt):
        print()
        ans = ''
    return ans.strip().lower() in {'y', 'yes'}


def _print_preview(cmds: Sequence[Sequence[str]]) -> None:
    for line in render_preview(cmds, elevate=needs_sudo()):
        print(line)


__all__ = [name for name in globals() if not name.startswith('__')]
