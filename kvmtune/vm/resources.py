"""Persisted vCPU and memory reconfiguration (maximum first, then current)."""

from __future__ import annotations

from loguru import logger

from ..config import KVMTuneConfig
from ..errors import ConfigurationError, MutationError
from ..preview import cpu_commands, memory_commands
from ..util import CmdError, run_cmd

log = logger


def _apply_max_then_current(
    vm_name: str, what: str, value: str, cmds: list[list[str]]
) -> None:
    max_cmd, cur_cmd = cmds
    try:
        run_cmd(max_cmd, sudo=True, check=True, capture=True)
    except (CmdError, OSError) as ex:
        raise MutationError(
            'maximum', f'failed to set maximum {what} for {vm_name!r}: {ex}'
        ) from ex
    log.info('Maximum {} set to {} for {}', what, value, vm_name)
    try:
        run_cmd(cur_cmd, sudo=True, check=True, capture=True)
    except (CmdError, OSError) as ex:
        # Not rolled back; the operator sees the mismatch.
        raise MutationError(
            'current',
            f'failed to set current {what} for {vm_name!r}: {ex}\n'
            f'Maximum {what} was already set to {value}; '
            f'maximum and current values now differ.',
        ) from ex
    log.info('Current {} set to {} for {}', what, value, vm_name)


def set_cpu_count(vm_name: str, count: int, cfg: KVMTuneConfig) -> None:
    if isinstance(count, bool) or not isinstance(count, int) or count < 1:
        raise ConfigurationError(
            f'Invalid CPU count: {count!r} (must be a positive integer)'
        )
    _apply_max_then_current(
        vm_name, 'CPU count', str(count), cpu_commands(vm_name, count, cfg)
    )


def set_memory_size(vm_name: str, size: str, cfg: KVMTuneConfig) -> None:
    size = (size or '').strip()
    if not size:
        raise ConfigurationError('Memory size must not be empty')
    _apply_max_then_current(
        vm_name, 'memory', size, memory_commands(vm_name, size, cfg)
    )
