"""CLI commands for persisted vCPU and memory changes."""

from __future__ import annotations

import scriptconfig as scfg

from ..errors import ConfigurationError
from ..preview import cpu_commands, memory_commands
from ..vm import set_cpu_count, set_memory_size
from ._common import (
    _BaseCommand,
    _load_cfg,
    _parse_positive_int,
    _print_preview,
    _require_vm,
)


class CPUCLI(_BaseCommand):
    """Change the vCPU count of a VM (maximum and current, next boot)."""

    count = scfg.Value(None, help='New vCPU count.')
    vm = scfg.Value('', help='VM name.')
    dry_run = scfg.Value(
        False, isflag=True, help='Print the commands without executing them.'
    )

    @classmethod
    def main(cls, argv=True, **kwargs):
        args = cls.cli(argv=argv, data=kwargs)
        cfg = _load_cfg(args.config)
        count = _parse_positive_int(args.count, label='CPU count')
        vm = _require_vm(args.vm)
        if args.dry_run:
            _print_preview(cpu_commands(vm, count, cfg))
            return 0
        set_cpu_count(vm, count, cfg)
        print(f"CPU count changed to {count} for VM '{vm}'.")
        return 0


class MemoryCLI(_BaseCommand):
    """Change the memory size of a VM (maximum and current, next boot)."""

    size = scfg.Value('', help='New memory size in virsh syntax, e.g. 8G.')
    vm = scfg.Value('', help='VM name.')
    dry_run = scfg.Value(
        False, isflag=True, help='Print the commands without executing them.'
    )

    @classmethod
    def main(cls, argv=True, **kwargs):
        args = cls.cli(argv=argv, data=kwargs)
        cfg = _load_cfg(args.config)
        size = str(args.size or '').strip()
        if not size:
            raise ConfigurationError('A memory size is required, e.g. 8G.')
        vm = _require_vm(args.vm)
        if args.dry_run:
            _print_preview(memory_commands(vm, size, cfg))
            return 0
        set_memory_size(vm, size, cfg)
        print(f"Memory size changed to {size} for VM '{vm}'.")
        return 0
