"""CLI commands for disk inventory and offline disk expansion."""

from __future__ import annotations

import scriptconfig as scfg

from ..results import DRY_RUN
from ..vm import build_request, expand_disk, vm_disks
from ._common import (
    _BaseCommand,
    _confirm_disk_mutation,
    _load_cfg,
    _parse_positive_int,
    _print_preview,
    _require_vm,
)


class DiskCLI(_BaseCommand):
    """Expand a stopped VM's disk image and grow one partition into it."""

    vm = scfg.Value('', help='VM name.')
    size = scfg.Value('', help='New size for the disk (e.g., 40G).')
    device = scfg.Value(
        '', help='Disk device (e.g., vda, sda). Default from config.'
    )
    partition = scfg.Value(
        None, help='Partition number to expand. Default from config.'
    )
    image = scfg.Value(
        '',
        help='Path to the disk image. Default: the VM\'s first file-backed disk.',
    )
    dry_run = scfg.Value(
        False, isflag=True, help='Print the commands without executing them.'
    )

    @classmethod
    def main(cls, argv=True, **kwargs):
        args = cls.cli(argv=argv, data=kwargs)
        cfg = _load_cfg(args.config)
        vm = _require_vm(args.vm)
        partition = None
        if args.partition not in (None, ''):
            partition = _parse_positive_int(args.partition, label='partition')
        req = build_request(
            vm,
            cfg,
            size=str(args.size or ''),
            image=str(args.image or ''),
            device=str(args.device or ''),
            partition=partition,
            dry_run=bool(args.dry_run),
        )
        print(f'Selected disk: {req.image_path} (device: {req.device})')
        result = expand_disk(
            req,
            cfg,
            confirm=lambda: _confirm_disk_mutation(
                yes=bool(args.yes), image_path=req.image_path
            ),
        )
        if result.status == DRY_RUN:
            _print_preview(result.commands)
            return 0
        if result.cancelled:
            print('Operation cancelled.')
            return 0
        print('Disk expansion completed successfully.')
        return 0


class DisksCLI(_BaseCommand):
    """List the disks attached to a VM."""

    vm = scfg.Value('', help='VM name.')

    @classmethod
    def main(cls, argv=True, **kwargs):
        args = cls.cli(argv=argv, data=kwargs)
        cfg = _load_cfg(args.config)
        vm = _require_vm(args.vm)
        disks = vm_disks(vm, cfg)
        print(f'Disks of {vm}')
        if not disks:
            print('  (none)')
        for disk in disks:
            print(
                f'  - {disk.target or "?"} | device={disk.device} '
                f'| bus={disk.bus or "?"} | source={disk.source or "(none)"}'
            )
        return 0
