"""Dry-run rendering of the exact commands each mutating operation runs."""

from __future__ import annotations

from typing import Sequence

from .config import KVMTuneConfig
from .runtime import (
    artifact_path,
    create_image_cmd,
    move_cmd,
    setmem_cmd,
    setvcpus_cmd,
    virt_resize_cmd,
)
from .util import SUDO_PREFIX, shell_join


def cpu_commands(
    vm_name: str, count: int, cfg: KVMTuneConfig
) -> list[list[str]]:
    return [
        setvcpus_cmd(cfg, vm_name, count, maximum=True),
        setvcpus_cmd(cfg, vm_name, count, maximum=False),
    ]


def memory_commands(
    vm_name: str, size: str, cfg: KVMTuneConfig
) -> list[list[str]]:
    return [
        setmem_cmd(cfg, vm_name, size, maximum=True),
        setmem_cmd(cfg, vm_name, size, maximum=False),
    ]


def disk_commands(
    image_path: str,
    device: str,
    partition: int,
    size: str,
    cfg: KVMTuneConfig,
) -> list[list[str]]:
    """Create, migrate and replace, in pipeline order."""
    new_path = artifact_path(image_path)
    return [
        create_image_cmd(cfg, new_path, size),
        virt_resize_cmd(device, partition, image_path, new_path),
        move_cmd(new_path, image_path),
    ]


def format_command(cmd: Sequence[str], *, elevate: bool = True) -> str:
    full = [*SUDO_PREFIX, *cmd] if elevate else list(cmd)
    return f'Command: {shell_join(full)}'


def render_preview(
    cmds: Sequence[Sequence[str]], *, elevate: bool = True
) -> list[str]:
    return [format_command(c, elevate=elevate) for c in cmds]
