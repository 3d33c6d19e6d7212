"""Runtime helpers for constructing virsh, qemu-img and virt-resize arguments."""

from __future__ import annotations

from .config import KVMTuneConfig

ARTIFACT_SUFFIX = '.new'


def virsh_cmd(cfg: KVMTuneConfig, *args: str) -> list[str]:
    return ['virsh', '-c', cfg.libvirt.uri, *args]


def artifact_path(image_path: str) -> str:
    return image_path + ARTIFACT_SUFFIX


def partition_path(device: str, partition: int) -> str:
    return f'/dev/{device}{partition}'


def running_vms_cmd(cfg: KVMTuneConfig) -> list[str]:
    return virsh_cmd(cfg, 'list', '--name', '--state-running')


def dumpxml_cmd(cfg: KVMTuneConfig, vm_name: str) -> list[str]:
    return virsh_cmd(cfg, 'dumpxml', vm_name)


def setvcpus_cmd(
    cfg: KVMTuneConfig, vm_name: str, count: int, *, maximum: bool
) -> list[str]:
    cmd = virsh_cmd(cfg, 'setvcpus', vm_name, str(count), '--config')
    if maximum:
        cmd.append('--maximum')
    return cmd


def setmem_cmd(
    cfg: KVMTuneConfig, vm_name: str, size: str, *, maximum: bool
) -> list[str]:
    verb = 'setmaxmem' if maximum else 'setmem'
    return virsh_cmd(cfg, verb, vm_name, size, '--config')


def create_image_cmd(cfg: KVMTuneConfig, path: str, size: str) -> list[str]:
    return [
        'qemu-img',
        'create',
        '-f',
        cfg.disk.image_format,
        '-o',
        f'preallocation={cfg.disk.preallocation}',
        path,
        size,
    ]


def virt_resize_cmd(
    device: str, partition: int, src: str, dst: str
) -> list[str]:
    return [
        'virt-resize',
        '--expand',
        partition_path(device, partition),
        src,
        dst,
    ]


def move_cmd(src: str, dst: str) -> list[str]:
    return ['mv', '-f', src, dst]


def remove_cmd(path: str) -> list[str]:
    return ['rm', '-f', path]


def path_exists_cmd(path: str) -> list[str]:
    return ['test', '-e', path]
