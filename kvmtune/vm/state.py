"""Read-only libvirt queries: running state and disk inventory of a VM."""

from __future__ import annotations

import os
import xml.etree.ElementTree as ET
from dataclasses import dataclass

from loguru import logger

from ..config import KVMTuneConfig
from ..errors import QueryError
from ..runtime import dumpxml_cmd, running_vms_cmd
from ..util import run_cmd, shell_join

log = logger


@dataclass(frozen=True)
class DiskDescriptor:
    device: str
    source: str
    target: str
    bus: str = ''


def _query(cmd: list[str], what: str) -> str:
    try:
        res = run_cmd(cmd, sudo=True, check=False, capture=True)
    except OSError as ex:
        raise QueryError(f'Failed to {what}: {ex}', cmd=shell_join(cmd)) from ex
    if res.code != 0:
        raise QueryError(
            f'Failed to {what} (code={res.code})',
            cmd=shell_join(cmd),
            detail=res.output,
        )
    return res.stdout


def list_running_vms(cfg: KVMTuneConfig) -> list[str]:
    out = _query(running_vms_cmd(cfg), 'list running VMs')
    return [line.strip() for line in out.splitlines() if line.strip()]


def is_running(vm_name: str, cfg: KVMTuneConfig) -> bool:
    running = list_running_vms(cfg)
    log.debug('Running VMs: {}', running)
    return vm_name in running


def parse_domain_disks(xml_text: str) -> list[DiskDescriptor]:
    """Parse ``<devices><disk>`` entries of a libvirt domain XML document."""
    try:
        root = ET.fromstring(xml_text)
    except ET.ParseError as ex:
        raise QueryError(f'Failed to parse domain XML: {ex}') from ex
    disks: list[DiskDescriptor] = []
    for disk in root.findall('./devices/disk'):
        src = disk.find('source')
        tgt = disk.find('target')
        disks.append(
            DiskDescriptor(
                device=disk.attrib.get('device', 'disk'),
                source=src.attrib.get('file', '') if src is not None else '',
                target=tgt.attrib.get('dev', '') if tgt is not None else '',
                bus=tgt.attrib.get('bus', '') if tgt is not None else '',
            )
        )
    return disks


def vm_disks(vm_name: str, cfg: KVMTuneConfig) -> list[DiskDescriptor]:
    out = _query(dumpxml_cmd(cfg, vm_name), f"read domain XML of '{vm_name}'")
    return parse_domain_disks(out)


def _norm(path: str) -> str:
    return os.path.normpath(os.path.abspath(os.path.expanduser(path)))


def disk_belongs_to_vm(
    vm_name: str, image_path: str, cfg: KVMTuneConfig
) -> bool:
    want = _norm(image_path)
    for disk in vm_disks(vm_name, cfg):
        if disk.source and _norm(disk.source) == want:
            return True
    return False


def default_disk(vm_name: str, cfg: KVMTuneConfig) -> DiskDescriptor:
    """Return the first file-backed ``disk`` device (cdrom/seed media skipped)."""
    disks = vm_disks(vm_name, cfg)
    for disk in disks:
        if disk.device == 'disk' and disk.source:
            return disk
    raise QueryError(f"No file-backed disks found for VM '{vm_name}'")
