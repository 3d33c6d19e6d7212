"""Host dependency checks for the external tools kvmtune drives."""

from __future__ import annotations

from .util import which

REQUIRED_CMDS = ['virsh', 'qemu-img', 'virt-resize', 'mv', 'rm', 'test']
OPTIONAL_CMDS = ['sudo']

# Debian/Ubuntu packages that provide the required commands.
PACKAGE_HINTS = {
    'virsh': 'libvirt-clients',
    'qemu-img': 'qemu-utils',
    'virt-resize': 'guestfs-tools',
}


def check_commands() -> tuple[list[str], list[str]]:
    missing = [c for c in REQUIRED_CMDS if which(c) is None]
    missing_opt = [c for c in OPTIONAL_CMDS if which(c) is None]
    return missing, missing_opt


def install_hints(missing: list[str]) -> list[str]:
    return sorted({PACKAGE_HINTS[c] for c in missing if c in PACKAGE_HINTS})
