"""Shared fakes: an in-memory host that answers virsh and simulates images."""

from __future__ import annotations

import pytest

from kvmtune.util import CmdError, CmdResult

DOMAIN_XML = """
<domain type='kvm'>
  <name>{name}</name>
  <devices>
    <disk type='file' device='cdrom'>
      <source file='/var/lib/libvirt/images/{name}-seed.iso'/>
      <target dev='sda' bus='sata'/>
    </disk>
    <disk type='file' device='disk'>
      <driver name='qemu' type='qcow2'/>
      <source file='{image}'/>
      <target dev='vda' bus='virtio'/>
    </disk>
  </devices>
</domain>
"""


class FakeHost:
    """Records every command and keeps image files in a dict."""

    def __init__(self, *, vm='vm1', image='/data/vm1.img'):
        self.vm = vm
        self.image = image
        self.running: list[str] = []
        self.files: dict[str, str] = {image: 'original'}
        self.calls: list[list[str]] = []
        self.fail: dict[str, str] = {}
        self.raise_oserror: set[str] = set()
        self.interrupt: set[str] = set()
        self.domain_xml = DOMAIN_XML.format(name=vm, image=image)

    def programs(self) -> list[str]:
        return [c[0] for c in self.calls]

    def _finish(self, cmd, res, check):
        if check and res.code != 0:
            raise CmdError(cmd, res)
        return res

    def run_cmd(self, cmd, *, sudo=False, check=True, capture=True, **kwargs):
        cmd = list(cmd)
        self.calls.append(cmd)
        prog = cmd[0]
        if prog in self.raise_oserror:
            raise FileNotFoundError(2, 'No such file or directory', prog)
        if prog in self.interrupt:
            raise KeyboardInterrupt
        if prog in self.fail:
            return self._finish(cmd, CmdResult(1, '', self.fail[prog]), check)
        if prog == 'virsh':
            verb = cmd[3]
            if verb == 'list':
                out = ''.join(f'{name}\n' for name in self.running) + '\n'
                return self._finish(cmd, CmdResult(0, out, ''), check)
            if verb == 'dumpxml':
                return self._finish(
                    cmd, CmdResult(0, self.domain_xml, ''), check
                )
            return self._finish(cmd, CmdResult(0, '', ''), check)
        if prog == 'test':
            code = 0 if cmd[2] in self.files else 1
            return self._finish(cmd, CmdResult(code, '', ''), check)
        if prog == 'qemu-img':
            self.files[cmd[6]] = ''
        elif prog == 'virt-resize':
            src, dst = cmd[3], cmd[4]
            out = f'expanded:{self.files[src]}'
            self.files[dst] = out
            return self._finish(cmd, CmdResult(0, out, ''), check)
        elif prog == 'mv':
            self.files[cmd[3]] = self.files.pop(cmd[2])
        elif prog == 'rm':
            self.files.pop(cmd[2], None)
        return self._finish(cmd, CmdResult(0, '', ''), check)


@pytest.fixture
def fake_host(monkeypatch) -> FakeHost:
    host = FakeHost()
    monkeypatch.setattr('kvmtune.vm.disk.run_cmd', host.run_cmd)
    monkeypatch.setattr('kvmtune.vm.state.run_cmd', host.run_cmd)
    monkeypatch.setattr('kvmtune.vm.resources.run_cmd', host.run_cmd)
    return host
