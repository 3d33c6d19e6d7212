"""Subprocess execution and command formatting shared by every component."""

from __future__ import annotations

import os
import shlex
import subprocess
from dataclasses import dataclass
from typing import Optional, Sequence

from loguru import logger

log = logger

SUDO_PREFIX = ('sudo', '-n')


@dataclass(frozen=True)
class CmdResult:
    code: int
    stdout: str
    stderr: str

    @property
    def output(self) -> str:
        """Combined stdout/stderr, the way an operator would read it."""
        parts = [p.strip() for p in (self.stdout, self.stderr) if p.strip()]
        return '\n'.join(parts)


class CmdError(RuntimeError):
    def __init__(self, cmd: Sequence[str] | str, result: CmdResult):
        self.cmd = cmd
        self.result = result
        shown = cmd if isinstance(cmd, str) else shell_join(cmd)
        super().__init__(
            f'Command failed (code={result.code}): {shown}\n{result.output}'.strip()
        )


def shell_join(cmd: Sequence[str]) -> str:
    return ' '.join(shlex.quote(c) for c in cmd)


def needs_sudo() -> bool:
    return os.geteuid() != 0


def run_cmd(
    cmd: Sequence[str],
    *,
    sudo: bool = False,
    check: bool = True,
    capture: bool = True,
    text: bool = True,
) -> CmdResult:
    original_cmd = list(cmd)
    cmd = list(cmd)
    if sudo and needs_sudo():
        # Non-interactive sudo: fail fast if password/TTY is required.
        cmd = [*SUDO_PREFIX, *cmd]
        log.opt(depth=1).debug(
            'Running with sudo: {}', shell_join(original_cmd)
        )
    log.opt(depth=1).debug('RUN: {}', shell_join(cmd))
    p = subprocess.run(cmd, capture_output=capture, text=text)
    res = CmdResult(p.returncode, p.stdout or '', p.stderr or '')
    if check and p.returncode != 0:
        log.opt(depth=1).error(
            'Command failed code={} cmd={} stderr={} stdout={}',
            p.returncode,
            shell_join(cmd),
            res.stderr.strip(),
            res.stdout.strip(),
        )
        raise CmdError(cmd, res)
    if p.returncode == 0:
        log.opt(depth=1).debug('Command ok code=0 cmd={}', shell_join(cmd))
    return res


def which(cmd: str) -> Optional[str]:
    from shutil import which as _which

    return _which(cmd)
