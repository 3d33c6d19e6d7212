"""Tests for vCPU and memory updates."""

from __future__ import annotations

import pytest

from kvmtune.config import KVMTuneConfig
from kvmtune.errors import ConfigurationError, MutationError
from kvmtune.util import CmdError, CmdResult
from kvmtune.vm import set_cpu_count, set_memory_size


def _recorder(monkeypatch, fail_when=None):
    calls = []

    def fake_run_cmd(cmd, **kwargs):
        calls.append(list(cmd))
        if fail_when is not None and fail_when(cmd):
            raise CmdError(cmd, CmdResult(1, '', 'error: invalid argument'))
        return CmdResult(0, '', '')

    monkeypatch.setattr('kvmtune.vm.resources.run_cmd', fake_run_cmd)
    return calls


def test_set_cpu_count_maximum_then_current(monkeypatch) -> None:
    calls = _recorder(monkeypatch)
    set_cpu_count('vm1', 4, KVMTuneConfig())
    assert calls == [
        ['virsh', '-c', 'qemu:///system', 'setvcpus', 'vm1', '4', '--config', '--maximum'],
        ['virsh', '-c', 'qemu:///system', 'setvcpus', 'vm1', '4', '--config'],
    ]


def test_set_cpu_count_stops_when_maximum_fails(monkeypatch) -> None:
    calls = _recorder(monkeypatch, fail_when=lambda cmd: '--maximum' in cmd)
    with pytest.raises(MutationError) as info:
        set_cpu_count('vm1', 64, KVMTuneConfig())
    assert info.value.step == 'maximum'
    assert len(calls) == 1


def test_set_cpu_count_reports_mismatch_when_current_fails(monkeypatch) -> None:
    calls = _recorder(
        monkeypatch, fail_when=lambda cmd: '--maximum' not in cmd
    )
    with pytest.raises(MutationError) as info:
        set_cpu_count('vm1', 8, KVMTuneConfig())
    assert info.value.step == 'current'
    assert 'already set' in str(info.value)
    assert len(calls) == 2


@pytest.mark.parametrize('count', [0, -2, True, '4'])
def test_set_cpu_count_rejects_bad_counts(monkeypatch, count) -> None:
    calls = _recorder(monkeypatch)
    with pytest.raises(ConfigurationError):
        set_cpu_count('vm1', count, KVMTuneConfig())
    assert calls == []


def test_set_memory_size_maximum_then_current(monkeypatch) -> None:
    calls = _recorder(monkeypatch)
    set_memory_size('vm1', '8G', KVMTuneConfig())
    assert [c[3] for c in calls] == ['setmaxmem', 'setmem']
    assert all(c[4:] == ['vm1', '8G', '--config'] for c in calls)


def test_set_memory_size_stops_when_maximum_fails(monkeypatch) -> None:
    calls = _recorder(monkeypatch, fail_when=lambda cmd: 'setmaxmem' in cmd)
    with pytest.raises(MutationError, match='maximum memory'):
        set_memory_size('vm1', '1T', KVMTuneConfig())
    assert len(calls) == 1


def test_set_memory_size_rejects_empty(monkeypatch) -> None:
    calls = _recorder(monkeypatch)
    with pytest.raises(ConfigurationError):
        set_memory_size('vm1', ' ', KVMTuneConfig())
    assert calls == []
