from __future__ import annotations

from pathlib import Path

import pytest

from kvmtune.config import KVMTuneConfig, dump_toml, load, loads, resolve, save
from kvmtune.errors import ConfigurationError


def test_save_and_load_config(tmp_path: Path) -> None:
    cfg = KVMTuneConfig()
    cfg.libvirt.uri = 'qemu+ssh://root@host/system'
    cfg.disk.partition = 2
    cfg.verbosity = 2
    path = tmp_path / 'nested' / 'config.toml'
    save(path, cfg)
    got = load(path)
    assert got.libvirt.uri == 'qemu+ssh://root@host/system'
    assert got.disk.partition == 2
    assert got.disk.image_format == 'qcow2'
    assert got.verbosity == 2


def test_dump_toml_sections() -> None:
    text = dump_toml(KVMTuneConfig())
    assert text.startswith('verbosity = 1\n')
    assert '[libvirt]\nuri = "qemu:///system"' in text
    assert 'partition = 1' in text


def test_unknown_keys_are_ignored() -> None:
    cfg = loads('[disk]\ndevice = "sdb"\nbogus = 3\n[other]\nx = 1\n')
    assert cfg.disk.device == 'sdb'
    assert not hasattr(cfg.disk, 'bogus')


def test_invalid_config_raises_configuration_error() -> None:
    with pytest.raises(ConfigurationError, match='Invalid config TOML'):
        loads('[disk\n')
    with pytest.raises(ConfigurationError, match='partition'):
        loads('[disk]\npartition = 0\n')


def test_resolve_explicit_missing_path(tmp_path: Path) -> None:
    with pytest.raises(ConfigurationError, match='Config not found'):
        resolve(str(tmp_path / 'missing.toml'))


def test_resolve_falls_back_to_defaults(monkeypatch, tmp_path: Path) -> None:
    default = tmp_path / 'kvmtune' / 'config.toml'
    monkeypatch.setattr('kvmtune.config.default_config_path', lambda: default)
    cfg, path = resolve(None)
    assert path == default
    assert cfg == KVMTuneConfig()
    save(default, KVMTuneConfig(verbosity=0))
    cfg, _ = resolve(None)
    assert cfg.verbosity == 0


@pytest.mark.parametrize(
    'text, key',
    [
        ('verbosity = "loud"\n', 'verbosity'),
        ('verbosity = true\n', 'verbosity'),
        ('[libvirt]\nuri = 5\n', 'libvirt.uri'),
        ('[disk]\npartition = "2"\n', 'disk.partition'),
        ('[disk]\npartition = true\n', 'disk.partition'),
        ('[disk]\ndevice = ["vda"]\n', 'disk.device'),
    ],
)
def test_mistyped_values_raise_configuration_error(text, key) -> None:
    with pytest.raises(ConfigurationError, match=key):
        loads(text)
