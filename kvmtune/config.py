"""TOML-backed configuration for libvirt access and disk pipeline defaults."""

from __future__ import annotations

import tomllib
from dataclasses import asdict, dataclass, field
from pathlib import Path

import ubelt as ub

from .errors import ConfigurationError

DEFAULT_LIBVIRT_URI = 'qemu:///system'


@dataclass
class LibvirtConfig:
    uri: str = DEFAULT_LIBVIRT_URI


@dataclass
class DiskConfig:
    image_format: str = 'qcow2'
    preallocation: str = 'metadata'
    device: str = 'vda'
    partition: int = 1


@dataclass
class KVMTuneConfig:
    libvirt: LibvirtConfig = field(default_factory=LibvirtConfig)
    disk: DiskConfig = field(default_factory=DiskConfig)
    verbosity: int = 1


def default_config_path() -> Path:
    return Path(ub.Path.appdir('kvmtune', type='config')) / 'config.toml'


def _toml_escape(s: str) -> str:
    return s.replace('\\', '\\\\').replace('"', '\\"')


def dump_toml(cfg: KVMTuneConfig) -> str:
    d = asdict(cfg)
    lines: list[str] = [f'verbosity = {cfg.verbosity}', '']
    for section, body in d.items():
        if not isinstance(body, dict):
            continue
        lines.append(f'[{section}]')
        for k, v in body.items():
            if isinstance(v, bool):
                lines.append(f"{k} = {'true' if v else 'false'}")
            elif isinstance(v, int):
                lines.append(f'{k} = {v}')
            else:
                lines.append(f'{k} = "{_toml_escape(str(v))}"')
        lines.append('')
    return '\n'.join(lines).rstrip() + '\n'


def _checked(key: str, value, default):
    """Reject values whose TOML type does not match the field's default."""
    expected = type(default)
    if isinstance(value, bool) != (expected is bool) or not isinstance(
        value, expected
    ):
        raise ConfigurationError(
            f'{key} must be of type {expected.__name__} (got {value!r})'
        )
    return value


def loads(text: str) -> KVMTuneConfig:
    try:
        raw = tomllib.loads(text)
    except tomllib.TOMLDecodeError as ex:
        raise ConfigurationError(f'Invalid config TOML: {ex}') from ex
    cfg = KVMTuneConfig()
    for section in ('libvirt', 'disk'):
        if section in raw and isinstance(raw[section], dict):
            obj = getattr(cfg, section)
            for k, v in raw[section].items():
                if hasattr(obj, k):
                    setattr(obj, k, _checked(f'{section}.{k}', v, getattr(obj, k)))
    if 'verbosity' in raw:
        cfg.verbosity = _checked('verbosity', raw['verbosity'], cfg.verbosity)
    if cfg.disk.partition < 1:
        raise ConfigurationError(
            f'disk.partition must be a positive integer (got {cfg.disk.partition!r})'
        )
    return cfg


def load(path: Path) -> KVMTuneConfig:
    return loads(path.read_text(encoding='utf-8'))


def save(path: Path, cfg: KVMTuneConfig) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(dump_toml(cfg), encoding='utf-8')


def resolve(config_path: str | None) -> tuple[KVMTuneConfig, Path]:
    """Load an explicit config path, else the default one, else defaults."""
    if config_path:
        path = Path(config_path).expanduser().resolve()
        if not path.exists():
            raise ConfigurationError(
                f'Config not found: {path}. Run: kvmtune config init --config {path}'
            )
        return load(path), path
    path = default_config_path()
    if path.exists():
        return load(path), path
    return KVMTuneConfig(), path
