"""CLI commands for creating and inspecting the kvmtune config file."""

from __future__ import annotations

from pathlib import Path

import scriptconfig as scfg

from ..config import KVMTuneConfig, default_config_path, dump_toml, save
from ..errors import ConfigurationError
from ._common import _BaseCommand, _load_cfg_with_path, log


class ConfigInitCLI(_BaseCommand):
    """Write a config file with default values."""

    force = scfg.Value(
        False, isflag=True, help='Overwrite an existing config file.'
    )

    @classmethod
    def main(cls, argv=True, **kwargs):
        args = cls.cli(argv=argv, data=kwargs)
        path = (
            Path(args.config).expanduser().resolve()
            if args.config
            else default_config_path()
        )
        if path.exists() and not args.force:
            raise ConfigurationError(
                f'Config already exists: {path}. Use --force to overwrite.'
            )
        save(path, KVMTuneConfig())
        log.info('Wrote default config to {}', path)
        print(f'Wrote config: {path}')
        return 0


class ConfigShowCLI(_BaseCommand):
    """Print the effective config and where it was loaded from."""

    @classmethod
    def main(cls, argv=True, **kwargs):
        args = cls.cli(argv=argv, data=kwargs)
        cfg, path = _load_cfg_with_path(args.config)
        origin = str(path) if path.exists() else f'{path} (not found, defaults)'
        print(f'# {origin}')
        print(dump_toml(cfg), end='')
        return 0


class ConfigModalCLI(scfg.ModalCLI):
    """Config file management."""

    init = ConfigInitCLI
    show = ConfigShowCLI
