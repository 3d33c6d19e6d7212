"""CLI package exports for top-level command entry points."""

from __future__ import annotations

from .main import KVMTuneModalCLI, main

__all__ = ['KVMTuneModalCLI', 'main']
