"""Result dataclasses returned by mutating operations."""

from __future__ import annotations

from dataclasses import dataclass, field

EXPANDED = 'expanded'
CANCELLED = 'cancelled'
DRY_RUN = 'dry_run'


@dataclass
class DiskExpandResult:
    status: str
    image_path: str
    artifact_path: str
    commands: list[list[str]] = field(default_factory=list)
    resize_output: str = ''

    @property
    def cancelled(self) -> bool:
        return self.status == CANCELLED
