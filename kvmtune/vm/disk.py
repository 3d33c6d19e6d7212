"""Offline disk expansion: create a larger image, migrate into it, swap it in.

The pipeline runs three external commands strictly in order:

1. ``qemu-img create`` allocates ``<image>.new`` at the target size.
2. ``virt-resize --expand`` copies the original into it, growing one
   partition.
3. ``mv`` renames the new image over the original.

The original image is never touched until step 3, so a failure at any point
leaves the VM with its old, bootable disk. If step 2 or 3 fails, the new
image is removed again and the raised :class:`PipelineError` states whether
that removal worked.
"""

from __future__ import annotations

from contextlib import contextmanager
from dataclasses import dataclass
from typing import Callable, Iterator

from loguru import logger

from ..config import KVMTuneConfig
from ..errors import (
    ARTIFACT_LEFT_BEHIND,
    ARTIFACT_NEVER_CREATED,
    ARTIFACT_REMOVED,
    ConfigurationError,
    PipelineError,
    PreconditionError,
    QueryError,
)
from ..preview import disk_commands
from ..results import CANCELLED, DRY_RUN, EXPANDED, DiskExpandResult
from ..runtime import artifact_path, path_exists_cmd, remove_cmd
from ..util import CmdError, run_cmd, shell_join
from .state import default_disk, disk_belongs_to_vm, is_running

log = logger


@dataclass(frozen=True)
class ResizeRequest:
    vm_name: str
    image_path: str
    size: str
    device: str = 'vda'
    partition: int = 1
    dry_run: bool = False
    image_explicit: bool = True

    @property
    def artifact_path(self) -> str:
        return artifact_path(self.image_path)


def _require_size(size: str) -> str:
    size = (size or '').strip()
    if not size:
        raise ConfigurationError(
            'Please specify the new size using the --size option'
        )
    return size


def validate_request(req: ResizeRequest) -> None:
    _require_size(req.size)
    if (
        isinstance(req.partition, bool)
        or not isinstance(req.partition, int)
        or req.partition < 1
    ):
        raise ConfigurationError(
            f'Partition must be a positive integer (got {req.partition!r})'
        )
    if not req.image_path:
        raise ConfigurationError('No disk image path given')
    if not req.device:
        raise ConfigurationError('No disk device given')


def build_request(
    vm_name: str,
    cfg: KVMTuneConfig,
    *,
    size: str = '',
    image: str = '',
    device: str = '',
    partition: int | None = None,
    dry_run: bool = False,
) -> ResizeRequest:
    """Build the per-invocation request, defaulting the image from inventory.

    The size is validated first so that a missing ``--size`` never triggers
    a libvirt query.
    """
    size = _require_size(size)
    image = (image or '').strip()
    explicit = bool(image)
    if not explicit:
        disk = default_disk(vm_name, cfg)
        image = disk.source
    req = ResizeRequest(
        vm_name=vm_name,
        image_path=image,
        size=size,
        device=(device or cfg.disk.device).strip(),
        partition=cfg.disk.partition if partition is None else partition,
        dry_run=dry_run,
        image_explicit=explicit,
    )
    validate_request(req)
    log.debug('Selected disk: {} (device: {})', req.image_path, req.device)
    return req


def _artifact_exists(path: str) -> bool:
    cmd = path_exists_cmd(path)
    try:
        res = run_cmd(cmd, sudo=True, check=False, capture=True)
    except OSError as ex:
        raise QueryError(
            f'Failed to check for {path}: {ex}', cmd=shell_join(cmd)
        ) from ex
    return res.code == 0


def check_preconditions(req: ResizeRequest, cfg: KVMTuneConfig) -> None:
    if is_running(req.vm_name, cfg):
        raise PreconditionError(
            'vm running',
            f"VM '{req.vm_name}' is currently running. "
            'Please stop the VM before making changes.',
        )
    if req.image_explicit and not disk_belongs_to_vm(
        req.vm_name, req.image_path, cfg
    ):
        raise PreconditionError(
            'disk ownership mismatch',
            f"{req.image_path} is not a disk of VM '{req.vm_name}'",
        )
    if _artifact_exists(req.artifact_path):
        raise PreconditionError(
            'stale artifact',
            f'{req.artifact_path} already exists, probably from an earlier '
            'failed run. Inspect and remove it before retrying.',
        )


def _failure_detail(ex: BaseException) -> str:
    if isinstance(ex, CmdError):
        return str(ex)
    return f'{type(ex).__name__}: {ex}'


class _StagedArtifact:
    def __init__(self, path: str):
        self.path = path
        self.stage = 'resize'

    def rollback(self, ex: BaseException) -> PipelineError:
        cmd = remove_cmd(self.path)
        log.warning('Removing new image {} after {} failure', self.path, self.stage)
        try:
            res = run_cmd(cmd, sudo=True, check=False, capture=True)
            cleanup_ok = res.code == 0
            cleanup_detail = (
                f'Command failed (code={res.code}): {shell_join(cmd)}\n{res.output}'
            ).strip()
        except OSError as rm_ex:
            cleanup_ok = False
            cleanup_detail = _failure_detail(rm_ex)
        if not cleanup_ok:
            log.error('New image left behind: {}', self.path)
        return PipelineError(
            self.stage,
            _failure_detail(ex),
            artifact_path=self.path,
            artifact_state=ARTIFACT_REMOVED if cleanup_ok else ARTIFACT_LEFT_BEHIND,
            cleanup_detail='' if cleanup_ok else cleanup_detail,
        )


@contextmanager
def _staged_artifact(path: str) -> Iterator[_StagedArtifact]:
    """Delete the new image on any failure inside the block."""
    staged = _StagedArtifact(path)
    try:
        yield staged
    except (CmdError, OSError) as ex:
        raise staged.rollback(ex) from ex
    except BaseException as ex:
        # Interrupted mid-step: still remove the artifact, keep the original error.
        log.error('{}', staged.rollback(ex))
        raise


def _step(message: str, cmd: list[str]) -> str:
    log.info(message)
    log.info('Executing command: {}', shell_join(cmd))
    return run_cmd(cmd, sudo=True, check=True, capture=True).output


def run_pipeline(req: ResizeRequest, cfg: KVMTuneConfig) -> str:
    """Run create/resize/replace and return the virt-resize output."""
    create_cmd, resize_cmd, replace_cmd = disk_commands(
        req.image_path, req.device, req.partition, req.size, cfg
    )
    try:
        _step('Creating new image...', create_cmd)
    except (CmdError, OSError) as ex:
        raise PipelineError(
            'create',
            _failure_detail(ex),
            artifact_path=req.artifact_path,
            artifact_state=ARTIFACT_NEVER_CREATED,
        ) from ex
    with _staged_artifact(req.artifact_path) as staged:
        staged.stage = 'resize'
        output = _step('Resizing disk...', resize_cmd)
        log.info('virt-resize output:\n{}', output)
        staged.stage = 'replace'
        _step('Replacing original image with resized image...', replace_cmd)
    return output


def expand_disk(
    req: ResizeRequest,
    cfg: KVMTuneConfig,
    *,
    confirm: Callable[[], bool],
) -> DiskExpandResult:
    """Expand one partition of a stopped VM's disk image.

    ``confirm`` is only called once every check has passed, and a False
    answer returns a cancelled result without touching anything.
    """
    validate_request(req)
    cmds = disk_commands(
        req.image_path, req.device, req.partition, req.size, cfg
    )
    result = DiskExpandResult(
        status=DRY_RUN,
        image_path=req.image_path,
        artifact_path=req.artifact_path,
        commands=cmds,
    )
    if req.dry_run:
        return result
    check_preconditions(req, cfg)
    if not confirm():
        log.info('Disk expansion cancelled for {}', req.vm_name)
        result.status = CANCELLED
        return result
    result.resize_output = run_pipeline(req, cfg)
    result.status = EXPANDED
    log.info('Disk expansion completed: {}', req.image_path)
    return result
