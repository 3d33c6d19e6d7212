"""VM operation exports for state queries, resource updates, and disk expansion."""

from __future__ import annotations

from .disk import (
    ResizeRequest,
    build_request,
    check_preconditions,
    expand_disk,
    run_pipeline,
    validate_request,
)
from .resources import set_cpu_count, set_memory_size
from .state import (
    DiskDescriptor,
    default_disk,
    disk_belongs_to_vm,
    is_running,
    list_running_vms,
    parse_domain_disks,
    vm_disks,
)

__all__ = [
    'DiskDescriptor',
    'ResizeRequest',
    'build_request',
    'check_preconditions',
    'default_disk',
    'disk_belongs_to_vm',
    'expand_disk',
    'is_running',
    'list_running_vms',
    'parse_domain_disks',
    'run_pipeline',
    'set_cpu_count',
    'set_memory_size',
    'validate_request',
    'vm_disks',
]
