"""Reconfigure vCPU, memory and disk capacity of libvirt/KVM virtual machines."""

__version__ = '0.1.0'
