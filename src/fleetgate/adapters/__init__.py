"""Adapter implementations for external collaborators."""

from fleetgate.adapters.inventory import InventoryFleetDirectory, InventoryProposalStore
from fleetgate.adapters.ssh_executor import SSHExecutor

__all__ = [
    "InventoryFleetDirectory",
    "InventoryProposalStore",
    "SSHExecutor",
]
