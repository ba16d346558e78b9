"""Interface definitions for fleetgate collaborators."""

from fleetgate.interfaces.check import Check, CheckContext
from fleetgate.interfaces.fleet_directory import FleetDirectory
from fleetgate.interfaces.proposal_store import ProposalStore
from fleetgate.interfaces.remote_executor import RemoteCommandResult, RemoteExecutor

__all__ = [
    "Check",
    "CheckContext",
    "FleetDirectory",
    "ProposalStore",
    "RemoteCommandResult",
    "RemoteExecutor",
]
