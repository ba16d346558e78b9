"""Fleet topology checks computed from the fleet directory and proposals."""

from fleetgate.checks.fleet.compute import ComputeStatusCheck
from fleetgate.checks.fleet.deployment_order import DeploymentOrderCheck
from fleetgate.checks.fleet.ha_config import HAConfigCheck
from fleetgate.checks.fleet.node_readiness import NodeReadinessCheck
from fleetgate.checks.fleet.proposals import ProposalHealthCheck

__all__ = [
    "ComputeStatusCheck",
    "DeploymentOrderCheck",
    "HAConfigCheck",
    "NodeReadinessCheck",
    "ProposalHealthCheck",
]
