"""Default set of upgrade readiness checks."""

from fleetgate.checks.check_registry import CheckRegistry
from fleetgate.checks.fleet import (
    ComputeStatusCheck,
    DeploymentOrderCheck,
    HAConfigCheck,
    NodeReadinessCheck,
    ProposalHealthCheck,
)
from fleetgate.checks.services import (
    ClusterHealthCheck,
    MaintenanceUpdatesCheck,
    OpenStackCheck,
    StorageHealthCheck,
)


def register_readiness_checks(registry: CheckRegistry) -> CheckRegistry:
    """Register every readiness check, in report order."""
    registry.register(NodeReadinessCheck())
    registry.register(ProposalHealthCheck())
    registry.register(MaintenanceUpdatesCheck())
    registry.register(ClusterHealthCheck())
    registry.register(StorageHealthCheck())
    registry.register(OpenStackCheck())
    registry.register(ComputeStatusCheck())
    registry.register(HAConfigCheck())
    registry.register(DeploymentOrderCheck())
    return registry
