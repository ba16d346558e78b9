"""Node readiness check."""

from fleetgate.checks.base import ReadinessCheck
from fleetgate.core.models import HealthReport
from fleetgate.interfaces.check import CheckContext
from fleetgate.utils.logging import get_logger

logger = get_logger(__name__)


class NodeReadinessCheck(ReadinessCheck):
    """Check that every node outside the storage role family is ready.

    Storage nodes are excluded because they are expected to already be in
    the pre-upgrade state.
    """

    @property
    def name(self) -> str:
        """Get check name."""
        return "nodes_ready"

    @property
    def description(self) -> str:
        """Get check description."""
        return "Validates all non-storage nodes are in ready state"

    async def collect(self, context: CheckContext) -> HealthReport:
        """Collect unready node names in fleet order."""
        nodes = context.fleet.find("NOT roles:ceph-*")
        unready = [node.name for node in nodes if not node.ready]

        logger.info("node_readiness_checked", nodes=len(nodes), unready=len(unready))
        return {"nodes_not_ready": unready} if unready else {}
