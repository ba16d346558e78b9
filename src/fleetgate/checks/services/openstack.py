"""Workload-specific OpenStack compatibility check."""

from fleetgate.checks.base import ReadinessCheck
from fleetgate.core.models import HealthReport
from fleetgate.interfaces.check import CheckContext
from fleetgate.interfaces.exceptions import RemoteExecutionError
from fleetgate.utils.logging import get_logger

logger = get_logger(__name__)

LBAAS_POOLS_COMMAND = "source /root/.openrc; neutron lb-pool-list -f value -c id"


class OpenStackCheck(ReadinessCheck):
    """Check OpenStack service settings that block the upgrade.

    * swift replica count must not exceed the number of storage disks
    * keystone must not use the hybrid identity backend
    * neutron LBaaS v1 must not have live load balancer pools
    """

    @property
    def name(self) -> str:
        """Get check name."""
        return "openstack_check"

    @property
    def description(self) -> str:
        """Get check description."""
        return "Validates swift replicas, keystone backend and neutron LBaaS version"

    async def collect(self, context: CheckContext) -> HealthReport:
        findings: HealthReport = {}

        swift = context.proposals.where("swift")
        if swift is not None:
            replicas = swift.attribute("replicas", 0) or 0
            disks = sum(
                len(node.attribute("swift.devs", None) or [])
                for node in context.fleet.find("roles:swift-storage")
            )
            if replicas > disks:
                logger.warning("swift_too_many_replicas", replicas=replicas, disks=disks)
                findings["too_many_replicas"] = replicas

        keystone = context.proposals.where("keystone")
        if keystone is None:
            return findings
        if keystone.attribute("identity.driver", "sql") == "hybrid":
            findings["keystone_hybrid_backend"] = True

        neutron = context.proposals.where("neutron")
        if neutron is None:
            return findings
        if neutron.attribute("use_lbaas", False) and not neutron.attribute("use_lbaasv2", False):
            findings.update(await self._lbaas_v1_in_use(context))

        return findings

    @staticmethod
    async def _lbaas_v1_in_use(context: CheckContext) -> HealthReport:
        """LBaaS v1 is configured; flag it only if v1 pools actually exist."""
        servers = context.fleet.find("roles:neutron-server")
        if not servers:
            logger.warning("neutron_server_not_found")
            return {}
        server = servers[0]

        try:
            pools = await context.executor.run(
                server.name, LBAAS_POOLS_COMMAND, timeout=context.command_timeout
            )
        except RemoteExecutionError as e:
            logger.warning("lbaas_query_unreachable", node=server.name, error=str(e))
            return {"lbaas_v1_errors": {server.name: str(e)}}

        if not pools.succeeded:
            return {"lbaas_v1_errors": {server.name: pools.combined_output()}}
        return {"lbaas_v1": True} if pools.stdout.strip() else {}
