"""Deployment ordering check."""

from fleetgate.checks.base import ReadinessCheck, compute_role
from fleetgate.core.models import HealthReport, Node
from fleetgate.fleet.catalog import BarclampCatalog
from fleetgate.interfaces.check import CheckContext
from fleetgate.utils.logging import get_logger

logger = get_logger(__name__)

COMPUTE_BARCLAMP = "nova"
COMPUTE_CONTROLLER_ROLE = "nova-controller"
OPENSTACK_CATEGORY = "OpenStack"
# Storage roles covered by their own checks.
SEPARATELY_CHECKED_ROLES = frozenset({"cinder-volume", "swift-storage"})


class DeploymentOrderCheck(ReadinessCheck):
    """Make sure compute nodes are not upgraded before services they depend on.

    A compute node that also carries a role of an OpenStack barclamp running
    earlier than nova would have that dependency upgraded after its dependent.
    Only the first offending node is reported.
    """

    @property
    def name(self) -> str:
        """Get check name."""
        return "deployment_check"

    @property
    def description(self) -> str:
        """Get check description."""
        return "Validates compute nodes carry no roles ordered before nova"

    async def collect(self, context: CheckContext) -> HealthReport:
        """Return the first ordering violation, if any."""
        nova_order = context.catalog.run_order(COMPUTE_BARCLAMP)

        for virt in context.config.checks.virtualization_backends:
            for node in context.fleet.find(f"roles:{compute_role(virt)}"):
                # compute next to the controller is disruptive, but keeps the order
                if COMPUTE_CONTROLLER_ROLE in node.roles:
                    continue

                wrong_roles = self._roles_before(node, context.catalog, nova_order)
                if wrong_roles:
                    logger.warning(
                        "deployment_order_violation", node=node.name, roles=wrong_roles
                    )
                    return {"controller_roles": {"node": node.name, "roles": wrong_roles}}

        return {}

    @staticmethod
    def _roles_before(node: Node, catalog: BarclampCatalog, nova_order: int) -> list[str]:
        wrong_roles = []
        for role in node.roles:
            if role in SEPARATELY_CHECKED_ROLES or role.startswith("nova-compute"):
                continue
            info = catalog.find_role(role)
            if info is None or info.proposal_role:
                continue
            if catalog.category(info.barclamp) != OPENSTACK_CATEGORY:
                continue
            if catalog.run_order(info.barclamp) < nova_order:
                wrong_roles.append(role)
        return wrong_roles
