"""Compute capacity check."""

from fleetgate.checks.base import ReadinessCheck, compute_role
from fleetgate.core.models import HealthReport
from fleetgate.interfaces.check import CheckContext
from fleetgate.utils.logging import get_logger

logger = get_logger(__name__)


class ComputeStatusCheck(ReadinessCheck):
    """Check compute capacity allows moving workloads during the upgrade.

    A backend with a single compute node cannot live-migrate its instances
    anywhere, and migration must be enabled on the compute controller.
    """

    @property
    def name(self) -> str:
        """Get check name."""
        return "compute_status"

    @property
    def description(self) -> str:
        """Get check description."""
        return "Validates compute capacity and live migration support"

    async def collect(self, context: CheckContext) -> HealthReport:
        """Collect single-node backends and disabled live migration."""
        findings: HealthReport = {}

        for virt in context.config.checks.virtualization_backends:
            compute_nodes = context.fleet.find(f"roles:{compute_role(virt)}")
            if len(compute_nodes) != 1:
                continue
            logger.warning("single_compute_node", virt=virt, node=compute_nodes[0].name)
            findings.setdefault("no_resources", []).append(
                f"Found only one compute node of {virt} type; "
                "non-disruptive upgrade is not possible"
            )

        controllers = context.fleet.find("roles:nova-controller")
        if controllers and not controllers[0].attribute("nova.use_migration", False):
            findings["no_live_migration"] = True

        return findings
