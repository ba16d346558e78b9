"""High availability topology check."""

from fleetgate.checks.base import ReadinessCheck, compute_role
from fleetgate.core.models import HealthReport
from fleetgate.fleet.query import FOUNDER_QUERY
from fleetgate.interfaces.check import CheckContext
from fleetgate.utils.logging import get_logger

logger = get_logger(__name__)


class HAConfigCheck(ReadinessCheck):
    """Check the HA setup required for a non-disruptive upgrade.

    Short-circuits, in order: HA add-on missing, no cluster founder, control
    plane roles deployed outside clusters. Only a fully clustered control plane
    is inspected for compute nodes that also carry controller roles.
    """

    @property
    def name(self) -> str:
        """Get check name."""
        return "ha_config"

    @property
    def description(self) -> str:
        """Get check description."""
        return "Validates control plane roles are clustered and not mixed with compute"

    async def collect(self, context: CheckContext) -> HealthReport:
        """Collect the first HA topology problem class found."""
        if not context.config.addon_installed("ha"):
            return {"ha_not_installed": True}

        if not context.fleet.find(FOUNDER_QUERY):
            return {"ha_not_configured": True}

        roles_not_ha = self._roles_not_ha(context)
        if roles_not_ha:
            logger.warning("roles_not_clustered", roles=roles_not_ha)
            return {"roles_not_ha": roles_not_ha}

        conflicts = self._role_conflicts(context)
        return {"role_conflicts": conflicts} if conflicts else {}

    @staticmethod
    def _roles_not_ha(context: CheckContext) -> list[str]:
        clustered_roles = context.config.checks.clustered_roles
        roles_not_ha: list[str] = []

        for barclamp in context.config.checks.ha_barclamps:
            proposal = context.proposals.where(barclamp)
            if proposal is None:
                continue
            for role, targets in proposal.elements().items():
                if role not in clustered_roles or role in roles_not_ha:
                    continue
                if any(not context.fleet.is_cluster(target) for target in targets):
                    roles_not_ha.append(role)

        return roles_not_ha

    @staticmethod
    def _role_conflicts(context: CheckContext) -> dict[str, list[str]]:
        conflicting_roles = context.config.checks.conflicting_roles
        conflicts: dict[str, list[str]] = {}

        for virt in context.config.checks.virtualization_backends:
            for node in context.fleet.find(f"roles:{compute_role(virt)}"):
                conflict = [role for role in node.roles if role in conflicting_roles]
                if not conflict:
                    continue
                conflicts[node.name] = conflict
                logger.warning("compute_role_conflict", node=node.name, roles=conflict)

        return conflicts
