"""Pacemaker cluster health check."""

import asyncio

from fleetgate.checks.base import ReadinessCheck
from fleetgate.core.models import HealthReport, Node
from fleetgate.fleet.query import FOUNDER_QUERY
from fleetgate.interfaces.check import CheckContext
from fleetgate.interfaces.exceptions import RemoteExecutionError
from fleetgate.utils.logging import get_logger

logger = get_logger(__name__)

CRM_STATUS_COMMAND = "crm status 2>&1"
FAILED_ACTIONS_COMMAND = "LANG=C crm status | grep -A 2 '^Failed Actions:'"


class ClusterHealthCheck(ReadinessCheck):
    """Check that every HA cluster reports a clean status.

    For each cluster founder ``crm status`` must succeed; if it does, the status
    must not carry a "Failed Actions" section. Failed resources have to be
    cleaned up manually before the upgrade can proceed.
    """

    @property
    def name(self) -> str:
        """Get check name."""
        return "clusters_health"

    @property
    def description(self) -> str:
        """Get check description."""
        return "Validates pacemaker clusters report no errors or failed actions"

    async def collect(self, context: CheckContext) -> HealthReport:
        """Collect crm failures and failed actions per founder node."""
        founders = context.fleet.find(FOUNDER_QUERY)
        if not founders:
            return {}

        outcomes = await asyncio.gather(
            *(self._probe_founder(context, founder) for founder in founders)
        )

        crm_failures: dict[str, str] = {}
        failed_actions: dict[str, str] = {}
        for founder, (kind, message) in zip(founders, outcomes):
            if kind == "crm_failures":
                crm_failures[founder.name] = message
            elif kind == "failed_actions":
                failed_actions[founder.name] = message

        findings: HealthReport = {}
        if crm_failures:
            findings["crm_failures"] = crm_failures
        if failed_actions:
            findings["failed_actions"] = failed_actions
        return findings

    @staticmethod
    async def _probe_founder(context: CheckContext, founder: Node) -> tuple[str | None, str]:
        name = founder.name
        try:
            status = await context.executor.run(
                name, CRM_STATUS_COMMAND, timeout=context.command_timeout
            )
            if not status.succeeded:
                logger.warning("crm_status_failed", node=name, stdout=status.stdout)
                return "crm_failures", f"{name}: {status.combined_output()}"

            actions = await context.executor.run(
                name, FAILED_ACTIONS_COMMAND, timeout=context.command_timeout
            )
        except RemoteExecutionError as e:
            logger.warning("crm_status_unreachable", node=name, error=str(e))
            return "crm_failures", f"{name}: {e}"

        # grep exits 0 only when the section exists
        if actions.succeeded:
            logger.warning("crm_failed_actions", node=name, stdout=actions.stdout)
            return "failed_actions", f"{name}: {actions.combined_output()}"
        return None, ""
