"""Proposal health check."""

from fleetgate.checks.base import ReadinessCheck
from fleetgate.core.models import HealthReport
from fleetgate.interfaces.check import CheckContext


class ProposalHealthCheck(ReadinessCheck):
    """Flag active proposals whose last application failed."""

    @property
    def name(self) -> str:
        """Get check name."""
        return "proposals"

    @property
    def description(self) -> str:
        """Get check description."""
        return "Validates no active proposal is in failed state"

    async def collect(self, context: CheckContext) -> HealthReport:
        failed = [p.display_name for p in context.proposals.all() if p.active and p.failed]
        return {"failed_proposals": failed} if failed else {}
