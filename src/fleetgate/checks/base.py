"""Shared base for readiness checks that contribute health report keys."""

from abc import abstractmethod

from fleetgate.core.models import CheckResult, HealthReport
from fleetgate.interfaces.check import Check, CheckContext
from fleetgate.utils.logging import get_logger

logger = get_logger(__name__)


def compute_role(virt: str) -> str:
    """Compute role name for a virtualization backend."""
    return f"nova-compute-{virt}"


class ReadinessCheck(Check):
    """A check whose result is the set of health report keys it found."""

    @abstractmethod
    async def collect(self, context: CheckContext) -> HealthReport:
        """Gather this check's findings.

        Args:
            context: Check context with provider dependencies

        Returns:
            Health report contribution; empty when nothing blocks the upgrade
        """

    async def execute(self, context: CheckContext) -> CheckResult:
        """Run :meth:`collect` and wrap its findings in a CheckResult."""
        findings = await self.collect(context)
        if findings:
            logger.warning("check_found_problems", check_name=self.name, keys=sorted(findings))
        return CheckResult.from_findings(self.name, findings)
