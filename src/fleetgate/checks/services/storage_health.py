"""Ceph storage health check."""

from fleetgate.checks.base import ReadinessCheck
from fleetgate.core.models import UPGRADE_PREPARED_STATE, HealthReport
from fleetgate.fleet.query import CEPH_NODES_QUERY
from fleetgate.interfaces.check import CheckContext
from fleetgate.interfaces.exceptions import RemoteExecutionError
from fleetgate.repositories.zypper import leading_version
from fleetgate.utils.logging import get_logger

logger = get_logger(__name__)

MON_QUERY = "roles:ceph-mon AND ceph.config.environment:*"
HEALTH_COMMAND = "LANG=C ceph health --connect-timeout 5 2>&1"
# "ceph version 10.2.4-211-g12b091b (12b091b...)" -> "10.2.4-211-g12b091b"
VERSION_COMMAND = "LANG=C ceph --version | cut -d ' ' -f 3"
HEALTH_OK = "HEALTH_OK"


class StorageHealthCheck(ReadinessCheck):
    """Check the Ceph cluster is healthy, recent enough, and prepared.

    An unhealthy cluster is reported alone; the version and preparation
    checks only run against a healthy cluster.
    """

    @property
    def name(self) -> str:
        """Get check name."""
        return "ceph_status"

    @property
    def description(self) -> str:
        """Get check description."""
        return "Validates Ceph health, version and node preparation"

    async def collect(self, context: CheckContext) -> HealthReport:
        """Collect Ceph health errors, old version flag and unprepared nodes."""
        ceph_nodes = context.fleet.find(CEPH_NODES_QUERY)
        if not ceph_nodes:
            return {}

        monitors = context.fleet.find(MON_QUERY)
        if not monitors:
            logger.error("ceph_monitor_not_found")
            return {"health_errors": "No Ceph monitor node found"}
        mon = monitors[0]

        try:
            health = await context.executor.run(
                mon.name, HEALTH_COMMAND, timeout=context.command_timeout
            )
        except RemoteExecutionError as e:
            logger.warning("ceph_health_unreachable", node=mon.name, error=str(e))
            return {"health_errors": f"{mon.name}: {e}"}

        # Some warnings need not be critical, but there is no way to tell.
        if HEALTH_OK not in health.stdout:
            errors = health.stdout
            if health.stderr:
                if health.stdout:
                    errors += "; "
                errors += health.stderr
            logger.warning("ceph_unhealthy", node=mon.name, health=errors)
            return {"health_errors": errors}

        findings: HealthReport = {}
        try:
            version = await context.executor.run(
                mon.name, VERSION_COMMAND, timeout=context.command_timeout
            )
        except RemoteExecutionError as e:
            logger.warning("ceph_version_unreachable", node=mon.name, error=str(e))
            return {"health_errors": f"{mon.name}: {e}"}

        threshold = context.config.checks.storage_min_version
        if leading_version(version.stdout.strip()) < threshold:
            findings["old_version"] = True

        not_prepared = [n.name for n in ceph_nodes if n.state != UPGRADE_PREPARED_STATE]
        if not_prepared:
            findings["not_prepared"] = not_prepared

        return findings
