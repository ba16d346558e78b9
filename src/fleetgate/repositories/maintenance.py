"""Pending maintenance (security) update probe for the admin node."""

from typing import Any

from fleetgate.core.config import RepositoriesConfig
from fleetgate.interfaces.exceptions import RemoteExecutionError, RepositoryParseError
from fleetgate.interfaces.fleet_directory import FleetDirectory
from fleetgate.interfaces.remote_executor import RemoteExecutor
from fleetgate.repositories.zypper import parse_stream
from fleetgate.utils.logging import get_logger

logger = get_logger(__name__)


class MaintenanceUpdatesProbe:
    """List security patches still needed on the admin node."""

    def __init__(
        self,
        executor: RemoteExecutor,
        fleet: FleetDirectory,
        config: RepositoriesConfig | None = None,
        timeout: float | None = None,
    ):
        self.executor = executor
        self.fleet = fleet
        self.config = config or RepositoriesConfig()
        self.timeout = timeout

    async def updates_status(self) -> dict[str, Any]:
        """Summarize pending security updates.

        Returns:
            Empty dict when nothing is pending; otherwise ``security_updates``
            (needed patch names) and/or ``errors`` (why the probe failed)
        """
        admin = self.fleet.admin_node()
        if admin is None:
            return {"errors": ["admin node not found"]}

        try:
            result = await self.executor.run(
                admin.name, self.config.patches_command, timeout=self.timeout
            )
            stream = parse_stream(result.stdout)
        except (RemoteExecutionError, RepositoryParseError) as e:
            logger.error("maintenance_probe_failed", node=admin.name, error=str(e))
            return {"errors": [str(e)]}

        if stream.locked_message is not None:
            return {"errors": [stream.locked_message]}

        needed = [
            patch.name
            for patch in stream.patches
            if patch.status == "needed" and patch.category in ("", "security")
        ]
        logger.info("maintenance_updates_probed", node=admin.name, needed=len(needed))
        return {"security_updates": needed} if needed else {}
