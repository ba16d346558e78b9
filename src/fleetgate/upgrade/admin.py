"""Admin server status and upgrade launch API."""

import os
import subprocess
from pathlib import Path
from typing import Any

from fleetgate.core.config import FleetGateConfig
from fleetgate.core.exceptions import UpgradeConflictError
from fleetgate.core.messages import render
from fleetgate.core.models import ResponseStatus, UpgradeStartResult
from fleetgate.fleet.query import CEPH_NODES_QUERY, FOUNDER_QUERY
from fleetgate.interfaces.fleet_directory import FleetDirectory
from fleetgate.upgrade.state import UpgradeStateStore
from fleetgate.utils.logging import get_logger, log_error

logger = get_logger(__name__)

ADMIN_STEP = "admin"

# Add-ons reported by status(), with the query telling whether each is deployed.
ADDON_DEPLOYMENT_QUERIES = {
    "ceph": CEPH_NODES_QUERY,
    "ha": FOUNDER_QUERY,
}


class AdminServer:
    """Admin server view: version, deployed add-ons and the upgrade lifecycle.

    Starting an upgrade spawns the launcher script as a detached process and
    returns at once; progress is observed afterwards through the state markers.
    """

    def __init__(
        self,
        config: FleetGateConfig,
        fleet: FleetDirectory,
        state: UpgradeStateStore | None = None,
    ):
        """Initialize admin server API.

        Args:
            config: Fleetgate configuration
            fleet: Fleet directory used to tell whether add-ons are deployed
            state: Upgrade state store (built from config if omitted)
        """
        self.config = config
        self.fleet = fleet
        self.state = state or UpgradeStateStore(config.upgrade.state_dir)

    @property
    def launcher_path(self) -> Path:
        return Path(self.config.upgrade.launcher_path)

    def version(self) -> str | None:
        """Platform version as exported by the environment."""
        return os.environ.get(self.config.upgrade.version_env_var)

    def addons(self) -> list[str]:
        """Add-ons that are both installed and deployed on the fleet."""
        return [
            addon
            for addon, query in ADDON_DEPLOYMENT_QUERIES.items()
            if self.config.addon_installed(addon) and self.fleet.find(query)
        ]

    def status(self) -> dict[str, Any]:
        return {"version": self.version(), "addons": self.addons()}

    def upgrade(self) -> dict[str, Any]:
        """Status extended with the upgrade progress flags."""
        return {**self.status(), "upgrade": self.state.flags()}

    def start_upgrade(self) -> UpgradeStartResult:
        """Launch the admin server upgrade in the background.

        Returns:
            ``conflict`` if an upgrade is already running, ``unprocessable_entity``
            if the launcher is missing, otherwise ``accepted`` with the child pid

        Raises:
            Exception: Any unexpected failure, after recording it as a failed upgrade
        """
        try:
            if self.state.is_upgrading():
                return self._conflict()

            if not self.launcher_path.exists():
                message = render("upgrade_script_path", path=self.launcher_path)
                logger.error("upgrade_launcher_missing", path=str(self.launcher_path))
                return UpgradeStartResult(
                    status=ResponseStatus.UNPROCESSABLE_ENTITY,
                    key="upgrade_script_path",
                    message=message,
                )

            try:
                self.state.mark_upgrading()
            except UpgradeConflictError:
                # lost the race against a concurrent start
                return self._conflict()

            pid = self._spawn()
        except Exception as e:
            self.state.mark_failed(ADMIN_STEP, data=str(e), help=render("admin_failed_help"))
            log_error(logger, e, operation="upgrade_start")
            raise

        logger.info("upgrade_launched", path=str(self.launcher_path), pid=pid)
        return UpgradeStartResult(
            status=ResponseStatus.ACCEPTED,
            key="upgrade_started",
            message=render("upgrade_started"),
            pid=pid,
        )

    def _spawn(self) -> int:
        command = [*self.config.upgrade.launcher_prefix, str(self.launcher_path)]
        process = subprocess.Popen(
            command,
            stdin=subprocess.DEVNULL,
            stdout=subprocess.DEVNULL,
            stderr=subprocess.DEVNULL,
            start_new_session=True,
        )
        return process.pid

    @staticmethod
    def _conflict() -> UpgradeStartResult:
        logger.warning("upgrade_already_running")
        return UpgradeStartResult(
            status=ResponseStatus.CONFLICT,
            key="upgrade_ongoing",
            message=render("upgrade_ongoing"),
        )
