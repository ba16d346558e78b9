"""Repository availability checks for a target platform version."""

from __future__ import annotations

from typing import TYPE_CHECKING

from fleetgate.core.config import PlatformRelease, RepositoriesConfig
from fleetgate.core.exceptions import ConfigurationError
from fleetgate.core.messages import render
from fleetgate.core.models import (
    RepositoryCheckError,
    RepositoryCheckReport,
    RepositoryStatus,
    ResponseStatus,
)
from fleetgate.interfaces.exceptions import RemoteExecutionError, RepositoryParseError
from fleetgate.interfaces.fleet_directory import FleetDirectory
from fleetgate.interfaces.remote_executor import RemoteExecutor
from fleetgate.repositories.zypper import ZypperStream, parse_stream
from fleetgate.utils.logging import get_logger

if TYPE_CHECKING:
    from fleetgate.upgrade.state import UpgradeStateStore

logger = get_logger(__name__)

REPOCHECK_STEP = "repocheck_crowbar"


class RepositoryVersionChecker:
    """Report per product family whether repositories for a version are available.

    Runs ``zypper --xmlout products`` on the admin node and tests for exact
    (name, version) product entries of the base OS and the cloud add-on.
    """

    def __init__(
        self,
        executor: RemoteExecutor,
        fleet: FleetDirectory,
        config: RepositoriesConfig | None = None,
        upgrade_state: UpgradeStateStore | None = None,
        timeout: float | None = None,
    ):
        """Initialize repository checker.

        Args:
            executor: Remote executor used to reach the admin node
            fleet: Fleet directory used to find the admin node
            config: Repository configuration (defaults if omitted)
            upgrade_state: Store to record lock/prompt failures into (optional)
            timeout: Per-call timeout in seconds (executor default if None)
        """
        self.executor = executor
        self.fleet = fleet
        self.config = config or RepositoriesConfig()
        self.upgrade_state = upgrade_state
        self.timeout = timeout

    def expected_repos(self, target_version: str) -> dict[str, list[str]]:
        """Channel names expected per product family for a platform version.

        Raises:
            ConfigurationError: If the version has no configured OS release
        """
        release = self._release(target_version)
        return {
            "os": [
                f"SLES12-{release.service_pack}-Pool",
                f"SLES12-{release.service_pack}-Updates",
            ],
            "openstack": [
                f"SUSE-OpenStack-Cloud-{target_version}-Pool",
                f"SUSE-OpenStack-Cloud-{target_version}-Updates",
            ],
        }

    async def check(
        self,
        target_version: str,
        record_failure: bool = False,
    ) -> RepositoryCheckReport | RepositoryCheckError:
        """Check repository availability for ``target_version``.

        Args:
            target_version: Cloud platform version (e.g. ``"6"``)
            record_failure: Mark the upgrade failed on lock/prompt errors

        Returns:
            RepositoryCheckReport, or RepositoryCheckError when zypper is locked,
            waiting for input, or its output cannot be obtained or parsed
        """
        release = self._release(target_version)
        admin = self.fleet.admin_node()
        if admin is None:
            logger.error("admin_node_not_found")
            return RepositoryCheckError(
                key="zypper_failed",
                error=render("zypper_failed", details="admin node not found"),
            )

        logger.info("checking_repositories", target_version=target_version, node=admin.name)

        try:
            result = await self.executor.run(
                admin.name, self.config.products_command, timeout=self.timeout
            )
        except RemoteExecutionError as e:
            logger.error("zypper_products_unreachable", node=admin.name, error=str(e))
            return RepositoryCheckError(
                key="zypper_failed", error=render("zypper_failed", details=str(e))
            )

        # zypper exits non-zero when locked but still prints its XML stream
        try:
            stream = parse_stream(result.stdout)
        except RepositoryParseError as e:
            if not result.succeeded:
                logger.error(
                    "zypper_products_failed", node=admin.name, exit_code=result.exit_code
                )
                details = result.combined_output() or f"exit code {result.exit_code}"
                return RepositoryCheckError(
                    key="zypper_failed", error=render("zypper_failed", details=details)
                )
            logger.error("zypper_products_unparseable", node=admin.name, error=str(e))
            return RepositoryCheckError(
                key="zypper_parse_error", error=render("zypper_parse_error", details=str(e))
            )

        precondition = self._precondition_error(stream, record_failure)
        if precondition is not None:
            return precondition

        repos = self.expected_repos(target_version)
        arch = admin.architecture

        os_status = self._status(
            stream.has_product(self.config.os_product, release.os_version), repos["os"], arch
        )
        cloud_status = self._status(
            stream.has_product(self.config.cloud_product, target_version),
            repos["openstack"],
            arch,
        )

        logger.info(
            "repositories_checked",
            target_version=target_version,
            os_available=os_status.available,
            openstack_available=cloud_status.available,
        )
        return RepositoryCheckReport(os=os_status, openstack=cloud_status)

    def _precondition_error(
        self, stream: ZypperStream, record_failure: bool
    ) -> RepositoryCheckError | None:
        locked = stream.locked_message
        if locked is not None:
            logger.warning("zypper_locked", message=locked)
            if record_failure:
                self._record(locked, render("zypper_locked_help"))
            return RepositoryCheckError(
                status=ResponseStatus.SERVICE_UNAVAILABLE,
                key="zypper_locked",
                error=render("zypper_locked", zypper_locked_message=locked),
            )

        prompt = stream.first_prompt
        if prompt is not None:
            logger.warning("zypper_prompt_pending", prompt=prompt, prompts=len(stream.prompts))
            if record_failure:
                self._record(prompt, render("zypper_prompt_help"))
            return RepositoryCheckError(
                status=ResponseStatus.SERVICE_UNAVAILABLE,
                key="zypper_prompt",
                error=render("zypper_prompt", zypper_prompt_text=prompt),
            )

        return None

    def _record(self, data: str, help: str) -> None:
        if self.upgrade_state is None:
            logger.debug("repocheck_failure_not_recorded", reason="no_upgrade_state")
            return
        self.upgrade_state.mark_failed(REPOCHECK_STEP, data=data, help=help)

    @staticmethod
    def _status(available: bool, repos: list[str], arch: str) -> RepositoryStatus:
        errors = {} if available else {arch: {"missing": list(repos)}}
        return RepositoryStatus(available=available, repos=list(repos), errors=errors)

    def _release(self, target_version: str) -> PlatformRelease:
        try:
            return self.config.releases[target_version]
        except KeyError:
            raise ConfigurationError(
                f"No OS release configured for platform version {target_version}"
            ) from None
