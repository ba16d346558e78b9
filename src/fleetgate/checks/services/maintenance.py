"""Repository and maintenance update readiness check."""

from fleetgate.checks.base import ReadinessCheck
from fleetgate.core.models import HealthReport, RepositoryCheckError
from fleetgate.interfaces.check import CheckContext
from fleetgate.repositories.checker import RepositoryVersionChecker
from fleetgate.repositories.maintenance import MaintenanceUpdatesProbe
from fleetgate.utils.logging import get_logger

logger = get_logger(__name__)


class MaintenanceUpdatesCheck(ReadinessCheck):
    """Check repositories are set up for the current version only, and patched.

    Current-version channels must all be present; next-version channels must
    not be present yet, since mixing both sets is itself an error; finally no
    security update may be pending.
    """

    @property
    def name(self) -> str:
        """Get check name."""
        return "maintenance_updates"

    @property
    def description(self) -> str:
        """Get check description."""
        return "Validates repository setup and pending maintenance updates"

    async def collect(self, context: CheckContext) -> HealthReport:
        """Collect the first repository or update problem found."""
        repo_config = context.config.repositories
        checker = RepositoryVersionChecker(
            context.executor,
            context.fleet,
            config=repo_config,
            timeout=context.command_timeout,
        )

        current = await checker.check(repo_config.current_version)
        if isinstance(current, RepositoryCheckError):
            return {"zypper_errors": current.error}

        if not current.all_available:
            missing = ", ".join(current.missing_repos())
            logger.warning("repositories_missing", repos=missing)
            return {"repositories_missing": missing}

        upcoming = await checker.check(repo_config.next_version)
        if isinstance(upcoming, RepositoryCheckError):
            return {"zypper_errors": upcoming.error}

        if upcoming.any_available:
            available = ", ".join(upcoming.available_repos())
            logger.warning("repositories_too_soon", repos=available)
            return {"repositories_too_soon": available}

        probe = MaintenanceUpdatesProbe(
            context.executor,
            context.fleet,
            config=repo_config,
            timeout=context.command_timeout,
        )
        updates = await probe.updates_status()
        return {"maintenance_updates": updates} if updates else {}
