"""Registry for managing readiness checks."""

from fleetgate.interfaces.check import Check
from fleetgate.utils.logging import get_logger

logger = get_logger(__name__)


class CheckRegistry:
    """Registry for readiness check management.

    Checks keep their registration order, which is also the order their
    results are reported in.
    """

    def __init__(self) -> None:
        """Initialize check registry."""
        self._checks: list[Check] = []
        self._checks_by_name: dict[str, Check] = {}
        logger.debug("check_registry_initialized")

    def register(self, check: Check) -> None:
        """Register a readiness check.

        Args:
            check: Check to register; a second check with the same name is ignored
        """
        if check.name in self._checks_by_name:
            logger.warning("check_already_registered", check_name=check.name)
            return

        self._checks.append(check)
        self._checks_by_name[check.name] = check
        logger.debug("check_registered", check_name=check.name)

    def get_check(self, check_name: str) -> Check | None:
        """Get a check by name."""
        return self._checks_by_name.get(check_name)

    def get_all_checks(self) -> list[Check]:
        """Get all registered checks in registration order."""
        return self._checks.copy()

    def names(self) -> list[str]:
        """Names of all registered checks."""
        return [check.name for check in self._checks]

    def __contains__(self, check_name: object) -> bool:
        return check_name in self._checks_by_name

    def __len__(self) -> int:
        """Get number of registered checks."""
        return len(self._checks)
