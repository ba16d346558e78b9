"""Health check interface for pre-upgrade validation."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import TYPE_CHECKING

from fleetgate.core.models import CheckResult

if TYPE_CHECKING:
    from fleetgate.core.config import FleetGateConfig
    from fleetgate.fleet.catalog import BarclampCatalog
    from fleetgate.interfaces.fleet_directory import FleetDirectory
    from fleetgate.interfaces.proposal_store import ProposalStore
    from fleetgate.interfaces.remote_executor import RemoteExecutor


@dataclass
class CheckContext:
    """Context passed to health checks containing dependencies."""

    fleet: FleetDirectory
    proposals: ProposalStore
    executor: RemoteExecutor
    catalog: BarclampCatalog
    config: FleetGateConfig

    @property
    def command_timeout(self) -> float:
        """Per remote call timeout in seconds."""
        return self.config.remote.command_timeout_seconds


class Check(ABC):
    """Abstract interface for upgrade readiness checks.

    Every check is independent: it reads the fleet directory, proposal store and
    remote executor, never mutates shared state, and reports problems as findings
    (keys of the aggregate health report). A check with no findings passed.
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Get the check name for logging/reporting.

        Returns:
            Check name, also used to invoke the check individually
        """

    @property
    @abstractmethod
    def description(self) -> str:
        """Get a description of what this check validates.

        Returns:
            Description of the check's purpose
        """

    @abstractmethod
    async def execute(self, context: CheckContext) -> CheckResult:
        """Execute the check.

        Args:
            context: Check context with provider dependencies

        Returns:
            CheckResult whose findings hold this check's report contribution

        Raises:
            InterfaceError: If a collaborator fails; the orchestrator reports it
                under ``check_errors``
        """

    @property
    def timeout_seconds(self) -> int | None:
        """Maximum execution time for this check.

        Returns:
            Timeout in seconds, or None to use the orchestrator's default
            (``checks.timeout_seconds`` in the configuration)
        """
        return None
