"""Package repository readiness checks."""

from fleetgate.repositories.checker import RepositoryVersionChecker
from fleetgate.repositories.maintenance import MaintenanceUpdatesProbe
from fleetgate.repositories.zypper import leading_version, parse_stream

__all__ = [
    "MaintenanceUpdatesProbe",
    "RepositoryVersionChecker",
    "leading_version",
    "parse_stream",
]
