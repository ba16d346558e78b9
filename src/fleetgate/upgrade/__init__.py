"""Admin server upgrade lifecycle."""

from fleetgate.upgrade.admin import AdminServer
from fleetgate.upgrade.state import UpgradeStateStore

__all__ = ["AdminServer", "UpgradeStateStore"]
