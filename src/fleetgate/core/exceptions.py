"""Custom exceptions for fleetgate."""


class FleetGateError(Exception):
    """Base exception for all fleetgate errors."""


class ConfigurationError(FleetGateError):
    """Configuration-related errors."""


class QueryError(FleetGateError):
    """Malformed fleet query."""


class UpgradeError(FleetGateError):
    """Upgrade state or launcher operation failed."""


class UpgradeConflictError(UpgradeError):
    """An upgrade is already in progress."""
