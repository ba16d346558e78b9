"""Service checks that probe nodes through the remote executor."""

from fleetgate.checks.services.cluster_health import ClusterHealthCheck
from fleetgate.checks.services.maintenance import MaintenanceUpdatesCheck
from fleetgate.checks.services.openstack import OpenStackCheck
from fleetgate.checks.services.storage_health import StorageHealthCheck

__all__ = [
    "ClusterHealthCheck",
    "MaintenanceUpdatesCheck",
    "OpenStackCheck",
    "StorageHealthCheck",
]
