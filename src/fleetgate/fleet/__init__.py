"""Fleet queries and barclamp catalog."""

from fleetgate.fleet.catalog import BarclampCatalog, RoleInfo
from fleetgate.fleet.query import CEPH_NODES_QUERY, FOUNDER_QUERY, NodeQuery, QueryTerm

__all__ = [
    "BarclampCatalog",
    "CEPH_NODES_QUERY",
    "FOUNDER_QUERY",
    "NodeQuery",
    "QueryTerm",
    "RoleInfo",
]
