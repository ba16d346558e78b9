"""Fleet directory interface for node lookups."""

from abc import ABC, abstractmethod

from fleetgate.core.models import Node


class FleetDirectory(ABC):
    """Abstract query interface over fleet nodes.

    Queries use the small predicate language implemented in
    :mod:`fleetgate.fleet.query` (``roles:nova-compute-kvm AND nova.use_migration:true``).
    Results are always returned in fleet order.
    """

    @abstractmethod
    def find(self, query: str) -> list[Node]:
        """Find nodes matching a query.

        Args:
            query: Predicate query string

        Returns:
            Matching nodes, in fleet order

        Raises:
            QueryError: If the query is malformed
            FleetDirectoryError: If the directory cannot be read
        """

    @abstractmethod
    def all(self) -> list[Node]:
        """Get every node in fleet order."""

    @abstractmethod
    def get(self, name: str) -> Node | None:
        """Get a node by name."""

    @abstractmethod
    def admin_node(self) -> Node | None:
        """Get the admin (bootstrap) node, if known."""

    @abstractmethod
    def is_cluster(self, target: str) -> bool:
        """Whether a proposal target identifier names a cluster.

        Args:
            target: Target identifier from a proposal's elements

        Returns:
            True if the identifier refers to a cluster rather than a single node
        """
