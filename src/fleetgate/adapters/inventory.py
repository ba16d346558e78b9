"""YAML inventory adapters implementing FleetDirectory and ProposalStore."""

from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from fleetgate.core.models import Node, Proposal
from fleetgate.fleet.query import NodeQuery
from fleetgate.interfaces.exceptions import FleetDirectoryError, ProposalStoreError
from fleetgate.interfaces.fleet_directory import FleetDirectory
from fleetgate.interfaces.proposal_store import ProposalStore
from fleetgate.utils.logging import get_logger

logger = get_logger(__name__)

CLUSTER_PREFIX = "cluster:"


def load_inventory(path: str | Path) -> dict[str, Any]:
    """Read a raw inventory document.

    Args:
        path: Path to the inventory YAML file

    Returns:
        Parsed document with ``nodes``, ``clusters`` and ``proposals`` sections

    Raises:
        FleetDirectoryError: If the file is missing or not valid YAML
    """
    inventory_path = Path(path).expanduser()
    if not inventory_path.exists():
        raise FleetDirectoryError(f"Inventory file not found: {inventory_path}")

    try:
        with inventory_path.open() as f:
            data = yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
        raise FleetDirectoryError(f"Failed to parse inventory {inventory_path}: {e}") from e

    if not isinstance(data, dict):
        raise FleetDirectoryError(f"Inventory {inventory_path} must be a mapping")

    logger.debug(
        "inventory_loaded",
        path=str(inventory_path),
        nodes=len(data.get("nodes") or []),
        proposals=len(data.get("proposals") or []),
    )
    return data


class InventoryFleetDirectory(FleetDirectory):
    """Fleet directory over an in-memory node list (fleet order = list order)."""

    def __init__(self, nodes: list[Node], clusters: list[str] | None = None):
        """Initialize the directory.

        Args:
            nodes: Nodes in fleet order
            clusters: Known cluster names; when None any ``cluster:`` target counts
        """
        self._nodes = list(nodes)
        self._by_name = {node.name: node for node in self._nodes}
        self._clusters = set(clusters) if clusters is not None else None

    @classmethod
    def from_document(cls, data: dict[str, Any]) -> "InventoryFleetDirectory":
        """Build the directory from a raw inventory document."""
        try:
            nodes = [Node(**raw) for raw in data.get("nodes") or []]
        except ValidationError as e:
            raise FleetDirectoryError(f"Invalid node record: {e}") from e
        return cls(nodes, clusters=data.get("clusters"))

    @classmethod
    def from_file(cls, path: str | Path) -> "InventoryFleetDirectory":
        """Build the directory from an inventory YAML file."""
        return cls.from_document(load_inventory(path))

    def find(self, query: str) -> list[Node]:
        """Find nodes matching a query, in fleet order."""
        matches = NodeQuery.parse(query).filter(self._nodes)
        logger.debug("fleet_query", query=query, matches=len(matches))
        return matches

    def all(self) -> list[Node]:
        """Get every node in fleet order."""
        return list(self._nodes)

    def get(self, name: str) -> Node | None:
        """Get a node by name."""
        return self._by_name.get(name)

    def admin_node(self) -> Node | None:
        """Get the first node flagged as admin."""
        return next((node for node in self._nodes if node.admin), None)

    def is_cluster(self, target: str) -> bool:
        """Whether ``target`` is a ``cluster:<name>`` identifier of a known cluster."""
        if not target.startswith(CLUSTER_PREFIX):
            return False
        if self._clusters is None:
            return True
        return target[len(CLUSTER_PREFIX) :] in self._clusters


class InventoryProposalStore(ProposalStore):
    """Proposal store over an in-memory proposal list."""

    def __init__(self, proposals: list[Proposal]):
        """Initialize the store.

        Args:
            proposals: Proposals in store order
        """
        self._proposals = list(proposals)

    @classmethod
    def from_document(cls, data: dict[str, Any]) -> "InventoryProposalStore":
        """Build the store from a raw inventory document."""
        try:
            proposals = [Proposal(**raw) for raw in data.get("proposals") or []]
        except ValidationError as e:
            raise ProposalStoreError(f"Invalid proposal record: {e}") from e
        return cls(proposals)

    @classmethod
    def from_file(cls, path: str | Path) -> "InventoryProposalStore":
        """Build the store from an inventory YAML file."""
        try:
            data = load_inventory(path)
        except FleetDirectoryError as e:
            raise ProposalStoreError(str(e)) from e
        return cls.from_document(data)

    def where(self, barclamp: str) -> Proposal | None:
        """Get the first proposal for a barclamp."""
        return next((p for p in self._proposals if p.barclamp == barclamp), None)

    def all(self) -> list[Proposal]:
        """Get every proposal."""
        return list(self._proposals)
