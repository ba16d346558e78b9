"""Barclamp catalog: role ownership, run order and category lookups."""

from dataclasses import dataclass

from fleetgate.core.config import CatalogConfig
from fleetgate.utils.logging import get_logger

logger = get_logger(__name__)

DEFAULT_RUN_ORDER = 1000


@dataclass(frozen=True)
class RoleInfo:
    """Ownership information for a role name."""

    name: str
    barclamp: str
    proposal_role: bool


class BarclampCatalog:
    """Static knowledge about barclamps.

    Roles are attributed to the barclamp whose name is their longest ``<barclamp>-``
    prefix unless an explicit mapping exists. Proposal roles
    (``<barclamp>-config-<proposal>``) are flagged so callers can skip them.
    """

    def __init__(self, config: CatalogConfig | None = None):
        """Initialize the catalog.

        Args:
            config: Catalog configuration (defaults if omitted)
        """
        self.config = config or CatalogConfig()
        self._by_length = sorted(self.config.run_orders, key=len, reverse=True)

    def barclamps(self) -> list[str]:
        """Known barclamps sorted by run order."""
        return sorted(self.config.run_orders, key=self.run_order)

    def run_order(self, barclamp: str) -> int:
        """Run order rank of a barclamp (lower runs first)."""
        return self.config.run_orders.get(barclamp, DEFAULT_RUN_ORDER)

    def category(self, barclamp: str) -> str:
        """Category of a barclamp (``OpenStack`` unless configured otherwise)."""
        return self.config.categories.get(barclamp, self.config.default_category)

    def find_role(self, role: str) -> RoleInfo | None:
        """Resolve the barclamp owning a role.

        Args:
            role: Role name

        Returns:
            RoleInfo, or None if no known barclamp owns the role
        """
        barclamp = self.config.role_barclamps.get(role)
        if barclamp is None:
            barclamp = next(
                (b for b in self._by_length if role == b or role.startswith(f"{b}-")),
                None,
            )
        if barclamp is None:
            logger.debug("role_owner_unknown", role=role)
            return None

        return RoleInfo(
            name=role,
            barclamp=barclamp,
            proposal_role=role.startswith(f"{barclamp}-config-"),
        )
