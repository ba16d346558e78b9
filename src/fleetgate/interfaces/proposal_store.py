"""Proposal store interface for per-barclamp deployment configurations."""

from abc import ABC, abstractmethod

from fleetgate.core.models import Proposal


class ProposalStore(ABC):
    """Abstract query interface over proposals."""

    @abstractmethod
    def where(self, barclamp: str) -> Proposal | None:
        """Get the first proposal for a barclamp.

        Args:
            barclamp: Barclamp identifier

        Returns:
            Proposal if one exists, None otherwise

        Raises:
            ProposalStoreError: If the store cannot be read
        """

    @abstractmethod
    def all(self) -> list[Proposal]:
        """Get every proposal."""
