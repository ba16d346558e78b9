"""Exceptions for interface implementations."""


class InterfaceError(Exception):
    """Base exception for all interface-related errors."""


class RemoteExecutionError(InterfaceError):
    """Remote command could not be completed (unreachable host or timeout).

    Attributes:
        node: Name of the node the command was sent to
        timed_out: Whether the call exceeded its timeout
    """

    def __init__(self, message: str, node: str, timed_out: bool = False):
        """Initialize remote execution error.

        Args:
            message: Error message
            node: Target node name
            timed_out: True if the call hit its timeout
        """
        super().__init__(message)
        self.node = node
        self.timed_out = timed_out


class FleetDirectoryError(InterfaceError):
    """Exception for fleet directory operations."""


class ProposalStoreError(InterfaceError):
    """Exception for proposal store operations."""


class RepositoryParseError(InterfaceError):
    """Package manager output could not be parsed."""
