"""Remote executor interface for running commands on fleet nodes."""

from abc import ABC, abstractmethod
from dataclasses import dataclass


@dataclass(frozen=True)
class RemoteCommandResult:
    """Outcome of one remote command. Produced fresh per call."""

    exit_code: int
    stdout: str = ""
    stderr: str = ""

    @property
    def succeeded(self) -> bool:
        """Whether the command exited with status 0."""
        return self.exit_code == 0

    def combined_output(self, separator: str = " ") -> str:
        """stdout followed by stderr when stderr is non-blank."""
        if self.stderr and self.stderr.strip():
            return f"{self.stdout}{separator}{self.stderr}"
        return self.stdout


class RemoteExecutor(ABC):
    """Abstract interface for executing commands on a named remote node.

    Implementations perform exactly one round-trip per call. There is no
    implicit retry or backoff: callers interpret failures.
    """

    @abstractmethod
    async def run(
        self,
        node: str,
        command: str,
        timeout: float | None = None,
    ) -> RemoteCommandResult:
        """Run ``command`` on ``node``.

        Args:
            node: Target node name (resolvable host name)
            command: Shell command line executed by the remote shell
            timeout: Per-call timeout in seconds (implementation default if None)

        Returns:
            Exit code, stdout and stderr of the remote command

        Raises:
            RemoteExecutionError: If the node is unreachable or the call times out
        """
