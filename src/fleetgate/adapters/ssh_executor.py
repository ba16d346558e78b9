"""SSH adapter implementing the RemoteExecutor interface."""

import asyncio

from fleetgate.core.config import RemoteConfig
from fleetgate.interfaces.exceptions import RemoteExecutionError
from fleetgate.interfaces.remote_executor import RemoteCommandResult, RemoteExecutor
from fleetgate.utils.logging import get_logger

logger = get_logger(__name__)

# OpenSSH reports its own connection failures with exit status 255.
SSH_TRANSPORT_FAILURE = 255


class SSHExecutor(RemoteExecutor):
    """Run commands on fleet nodes through the OpenSSH client.

    Each call is one ``ssh`` process with its own timeout. A node that is
    unreachable or slow raises RemoteExecutionError for that call only.
    """

    def __init__(self, config: RemoteConfig | None = None):
        """Initialize SSH executor.

        Args:
            config: Remote execution configuration (defaults if omitted)
        """
        self.config = config or RemoteConfig()
        logger.debug(
            "ssh_executor_initialized",
            user=self.config.user,
            port=self.config.port,
            timeout=self.config.command_timeout_seconds,
        )

    def build_command(self, node: str, command: str) -> list[str]:
        """Build the ssh argument vector for a remote command.

        Args:
            node: Target node name
            command: Remote shell command

        Returns:
            Argument vector suitable for exec
        """
        args = [self.config.ssh_binary, "-p", str(self.config.port)]
        for option in self.config.options:
            args.extend(["-o", option])
        args.append(f"{self.config.user}@{node}")
        args.append(command)
        return args

    async def run(
        self,
        node: str,
        command: str,
        timeout: float | None = None,
    ) -> RemoteCommandResult:
        """Run ``command`` on ``node`` over ssh.

        Args:
            node: Target node name
            command: Remote shell command
            timeout: Per-call timeout in seconds

        Returns:
            RemoteCommandResult of the remote command

        Raises:
            RemoteExecutionError: If ssh is missing, the node is unreachable or the
                call times out
        """
        timeout = timeout if timeout is not None else self.config.command_timeout_seconds
        args = self.build_command(node, command)

        logger.debug("running_remote_command", node=node, command=command, timeout=timeout)

        try:
            process = await asyncio.create_subprocess_exec(
                *args,
                stdin=asyncio.subprocess.DEVNULL,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
            )
        except FileNotFoundError as e:
            logger.error("ssh_binary_not_found", binary=self.config.ssh_binary)
            raise RemoteExecutionError(
                f"ssh client not found: {self.config.ssh_binary}", node=node
            ) from e

        try:
            stdout, stderr = await asyncio.wait_for(process.communicate(), timeout=timeout)
        except (TimeoutError, asyncio.TimeoutError) as e:
            logger.warning("remote_command_timeout", node=node, command=command, timeout=timeout)
            raise RemoteExecutionError(
                f"Command on {node} timed out after {timeout} seconds",
                node=node,
                timed_out=True,
            ) from e
        finally:
            # also reached when the caller cancels us, e.g. a check timeout
            if process.returncode is None:
                process.kill()
                await process.wait()

        result = RemoteCommandResult(
            exit_code=process.returncode if process.returncode is not None else -1,
            stdout=stdout.decode(errors="replace"),
            stderr=stderr.decode(errors="replace"),
        )

        if result.exit_code == SSH_TRANSPORT_FAILURE:
            logger.warning("remote_node_unreachable", node=node, stderr=result.stderr.strip())
            raise RemoteExecutionError(
                f"Could not reach {node}: {result.stderr.strip() or 'ssh connection failed'}",
                node=node,
            )

        logger.debug("remote_command_completed", node=node, exit_code=result.exit_code)
        return result
