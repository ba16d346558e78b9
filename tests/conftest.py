"""Pytest configuration and shared fixtures."""

from collections.abc import Callable
from typing import Any

import pytest

from fleetgate.adapters.inventory import InventoryFleetDirectory, InventoryProposalStore
from fleetgate.core.config import FleetGateConfig
from fleetgate.core.models import Node, Proposal
from fleetgate.fleet.catalog import BarclampCatalog
from fleetgate.interfaces.check import CheckContext
from fleetgate.interfaces.remote_executor import RemoteCommandResult, RemoteExecutor


class FakeExecutor(RemoteExecutor):
    """Scripted remote executor.

    Responses are matched by node name and a substring of the command; the
    first matching entry wins. Unmatched calls return exit code 0 with no output.
    """

    def __init__(self) -> None:
        self.responses: list[tuple[str | None, str, RemoteCommandResult | Exception]] = []
        self.calls: list[tuple[str, str, float | None]] = []

    def on(
        self,
        command: str,
        result: RemoteCommandResult | Exception | None = None,
        node: str | None = None,
        stdout: str = "",
        stderr: str = "",
        exit_code: int = 0,
    ) -> "FakeExecutor":
        if result is None:
            result = RemoteCommandResult(exit_code=exit_code, stdout=stdout, stderr=stderr)
        self.responses.append((node, command, result))
        return self

    async def run(
        self,
        node: str,
        command: str,
        timeout: float | None = None,
    ) -> RemoteCommandResult:
        self.calls.append((node, command, timeout))
        for expected_node, fragment, result in self.responses:
            if expected_node not in (None, node) or fragment not in command:
                continue
            if isinstance(result, Exception):
                raise result
            return result
        return RemoteCommandResult(exit_code=0)

    def commands_for(self, node: str) -> list[str]:
        return [command for called, command, _ in self.calls if called == node]


@pytest.fixture
def fake_executor() -> FakeExecutor:
    """Provide a scripted remote executor."""
    return FakeExecutor()


@pytest.fixture
def config() -> FleetGateConfig:
    """Provide default configuration."""
    return FleetGateConfig()


@pytest.fixture
def admin_node() -> Node:
    """Provide the admin node."""
    return Node(name="admin", admin=True, roles=["crowbar", "deployer-client"])


@pytest.fixture
def make_context(
    fake_executor: FakeExecutor,
    config: FleetGateConfig,
) -> Callable[..., CheckContext]:
    """Factory building a CheckContext over in-memory nodes and proposals."""

    def _make(
        nodes: list[Node] | None = None,
        proposals: list[Proposal] | None = None,
        clusters: list[str] | None = None,
        **overrides: Any,
    ) -> CheckContext:
        return CheckContext(
            fleet=InventoryFleetDirectory(nodes or [], clusters=clusters),
            proposals=InventoryProposalStore(proposals or []),
            executor=overrides.get("executor", fake_executor),
            catalog=overrides.get("catalog", BarclampCatalog(config.catalog)),
            config=overrides.get("config", config),
        )

    return _make


PRODUCTS_V6_XML = """<?xml version='1.0'?>
<stream>
<product-list>
<product name="SLES" version="12.1" arch="x86_64" installed="true"/>
<product name="suse-openstack-cloud" version="6" arch="x86_64" installed="true"/>
</product-list>
</stream>
"""

LOCKED_XML = """<?xml version='1.0'?>
<stream>
<message type="error">System management is locked by the application with pid 4242 (zypper).
Close this application before trying again.</message>
</stream>
"""

PROMPT_XML = """<?xml version='1.0'?>
<stream>
<prompt id="14" type="0"><text>Continue?</text></prompt>
<prompt id="15" type="0"><text>Import key?</text></prompt>
</stream>
"""


@pytest.fixture
def products_v6_xml() -> str:
    """zypper products output listing the version 6 products."""
    return PRODUCTS_V6_XML


@pytest.fixture
def locked_xml() -> str:
    """zypper output of a locked package manager."""
    return LOCKED_XML


@pytest.fixture
def prompt_xml() -> str:
    """zypper output waiting for interactive input."""
    return PROMPT_XML
