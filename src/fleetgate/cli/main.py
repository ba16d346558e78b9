"""Main CLI entry point for fleetgate."""

from __future__ import annotations

import json
import sys
from typing import TYPE_CHECKING, Any

import click
from rich.console import Console

from fleetgate import __version__

if TYPE_CHECKING:
    from fleetgate.adapters.inventory import InventoryFleetDirectory, InventoryProposalStore
    from fleetgate.adapters.ssh_executor import SSHExecutor
    from fleetgate.core.config import FleetGateConfig
    from fleetgate.fleet.catalog import BarclampCatalog
    from fleetgate.interfaces.check import CheckContext
    from fleetgate.upgrade.admin import AdminServer
    from fleetgate.upgrade.state import UpgradeStateStore

console = Console()
err_console = Console(stderr=True)


class FleetGateContext:
    """Shared context for CLI commands with lazy initialization."""

    def __init__(self, config_path: str | None):
        """Initialize context with config path.

        Args:
            config_path: Path to configuration file (built-in defaults if None)
        """
        self.config_path = config_path
        self._config: FleetGateConfig | None = None
        self._inventory: dict[str, Any] | None = None
        self._fleet: InventoryFleetDirectory | None = None
        self._proposals: InventoryProposalStore | None = None
        self._executor: SSHExecutor | None = None
        self._catalog: BarclampCatalog | None = None
        self._upgrade_state: UpgradeStateStore | None = None
        self._admin: AdminServer | None = None

    @property
    def config(self) -> FleetGateConfig:
        """Get or create config lazily, configuring logging on first load."""
        if self._config is None:
            from fleetgate.core.config import FleetGateConfig
            from fleetgate.utils.logging import setup_logging

            if self.config_path is None:
                self._config = FleetGateConfig()
            else:
                self._config = FleetGateConfig.from_file(self.config_path)
            setup_logging(
                level=self._config.logging.level,
                format=self._config.logging.format,
                output=self._config.logging.output,
            )
        return self._config

    @property
    def inventory(self) -> dict[str, Any]:
        """Get the parsed inventory document (read once)."""
        if self._inventory is None:
            from fleetgate.adapters.inventory import load_inventory

            self._inventory = load_inventory(self.config.inventory.path)
        return self._inventory

    @property
    def fleet(self) -> InventoryFleetDirectory:
        """Get or create fleet directory lazily."""
        if self._fleet is None:
            from fleetgate.adapters.inventory import InventoryFleetDirectory

            self._fleet = InventoryFleetDirectory.from_document(self.inventory)
        return self._fleet

    @property
    def proposals(self) -> InventoryProposalStore:
        """Get or create proposal store lazily."""
        if self._proposals is None:
            from fleetgate.adapters.inventory import InventoryProposalStore

            self._proposals = InventoryProposalStore.from_document(self.inventory)
        return self._proposals

    @property
    def executor(self) -> SSHExecutor:
        """Get or create SSH executor lazily."""
        if self._executor is None:
            from fleetgate.adapters.ssh_executor import SSHExecutor

            self._executor = SSHExecutor(self.config.remote)
        return self._executor

    @property
    def catalog(self) -> BarclampCatalog:
        """Get or create barclamp catalog lazily."""
        if self._catalog is None:
            from fleetgate.fleet.catalog import BarclampCatalog

            self._catalog = BarclampCatalog(self.config.catalog)
        return self._catalog

    @property
    def upgrade_state(self) -> UpgradeStateStore:
        """Get or create upgrade state store lazily."""
        if self._upgrade_state is None:
            from fleetgate.upgrade.state import UpgradeStateStore

            self._upgrade_state = UpgradeStateStore(self.config.upgrade.state_dir)
        return self._upgrade_state

    @property
    def admin(self) -> AdminServer:
        """Get or create admin server API lazily."""
        if self._admin is None:
            from fleetgate.upgrade.admin import AdminServer

            self._admin = AdminServer(self.config, self.fleet, state=self.upgrade_state)
        return self._admin

    def check_context(self) -> CheckContext:
        """Build the dependency bundle handed to readiness checks."""
        from fleetgate.interfaces.check import CheckContext

        return CheckContext(
            fleet=self.fleet,
            proposals=self.proposals,
            executor=self.executor,
            catalog=self.catalog,
            config=self.config,
        )


def _print_json(data: Any) -> None:
    click.echo(json.dumps(data, indent=2, default=str))


@click.group()
@click.version_option(version=__version__)
@click.option(
    "--config",
    type=click.Path(exists=True, dir_okay=False),
    default=None,
    help="Path to configuration file",
)
@click.pass_context
def cli(ctx: click.Context, config: str | None) -> None:
    """fleetgate - Upgrade readiness gate for an OpenStack cloud fleet."""
    ctx.obj = FleetGateContext(config_path=config)


@cli.command()
@click.pass_context
def status(ctx: click.Context) -> None:
    """Show admin server version and deployed add-ons."""
    _print_json(ctx.obj.admin.status())


@cli.command(name="upgrade-status")
@click.pass_context
def upgrade_status(ctx: click.Context) -> None:
    """Show admin server status with upgrade progress flags."""
    fg_ctx = ctx.obj
    report = fg_ctx.admin.upgrade()
    details = fg_ctx.upgrade_state.failure_details()
    if details:
        report["failure"] = details
    _print_json(report)


@cli.command(name="start-upgrade")
@click.pass_context
def start_upgrade(ctx: click.Context) -> None:
    """Launch the admin server upgrade in the background."""
    from fleetgate.core.models import ResponseStatus

    result = ctx.obj.admin.start_upgrade()
    _print_json(result.model_dump(mode="json"))

    if result.status != ResponseStatus.ACCEPTED:
        err_console.print(f"[red]✗ {result.message}[/red]")
        sys.exit(1)
    err_console.print(f"[green]✓ Upgrade launched (pid {result.pid})[/green]")


@cli.command()
@click.option("--only", "only", multiple=True, help="Run only this check (repeatable)")
@click.option("--format", type=click.Choice(["table", "json"]), default="table")
@click.pass_context
def check(ctx: click.Context, only: tuple[str, ...], format: str) -> None:
    """Run upgrade readiness checks and print the health report."""
    import asyncio

    from rich.table import Table

    from fleetgate.checks import (
        CheckRegistry,
        HealthCheckOrchestrator,
        merge_findings,
        register_readiness_checks,
    )

    fg_ctx = ctx.obj
    registry = register_readiness_checks(CheckRegistry())

    unknown = [name for name in only if name not in registry]
    if unknown:
        raise click.BadParameter(
            f"Unknown check(s): {', '.join(unknown)}. Available: {', '.join(registry.names())}",
            param_hint="--only",
        )

    orchestrator = HealthCheckOrchestrator(
        registry=registry,
        max_concurrent=fg_ctx.config.checks.max_concurrent,
        default_timeout=fg_ctx.config.checks.timeout_seconds,
    )
    check_context = fg_ctx.check_context()

    if only:
        results = asyncio.run(orchestrator.run_specific_checks(check_context, list(only)))
    else:
        results = asyncio.run(orchestrator.run_checks(check_context))
    report = merge_findings(results)

    if format == "json":
        _print_json(report)
    else:
        table = Table(title="Upgrade Readiness")
        table.add_column("Check", style="cyan")
        table.add_column("Status")
        table.add_column("Details")
        for result in results:
            status_text = "[green]PASS[/green]" if result.passed else "[red]FAIL[/red]"
            details = json.dumps(result.findings, default=str) if result.findings else ""
            table.add_row(result.check_name, status_text, details)
        console.print(table)

        if report:
            console.print("\n[bold red]✗ Fleet is not ready for upgrade[/bold red]")
        else:
            console.print("\n[bold green]✓ Fleet is ready for upgrade[/bold green]")

    if report:
        sys.exit(1)


@cli.command()
@click.argument("version")
@click.option("--record-failure", is_flag=True, help="Mark the upgrade failed on lock/prompt")
@click.pass_context
def repocheck(ctx: click.Context, version: str, record_failure: bool) -> None:
    """Check repository availability on the admin node for VERSION."""
    import asyncio

    from fleetgate.core.models import RepositoryCheckError
    from fleetgate.repositories.checker import RepositoryVersionChecker

    fg_ctx = ctx.obj
    checker = RepositoryVersionChecker(
        fg_ctx.executor,
        fg_ctx.fleet,
        config=fg_ctx.config.repositories,
        upgrade_state=fg_ctx.upgrade_state,
        timeout=fg_ctx.config.remote.command_timeout_seconds,
    )
    result = asyncio.run(checker.check(version, record_failure=record_failure))
    _print_json(result.model_dump(mode="json"))

    if isinstance(result, RepositoryCheckError) or not result.all_available:
        sys.exit(1)


@cli.command(name="role-applicable")
@click.argument("node")
@click.argument("barclamp")
@click.argument("role")
@click.pass_context
def role_applicable(ctx: click.Context, node: str, barclamp: str, role: str) -> None:
    """Tell whether ROLE of BARCLAMP may currently run on NODE."""
    from fleetgate.roles.applicability import RoleApplicabilityResolver

    target = ctx.obj.fleet.get(node)
    if target is None:
        raise click.BadParameter(f"Node not found: {node}", param_hint="NODE")

    decision = RoleApplicabilityResolver().evaluate(target, barclamp, role)
    if decision.allowed:
        console.print(f"[green]✓ {role} is applicable on {node}[/green]")
    else:
        console.print(f"[red]✗ {decision.message(target, role)}[/red]")
        sys.exit(1)


if __name__ == "__main__":
    cli()
