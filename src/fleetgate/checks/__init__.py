"""Upgrade readiness checks and their orchestration."""

from fleetgate.checks.check_orchestrator import HealthCheckOrchestrator, merge_findings
from fleetgate.checks.check_registry import CheckRegistry
from fleetgate.checks.readiness import register_readiness_checks

__all__ = [
    "CheckRegistry",
    "HealthCheckOrchestrator",
    "merge_findings",
    "register_readiness_checks",
]
