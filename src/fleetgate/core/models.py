"""Core data models for fleetgate."""

from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from typing import Any

from pydantic import BaseModel, Field

READY_STATE = "ready"
APPLYING_STATE = "applying"
UPGRADE_PREPARED_STATE = "crowbar_upgrade"
ALL_STATES_TOKEN = "all"

# Mapping from check-name key to a diagnostic payload. A missing key means the
# corresponding check found no problem.
HealthReport = dict[str, Any]


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class RoleStateRule:
    """Node states under which a role may run.

    ``all_states`` is the wildcard variant; otherwise ``states`` is the explicit
    set of permitted lifecycle states.
    """

    all_states: bool
    states: frozenset[str] = frozenset()

    @classmethod
    def any_state(cls) -> "RoleStateRule":
        """Rule permitting every node state."""
        return cls(all_states=True)

    @classmethod
    def only(cls, states: list[str] | set[str] | tuple[str, ...]) -> "RoleStateRule":
        """Rule permitting exactly the given states."""
        return cls(all_states=False, states=frozenset(states))

    @classmethod
    def from_declaration(cls, declared: Any) -> "RoleStateRule":
        """Build a rule from a raw ``element_states`` entry.

        ``None`` and lists containing ``"all"`` mean every state is valid.
        """
        if declared is None:
            return cls.any_state()
        if isinstance(declared, str):
            declared = [declared]
        if ALL_STATES_TOKEN in declared:
            return cls.any_state()
        return cls.only(list(declared))

    def permits(self, state: str) -> bool:
        """Whether a node in ``state`` may run the role."""
        return self.all_states or state in self.states

    def describe(self) -> list[str]:
        """Sorted list of states for diagnostics."""
        if self.all_states:
            return [ALL_STATES_TOKEN]
        return sorted(self.states)


class Node(BaseModel):
    """A fleet node as seen through the fleet directory."""

    name: str
    state: str = READY_STATE
    roles: list[str] = Field(default_factory=list)
    architecture: str = "x86_64"
    admin: bool = Field(default=False, description="Admin/bootstrap node flag")
    applying_for: dict[str, set[str]] = Field(
        default_factory=dict,
        description="Barclamp -> roles currently being applied",
    )
    attributes: dict[str, Any] = Field(
        default_factory=dict,
        description="Nested attribute bag keyed by barclamp name",
    )

    @property
    def ready(self) -> bool:
        """Whether the node reports itself ready."""
        return self.state == READY_STATE

    def has_barclamp(self, barclamp: str) -> bool:
        """Whether the node carries any attributes for ``barclamp``."""
        return barclamp in self.attributes

    def element_states(self, barclamp: str) -> dict[str, RoleStateRule] | None:
        """Typed ``element_states`` map for a barclamp.

        Returns:
            Mapping role -> rule, or None if the barclamp declares no map
        """
        section = self.attributes.get(barclamp)
        if not isinstance(section, dict) or "element_states" not in section:
            return None
        raw = section["element_states"] or {}
        return {role: RoleStateRule.from_declaration(states) for role, states in raw.items()}

    def attribute(self, path: str, default: Any = None) -> Any:
        """Look up a dotted attribute path such as ``nova.use_migration``."""
        current: Any = self.attributes
        for part in path.split("."):
            if not isinstance(current, dict) or part not in current:
                return default
            current = current[part]
        return current


class Proposal(BaseModel):
    """Per-barclamp deployment descriptor."""

    barclamp: str
    name: str = "default"
    active: bool = True
    failed: bool = False
    attributes: dict[str, Any] = Field(default_factory=dict)
    deployment: dict[str, Any] = Field(default_factory=dict)

    @property
    def display_name(self) -> str:
        """Human-readable proposal name."""
        return f"{self.barclamp.capitalize()}: {self.name.capitalize()}"

    def elements(self) -> dict[str, list[str]]:
        """Role name -> target identifiers for this proposal's barclamp."""
        section = self.deployment.get(self.barclamp) or {}
        return section.get("elements") or {}

    def attribute(self, path: str, default: Any = None) -> Any:
        """Look up a dotted path below ``attributes[barclamp]``."""
        current: Any = self.attributes.get(self.barclamp, {})
        for part in path.split("."):
            if not isinstance(current, dict) or part not in current:
                return default
            current = current[part]
        return current if current is not None else default


class ResponseStatus(str, Enum):
    """Outcome status attached to user-visible results."""

    ACCEPTED = "accepted"
    CONFLICT = "conflict"
    UNPROCESSABLE_ENTITY = "unprocessable_entity"
    SERVICE_UNAVAILABLE = "service_unavailable"


class RepositoryStatus(BaseModel):
    """Availability of one product family's repositories."""

    available: bool
    repos: list[str]
    errors: dict[str, dict[str, list[str]]] = Field(default_factory=dict)


class RepositoryCheckReport(BaseModel):
    """Per product family repository availability."""

    os: RepositoryStatus
    openstack: RepositoryStatus

    def products(self) -> dict[str, RepositoryStatus]:
        """Product families in report order."""
        return {"os": self.os, "openstack": self.openstack}

    @property
    def all_available(self) -> bool:
        """Whether every product family is available."""
        return all(status.available for status in self.products().values())

    @property
    def any_available(self) -> bool:
        """Whether at least one product family is available."""
        return any(status.available for status in self.products().values())

    def missing_repos(self) -> list[str]:
        """Missing channel names, first architecture per product."""
        missing: list[str] = []
        for status in self.products().values():
            if not status.errors:
                continue
            first_arch = next(iter(status.errors))
            missing.extend(status.errors[first_arch].get("missing", []))
        return missing

    def available_repos(self) -> list[str]:
        """Channel names of product families that are available."""
        repos: list[str] = []
        for status in self.products().values():
            if status.available:
                repos.extend(status.repos)
        return repos


class RepositoryCheckError(BaseModel):
    """Package manager precondition or parse failure."""

    status: ResponseStatus = ResponseStatus.SERVICE_UNAVAILABLE
    key: str
    error: str


class UpgradeState(str, Enum):
    """Admin upgrade lifecycle state."""

    IDLE = "idle"
    UPGRADING = "upgrading"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


class UpgradeStartResult(BaseModel):
    """Result of an attempt to start the admin upgrade."""

    status: ResponseStatus
    key: str
    message: str = ""
    pid: int | None = None


class CheckResult(BaseModel):
    """Result of a health check.

    ``findings`` is the check's contribution to the aggregate health report; an
    empty mapping means the check found nothing blocking.
    """

    check_name: str
    passed: bool
    message: str
    findings: HealthReport = Field(default_factory=dict)
    timestamp: datetime = Field(default_factory=_utcnow)

    @classmethod
    def from_findings(cls, check_name: str, findings: HealthReport) -> "CheckResult":
        """Build a result whose pass/fail follows the findings."""
        if findings:
            message = f"Problems found: {', '.join(sorted(findings))}"
        else:
            message = "No problems found"
        return cls(
            check_name=check_name,
            passed=not findings,
            message=message,
            findings=findings,
        )
