"""Configuration management for fleetgate."""

from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field

from fleetgate.core.exceptions import ConfigurationError


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: str = "INFO"
    format: str = "json"
    output: str = "stdout"


class RemoteConfig(BaseModel):
    """Remote execution (SSH) configuration."""

    ssh_binary: str = "ssh"
    user: str = "root"
    port: int = 22
    options: list[str] = Field(
        default_factory=lambda: ["BatchMode=yes", "ConnectTimeout=10"],
    )
    command_timeout_seconds: float = 60.0


class InventoryConfig(BaseModel):
    """Fleet inventory source."""

    path: str = "/etc/fleetgate/inventory.yaml"


class UpgradeConfig(BaseModel):
    """Admin server upgrade configuration."""

    state_dir: str = "/var/lib/crowbar/install"
    launcher_path: str = "/opt/dell/bin/upgrade_admin_server.sh"
    launcher_prefix: list[str] = Field(default_factory=lambda: ["sudo"])
    version_env_var: str = "CROWBAR_VERSION"


class PlatformRelease(BaseModel):
    """Base OS release paired with a cloud platform version."""

    os_version: str
    service_pack: str


class RepositoriesConfig(BaseModel):
    """Package repository check configuration."""

    current_version: str = "6"
    next_version: str = "7"
    releases: dict[str, PlatformRelease] = Field(
        default_factory=lambda: {
            "6": PlatformRelease(os_version="12.1", service_pack="SP1"),
            "7": PlatformRelease(os_version="12.2", service_pack="SP2"),
        }
    )
    os_product: str = "SLES"
    cloud_product: str = "suse-openstack-cloud"
    products_command: str = "sudo /usr/bin/zypper-retry --xmlout products"
    patches_command: str = (
        "sudo /usr/bin/zypper-retry --xmlout list-patches --category security"
    )


class ChecksConfig(BaseModel):
    """Health check configuration."""

    max_concurrent: int = 5
    timeout_seconds: int = 300
    virtualization_backends: list[str] = Field(default_factory=lambda: ["kvm", "xen"])
    storage_min_version: float = 10.2
    ha_barclamps: list[str] = Field(
        default_factory=lambda: [
            "database",
            "rabbitmq",
            "keystone",
            "glance",
            "cinder",
            "neutron",
            "nova",
        ]
    )
    clustered_roles: list[str] = Field(
        default_factory=lambda: [
            "database-server",
            "rabbitmq-server",
            "keystone-server",
            "glance-server",
            "cinder-controller",
            "neutron-server",
            "neutron-network",
            "nova-controller",
        ]
    )
    conflicting_roles: list[str] = Field(
        default_factory=lambda: [
            "cinder-controller",
            "glance-server",
            "keystone-server",
            "neutron-server",
            "neutron-network",
            "nova-controller",
            "swift-proxy",
            "swift-ring-compute",
            "ceilometer-server",
            "heat-server",
            "horizon-server",
            "manila-server",
            "trove-server",
        ]
    )


class CatalogConfig(BaseModel):
    """Barclamp catalog: run order and category per barclamp."""

    run_orders: dict[str, int] = Field(
        default_factory=lambda: {
            "deployer": 10,
            "provisioner": 20,
            "pacemaker": 80,
            "database": 81,
            "rabbitmq": 82,
            "keystone": 83,
            "swift": 84,
            "ceph": 85,
            "monasca": 86,
            "glance": 87,
            "cinder": 88,
            "manila": 89,
            "neutron": 90,
            "nova": 91,
            "horizon": 92,
            "heat": 93,
            "ceilometer": 94,
            "trove": 95,
        }
    )
    categories: dict[str, str] = Field(
        default_factory=lambda: {
            "deployer": "Crowbar",
            "provisioner": "Crowbar",
            "pacemaker": "HA",
            "ceph": "Storage",
        }
    )
    default_category: str = "OpenStack"
    role_barclamps: dict[str, str] = Field(
        default_factory=dict,
        description="Explicit role -> barclamp mapping for roles not named <barclamp>-*",
    )


class AddonsConfig(BaseModel):
    """Installed add-ons."""

    installed: list[str] = Field(default_factory=lambda: ["ceph", "ha"])


class FleetGateConfig(BaseModel):
    """Main fleetgate configuration."""

    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    remote: RemoteConfig = Field(default_factory=RemoteConfig)
    inventory: InventoryConfig = Field(default_factory=InventoryConfig)
    upgrade: UpgradeConfig = Field(default_factory=UpgradeConfig)
    repositories: RepositoriesConfig = Field(default_factory=RepositoriesConfig)
    checks: ChecksConfig = Field(default_factory=ChecksConfig)
    catalog: CatalogConfig = Field(default_factory=CatalogConfig)
    addons: AddonsConfig = Field(default_factory=AddonsConfig)

    @classmethod
    def from_file(cls, path: str | Path) -> "FleetGateConfig":
        """Load configuration from YAML file.

        Args:
            path: Path to configuration file

        Returns:
            FleetGateConfig instance

        Raises:
            ConfigurationError: If file cannot be loaded or parsed
        """
        config_path = Path(path).expanduser()

        if not config_path.exists():
            raise ConfigurationError(f"Configuration file not found: {config_path}")

        try:
            with config_path.open() as f:
                data = yaml.safe_load(f)
        except Exception as e:
            raise ConfigurationError(f"Failed to load configuration: {e}") from e

        try:
            return cls(**(data or {}))
        except Exception as e:
            raise ConfigurationError(f"Invalid configuration: {e}") from e

    def addon_installed(self, addon: str) -> bool:
        """Whether an add-on is installed on the admin server."""
        return addon in self.addons.installed

    def to_dict(self) -> dict[str, Any]:
        """Convert configuration to dictionary.

        Returns:
            Dictionary representation
        """
        return self.model_dump()
