"""Configuration for the AKS manager."""

import os
from pathlib import Path

from pydantic import BaseModel, field_validator

from aks_manager.exceptions import ConfigurationError
from aks_manager.models.cluster import CloudType, ClusterTarget

DEFAULT_CONFIG_PATH = "~/.aks-manager/config.yml"
CONFIG_ENV_VAR = "AKS_MANAGER_CONFIG"


def default_config_path() -> Path:
    """Config location, honouring ``AKS_MANAGER_CONFIG``."""
    return Path(os.environ.get(CONFIG_ENV_VAR, DEFAULT_CONFIG_PATH)).expanduser()


class AKSConfig(BaseModel):
    """Target cluster and kubectl settings."""

    subscription_id: str
    resource_group: str
    cluster_name: str
    cloud: CloudType = CloudType.PUBLIC
    kubectl_path: str = "kubectl"
    kubectl_timeout: int = 60

    @field_validator("subscription_id", "resource_group", "cluster_name", "kubectl_path")
    @classmethod
    def validate_not_empty(cls, v: str, info) -> str:
        """Validate required strings are not empty."""
        if not v or not v.strip():
            raise ValueError(f"{info.field_name} cannot be empty")
        return v.strip()

    @field_validator("kubectl_timeout")
    @classmethod
    def validate_timeout(cls, v: int) -> int:
        """Validate kubectl_timeout is positive."""
        if v <= 0:
            raise ValueError(f"kubectl_timeout must be positive, got {v}")
        return v

    def target(self) -> ClusterTarget:
        return ClusterTarget(
            subscription_id=self.subscription_id,
            resource_group=self.resource_group,
            name=self.cluster_name,
            cloud=self.cloud,
        )

    def save(self, path: str | Path) -> None:
        """Save configuration to YAML file."""
        import yaml

        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "w") as f:
            yaml.dump(self.model_dump(mode="json"), f, default_flow_style=False)

    @classmethod
    def load(cls, path: str | Path) -> "AKSConfig":
        """Load configuration from YAML file.

        Raises:
            ConfigurationError: If the file is missing or invalid
        """
        import yaml
        from pydantic import ValidationError as PydanticValidationError

        path = Path(path)
        if not path.exists():
            raise ConfigurationError(
                f"Configuration file not found: {path}",
                "Create one with: aks-mgr config-init",
            )

        try:
            with open(path) as f:
                data = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ConfigurationError(f"Failed to parse configuration file {path}", str(e))

        if not isinstance(data, dict):
            raise ConfigurationError(f"Configuration file {path} must contain a mapping")

        try:
            return cls(**data)
        except PydanticValidationError as e:
            errors = "\n".join(
                f"{'.'.join(str(x) for x in error['loc'])}: {error['msg']}" for error in e.errors()
            )
            raise ConfigurationError(f"Invalid configuration in {path}", errors)
