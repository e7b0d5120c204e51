"""Application configuration using Pydantic Settings and a JSON config file."""
import logging
from pathlib import Path
from typing import Any, Optional

from pydantic import BaseModel, Field, ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict

from clockify_cli.errors import ClockifyError


logger = logging.getLogger(__name__)


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="CLOCKIFY_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # API
    api_url: str = "https://api.clockify.me/api/v1"
    api_key: Optional[str] = None  # overrides the stored key
    timeout: float = 30.0
    page_size: int = 50

    # Local state
    config_file: Path = Path.home() / ".config" / "clockify-cli" / "config.json"


class StoredConfig(BaseModel):
    """Values persisted between invocations."""

    api_key: Optional[str] = Field(default=None, alias="apiKey")
    workspace_id: Optional[str] = Field(default=None, alias="workspaceId")
    billable_by_default: bool = Field(default=False, alias="billableByDefault")

    model_config = {"populate_by_name": True}


class ConfigStore:
    """Persisted configuration: API key, workspace id and default billing flag."""

    def __init__(self, path: Path, env_api_key: Optional[str] = None):
        """
        Initialize store backed by a JSON file.

        Args:
            path: Location of the config file
            env_api_key: API key from the environment, preferred over the stored one
        """
        self.path = Path(path).expanduser()
        self.env_api_key = env_api_key
        self.data = self._load()

    def _load(self) -> StoredConfig:
        if not self.path.exists():
            return StoredConfig()
        try:
            return StoredConfig.model_validate_json(self.path.read_text())
        except ValidationError as e:
            raise ClockifyError(f"Invalid config file {self.path}: {e.errors()[0]['msg']}")

    def save(self) -> None:
        """Write the config file, creating parent directories."""
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(
            self.data.model_dump_json(by_alias=True, exclude_none=True, indent=2)
        )
        # File holds the API key
        self.path.chmod(0o600)
        logger.debug("Saved config to %s", self.path)

    def set(self, key: str, value: Any) -> None:
        if key not in StoredConfig.model_fields:
            raise KeyError(key)
        setattr(self.data, key, value)
        self.save()

    def unset(self, key: str) -> None:
        self.set(key, StoredConfig.model_fields[key].default)

    @property
    def api_key(self) -> Optional[str]:
        return self.env_api_key or self.data.api_key

    def has_api_key(self) -> bool:
        return bool(self.api_key)

    @property
    def workspace_id(self) -> Optional[str]:
        return self.data.workspace_id

    @property
    def billable_by_default(self) -> bool:
        return self.data.billable_by_default

    @classmethod
    def from_settings(cls, settings: Settings) -> "ConfigStore":
        return cls(settings.config_file, env_api_key=settings.api_key)


settings = Settings()
