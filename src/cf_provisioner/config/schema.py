"""Configuration models: setup properties, credentials and tool settings."""

from __future__ import annotations

from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict

from cf_provisioner.config.stack import extract_stack_name


class CloudflareCredentials(BaseModel):
    """API token + account id used by both Pulumi and wrangler."""

    api_token: SecretStr
    account_id: str


class SetupProperties(BaseModel):
    """Validated view of a ``setup.properties`` file.

    ``raw`` keeps every property, including user-defined worker variables,
    in file order.
    """

    model_config = ConfigDict(extra="ignore")

    cloudflare_account_id: str = Field(min_length=1)
    cloudflare_api_token: SecretStr
    cloudflare_resource: str
    base_url: str
    project_id: str = Field(min_length=1)
    project_type: str
    environment: str
    pulumi_config_passphrase: SecretStr | None = None
    raw: dict[str, str] = Field(default_factory=dict)

    @property
    def stack_name(self) -> str:
        return extract_stack_name(self.base_url)

    @property
    def credentials(self) -> CloudflareCredentials:
        return CloudflareCredentials(
            api_token=self.cloudflare_api_token,
            account_id=self.cloudflare_account_id,
        )


class ProvisionerSettings(BaseSettings):
    """Filesystem layout and wrangler defaults.

    Every field can be overridden with a ``CF_PROVISIONER_`` environment
    variable (e.g. ``CF_PROVISIONER_PULUMI_DIR``).
    """

    model_config = SettingsConfigDict(env_prefix="CF_PROVISIONER_")

    project_dir: Path = Path()
    pulumi_dir: Path | None = None
    worker_main: str = "../../src/index.ts"
    compatibility_date: str = "2024-01-01"
    migrations_dir: str = "../../migrations"

    @property
    def resolved_pulumi_dir(self) -> Path:
        return self.pulumi_dir if self.pulumi_dir is not None else self.project_dir / "infra"

    def instance_dir(self, stack_name: str) -> Path:
        return self.project_dir / "instances" / stack_name

    def wrangler_config_path(self, stack_name: str) -> Path:
        return self.instance_dir(stack_name) / "wrangler.toml"
