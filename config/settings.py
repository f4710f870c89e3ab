from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

# Every section reads the process environment and the .env file on its own,
# so flat variable names (RPC_URL, TENDERLY_USER, ...) keep working.
ENV_CONFIG = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore", populate_by_name=True)


class AppSettings(BaseSettings):
    """General application settings."""

    model_config = ENV_CONFIG

    name: str = Field("Governance Proposal Sims", validation_alias="APP_NAME")
    debug: bool = Field(False, validation_alias="DEBUG")
    log_level: str = Field("INFO", validation_alias="LOG_LEVEL")
    log_file: Optional[str] = Field(None, validation_alias="LOG_FILE")

    @property
    def effective_log_level(self) -> str:
        """DEBUG=true overrides LOG_LEVEL."""
        return "DEBUG" if self.debug else self.log_level


class RpcSettings(BaseSettings):
    """JSON-RPC endpoints. RPC_URL is the primary provider, the others are chain specific."""

    model_config = ENV_CONFIG

    rpc_url: Optional[str] = Field(None, validation_alias="RPC_URL", description="Primary JSON-RPC URL")
    l1_rpc_url: Optional[str] = Field(None, validation_alias="L1_RPC_URL", description="Ethereum mainnet JSON-RPC URL")
    arb1_rpc_url: Optional[str] = Field(None, validation_alias="ARB1_RPC_URL", description="Arbitrum One JSON-RPC URL")
    nova_rpc_url: Optional[str] = Field(None, validation_alias="NOVA_RPC_URL", description="Arbitrum Nova JSON-RPC URL")
    # Timeout for RPC calls (seconds)
    timeout: int = Field(default=60, gt=0, validation_alias="RPC_TIMEOUT")


class TenderlySettings(BaseSettings):
    """Credentials and transport settings for the Tenderly simulation API."""

    model_config = ENV_CONFIG

    access_token: Optional[str] = Field(None, validation_alias="TENDERLY_ACCESS_TOKEN")
    user: Optional[str] = Field(None, validation_alias="TENDERLY_USER")
    project_slug: Optional[str] = Field(None, validation_alias="TENDERLY_PROJECT_SLUG")
    base_url: str = Field("https://api.tenderly.co/api/v1", validation_alias="TENDERLY_BASE_URL")
    timeout: int = Field(default=120, gt=0, validation_alias="TENDERLY_TIMEOUT")
    # Retries apply to HTTP 429 only
    max_retries: int = Field(default=4, ge=0, validation_alias="TENDERLY_MAX_RETRIES")


class SimulationSettings(BaseSettings):
    """Defaults for which proposals to simulate and where reports go."""

    model_config = ENV_CONFIG

    sim_name: Optional[str] = Field(None, validation_alias="SIM_NAME")
    dao_name: Optional[str] = Field(None, validation_alias="DAO_NAME")
    governor_address: Optional[str] = Field(None, validation_alias="GOVERNOR_ADDRESS")
    governor_type: Optional[str] = Field(None, validation_alias="GOVERNOR_TYPE")
    # Scanning ProposalCreated logs from genesis is slow on most providers
    proposal_events_from_block: int = Field(default=0, ge=0, validation_alias="PROPOSAL_EVENTS_FROM_BLOCK")
    reports_dir: str = Field("reports", validation_alias="REPORTS_DIR")
    max_concurrent_checks: int = Field(default=4, gt=0, validation_alias="MAX_CONCURRENT_CHECKS")


class Settings(BaseSettings):
    """
    Main Settings class that composes all sub-settings.
    """

    app: AppSettings = Field(default_factory=AppSettings)
    rpc: RpcSettings = Field(default_factory=RpcSettings)
    tenderly: TenderlySettings = Field(default_factory=TenderlySettings)
    simulation: SimulationSettings = Field(default_factory=SimulationSettings)

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")


# Singleton instance
settings = Settings()
