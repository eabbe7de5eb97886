"""SDK configuration using pydantic-settings.

Values come from ``FORTRESS_*`` environment variables or a ``.env`` file.
"""

from functools import lru_cache
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


# chain id -> network name used as the key in address registries
NETWORK_NAMES: dict[int, str] = {
    56: "mainnet",
    97: "testnet",
}


class Settings(BaseSettings):
    """SDK settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="FORTRESS_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # ======================
    # Network
    # ======================
    network: str = Field(default="mainnet", description="Network name used for address lookups")
    chain_id: int = Field(default=56, description="EVM chain ID of the target network")
    rpc_url: str = Field(
        default="https://bsc-dataseed.binance.org", description="JSON-RPC endpoint"
    )

    # ======================
    # Account
    # ======================
    private_key: Optional[str] = Field(
        default=None, description="Hex private key for the local signer (server side only)"
    )

    # ======================
    # Protocol data
    # ======================
    registry_path: Optional[str] = Field(
        default=None, description="JSON file with per-network contract addresses"
    )
    delegation_domain_name: str = Field(
        default="Compound",
        description="EIP-712 domain name the governance token verifies against",
    )

    # ======================
    # Transactions
    # ======================
    confirmation_timeout: int = Field(
        default=120, description="Seconds to wait for a transaction receipt"
    )
    confirmations: int = Field(default=1, description="Block confirmations to wait for")
    poll_interval: float = Field(default=2.0, description="Receipt polling interval in seconds")

    # ======================
    # Environment
    # ======================
    debug: bool = Field(default=False, description="Enable debug logging")

    @property
    def has_signer(self) -> bool:
        """Check if a private key is configured."""
        return bool(self.private_key)

    def get_network_name(self) -> str:
        """Resolve the registry network name, preferring the chain id mapping."""
        return NETWORK_NAMES.get(self.chain_id, self.network)

    def get_safe_dict(self) -> dict:
        """Return settings dict with secrets redacted."""
        return {
            "network": self.get_network_name(),
            "chain_id": self.chain_id,
            "rpc_url": self.rpc_url,
            "private_key": "***" if self.private_key else "(not set)",
            "registry_path": self.registry_path or "(not set)",
            "delegation_domain_name": self.delegation_domain_name,
            "confirmation_timeout": self.confirmation_timeout,
            "confirmations": self.confirmations,
            "debug": self.debug,
        }


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
