from pathlib import Path

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


BASE_DIR = Path(__file__).resolve().parents[1]


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=BASE_DIR / ".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )

    log_level: str = Field(default="INFO", description="Logging level")

    # External API Keys
    rpc_api_key: str = Field(
        default="",
        description="Infura project key appended to the opBNB Testnet RPC endpoint",
        validation_alias=AliasChoices("rpc_api_key", "RPC_API_KEY", "NEXT_PUBLIC_RPC_URL"),
    )
    explorer_api_key: str = Field(
        default="",
        description="Block explorer API key used for transaction history",
        validation_alias=AliasChoices("explorer_api_key", "EXPLORER_API_KEY", "NEXT_PUBLIC_SCAN"),
    )
    explorer_api_url: str = Field(
        default="https://api-testnet.bscscan.com/api",
        description="Etherscan-compatible explorer API endpoint",
    )

    # Polling
    balance_poll_interval_seconds: float = Field(
        default=30.0,
        gt=0,
        description="How often to refresh the balance while connected",
    )
    receipt_poll_interval_seconds: float = Field(
        default=2.0,
        gt=0,
        description="Delay between transaction receipt lookups while awaiting confirmation",
    )
    history_limit: int = Field(
        default=5,
        ge=1,
        description="Number of recent transactions kept in the history view",
    )
    request_timeout_seconds: float = Field(default=30.0, gt=0, description="HTTP request timeout")


# Global settings instance
settings = Settings()
