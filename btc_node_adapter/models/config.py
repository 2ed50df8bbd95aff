"""Configuration management using Pydantic settings."""

from typing import Optional
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings

# Mixin network chain id for Bitcoin
BITCOIN_CHAIN_ID = "c6d0c728-2624-429b-8e0d-d9d19b6592fa"


class AdapterConfig(BaseSettings):
    """Configuration for the Bitcoin node adapter."""

    # Bitcoin Core RPC Settings
    bitcoin_rpc_host: str = Field(default="localhost", description="Bitcoin Core RPC host")
    bitcoin_rpc_port: int = Field(default=8332, description="Bitcoin Core RPC port")
    bitcoin_rpc_user: str = Field(description="Bitcoin Core RPC username")
    bitcoin_rpc_password: str = Field(description="Bitcoin Core RPC password")
    bitcoin_rpc_timeout: float = Field(default=30, description="RPC timeout in seconds")

    # Chain Settings
    chain_id: str = Field(default=BITCOIN_CHAIN_ID, description="Canonical chain identifier")
    minimum_height: int = Field(default=100000, description="Lowest acceptable node tip height")

    # Performance Settings
    fetch_workers: int = Field(default=1, description="Threads used for per-block transaction lookups")

    # Logging Settings
    log_level: str = Field(default="INFO", description="Logging level")
    log_format: str = Field(default="json", description="Log format (json|text)")
    log_file: Optional[str] = Field(default=None, description="Log file path")
    log_max_size_mb: int = Field(default=100, description="Max log file size in MB")
    log_backup_count: int = Field(default=5, description="Number of log backups")

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        case_sensitive = False
        frozen = True

    @field_validator("minimum_height")
    @classmethod
    def _check_minimum_height(cls, value: int) -> int:
        if value < 0:
            raise ValueError("minimum_height must be non-negative")
        return value

    @field_validator("fetch_workers")
    @classmethod
    def _check_fetch_workers(cls, value: int) -> int:
        if value < 1:
            raise ValueError("fetch_workers must be at least 1")
        return value

    @field_validator("bitcoin_rpc_timeout")
    @classmethod
    def _check_timeout(cls, value: float) -> float:
        if value <= 0:
            raise ValueError("bitcoin_rpc_timeout must be positive")
        return value

    @property
    def bitcoin_rpc_url(self) -> str:
        """Generate Bitcoin Core RPC URL."""
        return f"http://{self.bitcoin_rpc_host}:{self.bitcoin_rpc_port}"
