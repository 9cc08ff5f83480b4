"""
cognumbers._config — Client Configuration
=========================================

Configuration model and loader. Values come from an optional JSON
file, then environment variables (a ``.env`` file is loaded first),
and are validated by pydantic.
"""

import json
import logging
import os
from pathlib import Path
from typing import Any, Dict, Optional

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, Field, ValidationError, ValidationInfo, field_validator
from web3 import Web3

from .errors import ConfigError

logger = logging.getLogger("cognumbers")

BASE_SEPOLIA_CHAIN_ID = 84532

# Environment variable -> config key
ENV_MAPPINGS = {
    "COGNUMBERS_RPC_URL": "rpc_url",
    "COGNUMBERS_CONTRACT_ADDRESS": "contract_address",
    "COGNUMBERS_CHAIN_ID": "chain_id",
    "COGNUMBERS_PRIVATE_KEY": "private_key",
    "COGNUMBERS_ADMIN_ADDRESS": "admin_address",
    "COGNUMBERS_LOG_FILE": "log_file",
    "COGNUMBERS_LOG_LEVEL": "log_level",
    "COGNUMBERS_POLL_INTERVAL_SECONDS": "poll_interval_seconds",
    "COGNUMBERS_PREFER_RAW_READS": "prefer_raw_reads",
}


class ClientConfig(BaseModel):
    """Validated settings for CognumbersClient and the CLI."""

    model_config = ConfigDict(extra="ignore", frozen=True)

    rpc_url: str = "https://sepolia.base.org"
    contract_address: str
    chain_id: int = BASE_SEPOLIA_CHAIN_ID
    private_key: Optional[str] = Field(default=None, repr=False)
    admin_address: Optional[str] = None

    log_file: str = "cognumbers.log"
    log_level: str = "INFO"
    poll_interval_seconds: float = Field(default=5.0, gt=0)
    prefer_raw_reads: bool = False

    decrypt_max_attempts: int = Field(default=5, ge=1)
    decrypt_base_delay_ms: float = Field(default=1000, ge=0)
    expected_ciphertext_version: int = 1
    max_players: int = Field(default=10, ge=1)

    @field_validator("contract_address", "admin_address")
    @classmethod
    def _checksum(cls, v: Optional[str], info: ValidationInfo) -> Optional[str]:
        if v is None or v == "":
            if info.field_name == "contract_address":
                raise ValueError("contract address is required")
            return None
        if not Web3.is_address(v):
            raise ValueError(f"not an address: {v}")
        return Web3.to_checksum_address(v)

    @field_validator("log_level")
    @classmethod
    def _norm_level(cls, v: str) -> str:
        v = (v or "INFO").strip().upper()
        if v not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
            raise ValueError(f"unknown log level: {v}")
        return v


def build_config(values: Dict[str, Any]) -> ClientConfig:
    """
    Validate a config dict.

    Raises:
        ConfigError: Listing every invalid or missing field
    """
    try:
        return ClientConfig.model_validate(values)
    except ValidationError as e:
        problems = [
            f"{'.'.join(str(p) for p in err['loc'])}: {err['msg']}" for err in e.errors()
        ]
        raise ConfigError(problems) from e


def load_config(config_path: Optional[str] = None,
                env_file: Optional[str] = None) -> ClientConfig:
    """Load config from a JSON file and the environment, then validate it."""
    load_dotenv(env_file)
    config: Dict[str, Any] = {}

    if config_path:
        path = Path(config_path)
        if not path.exists():
            raise ConfigError([f"config file not found: {config_path}"])
        with open(path, encoding="utf-8") as f:
            config = json.load(f)
        logger.debug("Loaded config from %s", path)

    for env_key, config_key in ENV_MAPPINGS.items():
        # Blank entries, as left by a copied .env template, do not override
        if os.environ.get(env_key):
            config[config_key] = os.environ[env_key]
            logger.debug("Config %s set from %s", config_key, env_key)

    return build_config(config)
