"""
Runtime configuration for Lossless.

Defines auction defaults and logging options. Values come from
LOSSLESS_* environment variables, optionally loaded from a .env file.
"""

import logging
import os
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from pydantic import BaseModel, Field, field_validator

from lossless.utils.units import parse_ether

ENV_PREFIX = "LOSSLESS_"

# Default auction duration (1 hour)
DEFAULT_DURATION_SECONDS = 3600


class AuctionConfig(BaseModel):
    """Auction and logging configuration parameters"""

    # Auction parameters
    duration_seconds: int = Field(default=DEFAULT_DURATION_SECONDS, gt=0)

    # Demo parameters
    demo_balance_ether: str = "10"    # Starting balance of each demo account

    # Logging
    log_level: str = "INFO"
    log_dir: Optional[Path] = None
    log_to_file: bool = False

    @field_validator("demo_balance_ether")
    @classmethod
    def _valid_ether_amount(cls, value: str) -> str:
        parse_ether(value)
        return value

    @field_validator("log_level")
    @classmethod
    def _known_level(cls, value: str) -> str:
        level = value.upper()
        if not isinstance(logging.getLevelName(level), int):
            raise ValueError(f"Unknown log level: {value}")
        return level

    @property
    def log_level_value(self) -> int:
        """Numeric logging level."""
        return logging.getLevelName(self.log_level)


def load_config(env_file: Optional[str] = None) -> AuctionConfig:
    """
    Load configuration from the environment.

    Args:
        env_file: Optional path to a .env file. Variables already present in
            the process environment take precedence over the file.

    Returns:
        AuctionConfig instance

    Raises:
        pydantic.ValidationError: if a variable holds an invalid value
    """
    if env_file:
        load_dotenv(env_file, override=False)
    else:
        load_dotenv(override=False)

    values = {}
    for name in AuctionConfig.model_fields:
        raw = os.environ.get(ENV_PREFIX + name.upper())
        if raw is not None and raw != "":
            values[name] = raw

    return AuctionConfig(**values)
