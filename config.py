"""Central configuration for the expression pool tools.

Uses a dataclass for structured config with env-var overrides.
Module-level constants are kept for the CLI and the API.
"""

import os
from dataclasses import dataclass
from typing import Optional

from dotenv import load_dotenv

load_dotenv()


def _optional_int(name: str) -> Optional[int]:
    raw = os.getenv(name, "").strip()
    return int(raw) if raw else None


@dataclass
class ExpressionPoolConfig:
    """Structured configuration for pool building, CLI and API."""

    # Pool
    max_cache_num: int = 5
    quality: float = 1.0
    seed: Optional[int] = None
    default_first: int = 0
    default_last: int = 100

    # Logging
    log_level: str = "INFO"

    # Server
    api_host: str = "127.0.0.1"
    api_port: int = 8000
    api_key: str = ""
    build_timeout: float = 60.0
    max_pools: int = 32

    @classmethod
    def from_env(cls) -> "ExpressionPoolConfig":
        return cls(
            max_cache_num=int(os.getenv("EXPR_POOL_MAX_CACHE_NUM", "5")),
            quality=float(os.getenv("EXPR_POOL_QUALITY", "1.0")),
            seed=_optional_int("EXPR_POOL_SEED"),
            default_first=int(os.getenv("EXPR_POOL_FIRST", "0")),
            default_last=int(os.getenv("EXPR_POOL_LAST", "100")),
            log_level=os.getenv("EXPR_POOL_LOG_LEVEL", "INFO").upper(),
            api_host=os.getenv("API_HOST", "127.0.0.1"),
            api_port=int(os.getenv("API_PORT", "8000")),
            api_key=os.getenv("EXPR_POOL_API_KEY", ""),
            build_timeout=float(os.getenv("EXPR_POOL_BUILD_TIMEOUT", "60")),
            max_pools=int(os.getenv("EXPR_POOL_MAX_POOLS", "32")),
        )


_cfg = ExpressionPoolConfig.from_env()

MAX_CACHE_NUM = _cfg.max_cache_num
QUALITY = _cfg.quality
SEED = _cfg.seed
DEFAULT_FIRST = _cfg.default_first
DEFAULT_LAST = _cfg.default_last

LOG_LEVEL = _cfg.log_level

API_HOST = _cfg.api_host
API_PORT = _cfg.api_port
API_KEY = _cfg.api_key
BUILD_TIMEOUT = _cfg.build_timeout
MAX_POOLS = _cfg.max_pools
