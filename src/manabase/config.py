"""
Engine configuration.

Values come from the environment (optionally a .env file), falling back to
the defaults below.
"""

import os
from dataclasses import dataclass

from dotenv import load_dotenv


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got {raw!r}") from None


@dataclass(frozen=True)
class EngineConfig:
    """Tunables for a ManabaseEngine instance."""

    cache_size: int = 10_000
    """Maximum entries per memo cache (bounded growth, no eviction)"""

    min_deck_size: int = 40
    """Decks below this size are rejected by mulligan analysis"""

    mc_iterations: int = 10_000
    """Default Monte Carlo iterations"""

    mulligan_iterations: int = 10_000
    """Default simulated hands per hand size in mulligan analysis"""

    mc_workers: int = 1
    """Worker processes for Monte Carlo partitions (1 = in-process)"""

    min_lands: int = 20
    max_lands: int = 28

    min_hand_size: int = 4
    """Smallest hand size considered by the mulligan DP solver"""

    log_dir: str = "logs"
    log_level: str = "INFO"

    mcp_transport: str = "stdio"
    """MCP server transport: stdio or http"""
    mcp_host: str = "127.0.0.1"
    mcp_port: int = 9000

    def __post_init__(self):
        if self.cache_size < 0:
            raise ValueError("cache_size must be >= 0")
        if self.mc_workers < 1:
            raise ValueError("mc_workers must be >= 1")
        if self.min_lands > self.max_lands:
            raise ValueError("min_lands must be <= max_lands")
        if not 1 <= self.min_hand_size <= 7:
            raise ValueError("min_hand_size must be between 1 and 7")
        if self.mcp_transport not in ("stdio", "http"):
            raise ValueError("mcp_transport must be stdio or http")
        if not 0 < self.mcp_port < 65536:
            raise ValueError("mcp_port must be between 1 and 65535")

    @classmethod
    def from_env(cls, dotenv_path: str = None) -> "EngineConfig":
        """Load configuration from MANABASE_* environment variables.

        Args:
            dotenv_path: Optional .env file; defaults to python-dotenv's lookup
        """
        load_dotenv(dotenv_path)
        defaults = cls()
        return cls(
            cache_size=_env_int("MANABASE_CACHE_SIZE", defaults.cache_size),
            min_deck_size=_env_int("MANABASE_MIN_DECK_SIZE", defaults.min_deck_size),
            mc_iterations=_env_int("MANABASE_MC_ITERATIONS", defaults.mc_iterations),
            mulligan_iterations=_env_int(
                "MANABASE_MULLIGAN_ITERATIONS", defaults.mulligan_iterations
            ),
            mc_workers=_env_int("MANABASE_MC_WORKERS", defaults.mc_workers),
            min_lands=_env_int("MANABASE_MIN_LANDS", defaults.min_lands),
            max_lands=_env_int("MANABASE_MAX_LANDS", defaults.max_lands),
            min_hand_size=_env_int("MANABASE_MIN_HAND_SIZE", defaults.min_hand_size),
            log_dir=os.getenv("MANABASE_LOG_DIR", defaults.log_dir),
            log_level=os.getenv("MANABASE_LOG_LEVEL", defaults.log_level).upper(),
            mcp_transport=os.getenv(
                "MANABASE_MCP_TRANSPORT", defaults.mcp_transport
            ).lower(),
            mcp_host=os.getenv("MANABASE_MCP_HOST", defaults.mcp_host),
            mcp_port=_env_int("MANABASE_MCP_PORT", defaults.mcp_port),
        )
