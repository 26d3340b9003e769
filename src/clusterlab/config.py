"""
Configuration management for clusterlab.

Loads defaults from environment variables (typically from a .env file).
Uses python-dotenv to load .env automatically.

Explicit arguments passed to a clusterer constructor or to ``build()`` always
win over these defaults.

Usage:
    from clusterlab.config import config

    config.clustering.track_tree     # CLUSTERLAB_TRACK_TREE
    config.clustering.tree_depth     # CLUSTERLAB_TREE_DEPTH
    config.log_level                 # CLUSTERLAB_LOG_LEVEL
"""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

# Look for .env in project root (parent of src/)
env_path = Path(__file__).parent.parent.parent / ".env"
if env_path.exists():
    load_dotenv(env_path)


_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off", ""}
_LOG_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    value = raw.strip().lower()
    if value in _TRUE_VALUES:
        return True
    if value in _FALSE_VALUES:
        return False
    raise ValueError(f"{name} must be a boolean (true/false), got {raw!r}")


def _env_optional_int(name: str) -> Optional[int]:
    raw = os.getenv(name, "").strip()
    if not raw:
        return None
    try:
        return int(raw)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got {raw!r}") from None


@dataclass
class ClusteringConfig:
    """Defaults for hierarchical clustering runs."""
    track_tree: bool = False
    tree_depth: Optional[int] = None
    diana_strict: bool = False
    default_linkage: str = "single"

    def __post_init__(self):
        """Validate tree depth."""
        if self.tree_depth is not None and self.tree_depth < 1:
            raise ValueError(
                f"CLUSTERLAB_TREE_DEPTH must be >= 1, got {self.tree_depth}"
            )


class Config:
    """
    Library configuration loaded from environment variables.

    Environment variables can be set:
    1. In a .env file in the project root
    2. In the system environment
    """

    def __init__(self):
        """Load configuration from environment."""
        self.clustering = ClusteringConfig(
            track_tree=_env_bool("CLUSTERLAB_TRACK_TREE", False),
            tree_depth=_env_optional_int("CLUSTERLAB_TREE_DEPTH"),
            diana_strict=_env_bool("CLUSTERLAB_DIANA_STRICT", False),
            default_linkage=os.getenv("CLUSTERLAB_DEFAULT_LINKAGE", "single").strip().lower(),
        )

        log_level = os.getenv("CLUSTERLAB_LOG_LEVEL", "WARNING").strip().upper()
        if log_level not in _LOG_LEVELS:
            raise ValueError(
                f"CLUSTERLAB_LOG_LEVEL must be one of {sorted(_LOG_LEVELS)}, got {log_level!r}"
            )
        self.log_level = log_level


# Global config instance
config = Config()


def reload_config() -> Config:
    """Re-read the environment into the global ``config`` instance."""
    fresh = Config()
    config.clustering = fresh.clustering
    config.log_level = fresh.log_level
    return config
