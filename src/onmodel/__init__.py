"""On-Model Studio - AI on-model fashion imagery from a single product photo."""

__version__ = "0.1.0"

from onmodel.core.config import OnModelConfig, config

__all__ = [
    "OnModelConfig",
    "config",
]
