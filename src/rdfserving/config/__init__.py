"""
Configuration management with typed Pydantic models.

Provides the inbound column schema and environment-aware
configuration loading.
"""

from rdfserving.config.loader import load_config
from rdfserving.config.settings import (
    InboundConfig,
    LoggingConfig,
    ModelConfig,
    ServerConfig,
    ServingConfig,
)

__all__ = [
    "InboundConfig",
    "LoggingConfig",
    "ModelConfig",
    "ServerConfig",
    "ServingConfig",
    "load_config",
]
