"""Configuration providers for the eater session core."""

from .provider import (
    DEFAULT_NAMESPACE,
    AuthConfig,
    ConfigProvider,
    EnvConfigProvider,
    OrderConfig,
    StaticConfigProvider,
    StoreConfig,
)

__all__ = [
    "DEFAULT_NAMESPACE",
    "AuthConfig",
    "ConfigProvider",
    "EnvConfigProvider",
    "OrderConfig",
    "StaticConfigProvider",
    "StoreConfig",
]
