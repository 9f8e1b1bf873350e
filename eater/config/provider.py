"""Configuration provider following Black Box Design principles."""
import os
from dataclasses import dataclass
from typing import Optional, Protocol


DEFAULT_NAMESPACE = "com.eater.app"


@dataclass
class StoreConfig:
    """Credential store configuration."""
    namespace: str
    redis_url: str
    encryption_key: str


@dataclass
class AuthConfig:
    """Authentication configuration."""
    min_secret_length: int
    demo_mode: bool
    api_base_url: str
    network_delay: float = 0.0

    def __post_init__(self):
        if self.min_secret_length < 1:
            raise ValueError("min_secret_length must be at least 1")


@dataclass
class OrderConfig:
    """Order placement configuration."""
    base_url: str
    timeout: float
    demo_mode: bool


class ConfigProvider(Protocol):
    """Protocol for configuration providers."""

    def get_store_config(self) -> StoreConfig:
        """Get credential store configuration."""
        ...

    def get_auth_config(self) -> AuthConfig:
        """Get authentication configuration."""
        ...

    def get_order_config(self) -> OrderConfig:
        """Get order placement configuration."""
        ...


def _env_flag(name: str, default: str) -> bool:
    return os.getenv(name, default).lower() == "true"


class EnvConfigProvider:
    """Environment-based configuration provider."""

    def get_store_config(self) -> StoreConfig:
        """Get credential store configuration from environment variables."""
        # Encryption key is required - credentials are never stored in plaintext
        encryption_key = os.getenv("CREDENTIAL_ENCRYPTION_KEY")
        if not encryption_key:
            raise ValueError(
                "CREDENTIAL_ENCRYPTION_KEY environment variable is required. "
                "Generate one with: python -c \"from cryptography.fernet import Fernet; "
                "print(Fernet.generate_key().decode())\""
            )

        return StoreConfig(
            namespace=os.getenv("EATER_STORAGE_NAMESPACE", DEFAULT_NAMESPACE),
            redis_url=os.getenv("REDIS_URL", "redis://localhost:6379/0"),
            encryption_key=encryption_key,
        )

    def get_auth_config(self) -> AuthConfig:
        """Get authentication configuration from environment variables."""
        return AuthConfig(
            min_secret_length=int(os.getenv("MIN_SECRET_LENGTH", "6")),
            demo_mode=_env_flag("DEMO_MODE", "true"),
            api_base_url=os.getenv("EATER_API_URL", "https://your-backend-server.com"),
            network_delay=float(os.getenv("DEMO_NETWORK_DELAY", "0.8")),
        )

    def get_order_config(self) -> OrderConfig:
        """Get order placement configuration from environment variables."""
        return OrderConfig(
            base_url=os.getenv("EATER_ORDER_API_URL", "https://your-api-endpoint.com"),
            timeout=float(os.getenv("ORDER_TIMEOUT", "30")),
            demo_mode=_env_flag("DEMO_MODE", "true"),
        )


class StaticConfigProvider:
    """Configuration provider backed by explicit values, used for embedding and tests."""

    def __init__(
        self,
        store: StoreConfig,
        auth: Optional[AuthConfig] = None,
        order: Optional[OrderConfig] = None,
    ):
        self._store = store
        self._auth = auth or AuthConfig(
            min_secret_length=6,
            demo_mode=True,
            api_base_url="https://your-backend-server.com",
        )
        self._order = order or OrderConfig(
            base_url="https://your-api-endpoint.com",
            timeout=30.0,
            demo_mode=self._auth.demo_mode,
        )

    def get_store_config(self) -> StoreConfig:
        return self._store

    def get_auth_config(self) -> AuthConfig:
        return self._auth

    def get_order_config(self) -> OrderConfig:
        return self._order
