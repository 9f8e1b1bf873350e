"""
Session stack factory following Black Box Design principles.

This factory:
- Constructs the credential store, authenticator and session manager
- Wires dependencies together
- Returns only the public facades
"""

import logging
from dataclasses import dataclass
from typing import Any, Optional

import httpx

from ...config.provider import ConfigProvider
from ..credentials import CredentialCipher, CredentialStore
from ..orders import OrderService
from ..request import AuthorizedRequestBuilder
from ..session import SessionManager
from .demo import DemoAuthenticator
from .http import HttpAuthenticator
from .interfaces import Authenticator

logger = logging.getLogger(__name__)


@dataclass
class SessionStack:
    """The single, explicitly constructed set of session components."""
    store: CredentialStore
    authenticator: Authenticator
    session_manager: SessionManager
    authorizer: AuthorizedRequestBuilder
    orders: OrderService

    async def aclose(self):
        """Close the HTTP clients held by the stack."""
        await self.orders.aclose()
        if isinstance(self.authenticator, HttpAuthenticator):
            await self.authenticator.aclose()


class AuthFactory:
    """
    Factory for building the session stack.

    This is the composition root that:
    - Creates all session components
    - Wires them together via dependency injection
    - Hands the one instance of each to the UI and request layers
    """

    @staticmethod
    def build_authenticator(
        config_provider: ConfigProvider,
        http_client: Optional[httpx.AsyncClient] = None,
    ) -> Authenticator:
        """Pick the demo or HTTP authenticator from configuration."""
        auth_config = config_provider.get_auth_config()

        if auth_config.demo_mode:
            logger.info("Building session stack with demo authenticator")
            return DemoAuthenticator(network_delay=auth_config.network_delay)

        logger.info(f"Building session stack against {auth_config.api_base_url}")
        return HttpAuthenticator(auth_config.api_base_url, client=http_client)

    @staticmethod
    def build(
        config_provider: ConfigProvider,
        redis_client: Any,
        authenticator: Optional[Authenticator] = None,
        order_transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> SessionStack:
        """
        Build the complete session stack.

        Args:
            config_provider: Configuration provider
            redis_client: Async Redis client backing the credential store
            authenticator: Optional authenticator overriding configuration
            order_transport: Optional httpx transport for the order client

        Returns:
            SessionStack with store, authenticator, session manager, authorizer
            and order client. Close it with aclose()
        """
        store_config = config_provider.get_store_config()
        auth_config = config_provider.get_auth_config()
        order_config = config_provider.get_order_config()

        store = CredentialStore(
            redis_client,
            CredentialCipher(store_config.encryption_key),
            namespace=store_config.namespace,
        )

        authenticator = authenticator or AuthFactory.build_authenticator(config_provider)

        session_manager = SessionManager(
            store,
            authenticator,
            min_secret_length=auth_config.min_secret_length,
        )

        authorizer = AuthorizedRequestBuilder(session_manager)

        orders = OrderService(
            order_config.base_url,
            authorizer,
            timeout=order_config.timeout,
            demo_mode=order_config.demo_mode,
            transport=order_transport,
        )

        return SessionStack(
            store=store,
            authenticator=authenticator,
            session_manager=session_manager,
            authorizer=authorizer,
            orders=orders,
        )
