import logging
from enum import Enum
from typing import List, Optional

import httpx
from pydantic import ValidationError

from ..api.models import Order, OrderRequest, OrderResponse, OrderStatus
from ..auth.models import AuthError
from ..request import AuthorizedRequestBuilder

logger = logging.getLogger(__name__)


class APIErrorKind(str, Enum):
    """Kinds of order API failure."""

    NETWORK_ERROR = "network_error"
    INVALID_RESPONSE = "invalid_response"
    SERVER_ERROR = "server_error"
    DECODING_ERROR = "decoding_error"
    TIMEOUT = "timeout"
    INVALID_REQUEST = "invalid_request"


class APIError(Exception):
    """Typed order API failure."""

    def __init__(self, kind: APIErrorKind, detail: Optional[str] = None, code: Optional[int] = None):
        self.kind = kind
        self.detail = detail
        self.code = code
        super().__init__(self.message)

    @property
    def message(self) -> str:
        if self.kind == APIErrorKind.SERVER_ERROR:
            return f"Server error ({self.code}): {self.detail or 'Unknown error'}"
        if self.kind == APIErrorKind.NETWORK_ERROR:
            return f"Network error: {self.detail or 'connection failed'}"
        if self.kind == APIErrorKind.DECODING_ERROR:
            return f"Failed to decode response: {self.detail or 'unknown format'}"
        if self.kind == APIErrorKind.TIMEOUT:
            return "Request timed out"
        if self.kind == APIErrorKind.INVALID_REQUEST:
            return f"Invalid order: {self.detail or 'no cuisines selected'}"
        return "Invalid response from server"


class OrderService:
    """
    Places orders with the backend on behalf of the signed-in user.

    Every request goes through the AuthorizedRequestBuilder, so an order is
    never sent without a token. In demo mode an unreachable backend or an
    undecodable body yields a canned submitted order instead of an error.
    """

    def __init__(
        self,
        base_url: str,
        authorizer: AuthorizedRequestBuilder,
        timeout: float = 30.0,
        demo_mode: bool = False,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        Initialize order service.

        Args:
            base_url: Order API root
            authorizer: Attaches the session token to each request
            timeout: Request timeout in seconds
            demo_mode: Fall back to canned orders when the backend is unavailable
            transport: Optional httpx transport (tests inject a mock)
        """
        self.base_url = base_url.rstrip("/")
        self.demo_mode = demo_mode
        self.client = httpx.AsyncClient(timeout=timeout, auth=authorizer, transport=transport)

    async def aclose(self):
        await self.client.aclose()

    async def place_order(
        self,
        cuisines: List[str],
        delivery_address: Optional[str] = None,
        special_instructions: Optional[str] = None,
    ) -> Order:
        """
        Submit an order for the selected cuisines.

        Raises:
            AuthError: NOT_AUTHENTICATED when no session exists (nothing is sent)
            APIError: For invalid input, transport, status or decoding failures
        """
        try:
            body = OrderRequest(
                cuisines=cuisines,
                delivery_address=delivery_address,
                special_instructions=special_instructions,
            )
        except ValidationError as e:
            raise APIError(APIErrorKind.INVALID_REQUEST, "no cuisines selected") from e

        try:
            response = await self.client.post(
                f"{self.base_url}/order",
                json=body.model_dump(by_alias=True, exclude_none=True),
            )
        except AuthError:
            raise
        except httpx.TimeoutException as e:
            raise APIError(APIErrorKind.TIMEOUT) from e
        except httpx.HTTPError as e:
            if self.demo_mode:
                logger.info(f"Order backend unreachable, using demo order: {type(e).__name__}")
                return self._demo_order(body.cuisines)
            raise APIError(APIErrorKind.NETWORK_ERROR, str(e)) from e

        if not response.is_success:
            raise APIError(APIErrorKind.SERVER_ERROR, response.text or None, code=response.status_code)

        try:
            payload = OrderResponse.model_validate(response.json())
        except (ValueError, ValidationError) as e:
            if self.demo_mode:
                logger.info("Order response could not be decoded, using demo order")
                return self._demo_order(body.cuisines)
            raise APIError(APIErrorKind.DECODING_ERROR, str(e)) from e

        if not payload.success or payload.order is None:
            raise APIError(
                APIErrorKind.SERVER_ERROR,
                payload.message or "Order placement failed",
                code=response.status_code,
            )

        details = payload.order
        order = Order(
            cuisines=body.cuisines,
            status=OrderStatus.SUBMITTED,
            platform=details.platform,
            item_name=details.item_name,
            customization=details.customization,
            price=details.price,
            total_price=details.total_price,
        )
        logger.info(f"Order {order.id} submitted ({order.confirmation_code})")
        return order

    @staticmethod
    def _demo_order(cuisines: List[str]) -> Order:
        return Order(cuisines=cuisines, status=OrderStatus.SUBMITTED, platform="Demo")
