"""
Tests for order placement through the authorized client.
"""

import httpx
import pytest

from eater.modules.api.models import OrderStatus
from eater.modules.auth import AuthError, AuthErrorKind
from eater.modules.orders import APIError, APIErrorKind, OrderService

BASE_URL = "http://backend.test"


def order_service(authorizer, transport, demo_mode=False):
    return OrderService(BASE_URL, authorizer, demo_mode=demo_mode, transport=transport)


@pytest.mark.asyncio
async def test_place_order_against_backend(session_manager, authorizer, mock_backend, backend_transport):
    """Test an order is submitted with the session token attached."""
    result = await session_manager.sign_in("demo@eater.app", "demo123")
    # The demo authenticator issues opaque tokens; give the backend one it trusts
    await session_manager.store.save("token", mock_backend.create_token(result.session.user_id))

    order = await order_service(authorizer, backend_transport).place_order(
        ["Italian", "Thai"], delivery_address="123 Main St"
    )

    assert order.status == OrderStatus.SUBMITTED
    assert order.cuisines == ["Italian", "Thai"]
    assert order.platform == "Uber Eats"
    assert order.confirmation_code
    assert mock_backend.orders == [{"uid": result.session.user_id, "cuisines": ["Italian", "Thai"]}]


@pytest.mark.asyncio
async def test_place_order_requires_session(authorizer, mock_backend, backend_transport):
    """Test nothing is sent when nobody is signed in."""
    with pytest.raises(AuthError) as exc_info:
        await order_service(authorizer, backend_transport).place_order(["Thai"])

    assert exc_info.value.kind == AuthErrorKind.NOT_AUTHENTICATED
    assert mock_backend.orders == []


@pytest.mark.asyncio
async def test_empty_cuisines_rejected(authorizer, backend_transport):
    """Test an empty selection fails before any request."""
    with pytest.raises(APIError) as exc_info:
        await order_service(authorizer, backend_transport).place_order([])

    assert exc_info.value.kind == APIErrorKind.INVALID_REQUEST


@pytest.mark.asyncio
async def test_server_error_status(session_manager, authorizer):
    """Test non-2xx statuses surface as SERVER_ERROR."""
    await session_manager.sign_in("demo@eater.app", "demo123")
    transport = httpx.MockTransport(lambda request: httpx.Response(500, text="kitchen closed"))

    with pytest.raises(APIError) as exc_info:
        await order_service(authorizer, transport).place_order(["Thai"])

    assert exc_info.value.kind == APIErrorKind.SERVER_ERROR
    assert exc_info.value.message == "Server error (500): kitchen closed"


@pytest.mark.asyncio
async def test_unsuccessful_order_response(session_manager, authorizer):
    """Test success=false is reported with the backend's message."""
    await session_manager.sign_in("demo@eater.app", "demo123")
    transport = httpx.MockTransport(
        lambda request: httpx.Response(200, json={"success": False, "message": "Out of stock"})
    )

    with pytest.raises(APIError) as exc_info:
        await order_service(authorizer, transport).place_order(["Thai"])

    assert exc_info.value.detail == "Out of stock"


@pytest.mark.asyncio
async def test_timeout(session_manager, authorizer):
    """Test timeouts map to TIMEOUT."""
    await session_manager.sign_in("demo@eater.app", "demo123")

    def handler(request):
        raise httpx.ReadTimeout("slow", request=request)

    with pytest.raises(APIError) as exc_info:
        await order_service(authorizer, httpx.MockTransport(handler)).place_order(["Thai"])

    assert exc_info.value.kind == APIErrorKind.TIMEOUT


@pytest.mark.asyncio
async def test_unreachable_backend_without_demo_mode(session_manager, authorizer):
    """Test connection failures are NETWORK_ERROR outside demo mode."""
    await session_manager.sign_in("demo@eater.app", "demo123")

    def handler(request):
        raise httpx.ConnectError("refused", request=request)

    with pytest.raises(APIError) as exc_info:
        await order_service(authorizer, httpx.MockTransport(handler)).place_order(["Thai"])

    assert exc_info.value.kind == APIErrorKind.NETWORK_ERROR


@pytest.mark.asyncio
async def test_demo_mode_falls_back_to_canned_order(session_manager, authorizer):
    """Test demo mode returns a submitted order when the backend is away."""
    await session_manager.sign_in("demo@eater.app", "demo123")

    def handler(request):
        raise httpx.ConnectError("refused", request=request)

    order = await order_service(
        authorizer, httpx.MockTransport(handler), demo_mode=True
    ).place_order(["Indian"])

    assert order.status == OrderStatus.SUBMITTED
    assert order.cuisines == ["Indian"]


@pytest.mark.asyncio
async def test_demo_mode_on_undecodable_body(session_manager, authorizer):
    """Test demo mode also covers responses it cannot decode."""
    await session_manager.sign_in("demo@eater.app", "demo123")
    transport = httpx.MockTransport(lambda request: httpx.Response(200, text="<html>"))

    order = await order_service(authorizer, transport, demo_mode=True).place_order(["Thai"])

    assert order.status == OrderStatus.SUBMITTED


@pytest.mark.asyncio
async def test_undecodable_body_without_demo_mode(session_manager, authorizer):
    """Test undecodable bodies are DECODING_ERROR outside demo mode."""
    await session_manager.sign_in("demo@eater.app", "demo123")
    transport = httpx.MockTransport(lambda request: httpx.Response(200, text="<html>"))

    with pytest.raises(APIError) as exc_info:
        await order_service(authorizer, transport).place_order(["Thai"])

    assert exc_info.value.kind == APIErrorKind.DECODING_ERROR
