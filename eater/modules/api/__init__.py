"""
API Module - Black Box Interface

Purpose: Shared wire models for the auth and order endpoints
Interface: pydantic request/response models; mock_backend for local runs
Hidden: JSON field aliases

The mock backend is imported explicitly (eater.modules.api.mock_backend)
so clients do not pull in the server stack.
"""

from .models import Order, OrderRequest, OrderResponse, OrderStatus

__all__ = ["Order", "OrderRequest", "OrderResponse", "OrderStatus"]
