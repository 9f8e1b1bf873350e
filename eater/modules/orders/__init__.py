"""
Orders Module - Black Box Interface

Purpose: Submit cuisine selections to the order backend
Interface: place_order()
Hidden: Endpoint layout, response decoding, demo fallback

Consumes the request module for authorization; never reads credentials.
"""

from .service import APIError, APIErrorKind, OrderService

__all__ = ["APIError", "APIErrorKind", "OrderService"]
