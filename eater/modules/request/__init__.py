"""
Request Module - Black Box Interface

Purpose: Attach session authorization to outbound requests
Interface: AuthorizedRequestBuilder.authorize(), httpx auth flow
Hidden: Header name and scheme, session lookup

Never constructs or sends requests itself.
"""

from .authorizer import AuthorizedRequestBuilder

__all__ = ["AuthorizedRequestBuilder"]
