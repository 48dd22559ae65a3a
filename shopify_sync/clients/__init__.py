"""GraphQL clients for the Shopify Admin API."""

from .admin import AdminClient
from .base import APIError, AuthenticationError, GraphQLError, ThrottledError

__all__ = ["AdminClient", "APIError", "AuthenticationError", "GraphQLError", "ThrottledError"]
