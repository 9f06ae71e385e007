"""Convenience exports for courier API clients."""

from .api_helpers import ApiResponse, send_request
from .api_pathao import PathaoApi
from .api_redx import RedXApi, format_phone_for_api
from .api_steadfast import SteadfastApi, extract_csrf_token

__all__ = [
    "ApiResponse",
    "PathaoApi",
    "RedXApi",
    "SteadfastApi",
    "extract_csrf_token",
    "format_phone_for_api",
    "send_request",
]
