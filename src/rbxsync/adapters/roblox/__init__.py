"""Public interface for the Roblox Open Cloud adapter."""

from __future__ import annotations

from .client import RobloxAPIError, RobloxClient, content_type_for, encode_resource_fields
from .schema import OperationResponse, ResourceListResponse, ResourcePayload

__all__ = [
    "OperationResponse",
    "ResourceListResponse",
    "ResourcePayload",
    "RobloxAPIError",
    "RobloxClient",
    "content_type_for",
    "encode_resource_fields",
]
