"""
Grid helpers.

Utility functions and constants used to address the StorageGRID tenant
management API, plus the translation of domain errors into HTTP errors
for the routers.

Responsibilities:
    - Compose the base management URL of a grid.
    - Expose the endpoint paths used by the services.
    - Map `GridError` subclasses to `HTTPException` responses.

Environment variables:
    - GRID_REQUEST_TIMEOUT: Per-request timeout in seconds (default: 30)
    - GRID_READ_DEADLINE: Deadline applied to each sub-fetch of a bucket read (default: none)
"""

import logging
import os
from typing import Optional

from dotenv import load_dotenv
from fastapi import HTTPException

from app.core.errors import (
    BucketNotFoundError,
    BucketReadError,
    FetchCancelledError,
    GridError,
    InvalidPolicyError,
    ObjectLockChangeError,
    StructuralDecodeError,
    TransportError,
)

load_dotenv()

logger = logging.getLogger(__name__)

# ------------------------------------------------------------------------------
# Configuration
# ------------------------------------------------------------------------------

API_PREFIX = "/api/v4"
API_AUTHORIZE = "/authorize"
API_BUCKETS = "/org/containers"

REQUEST_TIMEOUT = float(os.getenv("GRID_REQUEST_TIMEOUT", "30"))


def _optional_float(value: Optional[str]) -> Optional[float]:
    return float(value) if value else None


READ_DEADLINE = _optional_float(os.getenv("GRID_READ_DEADLINE"))


def get_base_url(address: str) -> str:
    """
    Builds the management API base URL of a grid.

    Args:
        address (str): Grid address, with or without the `/api/v4` suffix.

    Raises:
        ValueError: If the address is empty.

    Returns:
        str: Address ending in `/api/v4`, without trailing slash.
    """

    address = (address or "").rstrip("/")
    if not address:
        raise ValueError("Grid address not configured")
    if address.endswith(API_PREFIX):
        return address
    return f"{address}{API_PREFIX}"


def bucket_path(bucket_name: str, sub_resource: Optional[str] = None) -> str:
    """Returns `/org/containers/{bucket}` or `/org/containers/{bucket}/{sub_resource}`."""

    path = f"{API_BUCKETS}/{bucket_name}"
    if sub_resource:
        path = f"{path}/{sub_resource}"
    return path


# ------------------------------------------------------------------------------
# Error translation
# ------------------------------------------------------------------------------

def to_http_exception(error: Exception) -> HTTPException:
    """
    Converts a domain error into the `HTTPException` returned to API callers.

    A `BucketReadError` becomes a 404 when any of its constituent errors
    is a `BucketNotFoundError`; otherwise every failure is listed in the detail.
    """

    if isinstance(error, BucketReadError):
        if error.contains(BucketNotFoundError):
            return HTTPException(status_code=404, detail=f"Bucket '{error.bucket}' not found")
        logger.error("Reading bucket %s failed: %s", error.bucket, [str(e) for e in error.exceptions])
        return HTTPException(status_code=502, detail=[str(e) for e in error.exceptions])

    if isinstance(error, BucketNotFoundError):
        return HTTPException(status_code=404, detail=str(error))
    if isinstance(error, (InvalidPolicyError, ObjectLockChangeError)):
        return HTTPException(status_code=400, detail=str(error))
    if isinstance(error, FetchCancelledError):
        return HTTPException(status_code=504, detail=str(error))
    if isinstance(error, StructuralDecodeError):
        logger.error("Malformed grid response: %s", error)
        return HTTPException(status_code=502, detail=f"Malformed response from grid: {error}")
    if isinstance(error, TransportError):
        logger.error("Grid request failed: %s", error)
        status_code = error.status_code if 400 <= error.status_code < 500 else 502
        return HTTPException(status_code=status_code, detail=f"HTTP error from grid: {error.detail}")
    if isinstance(error, GridError):
        return HTTPException(status_code=500, detail=str(error))

    logger.exception("Unexpected error", exc_info=error)
    return HTTPException(status_code=500, detail=f"Unexpected error: {str(error)}")
