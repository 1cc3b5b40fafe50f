"""
Buckets Service.

This module manages StorageGRID buckets through the tenant management
API: creation, deletion, object-lock updates and, above all, reading the
full state of a bucket.

A bucket's state is spread over independent sub-resources (region and
object-lock configuration). `read_bucket` fetches them concurrently, waits
for every fetch to finish and either merges them into one `BucketSnapshot`
or raises one `BucketReadError` holding every failure.

Handled responsibilities:
    - Concurrent aggregation of bucket sub-resources
    - Decoding of region and object-lock responses
    - Bucket creation, deletion and object-lock updates
"""

import asyncio
import logging
from typing import Any, Awaitable, Dict, Optional, TypeVar

from app.core.errors import (
    BucketNotFoundError,
    BucketReadError,
    FetchCancelledError,
    ObjectLockChangeError,
    StructuralDecodeError,
    TransportError,
)
from app.models.bucket import (
    BucketCreate,
    BucketSnapshot,
    ObjectLockConfig,
    ObjectLockMode,
    ObjectLockSettings,
    RetentionDays,
    RetentionYears,
)
from app.services.grid_client import GridClient, GridResponse
from app.util.grid_helpers import API_BUCKETS, READ_DEADLINE, bucket_path
from app.util.wire_values import decode_string, parse_retention_value

logger = logging.getLogger(__name__)

T = TypeVar("T")

REGION = "region"
OBJECT_LOCK = "object-lock"


# ------------------------------------------------------------------------------
# Aggregated read
# ------------------------------------------------------------------------------

async def read_bucket(client: GridClient, bucket_name: str, timeout: Optional[float] = READ_DEADLINE) -> BucketSnapshot:
    """
    Reads the full state of a bucket.

    The region and the object-lock configuration are fetched by two
    concurrent tasks. Both tasks always run to completion; a failure in one
    does not cancel the other.

    Args:
        client (GridClient): Client of the grid holding the bucket.
        bucket_name (str): Name of the bucket.
        timeout (float, optional): Deadline applied to each fetch independently.

    Raises:
        BucketReadError: If any fetch failed. The group holds every failure,
            e.g. a `BucketNotFoundError` together with a `TransportError`.

    Returns:
        BucketSnapshot: Name, region and object-lock configuration of the bucket.
    """

    logger.debug("Reading bucket %s", bucket_name)

    region, object_lock = await asyncio.gather(
        _fetch(REGION, bucket_name, read_region(client, bucket_name), timeout),
        _fetch(OBJECT_LOCK, bucket_name, read_object_lock_configuration(client, bucket_name), timeout),
        return_exceptions=True,
    )

    errors = []
    for attribute, outcome in ((REGION, region), (OBJECT_LOCK, object_lock)):
        if isinstance(outcome, asyncio.CancelledError):
            errors.append(FetchCancelledError(attribute, bucket_name))
        elif isinstance(outcome, BaseException):
            errors.append(outcome)

    if errors:
        raise BucketReadError(bucket_name, errors)

    return BucketSnapshot(name=bucket_name, region=region, object_lock=object_lock)


async def _fetch(attribute: str, bucket_name: str, fetch: Awaitable[T], timeout: Optional[float]) -> T:
    try:
        return await asyncio.wait_for(fetch, timeout)
    except asyncio.TimeoutError:
        raise FetchCancelledError(attribute, bucket_name)


async def _get_sub_resource(client: GridClient, bucket_name: str, sub_resource: str) -> GridResponse:
    try:
        return await client.send_request("GET", bucket_path(bucket_name, sub_resource), expected_status=200)
    except TransportError as e:
        if e.status_code == 404:
            raise BucketNotFoundError(bucket_name) from e
        raise


def _response_data(response: GridResponse, what: str) -> Dict[str, Any]:
    try:
        body = response.json()
    except ValueError as e:
        raise StructuralDecodeError(what, f"invalid JSON: {e}")
    data = body.get("data") if isinstance(body, dict) else None
    if not isinstance(data, dict):
        raise StructuralDecodeError(f"{what}.data", "expected object")
    return data


async def read_region(client: GridClient, bucket_name: str) -> str:
    """
    Reads the region of a bucket.

    Raises:
        BucketNotFoundError: If the bucket does not exist.
        TransportError: On any other request failure.
        StructuralDecodeError: If the response is malformed.
    """

    response = await _get_sub_resource(client, bucket_name, REGION)
    data = _response_data(response, REGION)
    region = decode_string(data.get("region"), "region.data.region")
    if region is None:
        raise StructuralDecodeError("region.data.region", "missing")
    return region


async def read_object_lock_configuration(client: GridClient, bucket_name: str) -> Optional[ObjectLockConfig]:
    """
    Reads the object-lock configuration of a bucket.

    Raises:
        BucketNotFoundError: If the bucket does not exist.
        TransportError: On any other request failure.
        StructuralDecodeError: If the response is malformed.

    Returns:
        Optional[ObjectLockConfig]: None when object-lock is disabled.
    """

    response = await _get_sub_resource(client, bucket_name, OBJECT_LOCK)
    return object_lock_from_wire(_response_data(response, OBJECT_LOCK))


def object_lock_from_wire(data: Dict[str, Any]) -> Optional[ObjectLockConfig]:
    """
    Decodes the `data` object of an object-lock response.

    Retention values arrive as numeric strings. Empty strings are unset, and
    exactly one of days or years must remain when object-lock is enabled.

    Example:
        >>> object_lock_from_wire({
        ...     "enabled": True,
        ...     "defaultRetentionSetting": {"mode": "governance", "days": "30", "years": ""}
        ... })
        ObjectLockConfig(mode=<ObjectLockMode.GOVERNANCE: 'governance'>, retention=RetentionDays(unit='days', value=30))
    """

    enabled = data.get("enabled", False)
    if not isinstance(enabled, bool):
        raise StructuralDecodeError("object-lock.enabled", "expected boolean")
    if not enabled:
        return None

    settings = data.get("defaultRetentionSetting")
    if not isinstance(settings, dict):
        raise StructuralDecodeError("object-lock.defaultRetentionSetting", "expected object")

    mode_raw = decode_string(settings.get("mode"), "object-lock.defaultRetentionSetting.mode")
    try:
        mode = ObjectLockMode(mode_raw)
    except ValueError:
        raise StructuralDecodeError("object-lock.defaultRetentionSetting.mode", f"expected 'compliance' or 'governance', got {mode_raw!r}")

    days = parse_retention_value(settings.get("days"), "object-lock.defaultRetentionSetting.days")
    years = parse_retention_value(settings.get("years"), "object-lock.defaultRetentionSetting.years")

    if days is not None and years is not None:
        raise StructuralDecodeError("object-lock.defaultRetentionSetting", "both days and years are set")
    if days is not None:
        return ObjectLockConfig(mode=mode, retention=RetentionDays(value=days))
    if years is not None:
        return ObjectLockConfig(mode=mode, retention=RetentionYears(value=years))
    raise StructuralDecodeError("object-lock.defaultRetentionSetting", "neither days nor years is set")


def object_lock_to_wire(settings: ObjectLockSettings) -> Dict[str, Any]:
    retention: Dict[str, Any] = {"mode": settings.mode.value}
    if settings.days is not None:
        retention["days"] = settings.days
    else:
        retention["years"] = settings.years
    return {"enabled": True, "defaultRetentionSetting": retention}


# ------------------------------------------------------------------------------
# Lifecycle
# ------------------------------------------------------------------------------

async def create_bucket(client: GridClient, bucket: BucketCreate) -> BucketSnapshot:
    """
    Creates a bucket and returns its state as stored by the grid.

    The bucket is read back after creation since the grid picks the default
    region when none is given.

    Raises:
        TransportError: If the grid refuses the bucket.
        StructuralDecodeError: If the create response carries no bucket name.
        BucketReadError: If the new bucket cannot be read back.
    """

    payload: Dict[str, Any] = {"name": bucket.name}
    if bucket.region:
        payload["region"] = bucket.region
    if bucket.object_lock is not None:
        payload["s3ObjectLock"] = object_lock_to_wire(bucket.object_lock)

    response = await client.send_request("POST", API_BUCKETS, payload, 201)
    name = decode_string(_response_data(response, "create").get("name"), "create.data.name")
    if not name:
        raise StructuralDecodeError("create.data.name", "missing")

    logger.info("Created bucket %s", name)
    return await read_bucket(client, name)


async def update_object_lock(client: GridClient, bucket_name: str, desired: Optional[ObjectLockSettings]) -> Optional[ObjectLockConfig]:
    """
    Updates the default retention of an object-lock bucket.

    Object-lock itself cannot be switched on or off once the bucket exists;
    only the mode and retention period of an enabled configuration change.

    Raises:
        ObjectLockChangeError: If `desired` would enable or disable object-lock.
        BucketNotFoundError: If the bucket does not exist.

    Returns:
        Optional[ObjectLockConfig]: The configuration as read back from the grid.
    """

    current = await read_object_lock_configuration(client, bucket_name)
    if (desired is None) != (current is None):
        raise ObjectLockChangeError()
    if desired is None:
        return None

    try:
        await client.send_request("PUT", bucket_path(bucket_name, OBJECT_LOCK), object_lock_to_wire(desired), 200)
    except TransportError as e:
        if e.status_code == 404:
            raise BucketNotFoundError(bucket_name) from e
        raise

    logger.info("Updated object lock configuration of bucket %s", bucket_name)
    return await read_object_lock_configuration(client, bucket_name)


async def delete_bucket(client: GridClient, bucket_name: str) -> None:
    """
    Deletes a bucket.

    Raises:
        BucketNotFoundError: If the bucket does not exist.
        TransportError: On any other request failure.
    """

    try:
        await client.send_request("DELETE", bucket_path(bucket_name), expected_status=204)
    except TransportError as e:
        if e.status_code == 404:
            raise BucketNotFoundError(bucket_name) from e
        raise
    logger.info("Deleted bucket %s", bucket_name)
