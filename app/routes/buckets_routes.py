"""
Bucket routes.

This module defines the API endpoints for managing buckets on a
registered grid: creation, reading the full bucket state, updating the
object-lock retention and deletion.

Reading a bucket fetches its region and object-lock configuration
concurrently (see `app.services.buckets_service.read_bucket`). A bucket
missing on the grid is reported as 404, whichever sub-fetch noticed it.
"""

from typing import Optional

from fastapi import APIRouter, Body, Depends
from app.core.dependencies import get_client
from app.core.errors import BucketReadError, GridError
from app.models.bucket import BucketCreate, BucketSnapshot, ObjectLockConfig, ObjectLockSettings
from app.services.buckets_service import create_bucket, delete_bucket, read_bucket, update_object_lock
from app.services.grid_client import GridClient
from app.util.grid_helpers import to_http_exception

router = APIRouter()


@router.post("/{grid_id}", status_code=201, response_model=BucketSnapshot)
async def create_bucket_route(data: BucketCreate, client: GridClient = Depends(get_client)):
    """
    Create a bucket on a grid.

    Returns:
        BucketSnapshot: The bucket as stored by the grid, including the
            default region when none was requested.

    Example:
        >>> POST /buckets/665f1c2ab0e5d2a1c4f0a001
        {
            "name": "photos",
            "object_lock": {"mode": "governance", "days": 30}
        }
    """

    try:
        return await create_bucket(client, data)
    except (GridError, BucketReadError) as e:
        raise to_http_exception(e)


@router.get("/{grid_id}/{bucket_name}", response_model=BucketSnapshot)
async def read_bucket_route(bucket_name: str, client: GridClient = Depends(get_client)):
    """
    Retrieve the full state of a bucket.

    Raises:
        HTTPException:
            - 404: If the bucket does not exist.
            - 502: If any sub-resource could not be read; all failures are listed.
    """

    try:
        return await read_bucket(client, bucket_name)
    except (GridError, BucketReadError) as e:
        raise to_http_exception(e)


@router.put("/{grid_id}/{bucket_name}/object-lock", response_model=Optional[ObjectLockConfig])
async def update_object_lock_route(
    bucket_name: str,
    data: Optional[ObjectLockSettings] = Body(default=None),
    client: GridClient = Depends(get_client),
):
    """
    Update the default retention of an object-lock bucket.

    Raises:
        HTTPException: 400 if the request would enable or disable object-lock.
    """

    try:
        return await update_object_lock(client, bucket_name, data)
    except GridError as e:
        raise to_http_exception(e)


@router.delete("/{grid_id}/{bucket_name}")
async def delete_bucket_route(bucket_name: str, client: GridClient = Depends(get_client)):
    """Delete a bucket from a grid."""

    try:
        await delete_bucket(client, bucket_name)
        return {"message": "Bucket deleted successfully"}
    except GridError as e:
        raise to_http_exception(e)
