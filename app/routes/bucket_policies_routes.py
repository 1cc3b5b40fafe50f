"""
Bucket policy routes.

This module defines the API endpoints for managing the access policy
attached to a bucket. Each bucket holds at most one policy document made
of ordered statements (effect, actions, resources, principals and
conditions).

All endpoints in this module interact with the service layer
(`app.services.bucket_policies_service`).
"""

from fastapi import APIRouter, Depends
from app.core.dependencies import get_client
from app.core.errors import GridError
from app.models.policy import BucketPolicy, PolicyDocument
from app.services.bucket_policies_service import delete_bucket_policy, read_bucket_policy, upsert_bucket_policy
from app.services.grid_client import GridClient
from app.util.grid_helpers import to_http_exception

router = APIRouter()


@router.put("/{grid_id}/{bucket_name}", response_model=BucketPolicy)
async def upsert_bucket_policy_route(bucket_name: str, data: PolicyDocument, client: GridClient = Depends(get_client)):
    """
    Create or replace the policy of a bucket.

    Example:
        >>> PUT /bucket-policies/665f1c2ab0e5d2a1c4f0a001/photos
        {
            "id": "photos-policy",
            "version": "2012-10-17",
            "statements": [
                {
                    "sid": "PublicRead",
                    "effect": "Allow",
                    "actions": ["s3:GetObject"],
                    "resources": ["arn:aws:s3:::photos/*"],
                    "principal": {"type": "*"}
                }
            ]
        }
    """

    try:
        return await upsert_bucket_policy(client, bucket_name, data)
    except GridError as e:
        raise to_http_exception(e)


@router.get("/{grid_id}/{bucket_name}", response_model=BucketPolicy)
async def read_bucket_policy_route(bucket_name: str, client: GridClient = Depends(get_client)):
    """Retrieve the policy of a bucket; `policy` is null when none is set."""

    try:
        return await read_bucket_policy(client, bucket_name)
    except GridError as e:
        raise to_http_exception(e)


@router.delete("/{grid_id}/{bucket_name}")
async def delete_bucket_policy_route(bucket_name: str, client: GridClient = Depends(get_client)):
    """Remove the policy of a bucket."""

    try:
        await delete_bucket_policy(client, bucket_name)
        return {"message": "Bucket policy deleted successfully"}
    except GridError as e:
        raise to_http_exception(e)
