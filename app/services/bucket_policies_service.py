"""
Bucket Policies Service.

This module provides functionality to manage the access policy of a
StorageGRID bucket through the tenant management API. It includes
operations for creating or replacing, retrieving, and deleting the policy
document attached to a bucket.

Policy documents are converted to and from the wire format by
`app.services.policy_codec`. The grid stores a single document per bucket;
deleting it means writing an empty (`null`) policy.

Handled responsibilities:
    - Policy creation and replacement (`PUT /org/containers/{name}/policy`)
    - Policy retrieval by bucket name
    - Policy deletion
"""

import logging

from app.core.errors import BucketNotFoundError, InvalidPolicyError, TransportError
from app.models.policy import BucketPolicy, PolicyDocument
from app.services.grid_client import GridClient
from app.services.policy_codec import decode_policy, encode_policy
from app.util.grid_helpers import bucket_path

logger = logging.getLogger(__name__)

POLICY = "policy"


async def upsert_bucket_policy(client: GridClient, bucket_name: str, document: PolicyDocument) -> BucketPolicy:
    """
    Creates or replaces the policy of a bucket.

    Args:
        client (GridClient): Client of the grid holding the bucket.
        bucket_name (str): Name of the bucket.
        document (PolicyDocument): Policy document to attach.

    Raises:
        InvalidPolicyError: If the grid rejects the document (HTTP 400).
        BucketNotFoundError: If the bucket does not exist.
        TransportError: On any other request failure.
        StructuralDecodeError: If the grid's response cannot be decoded.

    Returns:
        BucketPolicy: The policy as stored by the grid.
    """

    try:
        response = await client.send_request("PUT", bucket_path(bucket_name, POLICY), encode_policy(document), 200)
    except TransportError as e:
        if e.status_code == 400:
            raise InvalidPolicyError(bucket_name, e.detail) from e
        if e.status_code == 404:
            raise BucketNotFoundError(bucket_name) from e
        raise

    logger.info("Stored policy of bucket %s (%d statements)", bucket_name, len(document.statements))
    return BucketPolicy(bucket_name=bucket_name, policy=decode_policy(response.body))


async def read_bucket_policy(client: GridClient, bucket_name: str) -> BucketPolicy:
    """
    Retrieves the policy of a bucket.

    Raises:
        BucketNotFoundError: If the bucket does not exist.
        TransportError: On any other request failure.
        StructuralDecodeError: If the policy document is malformed.

    Returns:
        BucketPolicy: The bucket's policy; `policy` is None when none is set.
    """

    try:
        response = await client.send_request("GET", bucket_path(bucket_name, POLICY), expected_status=200)
    except TransportError as e:
        if e.status_code == 404:
            raise BucketNotFoundError(bucket_name) from e
        raise

    return BucketPolicy(bucket_name=bucket_name, policy=decode_policy(response.body))


async def delete_bucket_policy(client: GridClient, bucket_name: str) -> None:
    """
    Removes the policy of a bucket by storing a `null` policy.

    Raises:
        BucketNotFoundError: If the bucket does not exist.
        TransportError: On any other request failure.
    """

    try:
        await client.send_request("PUT", bucket_path(bucket_name, POLICY), encode_policy(None), 200)
    except TransportError as e:
        if e.status_code == 404:
            raise BucketNotFoundError(bucket_name) from e
        raise

    logger.info("Deleted policy of bucket %s", bucket_name)
