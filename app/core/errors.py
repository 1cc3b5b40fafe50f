"""
Domain errors.

This module defines the exceptions raised by the StorageGRID services.
Services raise these errors and the routers translate them into HTTP
responses (see `app.util.grid_helpers.to_http_exception`).

Hierarchy:
    - GridError: base class for every error raised while talking to a grid.
    - StructuralDecodeError: a wire value does not match any recognised shape.
    - BucketNotFoundError: the bucket (or one of its sub-resources) is absent upstream.
    - TransportError: network failure or unexpected status code.
    - FetchCancelledError: a sub-fetch ran out of time before completing.
    - InvalidPolicyError: the grid rejected a policy document.
    - ObjectLockChangeError: an attempt to switch object-lock on or off.
    - BucketReadError: composite of the failures of a concurrent bucket read.
"""

from typing import Optional, Sequence, Type


class GridError(Exception):
    """Base class for all errors raised by the grid services."""


class StructuralDecodeError(GridError, ValueError):
    """
    Raised when a wire value matches none of the recognised shapes.

    Attributes:
        field (str): Path of the offending field (e.g. `Statement[1].Principal.AWS`).
        reason (str): Human readable description of the mismatch.
    """

    def __init__(self, field: str, reason: str):
        self.field = field
        self.reason = reason
        super().__init__(f"{field}: {reason}")


class BucketNotFoundError(GridError):
    """Raised when the grid reports that a bucket does not exist."""

    def __init__(self, bucket: str):
        self.bucket = bucket
        super().__init__(f"bucket '{bucket}' not found")


class TransportError(GridError):
    """
    Raised when a request fails or returns an unexpected status code.

    Attributes:
        status_code (int): Status code actually returned (502 when no response was received).
        detail (str): Response text or the underlying network error.
    """

    def __init__(self, status_code: int, detail: str, expected: Optional[int] = None):
        self.status_code = status_code
        self.detail = detail
        self.expected = expected
        if expected is None:
            message = f"request failed with status {status_code}: {detail}"
        else:
            message = f"unexpected status code got: {status_code} expected: {expected}: {detail}"
        super().__init__(message)


class FetchCancelledError(GridError):
    """Raised by a sub-fetch that did not finish before its deadline."""

    def __init__(self, attribute: str, bucket: str):
        self.attribute = attribute
        self.bucket = bucket
        super().__init__(f"reading {attribute} of bucket '{bucket}' was cancelled")


class InvalidPolicyError(GridError):
    """Raised when the grid refuses a bucket policy document (HTTP 400)."""

    def __init__(self, bucket: str, detail: str):
        self.bucket = bucket
        self.detail = detail
        super().__init__(f"invalid bucket policy for bucket '{bucket}': {detail}")


class ObjectLockChangeError(GridError):
    """Raised when object-lock would be enabled or disabled on an existing bucket."""

    def __init__(self):
        super().__init__("object lock configuration cannot be changed once set")


class BucketReadError(ExceptionGroup):
    """
    Composite error of a concurrent bucket read.

    Every failed sub-fetch is kept, so callers can check for a specific kind
    with `except*`, `subgroup()` or `contains()`:

        >>> try:
        ...     await read_bucket(client, "photos")
        ... except* BucketNotFoundError:
        ...     ...
    """

    def __new__(cls, bucket: str, errors: Sequence[Exception]):
        self = super().__new__(cls, f"unable to read bucket '{bucket}'", errors)
        self.bucket = bucket
        return self

    def derive(self, errors):
        return BucketReadError(self.bucket, errors)

    def contains(self, kind: Type[BaseException]) -> bool:
        """Returns True if at least one constituent error is an instance of `kind`."""
        return self.subgroup(kind) is not None
