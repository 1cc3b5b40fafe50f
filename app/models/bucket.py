"""
Bucket model definition.

This module defines the data models related to StorageGRID buckets
(S3 containers): the snapshot assembled when a bucket is read, its
object-lock configuration and the payload used to create one.
"""

from enum import Enum
from typing import Annotated, Literal, Optional, Union
from pydantic import BaseModel, Field, PositiveInt, model_validator


class ObjectLockMode(str, Enum):
    COMPLIANCE = "compliance"
    GOVERNANCE = "governance"


class RetentionDays(BaseModel):
    unit: Literal["days"] = "days"
    value: PositiveInt


class RetentionYears(BaseModel):
    unit: Literal["years"] = "years"
    value: PositiveInt


RetentionPeriod = Annotated[Union[RetentionDays, RetentionYears], Field(discriminator="unit")]


class ObjectLockConfig(BaseModel):
    """
    Default retention applied to objects written to an object-lock bucket.

    Example:
        >>> config = ObjectLockConfig(mode="governance", retention=RetentionDays(value=30))
    """

    mode: ObjectLockMode
    """Retention mode (`compliance` or `governance`)."""

    retention: RetentionPeriod
    """Default retention period, in days or in years."""


class BucketSnapshot(BaseModel):
    """
    Full state of a bucket as read from the grid.

    The snapshot is recomputed on every read and has no identity of its own.
    """

    name: str
    region: str
    object_lock: Optional[ObjectLockConfig] = None
    """None when object-lock is disabled on the bucket."""


class ObjectLockSettings(BaseModel):
    """
    Object-lock settings as declared by a caller.

    Exactly one of `days` or `years` must be given.

    Example:
        >>> settings = ObjectLockSettings(mode="compliance", years=1)
    """

    mode: ObjectLockMode
    days: Optional[PositiveInt] = None
    years: Optional[PositiveInt] = None

    @model_validator(mode="after")
    def check_single_retention(self):
        if (self.days is None) == (self.years is None):
            raise ValueError("object lock configuration must specify either days or years")
        return self


class BucketCreate(BaseModel):
    """
    Payload used to create a bucket.

    Example:
        >>> bucket = BucketCreate(name="photos", region="us-east-1")
    """

    name: str
    region: Optional[str] = None
    """Region of the bucket; the grid's default region is used when omitted."""

    object_lock: Optional[ObjectLockSettings] = None
