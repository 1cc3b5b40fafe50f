"""
Bucket policy model definition.

This module defines the data models that represent S3 bucket policies
managed through the StorageGRID tenant management API. A bucket policy is
an access-policy document made of ordered statements, each pairing an
effect with actions, resources, principals and optional conditions.

The models follow a hierarchical structure:
- Principal: the actor(s) a statement applies to (wildcard or AWS identifiers).
- Statement: a single rule of the policy.
- PolicyDocument: the complete policy (id, version, statements).
- BucketPolicy: top-level model that associates a document with a bucket.

The models only carry policy documents; they do not evaluate them.
"""

from enum import Enum
from typing import Annotated, Dict, List, Literal, Optional, Union
from pydantic import BaseModel, Field, field_validator


class WildcardPrincipal(BaseModel):
    """
    Principal matching any caller.

    Rendered on the wire as a bare `"*"`.

    Example:
        >>> principal = WildcardPrincipal()
    """

    type: Literal["*"] = "*"


class AwsPrincipal(BaseModel):
    """
    Principal expressed as a list of AWS identifiers.

    An empty identifier list means "all AWS principals" (`{"AWS": "*"}`).

    Example:
        >>> principal = AwsPrincipal(identifiers=["arn:aws:iam::123456789012:user/alice"])
    """

    type: Literal["AWS"] = "AWS"

    identifiers: List[str] = Field(default_factory=list)
    """ARNs of the principals; empty for all AWS principals."""


Principal = Annotated[Union[WildcardPrincipal, AwsPrincipal], Field(discriminator="type")]


class Effect(str, Enum):
    ALLOW = "Allow"
    DENY = "Deny"


class Statement(BaseModel):
    """
    Defines a single statement of a bucket policy.

    By convention exactly one of `actions`/`not_actions` and exactly one of
    `resources`/`not_resources` is populated, and at most one of
    `principal`/`not_principal`. These conventions are not enforced here.

    Example:
        >>> statement = Statement(
        ...     sid="AllowRead",
        ...     effect="Allow",
        ...     actions=["s3:GetObject"],
        ...     resources=["arn:aws:s3:::photos/*"],
        ...     principal=WildcardPrincipal()
        ... )
    """

    sid: Optional[str] = None
    """Caller supplied statement identifier. An empty string is stored as None."""

    effect: Effect
    """Whether the statement allows or denies the actions."""

    actions: List[str] = Field(default_factory=list)
    not_actions: List[str] = Field(default_factory=list)
    resources: List[str] = Field(default_factory=list)
    not_resources: List[str] = Field(default_factory=list)

    conditions: Optional[Dict[str, Dict[str, str]]] = None
    """Condition operator -> condition key -> value. None when the statement has no conditions."""

    principal: Optional[Principal] = None
    not_principal: Optional[Principal] = None

    @field_validator("sid", mode="before")
    @classmethod
    def normalize_sid(cls, v):
        # "" and None both mean "no sid" on the wire
        return v or None


class PolicyDocument(BaseModel):
    """
    Defines the complete structure of a bucket policy document.

    Example:
        >>> document = PolicyDocument(
        ...     id="photos-policy",
        ...     version="2012-10-17",
        ...     statements=[Statement(effect="Allow", actions=["s3:*"], resources=["arn:aws:s3:::photos"])]
        ... )
    """

    id: str = ""
    version: str = ""
    statements: List[Statement] = Field(default_factory=list)
    """Ordered statements; order is preserved on the wire."""


class BucketPolicy(BaseModel):
    """
    Associates a policy document with a bucket.

    A `policy` of None means the bucket has no policy.
    """

    bucket_name: str
    policy: Optional[PolicyDocument] = None
