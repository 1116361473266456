"""Pydantic models describing a storage bucket and its stack."""

from typing import Any, List, Optional

from pydantic import BaseModel, Field
from pydantic.alias_generators import to_camel

from .constants import (
    DEFAULT_ARCHIVE_ACCESS_TIER_DAYS,
    DEFAULT_DEEP_ARCHIVE_ACCESS_TIER_DAYS,
    DEFAULT_NONCURRENT_VERSION_EXPIRATION_DAYS,
    DEFAULT_TRANSITION_TO_INTELLIGENT_TIERING_DAYS,
    AccessMode,
    BucketCategory,
    RetentionDisposition,
)


class TieringPolicy(BaseModel):
    """Intelligent tiering thresholds."""

    enabled: bool = Field(default=True, description="Enable intelligent tiering")
    archive_access_tier_days: int = Field(
        default=DEFAULT_ARCHIVE_ACCESS_TIER_DAYS,
        ge=0,
        description="Days after which objects move to the archive access tier",
    )
    deep_archive_access_tier_days: int = Field(
        default=DEFAULT_DEEP_ARCHIVE_ACCESS_TIER_DAYS,
        ge=0,
        description="Days after which objects move to the deep archive access tier",
    )

    class Config:
        """Pydantic config."""

        frozen = True
        alias_generator = to_camel
        populate_by_name = True
        extra = "forbid"


class LifecyclePolicy(BaseModel):
    """Lifecycle rule thresholds."""

    transition_to_intelligent_tiering_days: int = Field(
        default=DEFAULT_TRANSITION_TO_INTELLIGENT_TIERING_DAYS,
        ge=0,
        description="Days after which objects transition to intelligent tiering",
    )
    noncurrent_version_expiration_days: int = Field(
        default=DEFAULT_NONCURRENT_VERSION_EXPIRATION_DAYS,
        ge=0,
        description="Days after which noncurrent versions expire",
    )

    class Config:
        """Pydantic config."""

        frozen = True
        alias_generator = to_camel
        populate_by_name = True
        extra = "forbid"


class BucketConfig(BaseModel):
    """Settings for one storage bucket.

    Used both for presets and for caller overrides. When used as an override,
    only fields the caller explicitly set replace preset values.
    """

    bucket_name: Optional[str] = Field(
        default=None, description="Bucket name (generated by CloudFormation if unset)"
    )
    versioned: bool = Field(default=True, description="Enable object versioning")
    encrypted: bool = Field(default=True, description="Enable server-side encryption")
    intelligent_tiering: TieringPolicy = Field(default_factory=TieringPolicy)
    lifecycle: LifecyclePolicy = Field(default_factory=LifecyclePolicy)
    retention: Optional[RetentionDisposition] = Field(
        default=None, description="Assigned from the environment once merged"
    )

    class Config:
        """Pydantic config."""

        frozen = True
        alias_generator = to_camel
        populate_by_name = True
        extra = "forbid"


class AccessGrant(BaseModel):
    """Read or write access for one principal.

    The principal is either an ``iam.IPrincipal`` or a string reference
    (account id, IAM ARN or service name) resolved at build time.
    """

    principal: Any = Field(description="Principal or principal reference")
    mode: AccessMode = Field(description="Access mode")

    class Config:
        """Pydantic config."""

        frozen = True
        arbitrary_types_allowed = True


class StackOutput(BaseModel):
    """A named, exported stack output."""

    key: str = Field(description="Output logical id")
    value: str = Field(description="Output value (usually a CloudFormation token)")
    export_name: str = Field(description="Cross-stack export name")
    description: Optional[str] = Field(default=None)

    class Config:
        """Pydantic config."""

        frozen = True


class AppConfig(BaseModel):
    """Values read from CDK context for one synthesis."""

    environment: str
    bucket_type: BucketCategory
    stack_name: str
    bucket_name: Optional[str] = None
    description: str
    bucket_config: Optional[BucketConfig] = None
    grants: List[AccessGrant] = Field(default_factory=list)

    class Config:
        """Pydantic config."""

        frozen = True
