"""Named bucket presets and the config merge that resolves them."""

from typing import Any, Dict, Mapping, Optional, Union

import aws_cdk as cdk
import pydantic

from .constants import (
    MIN_ARCHIVE_ACCESS_TIER_DAYS,
    MIN_DEEP_ARCHIVE_ACCESS_TIER_DAYS,
    PRODUCTION_MARKER,
    BucketCategory,
    RetentionDisposition,
)
from .errors import ConfigurationError
from .models import BucketConfig, LifecyclePolicy, TieringPolicy
from .observability import log_event

MEDIA_STORAGE_CONFIG = BucketConfig(
    versioned=True,
    encrypted=True,
    intelligent_tiering=TieringPolicy(
        enabled=True,
        archive_access_tier_days=90,
        deep_archive_access_tier_days=180,
    ),
    lifecycle=LifecyclePolicy(
        transition_to_intelligent_tiering_days=30,
        noncurrent_version_expiration_days=90,
    ),
)

DOCUMENT_STORAGE_CONFIG = BucketConfig(
    versioned=True,
    encrypted=True,
    intelligent_tiering=TieringPolicy(
        enabled=True,
        archive_access_tier_days=60,
        deep_archive_access_tier_days=120,
    ),
    lifecycle=LifecyclePolicy(
        transition_to_intelligent_tiering_days=15,
        noncurrent_version_expiration_days=60,
    ),
)

LOG_STORAGE_CONFIG = BucketConfig(
    versioned=False,
    encrypted=True,
    intelligent_tiering=TieringPolicy(
        enabled=True,
        archive_access_tier_days=30,
        deep_archive_access_tier_days=90,
    ),
    lifecycle=LifecyclePolicy(
        transition_to_intelligent_tiering_days=7,
        noncurrent_version_expiration_days=30,
    ),
)

PRESETS: Dict[BucketCategory, BucketConfig] = {
    BucketCategory.MEDIA: MEDIA_STORAGE_CONFIG,
    BucketCategory.DOCUMENT: DOCUMENT_STORAGE_CONFIG,
    BucketCategory.LOG: LOG_STORAGE_CONFIG,
}

BucketOverride = Union[BucketConfig, Mapping[str, Any]]


def resolve_retention(environment: Optional[str] = None) -> RetentionDisposition:
    """Return RETAIN for production-like environments, DESTROY otherwise."""
    if environment and PRODUCTION_MARKER in environment.lower():
        return RetentionDisposition.RETAIN
    return RetentionDisposition.DESTROY


def to_removal_policy(retention: RetentionDisposition) -> cdk.RemovalPolicy:
    """Map a retention disposition to a CDK removal policy."""
    if retention == RetentionDisposition.RETAIN:
        return cdk.RemovalPolicy.RETAIN
    return cdk.RemovalPolicy.DESTROY


def parse_category(category: Union[BucketCategory, str]) -> BucketCategory:
    """Coerce a bucket type string into a BucketCategory.

    Raises:
        ConfigurationError: If the value is not a known category
    """
    try:
        return BucketCategory(category)
    except ValueError:
        known = ", ".join(c.value for c in BucketCategory)
        raise ConfigurationError(
            f"Unknown bucket type {category!r}; expected one of: {known}"
        ) from None


def get_preset(category: Union[BucketCategory, str]) -> BucketConfig:
    """Return the preset for a named category.

    Raises:
        ConfigurationError: For ``custom`` or unknown categories
    """
    category = parse_category(category)
    if category not in PRESETS:
        raise ConfigurationError(f"No preset exists for bucket type {category.value!r}")
    return PRESETS[category]


def build_bucket_config(
    category: Union[BucketCategory, str],
    override: Optional[BucketOverride] = None,
    name: Optional[str] = None,
    environment: Optional[str] = None,
) -> BucketConfig:
    """
    Resolve the final configuration for one bucket.

    The preset for ``category`` is the base; ``custom`` starts from model
    defaults and requires an override. Only fields explicitly set on the
    override replace base values. An explicit ``name`` wins over any name in
    the config, and retention is always derived from ``environment``.

    Args:
        category: Bucket category or its string value
        override: Caller overrides, as a BucketConfig or a mapping
        name: Explicit bucket name
        environment: Deployment environment label

    Returns:
        Frozen BucketConfig with retention assigned

    Raises:
        ConfigurationError: Missing or malformed override, unknown category,
            or deep archive threshold earlier than archive threshold
    """
    category = parse_category(category)

    if category == BucketCategory.CUSTOM:
        if override is None:
            raise ConfigurationError(
                "Bucket type 'custom' requires an explicit bucket configuration"
            )
        base = BucketConfig()
    else:
        base = PRESETS[category]

    merged = base.model_dump()
    if override is not None:
        _deep_update(merged, _explicit_fields(override))
    if name:
        merged["bucket_name"] = name
    merged["retention"] = resolve_retention(environment)

    try:
        config = BucketConfig.model_validate(merged)
    except pydantic.ValidationError as e:
        raise ConfigurationError(f"Invalid bucket configuration: {e}") from e

    _check_tiering(config.intelligent_tiering)

    log_event(
        "bucket_config_resolved",
        {
            "bucket_type": category.value,
            "environment": environment,
            "config": config.model_dump(mode="json"),
        },
    )
    return config


def _explicit_fields(override: BucketOverride) -> Dict[str, Any]:
    """Return only the fields the caller set, recursively."""
    if not isinstance(override, BucketConfig):
        if not isinstance(override, Mapping):
            raise ConfigurationError(
                f"Bucket configuration must be a mapping, got {type(override).__name__}"
            )
        try:
            override = BucketConfig.model_validate(dict(override))
        except pydantic.ValidationError as e:
            raise ConfigurationError(f"Invalid bucket configuration: {e}") from e

    return override.model_dump(exclude_unset=True, exclude={"retention"})


def _deep_update(target: Dict[str, Any], updates: Dict[str, Any]) -> None:
    for key, value in updates.items():
        if isinstance(value, dict) and isinstance(target.get(key), dict):
            _deep_update(target[key], value)
        else:
            target[key] = value


def _check_tiering(tiering: TieringPolicy) -> None:
    archive = tiering.archive_access_tier_days
    deep_archive = tiering.deep_archive_access_tier_days

    if deep_archive < archive:
        raise ConfigurationError(
            f"Deep archive tier ({deep_archive} days) must not precede "
            f"archive tier ({archive} days)"
        )

    if tiering.enabled and (
        archive < MIN_ARCHIVE_ACCESS_TIER_DAYS or deep_archive < MIN_DEEP_ARCHIVE_ACCESS_TIER_DAYS
    ):
        log_event(
            "tiering_below_service_minimum",
            {
                "archive_access_tier_days": archive,
                "deep_archive_access_tier_days": deep_archive,
                "minimum_archive_days": MIN_ARCHIVE_ACCESS_TIER_DAYS,
                "minimum_deep_archive_days": MIN_DEEP_ARCHIVE_ACCESS_TIER_DAYS,
            },
            level="WARNING",
        )
