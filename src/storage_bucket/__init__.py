"""Storage Bucket - CDK app for S3 buckets with intelligent tiering.

This library provides:
- Named presets for media, document and log buckets
- Pydantic models for bucket, tiering and lifecycle settings
- Constructs for the bucket and its hardened bucket policy
- The storage bucket stack and its CDK app entry point
- Structured logging and observability utilities
"""

from .constants import AccessMode, BucketCategory, RetentionDisposition
from .errors import ConfigurationError, StorageBucketError, ValidationError
from .models import (
    AccessGrant,
    AppConfig,
    BucketConfig,
    LifecyclePolicy,
    StackOutput,
    TieringPolicy,
)
from .observability import ObservabilityContext, log_error, log_event, log_metrics, setup_logging
from .presets import (
    DOCUMENT_STORAGE_CONFIG,
    LOG_STORAGE_CONFIG,
    MEDIA_STORAGE_CONFIG,
    build_bucket_config,
    get_preset,
    resolve_retention,
)

__version__ = "0.1.0"

__all__ = [
    # Models
    "AccessGrant",
    "AppConfig",
    "BucketConfig",
    "LifecyclePolicy",
    "StackOutput",
    "TieringPolicy",
    # Constants
    "AccessMode",
    "BucketCategory",
    "RetentionDisposition",
    # Errors
    "StorageBucketError",
    "ConfigurationError",
    "ValidationError",
    # Presets
    "MEDIA_STORAGE_CONFIG",
    "DOCUMENT_STORAGE_CONFIG",
    "LOG_STORAGE_CONFIG",
    "build_bucket_config",
    "get_preset",
    "resolve_retention",
    # Observability
    "setup_logging",
    "log_event",
    "log_error",
    "log_metrics",
    "ObservabilityContext",
]
