"""Constants and enums for storage bucket stacks."""

from enum import Enum


class BucketCategory(str, Enum):
    """Category of bucket; selects which preset applies."""

    MEDIA = "media"
    DOCUMENT = "document"
    LOG = "log"
    CUSTOM = "custom"


class RetentionDisposition(str, Enum):
    """Whether stack teardown keeps or removes the bucket."""

    RETAIN = "retain"
    DESTROY = "destroy"


class AccessMode(str, Enum):
    """Kind of access granted to a principal."""

    READ = "read"
    WRITE = "write"


# Substring marking an environment as production
PRODUCTION_MARKER = "prod"
DEFAULT_ENVIRONMENT = "dev"
DEFAULT_BUCKET_TYPE = BucketCategory.MEDIA.value

# Fallback thresholds (days) when neither preset nor override sets them
DEFAULT_ARCHIVE_ACCESS_TIER_DAYS = 90
DEFAULT_DEEP_ARCHIVE_ACCESS_TIER_DAYS = 180
DEFAULT_TRANSITION_TO_INTELLIGENT_TIERING_DAYS = 30
DEFAULT_NONCURRENT_VERSION_EXPIRATION_DAYS = 90

# S3 rejects archive tiers below these at deploy time
MIN_ARCHIVE_ACCESS_TIER_DAYS = 90
MIN_DEEP_ARCHIVE_ACCESS_TIER_DAYS = 180

INTELLIGENT_TIERING_CONFIG_NAME = "archive-infrequent-access"

# Algorithm reported by S3 for S3-managed keys
SSE_ALGORITHM = "AES256"

# Actions granted per access mode
ACCESS_MODE_ACTIONS = {
    AccessMode.READ: ["s3:GetObject", "s3:ListBucket"],
    AccessMode.WRITE: ["s3:PutObject"],
}

# CloudFormation export suffixes
BUCKET_NAME_EXPORT_SUFFIX = "-BucketName"
BUCKET_ARN_EXPORT_SUFFIX = "-BucketArn"

# CDK context keys
CONTEXT_KEYS = {
    "environment": "environment",
    "bucket_type": "bucketType",
    "bucket_name": "bucketName",
    "stack_name": "stackName",
    "description": "description",
    "bucket_config": "bucketConfig",
    "read_principals": "readPrincipals",
    "write_principals": "writePrincipals",
}
