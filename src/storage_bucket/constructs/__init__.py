"""Reusable constructs for storage buckets."""

from .bucket_policy import BucketPolicy, build_policy_statements, resolve_principal
from .storage_bucket import StorageBucket

__all__ = [
    "BucketPolicy",
    "StorageBucket",
    "build_policy_statements",
    "resolve_principal",
]
