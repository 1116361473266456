"""Exceptions raised while assembling a storage bucket stack."""


class StorageBucketError(Exception):
    """Base class for construction errors; aborts synthesis."""


class ConfigurationError(StorageBucketError):
    """Bucket configuration is missing, malformed or inconsistent."""


class ValidationError(StorageBucketError):
    """An access grant has a malformed principal or mode."""
