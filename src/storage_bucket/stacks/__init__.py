"""CDK stacks."""

from .storage import StorageBucketStack

__all__ = ["StorageBucketStack"]
