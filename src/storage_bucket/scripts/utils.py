"""Common utility functions for scripts."""

import os
from functools import lru_cache
from pathlib import Path

import boto3

from ..config import load_env

__all__ = [
    "find_project_root",
    "get_aws_region",
    "get_cloudformation_client",
    "get_environment",
    "load_env",
]


def get_aws_region() -> str:
    """Get AWS region from environment or default."""
    return os.getenv("AWS_REGION", "us-east-1")


def get_environment() -> str:
    """Get deployment environment."""
    return os.getenv("ENVIRONMENT", "dev")


def get_cloudformation_client():
    """Get CloudFormation client."""
    return boto3.client("cloudformation", region_name=get_aws_region())


@lru_cache(maxsize=1)
def find_project_root(start_path: Path | None = None) -> Path:
    """
    Find the project root by walking up the directory tree looking for cdk.json.

    Results are cached since the project root doesn't change during script execution.

    Args:
        start_path: Starting path to search from. Defaults to the current working directory.

    Returns:
        Path to the directory holding cdk.json.

    Raises:
        RuntimeError: If project root cannot be found.
    """
    if start_path is None:
        start_path = Path.cwd()

    current = start_path.resolve()
    while current != current.parent:
        if (current / "cdk.json").exists():
            return current
        current = current.parent

    raise RuntimeError(f"Could not find project root starting from {start_path}")
