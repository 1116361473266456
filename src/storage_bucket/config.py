"""Read storage bucket settings from CDK context and .env files."""

import json
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, List, Optional

import aws_cdk as cdk
import pydantic
from dotenv import load_dotenv

from .constants import (
    CONTEXT_KEYS,
    DEFAULT_BUCKET_TYPE,
    DEFAULT_ENVIRONMENT,
    PRODUCTION_MARKER,
    AccessMode,
)
from .errors import ConfigurationError
from .models import AccessGrant, AppConfig, BucketConfig
from .presets import parse_category


def load_env(env_file: Path | str | None = None) -> None:
    """
    Load environment variables from .env files using dotenv.

    Loads in order:
    1. Base .env file (or specified env_file)
    2. .env.local (if it exists) - allows local overrides

    Args:
        env_file: Path to base .env file. If None, looks for .env in current directory.
    """
    if env_file is None:
        env_file = Path(".env")
    else:
        env_file = Path(env_file)

    load_dotenv(env_file, override=False)

    env_local = env_file.parent / f"{env_file.stem}.local{env_file.suffix}"
    if env_local.exists():
        load_dotenv(env_local, override=True)


def normalize_environment(raw: Optional[str]) -> str:
    """Collapse any production-like label to ``prod``."""
    if not raw:
        return DEFAULT_ENVIRONMENT
    return PRODUCTION_MARKER if PRODUCTION_MARKER in raw.lower() else raw


def deployment_timestamp(now: Optional[datetime] = None) -> str:
    """Return a ``YYYYMMDD-HHMMSS`` UTC timestamp for generated bucket names."""
    now = now or datetime.now(timezone.utc)
    return now.strftime("%Y%m%d-%H%M%S")


def get_app_config(app: cdk.App, now: Optional[datetime] = None) -> AppConfig:
    """
    Build the app configuration from CDK context.

    Args:
        app: CDK app whose context is read
        now: Clock override for generated bucket names

    Returns:
        AppConfig for a single stack

    Raises:
        ConfigurationError: Unknown bucket type or malformed bucketConfig
    """

    def context(key: str) -> Any:
        return app.node.try_get_context(CONTEXT_KEYS[key])

    environment = normalize_environment(context("environment"))
    bucket_type = parse_category(context("bucket_type") or DEFAULT_BUCKET_TYPE)

    stack_name = context("stack_name") or f"{bucket_type.value}-storage-bucket-{environment}"

    bucket_config = parse_bucket_config(context("bucket_config"))

    # A name inside bucketConfig is applied when the preset is merged
    bucket_name = context("bucket_name")
    if not bucket_name and not (bucket_config and bucket_config.bucket_name):
        bucket_name = (
            f"{bucket_type.value}-storage-{environment}-{deployment_timestamp(now)}".lower()
        )

    description = context("description") or (
        f"This stack includes S3 bucket for {bucket_type.value} storage with intelligent tiering"
    )

    grants = [
        AccessGrant(principal=principal, mode=AccessMode.READ)
        for principal in parse_principals(context("read_principals"))
    ] + [
        AccessGrant(principal=principal, mode=AccessMode.WRITE)
        for principal in parse_principals(context("write_principals"))
    ]

    return AppConfig(
        environment=environment,
        bucket_type=bucket_type,
        stack_name=stack_name,
        bucket_name=bucket_name,
        description=description,
        bucket_config=bucket_config,
        grants=grants,
    )


def parse_bucket_config(raw: Any) -> Optional[BucketConfig]:
    """Parse the ``bucketConfig`` context value (JSON string or mapping)."""
    if raw is None or raw == "":
        return None

    if isinstance(raw, str):
        try:
            raw = json.loads(raw)
        except json.JSONDecodeError as e:
            raise ConfigurationError(f"bucketConfig is not valid JSON: {e}") from e

    if not isinstance(raw, dict):
        raise ConfigurationError(
            f"bucketConfig must be a JSON object, got {type(raw).__name__}"
        )

    try:
        return BucketConfig.model_validate(raw)
    except pydantic.ValidationError as e:
        raise ConfigurationError(f"Invalid bucketConfig: {e}") from e


def parse_principals(raw: Any) -> List[str]:
    """Split a comma separated string (or list) of principal references."""
    if not raw:
        return []
    if isinstance(raw, str):
        raw = raw.split(",")
    return [str(item).strip() for item in raw if str(item).strip()]
