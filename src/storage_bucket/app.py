"""AWS CDK application for a tiered storage bucket."""

import os
import sys
from typing import Optional

import aws_cdk as cdk

from .config import get_app_config, load_env
from .errors import StorageBucketError
from .models import AppConfig
from .observability import log_error, log_event, setup_logging
from .stacks.storage import StorageBucketStack


def create_stack(app: cdk.App, config: AppConfig) -> StorageBucketStack:
    """Instantiate the storage bucket stack described by ``config``."""
    return StorageBucketStack(
        app,
        config.stack_name,
        bucket_type=config.bucket_type,
        environment_name=config.environment,
        bucket_name=config.bucket_name,
        bucket_config=config.bucket_config,
        grants=config.grants,
        description=config.description,
        env=cdk.Environment(
            account=os.getenv("CDK_DEFAULT_ACCOUNT"),
            region=os.getenv("CDK_DEFAULT_REGION"),
        ),
    )


def main(app: Optional[cdk.App] = None):
    """Read context, instantiate the stack and synthesize.

    Args:
        app: CDK app to populate. A new app reading the CLI context is created if None.
    """
    load_env()
    setup_logging()

    if app is None:
        app = cdk.App()

    try:
        config = get_app_config(app)
        create_stack(app, config)
    except StorageBucketError as e:
        log_error("synthesis_failed", e)
        sys.exit(1)

    log_event(
        "synthesis_started",
        {"stack_name": config.stack_name, "environment": config.environment},
    )
    app.synth()


if __name__ == "__main__":
    main()
