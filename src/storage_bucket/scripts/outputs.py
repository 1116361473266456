"""
Stack Outputs Script

Shows the bucket name and ARN exported by a deployed storage bucket stack.

Run with: storage-outputs --stack-name media-storage-bucket-dev
"""

import sys
from typing import Dict, Optional

import click
from botocore.exceptions import ClientError

from ..config import normalize_environment
from ..constants import BUCKET_ARN_EXPORT_SUFFIX, BUCKET_NAME_EXPORT_SUFFIX, DEFAULT_BUCKET_TYPE
from .utils import get_cloudformation_client, get_environment, load_env


def default_stack_name(bucket_type: str, environment: str) -> str:
    """Stack name the CDK app generates when none is given."""
    return f"{bucket_type}-storage-bucket-{normalize_environment(environment)}"


def get_bucket_outputs(stack_name: str, client=None) -> Dict[str, Optional[str]]:
    """
    Read the bucket exports of a deployed stack.

    Args:
        stack_name: CloudFormation stack name
        client: CloudFormation client (created from the environment if None)

    Returns:
        Dict with ``bucket_name`` and ``bucket_arn`` (None when not exported)

    Raises:
        ClientError: If the stack cannot be described
    """
    cfn = client or get_cloudformation_client()
    response = cfn.describe_stacks(StackName=stack_name)

    result: Dict[str, Optional[str]] = {"bucket_name": None, "bucket_arn": None}
    for stack in response.get("Stacks", [])[:1]:
        for output in stack.get("Outputs", []):
            export_name = output.get("ExportName", "")
            if export_name == f"{stack_name}{BUCKET_NAME_EXPORT_SUFFIX}":
                result["bucket_name"] = output.get("OutputValue")
            elif export_name == f"{stack_name}{BUCKET_ARN_EXPORT_SUFFIX}":
                result["bucket_arn"] = output.get("OutputValue")

    return result


@click.command()
@click.option("--stack-name", default=None, help="Stack name (derived from type/environment if unset)")
@click.option("--bucket-type", default=DEFAULT_BUCKET_TYPE, help="Bucket preset used at deploy time")
@click.option("--environment", default=None, help="Deployment environment (defaults to $ENVIRONMENT or dev)")
def cli(stack_name: Optional[str], bucket_type: str, environment: Optional[str]):
    """Display the bucket exports of a deployed storage bucket stack."""
    load_env()

    environment = environment or get_environment()
    stack_name = stack_name or default_stack_name(bucket_type, environment)

    try:
        outputs = get_bucket_outputs(stack_name)
    except ClientError as e:
        click.secho(f"✗ Could not describe stack {stack_name}: {e}", fg="red")
        sys.exit(1)

    click.secho(f"📦 {stack_name}", fg="cyan", bold=True)
    click.echo(f"   Bucket name: {outputs['bucket_name'] or '(not exported)'}")
    click.echo(f"   Bucket ARN:  {outputs['bucket_arn'] or '(not exported)'}")


if __name__ == "__main__":
    cli()
