"""CDK synth/deploy script for the storage bucket stack."""

import os
import sys
from typing import Dict, Optional

import click
from InquirerPy import inquirer

from ..config import load_env, normalize_environment
from ..constants import CONTEXT_KEYS, DEFAULT_BUCKET_TYPE, BucketCategory
from ._deploy_utils import context_args, missing_tools, report_missing_tools, run_cdk
from .utils import find_project_root

load_env()


class StorageBucketDeployer:
    """Handles CDK synthesis and deployment of the storage bucket stack."""

    def __init__(
        self,
        context: Dict[str, Optional[str]],
        region: str = None,
        require_approval: bool = True,
    ):
        """Initialize deployer.

        Args:
            context: CDK context values keyed by context key
            region: AWS region for deployment
            require_approval: Whether to require approval before deployment
        """
        self.context = context
        self.region = region or os.getenv("AWS_REGION", "us-east-1")
        self.require_approval = require_approval
        self.project_root = find_project_root()

    def check_prerequisites(self) -> bool:
        """Check that the aws and cdk CLIs are installed."""
        missing = missing_tools()
        if missing:
            report_missing_tools(missing)
            return False
        return True

    def build_command(self, action: str) -> list:
        """Build the ``cdk synth``/``cdk deploy`` command line."""
        cmd = ["cdk", action, "--region", self.region, *context_args(self.context)]

        if action == "deploy" and not self.require_approval:
            cmd.append("--require-approval=never")

        return cmd

    def synth_stack(self) -> bool:
        """Synthesize CDK stack to CloudFormation template."""
        return run_cdk(
            self.build_command("synth"),
            cwd=self.project_root,
            description="🔨 Synthesizing CloudFormation template...",
        )

    def deploy_stack(self) -> bool:
        """Deploy CDK stack to AWS."""
        return run_cdk(
            self.build_command("deploy"),
            cwd=self.project_root,
            description="🚀 Deploying storage bucket to AWS...",
        )

    def run(self, synth_only: bool = False) -> bool:
        """Execute deployment or synthesis.

        Args:
            synth_only: If True, only synthesize CloudFormation template
        """
        title = "CDK Synthesis" if synth_only else "CDK Deployment"
        click.secho("╔════════════════════════════════════════╗", fg="cyan")
        click.secho(f"║  Storage Bucket - {title:<20} ║", fg="cyan")
        click.secho("╚════════════════════════════════════════╝", fg="cyan")
        click.echo()

        click.echo(f"🌍 Region: {self.region}")
        click.echo(f"📁 Project: {self.project_root}")
        click.echo()

        click.echo("1️⃣  Checking prerequisites...")
        if not self.check_prerequisites():
            return False
        click.secho("   ✓ All required tools found", fg="green")
        click.echo()

        click.echo("2️⃣  Stack summary:")
        for key, value in self.context.items():
            if value:
                click.echo(f"   {key}: {value}")
        click.echo("   Resources:")
        click.echo("     - S3 bucket (intelligent tiering, lifecycle rules)")
        click.echo("     - S3 bucket policy (HTTPS only, encrypted uploads)")
        click.echo()

        if not synth_only and self.require_approval:
            confirm = inquirer.confirm(
                message="Proceed with deployment?",
                default=False,
            ).execute()

            if not confirm:
                click.echo("Operation cancelled.")
                return False

        click.echo()
        if synth_only:
            click.echo("3️⃣  Synthesizing...")
            if not self.synth_stack():
                return False
            click.echo()
            click.secho("✨ Synthesis complete!", fg="green")
            click.echo("CloudFormation template generated to: cdk.out/")
        else:
            click.echo("3️⃣  Deploying...")
            if not self.deploy_stack():
                return False
            click.echo()
            click.secho("✨ Deployment complete!", fg="green")
            click.echo("Show bucket exports with: storage-outputs")

        click.echo()
        return True


@click.command()
@click.option(
    "--environment",
    envvar="ENVIRONMENT",
    default="dev",
    help="Deployment environment (labels containing 'prod' retain the bucket)",
)
@click.option(
    "--bucket-type",
    type=click.Choice([c.value for c in BucketCategory]),
    default=DEFAULT_BUCKET_TYPE,
    help="Bucket preset",
)
@click.option("--bucket-name", default=None, help="Explicit bucket name")
@click.option("--stack-name", default=None, help="CloudFormation stack name")
@click.option("--description", default=None, help="Stack description")
@click.option(
    "--bucket-config",
    default=None,
    help="JSON overrides for the preset (required for --bucket-type custom)",
)
@click.option("--read-principals", default=None, help="Comma separated principals with read access")
@click.option("--write-principals", default=None, help="Comma separated principals with write access")
@click.option(
    "--region",
    envvar="AWS_REGION",
    default="us-east-1",
    help="AWS region for deployment",
)
@click.option(
    "--no-approval",
    is_flag=True,
    help="Skip approval confirmation",
)
@click.option(
    "--synth-only",
    is_flag=True,
    help="Only synthesize CloudFormation template, don't deploy",
)
def main(
    environment: str,
    bucket_type: str,
    bucket_name: Optional[str],
    stack_name: Optional[str],
    description: Optional[str],
    bucket_config: Optional[str],
    read_principals: Optional[str],
    write_principals: Optional[str],
    region: str,
    no_approval: bool,
    synth_only: bool,
):
    """Deploy or synthesize the storage bucket stack.

    Make sure you're authenticated to AWS before running deploy.
    """
    if bucket_type == BucketCategory.CUSTOM.value and not bucket_config:
        raise click.UsageError("--bucket-type custom requires --bucket-config")

    context = {
        CONTEXT_KEYS["environment"]: normalize_environment(environment),
        CONTEXT_KEYS["bucket_type"]: bucket_type,
        CONTEXT_KEYS["bucket_name"]: bucket_name,
        CONTEXT_KEYS["stack_name"]: stack_name,
        CONTEXT_KEYS["description"]: description,
        CONTEXT_KEYS["bucket_config"]: bucket_config,
        CONTEXT_KEYS["read_principals"]: read_principals,
        CONTEXT_KEYS["write_principals"]: write_principals,
    }

    deployer = StorageBucketDeployer(
        context=context, region=region, require_approval=not no_approval
    )

    if not deployer.run(synth_only=synth_only):
        sys.exit(1)


if __name__ == "__main__":
    main()
