"""Helpers for driving the cdk CLI from the deploy script."""

import subprocess
from pathlib import Path
from typing import Dict, List, Mapping, Optional

import click

# Tool name -> how to install it
REQUIRED_TOOLS = {
    "aws": "pip install awscli",
    "cdk": "npm install -g aws-cdk",
}


def missing_tools(tools: Mapping[str, str] = REQUIRED_TOOLS) -> List[str]:
    """Return the tools that are not on PATH."""
    return [
        tool
        for tool in tools
        if subprocess.run(["which", tool], capture_output=True, text=True).returncode != 0
    ]


def report_missing_tools(missing: List[str], tools: Mapping[str, str] = REQUIRED_TOOLS) -> None:
    click.secho(f"✗ Missing required tools: {', '.join(missing)}", fg="red")
    click.echo("Install via:")
    for tool in missing:
        click.echo(f"  - {tool}: {tools[tool]}")


def context_args(context: Dict[str, Optional[str]]) -> List[str]:
    """Render ``--context key=value`` pairs, skipping unset values."""
    args = []
    for key, value in context.items():
        if value:
            args.extend(["--context", f"{key}={value}"])
    return args


def run_cdk(cmd: List[str], cwd: Path, description: str) -> bool:
    """Run a cdk command in the project root and report the outcome.

    Output streams straight to the terminal so cdk's own progress and
    approval prompts stay visible.

    Returns:
        True if the command exited with status 0
    """
    click.echo(description)
    click.echo(click.style(f"   Command: {' '.join(cmd)}", dim=True))

    result = subprocess.run(cmd, cwd=cwd, text=True)

    if result.returncode == 0:
        click.secho("   ✓ cdk finished", fg="green")
        return True

    click.secho(f"   ✗ cdk exited with status {result.returncode}", fg="red")
    return False
