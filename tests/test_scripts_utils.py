"""Tests for deployment script helpers."""

import subprocess

from click.testing import CliRunner

from storage_bucket.scripts import _deploy_utils, outputs
from storage_bucket.scripts._deploy_utils import (
    context_args,
    missing_tools,
    report_missing_tools,
    run_cdk,
)
from storage_bucket.scripts.deploy import StorageBucketDeployer
from storage_bucket.scripts.deploy import main as deploy_main
from storage_bucket.scripts.outputs import cli as outputs_cli
from storage_bucket.scripts.outputs import default_stack_name, get_bucket_outputs
from storage_bucket.scripts.utils import find_project_root, get_aws_region, get_environment


class StubCloudFormation:
    """Minimal stand-in for a CloudFormation client."""

    def __init__(self, outputs):
        self.outputs = outputs
        self.calls = []

    def describe_stacks(self, StackName):
        self.calls.append(StackName)
        return {"Stacks": [{"StackName": StackName, "Outputs": self.outputs}]}


class TestScriptUtils:
    """Test suite for script utilities."""

    def test_get_aws_region_default(self, monkeypatch):
        """Test getting default AWS region."""
        monkeypatch.delenv("AWS_REGION", raising=False)

        assert get_aws_region() == "us-east-1"

    def test_get_aws_region_from_env(self, monkeypatch):
        """Test getting AWS region from environment."""
        monkeypatch.setenv("AWS_REGION", "eu-west-1")

        assert get_aws_region() == "eu-west-1"

    def test_get_environment_default(self, monkeypatch):
        """Test getting default environment."""
        monkeypatch.delenv("ENVIRONMENT", raising=False)

        assert get_environment() == "dev"

    def test_get_environment_from_env(self, monkeypatch):
        """Test getting environment from environment variable."""
        monkeypatch.setenv("ENVIRONMENT", "production")

        assert get_environment() == "production"

    def test_find_project_root(self, tmp_path):
        """Test the project root is the nearest directory with cdk.json."""
        (tmp_path / "cdk.json").write_text("{}")
        nested = tmp_path / "src" / "pkg"
        nested.mkdir(parents=True)

        assert find_project_root(nested) == tmp_path.resolve()

    def test_context_args_skip_unset(self):
        """Test unset context values are not passed to cdk."""
        args = context_args({"bucketType": "log", "bucketName": None, "environment": "dev"})

        assert args == ["--context", "bucketType=log", "--context", "environment=dev"]


class TestDeploy:
    """Test suite for the deploy script."""

    def test_build_commands(self, tmp_path, monkeypatch):
        """Test synth and deploy command lines."""
        (tmp_path / "cdk.json").write_text("{}")
        monkeypatch.chdir(tmp_path)

        deployer = StorageBucketDeployer(
            context={"bucketType": "media"}, region="us-west-2", require_approval=False
        )

        assert deployer.build_command("synth") == [
            "cdk", "synth", "--region", "us-west-2", "--context", "bucketType=media",
        ]
        assert deployer.build_command("deploy")[-1] == "--require-approval=never"

    def test_custom_requires_bucket_config(self):
        """Test the CLI rejects custom buckets without overrides."""
        result = CliRunner().invoke(deploy_main, ["--bucket-type", "custom", "--synth-only"])

        assert result.exit_code == 2
        assert "--bucket-config" in result.output


class TestOutputs:
    """Test suite for the outputs script."""

    def test_default_stack_name(self):
        """Test the derived stack name matches the app's default."""
        assert default_stack_name("media", "Production") == "media-storage-bucket-prod"
        assert default_stack_name("log", "dev") == "log-storage-bucket-dev"

    def test_get_bucket_outputs(self):
        """Test exports are matched by their suffixes."""
        client = StubCloudFormation(
            [
                {"OutputKey": "StorageBucketName", "OutputValue": "b", "ExportName": "s-BucketName"},
                {"OutputKey": "StorageBucketArn", "OutputValue": "arn:aws:s3:::b", "ExportName": "s-BucketArn"},
                {"OutputKey": "Other", "OutputValue": "x"},
            ]
        )

        outputs = get_bucket_outputs("s", client=client)

        assert outputs == {"bucket_name": "b", "bucket_arn": "arn:aws:s3:::b"}
        assert client.calls == ["s"]

    def test_missing_exports(self):
        """Test missing exports come back as None."""
        outputs = get_bucket_outputs("s", client=StubCloudFormation([]))

        assert outputs == {"bucket_name": None, "bucket_arn": None}

    def test_cli_environment_from_env(self, tmp_path, monkeypatch):
        """Test the stack name is derived from $ENVIRONMENT when no option is given."""
        monkeypatch.chdir(tmp_path)
        monkeypatch.setenv("ENVIRONMENT", "production")
        client = StubCloudFormation(
            [
                {
                    "OutputKey": "StorageBucketName",
                    "OutputValue": "log-bucket",
                    "ExportName": "log-storage-bucket-prod-BucketName",
                }
            ]
        )
        monkeypatch.setattr(outputs, "get_cloudformation_client", lambda: client)

        result = CliRunner().invoke(outputs_cli, ["--bucket-type", "log"])

        assert result.exit_code == 0
        assert client.calls == ["log-storage-bucket-prod"]
        assert "log-bucket" in result.output
        assert "(not exported)" in result.output

    def test_cli_environment_option_wins(self, tmp_path, monkeypatch):
        """Test --environment overrides $ENVIRONMENT."""
        monkeypatch.chdir(tmp_path)
        monkeypatch.setenv("ENVIRONMENT", "production")
        client = StubCloudFormation([])
        monkeypatch.setattr(outputs, "get_cloudformation_client", lambda: client)

        result = CliRunner().invoke(outputs_cli, ["--environment", "qa"])

        assert result.exit_code == 0
        assert client.calls == ["media-storage-bucket-qa"]


class TestDeployUtils:
    """Test suite for cdk CLI helpers."""

    def test_missing_tools(self, monkeypatch):
        """Test only tools that `which` cannot find are reported."""
        calls = []

        def fake_run(cmd, **kwargs):
            calls.append(cmd)
            return subprocess.CompletedProcess(cmd, 0 if cmd[1] == "aws" else 1)

        monkeypatch.setattr(_deploy_utils.subprocess, "run", fake_run)

        assert missing_tools() == ["cdk"]
        assert calls == [["which", "aws"], ["which", "cdk"]]

    def test_report_missing_tools(self, capsys):
        """Test install hints are shown for missing tools only."""
        report_missing_tools(["cdk"])

        out = capsys.readouterr().out
        assert "Missing required tools: cdk" in out
        assert "npm install -g aws-cdk" in out
        assert "awscli" not in out

    def test_run_cdk(self, tmp_path, monkeypatch):
        """Test run_cdk runs in the given directory and reports the exit status."""
        seen = {}

        def fake_run(cmd, cwd=None, **kwargs):
            seen["cmd"], seen["cwd"] = cmd, cwd
            return subprocess.CompletedProcess(cmd, 0 if cmd[1] == "synth" else 1)

        monkeypatch.setattr(_deploy_utils.subprocess, "run", fake_run)

        assert run_cdk(["cdk", "synth"], cwd=tmp_path, description="Synth") is True
        assert seen == {"cmd": ["cdk", "synth"], "cwd": tmp_path}
        assert run_cdk(["cdk", "deploy"], cwd=tmp_path, description="Deploy") is False
