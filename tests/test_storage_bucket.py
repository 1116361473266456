"""Tests for the StorageBucket construct."""

import logging

from aws_cdk.assertions import Match, Template

from storage_bucket.constructs.storage_bucket import StorageBucket
from storage_bucket.models import BucketConfig, TieringPolicy
from storage_bucket.presets import build_bucket_config
from tests.helpers import logged_events, policy_statements


def synth(stack, config):
    StorageBucket(stack, "StorageBucket", config=config)
    return Template.from_stack(stack)


class TestStorageBucket:
    """Test suite for StorageBucket."""

    def test_bucket_created_with_intelligent_tiering(self, stack):
        """Test the media preset renders versioning, blocking and tiering."""
        template = synth(stack, build_bucket_config("media", environment="dev"))

        template.resource_count_is("AWS::S3::Bucket", 1)
        template.has_resource_properties(
            "AWS::S3::Bucket",
            {
                "VersioningConfiguration": {"Status": "Enabled"},
                "PublicAccessBlockConfiguration": {
                    "BlockPublicAcls": True,
                    "BlockPublicPolicy": True,
                    "IgnorePublicAcls": True,
                    "RestrictPublicBuckets": True,
                },
                "IntelligentTieringConfigurations": [
                    {
                        "Id": "archive-infrequent-access",
                        "Status": "Enabled",
                        "Tierings": [
                            {"AccessTier": "ARCHIVE_ACCESS", "Days": 90},
                            {"AccessTier": "DEEP_ARCHIVE_ACCESS", "Days": 180},
                        ],
                    }
                ],
            },
        )

    def test_lifecycle_rule(self, stack):
        """Test the lifecycle rule uses the preset thresholds."""
        template = synth(stack, build_bucket_config("document", environment="dev"))

        template.has_resource_properties(
            "AWS::S3::Bucket",
            {
                "LifecycleConfiguration": {
                    "Rules": [
                        {
                            "Status": "Enabled",
                            "Transitions": [
                                {"StorageClass": "INTELLIGENT_TIERING", "TransitionInDays": 15}
                            ],
                            "NoncurrentVersionExpiration": {"NoncurrentDays": 60},
                        }
                    ]
                }
            },
        )

    def test_s3_managed_encryption(self, stack):
        """Test the bucket uses S3-managed keys."""
        template = synth(stack, build_bucket_config("media", environment="dev"))

        template.has_resource_properties(
            "AWS::S3::Bucket",
            {
                "BucketEncryption": {
                    "ServerSideEncryptionConfiguration": [
                        {"ServerSideEncryptionByDefault": {"SSEAlgorithm": "AES256"}}
                    ]
                }
            },
        )

    def test_encryption_cannot_be_disabled(self, stack, caplog):
        """Test that encrypted=False still yields an encrypted bucket."""
        config = build_bucket_config(
            "custom", override=BucketConfig(encrypted=False), environment="dev"
        )

        template = synth(stack, config)

        template.has_resource_properties(
            "AWS::S3::Bucket",
            {
                "BucketEncryption": {
                    "ServerSideEncryptionConfiguration": [
                        {"ServerSideEncryptionByDefault": {"SSEAlgorithm": "AES256"}}
                    ]
                },
                "PublicAccessBlockConfiguration": {
                    "BlockPublicAcls": True,
                    "BlockPublicPolicy": True,
                    "IgnorePublicAcls": True,
                    "RestrictPublicBuckets": True,
                },
            },
        )
        warnings = logged_events(caplog, logging.WARNING)
        assert any(w["eventType"] == "encryption_override_ignored" for w in warnings)

    def test_ssl_enforced(self, stack):
        """Test that the bucket policy denies insecure transport."""
        template = synth(stack, build_bucket_config("log", environment="dev"))

        statements = policy_statements(template)
        assert any(
            s["Effect"] == "Deny"
            and s.get("Condition") == {"Bool": {"aws:SecureTransport": "false"}}
            for s in statements
        )

    def test_unversioned_log_bucket(self, stack):
        """Test the log preset leaves versioning off."""
        template = synth(stack, build_bucket_config("log", environment="dev"))

        template.has_resource_properties(
            "AWS::S3::Bucket",
            {
                "VersioningConfiguration": Match.absent(),
                "IntelligentTieringConfigurations": [
                    {
                        "Id": "archive-infrequent-access",
                        "Status": "Enabled",
                        "Tierings": [
                            {"AccessTier": "ARCHIVE_ACCESS", "Days": 30},
                            {"AccessTier": "DEEP_ARCHIVE_ACCESS", "Days": 90},
                        ],
                    }
                ],
            },
        )

    def test_tiering_disabled(self, stack):
        """Test that disabled tiering omits the tiering configuration."""
        config = build_bucket_config(
            "media",
            override=BucketConfig(intelligent_tiering=TieringPolicy(enabled=False)),
            environment="dev",
        )

        template = synth(stack, config)

        template.has_resource_properties(
            "AWS::S3::Bucket", {"IntelligentTieringConfigurations": Match.absent()}
        )

    def test_retained_in_production(self, stack):
        """Test production buckets survive stack deletion."""
        template = synth(stack, build_bucket_config("media", environment="prod"))

        template.has_resource(
            "AWS::S3::Bucket",
            {"DeletionPolicy": "Retain", "UpdateReplacePolicy": "Retain"},
        )
        template.resource_count_is("Custom::S3AutoDeleteObjects", 0)

    def test_destroyed_outside_production(self, stack):
        """Test non-production buckets are emptied and deleted with the stack."""
        template = synth(stack, build_bucket_config("media", environment="dev"))

        template.has_resource(
            "AWS::S3::Bucket",
            {"DeletionPolicy": "Delete", "UpdateReplacePolicy": "Delete"},
        )
        template.resource_count_is("Custom::S3AutoDeleteObjects", 1)

    def test_unresolved_retention_defaults_to_retain(self, stack):
        """Test a config built without retention keeps the bucket."""
        template = synth(stack, BucketConfig())

        template.has_resource("AWS::S3::Bucket", {"DeletionPolicy": "Retain"})

    def test_bucket_name(self, stack):
        """Test an explicit bucket name is rendered."""
        config = build_bucket_config("media", name="media-storage-dev-test", environment="dev")

        template = synth(stack, config)

        template.has_resource_properties("AWS::S3::Bucket", {"BucketName": "media-storage-dev-test"})

    def test_exposes_config_and_algorithm(self, stack):
        """Test the construct exposes what the policy builder needs."""
        config = build_bucket_config("media", environment="dev")

        storage_bucket = StorageBucket(stack, "StorageBucket", config=config)

        assert storage_bucket.config is config
        assert storage_bucket.encryption_algorithm == "AES256"
        assert storage_bucket.bucket is not None
