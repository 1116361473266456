"""CDK construct for an S3 bucket with intelligent tiering."""

import aws_cdk as cdk
from aws_cdk import aws_s3 as s3
from constructs import Construct

from ..constants import INTELLIGENT_TIERING_CONFIG_NAME, SSE_ALGORITHM, RetentionDisposition
from ..models import BucketConfig
from ..observability import log_event
from ..presets import to_removal_policy


class StorageBucket(Construct):
    """Private, encrypted S3 bucket built from a resolved BucketConfig.

    Public access blocking, S3-managed encryption and SSL-only access are
    always applied and cannot be switched off through the config.
    """

    def __init__(self, scope: Construct, id: str, *, config: BucketConfig) -> None:
        """Initialize storage bucket.

        Args:
            scope: Parent construct
            id: Construct id
            config: Resolved configuration (see ``build_bucket_config``)
        """
        super().__init__(scope, id)

        self.config = config
        self.encryption_algorithm = SSE_ALGORITHM

        # Unresolved configs keep the bucket on teardown
        retention = config.retention or RetentionDisposition.RETAIN
        removal_policy = to_removal_policy(retention)

        if not config.encrypted:
            log_event(
                "encryption_override_ignored",
                {"bucket_name": config.bucket_name},
                level="WARNING",
            )

        self.bucket = s3.Bucket(
            self,
            "Bucket",
            bucket_name=config.bucket_name,
            removal_policy=removal_policy,
            auto_delete_objects=retention == RetentionDisposition.DESTROY,
            encryption=s3.BucketEncryption.S3_MANAGED,
            block_public_access=s3.BlockPublicAccess.BLOCK_ALL,
            enforce_ssl=True,
            versioned=config.versioned,
            intelligent_tiering_configurations=self._tiering_configurations(),
            lifecycle_rules=[self._lifecycle_rule()],
        )

    def _tiering_configurations(self):
        tiering = self.config.intelligent_tiering
        if not tiering.enabled:
            return None

        return [
            s3.IntelligentTieringConfiguration(
                name=INTELLIGENT_TIERING_CONFIG_NAME,
                archive_access_tier_time=cdk.Duration.days(tiering.archive_access_tier_days),
                deep_archive_access_tier_time=cdk.Duration.days(
                    tiering.deep_archive_access_tier_days
                ),
            )
        ]

    def _lifecycle_rule(self) -> s3.LifecycleRule:
        lifecycle = self.config.lifecycle
        return s3.LifecycleRule(
            transitions=[
                s3.Transition(
                    storage_class=s3.StorageClass.INTELLIGENT_TIERING,
                    transition_after=cdk.Duration.days(
                        lifecycle.transition_to_intelligent_tiering_days
                    ),
                )
            ],
            noncurrent_version_expiration=cdk.Duration.days(
                lifecycle.noncurrent_version_expiration_days
            ),
        )
