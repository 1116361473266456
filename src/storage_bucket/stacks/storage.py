"""CDK stack for a tiered storage bucket."""

from typing import List, Optional, Sequence, Union

import aws_cdk as cdk
from constructs import Construct

from ..constants import BUCKET_ARN_EXPORT_SUFFIX, BUCKET_NAME_EXPORT_SUFFIX, BucketCategory
from ..constructs.bucket_policy import BucketPolicy, GrantLike
from ..constructs.storage_bucket import StorageBucket
from ..models import StackOutput
from ..observability import ObservabilityContext
from ..presets import BucketOverride, build_bucket_config, parse_category


class StorageBucketStack(cdk.Stack):
    """Stack holding one storage bucket, its policy and two exports."""

    def __init__(
        self,
        scope: Construct,
        id: str,
        *,
        bucket_type: Union[BucketCategory, str] = BucketCategory.MEDIA,
        environment_name: Optional[str] = None,
        bucket_name: Optional[str] = None,
        bucket_config: Optional[BucketOverride] = None,
        grants: Sequence[GrantLike] = (),
        **kwargs,
    ) -> None:
        """Initialize storage bucket stack.

        Args:
            scope: CDK app or parent construct
            id: Stack id
            bucket_type: Preset category, or ``custom`` with ``bucket_config``
            environment_name: Deployment environment; production-like values retain the bucket
            bucket_name: Explicit bucket name, wins over ``bucket_config``
            bucket_config: Overrides merged onto the preset
            grants: Read/write grants added to the bucket policy
            **kwargs: Passed to ``cdk.Stack``

        Raises:
            ConfigurationError: ``custom`` without ``bucket_config``, or a bad override
            ValidationError: A grant with a malformed principal
        """
        super().__init__(scope, id, **kwargs)

        category = parse_category(bucket_type)

        with ObservabilityContext(
            "stack_assembly",
            {"stack_name": self.stack_name, "bucket_type": category.value},
        ):
            config = build_bucket_config(
                category,
                override=bucket_config,
                name=bucket_name,
                environment=environment_name,
            )

            self.storage_bucket = StorageBucket(self, "StorageBucket", config=config)

            self.bucket_policy = BucketPolicy(
                self,
                "StorageBucketPolicy",
                bucket=self.storage_bucket.bucket,
                grants=grants,
                encryption_algorithm=self.storage_bucket.encryption_algorithm,
            )

            self.outputs = self._add_outputs(category)

    def _add_outputs(self, category: BucketCategory) -> List[StackOutput]:
        bucket = self.storage_bucket.bucket
        outputs = [
            StackOutput(
                key="StorageBucketName",
                value=bucket.bucket_name,
                export_name=f"{self.stack_name}{BUCKET_NAME_EXPORT_SUFFIX}",
                description=f"Name of the {category.value} storage bucket",
            ),
            StackOutput(
                key="StorageBucketArn",
                value=bucket.bucket_arn,
                export_name=f"{self.stack_name}{BUCKET_ARN_EXPORT_SUFFIX}",
                description=f"ARN of the {category.value} storage bucket",
            ),
        ]

        for output in outputs:
            cdk.CfnOutput(
                self,
                output.key,
                value=output.value,
                description=output.description,
                export_name=output.export_name,
            )

        return outputs
