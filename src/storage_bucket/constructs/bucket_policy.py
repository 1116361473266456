"""CDK construct applying hardened bucket policy statements."""

import re
from typing import Any, List, Mapping, Sequence, Union

import pydantic
from aws_cdk import aws_iam as iam
from aws_cdk import aws_s3 as s3
from constructs import Construct

from ..constants import ACCESS_MODE_ACTIONS, SSE_ALGORITHM, AccessMode
from ..errors import ValidationError
from ..models import AccessGrant

ACCOUNT_ID_PATTERN = re.compile(r"^\d{12}$")
IAM_ARN_PATTERN = re.compile(r"^arn:aws[a-z-]*:iam::\d{12}:(root|(user|role)/[\w+=,.@/-]+)$")
SERVICE_PATTERN = re.compile(r"^[a-z0-9-]+(\.[a-z0-9-]+)*\.amazonaws\.com(\.cn)?$")

GrantLike = Union[AccessGrant, Mapping[str, Any]]


def resolve_principal(reference: Any) -> iam.IPrincipal:
    """
    Turn a principal reference into an IAM principal.

    Accepts an existing principal, a 12-digit account id, an IAM user/role/root
    ARN, or a service name such as ``lambda.amazonaws.com``.

    Raises:
        ValidationError: If the reference is empty, a wildcard, or unrecognised
    """
    if isinstance(reference, str):
        value = reference.strip()
        if not value:
            raise ValidationError("Principal reference must not be empty")
        if value == "*":
            raise ValidationError("Wildcard principals cannot be granted bucket access")
        if ACCOUNT_ID_PATTERN.match(value):
            return iam.AccountPrincipal(value)
        if IAM_ARN_PATTERN.match(value):
            return iam.ArnPrincipal(value)
        if SERVICE_PATTERN.match(value):
            return iam.ServicePrincipal(value)
        raise ValidationError(f"Unrecognised principal reference: {value!r}")

    if reference is not None and hasattr(reference, "policy_fragment"):
        return reference

    raise ValidationError(f"Not a principal: {type(reference).__name__}")


def build_policy_statements(
    bucket: s3.IBucket,
    grants: Sequence[GrantLike] = (),
    encryption_algorithm: str = SSE_ALGORITHM,
) -> List[iam.PolicyStatement]:
    """
    Build the statements for a bucket's resource policy.

    The two deny statements always come first, followed by one allow
    statement per grant in input order. Duplicate grants are kept.

    Args:
        bucket: Bucket the statements apply to
        grants: Access grants, as AccessGrant models or mappings
        encryption_algorithm: SSE algorithm uploads must request

    Returns:
        List of policy statements

    Raises:
        ValidationError: If a grant has a malformed principal or mode
    """
    objects_arn = bucket.arn_for_objects("*")

    statements = [
        # Deny HTTP requests (enforce HTTPS only)
        iam.PolicyStatement(
            sid="DenyHttpRequests",
            effect=iam.Effect.DENY,
            principals=[iam.AnyPrincipal()],
            actions=["s3:*"],
            resources=[bucket.bucket_arn, objects_arn],
            conditions={"Bool": {"aws:SecureTransport": "false"}},
        ),
        # Deny uploads that don't request the bucket's encryption
        iam.PolicyStatement(
            sid="DenyUnencryptedObjectUploads",
            effect=iam.Effect.DENY,
            principals=[iam.AnyPrincipal()],
            actions=["s3:PutObject"],
            resources=[objects_arn],
            conditions={
                "StringNotEquals": {"s3:x-amz-server-side-encryption": encryption_algorithm}
            },
        ),
    ]

    for index, grant in enumerate(grants):
        grant = _coerce_grant(grant)
        principal = resolve_principal(grant.principal)

        if grant.mode == AccessMode.READ:
            resources = [bucket.bucket_arn, objects_arn]
        else:
            resources = [objects_arn]

        # Indexed sids keep identical grants from being merged at synth
        statements.append(
            iam.PolicyStatement(
                sid=f"Allow{grant.mode.value.capitalize()}Access{index}",
                effect=iam.Effect.ALLOW,
                principals=[principal],
                actions=list(ACCESS_MODE_ACTIONS[grant.mode]),
                resources=resources,
            )
        )

    return statements


def _coerce_grant(grant: GrantLike) -> AccessGrant:
    if isinstance(grant, AccessGrant):
        return grant
    if not isinstance(grant, Mapping):
        raise ValidationError(f"Not an access grant: {type(grant).__name__}")
    try:
        return AccessGrant.model_validate(dict(grant))
    except pydantic.ValidationError as e:
        raise ValidationError(f"Invalid access grant: {e}") from e


class BucketPolicy(Construct):
    """Attaches security statements and access grants to a bucket's policy.

    Statements are added to the bucket's own resource policy, so the stack
    holds a single ``AWS::S3::BucketPolicy`` resource.
    """

    def __init__(
        self,
        scope: Construct,
        id: str,
        *,
        bucket: s3.IBucket,
        grants: Sequence[GrantLike] = (),
        encryption_algorithm: str = SSE_ALGORITHM,
    ) -> None:
        super().__init__(scope, id)

        self.bucket = bucket
        self.statements = build_policy_statements(bucket, grants, encryption_algorithm)

        for statement in self.statements:
            bucket.add_to_resource_policy(statement)

        self.policy = bucket.policy
