"""S3 backend configuration entities."""
from pydantic import BaseModel, ConfigDict, Field


def _deprecated(description: str):
    return Field(default=None, description=description, json_schema_extra={"deprecated": True})


class AssumeRoleConfig(BaseModel):
    """Nested `assume_role` block."""

    model_config = ConfigDict(extra="forbid")

    role_arn: str = Field(description="The role to be assumed.")
    duration: str | None = Field(
        default=None, description="Seconds to restrict the assume role session duration."
    )
    external_id: str | None = Field(
        default=None, description="The external ID to use when assuming the role"
    )
    policy: str | None = Field(
        default=None,
        description="IAM Policy JSON describing further restricting permissions for the IAM Role being assumed.",
    )
    policy_arns: list[str] | None = Field(
        default=None,
        description="Amazon Resource Names (ARNs) of IAM Policies describing further restricting permissions for the IAM Role being assumed.",
    )
    session_name: str | None = Field(
        default=None, description="The session name to use when assuming the role."
    )
    tags: dict[str, str] | None = Field(default=None, description="Assume role session tags.")
    transitive_tag_keys: list[str] | None = Field(
        default=None, description="Assume role session tag keys to pass to any subsequent sessions."
    )


class BackendConfig(BaseModel):
    """
    Raw S3 backend configuration as written by the user.
    
    Unset attributes stay None so validation can tell "not set" apart from
    "set to an empty value".
    """

    model_config = ConfigDict(extra="forbid")

    bucket: str | None = Field(default=None, description="The name of the S3 bucket", json_schema_extra={"required": True})
    key: str | None = Field(default=None, description="The path to the state file inside the bucket", json_schema_extra={"required": True})
    region: str | None = Field(default=None, description="AWS region of the S3 Bucket and DynamoDB Table (if used).")

    dynamodb_endpoint: str | None = Field(default=None, description="A custom endpoint for the DynamoDB API")
    endpoint: str | None = Field(default=None, description="A custom endpoint for the S3 API")
    iam_endpoint: str | None = Field(default=None, description="A custom endpoint for the IAM API")
    sts_endpoint: str | None = Field(default=None, description="A custom endpoint for the STS API")

    encrypt: bool | None = Field(default=None, description="Whether to enable server side encryption of the state file")
    acl: str | None = Field(default=None, description="Canned ACL to be applied to the state file")
    access_key: str | None = Field(default=None, description="AWS access key", repr=False)
    secret_key: str | None = Field(default=None, description="AWS secret key", repr=False)
    kms_key_id: str | None = Field(default=None, description="The ARN of a KMS Key to use for encrypting the state")
    dynamodb_table: str | None = Field(default=None, description="DynamoDB table for state locking and consistency")
    profile: str | None = Field(default=None, description="AWS profile name")
    shared_credentials_file: str | None = _deprecated("Path to a shared credentials file")
    shared_credentials_files: list[str] | None = Field(default=None, description="Paths to a shared credentials files")
    shared_config_files: list[str] | None = Field(default=None, description="Paths to shared config files")
    token: str | None = Field(default=None, description="MFA token", repr=False)
    skip_credentials_validation: bool | None = Field(default=None, description="Skip the credentials validation via STS API.")
    skip_metadata_api_check: bool | None = Field(default=None, description="Skip the AWS Metadata API check.")
    skip_region_validation: bool | None = Field(default=None, description="Skip static validation of region name.")
    sse_customer_key: str | None = Field(
        default=None,
        description="The base64-encoded encryption key to use for server-side encryption with customer-provided keys (SSE-C).",
        repr=False,
        json_schema_extra={"sensitive": True},
    )

    role_arn: str | None = _deprecated("The role to be assumed")
    session_name: str | None = _deprecated("The session name to use when assuming the role.")
    external_id: str | None = _deprecated("The external ID to use when assuming the role")
    assume_role_duration_seconds: int | None = _deprecated("Seconds to restrict the assume role session duration.")
    assume_role_policy: str | None = _deprecated(
        "IAM Policy JSON describing further restricting permissions for the IAM Role being assumed."
    )
    assume_role_policy_arns: list[str] | None = _deprecated(
        "Amazon Resource Names (ARNs) of IAM Policies describing further restricting permissions for the IAM Role being assumed."
    )
    assume_role_tags: dict[str, str] | None = _deprecated("Assume role session tags.")
    assume_role_transitive_tag_keys: list[str] | None = _deprecated(
        "Assume role session tag keys to pass to any subsequent sessions."
    )

    workspace_key_prefix: str | None = Field(
        default=None, description="The prefix applied to the non-default state path inside the bucket."
    )
    force_path_style: bool | None = Field(default=None, description="Force s3 to use path style api.")
    max_retries: int | None = Field(
        default=None, description="The maximum number of times an AWS API request is retried on retryable failure."
    )
    use_legacy_workflow: bool | None = Field(
        default=None,
        description="Use the legacy authentication workflow, preferring environment variables over backend configuration.",
    )
    assume_role: AssumeRoleConfig | None = None
    forbidden_account_ids: list[str] | None = Field(default=None, description="List of forbidden AWS account IDs.")
    allowed_account_ids: list[str] | None = Field(default=None, description="List of allowed AWS account IDs.")

    def is_set(self, name: str) -> bool:
        """True if attribute `name` was given a (non-null) value."""
        return getattr(self, name) is not None
