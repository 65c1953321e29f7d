"""Resolved AWS session configuration."""
from datetime import timedelta
from enum import Enum

from pydantic import BaseModel, Field


class MetadataServiceState(str, Enum):
    """Whether the EC2 instance metadata service may be used for credentials."""
    DEFAULT = "default"
    ENABLED = "enabled"
    DISABLED = "disabled"


class AssumeRole(BaseModel):
    """Parameters for an STS AssumeRole call."""
    role_arn: str
    duration: timedelta | None = None
    external_id: str | None = None
    policy: str | None = None
    policy_arns: list[str] = Field(default_factory=list)
    session_name: str | None = None
    tags: dict[str, str] = Field(default_factory=dict)
    transitive_tag_keys: list[str] = Field(default_factory=list)


class AwsConfig(BaseModel):
    """Everything needed to build a boto3 session for the backend."""
    access_key: str | None = Field(default=None, repr=False)
    secret_key: str | None = Field(default=None, repr=False)
    token: str | None = Field(default=None, repr=False)
    profile: str | None = None
    region: str | None = None
    max_retries: int = 5
    iam_endpoint: str | None = None
    sts_endpoint: str | None = None
    skip_credentials_validation: bool = False
    metadata_service: MetadataServiceState = MetadataServiceState.DEFAULT
    shared_credentials_files: list[str] = Field(default_factory=list)
    shared_config_files: list[str] = Field(default_factory=list)
    assume_role: AssumeRole | None = None
    allowed_account_ids: list[str] = Field(default_factory=list)
    forbidden_account_ids: list[str] = Field(default_factory=list)
    use_legacy_workflow: bool = True
    user_agent: str = ""
    caller_name: str = "S3 Backend"
    caller_documentation_url: str = "https://opentofu.org/docs/language/settings/backends/s3"
