"""Translation of a validated backend configuration into an AwsConfig."""
from datetime import timedelta

from s3_state_backend import __version__
from s3_state_backend.domain.entities.aws_config import AssumeRole, AwsConfig, MetadataServiceState
from s3_state_backend.domain.entities.backend_config import BackendConfig
from s3_state_backend.infra.common.durations import parse_duration
from s3_state_backend.infra.common.env import first_env, list_default_env_var, string_default_env_var

DEFAULT_MAX_RETRIES = 5
APPLICATION_NAME = "s3-state-backend"


def user_agent() -> str:
    return f"APN/1.0 {APPLICATION_NAME}/{__version__}"


def resolve_region(config: BackendConfig) -> str | None:
    """Region from the configuration, else AWS_REGION, else AWS_DEFAULT_REGION."""
    return config.region or first_env("AWS_REGION", "AWS_DEFAULT_REGION")


def build_aws_config(config: BackendConfig) -> AwsConfig:
    """
    Build the AWS session configuration for a validated backend config.
    
    Args:
        config: Configuration that passed prepare_config
        
    Returns:
        AwsConfig with defaults and environment fallbacks applied
    """
    aws_config = AwsConfig(
        access_key=config.access_key,
        secret_key=config.secret_key,
        token=config.token,
        profile=config.profile,
        region=resolve_region(config),
        max_retries=config.max_retries if config.max_retries is not None else DEFAULT_MAX_RETRIES,
        iam_endpoint=string_default_env_var(config.iam_endpoint, "AWS_IAM_ENDPOINT"),
        sts_endpoint=string_default_env_var(config.sts_endpoint, "AWS_STS_ENDPOINT"),
        skip_credentials_validation=bool(config.skip_credentials_validation),
        use_legacy_workflow=True if config.use_legacy_workflow is None else config.use_legacy_workflow,
        user_agent=user_agent(),
    )

    if config.skip_metadata_api_check is not None:
        aws_config.metadata_service = (
            MetadataServiceState.DISABLED if config.skip_metadata_api_check else MetadataServiceState.ENABLED
        )

    if config.shared_credentials_file is not None:
        aws_config.shared_credentials_files = [config.shared_credentials_file]

    if config.assume_role is not None:
        aws_config.assume_role = nested_assume_role(config)
    elif config.role_arn is not None:
        aws_config.assume_role = legacy_assume_role(config)

    files = list_default_env_var(config.shared_credentials_files, "AWS_SHARED_CREDENTIALS_FILE")
    if files is not None:
        aws_config.shared_credentials_files = files
    files = list_default_env_var(config.shared_config_files, "AWS_SHARED_CONFIG_FILE")
    if files is not None:
        aws_config.shared_config_files = files

    if config.allowed_account_ids is not None:
        aws_config.allowed_account_ids = list(config.allowed_account_ids)
    if config.forbidden_account_ids is not None:
        aws_config.forbidden_account_ids = list(config.forbidden_account_ids)

    return aws_config


def nested_assume_role(config: BackendConfig) -> AssumeRole:
    block = config.assume_role
    assume_role = AssumeRole(role_arn=block.role_arn)
    if block.duration is not None:
        # already checked by prepare_config
        assume_role.duration = parse_duration(block.duration)
    assume_role.external_id = block.external_id
    if block.policy is not None:
        assume_role.policy = block.policy.strip()
    assume_role.policy_arns = list(block.policy_arns or [])
    assume_role.session_name = block.session_name
    assume_role.tags = dict(block.tags or {})
    assume_role.transitive_tag_keys = list(block.transitive_tag_keys or [])
    return assume_role


def legacy_assume_role(config: BackendConfig) -> AssumeRole:
    assume_role = AssumeRole(
        role_arn=config.role_arn,
        external_id=config.external_id,
        policy=config.assume_role_policy,
        session_name=config.session_name,
        policy_arns=list(config.assume_role_policy_arns or []),
        tags=dict(config.assume_role_tags or {}),
        transitive_tag_keys=list(config.assume_role_transitive_tag_keys or []),
    )
    if config.assume_role_duration_seconds:
        assume_role.duration = timedelta(seconds=config.assume_role_duration_seconds)
    return assume_role
