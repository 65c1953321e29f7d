"""boto3 session construction and account checks."""
import os
import weakref
from typing import Optional

import boto3
import botocore.session
from botocore.config import Config
from botocore.credentials import (
    AssumeRoleCredentialFetcher,
    CredentialProvider,
    CredentialResolver,
    InstanceMetadataProvider,
    RefreshableCredentials,
)
from botocore.exceptions import BotoCoreError, ClientError, NoCredentialsError
from botocore.utils import InstanceMetadataFetcher

from s3_state_backend.domain.entities.aws_config import AssumeRole, AwsConfig, MetadataServiceState
from s3_state_backend.domain.entities.diagnostics import Diagnostics, Severity, sourceless
from s3_state_backend.domain.services.validators import parse_arn
from s3_state_backend.infra.common import get_logger

logger = get_logger(__name__)

DEFAULT_SESSION_NAME = "s3-state-backend"

# Credential providers backed by the instance/container metadata endpoints
_METADATA_PROVIDERS = ("iam-role", "container-role")

# Account IDs returned by GetCallerIdentity while validating a session
_caller_accounts: "weakref.WeakKeyDictionary[boto3.Session, str]" = weakref.WeakKeyDictionary()


class AssumedRoleProvider(CredentialProvider):
    """Hands out already-fetched refreshable assume-role credentials."""
    
    METHOD = "assume-role"
    CANONICAL_NAME = "custom-assume-role"
    
    def __init__(self, credentials: RefreshableCredentials):
        super().__init__()
        self._credentials = credentials
    
    def load(self) -> RefreshableCredentials:
        return self._credentials


def client_config(aws_config: AwsConfig, **kwargs) -> Config:
    """Shared botocore client config: retries and user agent."""
    return Config(
        retries={"max_attempts": aws_config.max_retries, "mode": "standard"},
        user_agent_extra=aws_config.user_agent,
        **kwargs,
    )


def get_aws_session(aws_config: AwsConfig) -> tuple[Optional[boto3.Session], Diagnostics]:
    """
    Build a boto3 session from the resolved configuration.
    
    Args:
        aws_config: Resolved session configuration
        
    Returns:
        Session (None on error) and diagnostics
    """
    diags = Diagnostics()

    try:
        session = _base_session(aws_config, diags)
        if aws_config.assume_role is not None:
            session = _assume_role_session(session, aws_config, aws_config.assume_role)
    except (BotoCoreError, ClientError) as e:
        diags.append(sourceless(
            Severity.ERROR,
            "Cannot assume IAM Role" if aws_config.assume_role else "Failed to configure AWS client",
            f"{e}\n\nSee {aws_config.caller_documentation_url}",
        ))
        return None, diags

    if not aws_config.skip_credentials_validation:
        try:
            identity = _sts_client(session, aws_config).get_caller_identity()
        except (BotoCoreError, ClientError) as e:
            diags.append(sourceless(
                Severity.ERROR,
                "No valid credential sources found",
                f"Please see {aws_config.caller_documentation_url}\n"
                f"for more information about providing credentials.\n\nError: {e}",
            ))
            return None, diags
        if identity.get("Account"):
            _caller_accounts[session] = identity["Account"]

    logger.debug("AWS session configured for region %s", session.region_name)
    return session, diags


def _botocore_session(aws_config: AwsConfig) -> botocore.session.Session:
    # botocore reads a single file per kind
    core = botocore.session.get_session()
    if aws_config.shared_credentials_files:
        core.set_config_variable("credentials_file", os.path.expanduser(aws_config.shared_credentials_files[-1]))
    if aws_config.shared_config_files:
        core.set_config_variable("config_file", os.path.expanduser(aws_config.shared_config_files[-1]))
    return core


def _base_session(aws_config: AwsConfig, diags: Diagnostics) -> boto3.Session:
    _warn_multiple_files(aws_config.shared_credentials_files, "credentials", diags)
    _warn_multiple_files(aws_config.shared_config_files, "config", diags)
    core = _botocore_session(aws_config)

    access_key, secret_key, token = aws_config.access_key, aws_config.secret_key, aws_config.token
    profile = aws_config.profile
    if not access_key and aws_config.use_legacy_workflow and profile and os.getenv("AWS_ACCESS_KEY_ID"):
        # legacy workflow: environment credentials win over the configured profile
        logger.debug("Using credentials from the environment instead of profile %s", profile)
        profile = None

    if profile:
        core.set_config_variable("profile", profile)

    # the resolver reads profile and file settings when first built
    _configure_metadata_providers(core, aws_config.metadata_service)

    return boto3.Session(
        aws_access_key_id=access_key or None,
        aws_secret_access_key=secret_key or None,
        aws_session_token=token or None,
        region_name=aws_config.region,
        profile_name=profile or None,
        botocore_session=core,
    )


def _configure_metadata_providers(core: botocore.session.Session, state: MetadataServiceState) -> None:
    if state is MetadataServiceState.DEFAULT:
        return

    resolver = core.get_component("credential_provider")
    if state is MetadataServiceState.DISABLED:
        for name in _METADATA_PROVIDERS:
            resolver.remove(name)
        return

    # explicitly enabled: AWS_EC2_METADATA_DISABLED no longer applies
    env = {name: value for name, value in os.environ.items() if name != "AWS_EC2_METADATA_DISABLED"}
    fetcher = InstanceMetadataFetcher(
        timeout=core.get_config_variable("metadata_service_timeout"),
        num_attempts=core.get_config_variable("metadata_service_num_attempts"),
        env=env,
        user_agent=core.user_agent(),
        config={
            "ec2_metadata_service_endpoint": core.get_config_variable("ec2_metadata_service_endpoint"),
            "ec2_metadata_service_endpoint_mode": core.get_config_variable("ec2_metadata_service_endpoint_mode"),
            "ec2_metadata_v1_disabled": core.get_config_variable("ec2_metadata_v1_disabled"),
        },
    )
    methods = [provider.METHOD for provider in resolver.providers]
    resolver.providers[methods.index("iam-role")] = InstanceMetadataProvider(iam_role_fetcher=fetcher)


def _warn_multiple_files(paths: list[str], kind: str, diags: Diagnostics) -> None:
    if len(paths) > 1:
        diags.append(sourceless(
            Severity.WARNING,
            f"Multiple shared {kind} files",
            f"Only the last shared {kind} file is used: {paths[-1]}",
        ))


def _sts_client(session: boto3.Session, aws_config: AwsConfig, **kwargs):
    return session.client(
        "sts",
        endpoint_url=aws_config.sts_endpoint or None,
        config=client_config(aws_config),
        **kwargs,
    )


def _assume_role_session(session: boto3.Session, aws_config: AwsConfig, assume_role: AssumeRole) -> boto3.Session:
    """
    Session whose credentials come from STS AssumeRole.
    
    The credentials are refreshed with a new AssumeRole call shortly
    before they expire, using the source session's credentials.
    """
    source_credentials = session.get_credentials()
    if source_credentials is None:
        raise NoCredentialsError()

    extra_args = {"RoleSessionName": assume_role.session_name or DEFAULT_SESSION_NAME}
    if assume_role.duration:
        extra_args["DurationSeconds"] = int(assume_role.duration.total_seconds())
    if assume_role.external_id:
        extra_args["ExternalId"] = assume_role.external_id
    if assume_role.policy:
        extra_args["Policy"] = assume_role.policy
    if assume_role.policy_arns:
        extra_args["PolicyArns"] = [{"arn": arn} for arn in assume_role.policy_arns]
    if assume_role.tags:
        extra_args["Tags"] = [{"Key": key, "Value": value} for key, value in assume_role.tags.items()]
    if assume_role.transitive_tag_keys:
        extra_args["TransitiveTagKeys"] = list(assume_role.transitive_tag_keys)

    fetcher = AssumeRoleCredentialFetcher(
        client_creator=lambda service_name, **kwargs: _sts_client(session, aws_config, **kwargs),
        source_credentials=source_credentials,
        role_arn=assume_role.role_arn,
        extra_args=extra_args,
    )

    logger.info("Assuming IAM role %s", assume_role.role_arn)
    credentials = RefreshableCredentials.create_from_metadata(
        metadata=fetcher.fetch_credentials(),
        refresh_using=fetcher.fetch_credentials,
        method=AssumedRoleProvider.METHOD,
    )

    core = _botocore_session(aws_config)
    core.register_component("credential_provider", CredentialResolver([AssumedRoleProvider(credentials)]))
    return boto3.Session(region_name=session.region_name, botocore_session=core)


def get_account_id(session: boto3.Session, aws_config: AwsConfig) -> tuple[str, Diagnostics]:
    """
    Look up the account ID of the session's credentials.
    
    Reuses the account seen while validating the session, otherwise tries
    STS GetCallerIdentity, then IAM GetUser. Failures are warnings.
    """
    diags = Diagnostics()
    if session in _caller_accounts:
        return _caller_accounts[session], diags

    try:
        return _sts_client(session, aws_config).get_caller_identity()["Account"], diags
    except (BotoCoreError, ClientError) as e:
        logger.debug("STS GetCallerIdentity failed: %s", e)

    try:
        iam = session.client("iam", endpoint_url=aws_config.iam_endpoint or None, config=client_config(aws_config))
        parsed = parse_arn(iam.get_user()["User"]["Arn"])
        if parsed is not None:
            return parsed["account"], diags
    except (BotoCoreError, ClientError) as e:
        logger.debug("IAM GetUser failed: %s", e)

    diags.append(sourceless(
        Severity.WARNING,
        "Retrieving AWS account details: AWS account ID not found for provider",
        f"See {aws_config.caller_documentation_url} for implications.",
    ))
    return "", diags


def verify_allowed_account_id(session: boto3.Session, aws_config: AwsConfig) -> Diagnostics:
    """Check the session's account against allowed/forbidden account IDs."""
    diags = Diagnostics()
    if aws_config.skip_credentials_validation and not (
        aws_config.allowed_account_ids or aws_config.forbidden_account_ids
    ):
        return diags

    account_id, lookup_diags = get_account_id(session, aws_config)
    diags.extend(lookup_diags)

    error = account_id_error(account_id, aws_config)
    if error:
        diags.append(sourceless(Severity.ERROR, "Invalid account ID", error))
    return diags


def account_id_error(account_id: str, aws_config: AwsConfig) -> Optional[str]:
    """Reason `account_id` is not allowed, or None if it is."""
    if account_id in aws_config.forbidden_account_ids:
        return f"AWS account ID not allowed: {account_id}"
    if aws_config.allowed_account_ids and account_id not in aws_config.allowed_account_ids:
        return f"AWS account ID not allowed: {account_id}"
    return None
