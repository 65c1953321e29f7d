"""Tests for translating backend configuration into an AWS session config."""
from datetime import timedelta

from s3_state_backend.domain.entities.aws_config import MetadataServiceState
from s3_state_backend.domain.entities.backend_config import BackendConfig
from s3_state_backend.infra.aws.config import build_aws_config, user_agent


def _config(**kwargs) -> BackendConfig:
    return BackendConfig(bucket="tf-state", key="terraform.tfstate", region="us-east-1", **kwargs)


def test_defaults():
    """Test defaults applied when attributes are unset."""
    aws_config = build_aws_config(_config())
    
    assert aws_config.region == "us-east-1"
    assert aws_config.max_retries == 5
    assert aws_config.use_legacy_workflow is True
    assert aws_config.metadata_service is MetadataServiceState.DEFAULT
    assert aws_config.skip_credentials_validation is False
    assert aws_config.assume_role is None
    assert aws_config.shared_credentials_files == []
    assert aws_config.user_agent == user_agent()
    assert aws_config.user_agent.startswith("APN/1.0 s3-state-backend/")


def test_explicit_values():
    """Test attributes are carried over as given."""
    aws_config = build_aws_config(_config(
        access_key="AKIDEXAMPLE",
        secret_key="secret",
        token="session-token",
        profile="ops",
        max_retries=0,
        use_legacy_workflow=False,
        skip_credentials_validation=True,
        allowed_account_ids=["123456789012"],
    ))
    
    assert aws_config.access_key == "AKIDEXAMPLE"
    assert aws_config.secret_key == "secret"
    assert aws_config.token == "session-token"
    assert aws_config.profile == "ops"
    assert aws_config.max_retries == 0
    assert aws_config.use_legacy_workflow is False
    assert aws_config.skip_credentials_validation is True
    assert aws_config.allowed_account_ids == ["123456789012"]


def test_secrets_not_in_repr():
    """Test credentials do not leak through repr."""
    aws_config = build_aws_config(_config(access_key="AKIDEXAMPLE", secret_key="hunter2"))
    
    assert "hunter2" not in repr(aws_config)
    assert "AKIDEXAMPLE" not in repr(aws_config)


def test_region_from_environment(monkeypatch):
    """Test AWS_REGION takes precedence over AWS_DEFAULT_REGION."""
    monkeypatch.setenv("AWS_REGION", "eu-west-1")
    monkeypatch.setenv("AWS_DEFAULT_REGION", "eu-central-1")
    
    aws_config = build_aws_config(BackendConfig(bucket="b", key="k"))
    
    assert aws_config.region == "eu-west-1"


def test_endpoints_fall_back_to_environment(monkeypatch):
    """Test IAM and STS endpoints fall back to environment variables."""
    monkeypatch.setenv("AWS_IAM_ENDPOINT", "http://iam.local")
    monkeypatch.setenv("AWS_STS_ENDPOINT", "http://sts.local")
    
    aws_config = build_aws_config(_config())
    assert aws_config.iam_endpoint == "http://iam.local"
    assert aws_config.sts_endpoint == "http://sts.local"
    
    aws_config = build_aws_config(_config(sts_endpoint="http://sts.config"))
    assert aws_config.sts_endpoint == "http://sts.config"


def test_metadata_service_state():
    """Test skip_metadata_api_check maps onto the metadata service state."""
    assert build_aws_config(_config(skip_metadata_api_check=True)).metadata_service is MetadataServiceState.DISABLED
    assert build_aws_config(_config(skip_metadata_api_check=False)).metadata_service is MetadataServiceState.ENABLED


def test_shared_files(monkeypatch):
    """Test shared credential and config file resolution."""
    aws_config = build_aws_config(_config(shared_credentials_file="/legacy/credentials"))
    assert aws_config.shared_credentials_files == ["/legacy/credentials"]
    
    monkeypatch.setenv("AWS_SHARED_CREDENTIALS_FILE", "/env/credentials")
    monkeypatch.setenv("AWS_SHARED_CONFIG_FILE", "/env/config")
    aws_config = build_aws_config(_config())
    assert aws_config.shared_credentials_files == ["/env/credentials"]
    assert aws_config.shared_config_files == ["/env/config"]
    
    aws_config = build_aws_config(_config(
        shared_credentials_files=["/a/credentials", "/b/credentials"],
        shared_config_files=["/a/config"],
    ))
    assert aws_config.shared_credentials_files == ["/a/credentials", "/b/credentials"]
    assert aws_config.shared_config_files == ["/a/config"]


def test_nested_assume_role():
    """Test the nested assume_role block is translated."""
    aws_config = build_aws_config(_config(assume_role={
        "role_arn": "arn:aws:iam::123456789012:role/state",
        "duration": "1h30m",
        "external_id": "ext",
        "policy": '  {"Version": "2012-10-17"}\n',
        "policy_arns": ["arn:aws:iam::aws:policy/ReadOnlyAccess"],
        "session_name": "ci",
        "tags": {"team": "platform"},
        "transitive_tag_keys": ["team"],
    }))
    
    role = aws_config.assume_role
    assert role.role_arn == "arn:aws:iam::123456789012:role/state"
    assert role.duration == timedelta(hours=1, minutes=30)
    assert role.external_id == "ext"
    assert role.policy == '{"Version": "2012-10-17"}'
    assert role.policy_arns == ["arn:aws:iam::aws:policy/ReadOnlyAccess"]
    assert role.session_name == "ci"
    assert role.tags == {"team": "platform"}
    assert role.transitive_tag_keys == ["team"]


def test_legacy_assume_role():
    """Test legacy top-level assume role attributes are translated."""
    aws_config = build_aws_config(_config(
        role_arn="arn:aws:iam::123456789012:role/state",
        session_name="legacy",
        external_id="ext",
        assume_role_duration_seconds=900,
        assume_role_policy_arns=["arn:aws:iam::aws:policy/ReadOnlyAccess"],
        assume_role_tags={"team": "platform"},
    ))
    
    role = aws_config.assume_role
    assert role.role_arn == "arn:aws:iam::123456789012:role/state"
    assert role.session_name == "legacy"
    assert role.external_id == "ext"
    assert role.duration == timedelta(minutes=15)
    assert role.policy_arns == ["arn:aws:iam::aws:policy/ReadOnlyAccess"]
    assert role.tags == {"team": "platform"}


def test_legacy_fields_ignored_without_role_arn():
    """Test legacy fields do nothing unless role_arn is set."""
    aws_config = build_aws_config(_config(session_name="orphan"))
    
    assert aws_config.assume_role is None
