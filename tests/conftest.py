"""Shared test fixtures."""
import pytest

AWS_ENV_VARS = [
    "AWS_REGION",
    "AWS_DEFAULT_REGION",
    "AWS_PROFILE",
    "AWS_DEFAULT_PROFILE",
    "AWS_ACCESS_KEY_ID",
    "AWS_SECRET_ACCESS_KEY",
    "AWS_SESSION_TOKEN",
    "AWS_SECURITY_TOKEN",
    "AWS_SSE_CUSTOMER_KEY",
    "AWS_S3_ENDPOINT",
    "AWS_ENDPOINT_URL",
    "AWS_ENDPOINT_URL_S3",
    "AWS_ENDPOINT_URL_STS",
    "AWS_ENDPOINT_URL_IAM",
    "AWS_DYNAMODB_ENDPOINT",
    "AWS_ENDPOINT_URL_DYNAMODB",
    "AWS_IAM_ENDPOINT",
    "AWS_STS_ENDPOINT",
    "AWS_SHARED_CREDENTIALS_FILE",
    "AWS_SHARED_CONFIG_FILE",
    "AWS_CONFIG_FILE",
    "AWS_ROLE_ARN",
    "AWS_WEB_IDENTITY_TOKEN_FILE",
    "AWS_CONTAINER_CREDENTIALS_RELATIVE_URI",
    "AWS_CONTAINER_CREDENTIALS_FULL_URI",
    "TF_LOG",
]


@pytest.fixture(autouse=True)
def clean_aws_env(monkeypatch, tmp_path):
    """Isolate tests from the caller's AWS environment and ~/.aws files."""
    for name in AWS_ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("HOME", str(tmp_path))
    monkeypatch.setenv("AWS_EC2_METADATA_DISABLED", "true")
    yield


@pytest.fixture
def minimal_config():
    """Smallest raw configuration that passes validation."""
    return {
        "bucket": "tf-state",
        "key": "network/terraform.tfstate",
        "region": "us-east-1",
    }


@pytest.fixture
def customer_key():
    """A valid 44-character base64 SSE-C key (32 bytes)."""
    return "MDEyMzQ1Njc4OWFiY2RlZjAxMjM0NTY3ODlhYmNkZWY="
