"""S3 and DynamoDB client options."""
from typing import Any

import boto3

from s3_state_backend.domain.entities.aws_config import AwsConfig
from s3_state_backend.domain.entities.backend_config import BackendConfig
from s3_state_backend.infra.aws.session import client_config
from s3_state_backend.infra.common.env import string_default_env_var


def s3_client_options(config: BackendConfig, aws_config: AwsConfig) -> dict[str, Any]:
    """Keyword arguments for `session.client("s3", ...)`."""
    s3_settings = {}
    if config.force_path_style is not None:
        s3_settings["addressing_style"] = "path" if config.force_path_style else "auto"

    options: dict[str, Any] = {"config": client_config(aws_config, s3=s3_settings or None)}
    endpoint = string_default_env_var(config.endpoint, "AWS_S3_ENDPOINT", "AWS_ENDPOINT_URL_S3")
    if endpoint:
        options["endpoint_url"] = endpoint
    return options


def dynamodb_client_options(config: BackendConfig, aws_config: AwsConfig) -> dict[str, Any]:
    """Keyword arguments for `session.client("dynamodb", ...)`."""
    options: dict[str, Any] = {"config": client_config(aws_config)}
    endpoint = string_default_env_var(
        config.dynamodb_endpoint, "AWS_DYNAMODB_ENDPOINT", "AWS_ENDPOINT_URL_DYNAMODB"
    )
    if endpoint:
        options["endpoint_url"] = endpoint
    return options


def create_s3_client(session: boto3.Session, config: BackendConfig, aws_config: AwsConfig):
    return session.client("s3", **s3_client_options(config, aws_config))


def create_dynamodb_client(session: boto3.Session, config: BackendConfig, aws_config: AwsConfig):
    return session.client("dynamodb", **dynamodb_client_options(config, aws_config))
