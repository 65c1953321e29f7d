"""S3 backend: configuration and client setup."""
import os
from typing import Any, Mapping, Optional

import boto3

from s3_state_backend.domain.backends.base import Backend
from s3_state_backend.domain.entities.aws_config import AwsConfig
from s3_state_backend.domain.entities.backend_config import BackendConfig
from s3_state_backend.domain.entities.diagnostics import Diagnostics, Severity, attribute_error, sourceless
from s3_state_backend.domain.services.schema import AttributeSchema, config_schema
from s3_state_backend.domain.services.validation import prepare_config
from s3_state_backend.domain.services.validators import decode_customer_key
from s3_state_backend.infra.aws.clients import create_dynamodb_client, create_s3_client
from s3_state_backend.infra.aws.config import build_aws_config
from s3_state_backend.infra.aws.regions import validate_region
from s3_state_backend.infra.aws.session import get_aws_session, verify_allowed_account_id
from s3_state_backend.infra.common import get_logger

logger = get_logger(__name__)

DEFAULT_WORKSPACE = "default"
DEFAULT_WORKSPACE_KEY_PREFIX = "env:"


class S3Backend(Backend):
    """
    State backend storing state objects in S3, locked through DynamoDB.
    
    Fields are populated by configure(); until then the clients are None.
    """
    
    id = "s3"
    
    def __init__(self):
        self.s3_client = None
        self.dynamodb_client = None
        self.session: Optional[boto3.Session] = None
        self.aws_config: Optional[AwsConfig] = None
        
        self.bucket_name = ""
        self.key_name = ""
        self.server_side_encryption = False
        self.customer_encryption_key: bytes = b""
        self.acl = ""
        self.kms_key_id = ""
        self.ddb_table = ""
        self.workspace_key_prefix = DEFAULT_WORKSPACE_KEY_PREFIX
    
    def config_schema(self) -> dict[str, AttributeSchema]:
        return config_schema(BackendConfig)
    
    def prepare_config(self, raw: Optional[Mapping[str, Any]]) -> tuple[Optional[BackendConfig], Diagnostics]:
        return prepare_config(raw)
    
    def configure(self, config: Optional[BackendConfig]) -> Diagnostics:
        """
        Set backend fields and build the S3 and DynamoDB clients.
        
        Args:
            config: Configuration that passed prepare_config
            
        Returns:
            Diagnostics; clients are only set when there are no errors
        """
        diags = Diagnostics()
        if config is None:
            return diags
        
        region = config.region or ""
        if region and not config.skip_region_validation:
            try:
                validate_region(region)
            except ValueError as e:
                diags.append(attribute_error("Invalid region value", str(e), "region"))
                return diags
        
        self.bucket_name = config.bucket or ""
        self.key_name = config.key or ""
        self.acl = config.acl or ""
        self.workspace_key_prefix = (
            config.workspace_key_prefix
            if config.workspace_key_prefix is not None
            else DEFAULT_WORKSPACE_KEY_PREFIX
        )
        self.server_side_encryption = bool(config.encrypt)
        self.kms_key_id = config.kms_key_id or ""
        self.ddb_table = config.dynamodb_table or ""
        diags.extend(self._configure_customer_key(config))
        
        aws_config = build_aws_config(config)
        session, session_diags = get_aws_session(aws_config)
        diags.extend(session_diags)
        if session is not None:
            diags.extend(verify_allowed_account_id(session, aws_config))
        
        if diags.has_errors():
            return diags
        
        self.session = session
        self.aws_config = aws_config
        self.dynamodb_client = create_dynamodb_client(session, config, aws_config)
        self.s3_client = create_s3_client(session, config, aws_config)
        
        logger.info("Configured S3 backend for s3://%s/%s", self.bucket_name, self.key_name)
        return diags
    
    def _configure_customer_key(self, config: BackendConfig) -> Diagnostics:
        diags = Diagnostics()
        if config.sse_customer_key is not None:
            try:
                self.customer_encryption_key = decode_customer_key(config.sse_customer_key)
            except ValueError as e:
                diags.append(attribute_error(
                    "Invalid sse_customer_key value",
                    f"sse_customer_key {e}",
                    "sse_customer_key",
                ))
            return diags
        
        env_key = os.getenv("AWS_SSE_CUSTOMER_KEY")
        if env_key:
            try:
                self.customer_encryption_key = decode_customer_key(env_key)
            except ValueError as e:
                diags.append(sourceless(
                    Severity.ERROR,
                    "Invalid AWS_SSE_CUSTOMER_KEY value",
                    f'The environment variable "AWS_SSE_CUSTOMER_KEY" {e}',
                ))
        return diags
    
    def state_key(self, workspace: str = DEFAULT_WORKSPACE) -> str:
        """Object key holding the state of `workspace`."""
        if workspace == DEFAULT_WORKSPACE:
            return self.key_name
        return "/".join([self.workspace_key_prefix, workspace, self.key_name])
    
    def object_encryption_args(self) -> dict[str, Any]:
        """Extra PutObject/GetObject arguments for the configured encryption and ACL."""
        args = {}
        if self.customer_encryption_key:
            args["SSECustomerAlgorithm"] = "AES256"
            args["SSECustomerKey"] = self.customer_encryption_key
        elif self.server_side_encryption:
            if self.kms_key_id:
                args["ServerSideEncryption"] = "aws:kms"
                args["SSEKMSKeyId"] = self.kms_key_id
            else:
                args["ServerSideEncryption"] = "AES256"
        if self.acl:
            args["ACL"] = self.acl
        return args
