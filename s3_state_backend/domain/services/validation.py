"""Validation of raw S3 backend configuration."""
import os
from typing import Any, Mapping, Optional

from pydantic import ValidationError

from s3_state_backend.domain.entities.backend_config import BackendConfig
from s3_state_backend.domain.entities.diagnostics import (
    Diagnostic,
    Diagnostics,
    Severity,
    attribute_error,
    attribute_warning,
    path_string,
)
from s3_state_backend.domain.services.validators import (
    decode_customer_key,
    validate_kms_key,
    validate_nested_assume_role,
)

# Legacy top-level attribute -> replacement inside the `assume_role` block.
ASSUME_ROLE_DEPRECATED_FIELDS = {
    "role_arn": "assume_role.role_arn",
    "session_name": "assume_role.session_name",
    "external_id": "assume_role.external_id",
    "assume_role_duration_seconds": "assume_role.duration",
    "assume_role_policy": "assume_role.policy",
    "assume_role_policy_arns": "assume_role.policy_arns",
    "assume_role_tags": "assume_role.tags",
    "assume_role_transitive_tag_keys": "assume_role.transitive_tag_keys",
}

ENCRYPTION_KEY_CONFLICT_ERROR = """Only one of "kms_key_id" and "sse_customer_key" can be set.

The "kms_key_id" is used for encryption with KMS-Managed Keys (SSE-KMS)
while "sse_customer_key" is used for encryption with customer-managed keys (SSE-C).
Please choose one or the other."""

ENCRYPTION_KEY_CONFLICT_ENV_VAR_ERROR = """Only one of "kms_key_id" and the environment variable "AWS_SSE_CUSTOMER_KEY" can be set.

The "kms_key_id" is used for encryption with KMS-Managed Keys (SSE-KMS)
while "AWS_SSE_CUSTOMER_KEY" is used for encryption with customer-managed keys (SSE-C).
Please choose one or the other."""


def prepare_config(raw: Optional[Mapping[str, Any]]) -> tuple[Optional[BackendConfig], Diagnostics]:
    """
    Check the validity of a raw backend configuration.
    
    Every rule runs, so a single pass reports all problems at once.
    
    Args:
        raw: Attribute mapping as written by the user, or None
        
    Returns:
        Parsed configuration (None if it could not be parsed) and diagnostics
    """
    diags = Diagnostics()
    if raw is None:
        return None, diags

    try:
        config = BackendConfig.model_validate(dict(raw))
    except ValidationError as e:
        diags.extend(_schema_diagnostics(e))
        return None, diags

    diags.extend(validate_config(config))
    return config, diags


def validate_config(config: BackendConfig) -> Diagnostics:
    """Apply the backend's field rules to an already parsed configuration."""
    diags = Diagnostics()

    if not config.bucket:
        diags.append(attribute_error(
            "Invalid bucket value",
            'The "bucket" attribute value must not be empty.',
            "bucket",
        ))

    if not config.key:
        diags.append(attribute_error(
            "Invalid key value",
            'The "key" attribute value must not be empty.',
            "key",
        ))
    elif config.key.startswith("/") or config.key.endswith("/"):
        # S3 strips leading slashes and treats a trailing slash as a directory
        diags.append(attribute_error(
            "Invalid key value",
            'The "key" attribute value must not start or end with with "/".',
            "key",
        ))

    if not config.region and not os.getenv("AWS_REGION") and not os.getenv("AWS_DEFAULT_REGION"):
        diags.append(attribute_error(
            "Missing region value",
            'The "region" attribute or the "AWS_REGION" or "AWS_DEFAULT_REGION" environment variables must be set.',
            "region",
        ))

    if config.kms_key_id:
        if config.sse_customer_key:
            diags.append(Diagnostic(
                severity=Severity.ERROR,
                summary="Invalid encryption configuration",
                detail=ENCRYPTION_KEY_CONFLICT_ERROR,
                path=(),
            ))
        elif os.getenv("AWS_SSE_CUSTOMER_KEY"):
            diags.append(Diagnostic(
                severity=Severity.ERROR,
                summary="Invalid encryption configuration",
                detail=ENCRYPTION_KEY_CONFLICT_ENV_VAR_ERROR,
                path=(),
            ))
        diags.extend(validate_kms_key(("kms_key_id",), config.kms_key_id))

    if config.sse_customer_key is not None:
        try:
            decode_customer_key(config.sse_customer_key)
        except ValueError as e:
            diags.append(attribute_error(
                "Invalid sse_customer_key value",
                f"sse_customer_key {e}",
                "sse_customer_key",
            ))

    prefix = config.workspace_key_prefix
    if prefix is not None and (prefix.startswith("/") or prefix.endswith("/")):
        diags.append(attribute_error(
            "Invalid workspace_key_prefix value",
            'The "workspace_key_prefix" attribute value must not start or end with "/".',
            "workspace_key_prefix",
        ))

    diags.append(validate_attributes_conflict(config, "shared_credentials_file", "shared_credentials_files"))

    if config.is_set("shared_credentials_file"):
        diags.append(attribute_warning(
            "Deprecated Parameter",
            'Parameter "shared_credentials_file" is deprecated. Use "shared_credentials_files" instead.',
            "shared_credentials_file",
        ))

    defined = find_deprecated_fields(config, ASSUME_ROLE_DEPRECATED_FIELDS)
    if config.assume_role is not None:
        diags.extend(validate_nested_assume_role(config.assume_role, ("assume_role",)))

        if defined:
            diags.append(Diagnostic(
                severity=Severity.ERROR,
                summary="Conflicting Parameters",
                detail='The following deprecated parameters conflict with the parameter "assume_role". '
                       "Replace them as follows:\n" + format_deprecated(defined),
            ))
    elif defined:
        diags.append(Diagnostic(
            severity=Severity.WARNING,
            summary="Deprecated Parameters",
            detail="The following parameters have been deprecated. Replace them as follows:\n"
                   + format_deprecated(defined),
        ))

    diags.append(validate_attributes_conflict(config, "allowed_account_ids", "forbidden_account_ids"))

    return diags


def validate_attributes_conflict(config: BackendConfig, *names: str) -> Optional[Diagnostic]:
    """Error when more than one of the named attributes is set."""
    found = [name for name in names if config.is_set(name)]
    if len(found) > 1:
        quoted = ", ".join(f'"{name}"' for name in names)
        return Diagnostic(
            severity=Severity.ERROR,
            summary="Invalid Attribute Combination",
            detail=f"Only one of {quoted} can be set.",
            path=(found[-1],),
        )
    return None


def find_deprecated_fields(config: BackendConfig, attrs: Mapping[str, str]) -> dict[str, str]:
    """Subset of `attrs` whose deprecated attribute is set in `config`."""
    return {name: replacement for name, replacement in attrs.items() if config.is_set(name)}


def format_deprecated(attrs: Mapping[str, str]) -> str:
    """One aligned `  * old -> new` line per attribute, sorted by old name."""
    if not attrs:
        return ""
    width = max(len(name) for name in attrs)
    return "".join(f"  * {name:<{width}} -> {attrs[name]}\n" for name in sorted(attrs))


def _schema_diagnostics(error: ValidationError) -> list[Diagnostic]:
    """Turn pydantic type errors into attribute diagnostics."""
    diags = []
    for item in error.errors():
        path = tuple(step for step in item["loc"] if isinstance(step, (str, int)))
        if item["type"] == "extra_forbidden":
            diags.append(attribute_error(
                "Unsupported argument",
                f'An argument named "{path_string(path)}" is not expected here.',
                *path,
            ))
        elif item["type"] == "missing":
            diags.append(attribute_error(
                "Missing required argument",
                f'The argument "{path_string(path)}" is required, but no definition was found.',
                *path,
            ))
        else:
            diags.append(attribute_error(
                "Incorrect attribute value type",
                f'Inappropriate value for attribute "{path_string(path)}": {item["msg"]}.',
                *path,
            ))
    return diags
