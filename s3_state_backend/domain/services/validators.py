"""Attribute-level validators producing diagnostics."""
import base64
import binascii
import json
import re
from datetime import timedelta
from typing import Optional

from botocore.utils import ArnParser, InvalidArnException

from s3_state_backend.domain.entities.backend_config import AssumeRoleConfig
from s3_state_backend.domain.entities.diagnostics import Diagnostic, Diagnostics, attribute_error, path_string
from s3_state_backend.infra.common.durations import format_duration, parse_duration

_KMS_KEY_ID = re.compile(
    r"(?:[A-Fa-f0-9]{8}-[A-Fa-f0-9]{4}-[A-Fa-f0-9]{4}-[A-Fa-f0-9]{4}-[A-Fa-f0-9]{12}|mrk-[A-Fa-f0-9]{32})"
)
_KMS_KEY_RESOURCE = re.compile(r"key/(.+)")
_EXTERNAL_ID = re.compile(r"[\w+=,.@:/\-]*", re.ASCII)
_SESSION_NAME = re.compile(r"[\w+=,.@\-]*", re.ASCII)

MIN_ASSUME_ROLE_DURATION = timedelta(minutes=15)
MAX_ASSUME_ROLE_DURATION = timedelta(hours=12)
CUSTOMER_KEY_LENGTH = 44

_arn_parser = ArnParser()


def parse_arn(value: str) -> Optional[dict]:
    """Parse an ARN into its parts, or None if it is not an ARN."""
    try:
        parsed = _arn_parser.parse_arn(value)
    except InvalidArnException:
        return None
    if not value.startswith("arn:") or not parsed["partition"] or not parsed["service"] or not parsed["resource"]:
        return None
    return parsed


def validate_kms_key(path: tuple[str | int, ...], value: str) -> Diagnostics:
    """Accept a KMS key ID (UUID or multi-region `mrk-` form) or a KMS key ARN."""
    if value.startswith("arn:"):
        return validate_kms_key_arn(path, value)
    return validate_kms_key_id(path, value)


def validate_kms_key_id(path: tuple[str | int, ...], value: str) -> Diagnostics:
    diags = Diagnostics()
    if not _KMS_KEY_ID.fullmatch(value):
        diags.append(attribute_error(
            "Invalid KMS Key ID",
            f"Value must be a valid KMS Key ID, got {value!r}",
            *path,
        ))
    return diags


def validate_kms_key_arn(path: tuple[str | int, ...], value: str) -> Diagnostics:
    diags = Diagnostics()
    parsed = parse_arn(value)
    if parsed is None or not _KMS_KEY_RESOURCE.fullmatch(parsed["resource"]):
        diags.append(attribute_error(
            "Invalid KMS Key ARN",
            f"Value must be a valid KMS Key ARN, got {value!r}",
            *path,
        ))
    return diags


def validate_arn(path: tuple[str | int, ...], value: str) -> Optional[Diagnostic]:
    if value == "":
        return None
    parsed = parse_arn(value)
    if parsed is None:
        return attribute_error("Invalid ARN", f"The value {value!r} cannot be parsed as an ARN.", *path)
    return None


def validate_duration(path: tuple[str | int, ...], value: str) -> Optional[Diagnostic]:
    try:
        duration = parse_duration(value)
    except ValueError:
        return attribute_error(
            "Invalid Duration",
            f"The value {value!r} cannot be parsed as a duration.",
            *path,
        )
    if duration < MIN_ASSUME_ROLE_DURATION or duration > MAX_ASSUME_ROLE_DURATION:
        return attribute_error(
            "Invalid Duration",
            f"Duration must be between {format_duration(MIN_ASSUME_ROLE_DURATION)} and "
            f"{format_duration(MAX_ASSUME_ROLE_DURATION)}, had {format_duration(duration)}",
            *path,
        )
    return None


def validate_string_len_between(path: tuple[str | int, ...], value: str, min_len: int, max_len: int) -> Optional[Diagnostic]:
    if not min_len <= len(value) <= max_len:
        return attribute_error(
            "Invalid Value Length",
            f"Length must be between {min_len} and {max_len}, had {len(value)}",
            *path,
        )
    return None


def validate_string_matches(path: tuple[str | int, ...], value: str, pattern: re.Pattern, message: str) -> Optional[Diagnostic]:
    if not pattern.fullmatch(value):
        return attribute_error("Invalid Value", message, *path)
    return None


def validate_iam_policy_document(path: tuple[str | int, ...], value: str) -> Optional[Diagnostic]:
    try:
        document = json.loads(value)
    except ValueError as e:
        return attribute_error(
            "Invalid IAM Policy Document",
            f"The value is not valid JSON: {e}",
            *path,
        )
    if not isinstance(document, dict):
        return attribute_error(
            "Invalid IAM Policy Document",
            "The policy document must be a JSON object.",
            *path,
        )
    return None


def validate_nested_assume_role(assume_role: AssumeRoleConfig, path: tuple[str | int, ...]) -> Diagnostics:
    """Validate every attribute of the nested `assume_role` block."""
    diags = Diagnostics()

    role_arn_path = path + ("role_arn",)
    if not assume_role.role_arn.strip():
        diags.append(attribute_error(
            "Missing Required Value",
            f"The attribute {path_string(role_arn_path)!r} is required by the backend.\n\n"
            "Refer to the backend documentation for additional information which attributes are required.",
            *role_arn_path,
        ))
    else:
        diags.append(validate_arn(role_arn_path, assume_role.role_arn))

    if assume_role.duration is not None:
        diags.append(validate_duration(path + ("duration",), assume_role.duration))

    if assume_role.external_id is not None:
        external_id_path = path + ("external_id",)
        diags.append(validate_string_len_between(external_id_path, assume_role.external_id, 2, 1224))
        diags.append(validate_string_matches(
            external_id_path,
            assume_role.external_id,
            _EXTERNAL_ID,
            "Value can only contain letters, numbers, or the following characters: =,.@/-",
        ))

    if assume_role.policy is not None:
        diags.append(validate_iam_policy_document(path + ("policy",), assume_role.policy))

    if assume_role.session_name is not None:
        session_name_path = path + ("session_name",)
        diags.append(validate_string_len_between(session_name_path, assume_role.session_name, 2, 64))
        diags.append(validate_string_matches(
            session_name_path,
            assume_role.session_name,
            _SESSION_NAME,
            "Value can only contain letters, numbers, or the following characters: =,.@-",
        ))

    for index, arn in enumerate(assume_role.policy_arns or []):
        diags.append(validate_arn(path + ("policy_arns", index), arn))

    return diags


def decode_customer_key(value: str) -> bytes:
    """
    Decode an SSE-C key: 44 characters of standard base64 (a 256-bit key).
    
    Raises:
        ValueError: If the length is wrong or the value is not base64
    """
    if len(value) != CUSTOMER_KEY_LENGTH:
        raise ValueError(f"must be {CUSTOMER_KEY_LENGTH} characters in length")
    try:
        return base64.b64decode(value, validate=True)
    except binascii.Error as e:
        raise ValueError(f"must be base64 encoded: {e}") from e
