"""Common infrastructure utilities."""
from s3_state_backend.infra.common.logger import setup_logging, get_logger, is_debug_or_higher
from s3_state_backend.infra.common.errors import (
    BackendError,
    ConfigError,
)
from s3_state_backend.infra.common.env import first_env, string_default_env_var, list_default_env_var
from s3_state_backend.infra.common.durations import parse_duration, format_duration

__all__ = [
    "setup_logging",
    "get_logger",
    "is_debug_or_higher",
    "BackendError",
    "ConfigError",
    "first_env",
    "string_default_env_var",
    "list_default_env_var",
    "parse_duration",
    "format_duration",
]
