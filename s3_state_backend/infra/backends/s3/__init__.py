"""S3 state backend."""
from s3_state_backend.infra.backends.registry import register_backend
from s3_state_backend.infra.backends.s3.backend import S3Backend

register_backend(S3Backend.id, S3Backend)

__all__ = ["S3Backend"]
