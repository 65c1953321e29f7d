"""Backend implementations."""
from s3_state_backend.infra.backends.registry import get_backend, register_backend
import s3_state_backend.infra.backends.s3  # noqa: F401  registers "s3"

__all__ = ["get_backend", "register_backend"]
