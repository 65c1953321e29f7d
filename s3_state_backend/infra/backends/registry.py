"""Backend registry."""
from typing import Callable, Optional

from s3_state_backend.domain.backends.base import Backend


# In-memory registry of backend factories
BACKENDS: dict[str, Callable[[], Backend]] = {}


def register_backend(name: str, factory: Callable[[], Backend]) -> None:
    """Register a backend factory under `name`."""
    BACKENDS[name] = factory


def get_backend(name: Optional[str]) -> Backend:
    """
    Create a new backend instance.
    
    Args:
        name: Backend type name (e.g. "s3")
        
    Returns:
        Fresh, unconfigured backend
        
    Raises:
        ValueError: If no backend is registered under `name`
    """
    if not name:
        raise ValueError("Backend name is required")
    
    if name not in BACKENDS:
        raise ValueError(f"Backend '{name}' not found")
    
    return BACKENDS[name]()
