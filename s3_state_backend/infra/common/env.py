"""Environment variable fallbacks for configuration attributes."""
import os
from typing import Optional


def first_env(*names: str) -> Optional[str]:
    """Return the first non-empty environment variable among `names`."""
    for name in names:
        value = os.getenv(name)
        if value:
            return value
    return None


def string_default_env_var(value: Optional[str], *names: str) -> Optional[str]:
    """
    Return `value` if it was set, otherwise the first non-empty env var.
    
    An attribute explicitly set to the empty string counts as set.
    """
    if value is not None:
        return value
    return first_env(*names)


def list_default_env_var(value: Optional[list[str]], *names: str) -> Optional[list[str]]:
    """Like string_default_env_var, wrapping an env var hit in a single-item list."""
    if value is not None:
        return list(value)
    env_value = first_env(*names)
    if env_value is None:
        return None
    return [env_value]
