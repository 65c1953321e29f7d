"""Backend configuration file loader."""
from pathlib import Path
from typing import Any, Optional

import yaml

from s3_state_backend.infra.common import ConfigError, get_logger

logger = get_logger(__name__)


def load_backend_config(config_path: str | Path, section: Optional[str] = None) -> dict[str, Any]:
    """
    Load raw backend attributes from a YAML (or JSON) file.
    
    Args:
        config_path: Path to the config file
        section: Optional top-level key holding the attributes (e.g. "s3")
        
    Returns:
        Attribute mapping, not yet validated
        
    Raises:
        ConfigError: If the file is missing, unreadable or not a mapping
    """
    try:
        with open(config_path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except FileNotFoundError as e:
        raise ConfigError(f"Config file not found: {config_path}") from e
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in config file: {config_path}") from e
    
    if data is None:
        data = {}
    
    if section is not None:
        if not isinstance(data, dict) or section not in data:
            raise ConfigError(f"Section {section!r} not found in config file: {config_path}")
        data = data[section]
    
    if not isinstance(data, dict):
        raise ConfigError(f"Backend config must be a mapping of attributes: {config_path}")
    
    logger.debug("Loaded %d backend attributes from %s", len(data), config_path)
    return data
