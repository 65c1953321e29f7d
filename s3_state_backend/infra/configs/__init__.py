"""Configuration file and environment loading."""
from s3_state_backend.infra.configs.config_loader import load_backend_config
from s3_state_backend.infra.configs.env_loader import load_env_file

__all__ = ["load_backend_config", "load_env_file"]
