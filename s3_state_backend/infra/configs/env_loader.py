"""Environment variables loader."""
import os
from pathlib import Path
from typing import Optional

from dotenv import find_dotenv, load_dotenv


def load_env_file(env_path: Optional[str | Path] = None) -> bool:
    """
    Load environment variables from a .env file if it exists.
    
    Inside AWS runtimes the environment is set directly and .env files
    are ignored. Variables already present in the environment win.
    
    Returns:
        True if a file was loaded
    """
    if os.getenv("AWS_LAMBDA_FUNCTION_NAME") or os.getenv("ECS_CONTAINER_METADATA_URI"):
        return False
    
    if env_path is not None:
        if not Path(env_path).exists():
            return False
        return load_dotenv(env_path, override=False)
    
    found = find_dotenv(usecwd=True)
    if not found:
        return False
    return load_dotenv(found, override=False)
