"""Backend base interface."""
from abc import ABC, abstractmethod
from typing import Any, Mapping, Optional

from pydantic import BaseModel

from s3_state_backend.domain.entities.diagnostics import Diagnostics


class Backend(ABC):
    """A pluggable state storage backend."""
    
    id: str
    
    @abstractmethod
    def config_schema(self) -> dict:
        """Describe the configuration attributes the backend accepts."""
        raise NotImplementedError
    
    @abstractmethod
    def prepare_config(self, raw: Optional[Mapping[str, Any]]) -> tuple[Optional[BaseModel], Diagnostics]:
        """
        Validate a raw configuration.
        
        Args:
            raw: Attribute mapping as written by the user
            
        Returns:
            Parsed configuration and the diagnostics found
        """
        raise NotImplementedError
    
    @abstractmethod
    def configure(self, config: Optional[BaseModel]) -> Diagnostics:
        """
        Apply a configuration that passed prepare_config.
        
        Args:
            config: Parsed configuration
            
        Returns:
            Diagnostics; the backend is usable only if there are no errors
        """
        raise NotImplementedError
    
    def initialize(self, raw: Optional[Mapping[str, Any]]) -> Diagnostics:
        """Prepare and, if that succeeded, configure in one step."""
        config, diags = self.prepare_config(raw)
        if diags.has_errors():
            return diags
        return diags.extend(self.configure(config))
