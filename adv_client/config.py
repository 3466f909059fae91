"""
Module: adv_client.config
Purpose: Configuration management for the adversarial demo client
Dependencies: pyyaml, pathlib

Defaults live in `Config.__init__`; a YAML file at config/local.yaml overrides
them section by section, and ADV_CLIENT_BACKEND overrides the service address.
"""

from pathlib import Path
from typing import Dict, Any, Optional
import logging
import os
import yaml

logger = logging.getLogger(__name__)

# Project root directory
PROJECT_ROOT = Path(__file__).parent.parent

CONFIG_DIR = PROJECT_ROOT / "config"

BACKEND_ENV_VAR = "ADV_CLIENT_BACKEND"


class Config:
    """
    Configuration manager for the adversarial demo client.

    Attributes:
        service (Dict[str, Any]): Generation service address, paths and timeouts
        strength (Dict[str, Any]): Bounds, step and default of epsilon
        ui (Dict[str, Any]): Local web UI server settings

    Example:
        >>> config = Config()
        >>> config.service["base_url"]
        'http://localhost:8000'
        >>> config.get_strength_bounds()
        (0.0, 0.5)
    """

    def __init__(self, config_file: Optional[Path] = None):
        """
        Initialize configuration with default values and optional overrides.

        Args:
            config_file: Optional path to YAML config file for overrides
        """
        self.service: Dict[str, Any] = {
            "base_url": "http://localhost:8000",
            "probe_path": "/",
            "generate_path": "/generate-adversarial/",
            "probe_timeout": 5.0,  # seconds, None disables
            "generate_timeout": 120.0,
        }

        self.strength: Dict[str, Any] = {
            "default": 0.1,
            "min": 0.0,
            "max": 0.5,
            "step": 0.01,
        }

        self.ui: Dict[str, Any] = {
            "host": "127.0.0.1",
            "port": 3000,
            "reload": False,
            "log_level": "info",
        }

        if config_file and config_file.exists():
            self._load_overrides(config_file)

        backend = os.environ.get(BACKEND_ENV_VAR)
        if backend:
            self.service["base_url"] = backend

    def _load_overrides(self, config_file: Path) -> None:
        """
        Load configuration overrides from YAML file.

        Args:
            config_file: Path to YAML configuration file
        """
        with open(config_file, 'r') as f:
            overrides = yaml.safe_load(f)

        if overrides:
            logger.info(f"Loading configuration overrides from {config_file}")
            # Deep merge overrides into existing config
            for key, value in overrides.items():
                if hasattr(self, key) and isinstance(getattr(self, key), dict):
                    getattr(self, key).update(value)
                else:
                    setattr(self, key, value)

    def get_service_url(self, endpoint: str) -> str:
        """
        Absolute URL of a service endpoint.

        Args:
            endpoint: "probe" or "generate"

        Raises:
            KeyError: If endpoint is not recognized
        """
        key = f"{endpoint}_path"
        if key not in self.service:
            raise KeyError(f"Unknown endpoint: {endpoint}. Available: ['probe', 'generate']")
        return self.service["base_url"].rstrip("/") + self.service[key]

    def get_timeout(self, endpoint: str) -> Optional[float]:
        """Timeout in seconds for an endpoint, or None for no timeout."""
        return self.service.get(f"{endpoint}_timeout")

    def get_strength_bounds(self) -> tuple:
        return float(self.strength["min"]), float(self.strength["max"])


# Global configuration instance
_config_instance: Optional[Config] = None


def get_config() -> Config:
    """
    Get global configuration instance (singleton pattern).

    Returns:
        Shared Config instance
    """
    global _config_instance
    if _config_instance is None:
        # Check for local config override
        local_config = CONFIG_DIR / "local.yaml"
        _config_instance = Config(local_config if local_config.exists() else None)
    return _config_instance


def reset_config() -> None:
    """Drop the cached instance so the next `get_config()` re-reads overrides."""
    global _config_instance
    _config_instance = None
