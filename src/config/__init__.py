"""Configuration management"""

from .config_loader import ConfigLoader
from .rfc2047_config import AppConfig, Rfc2047Config

__all__ = ["ConfigLoader", "AppConfig", "Rfc2047Config"]
