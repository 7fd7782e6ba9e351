"""Core infrastructure modules."""

from .global_paths import GlobalPath
from .env import Env

__all__ = ["GlobalPath", "Env"]

# Configuration is imported from its module to avoid circular imports
# from .config import ConfigManager
