"""Configuration package exports."""

from .loader import config_file_path, load_config
from .model import ClientConfig

__all__ = [
    "ClientConfig",
    "config_file_path",
    "load_config",
]
