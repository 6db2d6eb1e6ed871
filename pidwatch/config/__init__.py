"""Configuration module for pidwatch."""

from .config_loader import ConfigLoader
from .monitor_config import MonitorConfig

__all__ = ["ConfigLoader", "MonitorConfig"]
