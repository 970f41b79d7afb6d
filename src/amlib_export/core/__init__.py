"""Core infrastructure layer - no business logic dependencies.

This module provides foundation-level services:
- Configuration management (TOML)
- Console management (Rich)
- Logging (Loguru)
- Pre-flight environment checks
"""

# Configuration
from .config import (
    Config,
    load_config,
    get_config_dir,
    get_config_path,
    get_data_dir,
    create_default_config,
)

# Console
from .console import get_console, get_error_console, safe_print

# Output
from .output import setup_loguru, log

# System checks
from .system_check import CheckResult, run_all_checks

__all__ = [
    # Config
    "Config",
    "load_config",
    "get_config_dir",
    "get_config_path",
    "get_data_dir",
    "create_default_config",
    # Console
    "get_console",
    "get_error_console",
    "safe_print",
    # Output
    "setup_loguru",
    "log",
    # System checks
    "CheckResult",
    "run_all_checks",
]
