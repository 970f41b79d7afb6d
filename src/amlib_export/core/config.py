"""
Configuration management for amlib-export
"""

import os
import tomllib
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from loguru import logger


@dataclass
class ExportConfig:
    """Configuration for extraction and normalization defaults."""

    sort: bool = False
    trim: bool = True
    album_artist_fallback: bool = True  # Artists: use album artist when artist is blank
    composite_keys: bool = False  # Albums/tracks as "Artist - Value"
    osascript_path: str = "osascript"
    script_dir: Optional[str] = None  # Override the bundled AppleScript directory


@dataclass
class UIConfig:
    """Configuration for terminal output."""

    use_colors: bool = True
    show_progress: bool = True


@dataclass
class LoggingConfig:
    """Configuration for logging."""

    level: str = "INFO"  # DEBUG, INFO, WARNING, ERROR, CRITICAL
    log_file: Optional[str] = (
        None  # Custom log file path (default: ~/.local/share/amlib-export/amlib-export.log)
    )
    max_file_size_mb: int = 10
    backup_count: int = 5
    console_output: bool = False  # Also output logs to stderr (for debugging)


@dataclass
class Config:
    """Main configuration object."""

    export: ExportConfig = field(default_factory=ExportConfig)
    ui: UIConfig = field(default_factory=UIConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)


def get_config_dir() -> Path:
    """Get the configuration directory path."""
    config_home = os.environ.get("XDG_CONFIG_HOME")
    if config_home:
        return Path(config_home) / "amlib-export"
    return Path.home() / ".config" / "amlib-export"


def get_config_path() -> Path:
    """Get the main configuration file path.

    AMLIB_EXPORT_CONFIG wins over XDG_CONFIG_HOME/amlib-export/config.toml.
    """
    explicit = os.environ.get("AMLIB_EXPORT_CONFIG")
    if explicit:
        return Path(explicit).expanduser()
    return get_config_dir() / "config.toml"


def get_data_dir() -> Path:
    """Get the data directory path."""
    data_home = os.environ.get("XDG_DATA_HOME")
    if data_home:
        return Path(data_home) / "amlib-export"
    return Path.home() / ".local" / "share" / "amlib-export"


def create_default_config() -> str:
    """Create a default configuration TOML content."""
    return """
# amlib-export Configuration

[export]
# Sort output alphabetically
sort = false

# Trim leading/trailing whitespace from values
trim = true

# Artists: use the album artist when the track artist is empty
album_artist_fallback = true

# Albums and tracks as "Artist - Album" / "Artist - Title" instead of flat names
composite_keys = false

# Automation engine binary
osascript_path = "osascript"

# Directory holding the extraction AppleScripts (bundled scripts if unset)
# script_dir = "~/amlib-scripts"

[ui]
# Colorize terminal output by column
use_colors = true

# Show a live progress spinner on stderr while extracting
show_progress = true

[logging]
# Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
level = "INFO"

# Custom log file path (default: ~/.local/share/amlib-export/amlib-export.log)
# log_file = "/path/to/amlib-export.log"

# Maximum log file size in MB before rotation
max_file_size_mb = 10

# Number of rotated log files to keep
backup_count = 5

# Also output logs to stderr (useful for debugging)
console_output = false
""".strip()


def load_config() -> Config:
    """Load configuration from file, falling back to defaults.

    Environment variables override TOML values:
    - AMLIB_EXPORT_OSASCRIPT
    - AMLIB_EXPORT_LOG_LEVEL
    """
    from dotenv import load_dotenv

    env_path = get_config_dir() / ".env"
    if env_path.exists():
        load_dotenv(env_path)

    config = Config()
    config_path = get_config_path()

    if config_path.exists():
        try:
            with open(config_path, "rb") as f:
                toml_data = tomllib.load(f)
            config = _parse_config(toml_data)
        except (OSError, tomllib.TOMLDecodeError, TypeError, ValueError) as e:
            logger.warning(f"Error loading configuration from {config_path}: {e}")
            config = Config()

    osascript_path = os.environ.get("AMLIB_EXPORT_OSASCRIPT")
    if osascript_path:
        config.export.osascript_path = osascript_path

    log_level = os.environ.get("AMLIB_EXPORT_LOG_LEVEL")
    if log_level:
        config.logging.level = log_level.upper()

    return config


def _parse_config(toml_data: dict) -> Config:
    config = Config()

    if "export" in toml_data:
        export_data = toml_data["export"]
        script_dir = export_data.get("script_dir")
        if script_dir:
            script_dir = str(Path(script_dir).expanduser())
        config.export = ExportConfig(
            sort=bool(export_data.get("sort", config.export.sort)),
            trim=bool(export_data.get("trim", config.export.trim)),
            album_artist_fallback=bool(
                export_data.get(
                    "album_artist_fallback", config.export.album_artist_fallback
                )
            ),
            composite_keys=bool(
                export_data.get("composite_keys", config.export.composite_keys)
            ),
            osascript_path=export_data.get(
                "osascript_path", config.export.osascript_path
            ),
            script_dir=script_dir,
        )

    if "ui" in toml_data:
        ui_data = toml_data["ui"]
        config.ui = UIConfig(
            use_colors=bool(ui_data.get("use_colors", config.ui.use_colors)),
            show_progress=bool(ui_data.get("show_progress", config.ui.show_progress)),
        )

    if "logging" in toml_data:
        logging_data = toml_data["logging"]
        log_file = logging_data.get("log_file")
        if log_file:
            log_file = str(Path(log_file).expanduser())
        config.logging = LoggingConfig(
            level=logging_data.get("level", config.logging.level).upper(),
            log_file=log_file,
            max_file_size_mb=int(
                logging_data.get("max_file_size_mb", config.logging.max_file_size_mb)
            ),
            backup_count=int(
                logging_data.get("backup_count", config.logging.backup_count)
            ),
            console_output=bool(
                logging_data.get("console_output", config.logging.console_output)
            ),
        )

    return config
