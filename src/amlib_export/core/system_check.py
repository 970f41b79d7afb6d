"""
Pre-flight environment checks run before any extraction.
"""

import platform
import shutil
from pathlib import Path
from typing import Callable, List, NamedTuple, Optional

MUSIC_APP_LOCATIONS = (
    Path("/System/Applications/Music.app"),
    Path("/Applications/Music.app"),
)


class CheckResult(NamedTuple):
    """Outcome of a single environment check."""

    ok: bool
    message: Optional[str] = None


def check_macos() -> CheckResult:
    """Check that we are running on macOS."""
    system = platform.system()
    if system != "Darwin":
        return CheckResult(
            False,
            "This tool only works on macOS.\n\n"
            f"You are running: {system}\n\n"
            "Apple Music Library export requires macOS and the Music.app.",
        )
    return CheckResult(True)


def check_osascript(osascript_path: str = "osascript") -> CheckResult:
    """Check that the automation binary is available."""
    if shutil.which(osascript_path) is None:
        return CheckResult(
            False,
            f"{osascript_path} command not found.\n\n"
            "This tool requires macOS with AppleScript support.\n"
            "osascript should be available at /usr/bin/osascript on any macOS system.",
        )
    return CheckResult(True)


def check_music_app() -> CheckResult:
    """Check that Music.app is installed."""
    if not any(location.is_dir() for location in MUSIC_APP_LOCATIONS):
        return CheckResult(
            False,
            "Music.app not found.\n\n"
            "This tool requires the Apple Music app to be installed.\n"
            "Music.app should be in /System/Applications/ or /Applications/.",
        )
    return CheckResult(True)


def run_all_checks(osascript_path: str = "osascript") -> CheckResult:
    """Run every check in order and return the first failure, if any."""
    checks: List[Callable[[], CheckResult]] = [
        check_macos,
        lambda: check_osascript(osascript_path),
        check_music_app,
    ]

    for check in checks:
        result = check()
        if not result.ok:
            return result

    return CheckResult(True)
