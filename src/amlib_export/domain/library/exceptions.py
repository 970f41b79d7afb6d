"""Extraction error taxonomy, classification and exceptions."""

from enum import Enum, IntEnum
from typing import Optional


class ErrorKind(str, Enum):
    """Failure classes surfaced by an export run."""

    PERMISSION_DENIED = "permission_denied"
    TARGET_UNAVAILABLE = "target_unavailable"
    AUTOMATION_ERROR = "automation_error"
    FILE_WRITE_ERROR = "file_write_error"


class ExitCode(IntEnum):
    """Process exit status reported to the invoking shell."""

    SUCCESS = 0
    TARGET_UNAVAILABLE = 2
    PERMISSION_DENIED = 3
    AUTOMATION_ERROR = 4
    FILE_WRITE_ERROR = 5


EXIT_CODES = {
    ErrorKind.PERMISSION_DENIED: ExitCode.PERMISSION_DENIED,
    ErrorKind.TARGET_UNAVAILABLE: ExitCode.TARGET_UNAVAILABLE,
    ErrorKind.AUTOMATION_ERROR: ExitCode.AUTOMATION_ERROR,
    ErrorKind.FILE_WRITE_ERROR: ExitCode.FILE_WRITE_ERROR,
}

# Ordered: the first rule with a matching substring wins.
CLASSIFICATION_RULES: tuple[tuple[ErrorKind, tuple[str, ...]], ...] = (
    (
        ErrorKind.PERMISSION_DENIED,
        (
            "not authorized",
            "assistive access",
            "user canceled",
            "erraeventnotpermitted",
            "erraeeventnotpermitted",  # errAEEventNotPermitted
            "-1743",  # AppleEvent permission denied
        ),
    ),
    (
        ErrorKind.TARGET_UNAVAILABLE,
        (
            "application isn't running",
            "can't be found",
            "connection is invalid",
            "couldn't launch",
        ),
    ),
)

PERMISSION_REMEDIATION = """To fix this:
1. Open System Settings → Privacy & Security → Automation
2. Find "Terminal" (or your terminal app) in the list
3. Enable the toggle for "Music"
4. Re-run this command

If you don't see Terminal listed, run the command once to trigger the prompt."""


def classify_error(diagnostic_text: str) -> ErrorKind:
    """Map raw diagnostic output from the automation engine to an ErrorKind.

    Args:
        diagnostic_text: Everything the engine wrote to stderr

    Returns:
        PERMISSION_DENIED, TARGET_UNAVAILABLE or AUTOMATION_ERROR
    """
    # macOS messages mix typographic and ASCII apostrophes
    text = (diagnostic_text or "").replace("’", "'").lower()

    for kind, patterns in CLASSIFICATION_RULES:
        if any(pattern in text for pattern in patterns):
            return kind

    return ErrorKind.AUTOMATION_ERROR


def exit_code_for(kind: ErrorKind) -> ExitCode:
    """Get the shell exit code for an error kind."""
    return EXIT_CODES[kind]


def error_message(kind: ErrorKind, detail: str = "") -> str:
    """Get a user-friendly explanation for an error kind.

    Args:
        kind: The classified failure
        detail: Diagnostic text attached to the failure

    Returns:
        Human-readable message, multi-line for some kinds
    """
    if kind is ErrorKind.TARGET_UNAVAILABLE:
        return (
            "Error: Music.app is not available or cannot be launched.\n\n"
            "Make sure Music.app is installed and try running it manually first."
        )
    if kind is ErrorKind.PERMISSION_DENIED:
        return f"Error: Automation permission denied.\n\n{PERMISSION_REMEDIATION}"
    if kind is ErrorKind.FILE_WRITE_ERROR:
        return f"Error: Failed to write CSV file.\n\nDetails: {detail}"
    return f"Error: Unexpected extraction error.\n\nDetails: {detail}"


class ExportError(Exception):
    """Base exception for a failed export run."""

    def __init__(self, kind: ErrorKind, detail: str = "", message: Optional[str] = None):
        self.kind = kind
        self.detail = detail
        super().__init__(message or error_message(kind, detail))

    @property
    def exit_code(self) -> ExitCode:
        return exit_code_for(self.kind)


class ExtractionError(ExportError):
    """Raised when the automation engine run did not succeed."""

    pass


class FileWriteError(ExportError):
    """Raised when the CSV artifact could not be written."""

    def __init__(self, detail: str, path: Optional[str] = None):
        self.path = path
        super().__init__(ErrorKind.FILE_WRITE_ERROR, detail)
