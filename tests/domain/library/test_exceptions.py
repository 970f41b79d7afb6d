"""Tests for error classification and the error taxonomy."""

import pytest

from amlib_export.domain.library.exceptions import (
    ErrorKind,
    ExitCode,
    ExportError,
    ExtractionError,
    FileWriteError,
    classify_error,
    error_message,
    exit_code_for,
)


class TestClassifyError:
    """Tests for classify_error."""

    @pytest.mark.parametrize(
        "text",
        [
            "Not authorized to send Apple events to Music.",
            "osascript is not allowed assistive access.",
            "execution error: User canceled. (-128)",
            "errAEEventNotPermitted",
            "erraeventnotpermitted",
            "execution error: (-1743)",
        ],
    )
    def test_permission_denied(self, text: str) -> None:
        assert classify_error(text) is ErrorKind.PERMISSION_DENIED

    @pytest.mark.parametrize(
        "text",
        [
            "execution error: Application isn't running. (-600)",
            'Application "Music" can\'t be found.',
            "Connection is invalid. (-609)",
            "Music got an error: Couldn't launch the application.",
        ],
    )
    def test_target_unavailable(self, text: str) -> None:
        assert classify_error(text) is ErrorKind.TARGET_UNAVAILABLE

    def test_typographic_apostrophe(self) -> None:
        """macOS sometimes renders apostrophes as U+2019."""
        assert classify_error("Application isn’t running.") is ErrorKind.TARGET_UNAVAILABLE

    def test_case_insensitive(self) -> None:
        assert classify_error("NOT AUTHORIZED") is ErrorKind.PERMISSION_DENIED

    def test_permission_rule_wins(self) -> None:
        """Text matching both rule sets classifies by the first rule."""
        text = "Application isn't running. Not authorized to send Apple events."
        assert classify_error(text) is ErrorKind.PERMISSION_DENIED

    @pytest.mark.parametrize("text", ["", "syntax error: Expected end of line", None])
    def test_default_is_automation_error(self, text) -> None:
        assert classify_error(text) is ErrorKind.AUTOMATION_ERROR


class TestExitCodes:
    """Tests for exit code mapping."""

    def test_taxonomy_values(self) -> None:
        assert ExitCode.SUCCESS == 0
        assert exit_code_for(ErrorKind.TARGET_UNAVAILABLE) == 2
        assert exit_code_for(ErrorKind.PERMISSION_DENIED) == 3
        assert exit_code_for(ErrorKind.AUTOMATION_ERROR) == 4
        assert exit_code_for(ErrorKind.FILE_WRITE_ERROR) == 5


class TestErrorMessages:
    """Tests for error_message and the exception classes."""

    def test_permission_message_has_remediation(self) -> None:
        message = error_message(ErrorKind.PERMISSION_DENIED)
        assert "Automation permission denied" in message
        assert "Privacy & Security" in message

    def test_automation_error_includes_detail(self) -> None:
        message = error_message(ErrorKind.AUTOMATION_ERROR, "boom")
        assert "Details: boom" in message

    def test_extraction_error_carries_kind(self) -> None:
        error = ExtractionError(ErrorKind.TARGET_UNAVAILABLE, "Application isn't running")
        assert isinstance(error, ExportError)
        assert error.exit_code == ExitCode.TARGET_UNAVAILABLE
        assert "Music.app is not available" in str(error)

    def test_file_write_error(self) -> None:
        error = FileWriteError("Permission denied", path="/readonly/out.csv")
        assert error.kind is ErrorKind.FILE_WRITE_ERROR
        assert error.exit_code == ExitCode.FILE_WRITE_ERROR
        assert error.path == "/readonly/out.csv"
        assert "Failed to write CSV file" in str(error)
        assert "Permission denied" in str(error)
