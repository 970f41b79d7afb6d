"""
Extraction runner: executes one automation script as a child process and
streams its output line by line.

A run resolves to ``ExtractionSuccess`` or ``ExtractionFailure``; it never
raises for engine failures and never retries.
"""

import subprocess
import threading
from typing import Callable, IO, List, NamedTuple, Optional, Sequence, Union

from loguru import logger

from .exceptions import ErrorKind, classify_error
from .models import QueryKind
from .scripts import build_command

LineCallback = Callable[[str, int], None]


class ExtractionSuccess(NamedTuple):
    """Lines collected from a clean (or deliberately truncated) run."""

    lines: List[str]
    truncated: bool = False

    @property
    def ok(self) -> bool:
        return True


class ExtractionFailure(NamedTuple):
    """A classified engine failure.

    ``lines`` keeps any output captured before the failure; it is never
    treated as a result.
    """

    kind: ErrorKind
    detail: str
    lines: Sequence[str] = ()

    @property
    def ok(self) -> bool:
        return False


ExtractionResult = Union[ExtractionSuccess, ExtractionFailure]


def _drain(stream: IO[str], chunks: List[str]) -> None:
    """Read a stream to EOF into ``chunks``."""
    for chunk in iter(lambda: stream.read(4096), ""):
        chunks.append(chunk)


def _terminate(process: subprocess.Popen) -> None:
    """Best-effort SIGTERM of a child that may already have exited."""
    try:
        process.terminate()
    except OSError as e:
        logger.debug(f"terminate() on pid {process.pid} failed: {e}")


def run_script(
    argv: Sequence[str],
    limit: Optional[int] = None,
    on_line: Optional[LineCallback] = None,
) -> ExtractionResult:
    """
    Run an automation command and collect its stdout lines.

    Args:
        argv: Command to spawn (e.g. ["osascript", "/path/script.applescript"])
        limit: Stop after this many lines; the run then counts as a success
        on_line: Called as ``on_line(line, count)`` for each line before the
            next one is read

    Returns:
        ExtractionSuccess or ExtractionFailure

    Raises:
        ValueError: If limit is not a positive integer
    """
    if limit is not None and (
        isinstance(limit, bool) or not isinstance(limit, int) or limit <= 0
    ):
        raise ValueError(f"limit must be a positive integer, got {limit!r}")

    lines: List[str] = []
    logger.debug(f"Spawning automation command: {list(argv)}")

    try:
        process = subprocess.Popen(
            list(argv),
            stdin=subprocess.DEVNULL,
            stdout=subprocess.PIPE,
            stderr=subprocess.PIPE,
            text=True,
            encoding="utf-8",
            errors="replace",
        )
    except (OSError, ValueError) as e:
        logger.error(f"Failed to start automation command {argv[0] if argv else ''!r}: {e}")
        return ExtractionFailure(ErrorKind.AUTOMATION_ERROR, str(e), lines)

    stderr_chunks: List[str] = []
    stderr_reader = threading.Thread(
        target=_drain, args=(process.stderr, stderr_chunks), daemon=True
    )
    stderr_reader.start()

    truncated = False
    try:
        for raw_line in process.stdout:
            line = raw_line[:-1] if raw_line.endswith("\n") else raw_line
            lines.append(line)

            if on_line is not None:
                on_line(line, len(lines))

            if limit is not None and len(lines) >= limit:
                truncated = True
                logger.info(f"Line limit {limit} reached, terminating pid {process.pid}")
                _terminate(process)
                break
    except BaseException:
        # Observer failure or interrupt: do not leave the child running
        _terminate(process)
        raise
    finally:
        process.stdout.close()
        returncode = process.wait()
        stderr_reader.join()
        process.stderr.close()

    if truncated:
        return ExtractionSuccess(lines, truncated=True)

    if returncode == 0:
        logger.debug(f"Automation command finished cleanly with {len(lines)} lines")
        return ExtractionSuccess(lines)

    diagnostic = "".join(stderr_chunks)
    kind = classify_error(diagnostic)
    logger.error(
        f"Automation command exited with status {returncode} ({kind.value}): "
        f"{diagnostic.strip()}"
    )
    return ExtractionFailure(kind, diagnostic.strip(), lines)


def run_query(
    kind: QueryKind,
    limit: Optional[int] = None,
    on_line: Optional[LineCallback] = None,
    osascript_path: str = "osascript",
    script_dir: Optional[str] = None,
) -> ExtractionResult:
    """Run the automation script bound to ``kind``; see ``run_script``."""
    logger.info(f"Running {kind.value} query (limit={limit})")
    return run_script(
        build_command(kind, osascript_path, script_dir), limit=limit, on_line=on_line
    )
