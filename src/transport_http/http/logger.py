"""
HTTP traffic logger for debugging and auditing.

Writes the rendered request and response logs of every execution to a file
with timestamps, session IDs and direction indicators.
"""

import json
import re
from datetime import UTC
from datetime import datetime
from pathlib import Path
from typing import Protocol

SENSITIVE_HEADERS = ("authorization", "proxy-authorization", "cookie", "x-api-key", "api-key")

_HEADER_LINE = re.compile(r"^(?P<name>[!#$%&'*+.^_`|~0-9A-Za-z-]+): (?P<value>.*)$")


class TrafficLogger(Protocol):
    """Protocol for traffic logging callbacks."""

    def log_request(self, request: str, session_id: str | None = None) -> None:
        """Log a rendered outgoing request."""
        ...

    def log_response(
        self,
        response: str | None,
        status: int | None = None,
        session_id: str | None = None,
    ) -> None:
        """Log a rendered incoming response, or a failure message."""
        ...


def mask_value(value: str) -> str:
    """Show the first 10 and last 4 characters of long values, mask short ones."""
    if len(value) > 14:
        return value[:10] + "..." + value[-4:]
    return "***"


def sanitize_log(text: str) -> str:
    """
    Mask sensitive header values in a rendered log.

    Only the header block is touched: scanning stops at the first blank
    line, so bodies are written unchanged.
    """
    lines = text.split("\r\n")
    for index, line in enumerate(lines):
        if index == 0:
            continue
        if not line:
            break
        match = _HEADER_LINE.match(line)
        if match and match.group("name").lower() in SENSITIVE_HEADERS:
            lines[index] = f"{match.group('name')}: {mask_value(match.group('value'))}"
    return "\r\n".join(lines)


class FileTrafficLogger:
    """
    Logs HTTP traffic to a file.

    Format:
        [timestamp] [session_id] [direction] [type] payload

    Where:
        - timestamp: ISO 8601 format
        - session_id: The session ID or "no-session"
        - direction: >>> for outgoing, <<< for incoming
        - type: REQUEST or RESPONSE
        - payload: JSON object holding the rendered log text
    """

    def __init__(self, log_file: Path):
        """
        Initialize the file logger.

        Args:
            log_file: Path to the log file. Parent directories will be created
                      if they don't exist.
        """
        self.log_file = log_file
        self._ensure_log_file()

    def _ensure_log_file(self) -> None:
        """Ensure the log file and parent directories exist."""
        self.log_file.parent.mkdir(parents=True, exist_ok=True)
        self.log_file.touch(exist_ok=True)

    def _format_timestamp(self) -> str:
        """Get current timestamp in ISO 8601 format."""
        return datetime.now(UTC).isoformat(timespec="milliseconds")

    def _write_log(self, entry: str) -> None:
        """Append a log entry to the file."""
        # headers decoded with surrogateescape may carry lone surrogates
        with self.log_file.open("a", encoding="utf-8", errors="backslashreplace") as f:
            f.write(entry + "\n")

    def log_request(self, request: str, session_id: str | None = None) -> None:
        """Log a rendered outgoing request."""
        timestamp = self._format_timestamp()
        sid = session_id or "no-session"

        payload = {"request": sanitize_log(request)}

        entry = f"[{timestamp}] [{sid}] >>> REQUEST {json.dumps(payload, ensure_ascii=False)}"
        self._write_log(entry)

    def log_response(
        self,
        response: str | None,
        status: int | None = None,
        session_id: str | None = None,
    ) -> None:
        """Log a rendered incoming response, or a failure message."""
        timestamp = self._format_timestamp()
        sid = session_id or "no-session"

        payload = {
            "status": status,
            "response": sanitize_log(response) if response else response,
        }

        entry = f"[{timestamp}] [{sid}] <<< RESPONSE {json.dumps(payload, ensure_ascii=False)}"
        self._write_log(entry)
