"""Data types shared by the client, the session and the front ends."""

from dataclasses import dataclass, field
from datetime import datetime
from email.utils import parsedate_to_datetime
from typing import Any


def parse_timestamp(value: str) -> datetime:
    """Parse a server timestamp.

    Accepts ISO 8601 (with a trailing ``Z`` for UTC) and RFC 1123 HTTP dates
    such as ``Mon, 01 Jan 2024 00:00:00 GMT``.

    Raises:
        ValueError: ``value`` is in neither format.
    """
    iso = value[:-1] + "+00:00" if value.endswith("Z") else value
    try:
        return datetime.fromisoformat(iso)
    except ValueError:
        pass

    try:
        return parsedate_to_datetime(value)
    except (TypeError, ValueError) as e:
        raise ValueError(f"Unrecognized timestamp: {value!r}") from e


@dataclass(frozen=True)
class Store:
    """A remotely provisioned store as last reported by the authority.

    ``status`` is whatever label the authority uses (``Active``,
    ``Provisioning``, ...) and is never interpreted here.
    """

    name: str
    status: str
    created: datetime

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "name": self.name,
            "status": self.status,
            "created": self.created.isoformat(),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Store":
        """Create from an authority response item.

        Raises:
            KeyError: A required field is missing.
            ValueError: ``created`` is not a recognized timestamp.
        """
        return cls(
            name=str(data["name"]),
            status=str(data["status"]),
            created=parse_timestamp(str(data["created"])),
        )


@dataclass(frozen=True)
class LogEntry:
    """A single operator-facing event log line."""

    message: str
    timestamp: datetime = field(default_factory=datetime.now)

    def format(self) -> str:
        return f"[{self.timestamp.strftime('%H:%M:%S')}] {self.message}"

    def to_dict(self) -> dict[str, Any]:
        return {
            "timestamp": self.timestamp.isoformat(),
            "message": self.message,
            "line": self.format(),
        }
