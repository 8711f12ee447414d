"""
Structured log records attached to spans.
"""

from typing import Dict, Iterator, Optional, Tuple
from datetime import datetime, timezone
from pydantic import BaseModel, Field

from .values import LogValue, validate_log_value


class Log(BaseModel):
    """
    A structured log event.

    Each log holds a set of fields keyed by name and an optional timestamp.
    When set, the timestamp should fall between the start and the finish of
    the span the log is attached to.

    Example:
        log = Log().log("event", "cache-miss").log("retries", 3).at(when)
    """
    fields: Dict[str, LogValue] = Field(default_factory=dict, description="Log fields by key")
    timestamp: Optional[datetime] = Field(None, description="When the logged event happened")

    class Config:
        """Pydantic configuration."""
        validate_assignment = True

    def log(self, key: str, value: LogValue) -> "Log":
        """
        Add a field, replacing any field with the same key.

        Args:
            key: Field name
            value: Field value (bool, int, float or str)

        Returns:
            Self for chaining
        """
        self.fields[key] = validate_log_value(value)
        return self

    def at(self, timestamp: datetime) -> "Log":
        """Set the timestamp of the log and return self."""
        self.timestamp = timestamp
        return self

    def at_or_now(self) -> None:
        """Set the timestamp to now if it is not set."""
        if self.timestamp is None:
            self.timestamp = datetime.now(timezone.utc)

    def iter(self) -> Iterator[Tuple[str, LogValue]]:
        return iter(self.fields.items())
