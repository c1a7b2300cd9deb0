"""Client configuration for writing and HTTP communication."""

from __future__ import annotations

import platform
import ssl
import sys
from dataclasses import dataclass, field
from enum import Enum

from influxwriter.logger import LogLevel

VERSION = "2.10.0"

# Write precisions, expressed in nanoseconds.
NANOSECOND = 1
MICROSECOND = 1_000
MILLISECOND = 1_000_000
SECOND = 1_000_000_000


class Consistency(str, Enum):
    """Write consistency level for clustered servers."""

    ONE = "one"
    ALL = "all"
    ANY = "any"
    QUORUM = "quorum"


@dataclass
class Options:
    """Configuration of writes, HTTP requests and logging.

    Intervals and times are in milliseconds, the request timeout in seconds,
    precision in nanoseconds.
    """

    batch_size: int = 5_000
    flush_interval: int = 1_000
    retry_interval: int = 5_000
    max_retries: int = 5
    retry_buffer_limit: int = 50_000
    max_retry_interval: int = 125_000
    max_retry_time: int = 180_000
    exponential_base: int = 2
    precision: int = NANOSECOND
    use_gzip: bool = False
    consistency: Consistency | None = None
    default_tags: dict[str, str] = field(default_factory=dict)
    tls_context: ssl.SSLContext | None = None
    http_request_timeout: int = 20
    log_level: LogLevel = LogLevel.ERROR

    def add_default_tag(self, key: str, value: str) -> None:
        """Add a tag written with every point, replacing one with the same key."""
        self.default_tags[key] = value


def default_options() -> Options:
    """Return options with default values."""
    return Options()


def user_agent() -> str:
    """Return the User-Agent string sent with requests."""
    return f"influxwriter/{VERSION}  ({sys.platform}; {platform.machine()})"