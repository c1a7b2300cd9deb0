"""Batched line-protocol writes with a retry queue, gzip bodies and logging."""

__version__ = "2.10.0"

__all__ = ["gzip_stream", "logger", "options", "queue", "write_service"]