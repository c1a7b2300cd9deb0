"""Reliable writing of line-protocol batches with retries."""

from __future__ import annotations

import io
import random
import threading
import time
from collections.abc import Callable
from typing import IO, Protocol
from urllib.parse import urlencode, urljoin

from influxwriter import logger as log
from influxwriter.gzip_stream import compress_with_gzip
from influxwriter.logger import LogLevel
from influxwriter.options import MICROSECOND, MILLISECOND, SECOND, Options
from influxwriter.queue import Batch, RetryQueue

_TOO_MANY_REQUESTS = 429

# Messages of errors that retrying cannot fix.
_IGNORABLE_MESSAGES = (
    "hinted handoff queue not empty",
    "points beyond retention policy",
    "partial write",
    "unable to parse",
)


class HttpError(Exception):
    """Failure of an HTTP request.

    ``status_code`` is 0 when no response was received (for example on a
    connection error, which is then kept in ``err``). ``retry_after`` is
    the server's Retry-After value in seconds, 0 if absent.
    """

    def __init__(
        self,
        status_code: int = 0,
        code: str = "",
        message: str = "",
        retry_after: int = 0,
        err: BaseException | None = None,
    ) -> None:
        self.status_code = status_code
        self.code = code
        self.message = message
        self.retry_after = retry_after
        self.err = err
        super().__init__(str(self))

    def __str__(self) -> str:
        if self.err is not None:
            return str(self.err)
        if self.code and self.message:
            return f"{self.code}: {self.message}"
        if self.message:
            return self.message
        return f"Unexpected status code {self.status_code}"


class HttpService(Protocol):
    """Transport used to send write requests.

    ``post`` raises :class:`HttpError` when the request fails.
    """

    server_api_url: str

    def post(self, url: str, body: IO[bytes], headers: dict[str, str]) -> None: ...


BatchErrorCallback = Callable[[Batch, HttpError], bool]


def precision_to_string(precision: int) -> str:
    """Return the query-string name of a precision given in nanoseconds."""
    return {MICROSECOND: "us", MILLISECOND: "ms", SECOND: "s"}.get(precision, "ns")


def is_ignorable_error(error: HttpError) -> bool:
    """Return True if the error means the data was dropped and retrying is useless."""
    return any(text in error.message for text in _IGNORABLE_MESSAGES)


class WriteService:
    """Writes batches and keeps failed ones for later retries.

    Retrying is driven by new writes; there is no scheduler.
    """

    def __init__(
        self, org: str, bucket: str, http_service: HttpService, options: Options
    ) -> None:
        self.org = org
        self.bucket = bucket
        self.http_service = http_service
        self.options = options
        self.retry_queue = RetryQueue(max(options.retry_buffer_limit // options.batch_size, 1))
        self.retry_delay = options.retry_interval
        self.retry_attempts = 0
        self.last_write_attempt: float | None = None
        self._error_callback: BatchErrorCallback | None = None
        self._lock = threading.Lock()

        params = {
            "org": org,
            "bucket": bucket,
            "precision": precision_to_string(options.precision),
        }
        if options.consistency:
            params["consistency"] = str(options.consistency.value)
        base = urljoin(http_service.server_api_url, "write")
        self._url = f"{base}?{urlencode(sorted(params.items()))}"

    @property
    def write_url(self) -> str:
        """The URL batches are posted to."""
        return self._url

    def set_batch_error_callback(self, callback: BatchErrorCallback | None) -> None:
        """Set a callback deciding whether a failed batch is retried (True) or dropped."""
        self._error_callback = callback

    def _can_write_now(self) -> bool:
        if self.last_write_attempt is None:
            return True
        return time.monotonic() > self.last_write_attempt + self.retry_delay / 1000

    def _push(self, batch: Batch) -> None:
        if self.retry_queue.push(batch):
            log.error("Write proc: Retry buffer full, discarding oldest batch")

    def handle_write(self, batch: Batch, cancel: threading.Event | None = None) -> None:
        """Write a batch, sending queued batches first.

        Raises ``InterruptedError`` if ``cancel`` is set, :class:`HttpError`
        if the error callback rejects a failed batch, and ``RuntimeError``
        (caused by the :class:`HttpError`) for any other failed write.
        """
        log.debug("Write proc: received write request")
        pending: Batch | None = batch
        batch_to_write: Batch | None = batch
        retrying = False
        while True:
            if cancel is not None and cancel.is_set():
                log.debug("Write proc: ctx cancelled req")
                raise InterruptedError("write cancelled")
            if not self.retry_queue.is_empty():
                log.debug("Write proc: taking batch from retry queue")
                if not retrying:
                    oldest = self.retry_queue.first()
                    if time.monotonic() > oldest.expires:
                        log.error("Write proc: oldest batch in retry queue expired, discarding")
                        if not oldest.evicted:
                            self.retry_queue.pop()
                        continue
                    if self._can_write_now():
                        retrying = True
                    else:
                        log.warn("Write proc: cannot write yet, storing batch to queue")
                        self._push(batch)
                        batch_to_write = None
                if retrying:
                    batch_to_write = self.retry_queue.first()
                    if pending is not None:
                        self._push(pending)
                        pending = None

            if batch_to_write is None:
                break

            try:
                self.write_batch(batch_to_write)
            except HttpError as perror:
                if is_ignorable_error(perror):
                    log.warn("Write error: %s", perror)
                else:
                    self._handle_failure(batch_to_write, pending, perror)
                    raise RuntimeError(
                        f"write failed (attempts {batch_to_write.retry_attempts}): {perror}"
                    ) from perror

            self.retry_delay = self.options.retry_interval
            self.retry_attempts = 0
            if retrying and not batch_to_write.evicted:
                self.retry_queue.pop()
            batch_to_write = None

    def _handle_failure(
        self, batch_to_write: Batch, pending: Batch | None, perror: HttpError
    ) -> None:
        retryable = perror.status_code == 0 or perror.status_code >= _TOO_MANY_REQUESTS
        if self.options.max_retries == 0 or not retryable:
            log.error("Write error: %s", perror)
            return
        log.error("Write error: %s, batch kept for retrying", perror)
        if perror.retry_after > 0:
            self.retry_delay = perror.retry_after * 1000
        else:
            self.retry_delay = self.compute_retry_delay(self.retry_attempts)
        if self._error_callback is not None and not self._error_callback(batch_to_write, perror):
            log.error("Callback rejected batch, discarding")
            if not batch_to_write.evicted:
                self.retry_queue.pop()
            raise perror
        if not batch_to_write.evicted and batch_to_write is not self.retry_queue.first():
            if pending is not None:
                self._push(pending)
        elif batch_to_write.retry_attempts == self.options.max_retries:
            log.error("Reached maximum number of retries, discarding batch")
            if not batch_to_write.evicted:
                self.retry_queue.pop()
        batch_to_write.retry_attempts += 1
        self.retry_attempts += 1
        log.debug("Write proc: next wait for write is %dms", self.retry_delay)

    def compute_retry_delay(self, attempts: int) -> int:
        """Return a random delay in ms between interval*base**attempts and interval*base**(attempts+1), capped."""
        interval = self.options.retry_interval
        base = self.options.exponential_base
        min_delay = interval * base**attempts
        max_delay = interval * base ** (attempts + 1)
        return min(random.randrange(min_delay, max_delay), self.options.max_retry_interval)

    def write_batch(self, batch: Batch) -> None:
        """Send one batch; raises :class:`HttpError` on failure."""
        if log.level() >= LogLevel.DEBUG:
            log.debug("Writing batch: %s", batch.data)
        headers: dict[str, str] = {}
        body: IO[bytes]
        if self.options.use_gzip:
            body = compress_with_gzip(batch.data)
            headers["Content-Encoding"] = "gzip"
        else:
            body = io.BytesIO(batch.data.encode("utf-8"))
        with self._lock:
            self.last_write_attempt = time.monotonic()
        try:
            self.http_service.post(self._url, body, headers)
        except HttpError:
            raise
        except OSError as exc:
            raise HttpError(err=exc) from exc

    def flush(self) -> None:
        """Send all queued batches once, without retrying; expired ones are dropped."""
        while not self.retry_queue.is_empty():
            batch = self.retry_queue.pop()
            if time.monotonic() > batch.expires:
                log.error("Oldest batch in retry queue expired, discarding")
                continue
            try:
                self.write_batch(batch)
            except HttpError as exc:
                log.error("Error flushing batch from retry queue: %s", exc)