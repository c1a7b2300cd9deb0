# influxwriter

The write path of an InfluxDB 2 client: batches of line protocol are
posted through a transport you supply, and batches that fail are kept
in a bounded retry queue and retried with exponential back-off.

## Installation

```
pip install influxwriter
```

To run the tests:

```
pip install "influxwriter[test]"
pytest
```

## Modules

- `influxwriter.options` – `Options` (a dataclass) and
  `default_options()` hold the settings; `Options.add_default_tag(key,
  value)` stores a tag in `default_tags`, replacing one with the same
  key. `Consistency` lists the consistency levels `one`, `all`, `any`
  and `quorum`. `user_agent()` returns
  `influxwriter/2.10.0  (<platform>; <machine>)`. The constants
  `NANOSECOND`, `MICROSECOND`, `MILLISECOND` and `SECOND` express
  precisions in nanoseconds.
- `influxwriter.queue` – `Batch` holds the data, the number of retry
  attempts, an `evicted` flag and an expiry time (`time.monotonic()`
  seconds). `new_batch(data, expire_delay_ms)` creates one expiring after
  the given delay. `RetryQueue(limit)` is a FIFO: `push()` returns `True`
  when the queue was full and its oldest batch was dropped; `pop()`
  removes the oldest batch and marks it evicted; `first()` and
  `is_empty()` inspect it; `len()` gives its size.
- `influxwriter.write_service` – `WriteService` sends batches and
  retries failed ones. `HttpError` describes a failed request;
  `is_ignorable_error()` recognises replies that retrying cannot fix
  (messages containing "hinted handoff queue not empty", "points beyond
  retention policy", "partial write" or "unable to parse");
  `precision_to_string()` maps a precision to `us`, `ms`, `s`, or `ns`
  for anything else.
- `influxwriter.gzip_stream` – `compress_with_gzip(data)` takes text,
  bytes or a readable file and returns a binary stream of gzip data,
  compressed lazily as it is read.
- `influxwriter.logger` – the library-wide logger.

## Options

```python
from influxwriter.options import MILLISECOND, default_options

options = default_options()
options.precision = MILLISECOND
options.use_gzip = True
options.add_default_tag("region", "eu-west")
```

Defaults: `batch_size` 5,000, `flush_interval` 1,000 ms,
`retry_interval` 5,000 ms, `max_retries` 5, `retry_buffer_limit`
50,000, `max_retry_interval` 125,000 ms, `max_retry_time` 180,000 ms,
`exponential_base` 2, `precision` nanoseconds, `use_gzip` off,
`consistency` none, `tls_context` none, `http_request_timeout` 20 s,
`log_level` error.

## Writing

`WriteService(org, bucket, http_service, options)` needs a transport
object with a `server_api_url` attribute and a method
`post(url, body, headers)` that raises `HttpError` when the request
fails. Any `OSError` it raises is turned into an `HttpError`.

```python
import urllib.error
import urllib.request

from influxwriter.options import default_options
from influxwriter.queue import new_batch
from influxwriter.write_service import HttpError, WriteService


class UrllibTransport:
    def __init__(self, server_api_url, token):
        self.server_api_url = server_api_url
        self._token = token

    def post(self, url, body, headers):
        request = urllib.request.Request(
            url,
            data=body.read(),
            method="POST",
            headers={**headers, "Authorization": f"Token {self._token}"},
        )
        try:
            with urllib.request.urlopen(request):
                pass
        except urllib.error.HTTPError as exc:
            raise HttpError(status_code=exc.code, message=exc.read().decode()) from exc


options = default_options()
transport = UrllibTransport("http://localhost:8086/api/v2/", token="token")
service = WriteService("my-org", "my-bucket", transport, options)
print(service.write_url)
# http://localhost:8086/api/v2/write?bucket=my-bucket&org=my-org&precision=ns

service.handle_write(new_batch("cpu,host=a usage=0.5\n", options.max_retry_time))
```

`handle_write(batch, cancel=None)` first sends queued batches, then the
new one. It raises `InterruptedError` if the `threading.Event` passed as
`cancel` is set, `HttpError` if the error callback rejects a failed
batch, and `RuntimeError` (caused by the `HttpError`) for other failed
writes. Ignorable errors are only logged. With gzip enabled the body is
compressed and a `Content-Encoding: gzip` header is sent.

`write_batch(batch)` sends one batch without any retry handling.
`flush()` sends every queued batch once, dropping expired ones and
logging failures.

## Retrying

Retrying is driven by new writes; there is no background scheduler.
The queue holds `retry_buffer_limit // batch_size` batches (at least
one). A connection error (status 0) or a status of 429 or higher keeps
the batch for retrying, unless `max_retries` is 0. The next attempt
waits the server's `retry_after` seconds if given, otherwise
`compute_retry_delay(attempts)`: a random value between
`retry_interval * base**attempts` and
`retry_interval * base**(attempts + 1)`, capped at `max_retry_interval`.
Until that delay has passed, new batches are only queued. A batch is
dropped when it has been retried `max_retries` times or has expired.
`set_batch_error_callback(callback)` installs a function
`callback(batch, error)` that returns `True` to keep retrying the batch
or `False` to drop it.

## Logging

```python
from influxwriter import logger
from influxwriter.logger import Logger, LogLevel

logger.error("disk usage at %d%%", 93)
logger.set_logger(Logger(prefix="myapp", level=LogLevel.DEBUG))
logger.set_logger(None)   # disable all library logging
```

`LogLevel` has `ERROR`, `WARNING`, `INFO` and `DEBUG`; each level also
logs the ones below it, and errors are always written. The default
`Logger` writes lines of the form `<prefix> <E|W|I|D>! <message>` to
`sys.stderr` or the given stream, with the prefix `influxdb2client`.
`set_logger()` accepts any object with `debug`, `info`, `warn` and
`error` methods (a `TypeError` is raised otherwise) and returns the
previous logger; `get_logger()` and `level()` report the current one.

## What this package does not do

- It has no HTTP client: requests go through the transport you pass to
  `WriteService`, so `tls_context`, `http_request_timeout` and
  `user_agent()` only take effect if your transport uses them.
- It does not build line protocol from points; batches carry
  ready-made text, and `default_tags` is stored but not applied.
- It does not group points into batches or flush on a timer;
  `batch_size` only sizes the retry queue and `flush_interval` is only
  stored.
- There is no query, bucket, organization, user, task or delete API, and
  no command-line program.