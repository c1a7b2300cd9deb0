import ssl

from influxwriter.logger import LogLevel
from influxwriter.options import (
    MILLISECOND,
    NANOSECOND,
    Consistency,
    Options,
    default_options,
    user_agent,
)


def test_default_options():
    opts = default_options()
    assert opts.batch_size == 5_000
    assert opts.use_gzip is False
    assert opts.flush_interval == 1_000
    assert opts.precision == NANOSECOND
    assert opts.retry_buffer_limit == 50_000
    assert opts.retry_interval == 5_000
    assert opts.max_retries == 5
    assert opts.max_retry_interval == 125_000
    assert opts.max_retry_time == 180_000
    assert opts.exponential_base == 2
    assert opts.tls_context is None
    assert opts.http_request_timeout == 20
    assert opts.log_level == 0
    assert opts.consistency is None
    assert opts.default_tags == {}


def test_settings_options():
    context = ssl.create_default_context()
    opts = Options(
        batch_size=5,
        use_gzip=True,
        flush_interval=5_000,
        precision=MILLISECOND,
        retry_buffer_limit=5,
        retry_interval=1_000,
        max_retry_interval=10_000,
        max_retries=7,
        max_retry_time=500_000,
        exponential_base=5,
        tls_context=context,
        http_request_timeout=50,
        log_level=LogLevel.DEBUG,
        consistency=Consistency.QUORUM,
    )
    opts.add_default_tag("t", "a")
    assert opts.batch_size == 5
    assert opts.use_gzip is True
    assert opts.flush_interval == 5_000
    assert opts.precision == MILLISECOND
    assert opts.retry_buffer_limit == 5
    assert opts.retry_interval == 1_000
    assert opts.max_retry_interval == 10_000
    assert opts.max_retries == 7
    assert opts.max_retry_time == 500_000
    assert opts.exponential_base == 5
    assert opts.tls_context is context
    assert opts.http_request_timeout == 50
    assert opts.log_level == 3
    assert opts.consistency.value == "quorum"
    assert opts.default_tags == {"t": "a"}


def test_default_tag_overwrite_and_isolation():
    opts = default_options()
    opts.add_default_tag("k", "1")
    opts.add_default_tag("k", "2")
    assert opts.default_tags == {"k": "2"}
    assert default_options().default_tags == {}


def test_user_agent():
    agent = user_agent()
    assert agent.startswith("influxwriter/2.10.0  (")
    assert agent.endswith(")")