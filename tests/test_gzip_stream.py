import gzip
import io

from influxwriter.gzip_stream import compress_with_gzip

TEXT = (
    "Lorem ipsum dolor sit amet, consectetur adipiscing elit, sed do eiusmod "
    "tempor incididunt ut labore et dolore magna aliqua. Ut enim ad minim veniam, "
    "quis nostrud exercitation ullamco laboris nisi ut aliquip ex ea commodo "
    "consequat. Duis aute irure dolor in reprehenderit in voluptate velit esse "
    "cillum dolore eu fugiat nulla pariatur. Excepteur sint occaecat cupidatat non "
    "proident, sunt in culpa qui officia deserunt mollit anim id est laborum."
)


def test_gzip_round_trip_from_buffer():
    stream = compress_with_gzip(io.BytesIO(TEXT.encode()))
    with gzip.GzipFile(fileobj=stream) as reader:
        assert reader.read().decode() == TEXT


def test_gzip_from_text_has_header():
    data = compress_with_gzip(TEXT).read()
    assert data[:2] == b"\x1f\x8b"
    assert gzip.decompress(data).decode() == TEXT


def test_gzip_large_input_read_in_pieces():
    payload = b"line,a=1 f=1.0\n" * 20000
    stream = compress_with_gzip(payload)
    parts = []
    while part := stream.read(1000):
        parts.append(part)
    assert gzip.decompress(b"".join(parts)) == payload


def test_gzip_empty_input():
    assert gzip.decompress(compress_with_gzip(b"").read()) == b""


def test_gzip_text_stream_input():
    assert gzip.decompress(compress_with_gzip(io.StringIO("abc")).read()) == b"abc"