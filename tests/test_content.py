import gzip
import io
import zlib

import pytest

from ravenpost.content import CompressedContent, StringContent

PAYLOAD = '{"message": "' + "lorem ipsum " * 5000 + '"}'


def test_string_content_headers_and_length():
    content = StringContent("héllo", media_type="application/json")
    assert content.headers == {"Content-Type": "application/json; charset=utf-8"}
    assert content.content_length == len("héllo".encode("utf-8"))
    assert b"".join(content.iter_bytes(chunk_size=2)) == "héllo".encode("utf-8")


def test_gzip_output_decompresses_to_original():
    content = CompressedContent(StringContent(PAYLOAD), "gzip")
    data = b"".join(content.iter_compressed())
    assert gzip.decompress(data) == PAYLOAD.encode("utf-8")
    assert len(data) < len(PAYLOAD)


def test_deflate_output_decompresses_to_original():
    content = CompressedContent(StringContent(PAYLOAD), "deflate")
    data = b"".join(content.iter_compressed())
    assert zlib.decompress(data) == PAYLOAD.encode("utf-8")


def test_encoding_is_case_insensitive():
    content = CompressedContent(StringContent("x"), "GZip")
    assert content.encoding == "gzip"
    assert content.headers["Content-Encoding"] == "gzip"


def test_headers_are_original_plus_content_encoding():
    original = StringContent("x", media_type="application/json")
    original.headers["X-Custom"] = "1"
    content = CompressedContent(original, "deflate")
    assert content.headers == {
        "Content-Type": "application/json; charset=utf-8",
        "X-Custom": "1",
        "Content-Encoding": "deflate",
    }
    assert "Content-Encoding" not in original.headers


def test_length_is_unknown():
    assert CompressedContent(StringContent("x"), "gzip").content_length is None


@pytest.mark.parametrize("encoding", ["brotli", "br", "", "identity"])
def test_unsupported_encoding_fails_at_construction(encoding):
    with pytest.raises(ValueError, match="not supported"):
        CompressedContent(StringContent("x"), encoding)


def test_missing_arguments_fail_at_construction():
    with pytest.raises(ValueError):
        CompressedContent(None, "gzip")
    with pytest.raises(ValueError):
        CompressedContent(StringContent("x"), None)


def test_write_to_leaves_sink_open():
    sink = io.BytesIO()
    CompressedContent(StringContent(PAYLOAD), "gzip").write_to(sink)
    assert not sink.closed
    sink.write(b"")
    assert gzip.decompress(sink.getvalue()) == PAYLOAD.encode("utf-8")


@pytest.mark.asyncio
async def test_async_iteration_streams_compressed_bytes():
    content = CompressedContent(StringContent(PAYLOAD), "gzip")
    chunks = [chunk async for chunk in content]
    assert gzip.decompress(b"".join(chunks)) == PAYLOAD.encode("utf-8")


def test_close_releases_original_once():
    original = StringContent("x")
    calls = []
    real_close = original.close
    original.close = lambda: (calls.append(1), real_close())

    content = CompressedContent(original, "gzip")
    with content:
        pass
    content.close()

    assert calls == [1]
    assert content.closed
    assert original.closed
    with pytest.raises(ValueError):
        list(content.iter_compressed())
