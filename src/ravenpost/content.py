"""Request bodies handed to httpx, with optional streaming compression."""

from __future__ import annotations

import zlib
from collections.abc import AsyncIterator, Iterator
from typing import BinaryIO

CHUNK_SIZE = 64 * 1024

# zlib wbits per Content-Encoding: 16+ selects the gzip container, plain 15 the zlib one
SUPPORTED_ENCODINGS = {"gzip": 16 + zlib.MAX_WBITS, "deflate": zlib.MAX_WBITS}


class StringContent:
    """UTF-8 encoded text body with its content headers."""

    def __init__(self, text: str, media_type: str = "text/plain", charset: str = "utf-8"):
        self._data: bytes | None = text.encode(charset)
        self.headers: dict[str, str] = {"Content-Type": f"{media_type}; charset={charset}"}

    @property
    def closed(self) -> bool:
        return self._data is None

    @property
    def content_length(self) -> int | None:
        return len(self.read())

    def read(self) -> bytes:
        if self._data is None:
            raise ValueError("content is closed")
        return self._data

    def iter_bytes(self, chunk_size: int = CHUNK_SIZE) -> Iterator[bytes]:
        data = self.read()
        for i in range(0, len(data), chunk_size):
            yield data[i : i + chunk_size]

    def close(self) -> None:
        self._data = None

    async def aclose(self) -> None:
        self.close()

    def __enter__(self) -> "StringContent":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()


class CompressedContent:
    """Wraps another body and compresses it with gzip or deflate while it streams.

    The compressed length is not known up front, so `content_length` is None and
    httpx sends the body with chunked transfer encoding.
    """

    def __init__(self, content: StringContent, encoding: str):
        if content is None:
            raise ValueError("content must not be None")
        if encoding is None:
            raise ValueError("encoding must not be None")

        self.encoding = encoding.lower()
        if self.encoding not in SUPPORTED_ENCODINGS:
            raise ValueError(
                f"Encoding '{self.encoding}' is not supported. Only supports gzip or deflate encoding."
            )

        self._original = content
        self._closed = False
        self.headers: dict[str, str] = dict(content.headers)
        self.headers["Content-Encoding"] = self.encoding

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def content_length(self) -> int | None:
        return None

    def iter_compressed(self) -> Iterator[bytes]:
        if self._closed:
            raise ValueError("content is closed")
        compressor = zlib.compressobj(wbits=SUPPORTED_ENCODINGS[self.encoding])
        for chunk in self._original.iter_bytes():
            out = compressor.compress(chunk)
            if out:
                yield out
        # must run before the body counts as written, or the stream is truncated
        tail = compressor.flush()
        if tail:
            yield tail

    def write_to(self, sink: BinaryIO) -> None:
        """Write the compressed body into `sink`. The sink is left open."""
        for chunk in self.iter_compressed():
            sink.write(chunk)
        sink.flush()

    async def __aiter__(self) -> AsyncIterator[bytes]:
        for chunk in self.iter_compressed():
            yield chunk

    def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        self._original.close()

    async def aclose(self) -> None:
        self.close()

    def __enter__(self) -> "CompressedContent":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()
