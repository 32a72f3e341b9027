"""
Seekable in-memory response body.
"""
import io
from typing import AsyncIterator

import httpx


class SnapshotBuffer(httpx.AsyncByteStream):
    """
    In-memory body that can be read, rewound and read again.

    Used as the stream of a response that has been buffered for storage, so
    the response handed back to the caller is still unread.
    """

    def __init__(self, content: bytes = b"", chunk_size: int = 64 * 1024) -> None:
        self._buffer = io.BytesIO(content)
        self._chunk_size = chunk_size

    @classmethod
    async def from_response(cls, response: httpx.Response) -> "SnapshotBuffer":
        """Read a response body fully into a new buffer."""
        return cls(await response.aread())

    def getvalue(self) -> bytes:
        """Whole content, independent of the cursor."""
        return self._buffer.getvalue()

    def read(self) -> bytes:
        """Read from the cursor to the end."""
        return self._buffer.read()

    def rewind(self) -> None:
        """Move the cursor back to the start."""
        self._buffer.seek(0)

    def tell(self) -> int:
        return self._buffer.tell()

    @property
    def size(self) -> int:
        """Total content length in bytes."""
        with self._buffer.getbuffer() as view:
            return view.nbytes

    async def __aiter__(self) -> AsyncIterator[bytes]:
        while True:
            chunk = self._buffer.read(self._chunk_size)
            if not chunk:
                break
            yield chunk

    async def aclose(self) -> None:
        self.rewind()
