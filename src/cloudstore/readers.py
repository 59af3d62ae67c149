"""Lazy readers over paginated listings and ranged object reads."""

from __future__ import annotations

from collections.abc import Iterator
from typing import TYPE_CHECKING

from .exceptions import raise_for_status
from .messages import ListObjectsRequest, ReadObjectRangeRequest

if TYPE_CHECKING:
    from .messages import ReadObjectParameter
    from .metadata import ObjectMetadata
    from .parameters import MaxResults, Prefix, Projection, UserProject
    from .raw_client import RawClient


class ListObjectsReader:
    """Iterate over the objects of a bucket, one page at a time.

    A page is requested only when the previous one has been consumed.  The
    reader is single-pass: once exhausted it stays exhausted; create a new
    reader to list again.
    """

    def __init__(
        self,
        client: RawClient,
        bucket_name: str,
        *parameters: MaxResults | Prefix | Projection | UserProject,
    ) -> None:
        self._client = client
        self._request = ListObjectsRequest(bucket_name, *parameters)
        self._page: list[ObjectMetadata] = []
        self._position = 0
        self._last_page = False

    @property
    def bucket_name(self) -> str:
        return self._request.bucket_name

    def __iter__(self) -> ListObjectsReader:
        return self

    def __next__(self) -> ObjectMetadata:
        while self._position >= len(self._page):
            if self._last_page:
                raise StopIteration
            self._fetch_page()
        item = self._page[self._position]
        self._position += 1
        return item

    def _fetch_page(self) -> None:
        status, response = self._client.list_objects(self._request)
        raise_for_status(status, "list_objects")
        self._page = list(response.items)
        self._position = 0
        self._request.page_token = response.next_page_token
        self._last_page = not response.next_page_token


class ObjectReadStream:
    """File-like, read-only view of an object.

    Data is fetched with sequential ranged reads of at most *chunk_size*
    bytes; nothing is buffered between calls.

    Parameters
    ----------
    client : RawClient
        Client used for the ranged reads.
    bucket_name : str
        Bucket containing the object.
    object_name : str
        Name of the object.
    *parameters : RequestParameter
        Optional parameters applied to every ranged read.
    chunk_size : int
        Maximum number of bytes requested per call.
    """

    def __init__(
        self,
        client: RawClient,
        bucket_name: str,
        object_name: str,
        *parameters: ReadObjectParameter,
        chunk_size: int = 8 * 1024 * 1024,
    ) -> None:
        if chunk_size <= 0:
            raise ValueError("chunk_size must be positive")
        self._client = client
        self._bucket_name = bucket_name
        self._object_name = object_name
        self._parameters = parameters
        self._chunk_size = chunk_size
        self._offset = 0
        self._eof = False
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    def tell(self) -> int:
        """Return the number of bytes read so far."""
        return self._offset

    def _fetch(self, size: int) -> bytes:
        if self._closed:
            raise ValueError("I/O operation on closed stream")
        if self._eof or size == 0:
            return b""
        request = ReadObjectRangeRequest(
            self._bucket_name,
            self._object_name,
            self._offset,
            self._offset + size,
            *self._parameters,
        )
        status, response = self._client.read_object_range_media(request)
        raise_for_status(status, "read_object_range_media")
        contents = response.contents
        self._offset += len(contents)
        if len(contents) < size or (
            response.object_size is not None and self._offset >= response.object_size
        ):
            self._eof = True
        return contents

    def read(self, amt: int | None = None) -> bytes:
        """Read up to *amt* bytes, or the rest of the object when *amt* is None."""
        if amt is not None and amt >= 0:
            data = bytearray()
            while len(data) < amt:
                chunk = self._fetch(min(amt - len(data), self._chunk_size))
                if not chunk:
                    break
                data.extend(chunk)
            return bytes(data)
        return b"".join(self.iter_chunks())

    def iter_chunks(self) -> Iterator[bytes]:
        """Yield the remaining data in chunks of at most *chunk_size* bytes."""
        while True:
            chunk = self._fetch(self._chunk_size)
            if not chunk:
                return
            yield chunk

    def close(self) -> None:
        self._closed = True

    def __enter__(self) -> ObjectReadStream:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()
