"""Raw client decorator that logs every request and its result."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Callable, TypeVar

from .raw_client import RawClient

if TYPE_CHECKING:
    from .messages import (
        DeleteObjectRequest,
        EmptyResponse,
        GetBucketMetadataRequest,
        GetObjectMetadataRequest,
        InsertObjectMediaRequest,
        ListBucketsRequest,
        ListBucketsResponse,
        ListObjectAclRequest,
        ListObjectAclResponse,
        ListObjectsRequest,
        ListObjectsResponse,
        ReadObjectRangeRequest,
        ReadObjectRangeResponse,
    )
    from .metadata import BucketMetadata, ObjectMetadata
    from .settings import ClientOptions
    from .status import Status

logger = logging.getLogger(__name__)

RequestT = TypeVar("RequestT")
ResponseT = TypeVar("ResponseT")


class LoggingClient(RawClient):
    """Log the input and the result of each call to the wrapped client.

    Status and response are passed through untouched.  Wrap this client
    inside a :class:`~cloudstore.retry_client.RetryClient` to get one log
    record pair per attempt.
    """

    def __init__(self, client: RawClient) -> None:
        self._client = client

    def _make_call(
        self,
        function: Callable[[RequestT], tuple[Status, ResponseT]],
        request: RequestT,
        context: str,
    ) -> tuple[Status, ResponseT]:
        logger.info("%s << %s", context, request)
        status, response = function(request)
        logger.info("%s >> status={%s}, payload={%s}", context, status, response)
        return status, response

    @property
    def client_options(self) -> ClientOptions:
        return self._client.client_options

    def list_buckets(self, request: ListBucketsRequest) -> tuple[Status, ListBucketsResponse]:
        return self._make_call(self._client.list_buckets, request, "list_buckets")

    def get_bucket_metadata(self, request: GetBucketMetadataRequest) -> tuple[Status, BucketMetadata]:
        return self._make_call(self._client.get_bucket_metadata, request, "get_bucket_metadata")

    def insert_object_media(self, request: InsertObjectMediaRequest) -> tuple[Status, ObjectMetadata]:
        return self._make_call(self._client.insert_object_media, request, "insert_object_media")

    def get_object_metadata(self, request: GetObjectMetadataRequest) -> tuple[Status, ObjectMetadata]:
        return self._make_call(self._client.get_object_metadata, request, "get_object_metadata")

    def read_object_range_media(
        self, request: ReadObjectRangeRequest
    ) -> tuple[Status, ReadObjectRangeResponse]:
        return self._make_call(self._client.read_object_range_media, request, "read_object_range_media")

    def list_objects(self, request: ListObjectsRequest) -> tuple[Status, ListObjectsResponse]:
        return self._make_call(self._client.list_objects, request, "list_objects")

    def delete_object(self, request: DeleteObjectRequest) -> tuple[Status, EmptyResponse]:
        return self._make_call(self._client.delete_object, request, "delete_object")

    def list_object_acl(self, request: ListObjectAclRequest) -> tuple[Status, ListObjectAclResponse]:
        return self._make_call(self._client.list_object_acl, request, "list_object_acl")
