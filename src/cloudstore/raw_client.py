"""The raw client contract that transports and decorators implement."""

from __future__ import annotations

import abc
from typing import TYPE_CHECKING

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


class RawClient(abc.ABC):
    """One method per storage operation, each returning ``(Status, response)``.

    Implementations report transient and permanent service failures through
    the returned :class:`Status` and only raise for programming errors.  The
    decorators in this package wrap a ``RawClient`` and are themselves
    ``RawClient`` instances, so they can be stacked in any order.
    """

    @property
    @abc.abstractmethod
    def client_options(self) -> ClientOptions: ...

    @abc.abstractmethod
    def list_buckets(self, request: ListBucketsRequest) -> tuple[Status, ListBucketsResponse]: ...

    @abc.abstractmethod
    def get_bucket_metadata(self, request: GetBucketMetadataRequest) -> tuple[Status, BucketMetadata]: ...

    @abc.abstractmethod
    def insert_object_media(self, request: InsertObjectMediaRequest) -> tuple[Status, ObjectMetadata]: ...

    @abc.abstractmethod
    def get_object_metadata(self, request: GetObjectMetadataRequest) -> tuple[Status, ObjectMetadata]: ...

    @abc.abstractmethod
    def read_object_range_media(
        self, request: ReadObjectRangeRequest
    ) -> tuple[Status, ReadObjectRangeResponse]: ...

    @abc.abstractmethod
    def list_objects(self, request: ListObjectsRequest) -> tuple[Status, ListObjectsResponse]: ...

    @abc.abstractmethod
    def delete_object(self, request: DeleteObjectRequest) -> tuple[Status, EmptyResponse]: ...

    @abc.abstractmethod
    def list_object_acl(self, request: ListObjectAclRequest) -> tuple[Status, ListObjectAclResponse]: ...
