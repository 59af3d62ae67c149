"""Request and response types, one pair per raw client operation."""

from __future__ import annotations

from dataclasses import dataclass, field

from .metadata import BucketMetadata, ObjectAccessControl, ObjectMetadata
from .parameters import (
    GenericRequest,
    Generation,
    IfGenerationMatch,
    IfGenerationNotMatch,
    IfMetagenerationMatch,
    IfMetagenerationNotMatch,
    MaxResults,
    Prefix,
    Projection,
    UserProject,
)


# ------------------------------------------------------------------ #
#  Requests                                                           #
# ------------------------------------------------------------------ #


class _BucketRequest:
    """Mixin for requests addressed to a bucket."""

    _bucket_name: str

    @property
    def bucket_name(self) -> str:
        return self._bucket_name


class _ObjectRequest(_BucketRequest):
    """Mixin for requests addressed to an object."""

    _object_name: str

    @property
    def object_name(self) -> str:
        return self._object_name


def _render(request: GenericRequest, **fields: object) -> str:
    body = ", ".join(f"{name}={value}" for name, value in fields.items())
    return f"{type(request).__name__}={{{body}{request.dump_parameters(', ')}}}"


class ListBucketsRequest(GenericRequest[MaxResults | Prefix | UserProject | Projection]):
    """List the buckets of a project, one page at a time."""

    def __init__(self, project_id: str, *parameters: MaxResults | Prefix | UserProject | Projection) -> None:
        self._project_id = project_id
        self.page_token = ""
        super().__init__(*parameters)

    @property
    def project_id(self) -> str:
        return self._project_id

    def __str__(self) -> str:
        return _render(self, project_id=self._project_id, page_token=self.page_token)


class GetBucketMetadataRequest(
    _BucketRequest,
    GenericRequest[IfMetagenerationMatch | IfMetagenerationNotMatch | UserProject | Projection],
):
    def __init__(
        self,
        bucket_name: str,
        *parameters: IfMetagenerationMatch | IfMetagenerationNotMatch | UserProject | Projection,
    ) -> None:
        self._bucket_name = bucket_name
        super().__init__(*parameters)

    def __str__(self) -> str:
        return _render(self, bucket_name=self._bucket_name)


InsertObjectParameter = (
    IfGenerationMatch
    | IfGenerationNotMatch
    | IfMetagenerationMatch
    | IfMetagenerationNotMatch
    | Projection
    | UserProject
)


class InsertObjectMediaRequest(_ObjectRequest, GenericRequest[InsertObjectParameter]):
    """Upload an object in a single request."""

    def __init__(
        self,
        bucket_name: str,
        object_name: str,
        contents: bytes,
        *parameters: InsertObjectParameter,
    ) -> None:
        self._bucket_name = bucket_name
        self._object_name = object_name
        self._contents = contents
        super().__init__(*parameters)

    @property
    def contents(self) -> bytes:
        return self._contents

    def __str__(self) -> str:
        return _render(
            self,
            bucket_name=self._bucket_name,
            object_name=self._object_name,
            contents=f"<{len(self._contents)} bytes>",
        )


ObjectParameter = (
    Generation
    | IfGenerationMatch
    | IfGenerationNotMatch
    | IfMetagenerationMatch
    | IfMetagenerationNotMatch
    | Projection
    | UserProject
)


class GetObjectMetadataRequest(_ObjectRequest, GenericRequest[ObjectParameter]):
    def __init__(self, bucket_name: str, object_name: str, *parameters: ObjectParameter) -> None:
        self._bucket_name = bucket_name
        self._object_name = object_name
        super().__init__(*parameters)

    def __str__(self) -> str:
        return _render(self, bucket_name=self._bucket_name, object_name=self._object_name)


class ListObjectsRequest(_BucketRequest, GenericRequest[MaxResults | Prefix | Projection | UserProject]):
    """List the objects of a bucket, one page at a time."""

    def __init__(self, bucket_name: str, *parameters: MaxResults | Prefix | Projection | UserProject) -> None:
        self._bucket_name = bucket_name
        self.page_token = ""
        super().__init__(*parameters)

    def __str__(self) -> str:
        return _render(self, bucket_name=self._bucket_name, page_token=self.page_token)


ReadObjectParameter = (
    Generation
    | IfGenerationMatch
    | IfGenerationNotMatch
    | IfMetagenerationMatch
    | IfMetagenerationNotMatch
    | UserProject
)


class ReadObjectRangeRequest(_ObjectRequest, GenericRequest[ReadObjectParameter]):
    """Read the bytes ``[begin, end)`` of an object."""

    def __init__(
        self,
        bucket_name: str,
        object_name: str,
        begin: int,
        end: int,
        *parameters: ReadObjectParameter,
    ) -> None:
        if begin < 0 or end < begin:
            raise ValueError(f"Invalid byte range [{begin}, {end})")
        self._bucket_name = bucket_name
        self._object_name = object_name
        self._begin = begin
        self._end = end
        super().__init__(*parameters)

    @property
    def begin(self) -> int:
        return self._begin

    @property
    def end(self) -> int:
        return self._end

    def __str__(self) -> str:
        return _render(
            self,
            bucket_name=self._bucket_name,
            object_name=self._object_name,
            begin=self._begin,
            end=self._end,
        )


DeleteObjectParameter = ReadObjectParameter


class DeleteObjectRequest(_ObjectRequest, GenericRequest[DeleteObjectParameter]):
    def __init__(self, bucket_name: str, object_name: str, *parameters: DeleteObjectParameter) -> None:
        self._bucket_name = bucket_name
        self._object_name = object_name
        super().__init__(*parameters)

    def __str__(self) -> str:
        return _render(self, bucket_name=self._bucket_name, object_name=self._object_name)


class ListObjectAclRequest(_ObjectRequest, GenericRequest[Generation | UserProject]):
    def __init__(self, bucket_name: str, object_name: str, *parameters: Generation | UserProject) -> None:
        self._bucket_name = bucket_name
        self._object_name = object_name
        super().__init__(*parameters)

    def __str__(self) -> str:
        return _render(self, bucket_name=self._bucket_name, object_name=self._object_name)


# ------------------------------------------------------------------ #
#  Responses                                                          #
# ------------------------------------------------------------------ #


@dataclass(frozen=True)
class EmptyResponse:
    """Acknowledgment for operations without a payload."""


@dataclass(frozen=True)
class ListBucketsResponse:
    items: list[BucketMetadata] = field(default_factory=list)
    next_page_token: str = ""


@dataclass(frozen=True)
class ListObjectsResponse:
    items: list[ObjectMetadata] = field(default_factory=list)
    next_page_token: str = ""


@dataclass(frozen=True)
class ReadObjectRangeResponse:
    """A chunk of object data.

    ``first_byte`` and ``last_byte`` are inclusive offsets of ``contents``
    within the object; ``object_size`` is ``None`` when the service did not
    report it.
    """

    contents: bytes = b""
    first_byte: int = 0
    last_byte: int = 0
    object_size: int | None = None

    def __repr__(self) -> str:
        return (
            f"ReadObjectRangeResponse(contents=<{len(self.contents)} bytes>, "
            f"first_byte={self.first_byte}, last_byte={self.last_byte}, "
            f"object_size={self.object_size})"
        )


@dataclass(frozen=True)
class ListObjectAclResponse:
    items: list[ObjectAccessControl] = field(default_factory=list)
