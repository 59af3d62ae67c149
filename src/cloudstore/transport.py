"""Raw client backed by a boto3 S3 client.

The storage service exposes an S3-compatible interoperability API.  This
transport turns each request into the matching boto3 call and every failure
into a :class:`~cloudstore.status.Status`; it never raises for service or
network errors.
"""

from __future__ import annotations

import re
from typing import TYPE_CHECKING, Any

from botocore.exceptions import (
    ClientError,
    ConnectionError as BotoConnectionError,
    ConnectTimeoutError,
    HTTPClientError,
    IncompleteReadError,
    NoCredentialsError,
    ReadTimeoutError,
    ResponseStreamingError,
)

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
from .metadata import BucketMetadata, ObjectAccessControl, ObjectMetadata
from .parameters import GenericRequest, Generation, MaxResults, Prefix, Projection, RequestParameter
from .raw_client import RawClient
from .status import Status, StatusCode

if TYPE_CHECKING:
    from botocore.client import BaseClient

    from .settings import ClientOptions


# Parameter kind -> boto3 keyword argument; ``None`` means accepted but not sent
_ParameterMap = dict[type[RequestParameter[Any]], str | None]

_BUCKET_PARAMETERS: _ParameterMap = {Projection: None}
_LIST_BUCKETS_PARAMETERS: _ParameterMap = {MaxResults: "MaxBuckets", Prefix: "Prefix", Projection: None}
_LIST_OBJECTS_PARAMETERS: _ParameterMap = {MaxResults: "MaxKeys", Prefix: "Prefix", Projection: None}
_OBJECT_PARAMETERS: _ParameterMap = {Generation: "VersionId", Projection: None}

_ERROR_CODES: dict[str, StatusCode] = {
    "NoSuchBucket": StatusCode.NOT_FOUND,
    "NoSuchKey": StatusCode.NOT_FOUND,
    "NoSuchVersion": StatusCode.NOT_FOUND,
    "NotFound": StatusCode.NOT_FOUND,
    "AccessDenied": StatusCode.PERMISSION_DENIED,
    "Forbidden": StatusCode.PERMISSION_DENIED,
    "InvalidAccessKeyId": StatusCode.UNAUTHENTICATED,
    "SignatureDoesNotMatch": StatusCode.UNAUTHENTICATED,
    "ExpiredToken": StatusCode.UNAUTHENTICATED,
    "InvalidArgument": StatusCode.INVALID_ARGUMENT,
    "InvalidBucketName": StatusCode.INVALID_ARGUMENT,
    "BucketAlreadyExists": StatusCode.ALREADY_EXISTS,
    "BucketAlreadyOwnedByYou": StatusCode.ALREADY_EXISTS,
    "PreconditionFailed": StatusCode.FAILED_PRECONDITION,
    "InvalidRange": StatusCode.OUT_OF_RANGE,
    "SlowDown": StatusCode.RESOURCE_EXHAUSTED,
    "Throttling": StatusCode.RESOURCE_EXHAUSTED,
    "RequestLimitExceeded": StatusCode.RESOURCE_EXHAUSTED,
    "RequestTimeout": StatusCode.DEADLINE_EXCEEDED,
    "ServiceUnavailable": StatusCode.UNAVAILABLE,
    "InternalError": StatusCode.INTERNAL,
}

_ACL_ROLES = {"FULL_CONTROL": "OWNER", "WRITE": "WRITER", "READ": "READER"}

_CONTENT_RANGE = re.compile(r"bytes (\d+)-(\d+)/(\d+|\*)")


def status_from_exception(error: Exception) -> Status:
    """Classify a boto3 / botocore exception into a :class:`Status`.

    Parameters
    ----------
    error : Exception
        Exception raised by the boto3 client.

    Returns
    -------
    Status
    """
    if isinstance(error, ClientError):
        details = error.response.get("Error", {})
        code = str(details.get("Code", ""))
        message = str(details.get("Message") or error)
        if code in _ERROR_CODES:
            return Status(_ERROR_CODES[code], message)
        http_status = error.response.get("ResponseMetadata", {}).get("HTTPStatusCode")
        if not http_status and code.isdigit():
            http_status = int(code)
        if http_status:
            return Status.from_http_status(int(http_status), message)
        return Status(StatusCode.UNKNOWN, message)
    if isinstance(error, (ConnectTimeoutError, ReadTimeoutError)):
        return Status(StatusCode.DEADLINE_EXCEEDED, str(error))
    if isinstance(error, (BotoConnectionError, HTTPClientError, IncompleteReadError)):
        return Status(StatusCode.UNAVAILABLE, str(error))
    if isinstance(error, NoCredentialsError):
        return Status(StatusCode.UNAUTHENTICATED, str(error))
    return Status(StatusCode.UNKNOWN, str(error))


def _strip_etag(etag: str | None) -> str:
    return (etag or "").strip('"')


def _generation(version_id: str | None) -> int:
    if version_id and version_id.isdigit():
        return int(version_id)
    return 0


def _entity(grantee: dict[str, Any]) -> str:
    grantee_type = grantee.get("Type", "")
    if grantee_type == "Group":
        uri = grantee.get("URI", "")
        if uri.endswith("/AllUsers"):
            return "allUsers"
        if uri.endswith("/AuthenticatedUsers"):
            return "allAuthenticatedUsers"
        return f"group-{uri}"
    if grantee_type == "AmazonCustomerByEmail":
        return f"user-{grantee.get('EmailAddress', '')}"
    return f"user-{grantee.get('ID', '')}"


class Boto3RawClient(RawClient):
    """A :class:`RawClient` over a boto3 S3 client.

    Parameters
    ----------
    s3_client : BaseClient
        Boto3 S3 client.  It may be shared with other chains and threads.
    options : ClientOptions
        Options this transport was created from.
    """

    def __init__(self, s3_client: BaseClient, options: ClientOptions) -> None:
        self.s3_client = s3_client
        self._options = options

    @property
    def client_options(self) -> ClientOptions:
        return self._options

    # ------------------------------------------------------------------ #
    #  Helpers                                                            #
    # ------------------------------------------------------------------ #

    def _invoke(
        self,
        operation: str,
        request: GenericRequest[Any],
        parameters: _ParameterMap,
        **kwargs: Any,
    ) -> tuple[Status, dict[str, Any]]:
        """Call *operation* on the boto3 client.

        Returns the status and the raw response; on failure the second
        element is the error response (possibly empty).
        """
        for parameter in request.iter_parameters():
            kind = type(parameter)
            if kind not in parameters:
                return Status(
                    StatusCode.UNIMPLEMENTED,
                    f"{parameter.name} is not supported by the S3 transport",
                ), {}
            argument = parameters[kind]
            if argument is not None:
                kwargs[argument] = str(parameter.value) if kind is Generation else parameter.value
        try:
            return Status(), getattr(self.s3_client, operation)(**kwargs)
        except ClientError as e:
            return status_from_exception(e), e.response
        except (BotoConnectionError, HTTPClientError, NoCredentialsError) as e:
            return status_from_exception(e), {}

    def _object_metadata(self, bucket: str, name: str, raw: dict[str, Any]) -> ObjectMetadata:
        return ObjectMetadata(
            kind="storage#object",
            id=f"{bucket}/{name}",
            bucket=bucket,
            name=name,
            generation=_generation(raw.get("VersionId")),
            size=raw.get("ContentLength", raw.get("Size", 0)),
            content_type=raw.get("ContentType", ""),
            content_encoding=raw.get("ContentEncoding", ""),
            etag=_strip_etag(raw.get("ETag")),
            storage_class=raw.get("StorageClass", ""),
            updated=raw.get("LastModified"),
            metadata=raw.get("Metadata", {}),
        )

    # ------------------------------------------------------------------ #
    #  Buckets                                                            #
    # ------------------------------------------------------------------ #

    def list_buckets(self, request: ListBucketsRequest) -> tuple[Status, ListBucketsResponse]:
        kwargs: dict[str, Any] = {}
        if request.page_token:
            kwargs["ContinuationToken"] = request.page_token
        status, raw = self._invoke("list_buckets", request, _LIST_BUCKETS_PARAMETERS, **kwargs)
        if not status.ok:
            return status, ListBucketsResponse()
        items = [
            BucketMetadata(
                kind="storage#bucket",
                id=bucket["Name"],
                name=bucket["Name"],
                location=bucket.get("BucketRegion", ""),
                time_created=bucket.get("CreationDate"),
            )
            for bucket in raw.get("Buckets", [])
        ]
        return status, ListBucketsResponse(items, raw.get("ContinuationToken", ""))

    def get_bucket_metadata(self, request: GetBucketMetadataRequest) -> tuple[Status, BucketMetadata]:
        status, raw = self._invoke("head_bucket", request, _BUCKET_PARAMETERS, Bucket=request.bucket_name)
        if not status.ok:
            return status, BucketMetadata()
        return status, BucketMetadata(
            kind="storage#bucket",
            id=request.bucket_name,
            name=request.bucket_name,
            location=raw.get("BucketRegion", ""),
        )

    # ------------------------------------------------------------------ #
    #  Objects                                                            #
    # ------------------------------------------------------------------ #

    def insert_object_media(self, request: InsertObjectMediaRequest) -> tuple[Status, ObjectMetadata]:
        status, raw = self._invoke(
            "put_object",
            request,
            _OBJECT_PARAMETERS,
            Bucket=request.bucket_name,
            Key=request.object_name,
            Body=request.contents,
        )
        if not status.ok:
            return status, ObjectMetadata()
        metadata = self._object_metadata(request.bucket_name, request.object_name, raw)
        return status, metadata.model_copy(update={"size": len(request.contents)})

    def get_object_metadata(self, request: GetObjectMetadataRequest) -> tuple[Status, ObjectMetadata]:
        status, raw = self._invoke(
            "head_object",
            request,
            _OBJECT_PARAMETERS,
            Bucket=request.bucket_name,
            Key=request.object_name,
        )
        if not status.ok:
            return status, ObjectMetadata()
        return status, self._object_metadata(request.bucket_name, request.object_name, raw)

    def read_object_range_media(
        self, request: ReadObjectRangeRequest
    ) -> tuple[Status, ReadObjectRangeResponse]:
        if request.end == request.begin:
            return Status(), ReadObjectRangeResponse(b"", request.begin, request.begin)
        status, raw = self._invoke(
            "get_object",
            request,
            _OBJECT_PARAMETERS,
            Bucket=request.bucket_name,
            Key=request.object_name,
            Range=f"bytes={request.begin}-{request.end - 1}",
        )
        if status.code is StatusCode.OUT_OF_RANGE:
            actual_size = raw.get("Error", {}).get("ActualObjectSize")
            if actual_size is not None and request.begin >= int(actual_size):
                # Reading at or past the end yields no data
                return Status(), ReadObjectRangeResponse(
                    b"", request.begin, request.begin, int(actual_size)
                )
        if not status.ok:
            return status, ReadObjectRangeResponse()
        body = raw["Body"]
        try:
            contents = body.read()
        except (BotoConnectionError, HTTPClientError, IncompleteReadError, ResponseStreamingError) as e:
            return status_from_exception(e), ReadObjectRangeResponse()
        finally:
            body.close()
        first_byte = request.begin
        last_byte = request.begin + len(contents) - 1
        object_size = None
        match = _CONTENT_RANGE.match(raw.get("ContentRange", ""))
        if match:
            first_byte, last_byte = int(match.group(1)), int(match.group(2))
            if match.group(3) != "*":
                object_size = int(match.group(3))
        return status, ReadObjectRangeResponse(contents, first_byte, last_byte, object_size)

    def list_objects(self, request: ListObjectsRequest) -> tuple[Status, ListObjectsResponse]:
        kwargs: dict[str, Any] = {"Bucket": request.bucket_name}
        if request.page_token:
            kwargs["ContinuationToken"] = request.page_token
        status, raw = self._invoke("list_objects_v2", request, _LIST_OBJECTS_PARAMETERS, **kwargs)
        if not status.ok:
            return status, ListObjectsResponse()
        items = [
            self._object_metadata(request.bucket_name, entry["Key"], entry)
            for entry in raw.get("Contents", [])
        ]
        return status, ListObjectsResponse(items, raw.get("NextContinuationToken", ""))

    def delete_object(self, request: DeleteObjectRequest) -> tuple[Status, EmptyResponse]:
        status, _ = self._invoke(
            "delete_object",
            request,
            _OBJECT_PARAMETERS,
            Bucket=request.bucket_name,
            Key=request.object_name,
        )
        return status, EmptyResponse()

    def list_object_acl(self, request: ListObjectAclRequest) -> tuple[Status, ListObjectAclResponse]:
        status, raw = self._invoke(
            "get_object_acl",
            request,
            _OBJECT_PARAMETERS,
            Bucket=request.bucket_name,
            Key=request.object_name,
        )
        if not status.ok:
            return status, ListObjectAclResponse()
        generation = request.get_parameter(Generation).value or 0
        items = []
        for grant in raw.get("Grants", []):
            grantee = grant.get("Grantee", {})
            permission = grant.get("Permission", "")
            items.append(
                ObjectAccessControl(
                    kind="storage#objectAccessControl",
                    bucket=request.bucket_name,
                    object=request.object_name,
                    generation=generation,
                    entity=_entity(grantee),
                    entity_id=grantee.get("ID", ""),
                    email=grantee.get("EmailAddress", ""),
                    role=_ACL_ROLES.get(permission, permission),
                )
            )
        return status, ListObjectAclResponse(items)
