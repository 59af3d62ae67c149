"""cloudstore - typed client pipeline for a cloud object-storage service."""

from __future__ import annotations

from .backoff_policy import BackoffPolicy, ExponentialBackoffPolicy
from .client import Client
from .exceptions import (
    CloudStoreError,
    PermanentError,
    RetryPolicyExhaustedError,
    StatusError,
    UndeclaredParameterError,
    raise_for_status,
)
from .logging_client import LoggingClient
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
    RequestParameter,
    UserProject,
)
from .raw_client import RawClient
from .readers import ListObjectsReader, ObjectReadStream
from .retry_client import RetryClient
from .retry_policy import LimitedErrorCountRetryPolicy, LimitedTimeRetryPolicy, RetryPolicy
from .settings import ClientOptions, Credentials, create_insecure_credentials
from .status import Status, StatusCode, StatusKind
from .transport import Boto3RawClient

__all__ = [
    # Main classes
    "Client",
    "ClientOptions",
    "Credentials",
    "create_insecure_credentials",
    # Raw client pipeline
    "RawClient",
    "LoggingClient",
    "RetryClient",
    "Boto3RawClient",
    # Policies
    "RetryPolicy",
    "LimitedErrorCountRetryPolicy",
    "LimitedTimeRetryPolicy",
    "BackoffPolicy",
    "ExponentialBackoffPolicy",
    # Readers
    "ListObjectsReader",
    "ObjectReadStream",
    # Status
    "Status",
    "StatusCode",
    "StatusKind",
    # Parameters
    "RequestParameter",
    "GenericRequest",
    "Generation",
    "IfGenerationMatch",
    "IfGenerationNotMatch",
    "IfMetagenerationMatch",
    "IfMetagenerationNotMatch",
    "MaxResults",
    "Prefix",
    "Projection",
    "UserProject",
    # Requests and responses
    "ListBucketsRequest",
    "ListBucketsResponse",
    "GetBucketMetadataRequest",
    "InsertObjectMediaRequest",
    "GetObjectMetadataRequest",
    "ListObjectsRequest",
    "ListObjectsResponse",
    "ReadObjectRangeRequest",
    "ReadObjectRangeResponse",
    "DeleteObjectRequest",
    "EmptyResponse",
    "ListObjectAclRequest",
    "ListObjectAclResponse",
    # Metadata
    "BucketMetadata",
    "ObjectMetadata",
    "ObjectAccessControl",
    # Exceptions
    "CloudStoreError",
    "UndeclaredParameterError",
    "StatusError",
    "PermanentError",
    "RetryPolicyExhaustedError",
    "raise_for_status",
]
