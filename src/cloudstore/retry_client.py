"""Raw client decorator that retries transient failures."""

from __future__ import annotations

import logging
import time
from datetime import timedelta
from typing import TYPE_CHECKING, Callable, TypeVar

from .backoff_policy import BackoffPolicy, ExponentialBackoffPolicy
from .exceptions import PermanentError, RetryPolicyExhaustedError
from .raw_client import RawClient
from .retry_policy import LimitedTimeRetryPolicy, RetryPolicy

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

DEFAULT_MAXIMUM_RETRY_PERIOD = timedelta(minutes=15)
DEFAULT_INITIAL_BACKOFF_DELAY = timedelta(milliseconds=10)
DEFAULT_MAXIMUM_BACKOFF_DELAY = timedelta(minutes=5)
DEFAULT_BACKOFF_SCALING = 2.0

RequestT = TypeVar("RequestT")
ResponseT = TypeVar("ResponseT")


class RetryClient(RawClient):
    """Retry the calls to the wrapped client according to a pair of policies.

    Parameters
    ----------
    client : RawClient
        The client to call, typically a transport or a :class:`LoggingClient`.
    *policies : RetryPolicy | BackoffPolicy
        Optional overrides, in any order.  A later policy of the same type
        replaces an earlier one.
    sleep : Callable[[float], None]
        Function used to wait between attempts.

    Every call clones both policies, so concurrent calls never share retry
    state.  A call that ends with a permanent failure, or with the retry
    policy exhausted, raises instead of returning the failed status.
    """

    def __init__(
        self,
        client: RawClient,
        *policies: RetryPolicy | BackoffPolicy,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self._client = client
        self._retry_policy: RetryPolicy = LimitedTimeRetryPolicy(DEFAULT_MAXIMUM_RETRY_PERIOD)
        self._backoff_policy: BackoffPolicy = ExponentialBackoffPolicy(
            DEFAULT_INITIAL_BACKOFF_DELAY,
            DEFAULT_MAXIMUM_BACKOFF_DELAY,
            DEFAULT_BACKOFF_SCALING,
        )
        self._sleep = sleep
        for policy in policies:
            if isinstance(policy, RetryPolicy):
                self._retry_policy = policy
            elif isinstance(policy, BackoffPolicy):
                self._backoff_policy = policy
            else:
                raise TypeError(f"Expected a RetryPolicy or BackoffPolicy, got {type(policy).__name__}")

    @property
    def retry_policy(self) -> RetryPolicy:
        return self._retry_policy

    @property
    def backoff_policy(self) -> BackoffPolicy:
        return self._backoff_policy

    def _make_call(
        self,
        function: Callable[[RequestT], tuple[Status, ResponseT]],
        request: RequestT,
        context: str,
    ) -> tuple[Status, ResponseT]:
        retry_policy = self._retry_policy.clone()
        backoff_policy = self._backoff_policy.clone()
        attempt = 0
        while True:
            attempt += 1
            status, response = function(request)
            if status.ok:
                return status, response
            if retry_policy.is_permanent_failure(status):
                logger.error("%s failed permanently on attempt %d: %s", context, attempt, status)
                raise PermanentError(context, status)
            if not retry_policy.on_failure(status):
                logger.error("%s failed after %d attempt(s): %s", context, attempt, status)
                raise RetryPolicyExhaustedError(context, status)
            delay = backoff_policy.on_completion()
            logger.warning(
                "%s attempt %d failed (%s), retrying in %.3fs",
                context,
                attempt,
                status,
                delay,
            )
            self._sleep(delay)

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
