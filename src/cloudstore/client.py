"""The public storage client."""

from __future__ import annotations

from typing import TYPE_CHECKING

from .backoff_policy import BackoffPolicy
from .exceptions import raise_for_status
from .messages import (
    DeleteObjectRequest,
    GetBucketMetadataRequest,
    GetObjectMetadataRequest,
    InsertObjectMediaRequest,
    ListBucketsRequest,
    ListObjectAclRequest,
    ReadObjectRangeRequest,
)
from .raw_client import RawClient
from .readers import ListObjectsReader, ObjectReadStream
from .retry_client import RetryClient
from .retry_policy import RetryPolicy
from .settings import ClientOptions, Credentials

if TYPE_CHECKING:
    from .messages import (
        DeleteObjectParameter,
        InsertObjectParameter,
        ObjectParameter,
        ReadObjectParameter,
    )
    from .metadata import BucketMetadata, ObjectAccessControl, ObjectMetadata
    from .parameters import (
        Generation,
        IfMetagenerationMatch,
        IfMetagenerationNotMatch,
        MaxResults,
        Prefix,
        Projection,
        UserProject,
    )


class Client:
    """Client for the object storage service.

    Every operation builds a request from its positional arguments plus any
    number of optional parameters, sends it through the retry decorator, and
    returns the unwrapped result.  Failures that cannot be retried raise
    :class:`~cloudstore.exceptions.PermanentError`; running out of retries
    raises :class:`~cloudstore.exceptions.RetryPolicyExhaustedError`.

    Examples
    --------
    ::

        client = Client()                                  # options from the environment
        client = Client(ClientOptions(region="europe-west1"))
        client = Client(Credentials("key-id", "secret"))
        client = Client(raw_client, LimitedErrorCountRetryPolicy(2))

        meta = client.get_bucket_metadata("my-bucket", UserProject("billing"))
    """

    def __init__(
        self,
        client_or_options: RawClient | ClientOptions | Credentials | None = None,
        *policies: RetryPolicy | BackoffPolicy,
    ) -> None:
        """Initialize the client.

        Parameters
        ----------
        client_or_options : RawClient | ClientOptions | Credentials | None
            A raw client to decorate, options (or credentials) to create the
            default transport from, or ``None`` to read options from the
            environment.
        *policies : RetryPolicy | BackoffPolicy
            Overrides for the retry and backoff policies.  A policy that is not
            overridden comes from the options (or the retry client defaults
            when a raw client is given).
        """
        options: ClientOptions | None = None
        if client_or_options is None:
            options = ClientOptions()
        elif isinstance(client_or_options, Credentials):
            options = ClientOptions().with_credentials(client_or_options)
        elif isinstance(client_or_options, ClientOptions):
            options = client_or_options
        elif not isinstance(client_or_options, RawClient):
            raise TypeError("client_or_options must be a RawClient, ClientOptions, Credentials or None")

        if options is not None:
            raw_client = options.create_raw_client()
            # Overrides follow the option-derived policies; the last of each type wins
            policies = (options.retry_policy(), options.backoff_policy(), *policies)
        else:
            raw_client = client_or_options

        self._options = options
        self._raw_client: RawClient = RetryClient(raw_client, *policies)

    @classmethod
    def no_retry(cls, raw_client: RawClient) -> Client:
        """Build a client that sends each request exactly once.

        Failed statuses are still raised, never returned.
        """
        client = cls.__new__(cls)
        client._options = None
        client._raw_client = raw_client
        return client

    @property
    def raw_client(self) -> RawClient:
        return self._raw_client

    def _chunk_size(self) -> int:
        if self._options is not None:
            return self._options.download_chunk_size
        return ClientOptions.model_fields["download_chunk_size"].default

    # ------------------------------------------------------------------ #
    #  Buckets                                                            #
    # ------------------------------------------------------------------ #

    def list_buckets(
        self,
        project_id: str,
        *parameters: MaxResults | Prefix | UserProject | Projection,
    ) -> list[BucketMetadata]:
        """Fetch the list of buckets for a given project.

        Parameters
        ----------
        project_id : str
            The project to query.
        *parameters
            ``MaxResults``, ``Prefix``, ``UserProject`` and ``Projection``.

        Returns
        -------
        list[BucketMetadata]
            The buckets of the first page.
        """
        request = ListBucketsRequest(project_id, *parameters)
        status, response = self._raw_client.list_buckets(request)
        raise_for_status(status, "list_buckets")
        return response.items

    def get_bucket_metadata(
        self,
        bucket_name: str,
        *parameters: IfMetagenerationMatch | IfMetagenerationNotMatch | UserProject | Projection,
    ) -> BucketMetadata:
        """Fetch the metadata of a bucket.

        Parameters
        ----------
        bucket_name : str
            Bucket to query.
        *parameters
            ``IfMetagenerationMatch``, ``IfMetagenerationNotMatch``,
            ``UserProject`` and ``Projection``.

        Returns
        -------
        BucketMetadata
        """
        request = GetBucketMetadataRequest(bucket_name, *parameters)
        status, response = self._raw_client.get_bucket_metadata(request)
        raise_for_status(status, "get_bucket_metadata")
        return response

    # ------------------------------------------------------------------ #
    #  Objects                                                            #
    # ------------------------------------------------------------------ #

    def insert_object(
        self,
        bucket_name: str,
        object_name: str,
        contents: bytes | str,
        *parameters: InsertObjectParameter,
    ) -> ObjectMetadata:
        """Create an object given its name and contents.

        ``str`` contents are encoded as UTF-8.
        """
        if isinstance(contents, str):
            contents = contents.encode("utf-8")
        request = InsertObjectMediaRequest(bucket_name, object_name, contents, *parameters)
        status, response = self._raw_client.insert_object_media(request)
        raise_for_status(status, "insert_object_media")
        return response

    def get_object_metadata(
        self,
        bucket_name: str,
        object_name: str,
        *parameters: ObjectParameter,
    ) -> ObjectMetadata:
        request = GetObjectMetadataRequest(bucket_name, object_name, *parameters)
        status, response = self._raw_client.get_object_metadata(request)
        raise_for_status(status, "get_object_metadata")
        return response

    def list_objects(
        self,
        bucket_name: str,
        *parameters: MaxResults | Prefix | Projection | UserProject,
    ) -> ListObjectsReader:
        """List the objects in a bucket.

        Pages are fetched lazily as the returned reader is consumed.
        """
        return ListObjectsReader(self._raw_client, bucket_name, *parameters)

    def read_object_range(
        self,
        bucket_name: str,
        object_name: str,
        begin: int,
        end: int,
        *parameters: ReadObjectParameter,
    ) -> bytes:
        """Read the bytes ``[begin, end)`` of an object."""
        request = ReadObjectRangeRequest(bucket_name, object_name, begin, end, *parameters)
        status, response = self._raw_client.read_object_range_media(request)
        raise_for_status(status, "read_object_range_media")
        return response.contents

    def read_object(
        self,
        bucket_name: str,
        object_name: str,
        *parameters: ReadObjectParameter,
    ) -> ObjectReadStream:
        """Open a stream over the contents of an object."""
        return ObjectReadStream(
            self._raw_client,
            bucket_name,
            object_name,
            *parameters,
            chunk_size=self._chunk_size(),
        )

    def delete_object(
        self,
        bucket_name: str,
        object_name: str,
        *parameters: DeleteObjectParameter,
    ) -> None:
        request = DeleteObjectRequest(bucket_name, object_name, *parameters)
        status, _ = self._raw_client.delete_object(request)
        raise_for_status(status, "delete_object")

    def list_object_acl(
        self,
        bucket_name: str,
        object_name: str,
        *parameters: Generation | UserProject,
    ) -> list[ObjectAccessControl]:
        """Retrieve the access control list of an object."""
        request = ListObjectAclRequest(bucket_name, object_name, *parameters)
        status, response = self._raw_client.list_object_acl(request)
        raise_for_status(status, "list_object_acl")
        return response.items
