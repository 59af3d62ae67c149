"""Tests for the bucket operations of Client."""

from __future__ import annotations

import pytest

from cloudstore import (
    BucketMetadata,
    Client,
    ExponentialBackoffPolicy,
    GetBucketMetadataRequest,
    LimitedErrorCountRetryPolicy,
    ListBucketsRequest,
    ListBucketsResponse,
    MaxResults,
    PermanentError,
    Prefix,
    Projection,
    RawClient,
    RetryPolicyExhaustedError,
    Status,
    UndeclaredParameterError,
)

BUCKET_JSON = """{
      "kind": "storage#bucket",
      "id": "foo-bar-baz",
      "selfLink": "https://www.googleapis.com/storage/v1/b/foo-bar-baz",
      "projectNumber": "123456789",
      "name": "foo-bar-baz",
      "timeCreated": "2018-05-19T19:31:14Z",
      "updated": "2018-05-19T19:31:24Z",
      "metageneration": "4",
      "location": "US",
      "storageClass": "STANDARD",
      "etag": "XYZ="
}"""


@pytest.fixture
def client(mock_client: RawClient, no_backoff: ExponentialBackoffPolicy) -> Client:
    return Client(mock_client, LimitedErrorCountRetryPolicy(2), no_backoff)


def test_get_bucket_metadata_retries_transient_failures(
    client: Client,
    mock_client: RawClient,
    transient_error: Status,
) -> None:
    expected = BucketMetadata.parse_from_string(BUCKET_JSON)
    mock_client.get_bucket_metadata.side_effect = [
        (transient_error, BucketMetadata()),
        (transient_error, BucketMetadata()),
        (Status(), expected),
    ]

    actual = client.get_bucket_metadata("foo-bar-baz")

    assert actual == expected
    assert mock_client.get_bucket_metadata.call_count == 3
    request: GetBucketMetadataRequest = mock_client.get_bucket_metadata.call_args.args[0]
    assert request.bucket_name == "foo-bar-baz"


def test_get_bucket_metadata_too_many_failures(
    client: Client,
    mock_client: RawClient,
    transient_error: Status,
) -> None:
    mock_client.get_bucket_metadata.return_value = (transient_error, BucketMetadata())

    with pytest.raises(RetryPolicyExhaustedError) as excinfo:
        client.get_bucket_metadata("foo-bar-baz")

    assert "Retry policy exhausted" in str(excinfo.value)
    assert "get_bucket_metadata" in str(excinfo.value)
    assert mock_client.get_bucket_metadata.call_count == 3


def test_get_bucket_metadata_permanent_failure(
    client: Client,
    mock_client: RawClient,
    permanent_error: Status,
) -> None:
    mock_client.get_bucket_metadata.return_value = (permanent_error, BucketMetadata())

    with pytest.raises(PermanentError) as excinfo:
        client.get_bucket_metadata("foo-bar-baz")

    assert "Permanent error" in str(excinfo.value)
    assert "get_bucket_metadata" in str(excinfo.value)
    assert mock_client.get_bucket_metadata.call_count == 1


def test_get_bucket_metadata_passes_parameters(client: Client, mock_client: RawClient) -> None:
    mock_client.get_bucket_metadata.return_value = (Status(), BucketMetadata())

    client.get_bucket_metadata("bucket", Projection.full())

    request = mock_client.get_bucket_metadata.call_args.args[0]
    assert request.get_parameter(Projection).value == "full"


def test_get_bucket_metadata_rejects_undeclared_parameter(client: Client, mock_client: RawClient) -> None:
    with pytest.raises(UndeclaredParameterError):
        client.get_bucket_metadata("bucket", Prefix("p"))  # type: ignore[arg-type]

    mock_client.get_bucket_metadata.assert_not_called()


def test_list_buckets_returns_items(client: Client, mock_client: RawClient) -> None:
    buckets = [BucketMetadata(name="a"), BucketMetadata(name="b")]
    mock_client.list_buckets.return_value = (Status(), ListBucketsResponse(buckets, "next"))

    actual = client.list_buckets("my-project", MaxResults(2), Prefix("a"))

    assert actual == buckets
    request: ListBucketsRequest = mock_client.list_buckets.call_args.args[0]
    assert request.project_id == "my-project"
    assert request.dump_parameters() == "maxResults=2, prefix=a"
