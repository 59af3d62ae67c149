"""Tests for request, response and metadata value types."""

from __future__ import annotations

from datetime import datetime, timezone

import pytest

from cloudstore import (
    BucketMetadata,
    DeleteObjectRequest,
    GetBucketMetadataRequest,
    InsertObjectMediaRequest,
    ListObjectsRequest,
    ObjectMetadata,
    ReadObjectRangeRequest,
    ReadObjectRangeResponse,
    UserProject,
    Generation,
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


def test_request_str_includes_fields_and_set_parameters() -> None:
    request = GetBucketMetadataRequest("foo-bar-baz", UserProject("billing"))

    assert str(request) == "GetBucketMetadataRequest={bucket_name=foo-bar-baz, userProject=billing}"


def test_request_str_without_parameters() -> None:
    request = DeleteObjectRequest("bucket", "object")

    assert str(request) == "DeleteObjectRequest={bucket_name=bucket, object_name=object}"


def test_insert_request_does_not_dump_contents() -> None:
    request = InsertObjectMediaRequest("bucket", "object", b"0123456789")

    assert "contents=<10 bytes>" in str(request)
    assert request.contents == b"0123456789"


def test_required_fields_are_read_only() -> None:
    request = ReadObjectRangeRequest("bucket", "object", 0, 10, Generation(3))

    with pytest.raises(AttributeError):
        request.bucket_name = "other"  # type: ignore[misc]
    with pytest.raises(AttributeError):
        request.begin = 5  # type: ignore[misc]
    assert (request.bucket_name, request.object_name, request.begin, request.end) == ("bucket", "object", 0, 10)


@pytest.mark.parametrize(("begin", "end"), [(-1, 10), (10, 5)])
def test_read_range_rejects_invalid_ranges(begin: int, end: int) -> None:
    with pytest.raises(ValueError):
        ReadObjectRangeRequest("bucket", "object", begin, end)


def test_list_request_page_token_is_mutable() -> None:
    request = ListObjectsRequest("bucket")
    request.page_token = "next"

    assert "page_token=next" in str(request)


def test_bucket_metadata_parses_json_api_resource() -> None:
    metadata = BucketMetadata.parse_from_string(BUCKET_JSON)

    assert metadata.name == "foo-bar-baz"
    assert metadata.project_number == 123456789
    assert metadata.metageneration == 4
    assert metadata.storage_class == "STANDARD"
    assert metadata.self_link == "https://www.googleapis.com/storage/v1/b/foo-bar-baz"
    assert metadata.time_created == datetime(2018, 5, 19, 19, 31, 14, tzinfo=timezone.utc)


def test_metadata_equality_and_immutability() -> None:
    first = BucketMetadata.parse_from_string(BUCKET_JSON)
    second = BucketMetadata.parse_from_string(BUCKET_JSON)

    assert first == second
    with pytest.raises(ValueError):
        first.name = "other"  # type: ignore[misc]


def test_object_metadata_accepts_snake_case_names() -> None:
    metadata = ObjectMetadata(bucket="b", name="o", content_type="text/plain", size=3)

    assert metadata.content_type == "text/plain"
    assert metadata.model_dump(by_alias=True)["contentType"] == "text/plain"


def test_read_response_repr_hides_contents() -> None:
    response = ReadObjectRangeResponse(b"x" * 100, 0, 99, 1000)

    assert "<100 bytes>" in repr(response)
    assert "xxxx" not in repr(response)
