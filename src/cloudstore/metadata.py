"""Metadata records for buckets, objects, and access controls.

The field names follow the JSON API resources; aliases keep the camelCase
names used on the wire while the Python attributes use snake_case.
"""

from __future__ import annotations

from datetime import datetime
from typing import TypeVar

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

_ResourceT = TypeVar("_ResourceT", bound="_Resource")


class _Resource(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
        extra="ignore",
    )

    kind: str = ""
    id: str = ""
    self_link: str = ""
    etag: str = ""

    @classmethod
    def parse_from_string(cls: type[_ResourceT], text: str) -> _ResourceT:
        """Parse a JSON document into this resource type."""
        return cls.model_validate_json(text)


class BucketMetadata(_Resource):
    """Metadata of a bucket."""

    name: str = ""
    project_number: int = 0
    metageneration: int = 0
    location: str = ""
    storage_class: str = ""
    time_created: datetime | None = None
    updated: datetime | None = None


class ObjectMetadata(_Resource):
    """Metadata of an object."""

    bucket: str = ""
    name: str = ""
    generation: int = 0
    metageneration: int = 0
    size: int = 0
    content_type: str = ""
    content_encoding: str = ""
    md5_hash: str = ""
    crc32c: str = ""
    media_link: str = ""
    storage_class: str = ""
    time_created: datetime | None = None
    updated: datetime | None = None
    metadata: dict[str, str] = {}


class ObjectAccessControl(_Resource):
    """A single access control entry of an object."""

    bucket: str = ""
    object: str = ""
    generation: int = 0
    entity: str = ""
    entity_id: str = ""
    role: str = ""
    email: str = ""
    domain: str = ""
