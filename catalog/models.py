"""Record types for the catalog and the field-level merge policy."""

from __future__ import annotations

import datetime
from typing import Any, ClassVar, Dict, FrozenSet, Mapping, Optional, TypeVar

from pydantic import BaseModel, ConfigDict, Field

LocalizedText = Dict[str, str]

R = TypeVar("R", bound="Record")


def utc_timestamp() -> str:
    """Return the current UTC time as ``YYYY-MM-DDTHH:MM:SS.mmmZ``."""

    now = datetime.datetime.now(datetime.timezone.utc)
    return now.isoformat(timespec="milliseconds").replace("+00:00", "Z")


class Record(BaseModel):
    """A stored catalog entity with an immutable identifier."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    # Fields a patch can never replace.
    protected_fields: ClassVar[FrozenSet[str]] = frozenset({"id"})

    id: str

    def to_document(self) -> dict:
        """Serialize for snapshots and responses; ``None`` fields are omitted."""

        return self.model_dump(by_alias=True, exclude_none=True)


class TimestampedRecord(Record):
    protected_fields: ClassVar[FrozenSet[str]] = frozenset({"id", "created_at"})

    created_at: Optional[str] = Field(default=None, alias="createdAt")
    updated_at: Optional[str] = Field(default=None, alias="updatedAt")


class Product(TimestampedRecord):
    name: Optional[LocalizedText] = None
    description: Optional[LocalizedText] = None
    category: Optional[str] = None
    image: Optional[str] = None
    dimensions: Optional[str] = None
    material: Optional[str] = None


class Category(Record):
    name: Optional[LocalizedText] = None
    slug: Optional[str] = None


class ProductPayload(BaseModel):
    """Client-supplied product fields; identity and timestamps are ignored."""

    model_config = ConfigDict(extra="ignore")

    name: Optional[LocalizedText] = None
    description: Optional[LocalizedText] = None
    category: Optional[str] = None
    image: Optional[str] = None
    dimensions: Optional[str] = None
    material: Optional[str] = None


class CategoryPayload(BaseModel):
    model_config = ConfigDict(extra="ignore")

    name: Optional[LocalizedText] = None
    slug: Optional[str] = None


class LoginModel(BaseModel):
    username: str = ""
    password: str = ""


def merge_record(existing: R, patch: Mapping[str, Any]) -> R:
    """Overlay ``patch`` on ``existing`` one top-level field at a time.

    A field present in the patch replaces the stored value entirely, nested
    mappings included, so ``{"name": {"en": "X"}}`` drops any other
    translations. Fields absent from the patch are kept as they are, and
    protected fields (``id``, ``created_at``) are never replaced.
    """

    fields = type(existing).model_fields
    updates = {
        key: value
        for key, value in patch.items()
        if key in fields and key not in existing.protected_fields
    }
    return existing.model_copy(update=updates)
