from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, Dict, Optional

from . import site_tags


def bookmark_key(location: str, parent_folder_id: int = 0, partition_number: int = 0) -> str:
    return f"{location}|{parent_folder_id or 0}|{partition_number or 0}"


def is_record(value: Any) -> bool:
    """Records (and order entries) are mappings; None and bare values are malformed."""
    return isinstance(value, Mapping)


@dataclass(frozen=True)
class BookmarkRecord:
    location: str
    title: str = ""
    parent_folder_id: int = 0
    partition_number: int = 0
    object_id: Any = None
    favicon: Optional[str] = None
    theme_color: Optional[str] = None
    type: str = site_tags.BOOKMARK
    key: str = ""

    def __post_init__(self) -> None:
        if not self.key:
            object.__setattr__(
                self, "key", bookmark_key(self.location, self.parent_folder_id, self.partition_number)
            )

    def as_state(self) -> Dict[str, Any]:
        return {
            "key": self.key,
            "location": self.location,
            "title": self.title,
            "parentFolderId": self.parent_folder_id,
            "partitionNumber": self.partition_number,
            "objectId": self.object_id,
            "favicon": self.favicon,
            "themeColor": self.theme_color,
            "type": self.type,
        }

    @staticmethod
    def from_state(value: Any) -> Optional["BookmarkRecord"]:
        if not is_record(value):
            return None
        return BookmarkRecord(
            key=str(value.get("key") or ""),
            location=str(value.get("location") or ""),
            title=str(value.get("title") or ""),
            parent_folder_id=as_int(value.get("parentFolderId")),
            partition_number=as_int(value.get("partitionNumber")),
            object_id=value.get("objectId"),
            favicon=value.get("favicon"),
            theme_color=value.get("themeColor"),
            type=value.get("type") or site_tags.BOOKMARK,
        )


@dataclass(frozen=True)
class OrderEntry:
    key: str
    order: int
    type: str = site_tags.BOOKMARK

    def as_state(self) -> Dict[str, Any]:
        return {"key": self.key, "order": self.order, "type": self.type}

    @staticmethod
    def from_state(value: Any) -> Optional["OrderEntry"]:
        if not is_record(value) or value.get("key") is None:
            return None
        return OrderEntry(
            key=str(value["key"]),
            order=as_int(value.get("order")),
            type=value.get("type") or site_tags.BOOKMARK,
        )


def as_int(value: Any) -> int:
    if value is None:
        return 0
    try:
        return int(value)
    except (TypeError, ValueError, OverflowError):
        return 0
