"""Secondary indices kept alongside the bookmark records.

``cache.bookmarkOrder`` maps a stringified parent folder id to the ordered
``{key, order, type}`` entries of that folder. ``cache.bookmarkLocation`` maps
a record location, exactly as stored on the record, to the keys sharing it.

Both indices are maintained elsewhere and may be stale or partially missing.
Every lookup here degrades to an empty result instead of raising.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Dict, Iterator, List, Tuple

from . import site_tags
from .log import get_logger
from .model import OrderEntry, as_int, is_record

log = get_logger(__name__)

ORDER_INDEX = "bookmarkOrder"
LOCATION_INDEX = "bookmarkLocation"


def get_keys_by_location(state: Mapping[str, Any], location: str) -> List[str]:
    if not isinstance(location, str) or not location:
        return []
    return _unique_keys(_index(state, LOCATION_INDEX).get(location))


def get_order_cache(state: Mapping[str, Any], parent_folder_id: Any) -> List[Mapping[str, Any]]:
    if parent_folder_id is None:
        return []
    bucket = _index(state, ORDER_INDEX).get(str(parent_folder_id))
    if not isinstance(bucket, (list, tuple)):
        return []
    return [entry for entry in bucket if is_record(entry)]


def get_folders_by_parent_id(state: Mapping[str, Any], parent_folder_id: Any) -> List[Mapping[str, Any]]:
    return [e for e in get_order_cache(state, parent_folder_id) if site_tags.is_folder(e.get("type"))]


def generate_location_cache(state: Mapping[str, Any]) -> Mapping[str, Any]:
    """Rebuild the location index from the well-formed records in ``bookmarks``."""
    index: Dict[str, List[str]] = {}
    for key, record in _records(state, "bookmarks"):
        location = record.get("location")
        if not isinstance(location, str) or not location:
            continue
        bucket = index.setdefault(location, [])
        if key not in bucket:
            bucket.append(key)
    return _with_index(state, LOCATION_INDEX, index)


def generate_order_cache(state: Mapping[str, Any]) -> Mapping[str, Any]:
    """Rebuild the order index from folders and bookmarks.

    Ranks already present in the index are kept, so regenerating an index
    that is consistent with the records yields the same index. Records
    without a rank are appended in iteration order, folders first.
    """
    previous: Dict[Tuple[str, str], int] = {}
    for parent, bucket in _index(state, ORDER_INDEX).items():
        if not isinstance(bucket, (list, tuple)):
            continue
        for entry in bucket:
            if is_record(entry) and isinstance(entry.get("key"), str):
                previous[(str(parent), entry["key"])] = as_int(entry.get("order"))

    ranked: Dict[str, List[Tuple[int, int, str, Any]]] = {}
    seq = 0
    for section, default_type in (
        ("bookmarkFolders", site_tags.BOOKMARK_FOLDER),
        ("bookmarks", site_tags.BOOKMARK),
    ):
        for key, record in _records(state, section):
            parent = str(as_int(record.get("parentFolderId")))
            tag = record.get("type") or default_type
            # Unranked entries sort after every ranked one.
            rank = previous.get((parent, key), -1)
            sort_rank = rank if rank >= 0 else 1 << 62
            ranked.setdefault(parent, []).append((sort_rank, seq, key, tag))
            seq += 1

    index: Dict[str, List[Dict[str, Any]]] = {}
    for parent, items in ranked.items():
        items.sort(key=lambda item: (item[0], item[1]))
        index[parent] = [
            OrderEntry(key=key, order=order, type=tag).as_state()
            for order, (_rank, _seq, key, tag) in enumerate(items)
        ]
    return _with_index(state, ORDER_INDEX, index)


def find_stale_keys(state: Mapping[str, Any]) -> Dict[str, List[str]]:
    """Report index entries that do not agree with the records.

    ``location`` lists keys in the location index with no bookmark record,
    ``location_mismatch`` lists keys whose record has a different location,
    ``order`` lists keys in the order index with no bookmark or folder record.
    """
    bookmarks = dict(_records(state, "bookmarks"))
    folders = dict(_records(state, "bookmarkFolders"))
    out: Dict[str, List[str]] = {"location": [], "location_mismatch": [], "order": []}

    for location, keys in _index(state, LOCATION_INDEX).items():
        for key in _unique_keys(keys):
            record = bookmarks.get(key)
            if record is None:
                out["location"].append(key)
            elif record.get("location") != location:
                out["location_mismatch"].append(key)

    for parent, bucket in _index(state, ORDER_INDEX).items():
        if not isinstance(bucket, (list, tuple)):
            continue
        for entry in bucket:
            key = entry.get("key") if is_record(entry) else None
            if not isinstance(key, str):
                continue
            if key not in bookmarks and key not in folders and key not in out["order"]:
                out["order"].append(key)

    for name, keys in out.items():
        if keys:
            log.debug("Found %d stale %s index key(s).", len(keys), name)
    return out


def _index(state: Any, name: str) -> Mapping[str, Any]:
    if not is_record(state):
        return {}
    cache = state.get("cache")
    if not is_record(cache):
        return {}
    index = cache.get(name)
    return index if is_record(index) else {}


def _records(state: Any, section: str) -> Iterator[Tuple[str, Mapping[str, Any]]]:
    records = state.get(section) if is_record(state) else None
    if not is_record(records):
        return
    for key, record in records.items():
        if not is_record(record):
            log.debug("Skipping malformed %s entry %r.", section, key)
            continue
        yield key, record


def _unique_keys(value: Any) -> List[str]:
    if not isinstance(value, (list, tuple, set, frozenset)):
        return []
    out: List[str] = []
    for key in value:
        if isinstance(key, str) and key not in out:
            out.append(key)
    return out


def _with_index(state: Mapping[str, Any], name: str, index: Mapping[str, Any]) -> Mapping[str, Any]:
    if not is_record(state):
        return state
    cache = state.get("cache")
    new_cache = dict(cache) if is_record(cache) else {}
    new_cache[name] = index
    new_state = dict(state)
    new_state["cache"] = new_cache
    return new_state
