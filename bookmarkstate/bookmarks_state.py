"""Read and update primitives over the ``bookmarks`` section of the state tree.

Every function takes the whole state and either returns derived data or a
new state. Inputs are never mutated; untouched records and sections are
shared with the returned state.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Iterable, List, Optional

from . import site_tags
from .cache import get_keys_by_location, get_order_cache
from .log import get_logger
from .model import is_record
from .urls import DEFAULT_URL_SCHEMES, is_url

log = get_logger(__name__)


class StructuralContractError(TypeError):
    """The state does not have the shape every caller must provide."""


def validate_state(state: Any) -> Mapping[str, Any]:
    if not isinstance(state, Mapping):
        raise StructuralContractError("state must be a mapping")
    if not isinstance(state.get("bookmarks"), Mapping):
        raise StructuralContractError("state must contain a mapping of bookmarks")
    return state


def get_bookmarks(state: Mapping[str, Any]) -> Mapping[str, Any]:
    return validate_state(state)["bookmarks"]


def get_bookmark_folders(state: Mapping[str, Any]) -> Mapping[str, Any]:
    folders = validate_state(state).get("bookmarkFolders")
    return folders if isinstance(folders, Mapping) else {}


def get_bookmark(state: Mapping[str, Any], key: str) -> Optional[Mapping[str, Any]]:
    bookmarks = get_bookmarks(state)
    if not isinstance(key, str):
        return None
    record = bookmarks.get(key)
    return record if is_record(record) else None


def update_favicon(
    state: Mapping[str, Any],
    location: str,
    favicon: Optional[str],
    *,
    schemes: Iterable[str] = DEFAULT_URL_SCHEMES,
) -> Mapping[str, Any]:
    """Set ``favicon`` on every bookmark stored for ``location``.

    Candidates are the records whose ``location`` equals the given one plus
    the keys listed for it in the location index. Malformed records and keys
    missing from ``bookmarks`` are skipped. The input state is returned as is
    when ``location`` is not a URL or nothing changes.
    """
    bookmarks = get_bookmarks(state)
    if not is_url(location, schemes):
        log.debug("Ignoring favicon update for non-URL location %r.", location)
        return state

    candidates = dict.fromkeys(
        key for key, record in bookmarks.items() if is_record(record) and record.get("location") == location
    )
    candidates.update(dict.fromkeys(get_keys_by_location(state, location)))

    updated = {}
    for key in candidates:
        record = bookmarks.get(key)
        if not is_record(record):
            if key in bookmarks:
                log.debug("Skipping malformed bookmark entry %r.", key)
            else:
                log.debug("Location index references missing bookmark %r.", key)
            continue
        if "favicon" in record and record["favicon"] == favicon:
            continue
        updated[key] = {**record, "favicon": favicon}

    if not updated:
        return state

    new_bookmarks = dict(bookmarks)
    new_bookmarks.update(updated)
    new_state = dict(state)
    new_state["bookmarks"] = new_bookmarks
    log.debug("Updated favicon on %d bookmark(s) for %s.", len(updated), location)
    return new_state


def get_bookmarks_by_parent_id(state: Mapping[str, Any], parent_folder_id: Optional[int] = None) -> List[Mapping[str, Any]]:
    """Bookmarks of one folder, in the order the order index stores them."""
    bookmarks = get_bookmarks(state)
    if parent_folder_id is None:
        return []
    out: List[Mapping[str, Any]] = []
    for entry in get_order_cache(state, parent_folder_id):
        record = _lookup(bookmarks, entry.get("key"))
        if record is not None:
            out.append(record)
    return out


def get_bookmarks_with_folders(
    state: Mapping[str, Any], parent_folder_id: Optional[int] = None
) -> List[Mapping[str, Any]]:
    """Bookmarks and folders of one folder, in order index order."""
    bookmarks = get_bookmarks(state)
    folders = get_bookmark_folders(state)
    if parent_folder_id is None:
        return []
    out: List[Mapping[str, Any]] = []
    for entry in get_order_cache(state, parent_folder_id):
        source = folders if site_tags.is_folder(entry.get("type")) else bookmarks
        record = _lookup(source, entry.get("key"))
        if record is not None:
            out.append(record)
    return out


def _lookup(records: Mapping[str, Any], key: Any) -> Optional[Mapping[str, Any]]:
    if not isinstance(key, str):
        return None
    record = records.get(key)
    return record if is_record(record) else None
