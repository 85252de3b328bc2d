from bookmarkstate import site_tags
from bookmarkstate.cache import (
    find_stale_keys,
    generate_location_cache,
    generate_order_cache,
    get_folders_by_parent_id,
    get_keys_by_location,
    get_order_cache,
)

from conftest import BRAVE_KEY, CLIFTON_KEY


def test_get_keys_by_location_hit_and_miss(state_with_data):
    assert get_keys_by_location(state_with_data, "https://brave.com/") == [BRAVE_KEY]
    assert get_keys_by_location(state_with_data, "https://unknown.example/") == []


def test_get_keys_by_location_tolerates_missing_cache():
    assert get_keys_by_location({"bookmarks": {}}, "https://brave.com/") == []
    assert get_keys_by_location({"bookmarks": {}, "cache": None}, "https://brave.com/") == []
    assert get_keys_by_location({"cache": {"bookmarkLocation": {"https://a/": "oops"}}}, "https://a/") == []


def test_get_keys_by_location_matches_exact_location_only(state_with_data):
    assert get_keys_by_location(state_with_data, "https://brave.com/#top") == []
    assert get_keys_by_location(state_with_data, "https://brave.com/?utm_source=mail") == []
    assert get_keys_by_location(state_with_data, "https://brave.com") == []


def test_get_keys_by_location_dedupes_keys():
    state = {"cache": {"bookmarkLocation": {"https://a/": ["k", "k", None, "j"]}}}
    assert get_keys_by_location(state, "https://a/") == ["k", "j"]


def test_get_order_cache_uses_stringified_parent(state_with_data):
    assert [e["key"] for e in get_order_cache(state_with_data, 0)] == [BRAVE_KEY, CLIFTON_KEY]
    assert get_order_cache(state_with_data, "0") == get_order_cache(state_with_data, 0)
    assert get_order_cache(state_with_data, 7) == []
    assert get_order_cache(state_with_data, None) == []
    assert get_order_cache({}, 0) == []


def test_get_order_cache_returns_a_copy(state_with_data):
    got = get_order_cache(state_with_data, 0)
    got.clear()
    assert len(state_with_data["cache"]["bookmarkOrder"]["0"]) == 2


def test_get_folders_by_parent_id_filters_folder_entries(state_with_data):
    state_with_data["cache"]["bookmarkOrder"]["0"].append(
        {"key": "1", "order": 2, "type": site_tags.BOOKMARK_FOLDER}
    )
    assert [e["key"] for e in get_folders_by_parent_id(state_with_data, 0)] == ["1"]


def test_generate_location_cache_matches_existing_index(state_with_data):
    rebuilt = generate_location_cache(state_with_data)
    assert rebuilt["cache"]["bookmarkLocation"] == state_with_data["cache"]["bookmarkLocation"]
    assert rebuilt["cache"]["bookmarkOrder"] is state_with_data["cache"]["bookmarkOrder"]


def test_generate_location_cache_groups_partitions_and_skips_malformed(state_with_data):
    dup_key = "https://brave.com/|0|1"
    state_with_data["bookmarks"][dup_key] = dict(state_with_data["bookmarks"][BRAVE_KEY], key=dup_key)
    state_with_data["bookmarks"]["null"] = None
    state_with_data["bookmarks"]["bubba"] = "a"

    index = generate_location_cache(state_with_data)["cache"]["bookmarkLocation"]

    assert index["https://brave.com/"] == [BRAVE_KEY, dup_key]
    assert set(index) == {"https://brave.com/", "https://clifton.io/"}


def test_generate_order_cache_is_stable_for_consistent_index(state_with_data):
    rebuilt = generate_order_cache(state_with_data)
    assert rebuilt["cache"]["bookmarkOrder"] == state_with_data["cache"]["bookmarkOrder"]


def test_generate_order_cache_keeps_ranks_and_appends_new_records(state_with_data):
    state_with_data["cache"]["bookmarkOrder"]["0"].reverse()
    for order, entry in enumerate(state_with_data["cache"]["bookmarkOrder"]["0"]):
        entry["order"] = order
    state_with_data["bookmarkFolders"]["5"] = {
        "key": "5",
        "title": "Work",
        "parentFolderId": 0,
        "type": site_tags.BOOKMARK_FOLDER,
    }
    state_with_data["bookmarks"]["https://x.example/|5|0"] = {
        "key": "https://x.example/|5|0",
        "location": "https://x.example/",
        "parentFolderId": 5,
        "type": site_tags.BOOKMARK,
    }

    index = generate_order_cache(state_with_data)["cache"]["bookmarkOrder"]

    assert index["0"] == [
        {"key": CLIFTON_KEY, "order": 0, "type": site_tags.BOOKMARK},
        {"key": BRAVE_KEY, "order": 1, "type": site_tags.BOOKMARK},
        {"key": "5", "order": 2, "type": site_tags.BOOKMARK_FOLDER},
    ]
    assert index["5"] == [{"key": "https://x.example/|5|0", "order": 0, "type": site_tags.BOOKMARK}]


def test_find_stale_keys_reports_index_drift(state_with_data):
    state_with_data["cache"]["bookmarkLocation"]["https://brave.com/"].append("https://gone/|0|0")
    state_with_data["cache"]["bookmarkLocation"]["https://elsewhere.example/"] = [CLIFTON_KEY]
    state_with_data["cache"]["bookmarkOrder"]["3"] = [{"key": "ghost", "order": 0, "type": site_tags.BOOKMARK}]

    report = find_stale_keys(state_with_data)

    assert report == {
        "location": ["https://gone/|0|0"],
        "location_mismatch": [CLIFTON_KEY],
        "order": ["ghost"],
    }


def test_find_stale_keys_clean_state(state_with_data):
    assert find_stale_keys(state_with_data) == {"location": [], "location_mismatch": [], "order": []}


def test_generate_location_cache_keeps_query_variants_apart(state_with_data):
    utm_key = "https://brave.com/?utm_source=x|0|0"
    state_with_data["bookmarks"][utm_key] = dict(
        state_with_data["bookmarks"][BRAVE_KEY], key=utm_key, location="https://brave.com/?utm_source=x"
    )

    index = generate_location_cache(state_with_data)["cache"]["bookmarkLocation"]

    assert index["https://brave.com/"] == [BRAVE_KEY]
    assert index["https://brave.com/?utm_source=x"] == [utm_key]


def test_find_stale_keys_compares_locations_exactly(state_with_data):
    state_with_data["cache"]["bookmarkLocation"]["https://brave.com/#top"] = [BRAVE_KEY]
    assert find_stale_keys(state_with_data)["location_mismatch"] == [BRAVE_KEY]


def test_generate_order_cache_tolerates_non_finite_parent_id(state_with_data):
    state_with_data["bookmarks"][BRAVE_KEY]["parentFolderId"] = float("inf")

    index = generate_order_cache(state_with_data)["cache"]["bookmarkOrder"]

    assert [e["key"] for e in index["0"]] == [BRAVE_KEY, CLIFTON_KEY]
