from __future__ import annotations

# Type tags carried on records and order entries. Only the folder tag is
# interpreted here: it routes order entries to bookmarkFolders.
BOOKMARK = "bookmark"
BOOKMARK_FOLDER = "bookmark-folder"


def is_folder(tag: object) -> bool:
    return tag == BOOKMARK_FOLDER
