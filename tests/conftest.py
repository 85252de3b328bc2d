import copy
import logging
import sys
from pathlib import Path

import pytest

# Allow `import bookmarkstate` without installing the package.
ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(ROOT))

from bookmarkstate import site_tags  # noqa: E402
from bookmarkstate.log import PACKAGE_LOGGER  # noqa: E402

BRAVE_KEY = "https://brave.com/|0|0"
CLIFTON_KEY = "https://clifton.io/|0|0"


def _record(location: str, title: str) -> dict:
    return {
        "favicon": None,
        "title": title,
        "location": location,
        "key": f"{location}|0|0",
        "parentFolderId": 0,
        "partitionNumber": 0,
        "objectId": None,
        "themeColor": None,
        "type": site_tags.BOOKMARK,
    }


STATE_WITH_DATA = {
    "windows": [],
    "bookmarks": {
        BRAVE_KEY: _record("https://brave.com/", "Brave"),
        CLIFTON_KEY: _record("https://clifton.io/", "Clifton"),
    },
    "bookmarkFolders": {},
    "cache": {
        "bookmarkOrder": {
            "0": [
                {"key": BRAVE_KEY, "order": 0, "type": site_tags.BOOKMARK},
                {"key": CLIFTON_KEY, "order": 1, "type": site_tags.BOOKMARK},
            ]
        },
        "bookmarkLocation": {
            "https://brave.com/": [BRAVE_KEY],
            "https://clifton.io/": [CLIFTON_KEY],
        },
    },
    "historySites": {},
    "tabs": [],
}


@pytest.fixture
def state_with_data():
    return copy.deepcopy(STATE_WITH_DATA)


@pytest.fixture(autouse=True)
def _restore_logging():
    """setup_logging() reconfigures global loggers; undo it after each test."""
    root = logging.getLogger()
    package = logging.getLogger(PACKAGE_LOGGER)
    handlers, root_level, package_level = list(root.handlers), root.level, package.level
    yield
    for h in list(root.handlers):
        root.removeHandler(h)
    for h in handlers:
        root.addHandler(h)
    root.setLevel(root_level)
    package.setLevel(package_level)
