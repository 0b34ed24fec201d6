import os
import sys

import pytest

# Ensure repository root importable early
ROOT_DIR = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if ROOT_DIR not in sys.path:
    sys.path.insert(0, ROOT_DIR)

from delve import create_app  # noqa: E402
from delve.routes.dungeon_api import clear_cache  # noqa: E402


@pytest.fixture()
def test_app():
    app = create_app({"TESTING": True, "DELVE_CACHE_SIZE": 4, "DELVE_ENABLE_GENERATION_METRICS": True})
    yield app
    clear_cache()


@pytest.fixture()
def client(test_app):
    clear_cache()
    return test_app.test_client()
