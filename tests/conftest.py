from fsbuckets.cache import VisibilityCache
from fsbuckets.storage import Storage

import pytest


@pytest.fixture
def base_dir(tmp_path):
    path = tmp_path / "data"
    path.mkdir()
    return path


@pytest.fixture
def visibility_cache():
    return VisibilityCache()


@pytest.fixture
def storage(base_dir, visibility_cache):
    return Storage(str(base_dir), visibility_cache)


@pytest.fixture
def bucket(storage):
    b = storage.get_bucket("photos")
    b.create()
    return b
