from fsbuckets.cache import VisibilityCache
from fsbuckets.config import storage_from_file
from fsbuckets.config import storage_from_string
from fsbuckets.errors import ConfigurationError
from fsbuckets.storage import DEFAULT_ACCESS_KEY
from fsbuckets.storage import Storage

import pytest


class TestZConfig:
    def test_creates_storage(self, base_dir):
        storage = storage_from_string(f"base-dir {base_dir}\n")
        assert isinstance(storage, Storage)
        assert storage.base_dir == str(base_dir)

    def test_default_values(self, base_dir):
        storage = storage_from_string(f"base-dir {base_dir}\n")
        assert storage.access_key == DEFAULT_ACCESS_KEY
        assert storage.autocreate_buckets is False
        assert isinstance(storage._cache, VisibilityCache)
        assert storage._cache.max_size == 1024
        assert storage._cache.ttl is None

    def test_all_options(self, base_dir):
        storage = storage_from_string(
            f"""\
            base-dir {base_dir}
            access-key minioadmin
            secret-key s3cr3t
            autocreate-buckets true
            visibility-cache-size 10
            visibility-cache-ttl 5m
            """
        )
        assert storage.access_key == "minioadmin"
        assert storage.secret_key == "s3cr3t"
        assert storage.autocreate_buckets is True
        assert storage._cache.max_size == 10
        assert storage._cache.ttl == 300

    def test_each_storage_gets_its_own_cache(self, base_dir):
        a = storage_from_string(f"base-dir {base_dir}\n")
        b = storage_from_string(f"base-dir {base_dir}\n")
        assert a._cache is not b._cache

    def test_from_file(self, base_dir, tmp_path):
        conf = tmp_path / "storage.conf"
        conf.write_text(f"base-dir {base_dir}\nautocreate-buckets on\n")
        storage = storage_from_file(str(conf))
        assert storage.autocreate_buckets is True

    def test_missing_base_dir_key(self):
        with pytest.raises(ConfigurationError):
            storage_from_string("access-key x\n")

    def test_unknown_key(self, base_dir):
        with pytest.raises(ConfigurationError):
            storage_from_string(f"base-dir {base_dir}\nno-such-key 1\n")

    def test_bad_boolean(self, base_dir):
        with pytest.raises(ConfigurationError):
            storage_from_string(f"base-dir {base_dir}\nautocreate-buckets maybe\n")
