from fsbuckets.errors import ConfigurationError

import io
import os
import threading
import ZConfig


SCHEMA_PATH = os.path.join(os.path.dirname(__file__), "schema.xml")

_schema = None
_schema_lock = threading.Lock()


def get_schema():
    global _schema
    with _schema_lock:
        if _schema is None:
            with open(SCHEMA_PATH) as f:
                _schema = ZConfig.loadSchemaFile(f, SCHEMA_PATH)
        return _schema


class StorageFactory:
    """ZConfig factory for Storage."""

    def __init__(self, config):
        self.config = config

    def open(self):
        from fsbuckets.cache import VisibilityCache
        from fsbuckets.storage import Storage

        config = self.config
        cache = VisibilityCache(
            max_size=config.visibility_cache_size,
            ttl=config.visibility_cache_ttl,
        )
        return Storage(
            config.base_dir,
            cache,
            access_key=config.access_key,
            secret_key=config.secret_key,
            autocreate_buckets=config.autocreate_buckets,
        )


def _load(fp, url=None):
    try:
        config, _handler = ZConfig.loadConfigFile(get_schema(), fp, url)
    except ZConfig.ConfigurationError as e:
        raise ConfigurationError(
            f"Invalid storage configuration: {e}", operation="load config", path=url
        ) from e
    return StorageFactory(config)


def storage_from_string(text):
    return _load(io.StringIO(text)).open()


def storage_from_file(path):
    with open(path) as f:
        return _load(f, path).open()
