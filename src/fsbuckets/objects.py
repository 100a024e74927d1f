from datetime import datetime
from datetime import timezone
from fsbuckets import properties
from fsbuckets.errors import StorageIOError
from fsbuckets.errors import wrap_os_error
from fsbuckets.interfaces import IStoredObject
from fsbuckets.utils import format_size
from zope.interface import implementer

import contextlib
import logging
import os
import uuid


logger = logging.getLogger(__name__)

# Files starting with this prefix are bookkeeping, never objects.
METADATA_PREFIX = "__"
SIDECAR_PREFIX = "__ninja_"
SIDECAR_SUFFIX = ".properties"


def is_metadata(name):
    return name.startswith(METADATA_PREFIX)


@implementer(IStoredObject)
class StoredObject:
    """A stored object: a content file plus its metadata sidecar.

    The sidecar for ``cat.png`` is ``__ninja_cat.png.properties`` in the
    same directory. Handles only wrap a path; they hold no other state and
    may be shared freely between threads.
    """

    def __init__(self, path):
        self.path = os.fspath(path)

    def __eq__(self, other):
        if not isinstance(other, StoredObject):
            return NotImplemented
        return self.path == other.path

    def __hash__(self):
        return hash(self.path)

    def __repr__(self):
        return f"<StoredObject {self.path}>"

    @property
    def name(self):
        return os.path.basename(self.path)

    @property
    def properties_path(self):
        return os.path.join(
            os.path.dirname(self.path), f"{SIDECAR_PREFIX}{self.name}{SIDECAR_SUFFIX}"
        )

    def exists(self):
        return os.path.exists(self.path)

    def delete(self):
        """Delete the content file, then the sidecar.

        Either file being absent already is fine; an object that never had
        properties stored has no sidecar.
        """
        for path in (self.path, self.properties_path):
            try:
                os.remove(path)
            except FileNotFoundError:
                pass
            except OSError as e:
                wrap_os_error(e, "delete", path)

    def size(self):
        try:
            return os.path.getsize(self.path)
        except OSError as e:
            wrap_os_error(e, "size", self.path)

    def formatted_size(self):
        return format_size(self.size())

    def last_modified(self):
        try:
            mtime = os.stat(self.path).st_mtime
        except OSError as e:
            wrap_os_error(e, "stat", self.path)
        return datetime.fromtimestamp(mtime, tz=timezone.utc)

    def get_properties(self):
        """Return the metadata stored along with the object.

        This is the content hash, the content type and any user supplied
        metadata header.
        """
        path = self.properties_path
        try:
            with open(path, "rb") as f:
                return properties.load(f)
        except OSError as e:
            wrap_os_error(e, "read properties", path)
        except properties.PropertiesError as e:
            logger.debug("Malformed properties in %s: %s", path, e)
            raise StorageIOError(
                f"read properties failed for path={path}: {e}",
                operation="read properties",
                path=path,
            ) from e

    def store_properties(self, props):
        """Replace the sidecar with props (atomic via temp+rename)."""
        path = self.properties_path
        target_dir = os.path.dirname(path)
        tmp_path = os.path.join(
            target_dir, f"{SIDECAR_PREFIX}tmp_{uuid.uuid4().hex}{SIDECAR_SUFFIX}"
        )
        try:
            # final mode comes from the process umask
            fd = os.open(tmp_path, os.O_WRONLY | os.O_CREAT | os.O_EXCL, 0o666)
        except OSError as e:
            wrap_os_error(e, "write properties", path)
        try:
            try:
                with os.fdopen(fd, "wb") as f:
                    properties.dump(props, f)
                os.replace(tmp_path, path)
            except BaseException:
                with contextlib.suppress(OSError):
                    os.unlink(tmp_path)
                raise
        except OSError as e:
            wrap_os_error(e, "write properties", path)
