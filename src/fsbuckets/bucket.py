from fsbuckets.errors import validate_name
from fsbuckets.errors import wrap_os_error
from fsbuckets.interfaces import IBucket
from fsbuckets.objects import is_metadata
from fsbuckets.objects import SIDECAR_PREFIX
from fsbuckets.objects import StoredObject
from fsbuckets.utils import entry_is_file
from zope.interface import implementer

import logging
import os


logger = logging.getLogger(__name__)

PUBLIC_MARKER = f"{SIDECAR_PREFIX}public"


def _unlink(path):
    try:
        os.remove(path)
    except FileNotFoundError:
        pass
    except OSError as e:
        logger.warning("Could not delete %s: %s", path, e)
        return e
    return None


def remove_tree(path):
    """Remove path and everything below it, depth first.

    Returns None on success, otherwise the first error encountered. A
    directory is only removed once all of its children are gone. Entries
    whose type cannot be read are still unlinked, since delete-only access
    is possible. Anything already missing counts as removed.
    """
    try:
        with os.scandir(path) as it:
            entries = list(it)
    except FileNotFoundError:
        return None
    except OSError as e:
        logger.warning("Could not read directory %s: %s", path, e)
        return e

    error = None
    for entry in entries:
        try:
            is_dir = entry.is_dir(follow_symlinks=False)
        except OSError:
            is_dir = False
        child_error = remove_tree(entry.path) if is_dir else _unlink(entry.path)
        if error is None:
            error = child_error

    if error is not None:
        return error
    try:
        os.rmdir(path)
    except FileNotFoundError:
        pass
    except OSError as e:
        logger.warning("Could not delete directory %s: %s", path, e)
        return e
    return None


@implementer(IBucket)
class Bucket:
    """A bucket: a directory within the storage root.

    Whether the bucket is public is persisted as the presence of a marker
    file and looked up through the visibility cache shared by all handles.
    """

    def __init__(self, path, cache, check_root=None):
        self.path = os.fspath(path)
        self._cache = cache
        self._check_root = check_root

    def __eq__(self, other):
        if not isinstance(other, Bucket):
            return NotImplemented
        return self.path == other.path

    def __hash__(self):
        return hash(self.path)

    def __repr__(self):
        return f"<Bucket {self.path}>"

    @property
    def name(self):
        return os.path.basename(self.path)

    @property
    def _marker_path(self):
        return os.path.join(self.path, PUBLIC_MARKER)

    def exists(self):
        return os.path.exists(self.path)

    def create(self):
        """Create the bucket directory. Existing directories are left alone.

        Handles obtained from a Storage recheck the storage root first, so
        a vanished root is never recreated here.
        """
        if self._check_root is not None:
            self._check_root()
        if os.path.exists(self.path):
            return
        try:
            os.makedirs(self.path, exist_ok=True)
        except OSError as e:
            wrap_os_error(e, "create bucket", self.path)
        logger.info("Created bucket %s", self.name)

    def delete(self):
        """Delete the bucket and all of its contents."""
        error = remove_tree(self.path)
        if error is not None:
            wrap_os_error(error, "delete bucket", getattr(error, "filename", self.path))
        logger.info("Deleted bucket %s", self.name)

    def get_objects(self):
        """Return all stored objects, sorted by name.

        Sidecars and the public marker are hidden. An unreadable directory
        yields an empty list.
        """
        try:
            with os.scandir(self.path) as it:
                return sorted(
                    (
                        StoredObject(entry.path)
                        for entry in it
                        if not is_metadata(entry.name)
                        and entry_is_file(entry)
                    ),
                    key=lambda obj: obj.name,
                )
        except OSError as e:
            logger.warning("Could not list objects of bucket %s: %s", self.name, e)
            return []

    def _compute_public(self, _name):
        return os.path.exists(self._marker_path)

    def is_private(self):
        return not self._cache.get_or_compute(self.name, self._compute_public)

    def make_public(self):
        try:
            with open(self._marker_path, "xb"):
                pass
        except FileExistsError:
            pass
        except OSError as e:
            wrap_os_error(e, "make public", self._marker_path)
        else:
            logger.info("Bucket %s is now public", self.name)
        self._cache.put(self.name, True)

    def make_private(self):
        try:
            os.remove(self._marker_path)
        except FileNotFoundError:
            pass
        except OSError as e:
            wrap_os_error(e, "make private", self._marker_path)
        else:
            logger.info("Bucket %s is now private", self.name)
        self._cache.put(self.name, False)

    def get_object(self, name):
        """Return the object with the given name; it need not exist."""
        validate_name("object", name)
        return StoredObject(os.path.join(self.path, name))
