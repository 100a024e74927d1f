from zope.interface import Attribute
from zope.interface import Interface


class IVisibilityCache(Interface):
    """Shared, thread-safe bucket name -> public flag cache."""

    def get_or_compute(key, compute):
        """Return the cached value, calling compute(key) on a miss."""

    def put(key, value):
        """Overwrite the cached value for key."""


class IDigest(Interface):
    """Content digest of a stored file."""

    def base64():
        """Return the digest as base64 text."""

    def etag():
        """Return the quoted hex digest used as an integrity tag."""


class IStoredObject(Interface):
    """One object: a content file plus a metadata sidecar."""

    name = Attribute("Object id (file base name)")
    path = Attribute("Path of the content file")
    properties_path = Attribute("Path of the metadata sidecar")

    def exists():
        """True if the content file exists."""

    def delete():
        """Delete content file and sidecar."""

    def size():
        """Size of the content file in bytes."""

    def last_modified():
        """Modification time of the content file as an aware datetime."""

    def get_properties():
        """Return the metadata stored in the sidecar."""

    def store_properties(properties):
        """Replace the sidecar with the given metadata."""


class IBucket(Interface):
    """A named directory of stored objects."""

    name = Attribute("Bucket name (directory base name)")
    path = Attribute("Path of the bucket directory")

    def exists():
        """True if the bucket directory exists."""

    def create():
        """Create the bucket directory unless present."""

    def delete():
        """Remove the bucket directory and everything in it."""

    def get_objects():
        """List the objects in the bucket, hiding metadata files."""

    def is_private():
        """True unless the bucket is marked public."""

    def make_public():
        """Mark the bucket publicly readable."""

    def make_private():
        """Remove the public mark."""

    def get_object(name):
        """Return a handle for the object with the given name."""


class IStorage(Interface):
    """Registry of buckets below one root directory."""

    access_key = Attribute("Access key used by the protocol layer")
    secret_key = Attribute("Secret key used by the protocol layer")
    autocreate_buckets = Attribute("Create buckets on first use")

    def get_bucket(name):
        """Return a handle for the bucket with the given name."""

    def get_buckets():
        """List all buckets."""

    def diagnostics():
        """Describe the root directory and its free space."""
