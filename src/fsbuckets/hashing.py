from fsbuckets.errors import wrap_os_error
from fsbuckets.interfaces import IDigest
from zope.interface import implementer

import base64
import hashlib


CHUNK_SIZE = 64 * 1024


@implementer(IDigest)
class Digest:
    """MD5 digest of a file's content."""

    def __init__(self, digest):
        self._digest = digest

    def __eq__(self, other):
        if not isinstance(other, Digest):
            return NotImplemented
        return self._digest == other._digest

    def __hash__(self):
        return hash(self._digest)

    def __repr__(self):
        return f"<Digest {self.hexdigest()}>"

    def digest(self):
        return self._digest

    def hexdigest(self):
        return self._digest.hex()

    def base64(self):
        """Digest as base64, the form used by Content-MD5 headers."""
        return base64.b64encode(self._digest).decode("ascii")

    def etag(self):
        """Digest as quoted lowercase hex, the form used by ETag headers."""
        return f'"{self.hexdigest()}"'


def md5(path, chunk_size=CHUNK_SIZE):
    """Stream the file at path through MD5 and return its Digest."""
    h = hashlib.md5()
    try:
        with open(path, "rb") as f:
            for chunk in iter(lambda: f.read(chunk_size), b""):
                h.update(chunk)
    except OSError as e:
        wrap_os_error(e, "hash", path)
    return Digest(h.digest())
