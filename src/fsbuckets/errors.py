import logging


logger = logging.getLogger(__name__)


class StorageError(Exception):
    """Base class for storage failures.

    ``operation`` and ``path`` identify what was being done where, so
    callers can log the failure without parsing the message.
    """

    def __init__(self, message, operation=None, path=None):
        super().__init__(message)
        self.operation = operation
        self.path = path


class InvalidName(StorageError, ValueError):
    """A bucket or object name contains '..', '/' or '\\'."""

    def __init__(self, kind, name):
        super().__init__(
            f"Invalid {kind} name: {name!r}. "
            f"A {kind} name must not contain '..', '/' or '\\'",
            operation="validate",
        )
        self.kind = kind
        self.name = name


class StorageIOError(StorageError, OSError):
    """A filesystem operation failed."""


class ConfigurationError(StorageError):
    """The storage root is missing or not a directory."""


def validate_name(kind, name):
    if ".." in name or "/" in name or "\\" in name:
        raise InvalidName(kind, name)
    return name


def wrap_os_error(e, operation, path):
    """Wrap an OSError in a StorageIOError, logging the original at DEBUG."""
    logger.debug("%s failed for path=%s: %s", operation, path, e)
    raise StorageIOError(
        f"{operation} failed for path={path}: {e.strerror or e}",
        operation=operation,
        path=str(path),
    ) from e
