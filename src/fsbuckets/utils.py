_UNITS = ("KB", "MB", "GB", "TB", "PB")


def format_size(num_bytes):
    """Render a byte count for humans, e.g. '512 Bytes' or '1.5 MB'."""
    if num_bytes < 1024:
        return f"{num_bytes} Bytes"
    size = float(num_bytes)
    for unit in _UNITS:
        size /= 1024
        if size < 1024 or unit == _UNITS[-1]:
            return f"{size:.1f} {unit}"


def entry_is_file(entry):
    """DirEntry.is_file(), treating entries that cannot be stat'ed as no file."""
    try:
        return entry.is_file()
    except OSError:
        return False


def entry_is_dir(entry):
    """DirEntry.is_dir(), treating entries that cannot be stat'ed as no directory."""
    try:
        return entry.is_dir()
    except OSError:
        return False
