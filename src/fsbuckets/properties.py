"""Reader and writer for the key=value sidecar format.

The format is the one produced by ``java.util.Properties.store``: latin-1
text, ``#`` or ``!`` comment lines, keys separated from values by ``=``,
``:`` or whitespace, backslash escapes (``\\uXXXX`` for anything outside
printable ASCII) and backslash line continuations. Existing stores were
written in this format, so files must keep reading and writing the same way.
"""

import re
import string
import time


ENCODING = "latin-1"

_WHITESPACE = " \t\f"
_SEPARATORS = "=:"
_ESCAPES = {"t": "\t", "n": "\n", "r": "\r", "f": "\f"}
_CONTROLS = {v: "\\" + k for k, v in _ESCAPES.items()}
_NEWLINE_RE = re.compile(r"\r\n|\r|\n")


class PropertiesError(ValueError):
    """The sidecar content cannot be parsed."""


def _utf16_units(c):
    code = ord(c)
    if code <= 0xFFFF:
        return [code]
    code -= 0x10000
    return [0xD800 + (code >> 10), 0xDC00 + (code & 0x3FF)]


def _escape(text, is_key):
    out = []
    for i, c in enumerate(text):
        if c == " ":
            out.append("\\ " if i == 0 or is_key else " ")
        elif c in _CONTROLS:
            out.append(_CONTROLS[c])
        elif c in "=:#!\\":
            out.append("\\" + c)
        elif c < " " or c > "~":
            out.extend(f"\\u{unit:04X}" for unit in _utf16_units(c))
        else:
            out.append(c)
    return "".join(out)


def _unescape(text):
    out = []
    i = 0
    n = len(text)
    while i < n:
        c = text[i]
        i += 1
        if c != "\\":
            out.append(c)
            continue
        if i >= n:
            break
        c = text[i]
        i += 1
        if c == "u":
            code = text[i : i + 4]
            if len(code) < 4 or not all(ch in string.hexdigits for ch in code):
                raise PropertiesError(f"Malformed \\uxxxx encoding: {text!r}")
            out.append(chr(int(code, 16)))
            i += 4
        else:
            out.append(_ESCAPES.get(c, c))
    # \u escapes may spell out UTF-16 surrogate pairs
    try:
        return "".join(out).encode("utf-16-le", "surrogatepass").decode("utf-16-le")
    except UnicodeDecodeError as e:
        raise PropertiesError(f"Unpaired surrogate in {text!r}") from e


def _logical_lines(text):
    pending = None
    for raw in _NEWLINE_RE.split(text):
        line = raw.lstrip(_WHITESPACE)
        if pending is None and (not line or line[0] in "#!"):
            continue
        trailing = len(line) - len(line.rstrip("\\"))
        if trailing % 2:
            pending = (pending or "") + line[:-1]
            continue
        yield (pending or "") + line
        pending = None
    if pending:
        yield pending


def _split(line):
    n = len(line)
    i = 0
    while i < n:
        c = line[i]
        if c == "\\":
            i += 2
            continue
        if c in _SEPARATORS or c in _WHITESPACE:
            break
        i += 1
    key = line[:i]
    j = i
    while j < n and line[j] in _WHITESPACE:
        j += 1
    if j < n and line[j] in _SEPARATORS:
        j += 1
        while j < n and line[j] in _WHITESPACE:
            j += 1
    return key, line[j:]


def loads(text):
    properties = {}
    for line in _logical_lines(text):
        key, value = _split(line)
        properties[_unescape(key)] = _unescape(value)
    return properties


def load(fp):
    """Parse properties from a binary file object."""
    return loads(fp.read().decode(ENCODING))


def _escape_comment(text):
    return "".join(
        c if " " <= c <= "~" else "".join(f"\\u{u:04X}" for u in _utf16_units(c))
        for c in text
    )


def dumps(properties, comment=""):
    lines = []
    if comment is not None:
        lines.extend("#" + _escape_comment(part) for part in _NEWLINE_RE.split(comment))
    lines.append("#" + _escape_comment(time.strftime("%a %b %d %H:%M:%S %Z %Y")))
    for key in sorted(properties):
        lines.append(
            f"{_escape(key, is_key=True)}={_escape(properties[key], is_key=False)}"
        )
    return "\n".join(lines) + "\n"


def dump(properties, fp, comment=""):
    """Write properties to a binary file object."""
    fp.write(dumps(properties, comment).encode(ENCODING))
