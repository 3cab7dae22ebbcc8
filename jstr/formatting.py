"""
Render Modified UTF-8 as Python text.

Most Modified UTF-8 is also standard UTF-8, so runs are handed to the
interpreter's UTF-8 decoder as they are. Only the sequences it refuses
(the two byte NUL and the 6 byte surrogate pairs) are decoded one
character at a time.
"""

from .mutf8 import as_view
from .iterators import decode_char

_ESCAPES = {
    '\\': '\\\\',
    '"': '\\"',
    '\t': '\\t',
    '\r': '\\r',
    '\n': '\\n',
    '\0': '\\0',
}


def iter_runs(data):
    """Yield the decoded text of data in pieces.

    data must be valid Modified UTF-8.
    """
    view = as_view(data)
    while view:
        try:
            yield str(view, 'utf-8')
            return
        except UnicodeDecodeError as e:
            if e.start:
                yield str(view[:e.start], 'utf-8')
            ch, used = decode_char(view[e.start:])
            yield ch
            view = view[e.start + used:]


def display(data):
    """Return data decoded to a str."""
    return ''.join(iter_runs(data))


def escape_char(ch):
    """Return ch escaped for debug output."""
    escaped = _ESCAPES.get(ch)
    if escaped is not None:
        return escaped
    if ch.isprintable():
        return ch
    cp = ord(ch)
    if cp < 0x100:
        return '\\x%02x' % cp
    elif cp < 0x10000:
        return '\\u%04x' % cp
    return '\\U%08x' % cp


def escape_debug(data):
    """Return data decoded, escaped and wrapped in double quotes."""
    parts = ['"']
    for run in iter_runs(data):
        parts.extend(escape_char(ch) for ch in run)
    parts.append('"')
    return ''.join(parts)
