"""
String types for Modified UTF-8 text.

JStr is a view: it wraps a memoryview over someone else's memory and
never copies it. JString owns its bytes in a bytearray and can grow. A
JString is a JStr, so every read operation works on both.

Both types keep one invariant: their bytes are valid Modified UTF-8.
The plain constructors validate. The ``*_unchecked`` constructors do not
and leave the invariant to the caller; they exist for bytes that were
validated already and must not be fed anything else.
"""

from .mutf8 import (ModifiedUtf8Error, as_view, find_error, validate,
                    encode_scalar, is_surrogate, utf8_width, ENCODED_NUL,
                    MAX_CHAR_LEN)
from .iterators import Bytes, JChars, JCharIndices, Chars
from . import formatting

_REPLACEMENT = encode_scalar(0xFFFD)


class FromModifiedUtf8Error(ModifiedUtf8Error):
    """Raised when a JString can not be built from the given bytes.

    Unlike ModifiedUtf8Error it keeps the rejected bytes, so the caller can
    inspect them or fall back to something else.
    """

    def __init__(self, data, valid_up_to, error_len=None):
        super(FromModifiedUtf8Error, self).__init__(valid_up_to, error_len)
        self.data = data

    def as_bytes(self):
        return memoryview(self.data).toreadonly()

    def into_bytes(self):
        return bytes(self.data)

    def modified_utf8_error(self):
        """Return the underlying error, without the bytes."""
        return ModifiedUtf8Error(self.valid_up_to, self.error_len)

    def __reduce__(self):
        return (self.__class__, (self.data, self.valid_up_to, self.error_len))


class JStr(object):
    """A string of valid Modified UTF-8 bytes borrowed from a buffer.

    Equality, ordering and hashing compare the encoded bytes, so a JStr
    and a JString with the same content are equal and hash the same.
    """
    __slots__ = ('_buf',)

    def __init__(self, data=b''):
        view = as_view(data)
        validate(view)
        self._buf = view

    @classmethod
    def _wrap(cls, buf):
        self = cls.__new__(cls)
        self._buf = buf
        return self

    # Constructors
    @classmethod
    def from_modified_utf8(cls, data):
        """Validate data and wrap it. Raise ModifiedUtf8Error if invalid."""
        return JStr(data)

    @classmethod
    def from_modified_utf8_mut(cls, data):
        """Like from_modified_utf8(), but data must be writable.

        The result supports the in place make_ascii_*() methods.
        """
        view = as_view(data)
        if view.readonly:
            raise TypeError("a writable buffer is required, not %s"
                            % type(data).__name__)
        validate(view)
        return JStr._wrap(view)

    @classmethod
    def from_modified_utf8_unchecked(cls, data):
        """Wrap data WITHOUT validating it.

        The caller guarantees that data is valid Modified UTF-8. Breaking
        that contract is not detected here and makes every later operation
        on the result meaningless.
        """
        return JStr._wrap(as_view(data))

    @classmethod
    def from_modified_utf8_unchecked_mut(cls, data):
        """Writable variant of from_modified_utf8_unchecked(), same contract.
        """
        view = as_view(data)
        if view.readonly:
            raise TypeError("a writable buffer is required, not %s"
                            % type(data).__name__)
        return JStr._wrap(view)

    @classmethod
    def from_str(cls, text):
        """Validate the UTF-8 encoding of text as Modified UTF-8.

        Fails for text containing U+0000 or characters above U+FFFF; use
        from_utf8_str() to convert those.
        """
        return JStr(text.encode('utf-8', 'surrogatepass'))

    @classmethod
    def from_utf8_str(cls, text):
        """Convert text, replacing what Modified UTF-8 writes differently.

        Never fails. Returns a JStr over the UTF-8 bytes of text when they
        are already valid, a new JString otherwise. Unpaired surrogate
        code points become U+FFFD.
        """
        data = text.encode('utf-8', 'surrogatepass')
        error = find_error(data)
        if error is None:
            return JStr._wrap(as_view(data))
        return JString._wrap(_repair(data, error))

    # Accessors
    def as_bytes(self):
        """Return a read-only memoryview of the encoded bytes."""
        return memoryview(self._buf).toreadonly()

    def to_bytes(self):
        return bytes(self._buf)

    def __bytes__(self):
        return bytes(self._buf)

    def __len__(self):
        """Length in bytes, not in characters."""
        return len(self._buf)

    def is_ascii(self):
        # no byte of a multi byte sequence is below 0x80
        return not any(b & 0x80 for b in self._buf)

    def make_ascii_lowercase(self):
        """Lowercase the ASCII letters in place.

        Needs a writable buffer. No revalidation is done since ASCII
        letters never take part in multi byte sequences.
        """
        self._buf[:] = bytes(self._buf).lower()

    def make_ascii_uppercase(self):
        """Uppercase the ASCII letters in place. See make_ascii_lowercase().
        """
        self._buf[:] = bytes(self._buf).upper()

    # Iterators
    def iter_bytes(self):
        return Bytes(self._buf)

    def jchars(self):
        """Iterate over the 16-bit code units (Java chars)."""
        return JChars(Bytes(self._buf))

    def jchar_indices(self):
        """Iterate over (byte offset, code unit) tuples."""
        return JCharIndices(Bytes(self._buf))

    def chars(self):
        """Iterate over the characters, one str per scalar value."""
        return Chars(JChars(Bytes(self._buf)))

    def __iter__(self):
        return self.chars()

    # Conversions
    def into_str(self):
        """Return the content as a str."""
        try:
            # Modified UTF-8 without NULs or surrogate pairs is plain UTF-8
            return str(self._buf, 'utf-8')
        except UnicodeDecodeError:
            return ''.join(self.chars())

    def encode_utf16(self):
        """Return the content as a list of 16-bit code units."""
        return list(self.jchars())

    def to_owned(self):
        return JString._wrap(bytearray(self._buf))

    # Encoding
    @staticmethod
    def encode_char(ch, buffer=None):
        return encode_char(ch, buffer)

    # Comparison
    def __eq__(self, other):
        if not isinstance(other, JStr):
            return NotImplemented
        return bytes(self._buf) == bytes(other._buf)

    def __ne__(self, other):
        if not isinstance(other, JStr):
            return NotImplemented
        return bytes(self._buf) != bytes(other._buf)

    def __lt__(self, other):
        if not isinstance(other, JStr):
            return NotImplemented
        return bytes(self._buf) < bytes(other._buf)

    def __le__(self, other):
        if not isinstance(other, JStr):
            return NotImplemented
        return bytes(self._buf) <= bytes(other._buf)

    def __gt__(self, other):
        if not isinstance(other, JStr):
            return NotImplemented
        return bytes(self._buf) > bytes(other._buf)

    def __ge__(self, other):
        if not isinstance(other, JStr):
            return NotImplemented
        return bytes(self._buf) >= bytes(other._buf)

    def __hash__(self):
        return hash(bytes(self._buf))

    # Printing and Formatting
    def __str__(self):
        return formatting.display(self._buf)

    def escape_debug(self):
        """Return the content quoted, with unprintable characters escaped."""
        return formatting.escape_debug(self._buf)

    def __repr__(self):
        return "%s(%s)" % (self.__class__.__name__, self.escape_debug())


class JString(JStr):
    """A growable string of valid Modified UTF-8 bytes that owns its data.

    Like bytearray, a JString can not be resized while a view of it is
    alive (see as_jstr() and as_bytes()); growing it then raises
    BufferError.
    """
    __slots__ = ()

    def __init__(self, data=b''):
        buf = bytearray(data)
        error = find_error(buf)
        if error is not None:
            if not isinstance(data, (bytes, bytearray, memoryview)):
                data = bytes(buf)
            raise FromModifiedUtf8Error(data, error.valid_up_to,
                                        error.error_len)
        self._buf = buf

    @classmethod
    def from_modified_utf8(cls, data):
        """Copy and validate data. Raise FromModifiedUtf8Error if invalid."""
        return JString(data)

    @classmethod
    def from_modified_utf8_unchecked(cls, data):
        """Copy data WITHOUT validating it. Same contract as
        JStr.from_modified_utf8_unchecked()."""
        return JString._wrap(bytearray(data))

    @classmethod
    def from_str(cls, text):
        """Convert text like JStr.from_utf8_str(), always to a new JString.
        """
        st = JStr.from_utf8_str(text)
        if isinstance(st, JString):
            return st
        return st.to_owned()

    def as_jstr(self):
        """Return a JStr borrowing this string's bytes."""
        return JStr._wrap(memoryview(self._buf))

    def into_bytes(self):
        return bytes(self._buf)

    def push(self, ch):
        """Append one character."""
        self._buf += encode_scalar(ord(ch))

    def push_jstr(self, other):
        """Append the content of another JStr."""
        if not isinstance(other, JStr):
            raise TypeError("can only append a JStr, not %s"
                            % type(other).__name__)
        self._buf += other._buf

    def clear(self):
        del self._buf[:]


def encode_char(ch, buffer=None):
    """Encode one character into buffer and return a JStr over the result.

    buffer is a writable buffer of at least 6 bytes, allocated when not
    given. The returned JStr borrows it.
    """
    encoded = encode_scalar(ord(ch))
    if buffer is None:
        buffer = bytearray(MAX_CHAR_LEN)
    view = as_view(buffer)
    if len(view) < len(encoded):
        raise ValueError("buffer of %d bytes is too small, %d needed"
                         % (len(view), len(encoded)))
    view[:len(encoded)] = encoded
    return JStr._wrap(view[:len(encoded)])


def _repair_char(cp):
    """Return the Modified UTF-8 bytes for a code point that failed
    validation in a UTF-8 buffer."""
    if cp == 0:
        return ENCODED_NUL
    elif is_surrogate(cp):
        # unpaired, there is nothing to pair it with
        return _REPLACEMENT
    return encode_scalar(cp)


def _repair(data, error):
    """Rewrite the UTF-8 bytes data, invalid from error on, as a bytearray
    of valid Modified UTF-8."""
    out = bytearray(data[:error.valid_up_to])
    rest = memoryview(data)[error.valid_up_to:]
    while True:
        # rest starts with the UTF-8 sequence the validator stopped at
        width = utf8_width(rest[0])
        cp = ord(str(rest[:width], 'utf-8', 'surrogatepass'))
        out += _repair_char(cp)
        rest = rest[width:]
        error = find_error(rest)
        if error is None:
            out += rest
            return out
        out += rest[:error.valid_up_to]
        rest = rest[error.valid_up_to:]
