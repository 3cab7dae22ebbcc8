"""
Iterators over the contents of a JStr.

Three layers, each one wrapping the previous:

 * Bytes yields the raw bytes.
 * JChars yields 16-bit code units (Java chars); both halves of a
   surrogate pair are yielded separately.
 * Chars yields one character str per Unicode scalar value, recombining
   surrogate pairs.

All of them require valid Modified UTF-8 input. A multi byte sequence
cut short is a broken precondition, checked with assert only.
"""

from .mutf8 import HIGH_SURROGATE_MIN, HIGH_SURROGATE_MAX, combine_surrogates


class Bytes(object):
    """Double ended iterator over the bytes of a buffer, as ints."""
    __slots__ = ('_buf', '_front', '_back')

    def __init__(self, buf):
        self._buf = buf
        self._front = 0
        self._back = len(buf)

    def __iter__(self):
        return self

    def __next__(self):
        if self._front >= self._back:
            raise StopIteration
        b = self._buf[self._front]
        self._front += 1
        return b

    def next_back(self):
        """Return the last remaining byte, raise StopIteration when empty."""
        if self._front >= self._back:
            raise StopIteration
        self._back -= 1
        return self._buf[self._back]

    def __reversed__(self):
        while self._front < self._back:
            yield self.next_back()

    def __len__(self):
        return self._back - self._front

    def __length_hint__(self):
        return self._back - self._front

    def size_hint(self):
        """Return (lower, upper) bounds of the number of remaining items."""
        n = len(self)
        return (n, n)

    @property
    def position(self):
        """Index of the next byte yielded from the front."""
        return self._front


class JChars(object):
    """Iterator of 16-bit code units decoded from a Bytes iterator."""
    __slots__ = ('_bytes',)

    def __init__(self, byte_iter):
        self._bytes = byte_iter

    def __iter__(self):
        return self

    def _continuation(self):
        b = next(self._bytes, None)
        assert b is not None, "Unexpected end of JStr"
        return b & 0x3f

    def __next__(self):
        first = next(self._bytes)
        if first & 0x80 == 0:
            return first
        elif first & 0xe0 == 0xc0:
            return (first & 0x1f) << 6 | self._continuation()
        unit = (first & 0x0f) << 12 | self._continuation() << 6
        return unit | self._continuation()

    def size_hint(self):
        # one code unit takes between 1 and 3 bytes
        n = len(self._bytes)
        return (n // 3, n)

    def __length_hint__(self):
        return len(self._bytes) // 3

    @property
    def position(self):
        return self._bytes.position


class JCharIndices(JChars):
    """Like JChars, but yields (byte offset, code unit) tuples."""
    __slots__ = ()

    def __next__(self):
        pos = self._bytes.position
        return pos, JChars.__next__(self)


class Chars(object):
    """Iterator of Unicode characters decoded from a JChars iterator."""
    __slots__ = ('_units',)

    def __init__(self, jchars):
        self._units = jchars

    def __iter__(self):
        return self

    def __next__(self):
        unit = next(self._units)
        if HIGH_SURROGATE_MIN <= unit <= HIGH_SURROGATE_MAX:
            low = next(self._units, None)
            assert low is not None, "Unexpected end of JStr"
            return chr(combine_surrogates(unit, low))
        return chr(unit)

    def size_hint(self):
        lo, hi = self._units.size_hint()
        return (lo // 2, hi)

    def __length_hint__(self):
        return self.size_hint()[0]

    @property
    def position(self):
        return self._units.position


def decode_char(buf):
    """Decode the first character of buf, return (char, bytes used)."""
    chars = Chars(JChars(Bytes(buf)))
    ch = next(chars)
    return ch, chars.position
