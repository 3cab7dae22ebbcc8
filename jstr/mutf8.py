"""
Validate and encode the Modified UTF-8 format used for every textual
constant of JVM class files.

Modified UTF-8 is standard UTF-8 with two differences:

 * U+0000 is always written as the two byte sequence ``0xC0 0x80``, so a
   literal ``0x00`` byte never appears.
 * Code points above U+FFFF are written as a UTF-16 surrogate pair, each
   half encoded on its own as a 3 byte sequence (6 bytes in total). 4 byte
   sequences never appear.

For more information about the format:
https://docs.oracle.com/javase/specs/jvms/se17/html/jvms-4.html#jvms-4.4.7
"""

HIGH_SURROGATE_MIN = 0xD800
HIGH_SURROGATE_MAX = 0xDBFF
LOW_SURROGATE_MIN = 0xDC00
LOW_SURROGATE_MAX = 0xDFFF
MAX_SCALAR = 0x10FFFF

ENCODED_NUL = b'\xc0\x80'
"""Modified UTF-8 encoding of U+0000."""

MAX_CHAR_LEN = 6
"""Longest encoding of a single scalar value (a surrogate pair)."""


class ModifiedUtf8Error(ValueError):
    """Exception raised when a byte buffer is not valid Modified UTF-8.

    ``valid_up_to`` is the index up to which the input was verified. For
    every error with a known length, ``data[:valid_up_to]`` is itself
    valid Modified UTF-8 and the erroneous sequence starts there.

    ``error_len`` is the length of the erroneous sequence (1, 2, 3 or 6
    bytes), or None when the input ends in the middle of a sequence.
    """

    def __init__(self, valid_up_to, error_len=None):
        self.valid_up_to = valid_up_to
        self.error_len = error_len
        if error_len is None:
            message = ("incomplete Modified UTF-8 byte sequence "
                       "from index %d" % valid_up_to)
        else:
            message = ("invalid Modified UTF-8 sequence of %d bytes "
                       "from index %d" % (error_len, valid_up_to))
        super(ModifiedUtf8Error, self).__init__(message)

    @property
    def reason(self):
        """Short reason, in the wording of the codecs module."""
        if self.error_len is None:
            return "unexpected end of data"
        elif self.error_len == 3:
            return "invalid or unpaired 3-byte sequence"
        elif self.error_len == 6:
            return "invalid surrogate pair"
        return "invalid %d-byte sequence" % self.error_len

    def __reduce__(self):
        return (self.__class__, (self.valid_up_to, self.error_len))


def as_view(data):
    """Return a flat, unsigned byte memoryview over data without copying."""
    view = memoryview(data)
    if view.format != 'B' or view.ndim != 1:
        view = view.cast('B')
    return view


def find_error(data):
    """Scan data once and return the first ModifiedUtf8Error, or None.

    A high surrogate stays pending until its low half is read. While one
    is pending, any other malformation is reported as the unpaired
    surrogate (3 bytes at the surrogate) instead, except a truncated
    sequence at the very end of the input.
    """
    view = as_view(data)
    end = len(view)
    # (surrogate value, byte position) of a high surrogate without its pair
    pair_start = None
    i = 0
    while i < end:
        pos = i
        b = view[i]
        i += 1
        if b == 0:
            if pair_start is not None:
                return ModifiedUtf8Error(pair_start[1], 3)
            return ModifiedUtf8Error(pos, 1)
        elif b & 0xc0 == 0x80:
            # continuation byte without a lead byte
            if pair_start is not None:
                return ModifiedUtf8Error(pair_start[1], 3)
            return ModifiedUtf8Error(pos, 1)
        elif b & 0xe0 == 0xc0:
            if pair_start is not None:
                return ModifiedUtf8Error(pair_start[1], 3)
            if i >= end:
                return ModifiedUtf8Error(pos + 1)
            cont = view[i]
            i += 1
            if cont & 0xc0 != 0x80:
                return ModifiedUtf8Error(pos, 2)
        elif b & 0xf0 == 0xe0:
            if i >= end:
                return ModifiedUtf8Error(pos + 1)
            cont1 = view[i]
            i += 1
            if cont1 & 0xc0 != 0x80:
                if pair_start is not None:
                    return ModifiedUtf8Error(pair_start[1], 3)
                return ModifiedUtf8Error(pos, 3)
            if i >= end:
                return ModifiedUtf8Error(pos + 2)
            cont2 = view[i]
            i += 1
            if cont2 & 0xc0 != 0x80:
                if pair_start is not None:
                    return ModifiedUtf8Error(pair_start[1], 3)
                return ModifiedUtf8Error(pos, 3)
            val = (b & 0x0f) << 12 | (cont1 & 0x3f) << 6 | (cont2 & 0x3f)
            if HIGH_SURROGATE_MIN <= val <= HIGH_SURROGATE_MAX:
                if pair_start is not None:
                    # two high surrogates in a row
                    return ModifiedUtf8Error(pair_start[1], 3)
                pair_start = (val, pos)
            elif LOW_SURROGATE_MIN <= val <= LOW_SURROGATE_MAX:
                if pair_start is None:
                    # lone low surrogate
                    return ModifiedUtf8Error(pos, 3)
                high, start = pair_start
                if combine_surrogates(high, val) > MAX_SCALAR:
                    return ModifiedUtf8Error(start, 6)
                pair_start = None
            elif pair_start is not None:
                return ModifiedUtf8Error(pair_start[1], 3)
        elif b & 0xf0 == 0xf0:
            # 4 byte sequences are never valid
            if pair_start is not None:
                return ModifiedUtf8Error(pair_start[1], 3)
            return ModifiedUtf8Error(pos, 1)
        elif pair_start is not None:
            return ModifiedUtf8Error(pair_start[1], 3)

    if pair_start is not None:
        return ModifiedUtf8Error(pair_start[1], 3)
    return None


def validate(data):
    """Raise ModifiedUtf8Error unless data is valid Modified UTF-8."""
    error = find_error(data)
    if error is not None:
        raise error


def is_valid(data):
    """Return True if data is valid Modified UTF-8."""
    return find_error(data) is None


def combine_surrogates(high, low):
    """Return the scalar value encoded by a high and a low surrogate."""
    return 0x10000 + ((high & 0x3ff) << 10) + (low & 0x3ff)


def split_surrogates(scalar):
    """Return the (high, low) UTF-16 surrogates of a scalar >= 0x10000."""
    scalar -= 0x10000
    return (HIGH_SURROGATE_MIN | (scalar >> 10),
            LOW_SURROGATE_MIN | (scalar & 0x3ff))


def is_surrogate(value):
    return HIGH_SURROGATE_MIN <= value <= LOW_SURROGATE_MAX


def encode_utf16_unit(unit):
    """Return the 1, 2 or 3 byte encoding of one 16-bit code unit."""
    if 0 < unit < 0x80:
        return bytes((unit,))
    elif unit < 0x800:
        # also covers U+0000
        return bytes((0xc0 | (unit >> 6), 0x80 | (unit & 0x3f)))
    return bytes((0xe0 | (unit >> 12),
                  0x80 | ((unit >> 6) & 0x3f),
                  0x80 | (unit & 0x3f)))


def encode_scalar(scalar):
    """Return the Modified UTF-8 encoding of a scalar value.

    Scalars above U+FFFF are written as two 3 byte surrogate halves.
    Surrogate code points are not scalar values and raise ValueError.
    """
    if scalar < 0 or scalar > MAX_SCALAR:
        raise ValueError("%#x is not a Unicode scalar value" % scalar)
    if is_surrogate(scalar):
        raise ValueError(
            "Surrogate code point U+%04X is not a scalar value" % scalar)
    if scalar < 0x10000:
        return encode_utf16_unit(scalar)
    high, low = split_surrogates(scalar)
    return encode_utf16_unit(high) + encode_utf16_unit(low)


def utf8_width(lead):
    """Return the length of the standard UTF-8 sequence starting with lead."""
    if lead < 0x80:
        return 1
    elif lead < 0xe0:
        return 2
    elif lead < 0xf0:
        return 3
    return 4


def sequence_start(data, valid_up_to):
    """Return where the truncated sequence reported at valid_up_to starts.

    Truncation errors point just past the bytes read (the lead byte and at
    most one continuation byte).
    """
    view = as_view(data)
    i = valid_up_to - 1
    if i > 0 and view[i] & 0xc0 == 0x80:
        i -= 1
    return i
