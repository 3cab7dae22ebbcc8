"""
Read and write CONSTANT_Utf8_info entries of a class file constant pool.

Each entry is a tag byte (1), a big-endian u2 length and that many bytes
of Modified UTF-8. The same length-prefixed layout is what
java.io.DataOutput.writeUTF() produces.

Only this entry kind is handled here; the rest of the class file
structure is left to the code that walks it.
"""

import logging
from struct import Struct, error as StructError

from .jstr import JStr, JString, FromModifiedUtf8Error

CONSTANT_UTF8 = 1

MAX_LENGTH = 0xffff
"""Longest encoded string an entry can hold, in bytes."""

_TAG = Struct(">B")
_LENGTH = Struct(">H")


class MalformedConstantPoolEntry(Exception):
    """Exception raised on parse error of a constant pool entry.

    error is the ModifiedUtf8Error that rejected the bytes, or None when
    the entry itself is broken (truncated input, unknown tag).
    """

    def __init__(self, message, error=None):
        super(MalformedConstantPoolEntry, self).__init__(message)
        self.error = error

    @property
    def valid_up_to(self):
        return self.error.valid_up_to if self.error is not None else None

    @property
    def error_len(self):
        return self.error.error_len if self.error is not None else None


class ConstantUtf8(object):
    """A CONSTANT_Utf8_info entry holding a JString."""
    tag = CONSTANT_UTF8

    def __init__(self, value=None, buffer=None):
        if value is None:
            value = JString()
        elif isinstance(value, str):
            value = JString.from_str(value)
        elif isinstance(value, JStr) and not isinstance(value, JString):
            value = value.to_owned()
        self.value = value
        if buffer:
            self._parse_buffer(buffer)

    # Parsers and Generators
    def _parse_buffer(self, buffer):
        # Note: buffer.read() may raise an IOError, for example if buffer is
        # a corrupt gzip.GzipFile
        try:
            length = _LENGTH.unpack(buffer.read(_LENGTH.size))[0]
        except StructError:
            raise MalformedConstantPoolEntry(
                "Partial entry: length missing, input possibly truncated.")
        data = buffer.read(length)
        if len(data) != length:
            raise MalformedConstantPoolEntry(
                "Partial entry: expected %d bytes, got %d. Input possibly "
                "truncated." % (length, len(data)))
        try:
            self.value = JString.from_modified_utf8(data)
        except FromModifiedUtf8Error as e:
            logging.debug("Rejected %d byte Utf8 entry: %s", length, e)
            raise MalformedConstantPoolEntry(
                "Malformed constant pool entry: %s" % e,
                e.modified_utf8_error()) from e

    def _render_buffer(self, buffer):
        data = self.value.to_bytes()
        if len(data) > MAX_LENGTH:
            raise ValueError(
                "A Utf8 entry holds at most %d bytes, not %d" %
                (MAX_LENGTH, len(data)))
        buffer.write(_LENGTH.pack(len(data)))
        buffer.write(data)

    # Printing and Formatting
    def __str__(self):
        return str(self.value)

    def __repr__(self):
        return "<%s(%r) at 0x%x>" % (
            self.__class__.__name__, self.value, id(self))

    def __eq__(self, other):
        if not isinstance(other, ConstantUtf8):
            return NotImplemented
        return self.value == other.value

    def __hash__(self):
        return hash(self.value)


def read_entry(buffer):
    """Read a tag byte and the entry that follows it from buffer."""
    try:
        tag = _TAG.unpack(buffer.read(_TAG.size))[0]
    except StructError:
        raise MalformedConstantPoolEntry(
            "Partial entry: tag missing, input possibly truncated.")
    if tag != CONSTANT_UTF8:
        raise MalformedConstantPoolEntry(
            "Unsupported constant pool tag %d" % tag)
    return ConstantUtf8(buffer=buffer)


def write_entry(entry, buffer):
    """Write entry preceded by its tag byte."""
    buffer.write(_TAG.pack(entry.tag))
    entry._render_buffer(buffer)
