"""
Modified UTF-8 strings, as stored in JVM class files.

JStr borrows and JString owns bytes that are known to be valid Modified
UTF-8. Importing this package also registers the 'mutf-8' codec.
"""

__all__ = ["mutf8", "jstr", "iterators", "formatting", "codec",
           "constant_pool"]

from .mutf8 import (ModifiedUtf8Error, find_error, validate, is_valid,
                    encode_scalar)
from .jstr import JStr, JString, FromModifiedUtf8Error, encode_char
from .iterators import Bytes, JChars, JCharIndices, Chars
from .constant_pool import (ConstantUtf8, MalformedConstantPoolEntry,
                            read_entry, write_entry)
from . import codec

codec.register()

VERSION = (1, 0, 0)
"""jstr version as tuple."""


def _get_version():
    """Return the jstr version as string."""
    return ".".join([str(v) for v in VERSION])
