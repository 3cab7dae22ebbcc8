"""
Tests for reading and writing CONSTANT_Utf8_info entries.
"""

from io import BytesIO

import pytest

from jstr import (JStr, JString, FromModifiedUtf8Error, ConstantUtf8,
                  MalformedConstantPoolEntry, read_entry, write_entry)
from jstr.constant_pool import CONSTANT_UTF8, MAX_LENGTH


class TestRead:

    def test_read_entry(self):
        buf = BytesIO(b'\x01\x00\x03abc\x01\x00\x02\xc0\x80')
        first = read_entry(buf)
        second = read_entry(buf)
        assert first.tag == CONSTANT_UTF8
        assert first.value == JStr(b'abc')
        assert str(second) == '\x00'
        assert buf.read() == b''

    def test_empty_string(self):
        entry = read_entry(BytesIO(b'\x01\x00\x00'))
        assert len(entry.value) == 0

    def test_invalid_string(self):
        with pytest.raises(MalformedConstantPoolEntry) as excinfo:
            read_entry(BytesIO(b'\x01\x00\x03a\x00b'))
        e = excinfo.value
        assert (e.valid_up_to, e.error_len) == (1, 1)
        assert isinstance(e.__cause__, FromModifiedUtf8Error)
        assert e.__cause__.into_bytes() == b'a\x00b'

    def test_unpaired_surrogate(self):
        with pytest.raises(MalformedConstantPoolEntry) as excinfo:
            read_entry(BytesIO(b'\x01\x00\x04\xed\xa0\xbdz'))
        assert (excinfo.value.valid_up_to, excinfo.value.error_len) == (0, 3)

    @pytest.mark.parametrize("data", [
        b'',
        b'\x01',
        b'\x01\x00',
        b'\x01\x00\x05ab',
    ])
    def test_truncated(self, data):
        with pytest.raises(MalformedConstantPoolEntry) as excinfo:
            read_entry(BytesIO(data))
        assert excinfo.value.error is None
        assert excinfo.value.valid_up_to is None
        assert excinfo.value.error_len is None

    def test_other_tag(self):
        with pytest.raises(MalformedConstantPoolEntry) as excinfo:
            read_entry(BytesIO(b'\x07\x00\x01'))
        assert 'tag 7' in str(excinfo.value)


class TestWrite:

    def test_write_entry(self):
        buf = BytesIO()
        write_entry(ConstantUtf8('a\x00'), buf)
        write_entry(ConstantUtf8(JStr(b'xy')), buf)
        assert buf.getvalue() == b'\x01\x00\x04a\xc0\x80\x01\x00\x02xy'

    def test_write_read(self):
        buf = BytesIO()
        entry = ConstantUtf8('java/lang/\U0001f600')
        write_entry(entry, buf)
        buf.seek(0)
        assert read_entry(buf) == entry

    def test_longest(self):
        buf = BytesIO()
        write_entry(ConstantUtf8('a' * MAX_LENGTH), buf)
        assert len(buf.getvalue()) == 3 + MAX_LENGTH

    def test_too_long(self):
        # every NUL takes two bytes
        with pytest.raises(ValueError):
            write_entry(ConstantUtf8('\x00' * 40000), BytesIO())


class TestConstantUtf8:

    def test_default(self):
        entry = ConstantUtf8()
        assert isinstance(entry.value, JString)
        assert str(entry) == ''

    def test_borrowed_value_is_copied(self):
        data = bytearray(b'abc')
        entry = ConstantUtf8(JStr.from_modified_utf8_mut(data))
        data[0] = ord('x')
        assert entry.value == JStr(b'abc')
        assert type(entry.value) is JString

    def test_equality(self):
        assert ConstantUtf8('abc') == ConstantUtf8(JString(b'abc'))
        assert ConstantUtf8('abc') != ConstantUtf8('abd')
        assert len({ConstantUtf8('abc'), ConstantUtf8('abc')}) == 1

    def test_repr(self):
        assert repr(ConstantUtf8('a"b')).startswith(
            '<ConstantUtf8(JString("a\\"b")) at 0x')
