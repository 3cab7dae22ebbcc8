"""
Tests for the JStr view and the JString owned string.
"""

import pytest

from jstr import (JStr, JString, ModifiedUtf8Error, FromModifiedUtf8Error,
                  encode_char, is_valid)

SMILEY = '\U0001f600'
SMILEY_BYTES = b'\xed\xa0\xbd\xed\xb8\x80'


class TestConstruction:

    def test_validating_constructor(self):
        st = JStr(b'hello')
        assert len(st) == 5
        assert st.to_bytes() == b'hello'
        assert str(st) == 'hello'

    def test_from_modified_utf8(self):
        st = JStr.from_modified_utf8(b'a\xc0\x80b')
        assert str(st) == 'a\x00b'

    def test_rejects_invalid(self):
        with pytest.raises(ModifiedUtf8Error) as excinfo:
            JStr.from_modified_utf8(b'a\x00')
        assert excinfo.value.valid_up_to == 1
        assert excinfo.value.error_len == 1

    def test_view_does_not_copy(self):
        data = bytearray(b'abc')
        st = JStr.from_modified_utf8_mut(data)
        data[0] = ord('x')
        assert st.to_bytes() == b'xbc'

    def test_mut_needs_writable_buffer(self):
        with pytest.raises(TypeError):
            JStr.from_modified_utf8_mut(b'abc')

    def test_unchecked(self):
        st = JStr.from_modified_utf8_unchecked(b'abc')
        assert st == JStr(b'abc')

    def test_from_str(self):
        assert JStr.from_str('caf\xe9').to_bytes() == b'caf\xc3\xa9'
        with pytest.raises(ModifiedUtf8Error):
            JStr.from_str('a\x00b')
        with pytest.raises(ModifiedUtf8Error):
            JStr.from_str(SMILEY)

    def test_empty(self):
        assert len(JStr()) == 0
        assert len(JString()) == 0
        assert str(JString()) == ''


class TestLossyConversion:

    def test_valid_text_is_borrowed(self):
        st = JStr.from_utf8_str('plain text €')
        assert type(st) is JStr

    def test_nul_is_rewritten(self):
        st = JStr.from_utf8_str('a\x00b')
        assert isinstance(st, JString)
        assert st.to_bytes() == b'a\xc0\x80b'

    def test_above_bmp_is_rewritten(self):
        assert JStr.from_utf8_str(SMILEY).to_bytes() == SMILEY_BYTES

    def test_mixed(self):
        st = JStr.from_utf8_str('x\x00y' + SMILEY + 'z\x00')
        assert st.to_bytes() == (b'x\xc0\x80y' + SMILEY_BYTES +
                                 b'z\xc0\x80')

    def test_lone_surrogates_are_replaced(self):
        assert JStr.from_utf8_str('\ud800').to_bytes() == b'\xef\xbf\xbd'
        assert JStr.from_utf8_str('a\udc00b').to_bytes() == \
            b'a\xef\xbf\xbdb'

    def test_surrogate_code_point_pair_is_kept(self):
        st = JStr.from_utf8_str('\ud83d\ude00')
        assert st.to_bytes() == SMILEY_BYTES

    @pytest.mark.parametrize("text", [
        '',
        'ascii',
        '\x00',
        '\x00\x00\x00',
        SMILEY * 3,
        'caf\xe9 中文 ' + SMILEY + '\x00end',
        '\ud800𐀀',
        '\udfff' + SMILEY + '\x00',
    ])
    def test_always_valid(self, text):
        st = JStr.from_utf8_str(text)
        assert is_valid(st.to_bytes())

    @pytest.mark.parametrize("text", [
        'ascii',
        'a\x00b',
        'caf\xe9 中文',
        SMILEY + '\U0010ffff\U00010000',
        '\x00' + SMILEY + '\x00',
    ])
    def test_round_trip(self, text):
        assert JStr.from_utf8_str(text).into_str() == text
        assert str(JString.from_str(text)) == text

    def test_jstring_from_str_always_owns(self):
        st = JString.from_str('abc')
        assert type(st) is JString


class TestAccessors:

    def test_is_ascii(self):
        assert JStr(b'abc').is_ascii()
        assert JStr(b'').is_ascii()
        assert not JStr(b'a\xc0\x80').is_ascii()
        assert not JStr(b'\xe2\x82\xac').is_ascii()

    def test_as_bytes_is_read_only(self):
        view = JString(b'abc').as_bytes()
        assert bytes(view) == b'abc'
        assert view.readonly

    def test_encode_utf16(self):
        st = JStr.from_utf8_str('a' + SMILEY)
        assert st.encode_utf16() == [0x61, 0xd83d, 0xde00]

    def test_into_str(self):
        assert JStr(b'a\xc0\x80').into_str() == 'a\x00'
        assert JStr(SMILEY_BYTES).into_str() == SMILEY

    def test_bytes(self):
        assert bytes(JStr(b'abc')) == b'abc'


class TestCaseFolding:

    def test_only_ascii_letters_change(self):
        data = bytearray(b'Hello \xe2\x82\xac World' + SMILEY_BYTES)
        st = JStr.from_modified_utf8_mut(data)
        st.make_ascii_uppercase()
        assert data == bytearray(b'HELLO \xe2\x82\xac WORLD' + SMILEY_BYTES)
        st.make_ascii_lowercase()
        assert data == bytearray(b'hello \xe2\x82\xac world' + SMILEY_BYTES)

    def test_jstring(self):
        st = JString(b'MiXeD\xc0\x80')
        st.make_ascii_lowercase()
        assert st.to_bytes() == b'mixed\xc0\x80'

    def test_read_only_view(self):
        with pytest.raises(TypeError):
            JStr(b'abc').make_ascii_uppercase()


class TestComparison:

    def test_equal_and_hash(self):
        a = JStr(b'abc')
        b = JStr(bytearray(b'abc'))
        c = JString(b'abc')
        assert a == b == c
        assert hash(a) == hash(b) == hash(c)
        assert len({a, b, c}) == 1

    def test_not_equal(self):
        assert JStr(b'abc') != JStr(b'abd')
        assert JStr(b'abc') != 'abc'
        assert JStr(b'abc') != b'abc'

    def test_byte_order(self):
        items = [JStr(b'b'), JStr(b'\xc0\x80'), JStr(b'a'), JStr(b'B')]
        assert [x.to_bytes() for x in sorted(items)] == \
            [b'B', b'a', b'b', b'\xc0\x80']
        assert JStr(b'a') < JString(b'ab')
        assert JStr(b'b') >= JStr(b'a')

    def test_order_other_types(self):
        with pytest.raises(TypeError):
            JStr(b'a') < 'b'

    def test_dict_lookup_with_view(self):
        table = {JString(b'java/lang/Object'): 1}
        assert table[JStr(b'java/lang/Object')] == 1


class TestJString:

    def test_invalid_keeps_bytes(self):
        with pytest.raises(FromModifiedUtf8Error) as excinfo:
            JString.from_modified_utf8(b'a\x00')
        e = excinfo.value
        assert isinstance(e, ModifiedUtf8Error)
        assert e.into_bytes() == b'a\x00'
        assert bytes(e.as_bytes()) == b'a\x00'
        inner = e.modified_utf8_error()
        assert type(inner) is ModifiedUtf8Error
        assert (inner.valid_up_to, inner.error_len) == (1, 1)

    def test_owns_a_copy(self):
        data = bytearray(b'abc')
        st = JString(data)
        data[0] = ord('x')
        assert st.to_bytes() == b'abc'

    def test_push(self):
        st = JString()
        st.push('a')
        st.push('\x00')
        st.push(SMILEY)
        assert st.to_bytes() == b'a\xc0\x80' + SMILEY_BYTES
        assert str(st) == 'a\x00' + SMILEY

    def test_push_surrogate(self):
        with pytest.raises(ValueError):
            JString().push('\ud800')

    def test_push_jstr_and_clear(self):
        st = JString(b'ab')
        st.push_jstr(JStr(b'\xc0\x80'))
        assert st.to_bytes() == b'ab\xc0\x80'
        with pytest.raises(TypeError):
            st.push_jstr(b'cd')
        st.clear()
        assert len(st) == 0

    def test_no_growth_while_borrowed(self):
        st = JString(b'ab')
        view = st.as_jstr()
        with pytest.raises(BufferError):
            st.push('c')
        assert bytes(view) == b'ab'
        del view
        st.push('c')
        assert st.to_bytes() == b'abc'

    def test_to_owned(self):
        view = JStr(b'abc')
        owned = view.to_owned()
        assert type(owned) is JString
        assert owned == view
        assert owned.into_bytes() == b'abc'

    def test_unchecked(self):
        assert JString.from_modified_utf8_unchecked(b'ab').to_bytes() == b'ab'


class TestEncodeChar:

    @pytest.mark.parametrize("ch,expected", [
        ('a', b'a'),
        ('\x00', b'\xc0\x80'),
        ('\xe9', b'\xc3\xa9'),
        ('€', b'\xe2\x82\xac'),
        (SMILEY, SMILEY_BYTES),
    ])
    def test_encodings(self, ch, expected):
        st = encode_char(ch)
        assert st.to_bytes() == expected
        assert JStr.encode_char(ch).to_bytes() == expected

    def test_caller_buffer(self):
        buf = bytearray(6)
        st = encode_char('€', buf)
        assert bytes(buf[:3]) == b'\xe2\x82\xac'
        assert len(st) == 3
        assert str(st) == '€'

    def test_buffer_too_small(self):
        with pytest.raises(ValueError):
            encode_char(SMILEY, bytearray(3))


class TestRepr:

    def test_repr(self):
        assert repr(JStr(b'a"b')) == 'JStr("a\\"b")'
        assert repr(JString(b'a\xc0\x80')) == 'JString("a\\0")'
