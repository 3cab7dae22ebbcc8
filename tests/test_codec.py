"""
Tests for the 'mutf-8' codec.
"""

import codecs
import io

import pytest

import jstr  # noqa: F401  registers the codec

SMILEY = '\U0001f600'
SMILEY_BYTES = b'\xed\xa0\xbd\xed\xb8\x80'


class TestLookup:

    @pytest.mark.parametrize("name", [
        'mutf-8', 'MUTF-8', 'mutf_8', 'mutf8', 'modified-utf-8',
        'Modified UTF-8', 'java-utf-8',
    ])
    def test_names(self, name):
        assert codecs.lookup(name).name == 'mutf-8'

    def test_other_names_untouched(self):
        assert codecs.lookup('utf-8').name == 'utf-8'


class TestEncode:

    def test_encode(self):
        assert 'a\x00b'.encode('mutf-8') == b'a\xc0\x80b'
        assert SMILEY.encode('mutf-8') == SMILEY_BYTES
        assert 'caf\xe9'.encode('mutf-8') == b'caf\xc3\xa9'

    def test_lone_surrogate_strict(self):
        with pytest.raises(UnicodeEncodeError) as excinfo:
            'ab\udc00c'.encode('mutf-8')
        e = excinfo.value
        assert (e.start, e.end) == (2, 3)
        assert e.encoding == 'mutf-8'

    @pytest.mark.parametrize("errors,expected", [
        ('replace', b'?x?' + SMILEY_BYTES),
        ('ignore', b'x' + SMILEY_BYTES),
        ('backslashreplace', b'\\ud800x\\udfff' + SMILEY_BYTES),
    ])
    def test_lone_surrogate_handlers(self, errors, expected):
        text = '\ud800x\udfff\ud83d\ude00'
        assert text.encode('mutf-8', errors) == expected

    def test_surrogate_code_point_pair(self):
        assert 'a\ud83d\ude00'.encode('mutf-8') == b'a' + SMILEY_BYTES

    def test_incremental_split_pair(self):
        encoder = codecs.getincrementalencoder('mutf-8')()
        out = encoder.encode('a\ud83d')
        out += encoder.encode('\ude00', final=True)
        assert out == b'a' + SMILEY_BYTES

    def test_incremental_trailing_high(self):
        encoder = codecs.getincrementalencoder('mutf-8')('replace')
        assert encoder.encode('\ud83d') == b''
        assert encoder.encode('', final=True) == b'?'

    def test_incremental_state(self):
        first = codecs.getincrementalencoder('mutf-8')()
        assert first.encode('a\ud83d') == b'a'
        state = first.getstate()
        assert state == 0xd83d
        second = codecs.getincrementalencoder('mutf-8')()
        second.setstate(state)
        assert second.encode('\ude00', final=True) == SMILEY_BYTES
        second.setstate(0)
        assert second.getstate() == 0
        assert second.encode('b', final=True) == b'b'


class TestDecode:

    def test_decode(self):
        assert b'a\xc0\x80b'.decode('mutf-8') == 'a\x00b'
        assert SMILEY_BYTES.decode('mutf-8') == SMILEY
        assert b''.decode('mutf-8') == ''

    def test_strict(self):
        with pytest.raises(UnicodeDecodeError) as excinfo:
            b'ab\x00c'.decode('mutf-8')
        e = excinfo.value
        assert (e.start, e.end) == (2, 3)
        assert e.encoding == 'mutf-8'

    def test_strict_unpaired(self):
        with pytest.raises(UnicodeDecodeError) as excinfo:
            (b'x' + SMILEY_BYTES[:3] + b'y').decode('mutf-8')
        assert (excinfo.value.start, excinfo.value.end) == (1, 4)

    def test_strict_truncated(self):
        with pytest.raises(UnicodeDecodeError) as excinfo:
            b'ab\xe2\x82'.decode('mutf-8')
        e = excinfo.value
        assert (e.start, e.end) == (2, 4)
        assert e.reason == 'unexpected end of data'

    def test_four_byte_utf8(self):
        with pytest.raises(UnicodeDecodeError):
            SMILEY.encode('utf-8').decode('mutf-8')

    def test_replace(self):
        assert b'a\x00b'.decode('mutf-8', 'replace') == 'a\ufffdb'
        assert b'a\xed\xa0\xbd'.decode('mutf-8', 'replace') == 'a\ufffd'
        assert b'ab\xe2\x82'.decode('mutf-8', 'replace') == 'ab\ufffd'

    def test_ignore(self):
        assert b'a\x00b\x80c'.decode('mutf-8', 'ignore') == 'abc'

    def test_backslashreplace(self):
        assert b'a\x00'.decode('mutf-8', 'backslashreplace') == 'a\\x00'

    def test_registered_handler(self):
        codecs.register_error('jstr-test-mark',
                              lambda e: ('<%d>' % e.start, e.end))
        text = b'ok\x00\xc0\x80'.decode('mutf-8', 'jstr-test-mark')
        assert text == 'ok<2>\x00'

    def test_incremental(self):
        data = b'a\xc0\x80' + SMILEY_BYTES + b'\xe2\x82\xac'
        decoder = codecs.getincrementaldecoder('mutf-8')()
        text = ''.join(decoder.decode(data[i:i + 1]) for i in range(len(data)))
        text += decoder.decode(b'', final=True)
        assert text == 'a\x00' + SMILEY + '€'

    def test_incremental_unfinished(self):
        decoder = codecs.getincrementaldecoder('mutf-8')()
        assert decoder.decode(b'x' + SMILEY_BYTES[:3]) == 'x'
        with pytest.raises(UnicodeDecodeError):
            decoder.decode(b'', final=True)


class TestStreams:

    def test_reader(self):
        stream = io.BytesIO(b'line\xc0\x80one\n' + SMILEY_BYTES + b'\n')
        reader = codecs.getreader('mutf-8')(stream)
        assert reader.read() == 'line\x00one\n' + SMILEY + '\n'

    def test_writer(self):
        stream = io.BytesIO()
        writer = codecs.getwriter('mutf-8')(stream)
        writer.write('a\x00')
        writer.write(SMILEY)
        assert stream.getvalue() == b'a\xc0\x80' + SMILEY_BYTES

    def test_text_wrapper(self):
        stream = io.BytesIO(b'\xc0\x80' + SMILEY_BYTES)
        wrapper = io.TextIOWrapper(stream, encoding='mutf-8')
        assert wrapper.read() == '\x00' + SMILEY
