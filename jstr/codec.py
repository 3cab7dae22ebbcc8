"""
A Python codec for Modified UTF-8.

Importing jstr registers it, after that the usual str/bytes methods work:

    >>> 'a\\x00b'.encode('mutf-8')
    b'a\\xc0\\x80b'
    >>> b'\\xed\\xa0\\xbd\\xed\\xb8\\x80'.decode('mutf-8')
    '\\U0001f600'

Text made of scalar values always encodes. Unpaired surrogate code points
in the text, and invalid input when decoding, go through the usual error
handlers: 'strict', 'replace', 'ignore' or any handler registered with
codecs.register_error().
"""

import codecs
import re

from .mutf8 import (as_view, find_error, sequence_start,
                    HIGH_SURROGATE_MIN)
from .jstr import JStr
from .formatting import display

NAME = 'mutf-8'
ALIASES = ('mutf_8', 'mutf8', 'modified_utf_8', 'java_utf_8')

# a surrogate code point that is not half of a high, low pair
_LONE_SURROGATE = re.compile(
    '[\ud800-\udbff](?![\udc00-\udfff])|(?<![\ud800-\udbff])[\udc00-\udfff]')


def _error_span(view, error):
    """Return (start, end) of the sequence error refers to."""
    if error.error_len is not None:
        return error.valid_up_to, error.valid_up_to + error.error_len
    start = sequence_start(view, error.valid_up_to)
    # a high surrogate waiting right before the cut sequence comes first
    pending = find_error(view[:start])
    if pending is not None:
        return pending.valid_up_to, pending.valid_up_to + pending.error_len
    return start, len(view)


def _is_high_surrogate_at(view, pos):
    lead = 0xe0 | (HIGH_SURROGATE_MIN >> 12)
    return (pos + 1 < len(view) and view[pos] == lead
            and 0xa0 <= view[pos + 1] <= 0xaf)


def _incomplete_tail(view, error):
    """Return where an unfinished sequence at the end of view starts, or
    None if error is a real error."""
    if error.error_len is None:
        start = sequence_start(view, error.valid_up_to)
        pending = find_error(view[:start])
        if pending is not None:
            return pending.valid_up_to
        return start
    if (error.error_len == 3 and error.valid_up_to + 3 == len(view)
            and _is_high_surrogate_at(view, error.valid_up_to)):
        # high surrogate whose low half may come in the next chunk
        return error.valid_up_to
    return None


def decode(data, errors='strict', final=True):
    """Decode data, return (text, number of bytes consumed).

    With final false, a sequence cut at the end of data is left
    unconsumed instead of treated as an error.
    """
    view = as_view(data)
    end = len(view)
    pieces = []
    pos = 0
    while pos < end:
        rest = view[pos:]
        error = find_error(rest)
        if error is None:
            pieces.append(display(rest))
            pos = end
            break
        if not final:
            tail = _incomplete_tail(rest, error)
            if tail is not None:
                pieces.append(display(rest[:tail]))
                pos += tail
                break
        start, stop = _error_span(rest, error)
        pieces.append(display(rest[:start]))
        exc = UnicodeDecodeError(NAME, bytes(view), pos + start, pos + stop,
                                 error.reason)
        replacement, newpos = codecs.lookup_error(errors)(exc)
        pieces.append(replacement)
        if newpos < 0:
            newpos += end
        pos = newpos
    return ''.join(pieces), pos


def encode(text, errors='strict'):
    """Encode text, return (bytes, number of characters consumed).

    A high, low pair of surrogate code points is written as the character
    it stands for. Any other surrogate is handed to the errors handler.
    """
    end = len(text)
    pieces = []
    pos = 0
    while pos < end:
        match = _LONE_SURROGATE.search(text, pos)
        if match is None:
            pieces.append(JStr.from_utf8_str(text[pos:]).to_bytes())
            break
        start = match.start()
        pieces.append(JStr.from_utf8_str(text[pos:start]).to_bytes())
        exc = UnicodeEncodeError(NAME, text, start, start + 1,
                                 "surrogates not allowed")
        replacement, newpos = codecs.lookup_error(errors)(exc)
        if isinstance(replacement, str):
            replacement = JStr.from_utf8_str(replacement).to_bytes()
        pieces.append(bytes(replacement))
        if newpos < 0:
            newpos += end
        pos = newpos
    return b''.join(pieces), end


class Codec(codecs.Codec):

    def encode(self, input, errors='strict'):
        return encode(input, errors)

    def decode(self, input, errors='strict'):
        return decode(input, errors, True)


class IncrementalEncoder(codecs.IncrementalEncoder):
    # a pair split across two calls can not be joined again, so buffer a
    # trailing high surrogate
    def __init__(self, errors='strict'):
        codecs.IncrementalEncoder.__init__(self, errors)
        self.pending = ''

    def encode(self, input, final=False):
        text = self.pending + input
        self.pending = ''
        if not final and text and '\ud800' <= text[-1] <= '\udbff':
            self.pending = text[-1]
            text = text[:-1]
        return encode(text, self.errors)[0]

    def reset(self):
        self.pending = ''

    def getstate(self):
        # the buffered high surrogate itself, 0 for none
        return ord(self.pending) if self.pending else 0

    def setstate(self, state):
        self.pending = chr(state) if state else ''


class IncrementalDecoder(codecs.BufferedIncrementalDecoder):

    def _buffer_decode(self, input, errors, final):
        return decode(input, errors, final)


class StreamWriter(Codec, codecs.StreamWriter):
    pass


class StreamReader(Codec, codecs.StreamReader):

    def decode(self, input, errors='strict'):
        return decode(input, errors, False)


def getregentry():
    return codecs.CodecInfo(
        name=NAME,
        encode=Codec().encode,
        decode=Codec().decode,
        incrementalencoder=IncrementalEncoder,
        incrementaldecoder=IncrementalDecoder,
        streamreader=StreamReader,
        streamwriter=StreamWriter,
    )


def search_function(name):
    name = name.lower().replace('-', '_').replace(' ', '_')
    if name in ALIASES:
        return getregentry()
    return None


_registered = False


def register():
    """Register the codec, once."""
    global _registered
    if not _registered:
        codecs.register(search_function)
        _registered = True
