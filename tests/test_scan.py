# Copyright (c) 2020-2023, Andrea Zoppi.
# All rights reserved.
#
# Redistribution and use in source and binary forms, with or without
# modification, are permitted provided that the following conditions are met:
#
# 1. Redistributions of source code must retain the above copyright notice,
#    this list of conditions and the following disclaimer.
#
# 2. Redistributions in binary form must reproduce the above copyright
#    notice, this list of conditions and the following disclaimer in the
#    documentation and/or other materials provided with the distribution.
#
# THIS SOFTWARE IS PROVIDED BY THE COPYRIGHT HOLDERS AND CONTRIBUTORS "AS IS"
# AND ANY EXPRESS OR IMPLIED WARRANTIES, INCLUDING, BUT NOT LIMITED TO, THE
# IMPLIED WARRANTIES OF MERCHANTABILITY AND FITNESS FOR A PARTICULAR PURPOSE
# ARE DISCLAIMED. IN NO EVENT SHALL THE COPYRIGHT HOLDER OR CONTRIBUTORS BE
# LIABLE FOR ANY DIRECT, INDIRECT, INCIDENTAL, SPECIAL, EXEMPLARY, OR
# CONSEQUENTIAL DAMAGES (INCLUDING, BUT NOT LIMITED TO, PROCUREMENT OF
# SUBSTITUTE GOODS OR SERVICES; LOSS OF USE, DATA, OR PROFITS; OR BUSINESS
# INTERRUPTION) HOWEVER CAUSED AND ON ANY THEORY OF LIABILITY, WHETHER IN
# CONTRACT, STRICT LIABILITY, OR TORT (INCLUDING NEGLIGENCE OR OTHERWISE)
# ARISING IN ANY WAY OUT OF THE USE OF THIS SOFTWARE, EVEN IF ADVISED OF THE
# POSSIBILITY OF SUCH DAMAGE.

import io
from typing import Type

import pytest
from _common import *

from scanfield import BaseScanner
from scanfield import InvalidArgument
from scanfield import InvalidEncoding
from scanfield import ScanfieldError
from scanfield import SeparatorNotFound
from scanfield import Scanner
from scanfield import Tabs
from scanfield import advance_past
from scanfield import decode64
from scanfield import encode64
from scanfield import indent
from scanfield import indent_into
from scanfield import plurality
from scanfield import remove_control_characters
from scanfield import replace_tokens
from scanfield import split_with_quotes
from scanfield import tabs
from scanfield import unsinglequoted


class TestScan_str(BaseScanSuite):
    View: Type[str] = str

    # Delete incompatible tests
    test_advance_past_decode_bytes = None


class TestScan_bytes(BaseScanSuite):
    View: Type[bytes] = bytes


class TestScan_bytearray(BaseScanSuite):
    View: Type[bytearray] = bytearray


class TestScan_memoryview(BaseScanSuite):
    View: Type[memoryview] = memoryview

    def test_advance_past_zero_copy(self):
        buffer = bytearray(b'foo bar')
        head, rest = advance_past(memoryview(buffer), ' ')
        assert head.obj is buffer
        assert rest.obj is buffer

        buffer[4:7] = b'BAZ'
        assert bytes(rest) == b'BAZ'


class TestScanner_str(BaseScannerSuite):
    View: Type[str] = str


class TestScanner_bytes(BaseScannerSuite):
    View: Type[bytes] = bytes


class TestScanner_bytearray(BaseScannerSuite):
    View: Type[bytearray] = bytearray


class TestScanner_memoryview(BaseScannerSuite):
    View: Type[memoryview] = memoryview

    def test_remaining_zero_copy(self):
        buffer = bytearray(b'key value')
        scanner = Scanner(memoryview(buffer))
        head = scanner.advance_past(' ')
        assert isinstance(head, memoryview)
        assert head.obj is buffer
        assert scanner.remaining.obj is buffer


def test_tabs():
    assert str(tabs(2)) == ' ' * 8
    assert str(tabs(3, spaces=2)) == ' ' * 6
    assert str(tabs(0)) == ''
    assert len(tabs(2, 3)) == 6
    assert list(tabs(1, 2)) == [' ', ' ']
    assert f'{tabs(1)}foo' == '    foo'
    assert tabs(2, 2) == tabs(1, 4)
    assert tabs(1) == '    '
    assert tabs(1)[-1] == ' '
    assert tabs(2)[:3] == '   '
    assert repr(tabs(2)) == 'Tabs(2, spaces=4)'


def test_tabs_lazy():
    tab = Tabs(1_000_000_000)
    assert len(tab) == 4_000_000_000
    assert tab[123456789] == ' '
    with pytest.raises(IndexError):
        tab[len(tab)]


def test_tabs_invalid():
    with pytest.raises(InvalidArgument, match='negative tab count'):
        tabs(-1)
    with pytest.raises(InvalidArgument, match='negative spaces'):
        tabs(1, spaces=-1)


def test_indent():
    assert indent('foo\nbar', spaces=2) == '  foo\n  bar'
    assert indent('foo\nbar', num_tabs=2, spaces=1) == '  foo\n  bar'
    assert indent('foo\r\n\r\nbar', spaces=1) == ' foo\n\n bar'
    assert indent('foo\n\n\nbar') == '    foo\n\n\n    bar'
    assert indent('head\nbody\nfoot', skip=1) == 'head\n    body\n    foot'
    assert indent('foo\r\nbar', num_tabs=0) == 'foo\nbar'
    assert indent('') == ''


def test_indent_invalid():
    with pytest.raises(InvalidArgument):
        indent('foo', num_tabs=-1)
    with pytest.raises(InvalidArgument):
        indent('foo', skip=-1)


def test_indent_into():
    sink = io.StringIO()
    indent_into('foo\nbar', sink, num_tabs=1, spaces=3)
    indent_into('\nbaz', sink, num_tabs=1, spaces=3)
    assert sink.getvalue() == '   foo\n   bar\n   baz'


def test_remove_control_characters():
    assert remove_control_characters('foo\r\nbar\t\0') == 'foobar'
    assert remove_control_characters(b'foo\r\nbar') == b'foobar'


def test_encode64():
    assert encode64('harbl snarbl 12345') == 'aGFyYmwgc25hcmJsIDEyMzQ1'
    assert encode64(b'harbl snarbl 12345') == 'aGFyYmwgc25hcmJsIDEyMzQ1'
    assert encode64('') == ''
    assert encode64('blåbär') == 'YmzDpWLDpHI='


def test_decode64():
    assert decode64('aGFyYmwgc25hcmJsIDEyMzQ1') == 'harbl snarbl 12345'
    assert decode64(b'aGFyYmwgc25hcmJsIDEyMzQ1') == 'harbl snarbl 12345'
    assert decode64('YmzDpWLDpHI=') == 'blåbär'
    assert decode64('YmzDpWLDpHI=', encoding=None) == 'blåbär'.encode('utf-8')
    assert decode64('') == ''

    for text in ('', 'foo', 'blåbär', 'I am a fish in a sort of long sentence~'):
        assert decode64(encode64(text)) == text


def test_decode64_invalid():
    with pytest.raises(InvalidEncoding, match='malformed Base64'):
        decode64('aGFyYmw')
    with pytest.raises(InvalidEncoding, match='malformed Base64'):
        decode64('aGFy*mw=')
    with pytest.raises(InvalidEncoding, match='malformed Base64'):
        decode64('blåbär')
    with pytest.raises(InvalidEncoding, match='not valid utf-8'):
        decode64('/w==')
    with pytest.raises(ValueError):
        decode64('!!!!')


def test_unsinglequoted():
    assert unsinglequoted("'quoted'") == 'quoted'
    assert unsinglequoted("''nested''") == 'nested'
    assert unsinglequoted('"double"') == '"double"'


def test_plurality():
    assert plurality(1, 'cat', 'cats') == 'cat'
    assert plurality(-1, 'cat', 'cats') == 'cat'
    assert plurality(0, 'cat', 'cats') == 'cats'
    assert plurality(2, 'cat', 'cats') == 'cats'
    with pytest.raises(InvalidArgument):
        plurality(1.0, 'cat', 'cats')


def test_split_with_quotes():
    def check(line, expected):
        assert split_with_quotes(line) == expected

    check('title "this is my title" author "john doe"',
          ['title', 'this is my title', 'author', 'john doe'])
    check('string without quotes', ['string', 'without', 'quotes'])
    check('a b c', ['a', 'b', 'c'])
    check('', [])
    check('title "this is \\"my\\" title" author "john\\\\" doe',
          ['title', 'this is "my" title', 'author', 'john\\', 'doe'])
    check('title "this is \\"my\\" title" author "john\\\\\\" doe',
          ['title', 'this is "my" title', 'author', 'john\\" doe'])
    check('this has "unbalanced quotes', ['this', 'has', 'unbalanced quotes'])
    check('""', [])
    check('"', [])
    check('"""""""""""', [])


def test_split_with_quotes_separator():
    assert split_with_quotes('foo,"bar,baz",qux', ',') == ['foo', 'bar,baz', 'qux']
    with pytest.raises(InvalidArgument):
        split_with_quotes('foo bar', '')


def test_replace_tokens():
    hello = 'hello'
    table = {
        '$foo': lambda: hello,
        '$bar': lambda: 'I was one',
        '$baz': lambda: 'BAZ',
    }
    line = "I thought what I'd $foo was, I'd pretend $bar of those deaf-$baz"
    expected = "I thought what I'd hello was, I'd pretend I was one of those deaf-BAZ"
    assert replace_tokens(line, table) == expected

    assert replace_tokens('nothing to replace', table) == 'nothing to replace'
    assert replace_tokens('$unknown $foo', table) == '$unknown hello'
    assert replace_tokens('%foo', {'%foo': lambda: 'bar'}, token_character='%') == 'bar'


def test_scanner_is_base_scanner():
    assert issubclass(Scanner, BaseScanner)
    assert Scanner.__doc__ == BaseScanner.__doc__
    with pytest.raises(TypeError):
        BaseScanner('foo')


def test_errors_hierarchy():
    for error in (InvalidArgument, InvalidEncoding, SeparatorNotFound):
        assert issubclass(error, ScanfieldError)
        assert issubclass(error, ValueError)

    with pytest.raises(ScanfieldError):
        decode64('not base64!')


def test_token_invalid_utf8():
    with pytest.raises(InvalidArgument, match='not valid UTF-8'):
        contains('abc', b'\xff')
    with pytest.raises(InvalidArgument):
        advance_past('abc', bytearray(b'\xc3'))
    assert contains('café', 'é'.encode('utf-8'))
