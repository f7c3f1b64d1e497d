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

r"""String scanning primitives.

All the functions accept :obj:`str` as well as byte-like views
(:obj:`bytes`, :obj:`bytearray`, :obj:`memoryview`), and return slices of
their input without ever mutating it. Slicing a :obj:`memoryview` does not
copy data, so scanning one yields views over the very same buffer.

Scans run over raw code units unless *decode mode* is requested, in which
case byte-like views are scanned as UTF-8 code points.
"""

import base64
import binascii
import enum
import io
import numbers
from collections.abc import Sequence
from typing import Callable
from typing import Iterator
from typing import List
from typing import Mapping
from typing import Optional
from typing import Tuple
from typing import Union

from .base import DEFAULT_CHAFF
from .base import SEPARATING_CHARS
from .base import BaseScanner
from .base import InvalidArgument
from .base import InvalidEncoding
from .base import SeparatorLike
from .base import SeparatorNotFound
from .base import StrLike

__all__ = [
    'Scanner',
    'SplitResults',
    'Tabs',
    'advance_past',
    'advance_past_or_inherit',
    'begins_with',
    'begins_with_one_of',
    'contains',
    'decode64',
    'encode64',
    'escape_control_characters',
    'indent',
    'indent_into',
    'plurality',
    'remove_control_characters',
    'replace_tokens',
    'shared_domains',
    'split_into',
    'split_on_word',
    'split_with_quotes',
    'strip_separated_prefix',
    'strip_suffix',
    'stripped',
    'stripped_left',
    'stripped_right',
    'tabs',
    'unquoted',
    'unsinglequoted',
]

_CONTROL_ESCAPES = {
    '\n': '\\n',
    '\t': '\\t',
    '\r': '\\r',
    '\0': '\\0',
}
_ESCAPE_TABLE = str.maketrans(_CONTROL_ESCAPES)
_REMOVE_TABLE = str.maketrans('', '', ''.join(_CONTROL_ESCAPES))


def _coerce_token(
    view: StrLike,
    token: SeparatorLike,
) -> Union[str, bytes]:
    r"""Converts a separator-like token to the unit type of a view.

    Integers denote a single character or byte. Text tokens are UTF-8 encoded
    for byte-like views, and byte-like tokens UTF-8 decoded for text views.
    """

    if isinstance(view, str):
        if isinstance(token, str):
            return token
        if isinstance(token, numbers.Integral):
            return chr(token)
        if isinstance(token, (bytes, bytearray, memoryview)):
            try:
                return bytes(token).decode('utf-8')
            except UnicodeDecodeError as exc:
                raise InvalidArgument(f'token is not valid UTF-8: {bytes(token)!r}') from exc
    else:
        if isinstance(token, numbers.Integral):
            if not 0 <= token <= 0xFF:
                raise InvalidArgument(f'byte token out of range: {token!r}')
            return bytes((token,))
        if isinstance(token, str):
            return token.encode('utf-8')
        if isinstance(token, (bytes, bytearray, memoryview)):
            return bytes(token)
    raise TypeError(f'unsupported token type: {type(token).__name__!r}')


def _units(
    view: StrLike,
    chars: SeparatorLike,
) -> frozenset:

    token = _coerce_token(view, chars)
    return frozenset(token)


def _find(
    view: StrLike,
    token: Union[str, bytes],
    decode: bool,
) -> int:

    if isinstance(view, str):
        return view.find(token)

    if decode:
        # Offsets map back through surrogateescape, so invalid bytes keep
        # their own positions.
        text = bytes(view).decode('utf-8', 'surrogateescape')
        index = text.find(token.decode('utf-8', 'surrogateescape'))
        if index < 0:
            return index
        return len(text[:index].encode('utf-8', 'surrogateescape'))

    if isinstance(view, memoryview):
        return view.tobytes().find(token)
    return view.find(token)


def _advance(
    view: StrLike,
    separator: SeparatorLike,
    decode: bool,
    inherit: bool,
) -> Tuple[StrLike, StrLike]:

    token = _coerce_token(view, separator)
    if not token:
        raise InvalidArgument('tried to advance past an empty separator')

    index = _find(view, token, decode)
    if index < 0:
        if inherit:
            return view, view[len(view):]
        raise SeparatorNotFound(f'tried to advance past {separator!r} but it could not be found',
                                haystack=view, needle=separator)

    return view[:index], view[index + len(token):]


def advance_past(
    view: StrLike,
    separator: SeparatorLike,
    decode: bool = False,
) -> Tuple[StrLike, StrLike]:
    r"""Splits a view at the first occurrence of a separator.

    The separator itself belongs to neither of the returned slices.

    Arguments:
        view (str or byte-like):
            View to scan.

        separator (str or byte-like or int):
            Token to look for. An :obj:`int` denotes a single character (byte
            for byte-like views); text separators are UTF-8 encoded when
            scanning byte-like views.

        decode (bool):
            Scans UTF-8 code points of byte-like views, so that a separator
            never matches within a multi-byte sequence. Text views are
            already made of code points.

    Returns:
        tuple: The ``(head, rest)`` slices before and after the separator.

    Raises:
        :obj:`InvalidArgument`: Empty separator.

        :obj:`SeparatorNotFound`: The separator is missing.

    Examples:
        >>> advance_past('foo bar!', ' ')
        ('foo', 'bar!')
        >>> advance_past(b'key=value=more', '=')
        (b'key', b'value=more')
        >>> advance_past('foo', ':')
        Traceback (most recent call last):
            ...
        scanfield.base.SeparatorNotFound: tried to advance past ':' but it could not be found

    See Also:
        :func:`advance_past_or_inherit`
        :meth:`Scanner.advance_past`
    """

    return _advance(view, separator, decode, False)


def advance_past_or_inherit(
    view: StrLike,
    separator: SeparatorLike,
    decode: bool = False,
) -> Tuple[StrLike, StrLike]:
    r"""Splits a view at a separator, or takes it whole.

    Same as :func:`advance_past`, but a missing separator yields the whole
    view as head and an empty rest, instead of raising.

    Examples:
        >>> advance_past_or_inherit('snarfl', ' ')
        ('snarfl', '')
        >>> advance_past_or_inherit('snarfl fnarfl', ' ')
        ('snarfl', 'fnarfl')

    See Also:
        :func:`advance_past`
    """

    return _advance(view, separator, decode, True)


def contains(
    haystack: StrLike,
    needle: SeparatorLike,
    decode: bool = False,
) -> bool:
    r"""Checks whether a view contains a token.

    An empty needle is contained by any haystack.

    Examples:
        >>> contains('Lorem ipsum', 'ips')
        True
        >>> contains(b'Lorem ipsum', ord('z'))
        False
        >>> contains('', '')
        True
    """

    token = _coerce_token(haystack, needle)
    if not token:
        return True
    return _find(haystack, token, decode) >= 0


def begins_with(
    haystack: StrLike,
    needle: SeparatorLike,
) -> bool:
    r"""Checks whether a view starts with a token.

    An empty needle is a prefix of anything, including an empty haystack.

    Examples:
        >>> begins_with('Lorem ipsum', 'Lorem')
        True
        >>> begins_with('', '')
        True
        >>> begins_with('', 'L')
        False
    """

    token = _coerce_token(haystack, needle)
    size = len(token)
    if not size:
        return True
    if len(haystack) < size:
        return False
    return haystack[:size] == token


def begins_with_one_of(
    haystack: StrLike,
    charset: SeparatorLike,
) -> bool:
    r"""Checks whether a view starts with any character of a set.

    An empty set always matches; otherwise an empty haystack never does.

    Examples:
        >>> begins_with_one_of('#channel', '#&')
        True
        >>> begins_with_one_of(b'!cmd', '#&')
        False
    """

    units = _units(haystack, charset)
    if not units:
        return True
    if not len(haystack):
        return False
    return haystack[0] in units


def stripped_left(
    line: StrLike,
    chaff: SeparatorLike = DEFAULT_CHAFF,
) -> StrLike:
    r"""Strips leading characters of a set.

    Arguments:
        line (str or byte-like):
            View to trim.

        chaff (str or byte-like or int):
            Characters to strip, defaulting to whitespace.

    Returns:
        str or byte-like: Slice of `line`.

    Examples:
        >>> stripped_left('  \t foo  ')
        'foo  '
        >>> stripped_left('___foo', '_')
        'foo'
    """

    units = _units(line, chaff)
    start = 0
    endex = len(line)
    while start < endex and line[start] in units:
        start += 1
    return line[start:]


def stripped_right(
    line: StrLike,
    chaff: SeparatorLike = DEFAULT_CHAFF,
) -> StrLike:
    r"""Strips trailing characters of a set.

    Examples:
        >>> stripped_right('  foo \r\n')
        '  foo'
        >>> bytes(stripped_right(memoryview(b'foo...'), '.'))
        b'foo'
    """

    units = _units(line, chaff)
    endex = len(line)
    while endex and line[endex - 1] in units:
        endex -= 1
    return line[:endex]


def stripped(
    line: StrLike,
    chaff: SeparatorLike = DEFAULT_CHAFF,
) -> StrLike:
    r"""Strips both leading and trailing characters of a set.

    Stripping is idempotent.

    Examples:
        >>> stripped('  foo bar  ')
        'foo bar'
        >>> stripped(b'**foo**', b'*')
        b'foo'
    """

    return stripped_right(stripped_left(line, chaff), chaff)


def strip_separated_prefix(
    line: StrLike,
    prefix: SeparatorLike,
    demand_separators: bool = True,
) -> StrLike:
    r"""Strips a prefix word and the separators following it.

    Leading whitespace is ignored. After the prefix, any run of ``:``, ``!``,
    ``?`` and spaces is stripped as well.

    Arguments:
        line (str or byte-like):
            Line starting with `prefix`.

        prefix (str or byte-like or int):
            Prefix to strip; must not be empty.

        demand_separators (bool):
            Requires at least one separator right after the prefix. When
            missing, the line is returned unchanged.

    Returns:
        str or byte-like: The line past the prefix and its separators.

    Raises:
        :obj:`InvalidArgument`: Empty prefix.

        :obj:`SeparatorNotFound`: The prefix is nowhere in the line.

    Examples:
        >>> strip_separated_prefix('say: lorem ipsum', 'say')
        'lorem ipsum'
        >>> strip_separated_prefix('note!!!! zorael hello', 'note')
        'zorael hello'
        >>> strip_separated_prefix('kamelosois a bot', 'kameloso')
        'kamelosois a bot'
        >>> strip_separated_prefix('kamelosois a bot', 'kameloso', demand_separators=False)
        'is a bot'
    """

    if not len(_coerce_token(line, prefix)):
        raise InvalidArgument('tried to strip an empty prefix')

    separators = _units(line, SEPARATING_CHARS)
    _, rest = advance_past(stripped_left(line), prefix, decode=True)

    if demand_separators:
        if not len(rest) or rest[0] not in separators:
            return line
        rest = rest[1:]

    start = 0
    while start < len(rest) and rest[start] in separators:
        start += 1
    return rest[start:]


def strip_suffix(
    line: StrLike,
    suffix: SeparatorLike,
    allow_full_strip: bool = False,
) -> StrLike:
    r"""Strips a suffix, if present.

    Unless `allow_full_strip` is set, a line made of the suffix alone is
    returned unchanged, so that it never ends up empty.

    Examples:
        >>> strip_suffix('harblsnarbl', 'snarbl')
        'harbl'
        >>> strip_suffix('harblsnarbl', 'harblsnarbl')
        'harblsnarbl'
        >>> strip_suffix('harblsnarbl', 'harblsnarbl', allow_full_strip=True)
        ''
    """

    token = _coerce_token(line, suffix)
    size = len(line)
    if size < len(token) or (size == len(token) and not allow_full_strip):
        return line

    endex = size - len(token)
    if line[endex:] == token:
        return line[:endex]
    return line


def shared_domains(
    one: StrLike,
    other: StrLike,
) -> int:
    r"""Counts the trailing domain labels shared by two host names.

    Identical non-empty names score one more, as if both had a leading dot.

    Examples:
        >>> shared_domains('irc.freenode.net', 'help.freenode.net')
        2
        >>> shared_domains('www.google.com', 'www.yahoo.com')
        1
        >>> shared_domains('rizon.net', 'rizon.net')
        2
        >>> shared_domains('www.google.se', 'www.google.co.uk')
        0
    """

    if isinstance(one, memoryview):
        one = one.tobytes()
    other = _coerce_token(one, other)
    dot = _coerce_token(one, '.')

    dots = 0
    if one == other:
        if one:
            dots = 1
    else:
        one = dot + one
        other = dot + other

    dot_unit = dot[0]
    double_dots = False
    for offset in range(1, min(len(one), len(other)) + 1):
        unit = one[-offset]
        if unit != other[-offset]:
            break
        if unit == dot_unit:
            if not double_dots:
                dots += 1
                double_dots = True
        else:
            double_dots = False
    return dots


class Tabs(Sequence):
    r"""Lazy run of indentation spaces.

    Behaves as a sequence of space characters; converting it to :obj:`str`
    renders the whole indentation.

    Arguments:
        count (int):
            Number of tabs.

        spaces (int):
            Spaces per tab.

    Raises:
        :obj:`InvalidArgument`: Negative `count` or `spaces`.

    Examples:
        >>> len(Tabs(2))
        8
        >>> f'{Tabs(1, spaces=2)}foo'
        '  foo'
        >>> list(Tabs(1, 2))
        [' ', ' ']
    """

    def __eq__(
        self,
        other: object,
    ) -> bool:

        if isinstance(other, Tabs):
            return len(self) == len(other)
        if isinstance(other, str):
            return str(self) == other
        return NotImplemented

    def __getitem__(
        self,
        key: Union[int, slice],
    ) -> str:

        if isinstance(key, slice):
            return str(self)[key]

        size = len(self)
        if key < 0:
            key += size
        if not 0 <= key < size:
            raise IndexError('index out of range')
        return ' '

    __hash__ = None

    def __init__(
        self,
        count: int,
        spaces: int = 4,
    ):

        if count < 0:
            raise InvalidArgument(f'negative tab count: {count!r}')
        if spaces < 0:
            raise InvalidArgument(f'negative spaces per tab: {spaces!r}')

        self._count = count
        self._spaces = spaces

    def __iter__(
        self,
    ) -> Iterator[str]:

        for _ in range(len(self)):
            yield ' '

    def __len__(
        self,
    ) -> int:

        return self._count * self._spaces

    def __repr__(
        self,
    ) -> str:

        return f'{type(self).__name__}({self._count!r}, spaces={self._spaces!r})'

    def __str__(
        self,
    ) -> str:

        return ' ' * len(self)

    @property
    def count(
        self,
    ) -> int:
        r"""int: Number of tabs."""

        return self._count

    @property
    def spaces(
        self,
    ) -> int:
        r"""int: Spaces per tab."""

        return self._spaces


def tabs(
    count: int,
    spaces: int = 4,
) -> Tabs:
    r"""Builds a lazy indentation of `count` tabs.

    See Also:
        :class:`Tabs`
    """

    return Tabs(count, spaces=spaces)


def indent_into(
    text: str,
    sink,
    num_tabs: int = 1,
    spaces: int = 4,
    skip: int = 0,
) -> None:
    r"""Writes indented text into a sink.

    Lines are always joined with ``\n``; a trailing ``\r`` is dropped from
    each line, and blank lines are not indented.

    Arguments:
        text (str):
            Text to indent.

        sink:
            Object with a ``write(str)`` method.

        num_tabs (int):
            Number of tabs to indent by.

        spaces (int):
            Spaces per tab.

        skip (int):
            Number of leading lines left untouched.

    Raises:
        :obj:`InvalidArgument`: Negative argument.
    """

    if skip < 0:
        raise InvalidArgument(f'negative number of lines to skip: {skip!r}')
    indentation = str(tabs(num_tabs, spaces))

    for index, line in enumerate(text.split('\n')):
        if index:
            sink.write('\n')
        if line.endswith('\r'):
            line = line[:-1]
        if not line:
            continue
        if index >= skip:
            sink.write(indentation)
        sink.write(line)


def indent(
    text: str,
    num_tabs: int = 1,
    spaces: int = 4,
    skip: int = 0,
) -> str:
    r"""Indents each line of a text.

    Examples:
        >>> indent('foo\nbar', num_tabs=1, spaces=2)
        '  foo\n  bar'
        >>> indent('foo\r\n\r\nbar', spaces=1)
        ' foo\n\n bar'
        >>> indent('head\nbody', skip=1)
        'head\n    body'

    See Also:
        :func:`indent_into`
    """

    sink = io.StringIO()
    indent_into(text, sink, num_tabs=num_tabs, spaces=spaces, skip=skip)
    return sink.getvalue()


def split_on_word(
    line: StrLike,
    separator: SeparatorLike,
    max_length: int,
) -> List[StrLike]:
    r"""Wraps a line at word boundaries.

    Each line is cut at the rightmost separator within `max_length`
    characters. A trailing remnant without any separator in range is appended
    to the previous line instead, so that line may exceed the limit. Joining
    the result with the separator rebuilds the input.

    Arguments:
        line (str or byte-like):
            Line to wrap.

        separator (str or byte-like or int):
            Single separating character.

        max_length (int):
            Maximum length of each line.

    Returns:
        list: Wrapped lines.

    Raises:
        :obj:`InvalidArgument`: Separator not a single character, or negative
            length.

    Examples:
        >>> split_on_word('I am a fish in a sort of long sentence~', ' ', 20)
        ['I am a fish in a', 'sort of long sentence~']
        >>> split_on_word('', ' ', 20)
        []
    """

    token = _coerce_token(line, separator)
    if len(token) != 1:
        raise InvalidArgument(f'separator must be a single character: {separator!r}')
    if max_length < 0:
        raise InvalidArgument(f'negative maximum length: {max_length!r}')
    if isinstance(line, memoryview):
        line = line.tobytes()

    lines = []
    rest = line
    while True:
        index = rest.rfind(token, 0, min(max_length, len(rest)))
        if index < 0:
            break
        lines.append(rest[:index])
        rest = rest[index + 1:]

    if rest:
        if lines:
            lines[-1] = lines[-1] + token + rest
        else:
            lines.append(rest)
    return lines


def escape_control_characters(
    line: StrLike,
    remove: bool = False,
) -> StrLike:
    r"""Escapes (or removes) newlines, tabs, carriage returns and NULs.

    Examples:
        >>> print(escape_control_characters('foo\nbar\tbaz'))
        foo\nbar\tbaz
        >>> escape_control_characters('foo\r\n', remove=True)
        'foo'
        >>> escape_control_characters(b'\x00')
        b'\\0'
    """

    if isinstance(line, str):
        return line.translate(_REMOVE_TABLE if remove else _ESCAPE_TABLE)

    data = bytes(line)
    if remove:
        return data.translate(None, b'\n\t\r\0')
    for char, escape in _CONTROL_ESCAPES.items():
        data = data.replace(char.encode('ascii'), escape.encode('ascii'))
    return data


def remove_control_characters(
    line: StrLike,
) -> StrLike:
    r"""Removes newlines, tabs, carriage returns and NULs."""

    return escape_control_characters(line, remove=True)


def encode64(
    data: Union[str, bytes, bytearray, memoryview],
    encoding: str = 'utf-8',
) -> str:
    r"""Encodes data as Base64 text.

    Text input is encoded with `encoding` first.

    Examples:
        >>> encode64('harbl snarbl 12345')
        'aGFyYmwgc25hcmJsIDEyMzQ1'
    """

    if isinstance(data, str):
        data = data.encode(encoding)
    return base64.b64encode(data).decode('ascii')


def decode64(
    encoded: Union[str, bytes, bytearray, memoryview],
    encoding: Optional[str] = 'utf-8',
) -> Union[str, bytes]:
    r"""Decodes Base64 text.

    Arguments:
        encoded (str or byte-like):
            Base64 text. Characters outside the Base64 alphabet are rejected.

        encoding (str):
            Encoding of the decoded data; ``None`` returns raw bytes.

    Returns:
        str or bytes: Decoded data.

    Raises:
        :obj:`InvalidEncoding`: Malformed Base64 input, or decoded data not
            valid in `encoding`.

    Examples:
        >>> decode64('aGFyYmwgc25hcmJsIDEyMzQ1')
        'harbl snarbl 12345'
        >>> decode64('aGFyYmw=', encoding=None)
        b'harbl'
    """

    if isinstance(encoded, memoryview):
        encoded = encoded.tobytes()
    try:
        data = base64.b64decode(encoded, validate=True)
    except (binascii.Error, ValueError) as exc:
        raise InvalidEncoding(f'malformed Base64 input: {exc}') from exc

    if encoding is None:
        return data
    try:
        return data.decode(encoding)
    except UnicodeDecodeError as exc:
        raise InvalidEncoding(f'decoded Base64 data is not valid {encoding}: {exc}') from exc


def _unenclosed(
    line: StrLike,
    quote: str,
) -> StrLike:

    quote_unit = _coerce_token(line, quote)[0]
    escape_unit = _coerce_token(line, '\\')[0]

    while len(line) >= 2 and line[0] == quote_unit and line[-1] == quote_unit:
        if len(line) >= 3 and line[-2] == escape_unit:
            break
        line = line[1:-1]
    return line


def unquoted(
    line: StrLike,
) -> StrLike:
    r"""Removes balanced enclosing double quotes, recursively.

    An escaped closing quote is not an enclosing one.

    Examples:
        >>> unquoted('"This is a quote"')
        'This is a quote'
        >>> unquoted('""double""')
        'double'
        >>> unquoted('"unbalanced')
        '"unbalanced'
        >>> print(unquoted('"escaped\\"'))
        "escaped\"
    """

    return _unenclosed(line, '"')


def unsinglequoted(
    line: StrLike,
) -> StrLike:
    r"""Removes balanced enclosing single quotes, recursively.

    Examples:
        >>> unsinglequoted("'quoted'")
        'quoted'
    """

    return _unenclosed(line, "'")


def plurality(
    num: int,
    singular: str,
    plural: str,
) -> str:
    r"""Picks the singular or plural form for a count.

    Examples:
        >>> f'1 {plurality(1, "cat", "cats")}, 3 {plurality(3, "dog", "dogs")}'
        '1 cat, 3 dogs'
        >>> plurality(-1, 'degree', 'degrees')
        'degree'
    """

    if not isinstance(num, numbers.Integral):
        raise InvalidArgument(f'count must be an integer: {num!r}')
    return singular if num in (1, -1) else plural


class SplitResults(enum.Enum):
    r"""Outcome of :func:`split_into`."""

    MATCH = 'match'
    r"""The line held exactly as many words as requested."""

    UNDERRUN = 'underrun'
    r"""The line held fewer words than requested."""

    OVERRUN = 'overrun'
    r"""The line held more words than requested; see the returned rest."""


def split_into(
    line: StrLike,
    count: int,
    separator: SeparatorLike = ' ',
) -> Tuple[SplitResults, List[StrLike], StrLike]:
    r"""Splits the first words of a line.

    Runs of consecutive separators count as one.

    Arguments:
        line (str or byte-like):
            Line to split.

        count (int):
            Number of words to split.

        separator (str or byte-like or int):
            Separator between words; must not be empty.

    Returns:
        tuple: ``(results, words, rest)``, where `words` always holds `count`
        items (padded with empty slices on underrun) and `rest` is what was
        left of the line after the last word.

    Examples:
        >>> split_into('abc def ghi', 3)
        (<SplitResults.MATCH: 'match'>, ['abc', 'def', 'ghi'], '')
        >>> split_into('abc def ghi', 2)
        (<SplitResults.OVERRUN: 'overrun'>, ['abc', 'def'], 'ghi')
        >>> split_into('abc_def ghi', 3, '_')
        (<SplitResults.UNDERRUN: 'underrun'>, ['abc', 'def ghi', ''], '')
    """

    token = _coerce_token(line, separator)
    size = len(token)
    if not size:
        raise InvalidArgument('tried to split on an empty separator')
    if count < 0:
        raise InvalidArgument(f'negative word count: {count!r}')

    empty = line[:0]
    words = []
    rest = line

    if count and len(rest):
        for _ in range(count):
            index = _find(rest, token, False)
            if index == 0 and size < len(rest):
                while rest[:size] == token:
                    rest = rest[size:]
                index = _find(rest, token, False)

            if index < 0:
                words.append(rest)
                rest = empty
                break

            words.append(rest[:index])
            rest = rest[index + size:]

    if len(words) < count:
        results = SplitResults.UNDERRUN
        words.extend(empty for _ in range(count - len(words)))
    elif len(rest):
        results = SplitResults.OVERRUN
    else:
        results = SplitResults.MATCH
    return results, words, rest


def split_with_quotes(
    line: str,
    separator: str = ' ',
) -> List[str]:
    r"""Splits a line into words, keeping double-quoted text together.

    Within quotes, ``\"`` stands for a quote and ``\\`` for a backslash.
    Empty words are dropped.

    Examples:
        >>> split_with_quotes('title "this is my title" author "john doe"')
        ['title', 'this is my title', 'author', 'john doe']
        >>> split_with_quotes('this has "unbalanced quotes')
        ['this', 'has', 'unbalanced quotes']
        >>> split_with_quotes('""')
        []
    """

    if not separator:
        raise InvalidArgument('tried to split on an empty separator')

    words = []
    start = 0
    step = 0
    between_quotes = False
    escaping = False
    escaped_quote = False
    escaped_backslash = False

    def unescaped(
        text: str,
    ) -> str:

        if escaped_backslash:
            text = text.replace('\\\\', '\1\1')
        if escaped_quote:
            text = text.replace('\\"', '"')
        if escaped_backslash:
            text = text.replace('\1\1', '\\')
        return text

    for index, char in enumerate(line):
        if escaping:
            if char == '\\':
                escaped_backslash = True
            elif char == '"':
                escaped_quote = True
            escaping = False

        elif step >= len(separator):
            step = 0

        elif not between_quotes and char == separator[step]:
            step += 1
            if len(separator) == 1:
                step = 0
                if start != index:
                    words.append(line[start:index])
                start = index + 1
            elif step >= len(separator):
                endex = index - len(separator) + 1
                if start != endex:
                    words.append(line[start:endex])
                start = index + 1

        elif char == '\\':
            escaping = True

        elif char == '"':
            if between_quotes:
                if escaped_quote or escaped_backslash:
                    words.append(unescaped(line[start + 1:index]))
                    escaped_quote = False
                    escaped_backslash = False
                elif index > start + 1:
                    words.append(line[start + 1:index])
                between_quotes = False
                start = index + 1
            elif index > start + 1:
                words.append(line[start + 1:index])
                between_quotes = True
                start = index + 1
            else:
                between_quotes = True

    if between_quotes:
        if len(line) > start + 1:
            words.append(unescaped(line[start + 1:]))
    elif len(line) > start:
        words.append(line[start:])
    return words


def replace_tokens(
    line: str,
    table: Mapping[str, Callable[[], str]],
    token_character: str = '$',
) -> str:
    r"""Replaces token words with the results of callables.

    A token starts with `token_character` and extends up to the next space.
    Tokens missing from `table` are left alone.

    Examples:
        >>> replace_tokens('hello $who, bye', {'$who,': lambda: 'world,'})
        'hello world, bye'
    """

    if not token_character:
        raise InvalidArgument('empty token character')

    chunks = []
    done = 0
    index = line.find(token_character)
    while index >= 0:
        endex = line.find(' ', index)
        if endex < 0:
            endex = len(line)
        replacement = table.get(line[index:endex])

        if replacement is None:
            index = line.find(token_character, index + 1)
        else:
            chunks.append(line[done:index])
            chunks.append(replacement())
            done = endex
            index = line.find(token_character, endex)

    if not chunks:
        return line
    chunks.append(line[done:])
    return ''.join(chunks)


class Scanner(BaseScanner):

    __doc__ = BaseScanner.__doc__

    def __bool__(
        self,
    ) -> bool:

        return self._start < len(self._wrapped)

    def __init__(
        self,
        wrapped: StrLike,
    ):

        if not isinstance(wrapped, (str, bytes, bytearray, memoryview)):
            raise TypeError(f'cannot scan {type(wrapped).__name__!r} objects')
        self._wrapped = wrapped
        self._start = 0

    def __len__(
        self,
    ) -> int:

        return len(self._wrapped) - self._start

    def __repr__(
        self,
    ) -> str:

        return f'<{type(self).__name__} position={self._start} remaining={self.remaining!r}>'

    def advance_past(
        self,
        separator: SeparatorLike,
        decode: bool = False,
        inherit: bool = False,
    ) -> StrLike:

        head, rest = _advance(self.remaining, separator, decode, inherit)
        self._start = len(self._wrapped) - len(rest)
        return head

    @property
    def exhausted(
        self,
    ) -> bool:

        return not self

    @property
    def position(
        self,
    ) -> int:

        return self._start

    @property
    def remaining(
        self,
    ) -> StrLike:

        return self._wrapped[self._start:]

    def reset(
        self,
    ) -> None:

        self._start = 0

    @property
    def wrapped(
        self,
    ) -> StrLike:

        return self._wrapped
