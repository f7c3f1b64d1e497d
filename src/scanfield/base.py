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

r"""Common stuff, shared across modules."""

import abc
from typing import Any
from typing import Optional
from typing import Union

try:
    from typing import TypeAlias
except ImportError:  # pragma: no cover
    TypeAlias = Any  # Python < 3.10

__all__ = [
    'BaseScanner',
    'DEFAULT_CHAFF',
    'DeserialisationError',
    'InvalidArgument',
    'InvalidEncoding',
    'SEPARATING_CHARS',
    'ScanfieldError',
    'SeparatorLike',
    'SeparatorNotFound',
    'StrLike',
]

StrLike: TypeAlias = Union[str, bytes, bytearray, memoryview]
SeparatorLike: TypeAlias = Union[str, bytes, bytearray, memoryview, int]

DEFAULT_CHAFF: str = ' \t\r\n'
r"""Characters stripped by default by the trimming functions."""

SEPARATING_CHARS: str = ': !?'
r"""Characters allowed to separate a prefix word from the rest of a line."""


class ScanfieldError(Exception):
    r"""Base class of all the errors raised by this package."""


class InvalidArgument(ScanfieldError, ValueError):
    r"""A caller contract was violated.

    Raised for empty separators or prefixes, negative tab counts, and
    descriptor or type mismatches. It is never recovered internally.
    """


class SeparatorNotFound(ScanfieldError, ValueError):
    r"""A scan could not find its separator.

    Arguments:
        message (str):
            Error message.

        haystack (str or byte-like):
            The view being scanned.

        needle (str or byte-like or int):
            The separator that was looked for.

    Examples:
        >>> from scanfield import advance_past, SeparatorNotFound
        >>> try:
        ...     advance_past('foo', ':')
        ... except SeparatorNotFound as exc:
        ...     print(repr(exc.haystack), repr(exc.needle))
        'foo' ':'
    """

    def __init__(
        self,
        message: str,
        haystack: Optional[StrLike] = None,
        needle: Optional[SeparatorLike] = None,
    ):

        super().__init__(message)
        self.haystack = haystack
        self.needle = needle


class InvalidEncoding(ScanfieldError, ValueError):
    r"""Encoded data is malformed, *e.g.* bad Base64 input."""


class DeserialisationError(ScanfieldError, ValueError):
    r"""Configuration text could not be parsed."""


class BaseScanner(abc.ABC):
    r"""Cursor over a string-like view.

    Python functions cannot rebind the variable of their caller, so the
    functional scanning API returns the remainder of the view alongside the
    extracted head. This class keeps the remainder instead: each successful
    advance moves an internal cursor past the consumed separator, leaving the
    wrapped buffer untouched.

    Slices returned by a scanner wrapping a :obj:`memoryview` are themselves
    memory views, *i.e.* no data is copied.

    Arguments:
        wrapped (str or byte-like):
            The view to scan.

    Examples:
        >>> from scanfield import Scanner
        >>> scanner = Scanner('Lorem ipsum sit amet')
        >>> words = []
        >>> while scanner:
        ...     words.append(scanner.advance_past(' ', inherit=True))
        >>> words
        ['Lorem', 'ipsum', 'sit', 'amet']
        >>> scanner.exhausted
        True
    """

    @abc.abstractmethod
    def __bool__(
        self,
    ) -> bool:
        r"""Has anything left to scan.

        Returns:
            bool: The remainder is not empty.

        Examples:
            >>> from scanfield import Scanner
            >>> bool(Scanner(''))
            False
            >>> bool(Scanner(b'abc'))
            True
        """
        ...

    @abc.abstractmethod
    def __init__(
        self,
        wrapped: StrLike,
    ):
        ...

    @abc.abstractmethod
    def __len__(
        self,
    ) -> int:
        r"""int: Length of the remainder."""
        ...

    @abc.abstractmethod
    def advance_past(
        self,
        separator: SeparatorLike,
        decode: bool = False,
        inherit: bool = False,
    ) -> StrLike:
        r"""Consumes everything up to and including a separator.

        Arguments:
            separator (str or byte-like or int):
                Token delimiting the returned head. Must not be empty.

            decode (bool):
                Scans code points instead of raw code units, so that a
                separator cannot match in the middle of a multi-byte sequence.

            inherit (bool):
                On a missing separator, returns the whole remainder and
                exhausts the scanner instead of raising.

        Returns:
            str or byte-like: The remainder up to the separator, excluded.

        Raises:
            :obj:`InvalidArgument`: Empty separator.

            :obj:`SeparatorNotFound`: Missing separator, with `inherit`
                disabled. The cursor does not move.

        Examples:
            >>> from scanfield import Scanner
            >>> scanner = Scanner('foo bar!')
            >>> scanner.advance_past(' ')
            'foo'
            >>> scanner.remaining
            'bar!'
            >>> scanner.advance_past('?', inherit=True)
            'bar!'
            >>> scanner.remaining
            ''
        """
        ...

    @property
    @abc.abstractmethod
    def exhausted(
        self,
    ) -> bool:
        r"""bool: Nothing left to scan."""
        ...

    @property
    @abc.abstractmethod
    def position(
        self,
    ) -> int:
        r"""int: Offset of the cursor within the wrapped view."""
        ...

    @property
    @abc.abstractmethod
    def remaining(
        self,
    ) -> StrLike:
        r"""str or byte-like: Slice of the wrapped view after the cursor."""
        ...

    @abc.abstractmethod
    def reset(
        self,
    ) -> None:
        r"""Moves the cursor back to the start of the wrapped view.

        Examples:
            >>> from scanfield import Scanner
            >>> scanner = Scanner('key value')
            >>> scanner.advance_past(' ')
            'key'
            >>> scanner.reset()
            >>> scanner.remaining
            'key value'
        """
        ...

    @property
    @abc.abstractmethod
    def wrapped(
        self,
    ) -> StrLike:
        r"""str or byte-like: The whole wrapped view."""
        ...
