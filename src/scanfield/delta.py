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

r"""Differences between aggregates of the same type."""

import enum
from typing import Any
from typing import Iterable
from typing import Iterator
from typing import List
from typing import NamedTuple
from typing import Optional
from typing import Tuple

from .base import InvalidArgument
from .fields import FieldDescriptor
from .fields import FieldKind
from .fields import describe
from .fields import format_value
from .scan import tabs

__all__ = [
    'DeltaEntry',
    'compute_delta',
    'format_delta',
]


class DeltaEntry(NamedTuple):
    r"""One changed field."""

    field_path: str
    r"""Dotted path of the field, from the outermost aggregate."""

    old_value: str
    r"""Rendered value before the change."""

    new_value: str
    r"""Rendered value after the change."""


def _walk_changes(
    before: Any,
    after: Any,
    descriptors: Optional[Iterable[FieldDescriptor]],
    path_prefix: str,
) -> Iterator[Tuple[FieldDescriptor, str, Any, Any]]:

    if type(before) is not type(after):
        raise InvalidArgument(f'cannot compare {type(before).__name__} with {type(after).__name__}')
    if descriptors is None:
        descriptors = describe(after)

    for descriptor in descriptors:
        if descriptor.hidden:
            continue

        path = f'{path_prefix}.{descriptor.name}' if path_prefix else descriptor.name
        old_value = descriptor.get(before)
        new_value = descriptor.get(after)

        if (descriptor.kind is FieldKind.AGGREGATE
                and old_value is not None and new_value is not None):
            yield from _walk_changes(old_value, new_value, None, path)

        elif descriptor.kind is FieldKind.MAP:
            if old_value != new_value:
                yield descriptor, path, old_value, new_value

        elif format_value(descriptor, old_value) != format_value(descriptor, new_value):
            yield descriptor, path, old_value, new_value


def compute_delta(
    before: Any,
    after: Any,
    descriptors: Optional[Iterable[FieldDescriptor]] = None,
    path_prefix: str = '',
) -> List[DeltaEntry]:
    r"""Lists the fields that differ between two aggregates.

    Values are compared by their rendered text, see
    :func:`scanfield.fields.format_value`. Nested aggregates are compared
    field by field, with dotted paths. Hidden fields are skipped.

    Arguments:
        before:
            Aggregate before the change.

        after:
            Aggregate after the change, of the same type as `before`.

        descriptors (iterable of :class:`FieldDescriptor`):
            Field table; defaults to :func:`describe` of `after`.

        path_prefix (str):
            Prefix of the reported paths.

    Returns:
        list of :class:`DeltaEntry`: Changed fields, in declaration order.

    Raises:
        :obj:`InvalidArgument`: Different types.

    Examples:
        >>> import dataclasses
        >>> from scanfield import compute_delta
        >>> @dataclasses.dataclass
        ... class Server:
        ...     address: str = ''
        ...     port: int = 6667
        >>> for entry in compute_delta(Server(), Server('irc.libera.chat', 6697)):
        ...     print(entry)
        DeltaEntry(field_path='address', old_value='', new_value='irc.libera.chat')
        DeltaEntry(field_path='port', old_value='6667', new_value='6697')
        >>> compute_delta(Server(), Server())
        []
    """

    return [DeltaEntry(path, format_value(descriptor, old_value), format_value(descriptor, new_value))
            for descriptor, path, old_value, new_value in _walk_changes(before, after, descriptors, path_prefix)]


def _literal(
    value: Any,
) -> str:

    if isinstance(value, enum.Enum):
        return f'{type(value).__qualname__}.{value.name}'
    return repr(value)


def format_delta(
    before: Any,
    after: Any,
    asserts: bool = False,
    indents: int = 0,
    submember: str = '',
    descriptors: Optional[Iterable[FieldDescriptor]] = None,
) -> str:
    r"""Renders the changes between two aggregates as Python statements.

    Each changed field yields an assignment, or an assertion when `asserts`
    is set, so that the output can seed code or unit tests reproducing the
    state of `after`.

    Arguments:
        before:
            Aggregate before the change.

        after:
            Aggregate after the change.

        asserts (bool):
            Emits ``assert`` statements instead of assignments.

        indents (int):
            Indentation level of each statement, four spaces each.

        submember (str):
            Name of the variable holding the aggregate; empty for bare
            field names.

        descriptors (iterable of :class:`FieldDescriptor`):
            Field table; defaults to :func:`describe` of `after`.

    Returns:
        str: One statement per line.

    Examples:
        >>> import dataclasses
        >>> from scanfield import format_delta
        >>> @dataclasses.dataclass
        ... class Server:
        ...     address: str = ''
        ...     port: int = 6667
        ...     tls: bool = False
        >>> print(format_delta(Server(), Server('irc.libera.chat', 6697, True), submember='server'), end='')
        server.address = 'irc.libera.chat'
        server.port = 6697
        server.tls = True
        >>> print(format_delta(Server(), Server('irc.libera.chat', tls=True), asserts=True, indents=1), end='')
            assert (address == 'irc.libera.chat'), address
            assert tls
    """

    indentation = str(tabs(indents))
    lines = []

    for descriptor, path, _, new_value in _walk_changes(before, after, descriptors, submember):
        if asserts:
            if descriptor.kind is FieldKind.BOOL:
                lines.append(f'{indentation}assert {"" if new_value else "not "}{path}\n')
            else:
                lines.append(f'{indentation}assert ({path} == {_literal(new_value)}), {path}\n')
        else:
            lines.append(f'{indentation}{path} = {_literal(new_value)}\n')

    return ''.join(lines)
