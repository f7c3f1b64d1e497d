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

r"""Configuration text serialisation.

Aggregates are written as sections of a simple INI-like layout::

    [Connection]
    nickname            kameloso
    #password
    channels            #d,#python

Each section is named after the aggregate type, without any trailing
``Settings``. Entries hold a field name and its value, separated by
whitespace; unset values are commented out. Lines starting with ``#``, ``;``
or ``//`` are comments.
"""

import logging
from typing import Any
from typing import Dict
from typing import Iterable
from typing import List
from typing import Tuple
from typing import Union

from .base import DeserialisationError
from .base import InvalidArgument
from .fields import FieldDescriptor
from .fields import FieldKind
from .fields import describe
from .fields import find_descriptor
from .fields import format_value
from .fields import set_member_by_name
from .scan import advance_past_or_inherit
from .scan import strip_suffix
from .scan import stripped
from .scan import unquoted

__all__ = [
    'deserialise',
    'justified_configuration_text',
    'section_name',
    'serialise',
    'serialise_section',
    'split_entry_value',
]

_logger = logging.getLogger(__name__)

_COMMENT_MARKERS = ('#', ';', '//')
_WHITESPACE = ' \t\n\r\v\f'
_MIN_ENTRY_WIDTH = 24


def section_name(
    thing: Any,
) -> str:
    r"""Section name of a type or instance.

    Examples:
        >>> class ConnectionSettings:
        ...     pass
        >>> section_name(ConnectionSettings)
        'Connection'
    """

    cls = thing if isinstance(thing, type) else type(thing)
    return strip_suffix(cls.__name__, 'Settings')


def _is_serialisable(
    descriptor: FieldDescriptor,
) -> bool:

    return not descriptor.unconfigurable and descriptor.kind not in (FieldKind.AGGREGATE, FieldKind.MAP)


def _is_unset(
    descriptor: FieldDescriptor,
    value: Any,
) -> bool:

    kind = descriptor.kind
    if value is None:
        return kind not in (FieldKind.BOOL, FieldKind.ENUM)
    if kind in (FieldKind.STRING, FieldKind.ARRAY):
        return not value
    if kind is FieldKind.INTEGER:
        return value == 0
    if kind is FieldKind.FLOAT:
        return value != value
    return False


def serialise_section(
    thing: Any,
) -> str:
    r"""Serialises one aggregate into a configuration section.

    Returns:
        str: Section text, ending with a newline.
    """

    lines = [f'[{section_name(thing)}]\n']

    for descriptor in describe(thing):
        if not _is_serialisable(descriptor):
            continue
        value = descriptor.get(thing)

        if _is_unset(descriptor, value):
            lines.append(f'#{descriptor.name}\n')
        elif descriptor.quoted and descriptor.kind is FieldKind.STRING:
            lines.append(f'{descriptor.name} "{value}"\n')
        else:
            lines.append(f'{descriptor.name} {format_value(descriptor, value)}\n')

    return ''.join(lines)


def serialise(
    *things: Any,
) -> str:
    r"""Serialises aggregates into configuration text.

    Strings and arrays left empty, integers left zero, and NaN floats, are
    written commented out. Quoted fields are written between double quotes.
    Unconfigurable fields, nested aggregates and maps are not written.
    Sections are separated by an empty line.

    Arguments:
        things:
            Aggregates to serialise, one section each.

    Returns:
        str: Configuration text.

    Raises:
        :obj:`InvalidArgument`: Nothing to serialise.

    Examples:
        >>> import dataclasses
        >>> from typing import List
        >>> from scanfield import configurable, serialise
        >>> @dataclasses.dataclass
        ... class ConnectionSettings:
        ...     nickname: str = 'kameloso'
        ...     password: str = ''
        ...     realname: str = configurable('kameloso IRC bot', quoted=True)
        ...     channels: List[str] = configurable(default_factory=lambda: ['#d', '#python'],
        ...                                    cannot_contain_comments=True)
        ...     port: int = 6667
        ...     tls: bool = False
        >>> print(serialise(ConnectionSettings()), end='')
        [Connection]
        nickname kameloso
        #password
        realname "kameloso IRC bot"
        channels #d,#python
        port 6667
        tls false
    """

    if not things:
        raise InvalidArgument('nothing to serialise')
    return '\n'.join(serialise_section(thing) for thing in things)


def split_entry_value(
    line: str,
) -> Tuple[str, str]:
    r"""Splits a configuration line into its entry name and value.

    The value starts at the first non-whitespace character after the name.

    Examples:
        >>> split_entry_value('nickname        kameloso^^')
        ('nickname', 'kameloso^^')
        >>> split_entry_value('ha\t \t  ha')
        ('ha', 'ha')
        >>> split_entry_value('lonely')
        ('lonely', '')
    """

    endex = None
    for index, char in enumerate(line):
        if char in _WHITESPACE:
            if endex is None:
                endex = index
        elif endex is not None:
            return line[:endex], line[index:]

    if endex is None:
        return line, ''
    return line[:endex], ''


def _is_comment(
    line: str,
) -> bool:

    return line.startswith(_COMMENT_MARKERS)


def _strip_comments(
    value: str,
) -> str:

    for marker in _COMMENT_MARKERS:
        value, _ = advance_past_or_inherit(value, marker)
    return value


def _iter_lines(
    text: Union[str, Iterable[str]],
) -> Iterable[str]:

    if isinstance(text, str):
        return text.splitlines()
    return text


def deserialise(
    text: Union[str, Iterable[str]],
    *things: Any,
) -> Tuple[Dict[str, List[str]], Dict[str, List[str]]]:
    r"""Applies configuration text onto aggregates.

    Each aggregate is updated from the section named after its type, see
    :func:`section_name`; other sections are ignored. Values are stripped of
    inline comments (unless the field cannot contain comments), of
    surrounding whitespace and of enclosing quotes, then set through
    :func:`scanfield.fields.set_member_by_name`.

    Arguments:
        text (str or iterable of str):
            Configuration text, or its lines.

        things:
            Aggregates to update in place.

    Returns:
        tuple: ``(missing, invalid)`` dictionaries, mapping section names to
        lists of field names. `missing` lists the serialisable fields not
        found in the text; `invalid` lists unknown entries, and entries whose
        value could not be set.

    Raises:
        :obj:`DeserialisationError`: Malformed section header, or entry
            outside any section.

    Examples:
        >>> import dataclasses
        >>> from scanfield import deserialise
        >>> @dataclasses.dataclass
        ... class ConnectionSettings:
        ...     nickname: str = ''
        ...     port: int = 0
        ...     tls: bool = False
        >>> settings = ConnectionSettings()
        >>> missing, invalid = deserialise('''
        ... [Connection]
        ... nickname "kameloso"  # inline comment
        ... port 6697
        ... flood on
        ... ''', settings)
        >>> settings
        ConnectionSettings(nickname='kameloso', port=6697, tls=False)
        >>> missing, invalid
        ({'Connection': ['tls']}, {'Connection': ['flood']})
    """

    sections = {}
    encountered = {}
    for thing in things:
        name = section_name(thing)
        descriptors = describe(thing)
        sections[name] = (thing, descriptors)
        encountered[name] = {descriptor.name: False for descriptor in descriptors
                             if _is_serialisable(descriptor)}

    invalid: Dict[str, List[str]] = {}
    section = None

    for raw_line in _iter_lines(text):
        line = stripped(raw_line)
        if not line or _is_comment(line):
            continue

        if line.startswith('['):
            section = line[1:-1]
            if (len(line) < 3 or not line.endswith(']') or ']' in section
                    or any(char in _WHITESPACE for char in section)):
                raise DeserialisationError(f'malformed section header: {line!r}')
            continue

        if section is None:
            raise DeserialisationError(f'entry outside any section: {line!r}')

        target = sections.get(section)
        if target is None:
            continue
        thing, descriptors = target

        entry, value = split_entry_value(line)
        descriptor = find_descriptor(descriptors, entry)
        if descriptor is None or not _is_serialisable(descriptor):
            _logger.debug('Unknown entry %r in section [%s]', entry, section)
            invalid.setdefault(section, []).append(entry)
            continue

        encountered[section][entry] = True
        if not descriptor.cannot_contain_comments:
            value = _strip_comments(value)
        value = stripped(value)
        if descriptor.kind is not FieldKind.ARRAY:
            value = unquoted(value)

        if not set_member_by_name(thing, entry, value, descriptors):
            invalid.setdefault(section, []).append(entry)

    missing = {}
    for name, seen in encountered.items():
        unseen = [entry for entry, found in seen.items() if not found]
        if unseen:
            missing[name] = unseen
    return missing, invalid


def justified_configuration_text(
    text: str,
) -> str:
    r"""Aligns the values of configuration text into a column.

    Entry names are padded to a common width: the next multiple of four
    above the longest name, and at least 24. Comments and section headers
    are kept as they are; empty lines are kept, except leading and trailing
    ones.

    Examples:
        >>> print(justified_configuration_text('''
        ... [Connection]
        ... nickname kameloso
        ... #password
        ...
        ... [Misc]
        ... port    6697
        ... '''))
        [Connection]
        nickname                kameloso
        #password
        <BLANKLINE>
        [Misc]
        port                    6697
    """

    unjustified = []
    longest = 0

    for raw_line in text.split('\n'):
        line = stripped(raw_line)
        if not line or _is_comment(line) or line.startswith('['):
            unjustified.append((line, None))
        else:
            entry, value = split_entry_value(line)
            longest = max(longest, len(entry))
            unjustified.append((entry, value))

    width = max(_MIN_ENTRY_WIDTH, (longest // 4 + 1) * 4)
    justified = []

    for entry, value in unjustified:
        if value is None:
            if entry or justified:
                justified.append(entry)
        else:
            justified.append(f'{entry:<{width}}{value}'.rstrip())

    return stripped('\n'.join(justified))
