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

r"""Field descriptors and generic access by name.

Aggregates are described by ordered tables of :class:`FieldDescriptor`.
Tables are either registered explicitly through :func:`register_fields`, or
derived from :mod:`dataclasses` annotations, with per-field flags attached
by :func:`configurable`.
"""

import dataclasses
import enum
import functools
import logging
import math
import operator
import re
import typing
from collections.abc import Mapping as _AbcMapping
from collections.abc import Sequence as _AbcSequence
from typing import Any
from typing import Callable
from typing import Dict
from typing import Iterable
from typing import List
from typing import MutableMapping
from typing import Optional
from typing import Sequence
from typing import Tuple
from typing import Union

from .base import InvalidArgument
from .scan import stripped
from .scan import unquoted

__all__ = [
    'FieldDescriptor',
    'FieldKind',
    'METADATA_KEY',
    'SCALAR_KINDS',
    'coerce_value',
    'configurable',
    'describe',
    'find_descriptor',
    'format_value',
    'get_member_by_name',
    'is_zero_value',
    'prune_map',
    'register_fields',
    'replace_members',
    'set_member_by_name',
    'unregister_fields',
]

_logger = logging.getLogger(__name__)

METADATA_KEY: str = 'scanfield'
r"""Key of the field flags within :func:`dataclasses.field` metadata."""

_INTEGER_REGEX = re.compile(r'[+-]?[0-9]+')
_FLOAT_REGEX = re.compile(r'[+-]?(?:[0-9]+(?:\.[0-9]*)?|\.[0-9]+)(?:[eE][+-]?[0-9]+)?'
                          r'|[+-]?(?:nan|inf|infinity)', re.IGNORECASE)

_BOOL_WORDS = {
    'true': True,
    'yes': True,
    'on': True,
    '1': True,
    'false': False,
    'no': False,
    'off': False,
    '0': False,
}

_NOT_GIVEN = object()


class FieldKind(enum.Enum):
    r"""Shape of a field value."""

    STRING = 'string'
    INTEGER = 'integer'
    FLOAT = 'float'
    BOOL = 'bool'
    ENUM = 'enum'
    ARRAY = 'array'
    MAP = 'map'
    AGGREGATE = 'aggregate'


SCALAR_KINDS = frozenset({
    FieldKind.STRING,
    FieldKind.INTEGER,
    FieldKind.FLOAT,
    FieldKind.BOOL,
    FieldKind.ENUM,
})

_ZERO_VALUES = {
    FieldKind.STRING: '',
    FieldKind.INTEGER: 0,
    FieldKind.FLOAT: 0.0,
    FieldKind.BOOL: False,
}


def is_zero_value(
    value: Any,
) -> bool:
    r"""Checks whether a value is the blank value of its type.

    ``None``, NaN, and empty or zero builtin values are blank.

    Examples:
        >>> is_zero_value(0), is_zero_value(''), is_zero_value(float('nan'))
        (True, True, True)
        >>> is_zero_value([0])
        False
    """

    if value is None:
        return True
    if isinstance(value, float) and math.isnan(value):
        return True
    if isinstance(value, (bool, int, float, str, bytes, list, tuple, dict, set)):
        return not value
    return False


class FieldDescriptor:
    r"""Describes one field of an aggregate.

    Arguments:
        name (str):
            Field name, unique within its table.

        kind (:class:`FieldKind`):
            Shape of the value.

        getter (callable):
            ``getter(instance)`` returns the value; defaults to attribute
            access.

        setter (callable):
            ``setter(instance, value)`` stores the value; defaults to
            attribute assignment.

        default:
            Declared default value.

        default_factory (callable):
            Builds the declared default value, for mutable defaults.

        is_default (callable):
            ``is_default(value)`` predicate overriding the default check.

        readonly (bool):
            The field rejects every set attempt.

        element_kind (:class:`FieldKind`):
            Kind of array elements or map values.

        element_type (type):
            Type of array elements or map values.

        value_type (type):
            Enumeration or nested aggregate type.

        hidden (bool):
            Excluded from deltas.

        quoted (bool):
            Serialised between double quotes.

        unconfigurable (bool):
            Excluded from serialisation.

        unmeldable (bool):
            Excluded from melding.

        cannot_contain_comments (bool):
            Deserialised values keep comment markers verbatim.

        separators (sequence of str):
            Array element separators, the first one being used for output.

    Raises:
        :obj:`InvalidArgument`: Empty name, or empty separator.

    Examples:
        >>> from scanfield import FieldDescriptor, FieldKind
        >>> descriptor = FieldDescriptor('port', FieldKind.INTEGER, default=6667)
        >>> descriptor.is_default(6667), descriptor.is_default(0)
        (True, False)
    """

    def __init__(
        self,
        name: str,
        kind: FieldKind,
        getter: Optional[Callable[[Any], Any]] = None,
        setter: Optional[Callable[[Any, Any], None]] = None,
        default: Any = _NOT_GIVEN,
        default_factory: Optional[Callable[[], Any]] = None,
        is_default: Optional[Callable[[Any], bool]] = None,
        readonly: bool = False,
        element_kind: Optional[FieldKind] = None,
        element_type: Optional[type] = None,
        value_type: Optional[type] = None,
        hidden: bool = False,
        quoted: bool = False,
        unconfigurable: bool = False,
        unmeldable: bool = False,
        cannot_contain_comments: bool = False,
        separators: Union[str, Sequence[str]] = (',',),
    ):

        if not name:
            raise InvalidArgument('field descriptor without a name')
        if not isinstance(kind, FieldKind):
            raise InvalidArgument(f'invalid field kind: {kind!r}')
        if isinstance(separators, str):
            separators = (separators,)
        separators = tuple(separators)
        if not separators or not all(separators):
            raise InvalidArgument(f'empty separator for field {name!r}')

        self.name = name
        self.kind = kind
        self.getter = getter if getter is not None else operator.attrgetter(name)
        self.setter = setter
        self.default = default
        self.default_factory = default_factory
        self._is_default = is_default
        self.readonly = readonly
        self.element_kind = element_kind
        self.element_type = element_type
        self.value_type = value_type
        self.hidden = hidden
        self.quoted = quoted
        self.unconfigurable = unconfigurable
        self.unmeldable = unmeldable
        self.cannot_contain_comments = cannot_contain_comments
        self.separators = separators

    def __repr__(
        self,
    ) -> str:

        return f'<{type(self).__name__} {self.name!r} {self.kind.name}>'

    def default_value(
        self,
    ) -> Any:
        r"""Declared default value, or the blank value of the kind."""

        if self.default_factory is not None:
            return self.default_factory()
        if self.default is not _NOT_GIVEN:
            return self.default
        return self.zero_value()

    @functools.cached_property
    def element_descriptor(
        self,
    ) -> Optional['FieldDescriptor']:
        r"""Descriptor of array elements or map values, if scalar."""

        if self.element_kind not in SCALAR_KINDS:
            return None
        return FieldDescriptor(f'{self.name}[]', self.element_kind, value_type=self.element_type)

    def get(
        self,
        instance: Any,
    ) -> Any:
        r"""Reads the field of an instance."""

        return self.getter(instance)

    def is_default(
        self,
        value: Any,
    ) -> bool:
        r"""Checks whether a value counts as unset.

        Unless a custom predicate was given, a value is unset when it equals
        the declared default (the blank value of the kind when none was
        declared), or when it is ``None`` or NaN.
        """

        if self._is_default is not None:
            return self._is_default(value)
        if value is None or (isinstance(value, float) and math.isnan(value)):
            return True
        return value == self.default_value()

    def set(
        self,
        instance: Any,
        value: Any,
    ) -> None:
        r"""Writes the field of an instance, bypassing any checks."""

        if self.setter is None:
            setattr(instance, self.name, value)
        else:
            self.setter(instance, value)

    def zero_value(
        self,
    ) -> Any:
        r"""Blank value of the kind."""

        kind = self.kind
        if kind in _ZERO_VALUES:
            return _ZERO_VALUES[kind]
        if kind is FieldKind.ARRAY:
            return []
        if kind is FieldKind.MAP:
            return {}
        return None


_REGISTRY: Dict[type, Tuple[FieldDescriptor, ...]] = {}


def _check_unique(
    cls: type,
    descriptors: Iterable[FieldDescriptor],
) -> Tuple[FieldDescriptor, ...]:

    descriptors = tuple(descriptors)
    seen = set()
    for descriptor in descriptors:
        if not isinstance(descriptor, FieldDescriptor):
            raise InvalidArgument(f'not a field descriptor: {descriptor!r}')
        if descriptor.name in seen:
            raise InvalidArgument(f'duplicate field {descriptor.name!r} for {cls.__name__}')
        seen.add(descriptor.name)
    return descriptors


def register_fields(
    cls: type,
    descriptors: Iterable[FieldDescriptor],
) -> Tuple[FieldDescriptor, ...]:
    r"""Registers the field table of a type.

    A registered table takes precedence over dataclass derivation.

    Arguments:
        cls (type):
            Described type.

        descriptors (iterable of :class:`FieldDescriptor`):
            Ordered field table.

    Returns:
        tuple: The registered table.

    Raises:
        :obj:`InvalidArgument`: Duplicate field names.

    Examples:
        >>> from scanfield import FieldDescriptor, FieldKind, register_fields, describe
        >>> class Point:
        ...     def __init__(self):
        ...         self.x = 0
        ...         self.y = 0
        >>> _ = register_fields(Point, [FieldDescriptor('x', FieldKind.INTEGER),
        ...                             FieldDescriptor('y', FieldKind.INTEGER)])
        >>> [d.name for d in describe(Point())]
        ['x', 'y']
    """

    if not isinstance(cls, type):
        raise InvalidArgument(f'can only register types, got {cls!r}')
    table = _check_unique(cls, descriptors)
    _REGISTRY[cls] = table
    _logger.debug('Registered %d fields for %s', len(table), cls.__qualname__)
    return table


def unregister_fields(
    cls: type,
) -> None:
    r"""Drops the registered field table of a type, if any."""

    _REGISTRY.pop(cls, None)


def configurable(
    default: Any = dataclasses.MISSING,
    *,
    default_factory: Any = dataclasses.MISSING,
    separators: Union[str, Sequence[str]] = (',',),
    hidden: bool = False,
    quoted: bool = False,
    unconfigurable: bool = False,
    unmeldable: bool = False,
    cannot_contain_comments: bool = False,
    readonly: bool = False,
    **kwargs: Any,
) -> Any:
    r"""Declares a dataclass field carrying descriptor flags.

    Wraps :func:`dataclasses.field`, storing the flags under
    :data:`METADATA_KEY` within the field metadata.

    Examples:
        >>> import dataclasses
        >>> from typing import List
        >>> from scanfield import configurable, describe
        >>> @dataclasses.dataclass
        ... class Settings:
        ...     password: str = configurable('', hidden=True)
        ...     channels: List[str] = configurable(default_factory=list, separators=' ')
        >>> [(d.name, d.hidden, d.separators) for d in describe(Settings)]
        [('password', True, (',',)), ('channels', False, (' ',))]
    """

    metadata = dict(kwargs.pop('metadata', None) or {})
    metadata[METADATA_KEY] = dict(
        separators=separators,
        hidden=hidden,
        quoted=quoted,
        unconfigurable=unconfigurable,
        unmeldable=unmeldable,
        cannot_contain_comments=cannot_contain_comments,
        readonly=readonly,
    )
    return dataclasses.field(default=default, default_factory=default_factory,
                             metadata=metadata, **kwargs)


def _classify(
    hint: Any,
) -> Tuple[FieldKind, Optional[FieldKind], Optional[type], Optional[type]]:

    origin = typing.get_origin(hint)
    args = typing.get_args(hint)

    if origin is Union:
        remaining = [arg for arg in args if arg is not type(None)]
        if len(remaining) == 1:
            return _classify(remaining[0])
        raise InvalidArgument(f'cannot describe union type {hint!r}')

    if hint is bool:
        return FieldKind.BOOL, None, None, None
    if hint is int:
        return FieldKind.INTEGER, None, None, None
    if hint is float:
        return FieldKind.FLOAT, None, None, None
    if hint is str:
        return FieldKind.STRING, None, None, None
    if isinstance(hint, type) and issubclass(hint, enum.Enum):
        return FieldKind.ENUM, None, None, hint

    if hint in (list, tuple) or origin in (list, tuple, _AbcSequence):
        if origin is tuple and not (len(args) == 2 and args[1] is Ellipsis):
            raise InvalidArgument(f'only variadic tuples can be described: {hint!r}')
        element_kind = element_type = None
        if args:
            element_type = args[0]
            element_kind = _classify(element_type)[0]
        return FieldKind.ARRAY, element_kind, element_type, None

    if hint is dict or origin in (dict, _AbcMapping):
        element_kind = element_type = None
        if args:
            element_type = args[1]
            element_kind = _classify(element_type)[0]
        return FieldKind.MAP, element_kind, element_type, None

    if isinstance(hint, type) and (hint in _REGISTRY or dataclasses.is_dataclass(hint)):
        return FieldKind.AGGREGATE, None, None, hint

    raise InvalidArgument(f'cannot describe field type {hint!r}')


@functools.lru_cache(maxsize=None)
def _describe_dataclass(
    cls: type,
) -> Tuple[FieldDescriptor, ...]:

    hints = typing.get_type_hints(cls)
    frozen = cls.__dataclass_params__.frozen
    descriptors = []

    for field in dataclasses.fields(cls):
        flags = dict(field.metadata.get(METADATA_KEY, {}))
        kind, element_kind, element_type, value_type = _classify(hints.get(field.name, field.type))

        default = _NOT_GIVEN if field.default is dataclasses.MISSING else field.default
        factory = None if field.default_factory is dataclasses.MISSING else field.default_factory

        descriptors.append(FieldDescriptor(
            field.name,
            kind,
            default=default,
            default_factory=factory,
            readonly=frozen or flags.pop('readonly', False),
            element_kind=element_kind,
            element_type=element_type,
            value_type=value_type,
            **flags,
        ))

    return _check_unique(cls, descriptors)


def describe(
    thing: Any,
) -> Tuple[FieldDescriptor, ...]:
    r"""Gets the field table of a type or instance.

    Registered tables come first; otherwise dataclasses are described from
    their type annotations. Frozen dataclasses have all their fields
    readonly.

    Arguments:
        thing:
            Type or instance to describe.

    Returns:
        tuple: Ordered :class:`FieldDescriptor` table.

    Raises:
        :obj:`InvalidArgument`: The type can not be described.
    """

    cls = thing if isinstance(thing, type) else type(thing)

    table = _REGISTRY.get(cls)
    if table is not None:
        return table

    if dataclasses.is_dataclass(cls):
        return _describe_dataclass(cls)

    raise InvalidArgument(f'no field descriptors for type {cls.__qualname__}')


def find_descriptor(
    descriptors: Iterable[FieldDescriptor],
    name: str,
) -> Optional[FieldDescriptor]:
    r"""Finds a descriptor by field name, or ``None``."""

    for descriptor in descriptors:
        if descriptor.name == name:
            return descriptor
    return None


def get_member_by_name(
    instance: Any,
    name: str,
    descriptors: Optional[Iterable[FieldDescriptor]] = None,
) -> Any:
    r"""Reads a field by name.

    Raises:
        :obj:`InvalidArgument`: Empty or unknown field name.
    """

    if not name:
        raise InvalidArgument('tried to get a member by name but no name was given')
    if descriptors is None:
        descriptors = describe(instance)

    descriptor = find_descriptor(descriptors, name)
    if descriptor is None:
        raise InvalidArgument(f'{type(instance).__name__} has no field {name!r}')
    return descriptor.get(instance)


def _split_array_text(
    text: str,
    separators: Sequence[str],
) -> List[str]:

    escaped = '\0\0'
    ephemeral = '\1\1'
    backslash = '\2\2'

    text = text.replace('\\\\', backslash)
    for separator in separators:
        text = text.replace('\\' + separator, escaped)
        text = text.replace(separator, ephemeral)
        text = text.replace(escaped, separator)

    while ephemeral * 2 in text:
        text = text.replace(ephemeral * 2, ephemeral)
    text = text.replace(backslash, '\\')
    return text.split(ephemeral)


def _parse_text(
    descriptor: FieldDescriptor,
    text: str,
) -> Any:

    kind = descriptor.kind

    if kind is FieldKind.STRING:
        return text

    if kind is FieldKind.INTEGER:
        text = text.strip()
        if not _INTEGER_REGEX.fullmatch(text):
            raise ValueError(f'not an integer: {text!r}')
        return int(text, 10)

    if kind is FieldKind.FLOAT:
        text = text.strip()
        if not _FLOAT_REGEX.fullmatch(text):
            raise ValueError(f'not a floating point number: {text!r}')
        return float(text)

    if kind is FieldKind.BOOL:
        try:
            return _BOOL_WORDS[text.strip().lower()]
        except KeyError:
            raise ValueError(f'not a boolean: {text!r}') from None

    if kind is FieldKind.ENUM:
        if descriptor.value_type is None:
            raise ValueError(f'enum field {descriptor.name!r} has no enumeration type')
        try:
            return descriptor.value_type[text.strip()]
        except KeyError:
            raise ValueError(f'not a member of {descriptor.value_type.__name__}: {text!r}') from None

    if kind is FieldKind.ARRAY:
        element = descriptor.element_descriptor
        if element is None:
            raise ValueError(f'array field {descriptor.name!r} has no scalar element type')
        values = []
        for chunk in _split_array_text(text, descriptor.separators):
            chunk = stripped(chunk)
            if chunk:
                values.append(_parse_text(element, unquoted(chunk)))
        return _as_container(descriptor, values)

    raise ValueError(f'{kind.name.lower()} field {descriptor.name!r} cannot be set from text')


def _as_container(
    descriptor: FieldDescriptor,
    values: List[Any],
) -> Any:

    default = descriptor.default_value()
    if isinstance(default, tuple):
        return tuple(values)
    return values


def _check_typed(
    descriptor: FieldDescriptor,
    value: Any,
) -> Any:

    kind = descriptor.kind
    is_number = isinstance(value, (int, float)) and not isinstance(value, bool)

    if kind is FieldKind.INTEGER and is_number and isinstance(value, int):
        return value
    if kind is FieldKind.FLOAT and is_number:
        try:
            return float(value)
        except OverflowError as exc:
            raise ValueError(f'number out of float range: {value!r}') from exc
    if kind is FieldKind.BOOL and isinstance(value, bool):
        return value
    if kind is FieldKind.ENUM and descriptor.value_type is not None and isinstance(value, descriptor.value_type):
        return value

    if kind is FieldKind.ARRAY and isinstance(value, (list, tuple)):
        element = descriptor.element_descriptor
        if element is None:
            return _as_container(descriptor, list(value))
        return _as_container(descriptor, [coerce_value(element, item) for item in value])

    if kind is FieldKind.MAP and isinstance(value, _AbcMapping):
        return dict(value)

    if kind is FieldKind.AGGREGATE:
        if descriptor.value_type is None or isinstance(value, descriptor.value_type):
            return value

    raise ValueError(f'{type(value).__name__} value does not fit {kind.name.lower()} field {descriptor.name!r}')


def coerce_value(
    descriptor: FieldDescriptor,
    value: Any,
) -> Any:
    r"""Converts a value to fit a field.

    Text is parsed according to the kind of the field: decimal integers and
    floats regardless of locale; booleans from ``true``/``false``,
    ``yes``/``no``, ``on``/``off``, ``1``/``0`` in any case; enumerations
    by member name; arrays split on the field separators, where a backslash
    escapes a separator and ``\\`` stands for a backslash. Other values must
    already fit the kind; integers are promoted to float where needed.

    Arguments:
        descriptor (:class:`FieldDescriptor`):
            Target field.

        value:
            Value to convert.

    Returns:
        The converted value.

    Raises:
        :obj:`ValueError`: The value does not fit the field.

    Examples:
        >>> from scanfield import FieldDescriptor, FieldKind, coerce_value
        >>> coerce_value(FieldDescriptor('b', FieldKind.BOOL), 'Yes')
        True
        >>> coerce_value(FieldDescriptor('f', FieldKind.FLOAT), 3)
        3.0
        >>> coerce_value(FieldDescriptor('a', FieldKind.ARRAY, element_kind=FieldKind.INTEGER,
        ...                              element_type=int), '1, 2,3')
        [1, 2, 3]
    """

    if isinstance(value, str):
        return _parse_text(descriptor, value)
    return _check_typed(descriptor, value)


def set_member_by_name(
    instance: Any,
    name: str,
    value: Any,
    descriptors: Optional[Iterable[FieldDescriptor]] = None,
) -> bool:
    r"""Sets a field by name, converting the value to fit.

    Failing to set a field is a common and expected outcome, *e.g.* when
    probing unknown configuration keys, so it is reported by the return value
    rather than raised. The instance is left untouched on failure.

    Arguments:
        instance:
            Instance to update.

        name (str):
            Field name.

        value:
            New value, either text to parse or a value fitting the field.

        descriptors (iterable of :class:`FieldDescriptor`):
            Field table; defaults to :func:`describe` of `instance`.

    Returns:
        bool: The field was set; ``False`` for unknown or readonly fields,
        and for values that could not be converted.

    Raises:
        :obj:`InvalidArgument`: Empty field name.

    Examples:
        >>> import dataclasses
        >>> from scanfield import set_member_by_name
        >>> @dataclasses.dataclass
        ... class Server:
        ...     address: str = ''
        ...     port: int = 0
        >>> server = Server()
        >>> set_member_by_name(server, 'port', '6697')
        True
        >>> set_member_by_name(server, 'port', 'six')
        False
        >>> set_member_by_name(server, 'nonexistent', 'value')
        False
        >>> server
        Server(address='', port=6697)

    See Also:
        :func:`coerce_value`
    """

    if not name:
        raise InvalidArgument('tried to set a member by name but no name was given')
    if descriptors is None:
        descriptors = describe(instance)
    type_name = type(instance).__name__

    descriptor = find_descriptor(descriptors, name)
    if descriptor is None:
        _logger.debug('Ignoring unknown field %s.%s', type_name, name)
        return False
    if descriptor.readonly:
        _logger.debug('Ignoring readonly field %s.%s', type_name, name)
        return False

    try:
        converted = coerce_value(descriptor, value)
    except ValueError as exc:
        _logger.debug('Could not set %s.%s: %s', type_name, name, exc)
        return False

    descriptor.set(instance, converted)
    return True


def _format_float(
    value: float,
) -> str:

    text = repr(float(value))
    if text.endswith('.0'):
        text = text[:-2]
    return text


def format_value(
    descriptor: FieldDescriptor,
    value: Any,
) -> str:
    r"""Renders a field value as text.

    Booleans are ``true`` or ``false``, enumerations their member name,
    floats their shortest round-tripping form without a trailing ``.0``.
    Array elements are joined by the first field separator, escaping
    separators within them.

    Examples:
        >>> from scanfield import FieldDescriptor, FieldKind, format_value
        >>> format_value(FieldDescriptor('f', FieldKind.FLOAT), 3.0)
        '3'
        >>> format_value(FieldDescriptor('b', FieldKind.BOOL), True)
        'true'
        >>> format_value(FieldDescriptor('a', FieldKind.ARRAY, element_kind=FieldKind.STRING,
        ...                              separators='|'), ['a', 'b|c'])
        'a|b\\|c'
    """

    if value is None:
        return ''

    kind = descriptor.kind
    if kind is FieldKind.BOOL:
        return 'true' if value else 'false'
    if kind is FieldKind.FLOAT and isinstance(value, (int, float)):
        return _format_float(value)
    if kind is FieldKind.ENUM and isinstance(value, enum.Enum):
        return value.name

    if kind is FieldKind.ARRAY:
        element = descriptor.element_descriptor
        chunks = []
        for item in value:
            chunk = format_value(element, item) if element is not None else str(item)
            for separator in descriptor.separators:
                chunk = chunk.replace(separator, '\\' + separator)
            chunks.append(chunk)
        return descriptor.separators[0].join(chunks)

    if kind in (FieldKind.MAP, FieldKind.AGGREGATE):
        return repr(value)
    return str(value)


def prune_map(
    mapping: MutableMapping[Any, Any],
    predicate: Optional[Callable[[Any], bool]] = None,
) -> None:
    r"""Removes map entries with unwanted values, in place.

    Arguments:
        mapping:
            Map to prune.

        predicate:
            Tells whether an entry value is to be removed.
            If ``None``, blank values are removed, as per
            :func:`is_zero_value`.

    Examples:
        >>> from scanfield import prune_map
        >>> aliases = {'abc': 'def', 'ghi': '', 'mno': '123', 'pqr': None}
        >>> prune_map(aliases)
        >>> aliases
        {'abc': 'def', 'mno': '123'}
        >>> prune_map(aliases, lambda value: value.isdigit())
        >>> aliases
        {'abc': 'def'}
    """

    if predicate is None:
        predicate = is_zero_value

    garbage = [key for key, value in mapping.items() if predicate(value)]
    for key in garbage:
        del mapping[key]


def replace_members(
    instance: Any,
    token: Any,
    replacement: Any = None,
    descriptors: Optional[Iterable[FieldDescriptor]] = None,
) -> None:
    r"""Replaces fields holding a token value.

    Fields equal to `token` (and of its very type) are set to `replacement`,
    or cleared to their blank value when no replacement is given. Arrays
    holding just the token are treated the same way. Nested aggregates are
    processed recursively; readonly fields are skipped.

    Examples:
        >>> import dataclasses
        >>> from typing import List
        >>> from scanfield import replace_members
        >>> @dataclasses.dataclass
        ... class Settings:
        ...     nickname: str = '-'
        ...     channels: List[str] = dataclasses.field(default_factory=lambda: ['-'])
        >>> settings = Settings()
        >>> replace_members(settings, '-')
        >>> settings
        Settings(nickname='', channels=[])
    """

    if descriptors is None:
        descriptors = describe(instance)

    for descriptor in descriptors:
        if descriptor.readonly:
            continue
        value = descriptor.get(instance)
        kind = descriptor.kind

        if kind is FieldKind.AGGREGATE:
            if value is not None:
                replace_members(value, token, replacement)

        elif kind is FieldKind.ARRAY:
            if value is not None and len(value) == 1 and type(value[0]) is type(token) and value[0] == token:
                values = [] if replacement is None else [replacement]
                descriptor.set(instance, _as_container(descriptor, values))

        elif type(value) is type(token) and value == token:
            if replacement is None:
                replacement_value = descriptor.zero_value()
            else:
                replacement_value = replacement
            descriptor.set(instance, replacement_value)
