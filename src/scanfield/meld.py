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

r"""Field-wise merging of aggregates."""

import copy
import enum
import logging
from typing import Any
from typing import Callable
from typing import Iterable
from typing import MutableMapping
from typing import MutableSequence
from typing import Optional
from typing import Sequence

from .base import InvalidArgument
from .fields import FieldDescriptor
from .fields import FieldKind
from .fields import describe
from .fields import is_zero_value

__all__ = [
    'MeldPolicy',
    'meld_arrays',
    'meld_into',
    'meld_maps',
]

_logger = logging.getLogger(__name__)


class MeldPolicy(enum.Enum):
    r"""Decides which scalar values a meld copies."""

    FILL_ONLY_IF_TARGET_IS_DEFAULT = 'fill'
    r"""Copies a source value only over an unset target value."""

    OVERWRITE_SOURCE_WINS = 'overwrite'
    r"""Copies any set source value, replacing the target value."""


def _should_copy(
    policy: MeldPolicy,
    is_default: Callable[[Any], bool],
    source_value: Any,
    target_value: Any,
) -> bool:

    if is_default(source_value):
        return False
    if policy is MeldPolicy.OVERWRITE_SOURCE_WINS:
        return True
    return is_default(target_value)


def meld_arrays(
    source: Sequence[Any],
    target: MutableSequence[Any],
) -> None:
    r"""Appends copies of the source elements missing from the target.

    Examples:
        >>> target = ['a', 'b']
        >>> meld_arrays(['b', 'c', 'c'], target)
        >>> target
        ['a', 'b', 'c']
    """

    for item in source:
        if item not in target:
            target.append(copy.deepcopy(item))


def meld_maps(
    source: MutableMapping[Any, Any],
    target: MutableMapping[Any, Any],
    policy: MeldPolicy = MeldPolicy.FILL_ONLY_IF_TARGET_IS_DEFAULT,
    is_default: Callable[[Any], bool] = is_zero_value,
) -> None:
    r"""Merges source entries into the target, key by key.

    Keys missing from the target are added; on colliding keys the value is
    chosen by `policy`.

    Examples:
        >>> target = {'a': 1, 'b': 0}
        >>> meld_maps({'b': 2, 'c': 3, 'a': 4}, target)
        >>> target
        {'a': 1, 'b': 2, 'c': 3}
    """

    for key, value in source.items():
        if key not in target or _should_copy(policy, is_default, value, target[key]):
            target[key] = copy.deepcopy(value)


def meld_into(
    source: Any,
    target: Any,
    policy: MeldPolicy = MeldPolicy.FILL_ONLY_IF_TARGET_IS_DEFAULT,
    descriptors: Optional[Iterable[FieldDescriptor]] = None,
) -> None:
    r"""Merges the fields of an aggregate into another of the same type.

    Scalars follow `policy`: source values equal to their default are never
    copied. Arrays get the source elements they lack appended, after their
    own. Maps get the keys they lack, colliding keys following `policy`.
    Nested aggregates are melded recursively. Readonly and unmeldable fields
    are skipped.

    Arguments:
        source:
            Aggregate to take values from; left untouched.

        target:
            Aggregate to update in place.

        policy (:class:`MeldPolicy`):
            Scalar copy policy.

        descriptors (iterable of :class:`FieldDescriptor`):
            Field table; defaults to :func:`describe` of `target`.

    Raises:
        :obj:`InvalidArgument`: Different types, or invalid policy.

    Examples:
        >>> import dataclasses
        >>> from scanfield import meld_into, MeldPolicy
        >>> @dataclasses.dataclass
        ... class Bot:
        ...     nickname: str = ''
        ...     port: int = 6667
        >>> target = Bot(nickname='kameloso')
        >>> meld_into(Bot(nickname='zorael', port=7000), target)
        >>> target
        Bot(nickname='kameloso', port=7000)
        >>> meld_into(Bot(nickname='zorael'), target, MeldPolicy.OVERWRITE_SOURCE_WINS)
        >>> target
        Bot(nickname='zorael', port=7000)
    """

    if type(source) is not type(target):
        raise InvalidArgument(f'cannot meld {type(source).__name__} into {type(target).__name__}')
    if not isinstance(policy, MeldPolicy):
        raise InvalidArgument(f'invalid meld policy: {policy!r}')
    if descriptors is None:
        descriptors = describe(target)

    for descriptor in descriptors:
        if descriptor.readonly or descriptor.unmeldable:
            continue

        kind = descriptor.kind
        source_value = descriptor.get(source)
        target_value = descriptor.get(target)

        if kind is FieldKind.AGGREGATE:
            if source_value is None:
                continue
            if target_value is None:
                descriptor.set(target, copy.deepcopy(source_value))
            else:
                meld_into(source_value, target_value, policy)

        elif kind is FieldKind.ARRAY:
            if not source_value:
                continue
            if isinstance(target_value, list):
                meld_arrays(source_value, target_value)
            else:
                merged = list(target_value or ())
                meld_arrays(source_value, merged)
                if target_value is not None:
                    merged = type(target_value)(merged)
                descriptor.set(target, merged)

        elif kind is FieldKind.MAP:
            if not source_value:
                continue
            element = descriptor.element_descriptor
            is_default = element.is_default if element is not None else is_zero_value
            if target_value is None:
                target_value = {}
                descriptor.set(target, target_value)
            meld_maps(source_value, target_value, policy, is_default)

        elif _should_copy(policy, descriptor.is_default, source_value, target_value):
            _logger.debug('Melding %s.%s', type(target).__name__, descriptor.name)
            descriptor.set(target, source_value)
