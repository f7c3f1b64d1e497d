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

r"""String scanning and reflection over named fields.

This package groups two families of helpers, often needed together when
parsing line-oriented protocols and configuration files.

The *scanning* helpers slice string-like views: :obj:`str`, :obj:`bytes`,
:obj:`bytearray` and :obj:`memoryview`. They never modify their input, and
return slices of it, without copying data out of a :obj:`memoryview`.

>>> from scanfield import advance_past, Scanner
>>> advance_past('PRIVMSG #channel :hello there', ' :')
('PRIVMSG #channel', 'hello there')
>>> scanner = Scanner(b'nick!user@host')
>>> scanner.advance_past('!'), scanner.advance_past('@'), scanner.remaining
(b'nick', b'user', b'host')

Functions that cannot find their separator raise :obj:`SeparatorNotFound`,
unless asked to *inherit* the whole view instead:

>>> from scanfield import advance_past_or_inherit
>>> advance_past_or_inherit('nick', '!')
('nick', '')

The *reflection* helpers get, set, compare and merge the fields of
aggregates by name. Each aggregate type is described by an ordered table of
field descriptors, either registered explicitly or derived from a
:mod:`dataclasses` dataclass:

>>> import dataclasses
>>> from scanfield import set_member_by_name, compute_delta, meld_into
>>> @dataclasses.dataclass
... class Server:
...     address: str = ''
...     port: int = 6667
>>> server = Server()
>>> set_member_by_name(server, 'address', 'irc.libera.chat')
True
>>> compute_delta(Server(), server)
[DeltaEntry(field_path='address', old_value='', new_value='irc.libera.chat')]
>>> fallback = Server(port=6697)
>>> meld_into(fallback, server)
>>> server
Server(address='irc.libera.chat', port=6697)

On top of both, aggregates can be serialised to and from a simple
configuration text layout, see :func:`serialise` and :func:`deserialise`.
"""

__version__ = '0.1.0'

from .base import *  # noqa: F401, F403
from .delta import *  # noqa: F401, F403
from .fields import *  # noqa: F401, F403
from .meld import *  # noqa: F401, F403
from .scan import *  # noqa: F401, F403
from .serial import *  # noqa: F401, F403
