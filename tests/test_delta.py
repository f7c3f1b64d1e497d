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

import copy

import pytest
from _common import *

from scanfield import DeltaEntry
from scanfield import FieldDescriptor
from scanfield import FieldKind
from scanfield import InvalidArgument
from scanfield import compute_delta
from scanfield import format_delta


def test_compute_delta(connection):
    delta = compute_delta(Connection(), connection)
    assert delta == [
        DeltaEntry('state', 'UNSET', 'CONNECTED'),
        DeltaEntry('nickname', '', 'NICKNAME'),
        DeltaEntry('server.address', '', 'address.tld'),
        DeltaEntry('server.port', '0', '1337'),
    ]
    assert delta[0].field_path == 'state'
    assert delta[0].old_value == 'UNSET'
    assert delta[0].new_value == 'CONNECTED'


def test_compute_delta_reflexive(connection, bot):
    for thing in (connection, bot, Connection(), Bot(), FooSettings(), FrozenPoint(1, 2)):
        assert compute_delta(thing, thing) == []
        assert compute_delta(thing, copy.deepcopy(thing)) == []


def test_compute_delta_path_prefix(connection):
    delta = compute_delta(Connection(), connection, path_prefix='conn')
    assert [entry.field_path for entry in delta] == [
        'conn.state', 'conn.nickname', 'conn.server.address', 'conn.server.port',
    ]


def test_compute_delta_kinds(bot):
    delta = compute_delta(Bot(), bot)
    assert dict((entry.field_path, entry.new_value) for entry in delta) == {
        'nickname': 'kameloso',
        'realname': 'kameloso IRC bot',
        'ident': 'NaN',
        'port': '6697',
        'ratio': '0.5',
        'tls': 'true',
        'state': 'CONNECTED',
        'channels': '#d,#python',
        'aliases': "{'hi': 'hello'}",
    }


def test_compute_delta_map_order():
    before = Bot(aliases={'hi': 'hello', 'bye': 'goodbye'})
    after = Bot(aliases={'bye': 'goodbye', 'hi': 'hello'})
    assert compute_delta(before, after) == []
    assert format_delta(before, after) == ''

    after.aliases['hi'] = 'hey'
    delta = compute_delta(before, after)
    assert [entry.field_path for entry in delta] == ['aliases']

def test_compute_delta_descriptors(connection):
    descriptors = [FieldDescriptor('nickname', FieldKind.STRING)]
    delta = compute_delta(Connection(), connection, descriptors)
    assert delta == [DeltaEntry('nickname', '', 'NICKNAME')]


def test_compute_delta_hidden(connection):
    paths = [entry.field_path for entry in compute_delta(Connection(), connection)]
    assert 'user' not in paths
    assert 'password' not in paths


def test_compute_delta_invalid(connection):
    with pytest.raises(InvalidArgument, match='cannot compare'):
        compute_delta(connection, Server())


def test_format_delta(connection):
    expected = (
        "conn.state = State.CONNECTED\n"
        "conn.nickname = 'NICKNAME'\n"
        "conn.server.address = 'address.tld'\n"
        "conn.server.port = 1337\n"
    )
    assert format_delta(Connection(), connection, submember='conn') == expected


def test_format_delta_bare(connection):
    expected = (
        "state = State.CONNECTED\n"
        "nickname = 'NICKNAME'\n"
        "server.address = 'address.tld'\n"
        "server.port = 1337\n"
    )
    assert format_delta(Connection(), connection) == expected


def test_format_delta_asserts(connection):
    connection.server.connected = True
    expected = (
        "        assert (conn.state == State.CONNECTED), conn.state\n"
        "        assert (conn.nickname == 'NICKNAME'), conn.nickname\n"
        "        assert (conn.server.address == 'address.tld'), conn.server.address\n"
        "        assert (conn.server.port == 1337), conn.server.port\n"
        "        assert conn.server.connected\n"
    )
    assert format_delta(Connection(), connection, asserts=True, indents=2, submember='conn') == expected

    before = copy.deepcopy(connection)
    connection.server.connected = False
    expected = "assert not server.connected\n"
    assert format_delta(before, connection, asserts=True) == expected


def test_format_delta_statements_run(connection):
    conn = Connection()
    exec(format_delta(Connection(), connection, submember='conn'), {'State': State}, {'conn': conn})
    assert compute_delta(conn, connection) == []

    exec(format_delta(Connection(), connection, asserts=True, submember='conn'), {'State': State},
         {'conn': connection})


def test_format_delta_empty(bot):
    assert format_delta(bot, copy.deepcopy(bot)) == ''
