# Copyright 2025 Softwell S.r.l. - Genropy Team
# SPDX-License-Identifier: Apache-2.0

"""Tests for JSON conversion and text dumps."""

import io
from datetime import datetime, timedelta, timezone

import pytest

from genro_scopetree import Node, NodeFlag, ParseError
from genro_scopetree.serialise import dumps, to_json, to_python


@pytest.fixture
def mixed():
    """A tree mixing maps, numeric lists and typed leaves."""
    root = Node.new_root()
    root.set_key('main.string.one', '1')
    root.set_key('main.int.one', 1)
    root.set_key('main.bool.true', True)
    root.set_key('main.list.2', 'two')
    root.set_key('main.list.1', 'one')
    root.set_key('main.list.10', 'ten')
    return root


class TestToJson:
    """Tests for to_json."""

    def test_unsorted(self, mixed):
        """Test objects and arrays keep child order."""
        assert mixed.to_json() == (
            '{"main":{"string":{"one":"1"},"int":{"one":1},'
            '"bool":{"true":true},"list":["two","one","ten"]}}'
        )

    def test_sorted(self, mixed):
        """Test sorting changes the output order."""
        mixed.sort_recursively()
        assert mixed.to_json() == (
            '{"main":{"bool":{"true":true},"int":{"one":1},'
            '"list":["one","two","ten"],"string":{"one":"1"}}}'
        )

    def test_force_map(self, mixed):
        """Test FORCE_MAP keeps numeric children as an object."""
        mixed.get_node('main.list').flags |= NodeFlag.FORCE_MAP
        assert to_python(mixed.get_node('main.list')) == {'2': 'two', '1': 'one', '10': 'ten'}

    def test_force_array(self):
        """Test FORCE_ARRAY lists non-numeric children."""
        root = Node.new_root()
        node = root.add_node('tags')
        node.flags |= NodeFlag.FORCE_ARRAY
        root.set_key('tags.a', 'x')
        root.set_key('tags.b', 'y')
        assert root.to_json() == '{"tags":["x","y"]}'

    def test_empty_forced_nodes(self):
        """Test forced leaves become empty containers."""
        root = Node.new_root()
        root.add_node('list').flags |= NodeFlag.FORCE_ARRAY
        root.add_node('map').flags |= NodeFlag.FORCE_MAP
        root.add_node('null')
        assert root.to_json() == '{"list":[],"map":{},"null":null}'

    def test_leaf(self):
        """Test a leaf serialises to its value."""
        assert Node('x', 'v').to_json() == '"v"'
        assert Node('x', 1.5).to_json() == '1.5'

    def test_none(self):
        """Test None serialises to an empty string."""
        assert to_json(None) == ''

    def test_time_values(self):
        """Test datetimes and timedeltas."""
        root = Node.new_root()
        root.set_key('at', datetime(2020, 1, 1, tzinfo=timezone.utc))
        root.set_key('every', timedelta(minutes=1))
        assert root.to_json() == '{"at":"2020-01-01T00:00:00+00:00","every":60.0}'

    def test_unsupported_value(self):
        """Test values JSON cannot represent raise TypeError."""
        root = Node.new_root()
        root.set_key('x', object())
        with pytest.raises(TypeError):
            root.to_json()


class TestMergeJson:
    """Tests for merge_json."""

    def test_objects_and_arrays(self):
        """Test objects become children and arrays become numbered children."""
        root = Node.new_root()
        root.merge_json('{"server":{"port":8080,"hosts":["a","b"]},"debug":true}')
        assert root.get('server.port') == 8080
        assert root.get_string_values('server.hosts.*') == ['a', 'b']
        assert root.get('server.hosts.2') == 'b'
        assert root.get('debug') is True

    def test_round_trip(self):
        """Test merging then serialising reproduces the document."""
        text = '{"a":{"b":1,"c":[1,2,{"d":"x"}]},"e":null}'
        root = Node.new_root()
        root.merge_json(text)
        assert root.to_json() == text

    def test_merge_into_existing(self):
        """Test merged values override and extend existing ones."""
        root = Node.new_root()
        root.set_key('a', 1)
        root.set_key('b', 2)
        root.merge_json(b'{"b":3,"c":4}')
        assert str(root) == '{a=1,b=3,c=4}'

    def test_invalid_json(self):
        """Test malformed documents raise ParseError."""
        with pytest.raises(ParseError, match='invalid JSON'):
            Node.new_root().merge_json('{')

    def test_not_an_object(self):
        """Test a non-object document raises ParseError."""
        with pytest.raises(ParseError, match='expected a JSON object'):
            Node.new_root().merge_json('[1, 2]')


class TestDump:
    """Tests for text dumps."""

    def test_long(self, mixed):
        """Test the long form lists one leaf per line."""
        mixed.sort_recursively()
        assert dumps(mixed) == (
            "main.bool.true=true\n"
            "main.int.one=1\n"
            "main.list.1=one\n"
            "main.list.2=two\n"
            "main.list.10=ten\n"
            "main.string.one=1\n"
        )

    def test_short(self, mixed):
        """Test the short form nests braces."""
        assert dumps(mixed, short=True) == (
            '{main={string={one=1},int={one=1},bool={true=true},list={2=two,1=one,10=ten}}}'
        )
        assert str(mixed) == dumps(mixed, short=True)

    def test_stream(self):
        """Test dumping to a stream."""
        root = Node.new_root()
        root.set_key('a.b', 'x')
        stream = io.StringIO()
        root.dump(stream)
        assert stream.getvalue() == 'a.b=x\n'

    def test_interior_node_paths(self):
        """Test the long form of an interior node uses absolute paths."""
        root = Node.new_root()
        root.set_key('a.b.c', 1)
        assert dumps(root.get_node('a.b')) == 'a.b.c=1\n'

    def test_none(self):
        """Test dumping None writes nothing."""
        assert dumps(None) == ''
        assert dumps(None, short=True) == ''
