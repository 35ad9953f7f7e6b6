# Copyright 2025 Softwell S.r.l. - Genropy Team
# SPDX-License-Identifier: Apache-2.0

"""Tests for settings evaluation."""

import pytest

from genro_scopetree import Node, Reply
from genro_scopetree.settings import get_settings


@pytest.fixture
def zip_label():
    """A settings group choosing the label of a zip code field."""
    root = Node.new_root()
    root.set_key('settings.1.default', 'label:Zip code')
    root.set_key('settings.1.continue', '1')
    root.set_key('settings.2.keys.1', 'category')
    root.set_key('settings.2.keys.2', 'type')
    root.set_key('settings.2.3041.s.value', 'suffix:(of house)')
    root.set_key('settings.2.3042.u.value', 'suffix:(of apartment)')
    root.set_key('settings.3.keys.1', '?pickup_location')
    root.set_key('settings.3.true.value', 'suffix:(of pick-up location)')
    root.sort_recursively()
    return root


@pytest.fixture
def classifieds():
    """Settings groups for categories and types of classified ads."""
    root = Node.new_root()
    root.set_key('settings.types.1.keys.1', 'category')
    root.set_key('settings.types.1.1001.value', 'sell,rent,buy')
    root.set_key('settings.types.1.1002.value', 'sell,rent,buy,donation')
    root.set_key('settings.types.1.1003.value', 'rent,buy')
    root.set_key('settings.types.2.default', 'sell')

    root.set_key('settings.params.1.keys.1', 'category')
    root.set_key('settings.params.1.keys.2', 'type')
    root.set_key('settings.params.1.1001.sell.value', 'price')
    root.set_key('settings.params.1.1002.*.value', 'price,mileage')
    root.set_key('settings.params.1.continue', '1')
    root.set_key('settings.params.2.default', 'color')

    root.set_key('settings.images.1.keys.1', '?category')
    root.set_key('settings.images.1.false.value', 'max:0')
    root.set_key('settings.images.2.keys.1', '?type')
    root.set_key('settings.images.2.false.value', 'max:0')
    root.set_key('settings.images.3.keys.1', 'type')
    root.set_key('settings.images.3.buy.value', 'max:0')
    root.set_key('settings.images.4.keys.1', 'category')
    root.set_key('settings.images.4.1001.value', 'max:12,extra:4,extra_price:5')
    root.set_key('settings.images.4.1002.value', 'max:12')
    root.set_key('settings.images.4.1003.value', r'max:0,comment:Easy as 1\,2\,3')
    root.set_key('settings.images.5.default', 'max:8')
    root.sort_recursively()
    return root


class TestDefaultAndContinue:
    """Tests for default cases and the continue flag."""

    def test_default_then_keyed_match(self, zip_label):
        """Test a continuing default accumulates with a later keyed match."""
        scope = zip_label.new_scope(category=3041, type='s')
        assert scope.get_settings('settings') == {
            'label': ['Zip code'],
            'suffix': ['(of house)'],
        }

    def test_default_only(self, zip_label):
        """Test no keyed match leaves only the default."""
        scope = zip_label.new_scope(category=9999)
        assert scope.get_settings('settings') == {'label': ['Zip code']}

    def test_presence_probe(self, zip_label):
        """Test a '?key' probe matches on presence of the key."""
        scope = zip_label.new_scope(pickup_location='Lisbon')
        assert scope.get_settings('settings') == {
            'label': ['Zip code'],
            'suffix': ['(of pick-up location)'],
        }

    def test_returns_reply(self, zip_label):
        """Test the result is a Reply."""
        reply = zip_label.get_settings('settings')
        assert isinstance(reply, Reply)
        assert reply.first('label') == 'Zip code'


class TestClassifieds:
    """Tests for multi-key cases, '*' fallbacks and named values."""

    @pytest.mark.parametrize('context, expected', [
        ({}, {'value': ['sell']}),
        ({'category': 1001}, {'value': ['sell', 'rent', 'buy']}),
        ({'category': 1002}, {'value': ['sell', 'rent', 'buy', 'donation']}),
        ({'category': 1003}, {'value': ['rent', 'buy']}),
        ({'category': 1099}, {'value': ['sell']}),
    ])
    def test_one_key(self, classifieds, context, expected):
        """Test single-key cases with a default fallback."""
        assert classifieds.new_scope(context).get_settings('settings', 'types') == expected

    @pytest.mark.parametrize('context, expected', [
        ({}, {'value': ['color']}),
        ({'category': 1001}, {'value': ['color']}),
        ({'category': '1001'}, {'value': ['color']}),
        ({'type': 'sell'}, {'value': ['color']}),
        ({'category': 1001, 'type': 'sell'}, {'value': ['price', 'color']}),
        ({'category': 1002, 'type': 'sell'}, {'value': ['price', 'mileage', 'color']}),
        ({'category': 1002, 'type': 'whatever'}, {'value': ['price', 'mileage', 'color']}),
    ])
    def test_two_keys_star_and_continue(self, classifieds, context, expected):
        """Test two-key cases, '*' catch-alls and continue."""
        assert classifieds.new_scope(context).get_settings('settings', 'params') == expected

    @pytest.mark.parametrize('context, expected', [
        ({}, {'max': ['0']}),
        ({'category': 1001}, {'max': ['0']}),
        ({'type': 'sell'}, {'max': ['0']}),
        ({'category': 1099, 'type': 'whatever'}, {'max': ['8']}),
        ({'category': 1001, 'type': 'whatever'},
         {'max': ['12'], 'extra': ['4'], 'extra_price': ['5']}),
        ({'category': 1003, 'type': 'whatever'},
         {'max': ['0'], 'comment': ['Easy as 1,2,3']}),
    ])
    def test_presence_named_values_escaping(self, classifieds, context, expected):
        """Test '?key' probes, 'name:value' payloads and escaped commas."""
        assert classifieds.new_scope(context).get_settings('settings', 'images') == expected


class TestSettingsEdgeCases:
    """Tests for prefixes, empty inputs and unusual cases."""

    def test_wildcard_prefixes_keys(self):
        """Test a trailing '*' prefixes each sub-key with the group key."""
        root = Node.new_root()
        root.set_key('settings.a.1.default', 'x')
        root.set_key('settings.b.1.default', 'max:3,y')
        assert root.get_settings('settings.*') == {
            'a': ['x'],
            'b_max': ['3'],
            'b': ['y'],
        }

    def test_empty_keys_list(self):
        """Test an empty keys list resolves a literal 'value' child."""
        root = Node.new_root()
        root.add_node('settings.g.1.keys')
        root.set_key('settings.g.1.value', 'v')
        assert root.get_settings('settings.g') == {'value': ['v']}

    def test_case_without_mechanism_falls_through(self):
        """Test a case with neither 'default' nor 'keys' never matches."""
        root = Node.new_root()
        root.set_key('settings.g.1.other', 'ignored')
        root.set_key('settings.g.2.default', 'd')
        assert root.get_settings('settings.g') == {'value': ['d']}

    def test_escaped_colon(self):
        """Test an escaped colon does not split the sub-key."""
        root = Node.new_root()
        root.set_key('settings.g.1.default', r'time\:zone')
        assert root.get_settings('settings.g') == {'value': ['time:zone']}

    def test_no_groups(self):
        """Test a spec matching nothing gives an empty reply."""
        root = Node.new_root()
        assert root.get_settings('missing') == {}

    def test_empty_spec(self):
        """Test no keys gives an empty reply."""
        root = Node.new_root()
        root.set_key('settings.g.1.default', 'd')
        assert root.get_settings() == {}

    def test_none_node(self):
        """Test evaluating against None gives an empty reply."""
        assert get_settings(None, ['settings']) == {}

    def test_context_from_interior_scope(self):
        """Test context keys set on an interior node are found by path."""
        root = Node.new_root()
        root.set_key('form.settings.1.keys.1', 'form.kind')
        root.set_key('form.settings.1.big.value', 'rows:10')
        root.set_key('form.settings.2.default', 'rows:3')

        scope = root.get_node('form').new_scope(kind='big')
        assert scope.get_settings('form.settings') == {'rows': ['10']}
        assert root.get_settings('form.settings') == {'rows': ['3']}
