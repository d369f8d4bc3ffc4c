# Copyright 2025 Softwell S.r.l. - Genropy Team
# SPDX-License-Identifier: Apache-2.0

"""Tests for TreeSelectConfig and its field accessors."""

import logging

import pytest

from genro_treeselect import SameKeyWarning, TreeSelect, TreeSelectConfig


class TestConfigDefaults:
    """Tests for default configuration values."""

    def test_defaults(self):
        """Test documented defaults."""
        config = TreeSelectConfig()
        assert config.auto_select_parents is True
        assert config.auto_select_children is True
        assert config.auto_expandable is False
        assert config.title_key == 'title'
        assert config.child_key == 'data'
        assert config.selected_key == 'isSelected'
        assert config.expanded_key == 'isExpanded'

    def test_frozen(self):
        """Test config cannot be mutated."""
        config = TreeSelectConfig()
        with pytest.raises(AttributeError):
            config.title_key = 'name'


class TestConfigAccessors:
    """Tests for title_of and children_of."""

    def test_title_of_default_key(self):
        """Test title read from title_key."""
        assert TreeSelectConfig().title_of({'title': 'Apple'}) == 'Apple'

    def test_title_of_custom_key(self):
        """Test title read from a custom key."""
        config = TreeSelectConfig(title_key='name')
        assert config.title_of({'name': 'Apple', 'title': 'x'}) == 'Apple'

    def test_title_missing_or_not_string(self):
        """Test missing or non-string titles give None."""
        config = TreeSelectConfig()
        assert config.title_of({}) is None
        assert config.title_of({'title': 42}) is None

    def test_children_of_list(self):
        """Test children read from child_key."""
        child = {'title': 'A1'}
        assert TreeSelectConfig().children_of({'data': [child]}) == [child]

    def test_children_of_tuple(self):
        """Test tuples count as sequences."""
        child = {'title': 'A1'}
        assert TreeSelectConfig().children_of({'data': (child,)}) == [child]

    @pytest.mark.parametrize('value', [None, 'abc', {'title': 'x'}, 3])
    def test_children_of_malformed(self, value):
        """Test absent or non-sequence children mean no children."""
        assert TreeSelectConfig().children_of({'data': value}) == []
        assert TreeSelectConfig().children_of({}) == []

    def test_custom_accessors(self):
        """Test caller-supplied accessor callables."""
        config = TreeSelectConfig(
            get_title=lambda r: r['label'].upper(),
            get_children=lambda r: r.get('kids'),
        )
        record = {'label': 'root', 'kids': [{'label': 'leaf'}]}
        assert config.title_of(record) == 'ROOT'
        assert config.children_of(record) == [{'label': 'leaf'}]


class TestSameKeyWarning:
    """Tests for the title_key == child_key misconfiguration."""

    def test_warns_on_same_keys(self):
        """Test a warning is emitted and construction continues."""
        with pytest.warns(SameKeyWarning, match="same field"):
            tree = TreeSelect([{'data': 'x'}], title_key='data', child_key='data')
        assert len(tree.roots) == 1

    def test_warning_is_logged(self, caplog):
        """Test the warning also goes to the log."""
        with caplog.at_level(logging.WARNING, logger='genro_treeselect.config'):
            with pytest.warns(SameKeyWarning):
                TreeSelect([], title_key='items', child_key='items')
        assert 'items' in caplog.text

    def test_no_warning_with_custom_accessors(self, recwarn):
        """Test accessors overriding both keys silence the warning."""
        TreeSelect(
            [],
            title_key='x',
            child_key='x',
            get_title=lambda r: r.get('name'),
            get_children=lambda r: r.get('items'),
        )
        assert not [w for w in recwarn if issubclass(w.category, SameKeyWarning)]

    def test_has_same_keys(self):
        """Test has_same_keys property."""
        assert TreeSelectConfig(title_key='a', child_key='a').has_same_keys
        assert not TreeSelectConfig().has_same_keys


class TestEngineOptions:
    """Tests for keyword options overriding the base config."""

    def test_options_override_config(self):
        """Test options replace fields of the given config."""
        base = TreeSelectConfig(child_key='items')
        tree = TreeSelect([], base, auto_select_children=False)
        assert tree.config.child_key == 'items'
        assert tree.config.auto_select_children is False
        assert base.auto_select_children is True

    def test_unknown_option_raises(self):
        """Test unknown option names raise TypeError."""
        with pytest.raises(TypeError):
            TreeSelect([], auto_select_everything=True)
