# Copyright 2025 Softwell S.r.l. - SPDX-License-Identifier: Apache-2.0
"""Tests for Key and KeySet - using only public API."""

import pytest

from genro_keystream import Key, KeySet
from genro_keystream.key import split_name


class TestKey:
    """Key data model."""

    def test_value_kinds(self):
        assert Key('user:/a').has_value is False
        assert Key('user:/a', 'x').is_string
        assert Key('user:/a', b'x').is_binary
        assert not Key('user:/a', b'x').is_string

    def test_bytearray_becomes_bytes(self):
        assert Key('user:/a', bytearray(b'ab')).value == b'ab'

    def test_invalid_value(self):
        with pytest.raises(TypeError):
            Key('user:/a', 42)

    def test_sizes(self):
        key = Key('user:/a', 'abc', comment='c')
        assert key.name_size == 8
        assert key.value_size == 4
        assert key.comment_size == 2
        assert Key('user:/a', b'abc').value_size == 3
        assert Key('user:/a').value_size == 0

    def test_full_name(self):
        assert Key('user:/sw/a', owner='hugo').get_full_name() == 'user:hugo/sw/a'
        assert Key('user:/sw/a').get_full_name() == 'user:/sw/a'

    def test_dup_is_equal_and_independent(self):
        key = Key('user:/a', 'x', comment='c', uid=1)
        copy = key.dup()
        assert copy == key
        copy.value = 'y'
        assert key.value == 'x'

    def test_split_name(self):
        assert split_name('user:/sw/app') == ('user:/', ['sw', 'app'])
        assert split_name('/sw/app') == ('/', ['sw', 'app'])
        assert split_name('sw/app') == ('', ['sw', 'app'])
        assert split_name('system:/') == ('system:/', [])


class TestKeySet:
    """KeySet container."""

    def test_append_keeps_order(self):
        ks = KeySet([Key('user:/b'), Key('user:/a')])
        assert ks.names() == ['user:/b', 'user:/a']

    def test_append_replaces_same_name(self):
        ks = KeySet([Key('user:/a', '1'), Key('user:/b')])
        ks.append(Key('user:/a', '2'))
        assert len(ks) == 2
        assert ks[0].value == '2'
        assert ks['user:/a'].value == '2'

    def test_append_rejects_other_types(self):
        with pytest.raises(TypeError):
            KeySet().append('user:/a')

    def test_lookup_and_pop(self):
        ks = KeySet([Key('user:/a'), Key('user:/b')])
        assert ks.lookup('user:/b') is ks.at(1)
        assert ks.at(5) is None
        assert ks.pop('user:/a').name == 'user:/a'
        assert ks.names() == ['user:/b']
        assert ks.pop('user:/a') is None
        assert 'user:/b' in ks

    def test_dup_is_shallow(self):
        key = Key('user:/a')
        ks = KeySet([key])
        copy = ks.dup()
        assert copy[0] is key
        copy.append(Key('user:/b'))
        assert len(ks) == 1

    def test_snapshot_released(self):
        ks = KeySet([Key('user:/a')])
        with ks.snapshot() as cks:
            ks.append(Key('user:/b'))
            assert len(cks) == 1
        assert len(cks) == 0
        assert len(ks) == 2


class TestCommonParentName:
    """Common parent computation."""

    def test_empty(self):
        assert KeySet().common_parent_name() == ''

    def test_shared_segments(self):
        ks = KeySet([Key('system:/sw/xorg/a'), Key('system:/sw/xorg/b/c'), Key('system:/sw/xorg/d')])
        assert ks.common_parent_name() == 'system:/sw/xorg'

    def test_segment_boundary(self):
        """Only whole segments are shared."""
        ks = KeySet([Key('user:/sw/app'), Key('user:/sw/apple')])
        assert ks.common_parent_name() == 'user:/sw'

    def test_parent_in_keyset(self):
        ks = KeySet([Key('user:/sw'), Key('user:/sw/a')])
        assert ks.common_parent_name() == 'user:/sw'

    def test_single_key(self):
        assert KeySet([Key('user:/sw/a')]).common_parent_name() == 'user:/sw/a'

    def test_namespace_only(self):
        assert KeySet([Key('user:/a'), Key('user:/b')]).common_parent_name() == 'user:/'

    def test_different_namespaces(self):
        assert KeySet([Key('user:/a'), Key('system:/a')]).common_parent_name() == ''

    def test_relative_names_without_common_segment(self):
        assert KeySet([Key('a/x'), Key('b/x')]).common_parent_name() == ''
