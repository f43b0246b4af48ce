# Copyright 2025 Softwell S.r.l. - SPDX-License-Identifier: Apache-2.0
"""Pytest configuration and fixtures."""

import pytest

from genro_keystream import Key, KeySet


@pytest.fixture
def monitor_key():
    """String value longer than 16 bytes, with a comment."""
    return Key(
        'system:/sw/xorg/Monitor/Monitor0/Name',
        'Samsung TFT panel',
        comment='My monitor',
    )


@pytest.fixture
def sw_keyset():
    """Keys sharing the common parent user:/sw."""
    return KeySet([
        Key('user:/sw/kdbedit', 'on'),
        Key('user:/sw/phototools/path', '/usr/local/share/phototools'),
        Key('user:/sw/myapp', comment='application root'),
    ])
