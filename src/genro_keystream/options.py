# Copyright 2025 Softwell S.r.l. - SPDX-License-Identifier: Apache-2.0
"""Format options shared by the XML and debug formatters.

Options are independent bit flags, combined with '|':

    >>> opts = StreamOption.HIER | StreamOption.CONDENSED
    >>> StreamOption.CONDENSED in opts
    True

XML formatters:
    NUMBERS     - print numeric uid/gid instead of user and group names
    CONDENSED   - no cosmetic newlines or indentation inside <key> elements
    FULLNAME    - use Key.get_full_name() instead of the stored name
    HIER        - <keyset parent="..."> with basename-relative <key> entries
    HEADER      - XML prolog, count comment and schema attributes
    XMLHEADERS  - suppress the prolog and schema even if HEADER is set

Debug formatters:
    HEADER      - leading 'Output keyset of size N' line
    SHOWINDICES - '[i] ' prefix on each line
    SHOWFLAGS   - 'Flags: ' followed by b/s/s codes
    SHOWMETA    - extra ' : ' separator token
    KEY_VALUE   - print the value
    KEY_META    - print the comment
"""

from __future__ import annotations

import enum


class StreamOption(enum.IntFlag):
    """Bit set of formatting options, selected per call."""

    NONE = 0
    NUMBERS = 1 << 0
    CONDENSED = 1 << 1
    FULLNAME = 1 << 2
    HIER = 1 << 3
    HEADER = 1 << 4
    XMLHEADERS = 1 << 5
    SHOWINDICES = 1 << 6
    SHOWFLAGS = 1 << 7
    SHOWMETA = 1 << 8
    KEY_VALUE = 1 << 9
    KEY_META = 1 << 10


def as_options(options: StreamOption | int | None) -> StreamOption:
    """Coerce an int (or None) to StreamOption."""
    if options is None:
        return StreamOption.NONE
    return StreamOption(options)


def xml_header_enabled(options: StreamOption) -> bool:
    """True if the XML prolog and schema attributes must be written."""
    return bool(options & StreamOption.HEADER) and not options & StreamOption.XMLHEADERS
