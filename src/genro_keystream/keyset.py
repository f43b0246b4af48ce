# Copyright 2025 Softwell S.r.l. - SPDX-License-Identifier: Apache-2.0
"""KeySet: ordered collection of Keys with unique names.

KeySet combines dict-like access by name with list-like ordering. Keys are
kept in the order the caller appended them: the stream formatters iterate
in this order and never sort.

Internal structure:
    _dict: maps name -> Key (for O(1) lookup by name)
    _list: contains Keys in order (for O(1) access by cursor)
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from contextlib import contextmanager
from typing import TYPE_CHECKING

from .key import Key, join_name, split_name

if TYPE_CHECKING:
    from .options import StreamOption


class KeySet:
    """Ordered container of Keys, no duplicate names.

    Appending a key whose name is already present replaces the stored key
    in place, keeping its position.

    Example:
        >>> ks = KeySet([Key('user:/sw/a', 'x'), Key('user:/sw/b')])
        >>> len(ks)
        2
        >>> ks.common_parent_name()
        'user:/sw'
    """

    def __init__(self, keys: Iterable[Key] | None = None):
        self._dict: dict[str, Key] = {}
        self._list: list[Key] = []
        if keys:
            for key in keys:
                self.append(key)

    def append(self, key: Key) -> int:
        """Append a key, replacing a stored key with the same name.

        Returns:
            The new size of the keyset.
        """
        if not isinstance(key, Key):
            raise TypeError(f"KeySet accepts Key objects, not {type(key).__name__}")
        if key.name in self._dict:
            idx = self.index(key.name)
            self._list[idx] = key
        else:
            self._list.append(key)
        self._dict[key.name] = key
        return len(self._list)

    def index(self, name: str) -> int:
        """Return the cursor of a key name, or -1 if not found."""
        if name not in self._dict:
            return -1
        return next((i for i, key in enumerate(self._list) if key.name == name), -1)

    def lookup(self, name: str) -> Key | None:
        return self._dict.get(name)

    def at(self, cursor: int) -> Key | None:
        """Get key at cursor, None when out of range."""
        return self._list[cursor] if 0 <= cursor < len(self._list) else None

    def pop(self, name: str) -> Key | None:
        """Remove and return the key with this name, or None."""
        key = self._dict.pop(name, None)
        if key is not None:
            self._list.remove(key)
        return key

    def clear(self) -> None:
        """Remove all keys."""
        self._dict.clear()
        self._list.clear()

    def names(self) -> list[str]:
        return [key.name for key in self._list]

    def __getitem__(self, item: str | int) -> Key | None:
        if isinstance(item, int):
            return self.at(item)
        return self._dict.get(item)

    def __contains__(self, name: str) -> bool:
        return name in self._dict

    def __len__(self) -> int:
        return len(self._list)

    def __iter__(self) -> Iterator[Key]:
        return iter(self._list)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, KeySet):
            return False
        return self._list == other._list

    def __repr__(self) -> str:
        return f'KeySet : {len(self._list)} keys at {id(self)}'

    # -------------------------------------------------------------------------
    # Snapshots
    # -------------------------------------------------------------------------

    def dup(self) -> KeySet:
        """Return a shallow copy: a new ordered sequence of the same Key objects."""
        result = KeySet()
        result._dict = dict(self._dict)
        result._list = list(self._list)
        return result

    @contextmanager
    def snapshot(self) -> Iterator[KeySet]:
        """Borrow a stable view of this keyset for the duration of a block.

        The yielded keyset is a dup(): appending to or removing from the
        original while the block runs does not change the size or order
        seen through the snapshot. The snapshot is released on exit.

        Example:
            >>> with ks.snapshot() as cks:
            ...     for key in cks:
            ...         ...
        """
        cks = self.dup()
        try:
            yield cks
        finally:
            cks.clear()

    # -------------------------------------------------------------------------
    # Hierarchy
    # -------------------------------------------------------------------------

    def common_parent_name(self) -> str:
        """Return the longest path shared by every key name.

        The result is the name made of the namespace root and the leading
        segments common to all keys; it may be equal to a key name (for
        instance when the keyset holds a single key). Returns '' when the
        keyset is empty or the keys share neither a root nor a segment.

        Example:
            >>> KeySet([Key('system:/sw/a/x'), Key('system:/sw/b')]).common_parent_name()
            'system:/sw'
            >>> KeySet([Key('user:/sw'), Key('system:/sw')]).common_parent_name()
            ''
        """
        if not self._list:
            return ''
        root, common = split_name(self._list[0].name)
        for key in self._list[1:]:
            key_root, segments = split_name(key.name)
            if key_root != root:
                return ''
            size = 0
            for mine, theirs in zip(common, segments):
                if mine != theirs:
                    break
                size += 1
            common = common[:size]
        if not common and not root:
            return ''
        return join_name(root, common)

    # -------------------------------------------------------------------------
    # Output
    # -------------------------------------------------------------------------

    def to_xml(self, options: StreamOption | int = 0) -> str:
        """Render this keyset as an XML document (see key_xml.KeySetXmlSerializer)."""
        from .key_xml import KeySetXmlSerializer
        return KeySetXmlSerializer.serialize(self, options=options)

    def output(self, options: StreamOption | int = 0) -> str:
        """Render the human-readable debug dump (see key_output.KeySetOutput)."""
        from .key_output import KeySetOutput
        return KeySetOutput.serialize(self, options=options)
