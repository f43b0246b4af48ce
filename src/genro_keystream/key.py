# Copyright 2025 Softwell S.r.l. - SPDX-License-Identifier: Apache-2.0
"""Key module - a single named entry of a KeySet.

A Key gathers a hierarchical name, an optional value, an optional comment
and a few metadata fields consumed by the stream formatters:

- *name*: path made of segments separated by '/', optionally prefixed by a
  namespace (e.g. 'system:/sw/xorg')
- *value*: None (absent), str (string kind) or bytes (binary kind)
- *comment*: optional str
- *uid*, *gid*, *mode*: ownership/permission fields, shown as opaque text
- *owner*: user domain used when resolving the full name
- *needs_sync*: True when the key was changed since it was last stored

The formatters only read keys; nothing in genro_keystream mutates them.
"""

from __future__ import annotations

from typing import Any

from genro_toolbox import smartsplit

PATH_SEPARATOR = '/'
NAMESPACE_SEPARATOR = ':'


def split_name(name: str) -> tuple[str, list[str]]:
    """Split a key name into its root and its path segments.

    The root is the namespace with its leading separator ('user:/'), a
    single '/' for cascading names, or '' for relative names. Escaped
    separators ('\\/') do not split segments.

    Example:
        >>> split_name('user:/sw/app')
        ('user:/', ['sw', 'app'])
    """
    root = ''
    rest = name
    ns_end = name.find(NAMESPACE_SEPARATOR + PATH_SEPARATOR)
    if ns_end != -1 and PATH_SEPARATOR not in name[:ns_end]:
        root = name[:ns_end + 2]
        rest = name[ns_end + 2:]
    elif name.startswith(PATH_SEPARATOR):
        root = PATH_SEPARATOR
        rest = name[1:]
    segments = [x for x in smartsplit(rest, PATH_SEPARATOR) if x] if rest else []
    return root, segments


def join_name(root: str, segments: list[str]) -> str:
    """Inverse of split_name(): escape separators inside segments and join."""
    escaped = [s.replace(PATH_SEPARATOR, '\\' + PATH_SEPARATOR) for s in segments]
    return root + PATH_SEPARATOR.join(escaped)


class Key:
    """A named entry with optional value and comment.

    Attributes:
        name: The stored key name.
        comment: Optional comment text.
        owner: Optional user domain for full name resolution.
        uid: Optional numeric owner id.
        gid: Optional numeric group id.
        mode: Optional permission bits.
        needs_sync: True if the key is marked as needing synchronization.
    """

    __slots__ = (
        'name',
        '_value',
        'comment',
        'owner',
        'uid',
        'gid',
        'mode',
        'needs_sync',
    )

    def __init__(
        self,
        name: str,
        value: str | bytes | None = None,
        comment: str | None = None,
        owner: str | None = None,
        uid: int | None = None,
        gid: int | None = None,
        mode: int | None = None,
        needs_sync: bool = False,
    ) -> None:
        self.name = name
        self._value: str | bytes | None = None
        self.comment = comment
        self.owner = owner
        self.uid = uid
        self.gid = gid
        self.mode = mode
        self.needs_sync = needs_sync
        self.value = value

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Key):
            return False
        return self.as_tuple() == other.as_tuple()

    def __hash__(self) -> int:
        return hash(self.name)

    def __str__(self) -> str:
        return f'Key : {self.name}'

    def __repr__(self) -> str:
        return f'Key : {self.name} at {id(self)}'

    # -------------------------------------------------------------------------
    # Value
    # -------------------------------------------------------------------------

    @property
    def value(self) -> str | bytes | None:
        """The key's value: None, a str (string kind) or bytes (binary kind)."""
        return self._value

    @value.setter
    def value(self, value: Any) -> None:
        if isinstance(value, (bytearray, memoryview)):
            value = bytes(value)
        if value is not None and not isinstance(value, (str, bytes)):
            raise TypeError(f"Key value must be str, bytes or None, not {type(value).__name__}")
        self._value = value

    @property
    def is_binary(self) -> bool:
        return isinstance(self._value, bytes)

    @property
    def is_string(self) -> bool:
        return isinstance(self._value, str)

    @property
    def has_value(self) -> bool:
        return self._value is not None

    # -------------------------------------------------------------------------
    # Sizes
    #
    # Sizes are measured in UTF-8 bytes. Name, string values and comments
    # count one extra byte for the terminator of their stored form, binary
    # values are counted as they are.
    # -------------------------------------------------------------------------

    @property
    def name_size(self) -> int:
        return len(self.name.encode('utf-8')) + 1

    @property
    def value_size(self) -> int:
        if self._value is None:
            return 0
        if isinstance(self._value, bytes):
            return len(self._value)
        return len(self._value.encode('utf-8')) + 1

    @property
    def comment_size(self) -> int:
        if self.comment is None:
            return 0
        return len(self.comment.encode('utf-8')) + 1

    # -------------------------------------------------------------------------
    # Names
    # -------------------------------------------------------------------------

    def get_full_name(self) -> str:
        """Return the name qualified with the user domain.

        Keys in the 'user' namespace carrying an owner are expanded from
        'user:/sw/app' to 'user:<owner>/sw/app'. Any other name is returned
        as stored.
        """
        root = split_name(self.name)[0]
        if root == 'user:/' and self.owner:
            return f'user:{self.owner}{PATH_SEPARATOR}{self.name[len(root):]}'
        return self.name

    # -------------------------------------------------------------------------
    # Utility
    # -------------------------------------------------------------------------

    def dup(self) -> Key:
        """Return an independent copy of this key."""
        return Key(
            self.name,
            value=self._value,
            comment=self.comment,
            owner=self.owner,
            uid=self.uid,
            gid=self.gid,
            mode=self.mode,
            needs_sync=self.needs_sync,
        )

    def as_tuple(self) -> tuple[Any, ...]:
        """Return key data as a tuple (name, value, comment, owner, uid, gid, mode, needs_sync)."""
        return (
            self.name, self._value, self.comment, self.owner,
            self.uid, self.gid, self.mode, self.needs_sync,
        )

    def to_xml(self, options: int = 0) -> str:
        """Render this key as an XML <key> element.

        See key_xml.KeyXmlSerializer for the layout.
        """
        from .key_xml import KeyXmlSerializer
        return KeyXmlSerializer.serialize(self, options=options)
