# Copyright 2025 Softwell S.r.l. - SPDX-License-Identifier: Apache-2.0
"""XML stream serialization of Keys and KeySets.

This module writes keys as a stable XML exchange format, directly into a
caller supplied sink (file, sys.stdout, io.StringIO, io.BytesIO...).

Classes:
    KeyXmlSerializer - one <key> element, optionally relative to a parent name
    KeySetXmlSerializer - a <keyset> document, flat or hierarchical

A key is rendered as:

    <key name="system:/sw/xorg/Monitor/Monitor0/Name">

         <value><![CDATA[Samsung TFT panel]]></value>
         <comment><![CDATA[My monitor]]></comment>
    </key>

and, relative to the parent 'system:/sw/xorg':

    <key basename="Monitor/Monitor0/Name">
    ...

Values of at most 16 bytes without newlines become a value="..." attribute.
Attribute text is written as is and CDATA content is not escaped: a value
containing ']]>' produces an invalid document.
"""

from __future__ import annotations

import base64
import grp
import io
import logging
import pwd
from typing import TYPE_CHECKING, Any

from .key import PATH_SEPARATOR
from .options import StreamOption, as_options, xml_header_enabled
from .stream_writer import AllocationError, StreamWriter

if TYPE_CHECKING:
    from .key import Key
    from .keyset import KeySet

logger = logging.getLogger(__name__)

# Longest string value rendered as attribute: the size of an IPv4 address.
VALUE_ATTRIBUTE_MAX_SIZE = 16

XML_NAMESPACE = 'https://www.libelektra.org'
XML_SCHEMA_INSTANCE = 'http://www.w3.org/2001/XMLSchema-instance'
XML_SCHEMA_LOCATION = f'{XML_NAMESPACE} elektra.xsd'


def _user_name(uid: int) -> str:
    try:
        return pwd.getpwuid(uid).pw_name
    except KeyError:
        return str(uid)


def _group_name(gid: int) -> str:
    try:
        return grp.getgrgid(gid).gr_name
    except KeyError:
        return str(gid)


class KeyXmlSerializer:
    """Serialize a single Key as a <key> element.

    Example:
        >>> from genro_keystream import Key, StreamOption
        >>> key = Key('user:/sw/ip', '10.0.0.1')
        >>> KeyXmlSerializer.serialize(key, options=StreamOption.CONDENSED)
        '<key name="user:/sw/ip" value="10.0.0.1"/>'
    """

    def __init__(
        self,
        key: Key,
        parent: str | None = None,
        parent_size: int = 0,
        options: StreamOption | int = StreamOption.NONE,
    ):
        """Initialize the serializer.

        Args:
            key: The Key to serialize.
            parent: Name to strip from the key name. If the key name starts
                with it, the element gets a basename attribute instead of name.
            parent_size: Number of UTF-8 bytes of parent to compare. If 0,
                the entire parent is used.
            options: StreamOption flags (NUMBERS, CONDENSED, FULLNAME).
        """
        self.key = key
        self.parent = parent
        self.parent_size = parent_size
        self.options = as_options(options)
        self.condensed = bool(self.options & StreamOption.CONDENSED)

    @classmethod
    def serialize(
        cls,
        key: Key,
        stream: Any = None,
        parent: str | None = None,
        parent_size: int = 0,
        options: StreamOption | int = StreamOption.NONE,
    ) -> str | int:
        """Serialize a key.

        Args:
            key: The Key to serialize.
            stream: Sink to write to. If None, the XML text is returned.
            parent: Optional parent name for basename output.
            parent_size: Significant size of parent (0 = all of it).
            options: StreamOption flags.

        Returns:
            The XML text if stream is None, else the amount written.

        Raises:
            AllocationError: The full name of the key could not be resolved.
            StreamWriteError: The sink rejected a write.
        """
        instance = cls(key, parent=parent, parent_size=parent_size, options=options)
        if stream is None:
            out = io.StringIO()
            instance.write_to(out)
            return out.getvalue()
        return instance.write_to(stream)

    def write_to(self, stream: Any) -> int:
        """Write the <key> element to stream and return the amount written."""
        writer = StreamWriter.wrap(stream)
        start = writer.written
        self._write_key(writer)
        return writer.written - start

    # -------------------------------------------------------------------------
    # Element parts
    # -------------------------------------------------------------------------

    def _basename(self) -> str | None:
        """Return the name relative to parent, or None if it does not apply.

        parent_size and the comparison count UTF-8 bytes.
        """
        if self.parent is None:
            return None
        name = self.key.name.encode('utf-8')
        parent = self.parent.encode('utf-8')
        separator = PATH_SEPARATOR.encode('utf-8')
        skip = self.parent_size or len(parent)
        if name[:skip] != parent[:skip]:
            return None
        while name[skip:skip + 1] == separator:
            skip += 1
        if skip >= len(name):
            logger.debug("Key %s equals its parent, writing full name", self.key.name)
            return None
        return name[skip:].decode('utf-8', errors='replace')

    def _name(self) -> str:
        if not self.options & StreamOption.FULLNAME:
            return self.key.name
        try:
            return self.key.get_full_name()
        except MemoryError as e:
            raise AllocationError(f"Cannot resolve full name of {self.key.name}") from e

    def _ownership(self) -> str:
        """Return uid/gid/mode attributes text, '' if the key has none."""
        key = self.key
        numbers = bool(self.options & StreamOption.NUMBERS)
        attrs = []
        if key.uid is not None:
            attrs.append(f'uid="{key.uid if numbers else _user_name(key.uid)}"')
        if key.gid is not None:
            attrs.append(f'gid="{key.gid if numbers else _group_name(key.gid)}"')
        if key.mode is not None:
            attrs.append(f'mode="{key.mode:04o}"')
        if not attrs:
            return ''
        return (' ' if self.condensed else '\n\t') + ' '.join(attrs)

    def _write_key(self, w: StreamWriter) -> None:
        key = self.key
        nl = '' if self.condensed else '\n'

        basename = self._basename()
        if basename is not None:
            w.write(f'<key basename="{basename}"')
        else:
            w.write(f'<key name="{self._name()}"')
        w.write(self._ownership())

        value = key.value
        comment = key.comment

        if value is None and comment is None:
            w.write('/>' + nl * 2)
            return

        if value is not None:
            if self._value_as_attribute(value):
                w.write(' ' if self.condensed else '\n\t')
                w.write(f'value="{value}"')
                if comment is None:
                    w.write('/>' + nl)
                    return
                # written in condensed mode as well
                w.write('>\n')
            else:
                w.write('>')
                if not self.condensed:
                    w.write('\n\n     ')
                w.write('<value>')
                if isinstance(value, str):
                    w.write(f'<![CDATA[{value}]]>')
                else:
                    w.write(base64.b64encode(value).decode('ascii'))
                w.write('</value>')
        else:
            w.write('>' + nl)

        if not self.condensed:
            w.write('\n')
            if comment is not None:
                w.write('     ')

        if comment is not None:
            w.write(f'<comment><![CDATA[{comment}]]></comment>' + nl)

        w.write('</key>' + nl * 2)

    @staticmethod
    def _value_as_attribute(value: str | bytes) -> bool:
        return (
            isinstance(value, str)
            and '\n' not in value
            and len(value.encode('utf-8')) <= VALUE_ATTRIBUTE_MAX_SIZE
        )


class KeySetXmlSerializer:
    """Serialize a KeySet as a <keyset> document.

    Flat layout:

        <keyset>
        <key name=...>...</key>
        <key name=...>...</key>
        </keyset>

    With StreamOption.HIER the common parent name of the keys becomes the
    parent attribute and each key is written relative to it:

        <keyset        parent="user:/sw">
        <key basename="kdbedit" .../>
        <key basename="phototools" .../>
        </keyset>

    With StreamOption.HEADER (and without XMLHEADERS) the document starts with
    the XML prolog, a comment with the number of keys, and the <keyset>
    element carries the schema attributes.
    """

    def __init__(self, keyset: KeySet, options: StreamOption | int = StreamOption.NONE):
        self.keyset = keyset
        self.options = as_options(options)
        self.condensed = bool(self.options & StreamOption.CONDENSED)

    @classmethod
    def serialize(
        cls,
        keyset: KeySet,
        stream: Any = None,
        options: StreamOption | int = StreamOption.NONE,
    ) -> str | int:
        """Serialize a keyset.

        Args:
            keyset: The KeySet to serialize.
            stream: Sink to write to. If None, the XML text is returned.
            options: StreamOption flags (NUMBERS, CONDENSED, FULLNAME, HIER,
                HEADER, XMLHEADERS).

        Returns:
            The XML text if stream is None, else the amount written.
        """
        instance = cls(keyset, options=options)
        if stream is None:
            out = io.StringIO()
            instance.write_to(out)
            return out.getvalue()
        return instance.write_to(stream)

    def write_to(self, stream: Any) -> int:
        """Write the document to stream and return the amount written."""
        writer = StreamWriter.wrap(stream)
        start = writer.written
        with self.keyset.snapshot() as cks:
            self._write_keyset(writer, cks)
        return writer.written - start

    def _write_keyset(self, w: StreamWriter, cks: KeySet) -> None:
        if xml_header_enabled(self.options):
            w.write('<?xml version="1.0" encoding="UTF-8"?>')
            if self.condensed:
                w.write(
                    f'<keyset xmlns="{XML_NAMESPACE}"'
                    f' xmlns:xsi="{XML_SCHEMA_INSTANCE}"'
                    f' xsi:schemaLocation="{XML_SCHEMA_LOCATION}"'
                )
            else:
                w.write(f'\n<!-- Generated by genro-keystream. Total of {len(cks)} keys. -->\n')
                w.write(
                    f'<keyset xmlns="{XML_NAMESPACE}"\n'
                    f'\txmlns:xsi="{XML_SCHEMA_INSTANCE}"\n'
                    f'\txsi:schemaLocation="{XML_SCHEMA_LOCATION}"\n'
                )
        else:
            w.write('<keyset')

        parent = cks.common_parent_name() if self.options & StreamOption.HIER else ''
        logger.debug(
            "Writing keyset of %d keys, %s layout, parent=%r",
            len(cks), 'hierarchical' if parent else 'flat', parent,
        )
        if parent:
            w.write(f'        parent="{parent}">\n')
        else:
            w.write('>\n')

        for key in cks:
            KeyXmlSerializer(key, parent=parent or None, options=self.options).write_to(w)

        w.write('</keyset>\n')


def key_to_stream(key: Key, stream: Any, options: StreamOption | int = StreamOption.NONE) -> int:
    """Write the XML element of key to stream, return the amount written."""
    return KeyXmlSerializer(key, options=options).write_to(stream)


def key_to_stream_basename(
    key: Key,
    stream: Any,
    parent: str | None,
    parent_size: int = 0,
    options: StreamOption | int = StreamOption.NONE,
) -> int:
    """Same as key_to_stream(), stripping parent from the key name when it matches."""
    return KeyXmlSerializer(key, parent=parent, parent_size=parent_size, options=options).write_to(stream)


def keyset_to_stream(keyset: KeySet, stream: Any, options: StreamOption | int = StreamOption.NONE) -> int:
    """Write keyset as an XML document to stream, return the amount written."""
    return KeySetXmlSerializer(keyset, options=options).write_to(stream)
