# Copyright 2025 Softwell S.r.l. - SPDX-License-Identifier: Apache-2.0
"""Human-readable, line per key output for debugging.

The format is meant for human eyes only and may change: do not parse it.

    Name[16]: user:/sw/app/ip : String[9]: 10.0.0.1 :  Flags: s
"""

from __future__ import annotations

import io
import logging
from typing import TYPE_CHECKING, Any

from .options import StreamOption, as_options
from .stream_writer import AllocationError, StreamWriter

if TYPE_CHECKING:
    from .key import Key
    from .keyset import KeySet

logger = logging.getLogger(__name__)


def _binary_text(data: bytes) -> str:
    """Payload shown as text, up to the first zero byte."""
    return data.split(b'\0', 1)[0].decode('utf-8', errors='replace')


class KeyOutput:
    """Write one debug line for a Key."""

    def __init__(self, key: Key, options: StreamOption | int = StreamOption.NONE):
        self.key = key
        self.options = as_options(options)

    @classmethod
    def serialize(cls, key: Key, stream: Any = None, options: StreamOption | int = StreamOption.NONE) -> str | int:
        """Return the debug line if stream is None, else write it and return the amount written."""
        instance = cls(key, options=options)
        if stream is None:
            out = io.StringIO()
            instance.write_to(out)
            return out.getvalue()
        return instance.write_to(stream)

    def write_to(self, stream: Any) -> int:
        writer = StreamWriter.wrap(stream)
        start = writer.written
        self._write_line(writer)
        return writer.written - start

    def _text(self, field: str) -> str:
        """Fetch the text of a key field, wrapping allocation failures."""
        key = self.key
        try:
            if field == 'name':
                return str(key.name)
            if field == 'comment':
                return str(key.comment)
            value = key.value
            return _binary_text(value) if isinstance(value, bytes) else str(value)
        except MemoryError as e:
            raise AllocationError(f"Cannot prepare {field} of {key.name}") from e

    def _write_line(self, w: StreamWriter) -> None:
        key = self.key
        options = self.options

        size = key.name_size
        if size > 1:
            w.write(f'Name[{size}]: {self._text("name")} : ')

        size = key.value_size
        if options & StreamOption.KEY_VALUE and size > 1:
            kind = 'Binary' if key.is_binary else 'String'
            w.write(f'{kind}[{size}]: {self._text("value")} : ')

        size = key.comment_size
        if options & StreamOption.KEY_META and size > 1:
            w.write(f'Comment[{size}]: {self._text("comment")} : ')

        if options & StreamOption.SHOWMETA:
            w.write(' : ')

        if options & StreamOption.SHOWFLAGS:
            if not options & StreamOption.SHOWMETA:
                w.write(' ')
            # codes are not de-duplicated: a string key needing sync shows 'ss'
            flags = ''
            if key.is_binary:
                flags += 'b'
            if key.is_string:
                flags += 's'
            if key.needs_sync:
                flags += 's'
            w.write('Flags: ' + flags)

        w.write('\n')


class KeySetOutput:
    """Write the debug lines of every key of a KeySet.

    With StreamOption.HEADER the first line reports the number of keys, with
    StreamOption.SHOWINDICES each line starts with '[i] '.
    """

    def __init__(self, keyset: KeySet, options: StreamOption | int = StreamOption.NONE):
        self.keyset = keyset
        self.options = as_options(options)

    @classmethod
    def serialize(cls, keyset: KeySet, stream: Any = None,
                  options: StreamOption | int = StreamOption.NONE) -> str | int:
        instance = cls(keyset, options=options)
        if stream is None:
            out = io.StringIO()
            instance.write_to(out)
            return out.getvalue()
        return instance.write_to(stream)

    def write_to(self, stream: Any) -> int:
        writer = StreamWriter.wrap(stream)
        start = writer.written
        with self.keyset.snapshot() as cks:
            logger.debug("Output of keyset with %d keys", len(cks))
            if self.options & StreamOption.HEADER:
                writer.write(f'Output keyset of size {len(cks)}\n')
            for index, key in enumerate(cks):
                if self.options & StreamOption.SHOWINDICES:
                    writer.write(f'[{index}] ')
                KeyOutput(key, options=self.options).write_to(writer)
        return writer.written - start


def key_output(key: Key, stream: Any, options: StreamOption | int = StreamOption.NONE) -> int:
    """Write the debug line of key to stream."""
    return KeyOutput(key, options=options).write_to(stream)


def keyset_output(keyset: KeySet, stream: Any, options: StreamOption | int = StreamOption.NONE) -> int:
    """Write the debug lines of keyset to stream."""
    return KeySetOutput(keyset, options=options).write_to(stream)
