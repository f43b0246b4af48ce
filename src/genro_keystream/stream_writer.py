# Copyright 2025 Softwell S.r.l. - SPDX-License-Identifier: Apache-2.0
"""Sink wrapper and exceptions shared by the stream formatters.

A sink is any object with a write() method. Text sinks receive str, binary
sinks (io.RawIOBase / io.BufferedIOBase subclasses) receive UTF-8 bytes.
StreamWriter forwards each fragment as soon as it is produced and keeps a
running count of what was written: characters for text sinks, bytes for
binary sinks.
"""

from __future__ import annotations

import io
from typing import Any


class KeyStreamError(Exception):
    """Base exception for genro_keystream formatters."""
    pass


class AllocationError(KeyStreamError):
    """Preparing the text of a name, value or comment failed."""
    pass


class StreamWriteError(KeyStreamError):
    """The sink rejected a write. The output is left truncated."""
    pass


class StreamWriter:
    """Write str fragments to a text or binary sink and count them.

    Example:
        >>> out = io.StringIO()
        >>> writer = StreamWriter(out)
        >>> writer.write('<keyset>')
        8
        >>> writer.written
        8
    """

    __slots__ = ('sink', 'binary', 'encoding', 'written')

    def __init__(self, sink: Any, encoding: str = 'utf-8'):
        self.sink = sink
        self.binary = isinstance(sink, (io.RawIOBase, io.BufferedIOBase))
        self.encoding = encoding
        self.written = 0

    @classmethod
    def wrap(cls, sink: Any) -> StreamWriter:
        """Return sink itself if it is already a StreamWriter, else wrap it."""
        if isinstance(sink, StreamWriter):
            return sink
        return cls(sink)

    def write(self, text: str) -> int:
        """Write a fragment and return its size in sink units."""
        if not text:
            return 0
        data: str | bytes = text.encode(self.encoding) if self.binary else text
        try:
            self.sink.write(data)
        except (OSError, ValueError) as e:
            raise StreamWriteError(f"Cannot write to {self.sink!r}: {e}") from e
        size = len(data)
        self.written += size
        return size
