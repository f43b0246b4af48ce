# Copyright 2025 Softwell S.r.l. - SPDX-License-Identifier: Apache-2.0
"""genro-keystream: XML and debug text serialization of hierarchical keys."""

from .key import Key
from .key_output import KeyOutput, KeySetOutput, key_output, keyset_output
from .key_xml import (
    KeySetXmlSerializer,
    KeyXmlSerializer,
    key_to_stream,
    key_to_stream_basename,
    keyset_to_stream,
)
from .keyset import KeySet
from .options import StreamOption
from .stream_writer import AllocationError, KeyStreamError, StreamWriteError, StreamWriter

__version__ = '0.1.0'

__all__ = [
    'AllocationError',
    'Key',
    'KeyOutput',
    'KeySet',
    'KeySetOutput',
    'KeySetXmlSerializer',
    'KeyStreamError',
    'KeyXmlSerializer',
    'StreamOption',
    'StreamWriteError',
    'StreamWriter',
    'key_output',
    'key_to_stream',
    'key_to_stream_basename',
    'keyset_output',
    'keyset_to_stream',
]
