#!/usr/bin/env python3
"""
FIT binary writer module for IGC to FIT converter

This module serializes FIT messages into the FIT container: a 14 byte
file header, definition and data records, and a trailing CRC-16.
"""

import math
import struct
import logging
from enum import Enum
from typing import Dict, Iterable, List, Tuple

from fit_profile import FieldDefinition, getFieldDefinition, enumValue
from igc_errors import EncodingError, WriterStateError
from igc_model import FitMessage, MessageKind
from igc_utils import roundHalfAwayFromZero
from igc_constants import (
    FIT_HEADER_SIZE,
    FIT_PROTOCOL_VERSION,
    FIT_PROFILE_VERSION,
    FIT_DATA_TYPE,
    FIT_DEFINITION_HEADER,
    FIT_LOCAL_MESG_MASK,
    FIT_ARCHITECTURE_LITTLE_ENDIAN
)

# Configure logger
logger = logging.getLogger(__name__)

# CRC-16 with reflected polynomial 0xA001, one nibble at a time
CRC_TABLE = (
    0x0000, 0xCC01, 0xD801, 0x1400, 0xF001, 0x3C00, 0x2800, 0xE401,
    0xA001, 0x6C00, 0x7800, 0xB401, 0x5000, 0x9C01, 0x8801, 0x4400,
)


def calculateCrc(data: bytes, crc: int = 0) -> int:
    """Compute the FIT CRC-16 of data, continuing from crc"""
    for byte in data:
        tmp = CRC_TABLE[crc & 0xF]
        crc = (crc >> 4) & 0x0FFF
        crc = crc ^ tmp ^ CRC_TABLE[byte & 0xF]

        tmp = CRC_TABLE[crc & 0xF]
        crc = (crc >> 4) & 0x0FFF
        crc = crc ^ tmp ^ CRC_TABLE[(byte >> 4) & 0xF]

    return crc


class WriterState(Enum):
    UNOPENED = 0
    HEADER_WRITTEN = 1
    DEFINITION_EMITTED = 2
    DATA_EMITTED = 3
    FINALIZED = 4


class FitWriter:
    """
    Writes FIT messages into an in-memory buffer.

    A definition record is emitted before the first data record of each
    message kind and again whenever that kind's field layout changes.
    finalize() fixes up the header and appends the file CRC; the writer
    accepts nothing afterwards.
    """

    def __init__(self, protocol_version: int = FIT_PROTOCOL_VERSION,
                 profile_version: int = FIT_PROFILE_VERSION):
        """Initialize an empty, unopened writer"""
        self.protocol_version = protocol_version
        self.profile_version = profile_version
        self.state = WriterState.UNOPENED
        self.message_count = 0
        self.definition_count = 0
        self._buffer = bytearray()
        self._local_types: Dict[MessageKind, int] = {}
        self._layouts: Dict[int, Tuple[FieldDefinition, ...]] = {}

    @staticmethod
    def pack_header(data_size: int, protocol_version: int, profile_version: int) -> bytes:
        """Build the 14 byte file header, including its own CRC"""
        header = struct.pack('<BBHI4s', FIT_HEADER_SIZE, protocol_version,
                             profile_version, data_size, FIT_DATA_TYPE)
        return header + struct.pack('<H', calculateCrc(header))

    def _ensure_writable(self) -> None:
        if self.state == WriterState.FINALIZED:
            raise WriterStateError("FIT writer is already finalized")

    def write_header(self) -> None:
        """Write a placeholder header; finalize() fills in the data size"""
        self._ensure_writable()
        if self.state != WriterState.UNOPENED:
            raise WriterStateError("FIT header has already been written")

        self._buffer += self.pack_header(0, self.protocol_version, self.profile_version)
        self.state = WriterState.HEADER_WRITTEN

    @staticmethod
    def layout_for(message: FitMessage) -> Tuple[FieldDefinition, ...]:
        """Resolve the field definitions of a message, in the message's field order"""
        layout = []
        for name in message.field_names():
            field_def = getFieldDefinition(message.kind, name)
            if field_def is None:
                raise EncodingError(f"Field '{name}' is not defined for {message.kind.mesg_name} messages")
            layout.append(field_def)
        return tuple(layout)

    @staticmethod
    def encode_value(kind: MessageKind, field_def: FieldDefinition, value) -> int:
        """Convert a semantic field value to the raw integer stored on the wire"""
        base_type = field_def.base_type
        if value is None:
            return base_type.invalid

        label = f"{kind.mesg_name}.{field_def.name}"
        if field_def.enum:
            raw = enumValue(field_def.enum, value)
            if raw is None:
                raise EncodingError(f"Unknown {field_def.enum} value {value!r} for {label}")
        elif isinstance(value, bool) or not isinstance(value, (int, float)):
            raise EncodingError(f"Value {value!r} for {label} is not a number")
        elif isinstance(value, float) and not math.isfinite(value):
            raise EncodingError(f"Value {value} for {label} is not finite")
        elif isinstance(value, int) and field_def.scale == 1 and field_def.offset == 0:
            raw = value
        else:
            raw = roundHalfAwayFromZero((value + field_def.offset) * field_def.scale)

        if not base_type.min_value <= raw <= base_type.max_value:
            raise EncodingError(f"Value {value} for {label} does not fit in {base_type.name}")
        return raw

    def _local_type(self, kind: MessageKind) -> int:
        if kind not in self._local_types:
            local_type = len(self._local_types)
            if local_type > FIT_LOCAL_MESG_MASK:
                raise EncodingError("Too many message kinds for the available local message types")
            self._local_types[kind] = local_type
        return self._local_types[kind]

    def write_definition(self, local_type: int, kind: MessageKind,
                         layout: Tuple[FieldDefinition, ...]) -> None:
        """Write a definition record for a local message type"""
        record = bytearray(struct.pack(
            '<BBBHB',
            FIT_DEFINITION_HEADER | local_type,
            0,
            FIT_ARCHITECTURE_LITTLE_ENDIAN,
            kind.value,
            len(layout)
        ))
        for field_def in layout:
            record += struct.pack('<BBB', field_def.number, field_def.base_type.size,
                                  field_def.base_type.identifier)

        self._buffer += record
        self._layouts[local_type] = layout
        self.definition_count += 1
        self.state = WriterState.DEFINITION_EMITTED
        logger.debug(f"Defined local message {local_type} as {kind.mesg_name} "
                     f"with {len(layout)} fields")

    def write_message(self, message: FitMessage) -> None:
        """Write one data record, preceded by its definition when needed"""
        self._ensure_writable()
        if self.state == WriterState.UNOPENED:
            self.write_header()

        # Encode first so a bad value leaves no partial record behind
        layout = self.layout_for(message)
        values = [self.encode_value(message.kind, field_def, message.get(field_def.name))
                  for field_def in layout]

        local_type = self._local_type(message.kind)
        if self._layouts.get(local_type) != layout:
            self.write_definition(local_type, message.kind, layout)

        data_format = '<B' + ''.join(field_def.base_type.struct_format for field_def in layout)
        self._buffer += struct.pack(data_format, local_type, *values)
        self.message_count += 1
        self.state = WriterState.DATA_EMITTED

    def write_messages(self, messages: Iterable[FitMessage]) -> None:
        """Write a sequence of messages in order"""
        for message in messages:
            self.write_message(message)

    def finalize(self) -> bytes:
        """
        Fill in the header data size and CRC, append the file CRC and
        return the complete FIT file.
        """
        self._ensure_writable()
        if self.state == WriterState.UNOPENED:
            self.write_header()

        data_size = len(self._buffer) - FIT_HEADER_SIZE
        self._buffer[:FIT_HEADER_SIZE] = self.pack_header(
            data_size, self.protocol_version, self.profile_version
        )
        self._buffer += struct.pack('<H', calculateCrc(self._buffer))
        self.state = WriterState.FINALIZED

        logger.debug(f"Finalized FIT file: {self.message_count} messages, "
                     f"{self.definition_count} definitions, {len(self._buffer)} bytes")
        return bytes(self._buffer)


def encodeMessages(messages: List[FitMessage]) -> bytes:
    """Serialize a list of FIT messages into a complete FIT file"""
    writer = FitWriter()
    writer.write_messages(messages)
    return writer.finalize()
