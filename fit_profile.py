#!/usr/bin/env python3
"""
FIT profile subset used by the IGC to FIT converter

Declares the base types, the field layout of each message kind and the
enum name tables. Field numbers, scales and offsets follow the published
FIT profile; only the fields an activity converted from an IGC track needs
are listed.
"""

from dataclasses import dataclass
from typing import Dict, Optional, Tuple

from igc_model import MessageKind


@dataclass(frozen=True)
class BaseType:
    """A FIT base type and its little-endian struct code"""
    name: str
    identifier: int
    size: int
    struct_format: str
    invalid: int
    min_value: int
    max_value: int


ENUM = BaseType('enum', 0x00, 1, 'B', 0xFF, 0, 0xFE)
UINT16 = BaseType('uint16', 0x84, 2, 'H', 0xFFFF, 0, 0xFFFE)
# +180 degrees clamps to the int32 maximum, which is also the invalid value
SINT32 = BaseType('sint32', 0x85, 4, 'i', 0x7FFFFFFF, -0x80000000, 0x7FFFFFFF)
UINT32 = BaseType('uint32', 0x86, 4, 'I', 0xFFFFFFFF, 0, 0xFFFFFFFE)
UINT32Z = BaseType('uint32z', 0x8C, 4, 'I', 0x00000000, 0, 0xFFFFFFFF)


@dataclass(frozen=True)
class FieldDefinition:
    """How one message field is laid out on the wire"""
    name: str
    number: int
    base_type: BaseType
    scale: float = 1
    offset: float = 0
    enum: Optional[str] = None


MESSAGE_FIELDS: Dict[MessageKind, Tuple[FieldDefinition, ...]] = {
    MessageKind.FILE_ID: (
        FieldDefinition('type', 0, ENUM, enum='file'),
        FieldDefinition('manufacturer', 1, UINT16, enum='manufacturer'),
        FieldDefinition('product', 2, UINT16),
        FieldDefinition('serial_number', 3, UINT32Z),
        FieldDefinition('time_created', 4, UINT32),
    ),
    MessageKind.ACTIVITY: (
        FieldDefinition('timestamp', 253, UINT32),
        FieldDefinition('total_timer_time', 0, UINT32, scale=1000),
        FieldDefinition('num_sessions', 1, UINT16),
    ),
    MessageKind.SESSION: (
        FieldDefinition('message_index', 254, UINT16),
        FieldDefinition('timestamp', 253, UINT32),
        FieldDefinition('start_time', 2, UINT32),
        FieldDefinition('sport', 5, ENUM, enum='sport'),
        FieldDefinition('sub_sport', 6, ENUM, enum='sub_sport'),
        FieldDefinition('total_elapsed_time', 7, UINT32, scale=1000),
        FieldDefinition('total_timer_time', 8, UINT32, scale=1000),
        FieldDefinition('total_distance', 9, UINT32, scale=100),
        FieldDefinition('first_lap_index', 25, UINT16),
        FieldDefinition('num_laps', 26, UINT16),
    ),
    MessageKind.LAP: (
        FieldDefinition('timestamp', 253, UINT32),
        FieldDefinition('start_time', 2, UINT32),
        FieldDefinition('total_elapsed_time', 7, UINT32, scale=1000),
        FieldDefinition('total_timer_time', 8, UINT32, scale=1000),
        FieldDefinition('total_distance', 9, UINT32, scale=100),
    ),
    MessageKind.RECORD: (
        FieldDefinition('timestamp', 253, UINT32),
        FieldDefinition('position_lat', 0, SINT32),
        FieldDefinition('position_long', 1, SINT32),
        FieldDefinition('altitude', 2, UINT16, scale=5, offset=500),
    ),
}

ENUMS: Dict[str, Dict[str, int]] = {
    'file': {
        'device': 1,
        'settings': 2,
        'activity': 4,
        'course': 6,
    },
    'manufacturer': {
        'garmin': 1,
        'development': 255,
    },
    'sport': {
        'generic': 0,
        'flying': 20,
    },
    'sub_sport': {
        'generic': 0,
        'rc_drone': 39,
        'wingsuit': 40,
        'fly_canopy': 110,
        'fly_paraglide': 111,
        'fly_paramotor': 112,
    },
}


def getFieldDefinition(kind: MessageKind, name: str) -> Optional[FieldDefinition]:
    """Look up a field of a message kind by name"""
    for field_def in MESSAGE_FIELDS[kind]:
        if field_def.name == name:
            return field_def
    return None


def enumValue(enum_name: str, value) -> Optional[int]:
    """Resolve an enum name (or pass through a raw number); None if unknown"""
    if isinstance(value, str):
        return ENUMS[enum_name].get(value)
    return value
