#!/usr/bin/env python3
"""
Data models and enums for IGC to FIT converter
"""

from dataclasses import dataclass, field
from enum import Enum
from datetime import date, datetime, timedelta
from typing import Any, Dict, List, Optional, Tuple

from igc_constants import FileType as FileTypeConstants


class FileType(Enum):
    UNKNOWN = FileTypeConstants.UNKNOWN
    IGC = FileTypeConstants.IGC


@dataclass(frozen=True)
class TrackFix:
    """A single GPS sample from the flight recorder"""
    timestamp: datetime
    latitude: float
    longitude: float
    gps_altitude: Optional[float] = None
    pressure_altitude: Optional[float] = None
    valid: bool = True


@dataclass
class FlightMeta:
    """Header metadata of an IGC file, used for the flight summary"""
    Pilot: Optional[str] = None
    GliderType: Optional[str] = None
    GliderId: Optional[str] = None
    Site: Optional[str] = None
    LoggerManufacturer: Optional[str] = None
    GPSSource: Optional[str] = None
    Datum: Optional[str] = None


@dataclass
class Track:
    """An ordered sequence of fixes plus the flight date and distance"""
    fixes: List[TrackFix] = field(default_factory=list)
    date: Optional[date] = None
    distance: Optional[float] = None
    meta: FlightMeta = field(default_factory=FlightMeta)

    @property
    def start_time(self) -> Optional[datetime]:
        return self.fixes[0].timestamp if self.fixes else None

    @property
    def end_time(self) -> Optional[datetime]:
        return self.fixes[-1].timestamp if self.fixes else None

    @property
    def duration(self) -> Optional[timedelta]:
        if not self.fixes:
            return None
        return self.end_time - self.start_time


class MessageKind(Enum):
    """The FIT messages an activity file is built from, by global number"""
    FILE_ID = 0
    SESSION = 18
    LAP = 19
    RECORD = 20
    ACTIVITY = 34

    @property
    def mesg_name(self) -> str:
        return self.name.lower()


@dataclass(frozen=True)
class FitMessage:
    """
    One FIT message: its kind and ordered (field name, value) pairs.
    Values are in physical units; scaling happens in the writer.
    """
    kind: MessageKind
    fields: Tuple[Tuple[str, Any], ...] = ()

    @classmethod
    def create(cls, kind: MessageKind, **values) -> 'FitMessage':
        return cls(kind, tuple(values.items()))

    def get(self, name: str, default: Any = None) -> Any:
        for field_name, value in self.fields:
            if field_name == name:
                return value
        return default

    def field_names(self) -> Tuple[str, ...]:
        return tuple(name for name, _ in self.fields)

    def as_dict(self) -> Dict[str, Any]:
        return dict(self.fields)
