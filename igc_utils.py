#!/usr/bin/env python3
"""
Utility functions for IGC to FIT converter

Includes the two unit converters the FIT encoder depends on: calendar time
to FIT timestamps and decimal degrees to semicircles.
"""

import re
import math
from datetime import datetime, date, timedelta, timezone
from typing import Union

from igc_errors import DomainError
from igc_constants import (
    EARTH_RADIUS_METERS,
    DATE_FORMAT_YMD,
    TIME_FORMAT_HM,
    FIT_EPOCH_OFFSET,
    MILLIS_PER_SECOND,
    SEMICIRCLES_PER_DEGREE,
    SEMICIRCLE_MIN,
    SEMICIRCLE_MAX,
    MAX_LONGITUDE
)

UNIX_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


def secondsFromString(timezone: str) -> int:
    """Convert a timezone string to seconds offset"""
    seconds = 0

    timezone = numberOrString(timezone)
    if isinstance(timezone, (float, int)):
        seconds = timezone * 3600
    elif isinstance(timezone, str):
        indexAfterSign = int(timezone[0] in ['+','-'])
        zone = timezone[indexAfterSign:].split(':')

        seconds = float(zone.pop())
        seconds += float(zone.pop()) * 60
        if len(zone):
            seconds += float(zone.pop()) * 3600
        else:
            seconds *= 60

        seconds *= -1 if timezone[0] == '-' else 1

    return int(seconds)


def numberOrString(value: str) -> Union[float, str]:
    """Convert a string to a number if possible, otherwise keep as string"""
    if re.sub('^[+-]', '', re.sub('\\.', '', value)).isnumeric():
        return float(value)
    else:
        return value


def roundHalfAwayFromZero(value: float) -> int:
    """Round to the nearest integer, ties away from zero (2.5 -> 3, -2.5 -> -3)"""
    return int(math.copysign(math.floor(abs(value) + 0.5), value))


def toFitTimestamp(instant: Union[datetime, int, float]) -> int:
    """
    Convert an instant to seconds since the FIT epoch (1989-12-31T00:00:00Z).

    Accepts a datetime (naive values are taken as UTC) or a number of
    milliseconds since the Unix epoch. Instants before the FIT epoch raise
    DomainError, FIT timestamps being unsigned.
    """
    if isinstance(instant, datetime):
        if instant.tzinfo is None:
            instant = instant.replace(tzinfo=timezone.utc)
        millis = (instant - UNIX_EPOCH) // timedelta(milliseconds=1)
    elif isinstance(instant, (int, float)) and not isinstance(instant, bool):
        if math.isnan(instant) or math.isinf(instant):
            raise DomainError(f"Invalid timestamp: {instant}")
        millis = math.floor(instant)
    else:
        raise TypeError(f"Cannot convert {type(instant).__name__} to a FIT timestamp")

    seconds = millis // MILLIS_PER_SECOND - FIT_EPOCH_OFFSET
    if seconds < 0:
        raise DomainError(f"Timestamp {instant} predates the FIT epoch (1989-12-31T00:00:00Z)")
    return int(seconds)


def fromFitTimestamp(seconds: int) -> datetime:
    """Convert seconds since the FIT epoch back to an aware UTC datetime"""
    return UNIX_EPOCH + timedelta(seconds=seconds + FIT_EPOCH_OFFSET)


def toSemicircles(degrees: float, limit: float = MAX_LONGITUDE, clamp: bool = False) -> int:
    """
    Convert decimal degrees to FIT semicircles: round(degrees * 2^31 / 180).

    Degrees outside [-limit, limit] raise DomainError, or are clamped to the
    limit when clamp is set. The result is kept within int32, so +180
    degrees encodes as 2^31 - 1.
    """
    if math.isnan(degrees):
        raise DomainError("Coordinate is not a number")

    if not -limit <= degrees <= limit:
        if not clamp:
            raise DomainError(f"Coordinate {degrees} is outside [-{limit}, {limit}] degrees")
        degrees = max(-limit, min(limit, degrees))

    semicircles = roundHalfAwayFromZero(degrees * SEMICIRCLES_PER_DEGREE)
    return max(SEMICIRCLE_MIN, min(SEMICIRCLE_MAX, semicircles))


def fromSemicircles(semicircles: int) -> float:
    """Convert FIT semicircles back to decimal degrees"""
    return semicircles / SEMICIRCLES_PER_DEGREE


def calculateDistance(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """
    Calculate the great circle distance between two points on earth.
    Returns distance in meters.
    """
    # Convert decimal degrees to radians
    lat1_rad = math.radians(lat1)
    lon1_rad = math.radians(lon1)
    lat2_rad = math.radians(lat2)
    lon2_rad = math.radians(lon2)

    # Haversine formula
    dlon = lon2_rad - lon1_rad
    dlat = lat2_rad - lat1_rad
    a = math.sin(dlat/2)**2 + math.cos(lat1_rad) * math.cos(lat2_rad) * math.sin(dlon/2)**2
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1-a))

    return EARTH_RADIUS_METERS * c


def toYMD(time_input: Union[datetime, date]) -> str:
    """Convert a date or time to YYYY/MM/DD format"""
    if isinstance(time_input, (datetime, date)):
        return time_input.strftime(DATE_FORMAT_YMD)
    return str(time_input)


def toHM(time_input: datetime) -> str:
    """Convert a time to HH:MM format"""
    if isinstance(time_input, datetime):
        return time_input.strftime(TIME_FORMAT_HM)
    return str(time_input)


def toUtcOffset(seconds: int) -> str:
    """Format a UTC offset in seconds as 'Z' or '+HH:MM'"""
    if not seconds:
        return 'Z'
    sign = '-' if seconds < 0 else '+'
    minutes = abs(int(seconds)) // 60
    return f"{sign}{minutes // 60:02d}:{minutes % 60:02d}"
