#!/usr/bin/env python3
"""
IGC file parser module for IGC to FIT converter

This module handles parsing of IGC files: file type detection, header
metadata extraction and position fixes (B records), producing a Track.
"""

import logging
from dataclasses import replace
from datetime import date, datetime, timedelta, timezone
from typing import TextIO, List, Tuple, Optional

from igc_model import FileType, FlightMeta, Track, TrackFix
from igc_utils import calculateDistance
from igc_constants import (
    DEFAULT_STRIP_PREFIXES,
    IGC_RECORD_MANUFACTURER,
    IGC_RECORD_HEADER,
    IGC_RECORD_POSITION,
    IGC_HEADER_PILOT,
    IGC_HEADER_GLIDER_TYPE,
    IGC_HEADER_GLIDER_ID,
    IGC_HEADER_GPS,
    IGC_HEADER_DATUM,
    IGC_HEADER_SITE,
    IGC_HEADER_DATE,
    IGC_DATE_PREFIX,
    IGC_FIX_VALID,
    IGC_MISSING_ALTITUDE,
    IGC_POSITION_RECORD_LENGTH,
    IGC_ROLLOVER_TOLERANCE
)

# Configure logger
logger = logging.getLogger(__name__)


def _text(line) -> str:
    if isinstance(line, bytes):
        line = line.decode('utf-8', errors='ignore')
    return line


class IgcFileDetector:
    """
    Detects whether a file holds an IGC flight log.
    An IGC file starts with an A record followed by header records.
    """

    @staticmethod
    def detect_filetype(file: TextIO) -> FileType:
        """Determine the file type based on content"""
        filetype = FileType.UNKNOWN
        starting_pos = file.tell()

        line = _text(file.readline()).lstrip('\ufeff')
        if line.startswith(IGC_RECORD_MANUFACTURER):
            line2 = _text(file.readline())
            if line2.startswith(IGC_RECORD_HEADER):
                filetype = FileType.IGC

        file.seek(starting_pos)
        return filetype


class IgcHeaderParser:
    """
    Parses header records from IGC files and extracts metadata.
    Handles different header types and formats.
    """

    def __init__(self, prefixes_to_strip: List[str] = None):
        """
        Initialize with optional list of prefixes to strip from header values
        """
        self.prefixes_to_strip = prefixes_to_strip or DEFAULT_STRIP_PREFIXES

    @staticmethod
    def strip_prefixes(text: str, prefixes: List[str]) -> str:
        """Remove common prefixes from a text string"""
        if not text:
            return text

        for prefix in prefixes:
            if text.upper().startswith(prefix):
                return text[len(prefix):].strip()

        return text

    @staticmethod
    def parse_date(value: str) -> date:
        """
        Parse the value of an HFDTE record.
        Accepts both 'DDMMYY' and 'DATE:DDMMYY,NN'.
        """
        value = value.strip()
        if value.upper().startswith(IGC_DATE_PREFIX):
            value = value[len(IGC_DATE_PREFIX):]

        day = int(value[0:2])
        month = int(value[2:4])
        year = int(value[4:6])
        # Two-digit years: the IGC format dates from 1990
        year += 1900 if year >= 90 else 2000
        return date(year, month, day)

    def parse_header_line(self, line: str, flight_meta: FlightMeta, flight_date: Optional[date] = None) -> Tuple[FlightMeta, Optional[date]]:
        """
        Parse a single header line and update flight metadata
        Returns updated FlightMeta and flight_date
        """
        if len(line) < 5 or line[0] != IGC_RECORD_HEADER:
            return flight_meta, flight_date

        header_type = line[1:5]
        value = line[5:].strip()
        if not value:
            return flight_meta, flight_date

        if header_type == IGC_HEADER_PILOT:
            flight_meta.Pilot = self.strip_prefixes(value, self.prefixes_to_strip)

        elif header_type == IGC_HEADER_GLIDER_TYPE:
            flight_meta.GliderType = self.strip_prefixes(value, self.prefixes_to_strip)

        elif header_type == IGC_HEADER_GLIDER_ID:
            flight_meta.GliderId = self.strip_prefixes(value, self.prefixes_to_strip)

        elif header_type == IGC_HEADER_GPS:
            flight_meta.GPSSource = f"IGC Flight Logger (DOP={value})"

        elif header_type == IGC_HEADER_DATUM:
            flight_meta.Datum = value.split(':', 1)[-1].strip()

        elif header_type == IGC_HEADER_SITE:
            flight_meta.Site = self.strip_prefixes(value, self.prefixes_to_strip)

        elif header_type == IGC_HEADER_DATE:
            try:
                flight_date = self.parse_date(value)
            except (ValueError, IndexError):
                logger.warning(f"Invalid date in IGC header: {line}")

        return flight_meta, flight_date


class IgcPositionParser:
    """
    Parses position records (B records) from IGC files.
    Extracts time, coordinates, validity and altitude data.
    """

    @staticmethod
    def parse_time(line: str, flight_date: date) -> datetime:
        """Extract the UTC time of a B record on the flight date"""
        hour = int(line[1:3])
        minute = int(line[3:5])
        second = int(line[5:7])

        return datetime(flight_date.year, flight_date.month, flight_date.day,
                        hour, minute, second, tzinfo=timezone.utc)

    @staticmethod
    def parse_latitude(line: str) -> float:
        """Extract latitude from a B record"""
        lat_deg = int(line[7:9])
        lat_min = int(line[9:11])
        lat_frac = int(line[11:14]) / 1000
        lat_dir = line[14]
        if lat_dir not in 'NS':
            raise ValueError(f"Invalid latitude hemisphere '{lat_dir}'")

        latitude = lat_deg + (lat_min + lat_frac) / 60.0
        if lat_dir == 'S':
            latitude = -latitude

        return latitude

    @staticmethod
    def parse_longitude(line: str) -> float:
        """Extract longitude from a B record"""
        lon_deg = int(line[15:18])
        lon_min = int(line[18:20])
        lon_frac = int(line[20:23]) / 1000
        lon_dir = line[23]
        if lon_dir not in 'EW':
            raise ValueError(f"Invalid longitude hemisphere '{lon_dir}'")

        longitude = lon_deg + (lon_min + lon_frac) / 60.0
        if lon_dir == 'W':
            longitude = -longitude

        return longitude

    @staticmethod
    def parse_altitude(line: str) -> Tuple[Optional[int], Optional[int]]:
        """
        Extract pressure and GPS altitude from a B record
        Returns tuple of (pressure_altitude, gps_altitude) in meters,
        None where the recorder wrote 00000
        """
        def altitude(text: str) -> Optional[int]:
            if text == IGC_MISSING_ALTITUDE:
                return None
            return int(text)

        return altitude(line[25:30]), altitude(line[30:35])

    def parse_position_record(self, line: str, flight_date: date) -> TrackFix:
        """
        Parse a complete B record and return a TrackFix
        """
        pressure_altitude, gps_altitude = self.parse_altitude(line)

        return TrackFix(
            timestamp=self.parse_time(line, flight_date),
            latitude=round(self.parse_latitude(line), 9),
            longitude=round(self.parse_longitude(line), 9),
            gps_altitude=gps_altitude,
            pressure_altitude=pressure_altitude,
            valid=line[24] == IGC_FIX_VALID,
        )


class TrackBuilder:
    """
    Builds the fix list from B records.
    Handles midnight rollover and the track distance.
    """

    def __init__(self, rollover_tolerance: timedelta = IGC_ROLLOVER_TOLERANCE):
        """Initialize with the backwards step that still counts as the same day"""
        self.rollover_tolerance = rollover_tolerance
        self.position_parser = IgcPositionParser()

    def build_fixes(self, lines: List[str], flight_date: date) -> List[TrackFix]:
        """
        Parse every B record, skipping the ones that cannot be read.
        Small steps back in time are kept as they are, out of order.
        """
        fixes = []
        day_offset = timedelta(0)
        prev_time = None

        for line_number, line in enumerate(lines, start=1):
            line = _text(line).strip()
            if not line.startswith(IGC_RECORD_POSITION):
                continue

            if len(line) < IGC_POSITION_RECORD_LENGTH:
                logger.warning(f"Skipping short B record on line {line_number}")
                continue

            try:
                fix = self.position_parser.parse_position_record(line, flight_date)
            except (ValueError, IndexError) as e:
                logger.warning(f"Skipping invalid B record on line {line_number}: {e}")
                continue

            # B records only carry the time of day; a large step back means midnight passed
            while prev_time is not None and fix.timestamp + day_offset < prev_time - self.rollover_tolerance:
                day_offset += timedelta(days=1)
                logger.debug(f"Midnight rollover at line {line_number}")

            fix = replace(fix, timestamp=fix.timestamp + day_offset)
            prev_time = fix.timestamp
            fixes.append(fix)

        return fixes

    @staticmethod
    def total_distance(fixes: List[TrackFix]) -> float:
        """Sum of great circle distances between consecutive fixes, in meters"""
        distance = 0.0
        for prev_fix, fix in zip(fixes, fixes[1:]):
            distance += calculateDistance(prev_fix.latitude, prev_fix.longitude,
                                          fix.latitude, fix.longitude)
        return distance


class IgcParser:
    """
    Main parser class for IGC files. Orchestrates the parsing process
    using specialized components.
    """

    def __init__(self, config):
        """Initialize with configuration"""
        self.config = config
        self.header_parser = IgcHeaderParser()
        self.track_builder = TrackBuilder()

    def parse_file(self, track_file: TextIO) -> Track:
        """
        Parse an IGC file into a Track.
        Main entry point for IGC parsing.
        """
        flight_meta = FlightMeta()
        flight_date = None
        lines = track_file.readlines()

        # First pass: header records, up to the first fix
        for line in lines:
            line = _text(line).strip()
            if not line:
                continue

            record_type = line[0]
            if record_type == IGC_RECORD_MANUFACTURER and flight_meta.LoggerManufacturer is None:
                flight_meta.LoggerManufacturer = line[1:4]
            elif record_type == IGC_RECORD_HEADER:
                flight_meta, flight_date = self.header_parser.parse_header_line(
                    line, flight_meta, flight_date
                )
            elif record_type == IGC_RECORD_POSITION:
                break

        if flight_date is None:
            flight_date = datetime.now(timezone.utc).date()
            logger.warning("No date header in IGC file, using current date")

        # Second pass: position fixes
        fixes = self.track_builder.build_fixes(lines, flight_date)
        distance = self.track_builder.total_distance(fixes) if fixes else None

        logger.debug(f"Parsed {len(fixes)} fixes from IGC file dated {flight_date}")
        return Track(fixes=fixes, date=flight_date, distance=distance, meta=flight_meta)


# Public functions

def getFiletype(file: TextIO) -> FileType:
    """Determine the file type based on content"""
    return IgcFileDetector.detect_filetype(file)

def parseIgcFile(config, track_file: TextIO) -> Track:
    """
    Parse an IGC file into a Track.
    Main entry point for IGC parsing.
    """
    parser = IgcParser(config)
    return parser.parse_file(track_file)
