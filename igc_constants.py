#!/usr/bin/env python3
"""
Constants for IGC to FIT converter
"""

from datetime import timedelta

# File types
class FileType:
    UNKNOWN = 0
    IGC = 4

# Default configuration values
DEFAULT_TIMEZONE = 0
DEFAULT_OUT_PATH = "."
DEFAULT_NA_TEXT = "N/A"
DEFAULT_MANUFACTURER = "development"
DEFAULT_PRODUCT = 0
DEFAULT_SERIAL_NUMBER = 1234
DEFAULT_SPORT = "flying"
DEFAULT_SUB_SPORT = "fly_paraglide"

# Policies
ALTITUDE_SOURCE_GPS = "gps"
ALTITUDE_SOURCE_PRESSURE = "pressure"
ALTITUDE_SOURCES = (ALTITUDE_SOURCE_GPS, ALTITUDE_SOURCE_PRESSURE)
COORDINATE_POLICY_REJECT = "reject"
COORDINATE_POLICY_CLAMP = "clamp"
COORDINATE_POLICIES = (COORDINATE_POLICY_REJECT, COORDINATE_POLICY_CLAMP)
UNSORTED_POLICY_SORT = "sort"
UNSORTED_POLICY_REJECT = "reject"
UNSORTED_POLICIES = (UNSORTED_POLICY_SORT, UNSORTED_POLICY_REJECT)

# IGC file constants
IGC_RECORD_MANUFACTURER = "A"
IGC_RECORD_HEADER = "H"
IGC_RECORD_POSITION = "B"
IGC_HEADER_PILOT = "FPLT"
IGC_HEADER_GLIDER_TYPE = "FGTY"
IGC_HEADER_GLIDER_ID = "FGID"
IGC_HEADER_GPS = "FDOP"
IGC_HEADER_DATUM = "FDTM"
IGC_HEADER_SITE = "FSIT"
IGC_HEADER_DATE = "FDTE"
IGC_DATE_PREFIX = "DATE:"
IGC_FIX_VALID = "A"
IGC_MISSING_ALTITUDE = "00000"
IGC_POSITION_RECORD_LENGTH = 35
IGC_ROLLOVER_TOLERANCE = timedelta(hours=1)
IGC_EXTENSION = ".igc"
FIT_EXTENSION = ".fit"

# Standard prefixes to strip from IGC headers
DEFAULT_STRIP_PREFIXES = ["GLIDERID:", "PILOT:", "GLIDERTYPE:", "PILOTINCHARGE:", "SITE:"]

# Earth radius in meters (for distance calculations)
EARTH_RADIUS_METERS = 6371000

# Date and time formats
DATE_FORMAT_YMD = "%Y/%m/%d"
TIME_FORMAT_HM = "%H:%M"

# FIT epoch: seconds between 1970-01-01 and 1989-12-31 UTC
FIT_EPOCH_OFFSET = 631065600
MILLIS_PER_SECOND = 1000

# Semicircles: 2^31 units per 180 degrees
SEMICIRCLES_PER_DEGREE = 2 ** 31 / 180
SEMICIRCLE_MIN = -(2 ** 31)
SEMICIRCLE_MAX = 2 ** 31 - 1
MAX_LATITUDE = 90.0
MAX_LONGITUDE = 180.0

# FIT file header
FIT_HEADER_SIZE = 14
FIT_PROTOCOL_VERSION = 0x20
FIT_PROFILE_VERSION = 21173
FIT_DATA_TYPE = b".FIT"
FIT_DEFINITION_HEADER = 0x40
FIT_LOCAL_MESG_MASK = 0x0F
FIT_ARCHITECTURE_LITTLE_ENDIAN = 0

# Configuration sections
CONFIG_SECTION_DEFAULTS = "Defaults"
CONFIG_SECTION_FILE_ID = "FileId"
CONFIG_SECTION_SESSION = "Session"
CONFIG_FILE_NAMES = ('igc2fit.conf', 'igc2fit.ini')

# Unit conversions
METERS_PER_KILOMETER = 1000
SECONDS_PER_HOUR = 3600
SECONDS_PER_MINUTE = 60
