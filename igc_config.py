#!/usr/bin/env python3
"""
Configuration handling for IGC to FIT converter

This module provides configuration management for the IGC to FIT converter.
It handles command line arguments, config file loading, and the FIT
identifiers and policies used when building messages.
"""

import configparser
import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional

from igc_utils import secondsFromString
from igc_constants import (
    DEFAULT_TIMEZONE,
    DEFAULT_OUT_PATH,
    DEFAULT_MANUFACTURER,
    DEFAULT_PRODUCT,
    DEFAULT_SERIAL_NUMBER,
    DEFAULT_SPORT,
    DEFAULT_SUB_SPORT,
    ALTITUDE_SOURCE_GPS,
    ALTITUDE_SOURCES,
    COORDINATE_POLICY_REJECT,
    COORDINATE_POLICY_CLAMP,
    COORDINATE_POLICIES,
    UNSORTED_POLICY_SORT,
    UNSORTED_POLICIES,
    CONFIG_SECTION_DEFAULTS,
    CONFIG_SECTION_FILE_ID,
    CONFIG_SECTION_SESSION,
    CONFIG_FILE_NAMES
)

# Configure logger
logger = logging.getLogger(__name__)


@dataclass
class TimezoneSettings:
    """UTC offsets used when showing IGC fix times, in seconds"""
    default: int = DEFAULT_TIMEZONE
    igc: Optional[int] = None

    def get_for_igc(self) -> int:
        """Get the offset for showing IGC fix times"""
        return self.igc if self.igc is not None else self.default


@dataclass
class FitSettings:
    """Identifiers, sport and policies used when building FIT messages"""
    manufacturer: str = DEFAULT_MANUFACTURER
    product: int = DEFAULT_PRODUCT
    serial_number: int = DEFAULT_SERIAL_NUMBER
    sport: str = DEFAULT_SPORT
    sub_sport: str = DEFAULT_SUB_SPORT
    altitude_source: str = ALTITUDE_SOURCE_GPS
    coordinate_policy: str = COORDINATE_POLICY_REJECT
    unsorted_policy: str = UNSORTED_POLICY_SORT

    def __post_init__(self):
        self.altitude_source = _choice('AltitudeSource', self.altitude_source, ALTITUDE_SOURCES)
        self.coordinate_policy = _choice('CoordinatePolicy', self.coordinate_policy, COORDINATE_POLICIES)
        self.unsorted_policy = _choice('UnsortedFixes', self.unsorted_policy, UNSORTED_POLICIES)


def _choice(name: str, value: str, allowed) -> str:
    """Normalize a policy value and check it is one of the allowed ones"""
    value = str(value).strip().lower()
    if value not in allowed:
        raise ValueError(f"Invalid {name} '{value}', expected one of: {', '.join(allowed)}")
    return value


def _integer(name: str, value: str) -> int:
    """Parse an integer setting, accepting 0x prefixed hex"""
    try:
        return int(str(value).strip(), 0)
    except ValueError:
        raise ValueError(f"Invalid {name} '{value}', expected an integer") from None


class ConfigParser:
    """
    Handles parsing of configuration files.
    Separates the parsing logic from the configuration storage.
    """

    def __init__(self):
        """Initialize the config parser"""
        self.parser = configparser.RawConfigParser()

    def find_config_file(self, cli_path: Optional[str] = None) -> Optional[str]:
        """Find a configuration file to use"""
        if cli_path:
            if os.path.isfile(cli_path):
                logger.info(f"Using configuration file: {cli_path}")
                return cli_path
            logger.warning(f"Configuration file {cli_path} not found")

        # Look in standard locations
        paths = ('.', os.path.dirname(os.path.abspath(__file__)))

        for path in paths:
            for file in CONFIG_FILE_NAMES:
                full_path = os.path.join(path, file)
                if Path(full_path).is_file():
                    logger.info(f"Found configuration file: {full_path}")
                    return full_path

        logger.debug("No configuration file found, using defaults")
        return None

    def load_config_file(self, file_path: Optional[str] = None) -> bool:
        """Load configuration from file"""
        config_file = self.find_config_file(file_path)
        if not config_file:
            return False

        try:
            self.parser.read(config_file)
            return True
        except configparser.Error as e:
            logger.error(f"Error reading config file: {e}")
            return False

    def get_section(self, section_name: str) -> Dict[str, str]:
        """Get a section from the configuration file"""
        if section_name in self.parser:
            return dict(self.parser[section_name])
        return {}

    def get_default_settings(self) -> Dict[str, Any]:
        """Get default settings from configuration"""
        return self.get_section(CONFIG_SECTION_DEFAULTS)

    def get_fit_settings(self) -> FitSettings:
        """Extract FIT identifiers, sport and policies from configuration"""
        defaults = self.get_default_settings()
        file_id = self.get_section(CONFIG_SECTION_FILE_ID)
        session = self.get_section(CONFIG_SECTION_SESSION)

        settings = {}
        if 'manufacturer' in file_id:
            settings['manufacturer'] = file_id['manufacturer'].strip().lower()
        if 'product' in file_id:
            settings['product'] = _integer('Product', file_id['product'])
        if 'serialnumber' in file_id:
            settings['serial_number'] = _integer('SerialNumber', file_id['serialnumber'])
        if 'sport' in session:
            settings['sport'] = session['sport'].strip().lower()
        if 'subsport' in session:
            settings['sub_sport'] = session['subsport'].strip().lower()
        if 'altitudesource' in defaults:
            settings['altitude_source'] = defaults['altitudesource']
        if 'coordinatepolicy' in defaults:
            settings['coordinate_policy'] = defaults['coordinatepolicy']
        if 'unsortedfixes' in defaults:
            settings['unsorted_policy'] = defaults['unsortedfixes']

        return FitSettings(**settings)


class Config:
    """Main configuration class for IGC to FIT converter"""

    def __init__(self, cli_args):
        """Initialize with command line arguments"""
        self.parser = ConfigParser()
        self.cli_args = cli_args

        # Initialize defaults
        self.out_path = DEFAULT_OUT_PATH
        self.timezone_settings = TimezoneSettings()
        self.fit_settings = FitSettings()

        # Load configuration
        self._load_config()

    def _load_config(self):
        """Load and process configuration"""
        # Load config file
        self.parser.load_config_file(getattr(self.cli_args, 'config', None))

        # Get default settings
        defaults = self.parser.get_default_settings()

        # Set timezone
        cli_timezone = getattr(self.cli_args, 'timezone', None)
        if cli_timezone:
            self.timezone_settings.default = secondsFromString(cli_timezone)
        else:
            if 'timezone' in defaults:
                self.timezone_settings.default = secondsFromString(defaults['timezone'])
            if 'timezoneigc' in defaults:
                self.timezone_settings.igc = secondsFromString(defaults['timezoneigc'])

        # Set output path
        cli_output = getattr(self.cli_args, 'output', None)
        if cli_output:
            self.out_path = cli_output
        elif 'outpath' in defaults:
            self.out_path = defaults['outpath']

        # FIT settings, with CLI overrides
        self.fit_settings = self.parser.get_fit_settings()
        cli_altitude = getattr(self.cli_args, 'altitude_source', None)
        if cli_altitude:
            self.fit_settings.altitude_source = _choice('AltitudeSource', cli_altitude, ALTITUDE_SOURCES)
        if getattr(self.cli_args, 'clamp', False):
            self.fit_settings.coordinate_policy = COORDINATE_POLICY_CLAMP

    @property
    def timezoneIGC(self) -> int:
        """Get the UTC offset for showing IGC fix times, in seconds"""
        return self.timezone_settings.get_for_igc()

    @property
    def outPath(self) -> str:
        """Get output path"""
        return self.out_path
