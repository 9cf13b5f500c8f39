#!/usr/bin/env python3
"""
Conversion driver for IGC to FIT converter

Builds the FIT messages for a track, writes them with a FitWriter and
returns the finished file as bytes. Reading and writing files is left to
the caller.
"""

import logging
from typing import Optional

from fit_messages import FitMessageBuilder
from fit_writer import FitWriter
from igc_config import FitSettings
from igc_model import Track

# Configure logger
logger = logging.getLogger(__name__)


class FitConverter:
    """
    Converts one Track into a FIT activity file.
    Holds no state between conversions.
    """

    def __init__(self, settings: Optional[FitSettings] = None):
        """Initialize with FIT settings"""
        self.settings = settings or FitSettings()
        self.builder = FitMessageBuilder(self.settings)

    def convert(self, track: Track) -> bytes:
        """Encode a track as FIT bytes; any error aborts with nothing returned"""
        messages = self.builder.build(track)

        writer = FitWriter()
        writer.write_messages(messages)
        data = writer.finalize()

        logger.debug(f"Encoded {len(messages)} messages into {len(data)} bytes")
        return data


def convertTrack(track: Track, settings: Optional[FitSettings] = None) -> bytes:
    """Encode a track as a FIT activity file"""
    converter = FitConverter(settings)
    return converter.convert(track)
