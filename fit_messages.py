#!/usr/bin/env python3
"""
FIT message builder for IGC to FIT converter

Turns a parsed Track into the ordered list of FIT messages an activity file
is made of: FileId, Activity, Session, Lap and one Record per fix. Building
is pure; nothing here knows about the binary format.
"""

import itertools
import logging
from typing import List, Optional

from igc_config import FitSettings
from igc_errors import DomainError, EmptyTrackError
from igc_model import FitMessage, MessageKind, Track, TrackFix
from igc_utils import toFitTimestamp, toSemicircles
from igc_constants import (
    ALTITUDE_SOURCE_PRESSURE,
    COORDINATE_POLICY_CLAMP,
    UNSORTED_POLICY_REJECT,
    MAX_LATITUDE,
    MAX_LONGITUDE
)

# Configure logger
logger = logging.getLogger(__name__)


class FitMessageBuilder:
    """
    Builds the FIT message sequence for one track.
    Identifiers, sport and policies come from FitSettings.
    """

    def __init__(self, settings: Optional[FitSettings] = None):
        """Initialize with conversion settings"""
        self.settings = settings or FitSettings()

    def ordered_fixes(self, fixes: List[TrackFix]) -> List[TrackFix]:
        """Return the fixes in ascending time order, applying the unsorted-fix policy"""
        if not fixes:
            raise EmptyTrackError("Track has no fixes")

        unsorted = any(b.timestamp < a.timestamp for a, b in itertools.pairwise(fixes))
        if not unsorted:
            return list(fixes)

        if self.settings.unsorted_policy == UNSORTED_POLICY_REJECT:
            raise DomainError("Track fixes are not in ascending time order")

        logger.warning("Track fixes are not in ascending time order, sorting them")
        return sorted(fixes, key=lambda fix: fix.timestamp)

    @staticmethod
    def elapsed_seconds(fixes: List[TrackFix]) -> float:
        """Seconds between the first and the last fix"""
        return (fixes[-1].timestamp - fixes[0].timestamp).total_seconds()

    def file_id(self, time_created: int) -> FitMessage:
        return FitMessage.create(
            MessageKind.FILE_ID,
            type='activity',
            manufacturer=self.settings.manufacturer,
            product=self.settings.product,
            time_created=time_created,
            serial_number=self.settings.serial_number,
        )

    def activity(self, timestamp: int, elapsed: float) -> FitMessage:
        return FitMessage.create(
            MessageKind.ACTIVITY,
            timestamp=timestamp,
            total_timer_time=elapsed,
            num_sessions=1,
        )

    def session(self, start_time: int, timestamp: int, elapsed: float, distance: float) -> FitMessage:
        return FitMessage.create(
            MessageKind.SESSION,
            message_index=0,
            timestamp=timestamp,
            start_time=start_time,
            total_elapsed_time=elapsed,
            total_timer_time=elapsed,
            sport=self.settings.sport,
            sub_sport=self.settings.sub_sport,
            total_distance=distance,
            first_lap_index=0,
            num_laps=1,
        )

    def lap(self, start_time: int, timestamp: int, elapsed: float, distance: float) -> FitMessage:
        return FitMessage.create(
            MessageKind.LAP,
            timestamp=timestamp,
            start_time=start_time,
            total_elapsed_time=elapsed,
            total_distance=distance,
        )

    def record(self, fix: TrackFix) -> FitMessage:
        """Build the Record message of a single fix"""
        clamp = self.settings.coordinate_policy == COORDINATE_POLICY_CLAMP

        if self.settings.altitude_source == ALTITUDE_SOURCE_PRESSURE:
            altitude = fix.pressure_altitude
        else:
            altitude = fix.gps_altitude

        return FitMessage.create(
            MessageKind.RECORD,
            timestamp=toFitTimestamp(fix.timestamp),
            position_lat=toSemicircles(fix.latitude, MAX_LATITUDE, clamp),
            position_long=toSemicircles(fix.longitude, MAX_LONGITUDE, clamp),
            altitude=altitude or 0,
        )

    def build(self, track: Track) -> List[FitMessage]:
        """
        Build FileId, Activity, Session, Lap and one Record per fix, in that order.
        Raises EmptyTrackError for a track without fixes.
        """
        fixes = self.ordered_fixes(track.fixes)

        start_time = toFitTimestamp(fixes[0].timestamp)
        end_time = toFitTimestamp(fixes[-1].timestamp)
        elapsed = self.elapsed_seconds(fixes)
        distance = track.distance or 0

        messages = [
            self.file_id(start_time),
            self.activity(end_time, elapsed),
            self.session(start_time, end_time, elapsed, distance),
            self.lap(start_time, end_time, elapsed, distance),
        ]
        messages.extend(self.record(fix) for fix in fixes)

        logger.debug(f"Built {len(messages)} FIT messages for {len(fixes)} fixes "
                     f"({elapsed:.0f} s, {distance:.0f} m)")
        return messages


def buildMessages(track: Track, settings: Optional[FitSettings] = None) -> List[FitMessage]:
    """Build the ordered FIT message list for a track"""
    builder = FitMessageBuilder(settings)
    return builder.build(track)
