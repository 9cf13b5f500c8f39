#!/usr/bin/env python3
"""
Flight summary functions for IGC to FIT converter
"""

from datetime import timedelta

from igc_model import Track, TrackFix
from igc_utils import toYMD, toHM, toUtcOffset
from igc_constants import DEFAULT_NA_TEXT, METERS_PER_KILOMETER, SECONDS_PER_HOUR, SECONDS_PER_MINUTE


def _fixText(fix: TrackFix, utc_offset: int) -> str:
    local = fix.timestamp + timedelta(seconds=utc_offset)
    return f"{toHM(local)}{toUtcOffset(utc_offset)} ({fix.latitude:.6f}, {fix.longitude:.6f})"


def flightSummary(track: Track, utc_offset: int = 0) -> str:
    """
    Generate a summary string for the flight.
    Times are shown shifted by utc_offset seconds; the track itself stays in UTC.
    """
    meta = track.meta
    pilot = f' by {meta.Pilot}' if meta.Pilot else ''
    distance = f" {track.distance / METERS_PER_KILOMETER:.2f} km" if track.distance else ""

    # Format duration as hours:minutes
    duration_str = DEFAULT_NA_TEXT
    if track.duration is not None:
        total_seconds = track.duration.total_seconds()
        hours = int(total_seconds // SECONDS_PER_HOUR)
        minutes = int((total_seconds % SECONDS_PER_HOUR) // SECONDS_PER_MINUTE)
        duration_str = f"{hours} hours and {minutes} minutes"

    site = f" {meta.Site}" if meta.Site else ''
    glider = meta.GliderType or 'Unknown glider'
    if meta.GliderId:
        glider += f" ({meta.GliderId})"

    date_value = track.date or track.start_time
    date_str = toYMD(date_value) if date_value else "Unknown Date"
    heading = f"{glider} - {date_str}{distance}{pilot} ({duration_str})"
    underline = '\n'+ ('-' * len(heading))

    if track.fixes:
        start = _fixText(track.fixes[0], utc_offset)
        end = _fixText(track.fixes[-1], utc_offset)
    else:
        start = end = DEFAULT_NA_TEXT

    fixes = str(len(track.fixes))
    invalid = sum(not fix.valid for fix in track.fixes)
    if invalid:
        fixes += f" ({invalid} without a valid GPS fix)"

    lines = [
        f"{heading}{underline}",
        f"  From: {start}{site}",
        f"    To: {end}",
        f" Fixes: {fixes}",
        f"Logger: {meta.LoggerManufacturer or 'Unknown'}",
    ]
    if meta.GPSSource:
        lines.append(f"   GPS: {meta.GPSSource}")
    if meta.Datum:
        lines.append(f" Datum: {meta.Datum}")
    return '\n'.join(lines)
