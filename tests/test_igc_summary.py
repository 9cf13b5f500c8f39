"""
Tests for igc_summary.py flight summary generation
"""
from datetime import datetime, timezone
from igc_summary import flightSummary
from igc_model import FlightMeta, Track, TrackFix


class TestFlightSummary:
    """Tests for flightSummary function"""

    def test_basic_summary(self, two_fix_track):
        """Test basic summary generation with minimal data"""
        two_fix_track.distance = 1353.9
        summary = flightSummary(two_fix_track)

        assert 'Unknown glider' in summary
        assert '2024/01/01' in summary
        assert '1.35 km' in summary
        assert '0 hours and 5 minutes' in summary
        assert '10:00Z (46.000000, 7.000000)' in summary
        assert '10:05Z (46.010000, 7.010000)' in summary
        assert 'Fixes: 2' in summary

    def test_summary_with_metadata(self, two_fix_track):
        """Test summary with pilot, glider and site information"""
        two_fix_track.meta = FlightMeta(
            Pilot='Jane Doe',
            GliderType='Ozone Rush 6',
            GliderId='D-1234',
            Site='Fiesch',
            LoggerManufacturer='XCT'
        )
        summary = flightSummary(two_fix_track)

        assert summary.startswith('Ozone Rush 6 (D-1234) - 2024/01/01')
        assert 'by Jane Doe' in summary
        assert 'Fiesch' in summary
        assert 'Logger: XCT' in summary

    def test_heading_is_underlined(self, two_fix_track):
        heading, underline = flightSummary(two_fix_track).splitlines()[:2]
        assert underline == '-' * len(heading)

    def test_long_flight_duration(self):
        fixes = [
            TrackFix(datetime(2024, 6, 1, 9, 15, tzinfo=timezone.utc), 46.0, 7.0, 1000),
            TrackFix(datetime(2024, 6, 1, 12, 45, tzinfo=timezone.utc), 46.1, 7.1, 1000),
        ]
        summary = flightSummary(Track(fixes=fixes))
        assert '3 hours and 30 minutes' in summary
        assert '2024/06/01' in summary

    def test_empty_track(self):
        summary = flightSummary(Track())

        assert 'Unknown Date' in summary
        assert 'N/A' in summary
        assert 'Fixes: 0' in summary
        assert 'Logger: Unknown' in summary

    def test_times_shown_with_utc_offset(self, two_fix_track):
        summary = flightSummary(two_fix_track, 7200)
        assert '12:00+02:00 (46.000000, 7.000000)' in summary
        assert '12:05+02:00' in summary
        assert two_fix_track.start_time == datetime(2024, 1, 1, 10, 0, tzinfo=timezone.utc)

    def test_invalid_fixes_counted(self):
        fixes = [
            TrackFix(datetime(2024, 1, 1, 10, 0, tzinfo=timezone.utc), 46.0, 7.0, 1000),
            TrackFix(datetime(2024, 1, 1, 10, 1, tzinfo=timezone.utc), 46.0, 7.0, 1000, valid=False),
        ]
        summary = flightSummary(Track(fixes=fixes))
        assert 'Fixes: 2 (1 without a valid GPS fix)' in summary

    def test_gps_and_datum_lines(self, two_fix_track):
        two_fix_track.meta = FlightMeta(GPSSource='uBlox NEO-6', Datum='WGS-1984')
        lines = flightSummary(two_fix_track).splitlines()
        assert '   GPS: uBlox NEO-6' in lines
        assert ' Datum: WGS-1984' in lines

    def test_no_gps_or_datum_lines_when_missing(self, two_fix_track):
        summary = flightSummary(two_fix_track)
        assert 'GPS:' not in summary
        assert 'Datum:' not in summary
