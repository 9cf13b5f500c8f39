"""
Tests for fit_messages.py message building
"""
import logging
import pytest
from datetime import datetime, timedelta, timezone

from fit_messages import FitMessageBuilder, buildMessages
from igc_config import FitSettings
from igc_errors import DomainError, EmptyTrackError
from igc_model import MessageKind, Track, TrackFix
from igc_utils import toFitTimestamp, toSemicircles

START = datetime(2024, 1, 1, 10, 0, 0, tzinfo=timezone.utc)


def make_track(count, step=60):
    fixes = [
        TrackFix(START + timedelta(seconds=i * step), 46.0 + i * 0.001, 7.0 + i * 0.001,
                 gps_altitude=1000 + i, pressure_altitude=990 + i)
        for i in range(count)
    ]
    return Track(fixes=fixes, distance=1234.5)


class TestMessageOrder:
    """Tests for the order and count of built messages"""

    def test_fixed_order(self):
        messages = buildMessages(make_track(3))
        kinds = [message.kind for message in messages]
        assert kinds == [
            MessageKind.FILE_ID,
            MessageKind.ACTIVITY,
            MessageKind.SESSION,
            MessageKind.LAP,
            MessageKind.RECORD,
            MessageKind.RECORD,
            MessageKind.RECORD,
        ]

    @pytest.mark.parametrize("count", [1, 2, 50])
    def test_one_record_per_fix(self, count):
        messages = buildMessages(make_track(count))
        assert len(messages) == count + 4
        assert sum(m.kind == MessageKind.RECORD for m in messages) == count

    def test_empty_track_rejected(self):
        with pytest.raises(EmptyTrackError):
            buildMessages(Track())


class TestSummaryMessages:
    """Tests for FileId, Activity, Session and Lap contents"""

    def test_reference_flight(self, two_fix_track):
        messages = buildMessages(two_fix_track)
        session = messages[2]
        records = messages[4:]

        assert session.get('total_elapsed_time') == 300
        assert len(records) == 2
        assert records[0].get('position_lat') == round(46.0 * 2 ** 31 / 180)

    def test_file_id(self, two_fix_track):
        file_id = buildMessages(two_fix_track)[0]
        assert file_id.get('type') == 'activity'
        assert file_id.get('manufacturer') == 'development'
        assert file_id.get('product') == 0
        assert file_id.get('serial_number') == 1234
        assert file_id.get('time_created') == toFitTimestamp(two_fix_track.start_time)

    def test_activity(self, two_fix_track):
        activity = buildMessages(two_fix_track)[1]
        assert activity.get('timestamp') == toFitTimestamp(two_fix_track.end_time)
        assert activity.get('total_timer_time') == 300
        assert activity.get('num_sessions') == 1

    def test_session(self):
        session = buildMessages(make_track(3))[2]
        assert session.as_dict() == {
            'message_index': 0,
            'timestamp': toFitTimestamp(START + timedelta(seconds=120)),
            'start_time': toFitTimestamp(START),
            'total_elapsed_time': 120,
            'total_timer_time': 120,
            'sport': 'flying',
            'sub_sport': 'fly_paraglide',
            'total_distance': 1234.5,
            'first_lap_index': 0,
            'num_laps': 1,
        }

    def test_lap_mirrors_session(self):
        messages = buildMessages(make_track(3))
        session, lap = messages[2], messages[3]
        for name in ('timestamp', 'start_time', 'total_elapsed_time', 'total_distance'):
            assert lap.get(name) == session.get(name)

    def test_single_fix_has_zero_elapsed_time(self):
        messages = buildMessages(make_track(1))
        assert messages[2].get('total_elapsed_time') == 0
        assert messages[3].get('total_elapsed_time') == 0

    def test_missing_distance_is_zero(self, two_fix_track):
        assert two_fix_track.distance is None
        session = buildMessages(two_fix_track)[2]
        assert session.get('total_distance') == 0

    def test_settings_override_identifiers(self, two_fix_track):
        settings = FitSettings(manufacturer='garmin', product=7, serial_number=99,
                               sub_sport='fly_paramotor')
        messages = buildMessages(two_fix_track, settings)
        assert messages[0].get('manufacturer') == 'garmin'
        assert messages[0].get('product') == 7
        assert messages[0].get('serial_number') == 99
        assert messages[2].get('sub_sport') == 'fly_paramotor'


class TestRecords:
    """Tests for Record messages"""

    def test_record_fields(self, two_fix_track):
        record = FitMessageBuilder().record(two_fix_track.fixes[1])
        assert record.as_dict() == {
            'timestamp': toFitTimestamp(two_fix_track.fixes[1].timestamp),
            'position_lat': toSemicircles(46.01),
            'position_long': toSemicircles(7.01),
            'altitude': 1100,
        }

    def test_pressure_altitude_source(self):
        fix = make_track(1).fixes[0]
        builder = FitMessageBuilder(FitSettings(altitude_source='pressure'))
        assert builder.record(fix).get('altitude') == 990

    def test_missing_altitude_is_zero(self):
        fix = TrackFix(START, 46.0, 7.0)
        assert FitMessageBuilder().record(fix).get('altitude') == 0

    def test_out_of_range_latitude_rejected(self):
        fix = TrackFix(START, 91.0, 7.0, 1000)
        with pytest.raises(DomainError):
            FitMessageBuilder().record(fix)

    def test_out_of_range_latitude_clamped(self):
        fix = TrackFix(START, 91.0, 181.0, 1000)
        builder = FitMessageBuilder(FitSettings(coordinate_policy='clamp'))
        record = builder.record(fix)
        assert record.get('position_lat') == 2 ** 30
        assert record.get('position_long') == 2 ** 31 - 1


class TestFixOrdering:
    """Tests for unsorted fix handling"""

    def unsorted_track(self):
        track = make_track(3)
        track.fixes.reverse()
        return track

    def test_sorted_by_default(self, caplog):
        with caplog.at_level(logging.WARNING):
            messages = buildMessages(self.unsorted_track())

        records = messages[4:]
        stamps = [record.get('timestamp') for record in records]
        assert stamps == sorted(stamps)
        assert messages[2].get('total_elapsed_time') == 120
        assert "not in ascending time order" in caplog.text

    def test_rejected_when_configured(self):
        settings = FitSettings(unsorted_policy='reject')
        with pytest.raises(DomainError):
            buildMessages(self.unsorted_track(), settings)

    def test_equal_timestamps_are_not_unsorted(self, caplog):
        fixes = [TrackFix(START, 46.0, 7.0, 1000), TrackFix(START, 46.1, 7.1, 1000)]
        with caplog.at_level(logging.WARNING):
            messages = buildMessages(Track(fixes=fixes))
        assert messages[2].get('total_elapsed_time') == 0
        assert caplog.text == ""
