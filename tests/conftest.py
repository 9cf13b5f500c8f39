"""
Pytest configuration and shared fixtures for IGC2FIT tests
"""
import io
import pytest
from datetime import datetime, date, timezone

import fitdecode
import garmin_fit_sdk

from igc_model import Track, TrackFix


@pytest.fixture
def sample_igc_content():
    """Sample IGC file content for testing"""
    return """AXCT7a8b9c0
HFDTE010124
HFPLTPILOTINCHARGE:Jane Doe
HFGTYGLIDERTYPE:Ozone Rush 6
HFGIDGLIDERID:D-1234
HFDTM100GPSDATUM:WGS-1984
HFSITSITE:Fiesch
B1000004600000N00700000EA0100001000
B1001004600100N00700100EA0102001020
B1002004600200N00700200EA0104001040
B1003004600300N00700300EA0106001060
B1005004600600N00700600EA0110001100
"""


@pytest.fixture
def sample_igc_file(tmp_path, sample_igc_content):
    """Create a temporary IGC file for testing"""
    igc_file = tmp_path / "test_flight.igc"
    igc_file.write_text(sample_igc_content)
    return igc_file


@pytest.fixture
def sample_config_content():
    """Sample configuration file content"""
    return """[Defaults]
Timezone = 0
OutPath = .
"""


@pytest.fixture
def sample_config_file(tmp_path, sample_config_content):
    """Create a temporary config file for testing"""
    config_file = tmp_path / "test_config.conf"
    config_file.write_text(sample_config_content)
    return config_file


@pytest.fixture
def temp_output_dir(tmp_path):
    """Create a temporary output directory"""
    output_dir = tmp_path / "output"
    output_dir.mkdir()
    return output_dir


@pytest.fixture
def mock_cli_args(sample_config_file, temp_output_dir):
    """Mock command-line arguments for testing"""
    class MockArgs:
        def __init__(self):
            self.config = str(sample_config_file)
            self.timezone = None
            self.output = str(temp_output_dir)
            self.dst = None
            self.altitude_source = None
            self.clamp = False
            self.verbose = False
            self.trackfile = []

    return MockArgs()


@pytest.fixture
def two_fix_track():
    """Two fixes five minutes apart, climbing 100 m"""
    return Track(
        fixes=[
            TrackFix(datetime(2024, 1, 1, 10, 0, 0, tzinfo=timezone.utc), 46.0, 7.0, 1000),
            TrackFix(datetime(2024, 1, 1, 10, 5, 0, tzinfo=timezone.utc), 46.01, 7.01, 1100),
        ],
        date=date(2024, 1, 1),
    )


@pytest.fixture
def garmin_decode():
    """Decode FIT bytes with the Garmin SDK, failing on any decoder error"""
    def decode(data: bytes) -> dict:
        stream = garmin_fit_sdk.Stream.from_byte_array(bytearray(data))
        decoder = garmin_fit_sdk.Decoder(stream)
        messages, errors = decoder.read()
        assert errors == []
        return messages

    return decode


@pytest.fixture
def fitdecode_frames():
    """Read FIT bytes with fitdecode (CRC checked) and return all frames"""
    def read(data: bytes) -> list:
        with fitdecode.FitReader(io.BytesIO(data)) as reader:
            return list(reader)

    return read
