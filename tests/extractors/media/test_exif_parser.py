"""
Tests for the EXIF reader and attribute mapping.
"""

import io
from datetime import datetime, timezone

import pytest
from PIL import ExifTags, Image

from core.enums import AttributeType
from extractors.exceptions import ExifParseError
from extractors.media.exif._parser import (
    ExifMetadata,
    _gps_altitude,
    _gps_coordinate,
    _parse_exif_datetime,
    build_exif_attributes,
    read_exif_metadata,
)


def _jpeg_bytes(exif=None) -> bytes:
    buffer = io.BytesIO()
    image = Image.new("RGB", (8, 8), color=(200, 10, 10))
    if exif is not None:
        image.save(buffer, format="JPEG", exif=exif)
    else:
        image.save(buffer, format="JPEG")
    return buffer.getvalue()


# =============================================================================
# read_exif_metadata
# =============================================================================

class TestReadExifMetadata:
    def test_camera_fields(self):
        exif = Image.Exif()
        exif[ExifTags.Base.Make] = "Canon"
        exif[ExifTags.Base.Model] = "Canon EOS 5D"

        metadata = read_exif_metadata(io.BytesIO(_jpeg_bytes(exif)), "a.jpg")

        assert metadata.make == "Canon"
        assert metadata.model == "Canon EOS 5D"
        assert metadata.latitude is None

    def test_jpeg_without_exif(self):
        metadata = read_exif_metadata(io.BytesIO(_jpeg_bytes()), "plain.jpg")
        assert metadata == ExifMetadata()

    def test_not_an_image(self):
        with pytest.raises(ExifParseError) as excinfo:
            read_exif_metadata(io.BytesIO(b"definitely not a jpeg" * 10), "x.jpg")
        assert excinfo.value.path == "x.jpg"

    def test_stream_left_open(self):
        stream = io.BytesIO(_jpeg_bytes())
        read_exif_metadata(stream)
        assert not stream.closed


# =============================================================================
# Field conversion helpers
# =============================================================================

class TestHelpers:
    def test_datetime_is_utc(self):
        assert _parse_exif_datetime("2024:01:15 10:30:00") == datetime(
            2024, 1, 15, 10, 30, tzinfo=timezone.utc
        )

    @pytest.mark.parametrize("value", [None, "", "0000:00:00 00:00:00", "garbage"])
    def test_bad_datetime(self, value):
        assert _parse_exif_datetime(value) is None

    def test_coordinate_north_east(self):
        assert _gps_coordinate((52, 30, 0), "N", "S") == pytest.approx(52.5)

    def test_coordinate_south_is_negative(self):
        assert _gps_coordinate((33, 52, 4.8), "S", "S") == pytest.approx(-33.868)

    def test_coordinate_malformed(self):
        assert _gps_coordinate((52, 30), "N", "S") is None
        assert _gps_coordinate(None, "N", "S") is None

    def test_altitude_below_sea_level(self):
        assert _gps_altitude(12.5, 1) == -12.5
        assert _gps_altitude(12.5, 0) == 12.5
        assert _gps_altitude(None, 0) is None


# =============================================================================
# build_exif_attributes
# =============================================================================

class TestBuildAttributes:
    def test_all_fields(self):
        metadata = ExifMetadata(
            datetime_original=datetime(2024, 1, 15, 10, 30, tzinfo=timezone.utc),
            latitude=52.5,
            longitude=13.4,
            altitude=34.0,
            make="Canon",
            model="EOS",
        )

        attributes = build_exif_attributes(metadata, "Exif Parser")

        assert [a.attribute_type for a in attributes] == [
            AttributeType.DATETIME_CREATED,
            AttributeType.GEO_LATITUDE,
            AttributeType.GEO_LONGITUDE,
            AttributeType.GEO_ALTITUDE,
            AttributeType.DEVICE_MODEL,
            AttributeType.DEVICE_MAKE,
        ]
        assert attributes[0].value == 1705314600
        assert all(a.source == "Exif Parser" for a in attributes)

    def test_latitude_without_longitude_dropped(self):
        attributes = build_exif_attributes(ExifMetadata(latitude=1.0, altitude=5.0), "Exif Parser")
        assert [a.attribute_type for a in attributes] == [AttributeType.GEO_ALTITUDE]

    def test_nothing_present(self):
        assert build_exif_attributes(ExifMetadata(make=""), "Exif Parser") == []
