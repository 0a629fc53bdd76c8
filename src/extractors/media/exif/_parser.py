"""
EXIF metadata reader and attribute mapping.

read_exif_metadata() runs a JPEG stream through Pillow and returns only the
fields the extractor maps; build_exif_attributes() applies the mapping
policy:

- a field is mapped only when present and non-empty
- DateTimeOriginal becomes integer epoch seconds (EXIF carries no zone; UTC is assumed)
- latitude/longitude are emitted as a pair or not at all
- altitude is independent of the coordinate pair
"""

from __future__ import annotations

import math
import struct
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, BinaryIO, List, Optional

from PIL import ExifTags, Image, UnidentifiedImageError
from PIL.Image import DecompressionBombError

from core.enums import AttributeType
from core.findings import Attribute
from extractors._shared.timestamps import datetime_to_epoch
from extractors.exceptions import ExifParseError

EXIF_DATETIME_FORMAT = "%Y:%m:%d %H:%M:%S"


@dataclass(frozen=True)
class ExifMetadata:
    """The subset of EXIF fields the extractor maps to attributes."""

    datetime_original: Optional[datetime] = None
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    altitude: Optional[float] = None
    make: Optional[str] = None
    model: Optional[str] = None


def read_exif_metadata(stream: BinaryIO, path: str = "") -> ExifMetadata:
    """
    Parse EXIF fields from a JPEG stream.

    The stream is not closed here; the caller owns it.

    Raises:
        ExifParseError: If the data is not a decodable JPEG
        OSError: On read failures from the underlying stream
    """
    try:
        with Image.open(stream, formats=["JPEG"]) as img:
            exif = img.getexif()
            ifd0 = dict(exif)
            exif_ifd = dict(exif.get_ifd(ExifTags.IFD.Exif))
            gps_ifd = dict(exif.get_ifd(ExifTags.IFD.GPSInfo))
    except (UnidentifiedImageError, DecompressionBombError, SyntaxError, struct.error, ValueError) as exc:
        raise ExifParseError(path, str(exc)) from exc

    latitude = _gps_coordinate(
        gps_ifd.get(ExifTags.GPS.GPSLatitude), gps_ifd.get(ExifTags.GPS.GPSLatitudeRef), "S"
    )
    longitude = _gps_coordinate(
        gps_ifd.get(ExifTags.GPS.GPSLongitude), gps_ifd.get(ExifTags.GPS.GPSLongitudeRef), "W"
    )

    return ExifMetadata(
        datetime_original=_parse_exif_datetime(exif_ifd.get(ExifTags.Base.DateTimeOriginal)),
        latitude=latitude,
        longitude=longitude,
        altitude=_gps_altitude(
            gps_ifd.get(ExifTags.GPS.GPSAltitude), gps_ifd.get(ExifTags.GPS.GPSAltitudeRef)
        ),
        make=_clean_string(ifd0.get(ExifTags.Base.Make)),
        model=_clean_string(ifd0.get(ExifTags.Base.Model)),
    )


def build_exif_attributes(metadata: ExifMetadata, source: str) -> List[Attribute]:
    """Map parsed EXIF fields onto attributes (possibly an empty list)."""
    attributes: List[Attribute] = []

    created = datetime_to_epoch(metadata.datetime_original)
    if created is not None:
        attributes.append(Attribute(AttributeType.DATETIME_CREATED, source, created))

    if metadata.latitude is not None and metadata.longitude is not None:
        attributes.append(Attribute(AttributeType.GEO_LATITUDE, source, float(metadata.latitude)))
        attributes.append(Attribute(AttributeType.GEO_LONGITUDE, source, float(metadata.longitude)))

    if metadata.altitude is not None:
        attributes.append(Attribute(AttributeType.GEO_ALTITUDE, source, float(metadata.altitude)))

    if metadata.model:
        attributes.append(Attribute(AttributeType.DEVICE_MODEL, source, metadata.model))
    if metadata.make:
        attributes.append(Attribute(AttributeType.DEVICE_MAKE, source, metadata.make))

    return attributes


def _parse_exif_datetime(value: Any) -> Optional[datetime]:
    text = _clean_string(value)
    if not text:
        return None
    try:
        parsed = datetime.strptime(text[:19], EXIF_DATETIME_FORMAT)
    except ValueError:
        return None
    return parsed.replace(tzinfo=timezone.utc)


def _to_float(value: Any) -> Optional[float]:
    try:
        result = float(value)
    except (TypeError, ValueError, ZeroDivisionError):
        return None
    if math.isnan(result) or math.isinf(result):
        return None
    return result


def _gps_coordinate(dms: Any, ref: Any, negative_ref: str) -> Optional[float]:
    """Convert an EXIF (degrees, minutes, seconds) triple to decimal degrees."""
    if not isinstance(dms, (tuple, list)) or len(dms) != 3:
        return None
    parts = [_to_float(part) for part in dms]
    if any(part is None for part in parts):
        return None
    degrees, minutes, seconds = parts
    value = degrees + minutes / 60.0 + seconds / 3600.0
    if _clean_string(ref).upper() == negative_ref:
        value = -value
    return value


def _gps_altitude(altitude: Any, ref: Any) -> Optional[float]:
    value = _to_float(altitude) if altitude is not None else None
    if value is None:
        return None
    # Ref 1 means below sea level
    if ref in (1, b"\x01"):
        value = -value
    return value


def _clean_string(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, bytes):
        value = value.decode("utf-8", errors="replace")
    return str(value).strip().strip("\x00").strip()
