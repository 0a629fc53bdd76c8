"""
Core Enumerations

Centralized enum definitions for consistent typing across the codebase.
Using StrEnum (Python 3.11+) for string-based enums that serialize naturally.
"""

from enum import StrEnum


class MessageType(StrEnum):
    """Severity of a message posted to the ingest inbox."""

    INFO = "info"
    ERROR = "error"


class ErrorKind(StrEnum):
    """Classification carried by a failed UnitResult."""

    NONE = "none"
    UNIT_FATAL = "unit_fatal"              # Exception escaped a unit call
    STORE = "store"                        # Findings store rejected a write
    IO = "io"                              # Read/close failure on evidence
    PARSE = "parse"                        # Malformed data for the parser


class LifecycleState(StrEnum):
    """States of an extractor run driven by the lifecycle controller."""

    CREATED = "created"
    INITIALIZED = "initialized"
    RUNNING = "running"
    COMPLETED = "completed"
    STOPPED = "stopped"


class FileType(StrEnum):
    """Kind of content object a file reference points to."""

    FS = "fs"                          # Regular filesystem file
    UNALLOC_BLOCKS = "unalloc_blocks"  # Unallocated space container


class FileKnown(StrEnum):
    """Hash-lookup status of a file."""

    UNKNOWN = "unknown"
    KNOWN = "known"  # Known-benign (e.g. NSRL match)


class ArtifactType(StrEnum):
    """Artifact types written to the findings store."""

    METADATA_EXIF = "metadata_exif"
    WEB_HISTORY = "web_history"
    WEB_BOOKMARK = "web_bookmark"
    WEB_COOKIE = "web_cookie"
    WEB_DOWNLOAD = "web_download"
    WEB_SEARCH_QUERY = "web_search_query"
    RECENT_OBJECT = "recent_object"
    OS_INFO = "os_info"
    DEVICE_ATTACHED = "device_attached"


class AttributeType(StrEnum):
    """Attribute vocabulary for artifact key/value pairs."""

    # Time (integer epoch seconds)
    DATETIME = "datetime"
    DATETIME_CREATED = "datetime_created"
    DATETIME_ACCESSED = "datetime_accessed"

    # Geolocation (double)
    GEO_LATITUDE = "geo_latitude"
    GEO_LONGITUDE = "geo_longitude"
    GEO_ALTITUDE = "geo_altitude"

    # Devices
    DEVICE_MAKE = "device_make"
    DEVICE_MODEL = "device_model"
    DEVICE_ID = "device_id"

    # Web
    URL = "url"
    DOMAIN = "domain"
    TITLE = "title"
    TEXT = "text"
    PROG_NAME = "prog_name"

    # Generic
    NAME = "name"
    VALUE = "value"
    PATH = "path"
    VERSION = "version"
    OWNER = "owner"
    ORGANIZATION = "organization"
