"""
Exceptions for extractor modules.
"""


class ExtractorError(Exception):
    """Base exception for extractor errors."""
    pass


class ExtractionFailedError(ExtractorError):
    """Raised when an extractor cannot complete its process step."""
    pass


class ConfigurationError(ExtractorError):
    """Raised when extractor configuration is invalid."""
    pass


class ExifParseError(ExtractorError):
    """Raised when image metadata cannot be parsed (malformed data)."""

    def __init__(self, path: str, reason: str = ""):
        self.path = path
        self.reason = reason
        message = f"Failed to parse image metadata: {path}"
        if reason:
            message += f" ({reason})"
        super().__init__(message)


class LnkParseError(ExtractorError):
    """Raised when a Windows shortcut (.lnk) cannot be parsed."""

    def __init__(self, path: str, reason: str = ""):
        self.path = path
        self.reason = reason
        message = f"Failed to parse shortcut: {path}"
        if reason:
            message += f" ({reason})"
        super().__init__(message)
