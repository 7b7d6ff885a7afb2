"""
Custom exception hierarchy for the media linker.

Classification never raises: an unrecognized name is simply unclassified.
These types cover configuration mistakes and filesystem failures, which are
the only hard errors the pipeline knows about.
"""


class MediaLinkerError(Exception):
    """Base exception for all media linker errors."""
    pass


class ConfigError(MediaLinkerError):
    """Raised when scan roots or destination mappings are unusable."""
    pass


class ScanError(MediaLinkerError):
    """Raised when a scan root cannot be read."""
    pass


class FileOperationError(MediaLinkerError):
    """Raised when creating or removing a destination entry fails."""
    pass
