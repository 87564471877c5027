from __future__ import annotations


class TrackboxError(Exception):
    """Base class for every error raised by trackbox."""


class InvalidJSON(TrackboxError, ValueError):
    """Metadata input is malformed or structurally wrong."""


class InvalidState(TrackboxError, RuntimeError):
    """Degenerate configuration, e.g. a zero base frame rate."""


class IOFailure(TrackboxError, OSError):
    """External tracker data is missing or unreadable."""
