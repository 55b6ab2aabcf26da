"""Data models for entry URLs, playlists, segments and download progress."""

from .locator_models import DirectHit, LocatorOutcome, NeedsApiFallback
from .stream_models import DownloadProgress, EncryptionReference, EntryReference, Segment, Variant

__all__ = [
    "EntryReference",
    "Variant",
    "EncryptionReference",
    "Segment",
    "DownloadProgress",
    "DirectHit",
    "NeedsApiFallback",
    "LocatorOutcome",
]
