"""Download pipeline: manifest lookup, playlist parsing, decryption."""

from .decryptor import KeyCache, decrypt
from .m3u8_parser import parse_segments, select_best
from .manifest_locator import ManifestLocator
from .video_downloader import ProgressCallback, VideoDownloader

__all__ = [
    "ManifestLocator",
    "select_best",
    "parse_segments",
    "KeyCache",
    "decrypt",
    "VideoDownloader",
    "ProgressCallback",
]
