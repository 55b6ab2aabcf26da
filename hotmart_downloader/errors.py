"""Exceptions raised while locating, fetching and assembling a video."""

from __future__ import annotations


class DownloaderError(Exception):
    """Base class for every failure surfaced by the downloader."""


class InvalidEntryUrlError(DownloaderError):
    """Raised when the embed URL cannot be parsed or lacks a video id."""


class ManifestNotFoundError(DownloaderError):
    """Raised when neither the page nor the player API yields a master playlist."""


class NoVariantsFoundError(DownloaderError):
    """Raised when a master playlist has no usable stream line."""


class InvalidKeyUriError(DownloaderError):
    """Raised for an AES-128 ``#EXT-X-KEY`` directive without a URI."""


class InvalidKeyDataError(DownloaderError):
    """Raised for a malformed IV or when the key cannot be fetched."""


class DecryptionFailedError(DownloaderError):
    """Raised when a segment cannot be decrypted with the given key and IV."""


class TransportError(DownloaderError):
    """Raised when an HTTP request fails or returns a non-success status."""


class AuthenticationError(TransportError):
    """Raised when the player rejects the token or signature."""


class SinkWriteError(DownloaderError):
    """Raised when the output destination cannot be written."""
