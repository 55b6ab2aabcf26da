"""Asynchronous pipeline that turns a player embed URL into a single video file."""

from __future__ import annotations

import asyncio
import logging
import os
from typing import BinaryIO, Callable, List, Optional

from ..errors import SinkWriteError
from ..models import DownloadProgress, Segment
from ..utils.file_utils import ensure_directory
from ..utils.http_client import HttpClient
from .decryptor import KeyCache, decrypt
from .m3u8_parser import parse_segments, select_best
from .manifest_locator import ManifestLocator

# Called with (completed, total) once per segment; must return promptly.
ProgressCallback = Callable[[int, int], None]


def _ignore_progress(completed: int, total: int) -> None:
    pass


class VideoDownloader:
    """Downloads, decrypts and concatenates the best variant of an HLS video."""

    def __init__(self, http_client: HttpClient, locator: Optional[ManifestLocator] = None) -> None:
        self._http_client = http_client
        self._locator = locator or ManifestLocator(http_client)

    def download(self, entry_url: str, output_file: str, on_progress: Optional[ProgressCallback] = None) -> None:
        """Blocking entry point; writes the video to ``output_file``.

        A failed run leaves whatever was written so far in place.
        """

        asyncio.run(self._download_to_file(entry_url, output_file, on_progress or _ignore_progress))

    async def run(self, entry_url: str, sink: BinaryIO, on_progress: Optional[ProgressCallback] = None) -> None:
        segments = await self.resolve_segments(entry_url)
        await self.write_segments(segments, sink, on_progress or _ignore_progress)

    async def resolve_segments(self, entry_url: str) -> List[Segment]:
        master_url = await asyncio.to_thread(self._locator.locate, entry_url)
        logging.info("Found master playlist: %s", master_url)

        master_text = await asyncio.to_thread(self._http_client.fetch_text, master_url)
        stream_url = select_best(master_text, master_url)
        logging.info("Selected best quality stream: %s", stream_url)

        media_text = await asyncio.to_thread(self._http_client.fetch_text, stream_url)
        segments = parse_segments(media_text, stream_url)
        encrypted = sum(1 for segment in segments if segment.is_encrypted)
        logging.info("Found %s segments to download (%s encrypted)", len(segments), encrypted)
        return segments

    async def write_segments(self, segments: List[Segment], sink: BinaryIO, on_progress: ProgressCallback) -> None:
        key_cache = KeyCache(self._http_client)
        progress = DownloadProgress(total=len(segments))

        for segment in segments:
            progress = progress.advance()
            on_progress(progress.completed, progress.total)

            data = await self._http_client.fetch_bytes(segment.url)
            if segment.encryption is not None:
                key = await key_cache.get_key(segment.encryption.key_url)
                data = decrypt(data, key, segment.encryption.iv)

            try:
                sink.write(data)
            except OSError as exc:
                raise SinkWriteError(f"Failed to write segment {progress.completed}/{progress.total}: {exc}") from exc
            logging.debug("Wrote segment #%s (%s bytes)", progress.completed, len(data))

        logging.debug("Fetched %s distinct keys", key_cache.fetch_count)

    async def _download_to_file(self, entry_url: str, output_file: str, on_progress: ProgressCallback) -> None:
        try:
            segments = await self.resolve_segments(entry_url)
            try:
                ensure_directory(os.path.dirname(os.path.abspath(output_file)) or ".")
                handle = open(output_file, "wb")
            except OSError as exc:
                raise SinkWriteError(f"Cannot open {output_file} for writing: {exc}") from exc
            with handle:
                await self.write_segments(segments, handle, on_progress)
            logging.info("Saved video to %s", output_file)
        finally:
            await self._http_client.release_async_session()
