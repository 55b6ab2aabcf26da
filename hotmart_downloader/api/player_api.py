"""API client that asks the player backend for a video's HLS master playlist."""

from __future__ import annotations

import json
import logging
import time
from typing import Any, Callable, Dict, Optional, Sequence

from ..errors import InvalidEntryUrlError, ManifestNotFoundError
from ..models import EntryReference
from ..utils.http_client import HttpClient

CONTENT_URL = "https://contentplayer.hotmart.com/video/content"
HLS_URL_PATHS: Sequence[Sequence[str]] = (
    ("streaming", "hls", "url"),
    ("response", "streaming", "hls", "url"),
    ("data", "streaming", "hls", "url"),
)


def lookup_path(data: Any, path: Sequence[Any]) -> Any:
    """Walks nested dicts/lists along ``path``; returns None on the first miss."""

    current = data
    for step in path:
        if isinstance(step, int):
            if not isinstance(current, list) or not -len(current) <= step < len(current):
                return None
            current = current[step]
        else:
            if not isinstance(current, dict):
                return None
            current = current.get(step)
        if current is None:
            return None
    return current


def _now_ms() -> int:
    return int(time.time() * 1000)


class PlayerAPI:
    """Requests the streaming config of a video using its embed credentials."""

    def __init__(self, http_client: HttpClient, clock: Callable[[], int] = _now_ms) -> None:
        self._client = http_client
        self._clock = clock

    def build_request(self, entry: EntryReference, timestamp_ms: Optional[int] = None) -> tuple[Dict[str, str], Dict[str, Any]]:
        if not entry.video_id:
            raise InvalidEntryUrlError(f"No video id in {entry.url}")
        headers = {
            "Content-Type": "application/json",
            "Accept": "application/json, text/plain, */*",
            "x-hotmart-app": "web-player",
            "x-hotmart-key": entry.token,
        }
        payload = {
            "videoId": entry.video_id,
            "token": entry.token,
            "timestamp": self._clock() if timestamp_ms is None else timestamp_ms,
            "signature": entry.signature,
            "captcha": None,
            "locale": "en",
        }
        return headers, payload

    def get_hls_url(self, entry: EntryReference, timestamp_ms: Optional[int] = None) -> str:
        headers, payload = self.build_request(entry, timestamp_ms)
        logging.info("Requesting streaming config for video %s", entry.video_id)
        body = self._client.post_json(CONTENT_URL, headers, payload)

        try:
            config = json.loads(body)
        except json.JSONDecodeError as exc:
            raise ManifestNotFoundError(f"Player API returned non-JSON body for {entry.video_id}") from exc

        for path in HLS_URL_PATHS:
            url = lookup_path(config, path)
            if isinstance(url, str) and url:
                return url
        raise ManifestNotFoundError(f"Could not find HLS URL in player API response for {entry.video_id}")
