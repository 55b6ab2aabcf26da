"""Finds the master playlist URL behind a player embed URL."""

from __future__ import annotations

import json
import logging
from typing import Optional

from ..api.player_api import PlayerAPI, lookup_path
from ..errors import TransportError
from ..models import DirectHit, EntryReference, LocatorOutcome, NeedsApiFallback
from ..utils.http_client import HttpClient

NEXT_DATA_OPEN = '<script id="__NEXT_DATA__" type="application/json">'
NEXT_DATA_CLOSE = "</script>"
MEDIA_URL_PATH = ("props", "pageProps", "applicationData", "mediaAssets", 0, "url")


def extract_next_data(page_html: str) -> Optional[str]:
    """Returns the JSON text embedded in the page's ``__NEXT_DATA__`` script, if any."""

    start = page_html.find(NEXT_DATA_OPEN)
    if start < 0:
        return None
    json_start = start + len(NEXT_DATA_OPEN)
    end = page_html.find(NEXT_DATA_CLOSE, json_start)
    if end < 0:
        return None
    return page_html[json_start:end]


class ManifestLocator:
    """Tries the embed page first and the player API second."""

    def __init__(self, http_client: HttpClient, player_api: Optional[PlayerAPI] = None) -> None:
        self._http_client = http_client
        self._player_api = player_api or PlayerAPI(http_client)

    def try_direct(self, entry_url: str) -> LocatorOutcome:
        try:
            page_html = self._http_client.fetch_text(entry_url)
        except TransportError as exc:
            return NeedsApiFallback(reason=f"embed page request failed: {exc}")

        raw_json = extract_next_data(page_html)
        if raw_json is None:
            return NeedsApiFallback(reason="embed page has no __NEXT_DATA__ payload")
        try:
            data = json.loads(raw_json)
        except json.JSONDecodeError as exc:
            return NeedsApiFallback(reason=f"__NEXT_DATA__ is not valid JSON: {exc}")

        url = lookup_path(data, MEDIA_URL_PATH)
        if not isinstance(url, str) or not url:
            return NeedsApiFallback(reason="__NEXT_DATA__ has no media asset URL")
        return DirectHit(url=url)

    def locate(self, entry_url: str) -> str:
        entry = EntryReference.from_url(entry_url)

        outcome = self.try_direct(entry.url)
        if isinstance(outcome, DirectHit):
            logging.info("Found master playlist in embed page")
            return outcome.url

        logging.warning("Page parsing failed: %s. Trying player API...", outcome.reason)
        return self._player_api.get_hls_url(entry)
