"""Fixtures for testing the Hotmart downloader without network access."""

from __future__ import annotations

import json
import logging
from typing import Any, Callable, Dict, List, Optional, Tuple

import pytest
from Crypto.Cipher import AES
from Crypto.Util.Padding import pad

from hotmart_downloader.errors import TransportError

ENTRY_URL = "https://player.hotmart.com/embed/abc123?token=tok-1&signature=sig-1"
MASTER_URL = "https://cdn.example.com/video/master.m3u8"


class FakeTransport:
    """In-memory stand-in for HttpClient that records every call."""

    def __init__(
        self,
        texts: Optional[Dict[str, str]] = None,
        blobs: Optional[Dict[str, bytes]] = None,
        post_response: Optional[str] = None,
    ) -> None:
        self.texts = dict(texts or {})
        self.blobs = dict(blobs or {})
        self.post_response = post_response
        self.text_calls: List[str] = []
        self.byte_calls: List[str] = []
        self.posts: List[Tuple[str, Dict[str, str], Any]] = []
        self.released = 0

    def fetch_text(self, url: str) -> str:
        self.text_calls.append(url)
        if url not in self.texts:
            raise TransportError(f"404 Not Found for url: {url}")
        return self.texts[url]

    def post_json(self, url: str, headers: Dict[str, str], body: Any) -> str:
        self.posts.append((url, headers, body))
        if self.post_response is None:
            raise TransportError(f"503 Service Unavailable for url: {url}")
        return self.post_response

    async def fetch_bytes(self, url: str) -> bytes:
        self.byte_calls.append(url)
        if url not in self.blobs:
            raise TransportError(f"404 Not Found for url: {url}")
        return self.blobs[url]

    async def release_async_session(self) -> None:
        self.released += 1


def embed_page(master_url: str) -> str:
    """Build an embed page carrying ``master_url`` in its __NEXT_DATA__ payload."""
    payload = {"props": {"pageProps": {"applicationData": {"mediaAssets": [{"url": master_url}]}}}}
    return (
        "<html><head></head><body><div id='__next'></div>"
        f'<script id="__NEXT_DATA__" type="application/json">{json.dumps(payload)}</script>'
        "</body></html>"
    )


def encrypt(plaintext: bytes, key: bytes, iv: bytes) -> bytes:
    """AES-128-CBC encrypt with PKCS7 padding."""
    return AES.new(key, AES.MODE_CBC, iv).encrypt(pad(plaintext, AES.block_size))


@pytest.fixture(name="caplog")
def caplog_fixture(caplog: pytest.LogCaptureFixture) -> pytest.LogCaptureFixture:
    """Set log level to debug for tests using the caplog fixture."""
    caplog.set_level(logging.DEBUG)
    return caplog


@pytest.fixture
def make_transport() -> Callable[..., FakeTransport]:
    """Return a factory for call-counting fake transports."""
    return FakeTransport
