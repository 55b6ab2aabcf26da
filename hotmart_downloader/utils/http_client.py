"""Shared HTTP helpers for the player page, the player API and CDN resources."""

from __future__ import annotations

import asyncio
import logging
import threading
from typing import Any, Dict

import aiohttp
import requests

from ..errors import AuthenticationError, TransportError

REAL_USER_AGENT = "Mozilla/5.0 (Windows NT 10.0; Win64; x64; rv:131.0) Gecko/20100101 Firefox/131.0"

PLAYER_ORIGIN = "https://player.hotmart.com"

DEFAULT_HEADERS: Dict[str, str] = {
    "User-Agent": REAL_USER_AGENT,
    "Accept": "*/*",
    "Accept-Language": "en-US,en;q=0.5",
    "Origin": PLAYER_ORIGIN,
    "Referer": f"{PLAYER_ORIGIN}/",
    "Connection": "keep-alive",
}

DEFAULT_TIMEOUT = 30


class HttpClient:
    """Handles page, API and CDN requests with the player's fixed headers."""

    def __init__(self, timeout: int = DEFAULT_TIMEOUT) -> None:
        self.timeout = timeout
        self._session = requests.Session()
        self._headers = DEFAULT_HEADERS.copy()
        self._session.headers.update(self._headers)

        # One session per event loop so concurrent runs never close each other's session.
        self._cdn_sessions: Dict[asyncio.AbstractEventLoop, aiohttp.ClientSession] = {}
        self._cdn_sessions_lock = threading.Lock()

    @property
    def headers(self) -> Dict[str, str]:
        return self._headers.copy()

    def fetch_text(self, url: str) -> str:
        """Fetch a page or playlist as text."""

        try:
            response = self._session.get(url, timeout=self.timeout)
        except requests.RequestException as exc:
            logging.error("GET %s failed: %s", url, exc)
            raise TransportError(f"GET {url} failed: {exc}") from exc
        self._check_status(response, url)
        return response.text

    def post_json(self, url: str, headers: Dict[str, str], body: Any) -> str:
        """POST ``body`` as JSON with extra ``headers`` and return the raw response text."""

        try:
            response = self._session.post(url, json=body, headers=headers, timeout=self.timeout)
        except requests.RequestException as exc:
            logging.error("HTTP POST to %s failed: %s", url, exc)
            raise TransportError(f"POST {url} failed: {exc}") from exc
        self._check_status(response, url)
        return response.text

    async def fetch_bytes(self, url: str) -> bytes:
        """Asynchronously download a CDN resource (segment or key)."""

        session = await self._get_cdn_async_session()
        try:
            async with session.get(url) as resp:
                if resp.status in {401, 403}:
                    raise AuthenticationError(f"CDN rejected {url} (status {resp.status})")
                resp.raise_for_status()
                return await resp.read()
        except aiohttp.ClientError as exc:
            logging.error("CDN download failed from %s: %s", url, exc)
            raise TransportError(f"GET {url} failed: {exc}") from exc
        except asyncio.TimeoutError as exc:
            logging.error("CDN download timed out for %s", url)
            raise TransportError(f"GET {url} timed out") from exc

    def _check_status(self, response: requests.Response, url: str) -> None:
        if response.status_code in {401, 403}:
            logging.error("Authentication failed (status %s) for %s", response.status_code, url)
            raise AuthenticationError("Player rejected the request; the embed token or signature may have expired.")
        try:
            response.raise_for_status()
        except requests.RequestException as exc:
            logging.error("Request to %s failed: %s", url, exc)
            raise TransportError(str(exc)) from exc

    async def _get_cdn_async_session(self) -> aiohttp.ClientSession:
        current_loop = asyncio.get_running_loop()
        with self._cdn_sessions_lock:
            session = self._cdn_sessions.get(current_loop)
            if session is None or session.closed:
                timeout = aiohttp.ClientTimeout(total=self.timeout)
                session = aiohttp.ClientSession(
                    timeout=timeout,
                    headers=self._headers.copy(),
                )
                self._cdn_sessions[current_loop] = session
        return session

    async def release_async_session(self) -> None:
        """Close the aiohttp session bound to the running event loop.

        Sessions opened by runs on other event loops are left alone.
        """

        current_loop = asyncio.get_running_loop()
        with self._cdn_sessions_lock:
            session = self._cdn_sessions.pop(current_loop, None)
        if session and not session.closed:
            try:
                await session.close()
            except aiohttp.ClientError as exc:
                logging.debug("Ignoring error while closing CDN session: %s", exc)

    def close(self) -> None:
        self._session.close()

        with self._cdn_sessions_lock:
            leftovers = list(self._cdn_sessions.items())
            self._cdn_sessions.clear()
        for loop, session in leftovers:
            if session.closed:
                continue
            if loop.is_closed():
                logging.debug("Dropping CDN session of a closed event loop")
            elif loop.is_running():
                asyncio.run_coroutine_threadsafe(session.close(), loop)
            else:
                loop.run_until_complete(session.close())

    def __enter__(self) -> "HttpClient":
        return self

    def __exit__(self, exc_type, exc_value, traceback) -> None:
        self.close()
