"""AES-128-CBC segment decryption and a per-run key cache."""

from __future__ import annotations

import logging
from typing import Dict

from Crypto.Cipher import AES
from Crypto.Util.Padding import unpad

from ..errors import DecryptionFailedError, InvalidKeyDataError, TransportError
from ..utils.http_client import HttpClient


def decrypt(ciphertext: bytes, key: bytes, iv: bytes) -> bytes:
    """Decrypts one AES-128-CBC segment and strips its PKCS7 padding."""

    if len(key) != 16:
        raise DecryptionFailedError(f"AES-128 key must be 16 bytes, got {len(key)}")
    if len(iv) != AES.block_size:
        raise DecryptionFailedError(f"IV must be {AES.block_size} bytes, got {len(iv)}")
    if not ciphertext or len(ciphertext) % AES.block_size:
        raise DecryptionFailedError(
            f"Ciphertext length {len(ciphertext)} is not a positive multiple of {AES.block_size}"
        )

    cipher = AES.new(key, AES.MODE_CBC, iv)
    try:
        return unpad(cipher.decrypt(ciphertext), AES.block_size, style="pkcs7")
    except ValueError as exc:
        raise DecryptionFailedError(f"Invalid PKCS7 padding: {exc}") from exc


class KeyCache:
    """Fetches each key URL at most once for the lifetime of one download."""

    def __init__(self, http_client: HttpClient) -> None:
        self._http_client = http_client
        self._keys: Dict[str, bytes] = {}
        self.fetch_count = 0

    def __contains__(self, key_url: str) -> bool:
        return key_url in self._keys

    def __len__(self) -> int:
        return len(self._keys)

    async def get_key(self, key_url: str) -> bytes:
        cached = self._keys.get(key_url)
        if cached is not None:
            return cached

        self.fetch_count += 1
        try:
            key = await self._http_client.fetch_bytes(key_url)
        except TransportError as exc:
            raise InvalidKeyDataError(f"Unable to fetch key {key_url}: {exc}") from exc
        if len(key) != 16:
            logging.warning("Key at %s is %s bytes, expected 16", key_url, len(key))
        logging.debug("Fetched key %s", key_url)
        self._keys[key_url] = key
        return key
