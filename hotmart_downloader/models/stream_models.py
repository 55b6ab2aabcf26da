"""Pydantic models that describe the embed URL, HLS variants and media segments."""

from __future__ import annotations

from typing import Optional
from urllib.parse import parse_qs, urlparse

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from ..errors import InvalidEntryUrlError

AES_BLOCK_SIZE = 16
ZERO_IV = bytes(AES_BLOCK_SIZE)


class EntryReference(BaseModel):
    """The embed URL a download starts from, with its player credentials."""

    model_config = ConfigDict(frozen=True)

    url: str
    video_id: str = ""
    token: str = ""
    signature: str = ""

    @classmethod
    def from_url(cls, url: str) -> "EntryReference":
        parsed = urlparse((url or "").strip())
        if parsed.scheme not in {"http", "https"} or not parsed.netloc:
            raise InvalidEntryUrlError(f"Not an http(s) URL: {url!r}")

        segments = [part for part in parsed.path.split("/") if part]
        query = parse_qs(parsed.query)
        return cls(
            url=url.strip(),
            video_id=segments[-1] if segments else "",
            token=(query.get("token") or [""])[0],
            signature=(query.get("signature") or [""])[0],
        )


class Variant(BaseModel):
    """One alternative encoding listed by a master playlist."""

    bandwidth: int = Field(ge=0)
    url: str


class EncryptionReference(BaseModel):
    """Key location and IV shared by the segments following an ``#EXT-X-KEY``."""

    model_config = ConfigDict(frozen=True)

    key_url: str
    iv: bytes = ZERO_IV

    @field_validator("iv")
    @classmethod
    def _iv_is_one_block(cls, value: bytes) -> bytes:
        if len(value) != AES_BLOCK_SIZE:
            raise ValueError(f"IV must be {AES_BLOCK_SIZE} bytes, got {len(value)}")
        return value


class Segment(BaseModel):
    """A media segment and the key it is encrypted with, if any."""

    model_config = ConfigDict(frozen=True)

    url: str
    encryption: Optional[EncryptionReference] = None

    @property
    def is_encrypted(self) -> bool:
        return self.encryption is not None


class DownloadProgress(BaseModel):
    """Number of segments handed to the sink so far."""

    model_config = ConfigDict(frozen=True)

    completed: int = Field(default=0, ge=0)
    total: int = Field(ge=0)

    @model_validator(mode="after")
    def _completed_within_total(self) -> "DownloadProgress":
        if self.completed > self.total:
            raise ValueError("completed cannot exceed total")
        return self

    def advance(self) -> "DownloadProgress":
        return DownloadProgress(completed=self.completed + 1, total=self.total)
