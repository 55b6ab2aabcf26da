"""Tools for parsing HLS master and media playlists."""

from __future__ import annotations

import logging
import re
from typing import Dict, List, Optional
from urllib.parse import urljoin

from ..errors import InvalidKeyDataError, InvalidKeyUriError, NoVariantsFoundError
from ..models import EncryptionReference, Segment, Variant
from ..models.stream_models import AES_BLOCK_SIZE

STREAM_INF_TAG = "#EXT-X-STREAM-INF"
KEY_TAG = "#EXT-X-KEY:"
SUPPORTED_METHOD = "AES-128"

ATTRIBUTE_RE = re.compile(r'([A-Z0-9-]+)=("[^"]*"|[^,]*)')


def parse_attribute_list(line: str) -> Dict[str, str]:
    """Returns the ``KEY=value`` pairs after a directive's colon, quotes stripped."""

    _, _, attributes = line.partition(":")
    return {key: value.strip('"') for key, value in ATTRIBUTE_RE.findall(attributes)}


def _parse_bandwidth(line: str) -> Optional[int]:
    raw = parse_attribute_list(line).get("BANDWIDTH", "").strip()
    if not raw.isdecimal():
        return None
    return int(raw)


def select_best(master_playlist_text: str, base_url: str) -> str:
    """Returns the absolute URL of the highest-bandwidth variant.

    Ties keep the variant listed first.
    """

    best: Optional[Variant] = None
    best_bandwidth: Optional[int] = None
    awaiting_uri = False

    for raw_line in master_playlist_text.splitlines():
        line = raw_line.strip()
        if not line:
            continue
        if line.startswith(STREAM_INF_TAG):
            bandwidth = _parse_bandwidth(line)
            if bandwidth is None:
                logging.debug("Ignoring stream entry without usable BANDWIDTH: %s", line)
                continue
            if best_bandwidth is None or bandwidth > best_bandwidth:
                best_bandwidth = bandwidth
                best = None
                awaiting_uri = True
        elif line.startswith("#"):
            continue
        elif awaiting_uri:
            best = Variant(bandwidth=best_bandwidth, url=line)
            awaiting_uri = False

    if best is None:
        raise NoVariantsFoundError(f"No stream variants found in master playlist {base_url}")

    stream_url = urljoin(base_url, best.url)
    logging.debug("Selected variant %s (bandwidth=%s)", stream_url, best.bandwidth)
    return stream_url


def _parse_iv(raw_iv: Optional[str], line: str) -> bytes:
    if raw_iv is None:
        return bytes(AES_BLOCK_SIZE)
    raw_iv = raw_iv.strip()
    if raw_iv[:2] not in {"0x", "0X"}:
        raise InvalidKeyDataError(f"IV without 0x prefix in {line!r}")
    hex_digits = raw_iv[2:]
    if len(hex_digits) > AES_BLOCK_SIZE * 2:
        raise InvalidKeyDataError(f"IV longer than {AES_BLOCK_SIZE} bytes in {line!r}")
    try:
        return bytes.fromhex(hex_digits.zfill(AES_BLOCK_SIZE * 2))
    except ValueError as exc:
        raise InvalidKeyDataError(f"Malformed IV in {line!r}") from exc


def _next_key_state(
    line: str,
    base_url: str,
    current: Optional[EncryptionReference],
) -> Optional[EncryptionReference]:
    attributes = parse_attribute_list(line)
    method = attributes.get("METHOD", "")
    if method != SUPPORTED_METHOD:
        if method and method != "NONE":
            logging.warning("Unsupported key method %s; following segments are treated as clear", method)
        elif current is not None:
            logging.debug("Encryption ends at %s", line)
        return None

    uri = attributes.get("URI")
    if not uri:
        raise InvalidKeyUriError(f"AES-128 key directive without URI: {line!r}")
    return EncryptionReference(key_url=urljoin(base_url, uri), iv=_parse_iv(attributes.get("IV"), line))


def parse_segments(media_playlist_text: str, base_url: str) -> List[Segment]:
    """Returns the playlist's segments in file order, each with its key snapshot."""

    segments: List[Segment] = []
    key_state: Optional[EncryptionReference] = None

    for raw_line in media_playlist_text.splitlines():
        line = raw_line.strip()
        if not line:
            continue
        if line.startswith(KEY_TAG):
            key_state = _next_key_state(line, base_url, key_state)
        elif not line.startswith("#"):
            segments.append(Segment(url=urljoin(base_url, line), encryption=key_state))

    if not segments:
        logging.warning("Media playlist at %s did not contain segments", base_url)
    return segments
