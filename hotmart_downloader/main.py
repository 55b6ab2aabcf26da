from __future__ import annotations

import argparse
import logging
import os
from typing import Sequence

from dotenv import load_dotenv

from .downloader.video_downloader import VideoDownloader
from .errors import AuthenticationError, DownloaderError
from .models import EntryReference
from .utils.file_utils import build_output_path
from .utils.http_client import DEFAULT_TIMEOUT, HttpClient

load_dotenv()


def _env_str(name: str) -> str | None:
    value = os.getenv(name)
    if value is None or value == "":
        return None
    return value


def _env_int(name: str) -> int | None:
    value = _env_str(name)
    if value is None:
        return None
    try:
        return int(value)
    except ValueError:
        return None


def _env_bool(name: str) -> bool:
    value = _env_str(name)
    if value is None:
        return False
    return value.strip().lower() in {"1", "true", "yes", "on"}


def parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Download a Hotmart player video delivered over HLS.")
    parser.add_argument("url", nargs="?", default=_env_str("EMBED_URL"), help="Player embed URL (with token and signature)")
    parser.add_argument("--output", default=_env_str("OUTPUT_FILE"), help="Output file name; defaults to <video id>.mp4")
    parser.add_argument("--output-dir", default=_env_str("OUTPUT_DIR") or ".", help="Directory to store the video")
    parser.add_argument(
        "--timeout",
        type=int,
        default=_env_int("HTTP_TIMEOUT") or DEFAULT_TIMEOUT,
        help="Per-request timeout in seconds",
    )
    parser.add_argument("--verbose", action="store_true", default=_env_bool("VERBOSE"), help="Enable debug logging")
    return parser.parse_args(argv)


def configure_logging(verbose: bool = False) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s [%(levelname)s] %(message)s",
    )


def log_progress(completed: int, total: int) -> None:
    logging.info("Downloading segment %s/%s", completed, total)


def main(argv: Sequence[str] | None = None) -> int:
    args = parse_args(argv)
    configure_logging(args.verbose)

    if not args.url:
        logging.error("An embed URL is required (positional argument or EMBED_URL).")
        return 1

    try:
        entry = EntryReference.from_url(args.url)
    except DownloaderError as exc:
        logging.error("%s", exc)
        return 1

    output_file = build_output_path(args.output_dir, entry.video_id, args.output)
    logging.info("Extracting video info for ID: %s", entry.video_id or "(unknown)")

    with HttpClient(timeout=args.timeout) as http_client:
        downloader = VideoDownloader(http_client)
        try:
            downloader.download(entry.url, output_file, on_progress=log_progress)
        except AuthenticationError as exc:
            logging.error("%s Copy a fresh embed URL and retry.", exc)
            return 1
        except DownloaderError as exc:
            logging.error("Download failed: %s", exc)
            if os.path.exists(output_file):
                logging.warning("Partial output left at %s", output_file)
            return 1

    logging.info("Download complete: %s", output_file)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
