"""Tests for CLI configuration and output path handling."""

from __future__ import annotations

import os

import pytest

from hotmart_downloader import main as cli
from hotmart_downloader.utils.file_utils import build_output_path, sanitize_filename


def test_build_output_path_defaults_to_video_id() -> None:
    """Test the video id names the file when no output is given."""
    assert build_output_path("downloads", "abc123") == os.path.join("downloads", "abc123.mp4")


def test_build_output_path_sanitizes_and_adds_suffix() -> None:
    """Test explicit names are cleaned and get the .mp4 suffix."""
    assert build_output_path("out", "abc", "my:video?") == os.path.join("out", "", "myvideo.mp4")
    assert build_output_path("out", "abc", "clip.MP4") == os.path.join("out", "", "clip.MP4")


def test_build_output_path_keeps_absolute_output(tmp_path) -> None:
    """Test an absolute output file ignores the output directory."""
    target = str(tmp_path / "videos" / "clip.mp4")
    assert build_output_path("ignored", "abc", target) == target


def test_sanitize_filename_default() -> None:
    """Test a name made only of invalid characters falls back to the default."""
    assert sanitize_filename(':*?"', default="video") == "video"


def test_parse_args_reads_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    """Test flags default from environment variables."""
    monkeypatch.setenv("EMBED_URL", "https://player.hotmart.com/embed/env")
    monkeypatch.setenv("HTTP_TIMEOUT", "12")
    monkeypatch.setenv("VERBOSE", "yes")

    args = cli.parse_args([])

    assert args.url == "https://player.hotmart.com/embed/env"
    assert args.timeout == 12
    assert args.verbose is True
    assert args.output_dir == "."


def test_main_requires_url(monkeypatch: pytest.MonkeyPatch) -> None:
    """Test the CLI exits with status 1 when no URL is configured."""
    monkeypatch.delenv("EMBED_URL", raising=False)
    assert cli.main([]) == 1


def test_main_rejects_invalid_url() -> None:
    """Test the CLI exits with status 1 for a malformed URL."""
    assert cli.main(["not-a-url"]) == 1


def test_main_downloads_to_video_id(monkeypatch: pytest.MonkeyPatch, tmp_path) -> None:
    """Test the CLI wires the downloader with the derived output path."""
    calls = []

    class StubDownloader:
        def __init__(self, http_client) -> None:
            pass

        def download(self, entry_url, output_file, on_progress=None) -> None:
            calls.append((entry_url, output_file))
            on_progress(1, 1)

    monkeypatch.setattr(cli, "VideoDownloader", StubDownloader)
    url = "https://player.hotmart.com/embed/vid42?token=t&signature=s"

    assert cli.main([url, "--output-dir", str(tmp_path)]) == 0
    assert calls == [(url, os.path.join(str(tmp_path), "vid42.mp4"))]
