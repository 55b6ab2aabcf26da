"""Filesystem helpers for preparing output folders and safe filenames."""

from __future__ import annotations

import os
import re
from pathlib import Path
from typing import Optional

INVALID_FILENAME_CHARS = re.compile(r"[\\/:*?\"<>|]")
VIDEO_SUFFIX = ".mp4"


def sanitize_filename(value: str, default: str = "file") -> str:
    """Removes characters that are invalid on most filesystems."""

    sanitized = INVALID_FILENAME_CHARS.sub("", value or "").strip()
    return sanitized or default


def ensure_directory(path: str) -> str:
    """Creates a directory (and its parents) if needed."""

    Path(path).mkdir(parents=True, exist_ok=True)
    return path


def build_output_path(output_dir: str, video_id: str, output_file: Optional[str] = None) -> str:
    """Returns where the video should be written.

    An explicit ``output_file`` keeps its directory part; otherwise the file is
    named after the video id inside ``output_dir``.
    """

    if output_file:
        directory, name = os.path.split(output_file)
        safe_name = sanitize_filename(name, default=f"{video_id or 'video'}{VIDEO_SUFFIX}")
        if not os.path.isabs(output_file):
            directory = os.path.join(output_dir, directory)
    else:
        directory = output_dir
        safe_name = sanitize_filename(video_id, default="video")
    if not safe_name.lower().endswith(VIDEO_SUFFIX):
        safe_name = f"{safe_name}{VIDEO_SUFFIX}"
    return os.path.join(directory, safe_name)
