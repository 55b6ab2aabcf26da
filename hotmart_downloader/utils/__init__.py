"""Utility helpers for HTTP and filesystem operations."""

from .http_client import HttpClient
from .file_utils import build_output_path, ensure_directory, sanitize_filename

__all__ = ["HttpClient", "ensure_directory", "sanitize_filename", "build_output_path"]
