"""Download Hotmart player videos delivered over HLS."""

__version__ = "0.1.0"
