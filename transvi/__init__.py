"""TransVi: parallel chunked subtitle generation for video files."""

__version__ = "0.1.0"
