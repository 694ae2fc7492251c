"""Video-on-demand streaming server."""

__version__ = "0.1.0"
