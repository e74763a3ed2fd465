"""jobbrowser - async client for the KBase job browser service."""

__version__ = "0.1.0"
