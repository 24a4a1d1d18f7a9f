"""Alert detection and correlation engine for a live OSINT dashboard."""

__version__ = "0.1.0"
