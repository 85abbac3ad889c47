"""FancyListener — local collection server for FancyTracker listener reports."""

__version__ = "1.0.0"
