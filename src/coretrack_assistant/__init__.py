"""CoreTrack AI assistant: per-tenant rate limiting and model routing."""

__version__ = "0.1.0"
