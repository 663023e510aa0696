"""Configuration module for the CoreTrack assistant."""

from coretrack_assistant.config.settings import Settings, get_settings

__all__ = ["Settings", "get_settings"]
