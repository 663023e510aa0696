"""HTTP API for the CoreTrack assistant."""

from coretrack_assistant.api.app import create_app

__all__ = ["create_app"]
