"""Model routing with primary/secondary fallback behind admission control."""

from coretrack_assistant.router.backends import (
    GeminiBackend,
    GenerationBackend,
    create_gemini_backends,
)
from coretrack_assistant.router.errors import (
    AssistantError,
    BackendError,
    BackendOverloaded,
    BackendQuotaExceeded,
    RateLimited,
    Throttled,
    Unconfigured,
)
from coretrack_assistant.router.router import ModelRouter, RouterResult, create_model_router

__all__ = [
    # Backends
    "GeminiBackend",
    "GenerationBackend",
    "create_gemini_backends",
    # Errors
    "AssistantError",
    "BackendError",
    "BackendOverloaded",
    "BackendQuotaExceeded",
    "RateLimited",
    "Throttled",
    "Unconfigured",
    # Router
    "ModelRouter",
    "RouterResult",
    "create_model_router",
]
