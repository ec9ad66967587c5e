from .payloads import (
    CAPSULE_PAYLOAD,
    EDITORIAL_PAYLOAD,
    INLINE_IMAGE,
    STUDIO_PAYLOAD,
    URL_IMAGES,
    wrapped,
)
from .providers import InMemoryLimiter, ScriptedProvider
