from editorial.services.generation.providers.base import ModelProvider, NullProvider, ProviderRegistry
from editorial.services.generation.providers.gateway import GatewayProvider
from editorial.services.generation.providers.local import LocalProvider

__all__ = [
    "GatewayProvider",
    "LocalProvider",
    "ModelProvider",
    "NullProvider",
    "ProviderRegistry",
]
