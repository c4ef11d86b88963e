from .fallback import FallbackProviderPort
from .metadata import MetadataResolverPort
from .source_search import SourceSearchPort

__all__ = [
    "FallbackProviderPort",
    "MetadataResolverPort",
    "SourceSearchPort",
]
