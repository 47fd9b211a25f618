from citemark.infrastructure.cache.metadata_cache import CachedMetadataProvider

__all__ = ["CachedMetadataProvider"]
