from citemark.domain.interfaces.source_metadata_provider import SourceMetadataProvider

__all__ = ["SourceMetadataProvider"]
