"""
Abstract interface for source metadata lookup.
Resolves cited source identifiers to human-readable metadata.
"""
from abc import ABC, abstractmethod
from typing import Dict, List, Optional

from citemark.domain.models.citation import SourceMetadata


class SourceMetadataProvider(ABC):
    """
    Abstract base class for source metadata providers.

    Lookups are best-effort: ids the provider cannot resolve are simply absent
    from the returned map.
    """

    @abstractmethod
    def lookup(
        self,
        notebook_id: Optional[str],
        source_ids: List[str]
    ) -> Dict[str, SourceMetadata]:
        """
        Fetch metadata for the given sources of a notebook.

        Args:
            notebook_id: Notebook owning the sources
            source_ids: Distinct source ids to resolve

        Returns:
            Mapping of source_id -> SourceMetadata for the ids found
        """
        pass
