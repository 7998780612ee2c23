"""
Gene store interface consumed by the annotation engine
"""

from abc import ABC, abstractmethod
from typing import List

from ..genomics.location import Location
from ..genomics.models import GenomicFeature, Level

# Columns every gene store exposes
FEATURE_COLUMNS = [
    "id",
    "chr",
    "start",
    "end",
    "strand",
    "gene_id",
    "gene_symbol",
    "level",
    "stranded_start",
]


class GeneStore(ABC):
    """Indexed gene, transcript and exon features answering range queries"""

    @abstractmethod
    def features_overlapping_or_near_promoter(
        self, location: Location, level: Level, pad: int
    ) -> List[GenomicFeature]:
        """
        Features at ``level`` whose extent, padded by ``pad`` bp on both
        sides, overlaps ``location``
        """

    @abstractmethod
    def features_in_exon(
        self, location: Location, gene_id: str
    ) -> List[GenomicFeature]:
        """Exons of ``gene_id`` overlapping ``location``"""

    @abstractmethod
    def closest_features(
        self, location: Location, n: int, level: Level
    ) -> List[GenomicFeature]:
        """
        The ``n`` features at ``level`` whose stranded start is nearest the
        location midpoint, ascending by absolute distance then gene id.
        ``dist`` is set to ``stranded_start - mid``.
        """

    def close(self) -> None:
        """Release any resources held by the store"""

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_value, traceback):
        self.close()
        return False
