"""
Per-gene aggregation of transcript level hits
"""

from dataclasses import dataclass
from typing import Dict, List, Tuple, Union

from .classify import NA, LocationClass, make_label


@dataclass
class GeneAccumulator:
    """Merged classification of all transcripts of one gene"""

    gene_symbol: str
    is_promoter: bool
    is_exon: bool
    is_intronic: bool
    d: int
    abs_d: int

    @property
    def label(self) -> str:
        return make_label(self.is_promoter, self.is_exon, self.is_intronic)

    def merge(self, location_class: LocationClass, d: int) -> None:
        """OR the flags and keep the distance with the strictly smaller magnitude"""
        self.is_promoter = self.is_promoter or location_class.is_promoter
        self.is_exon = self.is_exon or location_class.is_exon
        self.is_intronic = self.is_intronic or location_class.is_intronic

        abs_d = abs(d)

        if abs_d < self.abs_d:
            self.d = d
            self.abs_d = abs_d


class GeneAggregator:
    """
    Collapse transcript level classifications into one record per gene

    One aggregator is built per annotation call and discarded afterwards.
    Genes are ordered by absolute TSS distance with ties broken by gene id,
    so the output does not depend on the order rows were added in.
    """

    def __init__(self):
        self._genes: Dict[str, GeneAccumulator] = {}

    def __len__(self) -> int:
        return len(self._genes)

    def __contains__(self, gene_id: str) -> bool:
        return gene_id in self._genes

    def add(
        self,
        gene_id: str,
        gene_symbol: str,
        location_class: LocationClass,
        d: int,
    ) -> None:
        if gene_id in self._genes:
            self._genes[gene_id].merge(location_class, d)
            return

        self._genes[gene_id] = GeneAccumulator(
            gene_symbol=gene_symbol,
            is_promoter=location_class.is_promoter,
            is_exon=location_class.is_exon,
            is_intronic=location_class.is_intronic,
            d=d,
            abs_d=abs(d),
        )

    def ordered_gene_ids(self) -> List[str]:
        return sorted(
            self._genes, key=lambda gene_id: (self._genes[gene_id].abs_d, gene_id)
        )

    def to_lists(
        self,
    ) -> Tuple[List[str], List[str], List[str], List[Union[int, str]]]:
        """
        Co-indexed gene ids, symbols, labels and TSS distances

        With no genes the id, symbol and distance lists each hold the single
        ``"n/a"`` sentinel and the label list a single empty label.
        """
        if not self._genes:
            return [NA], [NA], [""], [NA]

        ids = self.ordered_gene_ids()

        return (
            ids,
            [self._genes[gene_id].gene_symbol for gene_id in ids],
            [self._genes[gene_id].label for gene_id in ids],
            [self._genes[gene_id].d for gene_id in ids],
        )
