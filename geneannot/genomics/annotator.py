"""
Gene annotation of genomic locations

This module drives the gene store queries, classifies each returned
feature and assembles the per-location annotation: the genes the location
lies in or near, and the N closest genes by TSS distance.
"""

from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional, Union

from joblib import Parallel, delayed

from ..exceptions import GeneAnnotError, InputError
from ..store.base import GeneStore
from ..utils import get_logger, log_execution_time
from .aggregate import GeneAggregator
from .classify import NA, classify, classify_flags, tss_distance
from .location import Location
from .models import GenomicFeature, Level, TSSRegion

logger = get_logger(__name__)


@dataclass
class ClosestGene:
    """One of the N closest genes to a location"""

    gene_id: str
    gene_symbol: str
    label: str
    tss_distance: int


@dataclass
class GeneAnnotation:
    """
    Annotation of one location

    ``gene_ids``, ``gene_symbols``, ``labels`` and ``tss_distances`` are
    co-indexed and ordered by absolute TSS distance, then gene id. When no
    gene is near the location they hold a single ``"n/a"`` entry (the label
    list a single empty label).
    """

    location: Location
    gene_ids: List[str]
    gene_symbols: List[str]
    labels: List[str]
    tss_distances: List[Union[int, str]]
    closest_genes: List[ClosestGene] = field(default_factory=list)

    @property
    def has_genes(self) -> bool:
        return self.gene_ids != [NA]

    def joined(self) -> Dict[str, str]:
        """Semicolon joined text form of the co-indexed lists"""
        return {
            "gene_ids": ";".join(self.gene_ids),
            "gene_symbols": ";".join(self.gene_symbols),
            "labels": ";".join(self.labels),
            "tss_distances": ";".join(str(d) for d in self.tss_distances),
        }


@dataclass
class AnnotationResult:
    """Outcome of annotating one location in a batch"""

    location: Location
    annotation: Optional[GeneAnnotation] = None
    error: Optional[Exception] = None

    @property
    def success(self) -> bool:
        return self.error is None


class Annotator:
    """Annotate locations with overlapping and closest genes"""

    def __init__(
        self,
        store: GeneStore,
        tss_region: TSSRegion,
        n: int = 10,
        level: Union[Level, str, int] = Level.TRANSCRIPT,
        closest_level: Union[Level, str, int] = Level.GENE,
        max_workers: int = 1,
    ):
        """
        Initialize annotator

        Args:
            store: Gene store to query
            tss_region: Promoter window around each TSS
            n: Number of closest genes to report
            level: Feature level used for the overlap query
            closest_level: Feature level used for the closest genes query
            max_workers: Threads used to fan out store queries within one call
        """
        if n < 1:
            raise InputError(f"Number of closest genes must be positive: {n}")

        if max_workers < 1:
            raise InputError(f"max_workers must be positive: {max_workers}")

        self.store = store
        self.tss_region = tss_region
        self.n = n
        self.level = Level.parse(level)
        self.closest_level = Level.parse(closest_level)
        self.max_workers = max_workers

    def annotate(self, location: Location) -> GeneAnnotation:
        """
        Annotate a single location

        Any store failure aborts the call and propagates as StoreError.

        Args:
            location: Location to annotate

        Returns:
            GeneAnnotation for the location
        """
        logger.debug(f"Annotating {location} with TSS region {self.tss_region}")

        if self.max_workers == 1:
            aggregator = self._genes_within(location, None)
            closest_genes = self._closest_genes(location)
        else:
            with ThreadPoolExecutor(max_workers=self.max_workers) as executor:
                closest_future = executor.submit(self._closest_genes, location)
                aggregator = self._genes_within(location, executor)
                closest_genes = closest_future.result()

        gene_ids, gene_symbols, labels, tss_distances = aggregator.to_lists()

        logger.debug(f"{location}: {len(aggregator)} genes within, ids {gene_ids}")

        return GeneAnnotation(
            location=location,
            gene_ids=gene_ids,
            gene_symbols=gene_symbols,
            labels=labels,
            tss_distances=tss_distances,
            closest_genes=closest_genes,
        )

    def _genes_within(
        self, location: Location, executor: Optional[ThreadPoolExecutor]
    ) -> GeneAggregator:
        """Classify every feature in the promoter-extended window, per gene"""

        features = self.store.features_overlapping_or_near_promoter(
            location, self.level, self.tss_region.max_offset
        )

        gene_ids = sorted({feature.gene_id for feature in features})

        # One exon membership query per gene, shared by all its transcripts
        if executor is None:
            in_exon = {
                gene_id: self._in_exon(location, gene_id) for gene_id in gene_ids
            }
        else:
            futures = {
                gene_id: executor.submit(self._in_exon, location, gene_id)
                for gene_id in gene_ids
            }
            in_exon = {gene_id: future.result() for gene_id, future in futures.items()}

        aggregator = GeneAggregator()

        for feature in features:
            location_class = classify_flags(
                location, feature, self.tss_region, in_exon[feature.gene_id]
            )
            aggregator.add(
                feature.gene_id,
                feature.gene_symbol,
                location_class,
                tss_distance(location, feature),
            )

        return aggregator

    def _in_exon(self, location: Location, gene_id: str) -> bool:
        return len(self.store.features_in_exon(location, gene_id)) > 0

    def _closest_genes(self, location: Location) -> List[ClosestGene]:
        """Classify the N closest genes, keeping the store's distance order"""

        features = self.store.closest_features(location, self.n, self.closest_level)

        return [self._closest_gene(location, feature) for feature in features]

    def _closest_gene(self, location: Location, feature: GenomicFeature) -> ClosestGene:
        label, d = classify(location, feature, self.tss_region, self.store)

        return ClosestGene(
            gene_id=feature.gene_id,
            gene_symbol=feature.gene_symbol,
            label=label,
            tss_distance=d,
        )

    def annotate_safely(self, location: Location) -> AnnotationResult:
        """Annotate a location, capturing any failure in the result"""
        try:
            return AnnotationResult(location, annotation=self.annotate(location))
        except GeneAnnotError as e:
            logger.error(f"Failed to annotate {location}: {e}")
            return AnnotationResult(location, error=e)

    @log_execution_time
    def annotate_many(
        self,
        locations: Iterable[Location],
        n_jobs: int = 1,
        fail_fast: bool = False,
    ) -> List[AnnotationResult]:
        """
        Annotate many locations

        Locations are independent so they are annotated in parallel threads
        when ``n_jobs`` is not 1. Results keep the input order.

        Args:
            locations: Locations to annotate
            n_jobs: Number of joblib worker threads (-1 for all cores)
            fail_fast: Re-raise the first failure instead of recording it

        Returns:
            One AnnotationResult per location
        """
        locations = list(locations)

        logger.info(f"Annotating {len(locations)} locations with n_jobs={n_jobs}")

        if fail_fast:
            annotations = Parallel(n_jobs=n_jobs, prefer="threads")(
                delayed(self.annotate)(location) for location in locations
            )
            results = [
                AnnotationResult(location, annotation=annotation)
                for location, annotation in zip(locations, annotations)
            ]
        else:
            results = Parallel(n_jobs=n_jobs, prefer="threads")(
                delayed(self.annotate_safely)(location) for location in locations
            )

        failed = sum(1 for result in results if not result.success)

        if failed:
            logger.warning(f"{failed}/{len(results)} locations failed to annotate")
        else:
            logger.info(f"Annotated {len(results)} locations")

        return results
