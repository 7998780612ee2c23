"""
Location classification relative to gene models

This module decides whether a location falls in the promoter, an exon or
an intron of a gene and computes the signed distance from the location
midpoint to the gene TSS.
"""

from dataclasses import dataclass
from typing import TYPE_CHECKING, Tuple

from ..utils import get_logger
from .location import Location
from .models import GenomicFeature, Strand, TSSRegion

if TYPE_CHECKING:
    from ..store.base import GeneStore

logger = get_logger(__name__)

NA = "n/a"
PROMOTER = "promoter"
EXONIC = "exonic"
INTRONIC = "intronic"
INTERGENIC = "intergenic"


@dataclass(frozen=True)
class LocationClass:
    """Classification flags for one location against one feature"""

    is_promoter: bool = False
    is_exon: bool = False
    is_intronic: bool = False

    @property
    def label(self) -> str:
        return make_label(self.is_promoter, self.is_exon, self.is_intronic)


def make_label(is_promoter: bool, is_exon: bool, is_intronic: bool) -> str:
    """
    Build a classification label

    Promoter comes first, followed by exonic, or intronic when the location
    is not in an exon. Labels are comma joined; no flags gives ``""``.
    """
    labels = []

    if is_promoter:
        labels.append(PROMOTER)

    if is_exon:
        labels.append(EXONIC)
    elif is_intronic:
        labels.append(INTRONIC)

    return ",".join(labels)


def tss_distance(location: Location, feature: GenomicFeature) -> int:
    """Signed distance from the location midpoint to the feature TSS"""
    return feature.tss - location.mid


def promoter_window(feature: GenomicFeature, tss_region: TSSRegion) -> Tuple[int, int]:
    """
    Promoter window bounds for a feature

    '+' strand: ``[start - offset_5p, start + offset_3p]``
    '-' strand: ``[end - offset_3p, end + offset_5p]``
    """
    if Strand.parse(feature.strand) is Strand.NEG:
        s = feature.end - tss_region.offset_3p
        e = feature.end + tss_region.offset_5p
    else:
        s = feature.start - tss_region.offset_5p
        e = feature.start + tss_region.offset_3p

    return max(0, s), e


def search_window(feature: GenomicFeature, tss_region: TSSRegion) -> Tuple[int, int]:
    """Gene body joined with its promoter window"""
    s, e = promoter_window(feature, tss_region)
    return min(s, feature.start), max(e, feature.end)


def classify_flags(
    location: Location,
    feature: GenomicFeature,
    tss_region: TSSRegion,
    is_exon: bool,
) -> LocationClass:
    """Promoter and intron flags from the location midpoint"""
    mid = location.mid
    s, e = promoter_window(feature, tss_region)

    return LocationClass(
        is_promoter=s <= mid <= e,
        is_exon=is_exon,
        is_intronic=feature.start <= mid <= feature.end,
    )


def classify(
    location: Location,
    feature: GenomicFeature,
    tss_region: TSSRegion,
    store: "GeneStore",
) -> Tuple[str, int]:
    """
    Classify a location against a single feature

    Locations lying entirely outside the gene body and its promoter window
    are intergenic without touching the store. Otherwise the store is asked
    once whether the location overlaps an exon of the feature's gene.

    Args:
        location: Query location
        feature: Gene or transcript level feature
        tss_region: Promoter window configuration
        store: Gene store used for the exon membership query

    Returns:
        Tuple of (label, signed TSS distance)
    """
    d = tss_distance(location, feature)
    s, e = search_window(feature, tss_region)

    if location.start > e or location.end < s:
        logger.debug(f"{location} is intergenic to {feature.gene_id} [{s}, {e}]")
        return INTERGENIC, d

    is_exon = len(store.features_in_exon(location, feature.gene_id)) > 0

    return classify_flags(location, feature, tss_region, is_exon).label, d
