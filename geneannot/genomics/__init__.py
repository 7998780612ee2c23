"""
Genomics module for geneannot

This module provides functionality for:
- Parsing genomic locations
- Promoter / exonic / intronic classification against gene models
- Signed TSS distance calculations
- Per-gene aggregation of transcript level hits
- Closest gene ranking
- Tabular output of annotations
"""

from .aggregate import GeneAccumulator, GeneAggregator
from .annotator import AnnotationResult, Annotator, ClosestGene, GeneAnnotation
from .classify import (EXONIC, INTERGENIC, INTRONIC, NA, PROMOTER,
                       LocationClass, classify, classify_flags, make_label,
                       promoter_window, tss_distance)
from .location import Location, read_locations
from .models import GenomicFeature, Level, Strand, TSSRegion
from .table import gene_table_headers, make_gene_table, write_gene_table

__all__ = [
    "Location",
    "read_locations",
    "GenomicFeature",
    "Level",
    "Strand",
    "TSSRegion",
    "LocationClass",
    "classify",
    "classify_flags",
    "make_label",
    "promoter_window",
    "tss_distance",
    "GeneAccumulator",
    "GeneAggregator",
    "Annotator",
    "AnnotationResult",
    "ClosestGene",
    "GeneAnnotation",
    "gene_table_headers",
    "make_gene_table",
    "write_gene_table",
    "NA",
    "PROMOTER",
    "EXONIC",
    "INTRONIC",
    "INTERGENIC",
]
