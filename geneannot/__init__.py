"""
geneannot: gene annotation of genomic locations

geneannot annotates genomic intervals with the gene models they overlap or
lie near. For each location it reports the overlapping genes with their
promoter / exonic / intronic classification and signed TSS distance, plus
the N closest genes by TSS distance.

Main Components:
- Location parsing and location file loading
- Promoter, exon and intron classification with a configurable TSS window
- Per-gene aggregation and deterministic ranking
- SQLite and pandas backed gene stores
- Tab separated gene tables

Example:
    >>> from geneannot import Annotator, Location, TSSRegion, open_gene_store
    >>> store = open_gene_store("grch38.db")
    >>> annotator = Annotator(store, TSSRegion(2000, 1000), n=10)
    >>> annotation = annotator.annotate(Location.parse("chr3:187745448-187745468"))
"""

import logging
import sys
from importlib import metadata
from typing import Any, Dict

try:
    __version__ = metadata.version("geneannot")
except metadata.PackageNotFoundError:
    __version__ = "0.1.0-dev"

# Module imports
from . import genomics, store, utils
from .config import Config, load_config
from .core import GeneAnnotationPipeline
from .exceptions import GeneAnnotError, InputError, StoreError
from .genomics import (Annotator, GeneAnnotation, Level, Location, Strand,
                       TSSRegion)
from .store import GeneStore, open_gene_store
from .utils import setup_logging, validate_environment

__all__ = [
    "__version__",
    "GeneAnnotationPipeline",
    "Config",
    "load_config",
    "setup_logging",
    "validate_environment",
    "Annotator",
    "GeneAnnotation",
    "Location",
    "Level",
    "Strand",
    "TSSRegion",
    "GeneStore",
    "open_gene_store",
    "GeneAnnotError",
    "InputError",
    "StoreError",
    "genomics",
    "store",
    "utils",
]


def get_info() -> Dict[str, Any]:
    """Get package information."""
    return {
        "name": "geneannot",
        "version": __version__,
        "description": "Gene annotation of genomic locations",
        "python_version": ".".join(str(v) for v in sys.version_info[:3]),
        "modules": ["genomics", "store", "config", "utils"],
    }


def check_dependencies() -> Dict[str, bool]:
    """Availability of the required packages, keyed by distribution name."""
    status = utils.validate_python_packages(list(utils.CORE_PACKAGES))
    return {utils.CORE_PACKAGES[name]: ok for name, ok in status.items()}


logger = logging.getLogger(__name__)
logger.addHandler(logging.NullHandler())
