"""
Utility functions for geneannot
"""

from .logging import get_logger, log_execution_time, setup_logging, timed
from .validation import (CORE_PACKAGES, validate_environment,
                         validate_file_exists, validate_gene_database,
                         validate_input_files, validate_python_packages)

__all__ = [
    "setup_logging",
    "get_logger",
    "log_execution_time",
    "timed",
    "CORE_PACKAGES",
    "validate_file_exists",
    "validate_gene_database",
    "validate_input_files",
    "validate_python_packages",
    "validate_environment",
]
