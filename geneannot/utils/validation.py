"""
Validation utilities for geneannot

Environment checks for ``geneannot check-env`` and sanity checks of the
gene database and locations file named in a configuration.
"""

import importlib
import logging
import sqlite3
import sys
from pathlib import Path
from typing import Any, Dict, List, Union

import pandas as pd

logger = logging.getLogger(__name__)

# Import name -> distribution name
CORE_PACKAGES = {
    "numpy": "numpy",
    "pandas": "pandas",
    "yaml": "pyyaml",
    "click": "click",
    "colorlog": "colorlog",
    "joblib": "joblib",
}

SQLITE_SUFFIXES = (".db", ".sqlite", ".sqlite3")


def validate_file_exists(file_path: Union[str, Path], file_type: str = "file") -> bool:
    """
    Validate that a path exists and is a regular file

    Args:
        file_path: Path to file
        file_type: Description used in log messages

    Returns:
        True if the file exists
    """
    path = Path(file_path)

    if not path.is_file():
        reason = "is not a file" if path.exists() else "not found"
        logger.error(f"{file_type} {reason}: {path}")
        return False

    return True


def validate_python_packages(packages: List[str]) -> Dict[str, bool]:
    """
    Check which modules can be imported

    Args:
        packages: Importable module names

    Returns:
        Dictionary mapping module names to availability
    """
    results = {}

    for package in packages:
        try:
            importlib.import_module(package)
            results[package] = True
        except ImportError:
            results[package] = False
        logger.debug(f"Package {package}: available={results[package]}")

    return results


def validate_environment() -> List[str]:
    """
    Check the interpreter version and the required packages

    Returns:
        List of issues found, empty when the environment is usable
    """
    issues = []

    logger.info("Validating geneannot environment...")

    if sys.version_info < (3, 8):
        issues.append(
            "Python 3.8+ required, found "
            f"{sys.version_info.major}.{sys.version_info.minor}"
        )

    status = validate_python_packages(list(CORE_PACKAGES))
    missing = [CORE_PACKAGES[name] for name, ok in status.items() if not ok]

    if missing:
        issues.append(f"Missing Python packages (pip install {' '.join(missing)})")

    for issue in issues:
        logger.warning(f"  - {issue}")

    return issues


def validate_gene_database(database: Union[str, Path]) -> List[str]:
    """
    Check that a gene database can be read

    SQLite files must contain a ``genes`` table; any other file must be a
    delimited table with a header row.

    Args:
        database: Path to the gene database or feature table

    Returns:
        List of issues found
    """
    path = Path(database)

    if not validate_file_exists(path, "Gene database"):
        return [f"Gene database not found: {path}"]

    if path.suffix.lower() in SQLITE_SUFFIXES:
        try:
            conn = sqlite3.connect(f"{path.resolve().as_uri()}?mode=ro", uri=True)
            try:
                row = conn.execute(
                    "SELECT name FROM sqlite_master "
                    "WHERE type = 'table' AND name = 'genes'"
                ).fetchone()
            finally:
                conn.close()
        except sqlite3.Error as e:
            return [f"Gene database {path} cannot be read: {e}"]

        if row is None:
            return [f"Gene database {path} has no 'genes' table"]

        return []

    sep = "," if path.suffix.lower() == ".csv" else "\t"
    try:
        columns = pd.read_csv(path, sep=sep, nrows=0).columns
    except (OSError, ValueError) as e:
        return [f"Feature table {path} cannot be read: {e}"]

    if len(columns) < 2:
        return [f"Feature table {path} has no delimited header row"]

    return []


def validate_input_files(config: Any) -> List[str]:
    """
    Validate the input files named in a configuration

    Args:
        config: geneannot configuration object

    Returns:
        List of validation issues
    """
    issues = []

    if config.database:
        issues.extend(validate_gene_database(config.database))

    if config.input_file and not validate_file_exists(
        config.input_file, "Locations file"
    ):
        issues.append(f"Locations file not found: {config.input_file}")

    return issues
