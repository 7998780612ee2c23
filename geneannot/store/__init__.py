"""
Gene stores answering range and nearest-neighbour queries

This module provides:
- The GeneStore interface used by the annotation engine
- A SQLite backed store for indexed gene databases
- An in-memory pandas store for tabular feature files
"""

from pathlib import Path
from typing import Union

from .base import FEATURE_COLUMNS, GeneStore
from .dataframe import DataFrameGeneStore
from .sqlite import GENES_TABLE_SQL, SQLiteGeneStore

SQLITE_SUFFIXES = (".db", ".sqlite", ".sqlite3")


def open_gene_store(path: Union[str, Path]) -> GeneStore:
    """
    Open a gene store from a file path

    Args:
        path: SQLite database (.db, .sqlite, .sqlite3) or feature table

    Returns:
        GeneStore for the file
    """
    if Path(path).suffix.lower() in SQLITE_SUFFIXES:
        return SQLiteGeneStore(path)
    return DataFrameGeneStore.from_file(path)


__all__ = [
    "GeneStore",
    "SQLiteGeneStore",
    "DataFrameGeneStore",
    "open_gene_store",
    "FEATURE_COLUMNS",
    "GENES_TABLE_SQL",
]
