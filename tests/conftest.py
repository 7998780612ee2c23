"""Shared fixtures: a small chr3 gene model in SQLite and pandas stores."""

import sqlite3
from pathlib import Path

import pandas as pd
import pytest

from geneannot.genomics import Location, TSSRegion
from geneannot.store import GENES_TABLE_SQL, DataFrameGeneStore, SQLiteGeneStore

# ---------------------------------------------------------------------------
# Gene model
# ---------------------------------------------------------------------------

# (chr, start, end, strand, gene_id, gene_symbol, level)
FEATURES = [
    # GENE1, '+' strand, TSS 187745450
    ("chr3", 187745450, 187750000, "+", "GENE1", "BCL6X", 1),
    ("chr3", 187745450, 187750000, "+", "GENE1", "BCL6X", 2),
    ("chr3", 187745600, 187748000, "+", "GENE1", "BCL6X", 2),
    ("chr3", 187745700, 187745800, "+", "GENE1", "BCL6X", 3),
    ("chr3", 187746000, 187746200, "+", "GENE1", "BCL6X", 3),
    ("chr3", 187749000, 187750000, "+", "GENE1", "BCL6X", 3),
    # GENE2, '-' strand, TSS 187744000
    ("chr3", 187730000, 187744000, "-", "GENE2", "LPP2", 1),
    ("chr3", 187730000, 187744000, "-", "GENE2", "LPP2", 2),
    ("chr3", 187730000, 187731000, "-", "GENE2", "LPP2", 3),
    # GENE3, '+' strand, far downstream
    ("chr3", 187800000, 187810000, "+", "GENE3", "TPRG3", 1),
    ("chr3", 187800000, 187810000, "+", "GENE3", "TPRG3", 2),
]

COLUMNS = ["chr", "start", "end", "strand", "gene_id", "gene_symbol", "level"]

# Midpoint 187745458
QUERY = "chr3:187745448-187745468"

# genes table without NOT NULL constraints
UNCHECKED_GENES_TABLE_SQL = """
CREATE TABLE genes (
    id INTEGER PRIMARY KEY,
    chr TEXT,
    start INTEGER,
    "end" INTEGER,
    strand TEXT,
    gene_id TEXT,
    gene_symbol TEXT,
    level INTEGER,
    stranded_start INTEGER
);
"""

# Gene row with no start, 2bp from the query midpoint
NULL_START_ROW = ("chr3", None, 187745460, "-", "BROKEN", "BROKEN", 1)


def build_gene_db(db_path: Path, rows, schema: str = GENES_TABLE_SQL) -> Path:
    """Write ``rows`` to a fresh genes table at ``db_path``."""
    conn = sqlite3.connect(str(db_path))
    conn.executescript(schema)
    conn.executemany(
        'INSERT INTO genes (id, chr, start, "end", strand, gene_id, gene_symbol, '
        "level, stranded_start) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)",
        [
            (i, *row, row[2] if row[3] == "-" else row[1])
            for i, row in enumerate(rows, start=1)
        ],
    )
    conn.commit()
    conn.close()
    return db_path


def features_frame(rows) -> pd.DataFrame:
    return pd.DataFrame(list(rows), columns=COLUMNS)


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def tss_region():
    return TSSRegion(2000, 1000)


@pytest.fixture
def query_location():
    return Location.parse(QUERY)


@pytest.fixture
def gene_db(tmp_path):
    return build_gene_db(tmp_path / "genes.db", FEATURES)


@pytest.fixture
def sqlite_store(gene_db):
    store = SQLiteGeneStore(gene_db)
    yield store
    store.close()


@pytest.fixture
def dataframe_store():
    return DataFrameGeneStore(features_frame(FEATURES))


@pytest.fixture(params=["sqlite", "dataframe"])
def store(request, gene_db):
    """Each test using this runs once per store backend."""
    if request.param == "sqlite":
        gene_store = SQLiteGeneStore(gene_db)
    else:
        gene_store = DataFrameGeneStore(features_frame(FEATURES))
    yield gene_store
    gene_store.close()


@pytest.fixture
def single_gene_db(tmp_path):
    """Database holding only GENE1, with one transcript and no exons."""
    rows = [FEATURES[0], FEATURES[1]]
    return build_gene_db(tmp_path / "single.db", rows)


@pytest.fixture
def features_tsv(tmp_path):
    path = tmp_path / "genes.tsv"
    features_frame(FEATURES).to_csv(path, sep="\t", index=False)
    return path


@pytest.fixture
def null_start_db(tmp_path):
    """Gene model plus one gene row whose start is NULL."""
    return build_gene_db(
        tmp_path / "null_start.db",
        FEATURES + [NULL_START_ROW],
        schema=UNCHECKED_GENES_TABLE_SQL,
    )
