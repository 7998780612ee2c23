"""
SQLite backed gene store

The database holds a single ``genes`` table with gene, transcript and exon
rows distinguished by ``level`` (1 gene, 2 transcript, 3 exon) and a
precomputed ``stranded_start`` column (start for '+', end for '-').
"""

import queue
import sqlite3
import threading
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, List, Sequence, Union

from ..exceptions import StoreError
from ..genomics.location import Location
from ..genomics.models import GenomicFeature, Level
from ..utils import get_logger
from .base import GeneStore

logger = get_logger(__name__)

GENES_TABLE_SQL = """
CREATE TABLE IF NOT EXISTS genes (
    id INTEGER PRIMARY KEY,
    chr TEXT NOT NULL,
    start INTEGER NOT NULL,
    "end" INTEGER NOT NULL,
    strand TEXT NOT NULL,
    gene_id TEXT NOT NULL,
    gene_symbol TEXT NOT NULL,
    level INTEGER NOT NULL,
    stranded_start INTEGER NOT NULL
);
CREATE INDEX IF NOT EXISTS genes_level_chr_start_end
    ON genes (level, chr, start, "end");
CREATE INDEX IF NOT EXISTS genes_gene_id ON genes (gene_id, level);
"""

WITHIN_GENE_AND_PROMOTER_SQL = """
SELECT id, chr, start, "end", strand, gene_id, gene_symbol, stranded_start - ? AS dist
FROM genes
WHERE level = ? AND chr = ? AND start <= ? AND "end" >= ?
ORDER BY start ASC, id ASC
"""

IN_EXON_SQL = """
SELECT id, chr, start, "end", strand, gene_id, gene_symbol, stranded_start - ? AS dist
FROM genes
WHERE level = 3 AND gene_id = ? AND chr = ? AND start <= ? AND "end" >= ?
ORDER BY start ASC, id ASC
"""

CLOSEST_GENE_SQL = """
SELECT id, chr, start, "end", strand, gene_id, gene_symbol, stranded_start - ? AS dist
FROM genes
WHERE level = ? AND chr = ?
ORDER BY ABS(stranded_start - ?) ASC, gene_id ASC, id ASC
LIMIT ?
"""


class SQLiteGeneStore(GeneStore):
    """Read-only gene store over a SQLite ``genes`` table.

    Connections are pooled: a query borrows an idle connection, or opens a
    new one, and returns it afterwards, so one store can serve concurrent
    annotation calls without sharing a connection between threads.
    """

    def __init__(self, db_path: Union[str, Path]):
        """
        Args:
            db_path: Path to an existing SQLite database
        """
        self.db_path = Path(db_path)

        if not self.db_path.exists():
            raise StoreError(f"Gene database not found: {self.db_path}")

        self._idle: "queue.SimpleQueue[sqlite3.Connection]" = queue.SimpleQueue()
        self._connections: List[sqlite3.Connection] = []
        self._lock = threading.Lock()

    def _open_conn(self) -> sqlite3.Connection:
        uri = f"{self.db_path.resolve().as_uri()}?mode=ro"
        try:
            conn = sqlite3.connect(uri, uri=True, check_same_thread=False)
        except sqlite3.Error as e:
            raise StoreError(f"Cannot open gene database {self.db_path}: {e}") from e
        conn.row_factory = sqlite3.Row
        with self._lock:
            self._connections.append(conn)
        logger.debug(f"Opened connection {len(self._connections)} to {self.db_path}")
        return conn

    @contextmanager
    def _connection(self) -> Iterator[sqlite3.Connection]:
        try:
            conn = self._idle.get_nowait()
        except queue.Empty:
            conn = self._open_conn()
        try:
            yield conn
        finally:
            self._idle.put(conn)

    def close(self) -> None:
        """Close all connections opened by this store."""
        with self._lock:
            for conn in self._connections:
                conn.close()
            self._connections.clear()
            self._idle = queue.SimpleQueue()

    def _query(
        self, name: str, sql: str, params: Sequence, location: Location
    ) -> List[GenomicFeature]:
        try:
            with self._connection() as conn:
                rows = conn.execute(sql, tuple(params)).fetchall()
        except sqlite3.Error as e:
            raise StoreError(str(e), query=name, location=location) from e

        try:
            return [GenomicFeature.from_record(dict(row)) for row in rows]
        except (TypeError, ValueError) as e:
            raise StoreError(
                f"Malformed feature row: {e}", query=name, location=location
            ) from e

    def features_overlapping_or_near_promoter(
        self, location: Location, level: Level, pad: int
    ) -> List[GenomicFeature]:
        return self._query(
            "features_overlapping_or_near_promoter",
            WITHIN_GENE_AND_PROMOTER_SQL,
            [
                location.mid,
                int(level),
                location.chr,
                location.end + pad,
                location.start - pad,
            ],
            location,
        )

    def features_in_exon(
        self, location: Location, gene_id: str
    ) -> List[GenomicFeature]:
        return self._query(
            "features_in_exon",
            IN_EXON_SQL,
            [location.mid, gene_id, location.chr, location.end, location.start],
            location,
        )

    def closest_features(
        self, location: Location, n: int, level: Level
    ) -> List[GenomicFeature]:
        return self._query(
            "closest_features",
            CLOSEST_GENE_SQL,
            [location.mid, int(level), location.chr, location.mid, n],
            location,
        )

    def __repr__(self) -> str:
        return f"SQLiteGeneStore({str(self.db_path)!r})"
