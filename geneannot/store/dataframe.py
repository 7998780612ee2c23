"""
In-memory gene store backed by a pandas DataFrame
"""

from pathlib import Path
from typing import List, Optional, Union

import numpy as np
import pandas as pd

from ..exceptions import InputError, StoreError
from ..genomics.location import Location
from ..genomics.models import GenomicFeature, Level
from ..utils import get_logger
from .base import FEATURE_COLUMNS, GeneStore

logger = get_logger(__name__)

REQUIRED_COLUMNS = ["chr", "start", "end", "strand", "gene_id", "gene_symbol", "level"]

COORDINATE_COLUMNS = ["id", "start", "end", "stranded_start"]


def _level_number(value) -> Optional[int]:
    # Levels read from a column holding blanks come back as floats
    if isinstance(value, float) and value.is_integer():
        value = int(value)

    try:
        return int(Level.parse(value))
    except InputError:
        return None


def _reject_rows(df: pd.DataFrame, bad: pd.Series, column: str, problem: str) -> None:
    """Raise StoreError naming the rows flagged in ``bad``"""
    if not bad.any():
        return

    rows = bad[bad].index.tolist()
    values = sorted({str(value) for value in df.loc[bad, column]})
    raise StoreError(
        f"Feature table has {problem} {column} values {values} in rows {rows}"
    )


class DataFrameGeneStore(GeneStore):
    """Gene store answering range queries from a feature table held in memory"""

    def __init__(self, features_df: pd.DataFrame):
        """
        Initialize the store

        Args:
            features_df: Table with at least the columns chr, start, end,
                strand, gene_id, gene_symbol and level. ``id`` and
                ``stranded_start`` are derived when missing.

        Raises:
            StoreError: If columns are missing, a level is unknown or a
                coordinate is blank or not a number
        """
        missing_cols = [c for c in REQUIRED_COLUMNS if c not in features_df.columns]

        if missing_cols:
            raise StoreError(f"Feature table missing required columns: {missing_cols}")

        df = features_df.copy()

        if "id" not in df.columns:
            df["id"] = np.arange(1, len(df) + 1)

        levels = df["level"].map(_level_number)
        _reject_rows(df, levels.isna(), "level", "unknown")
        df["level"] = levels.astype("int64")

        # Coordinates must be whole numbers
        for col in [c for c in COORDINATE_COLUMNS if c in df.columns]:
            values = pd.to_numeric(df[col], errors="coerce")
            _reject_rows(df, values.isna(), col, "blank or non-numeric")
            df[col] = values.astype("int64")

        df["strand"] = df["strand"].astype(str)
        df["chr"] = df["chr"].astype(str)
        df["gene_id"] = df["gene_id"].astype(str)
        df["gene_symbol"] = df["gene_symbol"].astype(str)

        if "stranded_start" not in df.columns:
            # Strand-aware TSS
            df["stranded_start"] = np.where(df["strand"] == "-", df["end"], df["start"])

        self.features = df[FEATURE_COLUMNS].reset_index(drop=True)

        logger.debug(f"Loaded {len(self.features)} features into memory")

    @classmethod
    def from_file(cls, file_path: Union[str, Path]) -> "DataFrameGeneStore":
        """Load a feature table from a tab or comma separated file"""
        path = Path(file_path)

        if not path.exists():
            raise StoreError(f"Feature table not found: {path}")

        sep = "," if path.suffix.lower() == ".csv" else "\t"

        logger.info(f"Loading gene features from {path}")

        try:
            df = pd.read_csv(path, sep=sep, dtype={"chr": str, "gene_id": str})
        except (OSError, ValueError) as e:
            raise StoreError(f"Cannot read feature table {path}: {e}") from e

        return cls(df)

    def _to_features(self, df: pd.DataFrame, mid: int) -> List[GenomicFeature]:
        return [
            GenomicFeature(
                id=int(row.id),
                chr=row.chr,
                start=int(row.start),
                end=int(row.end),
                strand=row.strand,
                gene_id=row.gene_id,
                gene_symbol=row.gene_symbol,
                dist=int(row.stranded_start) - mid,
            )
            for row in df.itertuples(index=False)
        ]

    def features_overlapping_or_near_promoter(
        self, location: Location, level: Level, pad: int
    ) -> List[GenomicFeature]:
        df = self.features
        mask = (
            (df["level"] == int(level))
            & (df["chr"] == location.chr)
            & (df["start"] - pad <= location.end)
            & (df["end"] + pad >= location.start)
        )
        hits = df[mask].sort_values(["start", "id"], kind="mergesort")
        return self._to_features(hits, location.mid)

    def features_in_exon(
        self, location: Location, gene_id: str
    ) -> List[GenomicFeature]:
        df = self.features
        mask = (
            (df["level"] == int(Level.EXON))
            & (df["gene_id"] == gene_id)
            & (df["chr"] == location.chr)
            & (df["start"] <= location.end)
            & (df["end"] >= location.start)
        )
        hits = df[mask].sort_values(["start", "id"], kind="mergesort")
        return self._to_features(hits, location.mid)

    def closest_features(
        self, location: Location, n: int, level: Level
    ) -> List[GenomicFeature]:
        df = self.features
        hits = df[(df["level"] == int(level)) & (df["chr"] == location.chr)].copy()
        hits["abs_dist"] = (hits["stranded_start"] - location.mid).abs()
        hits = hits.sort_values(["abs_dist", "gene_id", "id"], kind="mergesort")
        return self._to_features(hits.head(n), location.mid)

    def __repr__(self) -> str:
        return f"DataFrameGeneStore({len(self.features)} features)"
