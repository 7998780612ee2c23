"""
Gene feature models shared by the stores and the annotation engine
"""

from dataclasses import dataclass
from enum import Enum, IntEnum
from typing import Any, Dict, Union

from ..exceptions import InputError


class Strand(Enum):
    """Strand of a gene feature"""

    PLUS = "+"
    NEG = "-"

    @classmethod
    def parse(cls, value: Any) -> "Strand":
        """Parse a strand, treating anything other than '-' as '+'"""
        if isinstance(value, Strand):
            return value

        if str(value).strip() == "-":
            return cls.NEG

        return cls.PLUS

    def __str__(self) -> str:
        return self.value


class Level(IntEnum):
    """Feature granularity targeted by a store query"""

    GENE = 1
    TRANSCRIPT = 2
    EXON = 3

    @classmethod
    def parse(cls, value: Union[str, int, "Level"]) -> "Level":
        """
        Parse a level from its name or number

        Raises:
            InputError: If the value names no level
        """
        if isinstance(value, Level):
            return value

        text = str(value).strip().lower()

        for level in cls:
            if text in (level.name.lower(), str(level.value)):
                return level

        raise InputError(f"Unknown feature level: {value!r}")


@dataclass(frozen=True)
class TSSRegion:
    """
    Promoter window around a TSS

    Offsets are magnitudes in bp relative to the direction of
    transcription: ``offset_5p`` upstream and ``offset_3p`` downstream.
    """

    offset_5p: int
    offset_3p: int

    def __post_init__(self):
        if self.offset_5p < 0 or self.offset_3p < 0:
            raise InputError(
                "TSS region offsets must be non-negative: "
                f"{self.offset_5p}, {self.offset_3p}"
            )

    @property
    def max_offset(self) -> int:
        return max(self.offset_5p, self.offset_3p)

    def label(self) -> str:
        """Short form used in table headings, e.g. ``prom=-2/+1kb``"""
        return f"prom=-{self.offset_5p / 1000:g}/+{self.offset_3p / 1000:g}kb"

    def __str__(self) -> str:
        return f"[{self.offset_5p},{self.offset_3p}]"


@dataclass(frozen=True)
class GenomicFeature:
    """A gene, transcript or exon returned by a gene store"""

    id: int
    chr: str
    start: int
    end: int
    strand: str
    gene_id: str
    gene_symbol: str
    dist: int = 0

    @property
    def tss(self) -> int:
        """Stranded start: start for '+' features, end for '-' features"""
        if Strand.parse(self.strand) is Strand.NEG:
            return self.end
        return self.start

    @classmethod
    def from_record(cls, record: Dict[str, Any]) -> "GenomicFeature":
        return cls(
            id=int(record["id"]),
            chr=str(record["chr"]),
            start=int(record["start"]),
            end=int(record["end"]),
            strand=str(record["strand"]),
            gene_id=str(record["gene_id"]),
            gene_symbol=str(record["gene_symbol"]),
            dist=int(record.get("dist", 0) or 0),
        )
