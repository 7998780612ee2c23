"""
Genomic locations and location file parsing
"""

import re
from dataclasses import dataclass
from pathlib import Path
from typing import List, Union

import pandas as pd

from ..exceptions import InputError
from ..utils import get_logger

logger = get_logger(__name__)

LOCATION_PATTERN = re.compile(r"^\s*([^:\s]+):([\d,]+)-([\d,]+)\s*$")


@dataclass(frozen=True)
class Location:
    """A closed genomic interval on one chromosome"""

    chr: str
    start: int
    end: int

    def __post_init__(self):
        if not self.chr:
            raise InputError("Location chromosome cannot be empty")

        if self.start < 0 or self.end < 0:
            raise InputError(
                f"Location coordinates must be non-negative: {self.start}-{self.end}"
            )

        if self.start > self.end:
            raise InputError(
                f"Location start {self.start} is greater than end {self.end}"
            )

    @property
    def mid(self) -> int:
        return (self.start + self.end) // 2

    @property
    def length(self) -> int:
        return self.end - self.start + 1

    def __str__(self) -> str:
        return f"{self.chr}:{self.start}-{self.end}"

    @classmethod
    def parse(cls, text: str) -> "Location":
        """
        Parse a location string such as ``chr3:187745448-187745468``

        Args:
            text: Location in ``chr:start-end`` form, commas allowed in numbers

        Returns:
            Parsed Location
        """
        match = LOCATION_PATTERN.match(str(text))

        if not match:
            raise InputError(f"Invalid location: {text!r}")

        chrom, start, end = match.groups()

        return cls(chrom, int(start.replace(",", "")), int(end.replace(",", "")))


def read_locations(locations_file: Union[str, Path]) -> List[Location]:
    """
    Read locations from a file

    The file either has one ``chr:start-end`` location per line or is
    BED-like with chromosome, start and end in the first three tab
    separated columns. Lines starting with ``#`` are ignored.

    Args:
        locations_file: Path to the locations file

    Returns:
        List of locations in file order
    """
    path = Path(locations_file)

    if not path.exists():
        raise FileNotFoundError(f"Locations file not found: {path}")

    logger.info(f"Reading locations from {path}")

    try:
        df = pd.read_csv(
            path, sep="\t", header=None, comment="#", dtype=str, skip_blank_lines=True
        )
    except pd.errors.EmptyDataError:
        logger.warning(f"No locations found in {path}")
        return []

    locations = []

    if len(df.columns) >= 3:
        for row in df.itertuples(index=False):
            try:
                locations.append(Location(str(row[0]), int(row[1]), int(row[2])))
            except ValueError as e:
                # BED header lines such as "chr start end"
                if not locations and not str(row[1]).isdigit():
                    logger.debug(f"Skipping header line: {list(row[:3])}")
                    continue
                raise InputError(f"Invalid location row {list(row[:3])}: {e}") from e
    else:
        for value in df.iloc[:, 0]:
            locations.append(Location.parse(value))

    logger.info(f"Read {len(locations)} locations")

    return locations
