"""
Tabular rendering of gene annotations
"""

from pathlib import Path
from typing import List, Optional, Sequence, Union

import pandas as pd

from ..utils import get_logger
from .annotator import AnnotationResult
from .classify import NA
from .models import TSSRegion

logger = get_logger(__name__)


def gene_table_headers(n_closest: int, tss_region: TSSRegion) -> List[str]:
    """Column headings for a gene table with ``n_closest`` closest gene slots"""

    prom = tss_region.label()

    headers = [
        "Location",
        "ID",
        "Gene Symbol",
        f"Relative To Gene ({prom})",
        "TSS Distance",
    ]

    for i in range(1, n_closest + 1):
        headers.extend(
            [
                f"#{i} Closest ID",
                f"#{i} Closest Gene Symbols",
                f"#{i} Relative To Closet Gene ({prom})",
                f"#{i} TSS Closest Distance",
            ]
        )

    return headers


def make_gene_table(
    results: Sequence[AnnotationResult],
    n_closest: int,
    tss_region: TSSRegion,
) -> pd.DataFrame:
    """
    Build a table with one row per annotated location

    Args:
        results: Annotation results in output order
        n_closest: Number of closest gene column blocks
        tss_region: TSS region used, shown in the headings

    Returns:
        DataFrame of strings; missing slots and failed locations hold "n/a"
    """

    headers = gene_table_headers(n_closest, tss_region)
    rows = []

    for result in results:
        row = [str(result.location)]

        if not result.success:
            row.extend([NA] * (len(headers) - 1))
            rows.append(row)
            continue

        joined = result.annotation.joined()
        row.extend(
            [
                joined["gene_ids"],
                joined["gene_symbols"],
                joined["labels"],
                joined["tss_distances"],
            ]
        )

        for closest_gene in result.annotation.closest_genes[:n_closest]:
            row.extend(
                [
                    closest_gene.gene_id,
                    closest_gene.gene_symbol,
                    closest_gene.label,
                    str(closest_gene.tss_distance),
                ]
            )

        row.extend([NA] * (len(headers) - len(row)))
        rows.append(row)

    logger.debug(f"Built gene table with {len(rows)} rows and {len(headers)} columns")

    return pd.DataFrame(rows, columns=headers, dtype=str)


def write_gene_table(
    table: pd.DataFrame, output_file: Optional[Union[str, Path]] = None
) -> Optional[str]:
    """
    Write a gene table as tab separated text

    Args:
        table: Table from make_gene_table
        output_file: Destination file; when None the text is returned

    Returns:
        Table text when no output file is given
    """
    if output_file is None:
        return table.to_csv(sep="\t", index=False)

    output_path = Path(output_file)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    table.to_csv(output_path, sep="\t", index=False)

    logger.info(f"Gene table saved to {output_path}")
    return None
