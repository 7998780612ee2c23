"""
Core geneannot pipeline orchestrator
"""

from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence, Union

import pandas as pd

from .config import Config, load_config, validate_config
from .genomics import (AnnotationResult, Annotator, Location, make_gene_table,
                       read_locations, write_gene_table)
from .store import GeneStore, open_gene_store
from .utils import get_logger, setup_logging, timed

logger = get_logger(__name__)


class GeneAnnotationPipeline:
    """
    Config driven annotation of a batch of locations

    Opens the gene store named in the configuration, annotates every
    location and renders the results as a gene table.
    """

    def __init__(
        self,
        config: Union[str, Path, Config, Dict[str, Any]],
        store: Optional[GeneStore] = None,
        log_level: Optional[str] = None,
        log_file: Optional[Union[str, Path]] = None,
    ):
        """
        Initialize annotation pipeline

        Args:
            config: Configuration file path, Config object, or config dict
            store: Gene store to use instead of opening ``config.database``
            log_level: Logging level overriding the configured one
            log_file: Optional log file path
        """
        if isinstance(config, (str, Path)):
            self.config = load_config(config)
        elif isinstance(config, dict):
            self.config = Config(**config)
        elif isinstance(config, Config):
            self.config = config
        else:
            raise ValueError(
                "Invalid config type. Expected str, Path, dict, or Config object"
            )

        log_config = self.config.log_config
        setup_logging(
            level=log_level or log_config["level"],
            log_file=log_file or log_config["log_file"],
            use_colors=log_config["use_colors"],
        )
        logger.info("Initializing gene annotation pipeline")

        self._validate_config()

        if store is None:
            if not self.config.database:
                raise ValueError("No gene database configured")
            store = open_gene_store(self.config.database)

        self.store = store
        self.tss_region = self.config.get_tss_region()

        annotation = self.config.annotation
        self.annotator = Annotator(
            store=self.store,
            tss_region=self.tss_region,
            n=annotation["n_closest"],
            level=annotation["level"],
            closest_level=annotation["closest_level"],
            max_workers=annotation["max_workers"],
        )

        self.results: List[AnnotationResult] = []
        self.execution_times: Dict[str, float] = {}

        logger.info(f"Pipeline ready: store={self.store}, tss_region={self.tss_region}")

    def _validate_config(self) -> None:
        issues = validate_config(self.config)

        if issues:
            logger.warning("Configuration issues found:")
            for issue in issues:
                logger.warning(f"  - {issue}")

    def annotate_locations(self, locations: Sequence[Location]) -> pd.DataFrame:
        """
        Annotate locations and build the gene table

        Args:
            locations: Locations to annotate

        Returns:
            Gene table with one row per location
        """
        batch = self.config.batch

        with timed("annotation", self.execution_times):
            self.results = self.annotator.annotate_many(
                locations, n_jobs=batch["n_jobs"], fail_fast=batch["fail_fast"]
            )

            table = make_gene_table(
                self.results, self.config.annotation["n_closest"], self.tss_region
            )

        return table

    def run(
        self,
        input_file: Optional[Union[str, Path]] = None,
        output_file: Optional[Union[str, Path]] = None,
    ) -> pd.DataFrame:
        """
        Read locations, annotate them and write the gene table

        Args:
            input_file: Locations file, defaults to ``config.input_file``
            output_file: Output table, defaults to ``config.output_file``
                or ``<output_dir>/<project_name>_genes.tsv``

        Returns:
            Gene table
        """
        input_file = input_file or self.config.input_file
        if not input_file:
            raise ValueError("No locations file configured")

        with timed("total", self.execution_times):
            with timed("read_locations", self.execution_times):
                locations = read_locations(input_file)

            table = self.annotate_locations(locations)

            output_file = output_file or self._default_output_file()
            if output_file:
                with timed("write_table", self.execution_times):
                    write_gene_table(table, output_file)

        logger.info(
            f"Pipeline completed in {self.execution_times['total']:.2f} seconds"
        )

        return table

    def _default_output_file(self) -> Optional[Path]:
        if self.config.output_file:
            return Path(self.config.output_file)

        if self.config.output_dir:
            return (
                Path(self.config.output_dir) / f"{self.config.project_name}_genes.tsv"
            )

        return None

    def get_failed_locations(self) -> List[AnnotationResult]:
        return [result for result in self.results if not result.success]

    def get_execution_times(self) -> Dict[str, float]:
        return self.execution_times.copy()

    def close(self) -> None:
        self.store.close()
