"""Tests for logging and validation utilities."""

import logging
import sqlite3

import pytest

from geneannot import check_dependencies
from geneannot.config import Config
from geneannot.utils import (get_logger, log_execution_time, setup_logging, timed,
                             validate_environment, validate_gene_database,
                             validate_input_files)


class TestLogging:
    def test_get_logger_namespace(self):
        assert get_logger("store").name == "geneannot.store"
        assert get_logger("geneannot.genomics").name == "geneannot.genomics"

    def test_setup_logging_replaces_handlers(self, tmp_path):
        log_file = tmp_path / "logs" / "run.log"

        setup_logging("DEBUG", log_file=log_file, use_colors=False)
        logger = setup_logging("INFO", log_file=log_file, use_colors=False)
        get_logger("test").info("annotating chr3")

        assert logger.level == logging.INFO
        assert len(logging.getLogger().handlers) == 2
        assert "annotating chr3" in log_file.read_text()

    def test_log_execution_time_preserves_result(self):
        @log_execution_time
        def count(items):
            return len(items)

        assert count([1, 2, 3]) == 3
        assert count.__name__ == "count"

    def test_log_execution_time_reraises(self):
        @log_execution_time
        def broken():
            raise KeyError("GENE1")

        with pytest.raises(KeyError):
            broken()

    def test_timed_records_on_error(self):
        timings = {}

        with pytest.raises(RuntimeError):
            with timed("annotation", timings):
                raise RuntimeError("store closed")

        assert timings["annotation"] >= 0


class TestValidation:
    def test_environment(self):
        assert validate_environment() == []
        assert all(check_dependencies().values())
        assert "pyyaml" in check_dependencies()

    def test_gene_database(self, gene_db):
        assert validate_gene_database(gene_db) == []

    def test_database_without_genes_table(self, tmp_path):
        db_path = tmp_path / "other.db"
        conn = sqlite3.connect(str(db_path))
        conn.execute("CREATE TABLE transcripts (id INTEGER)")
        conn.commit()
        conn.close()

        issues = validate_gene_database(db_path)

        assert len(issues) == 1
        assert "no 'genes' table" in issues[0]

    def test_feature_table(self, features_tsv):
        assert validate_gene_database(features_tsv) == []

    def test_missing_database(self, tmp_path):
        assert validate_gene_database(tmp_path / "missing.db") == [
            f"Gene database not found: {tmp_path / 'missing.db'}"
        ]

    def test_input_files(self, gene_db, tmp_path):
        config = Config(
            database=str(gene_db), input_file=str(tmp_path / "missing.bed")
        )

        assert validate_input_files(config) == [
            f"Locations file not found: {tmp_path / 'missing.bed'}"
        ]
