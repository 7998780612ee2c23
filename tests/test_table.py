"""Tests for gene table rendering."""

import pandas as pd

from geneannot.exceptions import StoreError
from geneannot.genomics import (AnnotationResult, Annotator, Location, TSSRegion,
                                gene_table_headers, make_gene_table, write_gene_table)


class TestHeaders:
    def test_column_count(self, tss_region):
        assert len(gene_table_headers(0, tss_region)) == 5
        assert len(gene_table_headers(3, tss_region)) == 5 + 4 * 3

    def test_promoter_label(self, tss_region):
        headers = gene_table_headers(1, tss_region)

        assert headers[:5] == [
            "Location",
            "ID",
            "Gene Symbol",
            "Relative To Gene (prom=-2/+1kb)",
            "TSS Distance",
        ]
        assert headers[5:] == [
            "#1 Closest ID",
            "#1 Closest Gene Symbols",
            "#1 Relative To Closet Gene (prom=-2/+1kb)",
            "#1 TSS Closest Distance",
        ]

    def test_fractional_kb(self):
        assert "prom=-2.5/+0.5kb" in gene_table_headers(0, TSSRegion(2500, 500))[3]


class TestMakeGeneTable:
    def test_rows(self, store, tss_region, query_location):
        annotator = Annotator(store, tss_region, n=3)
        results = annotator.annotate_many([query_location])

        table = make_gene_table(results, 3, tss_region)
        row = table.iloc[0]

        assert table.shape == (1, 17)
        assert row["Location"] == "chr3:187745448-187745468"
        assert row["ID"] == "GENE1;GENE2"
        assert row["Gene Symbol"] == "BCL6X;LPP2"
        assert row["Relative To Gene (prom=-2/+1kb)"] == "promoter,intronic;promoter"
        assert row["TSS Distance"] == "-8;-1458"
        assert row["#3 Closest ID"] == "GENE3"
        assert row["#3 Relative To Closet Gene (prom=-2/+1kb)"] == "intergenic"
        assert row["#3 TSS Closest Distance"] == "54542"

    def test_missing_closest_slots_padded(self, store, tss_region):
        annotator = Annotator(store, tss_region, n=5)
        results = annotator.annotate_many([Location("chr3", 1000, 1100)])

        table = make_gene_table(results, 5, tss_region)
        row = table.iloc[0]

        assert row["ID"] == "n/a"
        assert row["Relative To Gene (prom=-2/+1kb)"] == ""
        assert row["#3 Closest ID"] == "GENE3"
        assert row["#4 Closest ID"] == "n/a"
        assert row["#5 TSS Closest Distance"] == "n/a"

    def test_failed_location(self, tss_region):
        location = Location("chr1", 1, 2)
        results = [AnnotationResult(location, error=StoreError("boom"))]

        table = make_gene_table(results, 2, tss_region)

        assert table.iloc[0].tolist() == [str(location)] + ["n/a"] * 12


class TestWriteGeneTable:
    def test_text(self, store, tss_region, query_location):
        results = Annotator(store, tss_region, n=1).annotate_many([query_location])
        table = make_gene_table(results, 1, tss_region)

        text = write_gene_table(table)
        lines = text.splitlines()

        assert lines[0].startswith("Location\tID\tGene Symbol\t")
        assert lines[1].split("\t") == [
            "chr3:187745448-187745468",
            "GENE1;GENE2",
            "BCL6X;LPP2",
            "promoter,intronic;promoter",
            "-8;-1458",
            "GENE1",
            "BCL6X",
            "promoter,intronic",
            "-8",
        ]

    def test_file(self, tmp_path, store, tss_region, query_location):
        results = Annotator(store, tss_region, n=2).annotate_many([query_location])
        table = make_gene_table(results, 2, tss_region)
        output_file = tmp_path / "out" / "genes.tsv"

        assert write_gene_table(table, output_file) is None

        written = pd.read_csv(output_file, sep="\t", dtype=str, keep_default_na=False)
        pd.testing.assert_frame_equal(written, table, check_dtype=False)
