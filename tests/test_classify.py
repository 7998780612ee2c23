"""Tests for promoter / exon / intron classification."""

import pytest

from geneannot.genomics import (INTERGENIC, GenomicFeature, Location, LocationClass,
                                TSSRegion, classify, classify_flags, make_label,
                                promoter_window, tss_distance)
from geneannot.store import GeneStore


def feature(start, end, strand, gene_id="G1"):
    return GenomicFeature(
        id=1,
        chr="chr1",
        start=start,
        end=end,
        strand=strand,
        gene_id=gene_id,
        gene_symbol=gene_id,
    )


class CountingStore(GeneStore):
    """Answers exon queries from a fixed flag and counts the calls."""

    def __init__(self, in_exon=False):
        self.in_exon = in_exon
        self.exon_calls = 0

    def features_overlapping_or_near_promoter(self, location, level, pad):
        return []

    def features_in_exon(self, location, gene_id):
        self.exon_calls += 1
        if not self.in_exon:
            return []
        return [feature(location.start, location.end, "+", gene_id)]

    def closest_features(self, location, n, level):
        return []


TSS = TSSRegion(2000, 1000)


class TestMakeLabel:
    @pytest.mark.parametrize(
        "flags, label",
        [
            ((True, False, False), "promoter"),
            ((True, True, False), "promoter,exonic"),
            ((True, True, True), "promoter,exonic"),
            ((True, False, True), "promoter,intronic"),
            ((False, True, True), "exonic"),
            ((False, False, True), "intronic"),
            ((False, False, False), ""),
        ],
    )
    def test_labels(self, flags, label):
        assert make_label(*flags) == label

    def test_location_class_label(self):
        assert LocationClass(is_promoter=True, is_intronic=True).label == (
            "promoter,intronic"
        )


class TestTSSDistance:
    def test_sign_same_for_both_strands(self):
        location = Location("chr1", 890, 910)

        assert tss_distance(location, feature(1000, 5000, "+")) == 100
        assert tss_distance(location, feature(0, 1000, "-")) == 100

    def test_downstream_location_is_negative(self):
        location = Location("chr1", 1190, 1210)

        assert tss_distance(location, feature(1000, 5000, "+")) == -200


class TestPromoterWindow:
    def test_plus_strand(self):
        assert promoter_window(feature(10000, 20000, "+"), TSS) == (8000, 11000)

    def test_minus_strand(self):
        assert promoter_window(feature(10000, 20000, "-"), TSS) == (19000, 22000)

    def test_clamped_at_zero(self):
        assert promoter_window(feature(500, 2000, "+"), TSS) == (0, 1500)


class TestClassifyFlags:
    def test_promoter_at_tss(self):
        location = Location("chr3", 187745450, 187745450)
        flags = classify_flags(location, feature(187745450, 187750000, "+"), TSS, False)

        assert flags.is_promoter
        assert flags.is_intronic
        assert not flags.is_exon

    def test_upstream_promoter_only(self):
        location = Location("chr1", 9000, 9010)
        flags = classify_flags(location, feature(10000, 20000, "+"), TSS, False)

        assert flags.label == "promoter"

    def test_minus_strand_promoter_is_upstream_of_end(self):
        gene = feature(10000, 20000, "-")

        upstream = classify_flags(Location("chr1", 21500, 21500), gene, TSS, False)
        downstream = classify_flags(Location("chr1", 8500, 8500), gene, TSS, False)

        assert upstream.is_promoter
        assert not downstream.is_promoter

    def test_exon_flag_is_passed_through(self):
        location = Location("chr1", 15000, 15010)
        flags = classify_flags(location, feature(10000, 20000, "+"), TSS, True)

        assert flags.label == "exonic"


class TestClassify:
    def test_intergenic_skips_store(self):
        store = CountingStore()
        location = Location("chr1", 100, 200)

        label, d = classify(location, feature(10000, 20000, "+"), TSS, store)

        assert label == INTERGENIC
        assert d == 10000 - 150
        assert store.exon_calls == 0

    def test_within_gene_queries_exons_once(self):
        store = CountingStore(in_exon=True)
        location = Location("chr1", 15000, 15010)

        label, d = classify(location, feature(10000, 20000, "+"), TSS, store)

        assert label == "exonic"
        assert d == 10000 - 15005
        assert store.exon_calls == 1

    def test_promoter_window_outside_gene_body(self):
        store = CountingStore()
        location = Location("chr1", 20500, 20600)

        label, _ = classify(location, feature(10000, 20000, "-"), TSS, store)

        assert label == "promoter"
        assert store.exon_calls == 1

    def test_location_overlapping_window_edge(self):
        # Midpoint falls outside every window but the interval touches the body
        store = CountingStore()
        location = Location("chr1", 20000, 24000)

        label, _ = classify(location, feature(10000, 20000, "+"), TSS, store)

        assert label == ""
        assert store.exon_calls == 1
