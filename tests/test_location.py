"""Tests for locations and location files."""

import pytest

from geneannot.exceptions import InputError
from geneannot.genomics import Location, read_locations


class TestLocation:
    def test_parse(self):
        location = Location.parse("chr3:187745448-187745468")
        assert location == Location("chr3", 187745448, 187745468)

    def test_parse_commas_and_whitespace(self):
        location = Location.parse("  chr1:1,000-2,000\n")
        assert (location.start, location.end) == (1000, 2000)

    def test_mid_floors(self):
        assert Location("chr3", 187745448, 187745468).mid == 187745458
        assert Location("chr1", 10, 13).mid == 11

    def test_str(self):
        assert str(Location("chrX", 5, 10)) == "chrX:5-10"

    def test_length(self):
        assert Location("chr1", 10, 10).length == 1

    @pytest.mark.parametrize(
        "text", ["chr3", "chr3:100", "chr3:a-b", ":1-2", "chr3:1-2-3", ""]
    )
    def test_parse_invalid(self, text):
        with pytest.raises(InputError):
            Location.parse(text)

    def test_start_after_end(self):
        with pytest.raises(InputError, match="greater than end"):
            Location("chr1", 20, 10)

    def test_input_error_is_value_error(self):
        with pytest.raises(ValueError):
            Location.parse("nonsense")


class TestReadLocations:
    def test_one_per_line(self, tmp_path):
        path = tmp_path / "locations.txt"
        path.write_text("# peaks\nchr3:187745448-187745468\nchr1:100-200\n")

        assert read_locations(path) == [
            Location("chr3", 187745448, 187745468),
            Location("chr1", 100, 200),
        ]

    def test_bed(self, tmp_path):
        path = tmp_path / "peaks.bed"
        path.write_text(
            "chr3\t187745448\t187745468\tpeak1\t5.0\n"
            "chr1\t100\t200\tpeak2\t1.0\n"
        )

        assert read_locations(path) == [
            Location("chr3", 187745448, 187745468),
            Location("chr1", 100, 200),
        ]

    def test_bed_header_skipped(self, tmp_path):
        path = tmp_path / "peaks.bed"
        path.write_text("chrom\tstart\tend\nchr2\t5\t15\n")

        assert read_locations(path) == [Location("chr2", 5, 15)]

    def test_empty_file(self, tmp_path):
        path = tmp_path / "empty.txt"
        path.write_text("")

        assert read_locations(path) == []

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            read_locations(tmp_path / "missing.txt")

    def test_invalid_line(self, tmp_path):
        path = tmp_path / "locations.txt"
        path.write_text("chr1:100-200\nnot-a-location\n")

        with pytest.raises(InputError):
            read_locations(path)
