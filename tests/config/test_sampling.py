"""Tests for input file selection (format_config/sampling.py)."""

import pytest

from format_config import find_schema_sample_file, list_input_files


class TestFindSchemaSampleFile:
    def test_file_returned_as_is(self, tmp_path):
        path = tmp_path / "a.csv"
        path.write_text("x\n")
        assert find_schema_sample_file(path) == path

    def test_first_entry_without_filter(self, tmp_path):
        for name in ("b.csv", "a.csv"):
            (tmp_path / name).write_text("x\n")
        assert find_schema_sample_file(tmp_path) == tmp_path / "a.csv"

    def test_markers_never_sampled(self, tmp_path):
        (tmp_path / "_SUCCESS").write_text("")
        (tmp_path / ".data.csv.crc").write_text("crc")
        (tmp_path / "data.csv").write_text("a,b\n1,2\n")
        assert find_schema_sample_file(tmp_path) == tmp_path / "data.csv"

    def test_first_match_with_filter(self, tmp_path):
        for name in ("a.txt", "b.csv", "c.csv"):
            (tmp_path / name).write_text("x\n")
        assert find_schema_sample_file(tmp_path, r"\.csv$") == tmp_path / "b.csv"

    def test_missing_path(self, tmp_path):
        with pytest.raises(FileNotFoundError, match="Input path not found"):
            find_schema_sample_file(tmp_path / "missing")

    def test_empty_directory(self, tmp_path):
        with pytest.raises(ValueError, match="Provided directory is empty"):
            find_schema_sample_file(tmp_path)

    def test_only_markers_is_empty(self, tmp_path):
        (tmp_path / "_SUCCESS").write_text("")
        (tmp_path / "nested").mkdir()
        with pytest.raises(ValueError, match="Provided directory is empty"):
            find_schema_sample_file(tmp_path)

    def test_no_match(self, tmp_path):
        (tmp_path / "a.txt").write_text("x\n")
        with pytest.raises(ValueError, match="matched regex"):
            find_schema_sample_file(tmp_path, r"\.csv$")


class TestListInputFiles:
    def test_file_is_its_own_input(self, tmp_path):
        path = tmp_path / "a.csv"
        path.write_text("x\n")
        assert list_input_files(path) == [path]

    def test_skips_markers_and_subdirectories(self, tmp_path):
        for name in ("b.csv", "a.csv", "_SUCCESS", ".a.csv.crc"):
            (tmp_path / name).write_text("x\n")
        (tmp_path / "nested").mkdir()
        assert list_input_files(tmp_path) == [tmp_path / "a.csv", tmp_path / "b.csv"]

    def test_filter_searches_full_path(self, tmp_path):
        (tmp_path / "in").mkdir()
        for name in ("a.csv", "b.txt"):
            (tmp_path / "in" / name).write_text("x\n")
        assert list_input_files(tmp_path / "in", r"\.csv$") == [tmp_path / "in" / "a.csv"]
        # The directory part of the path is searched too.
        assert len(list_input_files(tmp_path / "in", r"/in/")) == 2
