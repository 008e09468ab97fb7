"""
Unit tests for sheetrecon/tableio.py
"""

import os

import pytest

from sheetrecon.exceptions import DuplicateHeaderError
from sheetrecon.model import Partition, Table
from sheetrecon.tableio import read_table_csv, write_partitions_csv, write_table_csv


class TestReadTableCsv:
    """Test read_table_csv()"""

    def test_reads_headers_and_rows(self, tmp_path):
        path = tmp_path / "in.csv"
        path.write_text('id,name\n1,"Doe, J"\n2\n', encoding="utf-8")

        table = read_table_csv(str(path))

        assert table.headers == ("id", "name")
        assert table.rows == (("1", "Doe, J"), ("2", ""))

    def test_strips_byte_order_mark(self, tmp_path):
        path = tmp_path / "bom.csv"
        path.write_bytes("\ufeffid\n1\n".encode("utf-8"))

        assert read_table_csv(str(path)).headers == ("id",)

    def test_custom_encoding_and_delimiter(self, tmp_path):
        path = tmp_path / "sjis.csv"
        path.write_bytes("部署;氏名\n営業;伊藤\n".encode("cp932"))

        table = read_table_csv(str(path), encoding="cp932", delimiter=";")

        assert table.rows == (("営業", "伊藤"),)

    def test_empty_file(self, tmp_path):
        path = tmp_path / "empty.csv"
        path.write_text("", encoding="utf-8")

        table = read_table_csv(str(path))

        assert table.headers == ()
        assert len(table) == 0

    def test_duplicate_headers(self, tmp_path):
        path = tmp_path / "dup.csv"
        path.write_text("a,a\n", encoding="utf-8")

        with pytest.raises(DuplicateHeaderError):
            read_table_csv(str(path))

    def test_missing_file(self, tmp_path):
        with pytest.raises(OSError):
            read_table_csv(str(tmp_path / "missing.csv"))


class TestWriteTableCsv:

    def test_round_trip(self, tmp_path):
        table = Table(("id", "note"), (("1", "a,b"), ("2", 'say "hi"')))
        path = tmp_path / "out.csv"

        write_table_csv(table, str(path))

        assert read_table_csv(str(path)) == table


class TestWritePartitionsCsv:
    """Test write_partitions_csv()"""

    def test_one_file_per_partition(self, tmp_path):
        headers = ("k", "v")
        parts = [
            Partition("a/b", Table(headers, (("a/b", "1"),))),
            Partition("a:b", Table(headers, (("a:b", "2"),))),
            Partition("", Table(headers, (("", "3"),))),
        ]
        output_dir = tmp_path / "parts"

        paths = write_partitions_csv(parts, str(output_dir))

        assert [os.path.basename(p) for p in paths] == ["a_b.csv", "a_b_2.csv", "EMPTY.csv"]
        assert read_table_csv(paths[1]).rows == (("a:b", "2"),)

    def test_no_partitions(self, tmp_path):
        assert write_partitions_csv([], str(tmp_path / "none")) == []
        assert (tmp_path / "none").is_dir()
