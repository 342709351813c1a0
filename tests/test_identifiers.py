"""Tests for identifier normalisation and input files."""

import pytest
from openpyxl import Workbook

from peppol_lookup.core.identifiers import EXAMPLE_IDENTIFIERS, normalize_identifier, read_identifiers


class TestNormalize:
    """Tests for normalize_identifier."""

    @pytest.mark.parametrize(
        "raw, expected",
        [
            ("0769377373", "0769377373"),
            ("0475.384.429", "0475384429"),
            ("BE 0635.581.315", "0635581315"),
            ("  BE-0407 703 668\n", "0407703668"),
            ("ABC", ""),
        ],
    )
    def test_strips_non_digits(self, raw, expected):
        assert normalize_identifier(raw) == expected

    def test_example_list_normalises_to_digits(self):
        """Test that every example identifier survives normalisation."""
        normalized = [normalize_identifier(n) for n in EXAMPLE_IDENTIFIERS]
        assert len(normalized) == 8
        assert all(n.isdigit() for n in normalized)
        assert "12345647125" in normalized


class TestReadIdentifiers:
    """Tests for read_identifiers."""

    def test_text_file(self, tmp_path):
        """Test one identifier per line with comments and blanks skipped."""
        path = tmp_path / "numbers.txt"
        path.write_text("# customers\n0769377373\n\nBE 0635.581.315\n", encoding="utf-8")

        assert read_identifiers(str(path)) == ["0769377373", "BE 0635.581.315"]

    def test_csv_named_column(self, tmp_path):
        """Test reading a named CSV column."""
        path = tmp_path / "numbers.csv"
        path.write_text("Name,VAT Number\nAcme,0769377373\nBeta,0772302320\n", encoding="utf-8")

        assert read_identifiers(str(path), column="vat number") == ["0769377373", "0772302320"]

    def test_csv_first_column_skips_header(self, tmp_path):
        """Test that a header row without digits is skipped."""
        path = tmp_path / "numbers.csv"
        path.write_text("company\n0769377373\n0772302320\n", encoding="utf-8")

        assert read_identifiers(str(path)) == ["0769377373", "0772302320"]

    def test_csv_without_header(self, tmp_path):
        """Test that the first row is kept when it holds an identifier."""
        path = tmp_path / "numbers.csv"
        path.write_text("0769377373\n0772302320\n", encoding="utf-8")

        assert read_identifiers(str(path)) == ["0769377373", "0772302320"]

    def test_csv_missing_column(self, tmp_path):
        """Test that an unknown column name is rejected."""
        path = tmp_path / "numbers.csv"
        path.write_text("company\n0769377373\n", encoding="utf-8")

        with pytest.raises(ValueError):
            read_identifiers(str(path), column="vat")

    def test_excel_file(self, tmp_path):
        """Test reading identifiers from the first sheet of a workbook."""
        path = tmp_path / "numbers.xlsx"
        workbook = Workbook()
        sheet = workbook.active
        sheet.append(["Company", "Enterprise Number"])
        sheet.append(["Acme", "0769377373"])
        sheet.append(["Beta", None])
        sheet.append(["Gamma", 12345647125])
        workbook.save(path)

        assert read_identifiers(str(path), column="Enterprise Number") == ["0769377373", "12345647125"]

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            read_identifiers(str(tmp_path / "nope.txt"))

    def test_unsupported_format(self, tmp_path):
        path = tmp_path / "numbers.pdf"
        path.write_bytes(b"%PDF")
        with pytest.raises(ValueError):
            read_identifiers(str(path))
