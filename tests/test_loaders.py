"""Tests for input file loaders."""

import json

import pytest
from pathlib import Path

from lock_audit.core.errors import CompromiseListError
from lock_audit.core.loaders import CompromiseCsvLoader, PackageLockLoader
from lock_audit.core.matcher import CompromiseRecord


@pytest.fixture
def compromise_csv(tmp_path):
    """Create a Wiz-style compromise CSV with a BOM and comments."""
    csv_file = tmp_path / "shai-hulud-2-packages.csv"
    csv_file.write_text(
        "\ufeff# Shai-Hulud 2.0 IOC list\n"
        "Package,Version,Notes\n"
        "\n"
        "left-pad,<= 1.3.0,first wave\n"
        "   # indented comment\n"
        "@ctrl/tinycolor,= 4.1.1 || = 4.1.2,\n"
        "debug\n",
        encoding="utf-8",
    )
    return csv_file


class TestCompromiseCsvLoader:
    """Test the compromise CSV loader."""

    def test_can_load_csv(self, compromise_csv):
        """Test CSV files are recognised."""
        loader = CompromiseCsvLoader()
        assert loader.can_load(compromise_csv)
        assert not loader.can_load(Path("package-lock.json"))

    def test_load(self, compromise_csv):
        """Test rows are loaded in order with normalised headers."""
        records = CompromiseCsvLoader().load(compromise_csv)

        assert records == [
            CompromiseRecord("left-pad", "<= 1.3.0", "first wave"),
            CompromiseRecord("@ctrl/tinycolor", "= 4.1.1 || = 4.1.2", ""),
            CompromiseRecord("debug", "", ""),
        ]

    def test_quoted_cells(self, tmp_path):
        """Test quoted cells may contain commas."""
        csv_file = tmp_path / "list.csv"
        csv_file.write_text(
            'package,versionRange,notes\n'
            'left-pad,">=1.0.0 || <0.5.0","stolen token, republished"\n'
        )

        records = CompromiseCsvLoader().load(csv_file)

        assert records == [
            CompromiseRecord("left-pad", ">=1.0.0 || <0.5.0", "stolen token, republished"),
        ]

    def test_quoted_cell_spanning_lines(self, tmp_path):
        """Test a quoted cell may contain line breaks and comment-like lines."""
        csv_file = tmp_path / "list.csv"
        csv_file.write_text(
            'package,version,notes\n'
            '# a comment, with commas\n'
            'left-pad,1.3.0,"first line\n'
            '# not a comment\n'
            '\n'
            'last line"\n'
            'debug,4.3.4,\n'
        )

        records = CompromiseCsvLoader().load(csv_file)

        assert records == [
            CompromiseRecord("left-pad", "1.3.0", "first line\n# not a comment\n\nlast line"),
            CompromiseRecord("debug", "4.3.4", ""),
        ]

    @pytest.mark.parametrize("content", ["", "\n\n", "# only a comment\n", "package,version\n"])
    def test_no_rows(self, tmp_path, content):
        """Test empty and header-only files yield no records."""
        csv_file = tmp_path / "empty.csv"
        csv_file.write_text(content)

        assert CompromiseCsvLoader().load(csv_file) == []

    def test_missing_package_column(self, tmp_path):
        """Test rows without a package column are rejected."""
        csv_file = tmp_path / "bad.csv"
        csv_file.write_text("name,version\nleft-pad,1.3.0\n")

        with pytest.raises(CompromiseListError, match="no 'package' column"):
            CompromiseCsvLoader().load(csv_file)

    def test_missing_file(self, tmp_path):
        """Test a missing file raises FileNotFoundError."""
        with pytest.raises(FileNotFoundError, match="Missing compromised package CSV at"):
            CompromiseCsvLoader().load(tmp_path / "nope.csv")

    def test_directory_is_rejected(self, tmp_path):
        """Test a directory path is not loaded."""
        with pytest.raises(ValueError, match="Path is not a file"):
            CompromiseCsvLoader().load(tmp_path)


class TestPackageLockLoader:
    """Test the package-lock.json loader."""

    def test_can_load(self):
        """Test lockfile names are recognised."""
        loader = PackageLockLoader()
        assert loader.can_load(Path("package-lock.json"))
        assert loader.can_load(Path("npm-shrinkwrap.json"))
        assert not loader.can_load(Path("package.json"))

    def test_load(self, tmp_path):
        """Test the JSON document is returned unchanged."""
        document = {
            "lockfileVersion": 3,
            "packages": {"node_modules/left-pad": {"version": "1.3.0"}},
        }
        lock_file = tmp_path / "package-lock.json"
        lock_file.write_text(json.dumps(document))

        assert PackageLockLoader().load(lock_file) == document

    def test_invalid_json(self, tmp_path):
        """Test malformed JSON propagates a decode error."""
        lock_file = tmp_path / "package-lock.json"
        lock_file.write_text("{not json")

        with pytest.raises(json.JSONDecodeError):
            PackageLockLoader().load(lock_file)

    def test_missing_file(self, tmp_path):
        """Test a missing lockfile raises FileNotFoundError."""
        with pytest.raises(FileNotFoundError, match="Missing package-lock.json at"):
            PackageLockLoader().load(tmp_path / "package-lock.json")
