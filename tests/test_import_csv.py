"""Tests for the center directory CSV import pipeline."""

import csv
import json

import pytest

import sys, os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from centers.import_csv import (
    DEFAULT_COLUMNS,
    import_csv,
    main,
    parse_aliases,
    parse_column_overrides,
    row_to_center,
)
from centers.schema import Center


# ── Helper parsers ─────────────────────────────────────────────────


class TestParseAliases:
    def test_comma_separated(self):
        assert parse_aliases("Madras, Manapakkam") == ["Madras", "Manapakkam"]

    def test_pipe_and_semicolon(self):
        assert parse_aliases("Bengaluru|Blr;Bangaluru") == ["Bengaluru", "Blr", "Bangaluru"]

    def test_empty(self):
        assert parse_aliases("") == []
        assert parse_aliases("nan") == []
        assert parse_aliases("None") == []


class TestParseColumnOverrides:
    def test_defaults(self):
        assert parse_column_overrides(None) == DEFAULT_COLUMNS

    def test_override(self):
        columns = parse_column_overrides(["city=Center Name", "zone= Zone "])
        assert columns["city"] == "Center Name"
        assert columns["zone"] == "Zone"
        assert columns["country"] == "country"

    def test_unknown_field(self):
        with pytest.raises(ValueError):
            parse_column_overrides(["rent=price"])

    def test_missing_separator(self):
        with pytest.raises(ValueError):
            parse_column_overrides(["city"])


# ── CSV import pipeline ────────────────────────────────────────────


@pytest.fixture
def sample_csv(tmp_path):
    """Create a small center list CSV."""
    csv_path = tmp_path / "centers.csv"
    rows = [
        {"Center Name": "Chennai", "Zone": "Tamil Nadu", "Country": "India", "Other Names": "Madras"},
        {"Center Name": "Houston", "Zone": "US-South", "Country": "United States", "Other Names": ""},
        {"Center Name": "chennai", "Zone": "TN-2", "Country": "India", "Other Names": ""},
        {"Center Name": "", "Zone": "Kerala", "Country": "India", "Other Names": ""},
        {"Center Name": "Pune", "Zone": "", "Country": "India", "Other Names": ""},
    ]
    with open(csv_path, "w", newline="") as f:
        writer = csv.DictWriter(f, fieldnames=rows[0].keys())
        writer.writeheader()
        writer.writerows(rows)
    return csv_path


@pytest.fixture
def columns():
    return {"city": "Center Name", "zone": "Zone", "country": "Country", "aliases": "Other Names"}


class TestRowToCenter:
    def test_valid_row(self, columns):
        row = {"Center Name": "Chennai", "Zone": "Tamil Nadu", "Country": "India", "Other Names": "Madras"}
        center = row_to_center(row, columns)
        assert center == Center(city="Chennai", zone="Tamil Nadu", country="India", aliases=["Madras"])

    def test_missing_city(self, columns):
        assert row_to_center({"Center Name": " ", "Zone": "Kerala"}, columns) is None

    def test_missing_zone_is_unknown(self, columns):
        center = row_to_center({"Center Name": "Pune", "Country": "India"}, columns)
        assert center.zone == "unknown"


class TestImportCsv:
    def test_loads_valid_unique_rows(self, sample_csv, columns):
        centers = import_csv(sample_csv, columns)
        assert [c.city for c in centers] == ["Chennai", "Houston", "Pune"]

    def test_first_duplicate_wins(self, sample_csv, columns):
        centers = import_csv(sample_csv, columns)
        assert centers[0].zone == "Tamil Nadu"

    def test_country_filter(self, sample_csv, columns):
        centers = import_csv(sample_csv, columns, country="india")
        assert [c.city for c in centers] == ["Chennai", "Pune"]

    def test_limit(self, sample_csv, columns):
        assert len(import_csv(sample_csv, columns, limit=1)) == 1

    def test_semicolon_delimiter(self, tmp_path):
        path = tmp_path / "centers.csv"
        path.write_text("city;zone;country\nMumbai;Maharashtra;India\n", encoding="utf-8")
        centers = import_csv(path)
        assert centers == [Center(city="Mumbai", zone="Maharashtra", country="India")]


class TestMain:
    def test_writes_json(self, sample_csv, tmp_path, monkeypatch):
        out = tmp_path / "out" / "centers.json"
        monkeypatch.setattr(sys, "argv", [
            "import_csv", str(sample_csv), "--output", str(out),
            "--column", "city=Center Name", "--column", "zone=Zone",
            "--column", "country=Country", "--column", "aliases=Other Names",
        ])
        main()
        data = json.loads(out.read_text())
        assert data[0] == {"city": "Chennai", "zone": "Tamil Nadu", "country": "India", "aliases": ["Madras"]}
        assert len(data) == 3

    def test_bad_column_exits(self, sample_csv, monkeypatch):
        monkeypatch.setattr(sys, "argv", ["import_csv", str(sample_csv), "--column", "rent=price"])
        with pytest.raises(SystemExit):
            main()


class TestBundledDirectory:
    def test_bundled_centers_valid(self):
        path = os.path.join(os.path.dirname(__file__), "..", "centers", "data", "centers.json")
        with open(path, encoding="utf-8") as f:
            centers = [Center(**item) for item in json.load(f)]
        assert centers
        cities = [c.city.lower() for c in centers]
        assert len(cities) == len(set(cities))
