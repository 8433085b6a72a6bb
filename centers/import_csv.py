"""CSV import pipeline: reads a center list CSV, maps columns, outputs JSON.

Usage:
    python -m centers.import_csv data/hfn_centers.csv \
        --country India --limit 500 \
        --output centers/data/centers.json
"""

import argparse
import csv
import json
import sys
from pathlib import Path

from centers.schema import Center


DEFAULT_COLUMNS = {
    "city": "city",
    "zone": "zone",
    "country": "country",
    "aliases": "aliases",
}


def parse_aliases(raw: str) -> list[str]:
    """Parse alternate names from a comma/pipe/semicolon-separated string."""
    if not raw or raw.strip().lower() in ("", "nan", "none"):
        return []
    for sep in ["|", ";"]:
        raw = raw.replace(sep, ",")
    return [a.strip() for a in raw.split(",") if a.strip()]


def parse_column_overrides(pairs: list[str] | None) -> dict[str, str]:
    """Turn ``field=CSV Header`` pairs into a column mapping."""
    columns = dict(DEFAULT_COLUMNS)
    for pair in pairs or []:
        field, sep, header = pair.partition("=")
        if not sep or field not in DEFAULT_COLUMNS:
            raise ValueError(f"Invalid column mapping {pair!r}; expected one of "
                             f"{sorted(DEFAULT_COLUMNS)} as field=header")
        columns[field] = header.strip()
    return columns


def row_to_center(row: dict, columns: dict[str, str]) -> Center | None:
    """Convert a CSV row to a Center using the column mapping.

    Returns None if the row has no city name.
    """
    def get(field: str) -> str:
        csv_col = columns.get(field, "")
        return (row.get(csv_col) or "").strip() if csv_col else ""

    city = get("city")
    if not city:
        return None

    return Center(
        city=city,
        zone=get("zone") or "unknown",
        country=get("country") or "unknown",
        aliases=parse_aliases(get("aliases")),
    )


def _detect_delimiter(csv_path: str | Path) -> str:
    """Detect CSV delimiter by inspecting the header line."""
    with open(csv_path, encoding="utf-8", errors="replace") as f:
        header = f.readline()
    for delim in [";", "\t", "|"]:
        if header.count(delim) > header.count(","):
            return delim
    return ","


def import_csv(
    csv_path: str | Path,
    columns: dict[str, str] | None = None,
    country: str | None = None,
    limit: int | None = None,
) -> list[Center]:
    """Import centers from a CSV file.

    Args:
        csv_path: Path to the CSV file
        columns: Field to CSV header mapping (default: DEFAULT_COLUMNS)
        country: Keep only centers in this country (case-insensitive)
        limit: Maximum number of centers to return

    Returns:
        List of validated Center objects, first occurrence of a city kept
    """
    columns = columns or DEFAULT_COLUMNS
    delimiter = _detect_delimiter(csv_path)
    centers: list[Center] = []
    seen: set[str] = set()

    with open(csv_path, newline="", encoding="utf-8", errors="replace") as f:
        reader = csv.DictReader(f, delimiter=delimiter)
        for row in reader:
            center = row_to_center(row, columns)
            if not center:
                continue
            if country and center.country.lower() != country.lower():
                continue
            key = center.city.lower()
            if key in seen:
                continue
            seen.add(key)
            centers.append(center)
            if limit and len(centers) >= limit:
                break

    return centers


def main():
    parser = argparse.ArgumentParser(
        description="Import the center directory from CSV to JSON",
        prog="python -m centers.import_csv",
    )
    parser.add_argument("csv_path", help="Path to the input CSV file")
    parser.add_argument("--country", help="Filter by country (case-insensitive)")
    parser.add_argument("--limit", type=int, help="Max number of centers")
    parser.add_argument("--output", "-o", help="Output JSON path (default: stdout)")
    parser.add_argument(
        "--column",
        action="append",
        metavar="FIELD=HEADER",
        help="Map a center field to a CSV header, e.g. --column city='Center Name'",
    )

    args = parser.parse_args()

    try:
        columns = parse_column_overrides(args.column)
    except ValueError as e:
        parser.error(str(e))

    centers = import_csv(
        csv_path=args.csv_path,
        columns=columns,
        country=args.country,
        limit=args.limit,
    )

    data = [c.model_dump() for c in centers]

    if args.output:
        Path(args.output).parent.mkdir(parents=True, exist_ok=True)
        with open(args.output, "w") as f:
            json.dump(data, f, indent=2)
        print(f"Exported {len(data)} centers to {args.output}", file=sys.stderr)
    else:
        json.dump(data, sys.stdout, indent=2)
        print(f"\n# {len(data)} centers", file=sys.stderr)


if __name__ == "__main__":
    main()
