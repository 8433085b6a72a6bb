"""Fuzzy place lookup over the center directory.

Coordinators type city names freely ("Chenai", "Bengaluru", "hyd"), so the
directory is matched with RapidFuzz.  A score cutoff keeps weak matches from
being reported against the wrong center.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Iterable, Optional

from rapidfuzz import fuzz, process, utils

from centers.schema import Center
from eventbot.places.base import UNKNOWN, Place, PlaceLookup

log = logging.getLogger("eventbot.places")

DEFAULT_CENTERS_PATH = Path(__file__).resolve().parent.parent.parent / "centers" / "data" / "centers.json"

# Abbreviations too short for fuzzy scoring
_COUNTRY_ALIASES = {
    "usa": "United States",
    "us": "United States",
    "u s a": "United States",
    "america": "United States",
    "uk": "United Kingdom",
    "england": "United Kingdom",
    "uae": "United Arab Emirates",
    "bharat": "India",
}


class FuzzyPlaceLookup(PlaceLookup):
    """PlaceLookup backed by an in-memory list of centers."""

    def __init__(self, centers: Iterable[Center], threshold: int = 85) -> None:
        self._threshold = threshold
        self._by_name: dict[str, Center] = {}
        countries: set[str] = set()
        for center in centers:
            countries.add(center.country.strip())
            for name in center.names():
                # First center wins when two share a name
                self._by_name.setdefault(utils.default_process(name), center)
        self._countries = sorted(countries)

    @classmethod
    def from_json(
        cls, path: Optional[str | Path] = None, threshold: int = 85,
    ) -> "FuzzyPlaceLookup":
        """Load the center directory written by ``centers.import_csv``."""
        path = Path(path) if path else DEFAULT_CENTERS_PATH
        with open(path, encoding="utf-8") as f:
            raw = json.load(f)
        centers = [Center(**item) for item in raw]
        log.info("Loaded %d centers from %s", len(centers), path)
        return cls(centers, threshold=threshold)

    def find_city(self, raw_city: str) -> Place:
        raw = (raw_city or "").strip()
        if not raw:
            return Place(city=raw)

        match = process.extractOne(
            raw,
            list(self._by_name),
            scorer=fuzz.WRatio,
            processor=utils.default_process,
            score_cutoff=self._threshold,
        )
        if match is None:
            log.info("No center matches %r", raw)
            return Place(city=raw)

        name, score, _ = match
        center = self._by_name[name]
        log.debug("City %r matched %s (score %.0f)", raw, center.city, score)
        return Place(
            city=center.city.strip(),
            zone=center.zone.strip(),
            country=center.country.strip(),
        )

    def find_country(self, raw_country: str) -> str:
        raw = (raw_country or "").strip()
        if not raw:
            return UNKNOWN

        alias = _COUNTRY_ALIASES.get(utils.default_process(raw))
        if alias:
            return alias

        match = process.extractOne(
            raw,
            self._countries,
            scorer=fuzz.WRatio,
            processor=utils.default_process,
            score_cutoff=self._threshold,
        )
        if match is None:
            log.info("No country matches %r", raw)
            return UNKNOWN
        return match[0]
