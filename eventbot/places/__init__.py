"""Place directory lookups for resolving city and country names."""

from .base import UNKNOWN, Place, PlaceLookup
from .fuzzy import FuzzyPlaceLookup

__all__ = ["UNKNOWN", "FuzzyPlaceLookup", "Place", "PlaceLookup"]
