"""Abstract base class for place lookups.

Resolves the free-text city and country a coordinator typed into a known
center with its zone.  Any directory backend implements this ABC.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass

UNKNOWN = "unknown"


@dataclass(frozen=True)
class Place:
    """A resolved location; zone and country are ``"unknown"`` on a miss."""

    city: str
    zone: str = UNKNOWN
    country: str = UNKNOWN


class PlaceLookup(ABC):
    """Abstract place directory.

    Lookups never raise on a miss: they degrade to the raw text plus
    ``"unknown"`` sentinels so a report can still be committed.
    """

    @abstractmethod
    def find_city(self, raw_city: str) -> Place:
        """Resolve a city or center name.

        Returns:
            The matched Place, or ``Place(city=raw_city)`` when nothing
            clears the similarity threshold.
        """

    @abstractmethod
    def find_country(self, raw_country: str) -> str:
        """Resolve a country name, or return ``"unknown"``."""
