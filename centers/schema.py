"""Pydantic model for one center in the place directory."""

from pydantic import BaseModel


class Center(BaseModel):
    city: str
    zone: str
    country: str
    aliases: list[str] = []  # alternate spellings, e.g. "Bengaluru" for "Bangalore"

    def names(self) -> list[str]:
        """Every name the center can be matched by."""
        return [self.city, *self.aliases]
