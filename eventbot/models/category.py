"""Reporting categories and the lookup tables keyed on them."""

from __future__ import annotations

from enum import Enum
from typing import Optional


class EventCategory(str, Enum):
    """Every ``event_type`` entity value the Dialogflow agent can produce."""

    ROCF = "ROCF"
    U_CONNECT = "u-connect"
    FAMILY_CONNECT = "Family-Connect"
    G_CONNECT = "g-connect"
    V_CONNECT = "v-connect"
    L_CONNECT = "L-Connect"
    NGO_CONNECT = "NGO-Connect"
    S_CONNECT = "s-connect"
    S_CONNECT_HELP = "S-Connect-HELP"
    S_CONNECT_HEART = "S-Connect-HEART"
    S_CONNECT_INSPIRE = "S-Connect-INSPIRE"
    S_CONNECT_THWC = "S-Connect-THWC"
    DIVYA_JANANI = "Divya-Janani"
    RESEARCH = "Research"
    HEARTFULNESS_GREEN = "Heartfulness-green"
    YOGA = "Yoga"
    GLOW_PEARL = "glow-pearl"
    BRIGHTER_MINDS = "Brighter-Minds"
    AT_WORK = "at-work"
    DHYANOTSAV = "dhyanotsav"
    BOOKS_AND_MORE = "books-and-more"
    KAUSHALAM = "Kaushalam"
    GROUP_MEDITATION = "group-meditation"
    RELIGIOUS_INSTITUTIONS = "Religious Institutions"
    HEARTFULNESS_INTRODUCTION = "Heartfulness Introduction"
    YOUTH = "Youth"
    INDIAN_DIASPORA = "Indian Diaspora"
    OTHER = "Other"

    @classmethod
    def parse(cls, raw: Optional[str]) -> Optional["EventCategory"]:
        """Match a raw entity value, ignoring case. Unknown values give None."""
        if not raw:
            return None
        try:
            return cls(raw)
        except ValueError:
            return _BY_FOLDED_VALUE.get(raw.strip().casefold())


_BY_FOLDED_VALUE = {c.value.casefold(): c for c in EventCategory}


# Sub-programs reported under one umbrella category: category -> (umbrella, sub-type code)
BRANCH_TARGETS: dict[EventCategory, tuple[EventCategory, str]] = {
    EventCategory.S_CONNECT_HELP: (EventCategory.S_CONNECT, "HELP"),
    EventCategory.S_CONNECT_HEART: (EventCategory.S_CONNECT, "HEART"),
    EventCategory.S_CONNECT_INSPIRE: (EventCategory.S_CONNECT, "INSPIRE"),
    EventCategory.S_CONNECT_THWC: (EventCategory.S_CONNECT, "THWC"),
}

# Program desk for follow-up questions and photos; "" means no contact line
CONTACTS: dict[EventCategory, str] = {
    EventCategory.ROCF: "info@rocf.org",
    EventCategory.U_CONNECT: "uconnect@heartfulness.org",
    EventCategory.FAMILY_CONNECT: "fconnect@heartfulness.org",
    EventCategory.G_CONNECT: "gconnect@heartfulness.org",
    EventCategory.V_CONNECT: "vconnect@heartfulness.org",
    EventCategory.L_CONNECT: "lconnect@heartfulness.org",
    EventCategory.NGO_CONNECT: "ngoconnect@heartfulness.org",
    EventCategory.S_CONNECT: "sconnect@heartfulness.org",
    EventCategory.S_CONNECT_HELP: "sconnect@heartfulness.org",
    EventCategory.S_CONNECT_HEART: "sconnect@heartfulness.org",
    EventCategory.S_CONNECT_INSPIRE: "sconnect@heartfulness.org",
    EventCategory.S_CONNECT_THWC: "sconnect@heartfulness.org",
    EventCategory.DIVYA_JANANI: "divyajanani@heartfulness.org",
    EventCategory.RESEARCH: "research@heartfulness.org",
    EventCategory.HEARTFULNESS_GREEN: "green@heartfulness.org",
    EventCategory.YOGA: "yoga@heartfulness.org",
    EventCategory.GLOW_PEARL: "webinars@heartfulness.org",
    EventCategory.BRIGHTER_MINDS: "brighterminds@heartfulness.org",
    EventCategory.AT_WORK: "atwork@heartfulness.org",
    EventCategory.DHYANOTSAV: "dhyanotsav@heartfulness.org",
    EventCategory.BOOKS_AND_MORE: "booksandmore@heartfulness.org",
    EventCategory.KAUSHALAM: "kaushalam@heartfulness.org",
    EventCategory.GROUP_MEDITATION: "",
    EventCategory.RELIGIOUS_INSTITUTIONS: "",
    EventCategory.HEARTFULNESS_INTRODUCTION: "",
    EventCategory.YOUTH: "",
    EventCategory.INDIAN_DIASPORA: "",
    EventCategory.OTHER: "",
}
