from __future__ import annotations

from enum import Enum

"""Business classification enum for the CSV invoice importer.

Line items are routed to one of four closed business buckets. The enum value
is the legacy string key used by the client directory, the `invoices.location_group`
column and the exported file names; core logic only passes `Business` members.
"""

__all__ = [
    "Business",
]


class Business(Enum):
    """Closed set of business buckets a line item can be routed to.

    - EVERETT: Arkansas / Mississippi / Texas offices
    - WHITTINGHAM: Indiana offices
    - MCLAIN: Alabama offices
    - OTHERS: everything that matches none of the city lists
    """
    EVERETT = "everett"
    WHITTINGHAM = "whittingham"
    MCLAIN = "mclain"
    OTHERS = "others"

    @property
    def key(self) -> str:
        """Legacy string key (persistence / directory boundary)."""
        return self.value

    @property
    def display_name(self) -> str:
        return _DISPLAY_NAMES[self]

    @classmethod
    def from_key(cls, key: str | None) -> Business | None:
        """Map a legacy string key back to a member, None when unrecognized."""
        if key is None:
            return None
        try:
            return cls(key.strip().lower())
        except ValueError:
            return None


_DISPLAY_NAMES = {
    Business.EVERETT: "Everett",
    Business.WHITTINGHAM: "Whittingham",
    Business.MCLAIN: "McLain",
    Business.OTHERS: "Others",
}
