from __future__ import annotations

from ..models.business import Business

"""Location classifier: routes a line item to its business bucket.

City-list membership is an exact, case-sensitive match on the text before the
first comma of the location ("Little Rock, AR" -> "Little Rock").
"""

__all__ = [
    "EVERETT_LOCATIONS",
    "WHITTINGHAM_LOCATIONS",
    "MCLAIN_LOCATIONS",
    "classify_location",
    "city_of",
]

EVERETT_LOCATIONS: frozenset[str] = frozenset({
    "Maumelle", "Little Rock", "Conway", "Tyler", "Southaven", "Oxford",
    "Fayetteville", "Dallas", "Searcy", "Jonesboro", "Rogers", "Jacksonville",
})
WHITTINGHAM_LOCATIONS: frozenset[str] = frozenset({
    "Indianapolis", "Carmel", "Evansville",
})
MCLAIN_LOCATIONS: frozenset[str] = frozenset({
    "Birmingham", "Mobile", "Huntsville",
})

# Alternative Everett trigger, independent of the city list
_EVERETT_OVERRIDE = ("Dallas, TX", "Insurance Representative")


def city_of(location: str | None) -> str:
    """Text before the first comma, trimmed."""
    return (location or "").strip().split(",")[0].strip()


def classify_location(location: str | None, job_title: str | None) -> Business:
    loc = (location or "").strip()
    job = (job_title or "").strip()
    city = city_of(loc)

    if city in EVERETT_LOCATIONS or (loc, job) == _EVERETT_OVERRIDE:
        return Business.EVERETT
    if city in WHITTINGHAM_LOCATIONS:
        return Business.WHITTINGHAM
    if city in MCLAIN_LOCATIONS:
        return Business.MCLAIN
    return Business.OTHERS
