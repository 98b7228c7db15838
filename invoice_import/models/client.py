from __future__ import annotations

from dataclasses import dataclass

"""Client directory models.

The directory is reference data supplied by the caller (config file or the
`clients` table) and is read-only for the pipeline.
"""

__all__ = [
    "Client",
    "ClientDirectory",
    "ResolvedClient",
]


@dataclass(frozen=True)
class Client:
    """A billing party within a business.

    `locations` is the raw comma-separated string as stored, e.g.
    "Maumelle, AR, Conway" (entries may be "City, ST" or a bare city).
    """
    id: str
    name: str
    business: str  # legacy business key
    locations: str = ""


# Business key -> clients in directory order
ClientDirectory = dict[str, list[Client]]


@dataclass(frozen=True)
class ResolvedClient:
    """Identity fields written onto a line item by the client resolver."""
    client_name: str
    client_code: str
    last_name: str
    client_id: str = ""
    source: str = ""  # resolution strategy that produced this result
