from __future__ import annotations

import logging
from collections.abc import Callable, Sequence
from dataclasses import dataclass, field, replace

from ..models.business import Business
from ..models.client import Client, ClientDirectory, ResolvedClient
from ..models.line_item import LineItem
from .classifier import city_of

"""Client resolver.

Maps (business, location) onto a client of the directory and synthesizes the
invoice number used for grouping. Resolution is an ordered chain of pure
strategies; the first one that returns a result wins:

1. directory_match   - clients under the business key (or, when the key is
                       absent, every client whose own business matches);
                       first location match, else the first candidate
2. huntsville_override - McLain + "huntsville" location with no candidates
3. fallback_table    - fixed per-business default client
4. unknown_client    - generic placeholder

The chain always yields a client, so a stale or incomplete directory never
fails a row.
"""

__all__ = [
    "INVOICE_PREFIX",
    "FALLBACK_CLIENTS",
    "HUNTSVILLE_FALLBACK",
    "UNKNOWN_CLIENT",
    "ResolveContext",
    "client_candidates",
    "surname_of",
    "client_code_for",
    "resolve_client",
    "clean_invoice_number",
    "build_new_invoice_number",
    "resolve_line_item",
]

logger = logging.getLogger(__name__)

INVOICE_PREFIX = "USI25"

FALLBACK_CLIENTS: dict[Business, ResolvedClient] = {
    Business.EVERETT: ResolvedClient(
        client_name="The Everett Agencies", client_code="EVE", last_name="Everett",
        source="fallback_table",
    ),
    Business.WHITTINGHAM: ResolvedClient(
        client_name="The Whittingham Agencies", client_code="WHI", last_name="Whittingham",
        source="fallback_table",
    ),
    Business.MCLAIN: ResolvedClient(
        client_name="The Clint McLain Agencies", client_code="MCL", last_name="McLain",
        source="fallback_table",
    ),
    Business.OTHERS: ResolvedClient(
        client_name="Other Clients", client_code="OTH", last_name="Others",
        source="fallback_table",
    ),
}
HUNTSVILLE_FALLBACK = ResolvedClient(
    client_name="Clint McLain Huntsville", client_code="HUN", last_name="Huntsville",
    source="huntsville_override",
)
UNKNOWN_CLIENT = ResolvedClient(
    client_name="Unknown Client", client_code="UNK", last_name="Client",
    source="unknown_client",
)


@dataclass
class ResolveContext:
    """Inputs shared by the resolution strategies for one row.

    `business` accepts a member or a legacy string key; unknown keys leave
    `business` as None and keep the raw key for the directory lookup.
    """
    business: Business | str | None
    location: str
    directory: ClientDirectory
    business_key: str = field(init=False)
    candidates: list[Client] = field(init=False)

    def __post_init__(self) -> None:
        if not isinstance(self.business, Business):
            raw_key = str(self.business)
            self.business = Business.from_key(raw_key)
            self.business_key = self.business.key if self.business else raw_key
        else:
            self.business_key = self.business.key
        self.location = self.location or ""
        self.candidates = client_candidates(self.directory, self.business_key)


def client_candidates(directory: ClientDirectory, business_key: str) -> list[Client]:
    """Clients under the exact key; when absent, a scan of all clients by their own business."""
    listed = directory.get(business_key)
    if listed:
        return list(listed)
    return [
        client
        for clients in directory.values()
        for client in clients
        if client.business == business_key
    ]


def surname_of(name: str) -> str:
    parts = name.split()
    return parts[-1] if parts else ""


def client_code_for(name: str) -> str:
    return surname_of(name)[:3].upper()


def _location_tokens(client: Client) -> list[str]:
    # "Maumelle, AR, Conway" -> ["Maumelle", "AR", "Conway"]
    return [token.split(",")[0].strip() for token in client.locations.split(",")]


def _matches_city(client: Client, city: str) -> bool:
    wanted = city.lower()
    return any(token and token.lower() == wanted for token in _location_tokens(client))


def _from_client(client: Client, source: str) -> ResolvedClient:
    return ResolvedClient(
        client_name=client.name,
        client_code=client_code_for(client.name),
        last_name=surname_of(client.name),
        client_id=client.id,
        source=source,
    )


def _directory_match(ctx: ResolveContext) -> ResolvedClient | None:
    if not ctx.candidates:
        return None
    city = city_of(ctx.location)
    if city:
        for client in ctx.candidates:
            if _matches_city(client, city):
                return _from_client(client, "directory_location")
    return _from_client(ctx.candidates[0], "directory_default")


def _huntsville_override(ctx: ResolveContext) -> ResolvedClient | None:
    if ctx.business is Business.MCLAIN and "huntsville" in ctx.location.lower():
        return HUNTSVILLE_FALLBACK
    return None


def _fallback_table(ctx: ResolveContext) -> ResolvedClient | None:
    if ctx.business is None:
        return None
    return FALLBACK_CLIENTS[ctx.business]


def _unknown_client(ctx: ResolveContext) -> ResolvedClient | None:
    return UNKNOWN_CLIENT


STRATEGIES: Sequence[Callable[[ResolveContext], ResolvedClient | None]] = (
    _directory_match,
    _huntsville_override,
    _fallback_table,
    _unknown_client,
)


def resolve_client(business: Business | str, location: str, directory: ClientDirectory) -> ResolvedClient:
    ctx = ResolveContext(business, location, directory)
    for strategy in STRATEGIES:
        resolved = strategy(ctx)
        if resolved is not None:
            if not ctx.candidates:
                logger.debug(
                    f"no directory clients for business={ctx.business_key} "
                    f"location={location!r} -> {resolved.source} ({resolved.client_name})"
                )
            return resolved
    return UNKNOWN_CLIENT  # pragma: no cover (unknown_client always answers)


def clean_invoice_number(invoice_number: str) -> str:
    """Drop the export's fixed "USI25" prefix: "USI25-00123" -> "00123"."""
    number = (invoice_number or "").strip()
    if number.startswith(INVOICE_PREFIX):
        number = number[len(INVOICE_PREFIX):].lstrip("-")
    return number


def build_new_invoice_number(client_code: str, invoice_number: str) -> str:
    return f"{client_code}-{clean_invoice_number(invoice_number)}"


def resolve_line_item(item: LineItem, directory: ClientDirectory) -> LineItem:
    """Attach client identity and the synthesized invoice number to a classified item."""
    resolved = resolve_client(item.business, item.location, directory)
    return replace(
        item,
        client_name=resolved.client_name,
        client_code=resolved.client_code,
        client_id=resolved.client_id,
        last_name=resolved.last_name,
        new_invoice_number=build_new_invoice_number(resolved.client_code, item.invoice_number),
    )
