from __future__ import annotations

from dataclasses import dataclass, field

from .client import ClientDirectory

"""Config dataclasses for the CSV invoice importer.

These are the typed results of YAML loading in `invoice_import.config.loader`,
kept separate from the loader so services can depend on them without PyYAML.
"""


@dataclass(frozen=True)
class DatabaseConfig:
    """Database connection configuration.

    Used as fallback when environment variables are not set.
    Environment variables take precedence over these values.
    """
    host: str | None = None
    port: int | None = None
    user: str | None = None
    password: str | None = None
    database: str | None = None
    dsn: str | None = None


@dataclass(frozen=True)
class ImportConfig:
    """Root configuration object for one batch run."""
    source_directory: str  # Directory to scan for .csv exports
    output_directory: str = "./output"  # Grouped CSV exports are written here
    clients: ClientDirectory = field(default_factory=dict)  # Business key -> clients
    database: DatabaseConfig = field(default_factory=DatabaseConfig)
