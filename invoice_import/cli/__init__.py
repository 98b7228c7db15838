from __future__ import annotations

import argparse
import os
import sys
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path
from typing import Any

import psycopg2
from dotenv import load_dotenv

from ..config.loader import DEFAULT_CONFIG_PATH, ConfigError, load_config
from ..logging.init import log_summary, set_debug, setup_logging
from ..models.config_models import ImportConfig
from ..services.orchestrator import ProcessingError, process_all
from ..services.summary import render_summary_line

"""CLI entrypoint.

Flow:
- Load .env (python-dotenv, overriding the process environment)
- Load config/invoices.yml (or --config)
- Open a PostgreSQL connection when possible (live mode), else mock mode
- Process every .csv export in source_directory, export grouped CSVs, persist
- Print the SUMMARY line and exit with 0 (all ok) / 2 (some files failed) / 1 (fatal)
"""

__all__ = [
    "EXIT_SUCCESS_ALL",
    "EXIT_PARTIAL_FAILURE",
    "EXIT_FATAL",
    "main",
]

EXIT_SUCCESS_ALL = 0
EXIT_PARTIAL_FAILURE = 2
EXIT_FATAL = 1


def _resolve_dsn(cfg: ImportConfig) -> str:
    """Connection string, in priority order:

    1. DATABASE_URL / PGDSN (from .env or the process environment)
    2. individual PGHOST / PGPORT / PGUSER / PGPASSWORD / PGDATABASE
    3. the config file's `database` section for anything still missing
    """
    db_cfg = cfg.database
    dsn_env = os.getenv("DATABASE_URL") or os.getenv("PGDSN") or db_cfg.dsn
    if dsn_env:
        return dsn_env
    host = os.getenv("PGHOST", db_cfg.host or "localhost")
    port = os.getenv("PGPORT", str(db_cfg.port) if db_cfg.port else "5432")
    user = os.getenv("PGUSER", db_cfg.user or "postgres")
    password = os.getenv("PGPASSWORD", db_cfg.password or "")
    database = os.getenv("PGDATABASE", db_cfg.database or "postgres")
    dsn = f"host={host} port={port} user={user} dbname={database}"
    if password:
        dsn += f" password={password}"
    return dsn


def _connect(cfg: ImportConfig) -> Any:  # pragma: no cover (thin wrapper)
    conn = psycopg2.connect(_resolve_dsn(cfg))
    conn.autocommit = True  # explicit BEGIN / COMMIT statements from the orchestrator
    return conn


@contextmanager
def _db_cursor(conn: Any) -> Iterator[Any]:  # pragma: no cover (thin wrapper)
    """Provide a cursor and close the connection afterwards."""
    try:
        with conn.cursor() as cur:
            yield cur
    finally:
        conn.close()


def _load_env_file(path: Path, override: bool = True) -> None:
    """Load .env so its connection settings take precedence over the environment."""
    if path.exists():
        load_dotenv(dotenv_path=path, override=override)


def _parse_args(argv: list[str]) -> argparse.Namespace:
    p = argparse.ArgumentParser(description="Itemized CSV billing export -> invoices")
    p.add_argument("--config", type=Path, default=DEFAULT_CONFIG_PATH, help="Path to the YAML config")
    p.add_argument("--debug", action="store_true", help="Enable debug logging")
    p.add_argument("--inspect-data", action="store_true", help="Print header metadata & first rows then exit")
    p.add_argument("--no-export", action="store_true", help="Skip writing grouped CSV files")
    return p.parse_args(argv)


def _inspect_data(cfg: ImportConfig) -> int:
    from ..parsing.header import extract_invoice_info
    from ..parsing.reader import MalformedInputError, parse_csv_body, read_export_file, split_lines

    directory = Path(cfg.source_directory)
    csv_files = sorted(p for p in directory.iterdir() if p.is_file() and p.suffix.lower() == ".csv")
    if not csv_files:
        print("inspect: no .csv files")
        return EXIT_SUCCESS_ALL
    for f in csv_files:
        print(f"FILE: {f.name}")
        try:
            text = read_export_file(f)
            info = extract_invoice_info(split_lines(text))
            rows = parse_csv_body(text, f.name)
        except (MalformedInputError, OSError, UnicodeDecodeError) as e:
            print(f"  error={e}")
            continue
        print(f"  invoice_number={info.invoice_number!r} invoice_date={info.invoice_date!r}")
        print(f"  rows={len(rows)} cols={list(rows[0].keys()) if rows else []}")
        print("    sample_rows=", rows[:3])
    return EXIT_SUCCESS_ALL


def main(argv: list[str] | None = None) -> int:
    logger = setup_logging()

    # [] from tests must not fall back to sys.argv (pytest flags would leak in)
    if argv is None:
        argv = sys.argv[1:]
    args = _parse_args(argv)
    _load_env_file(Path(".env"), override=True)

    try:
        cfg = load_config(args.config)
    except ConfigError as e:
        logger.error(f"config: {e}")
        return EXIT_FATAL

    directory = Path(cfg.source_directory)
    if not directory.exists():
        logger.error(f"directory not found: {directory}")
        return EXIT_FATAL

    if args.debug:
        set_debug(logger)
        logger.debug("debug mode enabled")

    logger.info(f"Processing files from: {directory}")

    if args.inspect_data:
        return _inspect_data(cfg)

    export = not args.no_export
    conn = None
    if os.getenv("DISABLE_DB_CONNECT") == "1":
        logger.debug("DB connect disabled via DISABLE_DB_CONNECT=1 -> mock mode")
    else:
        try:
            conn = _connect(cfg)
        except psycopg2.Error as db_e:
            if os.getenv("SUPPRESS_DB_WARNING") == "1":
                logger.debug(f"DB connection failed (suppressed warn) -> fallback to mock mode: {db_e}")
            else:
                logger.info(f"DB connection failed -> fallback to mock mode: {db_e}")

    db_mode = "live" if conn is not None else "mock"
    try:
        if conn is not None:
            with _db_cursor(conn) as cur:
                result = process_all(cfg, cursor=cur, export=export)
        else:
            result = process_all(cfg, cursor=None, export=export)
    except ProcessingError as e:
        logger.error(f"processing({db_mode}): {e}")
        return EXIT_FATAL

    logger.info(f"mode={db_mode} total_rows={result.total_line_items} invoices={result.total_invoices}")

    total_files = result.success_files + result.failed_files
    summary_line = render_summary_line(total_files, result)
    # log_summary adds the "SUMMARY " label itself
    log_summary(summary_line[len("SUMMARY "):])

    if result.failed_files > 0:
        return EXIT_PARTIAL_FAILURE
    return EXIT_SUCCESS_ALL
