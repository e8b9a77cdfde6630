from __future__ import annotations

import argparse
import logging
import sqlite3
from typing import Any, Optional

import psycopg
from dotenv import load_dotenv

from .config import load_settings
from .db import connect, driver_for, ensure_schema, fetchone
from .errors import CommitError
from .logging_utils import configure_logging, get_logger, log_json
from .models import RunStats
from .registry import build_handlers, build_source
from .source_base import CheckpointSource

SQL_STATUS = """
SELECT COUNT(*), MIN(checkpoint_sequence_number), MAX(checkpoint_sequence_number)
FROM transaction_digests
"""

logger = get_logger()


def digest_status(conn: Any) -> tuple[int, Optional[int], Optional[int]]:
    row = fetchone(conn, SQL_STATUS)
    if not row:
        return 0, None, None
    return int(row[0] or 0), row[1], row[2]


def _flush(conn: Any, handler, batch: list, stats: RunStats) -> None:
    try:
        inserted = handler.commit(batch, conn)
        conn.commit()
    except CommitError:
        conn.rollback()
        raise
    except (psycopg.Error, sqlite3.Error) as e:
        conn.rollback()
        raise CommitError(f"Transaction commit failed for {len(batch)} digests: {e}") from e

    stats.batches += 1
    stats.inserted += inserted
    stats.deduped += len(batch) - inserted
    log_json(logger, logging.INFO, "batch_committed", handler=handler.NAME, rows=len(batch), inserted=inserted)


def run_handler(
    conn: Any,
    handler,
    source: CheckpointSource,
    start: int,
    count: int,
    batch_checkpoints: int = 10,
    dry_run: bool = False,
) -> RunStats:
    """Feed checkpoints [start, start + count) through `handler`.

    Commits every `batch_checkpoints` checkpoints and once at the end. A failed
    commit rolls back and raises; re-running the same range is safe.
    """
    stats = RunStats()
    end = start + count
    batch: list = []
    pending = 0
    next_seq = start

    while next_seq < end:
        cps = source.fetch_batch(next_seq, min(batch_checkpoints, end - next_seq))
        cps = [cp for cp in cps if cp.sequence_number < end]
        if not cps:
            break

        for cp in cps:
            values = handler.process(cp)
            handler.batch(batch, values)
            stats.checkpoints += 1
            stats.extracted += len(values)
            pending += 1
            next_seq = cp.sequence_number + 1
            log_json(logger, logging.DEBUG, "checkpoint_processed", sequence_number=cp.sequence_number, digests=len(values))

            if pending >= batch_checkpoints:
                if not dry_run:
                    _flush(conn, handler, batch, stats)
                batch = []
                pending = 0

    if pending and not dry_run:
        _flush(conn, handler, batch, stats)

    return stats


def main(argv=None):
    load_dotenv(override=False)
    settings = load_settings()
    configure_logging(settings.log_level)

    parser = argparse.ArgumentParser(prog="sui_digest_indexer")
    sub = parser.add_subparsers(dest="cmd", required=True)

    ingest = sub.add_parser("ingest", help="Ingestion commands")
    ingest_sub = ingest.add_subparsers(dest="ingest_cmd", required=True)

    ingest_sub.add_parser("init-db", help="Create the transaction_digests table if missing")

    runp = ingest_sub.add_parser("run", help="Index a range of checkpoints once")
    runp.add_argument("--start", type=int, required=True)
    runp.add_argument("--count", type=int, default=100)
    runp.add_argument("--source", choices=["rpc", "file"], default="rpc")
    runp.add_argument("--file", type=str, default=None, help="JSONL checkpoints for --source file")
    runp.add_argument("--batch-checkpoints", type=int, default=settings.batch_checkpoints)
    runp.add_argument("--dry-run", action="store_true")

    ingest_sub.add_parser("status", help="Show stored digest count and checkpoint range")

    args = parser.parse_args(argv)

    driver = driver_for(settings.database_url)
    with connect(settings.database_url) as conn:
        if args.ingest_cmd == "init-db":
            ensure_schema(conn)
            log_json(logger, logging.INFO, "schema_ready", driver=driver)
            return 0

        if args.ingest_cmd == "status":
            total, lo, hi = digest_status(conn)
            print(f"transaction_digests  rows={total}  checkpoints={lo}..{hi}")
            return 0

        if args.ingest_cmd == "run":
            handlers = build_handlers(driver)
            name, handler = next(iter(handlers.items()))
            source = build_source(settings, args.source, args.file)
            try:
                stats = run_handler(
                    conn,
                    handler,
                    source,
                    start=args.start,
                    count=args.count,
                    batch_checkpoints=max(1, args.batch_checkpoints),
                    dry_run=args.dry_run,
                )
            except Exception as e:
                log_json(logger, logging.ERROR, "run_failed", handler=name, source=source.name, start=args.start, error=str(e))
                raise
            log_json(logger, logging.INFO, "run_complete", handler=name, source=source.name, stats=stats.__dict__, dry_run=args.dry_run)
            return 0

    return 0
