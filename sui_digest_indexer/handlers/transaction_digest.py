from __future__ import annotations

import logging
import sqlite3
from typing import Any, List

import psycopg

from ..errors import CommitError, ExtractionError
from ..handler_base import Handler, Processor
from ..logging_utils import get_logger, log_json
from ..models import I64_MAX, I64_MIN, CheckpointData, StoredTransactionDigest

logger = get_logger(__name__)

# One statement for the whole batch. Duplicate digests, whether already stored
# or repeated inside the batch, are skipped by the key constraint.
SQL_INSERT_PG = """
INSERT INTO transaction_digests (tx_digest, checkpoint_sequence_number)
SELECT * FROM unnest(%s::text[], %s::bigint[])
ON CONFLICT (tx_digest) DO NOTHING
"""

SQL_INSERT_SQLITE = """
INSERT INTO transaction_digests (tx_digest, checkpoint_sequence_number)
VALUES (?, ?)
ON CONFLICT (tx_digest) DO NOTHING
"""


class TransactionDigestProcessor(Processor[StoredTransactionDigest]):
    NAME = "transaction_digest_handler"

    def process(self, checkpoint: CheckpointData) -> List[StoredTransactionDigest]:
        seq = checkpoint.sequence_number
        if isinstance(seq, bool) or not isinstance(seq, int) or not (I64_MIN <= seq <= I64_MAX):
            raise ExtractionError(f"Checkpoint sequence number not representable as i64: {seq!r}")

        out: List[StoredTransactionDigest] = []
        for i, tx in enumerate(checkpoint.transactions):
            digest = getattr(tx, "digest", None)
            if digest is None or str(digest) == "":
                raise ExtractionError(f"Checkpoint {seq}: transaction #{i} has no digest")
            out.append(StoredTransactionDigest(tx_digest=str(digest), checkpoint_sequence_number=seq))
        return out


class PostgresDigestCommitter(Handler[StoredTransactionDigest]):
    def commit(self, batch: List[StoredTransactionDigest], conn: Any) -> int:
        if not batch:
            return 0

        digests = [r.tx_digest for r in batch]
        seqs = [r.checkpoint_sequence_number for r in batch]
        try:
            with conn.cursor() as cur:
                cur.execute(SQL_INSERT_PG, (digests, seqs))
                inserted = cur.rowcount
        except psycopg.Error as e:
            log_json(logger, logging.WARNING, "commit_failed", backend="postgres", rows=len(batch), error=str(e))
            raise CommitError(f"Failed to commit {len(batch)} digests: {e}") from e

        log_json(logger, logging.DEBUG, "digests_inserted", backend="postgres", rows=len(batch), inserted=inserted)
        return max(inserted, 0)


class SqliteDigestCommitter(Handler[StoredTransactionDigest]):
    def commit(self, batch: List[StoredTransactionDigest], conn: Any) -> int:
        if not batch:
            return 0

        cur = conn.cursor()
        try:
            # rowcount is summed across every parameter set of executemany.
            cur.executemany(SQL_INSERT_SQLITE, [r.as_row() for r in batch])
            inserted = cur.rowcount
        except sqlite3.Error as e:
            log_json(logger, logging.WARNING, "commit_failed", backend="sqlite", rows=len(batch), error=str(e))
            raise CommitError(f"Failed to commit {len(batch)} digests: {e}") from e
        finally:
            cur.close()

        log_json(logger, logging.DEBUG, "digests_inserted", backend="sqlite", rows=len(batch), inserted=inserted)
        return max(inserted, 0)


class TransactionDigestHandler(TransactionDigestProcessor, PostgresDigestCommitter):
    """The registered pipeline component: digest extraction + Postgres commit."""


class SqliteTransactionDigestHandler(TransactionDigestProcessor, SqliteDigestCommitter):
    """Same extraction, committed to a local SQLite store."""
