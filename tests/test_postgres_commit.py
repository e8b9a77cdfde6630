import unittest

import psycopg

from sui_digest_indexer.errors import CommitError
from sui_digest_indexer.handlers import TransactionDigestHandler
from sui_digest_indexer.models import StoredTransactionDigest


class FakeCursor:
    def __init__(self, conn):
        self.conn = conn
        self.rowcount = -1

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        return False

    def execute(self, sql, params=()):
        self.conn.statements.append((sql, params))
        if self.conn.fail_with is not None:
            raise self.conn.fail_with
        digests, seqs = params
        inserted = 0
        for d, s in zip(digests, seqs):
            if d not in self.conn.rows:
                self.conn.rows[d] = s
                inserted += 1
        self.rowcount = inserted


class FakeConnection:
    """Stands in for a psycopg connection; applies ON CONFLICT DO NOTHING to a dict."""

    def __init__(self, fail_with=None):
        self.rows = {}
        self.statements = []
        self.fail_with = fail_with

    def cursor(self):
        return FakeCursor(self)


def _recs(seq, *digests):
    return [StoredTransactionDigest(d, seq) for d in digests]


class TestPostgresDigestCommit(unittest.TestCase):
    def setUp(self):
        self.handler = TransactionDigestHandler()

    def test_single_statement_with_conflict_clause(self):
        conn = FakeConnection()
        n = self.handler.commit(_recs(100, "a1", "b2"), conn)

        self.assertEqual(n, 2)
        self.assertEqual(len(conn.statements), 1)
        sql, params = conn.statements[0]
        self.assertIn("ON CONFLICT (tx_digest) DO NOTHING", sql)
        self.assertIn("transaction_digests", sql)
        self.assertEqual(params, (["a1", "b2"], [100, 100]))

    def test_recommit_returns_zero(self):
        conn = FakeConnection()
        batch = _recs(100, "a1", "b2")
        self.assertEqual(self.handler.commit(batch, conn), 2)
        self.assertEqual(self.handler.commit(batch, conn), 0)
        self.assertEqual(conn.rows, {"a1": 100, "b2": 100})

    def test_empty_batch_skips_round_trip(self):
        conn = FakeConnection()
        self.assertEqual(self.handler.commit([], conn), 0)
        self.assertEqual(conn.statements, [])

    def test_driver_error_becomes_commit_error(self):
        conn = FakeConnection(fail_with=psycopg.OperationalError("server closed the connection"))
        batch = _recs(1, "a")
        with self.assertRaises(CommitError) as ctx:
            self.handler.commit(batch, conn)
        self.assertIsInstance(ctx.exception.__cause__, psycopg.OperationalError)
        self.assertEqual(batch, _recs(1, "a"))


if __name__ == "__main__":
    unittest.main()
