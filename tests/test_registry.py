import unittest

from sui_digest_indexer.config import Settings
from sui_digest_indexer.db import POSTGRES, SQLITE
from sui_digest_indexer.handlers import SqliteTransactionDigestHandler, TransactionDigestHandler
from sui_digest_indexer.registry import build_handlers, build_source
from sui_digest_indexer.sources.jsonl import JsonlCheckpointSource
from sui_digest_indexer.sources.rpc import RpcCheckpointSource


class TestRegistry(unittest.TestCase):
    def test_handler_per_driver(self):
        pg = build_handlers(POSTGRES)
        lite = build_handlers(SQLITE)
        self.assertEqual(list(pg), ["transaction_digest_handler"])
        self.assertIsInstance(pg["transaction_digest_handler"], TransactionDigestHandler)
        self.assertIsInstance(lite["transaction_digest_handler"], SqliteTransactionDigestHandler)
        with self.assertRaises(ValueError):
            build_handlers("oracle")

    def test_sources(self):
        settings = Settings(database_url="sqlite:///x.db", rpc_url="http://node")
        rpc = build_source(settings, "rpc")
        self.assertIsInstance(rpc, RpcCheckpointSource)
        self.assertEqual(rpc.rpc_url, "http://node")
        self.assertIsInstance(build_source(settings, "file", "cps.jsonl"), JsonlCheckpointSource)
        with self.assertRaises(SystemExit):
            build_source(settings, "file")


if __name__ == "__main__":
    unittest.main()
