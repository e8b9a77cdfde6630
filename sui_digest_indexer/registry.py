from __future__ import annotations

from .config import Settings
from .db import POSTGRES, SQLITE
from .handlers import SqliteTransactionDigestHandler, TransactionDigestHandler
from .sources.jsonl import JsonlCheckpointSource
from .sources.rpc import RpcCheckpointSource


def build_handlers(driver: str):
    if driver == POSTGRES:
        handler = TransactionDigestHandler()
    elif driver == SQLITE:
        handler = SqliteTransactionDigestHandler()
    else:
        raise ValueError(f"No digest committer for driver {driver!r}")
    return {handler.NAME: handler}


def build_source(settings: Settings, kind: str, path: str | None = None):
    if kind == "rpc":
        return RpcCheckpointSource(
            rpc_url=settings.rpc_url,
            user_agent=settings.user_agent,
            rate_per_sec=settings.rpc_rate_per_sec,
        )
    if kind == "file":
        if not path:
            raise SystemExit("--file is required with --source file")
        return JsonlCheckpointSource(path)
    raise SystemExit(f"Unknown source: {kind}. Available: rpc, file")
