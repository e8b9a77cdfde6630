from __future__ import annotations

import os
from dataclasses import dataclass

DEFAULT_RPC_URL = "https://fullnode.testnet.sui.io:443"
DEFAULT_USER_AGENT = "sui-digest-indexer/0.1"


def env(name: str, default: str | None = None) -> str | None:
    v = os.getenv(name)
    return v if v is not None else default


def env_int(name: str, default: int) -> int:
    v = os.getenv(name)
    if v is None:
        return default
    try:
        return int(v)
    except ValueError:
        return default


def env_float(name: str, default: float) -> float:
    v = os.getenv(name)
    if v is None:
        return default
    try:
        return float(v)
    except ValueError:
        return default


@dataclass(frozen=True)
class Settings:
    database_url: str
    log_level: str = "INFO"

    rpc_url: str = DEFAULT_RPC_URL
    user_agent: str = DEFAULT_USER_AGENT
    rpc_rate_per_sec: float = 5.0

    # Checkpoints accumulated into one batch before commit
    batch_checkpoints: int = 10


def load_settings() -> Settings:
    db = env("DATABASE_URL") or env("POSTGRES_DSN") or ""
    if not db:
        raise RuntimeError("Missing DATABASE_URL (or POSTGRES_DSN).")

    return Settings(
        database_url=db,
        log_level=env("LOG_LEVEL", "INFO") or "INFO",
        rpc_url=env("SUI_RPC_URL", DEFAULT_RPC_URL) or DEFAULT_RPC_URL,
        user_agent=env("INDEXER_USER_AGENT", DEFAULT_USER_AGENT) or DEFAULT_USER_AGENT,
        rpc_rate_per_sec=env_float("RPC_RATE_PER_SEC", 5.0),
        batch_checkpoints=max(1, env_int("BATCH_CHECKPOINTS", 10)),
    )
