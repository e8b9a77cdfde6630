from .transaction_digest import (
    PostgresDigestCommitter,
    SqliteDigestCommitter,
    SqliteTransactionDigestHandler,
    TransactionDigestHandler,
    TransactionDigestProcessor,
)

__all__ = [
    "PostgresDigestCommitter",
    "SqliteDigestCommitter",
    "SqliteTransactionDigestHandler",
    "TransactionDigestHandler",
    "TransactionDigestProcessor",
]
