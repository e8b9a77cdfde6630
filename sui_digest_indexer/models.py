from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List

from .errors import ExtractionError

I64_MIN = -(2 ** 63)
I64_MAX = 2 ** 63 - 1


@dataclass(frozen=True)
class CheckpointTransaction:
    digest: str


@dataclass(frozen=True)
class CheckpointData:
    sequence_number: int
    transactions: List[CheckpointTransaction] = field(default_factory=list)

    @classmethod
    def from_rpc(cls, obj: Dict[str, Any]) -> "CheckpointData":
        """Build from a `sui_getCheckpoint` result.

        Accepts `sequenceNumber` as a decimal string or int, and transactions as
        bare digest strings or objects carrying a `digest` key.
        """
        if not isinstance(obj, dict):
            raise ExtractionError(f"Checkpoint payload must be an object, got {type(obj).__name__}")

        raw_seq = obj.get("sequenceNumber", obj.get("sequence_number"))
        if raw_seq is None or isinstance(raw_seq, bool):
            raise ExtractionError("Checkpoint payload has no sequenceNumber")
        try:
            seq = int(raw_seq)
        except (TypeError, ValueError) as e:
            raise ExtractionError(f"Invalid sequenceNumber: {raw_seq!r}") from e

        raw_txs = obj.get("transactions")
        if raw_txs is None:
            raw_txs = []
        if not isinstance(raw_txs, list):
            raise ExtractionError(f"Checkpoint {seq}: transactions must be a list")

        txs: List[CheckpointTransaction] = []
        for i, t in enumerate(raw_txs):
            digest = t.get("digest") if isinstance(t, dict) else t
            if not isinstance(digest, str) or not digest:
                raise ExtractionError(f"Checkpoint {seq}: transaction #{i} has no digest")
            txs.append(CheckpointTransaction(digest=digest))

        return cls(sequence_number=seq, transactions=txs)


@dataclass(frozen=True)
class StoredTransactionDigest:
    tx_digest: str
    checkpoint_sequence_number: int

    def as_row(self) -> tuple[str, int]:
        return (self.tx_digest, self.checkpoint_sequence_number)


@dataclass
class RunStats:
    checkpoints: int = 0
    extracted: int = 0
    inserted: int = 0
    deduped: int = 0
    batches: int = 0
