from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Generic, List, TypeVar

from .models import CheckpointData

V = TypeVar("V")


class Processor(ABC, Generic[V]):
    # Stable pipeline name; the host routes checkpoints and tracks progress by it.
    NAME: str = ""

    @abstractmethod
    def process(self, checkpoint: CheckpointData) -> List[V]:
        """Turn one checkpoint into values. Pure: no I/O, no shared state."""
        ...


class Handler(ABC, Generic[V]):
    @staticmethod
    def batch(batch: List[V], values: List[V]) -> None:
        """Append values to the in-flight batch. Single writer per batch."""
        batch.extend(values)

    @abstractmethod
    def commit(self, batch: List[V], conn: Any) -> int:
        """Write the batch; return the number of rows actually inserted.

        Must be safe to call again with the same batch after a failure.
        """
        ...
