from __future__ import annotations

from abc import ABC, abstractmethod

from .models import CheckpointData


class CheckpointSource(ABC):
    @property
    @abstractmethod
    def name(self) -> str:
        ...

    @abstractmethod
    def fetch_batch(self, start: int, limit: int) -> list[CheckpointData]:
        """Return up to `limit` consecutive checkpoints from `start`. Must NOT write to the DB."""
        ...
