from __future__ import annotations

import json
from pathlib import Path

from ..errors import ExtractionError
from ..models import CheckpointData
from ..source_base import CheckpointSource


class JsonlCheckpointSource(CheckpointSource):
    """Replays checkpoints from a JSONL file, one `sui_getCheckpoint` result per line."""

    @property
    def name(self) -> str:
        return "jsonl"

    def __init__(self, path: str):
        self.path = Path(path)

    def _read_all(self) -> list[CheckpointData]:
        out: list[CheckpointData] = []
        with self.path.open("r", encoding="utf-8") as f:
            for lineno, line in enumerate(f, start=1):
                s = line.strip()
                if not s:
                    continue
                try:
                    obj = json.loads(s)
                except json.JSONDecodeError as e:
                    raise ExtractionError(f"{self.path}:{lineno}: invalid JSON: {e}") from e
                out.append(CheckpointData.from_rpc(obj))
        return out

    def fetch_batch(self, start: int, limit: int) -> list[CheckpointData]:
        cps = [cp for cp in self._read_all() if cp.sequence_number >= start]
        cps.sort(key=lambda cp: cp.sequence_number)
        return cps[:limit]
