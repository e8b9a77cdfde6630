from __future__ import annotations

import logging

from ..errors import ExtractionError
from ..http_client import HttpClient, HttpConfig, RpcError
from ..logging_utils import get_logger, log_json
from ..models import CheckpointData
from ..source_base import CheckpointSource

logger = get_logger(__name__)


class RpcCheckpointSource(CheckpointSource):
    """Reads checkpoints from a Sui full node with `sui_getCheckpoint`."""

    @property
    def name(self) -> str:
        return "sui_rpc"

    def __init__(self, rpc_url: str, user_agent: str, rate_per_sec: float = 0.0, client: HttpClient | None = None):
        self.rpc_url = rpc_url
        self.client = client or HttpClient(HttpConfig(user_agent=user_agent, rate_per_sec=rate_per_sec))

    def fetch_batch(self, start: int, limit: int) -> list[CheckpointData]:
        out: list[CheckpointData] = []
        for seq in range(start, start + limit):
            try:
                result = self.client.rpc(self.rpc_url, "sui_getCheckpoint", [str(seq)])
            except RpcError as e:
                # Usually the checkpoint is not produced yet; stop at the tip.
                log_json(logger, logging.INFO, "checkpoint_unavailable", sequence_number=seq, error=str(e))
                break
            if result is None:
                break

            cp = CheckpointData.from_rpc(result)
            if cp.sequence_number != seq:
                raise ExtractionError(f"Asked for checkpoint {seq}, node returned {cp.sequence_number}")
            out.append(cp)
        return out
