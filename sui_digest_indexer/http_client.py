from __future__ import annotations

import itertools
import random
import time
from dataclasses import dataclass
from typing import Any, Optional

import requests

RETRY_STATUS = {408, 429, 500, 502, 503, 504}


class RpcError(Exception):
    """JSON-RPC error object returned by the node."""

    def __init__(self, code: int | None, message: str):
        super().__init__(f"RPC error {code}: {message}")
        self.code = code
        self.message = message


@dataclass
class HttpConfig:
    user_agent: str
    connect_timeout: float = 10.0
    read_timeout: float = 30.0
    max_retries: int = 6
    backoff_base_sec: float = 1.0
    backoff_max_sec: float = 30.0
    # 0 disables client-side throttling
    rate_per_sec: float = 0.0


class HttpClient:
    def __init__(self, cfg: HttpConfig, session: Optional[requests.Session] = None):
        self.cfg = cfg
        self.session = session or requests.Session()
        self.session.headers.update({"User-Agent": cfg.user_agent})
        self._ids = itertools.count(1)
        self._next_slot = 0.0

    def request(self, method: str, url: str, **kwargs: Any) -> requests.Response:
        timeout = kwargs.pop("timeout", (self.cfg.connect_timeout, self.cfg.read_timeout))

        attempt = 0
        while True:
            attempt += 1
            self._throttle()
            try:
                resp = self.session.request(method, url, timeout=timeout, **kwargs)
                if resp.status_code in RETRY_STATUS and attempt <= self.cfg.max_retries:
                    self._sleep(attempt, resp)
                    continue
                return resp
            except requests.RequestException:
                if attempt <= self.cfg.max_retries:
                    self._sleep(attempt, None)
                    continue
                raise

    def rpc(self, url: str, method: str, params: list[Any]) -> Any:
        """POST a JSON-RPC 2.0 call and return its `result`."""
        body = {"jsonrpc": "2.0", "id": next(self._ids), "method": method, "params": params}
        resp = self.request("POST", url, json=body)
        resp.raise_for_status()
        payload = resp.json()
        err = payload.get("error")
        if err:
            raise RpcError(err.get("code"), str(err.get("message", "")))
        return payload.get("result")

    def _throttle(self) -> None:
        if self.cfg.rate_per_sec <= 0:
            return
        now = time.monotonic()
        if now < self._next_slot:
            time.sleep(self._next_slot - now)
            now = self._next_slot
        self._next_slot = now + 1.0 / self.cfg.rate_per_sec

    def _sleep(self, attempt: int, resp: Optional[requests.Response]) -> None:
        base = self.cfg.backoff_base_sec * (2 ** (attempt - 1))
        wait = min(base, self.cfg.backoff_max_sec)

        if resp is not None:
            ra = resp.headers.get("Retry-After")
            if ra:
                try:
                    wait = max(wait, float(ra))
                except ValueError:
                    pass

        jitter = random.uniform(0, 0.25 * wait)
        time.sleep(wait + jitter)
