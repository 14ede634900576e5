from __future__ import annotations

import json
from http.server import BaseHTTPRequestHandler, ThreadingHTTPServer
from typing import Any, Optional
from urllib.parse import urlparse

from .scheduler import PollingScheduler
from .snapshot import SnapshotStore


def make_server(
    store: SnapshotStore,
    host: str = "0.0.0.0",
    port: int = 3030,
    scheduler: Optional[PollingScheduler] = None,
) -> ThreadingHTTPServer:
    class Handler(_Handler):
        _store = store
        _scheduler = scheduler

    return ThreadingHTTPServer((host, int(port)), Handler)


class _Handler(BaseHTTPRequestHandler):
    _store: SnapshotStore
    _scheduler: Optional[PollingScheduler]

    def log_message(self, fmt: str, *args: Any) -> None:
        # Polled every few seconds by the display; keep the console quiet.
        return

    def do_OPTIONS(self) -> None:  # noqa: N802
        self.send_response(204)
        self._cors_headers()
        self.send_header("Content-Length", "0")
        self.end_headers()

    def do_GET(self) -> None:  # noqa: N802
        path = urlparse(self.path).path.rstrip("/") or "/"

        if path == "/races":
            return self._send(self._store.body())

        if path == "/health":
            return self._json(self._health())

        return self._json({"error": "Not found"}, status=404)

    def _health(self) -> dict[str, Any]:
        snapshot = self._store.current()
        payload: dict[str, Any] = {
            "published": snapshot is not None,
            "competition_id": snapshot.competition_id if snapshot else None,
            "generated_at_utc": snapshot.generated_at_utc if snapshot else None,
            "races": snapshot.race_count if snapshot else 0,
            "lanes": snapshot.lane_count if snapshot else 0,
        }
        if self._scheduler is not None:
            status = self._scheduler.status()
            payload["busy"] = status.busy
            payload["runs"] = status.runs
            payload["failures"] = status.failures
            payload["last_error"] = status.last_error
        return payload

    def _json(self, data: Any, status: int = 200) -> None:
        self._send(json.dumps(data, ensure_ascii=False).encode("utf-8"), status=status)

    def _send(self, raw: bytes, status: int = 200) -> None:
        self.send_response(int(status))
        self.send_header("Content-Type", "application/json; charset=utf-8")
        self.send_header("Cache-Control", "no-store")
        self._cors_headers()
        self.send_header("Content-Length", str(len(raw)))
        self.end_headers()
        self.wfile.write(raw)

    def _cors_headers(self) -> None:
        self.send_header("Access-Control-Allow-Origin", "*")
        self.send_header("Access-Control-Allow-Methods", "GET, OPTIONS")
