from __future__ import annotations

import json
from typing import Any, Dict, Iterator, List, Optional

import httpx
import typer

from cli.config import CLIConfig


class ApiClient:
    """Minimal HTTP client for the feed service."""

    def __init__(self, config: CLIConfig) -> None:
        self._config = config
        self._client = httpx.Client(base_url=config.base_url, timeout=config.timeout)

    def close(self) -> None:
        self._client.close()

    def get_summary(self) -> Dict[str, Any]:
        try:
            response = self._client.get("/dataset")
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            self._handle_http_error(exc)
        return response.json()

    def get_points(self, view: str, metric: str) -> List[Dict[str, Any]]:
        try:
            response = self._client.get("/points", params={"view": view, "metric": metric})
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            self._handle_http_error(exc)
        payload = response.json()
        if not isinstance(payload, list):
            raise typer.BadParameter("Unexpected response payload when fetching points.")
        return payload

    def stream(self, limit: Optional[int] = None) -> Iterator[Dict[str, Any]]:
        params = {"limit": limit} if limit is not None else None
        # Ticks can be several seconds apart, so reads never time out.
        with self._client.stream(
            "GET", "/stream", params=params, timeout=httpx.Timeout(self._config.timeout, read=None)
        ) as response:
            try:
                response.raise_for_status()
            except httpx.HTTPStatusError as exc:
                response.read()
                self._handle_http_error(exc)
            for line in response.iter_lines():
                if line.strip():
                    yield json.loads(line)

    @staticmethod
    def _handle_http_error(exc: httpx.HTTPStatusError) -> None:
        detail: str | None = None
        try:
            data = exc.response.json()
            detail = data.get("detail")
        except Exception:  # noqa: BLE001 - best effort parsing
            detail = exc.response.text.strip()
        message = (
            f"Request failed with status {exc.response.status_code}: {detail or 'no detail provided.'}"
        )
        typer.secho(message, fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1)
