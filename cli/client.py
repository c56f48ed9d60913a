from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict, Iterator, Sequence

import httpx
import typer

from cli.config import CLIConfig


def iter_messages(path: Path) -> Iterator[Dict[str, Any]]:
    """Yield one data message per non-blank JSON line of ``path``."""
    with path.open("r", encoding="utf-8") as handle:
        for line_number, line in enumerate(handle, start=1):
            candidate = line.strip()
            if not candidate:
                continue
            try:
                payload = json.loads(candidate)
            except json.JSONDecodeError as exc:
                raise typer.BadParameter(
                    f"Line {line_number} of {path} is not valid JSON: {exc.msg}"
                ) from exc
            if not isinstance(payload, dict):
                raise typer.BadParameter(
                    f"Line {line_number} of {path} is not a JSON object."
                )
            yield payload


class ApiClient:
    """Minimal HTTP client for the fill level monitor service."""

    def __init__(self, config: CLIConfig) -> None:
        self._config = config
        self._client = httpx.Client(base_url=config.base_url, timeout=config.timeout)

    def close(self) -> None:
        self._client.close()

    def start_session(self) -> Dict[str, Any]:
        return self._request("POST", "/session/start")

    def stop_session(self) -> Dict[str, Any]:
        return self._request("POST", "/session/stop")

    def post_message(self, message: Dict[str, Any]) -> Dict[str, Any]:
        return self._request("POST", "/messages", json=message)

    def post_readings(self, entity_key: str, readings: Sequence[str]) -> Dict[str, Any]:
        body = {
            "readings": [
                {"entity_key": entity_key, "reading": reading} for reading in readings
            ]
        }
        return self._request("POST", "/readings", json=body)

    def get_table(self) -> Dict[str, Any]:
        return self._request("GET", "/entities")

    def _request(self, method: str, url: str, **kwargs: Any) -> Dict[str, Any]:
        try:
            response = self._client.request(method, url, **kwargs)
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            self._handle_http_error(exc)
        except httpx.TransportError as exc:
            typer.secho(
                f"Could not reach {self._config.base_url}: {exc}",
                fg=typer.colors.RED,
                err=True,
            )
            raise typer.Exit(code=1) from exc
        return response.json()

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
