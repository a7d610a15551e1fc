from __future__ import annotations

from typing import Any, Dict, Optional

import httpx
import typer

from cli.config import API_PREFIX, CLIConfig


class ApiClient:
    """Minimal HTTP client for the measurements API."""

    def __init__(self, config: CLIConfig) -> None:
        self._config = config
        self._client = httpx.Client(base_url=config.base_url, timeout=config.timeout)

    def close(self) -> None:
        self._client.close()

    def query_range(
        self,
        field: str,
        start_date: str,
        end_date: str,
        page: Optional[int] = None,
        limit: Optional[int] = None,
    ) -> Dict[str, Any]:
        params: Dict[str, Any] = {"field": field, "start_date": start_date, "end_date": end_date}
        if page is not None:
            params["page"] = page
        if limit is not None:
            params["limit"] = limit
        return self._request("GET", API_PREFIX, params=params)

    def get_metrics(
        self,
        field: str,
        start_date: Optional[str] = None,
        end_date: Optional[str] = None,
    ) -> Dict[str, Any]:
        params: Dict[str, Any] = {"field": field}
        if start_date:
            params["start_date"] = start_date
        if end_date:
            params["end_date"] = end_date
        return self._request("GET", f"{API_PREFIX}/metrics", params=params)

    def create_measurement(
        self,
        field1: float,
        field2: float,
        field3: float,
        timestamp: Optional[str] = None,
    ) -> Dict[str, Any]:
        body: Dict[str, Any] = {"field1": field1, "field2": field2, "field3": field3}
        if timestamp:
            body["timestamp"] = timestamp
        return self._request("POST", API_PREFIX, json=body)

    def _request(self, method: str, url: str, **kwargs: Any) -> Dict[str, Any]:
        try:
            response = self._client.request(method, url, **kwargs)
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            self._handle_http_error(exc)
        except httpx.TransportError as exc:
            typer.secho(
                f"Could not reach {self._config.base_url}: {exc}", fg=typer.colors.RED, err=True
            )
            raise typer.Exit(code=1) from exc
        return response.json()

    @staticmethod
    def _handle_http_error(exc: httpx.HTTPStatusError) -> None:
        kind: str | None = None
        detail: str | None = None
        try:
            data = exc.response.json()
            kind = data.get("error")
            detail = data.get("message")
        except Exception:  # noqa: BLE001 - best effort parsing
            detail = exc.response.text.strip()

        if kind == "NoData":
            typer.secho(detail or "No measurements found.", fg=typer.colors.YELLOW, err=True)
            raise typer.Exit(code=1)

        described = f"{kind}: {detail}" if kind else detail
        message = (
            f"Request failed with status {exc.response.status_code}: {described or 'no detail provided.'}"
        )
        typer.secho(message, fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1)
