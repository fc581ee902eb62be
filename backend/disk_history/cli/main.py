"""CLI entrypoint for Disk History."""

from __future__ import annotations

import json
import os
from datetime import datetime
from pathlib import Path
from typing import Optional

import requests
import typer

app = typer.Typer(name="dskh", help="Disk History command-line interface")

DEFAULT_HOST = "http://127.0.0.1:8080"


def _resolve_host(override: Optional[str]) -> str:
    if override:
        return override.rstrip("/")
    env_host = os.environ.get("DSKH_HOST")
    if env_host:
        return env_host.rstrip("/")
    return DEFAULT_HOST


def _request(method: str, path: str, host: Optional[str] = None, **kwargs) -> requests.Response:
    url = f"{_resolve_host(host)}{path}"
    try:
        resp = requests.request(method, url, timeout=60, **kwargs)
    except requests.RequestException as exc:
        typer.echo(f"Request failed: {exc}", err=True)
        raise typer.Exit(code=1) from exc
    if not resp.ok:
        try:
            detail = resp.json()
        except ValueError:
            detail = resp.text
        typer.echo(f"Request failed ({resp.status_code}): {detail}", err=True)
        raise typer.Exit(code=1)
    return resp


def _iso(value: Optional[datetime]) -> Optional[str]:
    return value.isoformat() if value is not None else None


def _echo_json(resp: requests.Response) -> None:
    typer.echo(json.dumps(resp.json(), indent=2))


@app.command("import")
def import_items(
    batch: Path = typer.Argument(..., exists=True, dir_okay=False, help="JSON file with items and updateDate"),
    host: Optional[str] = typer.Option(None, "--host", help="Override backend host"),
) -> None:
    """Send an import batch."""
    payload = json.loads(batch.expanduser().read_text(encoding="utf-8"))
    _request("POST", "/imports", host=host, json=payload)
    typer.echo(json.dumps({"status": "ok", "items": len(payload.get("items", []))}))


@app.command()
def delete(
    item_id: str = typer.Argument(..., help="Item identifier"),
    date: datetime = typer.Option(..., "--date", help="Deletion timestamp (ISO 8601)"),
    host: Optional[str] = typer.Option(None, "--host", help="Override backend host"),
) -> None:
    """Remove an item and everything beneath it."""
    _request("DELETE", f"/delete/{item_id}", host=host, params={"date": _iso(date)})
    typer.echo(json.dumps({"status": "ok"}))


@app.command()
def node(
    item_id: str = typer.Argument(..., help="Item identifier"),
    host: Optional[str] = typer.Option(None, "--host", help="Override backend host"),
) -> None:
    """Show the current tree under an item."""
    _echo_json(_request("GET", f"/nodes/{item_id}", host=host))


@app.command()
def updates(
    date: datetime = typer.Option(..., "--date", help="End of the updates window (ISO 8601)"),
    host: Optional[str] = typer.Option(None, "--host", help="Override backend host"),
) -> None:
    """List files changed shortly before a moment."""
    _echo_json(_request("GET", "/updates", host=host, params={"date": _iso(date)}))


@app.command()
def history(
    item_id: str = typer.Argument(..., help="Item identifier"),
    start: Optional[datetime] = typer.Option(None, "--start", help="Window start, inclusive"),
    end: Optional[datetime] = typer.Option(None, "--end", help="Window end, exclusive"),
    host: Optional[str] = typer.Option(None, "--host", help="Override backend host"),
) -> None:
    """Show file snapshots or reconstructed folder states."""
    params = {key: value for key, value in (("dateStart", _iso(start)), ("dateEnd", _iso(end))) if value}
    _echo_json(_request("GET", f"/node/{item_id}/history", host=host, params=params))


if __name__ == "__main__":
    app()
