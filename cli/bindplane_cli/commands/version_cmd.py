from __future__ import annotations

import typer
from bindplane_client import NetworkError

from .. import console
from ..config import load_config
from ..http import exit_with_api_error, make_client_or_exit


def version(
        profile: str | None = typer.Option(None, "--profile", help="Config profile to use."),
        remote_url: str | None = typer.Option(None, "--remote-url", help="Override remote URL."),
        json_out: bool = typer.Option(False, "--json", help="Print raw JSON."),
) -> None:
    """Show the control plane version."""
    cfg = load_config()
    client = make_client_or_exit(cfg, profile=profile, remote_url_override=remote_url)
    try:
        v = client.version()
    except NetworkError as e:
        exit_with_api_error("query version", e)
    finally:
        client.close()

    if json_out:
        console.print_json(v.document)
        return
    if not v.tag:
        console.warn("Control plane did not report a version.")
        return
    console.ok(f"BindPlane {v.tag} (commit {v.commit or '-'}, built {v.date or '-'})")
