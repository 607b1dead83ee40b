from __future__ import annotations

import typer
from bindplane_client import ApiError, NetworkError

from .. import console
from ..config import load_config
from ..http import exit_with_api_error, make_client_or_exit

app = typer.Typer(help="Read configurations from the control plane.")


@app.command("get", help="Fetch a configuration by name.")
def get_configuration(
        name: str = typer.Argument(..., help="Configuration name."),
        raw: bool = typer.Option(False, "--raw", help="Print the raw configuration text."),
        profile: str | None = typer.Option(None, "--profile", help="Config profile to use."),
        remote_url: str | None = typer.Option(None, "--remote-url", help="Override remote URL."),
        json_out: bool = typer.Option(False, "--json", help="Print raw JSON."),
) -> None:
    cfg = load_config()
    client = make_client_or_exit(cfg, profile=profile, remote_url_override=remote_url)
    try:
        if raw:
            text = client.raw_configuration(name)
        else:
            configuration = client.configuration(name)
    except (ApiError, NetworkError) as e:
        exit_with_api_error(f"fetch configuration '{name}'", e)
    finally:
        client.close()

    if raw:
        console.out(text)
        return
    if json_out:
        console.print_json(configuration.document)
        return
    labels = configuration.metadata.get("labels") or {}
    label_text = ",".join(f"{k}={v}" for k, v in sorted(labels.items())) if isinstance(labels, dict) else ""
    console.print(f"name={configuration.name} kind={configuration.kind or '-'} labels={label_text or '-'}", highlight=False)
