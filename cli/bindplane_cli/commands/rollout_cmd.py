from __future__ import annotations

import typer
from bindplane_client import ApiError, NetworkError, RolloutState
from bindplane_client.rollouts import wait_rollout

from .. import console
from ..config import load_config
from ..http import exit_with_api_error, make_client_or_exit

app = typer.Typer(help="Start and track configuration rollouts.")


def _state_label(state: RolloutState | None) -> str:
    return state.name.lower() if state is not None else "unknown"


@app.command("start", help="Start a rollout of a configuration with default options.")
def start_rollout(
        name: str = typer.Argument(..., help="Configuration name."),
        profile: str | None = typer.Option(None, "--profile", help="Config profile to use."),
        remote_url: str | None = typer.Option(None, "--remote-url", help="Override remote URL."),
) -> None:
    cfg = load_config()
    client = make_client_or_exit(cfg, profile=profile, remote_url_override=remote_url)
    try:
        client.start_rollout(name)
    except (ApiError, NetworkError) as e:
        exit_with_api_error(f"start rollout '{name}'", e)
    finally:
        client.close()
    console.ok(f"Rollout started for {name}.")


@app.command("status", help="Show the rollout status of a configuration.")
def rollout_status(
        name: str = typer.Argument(..., help="Configuration name."),
        profile: str | None = typer.Option(None, "--profile", help="Config profile to use."),
        remote_url: str | None = typer.Option(None, "--remote-url", help="Override remote URL."),
        json_out: bool = typer.Option(False, "--json", help="Print raw JSON."),
) -> None:
    cfg = load_config()
    client = make_client_or_exit(cfg, profile=profile, remote_url_override=remote_url)
    try:
        configuration = client.rollout_status(name)
    except (ApiError, NetworkError) as e:
        exit_with_api_error(f"fetch rollout status for '{name}'", e)
    finally:
        client.close()

    if json_out:
        console.print_json(configuration.document)
        return
    rollout = configuration.rollout
    console.print(
        f"name={configuration.name or name} state={_state_label(configuration.rollout_state)} "
        f"completed={rollout.get('completed', 0)} errors={rollout.get('errors', 0)} "
        f"pending={rollout.get('pending', 0)} waiting={rollout.get('waiting', 0)}",
        highlight=False,
    )


@app.command("wait", help="Poll a rollout until it settles.")
def wait(
        name: str = typer.Argument(..., help="Configuration name."),
        wait_timeout: int = typer.Option(900, "--wait-timeout", help="Give up after this many seconds."),
        interval: int = typer.Option(5, "--interval", help="Seconds between status checks."),
        profile: str | None = typer.Option(None, "--profile", help="Config profile to use."),
        remote_url: str | None = typer.Option(None, "--remote-url", help="Override remote URL."),
) -> None:
    cfg = load_config()
    client = make_client_or_exit(cfg, profile=profile, remote_url_override=remote_url)
    timed_out = False

    def _on_timeout(_name: str) -> None:
        nonlocal timed_out
        timed_out = True

    try:
        configuration = wait_rollout(
            client,
            name,
            timeout_s=wait_timeout,
            interval_s=interval,
            on_state=lambda n, s: console.info(f"Rollout {n}: {_state_label(s)}"),
            on_timeout=_on_timeout,
        )
    except (ApiError, NetworkError) as e:
        exit_with_api_error(f"fetch rollout status for '{name}'", e)
    finally:
        client.close()

    state = configuration.rollout_state
    if timed_out:
        console.err(f"Rollout {name} did not settle within {wait_timeout}s (state {_state_label(state)}).")
        raise typer.Exit(code=1)
    if state is RolloutState.STABLE:
        console.ok(f"Rollout {name} is stable.")
        return
    console.err(f"Rollout {name} finished in state {_state_label(state)}.")
    raise typer.Exit(code=1)
