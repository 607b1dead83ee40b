from __future__ import annotations

import time
from typing import Callable

from .models import Configuration, RolloutState


def wait_rollout(
        client,
        name: str,
        *,
        timeout_s: int = 900,
        interval_s: int = 5,
        on_state: Callable[[str, RolloutState | None], None] | None = None,
        on_timeout: Callable[[str], None] | None = None,
) -> Configuration:
    """Poll the rollout status of ``name`` until it settles or ``timeout_s`` passes.

    Returns the last status snapshot. Errors from the client are not retried.
    """
    deadline = time.monotonic() + max(0, int(timeout_s))
    last_state: RolloutState | None = None
    first = True
    while True:
        config = client.rollout_status(name)
        state = config.rollout_state
        if first or state != last_state:
            if on_state:
                on_state(name, state)
            last_state = state
            first = False
        if state is not None and state.terminal:
            return config
        if time.monotonic() >= deadline:
            if on_timeout:
                on_timeout(name)
            return config
        time.sleep(max(1, int(interval_s)))
