from __future__ import annotations

import pytest

from bindplane_cli import config

_ENV_VARS = (
    config.ENV_REMOTE_URL,
    config.ENV_USERNAME,
    config.ENV_PASSWORD,
    config.ENV_API_KEY,
    config.ENV_TIMEOUT,
    config.ENV_PROFILE,
)


@pytest.fixture(autouse=True)
def config_dir(tmp_path, monkeypatch):
    def _config_dir(_: str) -> str:
        return str(tmp_path)

    monkeypatch.setattr(config, "user_config_dir", _config_dir)
    for name in _ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    return tmp_path
