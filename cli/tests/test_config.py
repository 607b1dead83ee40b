from __future__ import annotations

import os

import pytest

from bindplane_cli import config


def _write(config_dir, text: str) -> None:
    config_dir.joinpath("config.toml").write_text(text, encoding="utf-8")


def test_load_config_defaults_when_missing() -> None:
    cfg = config.load_config()
    assert cfg.remote_url == config.REMOTE_URL_DEFAULT
    assert cfg.auth.username == ""
    assert cfg.ca_files == []


def test_load_config_reads_auth_section(config_dir) -> None:
    _write(
        config_dir,
        "\n".join(
            [
                'remote_url = "https://bindplane.example.com/"',
                'ca_files = ["/etc/ssl/bindplane-ca.pem"]',
                "timeout_s = 30",
                "",
                "[auth]",
                'username = "admin"',
                'password = "secret"',
                'api_key = "k-123"',
                "",
            ]
        ),
    )

    cfg = config.load_config()

    assert cfg.remote_url == "https://bindplane.example.com"
    assert cfg.auth.username == "admin"
    assert cfg.auth.password == "secret"
    assert cfg.auth.api_key == "k-123"
    assert cfg.ca_files == ["/etc/ssl/bindplane-ca.pem"]
    assert cfg.timeout_s == 30


def test_apply_profile_overrides_base(config_dir) -> None:
    _write(
        config_dir,
        "\n".join(
            [
                'remote_url = "http://default.test"',
                "[auth]",
                'username = "admin"',
                "",
                "[profiles.prod]",
                'remote_url = "https://prod.test"',
                'api_key = "prod-key"',
                "",
            ]
        ),
    )

    cfg = config.apply_profile(config.load_config(), "prod")

    assert cfg.remote_url == "https://prod.test"
    assert cfg.auth.api_key == "prod-key"
    assert cfg.auth.username == "admin"


def test_apply_profile_from_env(config_dir, monkeypatch) -> None:
    _write(config_dir, '[profiles.dev]\nremote_url = "http://dev.test"\n')
    monkeypatch.setenv(config.ENV_PROFILE, "dev")

    cfg = config.apply_profile(config.load_config(), None)

    assert cfg.remote_url == "http://dev.test"


def test_apply_env_overrides(monkeypatch) -> None:
    monkeypatch.setenv(config.ENV_REMOTE_URL, "https://env.test/")
    monkeypatch.setenv(config.ENV_API_KEY, "env-key")
    monkeypatch.setenv(config.ENV_TIMEOUT, "15")

    cfg = config.apply_env(config.default_config())

    assert cfg.remote_url == "https://env.test"
    assert cfg.auth.api_key == "env-key"
    assert cfg.auth.username == ""
    assert cfg.timeout_s == 15.0


def test_apply_env_ignores_bad_timeout(monkeypatch) -> None:
    monkeypatch.setenv(config.ENV_TIMEOUT, "soon")
    assert config.apply_env(config.default_config()).timeout_s == 0.0


def test_to_client_config_reads_ca_files(tmp_path) -> None:
    ca_path = tmp_path / "ca.pem"
    ca_path.write_text("-----BEGIN CERTIFICATE-----\n...\n", encoding="utf-8")
    cfg = config.default_config()
    cfg.ca_files = [str(ca_path)]
    cfg.auth.api_key = "k-123"

    client_cfg = config.to_client_config(cfg)

    assert client_cfg.certificate_authorities == ("-----BEGIN CERTIFICATE-----\n...\n",)
    assert client_cfg.auth.api_key == "k-123"
    assert client_cfg.remote_url == config.REMOTE_URL_DEFAULT


def test_to_client_config_missing_ca_file(tmp_path) -> None:
    cfg = config.default_config()
    cfg.ca_files = [str(tmp_path / "missing.pem")]

    with pytest.raises(config.ConfigError, match="missing.pem"):
        config.to_client_config(cfg)


def test_save_config_keeps_profiles(config_dir) -> None:
    _write(config_dir, '[profiles.prod]\nremote_url = "https://prod.test"\n')
    cfg = config.load_config()
    cfg.auth.username = "admin"

    path = config.save_config(cfg)

    assert path.endswith("config.toml")
    assert os.stat(path).st_mode & 0o777 == 0o600
    assert config.apply_profile(config.load_config(), "prod").remote_url == "https://prod.test"
    assert config.load_config().auth.username == "admin"


def test_normalize_remote_url_defaults_to_https() -> None:
    assert config.normalize_remote_url("bindplane.example.com") == "https://bindplane.example.com"


def test_normalize_remote_url_defaults_to_http_for_localhost() -> None:
    assert config.normalize_remote_url("localhost:3001") == "http://localhost:3001"


def test_normalize_remote_url_strips_trailing_slash() -> None:
    assert config.normalize_remote_url("https://bindplane.example.com/") == "https://bindplane.example.com"
