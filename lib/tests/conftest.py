from __future__ import annotations

import datetime

import httpx
import pytest
from cryptography import x509
from cryptography.hazmat.primitives import hashes, serialization
from cryptography.hazmat.primitives.asymmetric import ec
from cryptography.x509.oid import NameOID

from bindplane_client import AuthConfig, BindPlane, ClientConfig, with_http_transport

REMOTE_URL = "http://bindplane.test"


def _self_signed_ca_pem(common_name: str) -> str:
    key = ec.generate_private_key(ec.SECP256R1())
    name = x509.Name([x509.NameAttribute(NameOID.COMMON_NAME, common_name)])
    now = datetime.datetime.now(datetime.timezone.utc)
    cert = (
        x509.CertificateBuilder()
        .subject_name(name)
        .issuer_name(name)
        .public_key(key.public_key())
        .serial_number(x509.random_serial_number())
        .not_valid_before(now - datetime.timedelta(days=1))
        .not_valid_after(now + datetime.timedelta(days=30))
        .add_extension(x509.BasicConstraints(ca=True, path_length=None), critical=True)
        .sign(key, hashes.SHA256())
    )
    return cert.public_bytes(serialization.Encoding.PEM).decode("ascii")


@pytest.fixture(scope="session")
def ca_pem() -> str:
    return _self_signed_ca_pem("bindplane-test-ca")


@pytest.fixture(scope="session")
def second_ca_pem() -> str:
    return _self_signed_ca_pem("bindplane-test-ca-2")


@pytest.fixture
def mock_api():
    """Build clients whose requests are answered by a canned response and recorded."""
    created: list[BindPlane] = []

    def _make(
            status: int = 200,
            *,
            json_body=None,
            text: str = "",
            username: str = "",
            password: str = "",
            api_key: str = "",
            options=(),
    ):
        calls: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            calls.append(request)
            if json_body is not None:
                return httpx.Response(status, json=json_body)
            return httpx.Response(status, text=text)

        cfg = ClientConfig(
            remote_url=REMOTE_URL,
            auth=AuthConfig(username=username, password=password, api_key=api_key),
        )
        client = BindPlane(cfg, None, with_http_transport(httpx.MockTransport(handler)), *options)
        created.append(client)
        return client, calls

    yield _make

    for client in created:
        client.close()
