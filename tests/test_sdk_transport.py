from __future__ import annotations

import types

import cbor2
import pytest

from canister_sdk.errors import AgentUnavailableError
from canister_sdk.transport import HttpTransport


def _response(status_code: int, content: bytes) -> types.SimpleNamespace:
    return types.SimpleNamespace(status_code=status_code, content=content, text=repr(content))


def test_fetch_root_key_reads_status_endpoint(monkeypatch) -> None:
    transport = HttpTransport(host="http://127.0.0.1:4943/", timeout=0.5)
    captured: dict[str, object] = {}
    body = cbor2.dumps(cbor2.CBORTag(55799, {"root_key": b"\x30\x81key", "impl_version": "0.9"}))

    def fake_get(url, *, timeout=None):  # noqa: ANN001
        captured["url"] = url
        captured["timeout"] = timeout
        return _response(200, body)

    monkeypatch.setattr(transport._session, "get", fake_get)

    assert transport.fetch_root_key() == b"\x30\x81key"
    assert transport.root_key == b"\x30\x81key"
    assert captured == {"url": "http://127.0.0.1:4943/api/v2/status", "timeout": 0.5}


def test_fetch_root_key_http_error(monkeypatch) -> None:
    transport = HttpTransport(host="http://127.0.0.1:4943")
    monkeypatch.setattr(transport._session, "get", lambda url, *, timeout=None: _response(503, b""))

    with pytest.raises(AgentUnavailableError, match="503"):
        transport.fetch_root_key()
    assert transport.root_key is None


def test_fetch_root_key_missing_key(monkeypatch) -> None:
    transport = HttpTransport(host="http://127.0.0.1:4943")
    body = cbor2.dumps({"impl_version": "0.9"})
    monkeypatch.setattr(transport._session, "get", lambda url, *, timeout=None: _response(200, body))

    with pytest.raises(AgentUnavailableError, match="no root_key"):
        transport.fetch_root_key()


def test_fetch_root_key_connection_error(monkeypatch) -> None:
    transport = HttpTransport(host="http://127.0.0.1:4943")

    def fake_get(url, *, timeout=None):  # noqa: ANN001
        raise OSError("connection refused")

    monkeypatch.setattr(transport._session, "get", fake_get)

    with pytest.raises(AgentUnavailableError, match="connection refused"):
        transport.fetch_root_key()


def test_agent_uses_fetched_root_key(monkeypatch) -> None:
    transport = HttpTransport(host="http://127.0.0.1:4943")
    body = cbor2.dumps({"root_key": b"LOCAL-ROOT-KEY"})
    monkeypatch.setattr(transport._session, "get", lambda url, *, timeout=None: _response(200, body))

    transport.fetch_root_key()
    agent = transport.build_agent()

    assert agent.root_key == b"LOCAL-ROOT-KEY"


def test_agent_keeps_default_root_key_without_fetch() -> None:
    transport = HttpTransport(host="https://ic0.app")
    agent = transport.build_agent()
    assert agent.root_key
    assert agent.root_key != b"LOCAL-ROOT-KEY"
