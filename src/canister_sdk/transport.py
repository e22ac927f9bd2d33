"""HTTP transport handle bound to a single replica host."""

from __future__ import annotations

from dataclasses import dataclass, field

from canister_sdk.errors import AgentUnavailableError

STATUS_PATH = "/api/v2/status"


@dataclass
class HttpTransport:
    host: str
    timeout: float = 10.0
    root_key: bytes | None = field(default=None, init=False)

    def __post_init__(self) -> None:
        try:
            import requests
        except Exception as exc:  # pragma: no cover
            raise AgentUnavailableError(f"requests stack unavailable: {exc}") from exc

        self._session = requests.Session()

    def _url(self, path: str) -> str:
        return f"{self.host.rstrip('/')}/{path.lstrip('/')}"

    def fetch_root_key(self) -> bytes:
        """Fetch the replica's root key from its status endpoint.

        Only meaningful against a local replica; mainnet keys are pinned in
        the agent.
        """
        try:
            import cbor2
        except Exception as exc:  # pragma: no cover
            raise AgentUnavailableError(f"cbor2 unavailable: {exc}") from exc

        try:
            response = self._session.get(self._url(STATUS_PATH), timeout=self.timeout)
        except Exception as exc:
            raise AgentUnavailableError(str(exc)) from exc

        if response.status_code >= 400:
            raise AgentUnavailableError(
                f"status request failed: {response.status_code} {response.text}"
            )

        try:
            status = cbor2.loads(response.content)
        except Exception as exc:
            raise AgentUnavailableError("status response is not valid CBOR") from exc
        if isinstance(status, cbor2.CBORTag):
            status = status.value

        root_key = status.get("root_key") if isinstance(status, dict) else None
        if not isinstance(root_key, (bytes, bytearray)) or not root_key:
            raise AgentUnavailableError("status response has no root_key")
        self.root_key = bytes(root_key)
        return self.root_key

    def build_agent(self, identity=None):
        try:
            from ic.agent import Agent
            from ic.client import Client
            from ic.identity import Identity
        except Exception as exc:  # pragma: no cover
            raise AgentUnavailableError(f"ic-py stack unavailable: {exc}") from exc

        if identity is None:
            identity = Identity(anonymous=True)
        if self.root_key is None:
            return Agent(identity, Client(url=self.host))
        return Agent(identity, Client(url=self.host), root_key=self.root_key)


__all__ = ["HttpTransport", "STATUS_PATH"]
