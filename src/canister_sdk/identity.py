"""Load dfx-style PEM identities for signing management calls."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from cryptography.hazmat.primitives.asymmetric import ec
from cryptography.hazmat.primitives.asymmetric.ed25519 import Ed25519PrivateKey
from cryptography.hazmat.primitives.serialization import (
    Encoding,
    NoEncryption,
    PrivateFormat,
    PublicFormat,
    load_pem_private_key,
)

from canister_sdk.errors import AgentUnavailableError, IdentityError
from canister_sdk.principal import self_authenticating_principal

DEFAULT_DFX_IDENTITY_PATH = (
    Path.home() / ".config" / "dfx" / "identity" / "default" / "identity.pem"
)


@dataclass(frozen=True)
class PemIdentity:
    key_type: str
    private_key_hex: str
    der_public_key: bytes

    @property
    def principal(self) -> str:
        return self_authenticating_principal(self.der_public_key)

    def to_agent_identity(self):
        try:
            from ic.identity import Identity
        except Exception as exc:  # pragma: no cover
            raise AgentUnavailableError(f"ic-py stack unavailable: {exc}") from exc
        return Identity(privkey=self.private_key_hex, type=self.key_type)


def load_pem_identity(path: str | Path | None = None) -> PemIdentity:
    pem_path = Path(path) if path else DEFAULT_DFX_IDENTITY_PATH
    try:
        raw = pem_path.read_bytes()
    except OSError as exc:
        raise IdentityError(f"identity file not readable: {pem_path}") from exc

    try:
        private = load_pem_private_key(raw, password=None)
    except Exception as exc:
        raise IdentityError(f"invalid PEM identity: {pem_path}") from exc

    der_public_key = private.public_key().public_bytes(
        Encoding.DER, PublicFormat.SubjectPublicKeyInfo
    )
    if isinstance(private, Ed25519PrivateKey):
        secret = private.private_bytes(Encoding.Raw, PrivateFormat.Raw, NoEncryption())
        return PemIdentity(
            key_type="ed25519",
            private_key_hex=secret.hex(),
            der_public_key=der_public_key,
        )
    if isinstance(private, ec.EllipticCurvePrivateKey) and isinstance(private.curve, ec.SECP256K1):
        secret = private.private_numbers().private_value.to_bytes(32, "big")
        return PemIdentity(
            key_type="secp256k1",
            private_key_hex=secret.hex(),
            der_public_key=der_public_key,
        )
    raise IdentityError(f"unsupported identity key type in {pem_path}")


__all__ = ["DEFAULT_DFX_IDENTITY_PATH", "PemIdentity", "load_pem_identity"]
