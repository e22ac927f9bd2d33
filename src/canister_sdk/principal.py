"""Principal helpers built on ic-py's ``Principal``."""

from __future__ import annotations

from ic.principal import Principal

MANAGEMENT_CANISTER_ID = Principal.management_canister().to_str()
ANONYMOUS_PRINCIPAL = Principal.anonymous().to_str()


def principal_to_text(raw: bytes) -> str:
    return Principal(bytes=raw).to_str()


def self_authenticating_principal(der_public_key: bytes) -> str:
    return Principal.self_authenticating(der_public_key).to_str()


__all__ = [
    "MANAGEMENT_CANISTER_ID",
    "ANONYMOUS_PRINCIPAL",
    "principal_to_text",
    "self_authenticating_principal",
]
