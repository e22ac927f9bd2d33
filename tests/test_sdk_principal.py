from __future__ import annotations

from ic.principal import Principal

from canister_sdk.principal import (
    ANONYMOUS_PRINCIPAL,
    MANAGEMENT_CANISTER_ID,
    principal_to_text,
    self_authenticating_principal,
)


def test_well_known_principals() -> None:
    assert principal_to_text(b"") == MANAGEMENT_CANISTER_ID == "aaaaa-aa"
    assert principal_to_text(b"\x04") == ANONYMOUS_PRINCIPAL == "2vxsx-fae"


def test_self_authenticating_principal_shape() -> None:
    text = self_authenticating_principal(b"\x30\x2a" + b"\x11" * 42)
    assert len(text) == 63
    assert text == text.lower()
    raw = Principal.from_str(text).bytes
    assert len(raw) == 29
    assert raw[-1] == 0x02
