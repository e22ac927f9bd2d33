from __future__ import annotations

from ic.candid import Types, decode, encode
from ic.utils import labelHash

from canister_sdk.management import ICManagementCanister, _rename_fields
from canister_sdk.types import CanisterSettings, InstallMode

CANISTER_ID = "ryjl3-tyaaa-aaaaa-aaaba-cai"


class _Agent:
    def __init__(self, result=None) -> None:
        self.calls: list[dict] = []
        self.result = result if result is not None else []

    def update_raw(self, canister_id, method_name, arg, return_type=None, effective_canister_id=None):
        self.calls.append(
            {
                "canister_id": canister_id,
                "method": method_name,
                "arg": arg,
                "effective_canister_id": effective_canister_id,
            }
        )
        return self.result


class _CandidAgent(_Agent):
    """Replies with a Candid-encoded ``record { canister_id }``."""

    def update_raw(self, canister_id, method_name, arg, return_type=None, effective_canister_id=None):
        super().update_raw(
            canister_id,
            method_name,
            arg,
            return_type=return_type,
            effective_canister_id=effective_canister_id,
        )
        reply = encode(
            [
                {
                    "type": Types.Record({"canister_id": Types.Principal}),
                    "value": {"canister_id": CANISTER_ID},
                }
            ]
        )
        if return_type is None:
            return []
        return decode(reply, return_type)


def _management(agent: _Agent) -> ICManagementCanister:
    management = ICManagementCanister(agent)
    management._encode = lambda params: params
    return management


def test_hashed_status_fields_are_renamed() -> None:
    decoded = {f"_{labelHash('cycles')}": 42, f"_{labelHash('module_hash')}": [], "_1": "x"}
    assert _rename_fields(decoded) == {"cycles": 42, "module_hash": [], "_1": "x"}


def test_create_canister_calls_management_canister() -> None:
    agent = _Agent(result=[{"type": "rec", "value": {"canister_id": CANISTER_ID}}])
    management = _management(agent)

    assert management.create_canister(settings=CanisterSettings()) == CANISTER_ID
    call = agent.calls[0]
    assert call["canister_id"] == "aaaaa-aa"
    assert call["method"] == "create_canister"
    assert call["arg"][0]["value"]["settings"][0]["controllers"] == []


def test_provisional_create_forwards_amount() -> None:
    agent = _Agent(result=[{"type": "rec", "value": {"canister_id": CANISTER_ID}}])
    management = _management(agent)

    management.provisional_create_canister_with_cycles(amount=500)
    call = agent.calls[0]
    assert call["method"] == "provisional_create_canister_with_cycles"
    assert call["arg"][0]["value"]["amount"] == [500]


def test_install_code_targets_canister_subnet() -> None:
    agent = _Agent()
    management = _management(agent)

    management.install_code(
        mode=InstallMode.UPGRADE,
        canister_id=CANISTER_ID,
        wasm_module=b"\x00asm",
        arg=b"",
    )
    call = agent.calls[0]
    assert call["method"] == "install_code"
    assert call["effective_canister_id"] == CANISTER_ID
    value = call["arg"][0]["value"]
    assert value["mode"] == {"upgrade": None}
    assert value["wasm_module"] == [0, 97, 115, 109]
    assert value["arg"] == []


def test_canister_status_returns_named_fields() -> None:
    decoded = {f"_{labelHash('cycles')}": 7, f"_{labelHash('memory_size')}": 1024}
    agent = _Agent(result=[{"type": "rec", "value": decoded}])
    management = _management(agent)

    assert management.canister_status(CANISTER_ID) == {"cycles": 7, "memory_size": 1024}
    assert agent.calls[0]["method"] == "canister_status"


def test_create_canister_round_trips_through_candid() -> None:
    agent = _CandidAgent()
    management = ICManagementCanister(agent)

    settings = CanisterSettings(controllers=("2vxsx-fae",), freezing_threshold=3600)
    assert management.create_canister(settings=settings) == CANISTER_ID
    arg = agent.calls[0]["arg"]
    assert isinstance(arg, bytes)
    assert arg.startswith(b"DIDL")


def test_provisional_create_round_trips_through_candid() -> None:
    agent = _CandidAgent()
    management = ICManagementCanister(agent)

    result = management.provisional_create_canister_with_cycles(amount=1_000_000_000_000)

    assert result == CANISTER_ID
    assert agent.calls[0]["arg"].startswith(b"DIDL")


def test_install_code_encodes_with_candid() -> None:
    agent = _CandidAgent()
    management = ICManagementCanister(agent)

    management.install_code(
        mode=InstallMode.INSTALL,
        canister_id=CANISTER_ID,
        wasm_module=b"\x00asm\x01\x00\x00\x00",
        arg=b"DIDL\x00\x00",
    )

    call = agent.calls[0]
    assert call["effective_canister_id"] == CANISTER_ID
    assert call["arg"].startswith(b"DIDL")
    assert b"\x00asm\x01\x00\x00\x00" in call["arg"]
