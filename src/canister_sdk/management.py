"""Management canister contract and the ic-py backed implementation."""

from __future__ import annotations

import logging
from typing import Any, Protocol

from ic.candid import Types, encode
from ic.utils import labelHash

from canister_sdk.principal import MANAGEMENT_CANISTER_ID, principal_to_text
from canister_sdk.transport import HttpTransport
from canister_sdk.types import CanisterSettings, InstallMode

logger = logging.getLogger(__name__)

STATUS_FIELDS = (
    "status",
    "settings",
    "module_hash",
    "memory_size",
    "cycles",
    "idle_cycles_burned_per_day",
    "reserved_cycles",
    "running",
    "stopping",
    "stopped",
    "controllers",
    "compute_allocation",
    "memory_allocation",
    "freezing_threshold",
)


class ManagementCanisterProtocol(Protocol):
    def create_canister(self, *, settings: CanisterSettings) -> str: ...

    def provisional_create_canister_with_cycles(
        self, *, amount: int, settings: CanisterSettings | None = None
    ) -> str: ...

    def install_code(
        self,
        *,
        mode: InstallMode,
        canister_id: str,
        wasm_module: bytes,
        arg: bytes,
    ) -> None: ...

    def start_canister(self, canister_id: str) -> None: ...

    def stop_canister(self, canister_id: str) -> None: ...

    def canister_status(self, canister_id: str) -> dict: ...

    def delete_canister(self, canister_id: str) -> None: ...


_HASHED_FIELDS = {f"_{labelHash(name)}": name for name in STATUS_FIELDS}


def _rename_fields(value: Any) -> Any:
    if isinstance(value, dict):
        return {_HASHED_FIELDS.get(str(k), k): _rename_fields(v) for k, v in value.items()}
    if isinstance(value, list):
        return [_rename_fields(item) for item in value]
    return value


def _principal_text(value: Any) -> str:
    if hasattr(value, "to_str"):
        return value.to_str()
    if isinstance(value, (bytes, bytearray)):
        return principal_to_text(bytes(value))
    return str(value)


def _first_value(result: Any) -> Any:
    if isinstance(result, list) and result:
        head = result[0]
        if isinstance(head, dict) and "value" in head:
            return head["value"]
        return head
    return result


class ICManagementCanister:
    """Calls the management canister through an ic-py agent."""

    def __init__(self, agent) -> None:
        self._agent = agent
        self._encode = encode
        self._types = Types
        self._settings_type = Types.Record(
            {
                "controllers": Types.Opt(Types.Vec(Types.Principal)),
                "compute_allocation": Types.Opt(Types.Nat),
                "memory_allocation": Types.Opt(Types.Nat),
                "freezing_threshold": Types.Opt(Types.Nat),
            }
        )
        self._canister_id_type = Types.Record({"canister_id": Types.Principal})

    @classmethod
    def create(cls, *, transport: HttpTransport, identity=None) -> "ICManagementCanister":
        return cls(transport.build_agent(identity))

    def _settings_value(self, settings: CanisterSettings) -> dict:
        def _opt(value):
            return [] if value is None else [value]

        return {
            "controllers": [list(settings.controllers)] if settings.controllers else [],
            "compute_allocation": _opt(settings.compute_allocation),
            "memory_allocation": _opt(settings.memory_allocation),
            "freezing_threshold": _opt(settings.freezing_threshold),
        }

    def _call(
        self,
        method: str,
        params: list[dict],
        *,
        return_type=None,
        effective_canister_id: str | None = None,
    ) -> Any:
        logger.debug("update %s on %s", method, MANAGEMENT_CANISTER_ID)
        return self._agent.update_raw(
            MANAGEMENT_CANISTER_ID,
            method,
            self._encode(params),
            return_type=return_type,
            effective_canister_id=effective_canister_id,
        )

    def _canister_id_params(self, canister_id: str) -> list[dict]:
        return [{"type": self._canister_id_type, "value": {"canister_id": canister_id}}]

    def create_canister(self, *, settings: CanisterSettings) -> str:
        Types = self._types
        arg_type = Types.Record({"settings": Types.Opt(self._settings_type)})
        result = self._call(
            "create_canister",
            [{"type": arg_type, "value": {"settings": [self._settings_value(settings)]}}],
            return_type=[self._canister_id_type],
        )
        return _principal_text(_first_value(result)["canister_id"])

    def provisional_create_canister_with_cycles(
        self, *, amount: int, settings: CanisterSettings | None = None
    ) -> str:
        Types = self._types
        arg_type = Types.Record(
            {
                "amount": Types.Opt(Types.Nat),
                "settings": Types.Opt(self._settings_type),
            }
        )
        value = {
            "amount": [amount],
            "settings": [] if settings is None else [self._settings_value(settings)],
        }
        result = self._call(
            "provisional_create_canister_with_cycles",
            [{"type": arg_type, "value": value}],
            return_type=[self._canister_id_type],
        )
        return _principal_text(_first_value(result)["canister_id"])

    def install_code(
        self,
        *,
        mode: InstallMode,
        canister_id: str,
        wasm_module: bytes,
        arg: bytes,
    ) -> None:
        Types = self._types
        blob = Types.Vec(Types.Nat8)
        arg_type = Types.Record(
            {
                "mode": Types.Variant(
                    {
                        InstallMode.INSTALL.value: Types.Null,
                        InstallMode.REINSTALL.value: Types.Null,
                        InstallMode.UPGRADE.value: Types.Null,
                    }
                ),
                "canister_id": Types.Principal,
                "wasm_module": blob,
                "arg": blob,
            }
        )
        value = {
            "mode": {InstallMode(mode).value: None},
            "canister_id": canister_id,
            "wasm_module": list(wasm_module),
            "arg": list(arg),
        }
        self._call(
            "install_code",
            [{"type": arg_type, "value": value}],
            effective_canister_id=canister_id,
        )

    def start_canister(self, canister_id: str) -> None:
        self._call(
            "start_canister",
            self._canister_id_params(canister_id),
            effective_canister_id=canister_id,
        )

    def stop_canister(self, canister_id: str) -> None:
        self._call(
            "stop_canister",
            self._canister_id_params(canister_id),
            effective_canister_id=canister_id,
        )

    def canister_status(self, canister_id: str) -> dict:
        result = self._call(
            "canister_status",
            self._canister_id_params(canister_id),
            effective_canister_id=canister_id,
        )
        status = _rename_fields(_first_value(result))
        return status if isinstance(status, dict) else {"raw": status}

    def delete_canister(self, canister_id: str) -> None:
        self._call(
            "delete_canister",
            self._canister_id_params(canister_id),
            effective_canister_id=canister_id,
        )


__all__ = ["ManagementCanisterProtocol", "ICManagementCanister"]
