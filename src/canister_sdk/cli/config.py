"""Configuration helpers for the canister CLI."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from canister_sdk.manager import LOCAL_HOST, MAINNET_HOST

DEFAULT_CONFIG_PATH = Path.home() / ".canister_sdk" / "config.toml"
NETWORK_ENV_VAR = "CANISTER_SDK_NETWORK"
HOST_ENV_VAR = "CANISTER_SDK_HOST"


@dataclass(frozen=True)
class CLIConfig:
    use_local: bool = True
    local_host: str = LOCAL_HOST
    mainnet_host: str = MAINNET_HOST
    identity_pem: str | None = None


class ConfigError(ValueError):
    """Raised when CLI config is invalid."""


def _load_toml(path: Path) -> dict[str, Any]:
    raw = path.read_text(encoding="utf-8")

    try:  # Python 3.11+
        import tomllib  # type: ignore[attr-defined]
        try:
            return tomllib.loads(raw)
        except tomllib.TOMLDecodeError as exc:
            raise ConfigError(f"invalid TOML in {path}: {exc}") from exc
    except ModuleNotFoundError:
        try:
            import tomli
        except ModuleNotFoundError as exc:
            raise ConfigError("toml parser unavailable; install tomli for Python < 3.11") from exc
        try:
            return tomli.loads(raw)
        except tomli.TOMLDecodeError as exc:
            raise ConfigError(f"invalid TOML in {path}: {exc}") from exc


def _to_bool(value: Any, field_name: str) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in {"true", "1", "yes", "on"}:
            return True
        if lowered in {"false", "0", "no", "off"}:
            return False
    raise ConfigError(f"{field_name} must be a boolean")


def parse_network(value: str) -> bool:
    lowered = value.strip().lower()
    if lowered == "local":
        return True
    if lowered in {"ic", "mainnet"}:
        return False
    raise ConfigError("network must be one of: local, ic")


def _non_empty(source: dict[str, Any], key: str, default: str) -> str:
    value = str(source.get(key, default)).strip()
    if not value:
        raise ConfigError(f"{key} must not be empty")
    return value


def load_cli_config(path: str | Path | None = None) -> CLIConfig:
    config_path = Path(path) if path else DEFAULT_CONFIG_PATH
    if config_path.exists():
        parsed = _load_toml(config_path)
    else:
        parsed = {}

    section = parsed.get("cli")
    if isinstance(section, dict):
        source = section
    elif section is None:
        source = parsed
    else:
        raise ConfigError("[cli] must be a table")

    use_local = _to_bool(source.get("use_local", True), "use_local")
    env_network = os.getenv(NETWORK_ENV_VAR)
    if env_network and env_network.strip():
        use_local = parse_network(env_network)

    local_host = _non_empty(source, "local_host", LOCAL_HOST)
    mainnet_host = _non_empty(source, "mainnet_host", MAINNET_HOST)
    env_host = os.getenv(HOST_ENV_VAR)
    if env_host and env_host.strip():
        if use_local:
            local_host = env_host.strip()
        else:
            mainnet_host = env_host.strip()

    identity_pem_raw = source.get("identity_pem")
    if identity_pem_raw is None:
        identity_pem = None
    else:
        identity_pem = str(identity_pem_raw).strip() or None

    return CLIConfig(
        use_local=use_local,
        local_host=local_host,
        mainnet_host=mainnet_host,
        identity_pem=identity_pem,
    )
