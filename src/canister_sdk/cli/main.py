"""Command-line interface for canister-sdk."""

from __future__ import annotations

import argparse
import json
import logging
import sys
from importlib.metadata import PackageNotFoundError
from importlib.metadata import version as pkg_version
from pathlib import Path
from typing import Any, Sequence

from canister_sdk.cli.config import CLIConfig, ConfigError, load_cli_config, parse_network
from canister_sdk.demo import run_create_demo, run_provisional_demo
from canister_sdk.errors import AgentUnavailableError, IdentityError
from canister_sdk.hints import classify_error_text, render_hints
from canister_sdk.identity import load_pem_identity
from canister_sdk.manager import ALT_LOCAL_HOST, CanisterManager
from canister_sdk.principal import ANONYMOUS_PRINCIPAL

EXIT_SUCCESS = 0
EXIT_FAILURE = 1


def _sdk_version() -> str:
    try:
        return pkg_version("canister-sdk")
    except PackageNotFoundError:
        return "0.0.0+local"


def _add_code_args(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("canister_id", help="Target canister id")
    parser.add_argument("wasm", help="Path to the compiled .wasm module")
    arg_group = parser.add_mutually_exclusive_group()
    arg_group.add_argument("--arg-file", default=None, help="File holding the raw init argument")
    arg_group.add_argument("--arg-hex", default=None, help="Raw init argument as hex")


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="canister")
    parser.add_argument(
        "--version",
        action="version",
        version=f"canister-sdk {_sdk_version()}",
    )
    parser.add_argument(
        "--config",
        default=None,
        help="Path to CLI config TOML (default: ~/.canister_sdk/config.toml)",
    )
    parser.add_argument(
        "--network",
        choices=("local", "ic"),
        default=None,
        help="Target a local replica or mainnet (default from config: local)",
    )
    parser.add_argument("--host", default=None, help="Replica host URL override")
    parser.add_argument(
        "--identity-pem",
        default=None,
        help="dfx PEM identity used to sign calls (default: anonymous)",
    )
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")

    sub = parser.add_subparsers(dest="command", required=True)

    version = sub.add_parser("version", help="Show CLI version")
    version.add_argument("--json", action="store_true", help="Print version details as JSON")

    whoami = sub.add_parser("whoami", help="Show the principal calls are signed with")
    whoami.add_argument("--json", action="store_true")

    demo = sub.add_parser("demo", help="Run the narrated canister creation demo")
    demo_sub = demo.add_subparsers(dest="demo_command")
    demo_sub.add_parser("create", help="Create a canister on the local replica (default)")
    demo_provisional = demo_sub.add_parser(
        "provisional", help="Create a canister with provisional cycles on port 4943"
    )
    demo_provisional.add_argument("--cycles", type=int, default=None)

    create = sub.add_parser("create", help="Create a new canister")
    create.add_argument(
        "--controller",
        action="append",
        default=None,
        help="Controller principal (repeatable; default: the caller)",
    )

    create_cycles = sub.add_parser(
        "create-with-cycles", help="Create a canister with provisional cycles (local only)"
    )
    create_cycles.add_argument(
        "--cycles",
        type=int,
        default=None,
        help="Cycles to attach (default: 1_000_000_000_000)",
    )

    install = sub.add_parser("install", help="Install code into an empty canister")
    _add_code_args(install)

    upgrade = sub.add_parser("upgrade", help="Upgrade code on an existing canister")
    _add_code_args(upgrade)

    for name, help_text in (
        ("start", "Start a canister"),
        ("stop", "Stop a canister"),
        ("delete", "Delete a canister"),
    ):
        command = sub.add_parser(name, help=help_text)
        command.add_argument("canister_id", help="Target canister id")

    status = sub.add_parser("status", help="Show canister status")
    status.add_argument("canister_id", help="Target canister id")
    status.add_argument("--json", action="store_true")

    return parser


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )


def _print_error(stderr, prefix: str, message: str, *, code: int) -> int:
    print(f"{prefix}: {message}", file=stderr)
    return code


def _print_failure(stderr, exc: BaseException, *, host: str) -> int:
    print(f"error: {exc}", file=stderr)
    for line in render_hints(classify_error_text(str(exc)), host=host):
        print(line, file=stderr)
    return EXIT_FAILURE


def _resolve_use_local(args, config: CLIConfig) -> bool:
    if args.network is None:
        return config.use_local
    return parse_network(args.network)


def _resolve_host(args, config: CLIConfig, use_local: bool) -> str:
    if args.host:
        return args.host
    return config.local_host if use_local else config.mainnet_host


def _build_manager(args, config: CLIConfig) -> CanisterManager:
    use_local = _resolve_use_local(args, config)
    host = _resolve_host(args, config, use_local)
    identity_path = args.identity_pem or config.identity_pem
    identity = None
    if identity_path:
        identity = load_pem_identity(identity_path).to_agent_identity()
    if use_local:
        return CanisterManager(True, local_host=host, identity=identity)
    return CanisterManager(False, mainnet_host=host, identity=identity)


def _read_arg_payload(args) -> bytes | None:
    if args.arg_file:
        return Path(args.arg_file).read_bytes()
    if args.arg_hex:
        return bytes.fromhex(args.arg_hex)
    return None


def _jsonable(value: Any) -> Any:
    if isinstance(value, dict):
        return {str(k): _jsonable(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_jsonable(item) for item in value]
    if isinstance(value, (bytes, bytearray)):
        return bytes(value).hex()
    if value is None or isinstance(value, (bool, int, float, str)):
        return value
    return str(value)


def _run_version(*, as_json: bool, stdout) -> int:
    payload = {"cli": "canister", "sdk_version": _sdk_version()}
    if as_json:
        print(json.dumps(payload, sort_keys=True), file=stdout)
        return EXIT_SUCCESS
    print(f"canister {payload['sdk_version']}", file=stdout)
    return EXIT_SUCCESS


def _run_whoami(*, args, config: CLIConfig, stdout, stderr) -> int:
    identity_path = args.identity_pem or config.identity_pem
    if identity_path:
        try:
            identity = load_pem_identity(identity_path)
        except IdentityError as exc:
            return _print_error(stderr, "identity error", str(exc), code=EXIT_FAILURE)
        payload = {"principal": identity.principal, "key_type": identity.key_type}
    else:
        payload = {"principal": ANONYMOUS_PRINCIPAL, "key_type": "anonymous"}

    if args.json:
        print(json.dumps(payload, sort_keys=True), file=stdout)
    else:
        print(f"principal: {payload['principal']}", file=stdout)
        print(f"key_type: {payload['key_type']}", file=stdout)
    return EXIT_SUCCESS


def _run_demo(*, args, config: CLIConfig, stdout, stderr) -> int:
    if args.demo_command == "provisional":
        return run_provisional_demo(
            local_host=args.host or ALT_LOCAL_HOST,
            cycles=args.cycles,
            stdout=stdout,
            stderr=stderr,
        )
    return run_create_demo(
        local_host=args.host or config.local_host,
        stdout=stdout,
        stderr=stderr,
    )


def _run_operation(*, args, config: CLIConfig, stdout, stderr) -> int:
    try:
        manager = _build_manager(args, config)
    except ConfigError as exc:
        return _print_error(stderr, "config error", str(exc), code=EXIT_FAILURE)
    except IdentityError as exc:
        return _print_error(stderr, "identity error", str(exc), code=EXIT_FAILURE)
    except AgentUnavailableError as exc:
        return _print_error(stderr, "agent error", str(exc), code=EXIT_FAILURE)

    try:
        if args.command == "create":
            canister_id = manager.create_canister(args.controller)
            print(f"canister_id: {canister_id}", file=stdout)
        elif args.command == "create-with-cycles":
            canister_id = manager.provisional_create_canister_with_cycles(args.cycles)
            print(f"canister_id: {canister_id}", file=stdout)
        elif args.command in {"install", "upgrade"}:
            wasm_module = Path(args.wasm).read_bytes()
            arg = _read_arg_payload(args)
            if args.command == "install":
                manager.install_code(args.canister_id, wasm_module, arg)
                print(f"installed: {args.canister_id}", file=stdout)
            else:
                manager.upgrade_code(args.canister_id, wasm_module, arg)
                print(f"upgraded: {args.canister_id}", file=stdout)
        elif args.command == "start":
            manager.start_canister(args.canister_id)
            print(f"started: {args.canister_id}", file=stdout)
        elif args.command == "stop":
            manager.stop_canister(args.canister_id)
            print(f"stopped: {args.canister_id}", file=stdout)
        elif args.command == "delete":
            manager.delete_canister(args.canister_id)
            print(f"deleted: {args.canister_id}", file=stdout)
        elif args.command == "status":
            status = _jsonable(manager.get_canister_status(args.canister_id))
            if args.json:
                print(json.dumps(status, sort_keys=True), file=stdout)
            else:
                print(f"canister_id: {args.canister_id}", file=stdout)
                for key in sorted(status):
                    print(f"{key}: {status[key]}", file=stdout)
        else:
            print("unknown command", file=stderr)
            return EXIT_FAILURE
    except Exception as exc:
        return _print_failure(stderr, exc, host=manager.host)
    return EXIT_SUCCESS


def main(argv: Sequence[str] | None = None, *, stdout=sys.stdout, stderr=sys.stderr) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)
    _configure_logging(args.verbose)

    try:
        config = load_cli_config(args.config)
    except ConfigError as exc:
        return _print_error(stderr, "config error", str(exc), code=EXIT_FAILURE)

    if args.command == "version":
        return _run_version(as_json=args.json, stdout=stdout)

    if args.command == "whoami":
        return _run_whoami(args=args, config=config, stdout=stdout, stderr=stderr)

    if args.command == "demo":
        return _run_demo(args=args, config=config, stdout=stdout, stderr=stderr)

    return _run_operation(args=args, config=config, stdout=stdout, stderr=stderr)


if __name__ == "__main__":
    raise SystemExit(main())
