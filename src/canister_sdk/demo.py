"""Narrated canister creation demos."""

from __future__ import annotations

import logging
import sys
from typing import Callable

from canister_sdk.hints import classify_error_text, render_hints
from canister_sdk.manager import ALT_LOCAL_HOST, LOCAL_HOST, CanisterManager

EXIT_SUCCESS = 0
EXIT_FAILURE = 1

ManagerFactory = Callable[..., CanisterManager]


def _print_lines(lines: list[str], stream) -> None:
    for line in lines:
        print(line, file=stream)


def run_create_demo(
    *,
    manager_factory: ManagerFactory | None = None,
    local_host: str = LOCAL_HOST,
    stdout=sys.stdout,
    stderr=sys.stderr,
) -> int:
    print("IC canister demo starting...", file=stdout)
    print("", file=stdout)
    try:
        manager = (manager_factory or CanisterManager)(True, local_host=local_host)
        print("1. Testing canister creation...", file=stdout)
        canister_id = manager.create_canister()
    except Exception as exc:
        print("", file=stderr)
        print(f"demo failed: {exc}", file=stderr)
        _print_lines(render_hints(classify_error_text(str(exc)), host=local_host), stdout)
        return EXIT_FAILURE

    _print_lines(
        [
            "",
            "Demo completed successfully!",
            f"canister_id: {canister_id}",
            "",
            "Next steps:",
            "   1. Save this canister ID",
            "   2. Place your .wasm file in the wasm/ directory",
            f"   3. Run: canister install {canister_id} ./wasm/your-file.wasm",
        ],
        stdout,
    )
    return EXIT_SUCCESS


def run_provisional_demo(
    *,
    manager_factory: ManagerFactory | None = None,
    local_host: str = ALT_LOCAL_HOST,
    cycles: int | None = None,
    stdout=sys.stdout,
    stderr=sys.stderr,
) -> int:
    _print_lines(
        [
            "Creating canister with ic-py",
            "============================",
            f"Host: {local_host}",
            "Method: provisional_create_canister_with_cycles",
            "",
        ],
        stdout,
    )
    try:
        manager = (manager_factory or CanisterManager)(True, local_host=local_host)
        print("CanisterManager initialized", file=stdout)
        print("Calling provisional_create_canister_with_cycles...", file=stdout)
        canister_id = manager.provisional_create_canister_with_cycles(cycles)
    except Exception as exc:
        _print_lines(["", "Canister creation failed:", f"error: {exc}"], stderr)
        _print_lines(render_hints(classify_error_text(str(exc)), host=local_host), stderr)
        _print_lines(["", "FINAL RESULT: FAILED", "Check DFX configuration and try again"], stderr)
        return EXIT_FAILURE

    _print_lines(
        [
            "",
            "SUCCESS! Canister created successfully!",
            f"canister_id: {canister_id}",
            "",
            f"Verify with: dfx canister status {canister_id} --network local",
            "",
            "FINAL RESULT: SUCCESS",
        ],
        stdout,
    )
    return EXIT_SUCCESS


def main() -> None:
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")
    raise SystemExit(run_create_demo())


if __name__ == "__main__":
    main()
