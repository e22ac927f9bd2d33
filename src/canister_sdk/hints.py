"""Map free-text error messages to human-readable hint blocks."""

from __future__ import annotations

from enum import Enum


class HintKind(str, Enum):
    CYCLES = "cycles"
    UNAUTHORIZED = "Unauthorized"
    SUBNET = "subnet"
    CONNECTION = "connection"


_MATCH_ORDER = (HintKind.CYCLES, HintKind.UNAUTHORIZED, HintKind.SUBNET, HintKind.CONNECTION)


def classify_error_text(message: str) -> tuple[HintKind, ...]:
    """Return every hint kind whose keyword occurs in ``message``.

    Matching is a case-sensitive substring test, in a fixed order.
    """
    return tuple(kind for kind in _MATCH_ORDER if kind.value in message)


def _hint_lines(kind: HintKind, *, host: str) -> list[str]:
    if kind is HintKind.CYCLES:
        return [
            "You need cycles to create canisters. Options:",
            "   - Get free cycles from the cycles faucet",
            "   - Convert ICP to cycles",
            "   - Use dfx with local replica for testing",
        ]
    if kind is HintKind.UNAUTHORIZED:
        return [
            "Authentication required. Make sure you have:",
            "   - A valid identity configured",
            "   - Sufficient permissions",
        ]
    if kind is HintKind.SUBNET:
        return [
            "Subnet error - try restarting DFX:",
            "   dfx stop && dfx start --clean",
        ]
    address = host.split("://", 1)[-1]
    port = address.rsplit(":", 1)[-1] if ":" in address else "default"
    return [
        f"Connection error - ensure DFX is running on port {port}:",
        f"   dfx start --host {address}",
    ]


def render_hints(kinds: tuple[HintKind, ...], *, host: str) -> list[str]:
    lines: list[str] = []
    for kind in kinds:
        first, *rest = _hint_lines(kind, host=host)
        lines.extend(["", f"hint: {first}", *rest])
    return lines


__all__ = ["HintKind", "classify_error_text", "render_hints"]
