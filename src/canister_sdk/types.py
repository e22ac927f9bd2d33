"""SDK public types."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

DEFAULT_CYCLES = 1_000_000_000_000


class InstallMode(str, Enum):
    INSTALL = "install"
    REINSTALL = "reinstall"
    UPGRADE = "upgrade"


@dataclass(frozen=True)
class CanisterSettings:
    # An empty controller list makes the caller the controller.
    controllers: tuple[str, ...] = ()
    compute_allocation: int | None = None
    memory_allocation: int | None = None
    freezing_threshold: int | None = None


__all__ = ["DEFAULT_CYCLES", "InstallMode", "CanisterSettings"]
